"""
カスタム例外クラス定義
"""
from typing import Optional


class AIWriterError(Exception):
    """AI Writerシステムの基底例外クラス"""
    pass


class ValidationError(AIWriterError):
    """入力値検証のエラー"""
    pass


class ConfigurationError(AIWriterError):
    """設定関連のエラー"""
    pass


class InsufficientPermissionsError(AIWriterError):
    """ユーザー権限不足のエラー"""
    pass


class APIError(AIWriterError):
    """API関連のエラー"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(APIError):
    """通信レベルのエラー（タイムアウト・接続失敗など）"""
    pass


class AuthenticationError(APIError):
    """APIキーが無効 (HTTP 401)"""
    pass


class APIPermissionError(APIError):
    """APIキーの権限不足 (HTTP 403)"""
    pass


class RateLimitError(APIError):
    """レート制限超過 (HTTP 429)"""
    pass


class ServiceUnavailableError(APIError):
    """サービス一時停止 (HTTP 500/502/503)"""
    pass


class GenericAPIError(APIError):
    """その他の200以外の応答"""
    pass


class ResponseParseError(AIWriterError):
    """モデル応答の解析エラー"""
    pass


class EmptyResponseError(ResponseParseError):
    """モデル応答に本文が含まれていない"""
    pass


class WordPressAPIError(APIError):
    """WordPress API関連のエラー"""
    pass


class PostCreationError(WordPressAPIError):
    """投稿作成の失敗"""
    pass


class ContentStoreError(AIWriterError):
    """生成コンテンツ保存のエラー"""
    pass


class GenerationError(AIWriterError):
    """コンテンツ生成の失敗（API・応答エラーをまとめたもの）"""
    pass
