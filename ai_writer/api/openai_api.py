"""
OpenAI互換 Chat Completions API クライアント
"""
import json
import logging
from typing import Any, Dict, Optional

import requests

from ..core.models import ApiSettings, Prompt
from ..security.input_validator import InputValidator
from ..services.exceptions import (
    NetworkError, AuthenticationError, APIPermissionError, RateLimitError,
    ServiceUnavailableError, GenericAPIError
)
from ..services.resource_manager import SessionMixin
from ..services.security_utils import SecretSanitizer
from ..utils.constants import Constants, ErrorMessages
from ..utils.utils import safe_get_nested


logger = logging.getLogger(__name__)


def extract_error_message(data: Any) -> str:
    """
    エラー応答からメッセージを抽出

    error.message → message → detail の順に確認し、タグと制御文字を除去する。

    Args:
        data: デコード済みの応答ボディ

    Returns:
        エラーメッセージ
    """
    if isinstance(data, dict):
        validator = InputValidator()
        for keys in (('error', 'message'), ('message',), ('detail',)):
            message = safe_get_nested(data, *keys)
            if isinstance(message, str):
                message = validator.sanitize_text_field(message)
                if message:
                    return message

    return ErrorMessages.UNKNOWN_API_ERROR


def raise_for_api_status(status_code: int, body: str) -> None:
    """
    HTTPステータスコードを例外に変換

    Args:
        status_code: HTTPステータスコード
        body: 応答ボディ

    Raises:
        AuthenticationError: 401
        APIPermissionError: 403
        RateLimitError: 429
        ServiceUnavailableError: 500/502/503
        GenericAPIError: その他の200以外
    """
    if status_code == 200:
        return

    if status_code == 401:
        raise AuthenticationError(ErrorMessages.INVALID_API_KEY, status_code)
    if status_code == 403:
        raise APIPermissionError(ErrorMessages.ACCESS_FORBIDDEN, status_code)
    if status_code == 429:
        raise RateLimitError(ErrorMessages.RATE_LIMIT_EXCEEDED, status_code)
    if status_code in (500, 502, 503):
        raise ServiceUnavailableError(ErrorMessages.SERVICE_UNAVAILABLE, status_code)

    try:
        data = json.loads(body) if body else None
    except ValueError:
        data = None

    raise GenericAPIError(
        ErrorMessages.API_REQUEST_FAILED.format(status_code, extract_error_message(data)),
        status_code
    )


class OpenAIClient(SessionMixin):
    """OpenAI互換APIクライアント（リトライなし・1アクション1リクエスト）"""

    def __init__(self, api_base: Optional[str] = None, session: Optional[requests.Session] = None):
        """
        APIクライアントの初期化

        Args:
            api_base: APIのベースURL（例: https://api.openai.com/v1）
            session: 使用するHTTPセッション（テスト時に注入）
        """
        super().__init__(session=session)
        self.api_base = (api_base or Constants.OPENAI_API_BASE).rstrip('/')

        logger.info(f"OpenAI client initialized for: {self.api_base}")

    @property
    def chat_completions_url(self) -> str:
        return f"{self.api_base}/chat/completions"

    @property
    def models_url(self) -> str:
        return f"{self.api_base}/models"

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            'Authorization': f'Bearer {api_key}',
            'Content-Type': 'application/json',
            'User-Agent': Constants.USER_AGENT,
        }

    def build_request_body(self, prompt: Prompt, settings: ApiSettings) -> Dict[str, Any]:
        """
        Chat Completions のリクエストボディを作成

        Args:
            prompt: システム指示とユーザープロンプト
            settings: API設定

        Returns:
            リクエストボディ
        """
        return {
            'model': settings.model,
            'messages': [
                {'role': 'system', 'content': prompt.system},
                {'role': 'user', 'content': prompt.user},
            ],
            'max_tokens': settings.max_tokens,
            'temperature': settings.temperature,
            'top_p': Constants.TOP_P,
            'frequency_penalty': Constants.FREQUENCY_PENALTY,
            'presence_penalty': Constants.PRESENCE_PENALTY,
        }

    def create_chat_completion(self, prompt: Prompt, settings: ApiSettings) -> str:
        """
        コンテンツ生成リクエストを送信

        Args:
            prompt: システム指示とユーザープロンプト
            settings: API設定

        Returns:
            応答ボディ（未加工の文字列）

        Raises:
            NetworkError: 通信に失敗した場合
            APIError: 200以外のステータスの場合
        """
        logger.info(
            f"Requesting completion: model={settings.model}, max_tokens={settings.max_tokens}, "
            f"key={SecretSanitizer.mask_api_key(settings.api_key)}"
        )

        try:
            response = self.session.post(
                self.chat_completions_url,
                headers=self._headers(settings.api_key),
                json=self.build_request_body(prompt, settings),
                timeout=Constants.COMPLETION_TIMEOUT
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error during completion request: {e}")
            raise NetworkError(ErrorMessages.NETWORK_ERROR.format(e)) from e

        logger.info(f"Completion API response code: {response.status_code}")
        raise_for_api_status(response.status_code, response.text)

        return response.text

    def list_models(self, api_key: str) -> Any:
        """
        利用可能なモデル一覧を取得（接続テスト用）

        Args:
            api_key: 検証するAPIキー

        Returns:
            デコード済みの応答ボディ（JSONでない場合はNone）

        Raises:
            NetworkError: 通信に失敗した場合
            APIError: 200以外のステータスの場合
        """
        logger.info(f"Listing models with key {SecretSanitizer.mask_api_key(api_key)}")

        try:
            response = self.session.get(
                self.models_url,
                headers=self._headers(api_key),
                timeout=Constants.CONNECTION_TEST_TIMEOUT
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error during connection test: {e}")
            raise NetworkError(ErrorMessages.NETWORK_ERROR.format(e)) from e

        logger.info(f"Models API response code: {response.status_code}")
        raise_for_api_status(response.status_code, response.text)

        try:
            return json.loads(response.text)
        except ValueError:
            logger.warning("Models API returned a non-JSON body")
            return None
