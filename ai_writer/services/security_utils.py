"""
セキュリティ関連のユーティリティ
"""
import re
from typing import Any, Dict


class SecretSanitizer:
    """機密情報の安全な取り扱いのためのユーティリティ"""

    # 機密情報のキーパターン
    SENSITIVE_KEYS = {
        'password', 'secret', 'key', 'token', 'api_key',
        'auth', 'authorization', 'credential'
    }

    # 機密情報の値パターン
    SENSITIVE_PATTERNS = [
        r'sk-[a-zA-Z0-9_-]{8,}',  # OpenAI API key pattern
        r'gAAAAAB[A-Za-z0-9_=-]+',  # Fernet token
    ]

    @classmethod
    def mask_api_key(cls, api_key: str, show_chars: int = 4) -> str:
        """
        APIキーを安全にマスク

        Args:
            api_key: マスクするAPIキー
            show_chars: 末尾に表示する文字数

        Returns:
            マスクされたAPIキー
        """
        if not api_key or len(api_key) <= show_chars:
            return '*' * 8

        return '*' * min(len(api_key) - show_chars, 8) + api_key[-show_chars:]

    @classmethod
    def mask_password(cls, password: str) -> str:
        """パスワードを完全マスク"""
        return '*' * min(8, len(password)) if password else ''

    @classmethod
    def sanitize_config_for_logging(cls, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        設定情報をログ出力用に安全化

        Args:
            config: 設定辞書

        Returns:
            安全化された設定辞書
        """
        sanitized = {}

        for key, value in config.items():
            key_lower = key.lower()

            if isinstance(value, dict):
                sanitized[key] = cls.sanitize_config_for_logging(value)
            # max_tokens などの数値設定はマスクしない
            elif (value is None or isinstance(value, str)) and any(
                sensitive in key_lower for sensitive in cls.SENSITIVE_KEYS
            ):
                if not value:
                    sanitized[key] = '未設定'
                elif 'password' in key_lower or 'secret' in key_lower:
                    sanitized[key] = cls.mask_password(str(value))
                else:
                    sanitized[key] = cls.mask_api_key(str(value))
            elif isinstance(value, str) and cls._is_sensitive_value(value):
                sanitized[key] = cls.mask_api_key(value)
            else:
                sanitized[key] = value

        return sanitized

    @classmethod
    def _is_sensitive_value(cls, value: str) -> bool:
        """値が機密情報パターンに一致するかチェック"""
        return any(re.match(pattern, value) for pattern in cls.SENSITIVE_PATTERNS)
