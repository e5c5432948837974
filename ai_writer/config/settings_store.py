"""
プラグイン設定ストア (ai_writer_settings) - APIキーは暗号化して保存
"""
import json
import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from cryptography.fernet import Fernet, InvalidToken

from ..core.models import ApiSettings
from ..security.input_validator import InputValidator
from ..services.exceptions import ConfigurationError
from ..services.security_utils import SecretSanitizer
from ..utils.constants import Constants, DefaultValues, ErrorMessages
from ..utils.utils import clamp_float, clamp_int

logger = logging.getLogger(__name__)


FERNET_TOKEN_PREFIX = 'gAAAAAB'


class SettingsStore:
    """キーと値の設定ストア（デフォルト値付き）"""

    # 暗号化して保存するキー
    ENCRYPTED_KEYS = ('api_key',)

    def __init__(
        self,
        settings_file: str = Constants.SETTINGS_FILE,
        encryption_key: Optional[str] = None,
        env_defaults: Optional[Dict[str, Any]] = None,
        validator: Optional[InputValidator] = None
    ):
        """
        設定ストアの初期化

        Args:
            settings_file: 設定JSONファイルのパス
            encryption_key: Fernetキー（未指定時はキーファイルを使用・生成）
            env_defaults: 環境変数由来の既定値（保存値が空の場合に使用）
            validator: 入力サニタイザー
        """
        self.settings_file = Path(settings_file)
        self.env_defaults = {k: v for k, v in (env_defaults or {}).items() if v not in (None, '')}
        self.validator = validator or InputValidator()
        self.fernet = Fernet(self._get_or_create_encryption_key(encryption_key))
        self._settings = self._load()

        logger.info(f"Settings store initialized: {self.settings_file}")

    def _get_or_create_encryption_key(self, encryption_key: Optional[str]) -> bytes:
        """暗号化キーを取得または作成"""
        if encryption_key:
            key = encryption_key.encode()
            try:
                Fernet(key)
                return key
            except ValueError as e:
                logger.warning(f"Invalid encryption key from environment: {e}")

        key_file = self.settings_file.parent / Constants.ENCRYPTION_KEY_FILE
        if key_file.exists():
            return key_file.read_bytes().strip()

        logger.info("Generating a new encryption key")
        key = Fernet.generate_key()
        key_file.parent.mkdir(parents=True, exist_ok=True)
        key_file.write_bytes(key)
        os.chmod(key_file, 0o600)  # 所有者のみ読み書き可能
        return key

    def _load(self) -> Dict[str, Any]:
        """設定ファイルを読み込み"""
        if not self.settings_file.exists():
            return {}

        try:
            with self.settings_file.open('r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read settings file {self.settings_file}: {e}")
            return {}

        return data if isinstance(data, dict) else {}

    def _save(self):
        """設定ファイルに書き込み"""
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        with self.settings_file.open('w', encoding='utf-8') as f:
            json.dump(self._settings, f, ensure_ascii=False, indent=2)
        os.chmod(self.settings_file, 0o600)

    def _decrypt(self, value: Any) -> Any:
        if isinstance(value, str) and value.startswith(FERNET_TOKEN_PREFIX):
            try:
                return self.fernet.decrypt(value.encode()).decode()
            except InvalidToken:
                logger.warning("Stored secret could not be decrypted with the current key")
                return ''
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """
        設定値を取得

        保存値 → 環境変数の既定値 → 組み込みのデフォルト → default の順で解決する。
        """
        value = self._settings.get(key)
        if key in self.ENCRYPTED_KEYS:
            value = self._decrypt(value)

        if value in (None, '') and key in self.env_defaults:
            return self.env_defaults[key]
        if value is not None:
            return value
        return DefaultValues.SETTINGS.get(key, default)

    def set(self, key: str, value: Any):
        """設定値をサニタイズして保存"""
        self._settings[key] = self._prepare_for_storage(key, self.sanitize_value(key, value))
        self._save()
        logger.info(f"Setting updated: {key}")

    def update(self, values: Dict[str, Any]):
        """複数の設定値をまとめて保存"""
        for key, value in values.items():
            self._settings[key] = self._prepare_for_storage(key, self.sanitize_value(key, value))
        self._save()
        logger.info(f"Settings updated: {', '.join(values)}")

    def add_defaults(self):
        """未保存のキーにだけデフォルト値を書き込む（add_option 相当）"""
        missing = {k: v for k, v in DefaultValues.SETTINGS.items() if k not in self._settings}
        if missing:
            self._settings.update(missing)
            self._save()
            logger.info(f"Default settings added: {', '.join(missing)}")

    def all(self) -> Dict[str, Any]:
        """全設定値（復号済み・デフォルト補完済み）"""
        keys = list(DefaultValues.SETTINGS) + [k for k in self._settings if k not in DefaultValues.SETTINGS]
        return {key: self.get(key) for key in keys}

    def get_settings_summary(self) -> Dict[str, Any]:
        """設定サマリーを取得（機密情報をマスク）"""
        return SecretSanitizer.sanitize_config_for_logging(self.all())

    def get_api_settings(self) -> ApiSettings:
        """
        生成APIの設定を取得

        Returns:
            範囲をクランプした ApiSettings

        Raises:
            ConfigurationError: APIキーが未設定の場合
        """
        api_key = self.get('api_key') or ''
        if not api_key:
            raise ConfigurationError(ErrorMessages.API_KEY_NOT_CONFIGURED)

        return ApiSettings(
            api_key=api_key,
            model=self.sanitize_value('model', self.get('model')),
            max_tokens=self.sanitize_value('max_tokens', self.get('max_tokens')),
            temperature=self.sanitize_value('temperature', self.get('temperature')),
        )

    def sanitize_value(self, key: str, value: Any) -> Any:
        """
        設定値のサニタイゼーション

        max_tokens は 100〜4000、temperature は 0.0〜2.0 に収める。
        """
        defaults = DefaultValues.SETTINGS

        if key == 'max_tokens':
            return clamp_int(value, Constants.MIN_MAX_TOKENS, Constants.MAX_MAX_TOKENS, defaults['max_tokens'])
        if key == 'temperature':
            return clamp_float(value, Constants.MIN_TEMPERATURE, Constants.MAX_TEMPERATURE, defaults['temperature'])
        if key == 'auto_save':
            if isinstance(value, str):
                return value.strip().lower() in ('1', 'true', 'yes', 'on')
            return bool(value)
        if key in ('model', 'default_tone'):
            return self.validator.sanitize_text_field(value) or defaults[key]
        if key == 'api_key':
            return self.validator.sanitize_text_field(value)
        return value

    def _prepare_for_storage(self, key: str, value: Any) -> Any:
        if key in self.ENCRYPTED_KEYS and value:
            return self.fernet.encrypt(str(value).encode()).decode()
        return value
