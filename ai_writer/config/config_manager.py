"""
設定管理システム - .env / 環境変数から読み込み
"""
import os
import logging
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..services.security_utils import SecretSanitizer
from ..utils.constants import Constants, DefaultValues

logger = logging.getLogger(__name__)


class ConfigManager:
    """環境変数ベースの設定管理"""

    def __init__(self, env_file: Optional[str] = ".env"):
        """
        設定管理の初期化

        Args:
            env_file: .envファイルパス（Noneの場合は読み込まない）
        """
        self.env_file = env_file
        self._config_data: Dict[str, Dict[str, Any]] = {}

        if env_file:
            # 既存の環境変数は上書きしない
            if load_dotenv(env_file, override=False):
                logger.info(f".env file loaded: {env_file}")
            else:
                logger.debug(f".env file not found or empty: {env_file}")

        self._setup_configuration()

    def _setup_configuration(self):
        """環境変数から設定を構築"""
        self._config_data['wordpress'] = {
            'url': os.getenv('WORDPRESS_URL', 'http://localhost'),
            'username': os.getenv('WORDPRESS_USERNAME', ''),
            'password': os.getenv('WORDPRESS_PASSWORD', ''),
        }

        self._config_data['openai'] = {
            'api_base': os.getenv('OPENAI_API_BASE', Constants.OPENAI_API_BASE),
            'api_key': os.getenv('OPENAI_API_KEY', ''),
            'model': os.getenv('OPENAI_MODEL', ''),
        }

        self._config_data['storage'] = {
            'settings_file': os.getenv('AI_WRITER_SETTINGS_FILE', Constants.SETTINGS_FILE),
            'database_file': os.getenv('AI_WRITER_DATABASE_FILE', Constants.DATABASE_FILE),
            'encryption_key': os.getenv('AI_WRITER_ENCRYPTION_KEY', ''),
        }

        self._config_data['system'] = {
            'log_level': os.getenv('LOG_LEVEL', DefaultValues.LOG_LEVEL),
            'log_dir': os.getenv('LOG_DIR', DefaultValues.LOG_DIR),
        }

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """設定値を取得"""
        return self._config_data.get(section, {}).get(key, default)

    def get_config_summary(self) -> Dict[str, Any]:
        """設定サマリーを取得（機密情報をマスク）"""
        return SecretSanitizer.sanitize_config_for_logging(self._config_data)

    @property
    def wordpress(self) -> 'WordPressConfig':
        """WordPress設定を取得"""
        return WordPressConfig(
            url=self.get('wordpress', 'url'),
            username=self.get('wordpress', 'username'),
            password=self.get('wordpress', 'password')
        )

    @property
    def openai(self) -> 'OpenAIConfig':
        """OpenAI設定を取得"""
        return OpenAIConfig(
            api_base=self.get('openai', 'api_base'),
            api_key=self.get('openai', 'api_key'),
            model=self.get('openai', 'model')
        )

    @property
    def storage(self) -> 'StorageConfig':
        """保存先設定を取得"""
        return StorageConfig(
            settings_file=self.get('storage', 'settings_file'),
            database_file=self.get('storage', 'database_file'),
            encryption_key=self.get('storage', 'encryption_key')
        )

    @property
    def system(self) -> 'SystemConfig':
        """システム設定を取得"""
        return SystemConfig(
            log_level=self.get('system', 'log_level'),
            log_dir=self.get('system', 'log_dir')
        )


class WordPressConfig:
    """WordPress設定クラス"""
    def __init__(self, url: str, username: str, password: str):
        self.url = url
        self.username = username
        self.password = password


class OpenAIConfig:
    """OpenAI設定クラス"""
    def __init__(self, api_base: str, api_key: str, model: str):
        self.api_base = api_base
        self.api_key = api_key
        self.model = model


class StorageConfig:
    """保存先設定クラス"""
    def __init__(self, settings_file: str, database_file: str, encryption_key: str):
        self.settings_file = settings_file
        self.database_file = database_file
        self.encryption_key = encryption_key


class SystemConfig:
    """システム設定クラス"""
    def __init__(self, log_level: str, log_dir: str):
        self.log_level = log_level
        self.log_dir = log_dir
