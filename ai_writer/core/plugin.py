"""
アプリケーションコンテキスト - 各コンポーネントの組み立てとアクションの振り分け
"""
import logging
from typing import Any, Callable, Dict, Optional

from .connection_tester import ConnectionTester
from .content_generator import ContentGenerator
from .content_saver import ContentSaver
from .post_creator import PostCreator
from ..api.openai_api import OpenAIClient
from ..api.wordpress_api import WordPressAPI
from ..config.config_manager import ConfigManager
from ..config.settings_store import SettingsStore
from ..database.content_store import ContentStore
from ..security.input_validator import InputValidator
from ..services.error_handlers import UnifiedErrorHandler
from ..utils.constants import Constants, ErrorMessages

logger = logging.getLogger(__name__)


class AIWriterPlugin:
    """AI Writer 本体（起動時に1回だけ構築する）"""

    VERSION = '1.0.0'

    def __init__(
        self,
        config: ConfigManager,
        settings_store: Optional[SettingsStore] = None,
        wordpress_api: Optional[WordPressAPI] = None,
        openai_client: Optional[OpenAIClient] = None,
        content_store: Optional[ContentStore] = None
    ):
        """
        コンポーネントの初期化

        Args:
            config: 環境設定
            settings_store: 設定ストア（未指定時は config から作成）
            wordpress_api: WordPressクライアント（投稿作成・権限確認）
            openai_client: Chat Completions クライアント
            content_store: 生成コンテンツの保存先
        """
        self.config = config
        storage = config.storage
        openai_config = config.openai

        self.settings_store = settings_store or SettingsStore(
            settings_file=storage.settings_file,
            encryption_key=storage.encryption_key or None,
            env_defaults={'api_key': openai_config.api_key, 'model': openai_config.model},
        )

        wp = config.wordpress
        self.wordpress_api = wordpress_api or WordPressAPI(wp.url, wp.username, wp.password)
        self.openai_client = openai_client or OpenAIClient(api_base=openai_config.api_base)
        self.content_store = content_store or ContentStore(storage.database_file)
        self.validator = InputValidator()

        self.content_generator = ContentGenerator(
            settings_store=self.settings_store,
            permission_checker=self.wordpress_api,
            openai_client=self.openai_client,
            validator=self.validator,
            content_store=self.content_store,
        )
        self.content_saver = ContentSaver(self.wordpress_api, self.content_store, validator=self.validator)
        self.post_creator = PostCreator(self.wordpress_api, validator=self.validator)
        self.connection_tester = ConnectionTester(
            self.settings_store, self.wordpress_api, self.openai_client, validator=self.validator
        )

        self.actions: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            Constants.ACTION_GENERATE_CONTENT: self.content_generator.handle,
            Constants.ACTION_SAVE_CONTENT: self.content_saver.handle,
            Constants.ACTION_CREATE_POST: self.post_creator.handle,
            Constants.ACTION_TEST_CONNECTION: self.connection_tester.handle,
        }

        logger.info(f"AI Writer {self.VERSION} initialized")

    def handle_action(self, action: str, form: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        アクション名で処理を振り分け

        Args:
            action: アクション名（例: ai_writer_generate_content）
            form: フォームデータ

        Returns:
            {'success': bool, 'data': {...}}
        """
        handler = self.actions.get(action)
        if handler is None:
            logger.warning(f"Unknown action requested: {action}")
            return UnifiedErrorHandler.error_response(ErrorMessages.UNKNOWN_ACTION.format(action))

        return handler(form or {})

    def activate(self):
        """コンテンツテーブルを作成し、未設定のデフォルト値を書き込む"""
        self.content_store.initialize()
        self.settings_store.add_defaults()
        logger.info("AI Writer activated")

    def close(self):
        """HTTPセッションをクローズ（片方が失敗してももう片方は閉じる）"""
        try:
            self.wordpress_api.close()
        finally:
            self.openai_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
