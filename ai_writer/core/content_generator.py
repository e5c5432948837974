"""
コンテンツ生成アクション (ai_writer_generate_content)

入力検証 → プロンプト生成 → Chat Completions 呼び出し → 応答解析 の順に処理する。
"""
import logging
from typing import Any, Dict, Optional

from .models import ApiSettings, CompletionResult, GenerationRequest
from .prompt_builder import PromptBuilder
from .response_parser import ResponseParser
from ..api.openai_api import OpenAIClient
from ..security.input_validator import InputValidator
from ..services.error_handlers import action_handler
from ..services.exceptions import (
    APIError, ContentStoreError, GenerationError, InsufficientPermissionsError, ResponseParseError
)
from ..utils.constants import Constants, ErrorMessages, SuccessMessages
from ..utils.utils import count_words

logger = logging.getLogger(__name__)


class ContentGenerator:
    """コンテンツ生成ハンドラー"""

    def __init__(
        self,
        settings_store,
        permission_checker,
        openai_client: OpenAIClient,
        validator: Optional[InputValidator] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        parser: Optional[ResponseParser] = None,
        content_store=None
    ):
        """
        Args:
            settings_store: 設定ストア（get / get_api_settings を持つ）
            permission_checker: 権限確認（current_user_can を持つ）
            openai_client: Chat Completions クライアント
            validator: 入力検証
            prompt_builder: プロンプト生成
            parser: 応答解析
            content_store: auto_save 時の保存先
        """
        self.settings_store = settings_store
        self.permission_checker = permission_checker
        self.openai_client = openai_client
        self.validator = validator or InputValidator()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.parser = parser or ResponseParser(validator=self.validator)
        self.content_store = content_store

    @action_handler('generate_content', 'Content generation')
    def handle(self, form: Dict[str, Any]) -> Dict[str, Any]:
        """
        生成フォームを処理

        Args:
            form: topic, content_type, length, tone

        Returns:
            content, title, message, word_count, usage（auto_save 時は content_id、保存失敗時は save_warning も）

        Raises:
            InsufficientPermissionsError: edit_posts 権限がない場合
            ValidationError: トピックが不正な場合
            ConfigurationError: APIキーが未設定の場合
            GenerationError: API呼び出しまたは応答解析に失敗した場合
        """
        if not self.permission_checker.current_user_can(Constants.CAPABILITY_EDIT_POSTS):
            raise InsufficientPermissionsError(ErrorMessages.INSUFFICIENT_PERMISSIONS)

        # 検証と設定確認はネットワーク呼び出しより前
        request = self.validator.validate_generation_request(
            form, default_tone=self.settings_store.get('default_tone')
        )
        settings = self.settings_store.get_api_settings()

        logger.info(f"Starting content generation: topic='{request.topic}', type={request.content_type}")
        result = self.generate(request, settings)

        if not result.success:
            raise GenerationError(result.error_message)

        data = {
            'content': result.content,
            'title': result.title,
            'message': SuccessMessages.CONTENT_GENERATED,
            'word_count': count_words(result.content),
            'usage': result.usage,
        }

        if self.content_store is not None and self.settings_store.get('auto_save'):
            # 保存に失敗しても生成結果は返す
            try:
                data['content_id'] = self.content_store.save_content(result.title, result.content)
            except ContentStoreError as e:
                logger.warning(f"Auto-save failed, returning unsaved content: {e}")
                data['save_warning'] = str(e)

        return data

    def generate(self, request: GenerationRequest, settings: ApiSettings) -> CompletionResult:
        """
        1回の生成リクエストを実行（リトライなし）

        Args:
            request: 検証済みの生成リクエスト
            settings: クランプ済みのAPI設定

        Returns:
            CompletionResult（失敗時は success=False と error_message）
        """
        prompt = self.prompt_builder.build(request)

        try:
            raw_body = self.openai_client.create_chat_completion(prompt, settings)
            result = self.parser.parse(raw_body)
        except (APIError, ResponseParseError) as e:
            logger.error(f"Content generation failed: {e}")
            return CompletionResult(success=False, error_message=str(e))

        logger.info(f"Content generated: '{result.title}' ({result.usage_tokens or 'n/a'} tokens)")
        return result
