"""
生成コンテンツ保存アクション (ai_writer_save_content)
"""
import logging
from typing import Any, Dict, Optional

from ..security.input_validator import InputValidator
from ..services.error_handlers import action_handler
from ..services.exceptions import InsufficientPermissionsError, ValidationError
from ..utils.constants import Constants, DefaultValues, ErrorMessages, SuccessMessages

logger = logging.getLogger(__name__)


class ContentSaver:
    """生成コンテンツを ai_writer_content テーブルに保存する"""

    def __init__(self, permission_checker, content_store,
                 validator: Optional[InputValidator] = None):
        self.permission_checker = permission_checker
        self.content_store = content_store
        self.validator = validator or InputValidator()

    @action_handler('save_content', 'Content save')
    def handle(self, form: Dict[str, Any]) -> Dict[str, Any]:
        """
        保存フォームを処理

        content_id があれば既存レコードを上書きし、なければ新規に保存する。

        Args:
            form: title, content, content_id（任意）

        Returns:
            content_id, message

        Raises:
            InsufficientPermissionsError: edit_posts 権限がない場合
            ValidationError: 本文が空、または content_id が不正・存在しない場合
        """
        if not self.permission_checker.current_user_can(Constants.CAPABILITY_EDIT_POSTS):
            raise InsufficientPermissionsError(ErrorMessages.INSUFFICIENT_PERMISSIONS)

        content = self.validator.sanitize_post_content(form.get('content', ''))
        if not content:
            raise ValidationError(ErrorMessages.NO_CONTENT_TO_SAVE)

        title = self.validator.sanitize_text_field(form.get('title', '')) or DefaultValues.PLACEHOLDER_TITLE

        if form.get('content_id') not in (None, ''):
            content_id = self._parse_content_id(form['content_id'])
            if not self.content_store.update_content(content_id, title, content):
                raise ValidationError(ErrorMessages.SAVED_CONTENT_NOT_FOUND.format(content_id))
            logger.info(f"Updated saved content: {title} (ID: {content_id})")
            return {
                'content_id': content_id,
                'message': SuccessMessages.CONTENT_UPDATED,
            }

        content_id = self.content_store.save_content(title, content)

        return {
            'content_id': content_id,
            'message': SuccessMessages.CONTENT_SAVED,
        }

    @staticmethod
    def _parse_content_id(value: Any) -> int:
        try:
            content_id = int(value)
        except (ValueError, TypeError):
            raise ValidationError(ErrorMessages.INVALID_CONTENT_ID)
        if content_id < 1:
            raise ValidationError(ErrorMessages.INVALID_CONTENT_ID)
        return content_id
