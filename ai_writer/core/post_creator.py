"""
投稿作成アクション (ai_writer_create_post)
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .block_converter import BlockConverter
from ..security.input_validator import InputValidator
from ..services.error_handlers import action_handler
from ..services.exceptions import InsufficientPermissionsError
from ..utils.constants import Constants, ErrorMessages, SuccessMessages

logger = logging.getLogger(__name__)


class PostCreator:
    """生成コンテンツからWordPress投稿を作成する"""

    def __init__(self, wordpress_api, validator: Optional[InputValidator] = None,
                 block_converter: Optional[BlockConverter] = None):
        """
        Args:
            wordpress_api: 投稿作成と権限確認を行うクライアント
            validator: 入力検証
            block_converter: HTML → ブロック変換
        """
        self.wordpress_api = wordpress_api
        self.validator = validator or InputValidator()
        self.block_converter = block_converter or BlockConverter(validator=self.validator)

    @action_handler('create_post', 'Post creation')
    def handle(self, form: Dict[str, Any]) -> Dict[str, Any]:
        """
        投稿作成フォームを処理

        Args:
            form: title, content, status

        Returns:
            message, post_id, edit_url

        Raises:
            InsufficientPermissionsError: edit_posts 権限がない場合
            ValidationError: タイトルまたは本文が空の場合
            PostCreationError: WordPressが投稿を拒否した場合
        """
        if not self.wordpress_api.current_user_can(Constants.CAPABILITY_EDIT_POSTS):
            raise InsufficientPermissionsError(ErrorMessages.CANNOT_CREATE_POSTS)

        post_data = self.validator.validate_post_data(form)
        block_content = self.block_converter.convert(post_data['content'])

        post_id = self.wordpress_api.insert_post({
            'title': post_data['title'],
            'content': block_content,
            'status': post_data['status'],
            'author_id': self.wordpress_api.get_current_user_id(),
            'meta': {
                '_ai_writer_generated': True,
                '_ai_writer_generated_at': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            },
        })

        logger.info(f"Post created from generated content: ID {post_id} ({post_data['status']})")

        return {
            'message': SuccessMessages.POST_CREATED.format(post_data['title']),
            'post_id': post_id,
            'edit_url': self.wordpress_api.edit_url_for(post_id),
        }
