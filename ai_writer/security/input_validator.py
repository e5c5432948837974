"""
入力検証・サニタイゼーションシステム - セキュリティ強化
"""
import re
import logging
from typing import Any, Dict, Optional

import bleach

from ..core.models import GenerationRequest
from ..services.exceptions import ValidationError
from ..utils.constants import Constants, DefaultValues, ErrorMessages

logger = logging.getLogger(__name__)


class InputValidator:
    """入力検証・サニタイゼーションシステム"""

    # 投稿本文で許可されるHTMLタグ（wp_kses_post 相当）
    ALLOWED_POST_TAGS = {
        'p', 'br', 'hr', 'strong', 'b', 'em', 'i', 'u', 'code', 'pre', 'span', 'div',
        'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
        'ul', 'ol', 'li', 'blockquote', 'a', 'img',
        'table', 'thead', 'tbody', 'tr', 'th', 'td',
    }

    # 投稿本文で許可されるHTML属性
    ALLOWED_POST_ATTRIBUTES = {
        'a': ['href', 'title', 'target', 'rel'],
        'img': ['src', 'alt', 'title', 'width', 'height'],
        'div': ['class', 'id'],
        'span': ['class', 'id'],
        'h1': ['class'], 'h2': ['class'], 'h3': ['class'],
        'h4': ['class'], 'h5': ['class'], 'h6': ['class'],
        'blockquote': ['class', 'cite'],
    }

    # 段落ブロック内で許可されるインラインタグ
    INLINE_TAGS = {'strong', 'b', 'em', 'i', 'a', 'br'}
    INLINE_ATTRIBUTES = {'a': ['href', 'title']}

    # 危険なパターン
    DANGEROUS_PATTERNS = [
        r'<script[^>]*>.*?</script>',  # スクリプトタグ
        r'<style[^>]*>.*?</style>',    # スタイルタグ
        r'<iframe[^>]*>.*?</iframe>',  # iframe
        r'<object[^>]*>.*?</object>',  # object
        r'<embed[^>]*>',               # embed
        r'<form[^>]*>.*?</form>',      # form
    ]

    CONTROL_CHARS = r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]'

    def sanitize_text_field(self, text: Any) -> str:
        """
        テキストフィールドのサニタイゼーション（sanitize_text_field 相当）

        Args:
            text: 入力値

        Returns:
            タグ・制御文字・改行を除去し、空白を整えた文字列
        """
        if text is None:
            return ""

        text_str = str(text)

        # HTMLタグの除去
        text_str = re.sub(r'<[^>]*>', '', text_str)

        # 制御文字の除去
        text_str = re.sub(self.CONTROL_CHARS, '', text_str)

        # 改行・タブ・連続空白を単一空白に
        return ' '.join(text_str.split())

    def sanitize_post_content(self, content: Any) -> str:
        """
        投稿本文のサニタイゼーション（wp_kses_post 相当）

        Args:
            content: HTMLコンテンツ

        Returns:
            許可リストでクリーニングされたHTML
        """
        if not content or not isinstance(content, str):
            return ""

        sanitized = self._remove_dangerous_patterns(content)
        sanitized = bleach.clean(
            sanitized,
            tags=self.ALLOWED_POST_TAGS,
            attributes=self.ALLOWED_POST_ATTRIBUTES,
            strip=True
        )

        logger.debug(f"Sanitized post content ({len(content)} -> {len(sanitized)} chars)")
        return sanitized.strip()

    def sanitize_inline_html(self, content: str) -> str:
        """段落内で使用可能なインラインタグのみを残す"""
        if not content:
            return ""

        return bleach.clean(
            self._remove_dangerous_patterns(content),
            tags=self.INLINE_TAGS,
            attributes=self.INLINE_ATTRIBUTES,
            strip=True
        )

    def validate_generation_request(
        self,
        form: Dict[str, Any],
        default_tone: Optional[str] = None
    ) -> GenerationRequest:
        """
        コンテンツ生成フォームの検証

        未知のコンテンツタイプ・長さ・トーンは拒否せず、そのままプロンプト生成に渡す。

        Args:
            form: フォームデータ (topic, content_type, length, tone)
            default_tone: トーン未指定時に使う設定値

        Returns:
            検証済みの GenerationRequest

        Raises:
            ValidationError: トピックが空、または短すぎる場合
        """
        topic = self.sanitize_text_field(form.get('topic', ''))

        if not topic:
            raise ValidationError(ErrorMessages.TOPIC_REQUIRED)

        if len(topic) < Constants.MIN_TOPIC_LENGTH:
            raise ValidationError(ErrorMessages.TOPIC_TOO_SHORT)

        content_type = self.sanitize_text_field(form.get('content_type')) or DefaultValues.CONTENT_TYPE
        length = self.sanitize_text_field(form.get('length')) or DefaultValues.LENGTH
        tone = self.sanitize_text_field(form.get('tone')) or default_tone or DefaultValues.TONE

        if content_type not in DefaultValues.CONTENT_TYPES:
            logger.info(f"Unknown content type '{content_type}', default guide will be used")

        return GenerationRequest(
            topic=topic,
            content_type=content_type,
            length=length,
            tone=tone,
        )

    def validate_post_data(self, form: Dict[str, Any]) -> Dict[str, str]:
        """
        投稿作成フォームの検証

        Args:
            form: フォームデータ (title, content, status)

        Returns:
            検証済みの投稿データ

        Raises:
            ValidationError: タイトルまたは本文が空の場合
        """
        title = self.sanitize_text_field(form.get('title', ''))
        content = self.sanitize_post_content(form.get('content', ''))
        status = self.sanitize_text_field(form.get('status')) or DefaultValues.POST_STATUS

        if not title:
            raise ValidationError(ErrorMessages.POST_TITLE_REQUIRED)

        if not content:
            raise ValidationError(ErrorMessages.POST_CONTENT_REQUIRED)

        if status not in Constants.ALLOWED_POST_STATUSES:
            logger.warning(f"Unsupported post status '{status}', falling back to draft")
            status = DefaultValues.POST_STATUS

        return {
            'title': title,
            'content': content,
            'status': status,
        }

    def _remove_dangerous_patterns(self, content: str) -> str:
        """危険なパターンを除去"""
        for pattern in self.DANGEROUS_PATTERNS:
            content = re.sub(pattern, '', content, flags=re.IGNORECASE | re.DOTALL)
        return content
