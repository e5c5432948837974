"""
Chat Completions 応答の解析

モデルはJSON出力の指示を守らないことがあるため、
{"title", "content"} のJSONとして読めなければ本文全体をHTMLとして扱う。
"""
import json
import logging
import re
from typing import Any, Dict, Optional

from .content_formatter import ContentFormatter
from .models import CompletionResult
from ..security.input_validator import InputValidator
from ..services.exceptions import EmptyResponseError
from ..utils.constants import Constants, DefaultValues, ErrorMessages
from ..utils.utils import safe_get_nested, strip_tags, truncate_title

logger = logging.getLogger(__name__)


JSON_FENCE_PATTERN = re.compile(r'```json\s*(.*?)\s*```', re.DOTALL)
PLAIN_FENCE_PATTERN = re.compile(r'```\s*(.*?)\s*```', re.DOTALL)
HEADING_PATTERN = re.compile(r'<h[1-6][^>]*>(.*?)</h[1-6]>', re.IGNORECASE | re.DOTALL)
SENTENCE_SPLIT_PATTERN = re.compile(r'[.!?]+')


class ResponseParser:
    """応答ボディから {title, content} を取り出す"""

    def __init__(self, formatter: Optional[ContentFormatter] = None,
                 validator: Optional[InputValidator] = None):
        self.formatter = formatter or ContentFormatter()
        self.validator = validator or InputValidator()

    def parse(self, raw_body: str) -> CompletionResult:
        """
        応答ボディを解析して生成結果を返す

        Args:
            raw_body: Chat Completions の応答ボディ

        Returns:
            成功した CompletionResult

        Raises:
            EmptyResponseError: メッセージ本文が存在しない、または空の場合（コードフェンスを外して空になる場合を含む）
        """
        data = self._decode_body(raw_body)
        message = self.extract_message(data)
        usage = data.get('usage') if isinstance(data.get('usage'), dict) else None
        usage_tokens = usage.get('total_tokens') if usage else None

        cleaned = self.strip_code_fences(message)
        if not cleaned:
            logger.warning("Completion response contains only empty code fences")
            raise EmptyResponseError(ErrorMessages.NO_CONTENT_GENERATED)

        structured = self._decode_structured(cleaned)

        if structured is not None:
            content = self.formatter.format(structured['content'])
            title = self._clean_title(structured.get('title')) or self.generate_fallback_title(content)
            logger.info(f"Using structured JSON response - Title: {title}")
        else:
            content = self.formatter.format(cleaned)
            title = self.generate_fallback_title(content)
            logger.info(f"Using fallback title generation - Title: {title}")

        return CompletionResult(
            success=True,
            content=content,
            title=title,
            usage_tokens=usage_tokens,
            usage=usage,
        )

    def _decode_body(self, raw_body: str) -> Dict[str, Any]:
        """応答ボディをJSONとしてデコード"""
        try:
            data = json.loads(raw_body) if raw_body else None
        except ValueError:
            data = None

        if not isinstance(data, dict):
            logger.error("Completion response body is not a JSON object")
            raise EmptyResponseError(ErrorMessages.INVALID_RESPONSE_FORMAT)

        return data

    @staticmethod
    def extract_message(data: Dict[str, Any]) -> str:
        """
        choices[0].message.content を取り出す

        Raises:
            EmptyResponseError: 存在しない、または空白のみの場合
        """
        message = safe_get_nested(data, 'choices', 0, 'message', 'content')

        if not isinstance(message, str):
            logger.error("Completion response has no choices[0].message.content")
            raise EmptyResponseError(ErrorMessages.INVALID_RESPONSE_FORMAT)

        message = message.strip()
        if not message:
            logger.warning("Completion response content is empty")
            raise EmptyResponseError(ErrorMessages.NO_CONTENT_GENERATED)

        logger.debug(f"Raw content from API: {message[:500]}")
        return message

    @staticmethod
    def strip_code_fences(message: str) -> str:
        """```json ... ``` / ``` ... ``` を外して前後の空白を除去"""
        cleaned = JSON_FENCE_PATTERN.sub(r'\1', message)
        cleaned = PLAIN_FENCE_PATTERN.sub(r'\1', cleaned)
        return cleaned.strip()

    @staticmethod
    def _decode_structured(cleaned: str) -> Optional[Dict[str, Any]]:
        """content を持つJSONオブジェクトであれば返し、そうでなければNone"""
        try:
            decoded = json.loads(cleaned)
        except ValueError as e:
            logger.info(f"Model output is not JSON ({e}), treating it as HTML")
            return None

        if not isinstance(decoded, dict):
            return None

        content = decoded.get('content')
        if not isinstance(content, str) or not content.strip():
            logger.info("JSON output has no usable 'content' field, treating it as HTML")
            return None

        return decoded

    def _clean_title(self, title: Any) -> str:
        """JSONのtitleを1行テキストにして最大長に収める"""
        if not isinstance(title, str):
            return ''

        title = self.validator.sanitize_text_field(title)
        return truncate_title(title, Constants.MAX_TITLE_LENGTH, Constants.TRUNCATED_TITLE_LENGTH)

    @staticmethod
    def generate_fallback_title(content: str) -> str:
        """
        整形済みコンテンツからタイトルを推定

        1. 最初の見出し（60文字以内の場合）
        2. 最初の文（60文字を超える場合は57文字 + '...'）
        3. 固定のプレースホルダー

        Args:
            content: 整形済みHTML

        Returns:
            60文字以内のタイトル
        """
        match = HEADING_PATTERN.search(content)
        if match:
            heading = ' '.join(strip_tags(match.group(1)).split())
            if heading and len(heading) <= Constants.MAX_TITLE_LENGTH:
                return heading

        plain_text = strip_tags(content)
        for sentence in SENTENCE_SPLIT_PATTERN.split(plain_text):
            sentence = ' '.join(sentence.split())
            if sentence:
                return truncate_title(sentence, Constants.MAX_TITLE_LENGTH, Constants.TRUNCATED_TITLE_LENGTH)

        return DefaultValues.PLACEHOLDER_TITLE
