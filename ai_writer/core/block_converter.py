"""
HTMLからWordPressブロックエディタ形式への変換
"""
import html
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .models import BlockElement
from ..security.input_validator import InputValidator
from ..utils.utils import strip_tags

logger = logging.getLogger(__name__)


FALLBACK_ELEMENT_PATTERN = re.compile(
    r'<(h[1-6]|p|ul|ol|blockquote)[^>]*>(.*?)</\1>', re.IGNORECASE | re.DOTALL
)
PARAGRAPH_TAG_PATTERN = re.compile(r'</?p\b[^>]*>', re.IGNORECASE)

HEADING_TAGS = ('h1', 'h2', 'h3', 'h4', 'h5', 'h6')


class BlockConverter:
    """トップレベル要素ごとにブロックコメント付きのマークアップを生成する"""

    def __init__(self, validator: Optional[InputValidator] = None):
        self.validator = validator or InputValidator()
        self._builders = {tag: self.create_heading_block for tag in HEADING_TAGS}
        self._builders.update({
            'p': self.create_paragraph_block,
            'ul': self.create_list_block,
            'ol': self.create_list_block,
            'blockquote': self.create_quote_block,
        })

    def convert(self, content: str) -> str:
        """
        HTML本文をブロックマークアップに変換

        Args:
            content: 整形済みHTML（タイトルは含まない）

        Returns:
            空行区切りで連結したブロックマークアップ
        """
        blocks = []
        for element in self.parse_elements(content.strip()):
            block = self.convert_element(element)
            if block:
                blocks.append(block)

        logger.info(f"Converted content into {len(blocks)} blocks")
        return '\n\n'.join(blocks)

    def parse_elements(self, content: str) -> List[BlockElement]:
        """
        HTMLをトップレベル要素に分解

        パーサーで要素が得られない場合は正規表現で抽出する。

        Args:
            content: HTML本文

        Returns:
            文書順の BlockElement リスト
        """
        elements = []

        if content:
            soup = BeautifulSoup(content, 'lxml')
            container = soup.body or soup
            for node in container.children:
                if isinstance(node, Tag):
                    elements.append(BlockElement(
                        tag=node.name.lower(),
                        raw_html=str(node),
                        plain_text=node.get_text().strip(),
                    ))

        if not elements:
            elements = self._parse_with_regex(content)

        return elements

    @staticmethod
    def _parse_with_regex(content: str) -> List[BlockElement]:
        """正規表現による要素抽出（フォールバック）"""
        return [
            BlockElement(
                tag=match.group(1).lower(),
                raw_html=match.group(0),
                plain_text=strip_tags(match.group(2)).strip(),
            )
            for match in FALLBACK_ELEMENT_PATTERN.finditer(content)
        ]

    def convert_element(self, element: BlockElement) -> str:
        """要素の種類に応じたブロックを生成（未知のタグは段落扱い）"""
        builder = self._builders.get(element.tag, self.create_paragraph_block)
        return builder(element)

    def create_heading_block(self, element: BlockElement) -> str:
        level = int(element.tag[1])
        return (
            f'<!-- wp:heading {{"level":{level}}} -->\n'
            f'<{element.tag} class="wp-block-heading">{html.escape(element.plain_text)}</{element.tag}>\n'
            f'<!-- /wp:heading -->'
        )

    def create_paragraph_block(self, element: BlockElement) -> str:
        """インラインタグのみ残した段落ブロック（空になった場合は空文字）"""
        clean_content = self.validator.sanitize_inline_html(element.raw_html)
        clean_content = PARAGRAPH_TAG_PATTERN.sub('', clean_content).strip()

        if not clean_content:
            return ''

        return (
            '<!-- wp:paragraph -->\n'
            f'<p>{clean_content}</p>\n'
            '<!-- /wp:paragraph -->'
        )

    def create_list_block(self, element: BlockElement) -> str:
        ordered = 'true' if element.tag == 'ol' else 'false'
        return (
            f'<!-- wp:list {{"ordered":{ordered}}} -->\n'
            f'{element.raw_html}\n'
            '<!-- /wp:list -->'
        )

    def create_quote_block(self, element: BlockElement) -> str:
        return (
            '<!-- wp:quote -->\n'
            f'<blockquote><p>{html.escape(element.plain_text)}</p></blockquote>\n'
            '<!-- /wp:quote -->'
        )
