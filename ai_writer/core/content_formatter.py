"""
生成HTMLの整形
"""
import re


BLOCK_TAGS = r'h[1-6]|p|ul|ol|blockquote|div|table|pre|figure|hr'

H1_PATTERN = re.compile(r'<h1[^>]*>(.*?)</h1>', re.IGNORECASE | re.DOTALL)
PARAGRAPH_OPEN_PATTERN = re.compile(r'<p\b', re.IGNORECASE)
BLOCK_START_PATTERN = re.compile(rf'^</?(?:{BLOCK_TAGS}|li)\b', re.IGNORECASE)
OPEN_TAG_PATTERN = re.compile(rf'(<(?:{BLOCK_TAGS})\b)', re.IGNORECASE)
CLOSE_TAG_PATTERN = re.compile(rf'(</(?:{BLOCK_TAGS})>)', re.IGNORECASE)
BLANK_LINES_PATTERN = re.compile(r'\n\s*\n')


class ContentFormatter:
    """見出しレベルの正規化・段落の補完・空行の整理を行う"""

    def format(self, content: str) -> str:
        """
        生成コンテンツを投稿向けのHTMLに整形

        ブロック要素を空行で区切ってから段落を補うため、二度適用しても結果は変わらない。

        Args:
            content: モデルが返したHTML（またはテキスト）

        Returns:
            整形済みHTML
        """
        # タイトルは別管理のため本文にH1は残さない
        content = H1_PATTERN.sub(r'<h2>\1</h2>', content)
        content = self.add_readable_spacing(content)
        return self.ensure_proper_formatting(content)

    def ensure_proper_formatting(self, content: str) -> str:
        """<p>が一つもなければ、ブロック要素で始まらない空行区切りの断片を段落にする"""
        if PARAGRAPH_OPEN_PATTERN.search(content):
            return content.strip()

        segments = []
        for segment in BLANK_LINES_PATTERN.split(content):
            segment = segment.strip()
            if not segment:
                continue
            if BLOCK_START_PATTERN.match(segment):
                segments.append(segment)
            else:
                segments.append(f'<p>{segment}</p>')

        return '\n\n'.join(segments)

    def add_readable_spacing(self, content: str) -> str:
        """ブロック要素の前後に空行を入れ、連続する空行を1つに詰める"""
        content = OPEN_TAG_PATTERN.sub(r'\n\n\1', content)
        content = CLOSE_TAG_PATTERN.sub(r'\1\n\n', content)
        content = BLANK_LINES_PATTERN.sub('\n\n', content)
        return content.strip()
