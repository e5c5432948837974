"""
コンテンツ生成用プロンプトの構築
"""
import logging

from .models import GenerationRequest, Prompt
from ..utils.constants import Constants

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You are an expert content writer and SEO specialist. You create high-quality, "
    "engaging, and SEO-optimized content. IMPORTANT: You MUST respond with valid JSON "
    "format exactly as specified in the user prompt. The JSON must contain exactly two fields, "
    "'title' and 'content'. Format content with proper HTML tags including headings (h2, h3), "
    "paragraphs (p), lists (ul, ol, li), and emphasis (strong, em) where appropriate. "
    "Never include h1 tags as that will be the title. Never wrap the JSON in markdown code "
    "fences. Focus on creating valuable, actionable content that provides real insights to readers."
)

LENGTH_GUIDES = {
    'short': 'Approximately 300-500 words (brief but comprehensive)',
    'medium': 'Approximately 800-1200 words (detailed and thorough)',
    'long': 'Approximately 1500-2500 words (comprehensive and in-depth)',
}
DEFAULT_LENGTH_GUIDE = LENGTH_GUIDES['medium']

CONTENT_TYPE_GUIDES = {
    'blog-post': (
        'Structure as a blog post with introduction, main sections with subheadings, '
        'and conclusion. Include practical tips and examples.'
    ),
    'article': (
        'Write as an informative article with clear sections, data-driven insights, '
        'and authoritative tone.'
    ),
    'social-media': (
        'Create engaging social media content that is concise, attention-grabbing, and shareable.'
    ),
    'email': (
        'Format as an email with compelling subject line suggestions, clear call-to-action, '
        'and personal tone.'
    ),
    'product-description': (
        'Focus on benefits, features, and compelling reasons to choose this product. '
        'Include technical details where relevant.'
    ),
}
DEFAULT_CONTENT_TYPE_GUIDE = 'Structure with clear sections, practical insights, and engaging narrative flow.'

USER_PROMPT_TEMPLATE = """Create a {content_type} about '{topic}' with the following specifications:

Content Type: {content_type_label}
Length: {length_guide}
Tone: {tone_label}
Topic: {topic}

{content_type_guide}

{length_guide}

IMPORTANT: Please provide your response in the following JSON format:
{{
  "title": "SEO-optimized title for the content ({max_title} characters or less)",
  "content": "Full HTML content with proper formatting"
}}

CRITICAL: Respond ONLY with the JSON object above. Do not include any markdown formatting, code blocks, or additional text. Start your response with {{ and end with }}.

Requirements for the title:
- SEO-friendly and attention-grabbing
- Include relevant keywords naturally
- Keep under {max_title} characters for optimal SEO
- Match the {tone} tone

Requirements for the content:
- Use proper HTML formatting with headings (h2, h3), paragraphs, and lists
- Make it SEO-friendly with natural keyword usage
- Include a compelling introduction and conclusion
- Use subheadings to break up the content
- Write in {tone} tone
- Ensure the content is original, engaging, and valuable to readers
- Include actionable insights where appropriate
- Never include h1 tags (title will be separate)"""


class PromptBuilder:
    """生成リクエストからシステム指示とユーザープロンプトを組み立てる"""

    def build(self, request: GenerationRequest) -> Prompt:
        """
        プロンプトを構築

        Args:
            request: 検証済みの生成リクエスト

        Returns:
            システム指示とユーザープロンプトの組
        """
        length_guide = self.get_length_guide(request.length)

        user_prompt = USER_PROMPT_TEMPLATE.format(
            content_type=request.content_type,
            content_type_label=request.content_type.replace('-', ' ').title(),
            topic=request.topic,
            length_guide=length_guide,
            tone=request.tone,
            tone_label=request.tone[:1].upper() + request.tone[1:],
            content_type_guide=self.get_content_type_guide(request.content_type),
            max_title=Constants.MAX_TITLE_LENGTH,
        )

        logger.debug(f"Built prompt for topic '{request.topic}' ({len(user_prompt)} chars)")
        return Prompt(system=SYSTEM_PROMPT, user=user_prompt)

    @staticmethod
    def get_length_guide(length: str) -> str:
        """長さ指定に対応するガイド文（未知の値は medium）"""
        return LENGTH_GUIDES.get(length, DEFAULT_LENGTH_GUIDE)

    @staticmethod
    def get_content_type_guide(content_type: str) -> str:
        """コンテンツタイプに対応する構成ガイド"""
        return CONTENT_TYPE_GUIDES.get(content_type, DEFAULT_CONTENT_TYPE_GUIDE)
