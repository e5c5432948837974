"""
定数定義モジュール
"""
from typing import Final


class Constants:
    """システム定数定義"""

    # API関連
    OPENAI_API_BASE: Final[str] = 'https://api.openai.com/v1'
    COMPLETION_TIMEOUT: Final[int] = 60
    CONNECTION_TEST_TIMEOUT: Final[int] = 30
    WP_API_TIMEOUT: Final[int] = 30
    USER_AGENT: Final[str] = 'AI-Writer/1.0.0'

    # モデルパラメータ
    MIN_MAX_TOKENS: Final[int] = 100
    MAX_MAX_TOKENS: Final[int] = 4000
    MIN_TEMPERATURE: Final[float] = 0.0
    MAX_TEMPERATURE: Final[float] = 2.0
    TOP_P: Final[int] = 1
    FREQUENCY_PENALTY: Final[int] = 0
    PRESENCE_PENALTY: Final[int] = 0

    # 接続テストで表示対象とするモデル
    RELEVANT_MODELS: Final[tuple] = ('gpt-3.5-turbo', 'gpt-4', 'gpt-4-turbo', 'gpt-4o')

    # 入力・タイトル関連
    MIN_TOPIC_LENGTH: Final[int] = 3
    MAX_TITLE_LENGTH: Final[int] = 60
    TRUNCATED_TITLE_LENGTH: Final[int] = 57

    # WordPress関連
    WP_API_VERSION: Final[str] = 'wp/v2'
    CONTENT_TABLE: Final[str] = 'ai_writer_content'
    ALLOWED_POST_STATUSES: Final[tuple] = ('draft', 'publish', 'private')

    # 権限
    CAPABILITY_EDIT_POSTS: Final[str] = 'edit_posts'
    CAPABILITY_MANAGE_OPTIONS: Final[str] = 'manage_options'

    # AJAXアクション名
    ACTION_GENERATE_CONTENT: Final[str] = 'ai_writer_generate_content'
    ACTION_SAVE_CONTENT: Final[str] = 'ai_writer_save_content'
    ACTION_CREATE_POST: Final[str] = 'ai_writer_create_post'
    ACTION_TEST_CONNECTION: Final[str] = 'ai_writer_test_connection'

    # ファイルパス
    SETTINGS_FILE: Final[str] = 'data/settings.json'
    DATABASE_FILE: Final[str] = 'data/ai_writer.db'
    ENCRYPTION_KEY_FILE: Final[str] = '.encryption_key'

    # ログ関連
    LOG_DATE_FORMAT: Final[str] = '%Y%m%d'
    LOG_FORMAT: Final[str] = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ErrorMessages:
    """エラーメッセージ定数"""

    # 入力検証
    TOPIC_REQUIRED = "Please enter a topic for content generation (at least 3 characters)."
    TOPIC_TOO_SHORT = "Topic must be at least 3 characters long."
    POST_TITLE_REQUIRED = "Post title is required."
    POST_CONTENT_REQUIRED = "Post content is required."
    NO_CONTENT_TO_SAVE = "No content to save."
    INVALID_CONTENT_ID = "Invalid content ID."
    SAVED_CONTENT_NOT_FOUND = "Saved content not found: {}"

    # 権限・設定
    INSUFFICIENT_PERMISSIONS = "Insufficient permissions."
    CANNOT_CREATE_POSTS = "You do not have permission to create posts."
    API_KEY_NOT_CONFIGURED = "OpenAI API key not configured. Please check your settings."
    NO_API_KEY_FOUND = "No API key found. Please enter your OpenAI API key first."
    UNKNOWN_ACTION = "Unknown action: {}"

    # API応答
    NETWORK_ERROR = "Network error: {}"
    INVALID_API_KEY = "Invalid API key. Please check your OpenAI API key in settings."
    ACCESS_FORBIDDEN = "Access forbidden. Your API key may not have the required permissions."
    RATE_LIMIT_EXCEEDED = "Rate limit exceeded. Please try again in a few moments."
    SERVICE_UNAVAILABLE = "OpenAI service is temporarily unavailable. Please try again later."
    API_REQUEST_FAILED = "API request failed ({}): {}"
    UNKNOWN_API_ERROR = "Unknown error occurred."
    INVALID_RESPONSE_FORMAT = "Invalid response format from OpenAI API."
    NO_CONTENT_GENERATED = "No content was generated. Please try again."

    # 投稿・保存
    POST_CREATION_FAILED = "Failed to create post: {}"
    CONTENT_SAVE_FAILED = "Failed to save content: {}"
    ACTION_FAILED = "{} failed: {}"


class SuccessMessages:
    """成功メッセージ定数"""

    CONTENT_GENERATED = "Content generated successfully!"
    CONTENT_SAVED = "Content saved successfully!"
    CONTENT_UPDATED = "Content updated successfully!"
    POST_CREATED = 'Post "{}" created successfully!'
    CONNECTION_SUCCESSFUL = "Connection successful! Found {} available models."


class DefaultValues:
    """デフォルト値定義"""

    LOG_LEVEL = 'INFO'
    LOG_DIR = 'logs'
    CONTENT_TYPE = 'blog-post'
    LENGTH = 'medium'
    TONE = 'professional'
    POST_STATUS = 'draft'
    PLACEHOLDER_TITLE = 'Generated Content'

    # プラグイン設定の初期値
    SETTINGS = {
        'api_key': '',
        'model': 'gpt-3.5-turbo',
        'max_tokens': 1000,
        'temperature': 0.7,
        'default_tone': 'professional',
        'auto_save': False,
    }

    CONTENT_TYPES = ('blog-post', 'article', 'social-media', 'email', 'product-description')
    LENGTHS = ('short', 'medium', 'long')
    TONES = ('professional', 'casual', 'friendly', 'formal', 'creative')
