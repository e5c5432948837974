"""
生成パイプラインのデータモデル
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class GenerationRequest:
    """コンテンツ生成リクエスト（入力検証済み）"""
    topic: str
    content_type: str = 'blog-post'
    length: str = 'medium'
    tone: str = 'professional'


@dataclass(frozen=True)
class ApiSettings:
    """生成APIの設定（範囲は設定ストアでクランプ済み）"""
    api_key: str
    model: str
    max_tokens: int
    temperature: float


@dataclass(frozen=True)
class Prompt:
    """システム指示とユーザープロンプトの組"""
    system: str
    user: str


@dataclass
class CompletionResult:
    """生成結果"""
    success: bool
    content: str = ''
    title: str = ''
    usage_tokens: Optional[int] = None
    error_message: Optional[str] = None
    usage: Optional[Dict[str, Any]] = field(default=None, repr=False)


@dataclass(frozen=True)
class BlockElement:
    """ブロック変換対象のトップレベル要素"""
    tag: str
    raw_html: str
    plain_text: str
