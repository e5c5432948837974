"""
共通ユーティリティ関数
"""
import logging
import math
import re
import sys
import os
from datetime import datetime
from typing import Any, Dict, Optional, Union


def safe_get_nested(data: Union[Dict[str, Any], list], *keys, default=None) -> Any:
    """
    安全なネストされた辞書・リストアクセス

    Args:
        data: 辞書またはリストデータ
        *keys: アクセスするキーのパス（リストの場合は整数インデックス）
        default: デフォルト値

    Returns:
        取得した値またはデフォルト値
    """
    current = data
    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        elif isinstance(current, list) and isinstance(key, int) and -len(current) <= key < len(current):
            current = current[key]
        else:
            return default
    return current


def setup_logging(log_level: str = 'INFO', log_dir: str = 'logs') -> logging.Logger:
    """
    ログ設定のセットアップ

    Args:
        log_level: ログレベル
        log_dir: ログディレクトリ

    Returns:
        設定済みのロガー
    """
    from .constants import Constants

    # ログディレクトリの作成
    os.makedirs(log_dir, exist_ok=True)

    # ログファイル名（日付付き）
    log_file = os.path.join(log_dir, f'ai_writer_{datetime.now().strftime(Constants.LOG_DATE_FORMAT)}.log')

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=Constants.LOG_FORMAT,
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )

    return logging.getLogger(__name__)


def strip_tags(html_content: str) -> str:
    """HTMLタグを除去してテキストのみを返す"""
    if not html_content:
        return ""
    return re.sub(r'<[^>]*>', '', html_content)


def count_words(html_content: str) -> int:
    """
    HTMLコンテンツの単語数をカウント

    Args:
        html_content: HTMLコンテンツ

    Returns:
        タグ除去後の空白区切りの単語数
    """
    return len(strip_tags(html_content).split())


def _to_float(value: Any) -> Optional[float]:
    """浮動小数点数に変換（変換できない値と NaN は None、±inf はそのまま）"""
    try:
        float_val = float(value)
    except (ValueError, TypeError, OverflowError):
        return None
    return None if math.isnan(float_val) else float_val


def clamp_int(value: Any, min_val: int, max_val: int, default: int) -> int:
    """整数に変換して範囲内に収める（変換できない場合と NaN はデフォルト値、±inf は上限・下限）"""
    float_val = _to_float(value)
    if float_val is None:
        float_val = default
    return int(max(min_val, min(max_val, float_val)))


def clamp_float(value: Any, min_val: float, max_val: float, default: float) -> float:
    """浮動小数点数に変換して範囲内に収める（変換できない場合と NaN はデフォルト値）"""
    float_val = _to_float(value)
    if float_val is None:
        float_val = default
    return float(max(min_val, min(max_val, float_val)))


def truncate_title(title: str, max_length: int, truncated_length: int) -> str:
    """
    タイトルを最大長に収める

    Args:
        title: 元のタイトル
        max_length: 許容される最大文字数
        truncated_length: 切り詰め時に残す文字数（末尾に'...'を付与）

    Returns:
        最大長以内のタイトル
    """
    if len(title) > max_length:
        return title[:truncated_length] + '...'
    return title
