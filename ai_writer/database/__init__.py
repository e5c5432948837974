"""
データベース管理モジュール
"""

from .content_store import ContentStore

__all__ = ['ContentStore']
