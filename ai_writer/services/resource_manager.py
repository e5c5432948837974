"""
HTTPセッション管理のためのユーティリティ
"""
import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)


class SessionMixin:
    """セッション管理のためのミックスイン"""

    def __init__(self, *args, session: Optional[requests.Session] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._session = session

    @property
    def session(self) -> requests.Session:
        """遅延初期化されたセッション（注入されたセッションがあればそれを使用）"""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def close(self):
        """セッションのクリーンアップ"""
        if self._session is not None:
            self._session.close()
            self._session = None
            logger.debug(f"{self.__class__.__name__} session closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
