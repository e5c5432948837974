"""
生成コンテンツ保存テーブル (ai_writer_content) の管理
"""
import sqlite3
import logging
from typing import Any, Dict, List, Optional
from datetime import datetime
from pathlib import Path
from contextlib import contextmanager

from ..services.exceptions import ContentStoreError
from ..utils.constants import Constants, ErrorMessages

logger = logging.getLogger(__name__)


class ContentStore:
    """生成コンテンツのSQLiteストア"""

    def __init__(self, db_path: str = Constants.DATABASE_FILE):
        """
        コンテンツストアの初期化

        Args:
            db_path: データベースファイルパス
        """
        self.db_path = Path(db_path)
        self.table = Constants.CONTENT_TABLE

        logger.info(f"Content store configured: {self.db_path}")

    def initialize(self):
        """データベースとテーブルを作成（既存の場合は何もしない）"""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self.get_connection() as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{self.table}_created_at ON {self.table}(created_at)"
            )
            conn.commit()

        logger.info(f"Table {self.table} initialized")

    @contextmanager
    def get_connection(self):
        """データベース接続コンテキストマネージャー"""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row  # 辞書形式でアクセス可能
            yield conn
        except sqlite3.Error as e:
            logger.error(f"Database error: {e}")
            raise ContentStoreError(ErrorMessages.CONTENT_SAVE_FAILED.format(e)) from e
        finally:
            if conn:
                conn.close()

    def save_content(self, title: str, content: str) -> int:
        """
        生成コンテンツを保存

        Args:
            title: タイトル
            content: HTML本文

        Returns:
            保存したレコードのID
        """
        self.initialize()
        now = datetime.now().isoformat(sep=' ', timespec='seconds')

        with self.get_connection() as conn:
            cursor = conn.execute(
                f"INSERT INTO {self.table} (title, content, created_at, updated_at) VALUES (?, ?, ?, ?)",
                (title, content, now, now)
            )
            conn.commit()
            content_id = cursor.lastrowid

        logger.info(f"Saved generated content: {title} (ID: {content_id})")
        return content_id

    def update_content(self, content_id: int, title: str, content: str) -> bool:
        """保存済みコンテンツを更新（対象がなければFalse）"""
        self.initialize()
        now = datetime.now().isoformat(sep=' ', timespec='seconds')

        with self.get_connection() as conn:
            cursor = conn.execute(
                f"UPDATE {self.table} SET title = ?, content = ?, updated_at = ? WHERE id = ?",
                (title, content, now, content_id)
            )
            conn.commit()
            return cursor.rowcount > 0

    def get_content(self, content_id: int) -> Optional[Dict[str, Any]]:
        """IDで保存済みコンテンツを取得"""
        self.initialize()

        with self.get_connection() as conn:
            row = conn.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (content_id,)
            ).fetchone()

        return dict(row) if row else None

    def list_contents(self, limit: int = 20) -> List[Dict[str, Any]]:
        """新しい順に保存済みコンテンツを取得"""
        self.initialize()

        with self.get_connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM {self.table} ORDER BY id DESC LIMIT ?", (limit,)
            ).fetchall()

        return [dict(row) for row in rows]

    def delete_content(self, content_id: int) -> bool:
        self.initialize()

        with self.get_connection() as conn:
            cursor = conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (content_id,))
            conn.commit()
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted saved content: ID {content_id}")
        return deleted

    def count(self) -> int:
        self.initialize()

        with self.get_connection() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()[0]
