"""
WordPress REST API クライアント（投稿作成・権限確認）
"""
import logging
from typing import Any, Dict, Optional

import requests

from ..utils.constants import Constants, ErrorMessages
from ..services.exceptions import PostCreationError
from ..services.resource_manager import SessionMixin


logger = logging.getLogger(__name__)


class WordPressAPI(SessionMixin):
    """WordPress REST API クライアント"""

    def __init__(self, url: str, username: str, password: str,
                 session: Optional[requests.Session] = None):
        """
        WordPress REST APIクライアントの初期化

        Args:
            url: WordPressサイトのURL
            username: ユーザー名
            password: アプリケーションパスワード
            session: 使用するHTTPセッション（テスト時に注入）
        """
        super().__init__(session=session)
        self.site_url = url.rstrip('/')
        self.api_url = f"{self.site_url}/wp-json/{Constants.WP_API_VERSION}"

        # セッション認証の設定
        self.session.auth = (username, password)
        self.session.headers.update({
            'Content-Type': 'application/json',
            'User-Agent': Constants.USER_AGENT,
        })

        # 現在のユーザー情報キャッシュ
        self._current_user: Optional[Dict[str, Any]] = None

        logger.info(f"WordPress API client initialized for: {self.site_url}")

    def insert_post(self, post: Dict[str, Any]) -> int:
        """
        WordPressに記事を作成

        REST API は register_post_meta で登録されていないメタキーを黙って無視する。
        _ai_writer_generated / _ai_writer_generated_at を保存するには、サイト側で
        show_in_rest=True と auth_callback（"_" で始まる保護キーのため）を指定して
        post タイプに登録しておく必要がある。

        Args:
            post: 投稿データ (title, content, status, author_id, meta)

        Returns:
            作成された投稿ID

        Raises:
            PostCreationError: 作成に失敗した場合
        """
        post_data = {
            'title': post['title'],
            'content': post['content'],
            'status': post.get('status', 'draft'),
        }
        if post.get('author_id'):
            post_data['author'] = post['author_id']
        if post.get('meta'):
            post_data['meta'] = post['meta']

        try:
            response = self.session.post(
                f"{self.api_url}/posts",
                json=post_data,
                timeout=Constants.WP_API_TIMEOUT
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error creating post: {e}")
            raise PostCreationError(ErrorMessages.POST_CREATION_FAILED.format(e)) from e

        if response.status_code != 201:
            reason = self._extract_error(response)
            logger.error(f"Failed to create post: {response.status_code} - {reason}")
            raise PostCreationError(
                ErrorMessages.POST_CREATION_FAILED.format(reason),
                response.status_code
            )

        post_id = response.json().get('id')
        if not post_id:
            raise PostCreationError(ErrorMessages.POST_CREATION_FAILED.format('no post ID returned'))

        logger.info(f"Successfully created post: {post_data['title']} (ID: {post_id})")
        return int(post_id)

    def edit_url_for(self, post_id: int) -> str:
        """投稿編集画面のURLを生成"""
        return f"{self.site_url}/wp-admin/post.php?post={post_id}&action=edit"

    def get_current_user(self) -> Optional[Dict[str, Any]]:
        """
        認証ユーザーの情報を取得（context=edit で権限情報を含む）

        Returns:
            ユーザー情報の辞書、失敗時はNone
        """
        if self._current_user is not None:
            return self._current_user

        try:
            response = self.session.get(
                f"{self.api_url}/users/me",
                params={'context': 'edit'},
                timeout=Constants.WP_API_TIMEOUT
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching current user: {e}")
            return None

        if response.status_code != 200:
            logger.error(f"Failed to fetch current user: HTTP {response.status_code}")
            return None

        self._current_user = response.json()
        return self._current_user

    def get_current_user_id(self) -> Optional[int]:
        user = self.get_current_user()
        return user.get('id') if user else None

    def current_user_can(self, capability: str) -> bool:
        """
        認証ユーザーが権限を持つか確認

        Args:
            capability: 権限名（例: edit_posts）

        Returns:
            権限がある場合True（ユーザー情報が取れない場合はFalse）
        """
        user = self.get_current_user()
        if not user:
            return False

        capabilities = user.get('capabilities') or {}
        allowed = bool(capabilities.get(capability))
        if not allowed:
            logger.warning(f"User {user.get('name', 'Unknown')} lacks capability: {capability}")
        return allowed

    def test_connection(self) -> bool:
        """
        WordPress APIへの接続テスト

        Returns:
            接続成功時True、失敗時False
        """
        user = self.get_current_user()
        if user:
            logger.info(f"Connected as user: {user.get('name', 'Unknown')}")
            return True
        return False

    @staticmethod
    def _extract_error(response: requests.Response) -> str:
        """WordPressのエラー応答からメッセージを取り出す"""
        try:
            data = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"

        if isinstance(data, dict) and data.get('message'):
            return str(data['message'])
        return f"HTTP {response.status_code}"
