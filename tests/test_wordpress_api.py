#!/usr/bin/env python3
"""
WordPress REST APIクライアントのテストモジュール
"""
import pytest
import sys
import requests
from pathlib import Path
from unittest.mock import MagicMock

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ai_writer.api.wordpress_api import WordPressAPI
from ai_writer.services.exceptions import PostCreationError


def make_response(status_code, data=None):
    response = MagicMock()
    response.status_code = status_code
    if data is None:
        response.json.side_effect = ValueError('no json')
    else:
        response.json.return_value = data
    return response


class TestWordPressAPI:
    """WordPressAPIのテストクラス"""

    @pytest.fixture
    def session(self):
        return MagicMock()

    @pytest.fixture
    def api(self, session):
        return WordPressAPI('https://example.com/', 'editor', 'app-pass', session=session)

    def test_init_sets_auth(self, api, session):
        assert api.api_url == 'https://example.com/wp-json/wp/v2'
        assert session.auth == ('editor', 'app-pass')

    def test_insert_post(self, api, session):
        session.post.return_value = make_response(201, {'id': 42})

        post_id = api.insert_post({
            'title': 'Hello',
            'content': '<!-- wp:paragraph -->\n<p>x</p>\n<!-- /wp:paragraph -->',
            'status': 'draft',
            'author_id': 3,
            'meta': {'_ai_writer_generated': True},
        })

        assert post_id == 42
        args, kwargs = session.post.call_args
        assert args[0] == 'https://example.com/wp-json/wp/v2/posts'
        assert kwargs['json']['author'] == 3
        assert kwargs['json']['meta'] == {'_ai_writer_generated': True}
        assert kwargs['json']['status'] == 'draft'

    def test_insert_post_rejected(self, api, session):
        session.post.return_value = make_response(403, {'message': 'Sorry, you are not allowed.'})

        with pytest.raises(PostCreationError) as exc_info:
            api.insert_post({'title': 'T', 'content': 'C'})

        assert str(exc_info.value) == 'Failed to create post: Sorry, you are not allowed.'
        assert exc_info.value.status_code == 403

    def test_insert_post_network_error(self, api, session):
        session.post.side_effect = requests.exceptions.Timeout('timed out')

        with pytest.raises(PostCreationError) as exc_info:
            api.insert_post({'title': 'T', 'content': 'C'})

        assert str(exc_info.value) == 'Failed to create post: timed out'

    def test_edit_url(self, api):
        assert api.edit_url_for(42) == 'https://example.com/wp-admin/post.php?post=42&action=edit'

    def test_current_user_can_is_cached(self, api, session):
        session.get.return_value = make_response(200, {
            'id': 3, 'name': 'Editor', 'capabilities': {'edit_posts': True},
        })

        assert api.current_user_can('edit_posts') is True
        assert api.current_user_can('manage_options') is False
        assert api.get_current_user_id() == 3
        session.get.assert_called_once()
        assert session.get.call_args[1]['params'] == {'context': 'edit'}

    def test_current_user_unavailable(self, api, session):
        session.get.return_value = make_response(401, {'code': 'rest_not_logged_in'})

        assert api.current_user_can('edit_posts') is False
        assert api.get_current_user_id() is None
        assert api.test_connection() is False

    def test_test_connection(self, api, session):
        session.get.return_value = make_response(200, {'id': 1, 'name': 'Admin', 'capabilities': {}})

        assert api.test_connection() is True
