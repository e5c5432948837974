#!/usr/bin/env python3
"""
投稿作成アクションのテストモジュール
"""
import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ai_writer.core.post_creator import PostCreator
from ai_writer.services.exceptions import PostCreationError


class TestPostCreator:
    """PostCreatorのテストクラス"""

    @pytest.fixture
    def wordpress_api(self):
        api = MagicMock()
        api.current_user_can.return_value = True
        api.get_current_user_id.return_value = 7
        api.insert_post.return_value = 42
        api.edit_url_for.return_value = 'https://example.com/wp-admin/post.php?post=42&action=edit'
        return api

    @pytest.fixture
    def creator(self, wordpress_api):
        return PostCreator(wordpress_api)

    def test_create_post_success(self, creator, wordpress_api):
        response = creator.handle({
            'title': 'My <b>Post</b>',
            'content': '<h2>Title</h2><p>Body</p>',
            'status': 'publish',
        })

        assert response == {
            'success': True,
            'data': {
                'message': 'Post "My Post" created successfully!',
                'post_id': 42,
                'edit_url': 'https://example.com/wp-admin/post.php?post=42&action=edit',
            },
        }

        post = wordpress_api.insert_post.call_args[0][0]
        assert post['title'] == 'My Post'
        assert post['status'] == 'publish'
        assert post['author_id'] == 7
        assert post['content'].startswith('<!-- wp:heading {"level":2} -->')
        assert '<!-- wp:paragraph -->\n<p>Body</p>\n<!-- /wp:paragraph -->' in post['content']
        assert post['meta']['_ai_writer_generated'] is True
        assert post['meta']['_ai_writer_generated_at']
        wordpress_api.edit_url_for.assert_called_once_with(42)

    def test_invalid_status_falls_back_to_draft(self, creator, wordpress_api):
        creator.handle({'title': 'T', 'content': '<p>Body</p>', 'status': 'pending'})

        assert wordpress_api.insert_post.call_args[0][0]['status'] == 'draft'

    def test_missing_status_is_draft(self, creator, wordpress_api):
        creator.handle({'title': 'T', 'content': '<p>Body</p>'})

        assert wordpress_api.insert_post.call_args[0][0]['status'] == 'draft'

    def test_script_is_removed_before_conversion(self, creator, wordpress_api):
        creator.handle({'title': 'T', 'content': '<p>Safe</p><script>alert(1)</script>'})

        assert 'alert' not in wordpress_api.insert_post.call_args[0][0]['content']

    @pytest.mark.parametrize('form,message', [
        ({'title': '', 'content': '<p>Body</p>'}, 'Post title is required.'),
        ({'title': 'Title', 'content': ''}, 'Post content is required.'),
    ])
    def test_required_fields(self, creator, wordpress_api, form, message):
        response = creator.handle(form)

        assert response == {'success': False, 'data': {'message': message}}
        wordpress_api.insert_post.assert_not_called()

    def test_permission_denied(self, creator, wordpress_api):
        wordpress_api.current_user_can.return_value = False

        response = creator.handle({'title': 'T', 'content': '<p>Body</p>'})

        assert response['data']['message'] == 'You do not have permission to create posts.'
        wordpress_api.insert_post.assert_not_called()

    def test_rejected_by_wordpress(self, creator, wordpress_api):
        wordpress_api.insert_post.side_effect = PostCreationError(
            'Failed to create post: Sorry, you are not allowed to create posts.', 403
        )

        response = creator.handle({'title': 'T', 'content': '<p>Body</p>'})

        assert response['success'] is False
        assert response['data']['message'] == 'Failed to create post: Sorry, you are not allowed to create posts.'
