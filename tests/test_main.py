#!/usr/bin/env python3
"""
コマンドラインインターフェースのテストモジュール
"""
import json
import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from main import parse_arguments, parse_setting, run
from ai_writer.database.content_store import ContentStore
from ai_writer.services.exceptions import ConfigurationError
from ai_writer.utils.constants import Constants


class TestParseArguments:
    """引数解析のテストクラス"""

    def test_list_saved_default_limit(self):
        assert parse_arguments(['--list-saved']).list_saved == 20
        assert parse_arguments(['--list-saved', '5']).list_saved == 5
        assert parse_arguments([]).list_saved is None

    def test_parse_setting(self):
        assert parse_setting(' max_tokens = 2000 ') == ('max_tokens', '2000')

    def test_parse_setting_without_separator(self):
        with pytest.raises(ConfigurationError):
            parse_setting('max_tokens')


class TestRun:
    """run() のテストクラス"""

    @pytest.fixture
    def content_store(self, tmp_path):
        return ContentStore(str(tmp_path / 'ai_writer.db'))

    @pytest.fixture
    def plugin(self, content_store):
        plugin = MagicMock()
        plugin.content_store = content_store
        plugin.wordpress_api.site_url = 'https://example.com'
        plugin.wordpress_api.test_connection.return_value = True
        plugin.config.get_config_summary.return_value = {'openai': {'api_key': '****mnop'}}
        return plugin

    def test_show_config(self, plugin, capsys):
        assert run(parse_arguments(['--show-config']), plugin) is True

        plugin.config.get_config_summary.assert_called_once()
        assert '****mnop' in capsys.readouterr().out

    def test_connection_checks_openai_and_wordpress(self, plugin):
        plugin.handle_action.return_value = {'success': True, 'data': {'message': 'ok'}}

        assert run(parse_arguments(['--test-connection']), plugin) is True

        plugin.handle_action.assert_called_once_with(Constants.ACTION_TEST_CONNECTION, {})
        plugin.wordpress_api.test_connection.assert_called_once()

    def test_wordpress_connection_failure_fails_run(self, plugin):
        plugin.handle_action.return_value = {'success': True, 'data': {'message': 'ok'}}
        plugin.wordpress_api.test_connection.return_value = False

        assert run(parse_arguments(['--test-connection']), plugin) is False

    def test_list_saved(self, plugin, content_store, capsys):
        content_store.save_content('First', '<p>One</p>')
        content_store.save_content('Second', '<p>Two</p>')

        assert run(parse_arguments(['--list-saved', '1']), plugin) is True

        output = capsys.readouterr().out
        listing = json.loads(output.split('\n', 1)[1])
        assert listing['total'] == 2
        assert [item['title'] for item in listing['items']] == ['Second']
        assert 'content' not in listing['items'][0]

    def test_show_saved(self, plugin, content_store, capsys):
        content_id = content_store.save_content('Draft', '<p>Body</p>')

        assert run(parse_arguments(['--show-saved', str(content_id)]), plugin) is True

        assert '<p>Body</p>' in capsys.readouterr().out

    def test_show_missing_saved_content(self, plugin):
        assert run(parse_arguments(['--show-saved', '99']), plugin) is False

    def test_delete_saved(self, plugin, content_store):
        content_id = content_store.save_content('Draft', '<p>Body</p>')

        assert run(parse_arguments(['--delete-saved', str(content_id)]), plugin) is True
        assert content_store.get_content(content_id) is None
        assert run(parse_arguments(['--delete-saved', str(content_id)]), plugin) is False

    def test_save_with_content_id_updates(self, plugin):
        plugin.handle_action.side_effect = [
            {'success': True, 'data': {'title': 'T', 'content': '<p>C</p>'}},
            {'success': True, 'data': {'content_id': 3, 'message': 'Content updated successfully!'}},
        ]

        assert run(parse_arguments(['--generate', 'SEO Basics', '--save', '--content-id', '3']), plugin) is True

        action, form = plugin.handle_action.call_args[0]
        assert action == Constants.ACTION_SAVE_CONTENT
        assert form == {'title': 'T', 'content': '<p>C</p>', 'content_id': 3}

    def test_save_requires_generate(self, plugin):
        assert run(parse_arguments(['--save']), plugin) is False
