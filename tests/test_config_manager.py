#!/usr/bin/env python3
"""
設定管理のテストモジュール
"""
import sys
from pathlib import Path

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ai_writer.config.config_manager import ConfigManager


class TestConfigManager:
    """ConfigManagerのテストクラス"""

    def test_env_file_is_loaded(self, tmp_path, monkeypatch):
        for name in ('WORDPRESS_URL', 'WORDPRESS_USERNAME', 'OPENAI_API_KEY', 'LOG_LEVEL'):
            monkeypatch.delenv(name, raising=False)
        env_file = tmp_path / '.env'
        env_file.write_text(
            'WORDPRESS_URL=https://site.example.com\n'
            'WORDPRESS_USERNAME=editor\n'
            'OPENAI_API_KEY=sk-dotenv-key-123456\n'
            'LOG_LEVEL=DEBUG\n',
            encoding='utf-8'
        )

        config = ConfigManager(env_file=str(env_file))

        assert config.wordpress.url == 'https://site.example.com'
        assert config.wordpress.username == 'editor'
        assert config.openai.api_key == 'sk-dotenv-key-123456'
        assert config.system.log_level == 'DEBUG'

    def test_defaults(self, monkeypatch):
        for name in ('OPENAI_API_BASE', 'AI_WRITER_SETTINGS_FILE', 'AI_WRITER_DATABASE_FILE', 'LOG_DIR'):
            monkeypatch.delenv(name, raising=False)

        config = ConfigManager(env_file=None)

        assert config.openai.api_base == 'https://api.openai.com/v1'
        assert config.storage.settings_file == 'data/settings.json'
        assert config.storage.database_file == 'data/ai_writer.db'
        assert config.system.log_dir == 'logs'

    def test_summary_masks_secrets(self, monkeypatch):
        monkeypatch.setenv('WORDPRESS_PASSWORD', 'app-password')
        monkeypatch.setenv('OPENAI_API_KEY', 'sk-abcdefghijklmnop')

        summary = ConfigManager(env_file=None).get_config_summary()

        assert summary['wordpress']['password'] == '********'
        assert summary['openai']['api_key'].endswith('mnop')
        assert 'sk-abc' not in summary['openai']['api_key']
