#!/usr/bin/env python3
"""
設定ストアのテストモジュール
"""
import json
import pytest
import sys
from pathlib import Path
from cryptography.fernet import Fernet

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ai_writer.config.settings_store import SettingsStore
from ai_writer.services.exceptions import ConfigurationError


class TestSettingsStore:
    """SettingsStoreのテストクラス"""

    @pytest.fixture
    def settings_file(self, tmp_path):
        return tmp_path / 'settings.json'

    @pytest.fixture
    def store(self, settings_file):
        return SettingsStore(str(settings_file))

    def test_defaults(self, store):
        assert store.get('model') == 'gpt-3.5-turbo'
        assert store.get('max_tokens') == 1000
        assert store.get('temperature') == 0.7
        assert store.get('default_tone') == 'professional'
        assert store.get('auto_save') is False
        assert store.get('unknown', 'fallback') == 'fallback'

    @pytest.mark.parametrize('value,expected', [
        (50, 100), (5000, 4000), ('2000', 2000), ('abc', 1000),
        ('inf', 4000), ('-inf', 100), ('nan', 1000),
    ])
    def test_max_tokens_is_clamped(self, store, value, expected):
        store.set('max_tokens', value)

        assert store.get('max_tokens') == expected

    @pytest.mark.parametrize('value,expected', [
        (-1, 0.0), (3.5, 2.0), ('1.2', 1.2), (None, 0.7), ('nan', 0.7), ('inf', 2.0),
    ])
    def test_temperature_is_clamped(self, store, value, expected):
        store.set('temperature', value)

        assert store.get('temperature') == expected

    def test_api_key_is_encrypted_on_disk(self, store, settings_file):
        store.set('api_key', 'sk-secret')

        raw = json.loads(settings_file.read_text(encoding='utf-8'))
        assert raw['api_key'] != 'sk-secret'
        assert raw['api_key'].startswith('gAAAAA')
        assert store.get('api_key') == 'sk-secret'

    def test_values_persist_across_instances(self, store, settings_file):
        store.update({'api_key': 'sk-secret', 'model': 'gpt-4', 'auto_save': 'true'})

        reloaded = SettingsStore(str(settings_file))

        assert reloaded.get('api_key') == 'sk-secret'
        assert reloaded.get('model') == 'gpt-4'
        assert reloaded.get('auto_save') is True

    def test_explicit_encryption_key(self, tmp_path):
        key = Fernet.generate_key().decode()
        store = SettingsStore(str(tmp_path / 's.json'), encryption_key=key)
        store.set('api_key', 'sk-one')

        assert not (tmp_path / '.encryption_key').exists()
        assert SettingsStore(str(tmp_path / 's.json'), encryption_key=key).get('api_key') == 'sk-one'

    def test_env_default_used_when_not_stored(self, settings_file):
        store = SettingsStore(str(settings_file), env_defaults={'api_key': 'sk-env', 'model': ''})

        assert store.get('api_key') == 'sk-env'
        assert store.get('model') == 'gpt-3.5-turbo'

    def test_add_defaults_does_not_overwrite(self, store, settings_file):
        store.set('model', 'gpt-4o')

        store.add_defaults()

        raw = json.loads(settings_file.read_text(encoding='utf-8'))
        assert raw['model'] == 'gpt-4o'
        assert raw['max_tokens'] == 1000
        assert set(raw) >= {'api_key', 'model', 'max_tokens', 'temperature', 'default_tone', 'auto_save'}

    def test_text_fields_are_sanitized(self, store):
        store.set('model', '<b>gpt-4</b>\n')
        store.set('default_tone', '')

        assert store.get('model') == 'gpt-4'
        assert store.get('default_tone') == 'professional'

    def test_get_api_settings(self, store):
        store.update({'api_key': 'sk-test', 'max_tokens': 9999, 'temperature': 5})

        settings = store.get_api_settings()

        assert settings.api_key == 'sk-test'
        assert settings.model == 'gpt-3.5-turbo'
        assert settings.max_tokens == 4000
        assert settings.temperature == 2.0

    def test_get_api_settings_without_key(self, store):
        with pytest.raises(ConfigurationError) as exc_info:
            store.get_api_settings()

        assert str(exc_info.value) == 'OpenAI API key not configured. Please check your settings.'

    def test_summary_masks_api_key(self, store):
        store.set('api_key', 'sk-abcdefghijklmnop')

        summary = store.get_settings_summary()

        assert summary['api_key'] != 'sk-abcdefghijklmnop'
        assert summary['model'] == 'gpt-3.5-turbo'

    def test_corrupt_settings_file(self, settings_file):
        settings_file.write_text('{not json', encoding='utf-8')

        assert SettingsStore(str(settings_file)).get('model') == 'gpt-3.5-turbo'
