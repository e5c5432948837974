#!/usr/bin/env python3
"""
OpenAI互換APIクライアントのテストモジュール
"""
import json
import pytest
import sys
import requests
from pathlib import Path
from unittest.mock import MagicMock

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ai_writer.api.openai_api import OpenAIClient, extract_error_message, raise_for_api_status
from ai_writer.core.models import ApiSettings, Prompt
from ai_writer.services.exceptions import (
    NetworkError, AuthenticationError, APIPermissionError, RateLimitError,
    ServiceUnavailableError, GenericAPIError
)


def make_response(status_code, body):
    response = MagicMock()
    response.status_code = status_code
    response.text = body if isinstance(body, str) else json.dumps(body)
    return response


class TestStatusMapping:
    """HTTPステータスと例外の対応"""

    @pytest.mark.parametrize('status_code,error_type,message', [
        (401, AuthenticationError, 'Invalid API key. Please check your OpenAI API key in settings.'),
        (403, APIPermissionError, 'Access forbidden. Your API key may not have the required permissions.'),
        (429, RateLimitError, 'Rate limit exceeded. Please try again in a few moments.'),
        (500, ServiceUnavailableError, 'OpenAI service is temporarily unavailable. Please try again later.'),
        (502, ServiceUnavailableError, 'OpenAI service is temporarily unavailable. Please try again later.'),
        (503, ServiceUnavailableError, 'OpenAI service is temporarily unavailable. Please try again later.'),
    ])
    def test_known_statuses(self, status_code, error_type, message):
        with pytest.raises(error_type) as exc_info:
            raise_for_api_status(status_code, '')

        assert str(exc_info.value) == message
        assert exc_info.value.status_code == status_code

    def test_other_status_carries_upstream_message(self):
        body = json.dumps({'error': {'message': 'The model does not exist'}})

        with pytest.raises(GenericAPIError) as exc_info:
            raise_for_api_status(404, body)

        assert str(exc_info.value) == 'API request failed (404): The model does not exist'
        assert exc_info.value.status_code == 404

    def test_other_status_with_unreadable_body(self):
        with pytest.raises(GenericAPIError) as exc_info:
            raise_for_api_status(418, '<html>teapot</html>')

        assert str(exc_info.value) == 'API request failed (418): Unknown error occurred.'

    def test_200_does_not_raise(self):
        raise_for_api_status(200, '{}')

    def test_extract_error_message_order(self):
        assert extract_error_message({'error': {'message': 'first'}, 'message': 'second'}) == 'first'
        assert extract_error_message({'message': 'second', 'detail': 'third'}) == 'second'
        assert extract_error_message({'detail': 'third'}) == 'third'
        assert extract_error_message(None) == 'Unknown error occurred.'

    def test_extract_error_message_strips_markup(self):
        body = {'error': {'message': '<b>Invalid</b>\n\tmodel\x00 <script>x</script>'}}

        assert extract_error_message(body) == 'Invalid model x'

    def test_markup_only_message_falls_through(self):
        assert extract_error_message({'error': {'message': '<br/>'}, 'detail': 'Bad request'}) == 'Bad request'


class TestOpenAIClient:
    """OpenAIClientのテストクラス"""

    @pytest.fixture
    def session(self):
        return MagicMock()

    @pytest.fixture
    def client(self, session):
        return OpenAIClient(api_base='https://api.example.com/v1/', session=session)

    @pytest.fixture
    def settings(self):
        return ApiSettings(api_key='sk-test', model='gpt-3.5-turbo', max_tokens=1000, temperature=0.7)

    def test_create_chat_completion_request(self, client, session, settings):
        """リクエストボディ・ヘッダー・タイムアウト"""
        session.post.return_value = make_response(200, {'choices': []})

        body = client.create_chat_completion(Prompt(system='sys', user='usr'), settings)

        assert body == json.dumps({'choices': []})
        args, kwargs = session.post.call_args
        assert args[0] == 'https://api.example.com/v1/chat/completions'
        assert kwargs['timeout'] == 60
        assert kwargs['headers']['Authorization'] == 'Bearer sk-test'
        assert kwargs['headers']['Content-Type'] == 'application/json'
        assert kwargs['json'] == {
            'model': 'gpt-3.5-turbo',
            'messages': [
                {'role': 'system', 'content': 'sys'},
                {'role': 'user', 'content': 'usr'},
            ],
            'max_tokens': 1000,
            'temperature': 0.7,
            'top_p': 1,
            'frequency_penalty': 0,
            'presence_penalty': 0,
        }

    def test_create_chat_completion_network_error(self, client, session, settings):
        session.post.side_effect = requests.exceptions.ConnectionError('connection refused')

        with pytest.raises(NetworkError) as exc_info:
            client.create_chat_completion(Prompt(system='s', user='u'), settings)

        assert str(exc_info.value) == 'Network error: connection refused'

    def test_create_chat_completion_http_error(self, client, session, settings):
        session.post.return_value = make_response(401, {'error': {'message': 'bad key'}})

        with pytest.raises(AuthenticationError):
            client.create_chat_completion(Prompt(system='s', user='u'), settings)

    def test_list_models(self, client, session):
        session.get.return_value = make_response(200, {'data': [{'id': 'gpt-4'}]})

        data = client.list_models('sk-test')

        assert data == {'data': [{'id': 'gpt-4'}]}
        args, kwargs = session.get.call_args
        assert args[0] == 'https://api.example.com/v1/models'
        assert kwargs['timeout'] == 30

    def test_list_models_non_json_body(self, client, session):
        session.get.return_value = make_response(200, 'not json')

        assert client.list_models('sk-test') is None

    def test_close_releases_session(self, client, session):
        client.close()

        session.close.assert_called_once()
