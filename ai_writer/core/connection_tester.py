"""
APIキーの接続テスト (ai_writer_test_connection)
"""
import logging
from typing import Any, Dict, List, Optional

from ..api.openai_api import OpenAIClient
from ..security.input_validator import InputValidator
from ..services.error_handlers import action_handler
from ..services.exceptions import (
    ConfigurationError, EmptyResponseError, InsufficientPermissionsError
)
from ..utils.constants import Constants, ErrorMessages, SuccessMessages

logger = logging.getLogger(__name__)


def filter_available_models(models: List[Any]) -> List[str]:
    """
    関連モデルのIDだけを抽出（出現順を保ち重複を除く）

    Args:
        models: /models 応答の data 配列

    Returns:
        関連モデル名のいずれかを含むモデルIDのリスト
    """
    available: List[str] = []
    for model in models:
        model_id = model.get('id') if isinstance(model, dict) else None
        if not isinstance(model_id, str):
            continue
        if any(name in model_id for name in Constants.RELEVANT_MODELS) and model_id not in available:
            available.append(model_id)
    return available


class ConnectionTester:
    """接続テストハンドラー"""

    def __init__(self, settings_store, permission_checker, openai_client: OpenAIClient,
                 validator: Optional[InputValidator] = None):
        self.settings_store = settings_store
        self.permission_checker = permission_checker
        self.openai_client = openai_client
        self.validator = validator or InputValidator()

    @action_handler('test_connection', 'Connection test')
    def handle(self, form: Dict[str, Any]) -> Dict[str, Any]:
        """
        接続テストを実行

        フォームの api_key を優先し、なければ保存済みのキーを使う。

        Args:
            form: api_key（任意）

        Returns:
            message, model_info (total_models, available_models)
        """
        if not self.permission_checker.current_user_can(Constants.CAPABILITY_MANAGE_OPTIONS):
            raise InsufficientPermissionsError(ErrorMessages.INSUFFICIENT_PERMISSIONS)

        api_key = self.resolve_api_key(form)
        if not api_key:
            raise ConfigurationError(ErrorMessages.NO_API_KEY_FOUND)

        return self.test(api_key)

    def resolve_api_key(self, form: Dict[str, Any]) -> str:
        api_key = self.validator.sanitize_text_field(form.get('api_key', ''))
        if api_key:
            return api_key
        return self.settings_store.get('api_key') or ''

    def test(self, api_key: str) -> Dict[str, Any]:
        """
        /models を1回呼び出して利用可能なモデルを報告

        Raises:
            EmptyResponseError: 応答に data 配列がない場合
            APIError: 通信エラーまたは200以外の応答
        """
        data = self.openai_client.list_models(api_key)

        models = data.get('data') if isinstance(data, dict) else None
        if not isinstance(models, list):
            logger.error("Models response has no 'data' list")
            raise EmptyResponseError(ErrorMessages.INVALID_RESPONSE_FORMAT)

        available_models = filter_available_models(models)
        logger.info(f"Connection test succeeded: {len(available_models)}/{len(models)} relevant models")

        return {
            'message': SuccessMessages.CONNECTION_SUCCESSFUL.format(len(available_models)),
            'model_info': {
                'total_models': len(models),
                'available_models': available_models,
            },
        }
