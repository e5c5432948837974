"""
統一されたエラーハンドリングシステム
"""
import logging
from typing import Any, Callable, Dict, Optional
from functools import wraps
from enum import Enum

from .exceptions import (
    AIWriterError, ValidationError, ConfigurationError, InsufficientPermissionsError,
    NetworkError, AuthenticationError, APIPermissionError, RateLimitError,
    ServiceUnavailableError, APIError, ResponseParseError, ContentStoreError, GenerationError
)
from ..utils.constants import ErrorMessages

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """エラーの重要度レベル"""
    CRITICAL = "critical"  # 設定の修正が必要
    ERROR = "error"        # 処理失敗
    WARNING = "warning"    # 利用者の入力や一時的な状態による失敗
    INFO = "info"          # 情報レベル


class ErrorCategory(Enum):
    """エラーのカテゴリ"""
    API_ERROR = "api"
    CONFIGURATION_ERROR = "config"
    NETWORK_ERROR = "network"
    PERMISSION_ERROR = "permission"
    STORAGE_ERROR = "storage"
    VALIDATION_ERROR = "validation"
    SYSTEM_ERROR = "system"


class ErrorContext:
    """エラーコンテキスト情報"""

    def __init__(
        self,
        operation: str,
        additional_info: Optional[Dict[str, Any]] = None
    ):
        self.operation = operation
        self.additional_info = additional_info or {}

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式でコンテキスト情報を返す"""
        return {
            'operation': self.operation,
            'additional_info': self.additional_info,
        }


class UnifiedErrorHandler:
    """統一エラーハンドラー"""

    # エラータイプと重要度のマッピング（上から順にisinstanceで判定）
    ERROR_SEVERITY_MAP = (
        (ConfigurationError, ErrorSeverity.CRITICAL),
        (AuthenticationError, ErrorSeverity.CRITICAL),
        (ValidationError, ErrorSeverity.WARNING),
        (InsufficientPermissionsError, ErrorSeverity.WARNING),
        (RateLimitError, ErrorSeverity.WARNING),
        (ServiceUnavailableError, ErrorSeverity.WARNING),
        (NetworkError, ErrorSeverity.ERROR),
        (APIError, ErrorSeverity.ERROR),
        (ResponseParseError, ErrorSeverity.ERROR),
        (GenerationError, ErrorSeverity.ERROR),
        (ContentStoreError, ErrorSeverity.ERROR),
    )

    # エラータイプとカテゴリのマッピング
    ERROR_CATEGORY_MAP = (
        (ConfigurationError, ErrorCategory.CONFIGURATION_ERROR),
        (ValidationError, ErrorCategory.VALIDATION_ERROR),
        (InsufficientPermissionsError, ErrorCategory.PERMISSION_ERROR),
        (APIPermissionError, ErrorCategory.PERMISSION_ERROR),
        (NetworkError, ErrorCategory.NETWORK_ERROR),
        (APIError, ErrorCategory.API_ERROR),
        (ResponseParseError, ErrorCategory.API_ERROR),
        (GenerationError, ErrorCategory.API_ERROR),
        (ContentStoreError, ErrorCategory.STORAGE_ERROR),
    )

    @classmethod
    def classify(cls, error: Exception) -> tuple:
        """
        エラーの重要度とカテゴリを判定

        Args:
            error: 発生したエラー

        Returns:
            (ErrorSeverity, ErrorCategory) のタプル
        """
        severity = next(
            (level for error_type, level in cls.ERROR_SEVERITY_MAP if isinstance(error, error_type)),
            ErrorSeverity.ERROR
        )
        category = next(
            (group for error_type, group in cls.ERROR_CATEGORY_MAP if isinstance(error, error_type)),
            ErrorCategory.SYSTEM_ERROR
        )
        return severity, category

    @classmethod
    def handle_error(cls, error: Exception, context: ErrorContext) -> ErrorSeverity:
        """
        エラーを分類してログに出力

        Args:
            error: 発生したエラー
            context: エラーコンテキスト

        Returns:
            判定された重要度
        """
        severity, category = cls.classify(error)
        cls._log_error(error, context, severity, category)
        return severity

    @classmethod
    def _log_error(
        cls,
        error: Exception,
        context: ErrorContext,
        severity: ErrorSeverity,
        category: ErrorCategory
    ):
        """エラーログの出力"""
        log_data = {
            'error_type': type(error).__name__,
            'severity': severity.value,
            'category': category.value,
            'context': context.to_dict()
        }

        # ドメイン外の例外はトレースバック付きで記録
        exc_info = not isinstance(error, AIWriterError)

        if severity == ErrorSeverity.CRITICAL:
            logger.critical(f"CRITICAL ERROR in {context.operation}: {error}", extra=log_data, exc_info=exc_info)
        elif severity == ErrorSeverity.ERROR:
            logger.error(f"ERROR in {context.operation}: {error}", extra=log_data, exc_info=exc_info)
        elif severity == ErrorSeverity.WARNING:
            logger.warning(f"WARNING in {context.operation}: {error}", extra=log_data)
        else:
            logger.info(f"INFO in {context.operation}: {error}", extra=log_data)

    @staticmethod
    def success_response(data: Dict[str, Any]) -> Dict[str, Any]:
        """成功応答（wp_send_json_success と同じ形）"""
        return {'success': True, 'data': data}

    @staticmethod
    def error_response(message: str) -> Dict[str, Any]:
        """失敗応答（wp_send_json_error と同じ形）"""
        return {'success': False, 'data': {'message': message}}


def action_handler(operation_name: str, failure_label: str) -> Callable:
    """
    アクション処理用デコレータ

    ハンドラーが返したデータを成功応答に包み、例外は失敗応答に変換する。

    Args:
        operation_name: ログ用の操作名
        failure_label: 想定外の例外時のメッセージ接頭辞（例: "Content generation"）

    Returns:
        デコレータ関数
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Dict[str, Any]:
            context = ErrorContext(operation=f"action.{operation_name}")
            try:
                return UnifiedErrorHandler.success_response(func(*args, **kwargs))
            except AIWriterError as e:
                UnifiedErrorHandler.handle_error(e, context)
                return UnifiedErrorHandler.error_response(str(e))
            except Exception as e:
                UnifiedErrorHandler.handle_error(e, context)
                return UnifiedErrorHandler.error_response(
                    ErrorMessages.ACTION_FAILED.format(failure_label, e)
                )
        return wrapper
    return decorator
