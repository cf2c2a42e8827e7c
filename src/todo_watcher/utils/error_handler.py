"""
エラーハンドリング基盤

ポーリング中に発生するエラーの分類と、ログ記録・ユーザー向けメッセージ生成を提供する。
To-Do Task Watcher ではすべてのエラーが致命的であり、再試行やバックオフは行わない。
"""
import logging
import traceback
from typing import Optional, Dict, Any, Callable
from enum import Enum


class ErrorType(Enum):
    """エラータイプ分類"""
    REQUEST_ERROR = "request_error"
    NETWORK_ERROR = "network_error"
    DECODE_ERROR = "decode_error"
    AUTHENTICATION_ERROR = "auth_error"
    CONFIGURATION_ERROR = "config_error"
    UNKNOWN_ERROR = "unknown_error"


class TodoWatcherError(Exception):
    """アプリケーション基底例外クラス"""

    def __init__(self, message: str, error_type: ErrorType = ErrorType.UNKNOWN_ERROR,
                 details: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """
        エラーを初期化

        Args:
            message: エラーメッセージ
            error_type: エラータイプ
            details: エラー詳細情報
            original_error: 元の例外
        """
        super().__init__(message)
        self.error_type = error_type
        self.details = details or {}
        self.original_error = original_error


class RequestBuildError(TodoWatcherError):
    """リクエスト構築エラー（不正な URL やヘッダー）"""

    def __init__(self, message: str, url: Optional[str] = None, original_error: Optional[Exception] = None):
        super().__init__(message, ErrorType.REQUEST_ERROR, {'url': url}, original_error)


class NetworkError(TodoWatcherError):
    """ネットワーク関連エラー（DNS、接続拒否、TLS、タイムアウト）"""

    def __init__(self, message: str, url: Optional[str] = None, original_error: Optional[Exception] = None):
        super().__init__(message, ErrorType.NETWORK_ERROR, {'url': url}, original_error)


class DecodeError(TodoWatcherError):
    """レスポンスボディのデコードエラー"""

    def __init__(self, message: str, field: Optional[str] = None, original_error: Optional[Exception] = None):
        super().__init__(message, ErrorType.DECODE_ERROR, {'field': field}, original_error)


class AuthenticationError(TodoWatcherError):
    """認証関連エラー"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 original_error: Optional[Exception] = None):
        super().__init__(message, ErrorType.AUTHENTICATION_ERROR, {'status_code': status_code}, original_error)


class ConfigurationError(TodoWatcherError):
    """設定関連エラー"""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message, ErrorType.CONFIGURATION_ERROR, {'config_key': config_key})


class ErrorHandler:
    """エラーハンドリング管理クラス"""

    def __init__(self):
        self.logger = logging.getLogger('todo_watcher.error_handler')

        # ユーザーフレンドリーなエラーメッセージマッピング
        self.user_messages = {
            ErrorType.REQUEST_ERROR: "HTTP リクエストを構築できませんでした。",
            ErrorType.NETWORK_ERROR: "ネットワーク接続でエラーが発生しました。インターネット接続を確認してください。",
            ErrorType.DECODE_ERROR: "API レスポンスの形式が想定と異なります。",
            ErrorType.AUTHENTICATION_ERROR: "認証に失敗しました。リフレッシュトークンを確認してください。",
            ErrorType.CONFIGURATION_ERROR: "設定に問題があります。",
            ErrorType.UNKNOWN_ERROR: "予期しないエラーが発生しました。"
        }

    def get_user_message(self, error: Exception) -> str:
        """
        ユーザーフレンドリーなエラーメッセージを作成

        Args:
            error: 発生したエラー

        Returns:
            ユーザー向けエラーメッセージ
        """
        if isinstance(error, TodoWatcherError):
            return self._handle_application_error(error)
        return f"{self.user_messages[ErrorType.UNKNOWN_ERROR]} 詳細: {str(error)}"

    def _handle_application_error(self, error: TodoWatcherError) -> str:
        """アプリケーション定義エラーを処理"""
        base_message = self.user_messages.get(error.error_type, self.user_messages[ErrorType.UNKNOWN_ERROR])

        if error.error_type == ErrorType.CONFIGURATION_ERROR and error.details.get('config_key'):
            return f"{base_message} 環境変数 '{error.details['config_key']}' を確認してください。"

        if error.error_type == ErrorType.DECODE_ERROR and error.details.get('field'):
            return f"{base_message} フィールド '{error.details['field']}': {str(error)}"

        if error.error_type in (ErrorType.REQUEST_ERROR, ErrorType.NETWORK_ERROR) and error.details.get('url'):
            return f"{base_message} URL: {error.details['url']} - {str(error)}"

        return f"{base_message} {str(error)}"

    def log_error(self, error: Exception, context: str = ""):
        """
        エラーをログに記録

        Args:
            error: 発生したエラー
            context: エラーが発生したコンテキスト
        """
        error_info = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'context': context,
            'traceback': ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        }

        if isinstance(error, TodoWatcherError):
            error_info.update({
                'application_error_type': error.error_type.value,
                'error_details': error.details
            })

        self.logger.error(f"エラーが発生しました: {error_info}")


# グローバルエラーハンドラーインスタンス
_error_handler = ErrorHandler()


def get_user_message(error: Exception) -> str:
    """
    ログを記録せずにユーザー向けエラーメッセージを作成

    ErrorContext で記録済みのエラーを再度記録しないために使用する。
    """
    return _error_handler.get_user_message(error)


class ErrorContext:
    """
    エラーコンテキスト管理クラス

    ブロック内で発生した例外をコンテキスト名付きでログに記録する。
    KeyboardInterrupt などの Exception 以外は記録せずにそのまま伝播させる。
    """

    def __init__(self, context: str, reraise: bool = True,
                 on_error: Optional[Callable[[Exception], None]] = None):
        """
        Args:
            context: エラーが発生したコンテキスト
            reraise: False の場合は例外を抑制する
            on_error: エラー発生時に呼び出すコールバック
        """
        self.context = context
        self.reraise = reraise
        self.on_error = on_error
        self.error: Optional[Exception] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not isinstance(exc_val, Exception):
            return False

        self.error = exc_val
        _error_handler.log_error(exc_val, self.context)

        if self.on_error:
            try:
                self.on_error(exc_val)
            except Exception as callback_error:
                _error_handler.log_error(callback_error, f"{self.context} - エラーコールバック")

        return not self.reraise
