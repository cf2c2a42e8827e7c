"""
To-Do API クライアント

タスク一覧 API と OAuth トークンエンドポイントとの通信を担当するクライアントクラス
"""

import requests
import time
import logging
from typing import Optional, Tuple

from .models import RefreshResult, TokenPair
from ..utils.error_handler import RequestBuildError, NetworkError
from ..utils.logger import log_api_request


TASKS_URL = "https://graph.microsoft.com/beta/me/outlook/tasks"
TOKEN_URL = "https://login.microsoftonline.com/common/oauth2/v2.0/token"
REDIRECT_URI = "https://login.microsoftonline.com/common/oauth2/nativeclient"
SCOPE = "offline_access user.read tasks.read"

DEFAULT_CONNECT_TIMEOUT = 10
DEFAULT_READ_TIMEOUT = 30

# リクエスト構築段階で発生する例外（送信前に失敗したもの）
_BUILD_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
    requests.exceptions.URLRequired,
)


class _SessionClient:
    """requests.Session を保持するクライアントの共通部分"""

    def __init__(self, session: Optional[requests.Session] = None,
                 timeout: Tuple[float, float] = (DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT)):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__module__)

    def close(self):
        """セッションを閉じてリソースを解放"""
        if self.session:
            self.session.close()
            self.logger.debug(f"{self.__class__.__name__} のセッションをクローズしました")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        HTTP リクエストを送信し、生のレスポンスを返す

        ステータスコードの解釈は呼び出し側の責務。再試行は行わない。

        Raises:
            RequestBuildError: リクエストの構築に失敗した場合
            NetworkError: 通信に失敗した場合
        """
        self.logger.debug(f"API リクエスト: {method} {url}")
        request_start = time.time()
        try:
            response = self.session.request(method=method, url=url, timeout=self.timeout, **kwargs)
        except _BUILD_ERRORS as e:
            raise RequestBuildError(f"リクエストの構築に失敗しました: {e}", url=url, original_error=e)
        except requests.exceptions.Timeout as e:
            raise NetworkError(f"リクエストがタイムアウトしました: {e}", url=url, original_error=e)
        except requests.exceptions.ConnectionError as e:
            raise NetworkError(f"接続に失敗しました: {e}", url=url, original_error=e)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"リクエストエラーが発生しました: {e}", url=url, original_error=e)

        log_api_request(method, url, response.status_code, time.time() - request_start)
        return response


class TodoClient(_SessionClient):
    """
    タスク一覧 API クライアント

    Bearer 認証付きで GET リクエストを送信する。
    """

    def __init__(self, tasks_url: str = TASKS_URL, session: Optional[requests.Session] = None,
                 timeout: Tuple[float, float] = (DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT)):
        """
        TodoClient を初期化

        Args:
            tasks_url: タスク一覧エンドポイント
            session: 使用する HTTP セッション（None の場合は新規作成）
            timeout: (接続, 読み込み) タイムアウト（秒）
        """
        super().__init__(session, timeout)
        self.tasks_url = tasks_url

    def fetch_tasks(self, access_token: str) -> requests.Response:
        """
        タスク一覧を取得

        Args:
            access_token: アクセストークン

        Returns:
            生のレスポンス。呼び出し側でクローズすること

        Raises:
            RequestBuildError: リクエストの構築に失敗した場合
            NetworkError: 通信に失敗した場合
        """
        self.logger.debug(f"タスク一覧を取得しています (トークン長: {len(access_token)})")
        return self._send(
            'GET',
            self.tasks_url,
            headers={'Authorization': f'Bearer {access_token}'},
            stream=True
        )


class TokenRefresher(_SessionClient):
    """
    OAuth トークンリフレッシュクライアント

    リフレッシュトークンを新しいアクセストークン・リフレッシュトークンの組と交換する。
    取得したトークンの保存は呼び出し側の責務。
    """

    def __init__(self, client_id: str, token_url: str = TOKEN_URL, redirect_uri: str = REDIRECT_URI,
                 scope: str = SCOPE, session: Optional[requests.Session] = None,
                 timeout: Tuple[float, float] = (DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT)):
        super().__init__(session, timeout)
        self.client_id = client_id
        self.token_url = token_url
        self.redirect_uri = redirect_uri
        self.scope = scope

    def build_form(self, refresh_token: str) -> dict:
        """トークンエンドポイントに送信するフォームを作成"""
        return {
            'client_id': self.client_id,
            'scope': self.scope,
            'refresh_token': refresh_token,
            'redirect_uri': self.redirect_uri,
            'grant_type': 'refresh_token'
        }

    def refresh(self, old_refresh_token: str) -> TokenPair:
        """
        トークンをリフレッシュ

        レスポンスの access_token / refresh_token をそのまま返す（空でも検証しない）。

        Args:
            old_refresh_token: 現在のリフレッシュトークン

        Returns:
            新しいトークンの組

        Raises:
            RequestBuildError: リクエストの構築に失敗した場合
            NetworkError: 通信に失敗した場合
            DecodeError: レスポンスが想定した JSON でない場合
        """
        self.logger.info("トークンをリフレッシュしています...")
        response = self._send(
            'POST',
            self.token_url,
            data=self.build_form(old_refresh_token),
            headers={'Content-Type': 'application/x-www-form-urlencoded'}
        )

        with response:
            if not response.ok:
                self.logger.warning(f"トークンエンドポイントがエラーを返しました: HTTP {response.status_code}")
            result = RefreshResult.from_json(response.content)

        self.logger.info(f"トークンのリフレッシュが完了しました (有効期限: {result.expires_in}秒)")
        return result.token_pair()
