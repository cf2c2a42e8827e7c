"""
タスク監視ループ

一定間隔でタスク一覧を取得し、アクセストークンが拒否された場合は一度だけ
リフレッシュして再取得したうえで、結果を出力する。
"""

import time
import logging
from enum import Enum
from typing import Callable, List, Optional

from .task_printer import TaskPrinter
from ..data.models import TasksResult
from ..data.todo_client import TodoClient, TokenRefresher
from ..data.token_store import TokenStore
from ..utils.error_handler import AuthenticationError
from ..utils.logger import PerformanceLogger

HTTP_UNAUTHORIZED = 401


class WatchState(Enum):
    """監視ループの状態"""
    IDLE = "idle"
    FETCHING = "fetching"
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"
    REFRESHING = "refreshing"
    RETRYING = "retrying"
    PRINTING = "printing"
    SLEEPING = "sleeping"


class TaskWatcher:
    """
    タスク監視クラス

    トークンストア、タスク取得、トークンリフレッシュ、出力を順に呼び出す。
    いずれかで例外が発生した場合は捕捉せずに呼び出し側へ伝播する。
    """

    def __init__(self, store: TokenStore, client: TodoClient, refresher: TokenRefresher,
                 printer: Optional[TaskPrinter] = None, interval: float = 10,
                 strict_reauth: bool = False, sleep_func: Callable[[float], None] = time.sleep):
        """
        TaskWatcher を初期化

        Args:
            store: トークンストア
            client: タスク一覧 API クライアント
            refresher: トークンリフレッシュクライアント
            printer: 出力クラス（None の場合は標準出力）
            interval: ポーリング間隔（秒）
            strict_reauth: True の場合、リフレッシュ後の再取得でも 401 なら AuthenticationError（既定では再取得結果をそのまま出力）
            sleep_func: 待機関数
        """
        self.store = store
        self.client = client
        self.refresher = refresher
        self.printer = printer or TaskPrinter()
        self.interval = interval
        self.strict_reauth = strict_reauth
        self.sleep_func = sleep_func

        self.state = WatchState.IDLE
        # 現在のサイクルで通過した状態のみ保持する
        self.history: List[WatchState] = [WatchState.IDLE]
        self.logger = logging.getLogger(__name__)

    def close(self):
        self.client.close()
        self.refresher.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _transition(self, state: WatchState):
        self.logger.debug(f"状態遷移: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def run_cycle(self) -> TasksResult:
        """
        取得から出力までを1回実行

        Returns:
            出力したタスク一覧

        Raises:
            TodoWatcherError: 取得・リフレッシュ・デコードのいずれかに失敗した場合
        """
        self.history = []
        with PerformanceLogger("タスク取得サイクル") as perf:
            tokens = self.store.read()

            self._transition(WatchState.FETCHING)
            response = self.client.fetch_tasks(tokens.access_token)

            if response.status_code == HTTP_UNAUTHORIZED:
                self._transition(WatchState.UNAUTHORIZED)
                self.logger.info("アクセストークンが拒否されました (HTTP 401)")
                response.close()

                self._transition(WatchState.REFRESHING)
                new_tokens = self.refresher.refresh(tokens.refresh_token)
                self.store.write(new_tokens.access_token, new_tokens.refresh_token)
                perf.log_checkpoint("トークン更新")

                self._transition(WatchState.RETRYING)
                response = self.client.fetch_tasks(new_tokens.access_token)

                if response.status_code == HTTP_UNAUTHORIZED:
                    if self.strict_reauth:
                        response.close()
                        raise AuthenticationError(
                            "トークンをリフレッシュした後もアクセスが拒否されました",
                            status_code=response.status_code
                        )
                    self.logger.warning("リフレッシュ後も HTTP 401 ですが、そのまま出力します")
            else:
                self._transition(WatchState.AUTHORIZED)

            with response:
                self._transition(WatchState.PRINTING)
                return self.printer.print_tasks(response)

    def run(self, max_cycles: Optional[int] = None):
        """
        監視ループを実行

        Args:
            max_cycles: 実行回数の上限（None の場合は無限に繰り返す）
        """
        self.logger.info(f"タスクの監視を開始します (間隔: {self.interval}秒)")
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            self.run_cycle()
            cycles += 1

            self._transition(WatchState.SLEEPING)
            self.sleep_func(self.interval)
