"""
設定構造定義

To-Do Task Watcher の設定構造を定義します。設定値はすべて環境変数から読み込みます。
"""

from typing import Dict, Any
from dataclasses import dataclass, asdict, field

from ..data.todo_client import (
    TASKS_URL, TOKEN_URL, REDIRECT_URI, SCOPE,
    DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT
)
from ..data.token_store import ACCESS_TOKEN_ENV, REFRESH_TOKEN_ENV
from ..utils.logger import DEFAULT_LOG_DIR


CLIENT_ID_ENV = "MS_TO-DO_CLIENT_ID"
ENV_PREFIX = "TODO_WATCHER_"

DEFAULT_POLL_INTERVAL = 10


@dataclass
class TodoConfig:
    """To-Do API / OAuth 関連の設定"""
    client_id: str = ""
    tasks_url: str = TASKS_URL
    token_url: str = TOKEN_URL
    redirect_uri: str = REDIRECT_URI
    scope: str = SCOPE
    access_token_env: str = ACCESS_TOKEN_ENV
    refresh_token_env: str = REFRESH_TOKEN_ENV


@dataclass
class PollConfig:
    """ポーリング関連の設定"""
    interval_seconds: float = DEFAULT_POLL_INTERVAL
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    strict_reauth: bool = False


@dataclass
class LoggingConfig:
    """ログ関連の設定"""
    level: str = "INFO"
    debug_mode: bool = False
    log_dir: str = str(DEFAULT_LOG_DIR)


@dataclass
class AppConfig:
    """アプリケーション全体の設定"""
    todo: TodoConfig = field(default_factory=TodoConfig)
    poll: PollConfig = field(default_factory=PollConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """設定を辞書形式に変換"""
        return asdict(self)
