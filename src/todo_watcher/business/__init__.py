# ビジネスロジックレイヤー - 設定管理、タスク出力、監視ループ

from .config_manager import ConfigManager
from .config_schema import AppConfig, TodoConfig, PollConfig, LoggingConfig
from .task_printer import TaskPrinter, HEADER_LINE
from .task_watcher import TaskWatcher, WatchState

__all__ = [
    'ConfigManager',
    'AppConfig', 'TodoConfig', 'PollConfig', 'LoggingConfig',
    'TaskPrinter', 'HEADER_LINE',
    'TaskWatcher', 'WatchState'
]
