"""To-Do Task Watcher - To-Do のタスク一覧を定期的に取得して出力する"""

__version__ = "1.0.0"
