"""
データレイヤーモジュール

To-Do API との通信、トークンの保存、データモデルを提供
"""

from .models import TokenPair, TaskRecord, TasksResult, RefreshResult
from .token_store import TokenStore, EnvTokenStore, MemoryTokenStore
from .todo_client import TodoClient, TokenRefresher

__all__ = [
    'TokenPair',
    'TaskRecord',
    'TasksResult',
    'RefreshResult',
    'TokenStore',
    'EnvTokenStore',
    'MemoryTokenStore',
    'TodoClient',
    'TokenRefresher'
]
