"""
タスク一覧の出力

レスポンスボディをデコードし、各タスクの状態と件名を標準出力に書き出す。
"""

import sys
import logging
from typing import Optional, TextIO

import requests

from ..data.models import TasksResult

HEADER_LINE = "print tasks status, name..."


class TaskPrinter:
    """タスク一覧をテキストで出力するクラス"""

    def __init__(self, stream: Optional[TextIO] = None):
        """
        Args:
            stream: 出力先（None の場合は実行時点の標準出力）
        """
        self._stream = stream
        self.logger = logging.getLogger(__name__)

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def print_tasks(self, response: requests.Response) -> TasksResult:
        """
        タスク一覧レスポンスをデコードして出力

        デコードに失敗した場合は何も出力しない。

        Args:
            response: タスク一覧 API のレスポンス

        Returns:
            デコード済みのタスク一覧

        Raises:
            DecodeError: ボディが想定した JSON でない場合
        """
        result = TasksResult.from_json(response.content)

        if result.next_link:
            self.logger.debug(f"続きのページがありますが取得しません: {result.next_link}")

        out = self.stream
        out.write(HEADER_LINE + "\n")
        for task in result.tasks:
            out.write(task.format_line() + "\n")
        out.flush()

        self.logger.info(f"{len(result.tasks)}件のタスクを出力しました")
        return result
