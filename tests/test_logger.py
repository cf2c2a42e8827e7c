# tests/test_logger.py

from __future__ import annotations

import logging
import os
import sys
import time
from pathlib import Path

import pytest

from todo_watcher.utils import logger as logger_module
from todo_watcher.utils.logger import PerformanceLogger, initialize_logging


@pytest.fixture(autouse=True)
def reset_app_logger():
    yield
    app_logger = logging.getLogger("todo_watcher")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()


def _only(directory: Path, pattern: str) -> Path:
    matches = list(directory.glob(pattern))
    assert len(matches) == 1, matches
    return matches[0]


def test_initialize_logging_creates_log_files(tmp_path: Path) -> None:
    app_logger = initialize_logging(log_dir=str(tmp_path), level="INFO")
    logging.getLogger("todo_watcher.data.todo_client").error("接続に失敗しました")

    assert _only(tmp_path, "todo_watcher_2*.log").exists()
    assert "接続に失敗しました" in _only(tmp_path, "todo_watcher_error_*.log").read_text(encoding="utf-8")
    assert not list(tmp_path.glob("todo_watcher_debug_*.log"))
    assert app_logger.name == "todo_watcher"


def test_console_logs_go_to_stderr(tmp_path: Path) -> None:
    app_logger = initialize_logging(log_dir=str(tmp_path), level="INFO")

    consoles = [
        h for h in app_logger.handlers
        if type(h) is logging.StreamHandler
    ]
    assert len(consoles) == 1
    assert consoles[0].stream is sys.stderr


def test_debug_mode_adds_debug_file(tmp_path: Path) -> None:
    initialize_logging(log_dir=str(tmp_path), level="INFO", debug_mode=True)
    logging.getLogger("todo_watcher.business.task_watcher").debug("状態遷移")

    assert "状態遷移" in _only(tmp_path, "todo_watcher_debug_*.log").read_text(encoding="utf-8")


def test_reinitializing_does_not_duplicate_handlers(tmp_path: Path) -> None:
    initialize_logging(log_dir=str(tmp_path))
    count = len(logging.getLogger("todo_watcher").handlers)
    initialize_logging(log_dir=str(tmp_path))

    assert len(logging.getLogger("todo_watcher").handlers) == count


def test_cleanup_old_logs_removes_stale_files(tmp_path: Path) -> None:
    initialize_logging(log_dir=str(tmp_path))
    stale = tmp_path / "todo_watcher_20000101.log"
    stale.write_text("old", encoding="utf-8")
    old = time.time() - 60 * 86400
    os.utime(stale, (old, old))

    logger_module.cleanup_old_logs(days=30)

    assert not stale.exists()
    assert _only(tmp_path, "todo_watcher_2*.log").exists()


def test_performance_logger_reports_failure(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="todo_watcher.performance"):
        with pytest.raises(ValueError):
            with PerformanceLogger("テスト処理"):
                raise ValueError("失敗")

    assert "エラー終了: テスト処理" in caplog.text
