# tests/conftest.py

from __future__ import annotations

import io

import pytest

from todo_watcher.business.task_printer import TaskPrinter
from todo_watcher.business.task_watcher import TaskWatcher
from todo_watcher.data.models import TokenPair
from todo_watcher.data.todo_client import TodoClient, TokenRefresher
from todo_watcher.data.token_store import (
    ACCESS_TOKEN_ENV,
    REFRESH_TOKEN_ENV,
    MemoryTokenStore,
)

from .fakes import FakeSession


@pytest.fixture(autouse=True)
def clean_token_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the real environment out of every test and undo token writes."""
    monkeypatch.setenv(ACCESS_TOKEN_ENV, "")
    monkeypatch.setenv(REFRESH_TOKEN_ENV, "")
    monkeypatch.delenv(ACCESS_TOKEN_ENV, raising=False)
    monkeypatch.delenv(REFRESH_TOKEN_ENV, raising=False)


@pytest.fixture()
def api_session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def token_session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def store() -> MemoryTokenStore:
    return MemoryTokenStore(TokenPair("A1", "R1"))


@pytest.fixture()
def watcher(
    store: MemoryTokenStore,
    api_session: FakeSession,
    token_session: FakeSession,
    out: io.StringIO,
) -> TaskWatcher:
    """
    TaskWatcher wired with scripted sessions and an in-memory printer stream.

    Sleeping is recorded instead of performed.
    """
    sleeps: list[float] = []
    w = TaskWatcher(
        store=store,
        client=TodoClient(tasks_url="https://example.test/tasks", session=api_session),
        refresher=TokenRefresher(
            client_id="client-123",
            token_url="https://example.test/token",
            session=token_session,
        ),
        printer=TaskPrinter(stream=out),
        interval=10,
        sleep_func=sleeps.append,
    )
    w.sleeps = sleeps  # type: ignore[attr-defined]
    return w
