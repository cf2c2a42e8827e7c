# tests/test_todo_client.py

from __future__ import annotations

import pytest
import requests

from todo_watcher.data.models import TokenPair
from todo_watcher.data.todo_client import (
    REDIRECT_URI,
    SCOPE,
    TASKS_URL,
    TodoClient,
    TokenRefresher,
)
from todo_watcher.utils.error_handler import DecodeError, NetworkError, RequestBuildError

from .fakes import FakeResponse, FakeSession


def test_fetch_sends_bearer_get_and_returns_raw_response() -> None:
    session = FakeSession(queue=[FakeResponse(401, b"")])
    client = TodoClient(session=session, timeout=(3, 7))

    response = client.fetch_tasks("A1")

    # 401 is handed back untouched; interpreting it is the caller's job
    assert response.status_code == 401
    assert not response.closed
    sent = session.sent[0]
    assert sent.method == "GET"
    assert sent.url == TASKS_URL
    assert sent.headers == {"Authorization": "Bearer A1"}
    assert sent.kwargs["timeout"] == (3, 7)
    assert "params" not in sent.kwargs


def test_fetch_with_empty_token_still_sends_header() -> None:
    session = FakeSession(queue=[FakeResponse(200, b"{}")])
    TodoClient(session=session).fetch_tasks("")

    assert session.sent[0].headers["Authorization"] == "Bearer "


@pytest.mark.parametrize(
    "exc",
    [
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.ReadTimeout("slow"),
        requests.exceptions.SSLError("bad cert"),
    ],
)
def test_fetch_transport_failures_become_network_error(exc: Exception) -> None:
    client = TodoClient(session=FakeSession(queue=[exc]))

    with pytest.raises(NetworkError) as excinfo:
        client.fetch_tasks("A1")
    assert excinfo.value.original_error is exc
    assert excinfo.value.details["url"] == TASKS_URL


@pytest.mark.parametrize(
    "exc",
    [
        requests.exceptions.MissingSchema("no scheme"),
        requests.exceptions.InvalidURL("bad url"),
        requests.exceptions.InvalidHeader("newline in header"),
    ],
)
def test_fetch_construction_failures_become_request_build_error(exc: Exception) -> None:
    client = TodoClient(session=FakeSession(queue=[exc]))

    with pytest.raises(RequestBuildError):
        client.fetch_tasks("A1")


def test_real_session_rejects_malformed_url_before_sending() -> None:
    with TodoClient(tasks_url="not a url") as client:
        with pytest.raises(RequestBuildError):
            client.fetch_tasks("A1")


def test_refresh_posts_form_and_returns_new_pair() -> None:
    body = {
        "token_type": "Bearer",
        "scope": "offline_access user.read tasks.read",
        "expires_in": 3600,
        "ext_expires_in": 3600,
        "access_token": "A2",
        "refresh_token": "R2",
    }
    response = FakeResponse(200, body)
    session = FakeSession(queue=[response])
    refresher = TokenRefresher(client_id="client-123", token_url="https://example.test/token", session=session)

    assert refresher.refresh("R1") == TokenPair("A2", "R2")

    sent = session.sent[0]
    assert sent.method == "POST"
    assert sent.url == "https://example.test/token"
    assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert sent.kwargs["data"] == {
        "client_id": "client-123",
        "scope": SCOPE,
        "refresh_token": "R1",
        "redirect_uri": REDIRECT_URI,
        "grant_type": "refresh_token",
    }
    assert response.closed


def test_refresh_ignores_expiry_metadata() -> None:
    session = FakeSession(
        queue=[FakeResponse(200, {"access_token": "A2", "refresh_token": "R2", "expires_in": -5, "scope": ""})]
    )
    assert TokenRefresher("cid", session=session).refresh("R1") == TokenPair("A2", "R2")


def test_refresh_does_not_validate_empty_tokens() -> None:
    session = FakeSession(queue=[FakeResponse(400, {"error": "invalid_grant"})])

    assert TokenRefresher("cid", session=session).refresh("R1") == TokenPair("", "")


def test_refresh_decode_failure_closes_response() -> None:
    response = FakeResponse(200, b"<html>oops</html>")
    refresher = TokenRefresher("cid", session=FakeSession(queue=[response]))

    with pytest.raises(DecodeError):
        refresher.refresh("R1")
    assert response.closed


def test_refresh_transport_failure() -> None:
    refresher = TokenRefresher("cid", session=FakeSession(queue=[requests.exceptions.ConnectTimeout("x")]))

    with pytest.raises(NetworkError):
        refresher.refresh("R1")


def test_close_releases_session() -> None:
    session = FakeSession()
    with TodoClient(session=session):
        pass
    assert session.closed
