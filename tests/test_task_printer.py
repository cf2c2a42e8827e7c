# tests/test_task_printer.py

from __future__ import annotations

import io

import pytest

from todo_watcher.business.task_printer import HEADER_LINE, TaskPrinter
from todo_watcher.utils.error_handler import DecodeError

from .fakes import FakeResponse


def test_single_task_scenario(out: io.StringIO) -> None:
    response = FakeResponse(200, b'{"value":[{"status":"completed","subject":"Buy milk"}]}')

    TaskPrinter(stream=out).print_tasks(response)

    assert out.getvalue().splitlines() == [HEADER_LINE, "completed : Buy milk"]


def test_one_line_per_task_in_payload_order(out: io.StringIO) -> None:
    value = [{"id": str(i), "status": f"s{i}", "subject": f"task {i}"} for i in (3, 1, 2)]

    result = TaskPrinter(stream=out).print_tasks(FakeResponse(200, {"value": value}))

    lines = out.getvalue().splitlines()
    assert lines[0] == HEADER_LINE
    assert lines[1:] == ["s3 : task 3", "s1 : task 1", "s2 : task 2"]
    assert len(result.tasks) == 3


def test_empty_list_prints_header_only(out: io.StringIO) -> None:
    TaskPrinter(stream=out).print_tasks(FakeResponse(200, {"value": []}))

    assert out.getvalue() == HEADER_LINE + "\n"


def test_null_body_prints_header_only(out: io.StringIO) -> None:
    TaskPrinter(stream=out).print_tasks(FakeResponse(200, b"null"))

    assert out.getvalue() == HEADER_LINE + "\n"


def test_malformed_body_prints_nothing(out: io.StringIO) -> None:
    with pytest.raises(DecodeError):
        TaskPrinter(stream=out).print_tasks(FakeResponse(200, b"{not json"))

    assert out.getvalue() == ""


def test_next_link_is_not_followed(out: io.StringIO) -> None:
    body = {"@odata.nextLink": "https://example.test/tasks?$skip=1", "value": [{"status": "a", "subject": "b"}]}

    result = TaskPrinter(stream=out).print_tasks(FakeResponse(200, body))

    assert result.next_link == "https://example.test/tasks?$skip=1"
    assert out.getvalue().splitlines() == [HEADER_LINE, "a : b"]


def test_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    TaskPrinter().print_tasks(FakeResponse(200, {"value": [{"status": "notStarted", "subject": "Call"}]}))

    assert capsys.readouterr().out == f"{HEADER_LINE}\nnotStarted : Call\n"
