import pytest

from a2ui_chat.classifier import classify
from a2ui_chat.errors import ProtocolError, TransportError
from a2ui_chat.types import DataPart, TextPart


def _text(value: str) -> dict[str, str]:
    return {"kind": "text", "text": value}


def test_task_orders_status_parts_before_artifacts() -> None:
    task = {
        "kind": "task",
        "id": "t1",
        "contextId": "ctx",
        "status": {"state": "completed", "message": {"kind": "message", "parts": [_text("s1"), _text("s2")]}},
        "artifacts": [
            {"artifactId": "a1", "parts": [_text("a1p1"), _text("a1p2")]},
            {"artifactId": "a2", "parts": [{"kind": "data", "data": {"deleteSurface": {"surfaceId": "x"}}}]},
        ],
    }

    parts = classify(task)

    assert [part.text for part in parts if isinstance(part, TextPart)] == ["s1", "s2", "a1p1", "a1p2"]
    assert isinstance(parts[-1], DataPart)
    assert parts[-1].data == {"deleteSurface": {"surfaceId": "x"}}


def test_task_without_status_message_uses_artifacts_only() -> None:
    task = {"kind": "task", "status": {"state": "working"}, "artifacts": [{"parts": [_text("only")]}]}

    assert [part.text for part in classify(task)] == ["only"]


def test_task_without_artifacts_uses_status_only() -> None:
    task = {"kind": "task", "status": {"message": {"parts": [_text("status")]}}}

    assert [part.text for part in classify(task)] == ["status"]


def test_message_parts_are_returned_unchanged() -> None:
    message = {
        "kind": "message",
        "role": "agent",
        "parts": [_text("hello"), {"kind": "data", "data": {"beginRendering": {"surfaceId": "s", "root": "r"}}}],
    }

    parts = classify(message)

    assert parts == [
        TextPart(text="hello"),
        DataPart(data={"beginRendering": {"surfaceId": "s", "root": "r"}}),
    ]


def test_unknown_part_kinds_are_dropped_in_place() -> None:
    message = {"kind": "message", "parts": [_text("a"), {"kind": "file", "file": {"uri": "x"}}, _text("b")]}

    assert [part.text for part in classify(message)] == ["a", "b"]


def test_missing_result_is_a_protocol_error() -> None:
    with pytest.raises(ProtocolError) as exc_info:
        classify(None)

    assert isinstance(exc_info.value, TransportError)
