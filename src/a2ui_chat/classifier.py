"""Flatten an agent result (task or message) into ordered parts."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger
from pydantic import ValidationError

from .errors import ProtocolError
from .types import PART_ADAPTER, DataPart, TextPart


def classify(result: Any) -> list[TextPart | DataPart]:
    """Return the result's parts in display and application order.

    A task yields its status message parts followed by every artifact's
    parts, artifacts in array order. Anything else is read as a message.
    """
    if not isinstance(result, Mapping):
        raise ProtocolError(f"agent response has no result object, got {type(result).__name__}")

    if result.get("kind") == "task":
        raw_parts = [*_status_parts(result), *_artifact_parts(result)]
    else:
        raw_parts = _as_list(result.get("parts"))
    return list(_validated(raw_parts))


def _status_parts(task: Mapping[str, Any]) -> list[Any]:
    status = task.get("status")
    if not isinstance(status, Mapping):
        return []
    message = status.get("message")
    if not isinstance(message, Mapping):
        return []
    return _as_list(message.get("parts"))


def _artifact_parts(task: Mapping[str, Any]) -> list[Any]:
    parts: list[Any] = []
    for artifact in _as_list(task.get("artifacts")):
        if isinstance(artifact, Mapping):
            parts.extend(_as_list(artifact.get("parts")))
    return parts


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, list | tuple):
        return list(value)
    return []


def _validated(raw_parts: Iterable[Any]) -> Iterable[TextPart | DataPart]:
    for index, raw in enumerate(raw_parts):
        try:
            yield PART_ADAPTER.validate_python(raw)
        except ValidationError:
            kind = raw.get("kind") if isinstance(raw, Mapping) else type(raw).__name__
            logger.debug("classifier.dropped index={} kind={}", index, kind)
