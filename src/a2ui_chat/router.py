"""Split agent parts into rendering commands and history contents."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from .types import CommandKind, Content, DataPart, RenderCommand, TextPart

COMMAND_KEYS = tuple(kind.value for kind in CommandKind)


@dataclass(frozen=True)
class RoutedParts:
    """Two independent projections of one part sequence."""

    commands: tuple[RenderCommand, ...]
    contents: tuple[Content, ...]


def command_of(part: DataPart) -> RenderCommand | None:
    """Read the single rendering command carried by a data part, if any."""
    present = [key for key in COMMAND_KEYS if part.data.get(key) is not None]
    if len(present) != 1:
        if present:
            logger.debug("router.ambiguous keys={}", present)
        return None
    key = present[0]
    return RenderCommand(kind=CommandKind(key), body=part.data[key])


def route(parts: Iterable[TextPart | DataPart]) -> RoutedParts:
    commands: list[RenderCommand] = []
    contents: list[Content] = []
    for part in parts:
        match part:
            case TextPart():
                contents.append(Content(part=part))
            case DataPart():
                command = command_of(part)
                if command is None:
                    logger.debug("router.dropped keys={}", sorted(part.data))
                    continue
                commands.append(command)
                # Surface starts stay visible in the chat log.
                if command.kind is CommandKind.BEGIN_RENDERING:
                    contents.append(Content(part=part))
    return RoutedParts(commands=tuple(commands), contents=tuple(contents))
