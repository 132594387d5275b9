"""UI-originated events and their single-use completion sinks."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any

from blinker import Signal

from .errors import CompletionError
from .types import ClientMessage, new_id

type EventHandler = Callable[[UIEvent], Coroutine[Any, Any, None]]


class CompletionSink:
    """Result channel accepting exactly one terminal write.

    Must be created while an event loop is running.
    """

    def __init__(self) -> None:
        self._future: asyncio.Future[list[Any]] = asyncio.get_running_loop().create_future()

    @property
    def done(self) -> bool:
        return self._future.done()

    def succeed(self, result: list[Any] | None = None) -> None:
        self._ensure_open("succeed")
        self._future.set_result(list(result or []))

    def fail(self, error: BaseException) -> None:
        self._ensure_open("fail")
        self._future.set_exception(error)

    async def wait(self) -> list[Any]:
        return await asyncio.shield(self._future)

    def _ensure_open(self, operation: str) -> None:
        if self._future.done():
            raise CompletionError(f"completion sink already settled, cannot {operation}")


@dataclass(frozen=True)
class UIEvent:
    """A client event raised by a rendered surface."""

    message: ClientMessage
    completion: CompletionSink
    id: str = field(default_factory=new_id)


class UIEventBus:
    """In-process event stream backed by a blinker signal."""

    def __init__(self) -> None:
        self._events = Signal("a2ui_chat.ui_event")

    async def publish(self, event: UIEvent) -> None:
        await self._events.send_async(self, event=event)

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        async def _receiver(sender: Any, *, event: UIEvent) -> None:
            await handler(event)

        self._events.connect(_receiver, weak=False)
        return lambda: self._events.disconnect(_receiver)

    @property
    def has_subscribers(self) -> bool:
        return bool(self._events.receivers)
