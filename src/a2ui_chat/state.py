"""Versioned state holders that notify on whole-value replacement."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from blinker import Signal

type StateHandler[T] = Callable[[T, int], None]


class StateCell[T]:
    """Holds one immutable value; subscribers hear about every replacement.

    Values are never mutated in place. Readers that kept a previous value
    still hold a stable snapshot after ``set`` or ``update``.
    """

    def __init__(self, name: str, value: T) -> None:
        self.name = name
        self._value = value
        self._version = 0
        self._changed = Signal(f"a2ui_chat.state.{name}")

    def __call__(self) -> T:
        return self._value

    def __repr__(self) -> str:
        return f"StateCell({self.name!r}, version={self._version}, value={self._value!r})"

    @property
    def value(self) -> T:
        return self._value

    @property
    def version(self) -> int:
        return self._version

    def set(self, value: T) -> None:
        self._value = value
        self._version += 1
        self._changed.send(self, value=value, version=self._version)

    def update(self, fn: Callable[[T], T]) -> None:
        self.set(fn(self._value))

    def subscribe(self, handler: StateHandler[T]) -> Callable[[], None]:
        def _receiver(sender: Any, *, value: T, version: int) -> None:
            handler(value, version)

        self._changed.connect(_receiver, sender=self, weak=False)
        return lambda: self._changed.disconnect(_receiver, sender=self)
