"""Turn orchestration: one request/response cycle per user turn."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Protocol

from loguru import logger

from .classifier import classify
from .events import UIEvent, UIEventBus
from .logging_utils import turn_scope
from .rendering import RenderingProcessor
from .router import route
from .state import StateCell
from .types import (
    A2UI_MIME_TYPE,
    AgentRole,
    ClientMessage,
    Content,
    DataPart,
    OutboundRequest,
    TextPart,
    Turn,
    TurnStatus,
    UserRole,
    utc_now,
)

type History = tuple[Turn, ...]
type SurfacesSnapshot = Mapping[str, Any]


class Transport(Protocol):
    async def send(self, request: OutboundRequest, context_id: str | None = None) -> dict[str, Any]: ...


def user_part(message: ClientMessage) -> TextPart | DataPart:
    """Wire part carrying the user's message to the agent."""
    if isinstance(message, str):
        return TextPart(text=message)
    return DataPart(data=dict(message), metadata={"mimeType": A2UI_MIME_TYPE})


def user_contents(message: ClientMessage) -> tuple[Content, ...]:
    """History contents for the user's side of a turn.

    Client events only show up when their action carries a name.
    """
    if isinstance(message, str):
        return (Content(part=TextPart(text=message)),)
    action = message.get("userAction")
    label = action.get("name") if isinstance(action, Mapping) else None
    if not label:
        return ()
    return (Content.of_text(str(label)),)


class TurnCoordinator:
    """Owns turn history, the conversation context id and surface snapshots.

    Overlapping ``send_turn`` calls are not rejected. Each cycle completes its
    own agent turn by id, so concurrent turns interleave in call order.
    """

    def __init__(
        self,
        transport: Transport,
        processor: RenderingProcessor,
        *,
        agent_role: AgentRole,
        events: UIEventBus | None = None,
    ) -> None:
        self._transport = transport
        self._processor = processor
        self._agent_role = agent_role
        self.history: StateCell[History] = StateCell("history", ())
        self.context_id: StateCell[str] = StateCell("context_id", "")
        self.surfaces: StateCell[SurfacesSnapshot] = StateCell("surfaces", self._snapshot_surfaces())
        self.stream_open: StateCell[bool] = StateCell("stream_open", False)
        self._unsubscribe: Callable[[], None] | None = None
        if events is not None:
            self._unsubscribe = events.subscribe(self._handle_event)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def send_turn(self, message: ClientMessage) -> None:
        """Run one full cycle for a user message or client event.

        Raises:
            TransportError: The agent call failed. The agent turn stays
                pending and ``stream_open`` stays set.
        """
        now = utc_now()
        context_id = self.context_id()
        user_turn = Turn(
            context_id=context_id,
            role=UserRole(),
            contents=user_contents(message),
            created=now,
            last_updated=now,
        )
        agent_turn = Turn(context_id=context_id, role=self._agent_role, created=now, last_updated=now)
        self.history.update(lambda turns: (*turns, user_turn, agent_turn))
        self.surfaces.set(self._snapshot_surfaces())
        self.stream_open.set(True)

        with turn_scope(agent_turn.id):
            logger.info(
                "turn.sent context_id={} kind={}",
                context_id or "-",
                "text" if isinstance(message, str) else "event",
            )
            envelope = await self._transport.send(OutboundRequest(parts=(user_part(message),)), context_id or None)

            result = envelope.get("result") if isinstance(envelope, Mapping) else None
            new_context_id = result.get("contextId") if isinstance(result, Mapping) else None
            if isinstance(new_context_id, str) and new_context_id:
                self.context_id.set(new_context_id)

            routed = route(classify(result))
            self._processor.process_messages(list(routed.commands))

            completed = replace(
                agent_turn,
                contents=routed.contents,
                status=TurnStatus.COMPLETED,
                last_updated=utc_now(),
            )
            self.history.update(lambda turns: tuple(completed if turn.id == agent_turn.id else turn for turn in turns))
            self.surfaces.set(self._snapshot_surfaces())
            self.stream_open.set(False)
            logger.info(
                "turn.completed commands={} contents={} context_id={}",
                len(routed.commands),
                len(routed.contents),
                self.context_id() or "-",
            )

    async def _handle_event(self, event: UIEvent) -> None:
        try:
            await self.send_turn(event.message)
        except asyncio.CancelledError as exc:
            event.completion.fail(exc)
            raise
        except Exception as exc:
            logger.opt(exception=True).warning("turn.event_failed event_id={}", event.id)
            event.completion.fail(exc)
            return
        event.completion.succeed([])

    def _snapshot_surfaces(self) -> SurfacesSnapshot:
        return MappingProxyType(dict(self._processor.get_surfaces()))
