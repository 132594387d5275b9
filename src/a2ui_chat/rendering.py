"""Rendering processor contract and an in-memory surface store."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from .errors import A2UIChatError
from .events import CompletionSink, UIEvent, UIEventBus
from .types import ClientMessage, CommandKind, RenderCommand

ROOT_PATH = "/"


@runtime_checkable
class RenderingProcessor(Protocol):
    """What the turn coordinator needs from a surface-painting engine."""

    def get_surfaces(self) -> Mapping[str, Any]: ...

    def process_messages(self, commands: Sequence[RenderCommand]) -> None: ...


@dataclass(frozen=True)
class Surface:
    """Renderable state of one named surface."""

    surface_id: str
    root: str | None = None
    styles: dict[str, Any] = field(default_factory=dict)
    components: dict[str, dict[str, Any]] = field(default_factory=dict)
    data_model: dict[str, Any] = field(default_factory=dict)

    @property
    def started(self) -> bool:
        return self.root is not None


class SurfaceStore:
    """Applies rendering commands to an in-memory surface mapping.

    Does not paint anything; it keeps the state a painter would need and
    exposes the client event stream rendered surfaces publish into.
    """

    def __init__(self, events: UIEventBus | None = None) -> None:
        self.events = events or UIEventBus()
        self._surfaces: dict[str, Surface] = {}

    def get_surfaces(self) -> Mapping[str, Surface]:
        return MappingProxyType(self._surfaces)

    def process_messages(self, commands: Sequence[RenderCommand]) -> None:
        for command in commands:
            surface_id = command.surface_id
            if surface_id is None:
                logger.warning("surface.skipped kind={} reason=missing_surface_id", command.kind.value)
                continue
            match command.kind:
                case CommandKind.BEGIN_RENDERING:
                    self._begin_rendering(surface_id, command.body)
                case CommandKind.SURFACE_UPDATE:
                    self._surface_update(surface_id, command.body)
                case CommandKind.DATA_MODEL_UPDATE:
                    self._data_model_update(surface_id, command.body)
                case CommandKind.DELETE_SURFACE:
                    self._surfaces.pop(surface_id, None)
                    logger.debug("surface.deleted surface_id={}", surface_id)

    async def dispatch(self, message: ClientMessage) -> list[Any]:
        """Publish one client event and wait for its turn to finish."""
        if not self.events.has_subscribers:
            raise A2UIChatError("no coordinator is listening for client events")
        event = UIEvent(message=message, completion=CompletionSink())
        await self.events.publish(event)
        return await event.completion.wait()

    def _current(self, surface_id: str) -> Surface:
        return self._surfaces.get(surface_id) or Surface(surface_id=surface_id)

    def _begin_rendering(self, surface_id: str, body: Mapping[str, Any]) -> None:
        surface = self._current(surface_id)
        styles = body.get("styles")
        self._surfaces[surface_id] = replace(
            surface,
            root=body.get("root"),
            styles=dict(styles) if isinstance(styles, Mapping) else surface.styles,
        )
        logger.debug("surface.begin surface_id={} root={}", surface_id, body.get("root"))

    def _surface_update(self, surface_id: str, body: Mapping[str, Any]) -> None:
        raw_components = body.get("components")
        if not isinstance(raw_components, list | tuple):
            logger.warning("surface.component_skipped surface_id={} reason=components_not_a_list", surface_id)
            return
        surface = self._current(surface_id)
        components = dict(surface.components)
        for component in raw_components:
            if not isinstance(component, Mapping) or "id" not in component:
                logger.warning("surface.component_skipped surface_id={}", surface_id)
                continue
            components[str(component["id"])] = dict(component)
        self._surfaces[surface_id] = replace(surface, components=components)

    def _data_model_update(self, surface_id: str, body: Mapping[str, Any]) -> None:
        raw_contents = body.get("contents")
        if not isinstance(raw_contents, list | tuple):
            logger.warning("surface.data_skipped surface_id={} reason=contents_not_a_list", surface_id)
            return
        values: dict[str, Any] = {}
        for entry in raw_contents:
            if not isinstance(entry, Mapping) or "key" not in entry:
                logger.warning("surface.data_skipped surface_id={} reason=entry_without_key", surface_id)
                continue
            try:
                values[str(entry["key"])] = decode_value(entry)
            except ValueError as exc:
                logger.warning("surface.data_skipped surface_id={} key={} reason={}", surface_id, entry["key"], exc)
        if not values:
            return
        surface = self._current(surface_id)
        segments = [segment for segment in str(body.get("path") or ROOT_PATH).split("/") if segment]
        self._surfaces[surface_id] = replace(surface, data_model=_merged(surface.data_model, segments, values))


def decode_value(entry: Mapping[str, Any]) -> Any:
    """Convert one typed data model entry to a plain Python value.

    Raises:
        ValueError: If a ``valueMap`` is not a list
    """
    if "valueString" in entry:
        return entry["valueString"]
    if "valueNumber" in entry:
        return entry["valueNumber"]
    if "valueBoolean" in entry:
        return entry["valueBoolean"]
    if "valueMap" in entry:
        items = entry["valueMap"]
        if not isinstance(items, list | tuple):
            raise ValueError("valueMap_not_a_list")
        return {
            str(item["key"]): decode_value(item)
            for item in items
            if isinstance(item, Mapping) and "key" in item
        }
    return None


def _merged(model: Mapping[str, Any], segments: list[str], values: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of ``model`` with ``values`` written under the node at ``segments``."""
    updated = dict(model)
    if not segments:
        updated.update(values)
        return updated
    head, *rest = segments
    child = model.get(head)
    updated[head] = _merged(child if isinstance(child, Mapping) else {}, rest, values)
    return updated

