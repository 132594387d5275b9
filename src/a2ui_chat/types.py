"""Wire parts, rendering commands and turn history models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

A2UI_MIME_TYPE = "application/json+a2ui"

type ClientMessage = str | Mapping[str, Any]


class TextPart(BaseModel):
    """Plain text emitted by the user or the agent."""

    model_config = ConfigDict(frozen=True, extra="allow")

    kind: Literal["text"] = "text"
    text: str
    metadata: dict[str, Any] | None = None


class DataPart(BaseModel):
    """Structured payload; carries UI commands or client events."""

    model_config = ConfigDict(frozen=True, extra="allow")

    kind: Literal["data"] = "data"
    data: dict[str, Any]
    metadata: dict[str, Any] | None = None


Part = Annotated[TextPart | DataPart, Field(discriminator="kind")]

PART_ADAPTER: TypeAdapter[TextPart | DataPart] = TypeAdapter(Part)


def dump_part(part: TextPart | DataPart) -> dict[str, Any]:
    return part.model_dump(mode="json", exclude_none=True)


class CommandKind(StrEnum):
    BEGIN_RENDERING = "beginRendering"
    SURFACE_UPDATE = "surfaceUpdate"
    DATA_MODEL_UPDATE = "dataModelUpdate"
    DELETE_SURFACE = "deleteSurface"


@dataclass(frozen=True)
class RenderCommand:
    """One server-to-client rendering instruction."""

    kind: CommandKind
    body: Any

    def as_message(self) -> dict[str, Any]:
        return {self.kind.value: self.body}

    @property
    def surface_id(self) -> str | None:
        if isinstance(self.body, Mapping):
            surface_id = self.body.get("surfaceId")
            return str(surface_id) if surface_id is not None else None
        return None


class TurnStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class UserRole:
    type: Literal["user"] = "user"


@dataclass(frozen=True)
class AgentRole:
    display_name: str
    icon_ref: str | None = None
    type: Literal["agent"] = "agent"


type Role = UserRole | AgentRole


def new_id() -> str:
    return uuid4().hex


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class Content:
    """One displayable unit inside a turn."""

    part: TextPart | DataPart
    id: str = field(default_factory=new_id)

    @classmethod
    def of_text(cls, text: str) -> Content:
        return cls(part=TextPart(text=text))


@dataclass(frozen=True)
class Turn:
    """One exchange unit in history, authored by the user or the agent."""

    context_id: str
    role: Role
    contents: tuple[Content, ...] = ()
    status: TurnStatus = TurnStatus.PENDING
    id: str = field(default_factory=new_id)
    created: datetime = field(default_factory=utc_now)
    last_updated: datetime = field(default_factory=utc_now)

    @property
    def is_agent(self) -> bool:
        return isinstance(self.role, AgentRole)

    @property
    def text(self) -> str:
        """Concatenated text of every text content."""
        return "\n".join(content.part.text for content in self.contents if isinstance(content.part, TextPart))


@dataclass(frozen=True)
class OutboundRequest:
    """Parts sent to the agent for one turn."""

    parts: tuple[TextPart | DataPart, ...]
