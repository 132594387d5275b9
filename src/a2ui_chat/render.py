"""Terminal renderer for a2ui-chat."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .types import CommandKind, DataPart, TextPart, Turn, TurnStatus


class Renderer:
    """CLI renderer using Rich for terminal output."""

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or Console()
        self._prompt_session: PromptSession[str] | None = None

    def info(self, message: str) -> None:
        """Render an info message."""
        self.console.print(message)

    def error(self, message: str) -> None:
        """Render an error message."""
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def welcome(self, agent_url: str) -> None:
        """Render welcome message and chat commands."""
        self.console.print("[bold blue]a2ui-chat[/bold blue] - talk to an A2UI agent")
        self.console.print(f"[bold]Agent:[/bold] [cyan]{escape(agent_url)}[/cyan]")
        self.console.print("[dim]/surfaces, /history, /action NAME [SURFACE_ID], /quit[/dim]")

    def agent_turn(self, turn: Turn, name: str) -> None:
        """Render the agent side of one completed turn."""
        if turn.status is TurnStatus.PENDING:
            self.console.print(f"[bold yellow]{escape(name)}:[/bold yellow] [dim](waiting)[/dim]")
            return
        if not turn.contents:
            self.console.print(f"[bold yellow]{escape(name)}:[/bold yellow] [dim](no content)[/dim]")
            return
        for content in turn.contents:
            self.console.print(f"[bold yellow]{escape(name)}:[/bold yellow] {self._describe(content.part)}")

    def history(self, turns: Iterable[Turn], agent_name: str) -> None:
        """Render the turn history as a table."""
        table = Table("When", "Who", "Status", "Content", show_lines=False)
        for turn in turns:
            who = agent_name if turn.is_agent else "You"
            body = " | ".join(self._describe(content.part) for content in turn.contents) or "[dim]-[/dim]"
            table.add_row(turn.created.strftime("%H:%M:%S"), who, turn.status.value, body)
        self.console.print(table)

    def surfaces(self, surfaces: Mapping[str, Any]) -> None:
        """Render a summary of the current surfaces."""
        if not surfaces:
            self.console.print("[dim](no surfaces)[/dim]")
            return
        table = Table("Surface", "Root", "Components", "Data keys")
        for surface_id, surface in surfaces.items():
            components = getattr(surface, "components", {})
            data_model = getattr(surface, "data_model", {})
            table.add_row(
                surface_id,
                str(getattr(surface, "root", None) or "-"),
                str(len(components)),
                ", ".join(sorted(data_model)) or "-",
            )
        self.console.print(table)

    async def get_user_input(self) -> str:
        """Prompt user for input."""
        if self._prompt_session is None:
            self._prompt_session = PromptSession()
        with patch_stdout(raw=True):
            return await self._prompt_session.prompt_async("> ")

    @staticmethod
    def _describe(part: TextPart | DataPart) -> str:
        if isinstance(part, TextPart):
            return escape(part.text)
        begin = part.data.get(CommandKind.BEGIN_RENDERING.value)
        surface_id = begin.get("surfaceId") if isinstance(begin, Mapping) else None
        return f"[dim][surface {escape(str(surface_id or '?'))}][/dim]"
