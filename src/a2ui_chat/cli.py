"""a2ui-chat command line interface."""

from __future__ import annotations

import asyncio
import shlex
from typing import Any

import typer
from loguru import logger

from .config import Settings, get_settings
from .coordinator import TurnCoordinator
from .errors import ConfigurationError, TransportError
from .logging_utils import configure_logging
from .render import Renderer
from .rendering import SurfaceStore
from .transport import TransportClient
from .types import AgentRole, ClientMessage, utc_now

QUIT_COMMANDS = {"/quit", "/exit"}

app = typer.Typer(name="a2ui-chat", help="Chat with an A2UI agent from the terminal.", add_completion=False)


def build_transport(settings: Settings) -> TransportClient:
    return TransportClient.from_settings(settings)


def user_action(name: str, surface_id: str | None = None, context: dict[str, Any] | None = None) -> dict[str, Any]:
    """Client event reporting that the user triggered a named action."""
    action: dict[str, Any] = {
        "name": name,
        "timestamp": utc_now().isoformat(),
        "context": context or {},
    }
    if surface_id:
        action["surfaceId"] = surface_id
    return {"userAction": action}


def _load_settings(agent_url: str | None, catalogs: list[str] | None, verbose: bool) -> Settings:
    try:
        settings = get_settings(agent_url=agent_url, supported_catalog_uris=catalogs or None)
    except ConfigurationError as exc:
        Renderer().error(str(exc))
        raise typer.Exit(2) from exc
    configure_logging(profile="chat", level="DEBUG" if verbose else settings.log_level)
    return settings


def _agent_role(settings: Settings) -> AgentRole:
    return AgentRole(display_name=settings.agent_name, icon_ref=settings.agent_icon)


async def _send_once(settings: Settings, message: ClientMessage, renderer: Renderer) -> None:
    store = SurfaceStore()
    async with build_transport(settings) as transport:
        coordinator = TurnCoordinator(transport, store, agent_role=_agent_role(settings), events=store.events)
        try:
            await coordinator.send_turn(message)
        finally:
            coordinator.close()
    renderer.agent_turn(coordinator.history()[-1], settings.agent_name)
    if coordinator.surfaces():
        renderer.surfaces(coordinator.surfaces())
    renderer.info(f"[dim]context: {coordinator.context_id() or '-'}[/dim]")


async def _chat_loop(settings: Settings, renderer: Renderer) -> None:
    store = SurfaceStore()
    async with build_transport(settings) as transport:
        coordinator = TurnCoordinator(transport, store, agent_role=_agent_role(settings), events=store.events)
        renderer.welcome(settings.endpoint_url)
        try:
            while True:
                try:
                    raw = (await renderer.get_user_input()).strip()
                except (EOFError, KeyboardInterrupt):
                    break
                if not raw:
                    continue
                if raw in QUIT_COMMANDS:
                    break
                if raw == "/surfaces":
                    renderer.surfaces(coordinator.surfaces())
                    continue
                if raw == "/history":
                    renderer.history(coordinator.history(), settings.agent_name)
                    continue
                try:
                    if raw.startswith("/action"):
                        args = shlex.split(raw)[1:]
                        if not args:
                            renderer.error("usage: /action NAME [SURFACE_ID]")
                            continue
                        await store.dispatch(user_action(args[0], args[1] if len(args) > 1 else None))
                    else:
                        await coordinator.send_turn(raw)
                except TransportError as exc:
                    renderer.error(exc.message)
                    continue
                renderer.agent_turn(coordinator.history()[-1], settings.agent_name)
        finally:
            coordinator.close()
    renderer.info("Goodbye!")


@app.command()
def send(
    message: str = typer.Argument(..., help="Message text to send"),
    agent_url: str | None = typer.Option(None, "--agent-url", "-u", help="Agent base URL"),
    catalogs: list[str] | None = typer.Option(  # noqa: B008
        None, "--catalog", "-c", help="Supported catalog URI (repeatable)"
    ),
    action: bool = typer.Option(False, "--action", help="Send MESSAGE as a named user action"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Send one message and print the agent's reply."""

    settings = _load_settings(agent_url, catalogs, verbose)
    renderer = Renderer()
    payload: ClientMessage = user_action(message) if action else message
    try:
        asyncio.run(_send_once(settings, payload, renderer))
    except TransportError as exc:
        logger.debug("cli.send_failed status={}", exc.status_code)
        renderer.error(exc.message)
        raise typer.Exit(1) from exc


@app.command()
def chat(
    agent_url: str | None = typer.Option(None, "--agent-url", "-u", help="Agent base URL"),
    catalogs: list[str] | None = typer.Option(  # noqa: B008
        None, "--catalog", "-c", help="Supported catalog URI (repeatable)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Start an interactive chat session."""

    settings = _load_settings(agent_url, catalogs, verbose)
    asyncio.run(_chat_loop(settings, Renderer()))
