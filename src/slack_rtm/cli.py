"""Command line entry points."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import typer
from loguru import logger
from websockets.exceptions import WebSocketException

from slack_rtm.config import Settings, get_settings
from slack_rtm.connection import start
from slack_rtm.delivery import Delivery, send_message
from slack_rtm.errors import ChannelNotFoundError, ConfigurationError, HandshakeError
from slack_rtm.handler import CloseResult, SlackHandler
from slack_rtm.logging_utils import configure_logging
from slack_rtm.session import Session
from slack_rtm.types import Envelope


class ListenHandler(SlackHandler):
    """Log every envelope until the socket closes."""

    async def handle_connect(self, slack: Session, state: Any) -> Any:
        logger.info("listen.connected team={} self={}", slack.label, slack.me.get("name", ""))
        return state

    async def handle_message(self, message: Envelope, slack: Session, state: int) -> int:
        typer.echo(json.dumps(message, ensure_ascii=False))
        return state + 1

    async def handle_close(self, reason: Any, slack: Session, state: int) -> CloseResult:
        return CloseResult(ok=True, state=state, reason=reason)


class SayHandler(SlackHandler):
    """Deliver one message on connect, then close the socket."""

    def __init__(self, destination: str, text: str) -> None:
        self.destination = destination
        self.text = text

    async def handle_connect(self, slack: Session, state: dict[str, Any]) -> dict[str, Any]:
        try:
            state["delivery"] = await send_message(self.text, self.destination, slack)
        except ChannelNotFoundError as exc:
            state["error"] = str(exc)
        await slack.client.close(slack.socket)
        return state

    async def handle_close(self, reason: Any, slack: Session, state: dict[str, Any]) -> dict[str, Any]:
        return state


def _load_settings(token: str | None) -> Settings:
    settings = get_settings(token=token)
    configure_logging(profile=settings.log_profile, level=settings.log_level)
    return settings


def _run(handler: SlackHandler, settings: Settings, initial_state: Any) -> Any:
    try:
        return asyncio.run(start(handler, settings.require_token(), initial_state, settings=settings))
    except (ConfigurationError, HandshakeError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc
    except (OSError, WebSocketException) as exc:
        typer.echo(f"error: websocket connection failed: {exc}", err=True)
        raise typer.Exit(1) from exc


def listen(
    token: str | None = typer.Option(None, "--token", "-t", help="Slack API token (defaults to SLACK_RTM_TOKEN)"),  # noqa: B008
) -> None:
    """Connect and print every inbound envelope as JSON."""

    settings = _load_settings(token)
    result = _run(ListenHandler(), settings, 0)
    typer.echo(f"closed after {result.state} envelopes", err=True)


def say(
    destination: str = typer.Argument(..., help="#channel, @user or a raw channel id"),
    text: str = typer.Argument(..., help="Message text"),
    token: str | None = typer.Option(None, "--token", "-t", help="Slack API token (defaults to SLACK_RTM_TOKEN)"),  # noqa: B008
) -> None:
    """Connect, deliver one message, and disconnect."""

    settings = _load_settings(token)
    result = _run(SayHandler(destination, text), settings, {})
    if isinstance(result, CloseResult):
        typer.echo("error: connection closed before it opened", err=True)
        raise typer.Exit(1)
    if "error" in result:
        typer.echo(f"error: {result['error']}", err=True)
        raise typer.Exit(1)
    if result.get("delivery") is not Delivery.SENT:
        typer.echo(f"error: delivery to {destination} failed", err=True)
        raise typer.Exit(1)
    typer.echo(f"sent to {destination}")


def create_cli_app() -> typer.Typer:
    app = typer.Typer(name="slack-rtm", help="Slack real time messaging client", add_completion=False)
    app.command("listen")(listen)
    app.command("say")(say)
    return app
