"""Host hook contract for RTM connections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from slack_rtm.session import Session
from slack_rtm.types import Envelope, HostState


@dataclass(frozen=True)
class CloseResult:
    """Default terminal value of a connection."""

    ok: bool
    state: HostState
    reason: Any = None


class SlackHandler:
    """Base class for bots. Override only the hooks you need.

    Every hook receives `slack`, the current `Session`, and `state`, the host
    state threaded through the connection. `handle_connect`, `handle_message`
    and `handle_info` return the next host state. `handle_close` returns the
    connection's terminal value.

    The connection awaits each hook to completion before it reads the next
    frame, so a slow hook delays everything behind it.
    """

    async def handle_connect(self, slack: Session, state: HostState) -> HostState:
        """Called once the socket is open and the session has been built."""
        return state

    async def handle_message(self, message: Envelope, slack: Session, state: HostState) -> HostState:
        """Called for every inbound envelope carrying a `type`.

        The RTM API sends many event types, so match on `message["type"]`
        and let everything else fall through.
        """
        return state

    async def handle_close(self, reason: Any, slack: Session, state: HostState) -> Any:
        """Called when the socket terminates, for any reason."""
        return CloseResult(ok=False, state=state, reason=reason)

    async def handle_info(self, message: Any, slack: Session, state: HostState) -> HostState:
        """Called for out-of-band messages, including frames that failed to decode."""
        return state
