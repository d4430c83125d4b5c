"""RTM connection lifecycle.

A `Connection` performs the `rtm.start` handshake, opens the websocket,
builds the `Session` and then feeds every inbound frame to the host
`SlackHandler`, one at a time, until the socket terminates.

    class Bot(SlackHandler):
        async def handle_message(self, message, slack, state):
            if message["type"] == "message" and message.get("text") == "Hi":
                await send_message(f"Hi has been said {state} times", message["channel"], slack)
                state += 1
            return state

    asyncio.run(start(Bot(), "API_TOKEN", 1))
"""

from __future__ import annotations

import asyncio
from enum import StrEnum
from typing import Any

from loguru import logger

from slack_rtm.api import RtmStart, SlackWebApi
from slack_rtm.config import Settings, get_settings
from slack_rtm.dispatch import FrameDispatcher
from slack_rtm.errors import FrameDecodeError, HandshakeError
from slack_rtm.handler import CloseResult, SlackHandler
from slack_rtm.session import Session
from slack_rtm.transport import Transport, WebsocketTransport
from slack_rtm.types import HostState

class ConnectionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class Connection:
    """One RTM connection and the host state threaded through its hooks.

    Hook calls are serialized by a lock, so `on_info` may be called from any
    task, but not from inside a hook of the same connection.
    """

    def __init__(
        self,
        handler: SlackHandler,
        *,
        transport: Transport | None = None,
        api: SlackWebApi | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.handler = handler
        self.transport: Transport = transport or WebsocketTransport()
        self.api = api or SlackWebApi.from_settings(settings or get_settings())
        self.state = ConnectionState.DISCONNECTED
        self.slack: Session | None = None
        self.host_state: HostState = None
        self.result: Any = None
        self._rtm: RtmStart | None = None
        self._token: str | None = None
        self._dispatcher = FrameDispatcher(handler)
        self._hook_lock = asyncio.Lock()
        self._logger = logger.bind(connection="-")

    async def start(self, token: str, initial_state: HostState = None) -> RtmStart:
        """Perform the handshake. On failure the connection stays disconnected."""

        if self.state is not ConnectionState.DISCONNECTED:
            raise RuntimeError(f"connection already {self.state}")
        try:
            rtm = await self.api.rtm_start(token)
        except HandshakeError as exc:
            self._logger.warning("rtm.handshake_failed error={}", exc)
            raise
        self._rtm = rtm
        self._token = token
        self.host_state = initial_state
        self.state = ConnectionState.CONNECTING
        self._logger.info("rtm.connecting url={}", rtm.url)
        return rtm

    async def run(self) -> Any:
        """Drive the transport until the socket terminates and return the terminal value."""

        if self.state is not ConnectionState.CONNECTING or self._rtm is None:
            raise RuntimeError(f"cannot run a connection that is {self.state}")
        await self.transport.run(self._rtm.url, self)
        if self.state is not ConnectionState.CLOSED:
            await self.on_close(None)
        return self.result

    async def on_open(self, socket: Any) -> None:
        if self._rtm is None or self._token is None:
            raise RuntimeError("socket opened before handshake")
        self.slack = Session.from_rtm(self._rtm, socket=socket, client=self.transport, token=self._token, api=self.api)
        self.state = ConnectionState.CONNECTED
        self._logger = logger.bind(connection=self.slack.label)
        self._logger.info(
            "rtm.connected self={} users={} channels={}",
            self.slack.me.get("name", "<unknown>"),
            len(self.slack.users),
            len(self.slack.channels),
        )
        async with self._hook_lock:
            self.host_state = await self.handler.handle_connect(self.slack, self.host_state)

    async def on_text(self, raw: str | bytes) -> None:
        if self.slack is None or self.state is not ConnectionState.CONNECTED:
            self._logger.warning("rtm.frame_before_open state={}", self.state)
            return
        async with self._hook_lock:
            try:
                result = await self._dispatcher.dispatch(raw, self.slack, self.host_state)
            except FrameDecodeError as exc:
                self._logger.warning("rtm.frame_decode_failed error={} raw={}", exc, exc.raw[:200])
                self.host_state = await self.handler.handle_info(exc, self.slack, self.host_state)
                return
            self.slack, self.host_state = result.slack, result.state

    async def close(self) -> None:
        """Ask the transport to close the socket; `handle_close` follows."""

        if self.slack is None:
            return
        await self.transport.close(self.slack.socket)

    def on_ping(self, data: bytes) -> bytes:
        return data

    async def on_info(self, message: Any) -> None:
        """Deliver an out-of-band message to `handle_info`."""

        if self.slack is None or self.state is not ConnectionState.CONNECTED:
            self._logger.debug("rtm.info_dropped state={}", self.state)
            return
        async with self._hook_lock:
            self.host_state = await self.handler.handle_info(message, self.slack, self.host_state)

    async def on_close(self, reason: Any) -> Any:
        if self.state is ConnectionState.CLOSED:
            return self.result
        slack = self.slack
        self.state = ConnectionState.CLOSED
        self._logger.info("rtm.closed reason={}", reason)
        if slack is None:
            self.result = CloseResult(ok=False, state=self.host_state, reason=reason)
            return self.result
        async with self._hook_lock:
            self.result = await self.handler.handle_close(reason, slack, self.host_state)
        self.slack = None
        return self.result


async def start(
    handler: SlackHandler,
    token: str,
    initial_state: HostState = None,
    *,
    transport: Transport | None = None,
    api: SlackWebApi | None = None,
    settings: Settings | None = None,
) -> Any:
    """Connect `handler` to Slack and run until the socket closes."""

    connection = Connection(handler, transport=transport, api=api, settings=settings)
    await connection.start(token, initial_state)
    return await connection.run()
