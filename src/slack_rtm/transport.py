"""Socket transports for the RTM connection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from loguru import logger
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed


@dataclass(frozen=True)
class CloseReason:
    """Why a socket terminated."""

    code: int | None = None
    reason: str = ""
    error: BaseException | None = None

    @property
    def clean(self) -> bool:
        return self.error is None and self.code in (None, 1000, 1001)


class ConnectionCallbacks(Protocol):
    """Events a transport delivers to the connection that owns it."""

    async def on_open(self, socket: Any) -> None: ...

    async def on_text(self, raw: str | bytes) -> None: ...

    def on_ping(self, data: bytes) -> bytes: ...

    async def on_close(self, reason: Any) -> Any: ...


class Transport(Protocol):
    """Owns the socket: opens it, feeds frames to the connection, and writes text frames."""

    async def run(self, url: str, connection: ConnectionCallbacks) -> None: ...

    async def send_text(self, socket: Any, text: str) -> None: ...

    async def close(self, socket: Any) -> None: ...

class WebsocketTransport:
    """Transport backed by the `websockets` asyncio client.

    Control-frame pings are answered by `websockets` itself with the same
    payload, so `ConnectionCallbacks.on_ping` is never called from here.
    """

    def __init__(self, *, open_timeout: float | None = 10.0, max_size: int | None = 2**22) -> None:
        self.open_timeout = open_timeout
        self.max_size = max_size

    async def run(self, url: str, connection: ConnectionCallbacks) -> None:
        logger.debug("transport.websocket.connect url={}", url)
        async with connect(url, open_timeout=self.open_timeout, max_size=self.max_size) as socket:
            await connection.on_open(socket)
            reason = await self._receive(socket, connection)
        await connection.on_close(reason)

    async def send_text(self, socket: ClientConnection, text: str) -> None:
        await socket.send(text)

    async def close(self, socket: ClientConnection) -> None:
        await socket.close()

    @staticmethod
    async def _receive(socket: ClientConnection, connection: ConnectionCallbacks) -> CloseReason:
        try:
            async for raw in socket:
                await connection.on_text(raw)
        except ConnectionClosed as exc:
            logger.debug("transport.websocket.closed_with_error error={}", exc)
            return CloseReason(code=socket.close_code, reason=socket.close_reason or "", error=exc)
        return CloseReason(code=socket.close_code, reason=socket.close_reason or "")
