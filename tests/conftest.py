from __future__ import annotations

import copy
from typing import Any

import pytest

from slack_rtm.api import RtmStart
from slack_rtm.session import Session

RTM_PAYLOAD: dict[str, Any] = {
    "ok": True,
    "url": "wss://rtm.example.test/websocket/abc",
    "self": {"id": "U0BOT", "name": "relay"},
    "team": {"id": "T1", "domain": "acme"},
    "bots": [{"id": "B1", "name": "helper"}],
    "channels": [{"id": "C1", "name": "general"}, {"id": "C2", "name": "random"}],
    "groups": [{"id": "G1", "name": "secret"}],
    "users": [{"id": "U1", "name": "alice"}, {"id": "U2", "name": "bob"}],
    "ims": [{"id": "D1", "user": "U1"}],
}


class FakeTransport:
    """In-memory transport: opens, replays `frames`, then closes."""

    def __init__(self) -> None:
        self.frames: list[str | bytes] = []
        self.sent: list[str] = []
        self.closed = False
        self.url: str | None = None
        self.close_reason: Any = "remote closed"

    async def run(self, url: str, connection: Any) -> None:
        self.url = url
        await connection.on_open("fake-socket")
        for frame in self.frames:
            if self.closed:
                break
            await connection.on_text(frame)
        await connection.on_close(self.close_reason)

    async def send_text(self, socket: Any, text: str) -> None:
        assert socket == "fake-socket"
        self.sent.append(text)

    async def close(self, socket: Any) -> None:
        self.closed = True


@pytest.fixture
def rtm_payload() -> dict[str, Any]:
    return copy.deepcopy(RTM_PAYLOAD)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def session(rtm_payload: dict[str, Any], transport: FakeTransport) -> Session:
    return Session.from_rtm(
        RtmStart.from_payload(rtm_payload),
        socket="fake-socket",
        client=transport,
        token="xoxb-test",  # noqa: S106
    )
