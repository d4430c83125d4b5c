from __future__ import annotations

from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest

from slack_rtm.api import SlackWebApi
from slack_rtm.config import Settings
from slack_rtm.errors import ConnectTimeoutError, HandshakeError, NameResolutionError


def _api(handler: Callable[[httpx.Request], httpx.Response]) -> SlackWebApi:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SlackWebApi(base_url="https://slack.test/api/", http_client=client)


@pytest.mark.asyncio
async def test_rtm_start_returns_bootstrap_payload(rtm_payload: dict[str, Any]) -> None:
    seen: list[tuple[str, dict[str, list[str]]]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((str(request.url), parse_qs(request.content.decode())))
        return httpx.Response(200, json=rtm_payload)

    rtm = await _api(handler).rtm_start("xoxb-test")

    assert seen == [("https://slack.test/api/rtm.start", {"token": ["xoxb-test"]})]
    assert rtm.url == rtm_payload["url"]
    assert rtm.self_["id"] == "U0BOT"
    assert [user["id"] for user in rtm.users] == ["U1", "U2"]


@pytest.mark.asyncio
async def test_rtm_start_maps_connect_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(ConnectTimeoutError, match="Timed out while connecting to the Slack RTM API"):
        await _api(handler).rtm_start("xoxb-test")


@pytest.mark.asyncio
async def test_rtm_start_maps_name_resolution_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("[Errno -2] Name or service not known", request=request)

    with pytest.raises(NameResolutionError, match="Could not connect to the Slack RTM API"):
        await _api(handler).rtm_start("xoxb-test")


@pytest.mark.asyncio
async def test_rtm_start_maps_other_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(HandshakeError, match="connection refused") as exc_info:
        await _api(handler).rtm_start("xoxb-test")
    assert not isinstance(exc_info.value, (ConnectTimeoutError, NameResolutionError))


@pytest.mark.asyncio
async def test_rtm_start_reports_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": False, "error": "not_authed"})

    with pytest.raises(HandshakeError, match="not_authed"):
        await _api(handler).rtm_start("")


@pytest.mark.asyncio
async def test_rtm_start_rejects_non_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(HandshakeError, match="invalid JSON"):
        await _api(handler).rtm_start("xoxb-test")


@pytest.mark.asyncio
async def test_im_open_posts_user() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/im.open"
        assert parse_qs(request.content.decode()) == {"token": ["xoxb-test"], "user": ["U2"]}
        return httpx.Response(200, json={"ok": True, "channel": {"id": "D2"}})

    assert await _api(handler).im_open("xoxb-test", "U2") == {"ok": True, "channel": {"id": "D2"}}


def test_from_settings_copies_endpoints() -> None:
    settings = Settings(token="xoxb-test", api_base_url="https://slack.test/api", connect_timeout=3.0, api_timeout=9.0)  # noqa: S106

    api = SlackWebApi.from_settings(settings)

    assert api.base_url == "https://slack.test/api"
    assert api.connect_timeout == 3.0
    assert api.api_timeout == 9.0
