"""Slack Web API calls used by the RTM client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
from loguru import logger

from slack_rtm.config import DEFAULT_API_BASE_URL, Settings
from slack_rtm.errors import ConnectTimeoutError, HandshakeError, NameResolutionError
from slack_rtm.types import Entity

_NAME_RESOLUTION_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo",
    "temporary failure in name resolution",
    "no address associated with hostname",
)


@dataclass(frozen=True)
class RtmStart:
    """Handshake payload returned by `rtm.start`."""

    url: str
    self_: Entity
    team: Entity
    bots: list[Entity] = field(default_factory=list)
    channels: list[Entity] = field(default_factory=list)
    groups: list[Entity] = field(default_factory=list)
    users: list[Entity] = field(default_factory=list)
    ims: list[Entity] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> RtmStart:
        url = payload.get("url")
        if not url:
            raise HandshakeError("rtm.start response has no websocket url")
        return cls(
            url=url,
            self_=payload.get("self") or {},
            team=payload.get("team") or {},
            bots=list(payload.get("bots") or []),
            channels=list(payload.get("channels") or []),
            groups=list(payload.get("groups") or []),
            users=list(payload.get("users") or []),
            ims=list(payload.get("ims") or []),
        )


def _is_name_resolution_failure(exc: httpx.ConnectError) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in _NAME_RESOLUTION_MARKERS)


class SlackWebApi:
    """Thin async client for the two Web API methods the RTM client needs.

    An `http_client` may be shared across calls; without one, each call opens
    and closes its own `httpx.AsyncClient`.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        connect_timeout: float = 10.0,
        api_timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.connect_timeout = connect_timeout
        self.api_timeout = api_timeout
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Settings, *, http_client: httpx.AsyncClient | None = None) -> SlackWebApi:
        return cls(
            base_url=settings.api_base_url,
            connect_timeout=settings.connect_timeout,
            api_timeout=settings.api_timeout,
            http_client=http_client,
        )

    async def rtm_start(self, token: str) -> RtmStart:
        """Call `rtm.start` and return the websocket endpoint plus bootstrap entities."""

        try:
            payload = await self._post("rtm.start", {"token": token}, timeout=self.connect_timeout)
        except httpx.ConnectTimeout as exc:
            raise ConnectTimeoutError() from exc
        except httpx.ConnectError as exc:
            if _is_name_resolution_failure(exc):
                raise NameResolutionError() from exc
            raise HandshakeError(str(exc) or type(exc).__name__) from exc
        except httpx.HTTPError as exc:
            raise HandshakeError(str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise HandshakeError(f"rtm.start returned invalid JSON: {exc}") from exc

        if not payload.get("ok"):
            raise HandshakeError(str(payload.get("error") or "rtm.start failed"))
        rtm = RtmStart.from_payload(payload)
        logger.debug(
            "api.rtm_start users={} channels={} ims={}",
            len(rtm.users),
            len(rtm.channels),
            len(rtm.ims),
        )
        return rtm

    async def im_open(self, token: str, user_id: str) -> dict[str, Any]:
        """Call `im.open` for `user_id`. Transport errors propagate as `httpx.HTTPError`."""

        return await self._post("im.open", {"token": token, "user": user_id}, timeout=self.api_timeout)

    async def _post(self, method: str, form: dict[str, str], *, timeout: float | None) -> dict[str, Any]:
        url = f"{self.base_url}/{method}"
        if self._http_client is not None:
            response = await self._http_client.post(url, data=form, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(url, data=form)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"{method} response is not a JSON object")
        return payload
