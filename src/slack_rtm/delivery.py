"""Outbound delivery over the RTM socket."""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

import httpx
from loguru import logger

from slack_rtm.api import SlackWebApi
from slack_rtm.errors import ChannelNotFoundError
from slack_rtm.lookups import lookup_channel_id, lookup_direct_message_id, lookup_user_id
from slack_rtm.references import ChannelName, RawId, Reference, UserName, parse_reference
from slack_rtm.session import Session


class Delivery(StrEnum):
    SENT = "sent"
    FAILED = "delivery_failed"


async def send_message(text: str, channel: str | Reference, slack: Session, *, api: SlackWebApi | None = None) -> Delivery:
    """Send `text` to `channel`.

    `channel` may be `"#CHANNEL_NAME"`, `"@USER_NAME"` or any id Slack
    understands. A missing channel raises `ChannelNotFoundError`. When no
    direct message channel exists for a user yet, one is opened through
    `im.open` first; if that fails, `Delivery.FAILED` is returned instead of
    raising.
    """

    ref = parse_reference(channel)
    match ref:
        case ChannelName(name=name):
            channel_id = lookup_channel_id(ref, slack)
            if channel_id is None:
                raise ChannelNotFoundError(f"channel #{name} not found")
            return await send_message(text, RawId(channel_id), slack, api=api)
        case UserName():
            direct_message_id = lookup_direct_message_id(ref, slack)
            if direct_message_id is None:
                direct_message_id = await _open_direct_message(ref, slack, api or slack.api or SlackWebApi())
                if direct_message_id is None:
                    return Delivery.FAILED
            return await send_message(text, RawId(direct_message_id), slack, api=api)
        case RawId(id=channel_id):
            await send_raw(_encode({"type": "message", "text": text, "channel": channel_id}), slack)
            return Delivery.SENT


async def indicate_typing(channel: str, slack: Session) -> None:
    """Notify Slack that the current user is typing in `channel`."""

    await send_raw(_encode({"type": "typing", "channel": channel}), slack)


async def send_ping(slack: Session, data: Mapping[str, Any] | None = None) -> None:
    """Send an RTM ping. Keys in `data` override the base frame."""

    await send_raw(_encode({"type": "ping", **(data or {})}), slack)


async def send_raw(json_text: str, slack: Session) -> None:
    """Write an encoded frame to the session's socket."""

    await slack.client.send_text(slack.socket, json_text)


async def _open_direct_message(ref: UserName, slack: Session, api: SlackWebApi) -> str | None:
    user_id = lookup_user_id(ref, slack)
    if user_id is None:
        logger.warning("delivery.unknown_user user={}", ref)
        return None
    try:
        response = await api.im_open(slack.token, user_id)
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("delivery.im_open_failed user={} error={}", ref, exc)
        return None
    channel = response.get("channel")
    if not response.get("ok") or not isinstance(channel, Mapping) or not channel.get("id"):
        logger.warning("delivery.im_open_rejected user={} error={}", ref, response.get("error"))
        return None
    logger.debug("delivery.im_opened user={} channel={}", ref, channel["id"])
    return str(channel["id"])


def _encode(frame: Mapping[str, Any]) -> str:
    return json.dumps(frame, ensure_ascii=False)
