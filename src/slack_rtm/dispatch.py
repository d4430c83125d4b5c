"""Inbound frame decoding and dispatch."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from loguru import logger

from slack_rtm.errors import FrameDecodeError
from slack_rtm.handler import SlackHandler
from slack_rtm.session import Session
from slack_rtm.types import Envelope, HostState

FRAME_TERMINATOR = "\x00"


@dataclass(frozen=True)
class DispatchResult:
    slack: Session
    state: HostState


def decode_frame(raw: str | bytes) -> dict[str, Any]:
    """Strip a trailing NUL terminator and decode the frame as a JSON object."""

    if isinstance(raw, bytes):
        body = raw.split(FRAME_TERMINATOR.encode(), 1)[0]
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FrameDecodeError(f"frame is not valid UTF-8: {exc}", body.decode("utf-8", errors="replace")) from exc
    else:
        text = raw.split(FRAME_TERMINATOR, 1)[0]
    try:
        payload = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise FrameDecodeError(f"invalid JSON frame: {exc}", text) from exc
    if not isinstance(payload, dict):
        raise FrameDecodeError(f"frame is not a JSON object: {type(payload).__name__}", text)
    return payload


def apply_event(message: Envelope, slack: Session) -> Session:
    """Fold one inbound event into the session.

    No event type changes the session yet; this is the single place where
    such updates belong.
    """

    return slack


class FrameDispatcher:
    """Decode frames and hand typed envelopes to the host handler."""

    def __init__(self, handler: SlackHandler) -> None:
        self.handler = handler

    async def dispatch(self, raw: str | bytes, slack: Session, state: HostState) -> DispatchResult:
        message = decode_frame(raw)
        if "type" not in message:
            logger.trace("dispatch.drop_untyped keys={}", sorted(message))
            return DispatchResult(slack=slack, state=state)

        slack = apply_event(message, slack)
        state = await self.handler.handle_message(message, slack, state)
        return DispatchResult(slack=slack, state=state)
