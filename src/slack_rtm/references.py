"""Destination references.

Callers name destinations with short strings: `#general` for a channel,
`@alice` for a user, anything else for a raw Slack id (`C024BE91L`,
`D024BE91L`, ...). The string is parsed once at the API boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

USER_PREFIX = "@"
CHANNEL_PREFIX = "#"


@dataclass(frozen=True)
class UserName:
    name: str

    def __str__(self) -> str:
        return f"{USER_PREFIX}{self.name}"


@dataclass(frozen=True)
class ChannelName:
    name: str

    def __str__(self) -> str:
        return f"{CHANNEL_PREFIX}{self.name}"


@dataclass(frozen=True)
class RawId:
    id: str

    def __str__(self) -> str:
        return self.id


Reference: TypeAlias = UserName | ChannelName | RawId


def parse_reference(raw: str | Reference) -> Reference:
    if isinstance(raw, (UserName, ChannelName, RawId)):
        return raw
    if raw.startswith(USER_PREFIX):
        return UserName(raw[len(USER_PREFIX) :])
    if raw.startswith(CHANNEL_PREFIX):
        return ChannelName(raw[len(CHANNEL_PREFIX) :])
    return RawId(raw)
