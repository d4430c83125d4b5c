"""Name and id lookups over a session.

Forward lookups (name to id) return `None` on a miss, since callers may
reference users or channels the session has not cached. Reverse lookups
(id to name) expect ids that came from session data and raise
`UnknownEntityError` on a miss.
"""

from __future__ import annotations

from collections.abc import Iterable

from slack_rtm.errors import UnknownEntityError
from slack_rtm.references import ChannelName, Reference, UserName, parse_reference
from slack_rtm.session import Session
from slack_rtm.types import Entity

USER_ID_PREFIX = "U"
CHANNEL_ID_PREFIX = "C"
DIRECT_MESSAGE_ID_PREFIX = "D"


def _find_id(entities: Iterable[Entity], key: str, value: str) -> str | None:
    for entity in entities:
        if entity.get(key) == value:
            return entity["id"]
    return None


def lookup_user_id(ref: str | Reference, slack: Session) -> str | None:
    """Turn `"@USER_NAME"` into a user id (`"U…"`). Other references pass through."""

    ref = parse_reference(ref)
    if isinstance(ref, UserName):
        return _find_id(slack.users.values(), "name", ref.name)
    return str(ref)


def lookup_direct_message_id(ref: str | Reference, slack: Session) -> str | None:
    """Turn `"@USER_NAME"` or a user id into the id of its direct message channel.

    `None` means no direct message channel has been opened with that user yet.
    """

    user_id = lookup_user_id(ref, slack)
    if user_id is None:
        return None
    return _find_id(slack.ims.values(), "user", user_id)


def lookup_channel_id(ref: str | Reference, slack: Session) -> str | None:
    """Turn `"#CHANNEL_NAME"` into a channel id (`"C…"`). Other references pass through."""

    ref = parse_reference(ref)
    if isinstance(ref, ChannelName):
        return _find_id(slack.channels.values(), "name", ref.name)
    return str(ref)


def lookup_user_name(entity_id: str, slack: Session) -> str:
    """Turn a user id (`"U…"`) or direct message id (`"D…"`) into `"@USER_NAME"`."""

    if entity_id.startswith(DIRECT_MESSAGE_ID_PREFIX):
        direct_message = _require(slack.ims, entity_id, "direct message")
        return lookup_user_name(direct_message["user"], slack)
    if entity_id.startswith(USER_ID_PREFIX):
        user = _require(slack.users, entity_id, "user")
        return f"@{user['name']}"
    raise UnknownEntityError(f"not a user or direct message id: {entity_id}")


def lookup_channel_name(channel_id: str, slack: Session) -> str:
    """Turn a channel id (`"C…"`) into `"#CHANNEL_NAME"`."""

    if not channel_id.startswith(CHANNEL_ID_PREFIX):
        raise UnknownEntityError(f"not a channel id: {channel_id}")
    channel = _require(slack.channels, channel_id, "channel")
    return f"#{channel['name']}"


def _require(index: dict[str, Entity], entity_id: str, kind: str) -> Entity:
    entity = index.get(entity_id)
    if entity is None:
        raise UnknownEntityError(f"unknown {kind} id: {entity_id}")
    return entity
