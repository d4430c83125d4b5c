"""Connection-scoped session state."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from slack_rtm.entities import build_index
from slack_rtm.types import Entity, EntityIndex

if TYPE_CHECKING:
    from slack_rtm.api import RtmStart, SlackWebApi
    from slack_rtm.transport import Transport


@dataclass(frozen=True)
class Session:
    """Snapshot of everything known about one live Slack connection.

    `me` and `team` are the raw handshake entities. The indexes map entity
    ids to entities. `socket` is the live transport handle and `client` the
    transport implementation that writes to it. `api` opens direct message
    channels on demand.
    """

    me: Entity
    team: Entity
    bots: EntityIndex
    channels: EntityIndex
    groups: EntityIndex
    users: EntityIndex
    ims: EntityIndex
    socket: Any = field(repr=False)
    client: Transport = field(repr=False)
    token: str = field(repr=False)
    api: SlackWebApi | None = field(default=None, repr=False)

    @classmethod
    def from_rtm(
        cls,
        rtm: RtmStart,
        *,
        socket: Any,
        client: Transport,
        token: str,
        api: SlackWebApi | None = None,
    ) -> Session:
        return cls(
            me=rtm.self_,
            team=rtm.team,
            bots=build_index(rtm.bots),
            channels=build_index(rtm.channels),
            groups=build_index(rtm.groups),
            users=build_index(rtm.users),
            ims=build_index(rtm.ims),
            socket=socket,
            client=client,
            token=token,
            api=api,
        )

    @property
    def label(self) -> str:
        return str(self.team.get("domain") or self.team.get("id") or "-")

    def evolve(self, **changes: Any) -> Session:
        """Return a new snapshot with `changes` applied."""

        return dataclasses.replace(self, **changes)
