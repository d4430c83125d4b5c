"""Entity index construction."""

from __future__ import annotations

from collections.abc import Iterable

from slack_rtm.errors import MalformedEntityError
from slack_rtm.types import Entity, EntityIndex


def build_index(entities: Iterable[Entity]) -> EntityIndex:
    """Key entities by `id`. Later duplicates replace earlier ones."""

    index: EntityIndex = {}
    for entity in entities:
        try:
            entity_id = entity["id"]
        except (KeyError, TypeError) as exc:
            raise MalformedEntityError(f"entity without id: {entity!r}") from exc
        index[entity_id] = entity
    return index
