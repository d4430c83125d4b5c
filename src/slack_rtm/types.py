"""Shared data aliases."""

from __future__ import annotations

from typing import Any, TypeAlias

Entity: TypeAlias = dict[str, Any]
EntityIndex: TypeAlias = dict[str, Entity]
Envelope: TypeAlias = dict[str, Any]
HostState: TypeAlias = Any
