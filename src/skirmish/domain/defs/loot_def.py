"""Loot definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from skirmish.core.types import ItemKind


@dataclass(slots=True, frozen=True)
class LootItemDef:
    """A possible drop carried by an enemy."""

    name: str
    kind: ItemKind
    description: str
    quantity: int
    drop_chance: int
    damage: int | None = None
    armor: int | None = None
    slot: str | None = None
