"""Perk definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True, frozen=True)
class PerkEffectDef:
    key: str
    amount: float


@dataclass(slots=True, frozen=True)
class PerkDef:
    """Static perk description; ``amount`` of each effect applies per rank."""

    id: str
    name: str
    skill: str
    description: str
    requires: Tuple[str, ...]
    max_rank: int
    effects: Tuple[PerkEffectDef, ...]
