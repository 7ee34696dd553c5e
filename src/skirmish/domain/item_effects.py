"""Pure helpers for resolving consumables used mid-combat."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Dict, Tuple

from skirmish.core.types import ItemKind, Stat
from skirmish.domain.player import InventoryItem

_POTION_KEYWORDS: Dict[Stat, Tuple[str, ...]] = {
    Stat.HEALTH: ("health", "heal", "healing", "vitality", "hp"),
    Stat.MAGICKA: ("magicka", "mana", "magick", "spell"),
    Stat.STAMINA: ("stamina", "endurance", "energy", "fatigue"),
}
_NUMBER = re.compile(r"(-?\d+(?:\.\d+)?)")

MINOR_AMOUNT = 25
STANDARD_AMOUNT = 50
MAJOR_AMOUNT = 100
FOOD_FALLBACK_HEAL = 15
FOOD_BASE_HEAL = 10


@dataclass(slots=True, frozen=True)
class PotionEffect:
    stat: Stat | None
    amount: int | None
    reason: str

    @property
    def usable(self) -> bool:
        return self.stat is not None and self.amount is not None and self.amount > 0


@dataclass(slots=True, frozen=True)
class Nutrition:
    hunger: int
    thirst: int


def resolve_potion_effect(item: InventoryItem) -> PotionEffect:
    """Work out which vital a potion restores and by how much."""
    if item.kind is not ItemKind.POTION:
        return PotionEffect(stat=None, amount=None, reason="not_a_potion")

    stat = _potion_stat(item)
    amount = item.damage
    if amount is None:
        match = _NUMBER.search(f"{item.description} {item.name}".lower())
        if match:
            amount = math.floor(float(match.group(1)))

    if stat is None:
        return PotionEffect(stat=None, amount=amount, reason="no_inference")
    if amount is not None:
        reason = "explicit_subtype" if item.subtype else "inferred_from_name"
        return PotionEffect(stat=stat, amount=amount, reason=reason)

    name = item.name.lower()
    if "minor" in name or "small" in name:
        amount = MINOR_AMOUNT
    elif "major" in name or "plentiful" in name or "grand" in name:
        amount = MAJOR_AMOUNT
    else:
        amount = STANDARD_AMOUNT
    reason = "explicit_subtype_default_amount" if item.subtype else "inferred_default_amount"
    return PotionEffect(stat=stat, amount=amount, reason=reason)


def _potion_stat(item: InventoryItem) -> Stat | None:
    if item.subtype in (Stat.HEALTH.value, Stat.MAGICKA.value, Stat.STAMINA.value):
        return Stat(item.subtype)
    name = item.name.lower()
    matches = [stat for stat, keywords in _POTION_KEYWORDS.items() if any(kw in name for kw in keywords)]
    if len(matches) == 1:
        return matches[0]
    return None


def food_heal_amount(nutrition: Nutrition | None) -> int:
    if nutrition is None:
        return FOOD_FALLBACK_HEAL
    return max(0, nutrition.hunger) // 2 + FOOD_BASE_HEAL
