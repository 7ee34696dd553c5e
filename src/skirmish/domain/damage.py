"""Damage arithmetic: tier scaling, armor mitigation and hit locations."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Tuple

from skirmish.core.types import Tier

logger = logging.getLogger(__name__)

TIER_MULTIPLIERS: Dict[Tier, float] = {
    Tier.FAIL: 0.0,
    Tier.MISS: 0.0,
    Tier.LOW: 0.75,
    Tier.MID: 1.0,
    Tier.HIGH: 1.25,
    Tier.CRIT: 1.75,
}
CRIT_MULTIPLIER = 1.15
LEVEL_BONUS_PER_LEVEL = 0.2
HIT_LOCATIONS: Tuple[str, ...] = ("torso", "arm", "leg", "head")


@dataclass(slots=True, frozen=True)
class DamageRoll:
    damage: int
    hit_location: str


def level_bonus(level: int) -> int:
    return math.floor(level * LEVEL_BONUS_PER_LEVEL)


def hit_location(natural_roll: int) -> str:
    """Narration-only body part; has no mechanical effect."""
    return HIT_LOCATIONS[natural_roll % len(HIT_LOCATIONS)]


def compute_damage(
    base: float,
    attacker_level: int,
    natural_roll: int,
    tier: Tier,
    is_crit: bool,
    *,
    minimum: int = 0,
) -> DamageRoll:
    """Unmitigated damage for a roll; ``minimum`` is 1 once a hit is confirmed."""
    crit = CRIT_MULTIPLIER if is_crit else 1.0
    raw = math.floor((base + level_bonus(attacker_level)) * TIER_MULTIPLIERS[tier] * crit)
    damage = max(minimum, raw, 0)
    logger.debug(
        "damage base=%s level=%s nat=%s tier=%s crit=%s -> %s",
        base,
        attacker_level,
        natural_roll,
        tier.value,
        is_crit,
        damage,
    )
    return DamageRoll(damage=damage, hit_location=hit_location(natural_roll))


def armor_reduction(armor: float) -> float:
    """Fraction of damage absorbed by ``armor``; always in [0, 1)."""
    armor = max(0.0, armor)
    return armor / (armor + 100)


def mitigate(damage: int, armor: float, *, minimum: int = 1) -> int:
    """Apply armor after tier scaling; a landed hit with positive damage never drops below ``minimum``."""
    if damage <= 0:
        return 0
    return max(minimum, math.floor(damage * (1 - armor_reduction(armor))))


__all__ = [
    "CRIT_MULTIPLIER",
    "DamageRoll",
    "HIT_LOCATIONS",
    "TIER_MULTIPLIERS",
    "armor_reduction",
    "compute_damage",
    "hit_location",
    "level_bonus",
    "mitigate",
]
