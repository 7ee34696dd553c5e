"""Summon stat scaling helpers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from skirmish.core.types import Tier
from skirmish.domain.effects import SummonTemplate

BASE_SUMMON_HEALTH = 30
SUMMON_HEALTH_PER_LEVEL = 11
EXTRA_MINION_STRENGTH = 0.5


@dataclass(slots=True, frozen=True)
class SummonScaling:
    multiplier: float
    lifetime_bonus: int = 0
    extra_minion: bool = False


@dataclass(slots=True, frozen=True)
class SummonStats:
    max_health: int
    armor: int
    damage: int
    lifetime: int


# A failed conjuration produces nothing; every other tier scales the minion.
SUMMON_TIER_SCALING: Dict[Tier, SummonScaling] = {
    Tier.MISS: SummonScaling(multiplier=0.5),
    Tier.LOW: SummonScaling(multiplier=0.75),
    Tier.MID: SummonScaling(multiplier=1.0),
    Tier.HIGH: SummonScaling(multiplier=1.25, lifetime_bonus=1),
    Tier.CRIT: SummonScaling(multiplier=1.5, lifetime_bonus=1, extra_minion=True),
}


def summon_scaling_for_tier(tier: Tier) -> SummonScaling | None:
    return SUMMON_TIER_SCALING.get(tier)


def default_summon_health(caster_level: int) -> int:
    return BASE_SUMMON_HEALTH + SUMMON_HEALTH_PER_LEVEL * max(1, caster_level)


def scale_summon_stats(
    template: SummonTemplate,
    *,
    caster_level: int,
    multiplier: float = 1.0,
    lifetime_bonus: int = 0,
) -> SummonStats:
    base_health = template.health if template.health is not None else default_summon_health(caster_level)
    # int(...) is applied once per stat so scaling stays deterministic.
    max_health = max(1, int(base_health * multiplier))
    armor = max(0, int(template.armor * multiplier))
    damage = max(1, int(template.damage * multiplier))
    lifetime = max(1, template.lifetime + lifetime_bonus)
    return SummonStats(max_health=max_health, armor=armor, damage=damage, lifetime=lifetime)


__all__ = [
    "EXTRA_MINION_STRENGTH",
    "SUMMON_TIER_SCALING",
    "SummonScaling",
    "SummonStats",
    "default_summon_health",
    "scale_summon_stats",
    "summon_scaling_for_tier",
]
