"""d20 attack resolution."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from skirmish.core.rng import RNG
from skirmish.core.types import Tier

logger = logging.getLogger(__name__)

# A natural 7 is a lucky roll and counts as a critical hit, same as a 20.
LUCKY_ROLL = 7


@dataclass(slots=True, frozen=True)
class RollResult:
    hit: bool
    is_crit: bool
    natural_roll: int
    tier: Tier


def tier_for_roll(natural_roll: int) -> Tier:
    """Map a natural d20 value onto its outcome tier."""
    if natural_roll < 1 or natural_roll > 20:
        raise ValueError(f"Natural roll must be between 1 and 20, got {natural_roll}.")
    if natural_roll == 1:
        return Tier.FAIL
    if natural_roll <= 4:
        return Tier.MISS
    if natural_roll == LUCKY_ROLL or natural_roll == 20:
        return Tier.CRIT
    if natural_roll <= 9:
        return Tier.LOW
    if natural_roll <= 14:
        return Tier.MID
    return Tier.HIGH


def is_valid_roll(value: int | None) -> bool:
    return value is not None and 1 <= value <= 20


def resolve_attack(
    rng: RNG,
    *,
    attacker_level: int,
    target_armor: int = 0,
    target_dodge: int = 0,
    crit_chance: int = 0,
    natural_roll: int | None = None,
) -> RollResult:
    """
    Resolve an attack roll.

    The natural value alone decides the outcome; level, armor, dodge and crit
    chance are accepted so callers can pass the full context and so they show
    up in debug output. An out-of-range ``natural_roll`` is ignored and a
    fresh d20 is rolled instead.
    """
    nat = natural_roll if is_valid_roll(natural_roll) else rng.d20()
    tier = tier_for_roll(nat)
    logger.debug(
        "roll nat=%s tier=%s level=%s armor=%s dodge=%s crit=%s",
        nat,
        tier.value,
        attacker_level,
        target_armor,
        target_dodge,
        crit_chance,
    )
    return RollResult(hit=tier.is_hit, is_crit=tier is Tier.CRIT, natural_roll=nat, tier=tier)


__all__ = ["LUCKY_ROLL", "RollResult", "is_valid_roll", "resolve_attack", "tier_for_roll"]
