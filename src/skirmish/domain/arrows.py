"""Special arrows: bonus damage and riders on a shot that lands."""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Dict

from skirmish.core.rng import RNG
from skirmish.core.types import ArrowKind, Stat, Tier
from skirmish.domain.combat_models import Actor
from skirmish.domain.effect_engine import attach_effect
from skirmish.domain.effects import DebuffEffect, DotEffect, StunEffect, TimedEffect
from skirmish.domain.player import InventoryItem

logger = logging.getLogger(__name__)

ARROW_TIER_MULTIPLIERS: Dict[Tier, float] = {
    Tier.LOW: 0.6,
    Tier.MID: 1.0,
    Tier.HIGH: 1.25,
    Tier.CRIT: 1.75,
}

FIRE_EXTRA_SHARE = 0.35
FIRE_BURN_SHARE = 0.12
ICE_EXTRA_SHARE = 0.25
ICE_CHILL_SHARE = 0.15
SHOCK_EXTRA_SHARE = 0.30
SHOCK_DOT_SHARE = 0.10
PARALYZE_EXTRA_SHARE = 0.20
PARALYZE_DURATION = 2

SHOCK_STUN_CHANCE: Dict[Tier, int] = {Tier.CRIT: 50, Tier.HIGH: 35, Tier.MID: 20}
SHOCK_STUN_FALLBACK = 10
PARALYZE_CHANCE: Dict[Tier, int] = {Tier.CRIT: 85, Tier.HIGH: 60, Tier.MID: 40}
PARALYZE_FALLBACK = 20

_BY_ID: Dict[str, ArrowKind] = {kind.value: kind for kind in ArrowKind}
_BY_NAME: Dict[str, ArrowKind] = {
    "fire": ArrowKind.FIRE,
    "ice": ArrowKind.ICE,
    "frost": ArrowKind.ICE,
    "shock": ArrowKind.SHOCK,
    "paralyze": ArrowKind.PARALYZE,
    "command": ArrowKind.COMMAND,
    "allycall": ArrowKind.COMMAND,
}
_ARROW_NAME = re.compile(r"^\s*(\w+)\s+arrows?\b", re.IGNORECASE)


@dataclass(slots=True, frozen=True)
class ArrowOutcome:
    extra_damage: int
    narrative: str


def arrow_kind(item: InventoryItem) -> ArrowKind | None:
    """Match a stack by id (``fire_arrows``), then by name (``Fire Arrows (10)``)."""
    kind = _BY_ID.get(item.id)
    if kind is not None:
        return kind
    match = _ARROW_NAME.match(item.name)
    if match is None:
        return None
    return _BY_NAME.get(match.group(1).lower())


def apply_arrow(target: Actor, kind: ArrowKind, dealt: int, tier: Tier, rng: RNG) -> ArrowOutcome:
    """
    Land an elemental arrow's extra damage and rider on ``target`` (mutates it).

    ``dealt`` is the damage of the shot itself; every bonus is a share of it,
    scaled by the roll tier and never below 1. Command arrows need the rest of
    the field and are resolved by the player executor instead.
    """
    if kind is ArrowKind.FIRE:
        extra = target.take_damage(_share(dealt, FIRE_EXTRA_SHARE, tier))
        duration = _lasting(tier, crit=4, high=3, other=2)
        burn = _share(dealt, FIRE_BURN_SHARE, tier)
        _attach(target, DotEffect(amount=burn, duration=duration))
        return ArrowOutcome(
            extra,
            f"Fire arrow scorches {target.name} for {extra} extra damage and burns for {burn} over {duration} rounds.",
        )
    if kind is ArrowKind.ICE:
        extra = target.take_damage(_share(dealt, ICE_EXTRA_SHARE, tier))
        duration = _lasting(tier, crit=3, high=2, other=2)
        chill = _share(dealt, ICE_CHILL_SHARE, tier)
        _attach(target, DebuffEffect(stat=Stat.DAMAGE, amount=chill, duration=duration))
        return ArrowOutcome(
            extra,
            f"Ice arrow chills {target.name}, dealing {extra} extra damage and reducing their damage by {chill} "
            f"for {duration} rounds.",
        )
    if kind is ArrowKind.SHOCK:
        extra = target.take_damage(_share(dealt, SHOCK_EXTRA_SHARE, tier))
        duration = _lasting(tier, crit=4, high=3, other=2)
        shock = _share(dealt, SHOCK_DOT_SHARE, tier)
        _attach(target, DotEffect(amount=shock, duration=duration))
        narrative = (
            f"Shock arrow electrocutes {target.name}, dealing {extra} extra damage and {shock} over {duration} rounds."
        )
        if rng.percent(SHOCK_STUN_CHANCE.get(tier, SHOCK_STUN_FALLBACK)):
            _attach(target, StunEffect(duration=1))
            narrative += f" {target.name} staggers!"
        return ArrowOutcome(extra, narrative)
    if kind is ArrowKind.PARALYZE:
        extra = target.take_damage(_share(dealt, PARALYZE_EXTRA_SHARE, tier))
        if rng.percent(PARALYZE_CHANCE.get(tier, PARALYZE_FALLBACK)):
            _attach(target, StunEffect(duration=PARALYZE_DURATION))
            return ArrowOutcome(
                extra, f"Paralyze arrow strikes {target.name} and paralyzes them for {PARALYZE_DURATION} rounds!"
            )
        return ArrowOutcome(extra, f"Paralyze arrow strikes {target.name} but fails to paralyze them.")
    raise ValueError(f"{kind.value} has no rider of its own.")


def _share(dealt: int, share: float, tier: Tier) -> int:
    return max(1, math.floor(dealt * share * ARROW_TIER_MULTIPLIERS.get(tier, 1.0)))


def _lasting(tier: Tier, *, crit: int, high: int, other: int) -> int:
    if tier is Tier.CRIT:
        return crit
    if tier is Tier.HIGH:
        return high
    return other


def _attach(target: Actor, effect: TimedEffect) -> None:
    if target.is_alive:
        target.active_effects = attach_effect(target.active_effects, effect)
    else:
        logger.debug("%s is down; arrow rider %s dropped", target.id, type(effect).__name__)


__all__ = ["ARROW_TIER_MULTIPLIERS", "ArrowOutcome", "apply_arrow", "arrow_kind"]
