"""Timed status effects and area effect fan-out."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from skirmish.core.types import Stat
from skirmish.domain.combat_models import Actor
from skirmish.domain.damage import mitigate
from skirmish.domain.effects import (
    ActiveEffect,
    BuffEffect,
    DebuffEffect,
    DotEffect,
    SlowEffect,
    StunEffect,
    TimedEffect,
)

MAX_SLOW_PERCENT = 90


@dataclass(slots=True, frozen=True)
class TickOutcome:
    """Result of processing an actor's effects at the start of its turn."""

    effects: Tuple[ActiveEffect, ...]
    health: int
    dot_damage: int
    stunned: bool
    expired: Tuple[TimedEffect, ...]


@dataclass(slots=True, frozen=True)
class AreaHit:
    actor_id: str
    actor_name: str
    amount: int


def tick_effects(effects: Sequence[ActiveEffect], health: int) -> TickOutcome:
    """
    Apply DOT ticks, then age every effect by one round.

    Stun is detected before aging, so a one-round stun still costs the holder
    the turn on which it is processed.
    """
    dot_damage = sum(active.effect.amount for active in effects if isinstance(active.effect, DotEffect))
    stunned = any(
        isinstance(active.effect, StunEffect) and active.rounds_remaining > 0 for active in effects
    )
    remaining: List[ActiveEffect] = []
    expired: List[TimedEffect] = []
    for active in effects:
        aged = active.tick()
        if aged.rounds_remaining > 0:
            remaining.append(aged)
        else:
            expired.append(active.effect)
    return TickOutcome(
        effects=tuple(remaining),
        health=max(0, health - dot_damage),
        dot_damage=dot_damage,
        stunned=stunned,
        expired=tuple(expired),
    )


def attach_effect(effects: Sequence[ActiveEffect], effect: TimedEffect) -> List[ActiveEffect]:
    """Return a new effect list with ``effect`` added; a second stun refreshes the first."""
    if effect.duration <= 0:
        return list(effects)
    if isinstance(effect, StunEffect):
        kept = [active for active in effects if not isinstance(active.effect, StunEffect)]
        current = max(
            (active.rounds_remaining for active in effects if isinstance(active.effect, StunEffect)),
            default=0,
        )
        kept.append(ActiveEffect(effect=effect, rounds_remaining=max(current, effect.duration)))
        return kept
    return [*effects, ActiveEffect(effect=effect, rounds_remaining=effect.duration)]


def stat_modifier(effects: Sequence[ActiveEffect], stat: Stat) -> int:
    """Net flat change to ``stat`` from active buffs and debuffs."""
    total = 0
    for active in effects:
        effect = active.effect
        if isinstance(effect, BuffEffect) and effect.stat is stat:
            total += abs(effect.amount)
        elif isinstance(effect, DebuffEffect) and effect.stat is stat:
            total -= abs(effect.amount)
    return total


def slow_percent(effects: Sequence[ActiveEffect]) -> int:
    slows = [active.effect.amount for active in effects if isinstance(active.effect, SlowEffect)]
    return min(MAX_SLOW_PERCENT, max(slows, default=0))


def guard_percent(effects: Sequence[ActiveEffect]) -> int:
    guards = [
        active.effect.amount
        for active in effects
        if isinstance(active.effect, BuffEffect) and active.effect.stat is Stat.GUARD
    ]
    return max(guards, default=0)


def effective_armor(base: int, effects: Sequence[ActiveEffect]) -> int:
    return max(0, base + stat_modifier(effects, Stat.ARMOR))


def effective_dodge(base: int, effects: Sequence[ActiveEffect]) -> int:
    return max(0, base + stat_modifier(effects, Stat.DODGE))


def effective_damage(base: int, effects: Sequence[ActiveEffect]) -> int:
    """Outgoing base damage after damage buffs, debuffs and slows."""
    boosted = max(0, base + stat_modifier(effects, Stat.DAMAGE))
    return boosted * (100 - slow_percent(effects)) // 100


def available_resource(current: int | None, effects: Sequence[ActiveEffect], stat: Stat) -> int:
    """Pool a cost can draw from; a stamina or magicka debuff locks part of it away."""
    return max(0, (current or 0) + min(0, stat_modifier(effects, stat)))


def apply_area_damage(actors: Sequence[Actor], amount: int) -> List[AreaHit]:
    """Hit every living actor in ``actors`` (mitigated by armor); mutates the given actors."""
    hits: List[AreaHit] = []
    if amount <= 0:
        return hits
    for actor in actors:
        if not actor.is_alive:
            continue
        dealt = actor.take_damage(mitigate(amount, effective_armor(actor.armor, actor.active_effects)))
        hits.append(AreaHit(actor_id=actor.id, actor_name=actor.name, amount=dealt))
    return hits


def apply_area_heal(actors: Sequence[Actor], amount: int) -> List[AreaHit]:
    """Heal every living actor in ``actors`` up to its maximum; mutates the given actors."""
    hits: List[AreaHit] = []
    if amount <= 0:
        return hits
    for actor in actors:
        if not actor.is_alive:
            continue
        healed = actor.restore_health(amount)
        hits.append(AreaHit(actor_id=actor.id, actor_name=actor.name, amount=healed))
    return hits


__all__ = [
    "AreaHit",
    "TickOutcome",
    "apply_area_damage",
    "apply_area_heal",
    "attach_effect",
    "available_resource",
    "effective_armor",
    "effective_damage",
    "effective_dodge",
    "guard_percent",
    "slow_percent",
    "stat_modifier",
    "tick_effects",
]
