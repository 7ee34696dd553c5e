"""Ability effect variants and the timed wrapper used on actors."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from skirmish.core.types import AreaTarget, CreatureKind, Stat


@dataclass(slots=True, frozen=True)
class DotEffect:
    """Damage subtracted from the holder's health at the start of each of its turns."""

    amount: int
    duration: int
    chance: int = 100


@dataclass(slots=True, frozen=True)
class BuffEffect:
    stat: Stat
    amount: int
    duration: int
    chance: int = 100


@dataclass(slots=True, frozen=True)
class DebuffEffect:
    stat: Stat
    amount: int
    duration: int
    chance: int = 100


@dataclass(slots=True, frozen=True)
class SlowEffect:
    """Cuts the holder's outgoing damage by ``amount`` percent while active."""

    amount: int
    duration: int
    chance: int = 100


@dataclass(slots=True, frozen=True)
class StunEffect:
    duration: int = 1
    chance: int = 100


@dataclass(slots=True, frozen=True)
class DrainEffect:
    """Instantly removes ``amount`` of ``stat`` from the target."""

    stat: Stat
    amount: int
    chance: int = 100


@dataclass(slots=True, frozen=True)
class HealEffect:
    amount: int
    chance: int = 100


@dataclass(slots=True, frozen=True)
class AoeDamageEffect:
    amount: int
    target: AreaTarget = AreaTarget.ALL_ENEMIES
    chance: int = 100


@dataclass(slots=True, frozen=True)
class AoeHealEffect:
    amount: int
    target: AreaTarget = AreaTarget.ALL_ALLIES
    chance: int = 100


@dataclass(slots=True, frozen=True)
class SummonTemplate:
    """Blueprint for a conjured minion."""

    name: str
    health: int | None = None
    armor: int = 0
    damage: int = 8
    lifetime: int = 3
    kind: CreatureKind = CreatureKind.DAEDRA


@dataclass(slots=True, frozen=True)
class SummonEffect:
    template: SummonTemplate
    chance: int = 100


TimedEffect = Union[DotEffect, BuffEffect, DebuffEffect, SlowEffect, StunEffect]
InstantEffect = Union[DrainEffect, HealEffect, AoeDamageEffect, AoeHealEffect, SummonEffect]
Effect = Union[TimedEffect, InstantEffect]

TIMED_EFFECT_TYPES = (DotEffect, BuffEffect, DebuffEffect, SlowEffect, StunEffect)


@dataclass(slots=True, frozen=True)
class ActiveEffect:
    """A timed effect currently attached to an actor."""

    effect: TimedEffect
    rounds_remaining: int

    def tick(self) -> "ActiveEffect":
        return ActiveEffect(effect=self.effect, rounds_remaining=self.rounds_remaining - 1)


__all__ = [
    "ActiveEffect",
    "AoeDamageEffect",
    "AoeHealEffect",
    "BuffEffect",
    "DebuffEffect",
    "DotEffect",
    "DrainEffect",
    "Effect",
    "HealEffect",
    "InstantEffect",
    "SlowEffect",
    "StunEffect",
    "SummonEffect",
    "SummonTemplate",
    "TIMED_EFFECT_TYPES",
    "TimedEffect",
]
