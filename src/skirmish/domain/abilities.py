"""Ability model shared by the player, enemies and companions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from skirmish.core.types import AbilityKind, Element
from skirmish.domain.effects import (
    AoeHealEffect,
    BuffEffect,
    Effect,
    HealEffect,
    SummonEffect,
)

_SUPPORT_EFFECT_TYPES = (HealEffect, AoeHealEffect, BuffEffect, SummonEffect)


@dataclass(slots=True, frozen=True)
class Ability:
    """Something an actor can do on its turn."""

    id: str
    name: str
    kind: AbilityKind
    damage: int
    cost: int = 0
    cooldown: int = 0
    heal: int = 0
    effects: Tuple[Effect, ...] = ()
    unarmed: bool = False
    element: Element | None = None
    description: str = ""

    @property
    def uses_magicka(self) -> bool:
        return self.kind is AbilityKind.MAGIC

    @property
    def summon(self) -> SummonEffect | None:
        for effect in self.effects:
            if isinstance(effect, SummonEffect):
                return effect
        return None

    @property
    def is_summon(self) -> bool:
        return self.summon is not None

    @property
    def is_supportive(self) -> bool:
        """True for abilities aimed at the caster's own side (heals, buffs, conjurations)."""
        if self.kind is AbilityKind.UTILITY:
            return True
        if self.damage > 0:
            return False
        if self.heal > 0:
            return True
        return bool(self.effects) and all(isinstance(effect, _SUPPORT_EFFECT_TYPES) for effect in self.effects)

    @property
    def total_heal(self) -> int:
        return self.heal + sum(
            effect.amount for effect in self.effects if isinstance(effect, (HealEffect, AoeHealEffect))
        )


BASIC_ATTACK_ID = "basic"


def basic_attack(damage: int) -> Ability:
    """Fallback swing used when an actor has nothing better to do."""
    return Ability(
        id=BASIC_ATTACK_ID,
        name="Attack",
        kind=AbilityKind.MELEE,
        damage=damage,
        cost=0,
        description="Basic attack",
    )


__all__ = ["Ability", "BASIC_ATTACK_ID", "basic_attack"]
