"""Apply an ability's effects to actors and to the player."""
from __future__ import annotations

import math
from typing import List, Tuple

from skirmish.core.rng import RNG
from skirmish.core.types import AbilityKind, AreaTarget, Stat
from skirmish.domain.abilities import Ability
from skirmish.domain.combat_models import PLAYER_ID, Actor, CombatState
from skirmish.domain.damage import mitigate
from skirmish.domain.effect_engine import (
    AreaHit,
    TickOutcome,
    apply_area_damage,
    apply_area_heal,
    attach_effect,
    available_resource,
    effective_armor,
    tick_effects,
)
from skirmish.domain.effects import (
    TIMED_EFFECT_TYPES,
    BuffEffect,
    DebuffEffect,
    DotEffect,
    DrainEffect,
    Effect,
    SlowEffect,
    StunEffect,
    TimedEffect,
)
from skirmish.domain.player import PlayerCombatStats
from skirmish.domain.resources import CostPayment, pay_cost

RESIST_MULTIPLIER = 0.5
WEAKNESS_MULTIPLIER = 1.5


def triggers(rng: RNG, effect: Effect) -> bool:
    return rng.percent(getattr(effect, "chance", 100))


def is_timed(effect: Effect) -> bool:
    return isinstance(effect, TIMED_EFFECT_TYPES)


def describe_timed(target_name: str, effect: TimedEffect) -> str:
    if isinstance(effect, StunEffect):
        return f"{target_name} is stunned!"
    if isinstance(effect, DotEffect):
        return f"{target_name} suffers {effect.amount} damage per round for {effect.duration} rounds."
    if isinstance(effect, SlowEffect):
        return f"{target_name} is slowed by {effect.amount}%."
    if isinstance(effect, BuffEffect):
        return f"{target_name} gains +{abs(effect.amount)} {effect.stat.value}."
    if isinstance(effect, DebuffEffect):
        return f"{target_name} loses {abs(effect.amount)} {effect.stat.value}."
    raise TypeError(f"Unsupported timed effect: {effect!r}")


def start_actor_turn(actor: Actor) -> TickOutcome:
    """Process ``actor``'s effects at the start of its turn (mutates the actor)."""
    outcome = tick_effects(actor.active_effects, actor.health)
    actor.active_effects = list(outcome.effects)
    actor.health = outcome.health
    return outcome


def attach_to_actor(actor: Actor, effect: TimedEffect) -> None:
    actor.active_effects = attach_effect(actor.active_effects, effect)


def attach_to_player(state: CombatState, effect: TimedEffect) -> None:
    state.player_active_effects = attach_effect(state.player_active_effects, effect)


def drain_actor(actor: Actor, effect: DrainEffect) -> int:
    """Remove ``effect.amount`` of a pool from ``actor``; returns the amount removed."""
    if effect.stat is Stat.HEALTH:
        return actor.take_damage(effect.amount)
    if effect.stat is Stat.MAGICKA and actor.magicka is not None:
        drained = min(actor.magicka, effect.amount)
        actor.magicka -= drained
        return drained
    if effect.stat is Stat.STAMINA and actor.stamina is not None:
        drained = min(actor.stamina, effect.amount)
        actor.stamina -= drained
        return drained
    return 0


def drain_player(stats: PlayerCombatStats, effect: DrainEffect) -> int:
    if effect.stat is Stat.HEALTH:
        return stats.take_damage(effect.amount)
    if effect.stat is Stat.MAGICKA:
        drained = min(stats.current_magicka, effect.amount)
        stats.current_magicka -= drained
        return drained
    if effect.stat is Stat.STAMINA:
        drained = min(stats.current_stamina, effect.amount)
        stats.current_stamina -= drained
        return drained
    return 0


def pay_actor_cost(actor: Actor, ability: Ability) -> CostPayment:
    """Charge an NPC for ``ability``; pools the actor lacks are free."""
    if ability.unarmed or ability.cost <= 0:
        return CostPayment(paid=0, remaining=0, multiplier=1.0)
    if ability.kind is AbilityKind.MAGIC:
        if actor.magicka is None:
            return CostPayment(paid=0, remaining=0, multiplier=1.0)
        payment = pay_cost(
            actor.magicka,
            ability.cost,
            available=available_resource(actor.magicka, actor.active_effects, Stat.MAGICKA),
        )
        actor.magicka = payment.remaining
        return payment
    if actor.stamina is None:
        return CostPayment(paid=0, remaining=0, multiplier=1.0)
    payment = pay_cost(
        actor.stamina,
        ability.cost,
        available=available_resource(actor.stamina, actor.active_effects, Stat.STAMINA),
    )
    actor.stamina = payment.remaining
    return payment


def damage_tags(ability: Ability) -> Tuple[str, ...]:
    """Damage types an ability deals, matched against resistances and weaknesses."""
    tags: List[str] = []
    if ability.element is not None:
        tags.append(ability.element.value)
    if ability.kind is AbilityKind.MAGIC:
        tags.append("magic")
    return tuple(tags)


def apply_affinity(damage: int, ability: Ability, target: Actor) -> Tuple[int, str | None]:
    """Halve resisted damage (never below 1) or boost damage the target is weak to."""
    tags = damage_tags(ability)
    if any(tag in target.resistances for tag in tags):
        return max(1, math.floor(damage * RESIST_MULTIPLIER)), "resisted"
    if any(tag in target.weaknesses for tag in tags):
        return math.floor(damage * WEAKNESS_MULTIPLIER), "weakness"
    return damage, None


def heal_amount(base: int, multiplier: float) -> int:
    return max(0, math.floor(base * multiplier))


# -----------------------
# Area effects
# -----------------------
def area_side(state: CombatState, target: AreaTarget, *, hostile_caster: bool) -> Tuple[bool, List[Actor]]:
    """
    Resolve ``target`` from the caster's point of view.

    Returns whether the player is caught and the living actors hit. The
    player's side is the player plus the allies; the other side is the
    enemies.
    """
    player_side = (target is AreaTarget.ALL_ALLIES) != hostile_caster
    if player_side:
        return True, state.living_allies()
    return False, state.living_enemies()


def area_damage(
    state: CombatState,
    stats: PlayerCombatStats | None,
    target: AreaTarget,
    amount: int,
    *,
    hostile_caster: bool,
) -> List[AreaHit]:
    """Damage one side; the player is only hit when ``stats`` is given."""
    includes_player, actors = area_side(state, target, hostile_caster=hostile_caster)
    hits: List[AreaHit] = []
    if amount <= 0:
        return hits
    if includes_player and stats is not None:
        armor = effective_armor(stats.armor, state.player_active_effects)
        hits.append(AreaHit(actor_id=PLAYER_ID, actor_name="You", amount=stats.take_damage(mitigate(amount, armor))))
    hits.extend(apply_area_damage(actors, amount))
    return hits


def area_heal(
    state: CombatState,
    stats: PlayerCombatStats | None,
    target: AreaTarget,
    amount: int,
    *,
    hostile_caster: bool,
) -> List[AreaHit]:
    """Heal one side; the player is only healed when ``stats`` is given."""
    includes_player, actors = area_side(state, target, hostile_caster=hostile_caster)
    hits: List[AreaHit] = []
    if amount <= 0:
        return hits
    if includes_player and stats is not None:
        hits.append(AreaHit(actor_id=PLAYER_ID, actor_name="You", amount=stats.restore(Stat.HEALTH, amount)))
    hits.extend(apply_area_heal(actors, amount))
    return hits


def describe_area_hits(hits: List[AreaHit], verb: str, noun: str) -> List[str]:
    """``You take 5 damage.`` / ``Lydia takes 5 damage.``"""
    return [
        f"{hit.actor_name} {verb if hit.actor_id == PLAYER_ID else verb + 's'} {hit.amount} {noun}." for hit in hits
    ]


__all__ = [
    "apply_affinity",
    "area_damage",
    "area_heal",
    "area_side",
    "attach_to_actor",
    "attach_to_player",
    "damage_tags",
    "describe_area_hits",
    "describe_timed",
    "drain_actor",
    "drain_player",
    "heal_amount",
    "is_timed",
    "pay_actor_cost",
    "start_actor_turn",
    "triggers",
]
