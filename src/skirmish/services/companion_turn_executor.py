"""Turns for recruited followers and the player's minions."""
from __future__ import annotations

import logging
from typing import List

from skirmish.config import EngineConfig
from skirmish.core.rng import RNG
from skirmish.domain.abilities import Ability, basic_attack
from skirmish.domain.combat_models import PLAYER_ID, Actor, CombatState, LogEntry
from skirmish.domain.damage import compute_damage, mitigate
from skirmish.domain.effect_engine import effective_armor, effective_damage
from skirmish.domain.effects import AoeDamageEffect, AoeHealEffect, DrainEffect, HealEffect
from skirmish.domain.rolls import resolve_attack
from skirmish.domain.summon_scaling import summon_scaling_for_tier
from skirmish.services.combat_lifecycle import CombatLifecycle
from skirmish.services.combat_results import CompanionActionResult
from skirmish.services.effect_application import (
    apply_affinity,
    area_damage,
    area_heal,
    attach_to_actor,
    describe_area_hits,
    describe_timed,
    drain_actor,
    heal_amount,
    is_timed,
    pay_actor_cost,
    start_actor_turn,
    triggers,
)
from skirmish.services.summoning import spawn_summons

logger = logging.getLogger(__name__)

AUTO_HEAL_THRESHOLD = 0.5


class CompanionTurnExecutor:
    """Runs a directed or automatic action for an allied actor."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        rng: RNG | None = None,
        lifecycle: CombatLifecycle | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._rng = rng or RNG()
        self._lifecycle = lifecycle or CombatLifecycle(self._config, rng=self._rng)

    def execute(
        self,
        state: CombatState,
        ally_id: str,
        ability_id: str | None = None,
        *,
        target_id: str | None = None,
        natural_roll: int | None = None,
        is_auto: bool = False,
    ) -> CompanionActionResult:
        """
        Act for ``ally_id``.

        ``success`` is False when the ally could not act: it is stunned, the
        ability is unknown or cooling down, or a damaging ability was aimed
        at the player's own side. Victory is checked after every action.
        """
        new_state = state.clone()
        ally = new_state.find_ally(ally_id)
        if ally is None:
            raise ValueError(f"Ally '{ally_id}' not found.")
        if not new_state.active or not ally.is_alive:
            return CompanionActionResult(state=new_state, narrative="", success=False)

        ability = self.choose_auto_ability(ally) if is_auto else self._find_ability(ally, ability_id)
        if ability is None:
            return self._refuse(new_state, ally, "action", f"{ally.name} doesn't know that ability.")
        remaining = ally.cooldowns.get(ability.id, 0)
        if remaining > 0:
            return self._refuse(new_state, ally, ability.id, f"{ability.name} is still on cooldown for {remaining} turns!")
        if not ability.is_supportive and target_id and (target_id == PLAYER_ID or new_state.find_ally(target_id)):
            return self._refuse(new_state, ally, ability.id, f"{ally.name} refuses to attack an ally.")

        parts: List[str] = []
        tick = start_actor_turn(ally)
        if tick.dot_damage:
            parts.append(f"{ally.name} takes {tick.dot_damage} damage from lingering effects.")
        if not ally.is_alive:
            parts.append(f"{ally.name} falls!")
            return self._finish(new_state, ally, "dot", parts, success=False)
        if tick.stunned:
            parts.append(f"{ally.name} is stunned and cannot act!")
            return self._finish(new_state, ally, "stunned", parts, success=False)

        payment = pay_actor_cost(ally, ability)
        if ability.cooldown:
            ally.cooldowns[ability.id] = ability.cooldown
        history = new_state.last_actor_actions.get(ally.id, [])
        new_state.last_actor_actions[ally.id] = [ability.id, *history][: self._config.ability_history_size]

        if ability.is_summon:
            self._summon(new_state, ally, ability, payment.multiplier, natural_roll, parts)
            return self._finish(new_state, ally, ability.id, parts)
        if ability.is_supportive:
            self._support(new_state, ally, ability, target_id, payment.multiplier, parts)
            return self._finish(new_state, ally, ability.id, parts)

        target = new_state.find_enemy(target_id) if target_id else None
        if target is None or not target.is_alive:
            living = new_state.living_enemies()
            if not living:
                return self._refuse(new_state, ally, ability.id, "No valid target!")
            target = living[0]
        entry = self._strike(new_state, ally, ability, target, payment.multiplier, natural_roll, parts)
        return self._finish(new_state, ally, ability.id, parts, entry=entry)

    def choose_auto_ability(self, ally: Actor) -> Ability:
        """Heal when badly hurt, otherwise hit as hard as possible."""
        ready = [ability for ability in ally.abilities if ally.cooldowns.get(ability.id, 0) <= 0]
        if not ready:
            return basic_attack(ally.damage)
        heals = [ability for ability in ready if ability.total_heal > 0]
        if heals and ally.health < ally.max_health * AUTO_HEAL_THRESHOLD:
            return max(heals, key=lambda ability: ability.total_heal)
        offensive = [ability for ability in ready if not ability.is_supportive]
        if not offensive:
            return basic_attack(ally.damage)
        return max(offensive, key=lambda ability: ability.damage)

    # -----------------------
    # Helpers
    # -----------------------
    def _find_ability(self, ally: Actor, ability_id: str | None) -> Ability | None:
        if ability_id is None:
            return ally.abilities[0] if ally.abilities else basic_attack(ally.damage)
        return next((ability for ability in ally.abilities if ability.id == ability_id), None)

    def _strike(
        self,
        state: CombatState,
        ally: Actor,
        ability: Ability,
        target: Actor,
        multiplier: float,
        natural_roll: int | None,
        parts: List[str],
    ) -> LogEntry:
        armor = effective_armor(target.armor, target.active_effects)
        roll = resolve_attack(self._rng, attacker_level=ally.level, target_armor=armor, natural_roll=natural_roll)
        entry = LogEntry(
            turn=state.turn,
            actor=ally.id,
            action=ability.id,
            narrative="",
            target=target.id,
            natural_roll=roll.natural_roll,
            tier=roll.tier,
            is_crit=roll.is_crit,
        )
        if not roll.hit:
            parts.insert(0, f"{ally.name} uses {ability.name} on {target.name} but rolls {roll.natural_roll} and misses.")
            return entry
        base = effective_damage(ability.damage or ally.damage, ally.active_effects) * multiplier
        rolled = compute_damage(base, ally.level, roll.natural_roll, roll.tier, roll.is_crit, minimum=1)
        damage, _ = apply_affinity(mitigate(rolled.damage, armor), ability, target)
        dealt = target.take_damage(damage)
        entry.damage = dealt
        entry.hit_location = rolled.hit_location
        crit = "CRITICAL HIT! " if roll.is_crit else ""
        parts.insert(0, f"{crit}{ally.name} uses {ability.name} on {target.name} and deals {dealt} damage!")

        for effect in ability.effects:
            if not triggers(self._rng, effect):
                continue
            if is_timed(effect):
                if target.is_alive:
                    attach_to_actor(target, effect)
                    parts.append(describe_timed(target.name, effect))
            elif isinstance(effect, HealEffect):
                parts.append(f"{ally.name} recovers {ally.restore_health(effect.amount)} health.")
            elif isinstance(effect, DrainEffect):
                drained = drain_actor(target, effect)
                if drained:
                    parts.append(f"{ally.name} drains {drained} {effect.stat.value} from {target.name}.")
            elif isinstance(effect, AoeDamageEffect):
                amount = heal_amount(effect.amount, multiplier)
                hits = area_damage(state, None, effect.target, amount, hostile_caster=False)
                parts.extend(describe_area_hits(hits, "take", "damage"))
            elif isinstance(effect, AoeHealEffect):
                hits = area_heal(state, None, effect.target, effect.amount, hostile_caster=False)
                parts.extend(describe_area_hits(hits, "recover", "health"))
        if not target.is_alive:
            parts.append(f"{target.name} is defeated!")
        return entry

    def _support(
        self,
        state: CombatState,
        ally: Actor,
        ability: Ability,
        target_id: str | None,
        multiplier: float,
        parts: List[str],
    ) -> None:
        recipient = state.find_ally(target_id) if target_id else None
        if recipient is None or not recipient.is_alive:
            recipient = ally
        parts.append(f"{ally.name} uses {ability.name} on {recipient.name}.")
        if ability.heal:
            parts.append(f"{recipient.name} recovers {recipient.restore_health(heal_amount(ability.heal, multiplier))} health.")
        for effect in ability.effects:
            if not triggers(self._rng, effect):
                continue
            if isinstance(effect, HealEffect):
                healed = recipient.restore_health(heal_amount(effect.amount, multiplier))
                parts.append(f"{recipient.name} recovers {healed} health.")
            elif is_timed(effect):
                attach_to_actor(recipient, effect)
                parts.append(describe_timed(recipient.name, effect))
            elif isinstance(effect, AoeHealEffect):
                amount = heal_amount(effect.amount, multiplier)
                hits = area_heal(state, None, effect.target, amount, hostile_caster=False)
                parts.extend(describe_area_hits(hits, "recover", "health"))

    def _summon(
        self,
        state: CombatState,
        ally: Actor,
        ability: Ability,
        multiplier: float,
        natural_roll: int | None,
        parts: List[str],
    ) -> None:
        roll = resolve_attack(self._rng, attacker_level=ally.level, natural_roll=natural_roll)
        scaling = summon_scaling_for_tier(roll.tier)
        if scaling is None or state.active_summons(ally.id):
            parts.append(f"{ally.name}'s {ability.name} fizzles.")
            return
        summoned = spawn_summons(
            state,
            ability,
            owner=ally,
            caster_level=ally.level,
            rng=self._rng,
            scaling=scaling,
            power=multiplier,
        )
        parts.append(f"{ally.name} casts {ability.name}: {' and '.join(actor.name for actor in summoned)} appears!")

    def _refuse(self, state: CombatState, ally: Actor, action: str, narrative: str) -> CompanionActionResult:
        state.record(LogEntry(turn=state.turn, actor=ally.id, action=action, narrative=narrative))
        return CompanionActionResult(state=state, narrative=narrative, success=False)

    def _finish(
        self,
        state: CombatState,
        ally: Actor,
        action: str,
        parts: List[str],
        *,
        entry: LogEntry | None = None,
        success: bool = True,
    ) -> CompanionActionResult:
        narrative = " ".join(part for part in parts if part)
        if entry is None:
            entry = LogEntry(turn=state.turn, actor=ally.id, action=action, narrative="")
        entry.narrative = narrative
        state.record(entry)
        if success:
            state = self._lifecycle.check_victory(state)
        return CompanionActionResult(state=state, narrative=narrative, success=success)


__all__ = ["CompanionTurnExecutor"]
