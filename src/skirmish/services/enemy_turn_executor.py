"""Enemy AI: ability selection by behavior and resolution against the player's side."""
from __future__ import annotations

import logging
import math
from typing import List

from skirmish.config import EngineConfig
from skirmish.core.rng import RNG
from skirmish.core.types import Behavior, Stat
from skirmish.domain.abilities import Ability, basic_attack
from skirmish.domain.combat_models import PLAYER_ID, Actor, CombatState, LogEntry
from skirmish.domain.damage import compute_damage, mitigate
from skirmish.domain.effect_engine import (
    AreaHit,
    effective_armor,
    effective_damage,
    effective_dodge,
    guard_percent,
)
from skirmish.domain.effects import AoeDamageEffect, AoeHealEffect, DrainEffect, HealEffect, StunEffect
from skirmish.domain.encounter_scaling import health_scale, level_scale
from skirmish.domain.player import Character, PlayerCombatStats
from skirmish.domain.resources import CostPayment
from skirmish.domain.rolls import RollResult, resolve_attack
from skirmish.domain.summon_scaling import summon_scaling_for_tier
from skirmish.services.combat_results import EnemyTurnResult
from skirmish.services.effect_application import (
    area_damage,
    area_heal,
    attach_to_actor,
    attach_to_player,
    describe_area_hits,
    describe_timed,
    drain_actor,
    drain_player,
    heal_amount,
    is_timed,
    pay_actor_cost,
    start_actor_turn,
    triggers,
)
from skirmish.services.summoning import spawn_summons

logger = logging.getLogger(__name__)

CASTER_MAGIC_PREFERENCE = 0.7
TACTICAL_EFFECT_PREFERENCE = 0.5
FORCED_SUMMON_HEALTH_FRACTION = 0.5
SUPPORT_HEAL_THRESHOLD = 0.5
MAX_MAGIC_RESIST = 75


class EnemyTurnExecutor:
    """Runs one enemy (or enemy-owned minion) turn."""

    def __init__(self, config: EngineConfig | None = None, *, rng: RNG | None = None) -> None:
        self._config = config or EngineConfig()
        self._rng = rng or RNG()

    def execute(
        self,
        state: CombatState,
        enemy_id: str,
        player_stats: PlayerCombatStats,
        *,
        natural_roll: int | None = None,
        character: Character | None = None,
    ) -> EnemyTurnResult:
        """
        Let ``enemy_id`` act.

        The enemy's effects tick first; a stunned enemy loses the turn. Defeat
        of the player is left to the lifecycle check that follows every
        action.
        """
        new_state = state.clone()
        stats = player_stats.clone()
        enemy = new_state.find_enemy(enemy_id)
        if enemy is None:
            raise ValueError(f"Enemy '{enemy_id}' not found.")
        if not new_state.active or not enemy.is_alive:
            return EnemyTurnResult(state=new_state, player_stats=stats, narrative="")

        parts: List[str] = []
        tick = start_actor_turn(enemy)
        if tick.dot_damage:
            parts.append(f"{enemy.name} takes {tick.dot_damage} damage from lingering effects.")
        if not enemy.is_alive:
            parts.append(f"{enemy.name} succumbs!")
            return self._finish(new_state, stats, enemy, "dot", parts)
        if tick.stunned:
            parts.append(f"{enemy.name} is stunned and cannot act!")
            return self._finish(new_state, stats, enemy, "stunned", parts)

        ability = self.choose_ability(new_state, enemy)
        payment = pay_actor_cost(enemy, ability)
        if ability.cooldown:
            enemy.cooldowns[ability.id] = ability.cooldown
        history = new_state.last_actor_actions.get(enemy.id, [])
        new_state.last_actor_actions[enemy.id] = [ability.id, *history][: self._config.ability_history_size]
        logger.debug("%s (%s) chooses %s", enemy.id, enemy.behavior.value, ability.id)

        if ability.is_summon:
            return self._summon(new_state, stats, enemy, ability, payment, natural_roll, parts)
        if ability.is_supportive:
            return self._support(new_state, stats, enemy, ability, payment, parts)
        return self._attack(new_state, stats, enemy, ability, payment, natural_roll, parts)

    # -----------------------
    # Ability selection
    # -----------------------
    def available_abilities(self, state: CombatState, enemy: Actor) -> List[Ability]:
        """Abilities off cooldown and affordable; summons only while the enemy has none active."""
        available: List[Ability] = []
        for ability in enemy.abilities:
            if enemy.cooldowns.get(ability.id, 0) > 0:
                continue
            if ability.uses_magicka and enemy.magicka is not None and enemy.magicka < ability.cost:
                continue
            if ability.is_summon and (
                not self._config.enable_enemy_conjuration or state.active_summons(enemy.id)
            ):
                continue
            available.append(ability)
        return available

    def choose_ability(self, state: CombatState, enemy: Actor) -> Ability:
        available = self.available_abilities(state, enemy)
        if not available:
            return basic_attack(enemy.damage)

        forced = self._forced_summon(state, enemy, available)
        if forced is not None:
            enemy.forced_summon_used = True
            return forced

        behavior = enemy.behavior
        if behavior in (Behavior.AGGRESSIVE, Behavior.BERSERKER):
            pool = available
            magic = [ability for ability in available if ability.uses_magicka]
            if enemy.is_caster and magic and self._rng.random() < CASTER_MAGIC_PREFERENCE:
                pool = magic
            chosen = max(pool, key=lambda ability: ability.damage)
        elif behavior is Behavior.DEFENSIVE:
            chosen = min(available, key=lambda ability: ability.cost)
        elif behavior is Behavior.TACTICAL:
            with_effects = [ability for ability in available if ability.effects]
            if with_effects and self._rng.random() > TACTICAL_EFFECT_PREFERENCE:
                chosen = self._rng.choice(with_effects)
            else:
                chosen = self._rng.choice(available)
        elif behavior is Behavior.SUPPORT:
            heals = [ability for ability in available if ability.total_heal > 0]
            hurt = enemy.health < enemy.max_health * SUPPORT_HEAL_THRESHOLD
            chosen = max(heals, key=lambda ability: ability.total_heal) if heals and hurt else self._rng.choice(available)
        else:
            chosen = self._rng.choice(available)

        recent = state.last_actor_actions.get(enemy.id, [])[: self._config.ability_history_size]
        if len(available) > 1 and chosen.id in recent:
            alternative = next((ability for ability in available if ability.id not in recent), None)
            if alternative is not None:
                chosen = alternative
        return chosen

    def _forced_summon(self, state: CombatState, enemy: Actor, available: List[Ability]) -> Ability | None:
        if not enemy.is_boss or enemy.forced_summon_used:
            return None
        if enemy.health >= enemy.max_health * FORCED_SUMMON_HEALTH_FRACTION:
            return None
        if state.active_summons(enemy.id):
            return None
        return next((ability for ability in available if ability.is_summon), None)

    # -----------------------
    # Resolution
    # -----------------------
    def _attack(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        enemy: Actor,
        ability: Ability,
        payment: CostPayment,
        natural_roll: int | None,
        parts: List[str],
    ) -> EnemyTurnResult:
        target = self._pick_target(state)
        target_name = "you" if target is None else target.name
        armor = effective_armor(stats.armor, state.player_active_effects) if target is None else effective_armor(
            target.armor, target.active_effects
        )
        dodge = effective_dodge(stats.dodge_chance, state.player_active_effects) if target is None else 0
        roll = resolve_attack(
            self._rng,
            attacker_level=enemy.level,
            target_armor=armor,
            target_dodge=dodge,
            crit_chance=self._config.enemy_crit_chance,
            natural_roll=natural_roll,
        )
        entry = LogEntry(
            turn=state.turn,
            actor=enemy.id,
            action=ability.id,
            narrative="",
            target=PLAYER_ID if target is None else target.id,
            natural_roll=roll.natural_roll,
            tier=roll.tier,
            is_crit=roll.is_crit,
        )
        if not roll.hit:
            parts.insert(0, f"{enemy.name} uses {ability.name} and rolls {roll.natural_roll} ({roll.tier.value}), missing {target_name}.")
            return self._finish(state, stats, enemy, ability.id, parts, entry=entry)

        base = effective_damage(ability.damage or enemy.damage, enemy.active_effects) * payment.multiplier
        rolled = compute_damage(base, enemy.level, roll.natural_roll, roll.tier, roll.is_crit, minimum=1)
        entry.hit_location = rolled.hit_location
        if target is None:
            dealt = self._damage_player(state, stats, enemy, ability, rolled.damage, armor, dodge)
        else:
            dealt = target.take_damage(mitigate(rolled.damage, armor))
        entry.damage = dealt

        if dealt == 0:
            parts.insert(0, f"{enemy.name} uses {ability.name} but {target_name} avoid{'' if target is None else 's'} the attack!")
            return self._finish(state, stats, enemy, ability.id, parts, entry=entry)
        possessive = "your" if target is None else f"{target.name}'s"
        if roll.is_crit:
            parts.insert(0, f"{enemy.name} lands a CRITICAL HIT with {ability.name} for {dealt} damage to {possessive} {rolled.hit_location}!")
        else:
            parts.insert(0, f"{enemy.name} uses {ability.name} and deals {dealt} damage to {possessive} {rolled.hit_location}!")

        summary = self._apply_effects(state, stats, enemy, ability, target, payment, parts)
        target_alive = stats.current_health > 0 if target is None else target.is_alive
        if roll.is_crit and target_alive and self._config.enable_crit_stun:
            if self._rng.percent(self._config.crit_stun_chance):
                stun = StunEffect(duration=1)
                if target is None:
                    attach_to_player(state, stun)
                else:
                    attach_to_actor(target, stun)
                parts.append("You are stunned!" if target is None else describe_timed(target.name, stun))
        if target is not None and not target.is_alive:
            parts.append(f"{target.name} falls!")
        return self._finish(state, stats, enemy, ability.id, parts, entry=entry, summary=summary)

    def _damage_player(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        enemy: Actor,
        ability: Ability,
        damage: int,
        armor: int,
        dodge: int,
    ) -> int:
        damage = mitigate(damage, armor)
        damage = math.floor(damage * health_scale(stats.max_health) * level_scale(enemy.level))
        if ability.uses_magicka and stats.magic_resist > 0:
            resist = min(MAX_MAGIC_RESIST, stats.magic_resist)
            damage = max(1, math.floor(damage * (100 - resist) / 100))
        if damage > 0 and self._rng.percent(dodge):
            return 0
        reduction = guard_percent(state.player_active_effects)
        if state.player_defending:
            reduction = max(reduction, self._config.defend_damage_reduction)
        if reduction:
            damage = math.floor(damage * (100 - min(100, reduction)) / 100)
        return stats.take_damage(damage)

    def _pick_target(self, state: CombatState) -> Actor | None:
        """None means the player."""
        allies = state.living_allies()
        if allies and self._rng.percent(self._config.ally_target_chance):
            return self._rng.choice(allies)
        return None

    def _apply_effects(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        enemy: Actor,
        ability: Ability,
        target: Actor | None,
        payment: CostPayment,
        parts: List[str],
    ) -> List[AreaHit]:
        summary: List[AreaHit] = []
        for effect in ability.effects:
            if not triggers(self._rng, effect):
                continue
            if is_timed(effect):
                if target is None:
                    attach_to_player(state, effect)
                    parts.append(describe_timed("You", effect))
                elif target.is_alive:
                    attach_to_actor(target, effect)
                    parts.append(describe_timed(target.name, effect))
            elif isinstance(effect, HealEffect):
                healed = enemy.restore_health(effect.amount)
                parts.append(f"{enemy.name} recovers {healed} health.")
            elif isinstance(effect, DrainEffect):
                drained = drain_player(stats, effect) if target is None else drain_actor(target, effect)
                if drained:
                    parts.append(f"{enemy.name} drains {drained} {effect.stat.value}.")
                if effect.stat is Stat.HEALTH and drained:
                    enemy.restore_health(drained)
            elif isinstance(effect, AoeDamageEffect):
                hits = area_damage(
                    state, stats, effect.target, heal_amount(effect.amount, payment.multiplier), hostile_caster=True
                )
                summary.extend(hits)
                parts.extend(describe_area_hits(hits, "take", "damage"))
            elif isinstance(effect, AoeHealEffect):
                hits = area_heal(state, stats, effect.target, effect.amount, hostile_caster=True)
                summary.extend(hits)
                parts.extend(describe_area_hits(hits, "recover", "health"))
        return summary

    def _support(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        enemy: Actor,
        ability: Ability,
        payment: CostPayment,
        parts: List[str],
    ) -> EnemyTurnResult:
        parts.insert(0, f"{enemy.name} uses {ability.name}.")
        summary: List[AreaHit] = []
        if ability.heal:
            parts.append(f"{enemy.name} recovers {enemy.restore_health(heal_amount(ability.heal, payment.multiplier))} health.")
        for effect in ability.effects:
            if not triggers(self._rng, effect):
                continue
            if isinstance(effect, HealEffect):
                healed = enemy.restore_health(heal_amount(effect.amount, payment.multiplier))
                parts.append(f"{enemy.name} recovers {healed} health.")
            elif is_timed(effect):
                attach_to_actor(enemy, effect)
                parts.append(describe_timed(enemy.name, effect))
            elif isinstance(effect, AoeHealEffect):
                hits = area_heal(
                    state, stats, effect.target, heal_amount(effect.amount, payment.multiplier), hostile_caster=True
                )
                summary.extend(hits)
                parts.extend(describe_area_hits(hits, "recover", "health"))
        entry = LogEntry(turn=state.turn, actor=enemy.id, action=ability.id, narrative="", target=enemy.id)
        return self._finish(state, stats, enemy, ability.id, parts, entry=entry, summary=summary)

    def _summon(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        enemy: Actor,
        ability: Ability,
        payment: CostPayment,
        natural_roll: int | None,
        parts: List[str],
    ) -> EnemyTurnResult:
        roll: RollResult = resolve_attack(self._rng, attacker_level=enemy.level, natural_roll=natural_roll)
        entry = LogEntry(
            turn=state.turn,
            actor=enemy.id,
            action=ability.id,
            narrative="",
            natural_roll=roll.natural_roll,
            tier=roll.tier,
            is_crit=roll.is_crit,
        )
        scaling = summon_scaling_for_tier(roll.tier)
        if scaling is None:
            parts.insert(0, f"{enemy.name} tries to cast {ability.name}, but the conjuration collapses.")
            return self._finish(state, stats, enemy, ability.id, parts, entry=entry)
        summoned = spawn_summons(
            state,
            ability,
            owner=enemy,
            caster_level=enemy.level,
            rng=self._rng,
            scaling=scaling,
            power=payment.multiplier,
        )
        names = " and ".join(actor.name for actor in summoned)
        parts.insert(0, f"{enemy.name} casts {ability.name}: {names} joins the fight!")
        return self._finish(state, stats, enemy, ability.id, parts, entry=entry)

    def _finish(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        enemy: Actor,
        action: str,
        parts: List[str],
        *,
        entry: LogEntry | None = None,
        summary: List[AreaHit] | None = None,
    ) -> EnemyTurnResult:
        narrative = " ".join(part for part in parts if part)
        if entry is None:
            entry = LogEntry(turn=state.turn, actor=enemy.id, action=action, narrative="")
        entry.narrative = narrative
        state.record(entry)
        return EnemyTurnResult(state=state, player_stats=stats, narrative=narrative, area_effect_summary=summary or [])


__all__ = ["EnemyTurnExecutor"]
