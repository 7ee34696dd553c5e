"""Combat setup, end-of-combat checks, rewards and between-turn upkeep."""
from __future__ import annotations

import copy
import logging
import math
from collections import Counter
from typing import List, Sequence, Tuple

from skirmish.config import EngineConfig
from skirmish.core.rng import RNG
from skirmish.core.types import CombatResult, CompanionStatus, HealthState, HostilityState, Stat
from skirmish.data.repositories import EnemyTemplatesRepository, LootTablesRepository
from skirmish.domain.abilities import basic_attack
from skirmish.domain.combat_models import (
    PLAYER_ID,
    SYSTEM_ACTOR,
    Actor,
    CombatState,
    CompanionMeta,
    EnemyLoot,
    LogEntry,
    PendingRewards,
    RewardItem,
    SurvivalDelta,
)
from skirmish.domain.encounter_scaling import get_enemy_count_for_level
from skirmish.domain.player import PlayerCombatStats
from skirmish.services.factories import create_boss_minions, make_instance_id
from skirmish.services.summoning import remove_dead_summons

logger = logging.getLogger(__name__)

MIN_BOSS_MINIONS = 2
THRALL_HEALTH_FRACTION = 0.4
THRALL_DAMAGE_FRACTION = 0.5
WOUNDED_THRESHOLD = 0.5
CRITICAL_THRESHOLD = 0.25
ADMITTED_COMPANION_STATUSES = (CompanionStatus.FOLLOWING, CompanionStatus.GUARDING)


def default_xp_reward(actor: Actor) -> int:
    return max(5, actor.level * 10 + math.floor(actor.damage / 2))


def number_duplicate_names(actors: Sequence[Actor]) -> None:
    """Suffix repeated names in place: three Skeevers become Skeever 1, Skeever 2 and Skeever 3."""
    totals = Counter(actor.name for actor in actors)
    seen: Counter[str] = Counter()
    for actor in actors:
        if totals[actor.name] < 2:
            continue
        base = actor.name
        seen[base] += 1
        actor.name = f"{base} {seen[base]}"


def health_state_for(actor: Actor) -> HealthState:
    if actor.health <= 0:
        return HealthState.DEAD
    fraction = actor.health / actor.max_health if actor.max_health > 0 else 0
    if fraction <= CRITICAL_THRESHOLD:
        return HealthState.CRITICAL
    if fraction <= WOUNDED_THRESHOLD:
        return HealthState.WOUNDED
    return HealthState.HEALTHY


class CombatLifecycle:
    """Creates encounters and decides when they are over."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        rng: RNG | None = None,
        templates_repo: EnemyTemplatesRepository | None = None,
        loot_tables_repo: LootTablesRepository | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._rng = rng or RNG()
        self._templates_repo = templates_repo
        self._loot_tables_repo = loot_tables_repo

    # -----------------------
    # Setup
    # -----------------------
    def initialize_combat(
        self,
        enemies: Sequence[Actor],
        *,
        location: str,
        ambush: bool = False,
        flee_allowed: bool = True,
        surrender_allowed: bool = False,
        companions: Sequence[Actor] = (),
        player_level: int = 1,
    ) -> CombatState:
        """Build the opening state for a fight against ``enemies``."""
        roster = [self._prepare_enemy(enemy) for enemy in copy.deepcopy(list(enemies))]
        if self._config.enable_encounter_scaling:
            roster = self.scale_enemy_encounter(roster, player_level)
        if self._config.enable_boss_minions:
            roster = self._attach_boss_minions(roster)
        number_duplicate_names(roster)

        allies = [self._prepare_companion(companion) for companion in copy.deepcopy(list(companions))]
        allies = [ally for ally in allies if ally is not None]

        enemy_ids = [enemy.id for enemy in roster]
        turn_order = [*enemy_ids, PLAYER_ID] if ambush else [PLAYER_ID, *enemy_ids]
        turn_order.extend(ally.id for ally in allies)

        names = ", ".join(enemy.name for enemy in roster)
        if ambush:
            opening = f"You've been ambushed! {names} attack!"
        else:
            opening = f"Combat begins against {names}!"
        state = CombatState(
            id=make_instance_id("combat", self._rng),
            location=location,
            turn_order=turn_order,
            current_turn_actor=turn_order[0],
            enemies=roster,
            allies=allies,
            flee_allowed=flee_allowed,
            surrender_allowed=surrender_allowed,
        )
        state.combat_log.append(LogEntry(turn=0, actor=SYSTEM_ACTOR, action="combat_start", narrative=opening))
        logger.debug("combat %s at %s: %s", state.id, location, turn_order)
        return state

    def scale_enemy_encounter(self, enemies: Sequence[Actor], player_level: int) -> List[Actor]:
        """Pad a small group with copies of its rank-and-file up to the level-appropriate headcount."""
        roster = list(enemies)
        target = min(get_enemy_count_for_level(player_level), self._config.max_encounter_size)
        rank_and_file = [enemy for enemy in roster if not enemy.is_boss]
        if len(roster) >= target or not rank_and_file:
            return roster
        index = 0
        while len(roster) < target:
            source = rank_and_file[index % len(rank_and_file)]
            clone = copy.deepcopy(source)
            clone.id = make_instance_id(source.template_id or "enemy", self._rng)
            clone.health = clone.max_health
            clone.active_effects = []
            clone.cooldowns = {}
            roster.append(clone)
            index += 1
        return roster

    # -----------------------
    # End conditions
    # -----------------------
    def check_combat_end(self, state: CombatState, player_stats: PlayerCombatStats) -> CombatState:
        """Refresh enemy status, then declare defeat or victory when one applies."""
        new_state = state.clone()
        if not new_state.active:
            return new_state
        remove_dead_summons(new_state)
        self._refresh_enemy_states(new_state)
        if player_stats.current_health <= 0:
            self.finish_combat(new_state, CombatResult.DEFEAT, "You have been defeated...")
            return new_state
        if not any(enemy.hostility is HostilityState.STILL_HOSTILE for enemy in new_state.enemies):
            self._declare_victory(new_state)
        return new_state

    def check_victory(self, state: CombatState) -> CombatState:
        """Victory-only check used after allied actions, which cannot defeat the player."""
        new_state = state.clone()
        if not new_state.active:
            return new_state
        self._refresh_enemy_states(new_state)
        if not any(enemy.hostility is HostilityState.STILL_HOSTILE for enemy in new_state.enemies):
            remove_dead_summons(new_state)
            self._declare_victory(new_state)
        return new_state

    def finish_combat(self, state: CombatState, result: CombatResult, narrative: str) -> None:
        """Close ``state`` in place with ``result`` and the time-based survival cost."""
        state.active = False
        state.result = result
        state.survival_delta = self._survival_delta(state)
        state.record(LogEntry(turn=state.turn, actor=SYSTEM_ACTOR, action=result.value, narrative=narrative))
        logger.info("combat %s ended: %s after %s rounds", state.id, result.value, state.turn)

    # -----------------------
    # Upkeep
    # -----------------------
    def apply_turn_regen(
        self,
        state: CombatState,
        player_stats: PlayerCombatStats,
        seconds_per_turn: int | None = None,
    ) -> Tuple[CombatState, PlayerCombatStats]:
        """Grant one turn's worth of per-second regeneration to the player and living enemies."""
        seconds = self._config.seconds_per_turn if seconds_per_turn is None else seconds_per_turn
        new_state = state.clone()
        stats = player_stats.clone()
        gains = [
            (Stat.HEALTH, stats.restore(Stat.HEALTH, math.floor(stats.regen_health_per_sec * seconds))),
            (Stat.MAGICKA, stats.restore(Stat.MAGICKA, math.floor(stats.regen_magicka_per_sec * seconds))),
            (Stat.STAMINA, stats.restore(Stat.STAMINA, math.floor(stats.regen_stamina_per_sec * seconds))),
        ]
        pool_regen = math.floor(self._config.enemy_regen_per_second * seconds)
        for enemy in new_state.enemies:
            if not enemy.is_alive:
                continue
            enemy.restore_health(math.floor(enemy.regen_health_per_sec * seconds))
            if enemy.magicka is not None and enemy.max_magicka is not None:
                enemy.magicka = min(enemy.max_magicka, enemy.magicka + pool_regen)
            if enemy.stamina is not None and enemy.max_stamina is not None:
                enemy.stamina = min(enemy.max_stamina, enemy.stamina + pool_regen)

        parts = [f"{amount} {stat.value}" for stat, amount in gains if amount > 0]
        if parts:
            new_state.record(
                LogEntry(
                    turn=new_state.turn,
                    actor=PLAYER_ID,
                    action="regen",
                    narrative=f"You recover {', '.join(parts)}.",
                )
            )
        return new_state, stats

    # -----------------------
    # Helpers
    # -----------------------
    def _prepare_enemy(self, enemy: Actor) -> Actor:
        enemy.health = max(0, min(enemy.health, enemy.max_health))
        if enemy.xp_reward is None:
            enemy.xp_reward = default_xp_reward(enemy)
        if enemy.gold_reward is None:
            enemy.gold_reward = self._rng.randint(max(1, enemy.level * 5), max(5, enemy.level * 12))
        if not enemy.regen_health_per_sec:
            enemy.regen_health_per_sec = self._config.enemy_regen_per_second
        if not enemy.loot and self._loot_tables_repo is not None:
            enemy.loot = self._loot_tables_repo.for_kind(enemy.kind)
        return enemy

    def _prepare_companion(self, companion: Actor) -> Actor | None:
        meta = companion.companion_meta or CompanionMeta()
        if not companion.is_alive or meta.status not in ADMITTED_COMPANION_STATUSES:
            return None
        companion.companion_meta = meta
        companion.is_companion = True
        return companion

    def _attach_boss_minions(self, roster: List[Actor]) -> List[Actor]:
        count = max(self._config.boss_minion_count, MIN_BOSS_MINIONS)
        result: List[Actor] = []
        for enemy in roster:
            result.append(enemy)
            if not enemy.is_boss:
                continue
            minions: List[Actor] = []
            if self._templates_repo is not None:
                minions = create_boss_minions(enemy, count, templates_repo=self._templates_repo, rng=self._rng)
            if not minions:
                minions = [self._derive_thrall(enemy) for _ in range(count)]
            result.extend(self._prepare_enemy(minion) for minion in minions)
            logger.debug("boss %s brings %s minions", enemy.id, len(minions))
        return result

    def _derive_thrall(self, boss: Actor) -> Actor:
        max_health = max(1, math.floor(boss.max_health * THRALL_HEALTH_FRACTION))
        damage = max(1, math.floor(boss.damage * THRALL_DAMAGE_FRACTION))
        return Actor(
            id=make_instance_id(f"{boss.template_id or 'boss'}_thrall", self._rng),
            name=f"{boss.name}'s Thrall",
            kind=boss.kind,
            level=max(1, boss.level - 3),
            max_health=max_health,
            health=max_health,
            armor=boss.armor // 2,
            damage=damage,
            behavior=boss.behavior,
            max_stamina=boss.max_stamina,
            stamina=boss.max_stamina,
            abilities=[basic_attack(damage)],
            description=f"A lesser servant of {boss.name}",
        )

    def _refresh_enemy_states(self, state: CombatState) -> None:
        for enemy in state.enemies:
            enemy.health_state = health_state_for(enemy)
            if not enemy.is_alive:
                enemy.hostility = HostilityState.DEAD

    def _declare_victory(self, state: CombatState) -> None:
        xp = sum(enemy.xp_reward or 0 for enemy in state.enemies)
        gold = sum(enemy.gold_reward or 0 for enemy in state.enemies)
        items: List[RewardItem] = []
        pending_loot: List[EnemyLoot] = []
        for enemy in state.enemies:
            found = EnemyLoot(enemy_id=enemy.id, enemy_name=enemy.name)
            for loot_item in enemy.loot:
                if self._rng.percent(loot_item.drop_chance):
                    found.items.append(
                        RewardItem(
                            name=loot_item.name,
                            kind=loot_item.kind.value,
                            description=loot_item.description,
                            quantity=loot_item.quantity,
                        )
                    )
            if found.items:
                pending_loot.append(found)
                items.extend(found.items)
        state.loot_pending = True
        state.pending_rewards = PendingRewards(xp=xp, gold=gold, items=items)
        state.pending_loot = pending_loot
        self.finish_combat(state, CombatResult.VICTORY, "All enemies defeated! Time to collect the spoils.")

    def _survival_delta(self, state: CombatState) -> SurvivalDelta:
        minutes = state.turn * self._config.seconds_per_turn / 60
        carried = state.survival_delta
        return SurvivalDelta(
            hunger=round(carried.hunger + minutes * self._config.hunger_per_minute, 1),
            thirst=round(carried.thirst + minutes * self._config.thirst_per_minute, 1),
            fatigue=round(carried.fatigue + minutes * self._config.fatigue_per_minute, 1),
        )


__all__ = ["CombatLifecycle", "default_xp_reward", "health_state_for", "number_duplicate_names"]
