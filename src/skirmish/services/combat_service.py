"""Single entry point for hosts driving an encounter."""
from __future__ import annotations

from typing import Sequence, Tuple

from skirmish.config import EngineConfig
from skirmish.core.rng import RNG
from skirmish.core.types import ActionKind
from skirmish.data.repositories import (
    EnemyTemplatesRepository,
    LootTablesRepository,
    NutritionRepository,
    PerksRepository,
)
from skirmish.domain.combat_models import Actor, CombatState
from skirmish.domain.perks import PerkBonusResolver
from skirmish.domain.player import Character, InventoryItem, PlayerCombatStats
from skirmish.services.combat_lifecycle import CombatLifecycle
from skirmish.services.combat_results import CompanionActionResult, EnemyTurnResult, PlayerActionResult
from skirmish.services.companion_turn_executor import CompanionTurnExecutor
from skirmish.services.enemy_turn_executor import EnemyTurnExecutor
from skirmish.services.player_stats_service import calculate_player_combat_stats
from skirmish.services.player_turn_executor import PlayerTurnExecutor
from skirmish.services.turn_scheduler import TurnScheduler


class CombatService:
    """
    Wires the executors, the scheduler and the lifecycle together.

    Every method takes a state and returns a new one; the caller keeps the
    latest copy. End conditions are re-checked after each player and enemy
    action, so hosts only need to look at ``state.active``.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        rng: RNG | None = None,
        perks_repo: PerksRepository | None = None,
        templates_repo: EnemyTemplatesRepository | None = None,
        loot_tables_repo: LootTablesRepository | None = None,
        nutrition_repo: NutritionRepository | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._rng = rng or RNG()
        self._perks = PerkBonusResolver(perks_repo.all() if perks_repo is not None else ())
        self._lifecycle = CombatLifecycle(
            self._config,
            rng=self._rng,
            templates_repo=templates_repo,
            loot_tables_repo=loot_tables_repo,
        )
        self._scheduler = TurnScheduler(self._config)
        self._player = PlayerTurnExecutor(
            self._config,
            rng=self._rng,
            perks=self._perks,
            lifecycle=self._lifecycle,
            nutrition_repo=nutrition_repo,
        )
        self._enemy = EnemyTurnExecutor(self._config, rng=self._rng)
        self._companion = CompanionTurnExecutor(self._config, rng=self._rng, lifecycle=self._lifecycle)

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def perks(self) -> PerkBonusResolver:
        return self._perks

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
        return self._lifecycle.initialize_combat(
            enemies,
            location=location,
            ambush=ambush,
            flee_allowed=flee_allowed,
            surrender_allowed=surrender_allowed,
            companions=companions,
            player_level=player_level,
        )

    def scale_enemy_encounter(self, enemies: Sequence[Actor], player_level: int) -> list[Actor]:
        return self._lifecycle.scale_enemy_encounter(enemies, player_level)

    def calculate_player_combat_stats(
        self, character: Character, equipment: Sequence[InventoryItem]
    ) -> PlayerCombatStats:
        return calculate_player_combat_stats(character, equipment, perks=self._perks, config=self._config)

    # -----------------------
    # Actions
    # -----------------------
    def execute_player_action(
        self,
        state: CombatState,
        player_stats: PlayerCombatStats,
        action: ActionKind,
        *,
        target_id: str | None = None,
        ability_id: str | None = None,
        item_id: str | None = None,
        inventory: Sequence[InventoryItem] | None = None,
        natural_roll: int | None = None,
        character: Character | None = None,
    ) -> PlayerActionResult:
        result = self._player.execute(
            state,
            player_stats,
            action,
            target_id=target_id,
            ability_id=ability_id,
            item_id=item_id,
            inventory=inventory,
            natural_roll=natural_roll,
            character=character,
        )
        if result.turn_consumed:
            result.state = self._lifecycle.check_combat_end(result.state, result.player_stats)
        return result

    def execute_enemy_turn(
        self,
        state: CombatState,
        enemy_id: str,
        player_stats: PlayerCombatStats,
        *,
        natural_roll: int | None = None,
        character: Character | None = None,
    ) -> EnemyTurnResult:
        result = self._enemy.execute(state, enemy_id, player_stats, natural_roll=natural_roll, character=character)
        result.state = self._lifecycle.check_combat_end(result.state, result.player_stats)
        return result

    def execute_companion_action(
        self,
        state: CombatState,
        ally_id: str,
        ability_id: str | None = None,
        *,
        target_id: str | None = None,
        natural_roll: int | None = None,
        is_auto: bool = False,
    ) -> CompanionActionResult:
        return self._companion.execute(
            state,
            ally_id,
            ability_id,
            target_id=target_id,
            natural_roll=natural_roll,
            is_auto=is_auto,
        )

    # -----------------------
    # Turn flow
    # -----------------------
    def advance_turn(self, state: CombatState) -> CombatState:
        return self._scheduler.advance_turn(state)

    def skip_actor_turn(self, state: CombatState, actor_id: str) -> CombatState:
        return self._scheduler.skip_actor_turn(state, actor_id)

    def check_combat_end(self, state: CombatState, player_stats: PlayerCombatStats) -> CombatState:
        return self._lifecycle.check_combat_end(state, player_stats)

    def apply_turn_regen(
        self,
        state: CombatState,
        player_stats: PlayerCombatStats,
        seconds_per_turn: int | None = None,
    ) -> Tuple[CombatState, PlayerCombatStats]:
        return self._lifecycle.apply_turn_regen(state, player_stats, seconds_per_turn)


__all__ = ["CombatService"]
