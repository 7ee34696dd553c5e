"""UI-agnostic combat controller that separates turn progression from rendering."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from skirmish.core.types import ActionKind
from skirmish.domain.combat_models import PLAYER_ID, CombatState
from skirmish.domain.effect_engine import AreaHit
from skirmish.domain.player import Character, InventoryItem, PlayerCombatStats
from skirmish.services.combat_service import CombatService


@dataclass(slots=True)
class CombatAction:
    """Represents a structured action decision from the player."""

    action: ActionKind
    target_id: str | None = None
    ability_id: str | None = None
    item_id: str | None = None
    natural_roll: int | None = None


@dataclass(slots=True)
class TurnOutcome:
    """State after one controller step, already advanced to the next actor when the turn was used."""

    state: CombatState
    player_stats: PlayerCombatStats
    narrative: str
    turn_consumed: bool = True
    used_item: InventoryItem | None = None
    area_effect_summary: List[AreaHit] = field(default_factory=list)


class CombatController:
    """
    UI-agnostic controller for combat progression.

    This controller wraps CombatService and dispatches on
    ``current_turn_actor``. It does NOT handle rendering, formatting, or input
    prompts.

    Responsibilities:
    - Report whose turn it is and what the player may do
    - Apply player actions and run enemy/ally turns
    - Advance the turn order, granting regeneration when a new round starts
    """

    def __init__(self, combat_service: CombatService) -> None:
        self._service = combat_service

    def is_player_turn(self, state: CombatState) -> bool:
        return state.active and state.current_turn_actor == PLAYER_ID

    def is_enemy_turn(self, state: CombatState) -> bool:
        return state.active and state.find_enemy(state.current_turn_actor) is not None

    def is_ally_turn(self, state: CombatState) -> bool:
        return state.active and state.find_ally(state.current_turn_actor) is not None

    def get_available_actions(self, state: CombatState, player_stats: PlayerCombatStats) -> dict:
        """
        Return structured data about what the player can do right now.

        Returns a dict with:
        - can_act: bool
        - can_defend: bool
        - can_flee: bool
        - can_surrender: bool
        - ready_abilities: list of ability ids off cooldown
        """
        if not self.is_player_turn(state):
            return {
                "can_act": False,
                "can_defend": False,
                "can_flee": False,
                "can_surrender": False,
                "ready_abilities": [],
            }
        ready = [
            ability.id for ability in player_stats.abilities if state.ability_cooldowns.get(ability.id, 0) <= 0
        ]
        return {
            "can_act": True,
            "can_defend": not state.player_guard_used,
            "can_flee": state.flee_allowed,
            "can_surrender": state.surrender_allowed,
            "ready_abilities": ready,
        }

    def apply_player_action(
        self,
        state: CombatState,
        player_stats: PlayerCombatStats,
        action: CombatAction,
        *,
        inventory: Sequence[InventoryItem] | None = None,
        character: Character | None = None,
    ) -> TurnOutcome:
        """Apply a player action; the turn only moves on when the action was not refused."""
        if not self.is_player_turn(state):
            raise ValueError("It is not the player's turn.")
        result = self._service.execute_player_action(
            state,
            player_stats,
            action.action,
            target_id=action.target_id,
            ability_id=action.ability_id,
            item_id=action.item_id,
            inventory=inventory,
            natural_roll=action.natural_roll,
            character=character,
        )
        new_state, stats = result.state, result.player_stats
        if result.turn_consumed:
            new_state, stats = self._advance(new_state, stats)
        return TurnOutcome(
            state=new_state,
            player_stats=stats,
            narrative=result.narrative,
            turn_consumed=result.turn_consumed,
            used_item=result.used_item,
            area_effect_summary=result.area_effect_summary,
        )

    def run_enemy_turn(
        self,
        state: CombatState,
        player_stats: PlayerCombatStats,
        *,
        natural_roll: int | None = None,
        character: Character | None = None,
    ) -> TurnOutcome:
        """Execute the current enemy's AI turn and advance."""
        if not self.is_enemy_turn(state):
            raise ValueError("It is not an enemy's turn.")
        result = self._service.execute_enemy_turn(
            state,
            state.current_turn_actor,
            player_stats,
            natural_roll=natural_roll,
            character=character,
        )
        new_state, stats = self._advance(result.state, result.player_stats)
        return TurnOutcome(
            state=new_state,
            player_stats=stats,
            narrative=result.narrative,
            area_effect_summary=result.area_effect_summary,
        )

    def run_ally_turn(
        self,
        state: CombatState,
        player_stats: PlayerCombatStats,
        *,
        natural_roll: int | None = None,
    ) -> TurnOutcome:
        """Execute the current ally's automatic turn and advance."""
        if not self.is_ally_turn(state):
            raise ValueError("It is not an ally's turn.")
        result = self._service.execute_companion_action(
            state,
            state.current_turn_actor,
            natural_roll=natural_roll,
            is_auto=True,
        )
        new_state, stats = self._advance(result.state, player_stats)
        return TurnOutcome(state=new_state, player_stats=stats, narrative=result.narrative)

    def run_until_player_turn(
        self,
        state: CombatState,
        player_stats: PlayerCombatStats,
        *,
        character: Character | None = None,
    ) -> TurnOutcome:
        """Run enemy and ally turns until the player is up or the fight ends."""
        narratives: List[str] = []
        stats = player_stats
        # Each actor acts at most once per pass; two passes cover a round that starts mid-order.
        for _ in range(2 * max(1, len(state.turn_order))):
            if not state.active or self.is_player_turn(state):
                break
            if self.is_enemy_turn(state):
                outcome = self.run_enemy_turn(state, stats, character=character)
            elif self.is_ally_turn(state):
                outcome = self.run_ally_turn(state, stats)
            else:
                state = self._service.advance_turn(state)
                continue
            state, stats = outcome.state, outcome.player_stats
            if outcome.narrative:
                narratives.append(outcome.narrative)
        return TurnOutcome(state=state, player_stats=stats, narrative="\n".join(narratives))

    def _advance(self, state: CombatState, player_stats: PlayerCombatStats) -> tuple[CombatState, PlayerCombatStats]:
        if not state.active:
            return state, player_stats
        advanced = self._service.advance_turn(state)
        if advanced.turn > state.turn:
            return self._service.apply_turn_regen(advanced, player_stats)
        return advanced, player_stats
