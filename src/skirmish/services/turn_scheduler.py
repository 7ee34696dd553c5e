"""Turn order, round counting and the per-round countdowns."""
from __future__ import annotations

import logging
from typing import Dict, List

from skirmish.config import EngineConfig
from skirmish.domain.combat_models import PLAYER_ID, SYSTEM_ACTOR, CombatState, LogEntry
from skirmish.services.summoning import age_pending_summons, apply_summon_decay, remove_dead_summons

logger = logging.getLogger(__name__)


class TurnScheduler:
    """Moves ``current_turn_actor`` along ``turn_order``; every call returns a new state."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()

    def advance_turn(self, state: CombatState) -> CombatState:
        """
        Hand the turn to the next living actor.

        Wrapping past the end of ``turn_order`` starts a new round: the round
        counter goes up and every cooldown ticks down by one. Arriving at the
        player is a player turn: decaying minions wither, minion lifetimes
        age and dead minions leave the field.
        """
        new_state = state.clone()
        if not new_state.active or not new_state.turn_order:
            return new_state

        order = new_state.turn_order
        if new_state.current_turn_actor in order:
            start = order.index(new_state.current_turn_actor)
        else:
            start = -1

        next_id = None
        wrapped = False
        for step in range(1, len(order) + 1):
            index = start + step
            if index >= len(order):
                wrapped = True
            candidate = order[index % len(order)]
            if self._can_act(new_state, candidate):
                next_id = candidate
                break
        if next_id is None:
            next_id = PLAYER_ID

        previous = new_state.current_turn_actor
        if previous != PLAYER_ID and previous in order and new_state.find_actor(previous) is None:
            # Slot of a minion dismissed during its own turn.
            order.remove(previous)

        if wrapped:
            self._start_round(new_state)
        new_state.current_turn_actor = next_id
        if next_id == PLAYER_ID:
            self._start_player_turn(new_state)
        return new_state

    def skip_actor_turn(self, state: CombatState, actor_id: str) -> CombatState:
        """Log that ``actor_id`` passes, then advance."""
        new_state = state.clone()
        if actor_id == PLAYER_ID:
            narrative = "You skip the turn."
        else:
            actor = new_state.find_actor(actor_id)
            narrative = f"{actor.name if actor else actor_id} skips the turn."
        new_state.record(
            LogEntry(
                turn=new_state.turn,
                actor=actor_id,
                action="skip",
                narrative=narrative,
            )
        )
        return self.advance_turn(new_state)

    # -----------------------
    # Helpers
    # -----------------------
    def _can_act(self, state: CombatState, actor_id: str) -> bool:
        if actor_id == PLAYER_ID:
            return True
        actor = state.find_actor(actor_id)
        if actor is None:
            logger.warning("Turn order names unknown actor '%s'; skipping it.", actor_id)
            return False
        return actor.is_alive

    def _start_round(self, state: CombatState) -> None:
        state.turn += 1
        state.ability_cooldowns = _tick_cooldowns(state.ability_cooldowns)
        for actor in state.iter_actors():
            actor.cooldowns = _tick_cooldowns(actor.cooldowns)
        logger.debug("round %s begins", state.turn)

    def _start_player_turn(self, state: CombatState) -> None:
        state.player_defending = False
        decayed = apply_summon_decay(state, self._config.summon_decay_fraction)
        expired = age_pending_summons(state)
        removed = remove_dead_summons(state)
        lines: List[str] = []
        lines.extend(f"{actor.name} withers as its binding fades." for actor in decayed)
        lines.extend(f"{actor.name}'s summoning time has run out." for actor in expired)
        lines.extend(f"{actor.name} vanishes." for actor in removed)
        if lines:
            state.record(
                LogEntry(
                    turn=state.turn,
                    actor=SYSTEM_ACTOR,
                    action="summons",
                    narrative=" ".join(lines),
                )
            )


def _tick_cooldowns(cooldowns: Dict[str, int]) -> Dict[str, int]:
    return {key: remaining - 1 for key, remaining in cooldowns.items() if remaining - 1 > 0}


__all__ = ["TurnScheduler"]
