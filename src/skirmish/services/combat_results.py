"""Return values of the turn executors."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from skirmish.domain.combat_models import CombatState
from skirmish.domain.effect_engine import AreaHit
from skirmish.domain.player import InventoryItem, PlayerCombatStats


@dataclass(slots=True)
class PlayerActionResult:
    """Outcome of one player action.

    ``turn_consumed`` is False for refusals (cooldown, unknown ability, guard
    already used, ...); the scheduler must not advance past the player then.
    ``used_item`` carries the consumed stack with its quantity reduced by one.
    """

    state: CombatState
    player_stats: PlayerCombatStats
    narrative: str
    area_effect_summary: List[AreaHit] = field(default_factory=list)
    used_item: InventoryItem | None = None
    turn_consumed: bool = True


@dataclass(slots=True)
class EnemyTurnResult:
    state: CombatState
    player_stats: PlayerCombatStats
    narrative: str
    area_effect_summary: List[AreaHit] = field(default_factory=list)


@dataclass(slots=True)
class CompanionActionResult:
    state: CombatState
    narrative: str
    success: bool


__all__ = ["CompanionActionResult", "EnemyTurnResult", "PlayerActionResult"]
