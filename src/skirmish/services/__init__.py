"""Service layer exports."""

from .errors import EngineError, FactoryError
from .combat_results import CompanionActionResult, EnemyTurnResult, PlayerActionResult
from .combat_lifecycle import CombatLifecycle
from .turn_scheduler import TurnScheduler
from .player_turn_executor import PlayerTurnExecutor
from .enemy_turn_executor import EnemyTurnExecutor
from .companion_turn_executor import CompanionTurnExecutor
from .combat_service import CombatService

__all__ = [
    "EngineError",
    "FactoryError",
    "CompanionActionResult",
    "EnemyTurnResult",
    "PlayerActionResult",
    "CombatLifecycle",
    "TurnScheduler",
    "PlayerTurnExecutor",
    "EnemyTurnExecutor",
    "CompanionTurnExecutor",
    "CombatService",
]
