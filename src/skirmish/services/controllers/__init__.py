"""UI-agnostic controllers for combat flow orchestration."""
from __future__ import annotations

from .combat_controller import CombatAction, CombatController, TurnOutcome

__all__ = [
    "CombatAction",
    "CombatController",
    "TurnOutcome",
]
