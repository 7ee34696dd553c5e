"""Encounter sizing and enemy-versus-player damage normalization."""
from __future__ import annotations

# Player level thresholds for encounter headcount, checked in order.
# Levels below the first threshold face a single enemy.
HEADCOUNT_THRESHOLDS = (
    (15, 5),
    (10, 4),
    (6, 3),
    (3, 2),
)
# Player health that enemy damage tables were balanced around.
REFERENCE_PLAYER_HEALTH = 100
LEVEL_SCALE_PER_LEVEL = 0.05


def get_enemy_count_for_level(player_level: int) -> int:
    """Return the target number of enemies (1-5) for a player of ``player_level``."""
    for threshold, count in HEADCOUNT_THRESHOLDS:
        if player_level >= threshold:
            return count
    return 1


def health_scale(player_max_health: int) -> float:
    """Grow enemy damage with the player's health pool so late fights keep their bite."""
    return max(1.0, player_max_health / REFERENCE_PLAYER_HEALTH) ** 0.5


def level_scale(enemy_level: int) -> float:
    return 1 + max(0, enemy_level - 1) * LEVEL_SCALE_PER_LEVEL
