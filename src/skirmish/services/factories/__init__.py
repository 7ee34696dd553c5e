"""Factory helpers for runtime actors."""

from .enemy_factory import (
    create_boss_minions,
    create_enemy_from_template,
    generate_enemy_group,
    generate_mixed_encounter,
)
from .id_factory import make_instance_id
from .summon_factory import create_summon_actor

__all__ = [
    "create_boss_minions",
    "create_enemy_from_template",
    "create_summon_actor",
    "generate_enemy_group",
    "generate_mixed_encounter",
    "make_instance_id",
]
