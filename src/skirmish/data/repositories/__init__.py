"""Repository exports."""

from .enemy_templates_repo import EnemyTemplatesRepository
from .loot_tables_repo import LootTablesRepository
from .nutrition_repo import NutritionRepository
from .perks_repo import PerksRepository

__all__ = [
    "EnemyTemplatesRepository",
    "LootTablesRepository",
    "NutritionRepository",
    "PerksRepository",
]
