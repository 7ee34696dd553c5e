"""Definition dataclasses loaded from JSON."""

from .enemy_template_def import EnemyTemplateDef
from .loot_def import LootItemDef
from .perk_def import PerkDef, PerkEffectDef

__all__ = [
    "EnemyTemplateDef",
    "LootItemDef",
    "PerkDef",
    "PerkEffectDef",
]
