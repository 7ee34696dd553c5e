"""Enemy template definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from skirmish.core.types import Behavior, CreatureKind
from skirmish.domain.abilities import Ability
from skirmish.domain.defs.loot_def import LootItemDef


@dataclass(slots=True, frozen=True)
class EnemyTemplateDef:
    """Blueprint the enemy factory rolls concrete enemies from."""

    id: str
    name: str
    kind: CreatureKind
    base_level: int
    base_health: int
    base_armor: int
    base_damage: int
    behaviors: Tuple[Behavior, ...]
    abilities: Tuple[Ability, ...]
    base_xp: int
    loot: Tuple[LootItemDef, ...]
    base_gold: int | None = None
    boss: bool = False
    caster: bool = False
    minion_template: str | None = None
    name_prefixes: Tuple[str, ...] = ()
    weaknesses: Tuple[str, ...] = ()
    resistances: Tuple[str, ...] = ()
