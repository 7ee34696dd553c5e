"""Player-side inputs the engine consumes from the rest of the game."""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, List

from skirmish.core.types import Element, ItemKind, Stat, WeaponCategory
from skirmish.domain.abilities import Ability

DEFAULT_SKILL_LEVEL = 15


@dataclass(slots=True)
class Character:
    """Read-only view of the character sheet."""

    name: str
    level: int
    health: int
    magicka: int
    stamina: int
    skills: Dict[str, int] = field(default_factory=dict)
    perks: Dict[str, int] = field(default_factory=dict)
    current_health: int | None = None
    current_magicka: int | None = None
    current_stamina: int | None = None

    def skill(self, name: str) -> int:
        return self.skills.get(name, DEFAULT_SKILL_LEVEL)


@dataclass(slots=True, frozen=True)
class InventoryItem:
    id: str
    name: str
    kind: ItemKind
    quantity: int = 1
    description: str = ""
    subtype: str | None = None
    damage: int | None = None
    armor: int | None = None
    slot: str | None = None
    equipped: bool = False
    weapon_category: WeaponCategory | None = None
    element: Element | None = None


@dataclass(slots=True)
class PlayerCombatStats:
    """Gear- and skill-derived combat numbers for the player."""

    max_health: int
    current_health: int
    max_magicka: int
    current_magicka: int
    max_stamina: int
    current_stamina: int
    armor: int
    weapon_damage: int
    crit_chance: int = 5
    dodge_chance: int = 0
    magic_resist: int = 0
    abilities: List[Ability] = field(default_factory=list)
    weapon_category: WeaponCategory = WeaponCategory.UNARMED
    regen_health_per_sec: float = 0.25
    regen_magicka_per_sec: float = 0.25
    regen_stamina_per_sec: float = 0.25

    def clone(self) -> "PlayerCombatStats":
        return copy.deepcopy(self)

    def find_ability(self, ability_id: str) -> Ability | None:
        return next((ability for ability in self.abilities if ability.id == ability_id), None)

    def grant_ability(self, ability: Ability) -> None:
        """Add ``ability`` unless one with the same id is already known."""
        if self.find_ability(ability.id) is None:
            self.abilities.append(ability)

    def restore(self, stat: Stat, amount: int) -> int:
        """Raise a vital by ``amount`` up to its maximum; return the actual gain."""
        if stat is Stat.HEALTH:
            before = self.current_health
            self.current_health = min(self.max_health, self.current_health + max(0, amount))
            return self.current_health - before
        if stat is Stat.MAGICKA:
            before = self.current_magicka
            self.current_magicka = min(self.max_magicka, self.current_magicka + max(0, amount))
            return self.current_magicka - before
        if stat is Stat.STAMINA:
            before = self.current_stamina
            self.current_stamina = min(self.max_stamina, self.current_stamina + max(0, amount))
            return self.current_stamina - before
        return 0

    def take_damage(self, amount: int) -> int:
        before = self.current_health
        self.current_health = max(0, self.current_health - max(0, amount))
        return before - self.current_health


__all__ = ["Character", "DEFAULT_SKILL_LEVEL", "InventoryItem", "PlayerCombatStats"]
