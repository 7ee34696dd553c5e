"""Aggregation of perk bonuses for a character."""
from __future__ import annotations

from typing import Dict, Iterable, List

from skirmish.domain.defs import PerkDef
from skirmish.domain.player import Character

# Effect keys. Percentage keys are applied as ``1 + bonus / 100``.
LIFESTEAL = "lifesteal"
FIRE_DAMAGE = "fireDamage"
FROST_DAMAGE = "frostDamage"
SHOCK_DAMAGE = "shockDamage"
SWORD_CRIT_DAMAGE = "swordCritDamage"
MACE_ARMOR_PENETRATION = "maceArmorPenetration"
AXE_BLEED_CHANCE = "axeBleedChance"
UNARMED_DAMAGE = "unarmedDamage"
HEALING_POWER = "healingPower"
CONJURATION_POWER = "conjurationPower"
ARMOR = "armor"
HEALTH = "health"
MAGICKA = "magicka"
STAMINA = "stamina"

# Perk ids used for gating.
TWIN_SOULS = "twin_souls"
UNARMED_MASTERY = "unarmed_mastery"
TACTICAL_GUARD_MASTERY = "tactical_guard_mastery"
REROLL_ON_FAILURE = "reroll_on_failure"

UNARMED_SKILL = "Unarmed"
UNARMED_SKILL_THRESHOLD = 5


class PerkBonusResolver:
    """Sums per-rank perk amounts keyed by effect tag."""

    def __init__(self, perks: Iterable[PerkDef]) -> None:
        self._perks: Dict[str, PerkDef] = {perk.id: perk for perk in perks}
        self._by_key: Dict[str, List[tuple[str, float]]] = {}
        for perk in self._perks.values():
            for effect in perk.effects:
                self._by_key.setdefault(effect.key, []).append((perk.id, effect.amount))

    def rank(self, character: Character | None, perk_id: str) -> int:
        if character is None:
            return 0
        rank = character.perks.get(perk_id, 0)
        perk = self._perks.get(perk_id)
        if perk is not None:
            rank = min(rank, perk.max_rank)
        return max(0, rank)

    def has_perk(self, character: Character | None, perk_id: str) -> bool:
        return self.rank(character, perk_id) >= 1

    def bonus(self, character: Character | None, key: str) -> float:
        """Total ``amount * rank`` over every ranked perk declaring ``key``."""
        total = 0.0
        for perk_id, amount in self._by_key.get(key, []):
            total += amount * self.rank(character, perk_id)
        return total

    def multiplier(self, character: Character | None, key: str) -> float:
        return 1 + self.bonus(character, key) / 100

    def summon_cap(self, character: Character | None) -> int:
        return 1 + self.rank(character, TWIN_SOULS)

    def unarmed_unlocked(self, character: Character | None) -> bool:
        if character is None:
            return False
        return (
            character.skills.get(UNARMED_SKILL, 0) >= UNARMED_SKILL_THRESHOLD
            or self.has_perk(character, UNARMED_MASTERY)
        )
