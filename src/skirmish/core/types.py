"""Closed vocabularies shared by the domain and service layers."""
from __future__ import annotations

from enum import Enum


class CombatResult(str, Enum):
    NONE = "none"
    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"
    SURRENDERED = "surrendered"


class Tier(str, Enum):
    """Outcome bucket of a d20 roll."""

    FAIL = "fail"
    MISS = "miss"
    LOW = "low"
    MID = "mid"
    HIGH = "high"
    CRIT = "crit"

    @property
    def is_hit(self) -> bool:
        return self not in (Tier.FAIL, Tier.MISS)


class CreatureKind(str, Enum):
    HUMANOID = "humanoid"
    BEAST = "beast"
    UNDEAD = "undead"
    DAEDRA = "daedra"
    AUTOMATON = "automaton"
    DRAGON = "dragon"


class Behavior(str, Enum):
    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    TACTICAL = "tactical"
    BERSERKER = "berserker"
    SUPPORT = "support"


class AbilityKind(str, Enum):
    MELEE = "melee"
    RANGED = "ranged"
    MAGIC = "magic"
    UTILITY = "utility"
    AOE = "aoe"


class Element(str, Enum):
    FIRE = "fire"
    FROST = "frost"
    SHOCK = "shock"


class WeaponCategory(str, Enum):
    UNARMED = "unarmed"
    SWORD = "sword"
    GREATSWORD = "greatsword"
    MACE = "mace"
    WARHAMMER = "warhammer"
    AXE = "axe"
    BATTLEAXE = "battleaxe"
    DAGGER = "dagger"
    BOW = "bow"
    STAFF = "staff"


class Stat(str, Enum):
    """Stats that timed buffs and debuffs can modify."""

    HEALTH = "health"
    MAGICKA = "magicka"
    STAMINA = "stamina"
    DAMAGE = "damage"
    ARMOR = "armor"
    DODGE = "dodge"
    STEALTH = "stealth"
    GUARD = "guard"


class AreaTarget(str, Enum):
    ALL_ENEMIES = "all_enemies"
    ALL_ALLIES = "all_allies"


class ActionKind(str, Enum):
    ATTACK = "attack"
    POWER_ATTACK = "power_attack"
    MAGIC = "magic"
    SHOUT = "shout"
    DEFEND = "defend"
    FLEE = "flee"
    SURRENDER = "surrender"
    SKIP = "skip"
    ITEM = "item"


class ItemKind(str, Enum):
    POTION = "potion"
    FOOD = "food"
    DRINK = "drink"
    WEAPON = "weapon"
    APPAREL = "apparel"
    INGREDIENT = "ingredient"
    MISC = "misc"
    KEY = "key"


class ArrowKind(str, Enum):
    FIRE = "fire_arrows"
    ICE = "ice_arrows"
    SHOCK = "shock_arrows"
    PARALYZE = "paralyze_arrows"
    COMMAND = "allycall_arrows"


class HealthState(str, Enum):
    HEALTHY = "healthy"
    WOUNDED = "wounded"
    CRITICAL = "critical"
    DEAD = "dead"


class HostilityState(str, Enum):
    STILL_HOSTILE = "still_hostile"
    DEAD = "dead"
    FLED = "fled"


class CompanionStatus(str, Enum):
    FOLLOWING = "following"
    GUARDING = "guarding"
    WAITING = "waiting"
    DISMISSED = "dismissed"


__all__ = [
    "AbilityKind",
    "ActionKind",
    "AreaTarget",
    "ArrowKind",
    "Behavior",
    "CombatResult",
    "CompanionStatus",
    "CreatureKind",
    "Element",
    "HealthState",
    "HostilityState",
    "ItemKind",
    "Stat",
    "Tier",
    "WeaponCategory",
]
