"""Derive the player's combat numbers from the character sheet and gear."""
from __future__ import annotations

import math
from typing import List, Sequence

from skirmish.config import EngineConfig
from skirmish.core.types import AbilityKind, Element, ItemKind, Stat, WeaponCategory
from skirmish.domain import perks as perk_keys
from skirmish.domain.abilities import Ability
from skirmish.domain.effects import DebuffEffect, DotEffect, DrainEffect, HealEffect, StunEffect, SummonEffect, SummonTemplate
from skirmish.domain.perks import PerkBonusResolver
from skirmish.domain.player import Character, InventoryItem, PlayerCombatStats

BASE_WEAPON_DAMAGE = 10
BASE_CRIT_CHANCE = 5
BASE_REGEN_PER_SEC = 0.25

_SMALL_WEAPONS = (WeaponCategory.DAGGER, WeaponCategory.SWORD)


def calculate_player_combat_stats(
    character: Character,
    equipment: Sequence[InventoryItem],
    *,
    perks: PerkBonusResolver | None = None,
    config: EngineConfig | None = None,
) -> PlayerCombatStats:
    """Build combat stats from equipped items, skills and perks."""
    config = config or EngineConfig()
    perks = perks or PerkBonusResolver(())
    equipped = [item for item in equipment if item.equipped]
    main_weapon = next((item for item in equipped if item.slot == "weapon" and item.kind is ItemKind.WEAPON), None)

    armor = sum(item.armor or 0 for item in equipped)
    weapon_damage = BASE_WEAPON_DAMAGE
    if main_weapon is not None and main_weapon.damage:
        weapon_damage = main_weapon.damage
    else:
        for item in equipped:
            if item.damage:
                weapon_damage = max(weapon_damage, item.damage)

    armor_skill = max(character.skill("Light Armor"), character.skill("Heavy Armor"))
    armor = math.floor(armor * (1 + armor_skill * 0.5 / 100))
    weapon_skill = max(character.skill("One-Handed"), character.skill("Two-Handed"), character.skill("Archery"))
    weapon_damage = math.floor(weapon_damage * (1 + weapon_skill * 0.5 / 100))
    dodge = math.floor(character.skill("Sneak") * 0.3)
    magic_resist = math.floor(character.skill("Alteration") * 0.2)

    armor = math.floor(armor * perks.multiplier(character, perk_keys.ARMOR))
    max_health = character.health + int(perks.bonus(character, perk_keys.HEALTH))
    max_magicka = character.magicka + int(perks.bonus(character, perk_keys.MAGICKA))
    max_stamina = character.stamina + int(perks.bonus(character, perk_keys.STAMINA))

    def _current(value: int | None, maximum: int) -> int:
        return maximum if value is None else max(0, min(maximum, value))

    return PlayerCombatStats(
        max_health=max_health,
        current_health=_current(character.current_health, max_health),
        max_magicka=max_magicka,
        current_magicka=_current(character.current_magicka, max_magicka),
        max_stamina=max_stamina,
        current_stamina=_current(character.current_stamina, max_stamina),
        armor=armor,
        weapon_damage=weapon_damage,
        crit_chance=BASE_CRIT_CHANCE,
        dodge_chance=dodge,
        magic_resist=magic_resist,
        abilities=generate_player_abilities(character, equipped, perks=perks, config=config),
        weapon_category=(main_weapon.weapon_category or WeaponCategory.SWORD) if main_weapon else WeaponCategory.UNARMED,
        regen_health_per_sec=BASE_REGEN_PER_SEC,
        regen_magicka_per_sec=BASE_REGEN_PER_SEC,
        regen_stamina_per_sec=BASE_REGEN_PER_SEC,
    )


def generate_player_abilities(
    character: Character,
    equipped: Sequence[InventoryItem],
    *,
    perks: PerkBonusResolver | None = None,
    config: EngineConfig | None = None,
) -> List[Ability]:
    """Skill- and gear-gated ability list; the basic attack always comes first."""
    config = config or EngineConfig()
    perks = perks or PerkBonusResolver(())
    abilities: List[Ability] = []
    weapon = next((item for item in equipped if item.slot == "weapon"), None)
    weapon_damage = (weapon.damage if weapon else None) or BASE_WEAPON_DAMAGE

    abilities.append(
        Ability(
            id="basic_attack",
            name=f"Strike with {weapon.name}" if weapon else "Unarmed Strike",
            kind=AbilityKind.MELEE,
            damage=weapon_damage,
            cost=10,
            description="A basic attack with your equipped weapon.",
        )
    )

    offhand_weapon = next(
        (item for item in equipped if item.slot == "offhand" and item.kind is ItemKind.WEAPON), None
    )
    if offhand_weapon is not None and _is_small_weapon(offhand_weapon):
        abilities.append(
            Ability(
                id="offhand_attack",
                name=f"Off-hand: {offhand_weapon.name}",
                kind=AbilityKind.MELEE,
                damage=max(5, math.floor((offhand_weapon.damage or 6) * 0.6)),
                cost=8,
                description=f"A quick off-hand strike with {offhand_weapon.name}.",
            )
        )

    if weapon is not None and max(character.skill("One-Handed"), character.skill("Two-Handed")) >= 20:
        abilities.append(
            Ability(
                id="power_attack",
                name="Power Attack",
                kind=AbilityKind.MELEE,
                damage=math.floor(weapon_damage * 1.5),
                cost=25,
                cooldown=2,
                effects=(StunEffect(duration=1, chance=25),),
                description="A powerful strike that deals 50% more damage.",
            )
        )

    shield = next((item for item in equipped if item.slot == "offhand" and item.armor), None)
    if shield is not None:
        abilities.append(
            Ability(
                id="shield_bash",
                name="Shield Bash",
                kind=AbilityKind.MELEE,
                damage=math.floor((shield.armor or 0) * 0.5),
                cost=15,
                cooldown=2,
                effects=(StunEffect(duration=1, chance=50),),
                description="Bash with your shield, potentially stunning the enemy.",
            )
        )

    destruction = character.skill("Destruction")
    if destruction >= 20:
        abilities.append(
            Ability(
                id="flames",
                name="Flames",
                kind=AbilityKind.MAGIC,
                damage=15 + math.floor(destruction * 0.3),
                cost=15,
                element=Element.FIRE,
                effects=(DotEffect(amount=3, duration=2, chance=30),),
                description="A stream of fire that damages enemies.",
            )
        )
    if destruction >= 35:
        abilities.append(
            Ability(
                id="ice_spike",
                name="Ice Spike",
                kind=AbilityKind.MAGIC,
                damage=25 + math.floor(destruction * 0.4),
                cost=25,
                cooldown=1,
                element=Element.FROST,
                effects=(DebuffEffect(stat=Stat.STAMINA, amount=-20, duration=2),),
                description="A spike of ice that saps stamina.",
            )
        )
    if destruction >= 50:
        abilities.append(
            Ability(
                id="lightning_bolt",
                name="Lightning Bolt",
                kind=AbilityKind.MAGIC,
                damage=35 + math.floor(destruction * 0.5),
                cost=35,
                cooldown=2,
                element=Element.SHOCK,
                effects=(DrainEffect(stat=Stat.MAGICKA, amount=15),),
                description="A bolt of lightning that drains magicka.",
            )
        )

    restoration = character.skill("Restoration")
    if restoration >= 20:
        abilities.append(
            Ability(
                id="healing",
                name="Healing",
                kind=AbilityKind.MAGIC,
                damage=0,
                cost=20,
                effects=(HealEffect(amount=25 + math.floor(restoration * 0.5)),),
                description="Restore your health.",
            )
        )

    conjuration = character.skill("Conjuration")
    if conjuration >= 25:
        abilities.append(
            Ability(
                id="conjure_familiar",
                name="Conjure Familiar",
                kind=AbilityKind.MAGIC,
                damage=0,
                cost=30,
                effects=(SummonEffect(template=SummonTemplate(name="Familiar", armor=5, damage=10, lifetime=3)),),
                description="Summon a familiar to fight at your side.",
            )
        )
    if conjuration >= 30:
        abilities.append(
            Ability(
                id="bound_weapon",
                name="Bound Weapon",
                kind=AbilityKind.MAGIC,
                damage=30 + math.floor(conjuration * 0.3),
                cost=30,
                cooldown=3,
                description="Conjure a spectral weapon to strike your foe.",
            )
        )

    bow = next(
        (
            item
            for item in equipped
            if item.slot == "weapon" and (item.weapon_category is WeaponCategory.BOW or "bow" in item.name.lower())
        ),
        None,
    )
    if bow is not None:
        abilities.append(
            Ability(
                id="aimed_shot",
                name="Aimed Shot",
                kind=AbilityKind.RANGED,
                damage=math.floor((bow.damage or 15) * 1.3) + math.floor(character.skill("Archery") * 0.2),
                cost=20,
                cooldown=1,
                description="A carefully aimed arrow for extra damage.",
            )
        )

    if config.enable_unarmed_combat and perks.unarmed_unlocked(character):
        abilities.append(
            Ability(
                id="unarmed_strike",
                name="Unarmed Strike",
                kind=AbilityKind.MELEE,
                damage=max(6, math.floor(character.skills.get(perk_keys.UNARMED_SKILL, 0) * 0.5) + 4),
                cost=0,
                unarmed=True,
                description="A bare-handed blow that costs no stamina.",
            )
        )

    return abilities


def _is_small_weapon(item: InventoryItem) -> bool:
    if item.weapon_category in _SMALL_WEAPONS:
        return True
    name = item.name.lower()
    return "dagger" in name or "short" in name


__all__ = ["calculate_player_combat_stats", "generate_player_abilities"]
