from skirmish.config import EngineConfig
from skirmish.core.types import ItemKind, WeaponCategory
from skirmish.data.repositories import PerksRepository
from skirmish.domain.perks import PerkBonusResolver
from skirmish.domain.player import InventoryItem
from skirmish.services.player_stats_service import calculate_player_combat_stats
from tests.helpers.combat_builders import make_character

IRON_SWORD = InventoryItem(
    id="iron_sword",
    name="Iron Sword",
    kind=ItemKind.WEAPON,
    damage=20,
    slot="weapon",
    equipped=True,
    weapon_category=WeaponCategory.SWORD,
)
IRON_ARMOR = InventoryItem(id="iron_armor", name="Iron Armor", kind=ItemKind.APPAREL, armor=50, slot="body", equipped=True)


def _ability_ids(stats) -> list[str]:
    return [ability.id for ability in stats.abilities]


def test_unarmed_character_gets_only_the_basic_attack() -> None:
    stats = calculate_player_combat_stats(make_character(level=5), [])

    assert stats.weapon_damage == 10
    assert stats.armor == 0
    assert stats.dodge_chance == 4
    assert stats.magic_resist == 3
    assert stats.weapon_category is WeaponCategory.UNARMED
    assert _ability_ids(stats) == ["basic_attack"]
    assert stats.current_health == stats.max_health == 100


def test_equipped_sword_drives_damage_and_power_attack() -> None:
    character = make_character(skills={"One-Handed": 40})

    stats = calculate_player_combat_stats(character, [IRON_SWORD])

    assert stats.weapon_damage == 24
    assert stats.weapon_category is WeaponCategory.SWORD
    power_attack = stats.find_ability("power_attack")
    assert power_attack is not None
    assert power_attack.damage == 30
    assert stats.abilities[0].name == "Strike with Iron Sword"


def test_unequipped_items_are_ignored() -> None:
    sheathed = InventoryItem(id="sword", name="Sword", kind=ItemKind.WEAPON, damage=40, slot="weapon")

    stats = calculate_player_combat_stats(make_character(), [sheathed])

    assert stats.weapon_damage == 10
    assert stats.weapon_category is WeaponCategory.UNARMED


def test_perks_raise_pools_and_armor() -> None:
    perks = PerkBonusResolver(PerksRepository().all())
    character = make_character(perks={"toughness": 2, "juggernaut": 1})

    stats = calculate_player_combat_stats(character, [IRON_ARMOR], perks=perks)

    assert stats.max_health == 120
    assert stats.armor == 63


def test_current_values_are_clamped_to_max() -> None:
    character = make_character(current_health=500, current_magicka=-3)

    stats = calculate_player_combat_stats(character, [])

    assert stats.current_health == 100
    assert stats.current_magicka == 0


def test_destruction_and_conjuration_unlock_spells() -> None:
    character = make_character(skills={"Destruction": 50, "Conjuration": 25, "Restoration": 20})

    stats = calculate_player_combat_stats(character, [])

    assert {"flames", "ice_spike", "lightning_bolt", "healing", "conjure_familiar"} <= set(_ability_ids(stats))
    assert stats.find_ability("conjure_familiar").is_summon
    assert stats.find_ability("healing").is_supportive


def test_unarmed_strike_respects_feature_toggle() -> None:
    character = make_character(skills={"Unarmed": 10})

    enabled = calculate_player_combat_stats(character, [])
    disabled = calculate_player_combat_stats(character, [], config=EngineConfig(enable_unarmed_combat=False))

    strike = enabled.find_ability("unarmed_strike")
    assert strike is not None
    assert strike.unarmed is True
    assert strike.cost == 0
    assert strike.damage == 9
    assert disabled.find_ability("unarmed_strike") is None


def test_power_attack_needs_an_equipped_weapon() -> None:
    character = make_character(skills={"One-Handed": 60, "Two-Handed": 60})

    bare = calculate_player_combat_stats(character, [])
    armed = calculate_player_combat_stats(character, [IRON_SWORD])

    assert bare.find_ability("power_attack") is None
    assert armed.find_ability("power_attack") is not None


def test_familiar_description_matches_its_summon() -> None:
    stats = calculate_player_combat_stats(make_character(skills={"Conjuration": 25}), [])

    familiar = stats.find_ability("conjure_familiar")
    assert familiar.summon.template.name == "Familiar"
    assert "familiar" in familiar.description.lower()
