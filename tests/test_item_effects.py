from skirmish.core.types import ItemKind, Stat
from skirmish.domain.item_effects import Nutrition, food_heal_amount, resolve_potion_effect
from skirmish.domain.player import InventoryItem


def _potion(name: str, **kwargs) -> InventoryItem:
    return InventoryItem(id=name.lower().replace(" ", "_"), name=name, kind=ItemKind.POTION, **kwargs)


def test_minor_health_potion_uses_default_amount() -> None:
    effect = resolve_potion_effect(_potion("Minor Health Potion"))

    assert effect.stat is Stat.HEALTH
    assert effect.amount == 25
    assert effect.reason == "inferred_default_amount"
    assert effect.usable


def test_amount_is_read_from_description() -> None:
    effect = resolve_potion_effect(_potion("Potion of Magicka", description="Restores 40 magicka"))

    assert effect.stat is Stat.MAGICKA
    assert effect.amount == 40
    assert effect.reason == "inferred_from_name"


def test_explicit_subtype_and_amount() -> None:
    effect = resolve_potion_effect(_potion("Draught", subtype="stamina", damage=30))

    assert effect.stat is Stat.STAMINA
    assert effect.amount == 30
    assert effect.reason == "explicit_subtype"


def test_ambiguous_potion_has_no_effect() -> None:
    effect = resolve_potion_effect(_potion("Health and Magicka Elixir"))

    assert effect.stat is None
    assert not effect.usable


def test_non_potion_is_rejected() -> None:
    bread = InventoryItem(id="bread", name="Bread", kind=ItemKind.FOOD)

    assert resolve_potion_effect(bread).reason == "not_a_potion"


def test_food_heal_amount() -> None:
    assert food_heal_amount(None) == 15
    assert food_heal_amount(Nutrition(hunger=20, thirst=0)) == 20
    assert food_heal_amount(Nutrition(hunger=-5, thirst=10)) == 10
