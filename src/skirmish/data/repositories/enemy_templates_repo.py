"""Enemy templates repository."""
from __future__ import annotations

from typing import Dict

from skirmish.core.types import AbilityKind, AreaTarget, Behavior, CreatureKind, Element, Stat
from skirmish.data.errors import DataReferenceError, DataValidationError
from skirmish.data.repositories.base import RepositoryBase
from skirmish.domain.abilities import Ability
from skirmish.domain.defs import EnemyTemplateDef
from skirmish.domain.effects import (
    AoeDamageEffect,
    AoeHealEffect,
    BuffEffect,
    DebuffEffect,
    DotEffect,
    DrainEffect,
    Effect,
    HealEffect,
    SlowEffect,
    StunEffect,
    SummonEffect,
    SummonTemplate,
)

_EFFECT_FIELDS: Dict[str, tuple[set[str], set[str]]] = {
    "dot": ({"value", "duration"}, {"chance", "stat"}),
    "buff": ({"stat", "value", "duration"}, {"chance"}),
    "debuff": ({"stat", "value", "duration"}, {"chance"}),
    "slow": ({"value", "duration"}, {"chance"}),
    "stun": ({"duration"}, {"chance", "value"}),
    "drain": ({"stat", "value"}, {"chance"}),
    "heal": ({"value"}, {"chance", "stat"}),
    "aoe_damage": ({"value"}, {"chance", "target"}),
    "aoe_heal": ({"value"}, {"chance", "target"}),
    "summon": ({"name"}, {"chance", "health", "armor", "damage", "lifetime", "kind"}),
}


class EnemyTemplatesRepository(RepositoryBase[EnemyTemplateDef]):
    """Loads and validates enemy templates."""

    def __init__(self, base_path=None) -> None:
        super().__init__("enemy_templates.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, EnemyTemplateDef]:
        templates: Dict[str, EnemyTemplateDef] = {}
        for raw_id, payload in raw.items():
            context = f"enemy template '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {
                    "name",
                    "kind",
                    "base_level",
                    "base_health",
                    "base_armor",
                    "base_damage",
                    "behaviors",
                    "abilities",
                    "base_xp",
                    "loot",
                },
                context,
                optional_fields={
                    "base_gold",
                    "boss",
                    "caster",
                    "minion_template",
                    "name_prefixes",
                    "weaknesses",
                    "resistances",
                },
            )
            behaviors = tuple(
                self._require_enum(value, Behavior, f"{context} behaviors")
                for value in self._require_str_list(data["behaviors"], f"{context} behaviors")
            )
            if not behaviors:
                raise DataValidationError(f"{context} behaviors must not be empty.")
            abilities = tuple(
                self._parse_ability(entry, f"{context} abilities[{index}]")
                for index, entry in enumerate(self._require_list(data["abilities"], f"{context} abilities"))
            )
            if not abilities:
                raise DataValidationError(f"{context} abilities must not be empty.")
            loot = tuple(
                self._parse_loot(entry, f"{context} loot[{index}]")
                for index, entry in enumerate(self._require_list(data["loot"], f"{context} loot"))
            )
            base_gold = data.get("base_gold")
            minion_template = data.get("minion_template")
            templates[raw_id] = EnemyTemplateDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                kind=self._require_enum(data["kind"], CreatureKind, f"{context} kind"),
                base_level=self._require_int(data["base_level"], f"{context} base_level"),
                base_health=self._require_int(data["base_health"], f"{context} base_health"),
                base_armor=self._require_int(data["base_armor"], f"{context} base_armor"),
                base_damage=self._require_int(data["base_damage"], f"{context} base_damage"),
                behaviors=behaviors,
                abilities=abilities,
                base_xp=self._require_int(data["base_xp"], f"{context} base_xp"),
                loot=loot,
                base_gold=None if base_gold is None else self._require_int(base_gold, f"{context} base_gold"),
                boss=self._require_bool(data.get("boss", False), f"{context} boss"),
                caster=self._require_bool(data.get("caster", False), f"{context} caster"),
                minion_template=(
                    None
                    if minion_template is None
                    else self._require_str(minion_template, f"{context} minion_template")
                ),
                name_prefixes=tuple(self._require_str_list(data.get("name_prefixes", []), f"{context} name_prefixes")),
                weaknesses=tuple(self._require_str_list(data.get("weaknesses", []), f"{context} weaknesses")),
                resistances=tuple(self._require_str_list(data.get("resistances", []), f"{context} resistances")),
            )
        for template in templates.values():
            if template.minion_template and template.minion_template not in templates:
                raise DataReferenceError(
                    f"enemy template '{template.id}' references missing minion template '{template.minion_template}'."
                )
        return templates

    def _parse_ability(self, payload: object, context: str) -> Ability:
        data = self._require_mapping(payload, context)
        self._assert_exact_fields(
            data,
            {"id", "name", "type", "damage", "cost"},
            context,
            optional_fields={"cooldown", "heal", "effects", "unarmed", "element", "description"},
        )
        effects = tuple(
            self._parse_effect(entry, f"{context} effects[{index}]")
            for index, entry in enumerate(self._require_list(data.get("effects", []), f"{context} effects"))
        )
        element = data.get("element")
        return Ability(
            id=self._require_str(data["id"], f"{context} id"),
            name=self._require_str(data["name"], f"{context} name"),
            kind=self._require_enum(data["type"], AbilityKind, f"{context} type"),
            damage=self._require_int(data["damage"], f"{context} damage"),
            cost=self._require_int(data["cost"], f"{context} cost"),
            cooldown=self._require_int(data.get("cooldown", 0), f"{context} cooldown"),
            heal=self._require_int(data.get("heal", 0), f"{context} heal"),
            effects=effects,
            unarmed=self._require_bool(data.get("unarmed", False), f"{context} unarmed"),
            element=None if element is None else self._require_enum(element, Element, f"{context} element"),
            description=self._require_str(data.get("description", ""), f"{context} description"),
        )

    def _parse_effect(self, payload: object, context: str) -> Effect:
        data = self._require_mapping(payload, context)
        effect_type = self._require_str(data.get("type"), f"{context} type")
        if effect_type not in _EFFECT_FIELDS:
            raise DataValidationError(f"{context} type must be one of {sorted(_EFFECT_FIELDS)}.")
        required, optional = _EFFECT_FIELDS[effect_type]
        self._assert_exact_fields(data, required | {"type"}, context, optional_fields=optional)
        chance = self._require_int(data.get("chance", 100), f"{context} chance")

        if effect_type == "summon":
            health = data.get("health")
            template = SummonTemplate(
                name=self._require_str(data["name"], f"{context} name"),
                health=None if health is None else self._require_int(health, f"{context} health"),
                armor=self._require_int(data.get("armor", 0), f"{context} armor"),
                damage=self._require_int(data.get("damage", 8), f"{context} damage"),
                lifetime=self._require_int(data.get("lifetime", 3), f"{context} lifetime"),
                kind=self._require_enum(data.get("kind", CreatureKind.DAEDRA.value), CreatureKind, f"{context} kind"),
            )
            return SummonEffect(template=template, chance=chance)

        if effect_type == "stun":
            return StunEffect(duration=self._require_int(data["duration"], f"{context} duration"), chance=chance)

        value = self._require_int(data["value"], f"{context} value")
        if effect_type == "dot":
            return DotEffect(amount=value, duration=self._require_int(data["duration"], f"{context} duration"), chance=chance)
        if effect_type in ("buff", "debuff"):
            stat = self._require_enum(data["stat"], Stat, f"{context} stat")
            duration = self._require_int(data["duration"], f"{context} duration")
            if effect_type == "buff":
                return BuffEffect(stat=stat, amount=value, duration=duration, chance=chance)
            return DebuffEffect(stat=stat, amount=value, duration=duration, chance=chance)
        if effect_type == "slow":
            return SlowEffect(amount=value, duration=self._require_int(data["duration"], f"{context} duration"), chance=chance)
        if effect_type == "drain":
            return DrainEffect(stat=self._require_enum(data["stat"], Stat, f"{context} stat"), amount=value, chance=chance)
        if effect_type == "heal":
            return HealEffect(amount=value, chance=chance)
        target = data.get("target")
        if effect_type == "aoe_damage":
            area = AreaTarget.ALL_ENEMIES if target is None else self._require_enum(target, AreaTarget, f"{context} target")
            return AoeDamageEffect(amount=value, target=area, chance=chance)
        area = AreaTarget.ALL_ALLIES if target is None else self._require_enum(target, AreaTarget, f"{context} target")
        return AoeHealEffect(amount=value, target=area, chance=chance)
