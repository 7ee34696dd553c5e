"""Perks repository."""
from __future__ import annotations

from typing import Dict

from skirmish.data.errors import DataReferenceError, DataValidationError
from skirmish.data.repositories.base import RepositoryBase
from skirmish.domain.defs import PerkDef, PerkEffectDef


class PerksRepository(RepositoryBase[PerkDef]):
    """Loads and validates perk definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("perks.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, PerkDef]:
        perks: Dict[str, PerkDef] = {}
        for raw_id, payload in raw.items():
            context = f"perk '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {"name", "skill", "description", "max_rank", "effects"},
                context,
                optional_fields={"requires"},
            )
            max_rank = self._require_int(data["max_rank"], f"{context} max_rank")
            if max_rank < 1:
                raise DataValidationError(f"{context} max_rank must be at least 1.")
            effects = []
            for index, entry in enumerate(self._require_list(data["effects"], f"{context} effects")):
                effect_ctx = f"{context} effects[{index}]"
                effect_data = self._require_mapping(entry, effect_ctx)
                self._assert_exact_fields(effect_data, {"key", "amount"}, effect_ctx)
                effects.append(
                    PerkEffectDef(
                        key=self._require_str(effect_data["key"], f"{effect_ctx} key"),
                        amount=self._require_number(effect_data["amount"], f"{effect_ctx} amount"),
                    )
                )
            perks[raw_id] = PerkDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                skill=self._require_str(data["skill"], f"{context} skill"),
                description=self._require_str(data["description"], f"{context} description"),
                requires=tuple(self._require_str_list(data.get("requires", []), f"{context} requires")),
                max_rank=max_rank,
                effects=tuple(effects),
            )
        for perk in perks.values():
            for requirement in perk.requires:
                required_id = requirement.split(":", 1)[0]
                if required_id not in perks:
                    raise DataReferenceError(f"perk '{perk.id}' requires missing perk '{required_id}'.")
        return perks
