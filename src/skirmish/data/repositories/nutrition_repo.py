"""Nutrition repository for food and drink consumed in combat."""
from __future__ import annotations

from typing import Dict

from skirmish.data.repositories.base import RepositoryBase
from skirmish.domain.item_effects import Nutrition


class NutritionRepository(RepositoryBase[Nutrition]):
    """Loads hunger/thirst values keyed by lowercase item name."""

    def __init__(self, base_path=None) -> None:
        super().__init__("nutrition.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, Nutrition]:
        nutrition: Dict[str, Nutrition] = {}
        for raw_name, payload in raw.items():
            context = f"nutrition '{raw_name}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(data, {"hunger", "thirst"}, context)
            nutrition[raw_name.strip().lower()] = Nutrition(
                hunger=self._require_int(data["hunger"], f"{context} hunger"),
                thirst=self._require_int(data["thirst"], f"{context} thirst"),
            )
        return nutrition

    def lookup(self, item_name: str) -> Nutrition | None:
        """Return nutrition for ``item_name`` (case-insensitive) or None."""
        try:
            return self.get(item_name.strip().lower())
        except KeyError:
            return None
