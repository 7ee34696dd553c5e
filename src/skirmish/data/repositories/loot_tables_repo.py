"""Fallback loot keyed by creature kind."""
from __future__ import annotations

from typing import Dict, Tuple

from skirmish.core.types import CreatureKind
from skirmish.data.repositories.base import RepositoryBase
from skirmish.domain.defs import LootItemDef


class LootTablesRepository(RepositoryBase[Tuple[LootItemDef, ...]]):
    """Loads the drops used when an enemy carries no loot of its own."""

    def __init__(self, base_path=None) -> None:
        super().__init__("loot_tables.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, Tuple[LootItemDef, ...]]:
        tables: Dict[str, Tuple[LootItemDef, ...]] = {}
        for raw_kind, payload in raw.items():
            context = f"loot table '{raw_kind}'"
            kind = self._require_enum(raw_kind, CreatureKind, context)
            entries = self._require_list(payload, context)
            tables[kind.value] = tuple(
                self._parse_loot(entry, f"{context}[{index}]") for index, entry in enumerate(entries)
            )
        return tables

    def for_kind(self, kind: CreatureKind) -> Tuple[LootItemDef, ...]:
        try:
            return self.get(kind.value)
        except KeyError:
            return ()
