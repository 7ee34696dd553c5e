"""Base repository implementation for JSON definition data."""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, Generic, List, Type, TypeVar

from skirmish.core.types import ItemKind
from skirmish.data import paths
from skirmish.data.errors import DataValidationError
from skirmish.data.json_loader import load_json
from skirmish.domain.defs import LootItemDef

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


class RepositoryBase(Generic[T]):
    """Common caching and loading behavior for repositories."""

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._definitions: Dict[str, T] | None = None

    def _get_file_path(self) -> Path:
        definitions_dir = paths.get_definitions_path(self._base_path)
        return definitions_dir / self._filename

    def _load_raw(self) -> dict[str, object]:
        file_path = self._get_file_path()
        raw = load_json(file_path)
        if not isinstance(raw, dict):
            raise DataValidationError(f"Expected top-level object in {file_path}")
        return raw

    def _build(self, raw: dict[str, object]) -> Dict[str, T]:
        """Convert a raw dict into typed definitions."""
        raise NotImplementedError

    def _ensure_loaded(self) -> None:
        if self._definitions is None:
            raw = self._load_raw()
            self._definitions = self._build(raw)

    def get(self, def_id: str) -> T:
        """Return a definition by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        try:
            return self._definitions[def_id]
        except KeyError as exc:
            raise KeyError(def_id) from exc

    def all(self) -> list[T]:
        """Return all definitions sorted deterministically by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        return [self._definitions[key] for key in sorted(self._definitions.keys())]

    def ids(self) -> list[str]:
        self._ensure_loaded()
        assert self._definitions is not None
        return sorted(self._definitions.keys())

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DataValidationError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_number(value: object, context: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DataValidationError(f"{context} must be a number.")
        return float(value)

    @staticmethod
    def _require_bool(value: object, context: str) -> bool:
        if not isinstance(value, bool):
            raise DataValidationError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_str_list(value: object, context: str) -> List[str]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        result: List[str] = []
        for entry in value:
            if not isinstance(entry, str):
                raise DataValidationError(f"{context} entries must be strings.")
            result.append(entry)
        return result

    @staticmethod
    def _require_enum(value: object, enum_type: Type[E], context: str) -> E:
        try:
            return enum_type(value)
        except ValueError as exc:
            allowed = sorted(member.value for member in enum_type)
            raise DataValidationError(f"{context} must be one of {allowed}.") from exc

    @staticmethod
    def _assert_exact_fields(
        payload: dict[str, object],
        expected_keys: set[str],
        context: str,
        *,
        optional_fields: set[str] | None = None,
    ) -> None:
        actual_keys = set(payload.keys())
        optional = optional_fields or set()
        missing = expected_keys - actual_keys
        unknown = actual_keys - expected_keys - optional
        if missing or unknown:
            msg_parts = []
            if missing:
                msg_parts.append(f"missing fields: {sorted(missing)}")
            if unknown:
                msg_parts.append(f"unknown fields: {sorted(unknown)}")
            raise DataValidationError(f"{context} has schema issues ({'; '.join(msg_parts)}).")

    def _parse_loot(self, payload: object, context: str) -> LootItemDef:
        data = self._require_mapping(payload, context)
        self._assert_exact_fields(
            data,
            {"name", "type", "description", "quantity", "drop_chance"},
            context,
            optional_fields={"damage", "armor", "slot"},
        )
        drop_chance = self._require_int(data["drop_chance"], f"{context} drop_chance")
        if not 0 <= drop_chance <= 100:
            raise DataValidationError(f"{context} drop_chance must be between 0 and 100.")
        damage = data.get("damage")
        armor = data.get("armor")
        slot = data.get("slot")
        return LootItemDef(
            name=self._require_str(data["name"], f"{context} name"),
            kind=self._require_enum(data["type"], ItemKind, f"{context} type"),
            description=self._require_str(data["description"], f"{context} description"),
            quantity=self._require_int(data["quantity"], f"{context} quantity"),
            drop_chance=drop_chance,
            damage=None if damage is None else self._require_int(damage, f"{context} damage"),
            armor=None if armor is None else self._require_int(armor, f"{context} armor"),
            slot=None if slot is None else self._require_str(slot, f"{context} slot"),
        )
