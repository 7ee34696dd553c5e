"""Engine configuration resolved once and passed to every service."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class EngineConfig:
    """Feature toggles and tuning numbers for the combat engine."""

    enable_unarmed_combat: bool = True
    enable_encounter_scaling: bool = True
    enable_boss_minions: bool = True
    enable_enemy_conjuration: bool = True
    enable_crit_stun: bool = True
    seconds_per_turn: int = 4
    flee_base_chance: int = 50
    guard_damage_reduction: int = 50
    defend_damage_reduction: int = 50
    guard_base_duration: int = 1
    guard_max_duration: int = 3
    enemy_crit_chance: int = 10
    crit_stun_chance: int = 50
    summon_decay_fraction: float = 0.5
    boss_minion_count: int = 2
    max_encounter_size: int = 5
    enemy_regen_per_second: float = 0.25
    fumble_self_damage_fraction: float = 0.25
    ability_history_size: int = 4
    ally_target_chance: int = 30
    hunger_per_minute: float = 0.5
    thirst_per_minute: float = 0.75
    fatigue_per_minute: float = 1.0


_DEFAULTS = EngineConfig()


def _normalize(name: str, value: object) -> object:
    default = getattr(_DEFAULTS, name)
    if isinstance(default, bool):
        return value if isinstance(value, bool) else default
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return default
        return value
    if isinstance(default, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            return default
        return float(value)
    return default


def config_from_mapping(raw: Dict[str, object]) -> EngineConfig:
    """Build a config from a mapping; unknown keys are ignored and bad values fall back to defaults."""
    values = {}
    for config_field in fields(EngineConfig):
        if config_field.name in raw:
            values[config_field.name] = _normalize(config_field.name, raw[config_field.name])
    unknown = sorted(set(raw) - {config_field.name for config_field in fields(EngineConfig)})
    if unknown:
        logger.warning("Ignoring unknown engine config keys: %s", unknown)
    return EngineConfig(**values)


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load config from disk or return defaults."""
    if path is None:
        return EngineConfig()
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        return EngineConfig()
    except (OSError, ValueError) as exc:
        logger.warning("Unreadable engine config %s (%s); using defaults.", path, exc)
        return EngineConfig()
    if not isinstance(raw, dict):
        return EngineConfig()
    return config_from_mapping(raw)


def save_engine_config(config: EngineConfig, path: Path) -> None:
    """Persist config to disk."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(asdict(config), indent=2, sort_keys=True), encoding="utf-8")
