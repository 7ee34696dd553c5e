import json
import logging
from pathlib import Path

from skirmish.config import EngineConfig, config_from_mapping, load_engine_config, save_engine_config
from skirmish.logging_config import LOG_LEVEL_ENV, configure_logging


def test_defaults() -> None:
    config = EngineConfig()

    assert config.guard_base_duration == 1
    assert config.guard_max_duration == 3
    assert config.crit_stun_chance == 50
    assert config.seconds_per_turn == 4
    assert config.enable_unarmed_combat is True


def test_missing_file_returns_defaults(tmp_path: Path) -> None:
    assert load_engine_config(tmp_path / "nope.json") == EngineConfig()
    assert load_engine_config(None) == EngineConfig()


def test_invalid_json_returns_defaults(tmp_path: Path) -> None:
    path = tmp_path / "engine.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_engine_config(path) == EngineConfig()


def test_bad_values_fall_back_per_field() -> None:
    config = config_from_mapping(
        {
            "flee_base_chance": 70,
            "seconds_per_turn": -1,
            "enable_crit_stun": "no",
            "summon_decay_fraction": 1,
            "bogus_key": True,
        }
    )

    assert config.flee_base_chance == 70
    assert config.seconds_per_turn == 4
    assert config.enable_crit_stun is True
    assert config.summon_decay_fraction == 1.0


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "engine.json"
    config = EngineConfig(max_encounter_size=3, enable_boss_minions=False)

    save_engine_config(config, path)

    assert json.loads(path.read_text(encoding="utf-8"))["max_encounter_size"] == 3
    assert load_engine_config(path) == config


def test_configure_logging_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")

    configure_logging()

    assert logging.getLogger("skirmish").level == logging.DEBUG


def test_configure_logging_ignores_unknown_level() -> None:
    configure_logging("loud")

    assert logging.getLogger("skirmish").level == logging.WARNING
