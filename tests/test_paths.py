from pathlib import Path

from skirmish.data import paths


def test_get_definitions_path_base_path(tmp_path: Path) -> None:
    assert paths.get_definitions_path(tmp_path) == tmp_path


def test_get_definitions_path_source_repo_exists() -> None:
    definitions_path = paths.get_definitions_path()
    assert definitions_path.name == "definitions"
    assert definitions_path.exists()
    assert (definitions_path / "enemy_templates.json").exists()


def test_get_package_root_points_at_package() -> None:
    assert paths.get_package_root().name == "skirmish"
