from skirmish.domain.encounter_scaling import get_enemy_count_for_level, health_scale, level_scale


def test_enemy_count_thresholds() -> None:
    expected = {1: 1, 2: 1, 3: 2, 5: 2, 6: 3, 9: 3, 10: 4, 14: 4, 15: 5, 40: 5}
    for level, count in expected.items():
        assert get_enemy_count_for_level(level) == count


def test_health_scale_never_shrinks_damage() -> None:
    assert health_scale(50) == 1.0
    assert health_scale(100) == 1.0
    assert health_scale(400) == 2.0


def test_level_scale_grows_linearly() -> None:
    assert level_scale(1) == 1.0
    assert level_scale(0) == 1.0
    assert level_scale(11) == 1.5
