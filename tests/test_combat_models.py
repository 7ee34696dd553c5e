from skirmish.core.types import Tier
from skirmish.domain.combat_models import PLAYER_ID, LogEntry
from tests.helpers.combat_builders import make_enemy, make_state


def _hit(target: str = "bandit_1", *, damage: int = 5, crit: bool = False, narrative: str = "") -> LogEntry:
    return LogEntry(
        turn=1,
        actor=PLAYER_ID,
        action="basic_attack",
        narrative=narrative,
        target=target,
        damage=damage,
        is_crit=crit,
        natural_roll=20 if crit else 10,
        tier=Tier.CRIT if crit else Tier.MID,
    )


def test_repeated_event_merges_into_one_entry() -> None:
    state = make_state([make_enemy()])

    state.record(_hit(damage=5, crit=True, narrative="first"))
    state.record(_hit(damage=7, narrative="second"))

    assert len(state.combat_log) == 1
    merged = state.combat_log[0]
    assert merged.count == 2
    assert merged.damage == 12
    assert merged.narrative == "second"
    assert merged.is_crit is True
    assert merged.tier is Tier.MID


def test_new_target_starts_a_new_entry() -> None:
    state = make_state([make_enemy(), make_enemy("bandit_2")])

    state.record(_hit("bandit_1"))
    state.record(_hit("bandit_2"))

    assert [entry.target for entry in state.combat_log] == ["bandit_1", "bandit_2"]
    assert all(entry.count == 1 for entry in state.combat_log)


def test_new_turn_starts_a_new_entry() -> None:
    state = make_state([make_enemy()])
    later = _hit()
    later.turn = 2

    state.record(_hit())
    state.record(later)

    assert len(state.combat_log) == 2
