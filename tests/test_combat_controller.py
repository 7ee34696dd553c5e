import pytest

from skirmish.config import EngineConfig
from skirmish.core.rng import RNG
from skirmish.core.types import ActionKind, CombatResult
from skirmish.data.repositories import PerksRepository
from skirmish.domain.combat_models import PLAYER_ID
from skirmish.services.combat_service import CombatService
from skirmish.services.controllers import CombatAction, CombatController
from tests.helpers.combat_builders import make_companion, make_enemy, make_state, make_stats


def _make_controller(seed: int = 7) -> CombatController:
    return CombatController(CombatService(EngineConfig(), rng=RNG(seed), perks_repo=PerksRepository()))


def test_turn_predicates() -> None:
    controller = _make_controller()
    state = make_state([make_enemy()], [make_companion()])

    assert controller.is_player_turn(state) is True
    assert controller.is_enemy_turn(state) is False

    state.current_turn_actor = "bandit_1"
    assert controller.is_enemy_turn(state) is True

    state.current_turn_actor = "lydia"
    assert controller.is_ally_turn(state) is True


def test_available_actions_reflect_cooldowns_and_guard() -> None:
    controller = _make_controller()
    state = make_state([make_enemy()], ability_cooldowns={"power_attack": 1}, player_guard_used=True)

    actions = controller.get_available_actions(state, make_stats())

    assert actions["can_act"] is True
    assert actions["can_defend"] is False
    assert actions["can_flee"] is True
    assert actions["can_surrender"] is False
    assert actions["ready_abilities"] == ["basic_attack"]


def test_available_actions_outside_player_turn() -> None:
    controller = _make_controller()
    state = make_state([make_enemy()], current_turn_actor="bandit_1")

    actions = controller.get_available_actions(state, make_stats())

    assert actions["can_act"] is False
    assert actions["ready_abilities"] == []


def test_player_action_advances_to_enemy() -> None:
    controller = _make_controller()
    state = make_state([make_enemy()])

    outcome = controller.apply_player_action(state, make_stats(), CombatAction(ActionKind.ATTACK, natural_roll=10))

    assert outcome.turn_consumed is True
    assert outcome.state.enemies[0].health == 35
    assert outcome.state.current_turn_actor == "bandit_1"


def test_refused_action_keeps_player_turn() -> None:
    controller = _make_controller()
    state = make_state([make_enemy()], ability_cooldowns={"power_attack": 2})

    outcome = controller.apply_player_action(state, make_stats(), CombatAction(ActionKind.POWER_ATTACK))

    assert outcome.turn_consumed is False
    assert outcome.state.current_turn_actor == PLAYER_ID


def test_player_action_rejected_out_of_turn() -> None:
    controller = _make_controller()
    state = make_state([make_enemy()], current_turn_actor="bandit_1")

    with pytest.raises(ValueError):
        controller.apply_player_action(state, make_stats(), CombatAction(ActionKind.ATTACK))


def test_enemy_turn_rejected_on_player_turn() -> None:
    controller = _make_controller()

    with pytest.raises(ValueError):
        controller.run_enemy_turn(make_state([make_enemy()]), make_stats())


def test_run_until_player_turn_starts_next_round() -> None:
    controller = _make_controller()
    state = make_state([make_enemy()])
    stats = make_stats(current_stamina=50)

    after_player = controller.apply_player_action(state, stats, CombatAction(ActionKind.ATTACK, natural_roll=10))
    outcome = controller.run_until_player_turn(after_player.state, after_player.player_stats)

    assert controller.is_player_turn(outcome.state) is True
    assert outcome.state.turn == 2
    assert outcome.narrative
    assert outcome.player_stats.current_stamina == 41


def test_ally_turn_wraps_round_back_to_player() -> None:
    controller = _make_controller()
    state = make_state([make_enemy()], [make_companion()], current_turn_actor="lydia")

    outcome = controller.run_ally_turn(state, make_stats(), natural_roll=10)

    assert outcome.state.enemies[0].health == 38
    assert outcome.state.current_turn_actor == PLAYER_ID
    assert outcome.state.turn == 2


def test_victory_stops_turn_progression() -> None:
    controller = _make_controller()
    state = make_state([make_enemy(health=5, max_health=50)])

    outcome = controller.apply_player_action(state, make_stats(), CombatAction(ActionKind.ATTACK, natural_roll=10))

    assert outcome.state.result is CombatResult.VICTORY
    assert outcome.state.current_turn_actor == PLAYER_ID
    assert controller.get_available_actions(outcome.state, outcome.player_stats)["can_act"] is False
