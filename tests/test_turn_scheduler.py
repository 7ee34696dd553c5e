from skirmish.core.rng import RNG
from skirmish.core.types import Tier
from skirmish.domain.combat_models import PLAYER_ID, SYSTEM_ACTOR
from skirmish.domain.summon_scaling import SUMMON_TIER_SCALING
from skirmish.services.summoning import spawn_summons
from skirmish.services.turn_scheduler import TurnScheduler
from tests.helpers.combat_builders import CONJURE_FAMILIAR, make_companion, make_enemy, make_state


def _make_state():
    return make_state([make_enemy("bandit_1"), make_enemy("bandit_2")], [make_companion()])


def test_advance_walks_the_order() -> None:
    scheduler = TurnScheduler()
    state = _make_state()

    state = scheduler.advance_turn(state)
    assert state.current_turn_actor == "bandit_1"
    state = scheduler.advance_turn(state)
    assert state.current_turn_actor == "bandit_2"
    state = scheduler.advance_turn(state)
    assert state.current_turn_actor == "lydia"
    assert state.turn == 1


def test_full_cycle_returns_to_same_actor_one_round_later() -> None:
    scheduler = TurnScheduler()
    state = _make_state()
    start = state

    for _ in range(len(state.turn_order)):
        state = scheduler.advance_turn(state)

    assert state.current_turn_actor == start.current_turn_actor
    assert state.turn == start.turn + 1


def test_advance_does_not_mutate_input() -> None:
    scheduler = TurnScheduler()
    state = _make_state()

    advanced = scheduler.advance_turn(state)

    assert state.current_turn_actor == PLAYER_ID
    assert advanced is not state


def test_dead_and_unknown_actors_are_skipped() -> None:
    scheduler = TurnScheduler()
    state = make_state([make_enemy("bandit_1", health=0, max_health=50), make_enemy("bandit_2")])
    state.turn_order.insert(1, "ghost")

    state = scheduler.advance_turn(state)

    assert state.current_turn_actor == "bandit_2"


def test_player_always_gets_a_turn() -> None:
    scheduler = TurnScheduler()
    state = make_state([make_enemy("bandit_1", health=0, max_health=50)])

    state = scheduler.advance_turn(state)

    assert state.current_turn_actor == PLAYER_ID
    assert state.turn == 2


def test_cooldowns_tick_when_a_round_starts() -> None:
    scheduler = TurnScheduler()
    state = _make_state()
    state.current_turn_actor = "lydia"
    state.ability_cooldowns = {"power_attack": 2, "shield_bash": 1}
    state.enemies[0].cooldowns = {"execute": 1}

    state = scheduler.advance_turn(state)

    assert state.turn == 2
    assert state.ability_cooldowns == {"power_attack": 1}
    assert state.enemies[0].cooldowns == {}


def test_cooldowns_hold_mid_round() -> None:
    scheduler = TurnScheduler()
    state = _make_state()
    state.ability_cooldowns = {"power_attack": 2}

    state = scheduler.advance_turn(state)

    assert state.ability_cooldowns == {"power_attack": 2}


def test_player_turn_clears_defend_flag() -> None:
    scheduler = TurnScheduler()
    state = _make_state()
    state.current_turn_actor = "lydia"
    state.player_defending = True

    state = scheduler.advance_turn(state)

    assert state.current_turn_actor == PLAYER_ID
    assert state.player_defending is False


def test_player_turn_ages_and_clears_summons() -> None:
    scheduler = TurnScheduler()
    state = make_state([make_enemy()])
    minion = spawn_summons(
        state, CONJURE_FAMILIAR, owner=None, caster_level=1, rng=RNG(1), scaling=SUMMON_TIER_SCALING[Tier.MID]
    )[0]
    state.pending_summons[minion.id] = 1
    state.current_turn_actor = "bandit_1"

    state = scheduler.advance_turn(state)

    bound = state.find_ally(minion.id)
    assert bound.companion_meta.decaying is True
    assert minion.id not in state.pending_summons
    assert state.combat_log[-1].actor == SYSTEM_ACTOR
    assert state.combat_log[-1].action == "summons"

    state.current_turn_actor = "bandit_1"
    state = scheduler.advance_turn(state)

    assert state.find_ally(minion.id).health == 20


def test_dead_summon_leaves_turn_order_on_player_turn() -> None:
    scheduler = TurnScheduler()
    state = make_state([make_enemy()])
    minion = spawn_summons(
        state, CONJURE_FAMILIAR, owner=None, caster_level=1, rng=RNG(1), scaling=SUMMON_TIER_SCALING[Tier.MID]
    )[0]
    state.allies[0].health = 0
    state.current_turn_actor = "bandit_1"

    state = scheduler.advance_turn(state)

    assert minion.id not in state.turn_order
    assert state.allies == []


def test_skip_logs_and_advances() -> None:
    scheduler = TurnScheduler()
    state = _make_state()

    state = scheduler.skip_actor_turn(state, PLAYER_ID)

    assert state.combat_log[-1].action == "skip"
    assert state.combat_log[-1].narrative == "You skip the turn."
    assert state.current_turn_actor == "bandit_1"


def test_inactive_combat_does_not_advance() -> None:
    scheduler = TurnScheduler()
    state = _make_state()
    state.active = False

    assert scheduler.advance_turn(state).current_turn_actor == PLAYER_ID
