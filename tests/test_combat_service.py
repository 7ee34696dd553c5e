from skirmish.config import EngineConfig
from skirmish.core.rng import RNG
from skirmish.core.types import ActionKind, CombatResult
from skirmish.data.repositories import NutritionRepository, PerksRepository
from skirmish.domain.combat_models import PLAYER_ID, CompanionMeta
from skirmish.domain.effects import ActiveEffect, DotEffect
from skirmish.services.combat_service import CombatService
from tests.helpers.combat_builders import make_character, make_companion, make_enemy, make_state, make_stats


def _make_service(seed: int = 7) -> CombatService:
    return CombatService(
        EngineConfig(),
        rng=RNG(seed),
        perks_repo=PerksRepository(),
        nutrition_repo=NutritionRepository(),
    )


def test_initialize_combat_puts_player_first() -> None:
    service = _make_service()

    state = service.initialize_combat(
        [make_enemy("wolf_1", name="Wolf")],
        location="Riverwood",
        companions=[make_companion()],
    )

    assert state.turn_order[0] == PLAYER_ID
    assert state.current_turn_actor == PLAYER_ID
    assert "lydia" in state.turn_order
    assert state.location == "Riverwood"


def test_lethal_player_attack_ends_in_victory() -> None:
    service = _make_service()
    state = make_state([make_enemy(health=10, max_health=50, xp_reward=20, gold_reward=7)])

    result = service.execute_player_action(state, make_stats(), ActionKind.ATTACK, natural_roll=10)

    assert result.state.active is False
    assert result.state.result is CombatResult.VICTORY
    assert result.state.pending_rewards.xp == 20
    assert result.state.pending_rewards.gold == 7
    assert result.state.loot_pending is True


def test_refused_action_skips_end_check() -> None:
    service = _make_service()
    state = make_state([make_enemy()], ability_cooldowns={"power_attack": 1})

    result = service.execute_player_action(state, make_stats(), ActionKind.POWER_ATTACK)

    assert result.turn_consumed is False
    assert result.state.active is True


def test_enemy_can_defeat_the_player() -> None:
    service = _make_service()
    state = make_state([make_enemy()], current_turn_actor="bandit_1")

    result = service.execute_enemy_turn(state, "bandit_1", make_stats(current_health=5), natural_roll=10)

    assert result.player_stats.current_health == 0
    assert result.state.result is CombatResult.DEFEAT
    assert result.state.pending_rewards is None


def test_companion_action_through_service() -> None:
    service = _make_service()
    state = make_state([make_enemy()], [make_companion()], current_turn_actor="lydia")

    result = service.execute_companion_action(state, "lydia", natural_roll=10)

    assert result.success is True
    assert result.state.enemies[0].health == 38


def test_player_stats_use_service_perks() -> None:
    service = _make_service()
    character = make_character(perks={"toughness": 2})

    stats = service.calculate_player_combat_stats(character, [])

    assert stats.max_health == 120
    assert stats.find_ability("basic_attack") is not None


def test_skip_actor_turn_hands_over() -> None:
    service = _make_service()
    state = make_state([make_enemy()])

    skipped = service.skip_actor_turn(state, PLAYER_ID)

    assert skipped.current_turn_actor == "bandit_1"
    assert skipped.combat_log[-1].narrative == "You skip the turn."


def test_minion_dying_on_its_own_turn_hands_over_to_the_next_enemy() -> None:
    service = _make_service()
    shaman = make_enemy("shaman", name="Shaman", health=60)
    minion = make_enemy(
        "shaman_minion",
        name="Bound Skeleton",
        health=3,
        max_health=30,
        companion_meta=CompanionMeta(is_summon=True, owner_id="shaman"),
        active_effects=[ActiveEffect(effect=DotEffect(amount=5, duration=2), rounds_remaining=2)],
    )
    brute = make_enemy("brute", name="Brute", health=80)
    state = make_state([shaman, minion, brute], current_turn_actor="shaman_minion")

    result = service.execute_enemy_turn(state, "shaman_minion", make_stats(), natural_roll=10)
    assert result.state.find_actor("shaman_minion") is None

    state = service.advance_turn(result.state)

    assert state.current_turn_actor == "brute"
    assert state.turn == 1
    assert state.turn_order == [PLAYER_ID, "shaman", "brute"]

    state = service.advance_turn(state)

    assert state.current_turn_actor == PLAYER_ID
    assert state.turn == 2
