import logging

from skirmish.config import EngineConfig
from skirmish.core.rng import RNG
from skirmish.core.types import CombatResult, CompanionStatus, HealthState, HostilityState, ItemKind
from skirmish.data.repositories import EnemyTemplatesRepository, LootTablesRepository
from skirmish.domain.combat_models import PLAYER_ID, CompanionMeta
from skirmish.domain.defs import LootItemDef
from skirmish.services.combat_lifecycle import CombatLifecycle, default_xp_reward
from skirmish.services.factories import create_enemy_from_template
from tests.helpers.combat_builders import make_companion, make_enemy, make_state, make_stats


def _make_lifecycle(config: EngineConfig | None = None, *, with_repos: bool = True) -> CombatLifecycle:
    return CombatLifecycle(
        config or EngineConfig(),
        rng=RNG(12345),
        templates_repo=EnemyTemplatesRepository() if with_repos else None,
        loot_tables_repo=LootTablesRepository() if with_repos else None,
    )


def test_initialize_combat_builds_opening_state() -> None:
    lifecycle = _make_lifecycle()
    bandit = make_enemy()

    state = lifecycle.initialize_combat([bandit], location="Riverwood")

    assert state.active is True
    assert state.turn == 1
    assert state.turn_order == [PLAYER_ID, "bandit_1"]
    assert state.current_turn_actor == PLAYER_ID
    assert state.id.startswith("combat_")
    assert state.combat_log[0].action == "combat_start"
    assert state.combat_log[0].turn == 0
    assert bandit.xp_reward is None


def test_initialize_fills_rewards_and_fallback_loot() -> None:
    lifecycle = _make_lifecycle()

    state = lifecycle.initialize_combat([make_enemy(level=3, damage=11)], location="Riverwood")

    enemy = state.enemies[0]
    assert enemy.xp_reward == 35
    assert 15 <= enemy.gold_reward <= 36
    assert enemy.loot
    assert enemy.regen_health_per_sec == EngineConfig().enemy_regen_per_second


def test_ambush_puts_enemies_first() -> None:
    lifecycle = _make_lifecycle()

    state = lifecycle.initialize_combat([make_enemy()], location="Road", ambush=True)

    assert state.turn_order == ["bandit_1", PLAYER_ID]
    assert state.current_turn_actor == "bandit_1"
    assert state.combat_log[0].narrative.startswith("You've been ambushed!")


def test_encounter_scales_with_player_level() -> None:
    lifecycle = _make_lifecycle()

    state = lifecycle.initialize_combat([make_enemy(health=30, max_health=50)], location="Road", player_level=6)

    assert len(state.enemies) == 3
    assert len({enemy.id for enemy in state.enemies}) == 3
    assert all(enemy.health == 50 for enemy in state.enemies[1:])


def test_encounter_scaling_can_be_disabled() -> None:
    lifecycle = _make_lifecycle(EngineConfig(enable_encounter_scaling=False))

    state = lifecycle.initialize_combat([make_enemy()], location="Road", player_level=15)

    assert len(state.enemies) == 1


def test_encounter_size_respects_cap() -> None:
    lifecycle = _make_lifecycle(EngineConfig(max_encounter_size=2))

    state = lifecycle.initialize_combat([make_enemy()], location="Road", player_level=15)

    assert len(state.enemies) == 2


def test_boss_brings_minions_at_level_five() -> None:
    lifecycle = _make_lifecycle()
    boss = create_enemy_from_template("bandit_chief", templates_repo=EnemyTemplatesRepository(), rng=RNG(3))

    state = lifecycle.initialize_combat([boss], location="Camp", player_level=5)

    assert len(state.enemies) >= 3
    assert state.enemies[0].is_boss
    assert all(enemy.template_id == "bandit" for enemy in state.enemies[1:])
    assert len(state.turn_order) == len(state.enemies) + 1


def test_boss_without_templates_gets_thralls() -> None:
    lifecycle = _make_lifecycle(with_repos=False)
    boss = make_enemy("chief", name="Chief", health=100, damage=20, level=10, is_boss=True)

    state = lifecycle.initialize_combat([boss], location="Camp")

    thralls = state.enemies[1:]
    assert len(thralls) == 2
    assert [thrall.name for thrall in thralls] == ["Chief's Thrall 1", "Chief's Thrall 2"]
    assert all(thrall.max_health == 40 and thrall.damage == 10 for thrall in thralls)


def test_repeated_enemy_names_are_numbered() -> None:
    lifecycle = _make_lifecycle(EngineConfig(enable_encounter_scaling=False))
    skeevers = [make_enemy(f"skeever_{index}", name="Skeever") for index in range(3)]
    wolf = make_enemy("wolf_1", name="Wolf")

    state = lifecycle.initialize_combat([*skeevers, wolf], location="Riverwood")

    assert [enemy.name for enemy in state.enemies] == ["Skeever 1", "Skeever 2", "Skeever 3", "Wolf"]
    assert state.combat_log[0].narrative == "Combat begins against Skeever 1, Skeever 2, Skeever 3, Wolf!"
    assert [enemy.name for enemy in skeevers] == ["Skeever"] * 3


def test_scaled_clones_are_numbered_too() -> None:
    lifecycle = _make_lifecycle()

    state = lifecycle.initialize_combat([make_enemy("skeever_1", name="Skeever")], location="Road", player_level=6)

    assert [enemy.name for enemy in state.enemies] == ["Skeever 1", "Skeever 2", "Skeever 3"]


def test_only_following_or_guarding_companions_join() -> None:
    lifecycle = _make_lifecycle()
    lydia = make_companion()
    waiting = make_companion("faendal", name="Faendal", companion_meta=CompanionMeta(status=CompanionStatus.WAITING))
    fallen = make_companion("ralof", name="Ralof", health=0, max_health=80)

    state = lifecycle.initialize_combat([make_enemy()], location="Road", companions=[lydia, waiting, fallen])

    assert [ally.id for ally in state.allies] == ["lydia"]
    assert state.turn_order[-1] == "lydia"


def test_default_xp_reward_has_a_floor() -> None:
    assert default_xp_reward(make_enemy(level=3, damage=11)) == 35
    assert default_xp_reward(make_enemy(level=0, damage=1)) == 5


def test_victory_sums_rewards_and_rolls_loot() -> None:
    lifecycle = _make_lifecycle()
    sure_drop = LootItemDef(name="Gold Ring", kind=ItemKind.MISC, description="Shiny", quantity=1, drop_chance=100)
    never = LootItemDef(name="Crown", kind=ItemKind.MISC, description="Rare", quantity=1, drop_chance=0)
    first = make_enemy("bandit_1", health=0, max_health=50, xp_reward=20, gold_reward=5, loot=(sure_drop, never))
    second = make_enemy("bandit_2", health=0, max_health=50, xp_reward=30, gold_reward=7)
    state = make_state([first, second], turn=30)

    ended = lifecycle.check_combat_end(state, make_stats())

    assert ended.active is False
    assert ended.result is CombatResult.VICTORY
    assert ended.loot_pending is True
    assert ended.pending_rewards.xp == 50
    assert ended.pending_rewards.gold == 12
    assert [item.name for item in ended.pending_rewards.items] == ["Gold Ring"]
    assert [loot.enemy_id for loot in ended.pending_loot] == ["bandit_1"]
    assert all(enemy.hostility is HostilityState.DEAD for enemy in ended.enemies)
    assert ended.survival_delta.hunger == 1.0
    assert ended.survival_delta.thirst == 1.5
    assert ended.survival_delta.fatigue == 2.0
    assert state.active is True


def test_defeat_wins_over_victory() -> None:
    lifecycle = _make_lifecycle()
    state = make_state([make_enemy(health=0, max_health=50)])

    ended = lifecycle.check_combat_end(state, make_stats(current_health=0))

    assert ended.result is CombatResult.DEFEAT
    assert ended.pending_rewards is None


def test_wounded_enemy_keeps_fighting() -> None:
    lifecycle = _make_lifecycle()
    state = make_state([make_enemy(health=10, max_health=100)])

    checked = lifecycle.check_combat_end(state, make_stats())

    assert checked.active is True
    assert checked.enemies[0].health_state is HealthState.CRITICAL
    assert checked.enemies[0].hostility is HostilityState.STILL_HOSTILE


def test_finish_combat_logs_the_result(caplog) -> None:
    lifecycle = _make_lifecycle()
    state = make_state([make_enemy()])

    with caplog.at_level(logging.INFO, logger="skirmish"):
        lifecycle.finish_combat(state, CombatResult.FLED, "You escape.")

    assert state.active is False
    assert state.result is CombatResult.FLED
    assert state.combat_log[-1].action == "fled"
    assert "ended: fled" in caplog.text


def test_turn_regen_restores_player_and_enemies() -> None:
    lifecycle = _make_lifecycle()
    enemy = make_enemy(health=40, max_health=50, regen_health_per_sec=0.5, max_stamina=60, stamina=10)
    state = make_state([enemy])
    stats = make_stats(current_health=50, current_magicka=100, current_stamina=20)

    new_state, new_stats = lifecycle.apply_turn_regen(state, stats, 20)

    assert new_stats.current_health == 55
    assert new_stats.current_magicka == 100
    assert new_stats.current_stamina == 25
    assert new_state.enemies[0].health == 50
    assert new_state.enemies[0].stamina == 15
    assert new_state.combat_log[-1].action == "regen"
    assert new_state.combat_log[-1].narrative == "You recover 5 health, 5 stamina."
    assert stats.current_health == 50
