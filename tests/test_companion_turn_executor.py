import pytest

from skirmish.config import EngineConfig
from skirmish.core.rng import RNG
from skirmish.core.types import AbilityKind, CombatResult
from skirmish.domain.abilities import Ability
from skirmish.domain.combat_models import PLAYER_ID
from skirmish.domain.effects import ActiveEffect, AoeDamageEffect, AoeHealEffect, HealEffect, StunEffect
from skirmish.services.combat_lifecycle import CombatLifecycle
from skirmish.services.companion_turn_executor import CompanionTurnExecutor
from tests.helpers.combat_builders import make_companion, make_enemy, make_state

CLEAVE = Ability(id="cleave", name="Cleave", kind=AbilityKind.MELEE, damage=15, cost=0, cooldown=1)
MEND = Ability(id="mend", name="Mend", kind=AbilityKind.MAGIC, damage=0, cost=10, effects=(HealEffect(amount=20),))
SWEEP = Ability(
    id="sweep", name="Sweep", kind=AbilityKind.MELEE, damage=10, cost=0, effects=(AoeDamageEffect(amount=6),)
)
CIRCLE = Ability(
    id="healing_circle",
    name="Healing Circle",
    kind=AbilityKind.MAGIC,
    damage=0,
    cost=0,
    effects=(AoeHealEffect(amount=15),),
)


def _make_executor() -> CompanionTurnExecutor:
    config = EngineConfig()
    return CompanionTurnExecutor(config, rng=RNG(12345), lifecycle=CombatLifecycle(config, rng=RNG(1)))


def test_companion_strikes_first_living_enemy() -> None:
    executor = _make_executor()
    state = make_state([make_enemy()], [make_companion()])

    result = executor.execute(state, "lydia", natural_roll=10)

    assert result.success is True
    assert result.state.enemies[0].health == 38
    assert state.enemies[0].health == 50
    assert result.state.active is True
    assert result.state.combat_log[-1].actor == "lydia"


def test_companion_refuses_to_attack_own_side() -> None:
    executor = _make_executor()
    state = make_state([make_enemy()], [make_companion(), make_companion("faendal", name="Faendal")])

    at_player = executor.execute(state, "lydia", target_id=PLAYER_ID, natural_roll=10)
    at_ally = executor.execute(state, "lydia", target_id="faendal", natural_roll=10)

    assert at_player.success is False
    assert at_ally.success is False
    assert "refuses" in at_ally.narrative
    assert at_ally.state.find_ally("faendal").health == 80


def test_stunned_companion_cannot_act() -> None:
    executor = _make_executor()
    stunned = make_companion(active_effects=[ActiveEffect(effect=StunEffect(duration=1), rounds_remaining=1)])

    result = executor.execute(make_state([make_enemy()], [stunned]), "lydia", natural_roll=10)

    assert result.success is False
    assert "stunned" in result.narrative
    assert result.state.enemies[0].health == 50


def test_unknown_or_cooling_ability_is_refused() -> None:
    executor = _make_executor()
    companion = make_companion(abilities=(CLEAVE,), cooldowns={"cleave": 1})
    state = make_state([make_enemy()], [companion])

    unknown = executor.execute(state, "lydia", "shield_bash")
    cooling = executor.execute(state, "lydia", "cleave")

    assert unknown.success is False
    assert "doesn't know" in unknown.narrative
    assert cooling.success is False
    assert "cooldown" in cooling.narrative


def test_killing_the_last_enemy_wins_the_fight() -> None:
    executor = _make_executor()
    state = make_state([make_enemy(health=5, max_health=50, xp_reward=20)], [make_companion()])

    result = executor.execute(state, "lydia", natural_roll=10)

    assert result.state.active is False
    assert result.state.result is CombatResult.VICTORY
    assert result.state.pending_rewards.xp == 20


def test_auto_mode_heals_when_badly_hurt() -> None:
    executor = _make_executor()
    companion = make_companion(health=30, max_health=80, abilities=(CLEAVE, MEND))

    result = executor.execute(make_state([make_enemy()], [companion]), "lydia", is_auto=True)

    assert result.state.find_ally("lydia").health == 50
    assert result.state.enemies[0].health == 50


def test_auto_mode_hits_hardest_when_healthy() -> None:
    executor = _make_executor()
    companion = make_companion(abilities=(MEND, CLEAVE))

    assert executor.choose_auto_ability(companion).id == "cleave"

    result = executor.execute(make_state([make_enemy()], [companion]), "lydia", natural_roll=10, is_auto=True)

    assert result.state.enemies[0].health == 35
    assert result.state.find_ally("lydia").cooldowns == {"cleave": 1}


def test_unknown_ally_raises() -> None:
    executor = _make_executor()

    with pytest.raises(ValueError):
        executor.execute(make_state([make_enemy()]), "serana")


# -----------------------
# Area effects
# -----------------------
def test_companion_area_attack_hits_every_enemy() -> None:
    executor = _make_executor()
    companion = make_companion(abilities=(SWEEP,))
    state = make_state([make_enemy(), make_enemy("bandit_2")], [companion])

    result = executor.execute(state, "lydia", "sweep", natural_roll=10)

    assert result.state.find_enemy("bandit_1").health == 34
    assert result.state.find_enemy("bandit_2").health == 44
    assert result.state.find_ally("lydia").health == 80
    assert "Bandit takes 6 damage." in result.narrative


def test_companion_area_heal_skips_the_enemies() -> None:
    executor = _make_executor()
    lydia = make_companion(health=40, max_health=80, abilities=(CIRCLE,))
    faendal = make_companion("faendal", name="Faendal", health=50, max_health=80)
    state = make_state([make_enemy(health=20, max_health=50)], [lydia, faendal])

    result = executor.execute(state, "lydia", "healing_circle")

    assert result.success is True
    assert result.state.find_ally("lydia").health == 55
    assert result.state.find_ally("faendal").health == 65
    assert result.state.enemies[0].health == 20
    assert "You recover" not in result.narrative
