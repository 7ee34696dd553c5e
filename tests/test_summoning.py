from skirmish.core.rng import RNG
from skirmish.core.types import Tier
from skirmish.domain.combat_models import PLAYER_ID, CompanionMeta
from skirmish.domain.summon_scaling import SUMMON_TIER_SCALING
from skirmish.services.summoning import (
    age_pending_summons,
    apply_summon_decay,
    remove_dead_summons,
    spawn_summons,
)
from tests.helpers.combat_builders import CONJURE_FAMILIAR, make_companion, make_enemy, make_state


def test_player_summon_joins_allies_after_the_player() -> None:
    state = make_state([make_enemy()])

    summoned = spawn_summons(
        state, CONJURE_FAMILIAR, owner=None, caster_level=1, rng=RNG(1), scaling=SUMMON_TIER_SCALING[Tier.MID]
    )

    assert len(summoned) == 1
    minion = summoned[0]
    assert state.allies == [minion]
    assert state.turn_order == [PLAYER_ID, minion.id, "bandit_1"]
    assert state.pending_summons == {minion.id: 3}
    assert minion.max_health == 40
    assert state.active_summons(PLAYER_ID) == [minion]


def test_crit_summon_adds_a_lesser_minion() -> None:
    state = make_state([make_enemy()])

    summoned = spawn_summons(
        state, CONJURE_FAMILIAR, owner=None, caster_level=1, rng=RNG(1), scaling=SUMMON_TIER_SCALING[Tier.CRIT]
    )

    primary, lesser = summoned
    assert lesser.name == "Lesser Familiar"
    assert primary.max_health == 60
    assert lesser.max_health == 30
    assert state.pending_summons[primary.id] == 4
    assert state.pending_summons[lesser.id] == 3
    assert state.turn_order[1:3] == [primary.id, lesser.id]


def test_second_summon_queues_behind_the_first() -> None:
    state = make_state([make_enemy()])
    scaling = SUMMON_TIER_SCALING[Tier.MID]
    rng = RNG(1)

    first = spawn_summons(state, CONJURE_FAMILIAR, owner=None, caster_level=1, rng=rng, scaling=scaling)[0]
    second = spawn_summons(state, CONJURE_FAMILIAR, owner=None, caster_level=1, rng=rng, scaling=scaling)[0]

    assert state.turn_order == [PLAYER_ID, first.id, second.id, "bandit_1"]


def test_enemy_summon_joins_enemies_after_its_owner() -> None:
    necromancer = make_enemy("necro", name="Necromancer")
    state = make_state([necromancer, make_enemy("bandit_2")])

    minion = spawn_summons(
        state, CONJURE_FAMILIAR, owner=necromancer, caster_level=3, rng=RNG(2), scaling=SUMMON_TIER_SCALING[Tier.MID]
    )[0]

    assert minion in state.enemies
    assert minion.is_companion is False
    assert state.turn_order == [PLAYER_ID, "necro", minion.id, "bandit_2"]


def test_minions_vanish_when_their_enemy_owner_dies() -> None:
    necromancer = make_enemy("necro", name="Necromancer")
    state = make_state([necromancer])
    minion = spawn_summons(
        state, CONJURE_FAMILIAR, owner=necromancer, caster_level=3, rng=RNG(2), scaling=SUMMON_TIER_SCALING[Tier.MID]
    )[0]
    necromancer.health = 0

    removed = remove_dead_summons(state)

    assert removed == [minion]
    assert minion.is_summon is False
    assert minion.id not in state.turn_order
    assert minion.id not in state.pending_summons


def test_dead_summon_frees_the_slot() -> None:
    state = make_state([make_enemy()])
    minion = spawn_summons(
        state, CONJURE_FAMILIAR, owner=None, caster_level=1, rng=RNG(1), scaling=SUMMON_TIER_SCALING[Tier.MID]
    )[0]
    minion.health = 0

    remove_dead_summons(state)

    assert state.allies == []
    assert state.active_summons(PLAYER_ID) == []


def test_companions_are_not_removed_as_summons() -> None:
    lydia = make_companion(health=0, max_health=80)
    state = make_state([make_enemy()], [lydia])

    assert remove_dead_summons(state) == []
    assert state.allies == [lydia]


def test_lifetime_expiry_starts_decay() -> None:
    state = make_state([make_enemy()])
    minion = spawn_summons(
        state, CONJURE_FAMILIAR, owner=None, caster_level=1, rng=RNG(1), scaling=SUMMON_TIER_SCALING[Tier.MID]
    )[0]
    state.pending_summons[minion.id] = 1

    expired = age_pending_summons(state)
    decayed = apply_summon_decay(state, 0.5)

    assert expired == [minion]
    assert minion.companion_meta.decaying is True
    assert decayed == [minion]
    assert minion.health == 20


def test_decay_ignores_fresh_minions() -> None:
    state = make_state([make_enemy()], [make_companion(companion_meta=CompanionMeta(is_summon=True, owner_id=PLAYER_ID))])

    assert apply_summon_decay(state, 0.5) == []
    assert state.allies[0].health == 80
