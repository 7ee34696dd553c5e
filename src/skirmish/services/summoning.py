"""Summon bookkeeping shared by the executors, the scheduler and the lifecycle."""
from __future__ import annotations

import logging
import math
from typing import List

from skirmish.core.rng import RNG
from skirmish.domain.abilities import Ability
from skirmish.domain.combat_models import PLAYER_ID, Actor, CombatState
from skirmish.domain.summon_scaling import EXTRA_MINION_STRENGTH, SummonScaling
from skirmish.services.factories import create_summon_actor

logger = logging.getLogger(__name__)


def spawn_summons(
    state: CombatState,
    ability: Ability,
    *,
    owner: Actor | None,
    caster_level: int,
    rng: RNG,
    scaling: SummonScaling,
    power: float = 1.0,
) -> List[Actor]:
    """
    Conjure the minion(s) described by ``ability`` into ``state``.

    ``owner`` is None for the player. Player and companion minions join the
    allies; an enemy's minions join the enemies. Every minion gets a turn
    slot right after its owner and a lifetime in ``pending_summons``.
    """
    summon = ability.summon
    if summon is None:
        return []
    owner_id = PLAYER_ID if owner is None else owner.id
    allied = owner is None or owner.is_companion
    multiplier = scaling.multiplier * power

    primary, stats = create_summon_actor(
        summon.template,
        owner_id=owner_id,
        caster_level=caster_level,
        ability_id=ability.id,
        rng=rng,
        multiplier=multiplier,
        lifetime_bonus=scaling.lifetime_bonus,
        companion=allied,
    )
    spawned = [(primary, stats.lifetime)]
    if scaling.extra_minion:
        extra, extra_stats = create_summon_actor(
            summon.template,
            owner_id=owner_id,
            caster_level=caster_level,
            ability_id=ability.id,
            rng=rng,
            multiplier=multiplier * EXTRA_MINION_STRENGTH,
            name=f"Lesser {summon.template.name}",
            companion=allied,
        )
        spawned.append((extra, extra_stats.lifetime))

    roster = state.allies if allied else state.enemies
    for actor, lifetime in spawned:
        roster.append(actor)
        state.pending_summons[actor.id] = lifetime
    state.insert_after(owner_id, [actor.id for actor, _ in spawned])
    logger.debug("summoned %s for %s", [actor.id for actor, _ in spawned], owner_id)
    return [actor for actor, _ in spawned]


def apply_summon_decay(state: CombatState, fraction: float) -> List[Actor]:
    """Decaying minions lose ``fraction`` of their current health."""
    decayed: List[Actor] = []
    for actor in list(state.iter_actors()):
        meta = actor.companion_meta
        if not actor.is_alive or meta is None or not meta.is_summon or not meta.decaying:
            continue
        actor.health = max(0, math.floor(actor.health * (1 - fraction)))
        decayed.append(actor)
    return decayed


def age_pending_summons(state: CombatState) -> List[Actor]:
    """Count every live minion's lifetime down by one; expired ones start decaying."""
    expired: List[Actor] = []
    for summon_id in list(state.pending_summons):
        actor = state.find_actor(summon_id)
        if actor is None:
            del state.pending_summons[summon_id]
            continue
        remaining = state.pending_summons[summon_id] - 1
        if remaining > 0:
            state.pending_summons[summon_id] = remaining
            continue
        del state.pending_summons[summon_id]
        if actor.companion_meta is not None:
            actor.companion_meta.decaying = True
        expired.append(actor)
    return expired


def remove_dead_summons(state: CombatState) -> List[Actor]:
    """
    Drop dead minions, and minions whose enemy owner has died.

    Removing a minion clears its summon flag and frees the owner's summon
    slot, so the same ability can be cast again. A minion removed on its own
    turn keeps its turn-order slot until the scheduler moves past it.
    """
    removed: List[Actor] = []
    for roster in (state.allies, state.enemies):
        kept: List[Actor] = []
        for actor in roster:
            if actor.is_summon and (not actor.is_alive or _owner_gone(state, actor)):
                actor.companion_meta.is_summon = False
                removed.append(actor)
            else:
                kept.append(actor)
        roster[:] = kept
    removed_ids = {actor.id for actor in removed}
    if removed_ids:
        state.turn_order = [
            actor_id
            for actor_id in state.turn_order
            if actor_id not in removed_ids or actor_id == state.current_turn_actor
        ]
        for actor_id in removed_ids:
            state.pending_summons.pop(actor_id, None)
        logger.debug("removed summons %s", sorted(removed_ids))
    return removed


def _owner_gone(state: CombatState, actor: Actor) -> bool:
    owner_id = actor.companion_meta.owner_id
    if owner_id is None or owner_id == PLAYER_ID:
        return False
    owner = state.find_actor(owner_id)
    return owner is None or not owner.is_alive


__all__ = ["age_pending_summons", "apply_summon_decay", "remove_dead_summons", "spawn_summons"]
