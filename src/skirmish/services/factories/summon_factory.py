"""Factory for creating summoned minions."""
from __future__ import annotations

from skirmish.core.rng import RNG
from skirmish.core.types import Behavior
from skirmish.domain.abilities import basic_attack
from skirmish.domain.combat_models import Actor, CompanionMeta
from skirmish.domain.effects import SummonTemplate
from skirmish.domain.summon_scaling import SummonStats, scale_summon_stats
from skirmish.services.factories.id_factory import make_instance_id


def create_summon_actor(
    template: SummonTemplate,
    *,
    owner_id: str,
    caster_level: int,
    ability_id: str | None,
    rng: RNG,
    multiplier: float = 1.0,
    lifetime_bonus: int = 0,
    name: str | None = None,
    companion: bool = True,
) -> tuple[Actor, SummonStats]:
    """Instantiate a minion from ``template``; returns the actor and its scaled stats."""
    stats = scale_summon_stats(
        template,
        caster_level=caster_level,
        multiplier=multiplier,
        lifetime_bonus=lifetime_bonus,
    )
    actor = Actor(
        id=make_instance_id("summon", rng),
        name=name or template.name,
        kind=template.kind,
        level=max(1, caster_level),
        max_health=stats.max_health,
        health=stats.max_health,
        armor=stats.armor,
        damage=stats.damage,
        behavior=Behavior.AGGRESSIVE,
        abilities=[basic_attack(stats.damage)],
        xp_reward=0,
        gold_reward=0,
        is_companion=companion,
        companion_meta=CompanionMeta(
            is_summon=True,
            owner_id=owner_id,
            summon_ability_id=ability_id,
        ),
        description=f"A conjured {template.name.lower()}",
    )
    return actor, stats
