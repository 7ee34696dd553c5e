"""Factory for creating enemy actors from templates."""
from __future__ import annotations

import dataclasses
import math
from typing import Dict, List

from skirmish.core.rng import RNG
from skirmish.core.types import CreatureKind
from skirmish.data.repositories import EnemyTemplatesRepository
from skirmish.domain.combat_models import Actor
from skirmish.domain.defs import EnemyTemplateDef
from skirmish.services.errors import FactoryError

from .id_factory import make_instance_id

STAT_VARIANCE = 0.15
XP_VARIANCE = 0.2
GOLD_VARIANCE = 0.3
LEVEL_SCALE_PER_LEVEL = 0.1
MIN_LEVEL_SCALE = 0.5
ELITE_STAT_MULTIPLIER = 1.5
ELITE_ABILITY_MULTIPLIER = 1.2
ELITE_XP_MULTIPLIER = 2
ELITE_GOLD_MULTIPLIER = 2.5

PERSONALITY_TRAITS = (
    "battle-scarred",
    "cunning",
    "reckless",
    "cautious",
    "bloodthirsty",
    "weary",
    "fanatical",
    "hungry",
)

# Minion template used for a boss whose own template names none.
MINION_TEMPLATES_BY_KIND: Dict[CreatureKind, str] = {
    CreatureKind.HUMANOID: "bandit",
    CreatureKind.BEAST: "wolf",
    CreatureKind.UNDEAD: "skeleton",
    CreatureKind.DAEDRA: "scamp",
    CreatureKind.AUTOMATON: "dwarven_spider",
    CreatureKind.DRAGON: "skeleton",
}


def create_enemy_from_template(
    template_id: str,
    *,
    templates_repo: EnemyTemplatesRepository,
    rng: RNG,
    name_override: str | None = None,
    level_modifier: int = 0,
    is_elite: bool = False,
    target_level: int | None = None,
) -> Actor:
    """Roll a concrete enemy from ``template_id``."""
    try:
        template = templates_repo.get(template_id)
    except KeyError as exc:
        raise FactoryError(f"Enemy template '{template_id}' not found.") from exc

    name = template.name
    if template.name_prefixes:
        name = f"{rng.choice(template.name_prefixes)} {template.name}"
    if name_override:
        name = name_override

    if target_level is not None:
        level = max(1, rng.randint(target_level - 2, target_level + 2))
    else:
        base_level = template.base_level + level_modifier
        level = max(1, rng.randint(base_level - 1, base_level + 2))

    level_scale = max(MIN_LEVEL_SCALE, 1 + (level - template.base_level) * LEVEL_SCALE_PER_LEVEL)
    max_health = max(10, rng.vary(math.floor(template.base_health * level_scale), STAT_VARIANCE))
    armor = max(0, rng.vary(math.floor(template.base_armor * level_scale), STAT_VARIANCE))
    damage = max(5, rng.vary(math.floor(template.base_damage * level_scale), STAT_VARIANCE))
    if is_elite:
        max_health = math.floor(max_health * ELITE_STAT_MULTIPLIER)
        armor = math.floor(armor * ELITE_STAT_MULTIPLIER)
        damage = math.floor(damage * ELITE_STAT_MULTIPLIER)

    behavior = rng.choice(template.behaviors)
    abilities = _select_abilities(template, rng, level_scale=level_scale, is_elite=is_elite)

    xp_reward = math.floor(rng.vary(template.base_xp * level_scale, XP_VARIANCE) * (ELITE_XP_MULTIPLIER if is_elite else 1))
    gold_reward = None
    if template.base_gold:
        gold_reward = math.floor(
            rng.vary(template.base_gold * level_scale, GOLD_VARIANCE) * (ELITE_GOLD_MULTIPLIER if is_elite else 1)
        )

    loot = tuple(
        dataclasses.replace(item, drop_chance=max(0, min(100, item.drop_chance + rng.randint(-10, 15))))
        for item in template.loot
    )

    magicka = 50 + level * 5 if template.kind is CreatureKind.UNDEAD or template.caster else None
    stamina = 50 + level * 3
    return Actor(
        id=make_instance_id(template_id, rng),
        name=f"{name} (Elite)" if is_elite else name,
        kind=template.kind,
        level=level,
        max_health=max_health,
        health=max_health,
        armor=armor,
        damage=damage,
        behavior=behavior,
        max_magicka=magicka,
        magicka=magicka,
        max_stamina=stamina,
        stamina=stamina,
        abilities=abilities,
        is_boss=template.boss or is_elite,
        loot=loot,
        xp_reward=xp_reward,
        gold_reward=gold_reward,
        weaknesses=template.weaknesses,
        resistances=template.resistances,
        template_id=template.id,
        description=f"A {rng.choice(PERSONALITY_TRAITS)} {template.name.lower()}",
    )


def generate_enemy_group(
    template_id: str,
    count: int,
    *,
    templates_repo: EnemyTemplatesRepository,
    rng: RNG,
    include_elite: bool = False,
    level_variance: int = 2,
    unique_names: bool = True,
) -> List[Actor]:
    """Roll ``count`` enemies of one template; the first is elite when requested."""
    used_names: set[str] = set()
    enemies: List[Actor] = []
    for index in range(count):
        level_modifier = rng.randint(-level_variance, level_variance)
        enemy = create_enemy_from_template(
            template_id,
            templates_repo=templates_repo,
            rng=rng,
            level_modifier=level_modifier,
            is_elite=include_elite and index == 0,
        )
        attempts = 1
        while unique_names and enemy.name in used_names and attempts < 10:
            enemy = create_enemy_from_template(
                template_id,
                templates_repo=templates_repo,
                rng=rng,
                level_modifier=level_modifier,
                is_elite=include_elite and index == 0,
            )
            attempts += 1
        used_names.add(enemy.name)
        enemies.append(enemy)
    return enemies


def generate_mixed_encounter(
    main_template_id: str,
    main_count: int,
    *,
    templates_repo: EnemyTemplatesRepository,
    rng: RNG,
    leader_template_id: str | None = None,
) -> List[Actor]:
    """A group of one template, optionally led by an elite of another."""
    enemies = generate_enemy_group(main_template_id, main_count, templates_repo=templates_repo, rng=rng)
    if leader_template_id:
        enemies.append(
            create_enemy_from_template(leader_template_id, templates_repo=templates_repo, rng=rng, is_elite=True)
        )
    return enemies


def minion_template_for(boss: Actor, templates_repo: EnemyTemplatesRepository) -> str | None:
    """Pick the template a boss's minions are rolled from."""
    if boss.template_id:
        try:
            template = templates_repo.get(boss.template_id)
        except KeyError:
            template = None
        if template is not None and template.minion_template:
            return template.minion_template
    fallback = MINION_TEMPLATES_BY_KIND.get(boss.kind)
    if fallback is None or fallback not in templates_repo.ids() or fallback == boss.template_id:
        return None
    return fallback


def create_boss_minions(
    boss: Actor,
    count: int,
    *,
    templates_repo: EnemyTemplatesRepository,
    rng: RNG,
) -> List[Actor]:
    """Roll ``count`` lesser enemies that accompany ``boss``."""
    template_id = minion_template_for(boss, templates_repo)
    if template_id is None:
        return []
    return [
        create_enemy_from_template(
            template_id,
            templates_repo=templates_repo,
            rng=rng,
            target_level=max(1, boss.level - 3),
        )
        for _ in range(count)
    ]


def _select_abilities(template: EnemyTemplateDef, rng: RNG, *, level_scale: float, is_elite: bool):
    pool = list(template.abilities)
    count = rng.randint(min(2, len(pool)), min(4, len(pool)))
    rng.shuffle(pool)
    elite = ELITE_ABILITY_MULTIPLIER if is_elite else 1
    selected = []
    for ability in pool[:count]:
        damage = ability.damage
        if damage > 0:
            damage = max(1, math.floor(damage * level_scale * elite))
        selected.append(dataclasses.replace(ability, damage=damage))
    return selected


__all__ = [
    "MINION_TEMPLATES_BY_KIND",
    "create_boss_minions",
    "create_enemy_from_template",
    "generate_enemy_group",
    "generate_mixed_encounter",
    "minion_template_for",
]
