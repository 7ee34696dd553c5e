"""Combat domain models."""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Tuple

from skirmish.core.types import (
    Behavior,
    CombatResult,
    CompanionStatus,
    CreatureKind,
    HealthState,
    HostilityState,
    Tier,
)
from skirmish.domain.abilities import Ability
from skirmish.domain.defs.loot_def import LootItemDef
from skirmish.domain.effects import ActiveEffect

PLAYER_ID = "player"
SYSTEM_ACTOR = "system"


@dataclass(slots=True)
class CompanionMeta:
    """Bookkeeping for allied actors and conjured minions."""

    is_summon: bool = False
    owner_id: str | None = None
    summon_ability_id: str | None = None
    decaying: bool = False
    status: CompanionStatus = CompanionStatus.FOLLOWING


@dataclass(slots=True)
class Actor:
    """An enemy, recruited follower or summoned minion."""

    id: str
    name: str
    kind: CreatureKind
    level: int
    max_health: int
    health: int
    armor: int
    damage: int
    behavior: Behavior = Behavior.AGGRESSIVE
    max_magicka: int | None = None
    magicka: int | None = None
    max_stamina: int | None = None
    stamina: int | None = None
    abilities: List[Ability] = field(default_factory=list)
    active_effects: List[ActiveEffect] = field(default_factory=list)
    cooldowns: Dict[str, int] = field(default_factory=dict)
    is_boss: bool = False
    loot: Tuple[LootItemDef, ...] = ()
    xp_reward: int | None = None
    gold_reward: int | None = None
    weaknesses: Tuple[str, ...] = ()
    resistances: Tuple[str, ...] = ()
    regen_health_per_sec: float = 0.0
    is_companion: bool = False
    companion_meta: CompanionMeta | None = None
    health_state: HealthState = HealthState.HEALTHY
    hostility: HostilityState = HostilityState.STILL_HOSTILE
    forced_summon_used: bool = False
    template_id: str | None = None
    description: str = ""

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def is_summon(self) -> bool:
        return self.companion_meta is not None and self.companion_meta.is_summon

    @property
    def is_caster(self) -> bool:
        return self.max_magicka is not None and any(ability.uses_magicka for ability in self.abilities)

    def take_damage(self, amount: int) -> int:
        """Subtract ``amount`` from health, clamped at 0; return the damage dealt."""
        before = self.health
        self.health = max(0, self.health - max(0, amount))
        return before - self.health

    def restore_health(self, amount: int) -> int:
        before = self.health
        self.health = min(self.max_health, self.health + max(0, amount))
        return self.health - before


@dataclass(slots=True)
class LogEntry:
    """User-facing narration record."""

    turn: int
    actor: str
    action: str
    narrative: str
    target: str | None = None
    damage: int = 0
    is_crit: bool = False
    natural_roll: int | None = None
    tier: Tier | None = None
    hit_location: str | None = None
    count: int = 1

    def same_event(self, other: "LogEntry") -> bool:
        return (
            self.turn == other.turn
            and self.actor == other.actor
            and self.action == other.action
            and self.target == other.target
        )


@dataclass(slots=True, frozen=True)
class RewardItem:
    name: str
    kind: str
    description: str
    quantity: int


@dataclass(slots=True)
class EnemyLoot:
    enemy_id: str
    enemy_name: str
    items: List[RewardItem] = field(default_factory=list)


@dataclass(slots=True)
class PendingRewards:
    xp: int = 0
    gold: int = 0
    items: List[RewardItem] = field(default_factory=list)


@dataclass(slots=True)
class SurvivalDelta:
    hunger: float = 0.0
    thirst: float = 0.0
    fatigue: float = 0.0


@dataclass(slots=True)
class CombatState:
    """The whole encounter; every engine call returns a fresh copy."""

    id: str
    location: str
    turn_order: List[str]
    current_turn_actor: str
    enemies: List[Actor] = field(default_factory=list)
    allies: List[Actor] = field(default_factory=list)
    active: bool = True
    result: CombatResult = CombatResult.NONE
    turn: int = 1
    flee_allowed: bool = True
    surrender_allowed: bool = False
    combat_log: List[LogEntry] = field(default_factory=list)
    player_active_effects: List[ActiveEffect] = field(default_factory=list)
    player_effects_ticked_turn: int = 0
    ability_cooldowns: Dict[str, int] = field(default_factory=dict)
    pending_summons: Dict[str, int] = field(default_factory=dict)
    player_defending: bool = False
    player_guard_used: bool = False
    loot_pending: bool = False
    pending_rewards: PendingRewards | None = None
    pending_loot: List[EnemyLoot] = field(default_factory=list)
    survival_delta: SurvivalDelta = field(default_factory=SurvivalDelta)
    last_actor_actions: Dict[str, List[str]] = field(default_factory=dict)
    player_action_counts: Dict[str, int] = field(default_factory=dict)

    def clone(self) -> "CombatState":
        return copy.deepcopy(self)

    def iter_actors(self) -> Iterator[Actor]:
        yield from self.enemies
        yield from self.allies

    def find_actor(self, actor_id: str) -> Actor | None:
        for actor in self.iter_actors():
            if actor.id == actor_id:
                return actor
        return None

    def find_enemy(self, actor_id: str) -> Actor | None:
        return next((enemy for enemy in self.enemies if enemy.id == actor_id), None)

    def find_ally(self, actor_id: str) -> Actor | None:
        return next((ally for ally in self.allies if ally.id == actor_id), None)

    def living_enemies(self) -> List[Actor]:
        return [enemy for enemy in self.enemies if enemy.is_alive]

    def living_allies(self) -> List[Actor]:
        return [ally for ally in self.allies if ally.is_alive]

    def active_summons(self, owner_id: str) -> List[Actor]:
        return [
            actor
            for actor in self.iter_actors()
            if actor.is_alive and actor.is_summon and actor.companion_meta.owner_id == owner_id
        ]

    def record(self, entry: LogEntry) -> None:
        """Append ``entry`` or merge it into the previous entry for the same event."""
        if self.combat_log and self.combat_log[-1].same_event(entry):
            previous = self.combat_log[-1]
            previous.damage += entry.damage
            previous.count += 1
            previous.narrative = entry.narrative
            previous.is_crit = previous.is_crit or entry.is_crit
            previous.natural_roll = entry.natural_roll
            previous.tier = entry.tier
            previous.hit_location = entry.hit_location
            return
        self.combat_log.append(entry)

    def insert_after(self, anchor_id: str, actor_ids: Iterable[str]) -> None:
        """Insert turn-order slots directly after ``anchor_id`` (or at the end)."""
        ids = [actor_id for actor_id in actor_ids if actor_id not in self.turn_order]
        if anchor_id in self.turn_order:
            index = self.turn_order.index(anchor_id) + 1
            # Land behind any summons already queued after the anchor.
            while index < len(self.turn_order):
                follower = self.find_actor(self.turn_order[index])
                if follower is None or not follower.is_summon or follower.companion_meta.owner_id != anchor_id:
                    break
                index += 1
            self.turn_order[index:index] = ids
        else:
            self.turn_order.extend(ids)


__all__ = [
    "Actor",
    "CombatState",
    "CompanionMeta",
    "EnemyLoot",
    "LogEntry",
    "PLAYER_ID",
    "PendingRewards",
    "RewardItem",
    "SYSTEM_ACTOR",
    "SurvivalDelta",
]
