"""Resolves the player's chosen action."""
from __future__ import annotations

import dataclasses
import logging
import math
from typing import List, Sequence, Tuple

from skirmish.config import EngineConfig
from skirmish.core.rng import RNG
from skirmish.core.types import (
    AbilityKind,
    ActionKind,
    ArrowKind,
    CombatResult,
    Element,
    ItemKind,
    Stat,
    Tier,
    WeaponCategory,
)
from skirmish.data.repositories import NutritionRepository
from skirmish.domain import perks as perk_keys
from skirmish.domain.abilities import Ability
from skirmish.domain.arrows import apply_arrow, arrow_kind
from skirmish.domain.combat_models import PLAYER_ID, Actor, CombatState, LogEntry, SurvivalDelta
from skirmish.domain.damage import compute_damage, mitigate
from skirmish.domain.effect_engine import (
    AreaHit,
    available_resource,
    effective_armor,
    effective_damage,
    tick_effects,
)
from skirmish.domain.effects import (
    AoeDamageEffect,
    AoeHealEffect,
    BuffEffect,
    DotEffect,
    DrainEffect,
    HealEffect,
    SummonEffect,
)
from skirmish.domain.item_effects import food_heal_amount, resolve_potion_effect
from skirmish.domain.perks import PerkBonusResolver
from skirmish.domain.player import Character, InventoryItem, PlayerCombatStats
from skirmish.domain.resources import CostPayment, pay_cost
from skirmish.domain.rolls import RollResult, resolve_attack
from skirmish.domain.summon_scaling import summon_scaling_for_tier
from skirmish.services.combat_lifecycle import CombatLifecycle
from skirmish.services.combat_results import PlayerActionResult
from skirmish.services.effect_application import (
    apply_affinity,
    area_damage,
    area_heal,
    attach_to_actor,
    attach_to_player,
    describe_area_hits,
    describe_timed,
    drain_actor,
    heal_amount,
    is_timed,
    triggers,
)
from skirmish.services.summoning import spawn_summons

logger = logging.getLogger(__name__)

ABILITY_ACTIONS = (ActionKind.ATTACK, ActionKind.POWER_ATTACK, ActionKind.MAGIC, ActionKind.SHOUT)
DEFAULT_ABILITY_FOR_ACTION = {
    ActionKind.ATTACK: "basic_attack",
    ActionKind.POWER_ATTACK: "power_attack",
}
MELEE_WEAPON_SHARE = 0.5
BLEED_DURATION = 3
SWORD_CATEGORIES = (WeaponCategory.SWORD, WeaponCategory.GREATSWORD)
MACE_CATEGORIES = (WeaponCategory.MACE, WeaponCategory.WARHAMMER)
AXE_CATEGORIES = (WeaponCategory.AXE, WeaponCategory.BATTLEAXE)
ELEMENT_PERK_KEYS = {
    Element.FIRE: perk_keys.FIRE_DAMAGE,
    Element.FROST: perk_keys.FROST_DAMAGE,
    Element.SHOCK: perk_keys.SHOCK_DAMAGE,
}


class PlayerTurnExecutor:
    """Applies one player action to a combat state and returns the new state."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        rng: RNG | None = None,
        perks: PerkBonusResolver | None = None,
        lifecycle: CombatLifecycle | None = None,
        nutrition_repo: NutritionRepository | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._rng = rng or RNG()
        self._perks = perks or PerkBonusResolver(())
        self._lifecycle = lifecycle or CombatLifecycle(self._config, rng=self._rng)
        self._nutrition_repo = nutrition_repo

    def execute(
        self,
        state: CombatState,
        player_stats: PlayerCombatStats,
        action: ActionKind,
        *,
        target_id: str | None = None,
        ability_id: str | None = None,
        item_id: str | None = None,
        inventory: Sequence[InventoryItem] | None = None,
        natural_roll: int | None = None,
        character: Character | None = None,
    ) -> PlayerActionResult:
        """
        Resolve ``action`` for the player.

        Refused actions (cooldown, unknown ability, guard already used, flee or
        surrender not allowed, unusable item) return the input state with a
        log entry appended and ``turn_consumed=False``. An ATTACK with an
        ``item_id`` fires that special arrow; the spent stack comes back in
        ``used_item``.
        """
        new_state = state.clone()
        stats = player_stats.clone()

        ability: Ability | None = None
        item: InventoryItem | None = None
        arrow: InventoryItem | None = None
        refusal: str | None = None
        if not new_state.active:
            refusal = "The fight is already over."
        elif action in ABILITY_ACTIONS:
            ability = self._find_ability(stats, action, ability_id)
            refusal = self._ability_refusal(new_state, ability)
            if refusal is None and action is ActionKind.ATTACK and item_id:
                arrow, refusal = self._arrow_refusal(ability, item_id, inventory)
        elif action is ActionKind.DEFEND and new_state.player_guard_used:
            refusal = "You have already used your guard this combat!"
        elif action is ActionKind.FLEE and not new_state.flee_allowed:
            refusal = "You cannot flee from this battle!"
        elif action is ActionKind.SURRENDER and not new_state.surrender_allowed:
            refusal = "These enemies will not accept your surrender!"
        elif action is ActionKind.ITEM:
            item, refusal = self._item_refusal(stats, item_id, inventory)
        if refusal is not None:
            return self._refuse(new_state, stats, action, refusal)

        parts: List[str] = []
        if self._start_turn(new_state, stats, parts):
            return self._finish(new_state, stats, "stunned", parts)

        if action in ABILITY_ACTIONS:
            return self._use_ability(new_state, stats, ability, target_id, natural_roll, character, parts, arrow=arrow)
        if action is ActionKind.DEFEND:
            return self._defend(new_state, stats, character, parts)
        if action is ActionKind.FLEE:
            return self._flee(new_state, stats, parts)
        if action is ActionKind.SURRENDER:
            self._count(new_state, "surrender")
            self._lifecycle.finish_combat(
                new_state, CombatResult.SURRENDERED, "You lay down your arms and surrender..."
            )
            parts.append("You lay down your arms and surrender...")
            return PlayerActionResult(state=new_state, player_stats=stats, narrative=" ".join(parts))
        if action is ActionKind.ITEM:
            return self._use_item(new_state, stats, item, parts)
        if action is ActionKind.SKIP:
            parts.append("You hold your ground and wait.")
            return self._finish(new_state, stats, "skip", parts)
        raise ValueError(f"Unknown player action: {action}")

    # -----------------------
    # Validation
    # -----------------------
    def _find_ability(self, stats: PlayerCombatStats, action: ActionKind, ability_id: str | None) -> Ability | None:
        if ability_id:
            return stats.find_ability(ability_id)
        default_id = DEFAULT_ABILITY_FOR_ACTION.get(action)
        ability = stats.find_ability(default_id) if default_id else None
        if ability is None and action is ActionKind.ATTACK and stats.abilities:
            return stats.abilities[0]
        return ability

    def _ability_refusal(self, state: CombatState, ability: Ability | None) -> str | None:
        if ability is None:
            return "Invalid ability!"
        remaining = state.ability_cooldowns.get(ability.id, 0)
        if remaining > 0:
            return f"{ability.name} is still on cooldown for {remaining} turns!"
        if not ability.is_supportive and not state.living_enemies():
            return "No valid target!"
        return None

    def _item_refusal(
        self,
        stats: PlayerCombatStats,
        item_id: str | None,
        inventory: Sequence[InventoryItem] | None,
    ) -> Tuple[InventoryItem | None, str | None]:
        if not item_id or inventory is None:
            return None, "No item selected or inventory not available!"
        item = next((entry for entry in inventory if entry.id == item_id), None)
        if item is None:
            return None, "Item not found in inventory!"
        if item.quantity <= 0:
            return None, "You don't have any of that item!"
        if item.kind is ItemKind.POTION:
            effect = resolve_potion_effect(item)
            if not effect.usable:
                return None, f"The {item.name} has no clear effect."
            if _missing(stats, effect.stat) <= 0:
                return None, f"The {item.name} had no effect."
            return item, None
        if item.kind in (ItemKind.FOOD, ItemKind.DRINK):
            if stats.current_health >= stats.max_health:
                return None, f"You cannot use {item.name} right now."
            return item, None
        return None, f"You cannot use {item.name} in combat."

    def _arrow_refusal(
        self,
        ability: Ability,
        item_id: str,
        inventory: Sequence[InventoryItem] | None,
    ) -> Tuple[InventoryItem | None, str | None]:
        if inventory is None:
            return None, "No item selected or inventory not available!"
        arrow = next((entry for entry in inventory if entry.id == item_id), None)
        if arrow is None:
            return None, "Item not found in inventory!"
        if arrow.quantity <= 0:
            return None, "You don't have any of that item!"
        if arrow_kind(arrow) is None:
            return None, f"{arrow.name} cannot be fired."
        if ability.is_supportive or ability.is_summon:
            return None, f"{ability.name} cannot fire {arrow.name}."
        return arrow, None

    # -----------------------
    # Actions
    # -----------------------
    def _use_ability(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        ability: Ability,
        target_id: str | None,
        natural_roll: int | None,
        character: Character | None,
        parts: List[str],
        *,
        arrow: InventoryItem | None = None,
    ) -> PlayerActionResult:
        payment = self._pay(state, stats, ability)
        if payment.weakened:
            parts.append(f"Low {'magicka' if ability.uses_magicka else 'stamina'} weakens {ability.name}.")
        self._count(state, _action_key(ability))
        history = state.last_actor_actions.get(PLAYER_ID, [])
        state.last_actor_actions[PLAYER_ID] = [ability.id, *history][: self._config.ability_history_size]

        if ability.is_summon:
            return self._cast_summon(state, stats, ability, payment, natural_roll, character, parts)
        if ability.cooldown:
            state.ability_cooldowns[ability.id] = ability.cooldown
        if ability.is_supportive:
            return self._support(state, stats, ability, target_id, payment, character, parts)
        result = self._strike(state, stats, ability, target_id, payment, natural_roll, character, parts, arrow)
        if arrow is not None:
            # Fired arrows are spent whether or not the shot lands.
            result.used_item = dataclasses.replace(arrow, quantity=arrow.quantity - 1)
        return result

    def _strike(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        ability: Ability,
        target_id: str | None,
        payment: CostPayment,
        natural_roll: int | None,
        character: Character | None,
        parts: List[str],
        arrow: InventoryItem | None = None,
    ) -> PlayerActionResult:
        target = state.find_enemy(target_id) if target_id else None
        if target is None or not target.is_alive:
            target = state.living_enemies()[0]
        level = character.level if character else 1
        roll = self._roll(stats, target, natural_roll, character, parts)
        entry = LogEntry(
            turn=state.turn,
            actor=PLAYER_ID,
            action=ability.id,
            narrative="",
            target=target.id,
            natural_roll=roll.natural_roll,
            tier=roll.tier,
        )
        if not roll.hit:
            outcome = "critical failure" if roll.tier is Tier.FAIL else "miss"
            parts.insert(0, f"You roll {roll.natural_roll} ({outcome}) and {ability.name} against {target.name} fails to connect.")
            return self._finish(state, stats, ability.id, parts, entry=entry)

        melee = ability.kind is AbilityKind.MELEE and not ability.unarmed
        base = ability.damage + (math.floor(stats.weapon_damage * MELEE_WEAPON_SHARE) if melee else 0)
        base = effective_damage(base, state.player_active_effects)
        multiplier = payment.multiplier
        if ability.unarmed:
            multiplier *= self._perks.multiplier(character, perk_keys.UNARMED_DAMAGE)
        if ability.element is not None:
            multiplier *= self._perks.multiplier(character, ELEMENT_PERK_KEYS[ability.element])
        rolled = compute_damage(base * multiplier, level, roll.natural_roll, roll.tier, roll.is_crit, minimum=1)
        damage = rolled.damage

        category = stats.weapon_category if melee else None
        if roll.is_crit and category in SWORD_CATEGORIES:
            damage = math.floor(damage * self._perks.multiplier(character, perk_keys.SWORD_CRIT_DAMAGE))
        armor = effective_armor(target.armor, target.active_effects)
        if category in MACE_CATEGORIES:
            penetration = min(100.0, self._perks.bonus(character, perk_keys.MACE_ARMOR_PENETRATION))
            armor = armor * (1 - penetration / 100)
        damage = mitigate(damage, armor)
        damage, affinity = apply_affinity(damage, ability, target)
        dealt = target.take_damage(damage)

        text = f"deals {dealt} damage to the {rolled.hit_location}"
        if roll.is_crit:
            text = f"CRITICAL HIT! {text}"
        if affinity == "resisted":
            text += " (resisted)"
        elif affinity == "weakness":
            text += " (weakness)"
        parts.insert(0, f"You roll {roll.natural_roll} and use {ability.name} on {target.name}: {text}!")

        lifesteal = self._perks.bonus(character, perk_keys.LIFESTEAL)
        if lifesteal > 0 and dealt > 0:
            stolen = stats.restore(Stat.HEALTH, math.floor(dealt * lifesteal / 100))
            if stolen:
                parts.append(f"You drain {stolen} health.")
        if category in AXE_CATEGORIES and target.is_alive:
            bleed_chance = self._perks.bonus(character, perk_keys.AXE_BLEED_CHANCE)
            if bleed_chance > 0 and self._rng.percent(bleed_chance):
                attach_to_actor(target, DotEffect(amount=max(1, dealt // 10), duration=BLEED_DURATION))
                parts.append(f"{target.name} starts bleeding.")
        if arrow is not None and target.is_alive:
            self._loose_arrow(state, target, arrow, dealt, roll, parts)

        summary = self._apply_effects(state, stats, ability, target, payment, character, parts)
        if not target.is_alive:
            parts.append(f"{target.name} is defeated!")
        entry.damage = dealt
        entry.is_crit = roll.is_crit
        entry.hit_location = rolled.hit_location
        return self._finish(state, stats, ability.id, parts, entry=entry, summary=summary)

    def _support(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        ability: Ability,
        target_id: str | None,
        payment: CostPayment,
        character: Character | None,
        parts: List[str],
    ) -> PlayerActionResult:
        ally = state.find_ally(target_id) if target_id else None
        if ally is not None and not ally.is_alive:
            ally = None
        healing = self._perks.multiplier(character, perk_keys.HEALING_POWER) * payment.multiplier
        summary: List[AreaHit] = []
        target_name = ally.name if ally else "yourself"
        parts.insert(0, f"You cast {ability.name} on {target_name}.")
        if ability.heal:
            parts.append(self._heal_target(stats, ally, heal_amount(ability.heal, healing)))
        for effect in ability.effects:
            if not triggers(self._rng, effect):
                continue
            if isinstance(effect, HealEffect):
                parts.append(self._heal_target(stats, ally, heal_amount(effect.amount, healing)))
            elif is_timed(effect):
                if ally is not None:
                    attach_to_actor(ally, effect)
                    parts.append(describe_timed(ally.name, effect))
                else:
                    attach_to_player(state, effect)
                    parts.append(describe_timed("You", effect))
            elif isinstance(effect, AoeHealEffect):
                summary.extend(self._area_heal(state, stats, effect, heal_amount(effect.amount, healing), parts))
        entry = LogEntry(
            turn=state.turn,
            actor=PLAYER_ID,
            action=ability.id,
            narrative="",
            target=ally.id if ally else PLAYER_ID,
        )
        return self._finish(state, stats, ability.id, parts, entry=entry, summary=summary)

    def _cast_summon(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        ability: Ability,
        payment: CostPayment,
        natural_roll: int | None,
        character: Character | None,
        parts: List[str],
    ) -> PlayerActionResult:
        # The cost is already spent when the cap is checked; a fizzle refunds nothing.
        cap = self._perks.summon_cap(character)
        if len(state.active_summons(PLAYER_ID)) >= cap:
            parts.insert(0, f"{ability.name} fizzles: you cannot control more than {cap} summon(s).")
            return self._finish(state, stats, ability.id, parts)
        if ability.cooldown:
            state.ability_cooldowns[ability.id] = ability.cooldown

        roll = self._roll(stats, None, natural_roll, character, parts)
        entry = LogEntry(
            turn=state.turn,
            actor=PLAYER_ID,
            action=ability.id,
            narrative="",
            natural_roll=roll.natural_roll,
            tier=roll.tier,
            is_crit=roll.is_crit,
        )
        scaling = summon_scaling_for_tier(roll.tier)
        if scaling is None:
            parts.insert(0, f"You roll {roll.natural_roll} and the conjuration of {ability.name} collapses.")
            return self._finish(state, stats, ability.id, parts, entry=entry)
        power = payment.multiplier * self._perks.multiplier(character, perk_keys.CONJURATION_POWER)
        summoned = spawn_summons(
            state,
            ability,
            owner=None,
            caster_level=character.level if character else 1,
            rng=self._rng,
            scaling=scaling,
            power=power,
        )
        names = " and ".join(actor.name for actor in summoned)
        parts.insert(0, f"You roll {roll.natural_roll} and cast {ability.name}: {names} answers the call!")
        return self._finish(state, stats, ability.id, parts, entry=entry)

    def _defend(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        character: Character | None,
        parts: List[str],
    ) -> PlayerActionResult:
        duration = min(
            self._config.guard_max_duration,
            self._config.guard_base_duration + self._perks.rank(character, perk_keys.TACTICAL_GUARD_MASTERY),
        )
        reduction = self._config.guard_damage_reduction
        attach_to_player(state, BuffEffect(stat=Stat.GUARD, amount=reduction, duration=duration))
        state.player_guard_used = True
        state.player_defending = True
        self._count(state, "defend")
        parts.insert(0, f"You raise your guard, reducing incoming damage by {reduction}% for {duration} round(s).")
        return self._finish(state, stats, "defend", parts)

    def _flee(self, state: CombatState, stats: PlayerCombatStats, parts: List[str]) -> PlayerActionResult:
        chance = max(0, min(100, self._config.flee_base_chance + stats.dodge_chance))
        self._count(state, "flee")
        if self._rng.percent(chance):
            parts.append("You successfully escape from combat!")
            self._lifecycle.finish_combat(state, CombatResult.FLED, "You successfully escape from combat!")
            return PlayerActionResult(state=state, player_stats=stats, narrative=" ".join(parts))
        parts.append("You failed to escape! The enemies block your path.")
        return self._finish(state, stats, "flee", parts)

    def _use_item(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        item: InventoryItem,
        parts: List[str],
    ) -> PlayerActionResult:
        self._count(state, "use_item")
        if item.kind is ItemKind.POTION:
            effect = resolve_potion_effect(item)
            gained = stats.restore(effect.stat, effect.amount)
            parts.insert(0, f"You use {item.name} and recover {gained} {effect.stat.value}.")
        else:
            nutrition = self._nutrition_repo.lookup(item.name) if self._nutrition_repo else None
            gained = stats.restore(Stat.HEALTH, food_heal_amount(nutrition))
            if nutrition is not None:
                carried = state.survival_delta
                state.survival_delta = SurvivalDelta(
                    hunger=carried.hunger - nutrition.hunger,
                    thirst=carried.thirst - nutrition.thirst,
                    fatigue=carried.fatigue,
                )
            parts.insert(0, f"You consume {item.name} and recover {gained} health.")
        used = dataclasses.replace(item, quantity=item.quantity - 1)
        entry = LogEntry(turn=state.turn, actor=PLAYER_ID, action="item", narrative="", target=item.name)
        result = self._finish(state, stats, "item", parts, entry=entry)
        result.used_item = used
        return result

    # -----------------------
    # Helpers
    # -----------------------
    def _start_turn(self, state: CombatState, stats: PlayerCombatStats, parts: List[str]) -> bool:
        """Tick the player's effects once per round; returns True when the player loses the turn."""
        if state.player_effects_ticked_turn == state.turn:
            return False
        state.player_effects_ticked_turn = state.turn
        outcome = tick_effects(state.player_active_effects, stats.current_health)
        state.player_active_effects = list(outcome.effects)
        stats.current_health = outcome.health
        if outcome.dot_damage:
            parts.append(f"You take {outcome.dot_damage} damage from lingering effects.")
        if stats.current_health <= 0:
            parts.append("You succumb to your wounds.")
            return True
        if outcome.stunned:
            parts.append("You are stunned and cannot act!")
        return outcome.stunned

    def _pay(self, state: CombatState, stats: PlayerCombatStats, ability: Ability) -> CostPayment:
        if ability.unarmed or ability.cost <= 0:
            return CostPayment(paid=0, remaining=0, multiplier=1.0)
        if ability.uses_magicka:
            payment = pay_cost(
                stats.current_magicka,
                ability.cost,
                available=available_resource(stats.current_magicka, state.player_active_effects, Stat.MAGICKA),
            )
            stats.current_magicka = payment.remaining
            return payment
        payment = pay_cost(
            stats.current_stamina,
            ability.cost,
            available=available_resource(stats.current_stamina, state.player_active_effects, Stat.STAMINA),
        )
        stats.current_stamina = payment.remaining
        return payment

    def _roll(
        self,
        stats: PlayerCombatStats,
        target: Actor | None,
        natural_roll: int | None,
        character: Character | None,
        parts: List[str],
    ) -> RollResult:
        level = character.level if character else 1
        armor = target.armor if target else 0
        roll = resolve_attack(
            self._rng,
            attacker_level=level,
            target_armor=armor,
            crit_chance=stats.crit_chance,
            natural_roll=natural_roll,
        )
        if roll.tier is Tier.FAIL and self._perks.has_perk(character, perk_keys.REROLL_ON_FAILURE):
            logger.debug("reroll on failure")
            roll = resolve_attack(self._rng, attacker_level=level, target_armor=armor, crit_chance=stats.crit_chance)
        if roll.tier is Tier.FAIL:
            self_damage = max(1, math.floor(stats.weapon_damage * self._config.fumble_self_damage_fraction))
            stats.take_damage(self_damage)
            parts.append(f"You fumble and hurt yourself for {self_damage} damage.")
        return roll

    def _apply_effects(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        ability: Ability,
        target: Actor,
        payment: CostPayment,
        character: Character | None,
        parts: List[str],
    ) -> List[AreaHit]:
        summary: List[AreaHit] = []
        healing = self._perks.multiplier(character, perk_keys.HEALING_POWER)
        for effect in ability.effects:
            if not triggers(self._rng, effect):
                continue
            if isinstance(effect, HealEffect):
                gained = stats.restore(Stat.HEALTH, heal_amount(effect.amount, healing))
                parts.append(f"You recover {gained} health.")
            elif is_timed(effect):
                if target.is_alive:
                    attach_to_actor(target, effect)
                    parts.append(describe_timed(target.name, effect))
            elif isinstance(effect, DrainEffect):
                drained = drain_actor(target, effect)
                if drained:
                    parts.append(f"You drain {drained} {effect.stat.value} from {target.name}.")
                if effect.stat is Stat.HEALTH and drained:
                    stats.restore(Stat.HEALTH, drained)
            elif isinstance(effect, AoeDamageEffect):
                hits = area_damage(
                    state, stats, effect.target, heal_amount(effect.amount, payment.multiplier), hostile_caster=False
                )
                summary.extend(hits)
                parts.extend(describe_area_hits(hits, "take", "damage"))
            elif isinstance(effect, AoeHealEffect):
                summary.extend(self._area_heal(state, stats, effect, heal_amount(effect.amount, healing), parts))
            elif isinstance(effect, SummonEffect):
                logger.debug("summon effect on offensive ability %s ignored", ability.id)
        return summary

    def _loose_arrow(
        self,
        state: CombatState,
        target: Actor,
        arrow: InventoryItem,
        dealt: int,
        roll: RollResult,
        parts: List[str],
    ) -> None:
        kind = arrow_kind(arrow)
        if kind is not ArrowKind.COMMAND:
            parts.append(apply_arrow(target, kind, dealt, roll.tier, self._rng).narrative)
            return
        ally = next(iter(state.living_allies()), None)
        if ally is None:
            parts.append("The command arrow whistles, but no ally answers.")
            return
        base = effective_damage(ally.damage, ally.active_effects)
        rolled = compute_damage(base, ally.level, roll.natural_roll, roll.tier, roll.is_crit, minimum=1)
        struck = target.take_damage(mitigate(rolled.damage, effective_armor(target.armor, target.active_effects)))
        parts.append(f"{ally.name} answers the command arrow and strikes {target.name} for {struck} damage!")

    def _heal_target(self, stats: PlayerCombatStats, ally: Actor | None, amount: int) -> str:
        if ally is not None:
            return f"{ally.name} recovers {ally.restore_health(amount)} health."
        return f"You recover {stats.restore(Stat.HEALTH, amount)} health."

    def _area_heal(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        effect: AoeHealEffect,
        amount: int,
        parts: List[str],
    ) -> List[AreaHit]:
        hits = area_heal(state, stats, effect.target, amount, hostile_caster=False)
        parts.extend(describe_area_hits(hits, "recover", "health"))
        return hits

    def _count(self, state: CombatState, key: str) -> None:
        state.player_action_counts[key] = state.player_action_counts.get(key, 0) + 1

    def _refuse(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        action: ActionKind,
        narrative: str,
    ) -> PlayerActionResult:
        state.record(LogEntry(turn=state.turn, actor=PLAYER_ID, action=action.value, narrative=narrative))
        return PlayerActionResult(state=state, player_stats=stats, narrative=narrative, turn_consumed=False)

    def _finish(
        self,
        state: CombatState,
        stats: PlayerCombatStats,
        action: str,
        parts: List[str],
        *,
        entry: LogEntry | None = None,
        summary: List[AreaHit] | None = None,
    ) -> PlayerActionResult:
        narrative = " ".join(part for part in parts if part)
        if entry is None:
            entry = LogEntry(turn=state.turn, actor=PLAYER_ID, action=action, narrative="")
        entry.narrative = narrative
        state.record(entry)
        return PlayerActionResult(
            state=state,
            player_stats=stats,
            narrative=narrative,
            area_effect_summary=summary or [],
        )


def _action_key(ability: Ability) -> str:
    if ability.kind is AbilityKind.MAGIC:
        return "magic"
    if ability.kind is AbilityKind.MELEE:
        return ability.id
    return ability.kind.value


def _missing(stats: PlayerCombatStats, stat: Stat) -> int:
    if stat is Stat.HEALTH:
        return stats.max_health - stats.current_health
    if stat is Stat.MAGICKA:
        return stats.max_magicka - stats.current_magicka
    if stat is Stat.STAMINA:
        return stats.max_stamina - stats.current_stamina
    return 0


__all__ = ["PlayerTurnExecutor"]
