"""
Fruit, bird and growth-multiplier bookkeeping.

Everything here works on EconomyState (or GameState for harvesting) and never
touches experience, so the progression engine can call into it freely.
"""

import logging
import math
from collections.abc import Iterable, Sequence

import numpy as np

from grove.config import (
    DEFAULT_CONFIG,
    Buff,
    EconomyState,
    GameConfig,
    GameState,
    Outcome,
)

logger = logging.getLogger(__name__)

DEFAULT_SPAWN_CHANCE = 0.3


# =============================================================================
# BUFFS
# =============================================================================

def apply_buff(
    economy: EconomyState,
    multiplier: float,
    duration: float,
    label: str,
    now: float,
) -> EconomyState:
    """Start a timed multiplier override; the newest buff sets the multiplier."""
    buff = Buff(multiplier=multiplier, expires_at=now + duration, label=label)
    return economy._replace(
        buffs=economy.buffs + (buff,),
        growth_multiplier=multiplier,
    )


def expire_buffs(
    economy: EconomyState,
    now: float,
    config: GameConfig = DEFAULT_CONFIG,
) -> EconomyState:
    """
    Drop buffs whose time is up.

    By default the multiplier falls back to the most recently applied buff
    that is still running (or 1). With ``buff_expiry_resets_multiplier`` any
    expiry resets it to 1, even over a later, longer buff.
    """
    remaining = tuple(b for b in economy.buffs if b.expires_at > now)
    if len(remaining) == len(economy.buffs):
        return economy
    if config.buff_expiry_resets_multiplier or not remaining:
        multiplier = 1.0
    else:
        multiplier = remaining[-1].multiplier
    return economy._replace(buffs=remaining, growth_multiplier=multiplier)


# =============================================================================
# SLOTS
# =============================================================================

def fruit_cap(level: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Maximum simultaneous fruits; relaxes as the tree grows."""
    return config.fruit_cap_base + level


def free_slots(economy: EconomyState, slots: Sequence) -> list:
    """Slots holding neither a fruit nor a bird."""
    taken = economy.active_fruits | economy.active_birds
    return [slot for slot in slots if slot.id not in taken]


def level_up_spawn_count(
    level: int,
    rng: np.random.Generator,
    config: GameConfig = DEFAULT_CONFIG,
) -> int:
    """
    Fruit spawn attempts for reaching a level.

    chance = base + level * per_level, e.g. 1.2 -> one guaranteed spawn and a
    20% roll for a second.
    """
    chance = config.fruit_spawn_base + level * config.fruit_spawn_per_level
    guaranteed = int(math.floor(chance))
    fraction = chance - guaranteed
    count = guaranteed + (1 if rng.random() < fraction else 0)
    if count == 0 and rng.random() < chance:
        count = 1
    return count


def try_spawn_fruit(
    economy: EconomyState,
    slots: Sequence,
    level: int,
    rng: np.random.Generator,
    chance: float = DEFAULT_SPAWN_CHANCE,
    config: GameConfig = DEFAULT_CONFIG,
) -> EconomyState:
    """Maybe hang one fruit on a random free slot."""
    if not slots:
        return economy
    if len(economy.active_fruits) >= fruit_cap(level, config):
        return economy
    candidates = free_slots(economy, slots)
    if not candidates:
        return economy
    if chance < 1.0 and rng.random() >= chance:
        return economy
    slot = candidates[int(rng.integers(len(candidates)))]
    return economy._replace(active_fruits=economy.active_fruits | {slot.id})


def spawn_bird(
    economy: EconomyState,
    slots: Sequence,
    rng: np.random.Generator,
) -> EconomyState:
    """Perch a bird on a random free slot; no-op when none is free."""
    candidates = free_slots(economy, slots)
    if not candidates:
        return economy
    slot = candidates[int(rng.integers(len(candidates)))]
    return economy._replace(active_birds=economy.active_birds | {slot.id})


def migrate_interactables(
    economy: EconomyState,
    slot_ids: Iterable[str],
) -> EconomyState:
    """
    Move fruits and birds onto a regenerated slot set.

    Ids that survive stay put; the others move to the first free slots in
    generation order. Whatever does not fit is dropped.
    """
    order = list(slot_ids)
    valid = set(order)
    fruits = economy.active_fruits
    birds = economy.active_birds
    if fruits <= valid and birds <= valid:
        return economy

    kept_fruits = fruits & valid
    kept_birds = birds & valid
    open_ids = [s for s in order if s not in kept_fruits and s not in kept_birds]
    moved = open_ids[: len(fruits) - len(kept_fruits)]
    new_fruits = kept_fruits | set(moved)

    open_ids = [s for s in order if s not in new_fruits and s not in kept_birds]
    moved = open_ids[: len(birds) - len(kept_birds)]
    new_birds = kept_birds | set(moved)

    dropped = (len(fruits) - len(new_fruits)) + (len(birds) - len(new_birds))
    if dropped:
        logger.debug("Dropped %d interactables with no slot left", dropped)
    return economy._replace(
        active_fruits=frozenset(new_fruits),
        active_birds=frozenset(new_birds),
    )


# =============================================================================
# HARVEST
# =============================================================================

def harvest_fruit(
    state: GameState,
    slot_id: str,
    config: GameConfig = DEFAULT_CONFIG,
) -> Outcome:
    """Pick a fruit: +gold and a flat score bonus. No-op if it isn't there."""
    economy = state.economy
    if slot_id not in economy.active_fruits:
        return Outcome(state, f"No fruit at {slot_id}")
    economy = economy._replace(
        active_fruits=economy.active_fruits - {slot_id},
        gold=economy.gold + config.harvest_gold,
    )
    return Outcome(
        state._replace(economy=economy, score=state.score + config.harvest_score_bonus)
    )
