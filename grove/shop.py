"""
Gold-priced shop purchases.

    bird:               2 gold, perches a bird on a free slot
    instant fertilizer: 3 gold, 500 experience, 15% chance of a bonus fruit
    auto fertilizer:    10 * (level + 1) gold, +1 level of passive experience

Purchases the player cannot afford leave the state untouched.
"""

import numpy as np

from grove import economy as eco
from grove.config import DEFAULT_CONFIG, GameConfig, GameState, Outcome
from grove.progression import Grower, current_biome, gain_experience


def auto_fertilizer_cost(level: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Price of the next auto-fertilizer level."""
    return config.auto_fertilizer_base_cost * (level + 1)


def _spend(state: GameState, cost: int) -> GameState:
    return state._replace(economy=state.economy._replace(gold=state.economy.gold - cost))


def buy_bird(
    state: GameState,
    *,
    rng: np.random.Generator,
    grow: Grower,
    config: GameConfig = DEFAULT_CONFIG,
) -> Outcome:
    if state.game_over:
        return Outcome(state, "The garden is full")
    if state.economy.gold < config.bird_cost:
        return Outcome(state, f"A bird costs {config.bird_cost} gold")
    growth = grow(state.tree, current_biome(state))
    if not eco.free_slots(state.economy, growth.slots):
        return Outcome(state, "No free branch for a bird")
    state = _spend(state, config.bird_cost)
    economy = eco.spawn_bird(state.economy, growth.slots, rng)
    return Outcome(state._replace(economy=economy))


def buy_instant_fertilizer(
    state: GameState,
    *,
    now: float,
    rng: np.random.Generator,
    grow: Grower,
    config: GameConfig = DEFAULT_CONFIG,
) -> Outcome:
    if state.game_over:
        return Outcome(state, "The garden is full")
    cost = config.instant_fertilizer_cost
    if state.economy.gold < cost:
        return Outcome(state, f"Instant fertilizer costs {cost} gold")

    state = _spend(state, cost)
    state = gain_experience(
        state,
        config.instant_fertilizer_xp,
        now=now,
        rng=rng,
        grow=grow,
        config=config,
    )
    if state.game_over:
        return Outcome(state)

    # Bonus reward: a shot at an extra fruit
    growth = grow(state.tree, current_biome(state))
    economy = eco.try_spawn_fruit(
        state.economy,
        growth.slots,
        state.tree.level,
        rng,
        chance=config.instant_fertilizer_fruit_chance,
        config=config,
    )
    return Outcome(state._replace(economy=economy))


def buy_auto_fertilizer(
    state: GameState,
    config: GameConfig = DEFAULT_CONFIG,
) -> Outcome:
    if state.game_over:
        return Outcome(state, "The garden is full")
    level = state.economy.fertilizer_level
    cost = auto_fertilizer_cost(level, config)
    if state.economy.gold < cost:
        return Outcome(state, f"Auto fertilizer level {level + 1} costs {cost} gold")
    state = _spend(state, cost)
    economy = state.economy._replace(fertilizer_level=level + 1)
    return Outcome(state._replace(economy=economy))
