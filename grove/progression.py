"""
Tree progression - the core state machine.

Every function takes a GameState and returns a new one. The sequence for an
experience grant is:

1. Ignore the grant once the garden is full (game over)
2. Scale by the running growth multiplier
3. Resolve every level-up the grant pays for, rolling fruit spawns for each
   level reached from 4 upwards
4. Bake the tree into the garden once it reaches maturity and plant the next
   one, or end the session when no spot is left

Generation is injected as a ``grow(tree, biome)`` callable so the controller
can cache one render per level and tests can substitute a fixed skeleton.
"""

import logging
import math
from collections.abc import Callable

import numpy as np

from grove import economy as eco
from grove.biomes import Biome, get_biome
from grove.config import (
    DEFAULT_CONFIG,
    ActiveTreeState,
    GameConfig,
    GameState,
    Outcome,
    TreeEntity,
)
from grove.growth import GrowthResult
from grove.placement import find_spawn_position

logger = logging.getLogger(__name__)

# Produces the drawable tree for an active tree in a biome
Grower = Callable[[ActiveTreeState, Biome], GrowthResult]


def current_biome(state: GameState) -> Biome:
    return get_biome(state.stage_index)


def stage_label(level: int) -> str:
    """Human readable growth stage."""
    if level <= 3:
        return f"Seed Stage {level}"
    if level <= 8:
        return f"Sprout Stage {level - 3}"
    if level <= 16:
        return f"Sapling Stage {level - 8}"
    return f"Tree (Growth {(level - 17) // 5 + 1})"


def tree_score(
    tree: ActiveTreeState,
    now: float,
    config: GameConfig = DEFAULT_CONFIG,
) -> int:
    """
    Score for completing a tree.

    time_bonus = max(floor, start - decay * elapsed_seconds)
    score = floor(time_bonus + level * level_score)
    """
    elapsed = max(0.0, now - tree.start_time)
    time_bonus = max(
        config.time_bonus_floor,
        config.time_bonus_start - config.time_bonus_decay * elapsed,
    )
    return int(math.floor(time_bonus + tree.level * config.level_score))


def gain_experience(
    state: GameState,
    amount: float,
    *,
    now: float,
    rng: np.random.Generator,
    grow: Grower,
    config: GameConfig = DEFAULT_CONFIG,
    exact: bool = False,
) -> GameState:
    """
    Add experience and resolve every resulting level-up.

    Args:
        state: Current game state
        amount: Base experience granted
        now: Current time (seconds)
        rng: Random source for fruit rolls and placement
        grow: Tree generator used to find the slots at each new level
        config: Game configuration
        exact: Skip the growth multiplier (grants sized to hit a level)

    Returns:
        New game state; unchanged when the game is over or the amount is
        not a positive finite number. Levels stop at maturity, where any
        leftover experience is discarded by the bake.
    """
    if state.game_over or not math.isfinite(amount) or amount <= 0:
        return state

    multiplier = 1.0 if exact else state.economy.growth_multiplier
    tree = state.tree
    level = tree.level
    experience = tree.experience + amount * multiplier
    if not math.isfinite(experience):
        return state
    economy = state.economy
    growing_until = state.growing_until
    biome = current_biome(state)

    while level < config.maturity_level and experience >= config.xp_required(level):
        experience -= config.xp_required(level)
        level += 1
        growing_until = now + config.growing_animation
        if level >= config.maturity_level:
            break  # baked below

        growth = grow(tree._replace(level=level, experience=experience), biome)
        economy = eco.migrate_interactables(economy, growth.slot_ids)
        if level >= config.fruit_min_level:
            for _ in range(eco.level_up_spawn_count(level, rng, config)):
                economy = eco.try_spawn_fruit(
                    economy, growth.slots, level, rng, chance=1.0, config=config
                )

    if level != tree.level:
        logger.debug("Tree leveled %d -> %d", tree.level, level)

    state = state._replace(
        tree=tree._replace(level=level, experience=experience),
        economy=economy,
        growing_until=growing_until,
    )
    if level >= config.maturity_level:
        state = complete_tree(state, now=now, rng=rng, grow=grow, config=config)
    return state


def complete_tree(
    state: GameState,
    *,
    now: float,
    rng: np.random.Generator,
    grow: Grower,
    config: GameConfig = DEFAULT_CONFIG,
) -> GameState:
    """
    Bake the active tree into the garden and plant the next one.

    The frozen tree keeps its paths but no slots. If no spawn position is
    left the session ends (game over) until restart.
    """
    if state.game_over:
        return state

    tree = state.tree
    biome = current_biome(state)
    score = tree_score(tree, now, config)
    growth = grow(tree, biome)

    entity = TreeEntity(
        id=f"tree-{len(state.legacy_trees) + 1}",
        biome_id=biome.id,
        x=tree.x,
        y=tree.y,
        scale=tree.scale,
        paths=growth.paths,
        slots=(),
        score=score,
    )
    legacy = state.legacy_trees + (entity,)
    economy = state.economy._replace(
        active_fruits=frozenset(),
        active_birds=frozenset(),
    )
    state = state._replace(
        score=state.score + score,
        legacy_trees=legacy,
        stage_index=state.stage_index + 1,
        economy=economy,
    )
    logger.info(
        "Tree %s completed in %s for %d points", entity.id, biome.name, score
    )

    position = find_spawn_position(legacy, rng=rng)
    if position is None:
        logger.info("No room left for a new tree after %d trees", len(legacy))
        return state._replace(game_over=True)

    x, y = position
    scale = float(rng.uniform(config.min_tree_scale, config.max_tree_scale))
    return state._replace(tree=ActiveTreeState.initial(now, x=x, y=y, scale=scale))


def restart(now: float) -> GameState:
    """Fresh session: one seed at the home position, empty garden."""
    return GameState.initial(now)


# =============================================================================
# TIMERS
# =============================================================================

def advance_clock(
    state: GameState,
    now: float,
    config: GameConfig = DEFAULT_CONFIG,
) -> GameState:
    """Expire buffs, the effect label and the growing flag."""
    economy = eco.expire_buffs(state.economy, now, config)
    label = state.effect_label
    if label is not None and label.expires_at <= now:
        label = None
    growing_until = state.growing_until if state.growing_until > now else 0.0
    if (
        economy is state.economy
        and label is state.effect_label
        and growing_until == state.growing_until
    ):
        return state
    return state._replace(
        economy=economy, effect_label=label, growing_until=growing_until
    )


def tick(
    state: GameState,
    *,
    now: float,
    rng: np.random.Generator,
    grow: Grower,
    config: GameConfig = DEFAULT_CONFIG,
) -> GameState:
    """Once-per-second pump: timers, then passive fertilizer experience."""
    state = advance_clock(state, now, config)
    level = state.economy.fertilizer_level
    if level > 0:
        state = gain_experience(
            state,
            level * config.fertilizer_xp_per_level,
            now=now,
            rng=rng,
            grow=grow,
            config=config,
        )
    return state


# =============================================================================
# PLAYER ACTIONS
# =============================================================================

def roll_critical(rng: np.random.Generator, config: GameConfig = DEFAULT_CONFIG) -> bool:
    return bool(rng.random() < config.crit_chance)


def _grant_action_xp(
    state: GameState,
    base_xp: float,
    *,
    now: float,
    rng: np.random.Generator,
    grow: Grower,
    config: GameConfig,
) -> GameState:
    """Shared crit roll: x5 experience plus a score bonus."""
    if roll_critical(rng, config):
        state = state._replace(score=state.score + config.crit_score_bonus)
        base_xp *= config.crit_multiplier
    return gain_experience(state, base_xp, now=now, rng=rng, grow=grow, config=config)


def water_plant(
    state: GameState,
    *,
    now: float,
    rng: np.random.Generator,
    grow: Grower,
    config: GameConfig = DEFAULT_CONFIG,
) -> Outcome:
    if state.game_over:
        return Outcome(state, "The garden is full")
    return Outcome(
        _grant_action_xp(
            state, config.water_xp, now=now, rng=rng, grow=grow, config=config
        )
    )


def till_cooldown_remaining(
    state: GameState,
    now: float,
    config: GameConfig = DEFAULT_CONFIG,
) -> float:
    """Seconds until the soil can be tilled again (0 when ready)."""
    if state.last_till_time is None:
        return 0.0
    return max(0.0, config.till_cooldown - (now - state.last_till_time))


def till_soil(
    state: GameState,
    *,
    now: float,
    rng: np.random.Generator,
    grow: Grower,
    config: GameConfig = DEFAULT_CONFIG,
) -> Outcome:
    """Experience with crit chance, a cooldown, and a short growth buff."""
    if state.game_over:
        return Outcome(state, "The garden is full")
    remaining = till_cooldown_remaining(state, now, config)
    if remaining > 0:
        return Outcome(state, f"Soil is still settling ({math.ceil(remaining)}s)")

    state = state._replace(last_till_time=now)
    state = _grant_action_xp(
        state, config.till_xp, now=now, rng=rng, grow=grow, config=config
    )
    economy = eco.apply_buff(
        state.economy,
        config.till_buff_multiplier,
        config.till_buff_duration,
        "Tilled soil",
        now,
    )
    return Outcome(state._replace(economy=economy))
