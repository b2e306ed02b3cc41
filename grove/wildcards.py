"""
Wildcards: score-priced random events.

Each item has a score cost, its own cooldown and a table of outcomes keyed by
cumulative probability. Using an item:

1. Rejects (no change at all) if the score is short or the cooldown runs
2. Deducts the cost and rolls u ~ U[0, 1)
3. Applies the first outcome whose upper bound exceeds u
4. Starts a new cooldown of U[1 s, 600 s) and shows a 3 s label
"""

from dataclasses import dataclass

import numpy as np

from grove import economy as eco
from grove.config import (
    DEFAULT_CONFIG,
    EffectLabel,
    GameConfig,
    GameState,
    Outcome,
)
from grove.progression import Grower, gain_experience

COOLDOWN_MIN = 1.0
COOLDOWN_MAX = 600.0

# Effect kinds
BUFF = "buff"
SCORE = "score"
LEVEL_UP = "level_up"
MATURITY = "maturity"
BLIGHT = "blight"


@dataclass(frozen=True)
class WildcardEffect:
    """One outcome row; applies when the roll is below ``upper``."""

    name: str
    color: str
    kind: str
    upper: float
    multiplier: float = 1.0
    duration: float = 0.0
    score_delta: int = 0


@dataclass(frozen=True)
class WildcardItem:
    id: str
    name: str
    tier: int
    cost: int
    effects: tuple[WildcardEffect, ...]

    def __post_init__(self) -> None:
        bounds = [effect.upper for effect in self.effects]
        if not bounds or bounds != sorted(bounds) or bounds[-1] != 1.0:
            raise ValueError(f"Effect table for {self.id} must be ordered and end at 1.0")

    def pick(self, roll: float) -> WildcardEffect:
        for effect in self.effects:
            if roll < effect.upper:
                return effect
        return self.effects[-1]


MYSTERY_SEED = WildcardItem(
    id="mystery_seed",
    name="Mystery Seed",
    tier=1,
    cost=100,
    effects=(
        WildcardEffect("Wilted", "#9CA3AF", BUFF, 0.15, multiplier=0.5, duration=10.0),
        WildcardEffect("Growth Spurt", "#4ADE80", BUFF, 0.55, multiplier=1.5, duration=15.0),
        WildcardEffect("Super Growth", "#22C55E", BUFF, 0.80, multiplier=2.0, duration=20.0),
        WildcardEffect("Mega Growth", "#16A34A", BUFF, 0.95, multiplier=3.0, duration=30.0),
        WildcardEffect("Level Up!", "#FACC15", LEVEL_UP, 1.0),
    ),
)

COSMIC_EGG = WildcardItem(
    id="cosmic_egg",
    name="Cosmic Egg",
    tier=2,
    cost=500,
    effects=(
        WildcardEffect("Blight!", "#7F1D1D", BLIGHT, 0.10),
        WildcardEffect("Bad Harvest", "#F97316", SCORE, 0.25, score_delta=-250),
        WildcardEffect("Overgrowth", "#A855F7", BUFF, 0.70, multiplier=5.0, duration=30.0),
        WildcardEffect("Instant Maturity", "#EAB308", MATURITY, 1.0),
    ),
)

WILDCARDS: dict[str, WildcardItem] = {
    item.id: item for item in (MYSTERY_SEED, COSMIC_EGG)
}


def apply_effect(
    state: GameState,
    effect: WildcardEffect,
    *,
    now: float,
    rng: np.random.Generator,
    grow: Grower,
    config: GameConfig = DEFAULT_CONFIG,
) -> GameState:
    """Resolve one outcome against the state."""
    tree = state.tree
    if effect.kind == BUFF:
        economy = eco.apply_buff(
            state.economy, effect.multiplier, effect.duration, effect.name, now
        )
        return state._replace(economy=economy)
    if effect.kind == SCORE:
        return state._replace(score=max(0, state.score + effect.score_delta))
    if effect.kind == LEVEL_UP:
        return gain_experience(
            state,
            config.xp_required(tree.level),
            now=now,
            rng=rng,
            grow=grow,
            config=config,
            exact=True,
        )
    if effect.kind == MATURITY:
        missing = config.xp_to_reach(tree.level, config.maturity_level) - tree.experience
        return gain_experience(
            state, missing, now=now, rng=rng, grow=grow, config=config, exact=True
        )
    if effect.kind == BLIGHT:
        economy = state.economy._replace(
            active_fruits=frozenset(), active_birds=frozenset()
        )
        return state._replace(
            tree=tree._replace(level=1, experience=0.0), economy=economy
        )
    raise ValueError(f"Unknown wildcard effect kind: {effect.kind}")


def _with_cooldown(cooldowns: tuple, item_id: str, ready_at: float) -> tuple:
    others = tuple((key, value) for key, value in cooldowns if key != item_id)
    return others + ((item_id, ready_at),)


def use_wildcard(
    state: GameState,
    item_id: str,
    *,
    now: float,
    rng: np.random.Generator,
    grow: Grower,
    config: GameConfig = DEFAULT_CONFIG,
) -> Outcome:
    """Buy and resolve a wildcard; see module docstring."""
    item = WILDCARDS.get(item_id)
    if item is None:
        return Outcome(state, f"Unknown wildcard: {item_id}")
    if state.game_over:
        return Outcome(state, "The garden is full")
    if item.cost > state.score:
        return Outcome(state, f"{item.name} costs {item.cost} score")
    ready_at = state.economy.cooldown_for(item_id)
    if now < ready_at:
        return Outcome(state, f"{item.name} is recharging")

    state = state._replace(score=state.score - item.cost)
    effect = item.pick(float(rng.random()))
    state = apply_effect(state, effect, now=now, rng=rng, grow=grow, config=config)

    cooldown = now + float(rng.uniform(COOLDOWN_MIN, COOLDOWN_MAX))
    economy = state.economy._replace(
        wildcard_cooldowns=_with_cooldown(
            state.economy.wildcard_cooldowns, item_id, cooldown
        )
    )
    label = EffectLabel(
        text=effect.name,
        color=effect.color,
        expires_at=now + config.effect_label_duration,
    )
    return Outcome(state._replace(economy=economy, effect_label=label))
