"""
Configuration and state definitions for the garden simulation.

This module defines every tunable constant and the immutable state records
that the progression functions consume and return.

State Layout:
    ActiveTreeState: the single tree currently growing
    TreeEntity: a matured tree baked into the garden (append-only)
    Buff: a timed override of the global growth multiplier
    EffectLabel: transient UI text shown after a wildcard resolves
    EconomyState: gold, fertilizer, interactables, cooldowns, buffs
    GameState: the aggregate owned by the controller

All records are NamedTuples; updates go through ``_replace`` so every
transition produces a new value and the old one stays valid.
"""

from dataclasses import dataclass
from typing import NamedTuple

# Canonical first-tree placement (bottom-center of the footprint)
HOME_X = 200.0
HOME_Y = 350.0


class ActiveTreeState(NamedTuple):
    """
    The tree currently growing.

    experience stays below ``level * xp_per_level`` once a gain settles.
    """

    level: int
    experience: float
    start_time: float
    x: float
    y: float
    scale: float

    @classmethod
    def initial(
        cls,
        now: float,
        x: float = HOME_X,
        y: float = HOME_Y,
        scale: float = 1.0,
    ) -> "ActiveTreeState":
        """Create a freshly planted seed at the given origin."""
        return cls(level=1, experience=0.0, start_time=now, x=x, y=y, scale=scale)


class TreeEntity(NamedTuple):
    """A matured tree frozen into the garden history."""

    id: str
    biome_id: str
    x: float
    y: float
    scale: float
    paths: tuple  # tuple[Path | Circle, ...] frozen at completion
    slots: tuple  # always empty: interactables are not kept after baking
    score: int


class Buff(NamedTuple):
    """Timed growth multiplier override."""

    multiplier: float
    expires_at: float
    label: str


class EffectLabel(NamedTuple):
    """Transient label describing the last wildcard outcome."""

    text: str
    color: str
    expires_at: float


class EconomyState(NamedTuple):
    """
    Gold, shop upgrades and everything living on the current tree's slots.

    active_fruits and active_birds hold slot ids of the current tree only.
    """

    gold: int
    fertilizer_level: int
    active_fruits: frozenset
    active_birds: frozenset
    wildcard_cooldowns: tuple  # ((item_id, ready_at), ...)
    growth_multiplier: float
    buffs: tuple  # tuple[Buff, ...] in application order

    @classmethod
    def initial(cls) -> "EconomyState":
        return cls(
            gold=0,
            fertilizer_level=0,
            active_fruits=frozenset(),
            active_birds=frozenset(),
            wildcard_cooldowns=(),
            growth_multiplier=1.0,
            buffs=(),
        )

    def cooldown_for(self, item_id: str) -> float:
        """Earliest time the wildcard may be used again (0 if never used)."""
        for key, ready_at in self.wildcard_cooldowns:
            if key == item_id:
                return ready_at
        return 0.0


class GameState(NamedTuple):
    """Complete state of one garden session."""

    tree: ActiveTreeState
    economy: EconomyState
    score: int
    stage_index: int
    legacy_trees: tuple  # tuple[TreeEntity, ...]
    game_over: bool
    last_till_time: float | None
    effect_label: EffectLabel | None
    growing_until: float

    @classmethod
    def initial(cls, now: float) -> "GameState":
        """Canonical starting state: one seed at the home position."""
        return cls(
            tree=ActiveTreeState.initial(now),
            economy=EconomyState.initial(),
            score=0,
            stage_index=0,
            legacy_trees=(),
            game_over=False,
            last_till_time=None,
            effect_label=None,
            growing_until=0.0,
        )


class Outcome(NamedTuple):
    """Result of a player action: the new state, or the old one plus a reason."""

    state: GameState
    rejection: str | None = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


@dataclass(frozen=True)
class GameConfig:
    """
    Complete gameplay configuration.

    Defaults reproduce the reference pacing: a tree matures at level 20 after
    roughly 19k experience, and fertilizer and wildcards shorten that.
    """

    # Leveling
    xp_per_level: float = 100.0  # requirement = level * xp_per_level
    maturity_level: int = 20
    fruit_min_level: int = 4  # level-ups below this never spawn fruit

    # Player actions
    water_xp: float = 20.0
    till_xp: float = 80.0
    till_cooldown: float = 60.0  # seconds between successful tills
    till_buff_multiplier: float = 2.0
    till_buff_duration: float = 5.0
    crit_chance: float = 0.2
    crit_multiplier: float = 5.0
    crit_score_bonus: int = 50

    # Fruit spawning
    # Level-up spawns: chance = base + level * per_level; the integer part is
    # guaranteed and the fraction is rolled.
    fruit_spawn_base: float = 0.6
    fruit_spawn_per_level: float = 0.04
    fruit_cap_base: int = 5  # cap = fruit_cap_base + level
    harvest_gold: int = 1
    harvest_score_bonus: int = 10

    # Shop
    bird_cost: int = 2
    instant_fertilizer_cost: int = 3
    instant_fertilizer_xp: float = 500.0
    instant_fertilizer_fruit_chance: float = 0.15
    auto_fertilizer_base_cost: int = 10  # cost = base * (level + 1)
    fertilizer_xp_per_level: float = 5.0  # passive XP per tick per level

    # Maturity scoring
    time_bonus_start: float = 5000.0
    time_bonus_decay: float = 10.0  # points lost per elapsed second
    time_bonus_floor: float = 1000.0
    level_score: float = 50.0

    # New tree scale range [min, max)
    min_tree_scale: float = 0.7
    max_tree_scale: float = 1.3

    # Timed UI side channels
    effect_label_duration: float = 3.0
    growing_animation: float = 0.5

    # Source behaviour: any buff expiry resets the multiplier to 1, even while
    # a later buff is still running.
    buff_expiry_resets_multiplier: bool = False

    def __post_init__(self) -> None:
        if self.xp_per_level <= 0:
            raise ValueError("xp_per_level must be positive")
        if self.maturity_level < 2:
            raise ValueError("maturity_level must be at least 2")
        for name in ("crit_chance", "instant_fertilizer_fruit_chance"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1]")
        if self.min_tree_scale <= 0 or self.max_tree_scale < self.min_tree_scale:
            raise ValueError("Tree scale range must be positive and ordered")
        if self.till_cooldown < 0:
            raise ValueError("till_cooldown must be nonnegative")

    def xp_required(self, level: int) -> float:
        """Experience needed to advance from ``level`` to ``level + 1``."""
        return level * self.xp_per_level

    def xp_to_reach(self, from_level: int, to_level: int) -> float:
        """Total experience consumed walking from one level to another."""
        return sum(self.xp_required(lvl) for lvl in range(from_level, to_level))


DEFAULT_CONFIG = GameConfig()
