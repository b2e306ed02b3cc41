"""
Garden controller.

GardenGame owns the single GameState of a session and is the only place that
replaces it. Player actions and the once-per-second tick go through the pure
functions in progression/shop/wildcards; the controller supplies the clock,
the random source and a cached tree generator, then notifies subscribers.

Each active tree is generated once per (level, placement, biome) so slot ids
stay stable between a level-up and the frames that draw it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import numpy as np

from grove import progression, shop, wildcards
from grove.biomes import Biome
from grove.config import DEFAULT_CONFIG, ActiveTreeState, GameConfig, GameState, Outcome
from grove.economy import harvest_fruit
from grove.growth import GrowthResult, generate
from grove.snapshot import GardenSnapshot, build_snapshot

logger = logging.getLogger(__name__)

# listener(event, state)
Listener = Callable[[str, GameState], None]

CHANGED = "changed"
LEVEL_UP = "level_up"
TREE_COMPLETED = "tree_completed"
GAME_OVER = "game_over"
REJECTED = "rejected"


class GardenGame:
    """
    One garden session.

    Args:
        config: Gameplay configuration
        rng: Random source for every roll (fresh default generator if omitted)
        clock: Returns the current time in seconds
    """

    def __init__(
        self,
        config: GameConfig = DEFAULT_CONFIG,
        rng: np.random.Generator | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self._rng = rng if rng is not None else np.random.default_rng()
        self._clock = clock
        self._listeners: list[Listener] = []
        self._growth_cache: dict[tuple, GrowthResult] = {}
        self.last_rejection: str | None = None
        self._state = progression.restart(self._clock())

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def biome(self) -> Biome:
        return progression.current_biome(self._state)

    @property
    def growth(self) -> GrowthResult:
        """
        Drawing and slots of the active tree.

        Empty once the garden is full: the last tree is already baked into
        the legacy list and no tree is growing.
        """
        if self._state.game_over:
            return GrowthResult()
        return self._grow(self._state.tree, self.biome)

    def snapshot(self, now: float | None = None) -> GardenSnapshot:
        now = self._clock() if now is None else now
        return build_snapshot(self._state, self.growth, now, self.config)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event, self._state)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _grow(self, tree: ActiveTreeState, biome: Biome) -> GrowthResult:
        key = (tree.level, tree.x, tree.y, tree.scale, biome.id)
        growth = self._growth_cache.get(key)
        if growth is None:
            growth = generate(
                tree.level,
                biome.modifiers,
                tree.x,
                tree.y,
                tree.scale,
                palette=biome.palette,
                rng=self._rng,
            )
            self._growth_cache[key] = growth
        return growth

    def _prune_cache(self) -> None:
        tree = self._state.tree
        key = (tree.level, tree.x, tree.y, tree.scale, self.biome.id)
        self._growth_cache = {
            k: v for k, v in self._growth_cache.items() if k == key
        }

    def _commit(self, new_state: GameState) -> None:
        old = self._state
        if new_state is old:
            return
        self._state = new_state
        self._prune_cache()

        events = []
        if len(new_state.legacy_trees) > len(old.legacy_trees):
            events.append(TREE_COMPLETED)
        elif new_state.tree.level > old.tree.level:
            events.append(LEVEL_UP)
        if new_state.game_over and not old.game_over:
            events.append(GAME_OVER)
            logger.info("Garden full with %d trees, final score %d",
                        len(new_state.legacy_trees), new_state.score)
        events.append(CHANGED)
        for event in events:
            self._notify(event)

    def _settle(self, now: float) -> None:
        """Apply timer expiries before acting at ``now``."""
        self._commit(progression.advance_clock(self._state, now, self.config))

    def _resolve(self, outcome: Outcome, action: str) -> bool:
        if outcome.accepted:
            self.last_rejection = None
            self._commit(outcome.state)
            return True
        self.last_rejection = outcome.rejection
        logger.info("%s rejected: %s", action, outcome.rejection)
        self._notify(REJECTED)
        return False

    def _context(self) -> dict:
        return {"rng": self._rng, "grow": self._grow, "config": self.config}

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def water_plant(self) -> bool:
        now = self._clock()
        self._settle(now)
        outcome = progression.water_plant(self._state, now=now, **self._context())
        return self._resolve(outcome, "water_plant")

    def till_soil(self) -> bool:
        now = self._clock()
        self._settle(now)
        outcome = progression.till_soil(self._state, now=now, **self._context())
        return self._resolve(outcome, "till_soil")

    def harvest_fruit(self, slot_id: str) -> bool:
        self._settle(self._clock())
        outcome = harvest_fruit(self._state, slot_id, self.config)
        return self._resolve(outcome, "harvest_fruit")

    def use_wildcard(self, item_id: str) -> bool:
        now = self._clock()
        self._settle(now)
        outcome = wildcards.use_wildcard(
            self._state, item_id, now=now, **self._context()
        )
        return self._resolve(outcome, "use_wildcard")

    def buy_bird(self) -> bool:
        self._settle(self._clock())
        outcome = shop.buy_bird(self._state, rng=self._rng, grow=self._grow, config=self.config)
        return self._resolve(outcome, "buy_bird")

    def buy_instant_fertilizer(self) -> bool:
        now = self._clock()
        self._settle(now)
        outcome = shop.buy_instant_fertilizer(self._state, now=now, **self._context())
        return self._resolve(outcome, "buy_instant_fertilizer")

    def buy_auto_fertilizer(self) -> bool:
        self._settle(self._clock())
        outcome = shop.buy_auto_fertilizer(self._state, self.config)
        return self._resolve(outcome, "buy_auto_fertilizer")

    def gain_experience(self, amount: float) -> None:
        """Grant experience directly (scaled by the growth multiplier)."""
        now = self._clock()
        self._settle(now)
        self._commit(
            progression.gain_experience(self._state, amount, now=now, **self._context())
        )

    def complete_tree(self) -> None:
        """Bake the active tree now, whatever its level."""
        now = self._clock()
        self._settle(now)
        self._commit(
            progression.complete_tree(self._state, now=now, **self._context())
        )

    def restart(self) -> None:
        self._growth_cache.clear()
        self.last_rejection = None
        self._commit(progression.restart(self._clock()))
        logger.info("Garden restarted")

    def tick(self, now: float | None = None) -> None:
        """Once-per-second pump for timers and passive fertilizer."""
        now = self._clock() if now is None else now
        self._commit(progression.tick(self._state, now=now, **self._context()))
