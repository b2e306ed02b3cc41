"""
Tests for score-priced wildcards.
"""

import numpy as np
import pytest

from grove import progression, wildcards
from grove.config import GameState
from grove.growth import GrowthResult, Slot
from grove.wildcards import WildcardEffect, WildcardItem

SLOTS = tuple(Slot(f"tip-r{i}", float(i), 0.0) for i in range(4))


def grow_fixed(tree, biome) -> GrowthResult:
    if tree.level <= 3:
        return GrowthResult()
    return GrowthResult(paths=(), slots=SLOTS, depth=3)


def with_score(score: int) -> GameState:
    return GameState.initial(0.0)._replace(score=score)


def apply(state: GameState, effect: WildcardEffect, now: float = 10.0) -> GameState:
    return wildcards.apply_effect(
        state, effect, now=now, rng=np.random.default_rng(0), grow=grow_fixed
    )


class TestTables:
    def test_catalog(self) -> None:
        assert set(wildcards.WILDCARDS) == {"mystery_seed", "cosmic_egg"}
        assert wildcards.WILDCARDS["mystery_seed"].cost == 100
        assert wildcards.WILDCARDS["cosmic_egg"].tier == 2

    def test_pick_by_cumulative_bound(self) -> None:
        item = wildcards.MYSTERY_SEED
        assert item.pick(0.0).name == "Wilted"
        assert item.pick(0.15).name == "Growth Spurt"
        assert item.pick(0.9).name == "Mega Growth"
        assert item.pick(0.999).name == "Level Up!"

    def test_unordered_table_rejected(self) -> None:
        with pytest.raises(ValueError):
            WildcardItem(
                id="broken",
                name="Broken",
                tier=1,
                cost=1,
                effects=(
                    WildcardEffect("B", "#000000", wildcards.SCORE, 0.9),
                    WildcardEffect("A", "#000000", wildcards.SCORE, 0.5),
                ),
            )

    def test_table_must_end_at_one(self) -> None:
        with pytest.raises(ValueError):
            WildcardItem(
                id="short",
                name="Short",
                tier=1,
                cost=1,
                effects=(WildcardEffect("A", "#000000", wildcards.SCORE, 0.5),),
            )


class TestUseWildcard:
    """Tests for buying and resolving wildcards."""

    def test_insufficient_score_is_noop(self) -> None:
        state = with_score(99)
        outcome = wildcards.use_wildcard(
            state, "mystery_seed", now=0.0, rng=np.random.default_rng(0), grow=grow_fixed
        )
        assert not outcome.accepted
        assert outcome.state is state

    def test_unknown_item(self) -> None:
        state = with_score(1000)
        outcome = wildcards.use_wildcard(
            state, "golden_apple", now=0.0, rng=np.random.default_rng(0), grow=grow_fixed
        )
        assert not outcome.accepted
        assert outcome.state is state

    def test_use_sets_cooldown_and_label(self) -> None:
        rng = np.random.default_rng(0)
        outcome = wildcards.use_wildcard(
            with_score(1000), "mystery_seed", now=50.0, rng=rng, grow=grow_fixed
        )
        assert outcome.accepted
        state = outcome.state
        assert state.score == 900
        ready_at = state.economy.cooldown_for("mystery_seed")
        assert 51.0 <= ready_at < 650.0
        assert state.effect_label is not None
        assert state.effect_label.expires_at == 53.0
        names = {effect.name for effect in wildcards.MYSTERY_SEED.effects}
        assert state.effect_label.text in names

    def test_cooldown_blocks_reuse(self) -> None:
        rng = np.random.default_rng(0)
        first = wildcards.use_wildcard(
            with_score(1000), "mystery_seed", now=0.0, rng=rng, grow=grow_fixed
        ).state
        again = wildcards.use_wildcard(first, "mystery_seed", now=0.5, rng=rng, grow=grow_fixed)
        assert not again.accepted
        assert again.state is first

        ready_at = first.economy.cooldown_for("mystery_seed")
        later = wildcards.use_wildcard(
            first, "mystery_seed", now=ready_at, rng=rng, grow=grow_fixed
        )
        assert later.accepted

    def test_cooldowns_are_per_item(self) -> None:
        rng = np.random.default_rng(0)
        state = wildcards.use_wildcard(
            with_score(2000), "mystery_seed", now=0.0, rng=rng, grow=grow_fixed
        ).state
        assert state.economy.cooldown_for("cosmic_egg") == 0.0

    def test_label_clears_after_three_seconds(self) -> None:
        rng = np.random.default_rng(0)
        state = wildcards.use_wildcard(
            with_score(1000), "mystery_seed", now=0.0, rng=rng, grow=grow_fixed
        ).state
        assert progression.advance_clock(state, 2.9).effect_label is not None
        assert progression.advance_clock(state, 3.0).effect_label is None


class TestEffects:
    """Tests for each outcome kind."""

    def test_buff(self) -> None:
        effect = wildcards.MYSTERY_SEED.pick(0.5)
        state = apply(GameState.initial(0.0), effect)
        assert state.economy.growth_multiplier == 1.5
        assert state.economy.buffs[-1].expires_at == 25.0

    def test_score_penalty_clamps(self) -> None:
        effect = wildcards.COSMIC_EGG.pick(0.2)
        assert apply(with_score(100), effect).score == 0
        assert apply(with_score(1000), effect).score == 750

    def test_level_up_keeps_progress(self) -> None:
        state = GameState.initial(0.0)
        state = state._replace(
            tree=state.tree._replace(level=5, experience=30.0),
            economy=state.economy._replace(growth_multiplier=3.0),
        )
        leveled = apply(state, wildcards.MYSTERY_SEED.pick(0.99))
        assert leveled.tree.level == 6
        assert leveled.tree.experience == 30.0

    def test_instant_maturity(self) -> None:
        state = GameState.initial(0.0)._replace(
            tree=GameState.initial(0.0).tree._replace(level=7, experience=12.0)
        )
        matured = apply(state, wildcards.COSMIC_EGG.pick(0.9))
        assert len(matured.legacy_trees) == 1
        assert matured.tree.level == 1
        assert matured.stage_index == 1

    def test_blight(self) -> None:
        state = GameState.initial(5.0)
        state = state._replace(
            tree=state.tree._replace(level=12, experience=400.0),
            economy=state.economy._replace(
                active_fruits=frozenset({"tip-r0"}), active_birds=frozenset({"tip-r1"})
            ),
        )
        blighted = apply(state, wildcards.COSMIC_EGG.pick(0.05))
        assert blighted.tree.level == 1
        assert blighted.tree.experience == 0.0
        assert blighted.tree.start_time == 5.0
        assert blighted.economy.active_fruits == frozenset()
        assert blighted.economy.active_birds == frozenset()
