"""
Tests for buffs, fruit and bird slots, and harvesting.
"""

import numpy as np
import pytest

from grove import economy
from grove.config import EconomyState, GameConfig, GameState
from grove.growth import Slot

SLOTS = tuple(Slot(f"tip-r{i}", float(i), 0.0) for i in range(6))


def with_fruits(*slot_ids: str) -> GameState:
    state = GameState.initial(0.0)
    return state._replace(
        economy=state.economy._replace(active_fruits=frozenset(slot_ids))
    )


class TestHarvest:
    """Tests for picking fruit."""

    def test_harvest_pays_gold_and_score(self) -> None:
        state = with_fruits("tip-r0", "tip-r1")
        outcome = economy.harvest_fruit(state, "tip-r0")
        assert outcome.accepted
        assert outcome.state.economy.gold == 1
        assert outcome.state.score == 10
        assert outcome.state.economy.active_fruits == frozenset({"tip-r1"})

    def test_missing_fruit_is_noop(self) -> None:
        state = with_fruits("tip-r0")
        outcome = economy.harvest_fruit(state, "tip-r5")
        assert not outcome.accepted
        assert outcome.state is state

    def test_double_harvest(self) -> None:
        """The second pick of the same slot changes nothing."""
        state = with_fruits("tip-r0")
        once = economy.harvest_fruit(state, "tip-r0").state
        twice = economy.harvest_fruit(once, "tip-r0")
        assert not twice.accepted
        assert twice.state is once


class TestBuffs:
    """Tests for timed growth multipliers."""

    def test_newest_buff_sets_multiplier(self) -> None:
        eco = economy.apply_buff(EconomyState.initial(), 2.0, 5.0, "Tilled soil", 0.0)
        assert eco.growth_multiplier == 2.0
        eco = economy.apply_buff(eco, 3.0, 30.0, "Mega Growth", 1.0)
        assert eco.growth_multiplier == 3.0
        assert len(eco.buffs) == 2

    def test_expiry_falls_back_to_running_buff(self) -> None:
        eco = economy.apply_buff(EconomyState.initial(), 3.0, 30.0, "Mega Growth", 0.0)
        eco = economy.apply_buff(eco, 2.0, 5.0, "Tilled soil", 1.0)
        expired = economy.expire_buffs(eco, 7.0)
        assert expired.growth_multiplier == 3.0
        assert [b.label for b in expired.buffs] == ["Mega Growth"]

    def test_legacy_expiry_resets_multiplier(self) -> None:
        config = GameConfig(buff_expiry_resets_multiplier=True)
        eco = economy.apply_buff(EconomyState.initial(), 3.0, 30.0, "Mega Growth", 0.0)
        eco = economy.apply_buff(eco, 2.0, 5.0, "Tilled soil", 1.0)
        expired = economy.expire_buffs(eco, 7.0, config)
        assert expired.growth_multiplier == 1.0
        assert len(expired.buffs) == 1

    @pytest.mark.parametrize("legacy", [False, True])
    def test_all_expired_resets(self, legacy: bool) -> None:
        config = GameConfig(buff_expiry_resets_multiplier=legacy)
        eco = economy.apply_buff(EconomyState.initial(), 3.0, 30.0, "Mega Growth", 0.0)
        eco = economy.apply_buff(eco, 2.0, 5.0, "Tilled soil", 1.0)
        expired = economy.expire_buffs(eco, 40.0, config)
        assert expired.growth_multiplier == 1.0
        assert expired.buffs == ()

    def test_nothing_expired_returns_same(self) -> None:
        eco = economy.apply_buff(EconomyState.initial(), 2.0, 5.0, "Tilled soil", 0.0)
        assert economy.expire_buffs(eco, 1.0) is eco


class TestFruitSpawning:
    """Tests for fruit caps and slot selection."""

    def test_cap_grows_with_level(self) -> None:
        assert economy.fruit_cap(1) == 6
        assert economy.fruit_cap(10) == 15

    def test_spawn_lands_on_free_slot(self) -> None:
        rng = np.random.default_rng(0)
        eco = EconomyState.initial()._replace(active_fruits=frozenset({"tip-r0"}))
        spawned = economy.try_spawn_fruit(eco, SLOTS, 5, rng, chance=1.0)
        assert len(spawned.active_fruits) == 2
        assert "tip-r0" in spawned.active_fruits

    def test_spawn_respects_cap(self) -> None:
        config = GameConfig(fruit_cap_base=0)
        eco = EconomyState.initial()._replace(
            active_fruits=frozenset({"tip-r0", "tip-r1"})
        )
        rng = np.random.default_rng(0)
        assert economy.try_spawn_fruit(eco, SLOTS, 2, rng, 1.0, config) is eco

    def test_spawn_skips_birds(self) -> None:
        rng = np.random.default_rng(0)
        birds = frozenset(slot.id for slot in SLOTS[:-1])
        eco = EconomyState.initial()._replace(active_birds=birds)
        spawned = economy.try_spawn_fruit(eco, SLOTS, 10, rng, chance=1.0)
        assert spawned.active_fruits == frozenset({SLOTS[-1].id})

    def test_no_slots_no_fruit(self) -> None:
        eco = EconomyState.initial()
        rng = np.random.default_rng(0)
        assert economy.try_spawn_fruit(eco, (), 10, rng, chance=1.0) is eco

    def test_zero_chance_never_spawns(self) -> None:
        eco = EconomyState.initial()
        rng = np.random.default_rng(0)
        for _ in range(50):
            assert economy.try_spawn_fruit(eco, SLOTS, 10, rng, chance=0.0) is eco

    def test_level_up_spawn_counts(self) -> None:
        rng = np.random.default_rng(0)
        low = {economy.level_up_spawn_count(4, rng) for _ in range(200)}
        high = {economy.level_up_spawn_count(15, rng) for _ in range(200)}
        assert low <= {0, 1}
        assert high == {1, 2}


class TestBirds:
    def test_bird_on_free_slot(self) -> None:
        rng = np.random.default_rng(0)
        eco = EconomyState.initial()._replace(
            active_fruits=frozenset(slot.id for slot in SLOTS[1:])
        )
        perched = economy.spawn_bird(eco, SLOTS, rng)
        assert perched.active_birds == frozenset({SLOTS[0].id})

    def test_no_free_slot(self) -> None:
        rng = np.random.default_rng(0)
        eco = EconomyState.initial()._replace(
            active_fruits=frozenset(slot.id for slot in SLOTS)
        )
        assert economy.spawn_bird(eco, SLOTS, rng) is eco


class TestMigration:
    """Tests for moving interactables onto a regenerated slot set."""

    def test_surviving_ids_stay(self) -> None:
        eco = EconomyState.initial()._replace(
            active_fruits=frozenset({"a"}), active_birds=frozenset({"b"})
        )
        assert economy.migrate_interactables(eco, ["a", "b", "c"]) is eco

    def test_orphans_move_to_first_free_slots(self) -> None:
        eco = EconomyState.initial()._replace(
            active_fruits=frozenset({"a", "b"}), active_birds=frozenset({"c"})
        )
        moved = economy.migrate_interactables(eco, ["a", "x", "y", "z"])
        assert moved.active_fruits == frozenset({"a", "x"})
        assert moved.active_birds == frozenset({"y"})

    def test_overflow_is_dropped(self) -> None:
        eco = EconomyState.initial()._replace(
            active_fruits=frozenset({"a", "b"}), active_birds=frozenset({"c"})
        )
        moved = economy.migrate_interactables(eco, ["a"])
        assert moved.active_fruits == frozenset({"a"})
        assert moved.active_birds == frozenset()

    def test_never_shares_a_slot(self) -> None:
        eco = EconomyState.initial()._replace(
            active_fruits=frozenset({"f1", "f2"}), active_birds=frozenset({"s1"})
        )
        moved = economy.migrate_interactables(eco, ["s1", "n1", "n2", "n3"])
        assert moved.active_birds == frozenset({"s1"})
        assert moved.active_fruits == frozenset({"n1", "n2"})
        assert not moved.active_fruits & moved.active_birds
