"""
Grove - Autoplay Demo

Plays one garden session on a simulated clock:
1. Waters every second and tills whenever the soil is ready
2. Harvests every fruit and spends gold in the shop
3. Rolls wildcards when the score allows
4. Stops when the garden is full (or after a time limit)

Prints a summary per completed tree and saves the final garden to a PNG.
"""

import argparse
import logging

import numpy as np

from grove import GardenGame, save_garden
from grove.shop import auto_fertilizer_cost
from grove.wildcards import WILDCARDS


class SimulatedClock:
    """Manually advanced clock so the demo runs instantly."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def play_second(game: GardenGame, clock: SimulatedClock) -> None:
    """One second of greedy play."""
    game.water_plant()
    game.till_soil()
    for slot_id in sorted(game.state.economy.active_fruits):
        game.harvest_fruit(slot_id)

    economy = game.state.economy
    if economy.gold >= auto_fertilizer_cost(economy.fertilizer_level, game.config):
        game.buy_auto_fertilizer()
    elif economy.gold >= game.config.instant_fertilizer_cost:
        game.buy_instant_fertilizer()

    for item in WILDCARDS.values():
        if game.state.score >= item.cost + 1000:
            game.use_wildcard(item.id)

    clock.advance(1.0)
    game.tick()


def main() -> None:
    parser = argparse.ArgumentParser(description="Grove autoplay demo")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--max-seconds", type=int, default=20000)
    parser.add_argument("--output", default="garden.png")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    clock = SimulatedClock()
    game = GardenGame(rng=np.random.default_rng(args.seed), clock=clock)

    completed = []

    def on_event(event: str, state) -> None:
        if event == "tree_completed":
            completed.append((clock.now, state.legacy_trees[-1]))

    game.subscribe(on_event)

    print(f"Starting garden (seed {args.seed})...")
    while not game.state.game_over and clock.now < args.max_seconds:
        play_second(game, clock)

    print()
    print(f"{'Tree':<10} {'Biome':<10} {'Time (s)':>10} {'Score':>8} {'Position':>16}")
    print("-" * 58)
    for finished_at, tree in completed:
        position = f"({tree.x:.0f}, {tree.y:.0f})"
        print(
            f"{tree.id:<10} {tree.biome_id:<10} {finished_at:>10.0f} "
            f"{tree.score:>8d} {position:>16}"
        )
    print("-" * 58)
    state = game.state
    print(f"Final score: {state.score}  Gold: {state.economy.gold}  "
          f"Fertilizer: {state.economy.fertilizer_level}")
    print(f"Garden full: {state.game_over}")

    save_garden(args.output, game.snapshot())


if __name__ == "__main__":
    main()
