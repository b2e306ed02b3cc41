"""
Grove Simulation Module

An incremental tree-growing game: timed actions grant experience, experience
drives levels, and levels drive a procedurally generated plant. Mature trees
are baked into a garden until no room is left.

Modules:
    config: Constants, game configuration and immutable state records
    biomes: Fixed biome catalog (palettes and growth modifiers)
    geometry: Vector helpers, drawable primitives and the leaf outline
    growth: Seed stage and recursive branch generation
    placement: Collision-based spawn placement for new trees
    economy: Buffs, fruit/bird slots and harvesting
    progression: Experience, level-ups, maturity and player actions
    shop: Gold-priced purchases
    wildcards: Score-priced random events
    snapshot: Read-only pydantic snapshot for renderers
    game: Session controller with subscriptions
    visualization: Offline matplotlib garden renderer
"""

from grove.biomes import BIOMES, Biome, BiomeModifiers, BiomePalette, get_biome
from grove.config import (
    ActiveTreeState,
    Buff,
    EconomyState,
    EffectLabel,
    GameConfig,
    GameState,
    Outcome,
    TreeEntity,
)
from grove.game import GardenGame
from grove.geometry import Circle, Path, leaf_path
from grove.growth import GrowthResult, Slot, branch_depth, generate
from grove.placement import find_spawn_position
from grove.progression import (
    complete_tree,
    gain_experience,
    restart,
    stage_label,
    till_soil,
    water_plant,
)
from grove.snapshot import GardenSnapshot, build_snapshot
from grove.visualization import render_garden, save_garden
from grove.wildcards import WILDCARDS, use_wildcard

__all__ = [
    # Config and state
    "ActiveTreeState",
    "Buff",
    "EconomyState",
    "EffectLabel",
    "GameConfig",
    "GameState",
    "Outcome",
    "TreeEntity",
    # Biomes
    "BIOMES",
    "Biome",
    "BiomeModifiers",
    "BiomePalette",
    "get_biome",
    # Generation
    "Circle",
    "Path",
    "GrowthResult",
    "Slot",
    "branch_depth",
    "generate",
    "leaf_path",
    # Placement
    "find_spawn_position",
    # Progression
    "complete_tree",
    "gain_experience",
    "restart",
    "stage_label",
    "till_soil",
    "water_plant",
    # Wildcards
    "WILDCARDS",
    "use_wildcard",
    # Controller and rendering
    "GardenGame",
    "GardenSnapshot",
    "build_snapshot",
    "render_garden",
    "save_garden",
]
