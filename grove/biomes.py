"""
Biome catalog.

A fixed, ordered table of biomes. Each stage of the garden uses the biome at
``stage_index mod len(BIOMES)``; the table is built once and never mutated.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BiomePalette:
    """Six semantic color roles used when generating and drawing a tree."""

    background: str
    container: str  # pot
    stem: str
    leaf_primary: str
    leaf_secondary: str
    trunk: str


@dataclass(frozen=True)
class BiomeModifiers:
    """
    Numeric growth modifiers.

    growth_speed multiplies generated branch length.
    branch_complexity multiplies the chosen child-branch count.
    """

    growth_speed: float = 1.0
    branch_complexity: float = 1.0
    is_cosmic: bool = False  # reserved for special-case rendering

    def __post_init__(self) -> None:
        if self.growth_speed <= 0 or self.branch_complexity <= 0:
            raise ValueError("Biome modifiers must be positive")


@dataclass(frozen=True)
class Biome:
    id: str
    name: str
    palette: BiomePalette
    modifiers: BiomeModifiers


BIOMES: tuple[Biome, ...] = (
    Biome(
        id="plains",
        name="Green Plains",
        palette=BiomePalette(
            background="#E8F5D0",
            container="#A0522D",
            stem="#4ADE80",
            leaf_primary="#4ADE80",
            leaf_secondary="#22C55E",
            trunk="#8B4513",
        ),
        modifiers=BiomeModifiers(growth_speed=1.0, branch_complexity=1.0),
    ),
    Biome(
        id="desert",
        name="Arid Desert",
        palette=BiomePalette(
            background="#FCE7B2",
            container="#9A3412",  # red clay
            stem="#84CC16",
            leaf_primary="#84CC16",
            leaf_secondary="#65A30D",
            trunk="#A16207",
        ),
        modifiers=BiomeModifiers(growth_speed=0.8, branch_complexity=0.8),
    ),
    Biome(
        id="mud",
        name="Swampy Mudlands",
        palette=BiomePalette(
            background="#A8A29E",
            container="#44403C",
            stem="#57534E",
            leaf_primary="#3F6212",
            leaf_secondary="#365314",
            trunk="#292524",
        ),
        modifiers=BiomeModifiers(growth_speed=0.9, branch_complexity=1.2),
    ),
    Biome(
        id="forest",
        name="Deep Forest",
        palette=BiomePalette(
            background="#BBD9B0",
            container="#3F2C22",
            stem="#166534",
            leaf_primary="#15803D",
            leaf_secondary="#14532D",
            trunk="#3E2723",
        ),
        modifiers=BiomeModifiers(growth_speed=1.1, branch_complexity=1.3),
    ),
    Biome(
        id="underwater",
        name="Abyssal Depths",
        palette=BiomePalette(
            background="#0C2D48",
            container="#1E3A8A",
            stem="#06B6D4",  # glowing cyan
            leaf_primary="#22D3EE",
            leaf_secondary="#0891B2",
            trunk="#0E7490",
        ),
        modifiers=BiomeModifiers(growth_speed=0.7, branch_complexity=1.5),
    ),
    Biome(
        id="lava",
        name="Volcanic Crags",
        palette=BiomePalette(
            background="#3B0D0D",
            container="#450A0A",
            stem="#EF4444",
            leaf_primary="#F87171",
            leaf_secondary="#B91C1C",
            trunk="#7F1D1D",
        ),
        modifiers=BiomeModifiers(growth_speed=1.5, branch_complexity=0.9),
    ),
    Biome(
        id="space",
        name="Cosmic Void",
        palette=BiomePalette(
            background="#0B0420",
            container="#C084FC",
            stem="#E879F9",  # neon pink
            leaf_primary="#C084FC",
            leaf_secondary="#A855F7",
            trunk="#6B21A8",
        ),
        modifiers=BiomeModifiers(
            growth_speed=2.0, branch_complexity=1.5, is_cosmic=True
        ),
    ),
)


def get_biome(stage_index: int) -> Biome:
    """Biome for a garden stage; wraps around the table."""
    return BIOMES[stage_index % len(BIOMES)]


def get_biome_by_id(biome_id: str) -> Biome:
    for biome in BIOMES:
        if biome.id == biome_id:
            return biome
    raise KeyError(f"Unknown biome: {biome_id}")
