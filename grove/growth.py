"""
Procedural plant generation.

Turns a level, biome modifiers and a placement into drawable primitives and
attachment slots:

- Levels 1-3 are a seed sitting in a pot (fixed shape, no randomness).
- Higher levels grow a recursive branching skeleton. Branch jitter comes from
  the positional pseudo random seeded by ``level * origin_x``; branch counts,
  spread and decoration come from a true random source, so two calls with the
  same inputs give structurally similar but not identical trees.

The recursion writes into an explicit accumulator instead of closing over
shared lists.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from grove.biomes import BIOMES, BiomeModifiers, BiomePalette
from grove.geometry import (
    Circle,
    Path,
    close,
    leaf_segments,
    line_to,
    move_to,
    pseudo_random,
    quad_to,
    vec,
    vec_from_angle,
)

# Stage boundaries
SEED_MAX_LEVEL = 3
POTTED_MAX_LEVEL = 16  # pot until the sapling stage ends, roots afterwards

# Recursion shape
MAX_DEPTH = 8
CHILD_LENGTH_RATIO = 0.75
CHILD_WIDTH_RATIO = 0.7
CURVE_STRENGTH = 0.2  # control point offset as a fraction of branch length
MIN_SPREAD_DEG = 50.0
MAX_SPREAD_DEG = 70.0
ANGLE_JITTER_DEG = 5.0

# Thresholds in unscaled units (multiplied by tree scale)
TRUNK_WIDTH_THRESHOLD = 2.0
MIN_BRANCH_LENGTH = 5.0
MIN_BRANCH_WIDTH = 0.5
TRUNK_BASE_OFFSET = 30.0  # trunk starts inside the pot, above the origin

# Tip decoration
SLOT_CHANCE = 0.6
FLOWER_LEVEL = 8
FRUIT_DOT_LEVEL = 15
FLOWER_COLOR = "#EC4899"
FLOWER_CENTER_COLOR = "#FEF9C3"
FRUIT_DOT_COLOR = "#EF4444"
SEED_COLOR = "#8B4513"


class Slot(NamedTuple):
    """Attachment point for a fruit or a bird."""

    id: str
    cx: float
    cy: float


@dataclass(frozen=True)
class GrowthResult:
    """Everything needed to draw one tree."""

    paths: tuple = ()  # tuple[Path | Circle, ...] in draw order
    slots: tuple = ()  # tuple[Slot, ...]
    depth: int = 0  # recursion depth used (0 for seeds and empty output)

    @property
    def slot_ids(self) -> tuple[str, ...]:
        return tuple(slot.id for slot in self.slots)

    def slot(self, slot_id: str) -> Slot | None:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        return None


@dataclass
class _Accumulator:
    paths: list = field(default_factory=list)
    slots: list = field(default_factory=list)


@dataclass(frozen=True)
class _GrowthContext:
    """Per-call constants shared by every recursion step."""

    level: int
    scale: float
    seed: float
    palette: BiomePalette
    modifiers: BiomeModifiers
    rng: np.random.Generator


def branch_depth(level: int) -> int:
    """Recursion depth for a level: min(8, 2 + level // 3)."""
    return min(MAX_DEPTH, 2 + level // 3)


def initial_branch_length(level: int, growth_speed: float, scale: float) -> float:
    return (40.0 + level * 5.0) * growth_speed * scale


def initial_branch_width(level: int, scale: float) -> float:
    return min(20.0, level * 1.5) * scale


def max_branch_count(depth: int) -> int:
    """Upper bound on branch curves for a recursion depth (branch factor 3)."""
    return sum(3**k for k in range(depth + 1))


def child_count(branch_complexity: float, rng: np.random.Generator) -> int:
    """
    Number of children at a fork: 2 or 3.

    A base of 2 or 3 (even odds) is multiplied by the biome complexity, so
    rich biomes (>= 1.5) always fork in three and poor ones (< 0.84) in two.
    """
    base = 3 if rng.random() < 0.5 else 2
    return min(3, max(2, int(base * branch_complexity + 0.5)))


def _valid_inputs(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


# =============================================================================
# SEED STAGE
# =============================================================================

def _pot_paths(x: float, y: float, scale: float, palette: BiomePalette) -> list:
    """Pot body and rim; the origin is the bottom-center of the pot."""
    rim_y = y - 40.0 * scale
    body = Path(
        segments=(
            move_to((x - 20 * scale, rim_y)),
            line_to((x + 20 * scale, rim_y)),
            line_to((x + 10 * scale, y)),
            line_to((x - 10 * scale, y)),
            close(),
        ),
        stroke=palette.trunk,
        width=2.0 * scale,
        fill=palette.container,
        type="pot",
    )
    rim = Path(
        segments=(move_to((x - 25 * scale, rim_y)), line_to((x + 25 * scale, rim_y))),
        stroke=palette.trunk,
        width=4.0 * scale,
        type="pot",
    )
    return [body, rim]


def _root_paths(x: float, y: float, scale: float, palette: BiomePalette) -> list:
    """Three root curves spreading down from the trunk base."""
    base_y = y - TRUNK_BASE_OFFSET * scale
    roots = []
    # (control dx, control dy, end dx, end dy, width)
    for cdx, cdy, edx, edy, width in (
        (-10, 20, -20, 30, 8),
        (10, 20, 20, 35, 7),
        (0, 25, -5, 45, 6),
    ):
        roots.append(
            Path(
                segments=(
                    move_to((x, base_y)),
                    quad_to(
                        (x + cdx * scale, base_y + cdy * scale),
                        (x + edx * scale, base_y + edy * scale),
                    ),
                ),
                stroke=palette.trunk,
                width=width * scale,
                type="root",
            )
        )
    return roots


def generate_seed(
    origin_x: float,
    origin_y: float,
    scale: float = 1.0,
    palette: BiomePalette | None = None,
) -> GrowthResult:
    """Seed stage: the pot plus one seed ellipse, no slots."""
    palette = palette or BIOMES[0].palette
    paths = _pot_paths(origin_x, origin_y, scale, palette)
    paths.append(
        Circle(
            cx=origin_x,
            cy=origin_y - 25.0 * scale,
            r=6.0 * scale,
            ry=8.0 * scale,
            fill=SEED_COLOR,
        )
    )
    return GrowthResult(paths=tuple(paths), slots=(), depth=0)


# =============================================================================
# BRANCH RECURSION
# =============================================================================

def _add_tip(
    acc: _Accumulator,
    ctx: _GrowthContext,
    end: np.ndarray,
    angle: float,
    branch_path: str,
    branch_key: int,
) -> None:
    """Leaf cluster, optional flower/fruit dot and maybe one slot."""
    s = ctx.scale
    palette = ctx.palette
    rng = ctx.rng

    acc.paths.append(
        Path(segments=leaf_segments(end[0], end[1], angle, s), fill=palette.leaf_primary)
    )
    if ctx.level > 5 and rng.random() > 0.3:
        acc.paths.append(
            Path(
                segments=leaf_segments(end[0], end[1], angle - 45.0, 0.8 * s),
                fill=palette.leaf_secondary,
            )
        )
    if ctx.level > 10 and rng.random() > 0.5:
        acc.paths.append(
            Path(
                segments=leaf_segments(end[0], end[1], angle + 45.0, 0.8 * s),
                fill=palette.leaf_secondary,
            )
        )

    if ctx.level >= FLOWER_LEVEL and rng.random() > 0.7:
        acc.paths.append(Circle(cx=end[0], cy=end[1], r=4.0 * s, fill=FLOWER_COLOR))
        acc.paths.append(
            Circle(cx=end[0], cy=end[1], r=2.0 * s, fill=FLOWER_CENTER_COLOR)
        )
    if ctx.level >= FRUIT_DOT_LEVEL and rng.random() < 0.3:
        acc.paths.append(
            Circle(cx=end[0] + 2.0 * s, cy=end[1] + 5.0 * s, r=5.0 * s, fill=FRUIT_DOT_COLOR)
        )

    if pseudo_random(ctx.seed + branch_key) < SLOT_CHANCE:
        acc.slots.append(Slot(id=f"tip-{branch_path}", cx=float(end[0]), cy=float(end[1])))


def _grow_branch(
    acc: _Accumulator,
    ctx: _GrowthContext,
    start: np.ndarray,
    angle: float,
    length: float,
    width: float,
    depth: int,
    branch_path: str = "r",
    branch_key: int = 0,
) -> None:
    """Emit one curved branch, then fork or finish as a tip."""
    end = start + vec_from_angle(angle, length)

    # Perpendicular sway so branches read as organic curves
    side = 90.0 if pseudo_random(ctx.seed + start[0] * start[1]) > 0.5 else -90.0
    control = (start + end) / 2 + vec_from_angle(angle + side, length * CURVE_STRENGTH)

    is_woody = width > TRUNK_WIDTH_THRESHOLD * ctx.scale
    acc.paths.append(
        Path(
            segments=(move_to(start), quad_to(control, end)),
            stroke=ctx.palette.trunk if is_woody else ctx.palette.stem,
            width=width,
        )
    )

    degenerate = (
        length < MIN_BRANCH_LENGTH * ctx.scale or width < MIN_BRANCH_WIDTH * ctx.scale
    )
    if depth <= 0 or degenerate:
        _add_tip(acc, ctx, end, angle, branch_path, branch_key)
        return

    n_children = child_count(ctx.modifiers.branch_complexity, ctx.rng)
    spread = ctx.rng.uniform(MIN_SPREAD_DEG, MAX_SPREAD_DEG)
    step = spread / (n_children - 1)
    for i in range(n_children):
        child_key = branch_key * 4 + i + 1
        jitter = (pseudo_random(ctx.seed + child_key * 10.0) - 0.5) * 2 * ANGLE_JITTER_DEG
        child_angle = angle - spread / 2 + i * step + jitter
        _grow_branch(
            acc,
            ctx,
            end,
            child_angle,
            length * CHILD_LENGTH_RATIO,
            width * CHILD_WIDTH_RATIO,
            depth - 1,
            f"{branch_path}{i}",
            child_key,
        )


def generate_tree(
    level: int,
    modifiers: BiomeModifiers,
    origin_x: float,
    origin_y: float,
    scale: float = 1.0,
    palette: BiomePalette | None = None,
    rng: np.random.Generator | None = None,
) -> GrowthResult:
    """Recursive branching tree for levels above the seed stage."""
    palette = palette or BIOMES[0].palette
    rng = rng if rng is not None else np.random.default_rng()
    ctx = _GrowthContext(
        level=level,
        scale=scale,
        seed=level * origin_x,
        palette=palette,
        modifiers=modifiers,
        rng=rng,
    )

    acc = _Accumulator()
    if level <= POTTED_MAX_LEVEL:
        acc.paths.extend(_pot_paths(origin_x, origin_y, scale, palette))
    else:
        acc.paths.extend(_root_paths(origin_x, origin_y, scale, palette))

    depth = branch_depth(level)
    _grow_branch(
        acc,
        ctx,
        vec(origin_x, origin_y - TRUNK_BASE_OFFSET * scale),
        -90.0,  # straight up in screen coordinates
        initial_branch_length(level, modifiers.growth_speed, scale),
        initial_branch_width(level, scale),
        depth,
    )
    return GrowthResult(paths=tuple(acc.paths), slots=tuple(acc.slots), depth=depth)


def generate(
    level: int,
    modifiers: BiomeModifiers,
    origin_x: float,
    origin_y: float,
    scale: float = 1.0,
    palette: BiomePalette | None = None,
    rng: np.random.Generator | None = None,
) -> GrowthResult:
    """
    Generate the drawable plant for a level.

    Args:
        level: Tree level (seed stage for 1-3)
        modifiers: Biome growth modifiers
        origin_x, origin_y: Bottom-center of the footprint
        scale: Tree scale (nominal 1.0)
        palette: Biome colors (defaults to the first biome)
        rng: Random source for the non-positional randomness

    Returns:
        GrowthResult; empty for nonpositive or non-finite inputs
    """
    if not _valid_inputs(level, origin_x, origin_y, scale):
        return GrowthResult()
    if level <= 0 or scale <= 0:
        return GrowthResult()
    level = int(level)
    if level <= SEED_MAX_LEVEL:
        return generate_seed(origin_x, origin_y, scale, palette)
    return generate_tree(level, modifiers, origin_x, origin_y, scale, palette, rng)
