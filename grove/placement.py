"""
Spawn placement for new trees.

Once a tree matures the next one is planted at a random integer point inside
a fixed rectangle, away from every existing footprint. Footprints are circles
of radius ``TREE_RADIUS * scale`` around each origin; candidates may overlap a
neighbour by up to 20% of the combined radius to keep the garden dense.

All candidate points of one call are sampled up front and checked against all
trees at once, in double precision so the boundary is exact:

    d(candidate, tree)^2 >= (OVERLAP_FACTOR * (R + R * scale))^2

Returning None means the garden is full.
"""

from collections.abc import Sequence

import numpy as np

from grove.config import HOME_X, HOME_Y

TREE_RADIUS = 30.0
OVERLAP_FACTOR = 0.8  # 20% footprint overlap tolerated

# Spawn rectangle (inclusive) in garden coordinates
MIN_X = 50
MAX_X = 350
MIN_Y = 200
MAX_Y = 400

DEFAULT_MAX_ATTEMPTS = 50


def required_clearance(scale) -> float:
    """Minimum origin distance from a tree of the given scale."""
    return OVERLAP_FACTOR * (TREE_RADIUS + TREE_RADIUS * scale)


def clearance_mask(
    xs: np.ndarray,
    ys: np.ndarray,
    tree_xs: np.ndarray,
    tree_ys: np.ndarray,
    tree_scales: np.ndarray,
) -> np.ndarray:
    """
    Which candidates keep clear of every tree.

    Args:
        xs, ys: Candidate coordinates, shape [num_candidates]
        tree_xs, tree_ys, tree_scales: Existing footprints, shape [num_trees]

    Returns:
        Boolean mask, shape [num_candidates]
    """
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    tree_xs = np.asarray(tree_xs, dtype=np.float64)
    tree_ys = np.asarray(tree_ys, dtype=np.float64)
    tree_scales = np.asarray(tree_scales, dtype=np.float64)

    dx = xs[:, None] - tree_xs[None, :]
    dy = ys[:, None] - tree_ys[None, :]
    dist_sq = dx**2 + dy**2
    required = OVERLAP_FACTOR * (TREE_RADIUS + TREE_RADIUS * tree_scales)
    return np.all(dist_sq >= (required**2)[None, :], axis=1)


def is_valid_position(x: float, y: float, trees: Sequence) -> bool:
    """True if (x, y) keeps clear of every tree footprint."""
    if not trees:
        return True
    mask = clearance_mask(
        [x],
        [y],
        [t.x for t in trees],
        [t.y for t in trees],
        [t.scale for t in trees],
    )
    return bool(mask[0])


def find_spawn_position(
    existing_trees: Sequence,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: np.random.Generator | None = None,
) -> tuple[float, float] | None:
    """
    Find an origin for the next tree.

    Args:
        existing_trees: Trees with x, y and scale attributes
        max_attempts: Number of random samples before giving up
        rng: Random source (a fresh default generator if omitted)

    Returns:
        (x, y) of the first accepted sample, the home position when the
        garden is empty, or None when every sample collided
    """
    if len(existing_trees) == 0:
        return (HOME_X, HOME_Y)
    if max_attempts <= 0:
        return None

    rng = rng if rng is not None else np.random.default_rng()
    xs = rng.integers(MIN_X, MAX_X + 1, size=max_attempts)
    ys = rng.integers(MIN_Y, MAX_Y + 1, size=max_attempts)

    valid = clearance_mask(
        xs,
        ys,
        [t.x for t in existing_trees],
        [t.y for t in existing_trees],
        [t.scale for t in existing_trees],
    )
    if not valid.any():
        return None
    first = int(np.argmax(valid))
    return (float(xs[first]), float(ys[first]))
