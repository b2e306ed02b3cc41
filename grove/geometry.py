"""
Vector helpers and drawable primitives.

Combines:
- 2D vector utilities
- The sin-based positional pseudo random used for branch jitter
- Path / Circle primitives with SVG-style serialization
- The leaf outline helper
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np


# =============================================================================
# VECTOR UTILITIES
# =============================================================================

def vec(x: float, y: float) -> np.ndarray:
    """Create a 2D vector."""
    return np.array([x, y], dtype=float)


def vec_from_angle(angle_deg: float, length: float = 1.0) -> np.ndarray:
    """Vector of given length pointing at angle (degrees, screen coords)."""
    rad = math.radians(angle_deg)
    return vec(math.cos(rad) * length, math.sin(rad) * length)


# =============================================================================
# NOISE FUNCTION
# =============================================================================

def pseudo_random(seed: float) -> float:
    """
    Positional pseudo random in [0, 1).

    frac(sin(seed) * 10000). Same seed, same value; not a real RNG.
    """
    x = math.sin(seed) * 10000.0
    return x - math.floor(x)


# =============================================================================
# PRIMITIVES
# =============================================================================

def fmt(value: float) -> str:
    """Serialize a coordinate for path strings (two decimals, no -0)."""
    text = f"{value:.2f}"
    return "0.00" if text == "-0.00" else text


def fmt_point(point) -> str:
    return f"{fmt(point[0])},{fmt(point[1])}"


class Segment(NamedTuple):
    """
    One path command.

    command is M (move), L (line), Q (quadratic: control, end) or Z (close).
    """

    command: str
    points: tuple  # tuple[tuple[float, float], ...]

    def to_svg(self) -> str:
        if self.command == "Z":
            return "Z"
        return self.command + " ".join(fmt_point(p) for p in self.points)


def _pt(p) -> tuple[float, float]:
    return (float(p[0]), float(p[1]))


def move_to(p) -> Segment:
    return Segment("M", (_pt(p),))


def line_to(p) -> Segment:
    return Segment("L", (_pt(p),))


def quad_to(cpt, end) -> Segment:
    return Segment("Q", (_pt(cpt), _pt(end)))


def close() -> Segment:
    return Segment("Z", ())


def segments_to_svg(segments) -> str:
    return " ".join(seg.to_svg() for seg in segments)


@dataclass(frozen=True)
class Path:
    """
    Stroked and/or filled curve.

    type tags the static base decoration: "pot", "root" or None for
    branches and leaves.
    """

    segments: tuple[Segment, ...]
    stroke: str = "none"
    width: float = 0.0
    fill: str = "none"
    type: str | None = None

    @property
    def d(self) -> str:
        """SVG path data."""
        return segments_to_svg(self.segments)


@dataclass(frozen=True)
class Circle:
    """Circle or ellipse primitive for seeds, flowers and fruit dots."""

    cx: float
    cy: float
    r: float
    fill: str
    ry: float | None = None  # set for an ellipse

    @property
    def rx(self) -> float:
        return self.r

    @property
    def radius_y(self) -> float:
        return self.r if self.ry is None else self.ry


# =============================================================================
# LEAF GEOMETRY
# =============================================================================

LEAF_LENGTH = 12.0
LEAF_WIDTH = 6.0


def leaf_segments(
    x: float,
    y: float,
    angle: float,
    scale: float,
) -> tuple[Segment, ...]:
    """
    Lens-shaped leaf from the tip position pointing along angle (degrees).

    Two quadratic curves mirrored around the leaf axis:
    tip -> far point through one side, and back through the other.
    """
    rad = math.radians(angle)
    cos_a, sin_a = math.cos(rad), math.sin(rad)
    length = LEAF_LENGTH * scale
    width = LEAF_WIDTH * scale

    def transform(dx: float, dy: float) -> tuple[float, float]:
        return (x + dx * cos_a - dy * sin_a, y + dx * sin_a + dy * cos_a)

    p0 = transform(0.0, 0.0)
    p1 = transform(length * 0.5, -width)
    p2 = transform(length, 0.0)
    p3 = transform(length * 0.5, width)
    return (move_to(p0), quad_to(p1, p2), quad_to(p3, p0))


def leaf_path(x: float, y: float, angle: float, scale: float) -> str:
    """SVG path string for a leaf; pure in its arguments."""
    return segments_to_svg(leaf_segments(x, y, angle, scale))
