"""
Offline garden renderer.

Draws a GardenSnapshot with matplotlib: biome background, the baked legacy
trees, the active tree, then fruits and birds on their slots. Coordinates are
screen-style (y grows downwards), matching the generator.
"""

from __future__ import annotations

import logging

import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Ellipse, PathPatch
from matplotlib.path import Path as MplPath

from grove.snapshot import CircleSchema, GardenSnapshot, PathSchema

logger = logging.getLogger(__name__)

# Garden view (width, height)
CANVAS_SIZE = (400, 500)
LINE_SCALE = 0.6  # garden stroke width -> matplotlib points

FRUIT_COLOR = "#EF4444"
BIRD_COLOR = "#3B82F6"
OUTLINE_COLOR = "#1e1914"


def path_to_mpl(path: PathSchema) -> MplPath:
    """Convert structured path commands to a matplotlib Path."""
    vertices = []
    codes = []
    start = (0.0, 0.0)
    for seg in path.segments:
        if seg.command == "M":
            start = seg.points[0]
            vertices.append(start)
            codes.append(MplPath.MOVETO)
        elif seg.command == "L":
            vertices.append(seg.points[0])
            codes.append(MplPath.LINETO)
        elif seg.command == "Q":
            vertices.extend(seg.points)
            codes.extend([MplPath.CURVE3, MplPath.CURVE3])
        elif seg.command == "Z":
            vertices.append(start)
            codes.append(MplPath.CLOSEPOLY)
    return MplPath(vertices, codes)


def _color(value: str) -> str:
    return "none" if value in ("", "none") else value


def draw_primitive(ax: plt.Axes, primitive: PathSchema | CircleSchema, zorder: float) -> None:
    if isinstance(primitive, CircleSchema):
        ax.add_patch(
            Ellipse(
                (primitive.cx, primitive.cy),
                2 * primitive.r,
                2 * primitive.ry,
                facecolor=primitive.fill,
                edgecolor="none",
                zorder=zorder,
            )
        )
        return
    if not primitive.segments:
        return
    stroke = _color(primitive.stroke)
    ax.add_patch(
        PathPatch(
            path_to_mpl(primitive),
            facecolor=_color(primitive.fill),
            edgecolor=stroke,
            linewidth=primitive.width * LINE_SCALE if stroke != "none" else 0.0,
            capstyle="round",
            joinstyle="round",
            zorder=zorder,
        )
    )


def render_garden(
    snapshot: GardenSnapshot,
    canvas_size: tuple = CANVAS_SIZE,
    figsize: tuple = (6, 7.5),
) -> tuple[plt.Figure, plt.Axes]:
    """
    Render a garden snapshot.

    Args:
        snapshot: Garden state to draw
        canvas_size: Garden view size (width, height)
        figsize: Figure size in inches

    Returns:
        (figure, axes) tuple
    """
    width, height = canvas_size
    fig, ax = plt.subplots(figsize=figsize)
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)  # Flip Y for screen coords
    ax.set_aspect("equal")
    ax.axis("off")
    fig.patch.set_facecolor(snapshot.biome.palette["background"])

    # Legacy trees behind, ordered by depth (lower y further back)
    for index, tree in enumerate(sorted(snapshot.legacy_trees, key=lambda t: t.y)):
        base_z = 1 + index * 0.01
        for j, primitive in enumerate(tree.primitives):
            draw_primitive(ax, primitive, base_z + j * 1e-6)

    for j, primitive in enumerate(snapshot.primitives):
        draw_primitive(ax, primitive, 5 + j * 1e-6)

    for slot in snapshot.fruits:
        ax.add_patch(
            Circle((slot.cx, slot.cy + 5), 5, facecolor=FRUIT_COLOR,
                   edgecolor=OUTLINE_COLOR, linewidth=0.8, zorder=8)
        )
    for slot in snapshot.birds:
        ax.add_patch(
            Ellipse((slot.cx, slot.cy - 4), 10, 7, facecolor=BIRD_COLOR,
                    edgecolor=OUTLINE_COLOR, linewidth=0.8, zorder=9)
        )

    title = f"{snapshot.biome.name} - score {snapshot.score}"
    if snapshot.tree is not None:
        title += f" - {snapshot.tree.stage}"
    if snapshot.game_over:
        title += " - garden full"
    ax.set_title(title, fontsize=9)
    return fig, ax


def save_garden(
    filepath: str,
    snapshot: GardenSnapshot,
    dpi: int = 150,
    canvas_size: tuple = CANVAS_SIZE,
    figsize: tuple = (6, 7.5),
) -> None:
    """Render and save a garden snapshot to file."""
    fig, _ = render_garden(snapshot, canvas_size, figsize)
    fig.savefig(filepath, dpi=dpi, bbox_inches="tight", pad_inches=0.1,
                facecolor=fig.get_facecolor())
    plt.close(fig)
    logger.info("Saved garden to %s", filepath)
