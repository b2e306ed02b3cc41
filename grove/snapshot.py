"""
Read-only snapshot handed to rendering layers.

Renderers never see the live GameState; they receive a validated pydantic
model built from it, with timed side channels (effect label, growing flag)
already resolved against the snapshot time.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from grove.biomes import Biome
from grove.config import DEFAULT_CONFIG, GameConfig, GameState
from grove.geometry import Circle, Path
from grove.growth import GrowthResult
from grove.progression import current_biome, stage_label, till_cooldown_remaining

#
# Schemata
#


class SegmentSchema(BaseModel):
    command: Literal["M", "L", "Q", "Z"] = Field(description="Path command")
    points: list[tuple[float, float]] = Field(description="Command points")


class PathSchema(BaseModel):
    """Stroked or filled curve."""

    kind: Literal["path"] = "path"
    d: str = Field(description="SVG path data")
    segments: list[SegmentSchema] = Field(description="Structured path commands")
    stroke: str = Field(description="Stroke color or 'none'")
    width: float = Field(description="Stroke width")
    fill: str = Field(description="Fill color or 'none'")
    type: str | None = Field(default=None, description="'pot', 'root' or None")


class CircleSchema(BaseModel):
    """Seed, flower or fruit dot."""

    kind: Literal["circle"] = "circle"
    cx: float
    cy: float
    r: float = Field(description="Horizontal radius")
    ry: float = Field(description="Vertical radius")
    fill: str


Primitive = Annotated[Union[PathSchema, CircleSchema], Field(discriminator="kind")]


class SlotSchema(BaseModel):
    id: str
    cx: float
    cy: float


class BiomeSchema(BaseModel):
    id: str
    name: str
    palette: dict[str, str] = Field(description="Color role -> color")
    growth_speed: float
    branch_complexity: float
    is_cosmic: bool


class TreeSnapshot(BaseModel):
    """The growing tree."""

    level: int = Field(ge=1)
    experience: float = Field(ge=0)
    xp_required: float = Field(description="Experience needed for the next level")
    stage: str = Field(description="Growth stage label")
    x: float
    y: float
    scale: float = Field(gt=0)
    start_time: float


class LegacyTreeSchema(BaseModel):
    id: str
    biome_id: str
    x: float
    y: float
    scale: float
    score: int
    primitives: list[Primitive]


class EffectLabelSchema(BaseModel):
    text: str
    color: str


class GardenSnapshot(BaseModel):
    """Everything a renderer may read at one instant."""

    time: float = Field(description="Snapshot time (seconds)")
    tree: TreeSnapshot | None = Field(
        default=None, description="Active tree; None once the garden is full"
    )
    biome: BiomeSchema
    primitives: list[Primitive] = Field(
        default_factory=list, description="Active tree drawing"
    )
    slots: list[SlotSchema] = Field(default_factory=list)
    fruits: list[SlotSchema] = Field(default_factory=list)
    birds: list[SlotSchema] = Field(default_factory=list)
    legacy_trees: list[LegacyTreeSchema] = Field(default_factory=list)
    score: int
    gold: int = Field(ge=0)
    fertilizer_level: int = Field(ge=0)
    growth_multiplier: float
    game_over: bool
    is_growing: bool
    till_cooldown: float = Field(ge=0, description="Seconds until tilling is ready")
    wildcard_cooldowns: dict[str, float] = Field(
        default_factory=dict, description="Item id -> seconds until ready"
    )
    effect_label: EffectLabelSchema | None = None


#
# Conversion
#


def primitive_to_schema(primitive: Path | Circle) -> Primitive:
    if isinstance(primitive, Circle):
        return CircleSchema(
            cx=primitive.cx,
            cy=primitive.cy,
            r=primitive.rx,
            ry=primitive.radius_y,
            fill=primitive.fill,
        )
    return PathSchema(
        d=primitive.d,
        segments=[
            SegmentSchema(command=seg.command, points=list(seg.points))
            for seg in primitive.segments
        ],
        stroke=primitive.stroke,
        width=primitive.width,
        fill=primitive.fill,
        type=primitive.type,
    )


def biome_to_schema(biome: Biome) -> BiomeSchema:
    palette = biome.palette
    return BiomeSchema(
        id=biome.id,
        name=biome.name,
        palette={
            "background": palette.background,
            "container": palette.container,
            "stem": palette.stem,
            "leaf_primary": palette.leaf_primary,
            "leaf_secondary": palette.leaf_secondary,
            "trunk": palette.trunk,
        },
        growth_speed=biome.modifiers.growth_speed,
        branch_complexity=biome.modifiers.branch_complexity,
        is_cosmic=biome.modifiers.is_cosmic,
    )


def build_snapshot(
    state: GameState,
    growth: GrowthResult,
    now: float,
    config: GameConfig = DEFAULT_CONFIG,
) -> GardenSnapshot:
    """
    Freeze a state and its current drawing into a snapshot.

    Args:
        state: Game state to describe
        growth: Drawing of the active tree (ignored once the game is over)
        now: Snapshot time
        config: Game configuration

    Returns:
        Validated GardenSnapshot
    """
    economy = state.economy
    tree = state.tree
    slots_by_id = {slot.id: slot for slot in growth.slots}

    def slot_list(ids) -> list[SlotSchema]:
        return [
            SlotSchema(id=slots_by_id[i].id, cx=slots_by_id[i].cx, cy=slots_by_id[i].cy)
            for i in sorted(ids)
            if i in slots_by_id
        ]

    legacy = [
        LegacyTreeSchema(
            id=entity.id,
            biome_id=entity.biome_id,
            x=entity.x,
            y=entity.y,
            scale=entity.scale,
            score=entity.score,
            primitives=[primitive_to_schema(p) for p in entity.paths],
        )
        for entity in state.legacy_trees
    ]

    label = state.effect_label
    active = not state.game_over
    return GardenSnapshot(
        time=now,
        tree=TreeSnapshot(
            level=tree.level,
            experience=tree.experience,
            xp_required=config.xp_required(tree.level),
            stage=stage_label(tree.level),
            x=tree.x,
            y=tree.y,
            scale=tree.scale,
            start_time=tree.start_time,
        )
        if active
        else None,
        biome=biome_to_schema(current_biome(state)),
        primitives=[primitive_to_schema(p) for p in growth.paths] if active else [],
        slots=[SlotSchema(id=s.id, cx=s.cx, cy=s.cy) for s in growth.slots]
        if active
        else [],
        fruits=slot_list(economy.active_fruits) if active else [],
        birds=slot_list(economy.active_birds) if active else [],
        legacy_trees=legacy,
        score=state.score,
        gold=economy.gold,
        fertilizer_level=economy.fertilizer_level,
        growth_multiplier=economy.growth_multiplier,
        game_over=state.game_over,
        is_growing=state.growing_until > now,
        till_cooldown=till_cooldown_remaining(state, now, config),
        wildcard_cooldowns={
            item_id: max(0.0, ready_at - now)
            for item_id, ready_at in economy.wildcard_cooldowns
        },
        effect_label=EffectLabelSchema(text=label.text, color=label.color)
        if label is not None and label.expires_at > now
        else None,
    )
