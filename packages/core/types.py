"""Pydantic models for pool designs, design sessions and scene descriptions.

The scene description is the structured JSON handed to the 3D viewer.  It
describes meshes, primitive props, materials and lights as plain data so the
viewer never needs to know how the pool geometry was generated.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


# ── tiny helpers ──────────────────────────────────────────────────────
class Vec3(BaseModel):
    """A 3-component vector (x, y, z) in feet.  Y is up."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_list(self) -> list[float]:
        return [self.x, self.y, self.z]


class BBox(BaseModel):
    """Axis-aligned bounding box."""

    min: Vec3
    max: Vec3


# ── closed enums for the design controls ─────────────────────────────
class ShapeKind(str, Enum):
    RECTANGLE = "rectangle"
    LAGOON = "lagoon"
    KIDNEY = "kidney"
    INFINITY = "infinity"
    L_SHAPED = "lShaped"
    LAP = "lap"


class FinishKind(str, Enum):
    PLASTER = "plaster"
    PEBBLE_TEC = "pebbleTec"
    GLASS_TILE = "glassTile"
    QUARTZITE = "quartzite"
    FIBERGLASS = "fiberglass"


class TimeOfDay(str, Enum):
    SUNRISE = "sunrise"
    MORNING = "morning"
    NOON = "noon"
    AFTERNOON = "afternoon"
    SUNSET = "sunset"
    EVENING = "evening"
    NIGHT = "night"


class ElementCategory(str, Enum):
    HARDSCAPE = "hardscape"
    LANDSCAPE = "landscape"
    EXISTING = "existing"


def coerce_enum(enum_cls: type[Enum], value, default):
    """Map *value* onto *enum_cls*, falling back to *default* for unknown keys."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(
            "Unknown %s %r, falling back to %r", enum_cls.__name__, value, default.value
        )
        return default


Dimension = Annotated[float, Field(gt=0, allow_inf_nan=False)]


# ── static profile records ───────────────────────────────────────────
class FinishProfile(BaseModel):
    """Surface-material preset applied to the pool shell."""

    model_config = ConfigDict(frozen=True)

    key: FinishKind
    name: str
    shell: str = Field(description="Base colour as a hex string")
    roughness: float = Field(ge=0.0, le=1.0)
    metalness: float = Field(ge=0.0, le=1.0)
    normal_scale: float = 0.0
    cost: float
    durability: str = ""
    description: str = ""


class LightingProfile(BaseModel):
    """Time-of-day lighting configuration."""

    model_config = ConfigDict(frozen=True)

    key: TimeOfDay
    ambient_intensity: float
    ambient_color: str
    sun_intensity: float
    sun_color: str
    sun_position: Vec3
    environment: str
    water_color: str


# ── pool design ──────────────────────────────────────────────────────
class PoolSpec(BaseModel):
    """The user's pool choices.  Replaced, never edited, on every change."""

    model_config = ConfigDict(frozen=True)

    length: Dimension = 16.0
    width: Dimension = 8.0
    depth: Dimension = 6.0
    shape: ShapeKind = ShapeKind.RECTANGLE
    finish: FinishKind = FinishKind.PLASTER
    position: Vec3 = Field(default_factory=Vec3)
    led_lighting: bool = True
    infinity_edge: bool = False
    spillover_spa: bool = False
    selected: bool = False

    @field_validator("shape", mode="before")
    @classmethod
    def _fallback_shape(cls, v):
        return coerce_enum(ShapeKind, v, ShapeKind.RECTANGLE)

    @field_validator("finish", mode="before")
    @classmethod
    def _fallback_finish(cls, v):
        return coerce_enum(FinishKind, v, FinishKind.PLASTER)

    @property
    def has_infinity_edge(self) -> bool:
        return self.infinity_edge or self.shape is ShapeKind.INFINITY


class SceneElement(BaseModel):
    """A placed hardscape / landscape prop or a detected existing structure."""

    model_config = ConfigDict(frozen=True)

    uid: str
    element_id: str
    category: ElementCategory
    position: Vec3 = Field(default_factory=Vec3)
    selected: bool = False
    dragging: bool = False


class Backyard(BaseModel):
    """Overall lot size, as estimated by the site analysis."""

    model_config = ConfigDict(frozen=True)

    length: Dimension = 40.0
    width: Dimension = 30.0
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


# ── site analysis (stub service contract) ────────────────────────────
class DetectedFeature(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    position: Vec3


class PlacementSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    position: Vec3
    reason: str
    score: float = Field(ge=0.0, le=1.0)


class SiteMaterials(BaseModel):
    model_config = ConfigDict(frozen=True)

    ground_type: str = "grass"
    existing_hardscape: str = "concrete"
    fencing: str = "wood"
    house_exterior: str = "brick"


class SiteAnalysis(BaseModel):
    """Result of analysing the uploaded backyard photos."""

    model_config = ConfigDict(frozen=True)

    dimensions: Backyard
    features: tuple[DetectedFeature, ...] = ()
    placement: PlacementSuggestion
    materials: SiteMaterials = Field(default_factory=SiteMaterials)
    fallback: bool = False


class AnalysisStage(BaseModel):
    model_config = ConfigDict(frozen=True)

    progress: int = Field(ge=0, le=100)
    stage: str
    delay: float = Field(ge=0.0, description="Seconds the stage is shown for")


# ── cost estimate ────────────────────────────────────────────────────
class CostLine(BaseModel):
    label: str
    amount: float


class CostEstimate(BaseModel):
    lines: list[CostLine] = Field(default_factory=list)
    total: float = 0.0


# ── scene description ────────────────────────────────────────────────
class Material(BaseModel):
    """PBR material parameters, in the vocabulary of a standard material."""

    color: str
    roughness: float = 0.5
    metalness: float = 0.0
    normal_scale: float = 0.0
    opacity: float = 1.0
    transparent: bool = False
    emissive: Optional[str] = None
    emissive_intensity: float = 0.0
    env_map_intensity: float = 1.0
    blending: Literal["normal", "additive"] = "normal"


class MeshData(BaseModel):
    """Triangle mesh as flat arrays, ready for a GPU buffer."""

    vertex_count: int
    face_count: int
    positions: list[float] = Field(description="Flat [x, y, z, ...] vertex coordinates")
    indices: list[int] = Field(description="Flat [a, b, c, ...] triangle indices")


class MeshRef(BaseModel):
    kind: Literal["mesh"] = "mesh"
    mesh_id: str


class BoxGeometry(BaseModel):
    kind: Literal["box"] = "box"
    size: Vec3


class PlaneGeometry(BaseModel):
    kind: Literal["plane"] = "plane"
    width: float
    height: float


class SphereGeometry(BaseModel):
    kind: Literal["sphere"] = "sphere"
    radius: float


class CylinderGeometry(BaseModel):
    kind: Literal["cylinder"] = "cylinder"
    radius_top: float
    radius_bottom: float
    height: float


Geometry = Annotated[
    Union[MeshRef, BoxGeometry, PlaneGeometry, SphereGeometry, CylinderGeometry],
    Field(discriminator="kind"),
]


class SceneNode(BaseModel):
    """One renderable object: geometry + material + transform."""

    name: str
    geometry: Geometry
    material: Material
    position: Vec3 = Field(default_factory=Vec3)
    rotation: Vec3 = Field(default_factory=Vec3, description="Euler XYZ, radians")
    scale: Vec3 = Field(default_factory=lambda: Vec3(x=1.0, y=1.0, z=1.0))
    element_uid: Optional[str] = None


class LightKind(str, Enum):
    AMBIENT = "ambient"
    DIRECTIONAL = "directional"
    POINT = "point"


class Light(BaseModel):
    name: str
    kind: LightKind
    color: str
    intensity: float
    position: Optional[Vec3] = None
    distance: Optional[float] = None
    decay: Optional[float] = None


class SceneDescription(BaseModel):
    """Top-level scene handed to the viewer for one frame."""

    version: str = "0.1.0"
    units: str = "feet"
    time_of_day: TimeOfDay
    environment: str
    elapsed: float = 0.0
    footprint: tuple[float, float]
    water_size: tuple[float, float]
    meshes: dict[str, MeshData] = Field(default_factory=dict)
    nodes: list[SceneNode] = Field(default_factory=list)
    lights: list[Light] = Field(default_factory=list)
