"""Shape profile table: how each pool silhouette is constructed.

Outline control points are fractions of (length, width), so a silhouette
scales with the requested size.  ``footprint`` is the plan envelope of the
generated solid as multiples of (length, width).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from packages.core.types import ShapeKind, coerce_enum
from packages.geometry.bezier import CurveTo, LineTo
from packages.geometry.extrude import Bevel

logger = logging.getLogger(__name__)


class Construction(str, Enum):
    PRISM = "prism"            # axis-aligned box
    EXTRUDED = "extruded"      # Bezier outline swept along the depth axis
    COMPOSITE = "composite"    # several flush prisms


@dataclass(frozen=True)
class ShapeProfile:
    key: ShapeKind
    name: str
    description: str
    construction: Construction
    footprint: tuple[float, float]
    surcharge: float = 0.0
    start: tuple[float, float] = (0.0, 0.0)
    segments: tuple[LineTo | CurveTo, ...] = ()
    bevel: Bevel | None = None
    # COMPOSITE parts as (u0, v0, u1, v1) fractions of (length, width)
    parts: tuple[tuple[float, float, float, float], ...] = ()


L_SPLIT_U = 0.6
L_SPLIT_V = 0.4

SHAPE_PROFILES: dict[ShapeKind, ShapeProfile] = {
    ShapeKind.RECTANGLE: ShapeProfile(
        key=ShapeKind.RECTANGLE,
        name="Rectangle",
        description="Classic geometric pool",
        construction=Construction.PRISM,
        footprint=(1.0, 1.0),
    ),
    ShapeKind.LAGOON: ShapeProfile(
        key=ShapeKind.LAGOON,
        name="Lagoon",
        description="Organic curved pool",
        construction=Construction.EXTRUDED,
        footprint=(1.2, 1.2),
        surcharge=5000.0,
        start=(0.0, 0.0),
        segments=(
            CurveTo((0.3, -0.2), (0.7, -0.2), (1.0, 0.0)),
            CurveTo((1.2, 0.3), (1.2, 0.7), (1.0, 1.0)),
            CurveTo((0.7, 1.2), (0.3, 1.2), (0.0, 1.0)),
            CurveTo((-0.2, 0.7), (-0.2, 0.3), (0.0, 0.0)),
        ),
        bevel=Bevel(radius=0.3, height=0.2, segments=8),
    ),
    ShapeKind.KIDNEY: ShapeProfile(
        key=ShapeKind.KIDNEY,
        name="Kidney",
        description="Traditional curved shape",
        construction=Construction.EXTRUDED,
        footprint=(1.0, 1.0),
        surcharge=3000.0,
        start=(0.0, 0.2),
        segments=(
            CurveTo((0.6, -0.1), (1.4, 0.4), (0.9, 0.8)),
            CurveTo((0.4, 1.1), (0.1, 0.9), (0.0, 0.6)),
            CurveTo((-0.1, 0.4), (0.0, 0.2), (0.0, 0.2)),
        ),
        bevel=Bevel(radius=0.2, height=0.1, segments=6),
    ),
    ShapeKind.INFINITY: ShapeProfile(
        key=ShapeKind.INFINITY,
        name="Infinity",
        description="Vanishing edge pool",
        construction=Construction.PRISM,
        footprint=(1.0, 1.0),
        surcharge=15000.0,
    ),
    ShapeKind.L_SHAPED: ShapeProfile(
        key=ShapeKind.L_SHAPED,
        name="L-Shaped",
        description="Corner design pool",
        construction=Construction.COMPOSITE,
        footprint=(1.0, 1.0),
        surcharge=4000.0,
        parts=(
            (0.0, 0.0, L_SPLIT_U, 1.0),
            (L_SPLIT_U, L_SPLIT_V, 1.0, 1.0),
        ),
    ),
    ShapeKind.LAP: ShapeProfile(
        key=ShapeKind.LAP,
        name="Lap Pool",
        description="Long swimming pool",
        construction=Construction.PRISM,
        footprint=(1.8, 0.6),
        surcharge=2000.0,
    ),
}

DEFAULT_SHAPE = ShapeKind.RECTANGLE


def get_shape_profile(key: ShapeKind | str) -> ShapeProfile:
    """Look up a profile; unknown keys fall back to the rectangle."""
    kind = coerce_enum(ShapeKind, key, DEFAULT_SHAPE)
    return SHAPE_PROFILES[kind]
