"""Build the pool solid for a (shape, length, width, depth) request.

The result is a pure function of its four inputs and is memoised on them,
so repeated requests hand back the very same read-only solid.
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from functools import lru_cache

import numpy as np
import trimesh
from shapely.geometry import Polygon
from shapely.ops import unary_union

from packages.core.types import BBox, MeshData, ShapeKind, Vec3
from packages.geometry.bezier import fit_to_envelope, sample_outline
from packages.geometry.extrude import Bevel, box_ring, corner_ring, extrude_outline
from packages.geometry.profiles import Construction, ShapeProfile, get_shape_profile

logger = logging.getLogger(__name__)

# bevel never eats more than this share of the plan size / depth
_MAX_BEVEL_PLAN = 0.05
_MAX_BEVEL_DEPTH = 0.25


@dataclass(frozen=True)
class SolidPart:
    """One closed triangle mesh and the (N, 2) plan outline it was extruded from."""

    name: str
    vertices: np.ndarray  # (V, 3) float64, read-only
    faces: np.ndarray     # (F, 3) int64, read-only
    outline: np.ndarray   # (N, 2) float64 in (x, z)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return len(self.faces)

    def to_trimesh(self) -> trimesh.Trimesh:
        return trimesh.Trimesh(vertices=np.array(self.vertices), faces=np.array(self.faces), process=False)

    def to_mesh_data(self) -> MeshData:
        return mesh_data(self.vertices, self.faces)


def mesh_data(vertices: np.ndarray, faces: np.ndarray) -> MeshData:
    return MeshData(
        vertex_count=len(vertices),
        face_count=len(faces),
        positions=np.asarray(vertices).astype(np.float32).ravel().tolist(),
        indices=np.asarray(faces).ravel().tolist(),
    )


@dataclass(frozen=True)
class GeneratedSolid:
    """The pool shell: one mesh, or a flush group of meshes for composite shapes."""

    shape: ShapeKind
    length: float
    width: float
    depth: float
    parts: tuple[SolidPart, ...]

    @property
    def vertex_count(self) -> int:
        return sum(p.vertex_count for p in self.parts)

    @property
    def face_count(self) -> int:
        return sum(p.face_count for p in self.parts)

    def extents(self) -> tuple[np.ndarray, np.ndarray]:
        stacked = np.vstack([p.vertices for p in self.parts])
        return stacked.min(axis=0), stacked.max(axis=0)

    @property
    def footprint(self) -> tuple[float, float]:
        """Plan envelope as (X extent, Z extent)."""
        mins, maxs = self.extents()
        return float(maxs[0] - mins[0]), float(maxs[2] - mins[2])

    @property
    def bounds(self) -> BBox:
        mins, maxs = self.extents()
        return BBox(
            min=Vec3(x=float(mins[0]), y=float(mins[1]), z=float(mins[2])),
            max=Vec3(x=float(maxs[0]), y=float(maxs[1]), z=float(maxs[2])),
        )

    def plan(self) -> Polygon:
        """Outline of the whole shell seen from above, in (x, z)."""
        merged = unary_union([Polygon(p.outline) for p in self.parts])
        if merged.geom_type != "Polygon":
            raise ValueError(f"{self.shape.value} parts do not form one outline")
        return merged

    def merged(self) -> tuple[np.ndarray, np.ndarray]:
        """All parts concatenated into one vertex / face array pair."""
        vertices = []
        faces = []
        offset = 0
        for part in self.parts:
            vertices.append(part.vertices)
            faces.append(part.faces + offset)
            offset += part.vertex_count
        return np.vstack(vertices), np.vstack(faces)


def validate_dimensions(length: float, width: float, depth: float) -> None:
    """Raise ``ValueError`` unless every dimension is finite and positive."""
    for name, value in (("length", length), ("width", width), ("depth", depth)):
        if (
            isinstance(value, bool)
            or not isinstance(value, numbers.Real)
            or not math.isfinite(value)
            or value <= 0
        ):
            raise ValueError(f"Pool {name} must be a finite number > 0, got {value!r}")


def build_pool_solid(
    shape: ShapeKind | str,
    length: float,
    width: float,
    depth: float,
) -> GeneratedSolid:
    """Return the closed solid for *shape* sized *length* × *width* × *depth*.

    Unknown shapes fall back to the rectangle.  Dimensions must already be
    validated; a non-positive or non-finite value raises ``ValueError``.
    """
    validate_dimensions(length, width, depth)
    profile = get_shape_profile(shape)
    return _build_cached(profile.key, float(length), float(width), float(depth))


@lru_cache(maxsize=256)
def _build_cached(kind: ShapeKind, length: float, width: float, depth: float) -> GeneratedSolid:
    profile = get_shape_profile(kind)
    logger.info(
        "Generating %s solid (%.2f × %.2f × %.2f)", kind.value, length, width, depth
    )
    if profile.construction is Construction.EXTRUDED:
        parts = (_extruded_part(profile, length, width, depth),)
    elif profile.construction is Construction.COMPOSITE:
        parts = _composite_parts(profile, length, width, depth)
    else:
        parts = (_prism_part(profile, length, width, depth),)

    for part in parts:
        _check_closed(kind, part)
    solid = GeneratedSolid(
        shape=kind, length=length, width=width, depth=depth, parts=parts
    )
    logger.debug(
        "Built %s: %d parts, %d vertices, %d faces",
        kind.value, len(parts), solid.vertex_count, solid.face_count,
    )
    return solid


def _check_closed(kind: ShapeKind, part: SolidPart) -> None:
    mesh = part.to_trimesh()
    if not (mesh.is_watertight and mesh.is_winding_consistent) or mesh.volume <= 0:
        logger.error("%s part %s is not a closed outward-facing mesh", kind.value, part.name)
        raise RuntimeError(f"Generated {kind.value} part {part.name} is not a closed solid")


def _prism_part(profile: ShapeProfile, length: float, width: float, depth: float) -> SolidPart:
    fl = length * profile.footprint[0]
    fw = width * profile.footprint[1]
    ring = box_ring(fl, fw)
    vertices, faces = extrude_outline(ring, depth)
    return SolidPart(name="shell", vertices=vertices, faces=faces, outline=ring)


def _extruded_part(profile: ShapeProfile, length: float, width: float, depth: float) -> SolidPart:
    ring = sample_outline(profile.start, profile.segments, (length, width))
    envelope = (length * profile.footprint[0], width * profile.footprint[1])
    ring = fit_to_envelope(ring, envelope)

    bevel = None
    if profile.bevel is not None:
        bevel = Bevel(
            radius=min(profile.bevel.radius, _MAX_BEVEL_PLAN * min(envelope)),
            height=min(profile.bevel.height, _MAX_BEVEL_DEPTH * depth),
            segments=profile.bevel.segments,
        )
    vertices, faces = extrude_outline(ring, depth, bevel=bevel)
    return SolidPart(name="shell", vertices=vertices, faces=faces, outline=ring)


def _composite_parts(
    profile: ShapeProfile, length: float, width: float, depth: float
) -> tuple[SolidPart, ...]:
    fl = length * profile.footprint[0]
    fw = width * profile.footprint[1]
    parts = []
    for i, (u0, v0, u1, v1) in enumerate(profile.parts):
        # fractions → centred footprint coordinates; shared edges come out bit-identical
        x0, x1 = u0 * fl - fl / 2.0, u1 * fl - fl / 2.0
        z0, z1 = v0 * fw - fw / 2.0, v1 * fw - fw / 2.0
        ring = corner_ring(x0, z0, x1, z1)
        vertices, faces = extrude_outline(ring, depth)
        parts.append(SolidPart(name=f"shell_{i}", vertices=vertices, faces=faces, outline=ring))
    return tuple(parts)


def clear_solid_cache() -> None:
    _build_cached.cache_clear()
