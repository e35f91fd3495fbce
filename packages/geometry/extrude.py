"""Extrude 2D outlines into closed triangle meshes.

Coordinates: the outline's (u, v) plane maps to the XZ ground plane (u → X,
v → Z) and the extrusion runs along +Y.  Faces wind counter-clockwise when
seen from outside the solid.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import shapely
import trimesh
from shapely.geometry import Polygon

from packages.geometry.bezier import signed_area
from packages.geometry.triangulate import triangulate_polygon


@dataclass(frozen=True)
class Bevel:
    """Rounded top rim: ``radius`` inset in plan, ``height`` drop, ``segments`` rings."""

    radius: float
    height: float
    segments: int


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


def offset_ring(ring: np.ndarray, distance: float) -> np.ndarray:
    """Move every vertex of a counter-clockwise ring *distance* inwards.

    The inset outline is a mitred negative buffer of the ring; each vertex is
    then snapped onto that outline, so the ring keeps its vertex count and
    order and square corners land on the mitred corners.
    """
    if distance == 0:
        return ring.copy()
    inset = Polygon(ring).buffer(-distance, join_style="mitre")
    if inset.is_empty or inset.geom_type != "Polygon":
        raise ValueError(f"An inset of {distance} collapses the outline")
    boundary = inset.exterior
    along = shapely.line_locate_point(boundary, shapely.points(ring))
    return shapely.get_coordinates(shapely.line_interpolate_point(boundary, along))


def extrude_outline(
    ring: np.ndarray,
    depth: float,
    *,
    bevel: Bevel | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Extrude a counter-clockwise (N, 2) ring from ``y=-depth/2`` to ``y=depth/2``.

    With a *bevel*, the top ``bevel.height`` of the wall rolls inward along
    a quarter circle, so the plan footprint never exceeds the input ring.

    Returns ``(vertices, faces)`` as read-only (V, 3) float and (F, 3) int
    arrays.
    """
    if depth <= 0 or not math.isfinite(depth):
        raise ValueError(f"Extrusion depth must be positive and finite, got {depth}")
    if signed_area(ring) <= 0:
        ring = ring[::-1].copy()

    n = len(ring)
    bottom = -depth / 2.0
    top = depth / 2.0

    # (inset, y) for each ring from the floor up
    levels: list[tuple[float, float]] = [(0.0, bottom)]
    if bevel is None or bevel.segments < 1:
        levels.append((0.0, top))
    else:
        rim = top - bevel.height
        levels.append((0.0, rim))
        for k in range(1, bevel.segments + 1):
            theta = (k / bevel.segments) * (math.pi / 2.0)
            levels.append((bevel.radius * (1.0 - math.cos(theta)), rim + bevel.height * math.sin(theta)))

    rings_3d = []
    for inset, y in levels:
        r2 = offset_ring(ring, inset)
        rings_3d.append(np.column_stack((r2[:, 0], np.full(n, y), r2[:, 1])))
    vertices = np.vstack(rings_3d)

    faces: list[np.ndarray] = []

    # floor cap faces -Y: counter-clockwise in (u, v)
    faces.append(triangulate_polygon(ring))

    idx = np.arange(n)
    nxt = (idx + 1) % n
    for r in range(len(levels) - 1):
        b_i = r * n + idx
        b_j = r * n + nxt
        t_i = (r + 1) * n + idx
        t_j = (r + 1) * n + nxt
        faces.append(np.column_stack((b_i, t_j, b_j)))
        faces.append(np.column_stack((b_i, t_i, t_j)))

    # top cap faces +Y: reversed winding
    top_start = (len(levels) - 1) * n
    top_ring = offset_ring(ring, levels[-1][0])
    top_tris = triangulate_polygon(top_ring) + top_start
    faces.append(top_tris[:, ::-1])

    all_faces = np.ascontiguousarray(np.vstack(faces).astype(np.int64))
    return _readonly(vertices.astype(np.float64)), _readonly(all_faces)


def extrude_band(plan, width: float, height: float) -> tuple[np.ndarray, np.ndarray]:
    """Closed mesh of the strip *width* wide running around the outside of *plan*.

    *plan* is a shapely polygon in (u, v); the strip rises from ``y=0`` to
    ``y=height`` and never covers the inside of *plan*.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Band width and height must be positive, got {width}, {height}")
    band = plan.buffer(width, join_style="mitre").difference(plan)
    if band.geom_type != "Polygon":
        raise ValueError(f"Band around the outline is not a single polygon: {band.geom_type}")
    flat_vertices, flat_faces = trimesh.creation.triangulate_polygon(band, engine="earcut")
    mesh = trimesh.creation.extrude_triangulation(flat_vertices, flat_faces, height)
    # (u, v, h) → (u, h, v) mirrors the solid, so the winding flips with it
    vertices = np.ascontiguousarray(mesh.vertices[:, [0, 2, 1]], dtype=np.float64)
    faces = np.ascontiguousarray(mesh.faces[:, ::-1], dtype=np.int64)
    return _readonly(vertices), _readonly(faces)


def box_ring(length: float, width: float, origin: tuple[float, float] = (0.0, 0.0)) -> np.ndarray:
    """Counter-clockwise rectangle ring of *length* × *width* centred on *origin*."""
    cx, cz = origin
    hl = length / 2.0
    hw = width / 2.0
    return corner_ring(cx - hl, cz - hw, cx + hl, cz + hw)


def corner_ring(x0: float, z0: float, x1: float, z1: float) -> np.ndarray:
    """Counter-clockwise rectangle ring spanning the two corners exactly."""
    return np.array([[x0, z0], [x1, z0], [x1, z1], [x0, z1]], dtype=np.float64)
