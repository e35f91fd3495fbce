"""Triangulation of simple polygons through trimesh's earcut engine."""

from __future__ import annotations

import numpy as np
import trimesh
from shapely.geometry import Polygon

from packages.geometry.bezier import signed_area


def triangulate_polygon(ring: np.ndarray) -> np.ndarray:
    """Triangulate a simple counter-clockwise polygon.

    Returns an (N-2, 3) int array of indices into *ring*, each triangle
    counter-clockwise.  Earcut is deterministic, so the output depends only
    on the input ring.
    """
    ring = np.asarray(ring, dtype=np.float64)
    n = len(ring)
    if n < 3:
        raise ValueError(f"Polygon needs at least 3 vertices, got {n}")
    if signed_area(ring) <= 0:
        raise ValueError("Polygon must be counter-clockwise with non-zero area")
    polygon = Polygon(ring)
    if not polygon.is_valid:
        raise ValueError("Polygon is not simple")

    vertices, faces = trimesh.creation.triangulate_polygon(polygon, engine="earcut")
    # earcut keeps the exterior order; a closing duplicate maps back onto 0
    if len(vertices) < n or not np.allclose(vertices[:n], ring):
        raise ValueError("Triangulation reordered the polygon vertices")
    faces = np.asarray(faces, dtype=np.int64) % n
    faces = faces[(faces[:, 0] != faces[:, 1]) & (faces[:, 1] != faces[:, 2]) & (faces[:, 0] != faces[:, 2])]

    a, b, c = ring[faces[:, 0]], ring[faces[:, 1]], ring[faces[:, 2]]
    cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
    faces[cross < 0] = faces[cross < 0][:, ::-1]
    return np.ascontiguousarray(faces)
