"""Write generated solids to disk.

Supported formats
-----------------
* **PLY** – binary vertex + face elements via the ``plyfile`` library.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from plyfile import PlyData, PlyElement

from packages.geometry.builder import GeneratedSolid

logger = logging.getLogger(__name__)


def solid_to_ply(solid: GeneratedSolid, *, text: bool = False) -> PlyData:
    """Pack every part of *solid* into a single PLY document."""
    vertices, faces = solid.merged()

    vertex = np.empty(len(vertices), dtype=[("x", "f4"), ("y", "f4"), ("z", "f4")])
    vertex["x"] = vertices[:, 0]
    vertex["y"] = vertices[:, 1]
    vertex["z"] = vertices[:, 2]

    face = np.empty(len(faces), dtype=[("vertex_indices", "i4", (3,))])
    face["vertex_indices"] = faces.astype(np.int32)

    return PlyData(
        [PlyElement.describe(vertex, "vertex"), PlyElement.describe(face, "face")],
        text=text,
        comments=[
            f"pool shape={solid.shape.value}",
            f"size={solid.length:g}x{solid.width:g}x{solid.depth:g} ft",
        ],
    )


def write_ply(solid: GeneratedSolid, path: str | Path, *, text: bool = False) -> Path:
    """Write *solid* as a PLY file and return the path."""
    path = Path(path)
    solid_to_ply(solid, text=text).write(str(path))
    logger.info(
        "Wrote %s solid (%d vertices, %d faces) → %s",
        solid.shape.value, solid.vertex_count, solid.face_count, path,
    )
    return path


def read_ply_mesh(path: str | Path) -> tuple[np.ndarray, np.ndarray]:
    """Read back the (V, 3) vertices and (F, 3) faces of a PLY mesh."""
    ply = PlyData.read(str(path))
    vertex = ply["vertex"]
    vertices = np.column_stack(
        [np.asarray(vertex[axis], dtype=np.float64) for axis in ("x", "y", "z")]
    )
    faces = np.vstack(ply["face"]["vertex_indices"]).astype(np.int64)
    return vertices, faces
