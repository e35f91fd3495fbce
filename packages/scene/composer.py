"""Compose a renderer-agnostic scene description for one frame.

``compose_scene`` is a pure function of the pool spec, the placed elements,
the lighting profile and the elapsed time.  It returns plain data; the
viewer decides how to draw it.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

import numpy as np
from shapely.geometry import box
from shapely.geometry.polygon import orient

from packages.core.types import (
    BoxGeometry,
    CylinderGeometry,
    Light,
    LightingProfile,
    LightKind,
    Material,
    MeshRef,
    PlaneGeometry,
    PoolSpec,
    SceneDescription,
    SceneElement,
    SceneNode,
    ShapeKind,
    SphereGeometry,
    Vec3,
)
from packages.geometry.builder import GeneratedSolid, build_pool_solid, mesh_data
from packages.geometry.extrude import extrude_band
from packages.geometry.triangulate import triangulate_polygon
from packages.scene import animation
from packages.scene.catalog import get_catalog_entry
from packages.scene.materials import (
    CAUSTICS_COLOR,
    COPING,
    EQUIPMENT,
    EXCAVATION,
    GROUND,
    HIGHLIGHT_COLOR,
    LED_BULB,
    LED_COLOR,
    get_finish,
    shell_material,
    step_material,
)

logger = logging.getLogger(__name__)

# water surface size rule per shape: ("inset", d) → size - d, ("scale", fx, fz) → size * f
RECT_WATER_INSET = 0.8
WATER_SURFACE: dict[ShapeKind, tuple] = {
    ShapeKind.RECTANGLE: ("inset", RECT_WATER_INSET),
    ShapeKind.INFINITY: ("inset", RECT_WATER_INSET),
    ShapeKind.LAGOON: ("scale", 1.1, 1.1),
    ShapeKind.KIDNEY: ("scale", 0.9, 0.8),
    ShapeKind.L_SHAPED: ("scale", 0.8, 0.8),
    ShapeKind.LAP: ("scale", 1.6, 0.5),
}

_FLAT = Vec3(x=-math.pi / 2, y=0.0, z=0.0)
SHELL_MESH_ID = "pool_shell"
COPING_MESH_ID = "pool_coping"
WATER_MESH_ID = "water_surface"
_LED_CORNERS = ((1, 1), (-1, -1), (1, -1), (-1, 1))

# coping strip around the rim, sitting on the ground below the lowest water level
COPING_WIDTH = 1.0
COPING_HEIGHT = 0.15
# composite water stays at least this far inside the walls (capped at 5% of the short side)
WATER_WALL_MARGIN = 0.4


def water_surface_size(shape: ShapeKind, length: float, width: float) -> tuple[float, float]:
    """Plan size (X, Z) of the water plane for a pool of *length* × *width*."""
    rule = WATER_SURFACE.get(shape, WATER_SURFACE[ShapeKind.RECTANGLE])
    if rule[0] == "inset":
        inset = rule[1]
        # small pools keep at least half their size
        return max(length - inset, length / 2.0), max(width - inset, width / 2.0)
    return length * rule[1], width * rule[2]


def water_outline(solid: GeneratedSolid, water: tuple[float, float]) -> Optional[np.ndarray]:
    """Counter-clockwise (N, 2) water outline for composite pools.

    The *water*-sized rectangle is clipped to the shell's plan, pulled in
    from the walls, so no part of it hangs over ground outside the pool.
    Single-part pools return ``None`` and keep the plain rectangle.
    """
    if len(solid.parts) < 2:
        return None
    fl, fw = solid.footprint
    margin = min(WATER_WALL_MARGIN, 0.05 * min(fl, fw))
    inside = solid.plan().buffer(-margin, join_style="mitre")
    surface = box(-water[0] / 2.0, -water[1] / 2.0, water[0] / 2.0, water[1] / 2.0).intersection(inside)
    if surface.geom_type != "Polygon" or surface.is_empty:
        raise ValueError(f"Water surface of {solid.shape.value} pool is not one region")
    return np.asarray(orient(surface, sign=1.0).exterior.coords)[:-1]


def _flat_mesh(ring: np.ndarray):
    """Upward-facing mesh of a counter-clockwise (x, z) ring at ``y=0``."""
    vertices = np.column_stack((ring[:, 0], np.zeros(len(ring)), ring[:, 1]))
    return mesh_data(vertices, triangulate_polygon(ring)[:, ::-1])


def compose_scene(
    pool: PoolSpec,
    elements: Iterable[SceneElement],
    lighting: LightingProfile,
    elapsed: float = 0.0,
    *,
    ground_size: float = 100.0,
) -> SceneDescription:
    """Build every renderable node and light for one frame."""
    solid = build_pool_solid(pool.shape, pool.length, pool.width, pool.depth)
    fl, fw = solid.footprint
    water = water_surface_size(pool.shape, pool.length, pool.width)
    logger.debug(
        "Composing %s scene: footprint %.2f × %.2f, water %.2f × %.2f",
        pool.shape.value, fl, fw, water[0], water[1],
    )

    meshes = {
        f"{SHELL_MESH_ID}_{i}": part.to_mesh_data()
        for i, part in enumerate(solid.parts)
    }
    meshes[COPING_MESH_ID] = mesh_data(*extrude_band(solid.plan(), COPING_WIDTH, COPING_HEIGHT))
    outline = water_outline(solid, water)
    if outline is not None:
        meshes[WATER_MESH_ID] = _flat_mesh(outline)

    nodes = [_ground(ground_size)]
    nodes.extend(
        _pool_nodes(pool, solid, water, lighting.water_color, elapsed, clipped_water=outline is not None)
    )
    for element in elements:
        nodes.extend(_element_nodes(element))

    lights = _scene_lights(lighting)
    if pool.led_lighting:
        lights.extend(_led_lights(pool.position, fl, fw))

    return SceneDescription(
        time_of_day=lighting.key,
        environment=lighting.environment,
        elapsed=elapsed,
        footprint=(fl, fw),
        water_size=water,
        meshes=meshes,
        nodes=nodes,
        lights=lights,
    )


def _offset(origin: Vec3, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Vec3:
    return Vec3(x=origin.x + x, y=origin.y + y, z=origin.z + z)


def _ground(size: float) -> SceneNode:
    return SceneNode(
        name="ground",
        geometry=PlaneGeometry(width=size, height=size),
        material=GROUND,
        position=Vec3(y=-0.1),
        rotation=_FLAT,
    )


def _pool_nodes(
    pool: PoolSpec,
    solid: GeneratedSolid,
    water: tuple[float, float],
    water_color: str,
    elapsed: float,
    *,
    clipped_water: bool = False,
) -> list[SceneNode]:
    finish = get_finish(pool.finish)
    fl, fw = solid.footprint
    o = pool.position
    nodes: list[SceneNode] = [
        SceneNode(
            name="excavation",
            geometry=BoxGeometry(size=Vec3(x=fl + 3, y=2.5, z=fw + 3)),
            material=EXCAVATION,
            position=_offset(o, y=-1.25),
        )
    ]

    for i, _part in enumerate(solid.parts):
        nodes.append(
            SceneNode(
                name=f"shell_{i}",
                geometry=MeshRef(mesh_id=f"{SHELL_MESH_ID}_{i}"),
                material=shell_material(finish, highlighted=pool.selected),
                position=_offset(o, y=-pool.depth / 2.0),
            )
        )
    nodes.append(
        SceneNode(
            name="coping",
            geometry=MeshRef(mesh_id=COPING_MESH_ID),
            material=COPING,
            position=_offset(o),
        )
    )

    # the clipped water mesh already lies flat, so it spins about Y instead of Z
    if clipped_water:
        water_geometry = MeshRef(mesh_id=WATER_MESH_ID)
        caustics_geometry = water_geometry
        water_rotation = Vec3(y=animation.water_tilt(elapsed))
        caustics_rotation = Vec3(y=animation.caustics_rotation(elapsed))
    else:
        water_geometry = PlaneGeometry(width=water[0], height=water[1])
        caustics_geometry = PlaneGeometry(width=water[0] * 0.9, height=water[1] * 0.9)
        water_rotation = Vec3(x=-math.pi / 2, y=0.0, z=animation.water_tilt(elapsed))
        caustics_rotation = Vec3(x=-math.pi / 2, y=0.0, z=animation.caustics_rotation(elapsed))

    nodes.append(
        SceneNode(
            name="water",
            geometry=water_geometry,
            material=Material(
                color=water_color,
                transparent=True,
                opacity=animation.water_opacity(elapsed),
                roughness=0.0,
                metalness=0.05,
                env_map_intensity=2.5,
                normal_scale=0.1,
            ),
            position=_offset(o, y=animation.water_offset(elapsed)),
            rotation=water_rotation,
        )
    )
    nodes.append(
        SceneNode(
            name="caustics",
            geometry=caustics_geometry,
            material=Material(
                color=CAUSTICS_COLOR,
                transparent=True,
                opacity=animation.caustics_opacity(elapsed),
                blending="additive",
            ),
            position=_offset(o, y=-0.8),
            rotation=caustics_rotation,
        )
    )

    if pool.has_infinity_edge:
        nodes.append(
            SceneNode(
                name="infinity_edge",
                geometry=BoxGeometry(size=Vec3(x=fl, y=0.05, z=0.3)),
                material=Material(color=finish.shell, transparent=True, opacity=0.8),
                position=_offset(o, y=0.15, z=-fw / 2.0 - 0.15),
            )
        )

    nodes.append(
        SceneNode(
            name="steps",
            geometry=BoxGeometry(size=Vec3(x=2.5, y=1.0, z=1.0)),
            material=step_material(finish),
            position=_offset(o, x=fl / 2.0 - 1.25, y=-0.5, z=fw / 2.0 - 0.5),
        )
    )
    nodes.append(
        SceneNode(
            name="equipment",
            geometry=CylinderGeometry(radius_top=0.4, radius_bottom=0.4, height=0.8),
            material=EQUIPMENT,
            position=_offset(o, x=fl / 2.0 + 1.5, y=0.4, z=fw / 2.0 + 1.0),
        )
    )

    if pool.led_lighting:
        for i, (sx, sz) in enumerate(_LED_CORNERS):
            nodes.append(
                SceneNode(
                    name=f"led_{i}",
                    geometry=SphereGeometry(radius=0.08),
                    material=LED_BULB,
                    position=_offset(o, x=sx * fl / 4.0, y=0.1, z=sz * fw / 4.0),
                )
            )

    if pool.spillover_spa:
        nodes.append(
            SceneNode(
                name="spillover_spa",
                geometry=CylinderGeometry(radius_top=3.0, radius_bottom=3.0, height=1.2),
                material=Material(
                    color=finish.shell, roughness=finish.roughness, metalness=finish.metalness
                ),
                position=_offset(o, x=fl / 2.0 + 2.0, y=0.6),
            )
        )
    return nodes


def _led_lights(origin: Vec3, fl: float, fw: float) -> list[Light]:
    return [
        Light(
            name=f"led_light_{i}",
            kind=LightKind.POINT,
            color=LED_COLOR,
            intensity=0.8,
            position=_offset(origin, x=sx * fl / 4.0, y=0.3, z=sz * fw / 4.0),
            distance=8.0,
            decay=2.0,
        )
        for i, (sx, sz) in enumerate(_LED_CORNERS)
    ]


def _scene_lights(lighting: LightingProfile) -> list[Light]:
    return [
        Light(
            name="ambient",
            kind=LightKind.AMBIENT,
            color=lighting.ambient_color,
            intensity=lighting.ambient_intensity,
        ),
        Light(
            name="sun",
            kind=LightKind.DIRECTIONAL,
            color=lighting.sun_color,
            intensity=lighting.sun_intensity,
            position=lighting.sun_position,
        ),
    ]


def _element_nodes(element: SceneElement) -> list[SceneNode]:
    entry = get_catalog_entry(element.element_id)
    highlighted = element.selected or element.dragging
    nodes = []
    for i, part in enumerate(entry.parts):
        material = part.material
        if highlighted:
            material = material.model_copy(update={"color": HIGHLIGHT_COLOR})
        nodes.append(
            SceneNode(
                name=f"{element.element_id}_{i}",
                geometry=part.geometry,
                material=material,
                position=_offset(element.position, part.offset.x, part.offset.y, part.offset.z),
                rotation=part.rotation,
                element_uid=element.uid,
            )
        )
    return nodes
