"""Pool finish library and the fixed materials used around the pool."""

from __future__ import annotations

from packages.core.types import FinishKind, FinishProfile, Material, coerce_enum

FINISHES: dict[FinishKind, FinishProfile] = {
    FinishKind.PLASTER: FinishProfile(
        key=FinishKind.PLASTER,
        name="White Plaster",
        shell="#f8fafc",
        roughness=0.3,
        metalness=0.0,
        normal_scale=0.2,
        cost=8000,
        durability="15-20 years",
        description="Classic smooth finish, easiest maintenance",
    ),
    FinishKind.PEBBLE_TEC: FinishProfile(
        key=FinishKind.PEBBLE_TEC,
        name="Pebble Tec",
        shell="#4a7c59",
        roughness=0.8,
        metalness=0.0,
        normal_scale=0.6,
        cost=12000,
        durability="20-25 years",
        description="Natural pebble aggregate, slip-resistant",
    ),
    FinishKind.GLASS_TILE: FinishProfile(
        key=FinishKind.GLASS_TILE,
        name="Glass Tile",
        shell="#1e40af",
        roughness=0.1,
        metalness=0.4,
        normal_scale=0.1,
        cost=18000,
        durability="25+ years",
        description="Premium glass mosaic, stunning reflections",
    ),
    FinishKind.QUARTZITE: FinishProfile(
        key=FinishKind.QUARTZITE,
        name="Quartzite",
        shell="#6b7280",
        roughness=0.4,
        metalness=0.2,
        normal_scale=0.3,
        cost=15000,
        durability="20+ years",
        description="Natural stone finish, luxury appearance",
    ),
    FinishKind.FIBERGLASS: FinishProfile(
        key=FinishKind.FIBERGLASS,
        name="Fiberglass",
        shell="#0ea5e9",
        roughness=0.2,
        metalness=0.1,
        normal_scale=0.1,
        cost=6000,
        durability="15-20 years",
        description="Smooth gel coat, quick installation",
    ),
}

DEFAULT_FINISH = FinishKind.PLASTER

HIGHLIGHT_COLOR = "#fbbf24"


def get_finish(key: FinishKind | str) -> FinishProfile:
    """Look up a finish; unknown keys fall back to white plaster."""
    return FINISHES[coerce_enum(FinishKind, key, DEFAULT_FINISH)]


def shell_material(finish: FinishProfile, *, highlighted: bool = False) -> Material:
    return Material(
        color=HIGHLIGHT_COLOR if highlighted else finish.shell,
        roughness=finish.roughness,
        metalness=finish.metalness,
        normal_scale=finish.normal_scale,
    )


def step_material(finish: FinishProfile) -> Material:
    return Material(
        color=finish.shell,
        roughness=min(finish.roughness + 0.2, 1.0),
        metalness=finish.metalness,
    )


COPING = Material(color="#d4af9a", roughness=0.7, metalness=0.1, normal_scale=0.4)
EXCAVATION = Material(color="#654321", roughness=0.95, normal_scale=0.3)
EQUIPMENT = Material(color="#4a5568", roughness=0.2, metalness=0.8)
CAUSTICS_COLOR = "#87ceeb"
LED_COLOR = "#4a90e2"
LED_BULB = Material(color="#ffffff", emissive=LED_COLOR, emissive_intensity=1.2)
GROUND = Material(color="#4a7c3a", roughness=0.9)
