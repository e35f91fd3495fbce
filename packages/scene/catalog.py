"""Catalog of backyard props that can be placed around the pool.

Each entry is built from primitive parts positioned relative to the
element's ground position.  ``existing`` entries are structures detected by
the site analysis rather than things the customer buys.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from packages.core.types import (
    BoxGeometry,
    CylinderGeometry,
    ElementCategory,
    Material,
    PlaneGeometry,
    SphereGeometry,
    Vec3,
)


@dataclass(frozen=True)
class ElementPart:
    geometry: BoxGeometry | CylinderGeometry | PlaneGeometry | SphereGeometry
    offset: Vec3
    material: Material
    rotation: Vec3 = field(default_factory=Vec3)


@dataclass(frozen=True)
class CatalogEntry:
    key: str
    name: str
    category: ElementCategory
    cost: float
    parts: tuple[ElementPart, ...]


def _box(x: float, y: float, z: float) -> BoxGeometry:
    return BoxGeometry(size=Vec3(x=x, y=y, z=z))


def _at(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Vec3:
    return Vec3(x=x, y=y, z=z)


_CONCRETE = Material(color="#c8c2b8", roughness=0.85)
_TRAVERTINE = Material(color="#e7d8c0", roughness=0.6)
_WOOD = Material(color="#8b5a2b", roughness=0.75)
_STONE = Material(color="#7c7c7c", roughness=0.9)
_STEEL = Material(color="#9ca3af", roughness=0.3, metalness=0.7)
_FOLIAGE = Material(color="#2f7d32", roughness=0.8)
_BARK = Material(color="#5b3a1e", roughness=0.9)
_FLOWERS = Material(color="#e85d9a", roughness=0.7)
_MULCH = Material(color="#4e342e", roughness=0.95)
_HOUSE = Material(color="#b45309", roughness=0.8)
_FENCE = Material(color="#a16207", roughness=0.8)

_FLAT = Vec3(x=-1.5707963267948966, y=0.0, z=0.0)

CATALOG: dict[str, CatalogEntry] = {
    # ── hardscape ────────────────────────────────────────────────────
    "patio": CatalogEntry(
        "patio", "Paver Patio", ElementCategory.HARDSCAPE, 6500,
        (ElementPart(_box(12, 0.3, 10), _at(y=0.15), _CONCRETE),),
    ),
    "travertineDeck": CatalogEntry(
        "travertineDeck", "Travertine Deck", ElementCategory.HARDSCAPE, 9500,
        (ElementPart(_box(16, 0.25, 6), _at(y=0.125), _TRAVERTINE),),
    ),
    "woodDeck": CatalogEntry(
        "woodDeck", "Wood Deck", ElementCategory.HARDSCAPE, 8000,
        (ElementPart(_box(12, 1.0, 8), _at(y=0.5), _WOOD),),
    ),
    "firePit": CatalogEntry(
        "firePit", "Fire Pit", ElementCategory.HARDSCAPE, 3500,
        (
            ElementPart(CylinderGeometry(radius_top=2, radius_bottom=2.2, height=1.2), _at(y=0.6), _STONE),
            ElementPart(
                CylinderGeometry(radius_top=1.4, radius_bottom=1.4, height=0.1),
                _at(y=1.25),
                Material(color="#f97316", emissive="#f97316", emissive_intensity=0.8),
            ),
        ),
    ),
    "pergola": CatalogEntry(
        "pergola", "Pergola", ElementCategory.HARDSCAPE, 7500,
        (
            ElementPart(_box(0.5, 9, 0.5), _at(-5, 4.5, -4), _WOOD),
            ElementPart(_box(0.5, 9, 0.5), _at(5, 4.5, -4), _WOOD),
            ElementPart(_box(0.5, 9, 0.5), _at(-5, 4.5, 4), _WOOD),
            ElementPart(_box(0.5, 9, 0.5), _at(5, 4.5, 4), _WOOD),
            ElementPart(_box(11, 0.4, 9), _at(y=9.2), _WOOD),
        ),
    ),
    "outdoorKitchen": CatalogEntry(
        "outdoorKitchen", "Outdoor Kitchen", ElementCategory.HARDSCAPE, 15000,
        (
            ElementPart(_box(10, 3, 2.5), _at(y=1.5), _STONE),
            ElementPart(_box(3, 0.2, 2), _at(x=-2, y=3.1), _STEEL),
        ),
    ),
    # ── landscape ────────────────────────────────────────────────────
    "palmTree": CatalogEntry(
        "palmTree", "Palm Tree", ElementCategory.LANDSCAPE, 1200,
        (
            ElementPart(CylinderGeometry(radius_top=0.3, radius_bottom=0.5, height=14), _at(y=7), _BARK),
            ElementPart(SphereGeometry(radius=3), _at(y=14.5), _FOLIAGE),
        ),
    ),
    "shadeTree": CatalogEntry(
        "shadeTree", "Shade Tree", ElementCategory.LANDSCAPE, 900,
        (
            ElementPart(CylinderGeometry(radius_top=0.5, radius_bottom=0.6, height=8), _at(y=4), _BARK),
            ElementPart(SphereGeometry(radius=4), _at(y=9), _FOLIAGE),
        ),
    ),
    "shrub": CatalogEntry(
        "shrub", "Shrub", ElementCategory.LANDSCAPE, 150,
        (ElementPart(SphereGeometry(radius=1.2), _at(y=1.0), _FOLIAGE),),
    ),
    "hedge": CatalogEntry(
        "hedge", "Privacy Hedge", ElementCategory.LANDSCAPE, 1800,
        (ElementPart(_box(12, 5, 2), _at(y=2.5), _FOLIAGE),),
    ),
    "flowerBed": CatalogEntry(
        "flowerBed", "Flower Bed", ElementCategory.LANDSCAPE, 600,
        (
            ElementPart(_box(8, 0.6, 3), _at(y=0.3), _MULCH),
            ElementPart(_box(7.5, 0.5, 2.5), _at(y=0.85), _FLOWERS),
        ),
    ),
    "lawn": CatalogEntry(
        "lawn", "Sod Lawn", ElementCategory.LANDSCAPE, 2000,
        (ElementPart(PlaneGeometry(width=20, height=15), _at(y=0.02), _FOLIAGE, rotation=_FLAT),),
    ),
    # ── existing structures (from site analysis) ─────────────────────
    "house": CatalogEntry(
        "house", "House", ElementCategory.EXISTING, 0,
        (ElementPart(_box(20, 10, 15), _at(y=5), _HOUSE),),
    ),
    "fence": CatalogEntry(
        "fence", "Fence", ElementCategory.EXISTING, 0,
        (ElementPart(_box(60, 6, 0.5), _at(y=3), _FENCE),),
    ),
    "tree": CatalogEntry(
        "tree", "Existing Tree", ElementCategory.EXISTING, 0,
        (
            ElementPart(_box(1, 8, 1), _at(y=4), _BARK),
            ElementPart(_box(6, 6, 6), _at(y=8), _FOLIAGE),
        ),
    ),
    "existingPatio": CatalogEntry(
        "existingPatio", "Existing Patio", ElementCategory.EXISTING, 0,
        (ElementPart(_box(12, 0.3, 10), _at(y=0.15), _CONCRETE),),
    ),
}

# detected feature type → catalog key
FEATURE_ELEMENTS = {
    "house": "house",
    "fence": "fence",
    "tree": "tree",
    "patio": "existingPatio",
}


def get_catalog_entry(key: str) -> CatalogEntry:
    """Look up a catalog entry.  Raises ``KeyError`` for unknown keys."""
    try:
        return CATALOG[key]
    except KeyError:
        raise KeyError(f"Unknown scene element '{key}'") from None
