"""Tests for the static lookup tables and their fallbacks."""

from __future__ import annotations

import pytest

from packages.core.types import (
    ElementCategory,
    FinishKind,
    PoolSpec,
    ShapeKind,
    TimeOfDay,
)
from packages.geometry.profiles import get_shape_profile
from packages.scene.catalog import CATALOG, FEATURE_ELEMENTS, get_catalog_entry
from packages.scene.lighting import LIGHTING, get_lighting
from packages.scene.materials import FINISHES, get_finish


class TestFinishes:
    def test_every_finish_defined(self):
        assert set(FINISHES) == set(FinishKind)

    @pytest.mark.parametrize(
        "key, color, roughness, metalness",
        [
            ("plaster", "#f8fafc", 0.3, 0.0),
            ("pebbleTec", "#4a7c59", 0.8, 0.0),
            ("glassTile", "#1e40af", 0.1, 0.4),
            ("quartzite", "#6b7280", 0.4, 0.2),
            ("fiberglass", "#0ea5e9", 0.2, 0.1),
        ],
    )
    def test_values(self, key, color, roughness, metalness):
        finish = get_finish(key)
        assert (finish.shell, finish.roughness, finish.metalness) == (color, roughness, metalness)

    def test_unknown_falls_back_to_plaster(self):
        assert get_finish("gold").key is FinishKind.PLASTER


class TestLightingTable:
    def test_every_time_defined(self):
        assert set(LIGHTING) == set(TimeOfDay)

    def test_unknown_falls_back_to_sunset(self):
        assert get_lighting("midnight").key is TimeOfDay.SUNSET

    def test_night_is_darkest(self):
        night = get_lighting("night")
        assert all(
            night.sun_intensity <= profile.sun_intensity for profile in LIGHTING.values()
        )


class TestShapeProfiles:
    def test_unknown_falls_back_to_rectangle(self):
        assert get_shape_profile("unknownXYZ").key is ShapeKind.RECTANGLE

    @pytest.mark.parametrize(
        "shape, surcharge",
        [("rectangle", 0), ("lagoon", 5000), ("kidney", 3000), ("infinity", 15000), ("lShaped", 4000), ("lap", 2000)],
    )
    def test_surcharge(self, shape, surcharge):
        assert get_shape_profile(shape).surcharge == surcharge


class TestPoolSpec:
    def test_defaults(self):
        pool = PoolSpec()
        assert (pool.length, pool.width, pool.depth) == (16.0, 8.0, 6.0)
        assert pool.shape is ShapeKind.RECTANGLE
        assert pool.led_lighting

    def test_unknown_keys_fall_back(self):
        pool = PoolSpec(shape="unknownXYZ", finish="gold")
        assert pool.shape is ShapeKind.RECTANGLE
        assert pool.finish is FinishKind.PLASTER

    @pytest.mark.parametrize("field", ["length", "width", "depth"])
    @pytest.mark.parametrize("value", [0, -3, float("nan"), float("inf")])
    def test_rejects_bad_dimensions(self, field, value):
        with pytest.raises(ValueError):
            PoolSpec(**{field: value})

    def test_is_frozen(self):
        pool = PoolSpec()
        with pytest.raises(ValueError):
            pool.length = 20


class TestCatalog:
    def test_existing_structures_are_free(self):
        for entry in CATALOG.values():
            if entry.category is ElementCategory.EXISTING:
                assert entry.cost == 0

    def test_feature_mapping_points_at_entries(self):
        for element_id in FEATURE_ELEMENTS.values():
            assert get_catalog_entry(element_id).category is ElementCategory.EXISTING

    def test_unknown_entry(self):
        with pytest.raises(KeyError, match="trampoline"):
            get_catalog_entry("trampoline")
