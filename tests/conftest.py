"""Shared test fixtures – pool specs, sessions and a fresh API client."""

from __future__ import annotations

import pytest

from packages.core.types import PoolSpec, ShapeKind
from packages.geometry.builder import clear_solid_cache
from packages.session.state import DesignSession

ALL_SHAPES = list(ShapeKind)

# (length, width, depth) in feet: typical, large, tiny and lopsided pools
SIZES = [
    (16.0, 8.0, 6.0),
    (24.0, 12.0, 6.0),
    (50.0, 20.0, 10.0),
    (3.0, 2.0, 1.0),
    (40.0, 6.0, 4.0),
]


@pytest.fixture(autouse=True)
def _fresh_solid_cache():
    """Every test starts without memoised solids."""
    clear_solid_cache()
    yield
    clear_solid_cache()


@pytest.fixture()
def rectangle_pool() -> PoolSpec:
    return PoolSpec(length=16, width=8, depth=6, shape="rectangle", finish="pebbleTec")


@pytest.fixture()
def lagoon_pool() -> PoolSpec:
    return PoolSpec(length=24, width=12, depth=6, shape="lagoon")


@pytest.fixture()
def session() -> DesignSession:
    return DesignSession()
