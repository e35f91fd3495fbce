"""Periodic water effects as pure functions of elapsed time (seconds)."""

from __future__ import annotations

import math

WATER_LEVEL = 0.2
WATER_OPACITY = 0.85
CAUSTICS_OPACITY = 0.15


def water_offset(t: float) -> float:
    """Height of the water surface above the coping line."""
    return WATER_LEVEL + math.sin(t * 0.3) * 0.03 + math.sin(t * 0.7) * 0.01


def water_tilt(t: float) -> float:
    return math.sin(t * 0.1) * 0.002


def water_opacity(t: float) -> float:
    return WATER_OPACITY + math.sin(t * 1.5) * 0.05


def caustics_rotation(t: float) -> float:
    return t * 0.05


def caustics_opacity(t: float) -> float:
    return CAUSTICS_OPACITY + math.sin(t * 2.0) * 0.05
