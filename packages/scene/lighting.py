"""Time-of-day lighting profiles."""

from __future__ import annotations

from packages.core.types import LightingProfile, TimeOfDay, Vec3, coerce_enum


def _profile(
    key: TimeOfDay,
    ambient: tuple[float, str],
    sun: tuple[float, str, tuple[float, float, float]],
    environment: str,
    water_color: str,
) -> LightingProfile:
    x, y, z = sun[2]
    return LightingProfile(
        key=key,
        ambient_intensity=ambient[0],
        ambient_color=ambient[1],
        sun_intensity=sun[0],
        sun_color=sun[1],
        sun_position=Vec3(x=x, y=y, z=z),
        environment=environment,
        water_color=water_color,
    )


LIGHTING: dict[TimeOfDay, LightingProfile] = {
    TimeOfDay.SUNRISE: _profile(
        TimeOfDay.SUNRISE, (0.3, "#ffd6a5"), (0.8, "#ffb870", (30, 5, 10)), "dawn", "#87CEEB"
    ),
    TimeOfDay.MORNING: _profile(
        TimeOfDay.MORNING, (0.4, "#fff4e0"), (1.0, "#fff1d6", (20, 15, 10)), "park", "#4169E1"
    ),
    TimeOfDay.NOON: _profile(
        TimeOfDay.NOON, (0.5, "#ffffff"), (1.4, "#ffffff", (0, 30, 5)), "city", "#1e40af"
    ),
    TimeOfDay.AFTERNOON: _profile(
        TimeOfDay.AFTERNOON, (0.45, "#fff8ec"), (1.2, "#fff3dc", (-15, 20, 5)), "park", "#2563eb"
    ),
    TimeOfDay.SUNSET: _profile(
        TimeOfDay.SUNSET, (0.4, "#ffcf9e"), (1.2, "#ff9a52", (10, 10, 5)), "sunset", "#3b82f6"
    ),
    TimeOfDay.EVENING: _profile(
        TimeOfDay.EVENING, (0.25, "#9fb4ff"), (0.4, "#ff8a65", (-30, 4, -10)), "dawn", "#1e3a8a"
    ),
    TimeOfDay.NIGHT: _profile(
        TimeOfDay.NIGHT, (0.1, "#3b4a7a"), (0.15, "#a8c0ff", (-10, 25, -10)), "night", "#0f172a"
    ),
}

DEFAULT_TIME_OF_DAY = TimeOfDay.SUNSET


def get_lighting(key: TimeOfDay | str) -> LightingProfile:
    """Look up a lighting profile; unknown keys fall back to sunset."""
    return LIGHTING[coerce_enum(TimeOfDay, key, DEFAULT_TIME_OF_DAY)]
