"""Outline construction from line and cubic-Bezier segments."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

CURVE_SEGMENTS = 12


@dataclass(frozen=True)
class LineTo:
    """Straight edge to ``end``, given as (u, v) fractions of (length, width)."""

    end: tuple[float, float]


@dataclass(frozen=True)
class CurveTo:
    """Cubic Bezier to ``end`` through two control points, in (u, v) fractions."""

    c1: tuple[float, float]
    c2: tuple[float, float]
    end: tuple[float, float]


def cubic_bezier(
    p0: np.ndarray,
    p1: np.ndarray,
    p2: np.ndarray,
    p3: np.ndarray,
    divisions: int = CURVE_SEGMENTS,
) -> np.ndarray:
    """Sample a cubic Bezier at ``divisions`` evenly spaced t in (0, 1].

    The start point is not included so consecutive segments can be chained
    without duplicating their shared end points.
    """
    t = np.linspace(0.0, 1.0, divisions + 1)[1:, None]
    mt = 1.0 - t
    return (
        mt**3 * p0
        + 3.0 * mt**2 * t * p1
        + 3.0 * mt * t**2 * p2
        + t**3 * p3
    )


def sample_outline(
    start: tuple[float, float],
    segments: tuple[LineTo | CurveTo, ...],
    scale: tuple[float, float] = (1.0, 1.0),
    *,
    divisions: int = CURVE_SEGMENTS,
) -> np.ndarray:
    """Trace a closed outline and return its (N, 2) polygon.

    Fractions are multiplied by *scale* (length, width).  The closing point
    is dropped, as are consecutive duplicates and collinear runs, so the
    result is a simple ring ready for triangulation.
    """
    s = np.asarray(scale, dtype=np.float64)
    cursor = np.asarray(start, dtype=np.float64) * s
    points = [cursor[None, :]]
    for seg in segments:
        end = np.asarray(seg.end, dtype=np.float64) * s
        if isinstance(seg, CurveTo):
            c1 = np.asarray(seg.c1, dtype=np.float64) * s
            c2 = np.asarray(seg.c2, dtype=np.float64) * s
            points.append(cubic_bezier(cursor, c1, c2, end, divisions))
        else:
            points.append(end[None, :])
        cursor = end
    ring = np.vstack(points)
    return clean_ring(ring)


def clean_ring(ring: np.ndarray, tol: float = 1e-9) -> np.ndarray:
    """Drop repeated and collinear vertices from a closed polygon ring."""
    scale = max(float(np.ptp(ring, axis=0).max()), 1.0)
    eps = tol * scale

    # repeated points (including the closing point)
    keep = [ring[0]]
    for p in ring[1:]:
        if np.linalg.norm(p - keep[-1]) > eps:
            keep.append(p)
    while len(keep) > 1 and np.linalg.norm(keep[-1] - keep[0]) <= eps:
        keep.pop()

    # collinear points
    changed = True
    while changed and len(keep) > 3:
        changed = False
        for i in range(len(keep)):
            a = keep[i - 1]
            b = keep[i]
            c = keep[(i + 1) % len(keep)]
            cross = (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])
            if abs(cross) <= eps * eps:
                del keep[i]
                changed = True
                break

    return np.array(keep, dtype=np.float64)


def signed_area(ring: np.ndarray) -> float:
    """Shoelace area; positive for counter-clockwise rings."""
    x = ring[:, 0]
    y = ring[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def fit_to_envelope(ring: np.ndarray, size: tuple[float, float]) -> np.ndarray:
    """Scale and translate *ring* so its bounding box is *size*, centred on 0."""
    mins = ring.min(axis=0)
    maxs = ring.max(axis=0)
    extent = maxs - mins
    target = np.asarray(size, dtype=np.float64)
    centred = ring - (mins + maxs) / 2.0
    return centred * (target / extent)
