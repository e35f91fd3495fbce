"""Tests for outline sampling, triangulation and extrusion."""

from __future__ import annotations

import numpy as np
import pytest
import shapely
import trimesh
from shapely.geometry import Polygon

from packages.geometry.bezier import (
    CurveTo,
    LineTo,
    clean_ring,
    cubic_bezier,
    fit_to_envelope,
    sample_outline,
    signed_area,
)
from packages.geometry.extrude import (
    Bevel,
    box_ring,
    extrude_band,
    extrude_outline,
    offset_ring,
)
from packages.geometry.triangulate import triangulate_polygon


def _mesh(vertices, faces):
    return trimesh.Trimesh(vertices=np.array(vertices), faces=np.array(faces), process=False)


class TestBezier:
    def test_curve_ends_on_end_point(self):
        p = [np.array(v, dtype=float) for v in ([0, 0], [1, 2], [3, 2], [4, 0])]
        pts = cubic_bezier(*p, divisions=8)
        assert pts.shape == (8, 2)
        np.testing.assert_allclose(pts[-1], [4, 0])

    def test_midpoint(self):
        p = [np.array(v, dtype=float) for v in ([0, 0], [0, 1], [1, 1], [1, 0])]
        pts = cubic_bezier(*p, divisions=2)
        np.testing.assert_allclose(pts[0], [0.5, 0.75])

    def test_outline_drops_closing_point(self):
        ring = sample_outline(
            (0, 0),
            (LineTo((1, 0)), LineTo((1, 1)), LineTo((0, 1)), LineTo((0, 0))),
            scale=(4, 2),
        )
        assert len(ring) == 4
        assert signed_area(ring) == pytest.approx(8.0)

    def test_clean_ring_removes_collinear(self):
        ring = np.array([[0, 0], [1, 0], [2, 0], [2, 2], [0, 2]], dtype=float)
        assert len(clean_ring(ring)) == 4

    def test_fit_to_envelope(self):
        ring = sample_outline(
            (0, 0),
            (CurveTo((0.3, -0.2), (0.7, -0.2), (1, 0)), LineTo((1, 1)), LineTo((0, 1))),
            scale=(10, 5),
        )
        fitted = fit_to_envelope(ring, (12.0, 6.0))
        np.testing.assert_allclose(np.ptp(fitted, axis=0), [12.0, 6.0])
        np.testing.assert_allclose(fitted.min(axis=0) + fitted.max(axis=0), [0.0, 0.0], atol=1e-12)


class TestTriangulate:
    def test_square(self):
        tris = triangulate_polygon(box_ring(2, 2))
        assert tris.shape == (2, 3)

    def test_concave_l(self):
        ring = np.array(
            [[0, 0], [6, 0], [6, 4], [10, 4], [10, 10], [0, 10]], dtype=float
        )
        tris = triangulate_polygon(ring)
        assert tris.shape == (4, 3)
        # triangle areas add up to the polygon area
        total = sum(signed_area(ring[t]) for t in tris)
        assert total == pytest.approx(signed_area(ring))
        assert all(signed_area(ring[t]) > 0 for t in tris)

    def test_indices_refer_to_input_ring(self):
        ring = sample_outline(
            (0, 0),
            (CurveTo((0.3, -0.2), (0.7, -0.2), (1, 0)), LineTo((1, 1)), LineTo((0, 1))),
            scale=(10, 5),
        )
        tris = triangulate_polygon(ring)
        assert tris.min() >= 0
        assert tris.max() < len(ring)
        assert len(tris) == len(ring) - 2

    def test_rejects_clockwise(self):
        with pytest.raises(ValueError):
            triangulate_polygon(box_ring(2, 2)[::-1])

    def test_rejects_degenerate(self):
        with pytest.raises(ValueError):
            triangulate_polygon(np.array([[0, 0], [1, 1]], dtype=float))

    def test_rejects_self_intersecting(self):
        ring = np.array([[0, 0], [4, 0], [4, 4], [3, -1], [1, 5], [0, 4]], dtype=float)
        with pytest.raises(ValueError):
            triangulate_polygon(ring)


class TestExtrude:
    def test_box_counts_and_volume(self):
        vertices, faces = extrude_outline(box_ring(16, 8), 6)
        assert vertices.shape == (8, 3)
        assert faces.shape == (12, 3)
        mesh = _mesh(vertices, faces)
        assert mesh.is_watertight
        assert mesh.is_winding_consistent
        assert mesh.volume == pytest.approx(16 * 8 * 6)

    def test_box_extents(self):
        vertices, _ = extrude_outline(box_ring(16, 8), 6)
        np.testing.assert_allclose(vertices.min(axis=0), [-8, -3, -4])
        np.testing.assert_allclose(vertices.max(axis=0), [8, 3, 4])

    def test_clockwise_input_still_outward(self):
        vertices, faces = extrude_outline(box_ring(4, 2)[::-1].copy(), 1)
        assert _mesh(vertices, faces).volume > 0

    def test_bevel_keeps_footprint(self):
        ring = box_ring(10, 6)
        vertices, faces = extrude_outline(ring, 4, bevel=Bevel(radius=0.3, height=0.2, segments=8))
        mesh = _mesh(vertices, faces)
        assert mesh.is_watertight
        assert mesh.volume < 10 * 6 * 4
        np.testing.assert_allclose(vertices[:, 0].min(), -5)
        np.testing.assert_allclose(vertices[:, 0].max(), 5)
        np.testing.assert_allclose(vertices[:, 1].max(), 2)
        # floor ring + rim ring + 8 bevel rings
        assert len(vertices) == 4 * 10
        # the top ring sits on the mitred inset corners
        top = vertices[-4:]
        np.testing.assert_allclose(np.ptp(top[:, [0, 2]], axis=0), [9.4, 5.4])

    def test_outputs_are_read_only(self):
        vertices, faces = extrude_outline(box_ring(2, 2), 1)
        with pytest.raises(ValueError):
            vertices[0, 0] = 99.0
        with pytest.raises(ValueError):
            faces[0, 0] = 1

    def test_invalid_depth(self):
        with pytest.raises(ValueError):
            extrude_outline(box_ring(2, 2), 0)
        with pytest.raises(ValueError):
            extrude_outline(box_ring(2, 2), float("inf"))


class TestOffsetRing:
    def test_moves_inward(self):
        inset = offset_ring(box_ring(4, 2), 0.5)
        np.testing.assert_allclose(np.ptp(inset, axis=0), [3, 1])
        np.testing.assert_allclose(inset[0], [-1.5, -0.5])

    def test_keeps_vertex_order(self):
        ring = sample_outline(
            (0, 0),
            (CurveTo((0.3, -0.2), (0.7, -0.2), (1, 0)), LineTo((1, 1)), LineTo((0, 1))),
            scale=(10, 5),
        )
        inset = offset_ring(ring, 0.2)
        assert inset.shape == ring.shape
        assert signed_area(inset) > 0
        assert np.all(np.linalg.norm(inset - ring, axis=1) < 0.5)
        assert Polygon(ring).contains(Polygon(inset))

    def test_zero_is_a_copy(self):
        ring = box_ring(4, 2)
        inset = offset_ring(ring, 0)
        np.testing.assert_array_equal(inset, ring)
        assert inset is not ring

    def test_collapse_raises(self):
        with pytest.raises(ValueError):
            offset_ring(box_ring(4, 2), 1.5)


class TestBand:
    def test_closed_ring_around_outline(self):
        plan = Polygon(box_ring(4, 2))
        vertices, faces = extrude_band(plan, 1.0, 0.15)
        mesh = _mesh(vertices, faces)
        assert mesh.is_watertight
        assert mesh.is_winding_consistent
        assert mesh.volume == pytest.approx((6 * 4 - 4 * 2) * 0.15)
        np.testing.assert_allclose(vertices.min(axis=0), [-3, 0, -2])
        np.testing.assert_allclose(vertices.max(axis=0), [3, 0.15, 2])

    def test_leaves_the_inside_open(self):
        plan = Polygon(box_ring(4, 2))
        vertices, faces = extrude_band(plan, 1.0, 0.15)
        centroids = vertices[faces].mean(axis=1)
        assert not shapely.contains_xy(plan, centroids[:, 0], centroids[:, 2]).any()

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            extrude_band(Polygon(box_ring(4, 2)), 0, 0.15)
