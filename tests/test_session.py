"""Tests for design-session operations, undo/redo and the cost estimate."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from packages.core.types import (
    Backyard,
    DetectedFeature,
    ElementCategory,
    PlacementSuggestion,
    ShapeKind,
    SiteAnalysis,
    TimeOfDay,
    Vec3,
)
from packages.session.estimate import estimate_cost
from packages.session.history import HistoryError, SessionHistory
from packages.session.state import (
    DesignSession,
    add_element,
    apply_analysis,
    move_element,
    render_session,
    reset_elements,
    select_element,
    set_time_of_day,
    update_pool,
)


def _analysis(*feature_types: str) -> SiteAnalysis:
    return SiteAnalysis(
        dimensions=Backyard(length=45, width=32, confidence=0.85),
        features=tuple(
            DetectedFeature(type=t, position=Vec3(x=-10.0 * i, y=0, z=-5)) for i, t in enumerate(feature_types)
        ),
        placement=PlacementSuggestion(position=Vec3(x=5, y=0, z=8), reason="sun", score=0.95),
    )


class TestUpdatePool:
    def test_returns_new_session(self, session):
        updated = update_pool(session, shape="lagoon", length=24)
        assert updated is not session
        assert updated.pool.shape is ShapeKind.LAGOON
        assert updated.pool.length == 24
        # the earlier snapshot is untouched
        assert session.pool.shape is ShapeKind.RECTANGLE
        assert session.pool.length == 16

    def test_unknown_shape_falls_back(self, session):
        assert update_pool(session, shape="unknownXYZ").pool.shape is ShapeKind.RECTANGLE

    @pytest.mark.parametrize("value", [0, -1, float("nan"), float("inf")])
    def test_invalid_dimension(self, session, value):
        with pytest.raises(ValidationError):
            update_pool(session, depth=value)

    def test_time_of_day(self, session):
        assert set_time_of_day(session, "night").time_of_day is TimeOfDay.NIGHT
        assert set_time_of_day(session, "teatime").time_of_day is TimeOfDay.SUNSET


class TestElements:
    def test_add(self, session):
        updated, element = add_element(session, "firePit", Vec3(x=3, y=0, z=4))
        assert session.elements == ()
        assert updated.elements == (element,)
        assert element.category is ElementCategory.HARDSCAPE
        assert element.position.x == 3
        assert len(element.uid) == 12

    def test_add_unknown(self, session):
        with pytest.raises(KeyError):
            add_element(session, "trampoline")

    def test_move(self, session):
        session, element = add_element(session, "shrub", uid="s1")
        moved = move_element(session, "s1", Vec3(x=9, y=0, z=1), dragging=True)
        assert moved.find_element("s1").position.x == 9
        assert moved.find_element("s1").dragging
        assert session.find_element("s1").position.x == 0

    def test_move_missing(self, session):
        with pytest.raises(KeyError):
            move_element(session, "nope", Vec3())

    def test_select_is_exclusive(self, session):
        session, _ = add_element(session, "shrub", uid="a")
        session, _ = add_element(session, "hedge", uid="b")
        session = select_element(session, "a")
        session = select_element(session, "b")
        assert [e.selected for e in session.elements] == [False, True]
        session = select_element(session, None)
        assert not any(e.selected for e in session.elements)

    def test_reset_keeps_existing(self, session):
        session = apply_analysis(session, _analysis("house"))
        session, _ = add_element(session, "pergola")
        assert len(reset_elements(session).elements) == 1
        assert reset_elements(session, keep_existing=False).elements == ()


class TestApplyAnalysis:
    def test_places_pool_and_structures(self, session):
        updated = apply_analysis(session, _analysis("house", "patio", "shed"))
        assert updated.pool.position == Vec3(x=5, y=0, z=8)
        assert updated.backyard.length == 45
        ids = [e.element_id for e in updated.elements]
        assert ids == ["house", "existingPatio"]
        assert all(e.category is ElementCategory.EXISTING for e in updated.elements)

    def test_replaces_previous_structures(self, session):
        session, placed = add_element(session, "palmTree")
        session = apply_analysis(session, _analysis("house", "fence"))
        session = apply_analysis(session, _analysis("tree"))
        assert [e.element_id for e in session.elements] == ["tree", "palmTree"]
        assert session.find_element(placed.uid) == placed

    def test_render_includes_structures(self, session):
        session = apply_analysis(session, _analysis("house"))
        scene = render_session(session)
        assert any(n.element_uid == "existing-0-house" for n in scene.nodes)


class TestHistory:
    def test_undo_redo(self, session):
        history = SessionHistory(session)
        lagoon = history.commit(update_pool(history.current, shape="lagoon"))
        assert history.can_undo
        assert history.undo() is session
        assert history.redo() is lagoon
        assert not history.can_redo

    def test_commit_drops_redo_branch(self, session):
        history = SessionHistory(session)
        history.commit(update_pool(session, length=20))
        history.undo()
        history.commit(update_pool(session, length=30))
        assert not history.can_redo
        assert len(history) == 2
        assert history.current.pool.length == 30

    def test_ends_raise(self, session):
        history = SessionHistory(session)
        with pytest.raises(HistoryError):
            history.undo()
        with pytest.raises(HistoryError):
            history.redo()

    def test_limit(self):
        history = SessionHistory(limit=3)
        for length in (10, 11, 12, 13):
            history.commit(update_pool(history.current, length=length))
        assert len(history) == 3
        history.undo()
        history.undo()
        assert not history.can_undo
        assert history.current.pool.length == 11

    def test_committing_current_is_noop(self, session):
        history = SessionHistory(session)
        history.commit(history.current)
        assert len(history) == 1

    def test_reset(self, session):
        history = SessionHistory(session)
        history.commit(update_pool(session, length=20))
        assert history.reset() == DesignSession()
        assert len(history) == 1

    def test_bad_limit(self):
        with pytest.raises(ValueError):
            SessionHistory(limit=0)


class TestEstimate:
    def test_default_rectangle(self, session):
        result = estimate_cost(session)
        # 16 × 8 × 150 + plaster 8000 + LED 1500
        assert result.total == 28700
        assert [line.label for line in result.lines][1:] == ["White Plaster finish", "LED lighting"]

    def test_shape_surcharge_and_spa(self, session):
        session = update_pool(session, shape="infinity", spillover_spa=True, led_lighting=False)
        result = estimate_cost(session)
        assert result.total == 19200 + 15000 + 8000 + 9000
        assert "Infinity shape" in [line.label for line in result.lines]

    def test_elements_cost_existing_free(self, session):
        session = apply_analysis(session, _analysis("house"))
        session, _ = add_element(session, "firePit")
        result = estimate_cost(session)
        assert result.total == 28700 + 3500
        assert "House" not in [line.label for line in result.lines]

    def test_custom_rate(self, session):
        result = estimate_cost(session, unit_rate=100, led_lighting_cost=0)
        assert result.total == 16 * 8 * 100 + 8000
