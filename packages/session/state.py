"""Design-session state and the operations that replace it.

Every operation takes a session and returns a brand-new one; nothing is
edited in place.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from packages.core.types import (
    Backyard,
    ElementCategory,
    PoolSpec,
    SceneDescription,
    SceneElement,
    SiteAnalysis,
    TimeOfDay,
    Vec3,
    coerce_enum,
)
from packages.scene.catalog import FEATURE_ELEMENTS, get_catalog_entry
from packages.scene.composer import compose_scene
from packages.scene.lighting import DEFAULT_TIME_OF_DAY, get_lighting

logger = logging.getLogger(__name__)


class DesignSession(BaseModel):
    """Everything the customer has chosen so far."""

    model_config = ConfigDict(frozen=True)

    pool: PoolSpec = Field(default_factory=PoolSpec)
    elements: tuple[SceneElement, ...] = ()
    time_of_day: TimeOfDay = DEFAULT_TIME_OF_DAY
    backyard: Backyard = Field(default_factory=Backyard)
    analysis: SiteAnalysis | None = None

    def find_element(self, uid: str) -> SceneElement:
        for element in self.elements:
            if element.uid == uid:
                return element
        raise KeyError(f"No element with uid '{uid}'")


def update_pool(session: DesignSession, **changes: Any) -> DesignSession:
    """Return a session whose pool has *changes* applied (validated)."""
    pool = PoolSpec.model_validate({**session.pool.model_dump(), **changes})
    logger.info(
        "Pool updated: %s %.1f × %.1f × %.1f ft, %s",
        pool.shape.value, pool.length, pool.width, pool.depth, pool.finish.value,
    )
    return session.model_copy(update={"pool": pool})


def set_time_of_day(session: DesignSession, key: TimeOfDay | str) -> DesignSession:
    tod = coerce_enum(TimeOfDay, key, DEFAULT_TIME_OF_DAY)
    return session.model_copy(update={"time_of_day": tod})


def add_element(
    session: DesignSession,
    element_id: str,
    position: Vec3 | None = None,
    *,
    uid: str | None = None,
) -> tuple[DesignSession, SceneElement]:
    """Place a catalog element.  Raises ``KeyError`` for unknown catalog ids."""
    entry = get_catalog_entry(element_id)
    element = SceneElement(
        uid=uid or uuid.uuid4().hex[:12],
        element_id=entry.key,
        category=entry.category,
        position=position or Vec3(),
    )
    logger.info("Added %s (%s) at %s", entry.name, element.uid, element.position.as_list())
    return session.model_copy(update={"elements": session.elements + (element,)}), element


def move_element(session: DesignSession, uid: str, position: Vec3, *, dragging: bool = False) -> DesignSession:
    """Replace the element *uid* with one at *position*."""
    session.find_element(uid)
    elements = tuple(
        e.model_copy(update={"position": position, "dragging": dragging}) if e.uid == uid else e
        for e in session.elements
    )
    return session.model_copy(update={"elements": elements})


def select_element(session: DesignSession, uid: str | None) -> DesignSession:
    """Select one element (or none); every other element is deselected."""
    if uid is not None:
        session.find_element(uid)
    elements = tuple(
        e.model_copy(update={"selected": e.uid == uid}) if e.selected != (e.uid == uid) else e
        for e in session.elements
    )
    return session.model_copy(update={"elements": elements})


def reset_elements(session: DesignSession, *, keep_existing: bool = True) -> DesignSession:
    """Remove every placed element; detected structures survive unless told otherwise."""
    kept = tuple(
        e for e in session.elements
        if keep_existing and e.category is ElementCategory.EXISTING
    )
    logger.info("Reset elements: %d removed", len(session.elements) - len(kept))
    return session.model_copy(update={"elements": kept})


def apply_analysis(session: DesignSession, analysis: SiteAnalysis) -> DesignSession:
    """Adopt a site analysis: lot size, suggested pool position, detected structures."""
    pool = session.pool.model_copy(update={"position": analysis.placement.position})
    placed = tuple(e for e in session.elements if e.category is not ElementCategory.EXISTING)
    detected = []
    for i, feature in enumerate(analysis.features):
        element_id = FEATURE_ELEMENTS.get(feature.type)
        if element_id is None:
            logger.warning("Ignoring unknown detected feature %r", feature.type)
            continue
        detected.append(
            SceneElement(
                uid=f"existing-{i}-{feature.type}",
                element_id=element_id,
                category=ElementCategory.EXISTING,
                position=feature.position,
            )
        )
    return session.model_copy(
        update={
            "pool": pool,
            "backyard": analysis.dimensions,
            "elements": tuple(detected) + placed,
            "analysis": analysis,
        }
    )


def render_session(session: DesignSession, elapsed: float = 0.0, *, ground_size: float = 100.0) -> SceneDescription:
    """Compose the scene for the session's current state."""
    return compose_scene(
        session.pool,
        session.elements,
        get_lighting(session.time_of_day),
        elapsed,
        ground_size=ground_size,
    )
