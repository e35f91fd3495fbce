"""Backyard site analysis from uploaded photos.

No model inference happens here.  ``AnalysisService`` is the contract a real
photo-analysis backend would fulfil; ``MockAnalysisService`` fills it with
seeded random estimates so the rest of the app can be exercised end to end.

The contract:

* ``analyze(photos)`` receives at least one photo and returns a
  :class:`SiteAnalysis` with lot dimensions (feet, width ≤ length), detected
  structures with ground positions, one placement suggestion and the
  observed materials.
* It may raise; callers then fall back to :data:`FALLBACK_ANALYSIS`.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol, Sequence

import numpy as np

from packages.core.types import (
    AnalysisStage,
    Backyard,
    DetectedFeature,
    PlacementSuggestion,
    SiteAnalysis,
    SiteMaterials,
    Vec3,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhotoInfo:
    """What the analysis needs to know about one uploaded photo."""

    filename: str
    size_bytes: int
    content_type: str = "application/octet-stream"


class AnalysisService(Protocol):
    def analyze(self, photos: Sequence[PhotoInfo]) -> SiteAnalysis: ...


ANALYSIS_STAGES: tuple[AnalysisStage, ...] = (
    AnalysisStage(progress=15, stage="Analyzing photo composition...", delay=1.2),
    AnalysisStage(progress=30, stage="Detecting scale references...", delay=1.5),
    AnalysisStage(progress=50, stage="Creating 3D depth maps...", delay=2.0),
    AnalysisStage(progress=70, stage="Identifying existing features...", delay=1.8),
    AnalysisStage(progress=85, stage="Calculating optimal placement...", delay=1.5),
    AnalysisStage(progress=100, stage="Generating 3D environment...", delay=1.0),
)


def _v(x: float, y: float, z: float) -> Vec3:
    return Vec3(x=x, y=y, z=z)


# (feature type, position, probability of being "detected")
_FEATURE_ODDS = (
    ("house", _v(-25, 0, -20), 0.7),
    ("fence", _v(0, 0, -30), 0.6),
    ("tree", _v(15, 0, 10), 0.4),
    ("patio", _v(-10, 0, -15), 0.5),
)

PLACEMENT_SUGGESTIONS: tuple[PlacementSuggestion, ...] = (
    PlacementSuggestion(position=_v(5, 0, 8), reason="Optimal sun exposure and access", score=0.95),
    PlacementSuggestion(position=_v(-2, 0, 5), reason="Good privacy and space utilization", score=0.87),
    PlacementSuggestion(position=_v(8, 0, -3), reason="Safe distance from structures", score=0.82),
)

FALLBACK_ANALYSIS = SiteAnalysis(
    dimensions=Backyard(length=40, width=30, confidence=0.7),
    features=(
        DetectedFeature(type="house", position=_v(-25, 0, -20)),
        DetectedFeature(type="fence", position=_v(0, 0, -30)),
    ),
    placement=PlacementSuggestion(
        position=_v(2, 0, 5), reason="Central placement with good access", score=0.8
    ),
    materials=SiteMaterials(house_exterior="siding"),
    fallback=True,
)


class MockAnalysisService:
    """Randomised stand-in for photo analysis.  Reproducible for a fixed *seed*."""

    def __init__(self, seed: int | None = None):
        self._rng = np.random.default_rng(seed)

    def analyze(self, photos: Sequence[PhotoInfo]) -> SiteAnalysis:
        base = 30.0 + self._rng.random() * 20.0  # 30-50 ft
        dimensions = Backyard(
            length=float(round(base)), width=float(round(base * 0.7)), confidence=0.85
        )
        features = tuple(
            DetectedFeature(type=kind, position=position)
            for kind, position, odds in _FEATURE_ODDS
            if self._rng.random() < odds
        )
        placement = max(PLACEMENT_SUGGESTIONS, key=lambda s: s.score)
        logger.info(
            "Mock analysis of %d photos: %.0f × %.0f ft lot, %d features",
            len(photos), dimensions.length, dimensions.width, len(features),
        )
        return SiteAnalysis(
            dimensions=dimensions,
            features=features,
            placement=placement,
            materials=SiteMaterials(),
        )


ProgressCallback = Callable[[AnalysisStage], None]


def run_analysis(
    service: AnalysisService,
    photos: Sequence[PhotoInfo],
    *,
    on_progress: ProgressCallback | None = None,
    delay_scale: float = 0.0,
    sleep: Callable[[float], None] = time.sleep,
) -> SiteAnalysis:
    """Run *service* while stepping through the staged progress sequence.

    Each stage is reported to *on_progress* and then held for its delay
    times *delay_scale* (0 skips the waiting entirely).  A failing service
    yields :data:`FALLBACK_ANALYSIS`.
    """
    if not photos:
        raise ValueError("At least one photo is required for site analysis")
    if delay_scale < 0:
        raise ValueError("delay_scale must be non-negative")

    try:
        result = service.analyze(photos)
    except Exception:
        logger.exception("Site analysis failed, using fallback results")
        result = FALLBACK_ANALYSIS

    for stage in ANALYSIS_STAGES:
        logger.info("[%3d%%] %s", stage.progress, stage.stage)
        if on_progress is not None:
            on_progress(stage)
        if delay_scale > 0:
            sleep(stage.delay * delay_scale)

    return result
