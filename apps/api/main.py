"""FastAPI application for the backyard pool designer.

Holds the current design session, applies control changes from the viewer,
and serves the generated pool solid, the composed scene and the cost
estimate.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel as PydanticBaseModel
from pydantic import ValidationError

from packages.core.config import settings
from packages.core.types import Vec3
from packages.geometry.builder import build_pool_solid
from packages.geometry.profiles import SHAPE_PROFILES
from packages.scene.catalog import CATALOG
from packages.scene.lighting import LIGHTING
from packages.scene.materials import FINISHES
from packages.services.analysis import MockAnalysisService, PhotoInfo, run_analysis
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

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Backyard Pool Designer API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── In-memory store (single-session MVP) ─────────────────────────────
_state: dict = {
    "history": SessionHistory(limit=settings.history_limit),
    "analysis_service": MockAnalysisService(seed=settings.analysis_seed),
}


def _history() -> SessionHistory:
    return _state["history"]


def _session_json(session: DesignSession) -> JSONResponse:
    return JSONResponse(content=json.loads(session.model_dump_json()))


def _commit(session: DesignSession) -> JSONResponse:
    _history().commit(session)
    return _session_json(session)


@app.get("/health")
def health():
    return {"status": "ok"}


# ── static catalogs ──────────────────────────────────────────────────
@app.get("/catalog/shapes")
def list_shapes():
    return [
        {
            "id": p.key.value,
            "name": p.name,
            "description": p.description,
            "cost": p.surcharge,
            "footprint": list(p.footprint),
        }
        for p in SHAPE_PROFILES.values()
    ]


@app.get("/catalog/finishes")
def list_finishes():
    return [json.loads(f.model_dump_json()) for f in FINISHES.values()]


@app.get("/catalog/lighting")
def list_lighting():
    return [json.loads(p.model_dump_json()) for p in LIGHTING.values()]


@app.get("/catalog/elements")
def list_elements():
    return [
        {"id": e.key, "name": e.name, "category": e.category.value, "cost": e.cost}
        for e in CATALOG.values()
    ]


# ── session ──────────────────────────────────────────────────────────
@app.get("/session")
def get_session():
    return _session_json(_history().current)


class PoolUpdate(PydanticBaseModel):
    """Body for pool edits.  Omitted fields keep their current value."""
    length: Optional[float] = None
    width: Optional[float] = None
    depth: Optional[float] = None
    shape: Optional[str] = None
    finish: Optional[str] = None
    position: Optional[Vec3] = None
    led_lighting: Optional[bool] = None
    infinity_edge: Optional[bool] = None
    spillover_spa: Optional[bool] = None
    selected: Optional[bool] = None


@app.put("/session/pool")
def put_pool(req: PoolUpdate):
    changes = req.model_dump(exclude_none=True)
    logger.info(f"🏊 Pool update: {changes}")
    try:
        session = update_pool(_history().current, **changes)
    except ValidationError as e:
        raise HTTPException(422, f"Invalid pool: {e}")
    return _commit(session)


class TimeOfDayRequest(PydanticBaseModel):
    time_of_day: str


@app.put("/session/time-of-day")
def put_time_of_day(req: TimeOfDayRequest):
    session = set_time_of_day(_history().current, req.time_of_day)
    logger.info(f"🌅 Time of day → {session.time_of_day.value}")
    return _commit(session)


class AddElementRequest(PydanticBaseModel):
    element_id: str
    position: Vec3 = Vec3()


@app.post("/session/elements")
def post_element(req: AddElementRequest):
    try:
        session, element = add_element(_history().current, req.element_id, req.position)
    except KeyError as e:
        raise HTTPException(404, str(e.args[0]))
    _history().commit(session)
    return JSONResponse(content=json.loads(element.model_dump_json()))


class ElementUpdate(PydanticBaseModel):
    """Drag / selection update for a placed element."""
    position: Optional[Vec3] = None
    dragging: bool = False
    selected: Optional[bool] = None


@app.patch("/session/elements/{uid}")
def patch_element(uid: str, req: ElementUpdate):
    session = _history().current
    try:
        if req.position is not None:
            session = move_element(session, uid, req.position, dragging=req.dragging)
        if req.selected is not None:
            session = select_element(session, uid if req.selected else None)
        element = session.find_element(uid)
    except KeyError as e:
        raise HTTPException(404, str(e.args[0]))
    _history().commit(session)
    return JSONResponse(content=json.loads(element.model_dump_json()))


@app.delete("/session/elements")
def delete_elements(keep_existing: bool = True):
    session = reset_elements(_history().current, keep_existing=keep_existing)
    logger.info(f"🧹 Elements reset — {len(session.elements)} remaining")
    return _commit(session)


@app.post("/session/undo")
def undo():
    try:
        session = _history().undo()
    except HistoryError as e:
        raise HTTPException(409, str(e))
    return _session_json(session)


@app.post("/session/redo")
def redo():
    try:
        session = _history().redo()
    except HistoryError as e:
        raise HTTPException(409, str(e))
    return _session_json(session)


# ── derived outputs ──────────────────────────────────────────────────
@app.get("/solid")
def get_solid():
    """Return the pool shell as flat position / index arrays per part.

    Flat lists load straight into a Three.js BufferGeometry.
    """
    pool = _history().current.pool
    try:
        result = build_pool_solid(pool.shape, pool.length, pool.width, pool.depth)
    except ValueError as e:
        raise HTTPException(400, str(e))
    logger.info(f"📐 Sending {pool.shape.value} solid with {result.vertex_count:,} vertices")
    fl, fw = result.footprint
    return {
        "shape": result.shape.value,
        "footprint": [fl, fw],
        "bounds": json.loads(result.bounds.model_dump_json()),
        "parts": [json.loads(p.to_mesh_data().model_dump_json()) for p in result.parts],
    }


@app.get("/scene")
def get_scene(t: float = 0.0):
    """Return the composed scene for animation time *t* (seconds)."""
    session = _history().current
    try:
        description = render_session(session, t, ground_size=settings.ground_size)
    except ValueError as e:
        logger.exception("Scene composition failed")
        raise HTTPException(400, f"Scene composition failed: {e}")
    content = json.loads(description.model_dump_json())
    # when this response was built
    content["created_at"] = datetime.now(timezone.utc).isoformat()
    return JSONResponse(content=content)


@app.get("/estimate")
def get_estimate():
    result = estimate_cost(
        _history().current,
        unit_rate=settings.cost_unit_rate,
        led_lighting_cost=settings.led_lighting_cost,
        spillover_spa_cost=settings.spillover_spa_cost,
    )
    return JSONResponse(content=json.loads(result.model_dump_json()))


@app.post("/analysis")
async def analyze_photos(files: list[UploadFile] = File(...)):
    """Upload backyard photos, run the site analysis and adopt its suggestions."""
    photos = []
    for f in files:
        if not f.filename:
            raise HTTPException(400, "No filename provided")
        data = await f.read()
        photos.append(
            PhotoInfo(
                filename=f.filename,
                size_bytes=len(data),
                content_type=f.content_type or "application/octet-stream",
            )
        )
    logger.info(f"📸 Received {len(photos)} photo(s) for analysis")

    stages = []
    try:
        result = run_analysis(
            _state["analysis_service"],
            photos,
            on_progress=stages.append,
            delay_scale=settings.analysis_delay_scale,
        )
    except ValueError as e:
        raise HTTPException(400, str(e))

    session = apply_analysis(_history().current, result)
    _history().commit(session)
    logger.info(f"🎉 Analysis applied — pool moved to {result.placement.position.as_list()}")
    return {
        "stages": [json.loads(s.model_dump_json()) for s in stages],
        "analysis": json.loads(result.model_dump_json()),
        "session": json.loads(session.model_dump_json()),
    }
