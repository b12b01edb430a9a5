"""Economy session management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from starlane.api.schemas import (
    AdvanceRequest,
    CreateSessionRequest,
    SessionResponse,
    SessionSummary,
)
from starlane.api.serializers import serialize_galaxy, serialize_session
from starlane.core.commodities import CommodityCatalog
from starlane.core.config import EconomyConfig
from starlane.core.errors import SimulationStateError
from starlane.core.galaxy import Galaxy
from starlane.experiment.presets import get_preset

router = APIRouter()


def _get_session(request: Request, session_id: str):
    mgr = request.app.state.session_manager
    try:
        return mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")


@router.post("/sessions", response_model=SessionResponse)
def create_session(req: CreateSessionRequest, request: Request):
    mgr = request.app.state.session_manager

    try:
        config = None
        if req.preset:
            config = get_preset(req.preset)
        elif req.config:
            config = EconomyConfig.from_dict(req.config)
        catalog = CommodityCatalog.from_dicts(req.catalog) if req.catalog is not None else None
        galaxy = Galaxy.from_dicts(req.galaxy) if req.galaxy is not None else None
        session = mgr.create_session(
            config=config, name=req.name, catalog=catalog, galaxy=galaxy,
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))
    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    return serialize_session(session)


@router.get("/sessions", response_model=list[SessionSummary])
def list_sessions(request: Request):
    mgr = request.app.state.session_manager
    return mgr.list_sessions()


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, request: Request):
    return serialize_session(_get_session(request, session_id))


@router.delete("/sessions/{session_id}")
def delete_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    try:
        mgr.delete_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return {"deleted": True}


@router.post("/sessions/{session_id}/advance", response_model=SessionResponse)
def advance_session(session_id: str, req: AdvanceRequest, request: Request):
    """Advance by raw time units, or by a number of standard jumps."""
    mgr = request.app.state.session_manager
    session = _get_session(request, session_id)
    if req.elapsed is not None:
        elapsed = req.elapsed
    elif req.jumps is not None:
        elapsed = req.jumps * session.config.tick_quantum
    else:
        elapsed = session.config.tick_quantum
    session = mgr.advance(session_id, elapsed)
    return serialize_session(session)


@router.post("/sessions/{session_id}/refresh-production", response_model=SessionResponse)
def refresh_production(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    _get_session(request, session_id)
    try:
        session = mgr.refresh_production(session_id)
    except SimulationStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return serialize_session(session)


@router.post("/sessions/{session_id}/teardown", response_model=SessionResponse)
def teardown_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    _get_session(request, session_id)
    return serialize_session(mgr.teardown_session(session_id))


@router.post("/sessions/{session_id}/reset", response_model=SessionResponse)
def reset_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    _get_session(request, session_id)
    return serialize_session(mgr.reset_session(session_id))


@router.get("/sessions/{session_id}/galaxy")
def get_galaxy(session_id: str, request: Request):
    """Star systems and jump edges of a session."""
    session = _get_session(request, session_id)
    return serialize_galaxy(session.simulation.galaxy)
