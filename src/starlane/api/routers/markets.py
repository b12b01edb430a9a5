"""
Markets API router: per-system markets, unit prices, price dispersion.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from starlane.api.schemas import (
    FormatRequest,
    PriceSpreadResponse,
    SystemMarketResponse,
    UnitPriceResponse,
)
from starlane.api.serializers import serialize_system_market
from starlane.core.pricing import format_credits

router = APIRouter()


def _get_session(request: Request, session_id: str):
    sm = request.app.state.session_manager
    try:
        return sm.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")


def _require_initialized(session) -> None:
    """Call with the session lock held."""
    if not session.simulation.is_initialized:
        raise HTTPException(status_code=409, detail="Economy is not initialized")


@router.get("/{session_id}/systems", response_model=list[SystemMarketResponse])
def list_system_markets(request: Request, session_id: str):
    """Market state of every star system."""
    session = _get_session(request, session_id)
    with session.lock:
        _require_initialized(session)
        sim = session.simulation
        return [
            serialize_system_market(sim.system_state(s.id)) for s in sim.galaxy
        ]


@router.get("/{session_id}/systems/{system_id}", response_model=SystemMarketResponse)
def get_system_market(request: Request, session_id: str, system_id: int):
    session = _get_session(request, session_id)
    with session.lock:
        _require_initialized(session)
        try:
            state = session.simulation.system_state(system_id)
        except KeyError:
            raise HTTPException(
                status_code=404, detail=f"Star system {system_id} not found",
            )
    return serialize_system_market(state)


@router.get(
    "/{session_id}/systems/{system_id}/price/{commodity}",
    response_model=UnitPriceResponse,
)
def get_unit_price(request: Request, session_id: str, system_id: int, commodity: str):
    """Unit price of one commodity; ``known`` is false for unsimulated goods."""
    session = _get_session(request, session_id)
    with session.lock:
        _require_initialized(session)
        try:
            price = session.simulation.get_unit_price(commodity, system_id)
        except KeyError:
            raise HTTPException(
                status_code=404, detail=f"Star system {system_id} not found",
            )
    if price is None:
        return {"commodity": commodity, "system_id": system_id, "known": False}
    return {
        "commodity": commodity,
        "system_id": system_id,
        "known": True,
        "price": round(price, 4),
        "display": format_credits(price, 2),
    }


@router.get("/{session_id}/spread", response_model=PriceSpreadResponse)
def get_price_spread(request: Request, session_id: str):
    """Latest galaxy-wide price spread and mean price per commodity."""
    session = _get_session(request, session_id)
    with session.lock:
        _require_initialized(session)
        latest = session.collector.metrics_history[-1]
    return {
        "substep": latest.substep,
        "spread": latest.price_spread,
        "mean_price": latest.mean_price,
    }


@router.get("/{session_id}/history")
def get_history(request: Request, session_id: str):
    """Every recorded market snapshot of a session."""
    session = _get_session(request, session_id)
    with session.lock:
        _require_initialized(session)
        history = session.collector.export_for_visualization()
    return {"history": history}


@router.post("/format-credits")
def format_credit_amount(req: FormatRequest):
    return {"display": format_credits(req.credits, req.decimals)}
