"""
Serializers for converting simulation objects to JSON-safe dicts.

Handles numpy scalars and the dataclasses of the economy core.
"""

from __future__ import annotations

from typing import Any

from starlane.core.economy import SystemEconomy
from starlane.core.galaxy import Galaxy
from starlane.core.pricing import format_credits


def _round_map(values: dict[str, float], digits: int = 4) -> dict[str, float]:
    return {k: round(float(v), digits) for k, v in values.items()}


def serialize_session(session) -> dict[str, Any]:
    sim = session.simulation
    return {
        "id": session.id,
        "name": session.name,
        "status": session.status,
        "elapsed": session.elapsed,
        "substeps_run": sim.substeps_run,
        "n_systems": len(sim.galaxy),
        "initialized": sim.is_initialized,
        "commodities": sim.index.names(),
        "trade_edges": len(sim.galaxy.trade_edges()),
        "config": session.config.to_dict(),
    }


def serialize_system_market(state: SystemEconomy) -> dict[str, Any]:
    """Full market view of one star system."""
    return {
        "system_id": state.system_id,
        "name": state.name,
        "currency": round(state.currency, 2),
        "currency_display": format_credits(state.currency, 2),
        "stockpiles": _round_map(state.stockpiles),
        "production": _round_map(state.production),
        "prices": _round_map(state.prices),
        "last_traded": _round_map(state.last_traded),
    }


def serialize_galaxy(galaxy: Galaxy) -> dict[str, Any]:
    """Nodes and undirected jump edges, for map views."""
    return {
        "systems": [
            {
                "id": s.id,
                "name": s.name,
                "position": list(s.position) if s.position is not None else None,
                "planets": [p.name for p in s.planets],
            }
            for s in galaxy
        ],
        "edges": [
            [galaxy.systems[a].id, galaxy.systems[b].id]
            for a, b in galaxy.trade_edges()
        ],
    }
