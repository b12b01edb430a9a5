"""
Pydantic models for API request/response validation.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any


# === Simulation ===

class CreateSessionRequest(BaseModel):
    config: dict[str, Any] | None = None
    preset: str | None = None
    name: str | None = None
    catalog: list[dict[str, Any]] | None = None
    galaxy: list[dict[str, Any]] | None = None


class AdvanceRequest(BaseModel):
    elapsed: int | None = Field(default=None, ge=0)
    jumps: int | None = Field(default=None, ge=0)


class SessionSummary(BaseModel):
    id: str
    name: str
    status: str
    elapsed: int
    substeps_run: int
    n_systems: int


class SessionResponse(SessionSummary):
    initialized: bool
    commodities: list[str]
    trade_edges: int
    config: dict[str, Any]


# === Markets ===

class SystemMarketResponse(BaseModel):
    system_id: int
    name: str
    currency: float
    currency_display: str
    stockpiles: dict[str, float]
    production: dict[str, float]
    prices: dict[str, float]
    last_traded: dict[str, float]


class UnitPriceResponse(BaseModel):
    commodity: str
    system_id: int
    known: bool
    price: float | None = None
    display: str | None = None


class PriceSpreadResponse(BaseModel):
    substep: int
    spread: dict[str, float]
    mean_price: dict[str, float]


class FormatRequest(BaseModel):
    credits: float
    decimals: int = 1
