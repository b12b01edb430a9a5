"""
Metrics Collector: per-advance market statistics.

Records a snapshot of the galaxy economy after each advance: currency
and stock totals, price statistics per commodity, price dispersion and
trade volume. Provides time series extraction and export for
visualization.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from starlane.core.economy import EconomySimulation


@dataclass
class MarketSnapshot:
    """Galaxy-wide market metrics at one point in time."""

    substep: int

    # Conserved-by-trade quantities
    total_credits: float
    total_stock: dict[str, float]

    # Stock health
    min_stockpile: float
    min_credits: float

    # Price statistics per commodity
    mean_price: dict[str, float]
    min_price: dict[str, float]
    max_price: dict[str, float]
    price_spread: dict[str, float]
    price_cv: dict[str, float]  # coefficient of variation across systems

    # Trade
    traded_volume: dict[str, float]  # sum of |last_traded| / 2


class MetricsCollector:
    """
    Collects market metrics across advances.

    Works alongside an EconomySimulation; call ``collect`` after each
    ``advance``.
    """

    def __init__(self) -> None:
        self.metrics_history: list[MarketSnapshot] = []

    def collect(self, sim: EconomySimulation) -> MarketSnapshot:
        """Record metrics for the current simulation state."""
        names = sim.index.names()
        prices = sim.prices
        n_systems = prices.shape[0]

        if n_systems == 0 or not names:
            zeros = {n: 0.0 for n in names}
            snapshot = MarketSnapshot(
                substep=sim.substeps_run,
                total_credits=sim.total_credits(),
                total_stock=dict(zeros),
                min_stockpile=0.0,
                min_credits=float(sim.credits.min()) if n_systems else 0.0,
                mean_price=dict(zeros), min_price=dict(zeros),
                max_price=dict(zeros), price_spread=dict(zeros),
                price_cv=dict(zeros), traded_volume=dict(zeros),
            )
            self.metrics_history.append(snapshot)
            return snapshot

        mean = prices.mean(axis=0)
        std = prices.std(axis=0)
        lo = prices.min(axis=0)
        hi = prices.max(axis=0)
        cv = np.divide(std, mean, out=np.zeros_like(std), where=mean != 0)
        volume = np.abs(sim.last_traded).sum(axis=0) / 2

        def _by_name(arr: np.ndarray) -> dict[str, float]:
            return {n: float(arr[i]) for i, n in enumerate(names)}

        snapshot = MarketSnapshot(
            substep=sim.substeps_run,
            total_credits=sim.total_credits(),
            total_stock=sim.total_stock(),
            min_stockpile=float(sim.stockpiles.min()),
            min_credits=float(sim.credits.min()),
            mean_price=_by_name(mean),
            min_price=_by_name(lo),
            max_price=_by_name(hi),
            price_spread=_by_name(hi - lo),
            price_cv=_by_name(cv),
            traded_volume=_by_name(volume),
        )
        self.metrics_history.append(snapshot)
        return snapshot

    def get_time_series(self, field_name: str) -> list[Any]:
        """Extract a time series for a specific metric field."""
        return [getattr(m, field_name) for m in self.metrics_history]

    def get_commodity_series(self, field_name: str, commodity: str) -> list[float]:
        """Time series of a per-commodity metric, e.g. ``price_spread``."""
        return [getattr(m, field_name)[commodity] for m in self.metrics_history]

    def export_for_visualization(self) -> list[dict[str, Any]]:
        """Export all metrics as a list of JSON-serializable dicts."""
        return [
            {
                "substep": m.substep,
                "total_credits": m.total_credits,
                "total_stock": m.total_stock,
                "min_stockpile": m.min_stockpile,
                "min_credits": m.min_credits,
                "mean_price": m.mean_price,
                "min_price": m.min_price,
                "max_price": m.max_price,
                "price_spread": m.price_spread,
                "price_cv": m.price_cv,
                "traded_volume": m.traded_volume,
            }
            for m in self.metrics_history
        ]
