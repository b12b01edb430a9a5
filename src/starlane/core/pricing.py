"""
Price function, production model, and credit formatting.

All functions are pure. ``price_factor`` and ``production_delta`` work on
scalars and elementwise on numpy arrays alike.
"""

from __future__ import annotations

import math

import numpy as np


def price_factor(currency, stockpile, scale: float = 0.001):
    """Unit price multiplier for a system holding ``currency`` and ``stockpile``.

    Strictly increasing in currency and strictly decreasing in stockpile.
    Callers must only pass positive stockpiles.
    """
    return scale * currency / stockpile


def production_delta(
    modifier,
    stockpile,
    production_modifier: float = 0.1,
    production_scale: float = 180_000.0,
    consumption_scale: float = 18_000.0,
):
    """Stockpile change over one sub-step.

    Producers (modifier >= 0) restock faster when scarce:
    ``pm * mod * production_scale / stockpile``.
    Consumers (modifier < 0) use up a share of what is on hand:
    ``pm * mod * stockpile / consumption_scale``. The result stays above
    ``-stockpile`` as long as ``pm * mod > -consumption_scale``.
    """
    if np.ndim(modifier) == 0 and np.ndim(stockpile) == 0:
        if modifier >= 0:
            return production_modifier * modifier * (production_scale / stockpile)
        return production_modifier * modifier * (stockpile / consumption_scale)

    modifier = np.asarray(modifier, dtype=np.float64)
    stockpile = np.asarray(stockpile, dtype=np.float64)
    return np.where(
        modifier >= 0,
        production_modifier * modifier * (production_scale / stockpile),
        production_modifier * modifier * (stockpile / consumption_scale),
    )


def purchase_cost(
    quantity: int, currency: float, stockpile: float, scale: float = 0.001,
) -> float:
    """Quote the currency needed to buy ``quantity`` units from a system.

    Units are priced one at a time, each purchase moving currency into the
    system and goods out of it, so large orders get progressively dearer.
    Negative quantities quote a sale. Returns ``math.inf`` when the order
    would leave one unit or less on hand. Nothing is mutated.
    """
    if stockpile - quantity <= 1.0:
        return math.inf

    step = 1 if quantity > 0 else -1
    total = 0.0
    for _ in range(abs(quantity)):
        price = price_factor(currency, stockpile, scale)
        currency += price * step
        stockpile -= step
        total += price
    return total


_SUFFIXES: list[tuple[float, str]] = [
    (1e15, "Q"),
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
]


def format_credits(credits: float, decimals: int = 1) -> str:
    """Render a credit amount for display, e.g. ``1.5M`` or ``2.00B``.

    ``decimals < 0`` prints the whole amount as an integer.
    """
    if decimals >= 0:
        for threshold, suffix in _SUFFIXES:
            if credits >= threshold:
                return f"{credits / threshold:.{decimals}f}{suffix}"
    return f"{int(credits)}"
