"""
Economy presets: pre-configured tuning templates.

Each preset returns an EconomyConfig with specific parameter settings
for exploring how trade and production constants shape galactic prices.
"""

from __future__ import annotations

from typing import Callable

from starlane.core.config import EconomyConfig


def legacy() -> EconomyConfig:
    """The original tuning: near-complete trade clearing, gentle production."""
    return EconomyConfig(experiment_name="legacy")


def sluggish_trade() -> EconomyConfig:
    """Only a small share of desired trade clears; prices diffuse slowly."""
    return EconomyConfig(
        experiment_name="sluggish_trade",
        trade_modifier=0.1,
    )


def fast_trade() -> EconomyConfig:
    """Every edge fully equalizes each sub-step."""
    return EconomyConfig(
        experiment_name="fast_trade",
        trade_modifier=1.0,
    )


def high_production() -> EconomyConfig:
    """Planets produce and consume five times as much."""
    return EconomyConfig(
        experiment_name="high_production",
        production_modifier=0.5,
    )


def austerity() -> EconomyConfig:
    """Systems start poor and thinly stocked on a sparse chain of jumps."""
    return EconomyConfig(
        experiment_name="austerity",
        starting_credits=1_000_000.0,
        starting_goods=10_000.0,
        galaxy_config={
            "generator": "chain",
            "n_systems": 8,
            "planets_per_system": [1, 2],
            "production_range": [-20.0, 20.0],
            "inert_probability": 0.5,
        },
    )


# Registry of all presets
PRESETS: dict[str, Callable[[], EconomyConfig]] = {
    "legacy": legacy,
    "sluggish_trade": sluggish_trade,
    "fast_trade": fast_trade,
    "high_production": high_production,
    "austerity": austerity,
}


def get_preset(name: str) -> EconomyConfig:
    """Get a preset config by name."""
    if name not in PRESETS:
        raise KeyError(f"Unknown preset: '{name}'. Available: {list(PRESETS.keys())}")
    return PRESETS[name]()


def list_presets() -> list[str]:
    """Return list of available preset names."""
    return list(PRESETS.keys())
