"""
Master configuration for the Starlane economy.

ALL tunable parameters live here. Nothing in the simulation is hardcoded.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any

from starlane.core.errors import ConfigurationError


@dataclass
class EconomyConfig:
    """
    Master configuration: every constant of the economy as a tunable slider.

    Use ``to_dict()`` / ``from_dict()`` for serialization and comparison.
    """

    # === Experiment identity ===
    experiment_name: str = "default"
    random_seed: int | None = None

    # === Initial system state ===
    starting_credits: float = 100_000_000.0
    starting_goods: float = 100_000.0

    # === Trade ===
    # Fraction of the trade that would fully equalize two systems which
    # actually clears in one sub-step.
    trade_modifier: float = 0.99
    # Combined stockpile at or below which an edge/good pair does not trade.
    min_joint_stockpile: float = 1e-9

    # === Production / consumption ===
    production_modifier: float = 0.1  # Galaxy-wide scalar
    production_scale: float = 180_000.0  # Producers: delta ~ scale / stockpile
    consumption_scale: float = 18_000.0  # Consumers: delta ~ stockpile / scale
    min_stockpile: float = 1e-6

    # === Pricing ===
    price_scale: float = 0.001  # price factor = scale * credits / stockpile

    # === Time ===
    tick_quantum: int = 10_000_000  # Time units per standard jump or landing

    # === Procedural galaxy ===
    galaxy_config: dict[str, Any] = field(default_factory=lambda: {
        "generator": "cluster",
        "n_systems": 12,
        "max_jump_distance": 0.35,
        "planets_per_system": [1, 3],
        "production_range": [-50.0, 50.0],
        "inert_probability": 0.3,
    })

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """Raise ConfigurationError if any parameter is out of range."""
        if not 0.0 < self.trade_modifier <= 1.0:
            raise ConfigurationError(
                f"trade_modifier must be in (0, 1], got {self.trade_modifier}"
            )
        for name in ("starting_credits", "starting_goods"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be finite and positive, got {value}")
        for name in ("production_scale", "consumption_scale", "price_scale"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive")
        if self.production_modifier < 0:
            raise ConfigurationError("production_modifier must not be negative")
        if self.tick_quantum <= 0:
            raise ConfigurationError("tick_quantum must be a positive integer")
        if self.min_stockpile <= 0:
            raise ConfigurationError("min_stockpile must be positive")
        if self.min_joint_stockpile < 0:
            raise ConfigurationError("min_joint_stockpile must not be negative")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        d: dict[str, Any] = {}
        for k, v in self.__dict__.items():
            if k.startswith("_"):
                continue
            d[k] = v
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> EconomyConfig:
        """Deserialize from a dict."""
        return cls(**{k: v for k, v in d.items() if not k.startswith("_")})

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    @classmethod
    def from_json(cls, s: str) -> EconomyConfig:
        return cls.from_dict(json.loads(s))

    def configure_galaxy(self, **kwargs: Any) -> None:
        """Update parameters of the procedural galaxy generator."""
        self.galaxy_config.update(kwargs)

    def diff(self, other: EconomyConfig) -> dict[str, tuple[Any, Any]]:
        """Return parameters that differ between two configs."""
        diffs: dict[str, tuple[Any, Any]] = {}
        for k in self.to_dict():
            v1 = getattr(self, k)
            v2 = getattr(other, k)
            if v1 != v2:
                diffs[k] = (v1, v2)
        return diffs
