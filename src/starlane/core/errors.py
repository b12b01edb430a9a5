"""
Exception types shared across the economy core.

Configuration problems are fatal at load time; lookups of goods that do not
take part in the simulation are recoverable.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Malformed or missing catalog, topology, or configuration data."""


class UnknownCommodityError(KeyError):
    """A commodity is not part of the simulated economy index."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown commodity: '{self.name}'"


class SimulationStateError(RuntimeError):
    """An operation needs an initialized simulation."""
