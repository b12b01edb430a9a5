"""
Experiment Runner: A/B testing and parameter sweeps over economy tunings.

Runs the same galaxy under different configurations so that tuning
constants such as ``trade_modifier`` can be compared on equal terms.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

import numpy as np

from starlane.core.commodities import CommodityCatalog, EconomyIndex, default_catalog
from starlane.core.config import EconomyConfig
from starlane.core.economy import EconomySimulation
from starlane.core.galaxy import Galaxy
from starlane.core.galaxy_generators import generate_from_config
from starlane.metrics.collector import MarketSnapshot, MetricsCollector


@dataclass
class ExperimentResult:
    """Result of a single experiment run."""
    config: EconomyConfig
    metrics: list[MarketSnapshot]
    substeps_run: int
    initial_mean_cv: float
    final_mean_cv: float
    final_min_stockpile: float
    final_total_credits: float


@dataclass
class ComparisonResult:
    """Result of comparing two or more experiments."""
    results: dict[str, ExperimentResult]
    config_diffs: dict[str, Any]


def _mean_cv(snapshot: MarketSnapshot) -> float:
    values = list(snapshot.price_cv.values())
    return float(np.mean(values)) if values else 0.0


class ExperimentRunner:
    """
    Run, compare, and sweep economy experiments.

    Every run shares one catalog and, unless given one, one galaxy
    generated from the first config, so differences between results come
    from tuning alone.
    """

    def __init__(
        self,
        catalog: CommodityCatalog | None = None,
        galaxy: Galaxy | None = None,
    ):
        self.catalog = catalog or default_catalog()
        self.index = EconomyIndex(self.catalog)
        self.galaxy = galaxy

    def _galaxy_for(self, config: EconomyConfig) -> Galaxy:
        if self.galaxy is None:
            self.galaxy = generate_from_config(
                config.galaxy_config, self.index.names(), seed=config.random_seed,
            )
        return self.galaxy

    def run_experiment(
        self,
        config: EconomyConfig,
        jumps: int = 50,
    ) -> ExperimentResult:
        """Advance one standard jump at a time and collect metrics."""
        sim = EconomySimulation(config, self.index, self._galaxy_for(config))
        sim.initialize()

        collector = MetricsCollector()
        collector.collect(sim)
        for _ in range(jumps):
            sim.advance(config.tick_quantum)
            collector.collect(sim)

        first = collector.metrics_history[0]
        last = collector.metrics_history[-1]
        return ExperimentResult(
            config=config,
            metrics=collector.metrics_history,
            substeps_run=sim.substeps_run,
            initial_mean_cv=_mean_cv(first),
            final_mean_cv=_mean_cv(last),
            final_min_stockpile=last.min_stockpile,
            final_total_credits=last.total_credits,
        )

    def compare_experiments(
        self,
        configs: dict[str, EconomyConfig],
        jumps: int = 50,
    ) -> ComparisonResult:
        """Run multiple experiments and compare results."""
        results: dict[str, ExperimentResult] = {}
        for name, config in configs.items():
            results[name] = self.run_experiment(config, jumps)

        config_names = list(configs.keys())
        diffs: dict[str, Any] = {}
        if len(config_names) >= 2:
            base = configs[config_names[0]]
            for name in config_names[1:]:
                diffs[f"{config_names[0]}_vs_{name}"] = base.diff(configs[name])

        return ComparisonResult(results=results, config_diffs=diffs)

    def run_ab_test(
        self,
        config_a: EconomyConfig,
        config_b: EconomyConfig,
        label_a: str = "A",
        label_b: str = "B",
        jumps: int = 50,
    ) -> ComparisonResult:
        """Run an A/B test between two configurations."""
        return self.compare_experiments({label_a: config_a, label_b: config_b}, jumps)

    def run_parameter_sweep(
        self,
        base_config: EconomyConfig,
        param_name: str,
        values: list[Any],
        jumps: int = 50,
    ) -> dict[str, ExperimentResult]:
        """
        Sweep a single parameter across multiple values.

        Args:
            base_config: Base configuration to modify
            param_name: Name of the parameter to sweep (attribute on EconomyConfig)
            values: List of values to test
            jumps: Standard jumps to advance each run

        Returns:
            Dict mapping value label -> ExperimentResult
        """
        results: dict[str, ExperimentResult] = {}
        for val in values:
            config_dict = copy.deepcopy(base_config.to_dict())
            config_dict[param_name] = val
            config_dict["experiment_name"] = f"sweep_{param_name}={val}"
            config = EconomyConfig.from_dict(config_dict)
            results[f"{param_name}={val}"] = self.run_experiment(config, jumps)
        return results
