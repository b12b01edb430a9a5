"""Tests for the experiment runner."""

import pytest

from starlane.core.config import EconomyConfig
from starlane.experiment.runner import ComparisonResult, ExperimentResult, ExperimentRunner


def _make_config(**overrides) -> EconomyConfig:
    config = EconomyConfig(random_seed=5, **overrides)
    config.configure_galaxy(n_systems=6)
    return config


class TestRunExperiment:
    def test_single_run(self):
        runner = ExperimentRunner()
        result = runner.run_experiment(_make_config(), jumps=4)
        assert isinstance(result, ExperimentResult)
        assert result.substeps_run == 4
        assert len(result.metrics) == 5
        # every system starts from the same state
        assert result.initial_mean_cv == 0.0
        assert result.final_min_stockpile > 0

    def test_runs_share_galaxy(self):
        runner = ExperimentRunner()
        runner.run_experiment(_make_config(), jumps=1)
        galaxy = runner.galaxy
        runner.run_experiment(_make_config(trade_modifier=0.5), jumps=1)
        assert runner.galaxy is galaxy
        assert len(galaxy) == 6

    def test_total_credits_conserved(self):
        runner = ExperimentRunner()
        result = runner.run_experiment(_make_config(), jumps=6)
        first = result.metrics[0].total_credits
        assert result.final_total_credits == pytest.approx(first, rel=1e-9)


class TestComparisons:
    def test_ab_test(self):
        runner = ExperimentRunner()
        comparison = runner.run_ab_test(
            _make_config(trade_modifier=0.1), _make_config(trade_modifier=1.0),
            label_a="slow", label_b="fast", jumps=3,
        )
        assert isinstance(comparison, ComparisonResult)
        assert set(comparison.results) == {"slow", "fast"}
        assert comparison.config_diffs["slow_vs_fast"] == {"trade_modifier": (0.1, 1.0)}

    def test_parameter_sweep(self):
        runner = ExperimentRunner()
        results = runner.run_parameter_sweep(
            _make_config(), "production_modifier", [0.0, 0.5], jumps=2,
        )
        assert list(results) == ["production_modifier=0.0", "production_modifier=0.5"]
        assert results["production_modifier=0.5"].config.production_modifier == 0.5
        assert results["production_modifier=0.0"].config.experiment_name == (
            "sweep_production_modifier=0.0"
        )
