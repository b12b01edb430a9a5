"""Tests for economy presets."""

import pytest

from starlane.core.config import EconomyConfig
from starlane.experiment.presets import PRESETS, get_preset, list_presets


class TestPresets:
    def test_all_presets_exist(self):
        expected = ["legacy", "sluggish_trade", "fast_trade", "high_production", "austerity"]
        assert list_presets() == expected

    @pytest.mark.parametrize("name", list(PRESETS))
    def test_preset_is_valid(self, name):
        config = get_preset(name)
        assert isinstance(config, EconomyConfig)
        assert config.experiment_name == name
        config.validate()

    def test_legacy_matches_defaults(self):
        assert get_preset("legacy").diff(EconomyConfig()) == {
            "experiment_name": ("legacy", "default"),
        }

    def test_trade_presets(self):
        assert get_preset("sluggish_trade").trade_modifier == 0.1
        assert get_preset("fast_trade").trade_modifier == 1.0

    def test_austerity_uses_chain(self):
        config = get_preset("austerity")
        assert config.galaxy_config["generator"] == "chain"
        assert config.galaxy_config["n_systems"] == 8
        assert config.starting_credits < EconomyConfig().starting_credits

    def test_presets_are_independent(self):
        a = get_preset("austerity")
        a.galaxy_config["n_systems"] = 99
        assert get_preset("austerity").galaxy_config["n_systems"] == 8

    def test_unknown_preset(self):
        with pytest.raises(KeyError, match="Unknown preset"):
            get_preset("nope")
