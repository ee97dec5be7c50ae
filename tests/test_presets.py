"""
Tests for src/riskmodel/presets.py - named scenario bundles.
"""

import pytest

from src.riskmodel.catalog import EVENTS
from src.riskmodel.params import validate_parameters
from src.riskmodel.presets import DEFAULT_PRESET, PRESETS, get_preset, list_presets


class TestPresets:

    def test_eight_presets_in_order(self):
        keys = [p.key for p in list_presets()]
        assert keys == [
            "optimist", "adaptation", "current", "twothings",
            "natesworld", "tindaletrap", "convergence", "pessimist",
        ]
        assert DEFAULT_PRESET in PRESETS

    @pytest.mark.parametrize("key", sorted(PRESETS))
    def test_every_preset_is_valid_and_complete(self, key):
        params = get_preset(key).to_parameters()
        validate_parameters(params)
        assert set(params.probabilities) == {e.id for e in EVENTS}

    def test_current_matches_catalog_defaults(self):
        current = get_preset("current")
        assert current.start_state == 1
        assert current.background == 0.5
        for e in EVENTS:
            assert current.probabilities[e.id] == e.base

    def test_unknown_preset(self):
        with pytest.raises(KeyError, match="Valid presets"):
            get_preset("doom")
