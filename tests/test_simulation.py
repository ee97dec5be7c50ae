"""
Tests for src/riskmodel/simulation.py - trial loop, aggregation and the run() entry point.
"""

import json

import numpy as np
import pytest

from src.riskmodel import simulation
from src.riskmodel.catalog import EVENTS
from src.riskmodel.params import ParameterValidationError, SimulationParameters
from src.riskmodel.presets import get_preset
from src.riskmodel.simulation import median, percentile, run, run_trial


def severe_mass(results):
    return sum(results.terminal_states[2:]) / results.n_trials


class TestPercentile:
    """Tests for the index-based percentile helper."""

    def test_reference_values(self):
        values = [10, 20, 30, 40]
        assert percentile(values, 50) == 30
        assert percentile(values, 0) == 10
        assert percentile(values, 100) == 40

    def test_median_is_p50(self):
        assert median([1, 2, 3]) == 2
        assert median(np.array([5.0])) == 5.0

    def test_empty(self):
        with pytest.raises(ValueError):
            percentile([], 50)


class TestRunTrial:
    """Tests for a single realization."""

    def test_series_lengths_and_start(self):
        probabilities = SimulationParameters().effective_probabilities()
        trial = run_trial(probabilities, 3, 0.5, np.random.default_rng(0))
        assert len(trial.states) == 11
        assert len(trial.health) == 11
        assert trial.portfolios.shape == (11, 3)
        assert trial.states[0] == 3
        assert trial.health[0] == 100.0
        assert trial.portfolios[0].tolist() == [100.0, 100.0, 100.0]
        assert len(trial.rows) == 10

    def test_rows_stochastic_every_year(self):
        """Every modified transition row sums to one and is non-negative."""
        rng = np.random.default_rng(21)
        extreme = {e.id: (95 if not e.bidirectional else 80) for e in EVENTS}
        stabilizing = {e.id: (5 if not e.bidirectional else -80) for e in EVENTS}
        for probabilities in (extreme, stabilizing, SimulationParameters().effective_probabilities()):
            for start in range(5):
                for _ in range(40):
                    trial = run_trial(probabilities, start, 1.0, rng)
                    for row in trial.rows:
                        assert sum(row) == pytest.approx(1.0)
                        assert min(row) >= 0.0

    def test_fire_years_fixed_for_trial(self):
        probabilities = SimulationParameters().effective_probabilities()
        trial = run_trial(probabilities, 1, 0.5, np.random.default_rng(4))
        for e in EVENTS:
            year = trial.fire_years[e.id]
            assert year is None or e.peak[0] <= year <= e.peak[1]


class TestRunValidation:
    """Tests for batch-entry rejection of out-of-contract inputs."""

    @pytest.mark.parametrize("n", [0, -1, 10.5])
    def test_bad_trial_count(self, n):
        with pytest.raises(ParameterValidationError, match="Trial count"):
            run(SimulationParameters(), n)

    def test_bad_start_state(self):
        with pytest.raises(ParameterValidationError, match="start_state"):
            run({"start_state": 5}, 10)

    def test_non_finite_probability(self):
        with pytest.raises(ParameterValidationError, match="ins"):
            run({"ins": float("nan")}, 10)


class TestRunAggregation:
    """Tests for the aggregate results structure."""

    @pytest.fixture(scope="class")
    def results(self):
        return run(get_preset("current").to_parameters(), 400, seed=99)

    def test_histograms(self, results):
        assert sum(results.terminal_states) == 400
        assert len(results.yearly_distribution) == 11
        assert results.yearly_distribution[0] == [0, 400, 0, 0, 0]
        assert all(sum(c) == 400 for c in results.yearly_distribution)
        assert results.terminal_states == results.yearly_distribution[10]

    def test_terminal_probabilities_and_shares(self, results):
        assert sum(results.terminal_probabilities()) == pytest.approx(1.0)
        assert results.state_shares(0) == [0.0, 1.0, 0.0, 0.0, 0.0]

    def test_yearly_lists_sorted(self, results):
        for values in results.yearly_portfolios.values():
            assert values.shape == (11, 400)
            assert np.all(np.diff(values, axis=1) >= 0)
        assert np.all(np.diff(results.yearly_health, axis=1) >= 0)

    def test_health_within_bounds(self, results):
        assert results.yearly_health.min() >= 0.0
        assert results.yearly_health.max() <= 100.0

    def test_median_and_percentile_paths(self, results):
        for name, path in results.median_paths.items():
            assert len(path) == 11
            assert path[0] == 100.0
            assert results.percentile_paths[name][10][10] <= path[10] <= results.percentile_paths[name][90][10]
            assert path[10] == percentile(results.yearly_portfolios[name][10], 50)
        assert results.substrate_health[0] == 100.0
        assert results.substrate_percentiles[10][5] <= results.substrate_health[5]

    def test_terminal_portfolios_sorted(self, results):
        for values in results.portfolios.values():
            assert len(values) == 400
            assert np.all(np.diff(values) >= 0)

    def test_sample_paths_retained(self, results):
        assert len(results.sample_paths) == 150
        assert all(len(p) == 11 and p[0] == 1 for p in results.sample_paths)

    def test_to_dict_is_json_serializable(self, results):
        out = results.to_dict()
        text = json.dumps(out)
        assert '"n_trials": 400' in text
        assert "yearly_health" not in out
        assert len(results.to_dict(include_yearly=True)["yearly_health"]) == 11

    def test_small_batch_keeps_all_paths(self):
        results = run(SimulationParameters(start_state=0), 20, seed=1)
        assert len(results.sample_paths) == 20
        assert results.yearly_distribution[0] == [20, 0, 0, 0, 0]


class TestDeterminism:
    """Identical random streams reproduce identical results."""

    def test_same_seed(self):
        a = run(get_preset("convergence").to_parameters(), 300, seed=17)
        b = run(get_preset("convergence").to_parameters(), 300, seed=17)
        assert a.terminal_states == b.terminal_states
        assert a.sample_paths == b.sample_paths
        assert a.median_paths == b.median_paths
        assert np.array_equal(a.yearly_health, b.yearly_health)

    def test_injected_generator_matches_seed(self):
        params = get_preset("twothings").to_parameters()
        a = run(params, 200, rng=np.random.default_rng(5))
        b = run(params, 200, seed=5)
        assert a.to_dict() == b.to_dict()

    def test_different_seeds_differ(self):
        params = get_preset("current").to_parameters()
        a = run(params, 300, seed=1)
        b = run(params, 300, seed=2)
        assert a.sample_paths != b.sample_paths

    def test_run_does_not_mutate_parameters(self):
        params = SimulationParameters({"ai": 40})
        run(params, 50, seed=3)
        assert params.probabilities == {"ai": 40}


class TestStatisticalProperties:
    """Monte Carlo properties over larger batches."""

    def test_health_bounded_for_extreme_inputs(self):
        worst = {e.id: (95 if not e.bidirectional else 80) for e in EVENTS}
        best = {e.id: (0 if not e.bidirectional else -80) for e in EVENTS}
        for probabilities, start in ((worst, 4), (best, 0)):
            results = run(dict(probabilities, start_state=start, background=1.0), 500, seed=8)
            assert results.yearly_health.min() >= 0.0
            assert results.yearly_health.max() <= 100.0

    def test_raising_disruptive_probability_does_not_lower_severe_mass(self):
        base = get_preset("current").to_parameters()
        low = run(base.with_overrides(ins=10), 3000, seed=101)
        high = run(base.with_overrides(ins=90), 3000, seed=202)
        assert severe_mass(high) >= severe_mass(low) - 0.01

    def test_presets_order_by_severity(self):
        """Regression band: severe-or-worse mass rises from optimist to current to pessimist."""
        masses = [severe_mass(run(get_preset(k).to_parameters(), 5000, seed=2026))
                  for k in ("optimist", "current", "pessimist")]
        assert masses[0] < masses[1] < masses[2]

    def test_no_pressure_keeps_calm_world_calm(self):
        """With no events and no background pressure the base matrix dominates."""
        quiet = {e.id: 0 for e in EVENTS}
        results = run(dict(quiet, start_state=0, background=0.0), 2000, seed=6)
        assert results.terminal_states[0] / 2000 > 0.75
        assert results.substrate_health[10] == 100.0
