"""
Tests for src/riskmodel/scheduler.py - window probability to annual hazard and firing years.
"""

import numpy as np
import pytest

from src.riskmodel.catalog import EVENTS, get_event
from src.riskmodel.params import SimulationParameters
from src.riskmodel.scheduler import (
    draw_fire_year,
    event_hazard,
    schedule_events,
    window_prob_to_annual_hazard,
)


class TestWindowHazard:
    """Tests for the cumulative-to-annual conversion."""

    def test_bounds(self):
        assert window_prob_to_annual_hazard(0.0, 5) == 0.0
        assert window_prob_to_annual_hazard(1.0, 5) == 1.0

    def test_single_year_window_is_identity(self):
        assert window_prob_to_annual_hazard(0.4, 1) == pytest.approx(0.4)

    def test_matches_closed_form(self):
        assert window_prob_to_annual_hazard(0.25, 4) == pytest.approx(1 - 0.75 ** 0.25)

    def test_round_trip_over_window(self):
        """Constant hazard over the window reproduces the cumulative probability."""
        h = window_prob_to_annual_hazard(0.6, 7)
        assert 1 - (1 - h) ** 7 == pytest.approx(0.6)

    def test_monotonic_in_probability(self):
        hazards = [window_prob_to_annual_hazard(p / 100, 6) for p in range(0, 101, 5)]
        assert hazards == sorted(hazards)

    def test_rejects_empty_window(self):
        with pytest.raises(ValueError, match="window_years"):
            window_prob_to_annual_hazard(0.5, 0)

    def test_sign_ignored_for_bidirectional(self):
        energy = get_event("energy")
        assert event_hazard(energy, -40) == event_hazard(energy, 40)


class TestDrawFireYear:
    """Tests for per-trial firing."""

    def test_zero_probability_never_fires(self):
        rng = np.random.default_rng(0)
        event = get_event("conflict")
        assert all(draw_fire_year(event, 0, rng) is None for _ in range(2000))

    def test_certain_event_fires_at_window_start(self):
        rng = np.random.default_rng(0)
        event = get_event("climate")
        assert draw_fire_year(event, 100, rng) == 5

    def test_fire_year_within_window(self):
        rng = np.random.default_rng(1)
        event = get_event("debt")
        years = [draw_fire_year(event, 90, rng) for _ in range(2000)]
        fired = [y for y in years if y is not None]
        assert fired
        assert min(fired) >= event.peak[0]
        assert max(fired) <= event.peak[1]

    @pytest.mark.parametrize("p", [0, 25, 50, 95])
    def test_frequency_converges_to_cumulative_probability(self, p):
        rng = np.random.default_rng(1234 + p)
        event = get_event("debt")
        n = 20000
        fired = sum(draw_fire_year(event, p, rng) is not None for _ in range(n))
        assert fired / n == pytest.approx(p / 100, abs=0.02)

    def test_earlier_years_more_likely(self):
        """Constant hazard means the first window year is the most frequent firing year."""
        rng = np.random.default_rng(5)
        event = get_event("ins")
        years = [draw_fire_year(event, 70, rng) for _ in range(10000)]
        counts = [years.count(y) for y in range(event.peak[0], event.peak[1] + 1)]
        assert counts[0] > counts[-1]


class TestScheduleEvents:
    """Tests for scheduling every event in a trial."""

    def test_schedules_every_event(self):
        rng = np.random.default_rng(3)
        probabilities = SimulationParameters().effective_probabilities()
        fire_years = schedule_events(probabilities, rng)
        assert set(fire_years) == {e.id for e in EVENTS}

    def test_same_seed_same_schedule(self):
        probabilities = SimulationParameters().effective_probabilities()
        a = schedule_events(probabilities, np.random.default_rng(11))
        b = schedule_events(probabilities, np.random.default_rng(11))
        assert a == b
