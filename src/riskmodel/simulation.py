"""
Systemic Risk Monte Carlo Engine
================================

Estimates the distribution over five ordinal world states after a ten-year
horizon. Each trial schedules the twelve stress events once, then steps year
by year: compose pressure, update substrate health, perturb and renormalize
the transition row, sample the next state and grow the three portfolios.

Usage:
    from src.riskmodel import simulation
    from src.riskmodel.presets import get_preset

    results = simulation.run(get_preset("current").to_parameters(), 5000, seed=42)
    print(results.terminal_probabilities())

`run` is a pure function of its inputs and the random stream: pass `rng=` (a
numpy Generator) or `seed=` for reproducible batches.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from .catalog import N_STATES, N_YEARS, PORTFOLIOS
from .params import (
    SimulationParameters,
    coerce_parameters,
    validate_parameters,
    validate_trial_count,
)
from .portfolio import INITIAL_VALUE, draw_noise, evolve
from .pressure import compose_pressure
from .scheduler import schedule_events
from .substrate import INITIAL_HEALTH, update_health
from .transition import draw_next_state, modified_row, recovery_degradation, update_time_in_stress

logger = logging.getLogger(__name__)

DEFAULT_TRIALS = 5000
SAMPLE_PATH_COUNT = 150
DEFAULT_PERCENTILES = (10, 90)


# ============================================================================
# PERCENTILES
# ============================================================================

def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Value at index min(floor(len * p / 100), len - 1) of an ascending list."""
    n = len(sorted_values)
    if n == 0:
        raise ValueError("percentile of an empty sequence")
    idx = min(math.floor(n * p / 100), n - 1)
    return float(sorted_values[idx])


def median(sorted_values: Sequence[float]) -> float:
    return percentile(sorted_values, 50)


# ============================================================================
# SINGLE TRIAL
# ============================================================================

@dataclass
class TrialResult:
    """One ten-year realization; index 0 of every series is the initial snapshot."""
    fire_years: Dict[str, Optional[int]]
    states: List[int]
    health: List[float]
    portfolios: np.ndarray  # shape (N_YEARS + 1, len(PORTFOLIOS))
    rows: List[List[float]] = field(default_factory=list)

    @property
    def terminal_state(self) -> int:
        return self.states[-1]


def run_trial(
    probabilities: Mapping[str, float],
    start_state: int,
    background: float,
    rng: np.random.Generator,
) -> TrialResult:
    """Run one trial with effective probabilities for every event."""
    fire_years = schedule_events(probabilities, rng)

    state = start_state
    health = INITIAL_HEALTH
    values = np.full(len(PORTFOLIOS), INITIAL_VALUE)
    time_in_stress = 0.0

    states = [state]
    healths = [health]
    values_by_year = np.empty((N_YEARS + 1, len(PORTFOLIOS)))
    values_by_year[0] = values
    rows = []

    for year in range(1, N_YEARS + 1):
        pressure = compose_pressure(year, fire_years, probabilities, background)

        time_in_stress = update_time_in_stress(time_in_stress, state)
        health = update_health(health, state, pressure)

        row = modified_row(state, pressure, recovery_degradation(time_in_stress))
        rows.append(row)
        state = draw_next_state(row, rng)

        values = evolve(values, state, health, draw_noise(rng))

        states.append(state)
        healths.append(health)
        values_by_year[year] = values

    return TrialResult(
        fire_years=fire_years,
        states=states,
        health=healths,
        portfolios=values_by_year,
        rows=rows,
    )


# ============================================================================
# AGGREGATE RESULTS
# ============================================================================

@dataclass
class AggregateResults:
    """Folded outcome of a batch of trials."""
    n_trials: int
    parameters: SimulationParameters
    terminal_states: List[int]
    yearly_distribution: List[List[int]]
    # Per portfolio, shape (N_YEARS + 1, n_trials), each year sorted ascending
    yearly_portfolios: Dict[str, np.ndarray]
    # Shape (N_YEARS + 1, n_trials), each year sorted ascending
    yearly_health: np.ndarray
    median_paths: Dict[str, List[float]]
    percentile_paths: Dict[str, Dict[float, List[float]]]
    substrate_health: List[float]
    substrate_percentiles: Dict[float, List[float]]
    sample_paths: List[List[int]]

    @property
    def portfolios(self) -> Dict[str, np.ndarray]:
        """Sorted terminal value distribution per portfolio."""
        return {name: values[-1] for name, values in self.yearly_portfolios.items()}

    def terminal_probabilities(self) -> List[float]:
        return [c / self.n_trials for c in self.terminal_states]

    def state_shares(self, year: int) -> List[float]:
        """Fraction of trials in each state at `year` (0 = initial snapshot)."""
        counts = self.yearly_distribution[year]
        total = sum(counts)
        return [c / total for c in counts]

    def to_dict(self, include_yearly: bool = False) -> Dict[str, Any]:
        """JSON-serializable view of the results."""
        out = {
            "n_trials": self.n_trials,
            "parameters": self.parameters.to_dict(),
            "terminal_states": list(self.terminal_states),
            "terminal_probabilities": self.terminal_probabilities(),
            "yearly_distribution": [list(c) for c in self.yearly_distribution],
            "median_paths": self.median_paths,
            "percentile_paths": {
                name: {str(p): path for p, path in bands.items()}
                for name, bands in self.percentile_paths.items()
            },
            "substrate_health": self.substrate_health,
            "substrate_percentiles": {str(p): path for p, path in self.substrate_percentiles.items()},
            "sample_paths": self.sample_paths,
        }
        if include_yearly:
            out["yearly_portfolios"] = {k: v.tolist() for k, v in self.yearly_portfolios.items()}
            out["yearly_health"] = self.yearly_health.tolist()
        return out


def _aggregate(
    params: SimulationParameters,
    states: np.ndarray,
    health: np.ndarray,
    values: np.ndarray,
    percentiles: Sequence[float],
) -> AggregateResults:
    """Fold per-trial arrays (trial-major) into AggregateResults."""
    n_trials = states.shape[0]
    years = range(N_YEARS + 1)

    yearly_distribution = [
        np.bincount(states[:, y], minlength=N_STATES).tolist() for y in years
    ]

    yearly_portfolios = {
        name: np.sort(values[:, :, i].T, axis=1) for i, name in enumerate(PORTFOLIOS)
    }
    yearly_health = np.sort(health.T, axis=1)

    median_paths = {
        name: [median(sorted_years[y]) for y in years]
        for name, sorted_years in yearly_portfolios.items()
    }
    percentile_paths = {
        name: {p: [percentile(sorted_years[y], p) for y in years] for p in percentiles}
        for name, sorted_years in yearly_portfolios.items()
    }

    return AggregateResults(
        n_trials=n_trials,
        parameters=params,
        terminal_states=yearly_distribution[-1],
        yearly_distribution=yearly_distribution,
        yearly_portfolios=yearly_portfolios,
        yearly_health=yearly_health,
        median_paths=median_paths,
        percentile_paths=percentile_paths,
        substrate_health=[median(yearly_health[y]) for y in years],
        substrate_percentiles={p: [percentile(yearly_health[y], p) for y in years] for p in percentiles},
        sample_paths=states[:SAMPLE_PATH_COUNT].tolist(),
    )


# ============================================================================
# BATCH ENTRY POINT
# ============================================================================

def run(
    parameters: Any = None,
    n_trials: int = DEFAULT_TRIALS,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    percentiles: Sequence[float] = DEFAULT_PERCENTILES,
    progress_interval: int = 1000,
) -> AggregateResults:
    """
    Run a batch of independent trials and aggregate them.

    Args:
        parameters: SimulationParameters or a mapping (see params.coerce_parameters)
        n_trials: Number of trials (positive integer)
        rng: Random generator to draw from; built from `seed` when omitted
        seed: Seed for numpy.random.default_rng when no rng is given
        percentiles: Bands reported in percentile_paths/substrate_percentiles
        progress_interval: Trials between progress log lines (0 disables)

    Raises:
        ParameterValidationError: If inputs are outside the supported contract
    """
    params = coerce_parameters(parameters)
    validate_trial_count(n_trials)
    validate_parameters(params)
    if rng is None:
        rng = np.random.default_rng(seed)

    probabilities = params.effective_probabilities()
    logger.info(
        f"Running {n_trials} trials (start_state={params.start_state}, background={params.background})"
    )

    states = np.empty((n_trials, N_YEARS + 1), dtype=np.int64)
    health = np.empty((n_trials, N_YEARS + 1))
    values = np.empty((n_trials, N_YEARS + 1, len(PORTFOLIOS)))

    for i in range(n_trials):
        trial = run_trial(probabilities, params.start_state, params.background, rng)
        states[i] = trial.states
        health[i] = trial.health
        values[i] = trial.portfolios

        if progress_interval and (i + 1) % progress_interval == 0:
            logger.debug(f"Completed {i + 1} / {n_trials} trials")

    results = _aggregate(params, states, health, values, percentiles)
    logger.info(f"Terminal state counts: {results.terminal_states}")
    return results
