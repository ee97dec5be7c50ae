"""
Headline statistics derived from AggregateResults.

Hosts (CLI, dashboards) read these instead of recomputing shares and bands
from the raw histograms.
"""

from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from .catalog import N_YEARS, PORTFOLIO_LABELS, STATES
from .simulation import AggregateResults, median, percentile

DANGER_THRESHOLD = 40.0
WARNING_THRESHOLD = 20.0
HEALTHY_SUBSTRATE = 60
STRAINED_SUBSTRATE = 35


def wilson_ci(successes: int, n: int, z: float = 1.96) -> Tuple[float, float]:
    """Wilson score confidence interval for proportion"""
    if n == 0:
        return (0.0, 0.0)

    p = successes / n
    denominator = 1 + z**2 / n
    center = (p + z**2 / (2*n)) / denominator
    spread = z * (p * (1 - p) / n + z**2 / (4 * n**2))**0.5 / denominator

    return (max(0, center - spread), min(1, center + spread))


def risk_level(percent: float) -> str:
    if percent >= DANGER_THRESHOLD:
        return "danger"
    if percent >= WARNING_THRESHOLD:
        return "warning"
    return "safe"


def substrate_condition(health: float) -> str:
    if health > HEALTHY_SUBSTRATE:
        return "healthy"
    if health > STRAINED_SUBSTRATE:
        return "strained"
    return "critical"


def _tail_risk(counts: Sequence[int], n: int, from_state: int) -> Dict[str, Any]:
    hits = sum(counts[from_state:])
    low, high = wilson_ci(hits, n)
    pct = 100 * hits / n
    return {
        "probability": hits / n,
        "ci_low": low,
        "ci_high": high,
        "level": risk_level(pct),
    }


def summarize(results: AggregateResults) -> Dict[str, Any]:
    """Terminal distribution, tail risks, substrate condition and portfolio outcomes."""
    n = results.n_trials
    counts = results.terminal_states

    distribution = {}
    for state, name in enumerate(STATES):
        low, high = wilson_ci(counts[state], n)
        distribution[name] = {
            "count": counts[state],
            "probability": counts[state] / n,
            "ci_low": low,
            "ci_high": high,
        }

    final_health = results.substrate_health[N_YEARS]

    portfolios = {}
    for name, values in results.portfolios.items():
        portfolios[name] = {
            "label": PORTFOLIO_LABELS[name],
            "median": median(values),
            "p10": percentile(values, 10),
        }

    return {
        "n_trials": n,
        "terminal_distribution": distribution,
        "severe_or_worse": _tail_risk(counts, n, 2),
        "crisis_or_worse": _tail_risk(counts, n, 3),
        "civilisational_stress": _tail_risk(counts, n, 4),
        "substrate": {
            "final_median": final_health,
            "condition": substrate_condition(final_health),
        },
        "portfolios": portfolios,
    }


def portfolio_histogram(
    values: Sequence[float],
    bins: int = 40,
    low: float = 0.0,
    high: float = 300.0,
) -> List[float]:
    """Percentage of values per equal-width bin on [low, high]; outliers land in the end bins."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return [0.0] * bins
    width = (high - low) / bins
    idx = np.clip(np.floor((arr - low) / width), 0, bins - 1).astype(int)
    counts = np.bincount(idx, minlength=bins)
    return (counts / arr.size * 100).tolist()
