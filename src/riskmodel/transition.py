"""
Transition row modification and next-state sampling.

The base row for the current state is perturbed by four mass transfers, always
applied in this order, each consuming the row left by the previous one:

    1. background drift      (toward the next-worse state)
    2. disruption transfer   (toward all worse states, weighted by distance)
    3. recovery suppression  (mass on better states moved just past current)
    4. stabilization pull    (mass on worse states moved one step back)

The result is renormalized to a probability row. At state 4 the disruption
transfer has no worse target: the mass it takes from each source is dropped and
renormalization hands the weight back in proportion, which tilts the row
toward staying put.
"""

from typing import List, Sequence

import numpy as np

from .catalog import BASE_MATRIX, WORST_STATE
from .pressure import YearlyPressure

BACKGROUND_DRIFT_SCALE = 0.15
DISRUPTION_TRANSFER_SCALE = 0.7
DISRUPTION_LOWER_SHARE = 0.5
DISRUPTION_SELF_SHARE = 0.3
SUPPRESSION_PER_EVENT = 0.15
SUPPRESSION_CAP = 0.8
DEGRADATION_PER_YEAR = 0.08
DEGRADATION_CAP = 0.6
STRESS_THRESHOLD = 2
STRESS_DECAY = 0.5
STABILIZATION_SCALE = 0.5
STABILIZATION_WORSE_SHARE = 0.3
STABILIZATION_SELF_SHARE = 0.2


# ============================================================================
# STRESS HYSTERESIS
# ============================================================================

def update_time_in_stress(time_in_stress: float, state: int) -> float:
    """Grows by one per year spent in a stressed state, otherwise decays."""
    if state >= STRESS_THRESHOLD:
        return time_in_stress + 1
    return max(0.0, time_in_stress - STRESS_DECAY)


def recovery_degradation(time_in_stress: float) -> float:
    return min(DEGRADATION_CAP, time_in_stress * DEGRADATION_PER_YEAR)


# ============================================================================
# ROW STEPS
# ============================================================================

def _worse_state_weights(state: int) -> List[float]:
    """Linear distance weights over states above `state`, summing to 1."""
    distances = list(range(1, WORST_STATE - state + 1))
    total = sum(distances)
    return [d / total for d in distances]


def _spread_forward(row: List[float], state: int, amount: float, weights: List[float]) -> None:
    for offset, w in enumerate(weights, start=1):
        row[state + offset] += amount * w


def apply_background_drift(row: List[float], state: int, background: float) -> List[float]:
    """Shift a fraction of each state up to the current one into the next-worse state."""
    if background <= 0 or state >= WORST_STATE:
        return row
    shift = background * BACKGROUND_DRIFT_SCALE
    for s in range(state + 1):
        moved = row[s] * shift
        row[s] -= moved
        row[min(s + 1, WORST_STATE)] += moved
    return row


def apply_disruption_transfer(row: List[float], state: int, composite: float) -> List[float]:
    """Push mass from better states and from the current state toward worse states."""
    if composite <= 0:
        return row
    transfer = composite * DISRUPTION_TRANSFER_SCALE
    # Empty at the worst state: the moved mass leaves the row
    weights = _worse_state_weights(state)

    for s in range(state):
        moved = row[s] * transfer * DISRUPTION_LOWER_SHARE
        row[s] -= moved
        _spread_forward(row, state, moved, weights)

    moved = row[state] * transfer * DISRUPTION_SELF_SHARE
    row[state] -= moved
    _spread_forward(row, state, moved, weights)
    return row


def suppression_strength(recovery_blocking_count: int, degradation: float) -> float:
    return min(SUPPRESSION_CAP, SUPPRESSION_PER_EVENT * recovery_blocking_count + degradation)


def apply_recovery_suppression(row: List[float], state: int, suppression: float) -> List[float]:
    """Move mass on better states to the state just past the current one."""
    if suppression <= 0:
        return row
    target = min(state + 1, WORST_STATE)
    for s in range(state):
        moved = row[s] * suppression
        row[s] -= moved
        row[target] += moved
    return row


def apply_stabilization_pull(row: List[float], state: int, stabilizing: float) -> List[float]:
    """Pull mass on worse states (and the current state) one step back."""
    if stabilizing <= 0:
        return row
    st = stabilizing * STABILIZATION_SCALE
    for s in range(state + 1, WORST_STATE + 1):
        moved = row[s] * st * STABILIZATION_WORSE_SHARE
        row[s] -= moved
        row[max(s - 1, 0)] += moved
    if state > 0:
        moved = row[state] * st * STABILIZATION_SELF_SHARE
        row[state] -= moved
        row[state - 1] += moved
    return row


def normalize_row(row: Sequence[float]) -> List[float]:
    """Divide by the row sum and floor negatives at zero."""
    total = sum(row)
    return [max(0.0, v / total) for v in row]


def modified_row(state: int, pressure: YearlyPressure, degradation: float) -> List[float]:
    """Perturbed, renormalized transition row for the current state."""
    row = list(BASE_MATRIX[state])
    apply_background_drift(row, state, pressure.background)
    apply_disruption_transfer(row, state, pressure.composite)
    apply_recovery_suppression(
        row, state, suppression_strength(pressure.recovery_blocking_count, degradation)
    )
    apply_stabilization_pull(row, state, pressure.stabilizing)
    return normalize_row(row)


# ============================================================================
# SAMPLER
# ============================================================================

def sample_state(row: Sequence[float], u: float) -> int:
    """First index whose cumulative probability exceeds u; the worst state on rounding shortfall."""
    cumulative = 0.0
    for s, p in enumerate(row):
        cumulative += p
        if u < cumulative:
            return s
    return WORST_STATE


def draw_next_state(row: Sequence[float], rng: np.random.Generator) -> int:
    return sample_state(row, rng.random())
