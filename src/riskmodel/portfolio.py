"""
Portfolio evolution.

Three wealth indices start at 100 and compound once per year at the return
of the newly sampled world state, plus independent uniform noise. Formation
capital also earns a tilt that follows substrate health.
"""

from typing import Sequence

import numpy as np

from .catalog import PORTFOLIOS, RETURNS

INITIAL_VALUE = 100.0
NOISE_AMPLITUDE = 0.03

FORMATION_INDEX = PORTFOLIOS.index("formation")
HEALTHY_THRESHOLD = 60
DEPLETED_THRESHOLD = 30
FORMATION_TILT = 0.01


def formation_bonus(health: float) -> float:
    if health > HEALTHY_THRESHOLD:
        return FORMATION_TILT
    if health < DEPLETED_THRESHOLD:
        return -FORMATION_TILT
    return 0.0


def evolve(values: np.ndarray, state: int, health: float, noise: Sequence[float]) -> np.ndarray:
    """Apply one year of growth to the portfolio values (returns a new array)."""
    growth = np.asarray(RETURNS[state], dtype=float) + np.asarray(noise, dtype=float)
    growth[FORMATION_INDEX] += formation_bonus(health)
    return values * (1 + growth)


def draw_noise(rng: np.random.Generator) -> np.ndarray:
    return rng.uniform(-NOISE_AMPLITUDE, NOISE_AMPLITUDE, len(PORTFOLIOS))
