"""
Event scheduling.

Each trial decides once, up front, whether and in which year every event
fires. The configured value is a cumulative probability over the event's peak
window; it is converted to a constant annual hazard and the window is scanned
year by year.
"""

import math
from typing import Dict, Iterable, Mapping, Optional

import numpy as np

from .catalog import EVENTS, EventDefinition

# Sentinel for "does not fire this trial"
NO_FIRE: Optional[int] = None


def window_prob_to_annual_hazard(p_window: float, window_years: int) -> float:
    """
    Convert P(event within T years) into a constant-hazard annual probability.

    Formula:
        p_year = 1 - (1 - p_window)^(1/window_years)
               = -expm1(log1p(-p_window) / window_years)
    """
    if window_years <= 0:
        raise ValueError("window_years must be positive")

    p_window = min(max(p_window, 0.0), 1.0)
    if p_window >= 1.0:
        return 1.0
    if p_window <= 0.0:
        return 0.0

    p_year = -math.expm1(math.log1p(-p_window) / window_years)
    return min(max(p_year, 0.0), 1.0)


def event_hazard(event: EventDefinition, probability: float) -> float:
    """Annual hazard for an event; the sign of a bidirectional value is ignored."""
    return window_prob_to_annual_hazard(abs(probability) / 100, event.window_width)


def draw_fire_year(event: EventDefinition, probability: float, rng: np.random.Generator) -> Optional[int]:
    """First year in the peak window whose draw falls below the hazard, else None."""
    hazard = event_hazard(event, probability)
    draws = rng.random(event.window_width)
    hits = np.flatnonzero(draws < hazard)
    if hits.size == 0:
        return NO_FIRE
    return event.peak[0] + int(hits[0])


def schedule_events(
    probabilities: Mapping[str, float],
    rng: np.random.Generator,
    events: Iterable[EventDefinition] = EVENTS,
) -> Dict[str, Optional[int]]:
    """Fix the firing year (or None) of every event for one trial."""
    return {e.id: draw_fire_year(e, probabilities[e.id], rng) for e in events}
