"""
Yearly pressure composition.

Turns the set of events active in a given year, plus the slow background
ramp, into one disruption signal (composite pressure) and one stabilization
signal. Concurrent disruptive events compound nonlinearly: the exponent of the
compounding grows with the number of active events.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Tuple

from .catalog import CORRELATIONS, EVENTS, N_YEARS, EventDefinition

BACKGROUND_SCALE = 0.15
PROXIMITY_BONUS = 0.1
PROXIMITY_RANGE = 3
RAW_PRESSURE_CAP = 0.98
CASCADE_EXPONENT = 0.3
STABILIZING_SCALE = 0.5


@dataclass
class YearlyPressure:
    """Pressure signals for one trial-year."""
    year: int
    background: float = 0.0
    raw: float = 0.0
    correlation_multiplier: float = 1.0
    composite: float = 0.0
    stabilizing: float = 0.0
    disruptive_events: List[EventDefinition] = field(default_factory=list)
    stabilizing_events: List[EventDefinition] = field(default_factory=list)

    @property
    def recovery_blocking_count(self) -> int:
        """Active disruptive events that suppress recovery."""
        return sum(1 for e in self.disruptive_events if e.recovery)


def background_pressure(coefficient: float, year: int) -> float:
    """Linear ramp over the horizon, zero at year 0."""
    return coefficient * (year / N_YEARS) * BACKGROUND_SCALE


def is_active(event: EventDefinition, fire_year: Optional[int], year: int) -> bool:
    return fire_year is not None and fire_year <= year < fire_year + event.duration


def is_stabilizing(event: EventDefinition, probability: float) -> bool:
    """Bidirectional events stabilize only when configured negative."""
    return event.bidirectional and probability < 0


def classify_active(
    fire_years: Mapping[str, Optional[int]],
    probabilities: Mapping[str, float],
    year: int,
    events: Sequence[EventDefinition] = EVENTS,
) -> Tuple[List[EventDefinition], List[EventDefinition]]:
    """Split the events active in `year` into (disruptive, stabilizing)."""
    disruptive, stabilizing = [], []
    for e in events:
        if not is_active(e, fire_years.get(e.id), year):
            continue
        if is_stabilizing(e, probabilities[e.id]):
            stabilizing.append(e)
        else:
            disruptive.append(e)
    return disruptive, stabilizing


def proximity_weighted_magnitude(event: EventDefinition, year: int) -> float:
    """Magnitude with a bonus for years close to the peak-window midpoint."""
    distance = abs(year - event.window_midpoint)
    return event.magnitude * (1 + PROXIMITY_BONUS * max(0.0, PROXIMITY_RANGE - distance))


def correlation_multiplier(active_ids: Sequence[str]) -> float:
    """Largest pairwise factor whose two events are both active (1.0 if none)."""
    ids = set(active_ids)
    multiplier = 1.0
    for a, b, m in CORRELATIONS:
        if a in ids and b in ids:
            multiplier = max(multiplier, m)
    return multiplier


def compound(raw: float, active_count: int) -> float:
    """Nonlinear compounding of capped raw pressure."""
    capped = min(raw, RAW_PRESSURE_CAP)
    return 1 - (1 - capped) ** (1 + max(active_count, 1) * CASCADE_EXPONENT)


def compose_pressure(
    year: int,
    fire_years: Mapping[str, Optional[int]],
    probabilities: Mapping[str, float],
    background_coefficient: float,
) -> YearlyPressure:
    """Compose the disruption and stabilization signals for one trial-year."""
    bg = background_pressure(background_coefficient, year)
    disruptive, stabilizing = classify_active(fire_years, probabilities, year)

    raw = bg + sum(proximity_weighted_magnitude(e, year) for e in disruptive)
    multiplier = correlation_multiplier([e.id for e in disruptive])
    raw *= multiplier

    if disruptive or bg > 0:
        composite = compound(raw, len(disruptive))
    else:
        composite = 0.0

    return YearlyPressure(
        year=year,
        background=bg,
        raw=raw,
        correlation_multiplier=multiplier,
        composite=composite,
        stabilizing=sum(e.magnitude * STABILIZING_SCALE for e in stabilizing),
        disruptive_events=disruptive,
        stabilizing_events=stabilizing,
    )
