"""Substrate health: an auxiliary [0, 100] condition index tracked alongside world state."""

from .pressure import YearlyPressure

INITIAL_HEALTH = 100.0
HEALTH_MIN = 0.0
HEALTH_MAX = 100.0

COMPOSITE_DAMAGE = 8
BACKGROUND_DAMAGE = 5
STABILIZING_RECOVERY = 6
CALM_DRIFT = 0.5
CALM_STATE_MAX = 1


def update_health(health: float, state: int, pressure: YearlyPressure) -> float:
    """
    Advance substrate health by one year.

    Uses the pre-transition state: calm states (0-1) let the substrate
    regenerate slowly, stressed states erode it.
    """
    damage = pressure.composite * COMPOSITE_DAMAGE + pressure.background * BACKGROUND_DAMAGE
    recovery = pressure.stabilizing * STABILIZING_RECOVERY
    drift = CALM_DRIFT if state <= CALM_STATE_MAX else -CALM_DRIFT
    return min(HEALTH_MAX, max(HEALTH_MIN, health - damage + recovery + drift))
