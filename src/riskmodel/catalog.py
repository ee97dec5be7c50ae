"""
Static model tables.

Event catalog, pairwise correlation rules, the base transition matrix and the
state-indexed portfolio return table. These are process-lifetime constants
shared read-only by every trial.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


# ============================================================================
# WORLD STATES
# ============================================================================

N_STATES = 5
N_YEARS = 10
WORST_STATE = N_STATES - 1

STATES = [
    "Stable Adaptation",
    "Managed Disruption",
    "Severe Disruption",
    "Systemic Crisis",
    "Civilisational Stress",
]
STATE_SHORT = ["SA", "MD", "SD", "SC", "CS"]


# ============================================================================
# EVENT CATALOG
# ============================================================================

@dataclass(frozen=True)
class EventDefinition:
    """A modeled stress scenario.

    `base` is the cumulative probability (percent) of firing within the peak
    window. Bidirectional events carry a signed base; a negative value makes
    them stabilizing.
    """
    id: str
    name: str
    base: float
    peak: Tuple[int, int]
    magnitude: float
    duration: int
    recovery: bool
    bidirectional: bool = False
    description: str = ""

    @property
    def window_width(self) -> int:
        return self.peak[1] - self.peak[0] + 1

    @property
    def window_midpoint(self) -> float:
        return (self.peak[0] + self.peak[1]) / 2


EVENTS: Tuple[EventDefinition, ...] = (
    EventDefinition("ai", "AI Labour Displacement", 55, (1, 4), 0.30, 8, True,
                    description="Structural automation of cognitive labour. No reversal once deployed."),
    EventDefinition("ins", "Insurance Market Failure", 70, (1, 5), 0.25, 10, True,
                    description="Permanent withdrawal. No major insurer has returned to a withdrawn market."),
    EventDefinition("climate", "Climate Tipping Signal", 30, (5, 9), 0.35, 10, False,
                    description="Irreversible once confirmed. Late-decade peak reflects observation lag."),
    EventDefinition("conflict", "Conventional Conflict", 25, (0, 9), 0.22, 3, True,
                    description="Acute shock. Wars end, economic recovery follows."),
    EventDefinition("nuclear", "Nuclear Exchange", 8, (0, 9), 0.55, 10, True,
                    description="Highest magnitude. No within-window recovery pathway."),
    EventDefinition("pandemic", "Pandemic / Biosecurity", 20, (0, 9), 0.20, 2, True,
                    description="Acute shock with rapid adaptation. 2-year persistence."),
    EventDefinition("debt", "Sovereign Debt Crisis", 35, (1, 6), 0.28, 4, True,
                    description="Restructuring takes years. Compressed fiscal space for crisis response."),
    EventDefinition("food", "Food System Shock", 25, (3, 9), 0.30, 8, False,
                    description="Structural: pollinator loss, soil degradation, supply chain fragility."),
    EventDefinition("cyber", "Cyber / Infrastructure", 35, (0, 6), 0.26, 2, True,
                    description="Acute shock. Systems rebuild, trust recovers."),
    EventDefinition("democracy", "Democratic Collapse", 40, (0, 5), 0.32, 10, True,
                    description="Generational recovery. 18 consecutive years of global decline."),
    EventDefinition("energy", "Energy Transition", -20, (2, 8), 0.30, 7, False, bidirectional=True,
                    description="Negative = clean energy success (stabilising). Positive = disorderly failure."),
    EventDefinition("formation", "Institutional Formation", -15, (3, 9), 0.25, 8, False, bidirectional=True,
                    description="Negative = new institutional capacity (stabilising). Positive = institutional decay."),
)

EVENTS_BY_ID: Dict[str, EventDefinition] = {e.id: e for e in EVENTS}

# Evidence notes shown alongside the methodology table
SOURCES = {
    "ai": "MIT Work of the Future Lab; BLS Occupational Outlook.",
    "ins": "CA Dept. of Insurance; FAIR Plan data. 18+ US states affected.",
    "climate": "IPCC AR6; Armstrong McKay et al. (2022).",
    "conflict": "ACLED 2024 Annual Report; SIPRI Military Expenditure Database.",
    "nuclear": "Bulletin of the Atomic Scientists Doomsday Clock 2025.",
    "pandemic": "WHO IHR Review Committee 2024; Global Health Security Index.",
    "debt": "IMF World Economic Outlook 2025; BIS Annual Report.",
    "food": "FAO SOFI 2024; IPCC Chapter 5.",
    "cyber": "CISA 2024 Threat Assessment; WEF Global Risk Report 2025.",
    "democracy": "Freedom House 2025; V-Dem Institute.",
    "energy": "IEA World Energy Outlook 2024. Default -20% reflects Announced Pledges Scenario.",
    "formation": "Design parameter. Reflects current low levels of institutional innovation investment.",
}


def get_event(event_id: str) -> EventDefinition:
    """Look up an event definition by id (KeyError if unknown)."""
    return EVENTS_BY_ID[event_id]


# ============================================================================
# CORRELATION TABLE
# ============================================================================

# (event_a, event_b, multiplier) applied when both are disruptive-active
CORRELATIONS: Tuple[Tuple[str, str, float], ...] = (
    ("ins", "debt", 1.4),
    ("ins", "climate", 1.3),
    ("democracy", "conflict", 1.3),
    ("democracy", "debt", 1.25),
    ("climate", "food", 1.5),
    ("ai", "democracy", 1.2),
    ("ai", "debt", 1.2),
    ("conflict", "cyber", 1.3),
    ("debt", "ins", 1.3),
    ("food", "conflict", 1.3),
    ("nuclear", "conflict", 1.2),
    ("cyber", "ins", 1.2),
)


def correlation_factor(a: str, b: str) -> float:
    """Strongest multiplier linking two events in either order (1.0 if none)."""
    factor = 1.0
    for x, y, m in CORRELATIONS:
        if {x, y} == {a, b} and a != b:
            factor = max(factor, m)
    return factor


def correlation_matrix(event_ids: Optional[List[str]] = None) -> List[List[float]]:
    """Symmetric matrix of correlation factors; the diagonal is 1.0."""
    ids = event_ids or [e.id for e in EVENTS]
    return [[1.0 if a == b else correlation_factor(a, b) for b in ids] for a in ids]


# ============================================================================
# TRANSITION AND RETURN TABLES
# ============================================================================

# Row = current state, column = next state (zero events, no background pressure)
BASE_MATRIX: Tuple[Tuple[float, ...], ...] = (
    (0.970, 0.025, 0.004, 0.001, 0.000),
    (0.350, 0.520, 0.100, 0.025, 0.005),
    (0.080, 0.270, 0.450, 0.150, 0.050),
    (0.020, 0.080, 0.220, 0.500, 0.180),
    (0.000, 0.020, 0.080, 0.250, 0.650),
)

PORTFOLIOS = ("conventional", "resilient", "formation")
PORTFOLIO_LABELS = {
    "conventional": "Conventional",
    "resilient": "Resilient Real Assets",
    "formation": "Formation Capital",
}

# Annual return by [state][portfolio], portfolio order as PORTFOLIOS
RETURNS: Tuple[Tuple[float, float, float], ...] = (
    (0.07, 0.05, 0.04),
    (0.02, 0.06, 0.08),
    (-0.10, 0.02, 0.10),
    (-0.28, -0.08, 0.03),
    (-0.50, -0.20, -0.08),
)
