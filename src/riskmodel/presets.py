"""
Named scenario presets.

Each preset is a story-driven parameter bundle: one probability per event, a
starting world state and a background pressure coefficient.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping

from .params import SimulationParameters


@dataclass(frozen=True)
class Preset:
    key: str
    label: str
    description: str
    probabilities: Mapping[str, float]
    start_state: int
    background: float

    def to_parameters(self) -> SimulationParameters:
        return SimulationParameters(dict(self.probabilities), self.start_state, self.background)


def _preset(key, label, description, start_state, background, **probabilities) -> Preset:
    return Preset(key, label, description, probabilities, start_state, background)


PRESETS: Dict[str, Preset] = {p.key: p for p in (
    _preset(
        "optimist", "Optimist",
        "Strong institutions, rapid adaptation, successful energy transition. "
        "Requires belief that current trends reverse.",
        0, 0.2,
        ai=25, ins=30, climate=15, conflict=15, nuclear=3, pandemic=10, debt=15,
        food=10, cyber=15, democracy=15, energy=-40, formation=-30,
    ),
    _preset(
        "adaptation", "Adaptation Succeeds",
        "Energy transition and institutional formation at strong levels. Everything else "
        "moderate. Shows whether positive vectors can overcome structural threats.",
        1, 0.3,
        ai=40, ins=50, climate=25, conflict=20, nuclear=5, pandemic=15, debt=25,
        food=20, cyber=25, democracy=30, energy=-60, formation=-40,
    ),
    _preset(
        "current", "Current Trajectory",
        "Observable trends projected forward. No assumption of improvement or "
        "deterioration. Default 2026 starting point.",
        1, 0.5,
        ai=55, ins=70, climate=30, conflict=25, nuclear=8, pandemic=20, debt=35,
        food=25, cyber=35, democracy=40, energy=-20, formation=-15,
    ),
    _preset(
        "twothings", "Just Two Things",
        "Only insurance failure and sovereign debt at high levels. Everything else low. "
        "Shows how correlation and cascade amplify even limited disruption.",
        1, 0.3,
        ai=15, ins=85, climate=10, conflict=10, nuclear=3, pandemic=10, debt=65,
        food=10, cyber=15, democracy=15, energy=-25, formation=-20,
    ),
    _preset(
        "natesworld", "The Simplification",
        "Declining EROI, material constraints binding, energy transition struggling. "
        "The biophysical squeeze without acute crises.",
        1, 0.8,
        ai=35, ins=55, climate=40, conflict=20, nuclear=5, pandemic=15, debt=45,
        food=40, cyber=20, democracy=30, energy=15, formation=-10,
    ),
    _preset(
        "tindaletrap", "The Tindale Trap",
        "Current monetary framework producing long-run misallocation. Sovereign debt and "
        "democratic stress high, no catastrophic events. The slow structural contradiction.",
        1, 0.5,
        ai=45, ins=60, climate=25, conflict=15, nuclear=5, pandemic=15, debt=70,
        food=20, cyber=25, democracy=55, energy=-15, formation=5,
    ),
    _preset(
        "convergence", "The Convergence",
        "Multiple front-loaded threats fire simultaneously in 2026-2030. The window of "
        "acute vulnerability followed by a persistence trap.",
        1, 0.6,
        ai=65, ins=80, climate=35, conflict=30, nuclear=10, pandemic=25, debt=50,
        food=30, cyber=45, democracy=50, energy=-10, formation=-5,
    ),
    _preset(
        "pessimist", "Pessimist",
        "Multiple systems already failing. Most events at high probability. Represents the "
        "view that 2026 conditions are worse than commonly acknowledged.",
        2, 0.8,
        ai=75, ins=85, climate=50, conflict=45, nuclear=15, pandemic=35, debt=55,
        food=45, cyber=50, democracy=60, energy=20, formation=5,
    ),
)}

DEFAULT_PRESET = "current"


def get_preset(key: str) -> Preset:
    """Look up a preset by key (KeyError listing the valid keys if unknown)."""
    try:
        return PRESETS[key]
    except KeyError:
        raise KeyError(f"Unknown preset '{key}'. Valid presets: {', '.join(PRESETS)}") from None


def list_presets() -> List[Preset]:
    return list(PRESETS.values())
