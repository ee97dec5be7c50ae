"""
Simulation parameters and batch-entry validation.

A parameter bundle maps event ids to effective probabilities (percent), plus a
starting world state and a background pressure coefficient. Events missing from
the bundle fall back to their catalog base value.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import jsonschema
import yaml

from .catalog import EVENTS, EVENTS_BY_ID, EventDefinition, N_STATES

logger = logging.getLogger(__name__)

DEFAULT_START_STATE = 1
DEFAULT_BACKGROUND = 0.5

# Schema for parameter bundles loaded from disk
PARAMETERS_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "probabilities": {
            "type": "object",
            "propertyNames": {"enum": [e.id for e in EVENTS]},
            "additionalProperties": {"type": "number"},
        },
        "start_state": {"type": "integer", "minimum": 0, "maximum": N_STATES - 1},
        "background": {"type": "number", "minimum": 0, "maximum": 1},
    },
    "additionalProperties": False,
}


class ParameterValidationError(ValueError):
    """Raised when simulation inputs fall outside the supported contract."""
    pass


@dataclass(frozen=True)
class SimulationParameters:
    """Immutable inputs for one batch of trials."""
    probabilities: Mapping[str, float] = field(default_factory=dict)
    start_state: int = DEFAULT_START_STATE
    background: float = DEFAULT_BACKGROUND

    def effective_probability(self, event: EventDefinition) -> float:
        """Configured signed probability for an event, or its base value."""
        value = self.probabilities.get(event.id)
        if value is None:
            return float(event.base)
        return float(value)

    def effective_probabilities(self) -> Dict[str, float]:
        return {e.id: self.effective_probability(e) for e in EVENTS}

    def with_overrides(self, **probabilities: float) -> "SimulationParameters":
        """Copy with some event probabilities replaced."""
        merged = dict(self.probabilities)
        merged.update(probabilities)
        return SimulationParameters(merged, self.start_state, self.background)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SimulationParameters":
        """Build parameters from a bundle dict (see PARAMETERS_SCHEMA)."""
        missing = [e.id for e in EVENTS if e.id not in data.get("probabilities", {})]
        if missing:
            logger.debug(f"Using base probability for: {', '.join(missing)}")
        return cls(
            probabilities=dict(data.get("probabilities", {})),
            start_state=data.get("start_state", DEFAULT_START_STATE),
            background=data.get("background", DEFAULT_BACKGROUND),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "probabilities": self.effective_probabilities(),
            "start_state": self.start_state,
            "background": self.background,
        }


def coerce_parameters(parameters: Any) -> SimulationParameters:
    """
    Accept SimulationParameters, a nested bundle, or a flat mapping of
    event id -> probability with optional start_state/background keys.
    """
    if isinstance(parameters, SimulationParameters):
        return parameters
    if parameters is None:
        return SimulationParameters()
    if not isinstance(parameters, Mapping):
        raise ParameterValidationError(f"Unsupported parameters type: {type(parameters).__name__}")
    if "probabilities" in parameters:
        return SimulationParameters.from_mapping(parameters)
    flat = dict(parameters)
    return SimulationParameters.from_mapping({
        "start_state": flat.pop("start_state", DEFAULT_START_STATE),
        "background": flat.pop("background", DEFAULT_BACKGROUND),
        "probabilities": flat,
    })


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_parameters(params: SimulationParameters) -> None:
    """
    Reject out-of-contract parameters before any trial runs.

    Rules:
    1. every probability key is a known event id
    2. probabilities are finite numbers with |p| <= 100
    3. only bidirectional events may carry a negative value
    4. start_state is an integer in 0..4
    5. background is a finite number in [0, 1]

    Raises:
        ParameterValidationError: naming the offending key
    """
    for event_id, value in params.probabilities.items():
        if event_id not in EVENTS_BY_ID:
            raise ParameterValidationError(f"Unknown event id: {event_id}")
        if value is None:
            continue
        if not _is_number(value) or not math.isfinite(value):
            raise ParameterValidationError(f"Probability for {event_id} must be a finite number, got {value!r}")
        if abs(value) > 100:
            raise ParameterValidationError(f"Probability for {event_id} out of [-100, 100]: {value}")
        if value < 0 and not EVENTS_BY_ID[event_id].bidirectional:
            raise ParameterValidationError(f"Probability for {event_id} cannot be negative: {value}")

    start = params.start_state
    if not isinstance(start, int) or isinstance(start, bool) or not (0 <= start < N_STATES):
        raise ParameterValidationError(f"start_state must be an integer in 0..{N_STATES - 1}, got {start!r}")

    bg = params.background
    if not _is_number(bg) or not math.isfinite(bg) or not (0.0 <= bg <= 1.0):
        raise ParameterValidationError(f"background must be a number in [0, 1], got {bg!r}")


def validate_trial_count(n_trials: Any) -> None:
    if not isinstance(n_trials, int) or isinstance(n_trials, bool) or n_trials <= 0:
        raise ParameterValidationError(f"Trial count must be a positive integer, got {n_trials!r}")


def load_parameters(path: Path, base: Optional[SimulationParameters] = None) -> SimulationParameters:
    """
    Load a parameter bundle from a JSON or YAML file.

    Values in the file override `base` (when given); anything the file leaves
    out is taken from `base`, then from catalog defaults.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ParameterValidationError: If the bundle cannot be parsed or fails schema or range checks
    """
    path = Path(path)
    with open(path, "r") as f:
        try:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ParameterValidationError(f"{path}: could not parse parameter bundle: {e}") from e

    try:
        jsonschema.validate(data, PARAMETERS_SCHEMA)
    except jsonschema.ValidationError as e:
        where = ".".join(str(p) for p in e.absolute_path)
        raise ParameterValidationError(f"{path}: {where or 'bundle'}: {e.message}") from e

    if base is not None:
        merged = dict(base.probabilities)
        merged.update(data.get("probabilities", {}))
        data = {
            "probabilities": merged,
            "start_state": data.get("start_state", base.start_state),
            "background": data.get("background", base.background),
        }

    params = SimulationParameters.from_mapping(data)
    validate_parameters(params)
    return params
