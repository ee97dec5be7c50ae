"""
Host defaults loaded from config/engine.yaml.

The engine never reads this file itself; entry points pass the values into
simulation.run explicitly.
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "default_trials": 5000,
    "default_preset": "current",
    "seed": None,
    "percentile_bands": [10, 90],
    "progress_interval": 1000,
}


def _config_paths() -> list:
    return [
        "config/engine.yaml",
        os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "config/engine.yaml"),
    ]


def load_engine_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load engine defaults, preferring the YAML file over built-in values.

    Returns:
        Config dict with every DEFAULT_CONFIG key present
    """
    config = dict(DEFAULT_CONFIG)
    paths = [path] if path else _config_paths()

    for candidate in paths:
        if candidate and os.path.exists(candidate):
            try:
                with open(candidate, 'r') as f:
                    loaded = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load engine config from {candidate}: {e}")
                return config
            unknown = set(loaded) - set(DEFAULT_CONFIG)
            if unknown:
                logger.warning(f"Ignoring unknown engine config keys: {', '.join(sorted(unknown))}")
            config.update({k: v for k, v in loaded.items() if k in DEFAULT_CONFIG})
            return config

    if path:
        logger.warning(f"Engine config not found at {path}, using defaults")
    return config
