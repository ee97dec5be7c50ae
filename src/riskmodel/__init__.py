"""
Systemic Risk Projection Model.

Monte Carlo state-transition engine over five world states, twelve stress
events, a background resource-constraint pressure and a substrate health
index, with three portfolios evolved through every trajectory.

Modules:
    catalog - Event catalog, correlation table, base matrix, return table
    params - Simulation parameters, validation and bundle loading
    presets - Named scenario parameter bundles
    scheduler - Per-trial event firing years
    pressure - Yearly disruption and stabilization signals
    transition - Transition row modification and state sampling
    substrate - Substrate health accumulator
    portfolio - Portfolio evolution
    simulation - Trial loop, aggregation and the run() entry point
    summary - Headline statistics for hosts
    config - Host defaults from config/engine.yaml
    cli - Command-line interface entrypoints
"""

from . import catalog
from . import params
from . import presets
from . import scheduler
from . import pressure
from . import transition
from . import substrate
from . import portfolio
from . import simulation
from . import summary
from . import config

from .params import ParameterValidationError, SimulationParameters
from .simulation import AggregateResults, run

__version__ = "4.0.0"
