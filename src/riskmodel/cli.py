"""
Command-line interface for the systemic risk model.

Provides subcommands for running a simulation batch from a preset or a
parameter file, and for listing presets and the event methodology table.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from ..logging_config import configure_logging
from . import presets
from . import simulation
from . import summary
from .catalog import EVENTS, SOURCES, STATE_SHORT, STATES
from .config import load_engine_config
from .params import ParameterValidationError, load_parameters


def cmd_run(args: argparse.Namespace) -> int:
    """Run a batch of trials and print the headline results."""
    cfg = args.engine_config
    try:
        preset = presets.get_preset(args.preset or cfg["default_preset"])
        params = preset.to_parameters()
        if args.params:
            params = load_parameters(Path(args.params), base=params)

        seed = args.seed if args.seed is not None else cfg["seed"]
        n_trials = args.trials if args.trials is not None else cfg["default_trials"]

        results = simulation.run(
            params,
            n_trials,
            seed=seed,
            percentiles=tuple(cfg["percentile_bands"]),
            progress_interval=cfg["progress_interval"],
        )
    except (ParameterValidationError, KeyError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    headline = summary.summarize(results)

    print(f"\nPreset: {preset.label}" + (f" (overridden by {args.params})" if args.params else ""))
    print(f"Trials: {results.n_trials}")
    print("\nTerminal Distribution (year 10):")
    for name, data in headline["terminal_distribution"].items():
        print(f"  {name:<24} {data['probability']:6.1%} ({data['ci_low']:.1%} - {data['ci_high']:.1%})")

    print("\nTail Risks:")
    for key in ("severe_or_worse", "crisis_or_worse", "civilisational_stress"):
        risk = headline[key]
        print(f"  {key:<24} {risk['probability']:6.1%} [{risk['level']}]")

    sub = headline["substrate"]
    print(f"\nSubstrate health (median, year 10): {sub['final_median']:.0f}/100 [{sub['condition']}]")

    print("\nPortfolios (terminal, start = 100):")
    for data in headline["portfolios"].values():
        print(f"  {data['label']:<24} median {data['median']:7.1f}   p10 {data['p10']:7.1f}")

    if args.verbose:
        print("\nState shares by year:")
        print(f"{'':<6} " + " ".join(f"{s:>6}" for s in STATE_SHORT))
        for year in range(len(results.yearly_distribution)):
            shares = " ".join(f"{s:6.1%}" for s in results.state_shares(year))
            print(f"  Y{year:<3} {shares}")

    if args.output:
        out = results.to_dict()
        out["summary"] = headline
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, 'w') as f:
            json.dump(out, f, indent=2)
        print(f"\nResults saved to {out_path}")

    return 0


def cmd_presets(args: argparse.Namespace) -> int:
    """List available presets."""
    for p in presets.list_presets():
        print(f"{p.key:<14} {p.label:<22} start={STATES[p.start_state]}, background={p.background:.2f}")
        if args.verbose:
            print(f"{'':<14} {p.description}")
    return 0


def cmd_events(args: argparse.Namespace) -> int:
    """Print the event methodology table."""
    print(f"{'Event':<28} {'Base':>6} {'Window':<8} {'Mag':>5} {'Dur':>5}")
    print("-" * 56)
    for e in EVENTS:
        window = f"Y{e.peak[0]}-{e.peak[1]}"
        print(f"{e.name:<28} {e.base:>5.0f}% {window:<8} {e.magnitude:>5.2f} {e.duration:>4}y")
        if args.verbose:
            print(f"    {SOURCES.get(e.id, '')}")
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="riskmodel",
        description="Systemic Risk Projection Model - Monte Carlo state-transition engine"
    )
    parser.add_argument(
        "--config",
        help="Path to engine config YAML (default: config/engine.yaml)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    # Also accepted after the subcommand; SUPPRESS keeps a leading -v from being reset
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    run_parser = subparsers.add_parser("run", parents=[common], help="Run a simulation batch")
    run_parser.add_argument("--preset", choices=sorted(presets.PRESETS), help="Scenario preset")
    run_parser.add_argument("--params", help="JSON/YAML parameter bundle overriding the preset")
    run_parser.add_argument("--trials", type=int, help="Number of trials")
    run_parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    run_parser.add_argument("--output", "-o", help="Output file (JSON)")
    run_parser.set_defaults(func=cmd_run)

    presets_parser = subparsers.add_parser("presets", parents=[common], help="List scenario presets")
    presets_parser.set_defaults(func=cmd_presets)

    events_parser = subparsers.add_parser("events", parents=[common], help="Show the event methodology table")
    events_parser.set_defaults(func=cmd_events)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    args.engine_config = load_engine_config(args.config)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
