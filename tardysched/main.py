"""Command line entry point.

Reads one instance file, runs one engine and prints the chosen schedule.
Exit code 1 when the instance path is missing, unreadable or malformed.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, Dict, Sequence

from tardysched.evaluation import evaluate
from tardysched.parser import MalformedInputError, parse_instance
from tardysched.solver import ENGINES, SolverConfig, load_config, solve
from tardysched.visualization import format_report, plot_gantt

logger = logging.getLogger("tardysched")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tardysched",
        description="Single machine scheduling with a tardy weight limit and priority jobs",
    )
    parser.add_argument("instance", nargs="?", help="Path to the instance file")
    parser.add_argument("--config", help="YAML/JSON config file")
    parser.add_argument("--engine", choices=ENGINES, help="Engine (overrides config)")
    parser.add_argument("--workers", type=int, help="Threads for the exact search")
    parser.add_argument("--passes", type=int, help="Swap improvement passes of the heuristic")
    parser.add_argument("--gantt", help="Save a Gantt chart of the result to this PNG path")
    parser.add_argument("--log-level", help="Logging level (default WARNING)")
    return parser


def _merge_cli(cfg: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    merged = dict(cfg)
    if args.engine is not None:
        merged["engine"] = args.engine
    if args.workers is not None:
        merged["workers"] = args.workers
    if args.passes is not None:
        merged["local_search_passes"] = args.passes
    if args.log_level is not None:
        merged["log_level"] = args.log_level
    return merged


def _gantt_path(cfg: Dict[str, Any], args: argparse.Namespace, engine: str) -> str | None:
    if args.gantt:
        return args.gantt
    charts_cfg = cfg.get("charts", {}) if isinstance(cfg.get("charts"), dict) else {}
    charts_dir = charts_cfg.get("dir")
    if not charts_dir:
        return None
    name = os.path.splitext(os.path.basename(args.instance))[0]
    return os.path.join(charts_dir, f"gantt_{engine}_{name}.png")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if not args.instance:
        parser.print_usage(sys.stderr)
        print("error: the instance file path is required", file=sys.stderr)
        return 1

    try:
        cfg = _merge_cli(load_config(args.config) if args.config else {}, args)
        solver_config = SolverConfig.from_dict(cfg)
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, str(cfg.get("log_level", "WARNING")).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        job_set = parse_instance(args.instance)
    except MalformedInputError as e:
        print(f"Malformed instance file {args.instance}: {e}", file=sys.stderr)
        return 1
    except OSError:
        parser.print_usage(sys.stderr)
        print(f"Error opening file: {args.instance}", file=sys.stderr)
        return 1
    logger.info(
        "Instance: %s jobs=%d K=%d priority_jobs=%d",
        args.instance,
        job_set.size,
        job_set.weight_limit,
        job_set.priority_count,
    )

    result = solve(job_set, solver_config)
    if result.feasible:
        evaluation = evaluate(job_set, result.schedule, return_rows=True)  # type: ignore[arg-type]
        print(format_report(result, evaluation))
        gantt = _gantt_path(cfg, args, result.engine)
        if gantt:
            plot_gantt(job_set, evaluation, save_path=gantt, title=None)
    else:
        print(format_report(result))
    print(f"\nExecution time: {result.elapsed_s:f} seconds")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
