"""Engine dispatch and configuration.

This module isolates the light data container with solver settings
(`SolverConfig`), the YAML/JSON config loader and a thin dispatch helper
(`solve`) so that the CLI and the experiment runner invoke both engines
uniformly without duplicating timing / logging code.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any

import yaml

from tardysched.exact import solve_exact
from tardysched.heuristic import solve_heuristic
from tardysched.models import JobSet, SolveResult

logger = logging.getLogger("tardysched.solver")

ENGINES = ("exact", "heuristic", "auto")


@dataclass(slots=True)
class SolverConfig:
    """Settings shared by the CLI, the experiment runner and tests.

    Attributes:
        engine: ``exact``, ``heuristic`` or ``auto`` (exact up to
            ``exact_max_jobs`` jobs, heuristic above).
        exact_max_jobs: Size threshold used by ``auto``.
        local_search_passes: Swap improvement passes of the heuristic.
        workers: Thread pool size for the partitioned exact search.
    """

    engine: str = "auto"
    exact_max_jobs: int = 9
    local_search_passes: int = 1
    workers: int = 1

    @classmethod
    def from_dict(cls, cfg: dict[str, Any]) -> "SolverConfig":
        engine = str(cfg.get("engine", "auto"))
        if engine not in ENGINES:
            raise ValueError(f"Unknown engine: {engine} (use one of {', '.join(ENGINES)})")
        return cls(
            engine=engine,
            exact_max_jobs=int(cfg.get("exact_max_jobs", 9)),
            local_search_passes=int(cfg.get("local_search_passes", 1)),
            workers=int(cfg.get("workers", 1)),
        )


def load_config(config_file: str) -> dict:
    """Load configuration from a YAML (``.yml``/``.yaml``) or JSON file."""
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        text = f.read()
    if config_file.endswith(".json"):
        cfg = json.loads(text)
    else:
        cfg = yaml.safe_load(text) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config file must hold a mapping: {config_file}")
    return cfg


def resolve_engine(job_set: JobSet, config: SolverConfig) -> str:
    if config.engine == "auto":
        return "exact" if job_set.size <= config.exact_max_jobs else "heuristic"
    if config.engine not in ENGINES:
        raise ValueError(f"Unknown engine: {config.engine}")
    return config.engine


def solve(job_set: JobSet, config: SolverConfig | None = None) -> SolveResult:
    """Run exactly one engine on ``job_set`` and time it.

    Returns:
        The engine's result with ``elapsed_s`` filled in.

    Raises:
        ValueError: If an unknown engine name is configured.
    """
    if config is None:
        config = SolverConfig()
    engine = resolve_engine(job_set, config)
    t0 = time.perf_counter()
    if engine == "exact":
        result = solve_exact(job_set, max_workers=config.workers)
    else:
        result = solve_heuristic(job_set, local_search_passes=config.local_search_passes)
    result.elapsed_s = time.perf_counter() - t0
    if result.feasible:
        logger.info(
            "engine=%s n=%d s_on_time=%d tardy_weight=%d evals=%d time=%.6fs",
            engine,
            job_set.size,
            result.priority_on_time,
            result.tardy_weight,
            result.evaluations,
            result.elapsed_s,
        )
    else:
        logger.info(
            "engine=%s n=%d infeasible for K=%d evals=%d time=%.6fs",
            engine,
            job_set.size,
            job_set.weight_limit,
            result.evaluations,
            result.elapsed_s,
        )
    return result
