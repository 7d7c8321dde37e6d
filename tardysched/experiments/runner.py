from __future__ import annotations

import argparse
import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Sequence

from tardysched.evaluation import evaluate
from tardysched.exact import solve_exact
from tardysched.experiments.aggregate import write_summary_csv
from tardysched.generator import generate_instance
from tardysched.heuristic import solve_heuristic
from tardysched.models import SolveResult
from tardysched.solver import load_config

logger = logging.getLogger("tardysched.experiments")


@dataclass(frozen=True)
class RunConfig:
    """Single comparison run: one generated instance solved by both engines."""

    n_jobs: int
    seed: int
    weight_limit_ratio: float = 0.3
    priority_ratio: float = 0.5
    tightness: float = 0.6
    local_search_passes: int = 1


@dataclass
class EngineOutcome:
    feasible: bool
    priority_on_time: int
    tardy_weight: int | None
    schedule: List[int] | None
    evaluations: int
    time_ms: float

    @classmethod
    def from_result(cls, result: SolveResult, time_ms: float) -> "EngineOutcome":
        return cls(
            feasible=result.feasible,
            priority_on_time=result.priority_on_time,
            tardy_weight=result.tardy_weight,
            schedule=result.schedule,
            evaluations=result.evaluations,
            time_ms=time_ms,
        )


@dataclass
class RunResult:
    config: RunConfig
    weight_limit: int
    priority_jobs: int
    exact: EngineOutcome
    heuristic: EngineOutcome

    def priority_gap(self) -> int | None:
        """On-time S jobs the heuristic misses compared to the optimum."""
        if not self.exact.feasible:
            return None
        if not self.heuristic.feasible:
            return self.exact.priority_on_time
        return self.exact.priority_on_time - self.heuristic.priority_on_time

    def to_dict(self):
        d = asdict(self)
        d["priority_gap"] = self.priority_gap()
        return d


class ExperimentRunner:
    def __init__(self, base_results_dir: str = "results/experiments"):
        """Each batch gets its own timestamped directory, old ones are kept."""
        self.base_dir = Path(base_results_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.timestamp_dir = self.base_dir / datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.timestamp_dir.mkdir(parents=True, exist_ok=True)

    def run(self, configs: Sequence[RunConfig]) -> List[RunResult]:
        results: List[RunResult] = []
        for idx, cfg in enumerate(configs, start=1):
            logger.info("[experiment] (%d/%d) running %s", idx, len(configs), cfg)
            result = self._run_single(cfg)
            results.append(result)
            self._persist_result(result)
        return results

    def _run_single(self, cfg: RunConfig) -> RunResult:
        job_set = generate_instance(
            cfg.n_jobs,
            seed=cfg.seed,
            tightness=cfg.tightness,
            priority_ratio=cfg.priority_ratio,
            weight_limit_ratio=cfg.weight_limit_ratio,
        )

        t0 = time.perf_counter()
        exact = solve_exact(job_set)
        exact_ms = (time.perf_counter() - t0) * 1000

        t0 = time.perf_counter()
        heuristic = solve_heuristic(job_set, local_search_passes=cfg.local_search_passes)
        heuristic_ms = (time.perf_counter() - t0) * 1000

        # results must stay within K; a violation here is a solver bug
        for result in (exact, heuristic):
            if result.feasible:
                check = evaluate(job_set, result.schedule, validate=True)  # type: ignore[arg-type]
                if check.tardy_weight > job_set.weight_limit:
                    raise RuntimeError(f"{result.engine} returned an infeasible schedule for {cfg}")

        return RunResult(
            config=cfg,
            weight_limit=job_set.weight_limit,
            priority_jobs=job_set.priority_count,
            exact=EngineOutcome.from_result(exact, exact_ms),
            heuristic=EngineOutcome.from_result(heuristic, heuristic_ms),
        )

    def _persist_result(self, result: RunResult) -> Path:
        cfg = result.config
        filename = f"n{cfg.n_jobs}_seed={cfg.seed}_k={cfg.weight_limit_ratio}.json"
        path = self.timestamp_dir / filename
        with open(path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
        logger.debug("[experiment] saved %s", path)
        return path


def generate_plan(
    sizes: Iterable[int],
    repeats: int,
    weight_limit_ratio: float = 0.3,
    priority_ratio: float = 0.5,
    tightness: float = 0.6,
    local_search_passes: int = 1,
) -> List[RunConfig]:
    """One run per (size, seed); seeds are ``0..repeats-1``."""
    configs: List[RunConfig] = []
    for n in sizes:
        for seed in range(repeats):
            configs.append(
                RunConfig(
                    n_jobs=int(n),
                    seed=seed,
                    weight_limit_ratio=weight_limit_ratio,
                    priority_ratio=priority_ratio,
                    tightness=tightness,
                    local_search_passes=local_search_passes,
                )
            )
    return configs


def run_from_config(cfg: dict) -> Path:
    """Run the ``experiment`` section of a loaded config and write the summary."""
    exp_cfg = cfg.get("experiment") or {}
    sizes = exp_cfg.get("sizes") or []
    if not sizes:
        raise ValueError("experiment.sizes must be a non-empty list of job counts")
    plan = generate_plan(
        sizes=sizes,
        repeats=int(exp_cfg.get("repeats", 3)),
        weight_limit_ratio=float(exp_cfg.get("weight_limit_ratio", 0.3)),
        priority_ratio=float(exp_cfg.get("priority_ratio", 0.5)),
        tightness=float(exp_cfg.get("tightness", 0.6)),
        local_search_passes=int(cfg.get("local_search_passes", 1)),
    )
    runner = ExperimentRunner(exp_cfg.get("results_dir", "results/experiments"))
    runner.run(plan)
    return write_summary_csv(runner.timestamp_dir)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compare exact and heuristic engines")
    parser.add_argument("--config", default="config.yaml", help="YAML/JSON config file")
    args = parser.parse_args(argv)
    cfg = load_config(args.config)
    logging.basicConfig(
        level=getattr(logging, str(cfg.get("log_level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    summary = run_from_config(cfg)
    print(f"Summary written: {summary}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
