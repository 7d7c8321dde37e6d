from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger("tardysched.experiments")

SUMMARY_COLUMNS = [
    "n_jobs",
    "seed",
    "weight_limit",
    "priority_jobs",
    "exact_feasible",
    "exact_s_on_time",
    "exact_tardy_weight",
    "exact_time_ms",
    "heuristic_feasible",
    "heuristic_s_on_time",
    "heuristic_tardy_weight",
    "heuristic_time_ms",
    "priority_gap",
]


def load_results_dir(timestamp_dir: Path) -> List[Dict[str, Any]]:
    """Load all JSON run files of one batch directory (sorted by file name)."""
    results: List[Dict[str, Any]] = []
    for file in sorted(Path(timestamp_dir).glob("*.json")):
        with open(file, "r", encoding="utf-8") as f:
            results.append(json.load(f))
    return results


def write_summary_csv(timestamp_dir: Path) -> Path:
    timestamp_dir = Path(timestamp_dir)
    rows = load_results_dir(timestamp_dir)
    out_path = timestamp_dir / "summary.csv"
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(SUMMARY_COLUMNS)
        for r in rows:
            cfg = r["config"]
            exact = r["exact"]
            heuristic = r["heuristic"]
            writer.writerow(
                [
                    cfg.get("n_jobs"),
                    cfg.get("seed"),
                    r.get("weight_limit"),
                    r.get("priority_jobs"),
                    exact.get("feasible"),
                    exact.get("priority_on_time"),
                    exact.get("tardy_weight"),
                    round(exact.get("time_ms", 0.0), 3),
                    heuristic.get("feasible"),
                    heuristic.get("priority_on_time"),
                    heuristic.get("tardy_weight"),
                    round(heuristic.get("time_ms", 0.0), 3),
                    r.get("priority_gap"),
                ]
            )
    if not rows:
        logger.warning("[aggregate] no result files found in %s", timestamp_dir)
    logger.info("[aggregate] summary written: %s", out_path)
    return out_path
