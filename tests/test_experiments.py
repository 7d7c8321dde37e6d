import csv
import json

import pytest

from tardysched.experiments.aggregate import SUMMARY_COLUMNS, load_results_dir, write_summary_csv
from tardysched.experiments.runner import (
    ExperimentRunner,
    RunConfig,
    generate_plan,
    main,
    run_from_config,
)
from tardysched.generator import generate_instance


def test_generator_is_deterministic():
    first = generate_instance(7, seed=3)
    assert first == generate_instance(7, seed=3)
    assert first != generate_instance(7, seed=4)
    assert first.size == 7
    assert first.weight_limit == int(0.3 * first.total_weight)
    for job in first:
        assert 1 <= job.length <= 10
        assert 1 <= job.weight <= 10
        assert job.deadline >= job.length


def test_generate_plan():
    plan = generate_plan([4, 5], repeats=2, weight_limit_ratio=0.5)
    assert [(c.n_jobs, c.seed) for c in plan] == [(4, 0), (4, 1), (5, 0), (5, 1)]
    assert all(c.weight_limit_ratio == 0.5 for c in plan)


def test_runner_persists_runs_and_summary(tmp_path):
    runner = ExperimentRunner(str(tmp_path))
    results = runner.run([RunConfig(n_jobs=5, seed=0), RunConfig(n_jobs=5, seed=1)])
    assert len(results) == 2
    for result in results:
        gap = result.priority_gap()
        if result.exact.feasible and result.heuristic.feasible:
            assert gap is not None and gap >= 0

    files = sorted(runner.timestamp_dir.glob("*.json"))
    assert [f.name for f in files] == ["n5_seed=0_k=0.3.json", "n5_seed=1_k=0.3.json"]
    with open(files[0], encoding="utf-8") as f:
        payload = json.load(f)
    assert payload["config"]["n_jobs"] == 5
    assert "priority_gap" in payload

    summary = write_summary_csv(runner.timestamp_dir)
    with open(summary, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == SUMMARY_COLUMNS
    assert len(rows) == 3
    assert len(load_results_dir(runner.timestamp_dir)) == 2


def test_run_from_config(tmp_path):
    cfg = {"experiment": {"sizes": [4], "repeats": 2, "results_dir": str(tmp_path)}}
    summary = run_from_config(cfg)
    assert summary.name == "summary.csv"
    assert summary.is_file()


def test_run_from_config_needs_sizes(tmp_path):
    with pytest.raises(ValueError):
        run_from_config({"experiment": {"sizes": [], "results_dir": str(tmp_path)}})


def test_bench_main(tmp_path, capsys):
    cfg = tmp_path / "bench.json"
    cfg.write_text(
        json.dumps({"experiment": {"sizes": [3], "repeats": 1, "results_dir": str(tmp_path / "r")}}),
        encoding="utf-8",
    )
    assert main(["--config", str(cfg)]) == 0
    assert "Summary written" in capsys.readouterr().out
