from tardysched.evaluation import evaluate
from tardysched.models import SolveResult
from tardysched.visualization import format_report, format_sequence, format_table, plot_gantt


def test_format_sequence():
    assert format_sequence([3, 0, 2]) == "3 -> 0 -> 2"
    assert format_sequence([]) == ""


def test_report_for_infeasible_result():
    assert format_report(SolveResult.infeasible("exact")) == "No valid schedule found."


def test_report_with_details(example_set):
    schedule = [3, 0, 2, 4, 1, 5]
    evaluation = evaluate(example_set, schedule, return_rows=True)
    result = SolveResult(schedule=schedule, priority_on_time=3, tardy_weight=4, engine="exact")
    lines = format_report(result, evaluation).splitlines()
    assert lines[0] == "Solution found. Number of S tasks completed: 3"
    assert lines[1] == "Optimal Schedule: 3 -> 0 -> 2 -> 4 -> 1 -> 5"
    assert "Total tardy weight: 4" in lines
    assert "Number of S tasks completed on time: 3" in lines


def test_table_has_one_line_per_job(example_set):
    evaluation = evaluate(example_set, [3, 0, 2, 4, 1, 5], return_rows=True)
    lines = format_table(evaluation).splitlines()
    assert lines[0].split() == ["ID", "Length", "Weight", "Deadline", "Start", "Finish", "Status"]
    assert len(lines) == 7
    assert lines[1].split() == ["3", "1", "2", "3", "0", "1", "On-time", "(S)"]
    assert lines[-1].split()[-1] == "Tardy"


def test_plot_gantt_creates_png(tmp_path, example_set):
    evaluation = evaluate(example_set, [1, 0, 2, 4, 5, 3], return_rows=True)
    target = tmp_path / "nested" / "gantt.png"
    assert plot_gantt(example_set, evaluation, save_path=str(target)) == str(target)
    assert target.is_file()
