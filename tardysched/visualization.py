"""Text report of a solving session and single-machine Gantt charts (matplotlib)."""

import logging
import os
from typing import Optional, Sequence

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.patches import Patch  # noqa: E402

from tardysched.models import Evaluation, JobSet, SolveResult  # noqa: E402

logger = logging.getLogger("tardysched.visualization")

ON_TIME_COLOR = "#4CAF50"
TARDY_COLOR = "#E53935"


def format_sequence(schedule: Sequence[int]) -> str:
    return " -> ".join(str(job_id) for job_id in schedule)


def format_table(evaluation: Evaluation) -> str:
    """Per-job execution details (needs an evaluation built with rows)."""
    lines = [
        f"{'ID':<5} {'Length':<8} {'Weight':<10} {'Deadline':<10} "
        f"{'Start':<10} {'Finish':<10} {'Status':<10}"
    ]
    for row in evaluation.rows:
        lines.append(
            f"{row.job:<5} {row.length:<8} {row.weight:<10} {row.deadline:<10} "
            f"{row.start:<10} {row.finish:<10} {row.status:<10}"
        )
    return "\n".join(lines)


def format_report(result: SolveResult, evaluation: Optional[Evaluation] = None) -> str:
    """Human readable report of a solving session.

    Args:
        result: Engine output.
        evaluation: Evaluation of ``result.schedule`` with rows; when given the
            per-job table and summary are included.
    """
    if not result.feasible:
        return "No valid schedule found."
    parts = [
        f"Solution found. Number of S tasks completed: {result.priority_on_time}",
        f"Optimal Schedule: {format_sequence(result.schedule or [])}",
    ]
    if evaluation is not None:
        parts.append("")
        parts.append("Task execution details:")
        parts.append(format_table(evaluation))
        parts.append("")
        parts.append("Summary:")
        parts.append(f"Total tardy weight: {evaluation.tardy_weight}")
        parts.append(f"Number of S tasks completed on time: {evaluation.priority_on_time}")
    return "\n".join(parts)


def plot_gantt(
    job_set: JobSet,
    evaluation: Evaluation,
    save_path: str,
    title: Optional[str] = None,
    show_deadlines: bool = True,
) -> str:
    """Draw the single-machine schedule as a Gantt chart and save it.

    Bars are green for on-time and red for tardy jobs; priority jobs are
    hatched. Deadlines are marked with small ticks above the bar row.
    """
    n = len(evaluation.rows)
    fig, ax = plt.subplots(
        figsize=(min(10 + n * 0.1, 18), 3),
        constrained_layout=True,
    )
    for row in evaluation.rows:
        ax.barh(
            0,
            row.length,
            left=row.start,
            height=0.6,
            color=ON_TIME_COLOR if row.on_time else TARDY_COLOR,
            hatch="//" if row.is_priority else None,
            alpha=0.85,
            edgecolor="black",
            linewidth=0.6,
        )
        if n <= 40:
            ax.text(row.start + row.length / 2, 0, str(row.job), ha="center", va="center", fontsize=8)
        if show_deadlines:
            ax.plot([row.deadline, row.deadline], [0.32, 0.45], color="black", linewidth=0.8)

    if title is None:
        title = (
            f"Schedule - tardy weight = {evaluation.tardy_weight} (K = {job_set.weight_limit}), "
            f"S on time = {evaluation.priority_on_time}"
        )
    ax.set_title(title, fontsize=12, fontweight="bold")
    ax.set_xlabel("Time", fontsize=11)
    ax.set_yticks([0])
    ax.set_yticklabels(["M0"])
    ax.set_ylim(-0.5, 0.6)
    ax.set_xlim(0, max(evaluation.makespan, 1))
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)
    ax.legend(
        handles=[
            Patch(facecolor=ON_TIME_COLOR, edgecolor="black", label="On-time"),
            Patch(facecolor=TARDY_COLOR, edgecolor="black", label="Tardy"),
            Patch(facecolor="white", edgecolor="black", hatch="//", label="S task"),
        ],
        bbox_to_anchor=(1.02, 1),
        loc="upper left",
        borderaxespad=0.0,
        fontsize=8,
        frameon=False,
    )

    directory = os.path.dirname(save_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    fig.savefig(save_path, dpi=180)
    plt.close(fig)
    logger.info("Gantt chart saved as: %s", save_path)
    return save_path
