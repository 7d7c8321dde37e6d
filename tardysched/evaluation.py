"""Schedule evaluation and the best-solution bookkeeping shared by both engines.

Contains one ``evaluate`` function simulating the single machine (with an
optional per-job timing table) plus a simple cache, the score ordering and
``BestRecord``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from tardysched.models import INFEASIBLE, Evaluation, JobSet, Schedule, ScheduleRow, SolveResult
from tardysched.operations import validate_schedule

CacheType = dict[tuple[tuple[int, ...], bool], Evaluation]


def evaluate(
    job_set: JobSet,
    schedule: Sequence[int],
    cache: CacheType | None = None,
    return_rows: bool = False,
    validate: bool = False,
) -> Evaluation:
    """Simulate ``schedule`` on one machine starting at time 0.

    Jobs run back to back without idle time. A job is tardy when its finish
    time exceeds its deadline.

    Args:
        job_set: Problem data.
        schedule: Job ids in execution order.
        cache: Optional memo keyed by the schedule tuple.
        return_rows: When True the result carries the per-job timing table.
        validate: When True check that ``schedule`` is a permutation first.

    Returns:
        Evaluation with tardy weight, priority on-time count and makespan.

    Raises:
        ValueError: If ``validate`` is set and the schedule is not a
            permutation of the job ids.
    """
    key = (tuple(schedule), return_rows)
    if cache is not None and key in cache:
        return cache[key]
    if validate:
        validate_schedule(job_set, schedule)

    clock = 0
    tardy_weight = 0
    priority_on_time = 0
    rows: list[ScheduleRow] = []
    for position, job_id in enumerate(key[0]):
        job = job_set.jobs[job_id]
        start = clock
        clock = start + job.length
        on_time = clock <= job.deadline
        if not on_time:
            tardy_weight += job.weight
        elif job.is_priority:
            priority_on_time += 1
        if return_rows:
            rows.append(
                ScheduleRow(
                    position=position,
                    job=job_id,
                    start=start,
                    finish=clock,
                    on_time=on_time,
                    length=job.length,
                    weight=job.weight,
                    deadline=job.deadline,
                    is_priority=job.is_priority,
                )
            )

    result = Evaluation(
        tardy_weight=tardy_weight,
        priority_on_time=priority_on_time,
        makespan=clock,
        rows=tuple(rows),
    )
    if cache is not None:
        cache[key] = result
    return result


def score_key(priority_on_time: int, tardy_weight: int) -> tuple[int, int]:
    """Sort key of a feasible score: more on-time S jobs, then less tardy weight."""
    return priority_on_time, -tardy_weight


def is_better(candidate: Evaluation, incumbent: Evaluation) -> bool:
    """True if ``candidate`` is strictly better than ``incumbent``."""
    return score_key(candidate.priority_on_time, candidate.tardy_weight) > score_key(
        incumbent.priority_on_time, incumbent.tardy_weight
    )


@dataclass
class BestRecord:
    """Best feasible schedule seen during one solving session."""

    weight_limit: int
    schedule: Schedule | None = None
    priority_on_time: int = INFEASIBLE
    tardy_weight: int | None = None
    evaluations: int = 0

    @property
    def found(self) -> bool:
        return self.schedule is not None

    def beats(self, evaluation: Evaluation) -> bool:
        """True if ``evaluation`` is feasible and strictly better than the record."""
        if evaluation.tardy_weight > self.weight_limit:
            return False
        if not self.found:
            return True
        incumbent = Evaluation(
            tardy_weight=self.tardy_weight,  # type: ignore[arg-type]
            priority_on_time=self.priority_on_time,
            makespan=0,
        )
        return is_better(evaluation, incumbent)

    def offer(self, schedule: Sequence[int], evaluation: Evaluation) -> bool:
        """Store ``schedule`` if it beats the record. Returns True on update."""
        if not self.beats(evaluation):
            return False
        self.schedule = list(schedule)
        self.priority_on_time = evaluation.priority_on_time
        self.tardy_weight = evaluation.tardy_weight
        return True

    def merge(self, other: "BestRecord") -> bool:
        """Fold another session's record into this one (same ordering rule)."""
        self.evaluations += other.evaluations
        if not other.found:
            return False
        return self.offer(
            other.schedule,  # type: ignore[arg-type]
            Evaluation(
                tardy_weight=other.tardy_weight,  # type: ignore[arg-type]
                priority_on_time=other.priority_on_time,
                makespan=0,
            ),
        )

    def to_result(self, engine: str) -> SolveResult:
        if not self.found:
            return SolveResult.infeasible(engine=engine, evaluations=self.evaluations)
        return SolveResult(
            schedule=list(self.schedule),  # type: ignore[arg-type]
            priority_on_time=self.priority_on_time,
            tardy_weight=self.tardy_weight,
            engine=engine,
            evaluations=self.evaluations,
        )
