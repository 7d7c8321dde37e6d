"""Core data structures for the constrained single-machine tardiness problem.

This module defines:
    Job          -- immutable description of one job (length, weight, deadline, S flag).
    JobSet       -- immutable, id-indexed collection of jobs plus the tardy weight limit K.
    ScheduleRow  -- timing of one scheduled job (start, finish, on-time status).
    Evaluation   -- aggregate scores of a schedule (optionally with its rows).
    SolveResult  -- what an engine returns (best schedule + score or infeasible).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

Schedule = list[int]  # permutation of job ids, execution order on the machine

# Priority-on-time value reported when no schedule satisfies the weight limit.
INFEASIBLE = -1


@dataclass(frozen=True)
class Job:
    """Single job of an instance.

    Attributes:
        id: 0-based index of the job line in the instance file.
        length: Processing time (positive).
        weight: Penalty added to the tardy weight when the job is late.
        deadline: Time by which the job must finish to be on time.
        is_priority: True for S-tasks (jobs we try to keep on time).
    """

    id: int
    length: int
    weight: int
    deadline: int
    is_priority: bool = False

    def __post_init__(self):
        if self.length <= 0:
            raise ValueError(f"Job {self.id}: length must be positive, got {self.length}")
        if self.weight < 0:
            raise ValueError(f"Job {self.id}: weight cannot be negative, got {self.weight}")


@dataclass(frozen=True)
class JobSet:
    """Immutable representation of one problem instance.

    Attributes:
        jobs: Jobs ordered by id (``jobs[i].id == i``).
        weight_limit: Maximal accepted total tardy weight (K).
    """

    jobs: tuple[Job, ...]
    weight_limit: int

    def __post_init__(self):
        for idx, job in enumerate(self.jobs):
            if job.id != idx:
                raise ValueError(f"Job at position {idx} has id {job.id}")

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[tuple[int, int, int, bool | int]],
        weight_limit: int,
    ) -> "JobSet":
        """Build a job set from ``(length, weight, deadline, is_priority)`` rows."""
        jobs = tuple(
            Job(id=i, length=length, weight=weight, deadline=deadline, is_priority=bool(flag))
            for i, (length, weight, deadline, flag) in enumerate(rows)
        )
        return cls(jobs=jobs, weight_limit=weight_limit)

    @property
    def size(self) -> int:
        return len(self.jobs)

    def __len__(self) -> int:
        return len(self.jobs)

    def __getitem__(self, job_id: int) -> Job:
        return self.jobs[job_id]

    def __iter__(self) -> Iterator[Job]:
        return iter(self.jobs)

    @property
    def total_length(self) -> int:
        return sum(job.length for job in self.jobs)

    @property
    def total_weight(self) -> int:
        return sum(job.weight for job in self.jobs)

    @property
    def priority_count(self) -> int:
        return sum(1 for job in self.jobs if job.is_priority)


@dataclass(frozen=True)
class ScheduleRow:
    """Single scheduled job with timing and identification data.

    Fields:
        position: Index in the schedule (0-based).
        job: Job identifier.
        start: Start time (finish of the previous job, 0 for the first one).
        finish: Completion time (start + length).
        on_time: True when finish <= deadline.
        length, weight, deadline, is_priority: copied from the job for reporting.
    """

    position: int
    job: int
    start: int
    finish: int
    on_time: bool
    length: int
    weight: int
    deadline: int
    is_priority: bool

    @property
    def status(self) -> str:
        if not self.on_time:
            return "Tardy"
        return "On-time (S)" if self.is_priority else "On-time"


@dataclass(frozen=True)
class Evaluation:
    """Scores of one schedule.

    Fields:
        tardy_weight: Sum of weights of late jobs.
        priority_on_time: Number of priority jobs finishing by their deadline.
        makespan: Final running clock (sum of all lengths).
        rows: Per-job timing table; empty unless requested from ``evaluate``.
    """

    tardy_weight: int
    priority_on_time: int
    makespan: int
    rows: tuple[ScheduleRow, ...] = ()

    def is_feasible(self, weight_limit: int) -> bool:
        return self.tardy_weight <= weight_limit


@dataclass
class SolveResult:
    """Outcome of one solving session.

    ``schedule`` is None and ``priority_on_time`` equals ``INFEASIBLE`` when no
    evaluated schedule kept the tardy weight within the limit.
    """

    schedule: Schedule | None
    priority_on_time: int
    tardy_weight: int | None
    engine: str = ""
    evaluations: int = 0
    elapsed_s: float = 0.0
    details: dict = field(default_factory=dict)

    @property
    def feasible(self) -> bool:
        return self.schedule is not None and self.priority_on_time != INFEASIBLE

    @classmethod
    def infeasible(cls, engine: str = "", evaluations: int = 0) -> "SolveResult":
        return cls(
            schedule=None,
            priority_on_time=INFEASIBLE,
            tardy_weight=None,
            engine=engine,
            evaluations=evaluations,
        )
