"""Ordering rules used by the constructive heuristics.

Every rule is a key function over a :class:`Job`; ``sort_job_ids`` is the
single stable sort all strategies go through. Keys end with the job id so
each rule is a deterministic total order.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any, Callable

from tardysched.models import Job, JobSet, Schedule

JobKey = Callable[[Job], Any]


def edd_key(job: Job) -> tuple[int, int]:
    """Earliest Due Date: ascending deadline."""
    return job.deadline, job.id


def priority_first_key(job: Job) -> tuple[bool, int, int]:
    """S-tasks before the rest, each group by ascending deadline."""
    return not job.is_priority, job.deadline, job.id


def weight_density_key(job: Job) -> tuple[Fraction, int]:
    """WSPT: descending weight / length, compared exactly."""
    return -Fraction(job.weight, job.length), job.id


def weight_key(job: Job) -> tuple[int, int]:
    """Ascending weight (lighter tardy penalty first)."""
    return job.weight, job.id


def sort_job_ids(job_set: JobSet, key: JobKey, job_ids: list[int] | None = None) -> Schedule:
    """Return ``job_ids`` (all jobs by default) ordered by ``key``.

    Sorting works on ids, the job table itself is never reordered.
    """
    if job_ids is None:
        job_ids = list(range(job_set.size))
    return sorted(job_ids, key=lambda job_id: key(job_set.jobs[job_id]))
