"""Schedule utilities: creation, validation and enumeration of permutations.

Concepts
--------
Schedule
    A list of job ids in execution order. A valid schedule of a job set with
    ``n`` jobs contains every id ``0..n-1`` exactly once. The evaluator and
    both engines rely on this invariant; functions here help produce and
    verify such schedules.
"""

from __future__ import annotations

import itertools
from typing import Iterator, Sequence

from tardysched.models import JobSet, Schedule


def create_base_schedule(job_set: JobSet) -> Schedule:
    """Create the canonical schedule ``[0, 1, ..., n-1]`` (input order)."""
    return list(range(job_set.size))


def validate_schedule(job_set: JobSet, schedule: Sequence[int]) -> bool:
    """Validate a schedule's completeness and uniqueness.

    Args:
        job_set: Problem instance supplying the number of jobs.
        schedule: Candidate schedule to check.

    Returns:
        True if the schedule is a permutation of the job ids. (Return value
        mostly for convenience so the function can be used inside
        assertions / conditional flows.)

    Raises:
        ValueError: If the length is incorrect, a job id is out of range or
            an id is repeated.
    """
    n = job_set.size
    if len(schedule) != n:
        raise ValueError(f"Incomplete schedule: {len(schedule)}/{n} jobs")
    seen = [False] * n
    for job_id in schedule:
        if not (0 <= job_id < n):
            raise ValueError(f"Job id out of range: {job_id}")
        if seen[job_id]:
            raise ValueError(f"Duplicate job id in schedule: {job_id}")
        seen[job_id] = True
    return True


def iter_permutations(n: int, prefix: Sequence[int] = ()) -> Iterator[Schedule]:
    """Lazily enumerate all schedules of ``n`` jobs starting with ``prefix``.

    Permutations of the remaining ids are produced in lexicographic order.
    The generator is one-shot; callers may stop consuming it at any time.

    Args:
        n: Number of jobs.
        prefix: Fixed leading job ids (used to partition the search space).

    Yields:
        New list per permutation (safe to keep or mutate).
    """
    head = list(prefix)
    fixed = set(head)
    rest = [job_id for job_id in range(n) if job_id not in fixed]
    for tail in itertools.permutations(rest):
        yield head + list(tail)


def swap_positions(schedule: Sequence[int], i: int, j: int) -> Schedule:
    """Return a copy of ``schedule`` with positions ``i`` and ``j`` exchanged."""
    new_schedule = list(schedule)
    new_schedule[i], new_schedule[j] = new_schedule[j], new_schedule[i]
    return new_schedule


def move_to_end(schedule: Sequence[int], position: int) -> Schedule:
    """Return a copy of ``schedule`` with the job at ``position`` moved last."""
    new_schedule = list(schedule)
    new_schedule.append(new_schedule.pop(position))
    return new_schedule
