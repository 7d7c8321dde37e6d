"""Exact search: evaluate every permutation of the jobs.

Exponential in the number of jobs; intended as a ground-truth oracle for
small instances. The engine does not refuse large inputs, callers are
expected to bound ``n`` (see ``SolverConfig.exact_max_jobs``).
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from tardysched.evaluation import BestRecord, evaluate
from tardysched.models import JobSet, SolveResult
from tardysched.operations import iter_permutations

logger = logging.getLogger("tardysched.exact")

# Above this size a full enumeration is logged as a warning (n! schedules).
EXACT_WARN_JOBS = 10


def _ideal_reached(record: BestRecord, job_set: JobSet) -> bool:
    # every S job on time with zero tardy weight cannot be beaten
    return (
        record.found
        and record.tardy_weight == 0
        and record.priority_on_time == job_set.priority_count
    )


def search_permutations(
    job_set: JobSet,
    weight_limit: int,
    prefix: Sequence[int] = (),
) -> BestRecord:
    """Enumerate all schedules starting with ``prefix`` and keep the best feasible one.

    Ties keep the first schedule in lexicographic generation order.

    Args:
        job_set: Problem data.
        weight_limit: Maximal accepted tardy weight.
        prefix: Fixed leading job ids; empty for the full search.

    Returns:
        Record of this partition (``found`` is False when nothing is feasible).
    """
    record = BestRecord(weight_limit=weight_limit)
    for schedule in iter_permutations(job_set.size, prefix):
        evaluation = evaluate(job_set, schedule)
        record.evaluations += 1
        if record.offer(schedule, evaluation):
            logger.debug(
                "[exact] new best %s s_on_time=%d tardy_weight=%d",
                schedule,
                evaluation.priority_on_time,
                evaluation.tardy_weight,
            )
            if _ideal_reached(record, job_set):
                break
    return record


def solve_exact(
    job_set: JobSet,
    weight_limit: int | None = None,
    *,
    max_workers: int | None = None,
) -> SolveResult:
    """Find the optimal schedule by brute force.

    Maximizes the number of on-time priority jobs among schedules whose
    tardy weight does not exceed the limit, then minimizes tardy weight.

    Args:
        job_set: Problem data.
        weight_limit: Tardy weight limit K; defaults to ``job_set.weight_limit``.
        max_workers: When greater than 1 the search is split by first job and
            the partitions run on a thread pool. Partition records are merged
            in partition order, so the result equals the sequential one.
            The enumeration is pure Python and holds the GIL, so threads do
            not shorten the run; the partitioning is kept for its ordered
            merge and for callers that drive partitions themselves through
            ``search_permutations``.

    Returns:
        Best schedule and score, or an infeasible result.
    """
    limit = job_set.weight_limit if weight_limit is None else weight_limit
    n = job_set.size
    if n > EXACT_WARN_JOBS:
        logger.warning("[exact] enumerating %d! schedules (n=%d), this may not finish", n, n)

    if max_workers is None or max_workers <= 1 or n < 2:
        record = search_permutations(job_set, limit)
    else:
        partitions = [(first,) for first in range(n)]
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            partial = list(
                executor.map(lambda prefix: search_permutations(job_set, limit, prefix), partitions)
            )
        record = BestRecord(weight_limit=limit)
        for part in partial:
            record.merge(part)

    logger.info(
        "[exact] n=%d K=%d evals=%d best s_on_time=%d tardy_weight=%s",
        n,
        limit,
        record.evaluations,
        record.priority_on_time,
        record.tardy_weight,
    )
    return record.to_result("exact")
