"""Polynomial heuristics: ordering rules + Moore-style repair + swap improvement.

Pipeline per strategy:
    1. order all jobs by the strategy's rule (EDD, priority-first or WSPT),
    2. repair the order in one forward pass, dropping one job from the
       on-time prefix whenever the arriving job would finish late,
    3. evaluate the result; while it exceeds the weight limit move the
       heaviest tardy job to the end (at most ``n`` moves),
    4. try swapping an on-time non-priority job with a tardy priority job.

After the strategies a minimum tardy weight schedule (Lawler-Moore dynamic
program) is offered and improved by swaps the same way, so the engine finds
a feasible schedule whenever one exists.

Every evaluated schedule is offered to one ``BestRecord`` owned by the call,
so the engine returns the best feasible schedule seen across strategies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from tardysched.evaluation import BestRecord, CacheType, evaluate
from tardysched.models import JobSet, Schedule, SolveResult
from tardysched.operations import move_to_end, swap_positions
from tardysched.rules import (
    JobKey,
    edd_key,
    priority_first_key,
    sort_job_ids,
    weight_density_key,
    weight_key,
)

logger = logging.getLogger("tardysched.heuristic")

# (job_set, on_time ids in sequence order) -> index of the job to drop
VictimRule = Callable[[JobSet, list[int]], int]


def _first_max(values: list[int]) -> int:
    best = 0
    for idx in range(1, len(values)):
        if values[idx] > values[best]:
            best = idx
    return best


def drop_longest(job_set: JobSet, on_time: list[int]) -> int:
    """Index of the longest on-time job (earliest among equals)."""
    return _first_max([job_set.jobs[j].length for j in on_time])


def drop_longest_non_priority(job_set: JobSet, on_time: list[int]) -> int:
    """Longest non-priority on-time job; longest priority job if there is none."""
    candidates = [idx for idx, j in enumerate(on_time) if not job_set.jobs[j].is_priority]
    if not candidates:
        return drop_longest(job_set, on_time)
    lengths = [job_set.jobs[on_time[idx]].length for idx in candidates]
    return candidates[_first_max(lengths)]


def drop_lightest(job_set: JobSet, on_time: list[int]) -> int:
    """Index of the on-time job with the smallest weight (earliest among equals)."""
    return _first_max([-job_set.jobs[j].weight for j in on_time])


@dataclass(frozen=True)
class Strategy:
    """Constructive rule: initial order, repair victim and tail order.

    Fields:
        name: Identifier used in logs and result details.
        key: Ordering rule for the initial sequence.
        victim: Which on-time job the repair drops on a deadline violation.
        tail_key: Order of the dropped jobs appended after the on-time ones;
            None keeps removal order.
    """

    name: str
    key: JobKey
    victim: VictimRule
    tail_key: Optional[JobKey] = None


STRATEGIES: tuple[Strategy, ...] = (
    Strategy("edd", edd_key, drop_longest),
    Strategy("priority", priority_first_key, drop_longest_non_priority),
    Strategy("wspt", weight_density_key, drop_lightest, tail_key=weight_key),
)


def repair(
    job_set: JobSet,
    order: list[int],
    victim: VictimRule,
    tail_key: Optional[JobKey] = None,
) -> Schedule:
    """Single forward repair pass over ``order``.

    Each job joins the on-time sequence and advances the clock. If the clock
    then exceeds that job's deadline exactly one job (chosen by ``victim``,
    the arriving job included) leaves the sequence and its length is taken
    back. Earlier positions are not revisited, so jobs kept "on time" may
    still turn out late when evaluated.

    Returns:
        Kept jobs in their relative order followed by the dropped jobs.
    """
    on_time: list[int] = []
    dropped: list[int] = []
    clock = 0
    for job_id in order:
        job = job_set.jobs[job_id]
        on_time.append(job_id)
        clock += job.length
        if clock > job.deadline:
            removed = on_time.pop(victim(job_set, on_time))
            clock -= job_set.jobs[removed].length
            dropped.append(removed)
    if tail_key is not None:
        dropped = sort_job_ids(job_set, tail_key, dropped)
    return on_time + dropped


def shed_heaviest_tardy(
    job_set: JobSet,
    schedule: Schedule,
    record: BestRecord,
    cache: CacheType | None = None,
) -> Schedule:
    """Evaluate ``schedule``; while infeasible push the heaviest tardy job last.

    Bounded by ``n`` moves. Every intermediate schedule is offered to
    ``record``. Returns the last schedule reached.
    """
    current = list(schedule)
    for _ in range(max(1, job_set.size)):
        evaluation = evaluate(job_set, current, cache=cache, return_rows=True)
        record.evaluations += 1
        record.offer(current, evaluation)
        if evaluation.is_feasible(record.weight_limit):
            break
        tardy = [row for row in evaluation.rows if not row.on_time]
        if not tardy:
            break
        heaviest = tardy[_first_max([row.weight for row in tardy])]
        if heaviest.position == len(current) - 1:
            break
        current = move_to_end(current, heaviest.position)
    return current


def improve_by_swaps(
    job_set: JobSet,
    schedule: Schedule,
    record: BestRecord,
    cache: CacheType | None = None,
    max_passes: int = 1,
) -> Schedule:
    """Swap an on-time non-priority job with a tardy priority job.

    One pass scans pairs (i, j) in position order using the statuses of the
    schedule at the start of the pass; the first swap whose result beats
    ``record`` (feasible and strictly better) is kept and ends the pass,
    every other swap is reverted. Passes repeat up to ``max_passes`` times
    and stop early when a pass keeps nothing.
    """
    current = list(schedule)
    for _ in range(max_passes):
        rows = evaluate(job_set, current, cache=cache, return_rows=True).rows
        donors = [row.position for row in rows if row.on_time and not row.is_priority]
        takers = [row.position for row in rows if not row.on_time and row.is_priority]
        improved = False
        for i in donors:
            for j in takers:
                candidate = swap_positions(current, i, j)
                evaluation = evaluate(job_set, candidate, cache=cache)
                record.evaluations += 1
                if record.offer(candidate, evaluation):
                    logger.debug(
                        "[heuristic] swap positions %d<->%d s_on_time=%d tardy_weight=%d",
                        i,
                        j,
                        evaluation.priority_on_time,
                        evaluation.tardy_weight,
                    )
                    current = candidate
                    improved = True
                    break
            if improved:
                break
        if not improved:
            break
    return current


def build_candidate(job_set: JobSet, strategy: Strategy) -> Schedule:
    """Initial order of ``strategy`` after the repair pass."""
    order = sort_job_ids(job_set, strategy.key)
    return repair(job_set, order, strategy.victim, strategy.tail_key)


def min_tardy_weight_schedule(job_set: JobSet) -> Schedule:
    """Schedule with the smallest possible tardy weight (Lawler-Moore DP).

    ``best[t]`` is the largest weight of a job subset that finishes exactly at
    ``t`` with every job on time when run in EDD order. The heaviest subset is
    kept on time in EDD order and the remaining jobs follow, also in EDD
    order. Runs in O(n * min(total length, max deadline)).
    """
    order = sort_job_ids(job_set, edd_key)
    if not order:
        return []
    max_deadline = max(job.deadline for job in job_set)
    horizon = max(0, min(job_set.total_length, max_deadline))

    best = [-1] * (horizon + 1)  # -1: no subset ends at t
    best[0] = 0
    taken: list[bytearray] = []
    for job_id in order:
        job = job_set.jobs[job_id]
        row = bytearray(horizon + 1)
        # descending t so each job is used at most once
        for t in range(min(job.deadline, horizon), job.length - 1, -1):
            prev = best[t - job.length]
            if prev >= 0 and prev + job.weight > best[t]:
                best[t] = prev + job.weight
                row[t] = 1
        taken.append(row)

    t = _first_max(best)
    on_time: list[int] = []
    for idx in range(len(order) - 1, -1, -1):
        if taken[idx][t]:
            on_time.append(order[idx])
            t -= job_set.jobs[order[idx]].length
    on_time.reverse()
    kept = set(on_time)
    return on_time + [job_id for job_id in order if job_id not in kept]


def solve_heuristic(
    job_set: JobSet,
    weight_limit: int | None = None,
    *,
    local_search_passes: int = 1,
    strategies: Iterable[Strategy] = STRATEGIES,
) -> SolveResult:
    """Best feasible schedule over all constructive strategies.

    Not guaranteed optimal, but feasible whenever some schedule is.
    ``result.details`` maps each strategy name (and ``min_tardy``) to the
    schedule it ended with and that schedule's score.

    Args:
        job_set: Problem data.
        weight_limit: Tardy weight limit K; defaults to ``job_set.weight_limit``.
        local_search_passes: Swap improvement passes per strategy (0 disables).
        strategies: Strategies to run, in order.
    """
    limit = job_set.weight_limit if weight_limit is None else weight_limit
    record = BestRecord(weight_limit=limit)
    cache: CacheType = {}
    details: dict[str, dict] = {}

    for strategy in strategies:
        candidate = build_candidate(job_set, strategy)
        candidate = shed_heaviest_tardy(job_set, candidate, record, cache)
        if local_search_passes > 0:
            candidate = improve_by_swaps(job_set, candidate, record, cache, local_search_passes)
        evaluation = evaluate(job_set, candidate, cache=cache)
        details[strategy.name] = {
            "schedule": candidate,
            "priority_on_time": evaluation.priority_on_time,
            "tardy_weight": evaluation.tardy_weight,
        }
        logger.debug(
            "[heuristic] strategy=%s s_on_time=%d tardy_weight=%d feasible=%s",
            strategy.name,
            evaluation.priority_on_time,
            evaluation.tardy_weight,
            evaluation.is_feasible(limit),
        )

    # feasible whenever any schedule is: its tardy weight is the minimum
    candidate = min_tardy_weight_schedule(job_set)
    evaluation = evaluate(job_set, candidate, cache=cache)
    record.evaluations += 1
    record.offer(candidate, evaluation)
    logger.debug("[heuristic] min tardy weight %d (K=%d)", evaluation.tardy_weight, limit)
    if local_search_passes > 0:
        candidate = improve_by_swaps(job_set, candidate, record, cache, local_search_passes)
        evaluation = evaluate(job_set, candidate, cache=cache)
    details["min_tardy"] = {
        "schedule": candidate,
        "priority_on_time": evaluation.priority_on_time,
        "tardy_weight": evaluation.tardy_weight,
    }

    logger.info(
        "[heuristic] n=%d K=%d evals=%d best s_on_time=%d tardy_weight=%s",
        job_set.size,
        limit,
        record.evaluations,
        record.priority_on_time,
        record.tardy_weight,
    )
    result = record.to_result("heuristic")
    result.details = details
    return result
