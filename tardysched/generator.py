"""Seeded random instance generator for tests and experiments."""

import random
from typing import Tuple

from tardysched.models import JobSet


def generate_instance(
    n: int,
    seed: int = 0,
    length_range: Tuple[int, int] = (1, 10),
    weight_range: Tuple[int, int] = (1, 10),
    tightness: float = 0.6,
    priority_ratio: float = 0.5,
    weight_limit_ratio: float = 0.3,
) -> JobSet:
    """Generate a random instance.

    Deadlines are drawn from ``[length, tightness * total_length]`` so a
    lower ``tightness`` produces more tardy jobs. ``K`` is
    ``weight_limit_ratio`` of the total weight.
    """
    rng = random.Random(seed)
    lengths = [rng.randint(*length_range) for _ in range(n)]
    weights = [rng.randint(*weight_range) for _ in range(n)]
    horizon = max(1, int(round(tightness * sum(lengths))))
    rows = []
    for length, weight in zip(lengths, weights):
        deadline = rng.randint(length, max(length, horizon))
        rows.append((length, weight, deadline, rng.random() < priority_ratio))
    weight_limit = int(weight_limit_ratio * sum(weights))
    return JobSet.from_rows(rows, weight_limit)
