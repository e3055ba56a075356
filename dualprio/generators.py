"""Random integer task set generators for testing and experiments."""

import random
from typing import List, Optional

from dualprio.models import Task, TaskSet


def uunifast(n: int, u_total: float, seed: Optional[int] = None) -> List[float]:
    """Generate task utilizations using the UUniFast algorithm.

    UUniFast generates uniformly distributed task utilizations that sum to
    the target total utilization.

    Reference:
    Bini, E., & Buttazzo, G. C. (2005). Measuring the performance of schedulability tests.
    Real-Time Systems, 30(1-2), 129-154.

    Args:
        n: Number of tasks.
        u_total: Target total utilization (should be <= n for feasibility).
        seed: Optional random seed for reproducibility.

    Returns:
        List of n utilization values that sum to approximately u_total.

    Raises:
        ValueError: If n <= 0 or u_total < 0.
    """
    if n <= 0:
        raise ValueError("Number of tasks must be positive")
    if u_total < 0:
        raise ValueError("Target utilization must be non-negative")

    rng = random.Random(seed)

    utilizations = []
    sum_u = u_total
    for i in range(1, n):
        next_sum_u = sum_u * (rng.random() ** (1.0 / (n - i)))
        utilizations.append(sum_u - next_sum_u)
        sum_u = next_sum_u

    # Last utilization is whatever remains
    utilizations.append(sum_u)

    return utilizations


def generate_taskset(
    n: int,
    target_utilization: float,
    period_min: int = 3,
    period_max: int = 12,
    seed: Optional[int] = None
) -> TaskSet:
    """Generate a random integer task set using UUniFast.

    Periods are drawn uniformly from period_min..period_max. Execution times
    are rounded to the nearest integer, kept at least 1 and at most the
    period, so the total utilization only approximates the target. The
    returned task set is sorted by period (Rate Monotonic order).

    Small periods keep hyperperiods short enough for exhaustive search.

    Args:
        n: Number of tasks to generate.
        target_utilization: Target total utilization.
        period_min: Minimum task period.
        period_max: Maximum task period.
        seed: Random seed for reproducibility.

    Returns:
        A TaskSet with n tasks.

    Raises:
        ValueError: If parameters are invalid.
    """
    if period_min <= 0 or period_max <= 0 or period_min > period_max:
        raise ValueError("Invalid period range")

    rng = random.Random(seed)
    utilizations = uunifast(n, target_utilization, seed=seed)

    tasks = []
    for u in utilizations:
        T = rng.randint(period_min, period_max)
        C = min(T, max(1, round(u * T)))
        tasks.append(Task(C=C, T=T))

    return TaskSet(tasks=sorted(tasks, key=lambda t: t.T))
