"""Generators for the exhaustive search spaces, with closed-form sizes.

Every generator here has a matching count_* function. The search engines
count what they generate and compare against the closed form once the space
is exhausted, so a faulty generator cannot silently shrink the search.
"""

import math
from typing import Iterator, List, Sequence, Tuple


PriorityAssignment = Tuple[Tuple[int, ...], Tuple[int, ...]]


def phase_point_combinations(periods: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """Yield every tuple of phase change points, one value in [0, T_i] per task.

    Tuples come out in lexicographic order: the first task varies slowest.
    """
    current: List[int] = []

    def extend(i: int) -> Iterator[Tuple[int, ...]]:
        if i == len(periods):
            yield tuple(current)
            return
        for point in range(periods[i] + 1):
            current.append(point)
            yield from extend(i + 1)
            current.pop()

    return extend(0)


def count_phase_point_combinations(periods: Sequence[int]) -> int:
    """Return prod(T_i + 1)."""
    total = 1
    for period in periods:
        total *= period + 1
    return total


def _fill_slots(num_slots: int, values: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """Yield every arrangement of num_slots distinct values taken from values."""
    used = [False] * len(values)
    current: List[int] = []

    def extend() -> Iterator[Tuple[int, ...]]:
        if len(current) == num_slots:
            yield tuple(current)
            return
        for j, value in enumerate(values):
            if used[j]:
                continue
            used[j] = True
            current.append(value)
            yield from extend()
            current.pop()
            used[j] = False

    return extend()


def _increasing_subsets(size: int, values: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """Yield every increasing subsequence of the given size."""
    current: List[int] = []

    def extend(start: int) -> Iterator[Tuple[int, ...]]:
        if len(current) == size:
            yield tuple(current)
            return
        for j in range(start, len(values)):
            current.append(values[j])
            yield from extend(j + 1)
            current.pop()

    return extend(0)


def priority_assignments(n: int) -> Iterator[PriorityAssignment]:
    """Yield every assignment of the priorities 0..2n-1 to the 2n priority slots.

    Each assignment is a (background, promoted) pair of n-tuples that together
    use every value exactly once. Promoted priorities are chosen first, so they
    vary slowest.
    """
    values = list(range(2 * n))
    for promoted in _fill_slots(n, values):
        rest = [v for v in values if v not in promoted]
        for background in _fill_slots(n, rest):
            yield background, promoted


def count_priority_assignments(n: int) -> int:
    """Return (2n)!."""
    return math.factorial(2 * n)


def rm_priority_assignments(n: int) -> Iterator[PriorityAssignment]:
    """Yield every priority assignment whose background priorities are Rate Monotonic.

    The background priorities are an increasing n-subset of 0..2n-1, assigned
    to the tasks in index order. The remaining n values are then arranged over
    the promoted slots in every possible way.
    """
    values = list(range(2 * n))
    for background in _increasing_subsets(n, values):
        rest = [v for v in values if v not in background]
        for promoted in _fill_slots(n, rest):
            yield background, promoted


def count_rm_priority_assignments(n: int) -> int:
    """Return (2n)!/n!, i.e. binomial(2n, n) * n!."""
    return math.factorial(2 * n) // math.factorial(n)
