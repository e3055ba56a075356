"""Exhaustive dual-priority schedulability search.

Three nested search spaces are covered here:

    search_phase_points    -- every phase change point tuple for fixed priorities
    search_all_priorities  -- every priority assignment, each followed by a
                              full phase point search
    search_rm_priorities   -- as above, restricted to Rate Monotonic
                              background priorities

Each search stops at the first schedulable configuration and returns it as
the witness. A negative answer is only returned once the whole space has been
simulated, and only after checking that the number of generated candidates
matches the closed-form size of the space.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from dualprio.enumeration import (
    count_phase_point_combinations,
    count_priority_assignments,
    count_rm_priority_assignments,
    phase_point_combinations,
    priority_assignments,
    rm_priority_assignments,
)
from dualprio.models import ConfigurationError, DualPriorityConfig, EnumerationError, TaskSet
from dualprio.simulator import simulate

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Outcome of a schedulability check or search.

    Attributes:
        schedulable: True if a schedulable configuration was found.
        configuration: The schedulable configuration (None when unschedulable).
        trials: Number of simulator runs performed.
        candidates: Number of candidates generated by the outermost
                    enumeration (priority assignments or phase point tuples).
    """
    schedulable: bool
    configuration: Optional[DualPriorityConfig] = None
    trials: int = 0
    candidates: int = 0

    def __bool__(self) -> bool:
        return self.schedulable


def _check_count(what: str, generated: int, expected: int) -> None:
    if generated != expected:
        raise EnumerationError(
            f"Generated {generated} {what}, expected {expected}")


def search_phase_points(
    taskset: TaskSet,
    config: DualPriorityConfig,
    verbose: bool = False,
) -> SearchResult:
    """Test every combination of phase change points with fixed priorities.

    The phase change point of task i ranges over 0..T_i, giving
    prod(T_i + 1) combinations. config.phase_change_points is overwritten in
    place with each combination; the priorities are left untouched.

    Args:
        taskset: The task set to check.
        config: Configuration holding the priorities to use.
        verbose: Log every combination tried.

    Returns:
        A SearchResult whose configuration is a copy of the first schedulable
        combination found.

    Raises:
        ConfigurationError: If the priorities do not fit the task set.
        EnumerationError: If the enumeration produced the wrong number of
                          combinations.
    """
    config.phase_change_points = list(taskset.periods)
    config.validate(taskset)

    periods = taskset.periods
    total = count_phase_point_combinations(periods)
    generated = 0

    logger.info("Testing all %d possible combinations of phase change points...", total)

    for points in phase_point_combinations(periods):
        config.phase_change_points = list(points)
        generated += 1

        if verbose:
            logger.debug("Testing phase change point combination %d of %d...\n%s",
                         generated, total, config.describe(taskset))

        if simulate(taskset, config, validate=False) is None:
            logger.info("Schedulable with this configuration:\n\n%s",
                        config.describe(taskset))
            return SearchResult(schedulable=True, configuration=config.copy(),
                                trials=generated, candidates=generated)
        if verbose:
            logger.debug("Unschedulable with this configuration.\n")

    _check_count("phase change point combinations", generated, total)
    return SearchResult(schedulable=False, trials=generated, candidates=generated)


def _search_priorities(taskset, assignments, total, verbose):
    config = DualPriorityConfig.for_taskset(taskset)
    generated = 0
    trials = 0

    for background, promoted in assignments:
        config.background = list(background)
        config.promoted = list(promoted)
        generated += 1

        logger.info("Generated priority permutation %d of %d...\n%s",
                    generated, total,
                    config.describe(taskset, show_phase_change_points=False))

        result = search_phase_points(taskset, config, verbose=verbose)
        trials += result.trials
        if result.schedulable:
            return SearchResult(schedulable=True, configuration=result.configuration,
                                trials=trials, candidates=generated)
        logger.info("Unschedulable for all combinations of phase change points.\n")

    _check_count("priority assignments", generated, total)
    return SearchResult(schedulable=False, trials=trials, candidates=generated)


def search_all_priorities(taskset: TaskSet, verbose: bool = False) -> SearchResult:
    """Test every priority assignment together with every phase change point.

    All (2n)! ways of giving the priorities 0..2n-1 to the n background and
    n promoted slots are generated, and each is handed to
    search_phase_points().

    Args:
        taskset: The task set to check.
        verbose: Log every phase change point combination tried.

    Returns:
        A SearchResult with the first schedulable configuration, if any.
    """
    n = len(taskset)
    result = _search_priorities(taskset, priority_assignments(n),
                                count_priority_assignments(n), verbose)
    if not result.schedulable:
        logger.info("Task set is not dual-priority schedulable!")
    return result


def search_rm_priorities(taskset: TaskSet, verbose: bool = False) -> SearchResult:
    """Like search_all_priorities(), with Rate Monotonic background priorities.

    Background priorities must increase with the task index, so there are
    binomial(2n, n) * n! = (2n)!/n! assignments to test.

    Raises:
        ConfigurationError: If the tasks are not sorted by period.
    """
    if not taskset.is_rate_monotonic():
        raise ConfigurationError(
            f"Tasks must be sorted by period for RM background priorities, "
            f"got periods {taskset.periods}")

    n = len(taskset)
    result = _search_priorities(taskset, rm_priority_assignments(n),
                                count_rm_priority_assignments(n), verbose)
    if not result.schedulable:
        logger.info("Task set is not dual-priority schedulable with RM for phase 1!")
    return result
