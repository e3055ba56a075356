"""The FDMS heuristic for choosing phase change points.

Given fixed background and promoted priorities, FDMS starts with every phase
change point at the task's period (so no job is ever promoted before its
deadline) and repeatedly simulates the task set. Each time a task misses a
deadline its phase change point is moved one unit earlier. The heuristic
fails when the missing task is already promoted at release.

FDMS is not exhaustive: a failure does not mean that no phase change points
exist for the given priorities.
"""

import logging

from dualprio.models import DualPriorityConfig, TaskSet
from dualprio.search import SearchResult
from dualprio.simulator import simulate

logger = logging.getLogger(__name__)


def try_fdms(
    taskset: TaskSet,
    config: DualPriorityConfig,
    verbose: bool = False,
) -> SearchResult:
    """Search phase change points with the FDMS policy.

    config.phase_change_points is overwritten in place. On failure it is left
    at the values of the last simulation.

    Args:
        taskset: The task set to check.
        config: Configuration holding the priorities to use.
        verbose: Log every repair step.

    Returns:
        A SearchResult whose configuration is a copy of the schedulable
        phase change points, if FDMS found them.

    Raises:
        ConfigurationError: If the priorities do not fit the task set.
    """
    config.phase_change_points = list(taskset.periods)
    config.validate(taskset)

    trials = 0
    while True:
        miss = simulate(taskset, config, validate=False)
        trials += 1
        if miss is None:
            logger.info("Schedulable with FDMS phase change points:\n\n%s",
                        config.describe(taskset))
            return SearchResult(schedulable=True, configuration=config.copy(),
                                trials=trials, candidates=trials)

        point = config.phase_change_points[miss.index]
        if point == 0:
            logger.info("FDMS failed: %s missed its deadline at t=%d "
                        "with phase change point 0", miss.task.name, miss.time)
            return SearchResult(schedulable=False, trials=trials, candidates=trials)

        config.phase_change_points[miss.index] = point - 1
        if verbose:
            logger.debug("%s missed its deadline at t=%d, phase change point %d -> %d",
                         miss.task.name, miss.time, point, point - 1)
