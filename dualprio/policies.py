"""Single entry point selecting one of the schedulability checks by name."""

import logging
from typing import Optional

from dualprio.fdms import try_fdms
from dualprio.models import ConfigurationError, DualPriorityConfig, TaskSet
from dualprio.search import (
    SearchResult,
    search_all_priorities,
    search_phase_points,
    search_rm_priorities,
)
from dualprio.simulator import simulate

logger = logging.getLogger(__name__)

POLICIES = (
    "simulate",
    "fdms",
    "phase-points",
    "all-priorities",
    "rm-priorities",
)

# Policies that take their priorities (and for "simulate", phase points)
# from a caller-supplied configuration.
CONFIGURED_POLICIES = ("simulate", "fdms", "phase-points")


def run_policy(
    taskset: TaskSet,
    policy: str,
    config: Optional[DualPriorityConfig] = None,
    verbose: bool = False,
) -> SearchResult:
    """Run the named schedulability check on a task set.

    Args:
        taskset: The task set to check.
        policy: One of POLICIES.
        config: Priorities (and phase change points for "simulate").
                Required by the policies in CONFIGURED_POLICIES, ignored
                by the others.
        verbose: Log per-trial details.

    Returns:
        The SearchResult of the selected check.

    Raises:
        ValueError: If the policy is unknown.
        ConfigurationError: If a required configuration is missing or invalid.
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown policy {policy!r}, expected one of {', '.join(POLICIES)}")
    if policy in CONFIGURED_POLICIES and config is None:
        raise ConfigurationError(f"Policy {policy!r} requires a configuration")

    if policy == "simulate":
        config.validate(taskset)
        logger.info("Testing custom configuration...\n%s", config.describe(taskset))
        miss = simulate(taskset, config, validate=False)
        if miss is not None:
            logger.info("%s missed its deadline at t=%d.", miss.task.name, miss.time)
            return SearchResult(schedulable=False, trials=1, candidates=1)
        logger.info("Task set schedulable with custom configuration.")
        return SearchResult(schedulable=True, configuration=config.copy(),
                            trials=1, candidates=1)
    if policy == "fdms":
        return try_fdms(taskset, config, verbose=verbose)
    if policy == "phase-points":
        return search_phase_points(taskset, config, verbose=verbose)
    if policy == "all-priorities":
        return search_all_priorities(taskset, verbose=verbose)
    return search_rm_priorities(taskset, verbose=verbose)
