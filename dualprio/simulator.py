"""Discrete-time simulation of dual-priority scheduling.

The simulator plays out the synchronous arrival sequence of a task set (every
task releases its first job at t = 0 and then strictly periodically) on a
single processor, one time unit at a time, for one full hyperperiod.

At every time point t = 0, 1, ..., H (H inclusive) it performs, in order:

    1. Deadline check: a task whose current job still has work left when
       its next job is due has missed its deadline.
    2. Release: every task that has never released a job, or whose last
       release was at least one period ago, releases a new job.
    3. Dispatch: among the tasks with work left, the one with the smallest
       effective priority runs for one time unit. A job's effective priority
       is its background priority before its phase change point and its
       promoted priority from the phase change point onwards.

Ties between equal effective priorities go to the task with the lowest index.
Exhaustive priority search never produces ties, but hand-written
configurations may.

Since the schedule repeats with period H, a run without a deadline miss
proves the configuration schedulable.
"""

from dataclasses import dataclass
from typing import List, Optional

from dualprio.models import DualPriorityConfig, Task, TaskSet


@dataclass(frozen=True)
class DeadlineMiss:
    """The first deadline miss observed by the simulator.

    Attributes:
        index: Position of the missing task in the task set.
        task: The task that missed its deadline.
        time: Time point at which the miss was detected (the due release).
    """
    index: int
    task: Task
    time: int


def simulate(
    taskset: TaskSet,
    config: DualPriorityConfig,
    validate: bool = True,
) -> Optional[DeadlineMiss]:
    """Simulate one hyperperiod and return the first deadline miss, if any.

    Args:
        taskset: The task set to simulate.
        config: Priorities and phase change points for every task.
        validate: Check the configuration against the task set first.
                  Search engines that only generate well-formed
                  configurations pass False.

    Returns:
        The first DeadlineMiss found, or None if every deadline is met.

    Raises:
        ConfigurationError: If validate is True and the configuration is
                            malformed.
    """
    if validate:
        config.validate(taskset)

    n = len(taskset)
    wcets = [task.C for task in taskset]
    periods = [task.T for task in taskset]
    background = list(config.background)
    promoted = list(config.promoted)
    points = list(config.phase_change_points)
    hyperperiod = taskset.hyperperiod

    # None means the task has not released any job yet.
    last_release: List[Optional[int]] = [None] * n
    remaining = [0] * n
    indices = range(n)

    t = 0
    while t <= hyperperiod:
        for i in indices:
            if last_release[i] is None or t - last_release[i] >= periods[i]:
                if remaining[i] > 0:
                    return DeadlineMiss(index=i, task=taskset[i], time=t)

        for i in indices:
            if last_release[i] is None or t - last_release[i] >= periods[i]:
                last_release[i] = t
                remaining[i] = wcets[i]

        running = -1
        best = 0
        for i in indices:
            if remaining[i] > 0:
                if t - last_release[i] < points[i]:
                    prio = background[i]
                else:
                    prio = promoted[i]
                # Strict comparison: the earliest task wins a tie.
                if running < 0 or prio < best:
                    best = prio
                    running = i

        if running >= 0:
            remaining[running] -= 1
        t += 1

    return None


def is_schedulable(taskset: TaskSet, config: DualPriorityConfig) -> bool:
    """Return True if the configuration meets every deadline of the task set."""
    return simulate(taskset, config) is None
