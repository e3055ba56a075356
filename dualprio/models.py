"""Data models for tasks, task sets and dual-priority configurations."""

import math
from dataclasses import dataclass, field
from typing import List, Optional


class DualPrioError(Exception):
    """Base class for errors raised by the dualprio package."""


class ConfigurationError(DualPrioError, ValueError):
    """Raised when a dual-priority configuration does not fit its task set."""


class EnumerationError(DualPrioError, RuntimeError):
    """Raised when an exhaustive enumeration generated the wrong number of candidates."""


@dataclass(frozen=True)
class Task:
    """Represents a periodic task with an implicit deadline.

    Attributes:
        C: Worst-case execution time (WCET), in integer time units.
        T: Period, which is also the relative deadline.
        name: Optional task identifier.
    """
    C: int
    T: int
    name: str = ""

    def __post_init__(self) -> None:
        """Validate task parameters."""
        if not isinstance(self.C, int) or isinstance(self.C, bool):
            raise ValueError(f"Task {self.name}: C must be an integer, got {self.C!r}")
        if not isinstance(self.T, int) or isinstance(self.T, bool):
            raise ValueError(f"Task {self.name}: T must be an integer, got {self.T!r}")
        if self.C <= 0:
            raise ValueError(f"Task {self.name}: C must be positive, got {self.C}")
        if self.T <= 0:
            raise ValueError(f"Task {self.name}: T must be positive, got {self.T}")
        if self.C > self.T:
            raise ValueError(f"Task {self.name}: C ({self.C}) cannot exceed T ({self.T})")

    @property
    def utilization(self) -> float:
        """Return the utilization of this task (C/T)."""
        return self.C / self.T

    def __str__(self) -> str:
        name_str = f"{self.name}: " if self.name else ""
        return f"Task({name_str}C={self.C}, T={self.T})"


@dataclass
class TaskSet:
    """An ordered set of periodic tasks.

    The order of the tasks is significant: the simulator checks deadline
    misses and breaks priority ties in index order.

    Attributes:
        tasks: List of tasks in the set.
        hyperperiod: Least common multiple of all periods.
    """
    tasks: List[Task] = field(default_factory=list)
    hyperperiod: int = field(default=1, init=False)

    def __post_init__(self) -> None:
        """Name unnamed tasks and compute the hyperperiod."""
        named = []
        for i, task in enumerate(self.tasks):
            if not task.name:
                task = Task(C=task.C, T=task.T, name=f"τ{i+1}")
            named.append(task)
        self.tasks = named

        hyperperiod = 1
        for task in self.tasks:
            hyperperiod = hyperperiod // math.gcd(hyperperiod, task.T) * task.T
        self.hyperperiod = hyperperiod

    @classmethod
    def from_pairs(cls, pairs) -> "TaskSet":
        """Build a task set from (C, T) pairs."""
        return cls(tasks=[Task(C=c, T=t) for c, t in pairs])

    @property
    def periods(self) -> List[int]:
        return [t.T for t in self.tasks]

    @property
    def total_utilization(self) -> float:
        """Return the total utilization of all tasks."""
        return sum(t.utilization for t in self.tasks)

    def is_rate_monotonic(self) -> bool:
        """Return True if the tasks are ordered by non-decreasing period."""
        return all(a.T <= b.T for a, b in zip(self.tasks, self.tasks[1:]))

    def sorted_by_period(self) -> "TaskSet":
        """Return a new task set in Rate Monotonic order (shortest period first)."""
        return TaskSet(tasks=sorted(self.tasks, key=lambda t: t.T))

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self):
        return iter(self.tasks)

    def __getitem__(self, index: int) -> Task:
        return self.tasks[index]


@dataclass
class DualPriorityConfig:
    """Priorities and phase change points for every task of a task set.

    Entry i of each list belongs to task i. Lower value = higher priority.
    Search engines overwrite the lists in place while trialing candidates;
    use copy() to keep a configuration around.

    Attributes:
        background: Priority of each job before its phase change point.
        promoted: Priority of each job from its phase change point onwards.
        phase_change_points: Offset from release at which each task is promoted.
    """
    background: List[int]
    promoted: List[int]
    phase_change_points: List[int]

    @classmethod
    def for_taskset(cls, taskset: TaskSet) -> "DualPriorityConfig":
        """Return a configuration with all priorities 0 and phase points at the periods."""
        n = len(taskset)
        return cls(background=[0] * n, promoted=[0] * n,
                   phase_change_points=list(taskset.periods))

    @classmethod
    def rm_plus_rm(cls, taskset: TaskSet,
                   phase_change_points: Optional[List[int]] = None) -> "DualPriorityConfig":
        """Return RM+RM priorities for a task set sorted by period.

        Task i gets background priority n + i and promoted priority i, so
        every promoted priority is higher than every background priority.
        """
        n = len(taskset)
        if phase_change_points is None:
            phase_change_points = list(taskset.periods)
        return cls(background=list(range(n, 2 * n)), promoted=list(range(n)),
                   phase_change_points=list(phase_change_points))

    def copy(self) -> "DualPriorityConfig":
        return DualPriorityConfig(background=list(self.background),
                                  promoted=list(self.promoted),
                                  phase_change_points=list(self.phase_change_points))

    def validate(self, taskset: TaskSet, distinct: bool = False) -> None:
        """Check that this configuration is well formed for the task set.

        Args:
            taskset: The task set the configuration applies to.
            distinct: Also require the 2n priority slots to be exactly
                      the values 0..2n-1, each used once.

        Raises:
            ConfigurationError: If any check fails.
        """
        n = len(taskset)
        for label, values in (("background", self.background),
                              ("promoted", self.promoted),
                              ("phase_change_points", self.phase_change_points)):
            if len(values) != n:
                raise ConfigurationError(
                    f"{label} has {len(values)} entries, task set has {n} tasks")
            for v in values:
                if not isinstance(v, int) or isinstance(v, bool):
                    raise ConfigurationError(f"{label} entries must be integers, got {v!r}")

        for task, point in zip(taskset, self.phase_change_points):
            if point < 0 or point > task.T:
                raise ConfigurationError(
                    f"Task {task.name}: phase change point {point} outside [0, {task.T}]")

        if distinct:
            slots = sorted(self.background + self.promoted)
            if slots != list(range(2 * n)):
                raise ConfigurationError(
                    f"Priorities must use each of 0..{2 * n - 1} exactly once, "
                    f"got background={self.background} promoted={self.promoted}")

    def describe(self, taskset: TaskSet, show_priorities: bool = True,
                 show_phase_change_points: bool = True) -> str:
        """Render the task set with this configuration, one line per task."""
        lines = []
        for i, task in enumerate(taskset):
            line = f"T{i+1} ({task.C:2d}, {task.T:3d}):"
            if show_priorities:
                line += (f" phase 1 prio = {self.background[i]},"
                         f" phase 2 prio = {self.promoted[i]}")
            if show_phase_change_points:
                line += f", phase change point = {self.phase_change_points[i]}"
            lines.append(line)
        return "\n".join(lines)
