"""dualprio: exhaustive schedulability testing for dual-priority scheduling.

This package decides, by simulation and exhaustive search, whether a set of
synchronous periodic tasks with implicit deadlines is schedulable on a single
processor under dual-priority scheduling, where each job is promoted from a
background priority to a promoted priority at a fixed offset from its release.
"""

from dualprio.models import (
    ConfigurationError,
    DualPrioError,
    DualPriorityConfig,
    EnumerationError,
    Task,
    TaskSet,
)
from dualprio.simulator import DeadlineMiss, simulate, is_schedulable
from dualprio.search import (
    SearchResult,
    search_phase_points,
    search_all_priorities,
    search_rm_priorities,
)
from dualprio.fdms import try_fdms
from dualprio.policies import POLICIES, run_policy

__version__ = "0.1.0"
__all__ = [
    "Task",
    "TaskSet",
    "DualPriorityConfig",
    "DualPrioError",
    "ConfigurationError",
    "EnumerationError",
    "DeadlineMiss",
    "simulate",
    "is_schedulable",
    "SearchResult",
    "search_phase_points",
    "search_all_priorities",
    "search_rm_priorities",
    "try_fdms",
    "POLICIES",
    "run_policy",
]
