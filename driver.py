"""Command-line driver for the dual-priority schedulability checks.

Usage:
  python driver.py scenario 3
  python driver.py scenario 2 --only simulate
  python driver.py check --task 6,11 --task 6,20 --policy fdms \\
      --background 1 3 --promoted 0 2

Scenarios are read from scenarios.yaml. Each scenario lists its task set and
the checks to run, together with the verdict every check must produce.
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import yaml  # pip install pyyaml

from dualprio.models import ConfigurationError, DualPrioError, DualPriorityConfig, TaskSet
from dualprio.policies import CONFIGURED_POLICIES, POLICIES, run_policy
from dualprio.search import SearchResult

logger = logging.getLogger("dualprio.driver")

DEFAULT_CONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)), "scenarios.yaml")


@dataclass
class ScenarioReport:
    """Outcome of running the checks of one scenario.

    Attributes:
        name: Scenario key in the configuration file.
        passed: True if every check produced its expected verdict.
        failures: One message per contradicted expectation.
        results: The SearchResult of every check that ran, in order.
    """
    name: str
    passed: bool = True
    failures: List[str] = field(default_factory=list)
    results: List[SearchResult] = field(default_factory=list)


def load_config(path: str = DEFAULT_CONFIG) -> Dict[str, Any]:
    """Load the YAML scenario configuration."""
    with open(path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)
    if not isinstance(config, dict) or not isinstance(config.get("scenarios"), dict):
        raise ConfigurationError(f"{path}: expected a top-level 'scenarios' mapping")
    return config


def build_config(check: Dict[str, Any], taskset: TaskSet) -> Optional[DualPriorityConfig]:
    """Build the configuration for one check, or None if it names no priorities.

    Phase change points default to the task periods.
    """
    if "background" not in check and "promoted" not in check:
        return None
    try:
        background = list(check["background"])
        promoted = list(check["promoted"])
    except KeyError as e:
        raise ConfigurationError(f"Check is missing {e.args[0]!r} priorities") from e
    points = check.get("phase_change_points")
    if points is None:
        points = taskset.periods
    return DualPriorityConfig(background=background, promoted=promoted,
                              phase_change_points=list(points))


def run_scenario(
    name: str,
    scenario: Dict[str, Any],
    verbose: bool = False,
    only: Optional[Sequence[str]] = None,
) -> ScenarioReport:
    """Run the checks of a scenario and compare each verdict with its expectation.

    Args:
        name: Scenario key, used in log output.
        scenario: The scenario mapping from the configuration file.
        verbose: Log per-trial details.
        only: If given, run only the checks whose policy is listed.

    Returns:
        A ScenarioReport. A contradicted expectation marks the report as
        failed; the remaining checks still run.
    """
    taskset = TaskSet.from_pairs(scenario["tasks"])
    report = ScenarioReport(name=name)

    logger.info("Running test %s: %s...\n", name, scenario.get("title", ""))
    logger.info("Hyper-period: %d, utilization: %.7f\n",
                taskset.hyperperiod, taskset.total_utilization)

    for check in scenario.get("checks", []):
        policy = check["policy"]
        if only is not None and policy not in only:
            continue

        result = run_policy(taskset, policy, config=build_config(check, taskset),
                            verbose=verbose)
        report.results.append(result)

        expected = bool(check["expect"])
        if result.schedulable != expected:
            verdict = "schedulable" if result.schedulable else "not schedulable"
            message = f"Test {name} failed: task set {verdict} with policy {policy}."
            logger.error("\n%s", message)
            report.failures.append(message)
            report.passed = False

    if report.passed:
        logger.info("\nSuccessfully finished test %s.", name)
    return report


def parse_task(text: str):
    """Parse a C,T pair given on the command line."""
    try:
        c, t = (int(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected C,T with integers, got {text!r}")
    return c, t


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate dual priority scheduling of periodic tasks and verify "
                    "the counterexamples of \"Dual Priority Scheduling is Not Optimal\".")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every configuration tried (MUCH slower)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scenario = subparsers.add_parser("scenario", help="Verify a preset counterexample")
    scenario.add_argument("name", help="Scenario key in the configuration file (1, 2 or 3)")
    scenario.add_argument("--config", default=DEFAULT_CONFIG,
                          help="YAML scenario file (default: scenarios.yaml)")
    scenario.add_argument("--only", nargs="+", choices=POLICIES,
                          help="Run only the checks using these policies")

    check = subparsers.add_parser("check", help="Check a custom task set")
    check.add_argument("--task", type=parse_task, action="append", required=True,
                       metavar="C,T", help="Task with WCET C and period T (repeatable)")
    check.add_argument("--policy", choices=POLICIES, required=True)
    check.add_argument("--background", type=int, nargs="+", help="Phase 1 priorities")
    check.add_argument("--promoted", type=int, nargs="+", help="Phase 2 priorities")
    check.add_argument("--phase-points", type=int, nargs="+",
                       help="Phase change points (default: the periods)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(message)s")

    try:
        if args.command == "scenario":
            scenarios = load_config(args.config)["scenarios"]
            if args.name not in scenarios:
                logger.error("Unknown scenario %r, expected one of %s",
                             args.name, ", ".join(scenarios))
                return 2
            report = run_scenario(args.name, scenarios[args.name],
                                  verbose=args.verbose, only=args.only)
            return 0 if report.passed else 1

        taskset = TaskSet.from_pairs(args.task)
        config = None
        if args.background is not None or args.promoted is not None:
            config = build_config({"background": args.background or [],
                                   "promoted": args.promoted or [],
                                   "phase_change_points": args.phase_points}, taskset)
        elif args.policy in CONFIGURED_POLICIES:
            # RM+RM priorities when none are given.
            taskset = taskset.sorted_by_period()
            config = DualPriorityConfig.rm_plus_rm(taskset, args.phase_points)
        result = run_policy(taskset, args.policy, config=config, verbose=args.verbose)
        print("schedulable" if result.schedulable else "not schedulable")
        if result.configuration is not None:
            print(result.configuration.describe(taskset))
        return 0
    except (DualPrioError, ValueError) as e:
        logger.error("Error: %s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
