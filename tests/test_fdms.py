"""Tests for the FDMS phase change point heuristic."""

import unittest
from unittest import mock

from dualprio import simulator
from dualprio.fdms import try_fdms
from dualprio.generators import generate_taskset
from dualprio.models import ConfigurationError, DualPriorityConfig, TaskSet
from dualprio.search import search_phase_points


def record_phase_points(calls):
    """Return a simulate() replacement that records the phase points of every call."""
    def recording_simulate(taskset, config, validate=True):
        calls.append(list(config.phase_change_points))
        return simulator.simulate(taskset, config, validate=validate)
    return recording_simulate


class TestFDMS(unittest.TestCase):
    """Test FDMS on small task sets with known outcomes."""

    def test_repairs_rm(self):
        """Test (2,4),(3,6): one repair of τ2 makes RM+RM schedulable."""
        taskset = TaskSet.from_pairs([(2, 4), (3, 6)])
        config = DualPriorityConfig.rm_plus_rm(taskset)
        result = try_fdms(taskset, config)

        self.assertTrue(result)
        self.assertEqual(result.configuration.phase_change_points, [4, 5])
        self.assertEqual(result.trials, 2)

    def test_starts_from_periods(self):
        """Test that caller-supplied phase points are replaced by the periods."""
        taskset = TaskSet.from_pairs([(1, 4), (1, 6)])
        config = DualPriorityConfig.rm_plus_rm(taskset, [0, 0])
        result = try_fdms(taskset, config)
        self.assertTrue(result)
        self.assertEqual(result.trials, 1)
        self.assertEqual(result.configuration.phase_change_points, [4, 6])

    def test_overload_fails(self):
        """Test that FDMS gives up on an overloaded task set."""
        taskset = TaskSet.from_pairs([(3, 5), (3, 5)])
        config = DualPriorityConfig.rm_plus_rm(taskset)
        result = try_fdms(taskset, config)

        self.assertFalse(result)
        self.assertIsNone(result.configuration)
        self.assertLessEqual(result.trials, sum(taskset.periods) + 1)
        self.assertIn(0, config.phase_change_points)

    def test_monotone_repair(self):
        """Test that every repair lowers exactly one phase point by exactly one."""
        taskset = TaskSet.from_pairs([(3, 5), (3, 5)])
        config = DualPriorityConfig.rm_plus_rm(taskset)
        calls = []
        with mock.patch("dualprio.fdms.simulate", record_phase_points(calls)):
            try_fdms(taskset, config)

        self.assertEqual(calls[0], [5, 5])
        for before, after in zip(calls, calls[1:]):
            diffs = [b - a for b, a in zip(before, after)]
            self.assertEqual(sorted(diffs), [0, 1])

    def test_rejects_bad_priorities(self):
        """Test that priority lists of the wrong length are rejected."""
        taskset = TaskSet.from_pairs([(2, 4), (3, 6)])
        with self.assertRaises(ConfigurationError):
            try_fdms(taskset, DualPriorityConfig([2, 3, 4], [0, 1], [4, 6]))

    def test_never_beats_exhaustive_search(self):
        """Test that FDMS success implies exhaustive phase point search success."""
        for i in range(15):
            taskset = generate_taskset(3, 0.95, seed=600 + i)
            fdms = try_fdms(taskset, DualPriorityConfig.rm_plus_rm(taskset))
            if fdms:
                exhaustive = search_phase_points(taskset, DualPriorityConfig.rm_plus_rm(taskset))
                self.assertTrue(exhaustive)


if __name__ == "__main__":
    unittest.main()
