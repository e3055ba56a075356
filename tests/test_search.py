"""Tests for the exhaustive phase change point and priority searches."""

import unittest
from unittest import mock

from dualprio.enumeration import priority_assignments
from dualprio.models import ConfigurationError, DualPriorityConfig, EnumerationError, TaskSet
from dualprio.search import (
    SearchResult,
    search_all_priorities,
    search_phase_points,
    search_rm_priorities,
)
from dualprio.simulator import simulate


class TestSearchPhasePoints(unittest.TestCase):
    """Test the exhaustive phase change point search."""

    def test_finds_witness(self):
        """Test that RM+RM priorities on (2,4),(3,6) admit schedulable phase points."""
        taskset = TaskSet.from_pairs([(2, 4), (3, 6)])
        config = DualPriorityConfig.rm_plus_rm(taskset)
        result = search_phase_points(taskset, config)

        self.assertTrue(result)
        self.assertIsNotNone(result.configuration)
        self.assertEqual(result.configuration.background, [2, 3])
        self.assertEqual(result.configuration.promoted, [0, 1])
        self.assertIsNone(simulate(taskset, result.configuration))
        self.assertLessEqual(result.candidates, 5 * 7)

    def test_exhausts_unschedulable(self):
        """Test that an overloaded task set is searched completely."""
        taskset = TaskSet.from_pairs([(3, 5), (3, 5)])
        config = DualPriorityConfig.rm_plus_rm(taskset)
        result = search_phase_points(taskset, config)

        self.assertFalse(result)
        self.assertIsNone(result.configuration)
        self.assertEqual(result.candidates, 6 * 6)
        self.assertEqual(result.trials, 6 * 6)
        # The last combination tried is left in place; priorities are untouched.
        self.assertEqual(config.phase_change_points, [5, 5])
        self.assertEqual(config.background, [2, 3])

    def test_witness_is_a_copy(self):
        """Test that the witness does not alias the working configuration."""
        taskset = TaskSet.from_pairs([(2, 4), (3, 6)])
        config = DualPriorityConfig.rm_plus_rm(taskset)
        result = search_phase_points(taskset, config)
        config.phase_change_points[1] = 0
        self.assertIsNone(simulate(taskset, result.configuration))

    def test_short_enumeration_detected(self):
        """Test that a generator producing too few combinations is an internal error."""
        taskset = TaskSet.from_pairs([(3, 5), (3, 5)])
        config = DualPriorityConfig.rm_plus_rm(taskset)
        with mock.patch("dualprio.search.phase_point_combinations",
                        lambda periods: iter([(0, 0), (5, 5)])):
            with self.assertRaises(EnumerationError):
                search_phase_points(taskset, config)

    def test_invalid_priorities_rejected(self):
        """Test that priority lists of the wrong length are rejected."""
        taskset = TaskSet.from_pairs([(2, 4), (3, 6)])
        config = DualPriorityConfig([0], [1], [4])
        with self.assertRaises(ConfigurationError):
            search_phase_points(taskset, config)


class TestSearchAllPriorities(unittest.TestCase):
    """Test the general exhaustive priority search."""

    def test_single_task(self):
        """Test that a single feasible task is found schedulable at once."""
        result = search_all_priorities(TaskSet.from_pairs([(1, 1)]))
        self.assertTrue(result)
        self.assertEqual(result.candidates, 1)

    def test_first_assignment_succeeds(self):
        """Test that (2,4),(3,6) is schedulable with the first (RM+RM) assignment."""
        taskset = TaskSet.from_pairs([(2, 4), (3, 6)])
        result = search_all_priorities(taskset)
        self.assertTrue(result)
        self.assertEqual(result.candidates, 1)
        result.configuration.validate(taskset, distinct=True)
        self.assertIsNone(simulate(taskset, result.configuration))

    def test_overloaded_two_tasks(self):
        """Test that all 4! assignments and all their phase points are tried."""
        result = search_all_priorities(TaskSet.from_pairs([(3, 5), (3, 5)]))
        self.assertFalse(result)
        self.assertEqual(result.candidates, 24)
        self.assertEqual(result.trials, 24 * 36)

    def test_overloaded_three_tasks(self):
        """Test that all 6! assignments are tried for three tasks."""
        result = search_all_priorities(TaskSet.from_pairs([(2, 3), (2, 3), (1, 3)]))
        self.assertFalse(result)
        self.assertEqual(result.candidates, 720)
        self.assertEqual(result.trials, 720 * 4 ** 3)

    def test_long_enumeration_detected(self):
        """Test that a generator producing too many assignments is an internal error."""
        def padded(n):
            assignments = list(priority_assignments(n))
            return iter(assignments + assignments[:1])

        with mock.patch("dualprio.search.priority_assignments", padded):
            with self.assertRaises(EnumerationError):
                search_all_priorities(TaskSet.from_pairs([(3, 5), (3, 5)]))

    def test_result_truthiness(self):
        """Test that a SearchResult is truthy exactly when schedulable."""
        self.assertTrue(SearchResult(schedulable=True))
        self.assertFalse(SearchResult(schedulable=False))


class TestSearchRMPriorities(unittest.TestCase):
    """Test the Rate Monotonic restricted priority search."""

    def test_requires_rate_monotonic_order(self):
        """Test that tasks not sorted by period are rejected."""
        with self.assertRaises(ConfigurationError):
            search_rm_priorities(TaskSet.from_pairs([(3, 6), (2, 4)]))

    def test_overloaded_two_tasks(self):
        """Test that all 4!/2! assignments are tried."""
        result = search_rm_priorities(TaskSet.from_pairs([(3, 5), (3, 5)]))
        self.assertFalse(result)
        self.assertEqual(result.candidates, 12)
        self.assertEqual(result.trials, 12 * 36)

    def test_overloaded_three_tasks(self):
        """Test that all 6!/3! assignments are tried for three tasks."""
        result = search_rm_priorities(TaskSet.from_pairs([(2, 3), (2, 3), (1, 3)]))
        self.assertFalse(result)
        self.assertEqual(result.candidates, 120)

    def test_witness_background_is_rate_monotonic(self):
        """Test that a found witness has increasing background priorities."""
        taskset = TaskSet.from_pairs([(2, 4), (3, 6)])
        result = search_rm_priorities(taskset)
        self.assertTrue(result)
        background = result.configuration.background
        self.assertEqual(background, sorted(background))
        result.configuration.validate(taskset, distinct=True)


if __name__ == "__main__":
    unittest.main()
