#!/usr/bin/env python3
"""
Unit tests for local constraints and the candidate queue.
"""

import unittest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from citygen.contracts import ConstraintOutcome, Point, Segment
from citygen.core.config import ConstraintConfig
from citygen.growth.constraints import local_constraints
from citygen.growth.goals import create_segment
from citygen.growth.queue import SegmentQueue


def street(x1, y1, x2, y2, t=0.0):
    return create_segment(Point(x1, y1), Point(x2, y2), t, False)


class TestLocalConstraints(unittest.TestCase):
    """Test cases for local_constraints."""

    def setUp(self):
        """One accepted highway along the x axis."""
        self.highway = create_segment(Point(0, 0), Point(400, 0), 0, True)
        self.accepted = [self.highway]

    def test_no_accepted_segments(self):
        candidate = street(0, 0, 300, 0)
        outcome = local_constraints(candidate, [], 0)
        self.assertEqual(outcome, ConstraintOutcome.UNMODIFIED)
        self.assertEqual(candidate.end, Point(300, 0))
        self.assertFalse(candidate.severed)

    def test_crossing_truncates(self):
        candidate = street(200, -300, 200, 300)
        outcome = local_constraints(candidate, self.accepted, 1)

        self.assertEqual(outcome, ConstraintOutcome.TRUNCATED)
        self.assertAlmostEqual(candidate.end.x, 200.0)
        self.assertAlmostEqual(candidate.end.y, 0.0)
        self.assertTrue(candidate.severed)
        self.assertEqual(candidate.forward_links, [0])
        self.assertEqual(self.highway.forward_links, [1])

    def test_snap_to_start(self):
        candidate = street(0, -300, 10, -30)
        outcome = local_constraints(candidate, self.accepted, 1)

        self.assertEqual(outcome, ConstraintOutcome.SNAPPED)
        self.assertEqual(candidate.end, Point(0, 0))
        self.assertTrue(candidate.severed)
        self.assertEqual(candidate.forward_links, [0])
        self.assertEqual(self.highway.backward_links, [1])
        self.assertEqual(self.highway.forward_links, [])

    def test_snap_to_end(self):
        candidate = street(500, -300, 420, -20)
        outcome = local_constraints(candidate, self.accepted, 1)

        self.assertEqual(outcome, ConstraintOutcome.SNAPPED)
        self.assertEqual(candidate.end, Point(400, 0))
        self.assertEqual(self.highway.forward_links, [1])
        self.assertEqual(self.highway.backward_links, [])

    def test_snap_overrides_truncation(self):
        candidate = street(390, -300, 390, 300)
        outcome = local_constraints(candidate, self.accepted, 1)

        self.assertEqual(outcome, ConstraintOutcome.SNAPPED)
        self.assertEqual(candidate.end, Point(400, 0))
        self.assertEqual(candidate.forward_links, [0, 0])

    def test_crossing_near_start_is_ignored(self):
        candidate = street(100, 0, 100, 300)
        outcome = local_constraints(candidate, self.accepted, 1)

        self.assertEqual(outcome, ConstraintOutcome.UNMODIFIED)
        self.assertEqual(candidate.end, Point(100, 300))
        self.assertFalse(candidate.severed)

    def test_snap_distance_is_strict(self):
        candidate = street(0, -300, 0, -50)
        outcome = local_constraints(candidate, self.accepted, 1)
        self.assertEqual(outcome, ConstraintOutcome.UNMODIFIED)

        wide = ConstraintConfig(snap_distance=51)
        outcome = local_constraints(candidate, self.accepted, 1, wide)
        self.assertEqual(outcome, ConstraintOutcome.SNAPPED)

    def test_derived_geometry_follows_end(self):
        candidate = street(200, -300, 200, 300)
        local_constraints(candidate, self.accepted, 1)
        self.assertAlmostEqual(candidate.length, 300.0)

    def test_truncation_shortens_later_checks(self):
        second = create_segment(Point(0, 100), Point(400, 100), 0, True)
        candidate = street(200, -300, 200, 300)
        local_constraints(candidate, [self.highway, second], 2)

        # Truncated at y=0 first; the shortened candidate misses y=100
        self.assertAlmostEqual(candidate.end.y, 0.0)
        self.assertEqual(candidate.forward_links, [0])
        self.assertEqual(second.forward_links, [])


class TestSegmentQueue(unittest.TestCase):
    """Test cases for SegmentQueue."""

    def test_empty_queue(self):
        queue = SegmentQueue()
        self.assertTrue(queue.empty())
        self.assertIsNone(queue.dequeue())

    def test_dequeue_minimum_t(self):
        queue = SegmentQueue()
        for t in (3.0, 1.0, 2.0):
            queue.enqueue(street(0, 0, 1, 0, t=t))
        self.assertEqual([queue.dequeue().t for _ in range(3)], [1.0, 2.0, 3.0])
        self.assertTrue(queue.empty())

    def test_ties_resolve_first_enqueued(self):
        queue = SegmentQueue()
        first = street(0, 0, 1, 0, t=1.0)
        second = street(5, 5, 6, 5, t=1.0)
        queue.enqueue(second)
        queue.enqueue(first)
        self.assertIs(queue.dequeue(), second)
        self.assertIs(queue.dequeue(), first)
        self.assertEqual(len(queue), 0)


if __name__ == '__main__':
    unittest.main()
