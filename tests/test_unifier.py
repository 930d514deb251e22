#!/usr/bin/env python3
"""
Unit tests for the network unifier.
"""

import unittest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from citygen.contracts import Point, RoadNetwork, Segment
from citygen.core.config import UnifierConfig
from citygen.network.unifier import NetworkUnifier, unify_network


def seg(x1, y1, x2, y2, highway=False):
    return Segment(start=Point(x1, y1), end=Point(x2, y2), highway=highway,
                   width=16.0 if highway else 6.0)


class TestNetworkUnifier(unittest.TestCase):
    """Test cases for NetworkUnifier."""

    def setUp(self):
        """Set up test fixtures."""
        self.unifier = NetworkUnifier()

    def test_empty_input(self):
        unified = self.unifier.unify([])
        self.assertTrue(unified.is_empty())
        self.assertEqual(unified.connection_points, [])

    def test_three_endpoints_form_intersection(self):
        unified = self.unifier.unify([
            seg(0, 0, 100, 0),
            seg(0, 0, 0, 100),
            seg(0, 0, -100, -100),
        ])
        self.assertEqual(len(unified.paths), 3)
        self.assertEqual(len(unified.connection_points), 4)

        junctions = unified.intersections
        self.assertEqual(len(junctions), 1)
        self.assertEqual(junctions[0].segment_count, 3)
        self.assertEqual(junctions[0].point, Point(0, 0))

    def test_two_endpoints_are_not_intersection(self):
        unified = self.unifier.unify([seg(0, 0, 100, 0), seg(0, 0, 0, 100)])
        shared = [cp for cp in unified.connection_points if cp.segment_count == 2]
        self.assertEqual(len(shared), 1)
        self.assertFalse(shared[0].is_intersection)
        self.assertEqual(unified.intersections, [])

    def test_crossing_splits_both(self):
        unified = self.unifier.unify([seg(0, 0, 200, 0), seg(100, -100, 100, 100)])

        self.assertEqual(len(unified.paths), 4)
        self.assertEqual([p.origin for p in unified.paths], [0, 1, 0, 1])

        junctions = unified.intersections
        self.assertEqual(len(junctions), 1)
        self.assertEqual(junctions[0].segment_count, 4)
        self.assertAlmostEqual(junctions[0].point.x, 100.0)
        self.assertAlmostEqual(junctions[0].point.y, 0.0)

        # Pieces keep the attributes of their source
        for path in unified.paths:
            self.assertAlmostEqual(path.to_linestring().length, 100.0)

    def test_crossing_near_endpoint_splits_one(self):
        unified = self.unifier.unify([seg(0, 0, 200, 0), seg(5, -100, 5, 100)])
        self.assertEqual(len(unified.paths), 3)
        self.assertEqual([p.origin for p in unified.paths], [0, 1, 1])

    def test_close_endpoints_snap_to_midpoint(self):
        unified = self.unifier.unify([seg(0, 0, 100, 0), seg(120, 0, 300, 0)])

        first, second = unified.paths
        self.assertEqual(first.end, Point(110, 0))
        self.assertEqual(second.start, Point(110, 0))

        shared = [cp for cp in unified.connection_points if cp.point == Point(110, 0)]
        self.assertEqual(len(shared), 1)
        self.assertEqual(shared[0].segment_count, 2)
        self.assertFalse(shared[0].is_intersection)
        self.assertEqual(sorted(shared[0].members), [(0, False), (1, True)])

    def test_snaps_chain_across_pairs(self):
        unified = self.unifier.unify([
            seg(0, 0, 200, 0),
            seg(240, 0, 240, 300),
            seg(280, 0, 500, 0),
        ])

        self.assertEqual(
            [(p.start, p.end) for p in unified.paths],
            [
                (Point(0, 0), Point(220, 0)),
                (Point(220, 0), Point(240, 300)),
                (Point(280, 0), Point(500, 0)),
            ]
        )
        # Once B's start has moved to 220, C's start is 60 away and stays put
        self.assertEqual([cp.segment_count for cp in unified.connection_points], [1, 2, 1, 1, 1])
        self.assertEqual(unified.connection_points[1].point, Point(220, 0))
        self.assertFalse(unified.connection_points[1].is_intersection)

    def test_near_crossings_depend_on_input_order(self):
        # Two roads cross a third 5 units apart; without snapping, only the
        # first crossing found becomes a junction and the other road ends on
        # the interior of an already-split piece
        unifier = NetworkUnifier(UnifierConfig(snap_distance=0))
        horizontal = seg(0, 0, 200, 0)
        near = seg(100, -100, 100, 100)
        far = seg(105, -100, 105, 100)

        def counts(unified):
            return {
                round(cp.point.x): cp.segment_count
                for cp in unified.connection_points if abs(cp.point.y) < 1e-9
            }

        first = unifier.unify([horizontal, near, far])
        self.assertEqual(len(first.paths), 6)
        self.assertEqual([p.origin for p in first.paths], [0, 1, 2, 0, 1, 2])
        self.assertEqual(counts(first)[100], 4)
        self.assertEqual(counts(first)[105], 2)
        # The second piece of the horizontal road spans the far crossing
        self.assertEqual(first.paths[3].start, Point(100, 0))
        self.assertEqual(first.paths[3].end, Point(200, 0))

        second = unifier.unify([horizontal, far, near])
        self.assertEqual(len(second.paths), 6)
        self.assertEqual(counts(second)[105], 4)
        self.assertEqual(counts(second)[100], 2)
        self.assertEqual(len(first.intersections), 1)
        self.assertEqual(len(second.intersections), 1)

    def test_snap_distance_config(self):
        unifier = NetworkUnifier(UnifierConfig(snap_distance=10))
        unified = unifier.unify([seg(0, 0, 100, 0), seg(120, 0, 300, 0)])
        self.assertEqual(unified.paths[0].end, Point(100, 0))

    def test_input_not_mutated(self):
        segments = [seg(0, 0, 200, 0, highway=True), seg(100, -100, 100, 100)]
        self.unifier.unify(segments)

        self.assertEqual(segments[0].end, Point(200, 0))
        self.assertEqual(segments[1].start, Point(100, -100))
        self.assertEqual(segments[1].end, Point(100, 100))

    def test_accepts_network_and_records(self):
        network = RoadNetwork([seg(0, 0, 200, 0, highway=True), seg(100, -100, 100, 100)])
        from_network = unify_network(network)
        from_records = unify_network(network.to_records())

        self.assertEqual(
            [(p.start, p.end, p.width, p.highway) for p in from_network.paths],
            [(p.start, p.end, p.width, p.highway) for p in from_records.paths]
        )
        self.assertTrue(from_network.paths[0].highway)
        self.assertEqual(from_network.paths[0].width, 16.0)

    def test_pair_records(self):
        unified = unify_network([{'start': (0, 0), 'end': (50, 50)}])
        self.assertEqual(len(unified.paths), 1)
        self.assertEqual(unified.paths[0].width, 6.0)
        self.assertFalse(unified.paths[0].highway)


if __name__ == '__main__':
    unittest.main()
