#!/usr/bin/env python3
"""
Network Unifier Module

Turns the raw grown network into render-ready connected paths:

1. Split pass: segments crossing mid-span are split at the crossing
2. Snap pass: endpoints closer than the snap distance move to their midpoint
3. Classification: endpoints are grouped by rounded coordinates; groups of
   three or more are junctions

The split pass is a single forward scan. Pieces appended during the scan are
visited as later pairs but never re-checked against earlier indices, and a
crossing within the split threshold of an already shortened piece leaves it
whole. Where three or more roads cross near one spot, which crossing becomes a
junction depends on input order.
"""

import logging
from typing import Any, Dict, Iterable, List, Tuple

from ..contracts import (
    HIGHWAY_WIDTH, STREET_WIDTH, ConnectionPoint, Point, Segment, UnifiedNetwork, UnifiedPath
)
from ..core.config import UnifierConfig
from ..core.geometry_utils import distance, generate_canonical_node_id, segment_intersection

logger = logging.getLogger(__name__)


def _coerce_record(record: Any, index: int) -> UnifiedPath:
    """Copy a Segment, UnifiedPath or flattened dict into a working path."""
    if isinstance(record, (Segment, UnifiedPath)):
        return UnifiedPath(
            start=record.start,
            end=record.end,
            width=record.width,
            highway=record.highway,
            origin=index
        )
    highway = bool(record.get('highway', False))
    return UnifiedPath(
        start=Point.from_any(record['start']),
        end=Point.from_any(record['end']),
        width=float(record.get('width', HIGHWAY_WIDTH if highway else STREET_WIDTH)),
        highway=highway,
        origin=index
    )


class NetworkUnifier:
    """Split, snap and classify a road network snapshot.

    Pure: the input records are copied and never mutated.
    """

    def __init__(self, config: UnifierConfig = None):
        self.config = config or UnifierConfig()

    def unify(self, records: Iterable[Any]) -> UnifiedNetwork:
        """
        Build the unified network.

        Args:
            records: Segments or dicts with start, end, width and highway

        Returns:
            UnifiedNetwork with one path per final piece and classified
            connection points; empty for empty input
        """
        paths = [_coerce_record(record, i) for i, record in enumerate(records)]
        if not paths:
            return UnifiedNetwork()

        input_count = len(paths)
        self._split_at_intersections(paths)
        split_count = len(paths) - input_count

        snap_count = self._snap_endpoints(paths)
        connection_points = self._classify_connections(paths)

        junctions = sum(1 for cp in connection_points if cp.is_intersection)
        logger.info(
            f"Unified {input_count} segments into {len(paths)} paths "
            f"(+{split_count} from splits, {snap_count} snaps, {junctions} junctions)"
        )
        return UnifiedNetwork(paths=paths, connection_points=connection_points)

    def _split_at_intersections(self, paths: List[UnifiedPath]) -> None:
        threshold = self.config.split_threshold
        i = 0
        while i < len(paths):
            j = i + 1
            while j < len(paths):
                first, second = paths[i], paths[j]
                crossing = segment_intersection(
                    first.start, first.end, second.start, second.end,
                    epsilon=self.config.intersection_epsilon
                )
                if crossing is not None:
                    # Distances are measured before either piece is shortened
                    split_first = (distance(crossing, first.start) > threshold
                                   and distance(crossing, first.end) > threshold)
                    split_second = (distance(crossing, second.start) > threshold
                                    and distance(crossing, second.end) > threshold)

                    if split_first:
                        paths.append(UnifiedPath(crossing, first.end, first.width,
                                                 first.highway, first.origin))
                        first.end = crossing
                    if split_second:
                        paths.append(UnifiedPath(crossing, second.end, second.width,
                                                 second.highway, second.origin))
                        second.end = crossing
                j += 1
            i += 1

    def _snap_endpoints(self, paths: List[UnifiedPath]) -> int:
        snap_distance = self.config.snap_distance
        snaps = 0

        for i in range(len(paths)):
            for j in range(i + 1, len(paths)):
                first, second = paths[i], paths[j]
                # Positions are captured once per pair; later snaps in the
                # same pair compare against these
                endpoints: List[Tuple[UnifiedPath, str, Point]] = [
                    (first, 'start', first.start),
                    (first, 'end', first.end),
                    (second, 'start', second.start),
                    (second, 'end', second.end),
                ]
                for a in range(2):
                    for b in range(2, 4):
                        path_a, attr_a, point_a = endpoints[a]
                        path_b, attr_b, point_b = endpoints[b]
                        if distance(point_a, point_b) <= snap_distance:
                            midpoint = Point((point_a.x + point_b.x) / 2,
                                             (point_a.y + point_b.y) / 2)
                            setattr(path_a, attr_a, midpoint)
                            setattr(path_b, attr_b, midpoint)
                            snaps += 1
        return snaps

    def _classify_connections(self, paths: List[UnifiedPath]) -> List[ConnectionPoint]:
        groups: Dict[str, Tuple[Point, List[Tuple[int, bool]]]] = {}

        for index, path in enumerate(paths):
            for point, is_start in ((path.start, True), (path.end, False)):
                key = generate_canonical_node_id(point.x, point.y)
                if key not in groups:
                    groups[key] = (point, [])
                groups[key][1].append((index, is_start))

        minimum = self.config.min_intersection_endpoints
        return [
            ConnectionPoint(
                point=point,
                segment_count=len(members),
                is_intersection=len(members) >= minimum,
                members=members
            )
            for point, members in groups.values()
        ]


def unify_network(records: Iterable[Any], config: UnifierConfig = None) -> UnifiedNetwork:
    """Functional entry point for NetworkUnifier.unify."""
    return NetworkUnifier(config).unify(records)
