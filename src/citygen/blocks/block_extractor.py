#!/usr/bin/env python3
"""
Block Extraction Module - Cycle Tracing Approach

Recovers city blocks from a road network by walking the street graph:

- Nodes are rounded-coordinate keys for every pairwise intersection point
  and every segment endpoint (intersections first)
- Each directed edge seeds at most one successful walk that always takes the
  rightmost turn, capped at a fixed number of hops
- Closed walks large enough to be blocks are inset by half the road width
  plus a buffer

Works on the raw grown network; it does not depend on the unifier output.
"""

import math
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Set, Tuple

import networkx as nx
from shapely.geometry import LineString, box
from shapely.strtree import STRtree

from ..contracts import CityBlock, Point
from ..core.config import BlockConfig
from ..core.geometry_utils import (
    generate_canonical_node_id,
    inset_vertex,
    polygon_area,
    segment_intersection,
)
from ..core.rng import SeededRNG

logger = logging.getLogger(__name__)

# Envelope padding for candidate pair lookup, well below any snapping distance
_QUERY_TOLERANCE = 1e-6


@dataclass
class TracedLoop:
    """Closed walk found in the road graph, before insetting."""
    points: List[Point]
    segments: List[Any]
    area: float


def find_intersections(segments: Sequence[Any], epsilon: float = 1e-4) -> List[Point]:
    """
    All pairwise intersection points, in (i, j) pair order with i < j.

    Candidate pairs come from an STRtree over segment envelopes; the exact
    test is segment_intersection.
    """
    if len(segments) < 2:
        return []

    lines = [LineString([(s.start.x, s.start.y), (s.end.x, s.end.y)]) for s in segments]
    tree = STRtree(lines)
    intersections: List[Point] = []

    for i, segment in enumerate(segments):
        minx, miny, maxx, maxy = lines[i].bounds
        query_box = box(minx - _QUERY_TOLERANCE, miny - _QUERY_TOLERANCE,
                        maxx + _QUERY_TOLERANCE, maxy + _QUERY_TOLERANCE)
        candidates = sorted(int(j) for j in tree.query(query_box) if j > i)
        for j in candidates:
            other = segments[j]
            point = segment_intersection(segment.start, segment.end, other.start, other.end, epsilon)
            if point is not None:
                intersections.append(point)

    return intersections


class BlockExtractor:
    """
    Trace road loops and turn them into inset city blocks.

    Pure function of its input: the network is only read.
    """

    def __init__(self, config: Optional[BlockConfig] = None, rng: Optional[SeededRNG] = None):
        """
        Args:
            config: Block extraction parameters
            rng: Optional random sequence for block colors; colors cycle
                 through the palette when omitted
        """
        self.config = config or BlockConfig()
        self.rng = rng

    def build_graph(self, segments: Sequence[Any]) -> nx.MultiGraph:
        """Undirected multigraph keyed by rounded node id, in insertion order."""
        graph = nx.MultiGraph()

        for point in find_intersections(segments):
            # Later intersections sharing a key replace the stored position
            graph.add_node(generate_canonical_node_id(point.x, point.y), point=point)

        for segment in segments:
            start_key = generate_canonical_node_id(segment.start.x, segment.start.y)
            end_key = generate_canonical_node_id(segment.end.x, segment.end.y)
            if start_key not in graph:
                graph.add_node(start_key, point=segment.start)
            if end_key not in graph:
                graph.add_node(end_key, point=segment.end)
            graph.add_edge(start_key, end_key, segment=segment)

        return graph

    def trace_loops(self, segments: Sequence[Any]) -> List[TracedLoop]:
        """Find closed rightmost-turn walks with at least three vertices."""
        if not segments:
            return []

        graph = self.build_graph(segments)
        visited_edges: Set[Tuple[str, str]] = set()
        loops: List[TracedLoop] = []

        for start_key in graph.nodes:
            for next_key, edges in graph.adj[start_key].items():
                if (start_key, next_key) in visited_edges:
                    continue
                first_segment = next(iter(edges.values()))['segment']
                loop = self._walk(graph, start_key, next_key, first_segment)
                if loop is not None:
                    visited_edges.add((start_key, next_key))
                    loops.append(loop)

        logger.debug(f"Traced {len(loops)} closed loops over {graph.number_of_nodes()} nodes")
        return loops

    def _walk(self, graph: nx.MultiGraph, start_key: str, next_key: str,
              first_segment: Any) -> Optional[TracedLoop]:
        nodes = graph.nodes
        polygon = [nodes[start_key]['point']]
        segment_path = [first_segment]
        seen: Set[str] = set()
        current_key = next_key
        prev_key = start_key

        for _ in range(self.config.max_trace_steps):
            if current_key == start_key:
                break
            if current_key in seen:
                break
            seen.add(current_key)

            current_point = nodes[current_key]['point']
            polygon.append(current_point)

            options = [
                (neighbor, next(iter(edges.values()))['segment'])
                for neighbor, edges in graph.adj[current_key].items()
                if neighbor != prev_key
            ]
            if not options:
                break

            best_key, best_segment = options[0]
            if len(options) > 1:
                prev_point = nodes[prev_key]['point']
                incoming = math.atan2(current_point.y - prev_point.y, current_point.x - prev_point.x)
                best_angle = -math.pi
                for neighbor, segment in options:
                    next_point = nodes[neighbor]['point']
                    outgoing = math.atan2(next_point.y - current_point.y, next_point.x - current_point.x)
                    turn = outgoing - incoming
                    if turn < -math.pi:
                        turn += 2 * math.pi
                    if turn > math.pi:
                        turn -= 2 * math.pi
                    if turn > best_angle:
                        best_angle = turn
                        best_key, best_segment = neighbor, segment

            segment_path.append(best_segment)
            prev_key = current_key
            current_key = best_key

        if current_key == start_key and len(polygon) >= 3:
            return TracedLoop(points=polygon, segments=segment_path, area=polygon_area(polygon))
        return None

    def _inset(self, loop: TracedLoop) -> List[Point]:
        points = loop.points
        count = len(points)
        inset: List[Point] = []

        for i in range(count):
            edge_segment = loop.segments[min(i, len(loop.segments) - 1)] if loop.segments else None
            width = getattr(edge_segment, 'width', None)
            offset = width / 2 + self.config.inset_buffer if width is not None else self.config.fallback_inset

            vertex = inset_vertex(points[i - 1], points[i], points[(i + 1) % count], offset)
            if vertex is not None:
                inset.append(vertex)
        return inset

    def _pick_color(self, block_index: int) -> str:
        palette = self.config.palette
        if self.rng is not None:
            return self.rng.choice(palette)
        return palette[block_index % len(palette)]

    def extract(self, segments: Sequence[Any]) -> List[CityBlock]:
        """
        Extract inset city blocks.

        Args:
            segments: RoadNetwork or sequence of segments with start, end, width

        Returns:
            Blocks in trace order; empty for empty input
        """
        segments = list(segments)
        blocks: List[CityBlock] = []
        if not segments:
            return blocks

        loops = self.trace_loops(segments)
        too_small = 0

        for loop in loops:
            if loop.area < self.config.min_block_area:
                too_small += 1
                continue

            inset = self._inset(loop)
            if len(inset) < 3:
                continue
            blocks.append(CityBlock(points=tuple(inset), color=self._pick_color(len(blocks))))

        logger.info(
            f"Extracted {len(blocks)} blocks from {len(loops)} loops "
            f"({too_small} below {self.config.min_block_area:.0f} area)"
        )
        return blocks


def find_city_blocks(segments: Sequence[Any], config: Optional[BlockConfig] = None,
                     rng: Optional[SeededRNG] = None) -> List[CityBlock]:
    """Functional entry point for BlockExtractor.extract."""
    return BlockExtractor(config, rng).extract(segments)
