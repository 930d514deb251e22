#!/usr/bin/env python3
"""
Data Contracts for Procedural City Generation

Defines the data structures shared by growth, unification and block
extraction. Segments live in an arena (RoadNetwork) and reference
each other through integer indices rather than object pointers.
"""

import math
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from shapely.geometry import LineString, Polygon

logger = logging.getLogger(__name__)

HIGHWAY_WIDTH = 16.0
STREET_WIDTH = 6.0


class CityGenError(Exception):
    """Base class for city generation errors."""


class NetworkFrozenError(CityGenError):
    """Raised when a finished RoadNetwork is modified."""


@dataclass(frozen=True)
class Point:
    """Immutable 2D point in world units."""
    x: float
    y: float

    def distance_to(self, other: 'Point') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def from_any(cls, value: Any) -> 'Point':
        """Coerce a Point, mapping with x/y keys or (x, y) pair into a Point."""
        if isinstance(value, Point):
            return value
        if isinstance(value, dict):
            return cls(float(value['x']), float(value['y']))
        x, y = value
        return cls(float(x), float(y))


class ConstraintOutcome(Enum):
    """Result of applying local constraints to a growth candidate.

    Every candidate is accepted; the outcome only reports how its end point
    was mutated. When several checks fire, the last one wins.
    """
    UNMODIFIED = "unmodified"
    TRUNCATED = "truncated"
    SNAPPED = "snapped"


@dataclass
class Segment:
    """A directed street or highway edge.

    ``dir`` and ``length`` are derived from the geometry so they can never go
    stale when a constraint moves the end point. ``forward_links`` and
    ``backward_links`` hold indices into the owning network's arena; they are
    populated by different code paths and are not guaranteed symmetric.
    When no width is given it follows the road class.
    """
    start: Point
    end: Point
    t: float = 0.0
    highway: bool = False
    width: Optional[float] = None
    severed: bool = False
    id: int = -1
    forward_links: List[int] = field(default_factory=list)
    backward_links: List[int] = field(default_factory=list)

    def __post_init__(self):
        if self.width is None:
            self.width = HIGHWAY_WIDTH if self.highway else STREET_WIDTH

    @property
    def dir(self) -> float:
        return math.atan2(self.end.y - self.start.y, self.end.x - self.start.x)

    @property
    def length(self) -> float:
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)

    def to_linestring(self) -> LineString:
        return LineString([self.start.to_tuple(), self.end.to_tuple()])

    def to_record(self) -> Dict[str, Any]:
        """Flatten to the unifier request shape (growth metadata dropped)."""
        return {
            'start': {'x': self.start.x, 'y': self.start.y},
            'end': {'x': self.end.x, 'y': self.end.y},
            'width': self.width,
            'highway': self.highway,
        }


class RoadNetwork:
    """Ordered arena of accepted segments.

    Append-only while growth runs, immutable once ``freeze`` is called. The
    arena list is private; ``segments`` is a read-only snapshot.
    """

    def __init__(self, segments: Optional[List[Segment]] = None):
        self._segments: List[Segment] = list(segments or [])
        self._frozen = False

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return tuple(self._segments)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def append(self, segment: Segment) -> int:
        """Add a segment to the arena and return its index."""
        if self._frozen:
            raise NetworkFrozenError("Cannot append to a frozen RoadNetwork")
        self._segments.append(segment)
        return len(self._segments) - 1

    def freeze(self) -> None:
        self._frozen = True

    def to_records(self) -> List[Dict[str, Any]]:
        return [segment.to_record() for segment in self._segments]

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __getitem__(self, index: int) -> Segment:
        return self._segments[index]


@dataclass
class UnifiedPath:
    """A render-ready road piece produced by the network unifier."""
    start: Point
    end: Point
    width: float
    highway: bool
    origin: int  # index of the unifier input record this path descends from

    def to_linestring(self) -> LineString:
        return LineString([self.start.to_tuple(), self.end.to_tuple()])


@dataclass
class ConnectionPoint:
    """Endpoint cluster keyed by rounded coordinates."""
    point: Point
    segment_count: int
    is_intersection: bool
    members: List[Tuple[int, bool]] = field(default_factory=list)  # (path index, is_start)


@dataclass
class UnifiedNetwork:
    """Intersection-split, endpoint-snapped view of a road network."""
    paths: List[UnifiedPath] = field(default_factory=list)
    connection_points: List[ConnectionPoint] = field(default_factory=list)

    @property
    def intersections(self) -> List[ConnectionPoint]:
        return [cp for cp in self.connection_points if cp.is_intersection]

    def is_empty(self) -> bool:
        return not self.paths


@dataclass(frozen=True)
class CityBlock:
    """Inset polygon enclosed by a traced road loop."""
    points: Tuple[Point, ...]
    color: str

    def __post_init__(self):
        """Validate contract invariants."""
        if len(self.points) < 3:
            raise ValueError(f"CityBlock: polygon needs at least 3 points, got {len(self.points)}")
        # Normalize lists to tuples so the block stays hashable
        object.__setattr__(self, 'points', tuple(self.points))

    @property
    def area(self) -> float:
        return self.to_polygon().area

    def to_polygon(self) -> Polygon:
        return Polygon([p.to_tuple() for p in self.points])


@dataclass(frozen=True)
class UnifyResponse:
    """Reply of the asynchronous unifier boundary."""
    success: bool
    unified_network: Optional[UnifiedNetwork] = None
    error: Optional[str] = None


@dataclass
class CityResult:
    """Everything one generation run hands to the renderer."""
    network: RoadNetwork
    unified: UnifiedNetwork
    blocks: List[CityBlock]
    seed: int
    segment_limit: int
    metadata: Dict[str, Any] = field(default_factory=dict)
