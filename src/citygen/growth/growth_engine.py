"""Main orchestrator for procedural road network growth.

This module implements the GrowthEngine class that seeds the initial highway
pair, drains the candidate queue in priority order, applies local
constraints and schedules global-goal branches until the segment limit is
reached or the queue runs dry.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..contracts import ConstraintOutcome, Point, RoadNetwork, Segment
from ..core.config import CityGenConfig, get_default_config
from ..core.noise import NoiseField
from ..core.rng import SeededRNG
from .constraints import local_constraints
from .goals import create_segment, global_goals
from .queue import SegmentQueue

logger = logging.getLogger(__name__)

FORWARD = 'forward_links'
BACKWARD = 'backward_links'


@dataclass
class GrowthStats:
    """Counters collected during one growth run."""
    accepted: int = 0
    highways: int = 0
    streets: int = 0
    severed: int = 0
    branches_enqueued: int = 0
    outcomes: Dict[str, int] = field(
        default_factory=lambda: {outcome.value: 0 for outcome in ConstraintOutcome}
    )

    def record(self, segment: Segment, outcome: ConstraintOutcome):
        self.accepted += 1
        if segment.highway:
            self.highways += 1
        else:
            self.streets += 1
        if segment.severed:
            self.severed += 1
        self.outcomes[outcome.value] += 1


class GrowthEngine:
    """Priority-driven road network generator.

    Orchestrates the growth process by:
    1. Seeding two opposite highway segments through the origin
    2. Dequeuing the candidate with the smallest t
    3. Applying local constraints and accepting the candidate
    4. Enqueuing global-goal branches of unsevered segments

    Growth is strictly sequential and O(n^2) in accepted segments because
    every candidate is checked against every accepted segment.
    """

    def __init__(
        self,
        config: Optional[CityGenConfig] = None,
        seed: Optional[int] = None,
        segment_limit: Optional[int] = None,
        noise_field: Optional[NoiseField] = None
    ):
        """Initialize growth engine.

        Args:
            config: Generation configuration (defaults if None)
            seed: Random seed, overrides config.limits.seed
            segment_limit: Maximum accepted segments, overrides config.limits.segment_limit
            noise_field: Population field (3-octave default if None)
        """
        self.config = config or get_default_config()
        self.seed = self.config.limits.seed if seed is None else seed
        self.segment_limit = self.config.limits.segment_limit if segment_limit is None else segment_limit
        self.noise_field = noise_field or NoiseField()

        if self.segment_limit < 0:
            raise ValueError("segment_limit must be non-negative")
        if self.segment_limit > self.config.limits.warn_segment_limit:
            logger.warning(
                f"segment_limit={self.segment_limit} exceeds {self.config.limits.warn_segment_limit}; "
                f"local constraints make growth O(n^2)"
            )

        self.reset()
        logger.info(f"Initialized GrowthEngine with seed {self.seed}, limit {self.segment_limit}")

    def reset(self) -> None:
        """Discard any progress and re-seed the run."""
        self.rng = SeededRNG(self.seed)
        self.network = RoadNetwork()
        self.queue = SegmentQueue()
        self.stats = GrowthStats()
        self.finished = False

        # id(target) -> (target, [(source, link attribute)]) for links whose
        # target has not been accepted yet
        self._deferred_links: Dict[int, Tuple[Segment, List[Tuple[Segment, str]]]] = {}
        self._arena_index: Dict[int, int] = {}

        self._seed_initial_segments()

    def _seed_initial_segments(self) -> None:
        length = self.config.segments.highway_length
        root = create_segment(Point(0, 0), Point(length, 0), 0, True, self.config.segments)
        opposite = create_segment(Point(-length, 0), Point(0, 0), 0, True, self.config.segments)

        self._link(root, opposite, BACKWARD)
        self._link(opposite, root, FORWARD)

        self.queue.enqueue(root)
        self.queue.enqueue(opposite)

    def _link(self, source: Segment, target: Segment, attribute: str) -> None:
        """Append target's arena index to source's link list, deferring if needed."""
        index = self._arena_index.get(id(target))
        if index is not None:
            getattr(source, attribute).append(index)
            return
        _, pending = self._deferred_links.setdefault(id(target), (target, []))
        pending.append((source, attribute))

    def _accept(self, segment: Segment, outcome: ConstraintOutcome) -> int:
        index = self.network.append(segment)
        self._arena_index[id(segment)] = index

        entry = self._deferred_links.pop(id(segment), None)
        if entry is not None:
            for source, attribute in entry[1]:
                getattr(source, attribute).append(index)

        self.stats.record(segment, outcome)
        return index

    def step(self) -> bool:
        """Process one queue entry.

        Returns:
            True when generation has finished, False otherwise.
        """
        if self.finished:
            return True

        if self.queue.empty() or len(self.network) >= self.segment_limit:
            self._finalize()
            return True

        candidate = self.queue.dequeue()
        candidate_index = len(self.network)

        outcome = local_constraints(
            candidate, self.network, candidate_index, self.config.constraints
        )
        self._accept(candidate, outcome)

        if not candidate.severed:
            branches = global_goals(
                candidate, self.rng, self.noise_field,
                self.config.segments, self.config.branching
            )
            for branch in branches:
                branch.t = candidate.t + 1 + branch.t
                branch.backward_links.append(candidate_index)
                self._link(candidate, branch, FORWARD)
                self.queue.enqueue(branch)
            self.stats.branches_enqueued += len(branches)

        interval = self.config.logging.progress_log_interval
        if len(self.network) % interval == 0:
            logger.debug(f"Accepted {len(self.network)} segments, queue size {len(self.queue)}")

        return False

    def generate(self) -> RoadNetwork:
        """Run growth to completion and return the frozen network."""
        while not self.step():
            pass
        return self.network

    def _finalize(self) -> None:
        for index, segment in enumerate(self.network):
            segment.id = index
        self.network.freeze()
        self.finished = True

        logger.info(
            f"Growth finished: {self.stats.accepted} segments "
            f"({self.stats.highways} highways, {self.stats.streets} streets, "
            f"{self.stats.severed} severed), {len(self.queue)} candidates left in queue"
        )
        logger.debug(f"Constraint outcomes: {self.stats.outcomes}")


def generate_network(seed: int, segment_limit: int,
                     config: Optional[CityGenConfig] = None) -> RoadNetwork:
    """Convenience wrapper: run a full growth and return the network."""
    return GrowthEngine(config=config, seed=seed, segment_limit=segment_limit).generate()
