"""Global goals: branch proposals steered by the population field.

Highways follow population, rarely fork into highways and occasionally spawn
streets. Streets only survive in populated areas.
"""

import math
import logging
from typing import List

from ..contracts import Point, Segment
from ..core.config import BranchingConfig, SegmentConfig
from ..core.geometry_utils import point_from_polar
from ..core.noise import NoiseField
from ..core.rng import SeededRNG

logger = logging.getLogger(__name__)


def create_segment(start: Point, end: Point, t: float, highway: bool,
                   segment_config: SegmentConfig = None) -> Segment:
    """Build a fresh, unlinked segment with the width of its class."""
    segment_config = segment_config or SegmentConfig()
    width = segment_config.highway_width if highway else segment_config.street_width
    return Segment(start=start, end=end, t=t, highway=highway, width=width)


def _perpendicular(previous: Segment, rng: SeededRNG) -> float:
    return previous.dir + rng.choice_sign() * math.pi / 2


def global_goals(
    previous: Segment,
    rng: SeededRNG,
    noise_field: NoiseField,
    segment_config: SegmentConfig = None,
    branching: BranchingConfig = None
) -> List[Segment]:
    """
    Propose follow-up segments from the end of an accepted segment.

    Branch ``t`` holds the local delay only; the engine adds the parent's
    t + 1. Links are left to the caller.

    Args:
        previous: Accepted, unsevered segment to grow from
        rng: Run-owned random sequence
        noise_field: Population field
        segment_config: Segment lengths and widths
        branching: Branch probabilities, thresholds and delays

    Returns:
        Zero to three new candidate segments
    """
    segment_config = segment_config or SegmentConfig()
    branching = branching or BranchingConfig()
    branches: List[Segment] = []

    if previous.severed:
        return branches

    origin = previous.end
    population = noise_field.population_at(origin.x, origin.y)

    if previous.highway:
        highway_length = segment_config.highway_length
        straight = create_segment(
            origin, point_from_polar(origin, previous.dir, highway_length),
            0, True, segment_config
        )
        curve_angle = previous.dir + (rng.next() - 0.5) * 2 * branching.highway_curve_deviation
        curved = create_segment(
            origin, point_from_polar(origin, curve_angle, highway_length),
            0, True, segment_config
        )

        straight_pop = noise_field.population_at(straight.end.x, straight.end.y)
        curved_pop = noise_field.population_at(curved.end.x, curved.end.y)
        branches.append(curved if curved_pop > straight_pop else straight)

        if (population > branching.highway_branch_population
                and rng.next() < branching.highway_branch_probability):
            branch_dir = _perpendicular(previous, rng)
            branches.append(create_segment(
                origin, point_from_polar(origin, branch_dir, highway_length),
                0, True, segment_config
            ))

        if (population > branching.highway_street_branch_population
                and rng.next() < branching.highway_street_branch_probability):
            street_dir = _perpendicular(previous, rng)
            branches.append(create_segment(
                origin, point_from_polar(origin, street_dir, segment_config.default_length),
                branching.highway_street_branch_delay, False, segment_config
            ))
    elif population > branching.street_population_threshold:
        street_length = segment_config.default_length
        branches.append(create_segment(
            origin, point_from_polar(origin, previous.dir, street_length),
            0, False, segment_config
        ))

        if rng.next() < branching.street_branch_probability:
            branch_dir = _perpendicular(previous, rng)
            branches.append(create_segment(
                origin, point_from_polar(origin, branch_dir, street_length),
                branching.street_branch_delay, False, segment_config
            ))

    return branches
