"""Local constraints applied to each growth candidate before acceptance.

Pure with respect to the accepted set except for link bookkeeping: the
candidate's end point and ``severed`` flag may change, and link indices are
appended on both sides. Candidates are never rejected.
"""

import logging
from typing import Sequence

from ..contracts import ConstraintOutcome, Segment
from ..core.config import ConstraintConfig
from ..core.geometry_utils import distance, segment_intersection

logger = logging.getLogger(__name__)


def local_constraints(
    candidate: Segment,
    accepted: Sequence[Segment],
    candidate_index: int,
    config: ConstraintConfig = None
) -> ConstraintOutcome:
    """Truncate or snap ``candidate`` against every accepted segment.

    For each accepted segment, in acceptance order, two independent checks
    run on the candidate's current geometry:

    1. Crossing: an intersection farther than ``min_truncation_distance``
       from the candidate's start truncates the candidate there.
    2. Proximity: an end point within ``snap_distance`` of the other's start
       (or else its end) snaps onto it.

    The second check can overwrite the first; the last mutation wins.

    Args:
        candidate: Segment about to be accepted (mutated in place)
        accepted: Accepted segments in arena order
        candidate_index: Arena index the candidate will receive
        config: Constraint distances (defaults if None)

    Returns:
        The ConstraintOutcome of the last mutation applied
    """
    config = config or ConstraintConfig()
    outcome = ConstraintOutcome.UNMODIFIED

    for other_index, other in enumerate(accepted):
        crossing = segment_intersection(
            candidate.start, candidate.end, other.start, other.end,
            epsilon=config.intersection_epsilon
        )
        if crossing is not None:
            dist_to_crossing = distance(crossing, candidate.start)
            if dist_to_crossing > config.min_truncation_distance:
                candidate.end = crossing
                candidate.severed = True
                candidate.forward_links.append(other_index)
                other.forward_links.append(candidate_index)
                outcome = ConstraintOutcome.TRUNCATED

        dist_to_start = distance(candidate.end, other.start)
        dist_to_end = distance(candidate.end, other.end)

        if dist_to_start < config.snap_distance:
            candidate.end = other.start
            candidate.forward_links.append(other_index)
            other.backward_links.append(candidate_index)
            candidate.severed = True
            outcome = ConstraintOutcome.SNAPPED
        elif dist_to_end < config.snap_distance:
            candidate.end = other.end
            candidate.forward_links.append(other_index)
            other.forward_links.append(candidate_index)
            candidate.severed = True
            outcome = ConstraintOutcome.SNAPPED

    return outcome
