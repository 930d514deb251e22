"""Priority queue for pending growth candidates.

Segments are ordered by their ``t`` value. Ties resolve to the earliest
enqueued candidate, matching a linear minimum scan.
"""
from typing import List, Optional

from ..contracts import Segment


class SegmentQueue:
    """A priority queue of candidate segments keyed on ``t``."""

    def __init__(self):
        self.elements: List[Segment] = []

    def enqueue(self, segment: Segment):
        self.elements.append(segment)

    def dequeue(self) -> Optional[Segment]:
        """Remove and return the segment with the minimum t value.

        Returns:
            The segment with the minimum t value, or None if the queue is empty.
        """
        if not self.elements:
            return None
        min_t = float('inf')
        min_idx = 0

        for i, segment in enumerate(self.elements):
            if segment.t < min_t:
                min_t = segment.t
                min_idx = i
        return self.elements.pop(min_idx)

    def empty(self) -> bool:
        return len(self.elements) == 0

    def __len__(self):
        return len(self.elements)
