"""Seeded pseudo-random sequence for reproducible generation runs.

Sine-counter recurrence: a seed always reproduces the same city. Every run
owns its own instance; there is no module-level state.
"""

import math


class SeededRNG:
    """Deterministic, reseedable random sequence in [0, 1)."""

    def __init__(self, seed: int = 1):
        self.state = seed
        self.initial_seed = seed

    def seed(self, s: int) -> None:
        """Reset the sequence to start from ``s``."""
        self.state = s
        self.initial_seed = s

    def next(self) -> float:
        x = math.sin(self.state) * 10000
        self.state += 1
        return x - math.floor(x)

    def choice_sign(self) -> int:
        """Return -1 or +1 with equal probability."""
        return -1 if self.next() < 0.5 else 1

    def choice(self, items):
        if not items:
            raise ValueError("choice() from an empty sequence")
        return items[math.floor(self.next() * len(items))]
