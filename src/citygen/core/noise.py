#!/usr/bin/env python3
"""
Population Field Module

Deterministic fractal value noise used as a population density proxy.
Growth reads it to steer highways and to decide where streets continue.
"""

import math
import logging
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)

_UINT32 = 2 ** 32
_INT32_SIGN = 2 ** 31


def _to_uint32(value: float) -> int:
    return int(value) % _UINT32


def _to_int32(value: float) -> int:
    v = _to_uint32(value)
    return v - _UINT32 if v >= _INT32_SIGN else v


def lattice_hash(n: int) -> float:
    """
    Hash an integer lattice index into [0, 1).

    Intermediate products are floating point and the xor-shift steps wrap to
    32-bit two's complement.
    """
    h = float(n) * 374761393.0 + 668265263.0
    h = _to_int32(_to_int32(h) ^ (_to_uint32(h) >> 13))
    h = float(h) * 1274126177.0
    h = _to_int32(_to_int32(h) ^ (_to_uint32(h) >> 16))
    return h / 4294967296.0 + 0.5


def _fade(t: float) -> float:
    return t * t * (3 - 2 * t)


def value_noise(x: float, y: float) -> float:
    """Bilinearly interpolated lattice noise at (x, y)."""
    ix = math.floor(x)
    iy = math.floor(y)
    fx = x - ix
    fy = y - iy

    a = lattice_hash(ix + iy * 57)
    b = lattice_hash(ix + 1 + iy * 57)
    c = lattice_hash(ix + (iy + 1) * 57)
    d = lattice_hash(ix + 1 + (iy + 1) * 57)

    i1 = a + _fade(fx) * (b - a)
    i2 = c + _fade(fx) * (d - c)
    return i1 + _fade(fy) * (i2 - i1)


class NoiseField:
    """Multi-octave population field.

    Pure function of (x, y): no state besides the octave parameters.
    """

    def __init__(self, octaves: int = 3, base_frequency: float = 0.005,
                 base_amplitude: float = 1.0):
        self.octaves = octaves
        self.base_frequency = base_frequency
        self.base_amplitude = base_amplitude

    def population_at(self, x: float, y: float) -> float:
        """
        Population density at a world position.

        Args:
            x: World x coordinate
            y: World y coordinate

        Returns:
            Density clamped to [0, 1]
        """
        value = 0.0
        amplitude = self.base_amplitude
        frequency = self.base_frequency

        for _ in range(self.octaves):
            value += value_noise(x * frequency, y * frequency) * amplitude
            frequency *= 2
            amplitude *= 0.5

        return max(0.0, min(1.0, value))

    def sample_grid(self, bounds: Tuple[float, float, float, float],
                    resolution: float) -> np.ndarray:
        """
        Evaluate the field on a regular grid (heat map overlay).

        Args:
            bounds: (minx, miny, maxx, maxy) in world units
            resolution: Grid spacing in world units

        Returns:
            Array of shape (rows, cols); row i covers y = miny + i * resolution
        """
        if resolution <= 0:
            raise ValueError("resolution must be positive")

        minx, miny, maxx, maxy = bounds
        xs = np.arange(minx, maxx + resolution * 0.5, resolution)
        ys = np.arange(miny, maxy + resolution * 0.5, resolution)
        grid_x, grid_y = np.meshgrid(xs, ys)

        sampler = np.vectorize(self.population_at, otypes=[float])
        grid = sampler(grid_x, grid_y)
        logger.debug(f"Sampled population grid {grid.shape} at resolution {resolution}")
        return grid


DEFAULT_FIELD = NoiseField()


def population_at(x: float, y: float) -> float:
    """Population of the default 3-octave field."""
    return DEFAULT_FIELD.population_at(x, y)
