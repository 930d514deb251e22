"""
Core Building Blocks

Configuration, population field, seeded random sequence and geometry
helpers shared by growth, unification and block extraction.
"""

from .config import CityGenConfig, get_default_config
from .noise import NoiseField, population_at
from .rng import SeededRNG

__all__ = [
    'CityGenConfig',
    'get_default_config',
    'NoiseField',
    'population_at',
    'SeededRNG',
]
