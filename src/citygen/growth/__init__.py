"""
Growth Module

Priority-queue driven road network growth with local constraints and
population-steered global goals.
"""

from .growth_engine import GrowthEngine, GrowthStats, generate_network

__all__ = [
    'GrowthEngine',
    'GrowthStats',
    'generate_network',
]
