# Procedural City Generation
# Road network growth, network unification and city block extraction

from .contracts import (
    Point, Segment, RoadNetwork, UnifiedPath, ConnectionPoint, UnifiedNetwork,
    CityBlock, ConstraintOutcome, UnifyResponse, CityResult,
    CityGenError, NetworkFrozenError
)
from .core.config import CityGenConfig, get_default_config
from .growth.growth_engine import GrowthEngine, generate_network
from .network.unifier import NetworkUnifier, unify_network
from .blocks.block_extractor import BlockExtractor, find_city_blocks
from .pipeline import generate_city

__version__ = "0.1.0"

__all__ = [
    'Point',
    'Segment',
    'RoadNetwork',
    'UnifiedPath',
    'ConnectionPoint',
    'UnifiedNetwork',
    'CityBlock',
    'ConstraintOutcome',
    'UnifyResponse',
    'CityResult',
    'CityGenError',
    'NetworkFrozenError',
    'CityGenConfig',
    'get_default_config',
    'GrowthEngine',
    'generate_network',
    'NetworkUnifier',
    'unify_network',
    'BlockExtractor',
    'find_city_blocks',
    'generate_city',
]
