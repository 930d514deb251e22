"""End-to-end city generation: growth, unification and block extraction."""

import time
import logging
from typing import Optional

from .blocks.block_extractor import BlockExtractor
from .contracts import CityResult
from .core.config import CityGenConfig, get_default_config
from .core.rng import SeededRNG
from .growth.growth_engine import GrowthEngine
from .network.unifier import NetworkUnifier

logger = logging.getLogger(__name__)


def generate_city(
    config: Optional[CityGenConfig] = None,
    seed: Optional[int] = None,
    segment_limit: Optional[int] = None
) -> CityResult:
    """
    Generate a road network and its derived outputs.

    The unified network and blocks are recomputed from scratch from the
    frozen network; block colors draw from their own RNG so they do not
    disturb the growth sequence.

    Args:
        config: Generation configuration (defaults if None)
        seed: Overrides config.limits.seed
        segment_limit: Overrides config.limits.segment_limit

    Returns:
        CityResult with network, unified network and blocks
    """
    config = config or get_default_config()
    timings = {}

    start = time.perf_counter()
    engine = GrowthEngine(config=config, seed=seed, segment_limit=segment_limit)
    network = engine.generate()
    timings['growth'] = time.perf_counter() - start

    start = time.perf_counter()
    unified = NetworkUnifier(config.unifier).unify(network)
    timings['unify'] = time.perf_counter() - start

    start = time.perf_counter()
    blocks = BlockExtractor(config.blocks, rng=SeededRNG(engine.seed)).extract(network)
    timings['blocks'] = time.perf_counter() - start

    logger.info(
        f"City seed={engine.seed}: {len(network)} segments, {len(unified.paths)} paths, "
        f"{len(blocks)} blocks in {sum(timings.values()):.2f}s"
    )

    return CityResult(
        network=network,
        unified=unified,
        blocks=blocks,
        seed=engine.seed,
        segment_limit=engine.segment_limit,
        metadata={
            'timings': timings,
            'stats': {
                'accepted': engine.stats.accepted,
                'highways': engine.stats.highways,
                'streets': engine.stats.streets,
                'severed': engine.stats.severed,
                'branches_enqueued': engine.stats.branches_enqueued,
                'outcomes': dict(engine.stats.outcomes),
            },
        }
    )
