from .block_extractor import BlockExtractor, TracedLoop, find_city_blocks

__all__ = [
    'BlockExtractor',
    'TracedLoop',
    'find_city_blocks',
]
