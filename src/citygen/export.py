#!/usr/bin/env python3
"""
City Export Utilities

Convert generation results into GeoDataFrames and renderer payloads, and
save them as JSON or GeoPackage.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Sequence

import geopandas as gpd

from .contracts import CityBlock, CityResult, RoadNetwork, UnifiedNetwork

logger = logging.getLogger(__name__)


def segments_to_geodataframe(network: RoadNetwork) -> gpd.GeoDataFrame:
    """One row per accepted segment with its growth attributes."""
    return gpd.GeoDataFrame({
        'segment_id': [s.id for s in network],
        'highway': [s.highway for s in network],
        'width': [s.width for s in network],
        'severed': [s.severed for s in network],
        't': [s.t for s in network],
        'length': [s.length for s in network],
        'geometry': [s.to_linestring() for s in network],
    }, geometry='geometry')


def paths_to_geodataframe(unified: UnifiedNetwork) -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame({
        'origin': [p.origin for p in unified.paths],
        'highway': [p.highway for p in unified.paths],
        'width': [p.width for p in unified.paths],
        'geometry': [p.to_linestring() for p in unified.paths],
    }, geometry='geometry')


def blocks_to_geodataframe(blocks: Sequence[CityBlock]) -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame({
        'block_id': list(range(len(blocks))),
        'color': [b.color for b in blocks],
        'geometry': [b.to_polygon() for b in blocks],
    }, geometry='geometry')


def _point(p) -> Dict[str, float]:
    return {'x': p.x, 'y': p.y}


def city_to_dict(result: CityResult) -> Dict[str, Any]:
    """Renderer payload: plain dicts and lists only."""
    return {
        'seed': result.seed,
        'segment_limit': result.segment_limit,
        'segments': [
            {
                'id': s.id,
                'start': _point(s.start),
                'end': _point(s.end),
                'width': s.width,
                'highway': s.highway,
                'severed': s.severed,
            }
            for s in result.network
        ],
        'unified_network': {
            'paths': [
                {
                    'start': _point(p.start),
                    'end': _point(p.end),
                    'width': p.width,
                    'highway': p.highway,
                    'origin': p.origin,
                }
                for p in result.unified.paths
            ],
            'connection_points': [
                {
                    'point': _point(cp.point),
                    'segment_count': cp.segment_count,
                    'is_intersection': cp.is_intersection,
                }
                for cp in result.unified.connection_points
            ],
        },
        'blocks': [
            {'points': [_point(p) for p in b.points], 'color': b.color}
            for b in result.blocks
        ],
        'metadata': result.metadata,
    }


def save_city(result: CityResult, filepath: str) -> Path:
    """
    Save a generation result.

    Args:
        result: Generation result
        filepath: Target path; .json writes the renderer payload, .gpkg
                  writes segments, paths and blocks layers

    Returns:
        The written path
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix == '.json':
        with open(path, 'w') as f:
            json.dump(city_to_dict(result), f, indent=2)
    elif path.suffix == '.gpkg':
        segments_to_geodataframe(result.network).to_file(path, layer='segments', driver='GPKG')
        if result.unified.paths:
            paths_to_geodataframe(result.unified).to_file(path, layer='paths', driver='GPKG')
        if result.blocks:
            blocks_to_geodataframe(result.blocks).to_file(path, layer='blocks', driver='GPKG')
    else:
        raise ValueError(f"Unsupported format: {path.suffix}")

    logger.info(f"Saved city to {path}")
    return path
