#!/usr/bin/env python3
"""
City Generation CLI
===================

Grow a road network, unify it and extract city blocks, then save the result
for a renderer.

Usage Examples
--------------

Generate the default city:
    python scripts/generate_city.py --output outputs/city.json

Generate a reproducible city with a custom limit:
    python scripts/generate_city.py --seed 12345 --segment-limit 1500 \
        --output outputs/city_12345.gpkg

Override parameters from a configuration file:
    python scripts/generate_city.py --config configs/dense.yaml \
        --output outputs/dense.json

Save a PNG preview next to the output:
    python scripts/generate_city.py --output outputs/city.json --preview
"""

import argparse
import sys
import logging
from pathlib import Path
from typing import Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from citygen.core.config import CityGenConfig, create_config_from_file
from citygen.export import save_city
from citygen.pipeline import generate_city
from citygen.visualization import CityVisualizer


def setup_logging(log_level: str = 'INFO', log_file: Optional[str] = None):
    """
    Configure logging for the CLI.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path to write logs
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        datefmt=date_format,
        handlers=handlers
    )


def main():
    """Main entry point for city generation CLI."""
    parser = argparse.ArgumentParser(
        description="Generate a procedural road network and city blocks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed (default: from configuration, 12345)')
    parser.add_argument('--segment-limit', type=int, default=None,
                        help='Maximum accepted segments (default: from configuration, 2000)')
    parser.add_argument('--config', type=str, default=None,
                        help='YAML or JSON configuration file')
    parser.add_argument('--output', '-o', type=str, required=True,
                        help='Output file (.json or .gpkg)')

    parser.add_argument('--preview', action='store_true',
                        help='Also save a PNG preview next to the output')

    logging_group = parser.add_argument_group('Logging')
    logging_group.add_argument('--log-level', default='INFO',
                               choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                               help='Logging level (default: INFO)')
    logging_group.add_argument('--log-file', type=str, default=None,
                               help='Also write logs to this file')

    args = parser.parse_args()
    setup_logging(args.log_level, args.log_file)
    logger = logging.getLogger(__name__)

    try:
        config = create_config_from_file(args.config) if args.config else CityGenConfig()
    except (FileNotFoundError, ValueError, TypeError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    config.log_configuration_summary()

    result = generate_city(config, seed=args.seed, segment_limit=args.segment_limit)
    output = save_city(result, args.output)
    if args.preview:
        output_path = Path(args.output)
        CityVisualizer(str(output_path.parent)).plot_city(result, name=output_path.stem)

    logger.info("=" * 60)
    logger.info(f"Segments: {len(result.network)}")
    logger.info(f"Unified paths: {len(result.unified.paths)} "
                f"({len(result.unified.intersections)} junctions)")
    logger.info(f"Blocks: {len(result.blocks)}")
    logger.info(f"Output: {output}")
    logger.info("=" * 60)
    return 0


if __name__ == '__main__':
    sys.exit(main())
