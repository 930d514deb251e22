#!/usr/bin/env python3
"""
Configuration System for Procedural City Generation

Centralized configuration for growth, unification and block extraction.
Every parameter has a fixed default; files (YAML or JSON) only override.
"""

import logging
import os
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


DEFAULT_BLOCK_PALETTE = ['#2a2a2a', '#252525', '#2f2f2f', '#1a1a1a', '#353535']


@dataclass
class GrowthLimits:
    """Run limits for the growth engine."""
    segment_limit: int = 2000
    seed: int = 12345
    # Growth is O(n^2) in accepted segments; above this a warning is logged
    warn_segment_limit: int = 5000


@dataclass
class SegmentConfig:
    """Segment lengths and rendering widths."""
    highway_length: float = 400.0
    default_length: float = 300.0
    highway_width: float = 16.0
    street_width: float = 6.0


@dataclass
class ConstraintConfig:
    """Local constraint distances."""
    snap_distance: float = 50.0
    min_truncation_distance: float = 30.0
    intersection_epsilon: float = 1e-4


@dataclass
class BranchingConfig:
    """Global goal probabilities, population thresholds and delays."""
    highway_curve_deviation: float = 0.15  # radians, each side
    highway_branch_probability: float = 0.02
    highway_branch_population: float = 0.3
    highway_street_branch_probability: float = 0.10
    highway_street_branch_population: float = 0.2
    highway_street_branch_delay: float = 3.0
    street_population_threshold: float = 0.2
    street_branch_probability: float = 0.15
    street_branch_delay: float = 1.0


@dataclass
class UnifierConfig:
    """Network unifier thresholds."""
    split_threshold: float = 10.0
    snap_distance: float = 50.0
    intersection_epsilon: float = 1e-10
    min_intersection_endpoints: int = 3


@dataclass
class BlockConfig:
    """Block extraction parameters."""
    min_block_area: float = 15000.0
    max_trace_steps: int = 20
    inset_buffer: float = 20.0
    fallback_inset: float = 60.0
    palette: List[str] = field(default_factory=lambda: list(DEFAULT_BLOCK_PALETTE))


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    log_level: str = "INFO"
    progress_log_interval: int = 500


@dataclass
class CityGenConfig:
    """
    Master configuration for a city generation run.

    Groups the per-component settings and validates them on construction.
    """
    limits: GrowthLimits = field(default_factory=GrowthLimits)
    segments: SegmentConfig = field(default_factory=SegmentConfig)
    constraints: ConstraintConfig = field(default_factory=ConstraintConfig)
    branching: BranchingConfig = field(default_factory=BranchingConfig)
    unifier: UnifierConfig = field(default_factory=UnifierConfig)
    blocks: BlockConfig = field(default_factory=BlockConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_config()

    def _validate_config(self):
        if self.limits.segment_limit < 0:
            raise ValueError("segment_limit must be non-negative")

        if self.segments.highway_length <= 0 or self.segments.default_length <= 0:
            raise ValueError("segment lengths must be positive")
        if self.segments.highway_width <= 0 or self.segments.street_width <= 0:
            raise ValueError("segment widths must be positive")

        if self.constraints.snap_distance < 0:
            raise ValueError("snap_distance must be non-negative")
        if self.constraints.min_truncation_distance < 0:
            raise ValueError("min_truncation_distance must be non-negative")

        for name in ('highway_branch_probability', 'highway_street_branch_probability',
                     'street_branch_probability'):
            value = getattr(self.branching, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be between 0 and 1")

        if self.unifier.split_threshold < 0 or self.unifier.snap_distance < 0:
            raise ValueError("unifier distances must be non-negative")

        if self.blocks.min_block_area < 0:
            raise ValueError("min_block_area must be non-negative")
        if self.blocks.max_trace_steps <= 0:
            raise ValueError("max_trace_steps must be positive")
        if not self.blocks.palette:
            raise ValueError("block palette must not be empty")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging.log_level.upper() not in valid_log_levels:
            raise ValueError(f"log_level must be one of {valid_log_levels}")
        if self.logging.progress_log_interval <= 0:
            raise ValueError("progress_log_interval must be positive")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'CityGenConfig':
        """
        Create configuration from a nested dictionary.

        Missing sections and keys fall back to their defaults.
        """
        config_dict = config_dict or {}
        return cls(
            limits=GrowthLimits(**config_dict.get('limits', {})),
            segments=SegmentConfig(**config_dict.get('segments', {})),
            constraints=ConstraintConfig(**config_dict.get('constraints', {})),
            branching=BranchingConfig(**config_dict.get('branching', {})),
            unifier=UnifierConfig(**config_dict.get('unifier', {})),
            blocks=BlockConfig(**config_dict.get('blocks', {})),
            logging=LoggingConfig(**config_dict.get('logging', {}))
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def validate_compatibility(self) -> List[str]:
        """Return warning messages for settings that are legal but risky."""
        warnings = []

        if self.limits.segment_limit > self.limits.warn_segment_limit:
            warnings.append(
                f"segment_limit={self.limits.segment_limit} is large; local constraints "
                f"scan every accepted segment so growth scales O(n^2)"
            )

        if self.constraints.snap_distance >= self.segments.default_length:
            warnings.append("snap_distance >= default_length will collapse most street segments")

        if self.unifier.snap_distance >= self.segments.default_length / 2:
            warnings.append("unifier snap_distance is large relative to street length")

        return warnings

    def log_configuration_summary(self):
        """Log a summary of the current configuration."""
        logger.info("=== CITY GENERATION CONFIGURATION ===")
        logger.info(f"Limits: segment_limit={self.limits.segment_limit}, seed={self.limits.seed}")
        logger.info(f"Segments: highway={self.segments.highway_length}, street={self.segments.default_length}")
        logger.info(f"Blocks: min_area={self.blocks.min_block_area}, max_trace_steps={self.blocks.max_trace_steps}")

        warnings = self.validate_compatibility()
        if warnings:
            logger.warning("Configuration warnings:")
            for warning in warnings:
                logger.warning(f"  - {warning}")


DEFAULT_CONFIG = CityGenConfig()


def get_default_config() -> CityGenConfig:
    """Get default configuration instance."""
    return DEFAULT_CONFIG


def create_config_from_file(config_path: str) -> CityGenConfig:
    """
    Create configuration from YAML or JSON file.

    Args:
        config_path: Path to configuration file

    Returns:
        CityGenConfig instance
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    if config_path.endswith('.yaml') or config_path.endswith('.yml'):
        import yaml
        with open(config_path, 'r') as f:
            config_dict = yaml.safe_load(f)
    elif config_path.endswith('.json'):
        import json
        with open(config_path, 'r') as f:
            config_dict = json.load(f)
    else:
        raise ValueError("Configuration file must be .yaml, .yml, or .json")

    return CityGenConfig.from_dict(config_dict or {})


def save_config_to_file(config: CityGenConfig, config_path: str):
    """
    Save configuration to YAML or JSON file.

    Args:
        config: Configuration to save
        config_path: Path to save configuration
    """
    config_dict = config.to_dict()

    if config_path.endswith('.yaml') or config_path.endswith('.yml'):
        import yaml
        with open(config_path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False)
    elif config_path.endswith('.json'):
        import json
        with open(config_path, 'w') as f:
            json.dump(config_dict, f, indent=2)
    else:
        raise ValueError("Configuration file must be .yaml, .yml, or .json")
