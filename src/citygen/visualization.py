#!/usr/bin/env python3
"""
City Preview Module

Static matplotlib previews of a generation result, for inspecting growth
runs without the interactive renderer:
- Population field heat map under the network
- Blocks filled with their palette colors
- Highways and streets drawn with their relative widths
"""

from pathlib import Path
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import logging

from .contracts import CityResult
from .core.noise import NoiseField
from .export import blocks_to_geodataframe, segments_to_geodataframe

logger = logging.getLogger(__name__)


class CityVisualizer:
    """
    Render CityResult previews to image files.
    """

    def __init__(self, output_dir: str = "outputs/previews",
                 noise_field: Optional[NoiseField] = None):
        """
        Initialize visualizer with output directory.

        Args:
            output_dir: Directory to save preview images
            noise_field: Population field for the heat map (default field if None)
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.noise_field = noise_field or NoiseField()

        self.colors = {
            'highways': '#f2c14e',
            'streets': '#d8d8d8',
            'background': '#111111',
        }

    def population_extent(self, result: CityResult,
                          padding: float = 200.0) -> Tuple[float, float, float, float]:
        """Bounds of the network grown by ``padding``; a square around the origin if empty."""
        if len(result.network) == 0:
            return (-padding, -padding, padding, padding)
        minx, miny, maxx, maxy = segments_to_geodataframe(result.network).total_bounds
        return (minx - padding, miny - padding, maxx + padding, maxy + padding)

    def plot_city(self, result: CityResult, name: str = "city",
                  show_population: bool = True, resolution: float = 50.0) -> str:
        """
        Plot one city.

        Args:
            result: Generation result
            name: Stem of the output file name
            show_population: Draw the population field under the network
            resolution: Heat map grid spacing in world units

        Returns:
            Path to saved plot file
        """
        fig, ax = plt.subplots(figsize=(10, 10))
        ax.set_facecolor(self.colors['background'])

        if show_population:
            bounds = self.population_extent(result)
            grid = self.noise_field.sample_grid(bounds, resolution)
            ax.imshow(grid, origin='lower', cmap='magma', alpha=0.45, vmin=0.0, vmax=1.0,
                      extent=(bounds[0], bounds[2], bounds[1], bounds[3]))

        if result.blocks:
            blocks = blocks_to_geodataframe(result.blocks)
            blocks.plot(ax=ax, color=list(blocks['color']), edgecolor='none')

        if len(result.network) > 0:
            segments = segments_to_geodataframe(result.network)
            streets = segments[~segments['highway']]
            highways = segments[segments['highway']]
            if len(streets) > 0:
                streets.plot(ax=ax, color=self.colors['streets'], linewidth=0.8)
            if len(highways) > 0:
                highways.plot(ax=ax, color=self.colors['highways'], linewidth=2.0)

        ax.set_title(f"Seed {result.seed}: {len(result.network)} segments, "
                     f"{len(result.blocks)} blocks", fontsize=14, fontweight='bold')
        ax.set_aspect('equal')
        ax.axis('off')
        ax.legend(handles=[
            mpatches.Patch(color=self.colors['highways'], label='Highways'),
            mpatches.Patch(color=self.colors['streets'], label='Streets'),
        ], loc='upper right')

        output_path = self.output_dir / f"{name}.png"
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

        logger.info(f"Saved preview to {output_path}")
        return str(output_path)
