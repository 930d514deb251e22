#!/usr/bin/env python3
"""
Integration tests for the generation pipeline and export helpers.
"""

import json
import unittest
import tempfile
import os
import sys

import geopandas as gpd

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from citygen.contracts import CityResult
from citygen.core.config import CityGenConfig
from citygen.export import (
    blocks_to_geodataframe, city_to_dict, paths_to_geodataframe,
    save_city, segments_to_geodataframe
)
from citygen.growth.growth_engine import GrowthEngine
from citygen.pipeline import generate_city
from citygen.visualization import CityVisualizer


class TestGenerateCity(unittest.TestCase):
    """End-to-end generation tests."""

    @classmethod
    def setUpClass(cls):
        """Generate one city shared by all tests."""
        cls.result = generate_city(seed=12345, segment_limit=2000)

    def test_result_shape(self):
        result = self.result
        self.assertIsInstance(result, CityResult)
        self.assertEqual(result.seed, 12345)
        self.assertEqual(result.segment_limit, 2000)
        self.assertGreater(len(result.network), 0)
        self.assertLessEqual(len(result.network), 2000)
        self.assertTrue(result.network.frozen)
        self.assertFalse(result.unified.is_empty())
        self.assertGreaterEqual(len(result.unified.paths), len(result.network))

    def test_blocks_are_polygons(self):
        for block in self.result.blocks:
            self.assertGreaterEqual(len(block.points), 3)
            self.assertIn(block.color, CityGenConfig().blocks.palette)

    def test_metadata(self):
        metadata = self.result.metadata
        for stage in ('growth', 'unify', 'blocks'):
            self.assertIn(stage, metadata['timings'])
        self.assertEqual(metadata['stats']['accepted'], len(self.result.network))
        self.assertEqual(
            metadata['stats']['highways'] + metadata['stats']['streets'],
            len(self.result.network)
        )
        self.assertGreater(metadata['stats']['branches_enqueued'], 0)

    def test_reproducible(self):
        again = GrowthEngine(seed=12345, segment_limit=2000).generate()
        self.assertEqual(
            [(s.start, s.end, s.highway) for s in again],
            [(s.start, s.end, s.highway) for s in self.result.network]
        )

    def test_empty_city(self):
        result = generate_city(seed=1, segment_limit=0)
        self.assertEqual(len(result.network), 0)
        self.assertTrue(result.unified.is_empty())
        self.assertEqual(result.blocks, [])


class TestExport(unittest.TestCase):
    """Test cases for export helpers."""

    @classmethod
    def setUpClass(cls):
        """Generate a small city."""
        cls.result = generate_city(seed=7, segment_limit=120)

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures."""
        import shutil
        shutil.rmtree(self.temp_dir)

    def test_city_to_dict_is_json(self):
        payload = city_to_dict(self.result)
        decoded = json.loads(json.dumps(payload))

        self.assertEqual(decoded['seed'], 7)
        self.assertEqual(len(decoded['segments']), len(self.result.network))
        self.assertEqual(len(decoded['unified_network']['paths']), len(self.result.unified.paths))
        self.assertEqual(len(decoded['blocks']), len(self.result.blocks))
        self.assertIn('x', decoded['segments'][0]['start'])

    def test_save_json(self):
        path = save_city(self.result, os.path.join(self.temp_dir, 'out', 'city.json'))
        self.assertTrue(path.exists())
        with open(path) as f:
            data = json.load(f)
        self.assertEqual(data['segment_limit'], 120)

    def test_save_geopackage(self):
        path = save_city(self.result, os.path.join(self.temp_dir, 'city.gpkg'))
        self.assertTrue(path.exists())

        segments = gpd.read_file(path, layer='segments')
        self.assertEqual(len(segments), len(self.result.network))
        self.assertEqual(list(segments['segment_id']), list(range(len(self.result.network))))
        self.assertEqual(int(segments['highway'].sum()), self.result.metadata['stats']['highways'])

        paths = gpd.read_file(path, layer='paths')
        self.assertEqual(len(paths), len(self.result.unified.paths))

        if self.result.blocks:
            blocks = gpd.read_file(path, layer='blocks')
            self.assertEqual(len(blocks), len(self.result.blocks))
            self.assertEqual(set(blocks.geom_type), {'Polygon'})

    def test_save_unknown_format(self):
        with self.assertRaises(ValueError):
            save_city(self.result, os.path.join(self.temp_dir, 'city.csv'))

    def test_geodataframes(self):
        segments = segments_to_geodataframe(self.result.network)
        self.assertEqual(len(segments), len(self.result.network))
        self.assertEqual(segments.geometry.iloc[0].geom_type, 'LineString')
        self.assertEqual(list(segments['segment_id']), list(range(len(self.result.network))))

        paths = paths_to_geodataframe(self.result.unified)
        self.assertEqual(len(paths), len(self.result.unified.paths))

        blocks = blocks_to_geodataframe(self.result.blocks)
        self.assertEqual(len(blocks), len(self.result.blocks))

    def test_preview(self):
        visualizer = CityVisualizer(os.path.join(self.temp_dir, 'previews'))
        path = visualizer.plot_city(self.result, name='seed7', resolution=100.0)
        self.assertTrue(os.path.exists(path))
        self.assertTrue(path.endswith('seed7.png'))

        minx, miny, maxx, maxy = visualizer.population_extent(self.result)
        self.assertLess(minx, maxx)
        self.assertLess(miny, maxy)

    def test_preview_empty_city(self):
        visualizer = CityVisualizer(self.temp_dir)
        empty = generate_city(seed=1, segment_limit=0)
        self.assertEqual(visualizer.population_extent(empty), (-200.0, -200.0, 200.0, 200.0))
        self.assertTrue(os.path.exists(visualizer.plot_city(empty, show_population=False)))


if __name__ == '__main__':
    unittest.main()
