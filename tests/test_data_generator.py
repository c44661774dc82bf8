"""
Unit tests for city loading and generation
"""

import os
import tempfile
import unittest

import numpy as np

from tsp_core import City
from data_generator import (
    cities_from_records,
    example_cities,
    generate_circle_cities,
    generate_random_cities,
    load_tsp_file
)


TSPLIB_TEXT = """NAME : tiny5
COMMENT : five cities
TYPE : TSP
DIMENSION : 5
EDGE_WEIGHT_TYPE : EUC_2D
node_coord_section
1 2 3
2 5 7

3 9.5 1
bad line here
4 4 6
5 -8 2.25
EOF
"""


class TestLoadTspFile(unittest.TestCase):
    """Test the TSPLIB loader"""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def _write(self, name, text):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, "w") as f:
            f.write(text)
        return path

    def test_loads_coordinates_and_names(self):
        cities = load_tsp_file(self._write("tiny5.tsp", TSPLIB_TEXT))
        self.assertEqual(len(cities), 5)
        self.assertEqual(cities[0], City(2.0, 3.0, "City_1"))
        self.assertEqual(cities[2], City(9.5, 1.0, "City_3"))
        self.assertEqual(cities[4], City(-8.0, 2.25, "City_5"))

    def test_file_without_section_header(self):
        cities = load_tsp_file(self._write("bare.tsp", "1 0 0\n2 3 4\n"))
        self.assertEqual([(c.x, c.y) for c in cities], [(0.0, 0.0), (3.0, 4.0)])

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_tsp_file(os.path.join(self.tmpdir.name, "missing.tsp"))

    def test_file_without_coordinates(self):
        with self.assertRaises(ValueError):
            load_tsp_file(self._write("empty.tsp", "NAME : nothing\nEOF\n"))


class TestCityRecords(unittest.TestCase):
    """Test record conversion and the sample problem"""

    def test_records_with_and_without_names(self):
        cities = cities_from_records([{"name": "X", "x": 1, "y": 2}, {"x": "3.5", "y": 4}])
        self.assertEqual(cities, [City(1.0, 2.0, "X"), City(3.5, 4.0, None)])

    def test_missing_coordinate_rejected(self):
        with self.assertRaises(ValueError):
            cities_from_records([{"name": "X", "x": 1}])

    def test_example_cities(self):
        cities = example_cities()
        self.assertEqual(len(cities), 5)
        self.assertEqual(cities[0], City(2.0, 3.0, "City 1"))
        self.assertEqual(len(set(cities)), 5)


class TestGenerators(unittest.TestCase):
    """Test random and circle generators"""

    def test_random_cities_within_bounds(self):
        cities = generate_random_cities(25, width=10, height=20, rng=np.random.default_rng(0))
        self.assertEqual(len(cities), 25)
        for city in cities:
            self.assertTrue(0 <= city.x <= 10)
            self.assertTrue(0 <= city.y <= 20)

    def test_random_cities_seeded(self):
        a = generate_random_cities(10, rng=np.random.default_rng(99))
        b = generate_random_cities(10, rng=np.random.default_rng(99))
        self.assertEqual(a, b)

    def test_circle_cities_on_radius(self):
        cities = generate_circle_cities(12, radius=5, center_x=1, center_y=-1)
        self.assertEqual(len(cities), 12)
        for city in cities:
            self.assertAlmostEqual(np.hypot(city.x - 1, city.y + 1), 5.0)


if __name__ == '__main__':
    unittest.main()
