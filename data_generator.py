import os
import re
from typing import Iterable, List, Mapping, Optional

import numpy as np

from tsp_core import City


def load_tsp_file(path):
    """
    TSPLIB coordinate loader.
    Reads the NODE_COORD_SECTION of a .tsp file.
    Handles:
        - lowercase/uppercase section names
        - blank lines
        - files that start coordinates without a section header
    Cities are named City_<index> after the first column.
    """

    if not os.path.exists(path):
        raise FileNotFoundError(f"TSP file not found: {path}")

    with open(path, "r") as f:
        raw_lines = [l.strip() for l in f if l.strip()]

    lines_upper = [l.upper() for l in raw_lines]

    # --------------------------------------------
    # 1. Find the start of NODE_COORD_SECTION
    # --------------------------------------------
    start_index = None
    for i, line in enumerate(lines_upper):
        if "NODE_COORD_SECTION" in line:
            start_index = i + 1
            break

    if start_index is None:
        for i, line in enumerate(raw_lines):
            if re.match(r"^\s*\d+\s+[-]?\d+(\.\d+)?\s+[-]?\d+(\.\d+)?", line):
                start_index = i
                break

    if start_index is None:
        raise ValueError(f"Could not find coordinate section in: {path}")

    # --------------------------------------------
    # 2. Parse coordinates
    # --------------------------------------------
    cities = []
    for line in raw_lines[start_index:]:
        if line.upper().startswith("EOF"):
            break

        if not re.match(r"^\d+", line):
            continue

        parts = re.split(r"\s+", line)
        if len(parts) < 3:
            continue

        try:
            x = float(parts[1])
            y = float(parts[2])
        except ValueError:
            continue
        cities.append(City(x, y, f"City_{parts[0]}"))

    if len(cities) == 0:
        raise ValueError(f"No coordinates parsed in: {path}")

    return cities


def cities_from_records(records: Iterable[Mapping]) -> List[City]:
    """Convert {name?, x, y} records into cities."""
    cities = []
    for record in records:
        try:
            cities.append(City(float(record["x"]), float(record["y"]), record.get("name")))
        except KeyError as e:
            raise ValueError(f"City record is missing {e.args[0]!r}: {record!r}") from e
    return cities


def example_cities() -> List[City]:
    """Five-city sample used by the quick-start run."""
    return cities_from_records([
        {"name": "City 1", "x": 2, "y": 3},
        {"name": "City 2", "x": 5, "y": 7},
        {"name": "City 3", "x": 9, "y": 1},
        {"name": "City 4", "x": 4, "y": 6},
        {"name": "City 5", "x": 8, "y": 2},
    ])


def generate_random_cities(
    n: int,
    width: float = 100,
    height: float = 100,
    rng: Optional[np.random.Generator] = None
) -> List[City]:
    """
    Generate random cities for testing.

    Args:
        n: Number of cities to generate
        width: Width of the area
        height: Height of the area
        rng: Random generator (a fresh unseeded one when omitted)

    Returns:
        List of randomly placed cities
    """
    rng = rng if rng is not None else np.random.default_rng()
    cities = []
    for i in range(n):
        x = float(rng.uniform(0, width))
        y = float(rng.uniform(0, height))
        cities.append(City(x, y, name=f"City_{i}"))
    return cities


def generate_circle_cities(n: int, radius: float = 50, center_x: float = 50, center_y: float = 50) -> List[City]:
    """
    Generate cities arranged in a circle (for testing).

    Args:
        n: Number of cities
        radius: Circle radius
        center_x: Circle center X coordinate
        center_y: Circle center Y coordinate

    Returns:
        List of cities arranged in a circle
    """
    cities = []
    for i in range(n):
        angle = 2 * np.pi * i / n
        x = float(center_x + radius * np.cos(angle))
        y = float(center_y + radius * np.sin(angle))
        cities.append(City(x, y, name=f"City_{i}"))
    return cities
