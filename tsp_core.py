"""
TSP Solver - Core Module
Contains the fundamental data structures for representing the TSP problem:
cities, tours, distances and the permutation helpers the GA is built on.
"""

import numpy as np
from typing import List, MutableSequence, NamedTuple, Optional, Sequence


class InvalidConfiguration(ValueError):
    """Raised when the solver or an operator is called with unusable input."""


class City(NamedTuple):
    """Immutable city with x, y coordinates and an optional name."""

    x: float
    y: float
    name: Optional[str] = None

    def distance_to(self, city: 'City') -> float:
        """Calculate Euclidean distance to another city."""
        return distance(self, city)

    def __repr__(self):
        if self.name is not None:
            return f"City({self.name!r}, {self.x:.2f}, {self.y:.2f})"
        return f"City({self.x:.2f}, {self.y:.2f})"


def distance(a: City, b: City) -> float:
    """Euclidean distance between two cities."""
    dx = a.x - b.x
    dy = a.y - b.y
    return float(np.sqrt(dx * dx + dy * dy))


def path_length(cities: Sequence[City]) -> float:
    """
    Length of the open path through the cities in order.

    There is no closing edge back to the first city, so a sequence of
    zero or one cities has length 0.
    """
    total = 0.0
    for i in range(len(cities) - 1):
        total += distance(cities[i], cities[i + 1])
    return total


def swap(seq: MutableSequence, i: int, j: int) -> None:
    """Exchange two elements of seq in place."""
    if i == j:
        return
    seq[i], seq[j] = seq[j], seq[i]


def random_permutation(cities: Sequence[City], rng: np.random.Generator) -> List[City]:
    """
    Return a new list holding every city once, in uniformly random order.

    Fisher-Yates: walk from the last index down to 1 and swap each slot
    with a position drawn uniformly from [0, i].

    Args:
        cities: Cities to permute (left untouched)
        rng: Random generator used for every draw
    """
    permutation = list(cities)
    for i in range(len(permutation) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        swap(permutation, i, j)
    return permutation


class Tour:
    """Represents a tour (solution) as an ordered sequence of cities."""

    def __init__(self, cities: List[City] = None):
        self.cities = list(cities) if cities else []

    def get_total_distance(self) -> float:
        """Open-path length of the tour, recomputed from the current cities."""
        return path_length(self.cities)

    def clone(self) -> 'Tour':
        """Create an independent copy of the tour."""
        return Tour(self.cities.copy())

    def __len__(self):
        return len(self.cities)

    def __iter__(self):
        return iter(self.cities)

    def __getitem__(self, index):
        return self.cities[index]

    def __setitem__(self, index, value):
        self.cities[index] = value

    def __eq__(self, other):
        if not isinstance(other, Tour):
            return NotImplemented
        return self.cities == other.cities

    def __repr__(self):
        return f"Tour(cities={len(self.cities)}, distance={self.get_total_distance():.2f})"
