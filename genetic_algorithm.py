"""
Genetic Algorithm Solver with roulette-wheel selection, ordered crossover
and swap mutation. Supports seeded runs, time limits and convergence logging.
"""

import time
from collections import Counter
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from tsp_core import City, InvalidConfiguration, Tour, path_length, random_permutation, swap


WEIGHTINGS = ("cost", "inverse")


@dataclass(frozen=True)
class RunResult:
    """Outcome of a solver run. best_solution is None when no generation ran."""

    best_fitness: float
    best_solution: Optional[Tuple[City, ...]]
    history: Tuple[float, ...] = ()

    @property
    def best_tour(self) -> Optional[Tour]:
        if self.best_solution is None:
            return None
        return Tour(list(self.best_solution))


# ---------------------------------------
# Validation
# ---------------------------------------

def _is_int(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float, np.number)) and not isinstance(value, bool)


def validate_config(
    population_size: int,
    elite_size: float,
    mutation_rate: float,
    generations: int = 0
):
    """Raise InvalidConfiguration for any out-of-range GA parameter."""
    if not _is_int(population_size) or population_size <= 0:
        raise InvalidConfiguration(
            f"population_size must be a positive integer, got {population_size!r}"
        )
    if not _is_number(elite_size) or not 0.0 <= elite_size <= 1.0:
        raise InvalidConfiguration(f"elite_size must be in [0, 1], got {elite_size!r}")
    if not _is_number(mutation_rate) or not 0.0 <= mutation_rate <= 1.0:
        raise InvalidConfiguration(f"mutation_rate must be in [0, 1], got {mutation_rate!r}")
    if not _is_int(generations) or generations < 0:
        raise InvalidConfiguration(
            f"generations must be a non-negative integer, got {generations!r}"
        )


# ---------------------------------------
# Fitness
# ---------------------------------------

def fitness(tour: Sequence[City]) -> float:
    """Total open-path cost of a tour. Lower is better."""
    return path_length(tour)


def total_fitness(population: Sequence[Sequence[City]]) -> float:
    """Sum of tour costs, used as the roulette-wheel denominator."""
    return sum(fitness(tour) for tour in population)


# ---------------------------------------
# Population
# ---------------------------------------

def initialize_population(
    cities: Sequence[City],
    size: int,
    rng: np.random.Generator
) -> List[Tour]:
    """Build `size` independently shuffled tours over `cities`."""
    if not _is_int(size) or size <= 0:
        raise InvalidConfiguration(f"population size must be positive, got {size!r}")
    if len(cities) < 2:
        raise InvalidConfiguration(f"at least 2 cities are required, got {len(cities)}")
    return [Tour(random_permutation(cities, rng)) for _ in range(size)]


class Population:
    """Represents a population of tour solutions."""

    def __init__(self, population_size: int, cities: List[City], rng: np.random.Generator):
        self.population_size = population_size
        self.cities = cities
        self.rng = rng
        self.tours: List[Tour] = []
        self.costs: Optional[List[float]] = None

    def initialize(self):
        """Initialize population with random tours."""
        self.tours = initialize_population(self.cities, self.population_size, self.rng)
        self.costs = None

    def replace(self, tours: List[Tour]):
        """Swap in the next generation and evaluate it once."""
        self.tours = tours
        self.evaluate()

    def evaluate(self) -> List[float]:
        self.costs = [fitness(t) for t in self.tours]
        return self.costs

    def current_costs(self) -> List[float]:
        if self.costs is None or len(self.costs) != len(self.tours):
            return self.evaluate()
        return self.costs

    def get_fittest(self) -> Tour:
        costs = self.current_costs()
        return self.tours[int(np.argmin(costs))]

    def get_average_distance(self) -> float:
        return float(np.mean(self.current_costs()))

    def __len__(self):
        return len(self.tours)


# ---------------------------------------
# Genetic operators
# ---------------------------------------

def _selection_weights(tours, total, weighting, costs):
    if costs is None:
        costs = [fitness(t) for t in tours]
    elif len(costs) != len(tours):
        raise InvalidConfiguration(
            f"got {len(costs)} costs for {len(tours)} tours"
        )
    if weighting == "cost":
        return costs, total
    if weighting == "inverse":
        if any(c == 0 for c in costs):
            weights = [1.0 if c == 0 else 0.0 for c in costs]
        else:
            weights = [1.0 / c for c in costs]
        return weights, sum(weights)
    raise InvalidConfiguration(f"weighting must be one of {WEIGHTINGS}, got {weighting!r}")


def roulette_wheel_selection(
    tours: Sequence[Tour],
    total: float,
    rng: np.random.Generator,
    weighting: str = "cost",
    costs: Optional[Sequence[float]] = None
) -> Tour:
    """
    Pick one tour with probability proportional to its share of the wheel.

    With the default "cost" weighting a tour's share is its cost divided by
    the total cost of the population, so longer tours are picked more often.
    "inverse" weights by 1 / cost instead. When every weight is zero the
    wheel is uniform. If rounding keeps the running sum below the draw, the
    last tour is returned.

    Args:
        tours: Candidate tours, scanned in order
        total: Total cost of the population (see total_fitness)
        rng: Random generator used for the draw
        weighting: "cost" or "inverse"
        costs: Optional per-tour costs, in the same order as tours;
            computed here when omitted
    """
    if not tours:
        raise InvalidConfiguration("cannot select from an empty population")

    weights, denominator = _selection_weights(tours, total, weighting, costs)
    if denominator == 0:
        weights = [1.0] * len(tours)
        denominator = float(len(tours))

    r = rng.random()
    accumulated = 0.0
    for tour, weight in zip(tours, weights):
        accumulated += weight / denominator
        if accumulated >= r:
            return tour
    return tours[-1]


def ordered_crossover(
    parent1: Sequence[City],
    parent2: Sequence[City],
    rng: np.random.Generator,
    cut: Optional[Tuple[int, int]] = None
) -> Tour:
    """
    OX crossover: keep a contiguous block of parent1 and fill the remaining
    slots, left to right, with parent2's cities in their relative order.

    Args:
        parent1: Donor of the fixed block
        parent2: Donor of the ordering for every other slot
        rng: Random generator for the cut points
        cut: Optional (start, end) half-open interval; drawn at random
            with start < end when omitted

    Returns:
        Offspring tour, a permutation of the parents' cities
    """
    p1 = list(parent1)
    p2 = list(parent2)
    size = len(p1)

    if len(p2) != size:
        raise InvalidConfiguration(
            f"parents must have equal length, got {size} and {len(p2)}"
        )
    if Counter(p1) != Counter(p2):
        raise InvalidConfiguration("parents must contain the same cities")

    if cut is None:
        if size == 0:
            return Tour([])
        start = int(rng.integers(0, size))
        end = int(rng.integers(start + 1, size + 1))
    else:
        start, end = cut
        if not 0 <= start <= end <= size:
            raise InvalidConfiguration(f"invalid cut {cut!r} for parents of length {size}")

    child: List[Optional[City]] = [None] * size
    child[start:end] = p1[start:end]

    placed = Counter(p1[start:end])
    open_slots = (i for i in range(size) if not start <= i < end)
    for city in p2:
        if placed[city] > 0:
            placed[city] -= 1
            continue
        child[next(open_slots)] = city

    return Tour(child)


def swap_mutation(tour: Sequence[City], rng: np.random.Generator) -> Tour:
    """Swap two distinct random positions on a copy of the tour."""
    size = len(tour)
    if size < 2:
        raise InvalidConfiguration(f"swap mutation needs at least 2 cities, got {size}")

    mutated = tour.clone() if isinstance(tour, Tour) else Tour(list(tour))
    i = int(rng.integers(0, size))
    j = int(rng.integers(0, size))
    while j == i:
        j = int(rng.integers(0, size))
    swap(mutated.cities, i, j)
    return mutated


# ---------------------------------------
# Single generation evolution
# ---------------------------------------

def evolve_population(
    population: Sequence[Tour],
    population_size: int,
    elite_size: float,
    mutation_rate: float,
    rng: np.random.Generator,
    weighting: str = "cost",
    costs: Optional[Sequence[float]] = None
) -> List[Tour]:
    """
    Produce the next generation.

    round(population_size * elite_size) entries are copied over by roulette
    selection; every other slot is an ordered-crossover child of two
    roulette-selected parents, swap-mutated with probability mutation_rate.
    Each tour of the current population is costed once; pass `costs` when
    they are already known.
    """
    validate_config(population_size, elite_size, mutation_rate)
    if costs is None:
        costs = [fitness(t) for t in population]
    total = sum(costs)
    elite_count = round(population_size * elite_size)

    new_pop: List[Tour] = []

    # --- elitism ---
    for _ in range(elite_count):
        elite = roulette_wheel_selection(population, total, rng, weighting, costs)
        new_pop.append(elite.clone())

    # --- breed the rest ---
    while len(new_pop) < population_size:
        p1 = roulette_wheel_selection(population, total, rng, weighting, costs)
        p2 = roulette_wheel_selection(population, total, rng, weighting, costs)
        child = ordered_crossover(p1, p2, rng)
        if rng.random() < mutation_rate:
            child = swap_mutation(child, rng)
        new_pop.append(child)

    return new_pop


class GeneticAlgorithmSolver:
    """
    Genetic Algorithm solver for the open-path TSP.

    Parents and the per-generation representative are drawn by roulette
    wheel. The default "cost" weighting favours longer tours; pass
    weighting="inverse" to favour shorter ones.
    """

    def __init__(
        self,
        cities: List[City],
        population_size: int = 100,
        elite_size: float = 0.2,
        mutation_rate: float = 0.1,
        weighting: str = "cost",
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None
    ):
        validate_config(population_size, elite_size, mutation_rate)
        if len(cities) < 2:
            raise InvalidConfiguration(f"at least 2 cities are required, got {len(cities)}")
        if weighting not in WEIGHTINGS:
            raise InvalidConfiguration(f"weighting must be one of {WEIGHTINGS}, got {weighting!r}")

        self.cities = list(cities)
        self.population_size = population_size
        self.elite_size = elite_size
        self.mutation_rate = mutation_rate
        self.weighting = weighting
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        # GA state
        self.population: Optional[Population] = None
        self.generation = 0
        self.best_distance_history: List[float] = []

    # ---------------------------------------
    # Initialization
    # ---------------------------------------

    def initialize(self):
        self.population = Population(self.population_size, self.cities, self.rng)
        self.population.initialize()
        self.generation = 0
        self.best_distance_history = []

    def evolve_generation(self):
        self.population.replace(evolve_population(
            self.population.tours,
            self.population_size,
            self.elite_size,
            self.mutation_rate,
            self.rng,
            self.weighting,
            costs=self.population.costs,
        ))
        self.generation += 1

    def select_representative(self) -> Tuple[Tour, float]:
        """Roulette-select the tour compared against the best so far, with its cost."""
        tours = self.population.tours
        costs = self.population.current_costs()
        candidate = roulette_wheel_selection(tours, sum(costs), self.rng, self.weighting, costs)
        cost = next(c for t, c in zip(tours, costs) if t is candidate)
        return candidate, cost

    # ---------------------------------------
    # Solve
    # ---------------------------------------

    def solve(
        self,
        generations: int = 50,
        time_limit: Optional[float] = None,
        target_fitness: Optional[float] = None,
        verbose: bool = False,
        callback: Optional[Callable[[int, float], None]] = None,
        log_interval: int = 10
    ) -> RunResult:
        """
        Run the generational loop.

        Args:
            generations: Number of generations to evolve
            time_limit: Optional wall-clock budget in seconds, checked
                before each generation
            target_fitness: Optional early stop once the best cost is at
                or below this value
            verbose: Print progress every log_interval generations
            callback: Called as callback(generation, best_fitness)
            log_interval: Generations between progress lines

        Returns:
            RunResult with the best cost, its tour and the best-so-far history
        """
        validate_config(self.population_size, self.elite_size, self.mutation_rate, generations)
        if not _is_int(log_interval) or log_interval <= 0:
            raise InvalidConfiguration(
                f"log_interval must be a positive integer, got {log_interval!r}"
            )
        self.initialize()

        start = time.time()
        best_fitness = float("inf")
        best_tour: Optional[Tour] = None

        for gen in range(generations):
            if time_limit is not None and time.time() - start >= time_limit:
                if verbose:
                    print(f"Time limit reached after {gen} generations")
                break

            self.evolve_generation()

            candidate, candidate_fitness = self.select_representative()
            if candidate_fitness < best_fitness:
                best_fitness = candidate_fitness
                best_tour = candidate.clone()

            self.best_distance_history.append(best_fitness)

            if callback is not None:
                callback(self.generation, best_fitness)

            if verbose and (self.generation % log_interval == 0 or self.generation == generations):
                print(
                    f"Generation {self.generation}/{generations}: "
                    f"best={best_fitness:.2f} "
                    f"generation_best={fitness(self.population.get_fittest()):.2f} "
                    f"avg={self.population.get_average_distance():.2f}"
                )

            if target_fitness is not None and best_fitness <= target_fitness:
                if verbose:
                    print(f"Target {target_fitness:.2f} reached at generation {self.generation}")
                break

        return RunResult(
            best_fitness=best_fitness,
            best_solution=tuple(best_tour.cities) if best_tour is not None else None,
            history=tuple(self.best_distance_history),
        )


def solve_tsp(
    cities: Sequence[City],
    population_size: int,
    elite_size: float,
    mutation_rate: float,
    generations: int,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    weighting: str = "cost"
) -> RunResult:
    """Initialize a population and evolve it for a fixed number of generations."""
    solver = GeneticAlgorithmSolver(
        cities,
        population_size=population_size,
        elite_size=elite_size,
        mutation_rate=mutation_rate,
        weighting=weighting,
        seed=seed,
        rng=rng,
    )
    return solver.solve(generations=generations)
