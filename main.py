"""
TSP Solver - Main Application
Run the genetic algorithm on generated, sample or TSPLIB cities.
"""

import argparse
import sys
import time
from typing import List

import numpy as np
from tqdm import tqdm

from tsp_core import City, InvalidConfiguration
from genetic_algorithm import WEIGHTINGS, GeneticAlgorithmSolver, RunResult
from data_generator import (
    example_cities,
    generate_circle_cities,
    generate_random_cities,
    load_tsp_file
)
from visualization import TSPVisualizer


def build_cities(args) -> List[City]:
    """Pick the city source requested on the command line."""
    if args.tsp_file:
        print(f"\nLoading cities from {args.tsp_file}...")
        return load_tsp_file(args.tsp_file)

    if args.example:
        print("\nUsing the 5-city sample problem...")
        return example_cities()

    print(f"\nGenerating {args.cities} cities in {args.pattern} pattern...")
    if args.pattern == 'circle':
        return generate_circle_cities(args.cities, radius=50)
    return generate_random_cities(args.cities, width=100, height=100,
                                  rng=np.random.default_rng(args.seed))


def make_solver(cities: List[City], args, seed=None) -> GeneticAlgorithmSolver:
    return GeneticAlgorithmSolver(
        cities=cities,
        population_size=args.population_size,
        elite_size=args.elite_size,
        mutation_rate=args.mutation_rate,
        weighting=args.weighting,
        seed=seed
    )


def print_result(result: RunResult, elapsed: float):
    print("\n" + "="*60)
    print("RESULTS")
    print("="*60)
    if result.best_solution is None:
        print("No generations were run; no solution found.")
        print(f"Best Fitness: {result.best_fitness}")
        print("="*60)
        return

    print(f"Best Fitness:  {result.best_fitness:.2f}")
    print(f"Generations:   {len(result.history)}")
    print(f"Time:          {elapsed:.3f}s")
    print("\nBest Solution:")
    for i, city in enumerate(result.best_solution, 1):
        label = city.name or f"({city.x:.2f}, {city.y:.2f})"
        print(f"  {i}. {label}")
    print("="*60)


def run_single(cities: List[City], args) -> RunResult:
    """Run the GA once and print the outcome."""
    solver = make_solver(cities, args, seed=args.seed)

    start_time = time.time()
    result = solver.solve(
        generations=args.generations,
        time_limit=args.time_limit,
        target_fitness=args.target,
        verbose=args.verbose
    )
    print_result(result, time.time() - start_time)
    return result


def run_repeated(cities: List[City], args) -> List[RunResult]:
    """
    Run the GA several times with consecutive seeds and print
    Best / Average / Std. Deviation of the best fitness.
    """
    base_seed = args.seed if args.seed is not None else 0
    results = []
    times = []

    for k in tqdm(range(args.runs), desc="GA runs"):
        solver = make_solver(cities, args, seed=base_seed + k)
        start_time = time.time()
        results.append(solver.solve(
            generations=args.generations,
            time_limit=args.time_limit,
            target_fitness=args.target,
            verbose=args.verbose
        ))
        times.append(time.time() - start_time)

    finished = [r.best_fitness for r in results if r.best_solution is not None]
    print("\n" + "="*60)
    print(f"SUMMARY OVER {args.runs} RUNS (seeds {base_seed}..{base_seed + args.runs - 1})")
    print("="*60)
    if finished:
        print(f"Best:      {np.min(finished):.2f}")
        print(f"Average:   {np.mean(finished):.2f}")
        print(f"Std. Dev.: {np.std(finished):.2f}")
    else:
        print("No generations were run; no solutions found.")
    print(f"Avg Time:  {np.mean(times):.3f}s")
    print("="*60)
    return results


def best_of(results: List[RunResult]):
    """Lowest-cost result that found a solution, or None."""
    finished = [r for r in results if r.best_solution is not None]
    if not finished:
        return None
    return min(finished, key=lambda r: r.best_fitness)


def plot_result(result: RunResult, args):
    if result.best_solution is None:
        print("Nothing to plot.")
        return

    visualizer = TSPVisualizer()
    show = args.save_plot is None
    tour_path = f"{args.save_plot}_tour.png" if args.save_plot else None
    conv_path = f"{args.save_plot}_convergence.png" if args.save_plot else None
    visualizer.plot_tour(result.best_tour, title="Genetic Algorithm Solution",
                         save_path=tour_path, show=show)
    visualizer.plot_convergence(list(result.history), save_path=conv_path, show=show)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="TSP Solver - Approximate the shortest open path through a set of cities with a genetic algorithm",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve the 5-city sample problem
  python main.py --example --seed 1

  # 40 random cities, 200 generations, plot the result
  python main.py --cities 40 --generations 200 --plot

  # TSPLIB problem, 10 seeded runs
  python main.py --tsp-file att48.tsp --runs 10 --seed 7
        """
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument('--example', action='store_true',
                        help='Use the built-in 5-city sample problem')
    source.add_argument('--tsp-file', type=str,
                        help='Load cities from a TSPLIB .tsp file')
    parser.add_argument('--cities', type=int, default=None,
                        help='Number of cities to generate (default: 30)')
    parser.add_argument('--pattern', type=str, choices=['random', 'circle'], default=None,
                        help='City placement pattern (default: random)')

    parser.add_argument('--population-size', type=int, default=100,
                        help='Tours per generation (default: 100)')
    parser.add_argument('--elite-size', type=float, default=0.2,
                        help='Fraction of each generation carried over by selection (default: 0.2)')
    parser.add_argument('--mutation-rate', type=float, default=0.1,
                        help='Probability that an offspring is swap-mutated (default: 0.1)')
    parser.add_argument('--generations', type=int, default=50,
                        help='Number of generations (default: 50)')
    parser.add_argument('--weighting', type=str, choices=list(WEIGHTINGS), default='cost',
                        help='Roulette weighting: cost (favours longer tours) or inverse (default: cost)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducible runs')

    parser.add_argument('--time-limit', type=float, default=None,
                        help='Stop after this many seconds')
    parser.add_argument('--target', type=float, default=None,
                        help='Stop once the best path length is at or below this value')
    parser.add_argument('--runs', type=int, default=1,
                        help='Repeat the run with consecutive seeds and print statistics')

    parser.add_argument('--plot', action='store_true',
                        help='Plot the best tour and convergence history')
    parser.add_argument('--save-plot', type=str, default=None,
                        help='Save plots with this filename prefix instead of showing them')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print progress during the run')
    return parser


def main(argv=None):
    """Main entry point for the TSP solver application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.runs < 1:
        parser.error(f"--runs must be at least 1, got {args.runs}")
    if (args.example or args.tsp_file) and (args.cities is not None or args.pattern is not None):
        parser.error("--cities and --pattern only apply to generated cities, "
                     "not to --example or --tsp-file")
    if args.cities is None:
        args.cities = 30
    if args.pattern is None:
        args.pattern = 'random'

    try:
        cities = build_cities(args)
        print(f"Problem Size: {len(cities)} cities")

        if args.runs > 1:
            results = run_repeated(cities, args)
            if args.plot or args.save_plot:
                best = best_of(results)
                if best is None:
                    print("Nothing to plot.")
                else:
                    plot_result(best, args)
            return results

        result = run_single(cities, args)
        if args.plot or args.save_plot:
            plot_result(result, args)
        return result
    except (InvalidConfiguration, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
