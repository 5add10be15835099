#!/usr/bin/env python3
"""Benchmark layer carving, traversal and grafting."""

from __future__ import annotations

import argparse
import json
import logging
import time
from pathlib import Path

from fogmaze.environment.generators import GenerationSettings, carve, traverse
from fogmaze.environment.generators.builder import GenerationError, MazeBuilder
from fogmaze.environment.layer import Layer
from fogmaze.environment.shapes import make_circle
from fogmaze.util.rng import RNGProvider

RADII: tuple[int, ...] = (12, 20, 30, 45)


class GenerationBenchmark:
    """Benchmark runner for the generation core."""

    def __init__(self, iterations: int) -> None:
        self.iterations = iterations
        self.settings = GenerationSettings()
        self.results: dict[str, dict[str, float]] = {}

    def _run_case(self, radius: int) -> dict[str, float]:
        """Run one radius and return average timings in milliseconds."""
        shape = make_circle(radius)
        carve_total = 0.0
        traverse_total = 0.0
        graft_total = 0.0
        graft_failures = 0

        for i in range(self.iterations):
            rng = RNGProvider(master_seed=radius * 1_000 + i).get("bench.carving")

            layer = Layer(shape)
            start = time.perf_counter()
            carve(layer, [(0, 0)], rng)
            carve_total += time.perf_counter() - start

            start = time.perf_counter()
            traverse(layer, (0, 0), None, self.settings.visible_area)
            traverse_total += time.perf_counter() - start

            builder = MazeBuilder(shape, rng, self.settings)
            first = builder.generate_first_layer((0, 0))
            start = time.perf_counter()
            try:
                builder.add_layer_from_deepest_point(first)
            except GenerationError:
                graft_failures += 1
            graft_total += time.perf_counter() - start

        return {
            "carve_ms": (carve_total / self.iterations) * 1000.0,
            "traverse_ms": (traverse_total / self.iterations) * 1000.0,
            "graft_ms": (graft_total / self.iterations) * 1000.0,
            "graft_failures": float(graft_failures),
        }

    def run(self) -> None:
        """Run all configured radius benchmarks."""
        print("Maze generation benchmark")
        print("=" * 60)
        print(f"Iterations per radius: {self.iterations}")
        print()
        print(
            f"{'Radius':>8} {'Carve (ms)':>12} "
            f"{'Traverse (ms)':>14} {'Graft (ms)':>12}"
        )
        print("-" * 60)

        for radius in RADII:
            result = self._run_case(radius)
            self.results[f"r{radius}"] = result
            print(
                f"{radius:>8} {result['carve_ms']:12.2f} "
                f"{result['traverse_ms']:14.2f} {result['graft_ms']:12.2f}"
            )

    def save_results(self, filename: str) -> None:
        """Save benchmark output to a JSON file."""
        with Path(filename).open("w") as f:
            json.dump(self.results, f, indent=2)
        print(f"\nSaved benchmark results to {filename}")

    def compare_with_baseline(self, baseline_file: str) -> None:
        """Compare current run with a saved baseline JSON file."""
        try:
            with Path(baseline_file).open() as f:
                baseline: dict[str, dict[str, float]] = json.load(f)
        except FileNotFoundError:
            print(f"\nBaseline file not found: {baseline_file}")
            return

        print(f"\nComparison vs baseline: {baseline_file}")
        print("=" * 64)

        for case_key, current in self.results.items():
            if case_key not in baseline:
                continue
            for metric in ("carve_ms", "traverse_ms", "graft_ms"):
                old = baseline[case_key].get(metric, 0.0)
                new = current[metric]
                if old <= 0:
                    continue
                delta_pct = ((new - old) / old) * 100.0
                print(
                    f"{case_key:>6} {metric:>12}: {new:8.2f}ms vs {old:8.2f}ms "
                    f"({delta_pct:+6.1f}%)"
                )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark maze generation")
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of runs per radius (default: 5)",
    )
    parser.add_argument("--save", type=str, help="Save current results to JSON")
    parser.add_argument(
        "--compare",
        type=str,
        help="Compare current results against baseline JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Log generation details")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    benchmark = GenerationBenchmark(iterations=args.iterations)
    benchmark.run()

    if args.save:
        benchmark.save_results(args.save)

    if args.compare:
        benchmark.compare_with_baseline(args.compare)


if __name__ == "__main__":
    main()
