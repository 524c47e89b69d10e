#!/usr/bin/env python
"""
Main entry point for the M2MA learning benchmark.

Learns each Tomita grammar with every learner configuration and compares
the hypotheses against the true grammar.

Usage:
    python run_benchmark.py [options]
    python run_benchmark.py --grammars 1 5 --learners exact heuristic
    python run_benchmark.py --quick
"""

import argparse
import sys
import time
from pathlib import Path
from typing import List

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from benchmarks.benchmark_runner import BenchmarkRunner
from benchmarks.learner_configs import select_configs


# Minimal DFA sizes; a GF(2) automaton never needs more states
MINIMAL_DFA_STATES = {
    "tomita1": 2,  # 1*
    "tomita2": 3,  # (10)*
    "tomita3": 5,  # odd 0s after odd 1s
    "tomita4": 4,  # no 000
    "tomita5": 4,  # even 0s and 1s
    "tomita6": 3,  # (#0s - #1s) mod 3 = 0
    "tomita7": 5,  # 0*1*0*1*
}


def print_header():
    """Print the benchmark header."""
    print("=" * 70)
    print("GF(2) Multiplicity Automaton Learning Benchmark")
    print("=" * 70)


def print_results_summary(results, grammars: List[str], learner_names: List[str]):
    """Print a compact per-grammar summary of results."""
    print("\n" + "=" * 70)
    print("LEARNING RESULTS SUMMARY")
    print("=" * 70)

    print(f"{'Grammar':<12}", end="")
    for learner in learner_names:
        print(f"{learner:<20}", end="")
    print()
    print("-" * (12 + 20 * len(learner_names)))

    for grammar in grammars:
        print(f"{grammar:<12}", end="")
        grammar_result = results.results.get(grammar, {})
        for learner in learner_names:
            runs = grammar_result.get(learner, [])
            if not runs:
                print(f"{'- N/A':<20}", end="")
                continue
            metrics = runs[0]
            if metrics.learning_successful:
                symbol = "✅" if metrics.dimension <= MINIMAL_DFA_STATES.get(grammar, metrics.dimension) else "⚠️"
                print(f"{symbol} {metrics.dimension:>2}d {metrics.test_accuracy:>6.1%}     ", end="")
            else:
                print(f"{'❌ ' + metrics.status.upper():<20}", end="")
        print()

    print("\nLegend:")
    print("  ✅ = Dimension within the minimal DFA size")
    print("  ⚠️  = Larger than the minimal DFA")
    print("  ❌ = Learning failed or stayed inconsistent")
    print("  Format: [symbol] [dimension]d [test accuracy]")


def main():
    """Main entry point with command line interface."""
    parser = argparse.ArgumentParser(
        description="GF(2) Multiplicity Automaton Learning Benchmark",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run default benchmark (all Tomita grammars, default learners)
  python run_benchmark.py

  # Specific grammars and learners
  python run_benchmark.py --grammars 1 6 --learners exact active_pac

  # Compare the transition solvers
  python run_benchmark.py --learners heuristic_gf2 heuristic_real_embedding

  # Quick test mode
  python run_benchmark.py --quick
        """
    )

    parser.add_argument('--grammars', nargs='+', type=int, default=None,
                        help='Tomita grammar IDs to test (default: 1-7)')
    parser.add_argument('--learners', nargs='+', default=None,
                        help='Learner configurations (exact, heuristic, fallback, active_pac, '
                             'heuristic_gf2, heuristic_real_embedding). Default: the first four')
    parser.add_argument('--exhaustive-length', type=int, default=12,
                        help='Maximum length for exhaustive testing (default: 12)')
    parser.add_argument('--sample-size', type=int, default=2000,
                        help='Number of random test samples (default: 2000)')
    parser.add_argument('--sample-min-length', type=int, default=13,
                        help='Minimum length for random samples (default: 13)')
    parser.add_argument('--sample-max-length', type=int, default=50,
                        help='Maximum length for random samples (default: 50)')
    parser.add_argument('--runs', type=int, default=3,
                        help='Runs per randomized configuration (default: 3)')
    parser.add_argument('--output-dir', type=str, default='benchmark_results',
                        help='Output directory for results (default: benchmark_results)')
    parser.add_argument('--quick', action='store_true',
                        help='Quick test mode with reduced parameters')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable verbose output')

    args = parser.parse_args()

    if args.quick:
        args.exhaustive_length = 8
        args.sample_size = 200
        args.sample_max_length = 20
        if args.runs == 3:  # Only override if not explicitly set
            args.runs = 1

    grammar_ids = args.grammars or list(range(1, 8))
    grammars = [f"tomita{i}" for i in grammar_ids]

    learner_configs = select_configs(args.learners)
    if not learner_configs:
        print("Error: No valid learner configurations specified")
        return 1

    print_header()
    print(f"\nConfiguration:")
    print(f"  Grammars: {', '.join(grammars)}")
    print(f"  Learners: {', '.join(learner_configs.keys())}")
    print(f"  Runs per randomized config: {args.runs}")
    print(f"  Test set: exhaustive up to {args.exhaustive_length}, "
          f"{args.sample_size:,} samples ({args.sample_min_length}-{args.sample_max_length})")
    print()

    runner = BenchmarkRunner(
        output_dir=args.output_dir,
        exhaustive_test_length=args.exhaustive_length,
        sample_size=args.sample_size,
        sample_min_length=args.sample_min_length,
        sample_max_length=args.sample_max_length
    )

    start_time = time.time()
    try:
        results = runner.run_benchmark(
            grammars=grammar_ids,
            learner_configs=learner_configs,
            num_runs=args.runs
        )

        print_results_summary(results, grammars, list(learner_configs.keys()))
        results.print_summary()

        total_time = time.time() - start_time
        print(f"\nTotal benchmark time: {total_time:.1f} seconds")
        print(f"Results saved to: {args.output_dir}/")

        return 0

    except KeyboardInterrupt:
        print("\n\nBenchmark interrupted by user.")
        return 1
    except Exception as e:
        print(f"\n\nError during benchmark: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
