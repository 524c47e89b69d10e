#!/usr/bin/env python
"""
Learn a GF(2) multiplicity automaton from a JSON example file.

Usage:
    python learn_from_examples.py examples.json
    python learn_from_examples.py examples.json -c --output hypothesis.json
    python learn_from_examples.py examples.json --fallback -v
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from core.config import LearnerConfig, SolverMethod
from core.hypothesis import verify
from core.learner import learn_from_examples
from core.sample_io import load_examples
from core.words import format_word

MAX_LISTED_WORDS = 20


def print_result(result, store):
    """Print status, issues and the learned hypothesis."""
    print("\n" + "=" * 50)
    print(f"Status: {result.status.value.upper()}")
    print("=" * 50)

    stats = result.statistics
    print(f"Learner: {stats.get('learner')}")
    print(f"Rounds: {stats.get('rounds')}")
    print(f"Time: {stats.get('total_time', 0.0):.3f}s")

    for issue in result.issues:
        print(f"  {issue}")

    missing = result.missing_words
    if missing:
        print(f"\nUnlabeled words needed ({len(missing)}):")
        for word in missing[:MAX_LISTED_WORDS]:
            print(f"  '{format_word(word)}'")
        if len(missing) > MAX_LISTED_WORDS:
            print(f"  ... and {len(missing) - MAX_LISTED_WORDS} more")

    if result.hypothesis is not None:
        print("\n" + result.hypothesis.describe())
        print(f"\nVerification: {verify(result.hypothesis, store)}")


def main():
    parser = argparse.ArgumentParser(
        description="Learn a GF(2) multiplicity automaton from labeled examples")
    parser.add_argument('input', type=str, help='JSON file with "Positive sample" / "Negative sample"')
    parser.add_argument('-v', '--verbose', action='store_true', help='Print learner progress')
    parser.add_argument('-c', '--closed-world', action='store_true',
                        help='Treat unlabeled words as negative')
    parser.add_argument('--heuristic', action='store_true',
                        help='Use the heuristic learner for incomplete data')
    parser.add_argument('--fallback', action='store_true',
                        help='Retry with the heuristic learner when labels are missing')
    parser.add_argument('--no-minimize', action='store_true', help='Keep the unminimized hypothesis')
    parser.add_argument('--solver', choices=[m.value for m in SolverMethod], default=SolverMethod.GF2.value,
                        help='Transition solver for the heuristic learner (default: gf2)')
    parser.add_argument('--coverage-length', type=int, default=None,
                        help='Suffix length for the initial table (default: longest fully labeled length)')
    parser.add_argument('--max-rounds', type=int, default=25,
                        help='Maximum counterexample rounds (default: 25)')
    parser.add_argument('--output', type=str, default=None, help='Write the result as JSON')

    args = parser.parse_args()

    try:
        store = load_examples(args.input, closed_world=args.closed_world)
    except (OSError, ValueError) as e:
        print(f"Error loading examples: {e}")
        return 2

    print(f"Loaded {len(store)} examples from {args.input}")
    print(f"  Alphabet: {store.alphabet}")
    print(f"  Positive: {len(store.positive)}, Negative: {len(store.negative)}")
    print(f"  Full coverage up to length {store.max_full_coverage_length()}")

    config = LearnerConfig(
        closed_world=args.closed_world,
        coverage_length=args.coverage_length,
        max_rounds=args.max_rounds,
        solver=SolverMethod(args.solver),
        minimize=not args.no_minimize,
        heuristic_fallback=args.fallback,
        verbose=args.verbose,
    )
    result = learn_from_examples(store, config, heuristic=args.heuristic)
    print_result(result, store)

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(result.to_dict(), f, indent=2, default=str)
        print(f"\nResult saved to: {args.output}")

    return 0 if result.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
