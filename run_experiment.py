#!/usr/bin/env python
"""
Active-to-passive learning experiment on a DFA given as a DOT file.

Usage:
    python run_experiment.py target.dot
    python run_experiment.py target.dot --variations --num-additional 50
    python run_experiment.py target.dot --statistical --num-tests 1000 --max-test-length 25
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from benchmarks.experiment import run_dfa_experiment
from core.config import LearnerConfig
from core.dfa import load_dfa


def main():
    parser = argparse.ArgumentParser(
        description="Learn a DFA actively, then again from the collected queries")
    parser.add_argument('dfa', type=str, help='Graphviz DOT file with the target DFA')
    parser.add_argument('--statistical', action='store_true',
                        help='Random testing instead of exact equivalence in phase 1')
    parser.add_argument('--max-test-length', type=int, default=25,
                        help='Max length of random test words (default: 25)')
    parser.add_argument('--num-tests', type=int, default=1000,
                        help='Random test words per equivalence query (default: 1000)')
    parser.add_argument('--variations', action='store_true',
                        help='Shuffle the queries and add redundant examples')
    parser.add_argument('--num-additional', type=int, default=50,
                        help='Redundant examples to add (default: 50)')
    parser.add_argument('--min-length', type=int, default=3,
                        help='Min length of redundant examples (default: 3)')
    parser.add_argument('--max-length', type=int, default=8,
                        help='Max length of redundant examples (default: 8)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--output-dir', type=str, default='experiment_results',
                        help='Directory for query files and the report (default: experiment_results)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Print learner progress')

    args = parser.parse_args()

    try:
        dfa = load_dfa(args.dfa)
    except (OSError, ValueError) as e:
        print(f"Error loading DFA: {e}")
        return 2

    name = Path(args.dfa).stem
    report = run_dfa_experiment(
        dfa,
        output_dir=args.output_dir,
        name=name,
        config=LearnerConfig(verbose=args.verbose),
        exact_equivalence=not args.statistical,
        max_test_length=args.max_test_length,
        num_tests=args.num_tests,
        apply_variations=args.variations,
        num_additional=args.num_additional,
        min_length=args.min_length,
        max_length=args.max_length,
        seed=args.seed,
    )

    report_path = Path(args.output_dir) / f"{name}_report.json"
    with open(report_path, 'w') as f:
        json.dump(report.to_dict(), f, indent=2)
    print(f"\nReport saved to: {report_path}")

    return 0 if report.phase1_equivalent and report.phase2_equivalent else 1


if __name__ == "__main__":
    sys.exit(main())
