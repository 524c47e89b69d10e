"""
Benchmark runner for comparing the learners on the Tomita grammars.

This module orchestrates the benchmarking process: it builds training data
for each grammar, runs every learner configuration, evaluates the learned
hypotheses against the true grammar and collects the metrics.
"""

import time
import random
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import json

from core.hypothesis import Hypothesis, verify
from core.learner import learn_from_examples, learn_with_oracles
from core.words import Word
from grammars.tomita import TOMITA_ALPHABET, TOMITA_GRAMMARS, generate_binary_words, make_example_store
from oracles import FunctionOracle, PACEquivalenceOracle
from benchmarks.metrics import BenchmarkResults, LearningMetrics, confusion_metrics
from benchmarks.learner_configs import BenchmarkConfig, LearnerType, get_default_configs


class BenchmarkRunner:
    """Orchestrates benchmark execution across different configurations."""

    def __init__(self, output_dir: str = "benchmark_results",
                 exhaustive_test_length: int = 12,
                 sample_size: int = 2000,
                 sample_min_length: int = 13,
                 sample_max_length: int = 50,
                 save_results: bool = True):
        """
        Initialize benchmark runner with configurable test parameters.

        Args:
            output_dir: Directory to save results
            exhaustive_test_length: Maximum length for exhaustive testing
            sample_size: Number of random longer words to test
            sample_min_length: Minimum length for random samples
            sample_max_length: Maximum length for random samples
            save_results: Write JSON/CSV results and hypotheses to output_dir
        """
        self.output_dir = Path(output_dir)
        self.save_results = save_results
        if save_results:
            self.output_dir.mkdir(exist_ok=True)
            self.hypothesis_dir = self.output_dir / "hypotheses"
            self.hypothesis_dir.mkdir(exist_ok=True)
        self.results = BenchmarkResults()

        # Test set configuration
        self.exhaustive_test_length = exhaustive_test_length
        self.sample_size = sample_size
        self.sample_min_length = sample_min_length
        self.sample_max_length = sample_max_length

    def run_benchmark(self,
                      grammars: Optional[List[int]] = None,
                      learner_configs: Optional[Dict[str, BenchmarkConfig]] = None,
                      num_runs: int = 1) -> BenchmarkResults:
        """
        Run comprehensive benchmark.

        Args:
            grammars: Tomita grammar IDs to test (default: all)
            learner_configs: Learner configurations (default presets when None)
            num_runs: Number of runs per randomized configuration

        Returns:
            BenchmarkResults object with all metrics
        """
        grammars = grammars or sorted(TOMITA_GRAMMARS)
        learner_configs = learner_configs or get_default_configs()

        print("=" * 80)
        print(f"Starting M2MA Learning Benchmark")
        print(f"Grammars: {[f'tomita{g}' for g in grammars]}")
        print(f"Learners: {list(learner_configs.keys())}")
        print(f"Runs per randomized config: {num_runs}")
        print(f"\nTest Set Configuration:")
        print(f"  Exhaustive testing: up to length {self.exhaustive_test_length}")
        print(f"  Random samples: {self.sample_size:,} words (length {self.sample_min_length}-{self.sample_max_length})")
        print("=" * 80)

        test_set = self._generate_test_set(TOMITA_ALPHABET)

        tasks = []
        for grammar_id in grammars:
            for learner_name, config in learner_configs.items():
                # Only active learning draws random words
                runs = num_runs if config.learner_type == LearnerType.ACTIVE_PAC else 1
                for run in range(runs):
                    tasks.append((grammar_id, learner_name, config, run))

        total_experiments = len(tasks)
        print(f"\nTotal experiments: {total_experiments}")

        for completed, (grammar_id, learner_name, config, run) in enumerate(tasks, start=1):
            grammar_name = f"tomita{grammar_id}"
            seed = 42 + grammar_id * 100 + run * 10000
            metrics, hypothesis = self._run_single_learning(grammar_id, config, test_set, seed)
            self.results.add_result(grammar_name, learner_name, metrics)

            if metrics.learning_successful:
                print(f"[{completed}/{total_experiments}] ✅ {grammar_name}/{learner_name}/run_{run+1} "
                      f"(dimension {metrics.dimension}, test acc {metrics.test_accuracy:.3f}, "
                      f"{metrics.total_time:.1f}s)")
            else:
                print(f"[{completed}/{total_experiments}] ❌ {grammar_name}/{learner_name}/run_{run+1} "
                      f"({metrics.status.upper()}: {metrics.failure_reason})")

            if hypothesis is not None and self.save_results:
                self._save_hypothesis(hypothesis, grammar_name, learner_name, run)

        if self.save_results:
            self._save_final_results()

        return self.results

    def _run_single_learning(self, grammar_id: int, config: BenchmarkConfig,
                             test_set: List[Word], seed: int) -> Tuple[LearningMetrics, Optional[Hypothesis]]:
        """Run a single learning experiment."""
        grammar, _ = TOMITA_GRAMMARS[grammar_id]
        learner_config = config.to_learner_config()

        if config.learner_type == LearnerType.ACTIVE_PAC:
            membership_oracle = FunctionOracle(TOMITA_ALPHABET, grammar)
            equivalence_oracle = PACEquivalenceOracle(
                membership_oracle, epsilon=config.epsilon, delta=config.delta,
                max_length=config.max_length, distribution=config.distribution,
                seed=seed, verbose=False)
            result, store = learn_with_oracles(membership_oracle, equivalence_oracle, learner_config)
        else:
            store = make_example_store(grammar_id, config.train_max_length, config.closed_world)
            result = learn_from_examples(store, learner_config,
                                         heuristic=config.learner_type == LearnerType.HEURISTIC)

        metrics = LearningMetrics.from_result(result)
        if result.hypothesis is None:
            return metrics, None

        metrics.train_accuracy = verify(result.hypothesis, store).accuracy
        metrics.confusion = self._evaluate_accuracy(result.hypothesis, grammar, test_set)
        metrics.test_accuracy = metrics.confusion['accuracy']
        return metrics, result.hypothesis

    def _generate_test_set(self, alphabet: Sequence[str]) -> List[Word]:
        """Generate test set: every word up to the exhaustive length plus random longer words.

        Returns:
            List of test words (without labels)
        """
        print(f"      Generating exhaustive test set up to length {self.exhaustive_test_length}...")
        test_set = generate_binary_words(self.exhaustive_test_length)

        print(f"      Generating {self.sample_size:,} random words (length {self.sample_min_length}-{self.sample_max_length})...")
        rng = random.Random(42)  # For reproducibility
        for _ in range(self.sample_size):
            length = rng.randint(self.sample_min_length, self.sample_max_length)
            test_set.append(tuple(rng.choice(alphabet) for _ in range(length)))

        print(f"      Total test set size: {len(test_set):,} words")
        return test_set

    def _evaluate_accuracy(self, hypothesis: Hypothesis,
                           true_grammar: Callable[[Word], bool],
                           test_set: List[Word]) -> Dict[str, float]:
        """Confusion matrix metrics of the hypothesis against the true grammar."""
        tp = fp = tn = fn = 0
        for word in test_set:
            predicted = hypothesis.accepts(word)
            actual = true_grammar(word)
            if predicted and actual:
                tp += 1
            elif predicted and not actual:
                fp += 1
            elif not predicted and actual:
                fn += 1
            else:
                tn += 1
        return confusion_metrics(tp, fp, tn, fn)

    def _save_hypothesis(self, hypothesis: Hypothesis, grammar_name: str,
                         learner_name: str, run_num: int):
        path = self.hypothesis_dir / f"{grammar_name}_{learner_name}_run{run_num + 1}.json"
        with open(path, 'w') as f:
            json.dump(hypothesis.to_dict(), f, indent=2)

    def _save_final_results(self):
        """Save final benchmark results."""
        timestamp = time.strftime("%Y%m%d_%H%M%S")

        # Save raw results
        json_path = self.output_dir / f"benchmark_results_{timestamp}.json"
        self.results.save_to_json(json_path)
        print(f"\nResults saved to: {json_path}")

        # Save CSV for analysis
        csv_path = self.output_dir / f"benchmark_results_{timestamp}.csv"
        self.results.export_to_csv(csv_path)
        print(f"CSV saved to: {csv_path}")

        plot_path = self.output_dir / f"accuracy_{timestamp}.png"
        self.results.plot_accuracy_comparison(plot_path)
        print(f"Plot saved to: {plot_path}")
