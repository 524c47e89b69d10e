"""
Tests for the grammars, benchmark metrics, runner and DFA experiment
"""

import json

import pandas as pd
import pytest

from benchmarks.benchmark_runner import BenchmarkRunner
from benchmarks.experiment import run_dfa_experiment
from benchmarks.learner_configs import (BenchmarkConfig, LearnerType, get_default_configs,
                                        select_configs)
from benchmarks.metrics import BenchmarkResults, LearningMetrics, confusion_metrics
from core.config import LearnerConfig, SolverMethod
from core.learner import learn_from_examples
from core.words import ExampleStore
from grammars.tomita import TOMITA_GRAMMARS, get_tomita_grammar, make_example_store, tomita_2


class TestTomitaGrammars:
    @pytest.mark.parametrize("grammar_id,word,expected", [
        (1, "111", True), (1, "101", False),
        (2, "1010", True), (2, "0101", False),
        (3, "1100", True), (3, "10", False),
        (4, "1001", True), (4, "10001", False),
        (5, "0110", True), (5, "011", False),
        (6, "0011", True), (6, "001", False),
        (7, "1100", True), (7, "1010", False),
    ])
    def test_membership(self, grammar_id, word, expected):
        grammar, _ = TOMITA_GRAMMARS[grammar_id]
        assert grammar(tuple(word)) == expected

    def test_empty_word(self):
        assert all(grammar(()) for grammar, _ in TOMITA_GRAMMARS.values())

    def test_unknown_grammar(self):
        with pytest.raises(ValueError):
            get_tomita_grammar(8)

    def test_example_store(self):
        store = make_example_store(2, 4)
        assert len(store) == 31
        assert store.max_full_coverage_length() == 4
        assert store.lookup(("1", "0")) == 1
        assert store.lookup(("1", "0", "1", "0", "1", "0")) == -1

    def test_exact_learning_with_coverage(self):
        store = make_example_store(2, 6)
        result = learn_from_examples(store, LearnerConfig(coverage_length=3))
        assert result.succeeded
        for word in store.known_words():
            assert result.hypothesis.accepts(word) == tomita_2(word)


class TestMetrics:
    def test_confusion_metrics(self):
        metrics = confusion_metrics(tp=4, fp=1, tn=4, fn=1)
        assert metrics["accuracy"] == 0.8
        assert metrics["precision"] == 0.8
        assert metrics["recall"] == 0.8
        assert metrics["f1"] == pytest.approx(0.8)
        assert metrics["mcc"] == pytest.approx(0.6)
        assert confusion_metrics(0, 0, 0, 0)["accuracy"] == 0.0

    def test_metrics_from_result(self, closed_store):
        metrics = LearningMetrics.from_result(learn_from_examples(closed_store))
        assert metrics.learning_successful
        assert metrics.status == "success"
        assert metrics.dimension == 3
        assert metrics.failure_reason is None
        assert metrics.avg_counterexample_length == 0.0

    def test_failed_metrics(self):
        result = learn_from_examples(ExampleStore(["a", "b"], positive=[("a", "a")]))
        metrics = LearningMetrics.from_result(result)
        assert not metrics.learning_successful
        assert metrics.issues == ["insufficient_information"]
        assert "insufficient_information" in metrics.failure_reason

    def test_results_export(self, tmp_path):
        results = BenchmarkResults()
        results.add_result("tomita1", "exact", LearningMetrics(
            dimension=1, test_accuracy=1.0, train_accuracy=1.0, status="success",
            learning_successful=True, counterexample_lengths=[2, 4],
            confusion=confusion_metrics(3, 0, 2, 0)))
        results.add_result("tomita1", "heuristic", LearningMetrics(dimension=2, test_accuracy=0.5))

        df = results.to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 2
        assert df.loc[df["learner"] == "exact", "avg_counterexample_length"].iloc[0] == 3.0
        assert "test_mcc" in df.columns

        results.export_to_csv(tmp_path / "results.csv")
        assert len(pd.read_csv(tmp_path / "results.csv")) == 2

        results.save_to_json(tmp_path / "results.json")
        data = json.loads((tmp_path / "results.json").read_text())
        assert data["tomita1"]["exact"][0]["dimension"] == 1

        results.plot_accuracy_comparison(tmp_path / "accuracy.png")
        results.plot_dimension_comparison(tmp_path / "dimension.png")
        assert (tmp_path / "accuracy.png").exists()
        assert (tmp_path / "dimension.png").exists()


class TestBenchmarkConfigs:
    def test_presets(self):
        configs = get_default_configs()
        assert set(configs) == {"exact", "heuristic", "fallback", "active_pac"}
        assert configs["fallback"].to_learner_config().heuristic_fallback
        assert configs["exact"].to_dict()["coverage_length"] == 4
        assert "epsilon" in configs["active_pac"].to_dict()

    def test_select_configs(self):
        configs = select_configs(["exact", "heuristic_real_embedding", "nope"])
        assert list(configs) == ["exact", "heuristic_real_embedding"]
        assert configs["heuristic_real_embedding"].solver == SolverMethod.REAL_EMBEDDING
        assert set(select_configs(None)) == set(get_default_configs())


class TestBenchmarkRunner:
    def test_exact_run_on_tomita_1(self, tmp_path):
        runner = BenchmarkRunner(output_dir=str(tmp_path), exhaustive_test_length=6,
                                 sample_size=10, sample_min_length=7, sample_max_length=9,
                                 save_results=False)
        configs = {"exact": BenchmarkConfig(learner_type=LearnerType.EXACT,
                                            train_max_length=5, coverage_length=2)}
        results = runner.run_benchmark(grammars=[1], learner_configs=configs)

        metrics = results.results["tomita1"]["exact"][0]
        assert metrics.learning_successful
        assert metrics.dimension == 1
        assert metrics.train_accuracy == 1.0
        assert metrics.test_accuracy == 1.0
        assert metrics.confusion["tp"] + metrics.confusion["tn"] == 127 + 10

    def test_saves_results(self, tmp_path):
        runner = BenchmarkRunner(output_dir=str(tmp_path), exhaustive_test_length=4,
                                 sample_size=5, sample_min_length=5, sample_max_length=6)
        configs = {"exact": BenchmarkConfig(learner_type=LearnerType.EXACT,
                                            train_max_length=5, coverage_length=2)}
        runner.run_benchmark(grammars=[1], learner_configs=configs)

        assert list(tmp_path.glob("benchmark_results_*.json"))
        assert list(tmp_path.glob("benchmark_results_*.csv"))
        assert list((tmp_path / "hypotheses").glob("tomita1_exact_run1.json"))


class TestDFAExperiment:
    def test_parity_experiment(self, parity, tmp_path):
        report = run_dfa_experiment(parity, output_dir=tmp_path, name="parity")

        assert report.phase1_status == "success"
        assert report.phase1_equivalent
        assert report.phase1_dimension == 2
        assert report.queries_collected > 0
        assert report.phase2_status == "success"
        assert report.phase2_learner == "Exact M2MA Learner"
        assert report.phase2_equivalent
        assert report.dimensions_match
        assert report.phase2_query_accuracy == 1.0
        assert (tmp_path / "parity_queries.json").exists()
        assert report.to_dict()["dimensions_match"]

    def test_experiment_with_variations(self, parity, tmp_path):
        report = run_dfa_experiment(parity, output_dir=tmp_path, name="parity",
                                    config=LearnerConfig(max_search_unknowns=8),
                                    apply_variations=True, num_additional=5, seed=2)

        assert report.variations_applied
        assert report.examples_used >= report.queries_collected
        assert report.phase1_equivalent
        assert report.phase2_status in ("success", "partial", "failed")
        assert (tmp_path / "parity_queries_shuffled_redundant.json").exists()
