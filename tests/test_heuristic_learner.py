"""
Tests for the heuristic learner and the exhaustive search over unknown entries
"""

import numpy as np
import pytest

from core.config import LearnerConfig, SolverMethod
from core.heuristic_learner import HeuristicLearner, search_unknown_entries, solve_hypothesis
from core.hypothesis import find_counterexample, verify
from core.learner import learn_from_examples
from core.results import IssueKind, LearningStatus, SearchSpaceTooLarge, SingularSubmatrix
from core.words import UNKNOWN, ExampleStore, all_words


def unary_store(labels):
    store = ExampleStore(["a"])
    for length, label in enumerate(labels):
        store.add_example(("a",) * length, label)
    return store


class TestHeuristicLearner:
    def test_learns_parity_after_expansion(self, unary_parity_store):
        learner = HeuristicLearner(unary_parity_store)
        result = learner.run()

        assert result.status == LearningStatus.SUCCESS
        assert result.statistics["rounds"] == 2
        assert learner.counterexamples == [("a", "a")]
        assert learner.state_rows == [(), ("a",)]
        assert result.hypothesis.dimension == 2
        assert result.hypothesis.evaluate(("a",) * 6) == 1
        assert result.hypothesis.evaluate(("a",) * 7) == 0

    def test_real_embedding_solver(self, unary_parity_store):
        config = LearnerConfig(solver=SolverMethod.REAL_EMBEDDING)
        result = HeuristicLearner(unary_parity_store, config).run()
        assert result.succeeded
        assert result.hypothesis.dimension == 2

    def test_heuristic_entry_point(self, unary_parity_store):
        result = learn_from_examples(unary_parity_store, heuristic=True)
        assert result.statistics["learner"] == "Heuristic M2MA Learner"
        assert verify(result.hypothesis, unary_parity_store).is_consistent

    def test_singular_submatrix_reported(self):
        store = unary_store([0, 0, 0])
        result = HeuristicLearner(store).run()

        assert result.has_issue(IssueKind.SINGULAR_SUBMATRIX)
        assert result.status == LearningStatus.SUCCESS
        assert result.hypothesis.dimension == 1
        assert all(result.hypothesis.evaluate(("a",) * n) == 0 for n in range(5))

    def test_infer_entry_from_combination(self):
        store = ExampleStore(["a", "b"],
                             positive=[(), ("a", "a"), ("b",)],
                             negative=[("a",), ("b", "a")])
        learner = HeuristicLearner(store)
        learner.columns = [(), ("a",)]
        learner.state_rows = [(), ("a",)]

        # row(b) equals row(empty), so b.b takes the label of b
        assert learner.infer_entry(("b",), ("b",)) == 1
        assert learner.store.is_derived(("b", "b"))
        assert learner.store.lookup(("b", "b")) == UNKNOWN
        assert learner.inferred_entries == 1

    def test_infer_entry_unknown(self):
        store = ExampleStore(["a"], positive=[()])
        learner = HeuristicLearner(store)
        learner.columns = [()]
        learner.state_rows = [()]
        assert learner.infer_entry(("a",), ()) == UNKNOWN
        assert not store.derived

    def test_empty_word_is_first_state(self):
        # the empty prefix has no 1 over the well-covered columns here
        store = ExampleStore(["a", "b"], negative=all_words(["a", "b"], 2),
                             positive=[("a", "a", "a")])
        learner = HeuristicLearner(store)
        learner._select_table()
        hypothesis = learner._build_hypothesis()

        assert ("a", "a", "a") in learner.columns
        assert learner.rows[0] == ()
        assert learner.state_rows[0] == ()
        assert learner.state_columns[0] == ("a", "a", "a")
        assert hypothesis.dimension == 1

    def test_empty_word_row_kept_after_pruning(self, unary_parity_store):
        learner = HeuristicLearner(unary_parity_store)
        learner.run()
        assert learner.rows[0] == ()
        assert learner.state_rows[0] == ()

    def test_derived_labels_stay_with_the_run(self):
        store = ExampleStore(["a", "b"],
                             positive=[(), ("a", "a"), ("b",)],
                             negative=[("a",), ("b", "a")])
        first = HeuristicLearner(store)
        first.columns = [(), ("a",)]
        first.state_rows = [(), ("a",)]
        assert first.infer_entry(("b",), ("b",)) == 1

        second = HeuristicLearner(store)
        assert not store.derived
        assert not second.store.derived
        assert second.store.lookup(("b", "b"), use_derived=True) == UNKNOWN


class TestSolveHypothesis:
    def test_identity_base(self):
        base = np.eye(2, dtype=np.int64)
        blocks = {"a": np.array([[0, 1], [1, 0]])}
        hypothesis = solve_hypothesis(["a"], [1, 0], base, blocks)
        assert hypothesis.transitions["a"].tolist() == [[0, 1], [1, 0]]

    def test_singular_base(self):
        base = np.zeros((1, 1), dtype=np.int64)
        with pytest.raises(SingularSubmatrix):
            solve_hypothesis(["a"], [1], base, {"a": np.array([[1]])})


class TestSearchUnknownEntries:
    blocks = {"a": np.array([[0, 1], [1, UNKNOWN]])}

    @staticmethod
    def consistent_with(store):
        return lambda hypothesis: find_counterexample(hypothesis, store) is None

    def test_first_accepted_candidate(self):
        a = ("a",)
        store = ExampleStore(["a"], positive=[(), a * 2, a * 3], negative=[a])
        base = np.array([[1, 0], [0, 1]])

        found = search_unknown_entries(["a"], [1, 0], base, self.blocks,
                                       self.consistent_with(store))
        hypothesis, candidate = found
        assert candidate == 1
        assert hypothesis.transitions["a"].tolist() == [[0, 1], [1, 1]]

    def test_lowest_candidate_wins(self):
        a = ("a",)
        store = ExampleStore(["a"], positive=[(), a * 2], negative=[a])
        base = np.array([[1, 0], [0, 1]])

        _, candidate = search_unknown_entries(["a"], [1, 0], base, self.blocks,
                                              self.consistent_with(store))
        assert candidate == 0

    def test_base_unknowns_take_low_bits(self):
        a = ("a",)
        store = ExampleStore(["a"], positive=[(), a * 2, a * 3], negative=[a])
        base = np.array([[1, 0], [0, UNKNOWN]])
        tried = []

        def accept(hypothesis):
            tried.append(hypothesis)
            return find_counterexample(hypothesis, store) is None

        _, candidate = search_unknown_entries(["a"], [1, 0], base, self.blocks, accept)
        assert candidate == 3
        # candidates 0 and 2 leave the base singular and are never solved
        assert len(tried) == 2

    def test_nothing_unknown(self):
        base = np.eye(2, dtype=np.int64)
        blocks = {"a": np.array([[0, 1], [1, 0]])}
        assert search_unknown_entries(["a"], [1, 0], base, blocks, lambda h: True) is None

    def test_no_candidate_accepted(self):
        base = np.eye(2, dtype=np.int64)
        assert search_unknown_entries(["a"], [1, 0], base, self.blocks, lambda h: False) is None

    def test_search_space_too_large(self):
        alphabet = ["a", "b", "c"]
        base = np.full((3, 3), UNKNOWN)
        blocks = {s: np.full((3, 3), UNKNOWN) for s in alphabet}
        with pytest.raises(SearchSpaceTooLarge) as excinfo:
            search_unknown_entries(alphabet, [1, 0, 0], base, blocks, lambda h: True,
                                   max_unknowns=20)
        assert excinfo.value.issue.count == 36

        blocks = {"a": np.full((3, 3), UNKNOWN), "b": np.full((3, 3), UNKNOWN),
                  "c": np.array([[UNKNOWN, UNKNOWN, UNKNOWN], [0, 0, 0], [0, 0, 0]])}
        with pytest.raises(SearchSpaceTooLarge) as excinfo:
            search_unknown_entries(alphabet, [1, 0, 0], np.eye(3, dtype=np.int64), blocks,
                                   lambda h: True)
        assert excinfo.value.issue.count == 21
