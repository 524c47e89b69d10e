"""
Tests for hypotheses, verification, equivalence and minimization
"""

import numpy as np
import pytest

from core.dfa import DFA
from core.hypothesis import (Hypothesis, equivalent, find_counterexample,
                             find_distinguishing_word, verify)
from core.minimization import minimize
from core.words import ExampleStore, all_words


def redundant_parity_dfa():
    """Even number of a's, with four states where two would do."""
    return DFA(states={"q0", "q1", "q2", "q3"}, alphabet=["a"],
               transitions={"q0": {"a": "q1"}, "q1": {"a": "q2"},
                            "q2": {"a": "q3"}, "q3": {"a": "q0"}},
               initial_state="q0", final_states={"q0", "q2"})


class TestHypothesis:
    def test_evaluate(self):
        hypothesis = Hypothesis(["a"], [1, 0], {"a": [[0, 1], [1, 0]]})
        assert hypothesis.evaluate(()) == 1
        assert hypothesis.evaluate(("a",)) == 0
        assert hypothesis.accepts(["a", "a"])
        assert hypothesis.state_after(("a",)).tolist() == [0, 1]

    def test_validation(self):
        with pytest.raises(ValueError):
            Hypothesis(["a", "b"], [1], {"a": [[1]]})
        with pytest.raises(ValueError):
            Hypothesis(["a"], [1, 0], {"a": [[1]]})
        with pytest.raises(ValueError):
            Hypothesis(["a"], [], {"a": []})

    def test_unknown_symbol(self):
        hypothesis = Hypothesis.always_reject(["a"])
        with pytest.raises(ValueError):
            hypothesis.evaluate(("b",))

    def test_always_reject(self):
        hypothesis = Hypothesis.always_reject(["a", "b"])
        assert hypothesis.dimension == 1
        assert not any(hypothesis.accepts(w) for w in all_words(["a", "b"], 3))

    def test_dict_round_trip(self, parity):
        hypothesis = parity.to_hypothesis()
        restored = Hypothesis.from_dict(hypothesis.to_dict())
        assert restored.dimension == hypothesis.dimension
        assert equivalent(restored, hypothesis)

    def test_describe(self):
        text = Hypothesis(["a"], [1, 0], {"a": [[0, 1], [1, 0]]}).describe()
        assert "dimension 2" in text
        assert "Transition matrix for 'a'" in text


class TestVerification:
    def test_counterexample_order(self):
        store = ExampleStore(["a", "b"], positive=[("a", "a"), ("b",)], negative=[()])
        hypothesis = Hypothesis(["a", "b"], [1], {"a": [[1]], "b": [[1]]})
        # positives first, each in canonical order
        assert find_counterexample(hypothesis, store) == ()
        assert find_counterexample(Hypothesis.always_reject(["a", "b"]), store) == ("b",)

    def test_verify_report(self, closed_store):
        report = verify(Hypothesis.always_reject(["a", "b"]), closed_store)
        assert report.total == 6
        assert report.correct_negative == 3
        assert report.correct_positive == 0
        assert report.accuracy == 0.5
        assert not report.is_consistent
        assert report.misclassified == [(), ("a", "a"), ("b", "b")]

    def test_empty_store_is_consistent(self):
        report = verify(Hypothesis.always_reject(["a"]), ExampleStore(["a"]))
        assert report.accuracy == 1.0
        assert report.is_consistent


class TestEquivalence:
    def test_shortest_distinguishing_word(self, parity):
        target = parity.to_hypothesis()
        assert find_distinguishing_word(target, Hypothesis.always_reject(["a", "b"])) == ()
        accept_all = Hypothesis(["a", "b"], [1], {"a": [[1]], "b": [[1]]})
        assert find_distinguishing_word(target, accept_all) == ("a",)

    def test_equivalent_despite_dimension(self, parity):
        redundant = redundant_parity_dfa().to_hypothesis()
        unary_parity = Hypothesis(["a"], [1, 0], {"a": [[0, 1], [1, 0]]})
        assert redundant.dimension == 4
        assert equivalent(redundant, unary_parity)

    def test_alphabets_must_match(self, parity):
        with pytest.raises(ValueError):
            find_distinguishing_word(parity.to_hypothesis(), Hypothesis.always_reject(["a"]))


class TestMinimization:
    def test_redundant_states_removed(self):
        hypothesis = redundant_parity_dfa().to_hypothesis()
        minimal = minimize(hypothesis)
        assert minimal.dimension == 2
        assert equivalent(minimal, hypothesis)
        for word in all_words(["a"], 8):
            assert minimal.evaluate(word) == hypothesis.evaluate(word)

    def test_unreachable_states_removed(self, parity):
        dfa = DFA(states={"q0", "q1", "dead"}, alphabet=parity.alphabet,
                  transitions={**parity.delta, "dead": {"a": "dead", "b": "q0"}},
                  initial_state="q0", final_states={"q0", "dead"})
        minimal = minimize(dfa.to_hypothesis())
        assert minimal.dimension == 2
        assert equivalent(minimal, parity.to_hypothesis())

    def test_minimal_is_unchanged_in_size(self, mod3):
        assert minimize(mod3.to_hypothesis()).dimension == 3

    def test_zero_function(self):
        hypothesis = Hypothesis(["a"], [0, 0], {"a": [[1, 1], [0, 1]]})
        minimal = minimize(hypothesis)
        assert minimal.dimension == 1
        assert minimal.final_vector.tolist() == [0]

    def test_initial_state_preserved(self):
        # a only ever moves state 0 to state 1, and the empty word is rejected
        hypothesis = Hypothesis(["a"], np.array([0, 1, 1]),
                                {"a": [[0, 1, 0], [0, 0, 0], [0, 0, 0]]})
        minimal = minimize(hypothesis)
        assert minimal.dimension == 2
        assert minimal.evaluate(()) == 0
        assert minimal.evaluate(("a",)) == 1
        assert minimal.evaluate(("a", "a")) == 0
