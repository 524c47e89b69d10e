"""
Tests for DFA parsing and example file handling
"""

import json

import pytest

from core.dfa import DFA, load_dfa, save_dfa
from core.hypothesis import equivalent
from core.sample_io import (add_redundant_examples, examples_from_dict, load_examples,
                            save_examples, shuffle_samples)
from core.words import ExampleStore, all_words

PARITY_DOT = """digraph DFA {
    rankdir=LR;
    node [shape=circle];
    q0 [shape=doublecircle];
    q1 [shape=circle];
    q0 -> q1 [label="a"];
    q1 -> q0 [label="a"];
    q0 -> q0 [label="b"];
    q1 -> q1 [label="b"];
}
"""


class TestDFA:
    def test_from_dot(self, parity):
        dfa = DFA.from_dot(PARITY_DOT)
        assert dfa.q0 == "q0"
        assert dfa.F == {"q0"}
        assert dfa.alphabet == ["a", "b"]
        assert len(dfa) == 2
        for word in all_words(["a", "b"], 4):
            assert dfa.accepts(word) == parity.accepts(word)

    def test_shared_edge_labels(self):
        dfa = DFA.from_dot('digraph {\n s [shape=doublecircle];\n s -> s [label="x,y"];\n}')
        assert dfa.alphabet == ["x", "y"]
        assert dfa.accepts(("x", "y", "x"))

    def test_quoted_names(self):
        dfa = DFA.from_dot('"0" [shape=circle];\n"1" [shape=doublecircle];\n"0" -> "1" [label="a"];')
        assert dfa.q0 == "0"
        assert dfa.accepts(("a",))
        assert not dfa.accepts(("a", "a"))

    def test_no_states(self):
        with pytest.raises(ValueError):
            DFA.from_dot("digraph {\n}")

    def test_dot_round_trip(self, parity):
        restored = DFA.from_dot(parity.to_dot())
        assert restored.q0 == parity.q0
        assert equivalent(restored.to_hypothesis(), parity.to_hypothesis())

    def test_save_and_load(self, parity, tmp_path):
        path = tmp_path / "parity.dot"
        save_dfa(parity, path)
        assert load_dfa(path).accepts(("a", "b", "a"))

    def test_missing_transitions(self):
        dfa = DFA(states={"q0", "q1"}, alphabet=["a", "b"],
                  transitions={"q0": {"a": "q1"}},
                  initial_state="q0", final_states={"q1"})
        assert dfa.missing_transitions() == 3
        assert dfa.get_state_after(("b",)) is None

        hypothesis = dfa.to_hypothesis()
        assert hypothesis.dimension == 3
        for word in all_words(["a", "b"], 3):
            assert hypothesis.accepts(word) == dfa.accepts(word)

    def test_minimize(self):
        dfa = DFA(states={"q0", "q1", "q2", "q3", "q4"}, alphabet=["a"],
                  transitions={"q0": {"a": "q1"}, "q1": {"a": "q2"}, "q2": {"a": "q3"},
                               "q3": {"a": "q0"}, "q4": {"a": "q4"}},
                  initial_state="q0", final_states={"q0", "q2"})
        minimal = dfa.minimize()
        assert len(minimal) == 2
        for word in all_words(["a"], 6):
            assert minimal.accepts(word) == dfa.accepts(word)


class TestSampleFiles:
    def test_save_and_load(self, closed_store, tmp_path):
        path = tmp_path / "examples.json"
        save_examples(closed_store, path, metadata={"source": "test"})

        data = json.loads(path.read_text())
        assert data["metadata"] == {"alphabet": ["a", "b"], "source": "test"}
        assert data["Positive sample"] == ["", "a a", "b b"]
        assert data["Negative sample"] == ["a", "b", "a b"]

        store = load_examples(path)
        assert not store.closed_world
        assert store.positives() == closed_store.positives()
        assert store.negatives() == closed_store.negatives()

    def test_top_level_alphabet(self):
        store = examples_from_dict({"alphabet": ["x"], "Positive sample": ["x x"]},
                                   closed_world=True)
        assert store.lookup(("x", "x")) == 1
        assert store.lookup(("x",)) == 0

    def test_missing_alphabet(self):
        with pytest.raises(ValueError):
            examples_from_dict({"Positive sample": ["a"]})

    def test_unknown_symbol(self):
        with pytest.raises(ValueError):
            examples_from_dict({"alphabet": ["a"], "Negative sample": ["a c"]})

    def test_shuffle_keeps_examples(self, tmp_path):
        store = ExampleStore(["a", "b"])
        for word in all_words(["a", "b"], 3):
            store.add_example(word, len(word) % 2)
        source, target = tmp_path / "in.json", tmp_path / "out.json"
        save_examples(store, source)

        shuffle_samples(source, target, seed=3)
        shuffled = load_examples(target)
        assert shuffled.positive == store.positive
        assert shuffled.negative == store.negative

    def test_add_redundant_examples(self, parity):
        store = ExampleStore(["a", "b"], positive=[()])
        added = add_redundant_examples(store, parity, count=10, min_length=2, max_length=6, seed=4)

        assert len(added) == 10
        assert len(store) == 11
        for word in added:
            assert 2 <= len(word) <= 6
            assert store.lookup(word) == parity.classify_word(word)

    def test_add_redundant_examples_gives_up(self, parity):
        store = ExampleStore(["a", "b"])
        for word in all_words(["a", "b"], 1):
            store.add_example(word, parity.classify_word(word))
        added = add_redundant_examples(store, parity, count=5, min_length=1, max_length=1, seed=0)
        assert added == []
