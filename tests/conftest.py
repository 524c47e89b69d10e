"""
Shared fixtures: small example sets and target automata.
"""

import pytest

from core.dfa import DFA
from core.words import ExampleStore


def parity_dfa():
    """Words over {a, b} with an even number of a's."""
    return DFA(states={"q0", "q1"}, alphabet=["a", "b"],
               transitions={"q0": {"a": "q1", "b": "q0"}, "q1": {"a": "q0", "b": "q1"}},
               initial_state="q0", final_states={"q0"})


def mod3_dfa():
    """Words over {a} whose length is a multiple of 3."""
    return DFA(states={"q0", "q1", "q2"}, alphabet=["a"],
               transitions={"q0": {"a": "q1"}, "q1": {"a": "q2"}, "q2": {"a": "q0"}},
               initial_state="q0", final_states={"q0"})


@pytest.fixture
def closed_store():
    return ExampleStore(["a", "b"],
                        positive=[(), ("a", "a"), ("b", "b")],
                        negative=[("a",), ("b",), ("a", "b")],
                        closed_world=True)


@pytest.fixture
def unary_parity_store():
    a = ("a",)
    return ExampleStore(["a"], positive=[(), a * 2, a * 4], negative=[a, a * 3])


@pytest.fixture
def parity():
    return parity_dfa()


@pytest.fixture
def mod3():
    return mod3_dfa()
