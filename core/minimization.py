"""
Minimization of GF(2) multiplicity automata.

Two linear reductions: restrict to the span of the observation vectors
M(w)·f (removes states no suffix can tell apart), then to the span of the
reachable vectors e0·M(w) (removes states no prefix reaches). The result is
a minimal automaton for the same function that again starts in e0.
"""

from collections import deque
from typing import Dict, Optional, Tuple
import numpy as np

from .gf2 import Basis, ExtendOutcome, matmul
from .hypothesis import Hypothesis

Automaton = Tuple[np.ndarray, Dict[str, np.ndarray], np.ndarray]


def _observable_part(initial: np.ndarray, transitions: Dict[str, np.ndarray],
                     final: np.ndarray, alphabet) -> Optional[Automaton]:
    basis = Basis(len(final))
    queue = deque()
    if basis.try_extend(final) == ExtendOutcome.ADDED:
        queue.append(final)
    while queue:
        vector = queue.popleft()
        for symbol in alphabet:
            successor = matmul(transitions[symbol], vector)
            if basis.try_extend(successor) == ExtendOutcome.ADDED:
                queue.append(successor)
    if len(basis) == 0:
        return None

    columns = np.array(basis.rows, dtype=np.uint8).T
    k = len(basis)
    reduced = {}
    for symbol in alphabet:
        image = matmul(transitions[symbol], columns)
        matrix = np.zeros((k, k), dtype=np.uint8)
        for j in range(k):
            matrix[:, j] = basis.express(image[:, j])
        reduced[symbol] = matrix
    return matmul(initial, columns), reduced, basis.express(final)


def _reachable_part(initial: np.ndarray, transitions: Dict[str, np.ndarray],
                    final: np.ndarray, alphabet) -> Optional[Automaton]:
    basis = Basis(len(initial))
    queue = deque()
    if basis.try_extend(initial) == ExtendOutcome.ADDED:
        queue.append(initial)
    while queue:
        vector = queue.popleft()
        for symbol in alphabet:
            successor = matmul(vector, transitions[symbol])
            if basis.try_extend(successor) == ExtendOutcome.ADDED:
                queue.append(successor)
    if len(basis) == 0:
        return None

    rows = np.array(basis.rows, dtype=np.uint8)
    reduced = {}
    for symbol in alphabet:
        image = matmul(rows, transitions[symbol])
        reduced[symbol] = np.array([basis.express(r) for r in image], dtype=np.uint8)
    return basis.express(initial), reduced, matmul(rows, final)


def minimize(hypothesis: Hypothesis) -> Hypothesis:
    """
    Minimal hypothesis computing the same function.

    Args:
        hypothesis: Hypothesis to reduce

    Returns:
        Equivalent hypothesis of minimal dimension (the one-dimensional
        always-reject hypothesis for the zero function)
    """
    alphabet = hypothesis.alphabet
    automaton = _observable_part(hypothesis.initial_vector, hypothesis.transitions,
                                 hypothesis.final_vector, alphabet)
    if automaton is not None:
        automaton = _reachable_part(*automaton, alphabet)
    if automaton is None:
        return Hypothesis.always_reject(alphabet)

    # The initial vector is the first reachable basis row, so its coordinates are e0
    _, transitions, final = automaton
    return Hypothesis(alphabet, final, transitions)
