"""
GF(2) multiplicity automaton hypothesis.

A hypothesis of dimension d has a final vector f in GF(2)^d and one d x d
matrix per symbol. A word w1...wn evaluates to e0 · M(w1) ··· M(wn) · f,
where e0 is the first unit vector and all arithmetic is mod 2.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
import numpy as np

from .gf2 import Basis, ExtendOutcome, as_gf2, matmul
from .words import Word, ExampleStore


class Hypothesis:
    """Multiplicity automaton over GF(2) with the first state as initial state."""

    def __init__(self, alphabet: Sequence[str], final_vector, transitions: Dict[str, Any]):
        """
        Args:
            alphabet: Ordered symbols
            final_vector: Length-d 0/1 vector
            transitions: symbol -> d x d 0/1 matrix

        Raises:
            ValueError: Missing symbol matrix or inconsistent shapes
        """
        self.alphabet = list(alphabet)
        self.final_vector = as_gf2(final_vector).reshape(-1)
        d = len(self.final_vector)
        if d == 0:
            raise ValueError("Hypothesis dimension must be at least 1")
        self.transitions: Dict[str, np.ndarray] = {}
        for symbol in self.alphabet:
            if symbol not in transitions:
                raise ValueError(f"No transition matrix for symbol '{symbol}'")
            matrix = as_gf2(transitions[symbol])
            if matrix.shape != (d, d):
                raise ValueError(f"Matrix for '{symbol}' has shape {matrix.shape}, expected {(d, d)}")
            self.transitions[symbol] = matrix

    @property
    def dimension(self) -> int:
        return len(self.final_vector)

    @property
    def initial_vector(self) -> np.ndarray:
        vector = np.zeros(self.dimension, dtype=np.uint8)
        vector[0] = 1
        return vector

    def state_after(self, word: Word) -> np.ndarray:
        """Row vector reached from e0 after reading word."""
        state = self.initial_vector
        for symbol in word:
            if symbol not in self.transitions:
                raise ValueError(f"Symbol '{symbol}' is not in the hypothesis alphabet")
            state = matmul(state, self.transitions[symbol])
        return state

    def evaluate(self, word: Word) -> int:
        """Value of word: 1 if accepted, 0 otherwise."""
        return int(matmul(self.state_after(word), self.final_vector))

    def accepts(self, word: Word) -> bool:
        return self.evaluate(tuple(word)) == 1

    def __len__(self) -> int:
        return self.dimension

    @classmethod
    def always_reject(cls, alphabet: Sequence[str]) -> 'Hypothesis':
        """One-dimensional hypothesis rejecting every word."""
        return cls(alphabet, [0], {s: [[0]] for s in alphabet})

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form of the hypothesis."""
        return {
            'dimension': self.dimension,
            'alphabet': list(self.alphabet),
            'final_vector': self.final_vector.tolist(),
            'transitions': {s: m.tolist() for s, m in self.transitions.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Hypothesis':
        return cls(data['alphabet'], data['final_vector'], data['transitions'])

    def describe(self) -> str:
        """Multi-line listing of the final vector and transition matrices."""
        lines = [f"M2MA of dimension {self.dimension}",
                 f"  Final vector: {self.final_vector.tolist()}"]
        for symbol in self.alphabet:
            lines.append(f"  Transition matrix for '{symbol}':")
            for row in self.transitions[symbol]:
                lines.append("    " + " ".join(str(int(v)) for v in row))
        return "\n".join(lines)

    def __str__(self) -> str:
        return f"Hypothesis(dimension={self.dimension}, |Σ|={len(self.alphabet)})"


def find_counterexample(hypothesis: Hypothesis, store: ExampleStore) -> Optional[Word]:
    """
    First known example the hypothesis misclassifies.

    Positives are scanned before negatives, each in canonical order. Only
    ground-truth labels are checked.
    """
    for word in store.positives():
        if hypothesis.evaluate(word) != 1:
            return word
    for word in store.negatives():
        if hypothesis.evaluate(word) != 0:
            return word
    return None


@dataclass
class VerificationReport:
    """Agreement between a hypothesis and a set of examples."""

    correct_positive: int = 0
    total_positive: int = 0
    correct_negative: int = 0
    total_negative: int = 0
    misclassified: List[Word] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.total_positive + self.total_negative

    @property
    def accuracy(self) -> float:
        if self.total == 0:
            return 1.0
        return (self.correct_positive + self.correct_negative) / self.total

    @property
    def is_consistent(self) -> bool:
        return not self.misclassified

    def __str__(self) -> str:
        return (f"Positive: {self.correct_positive}/{self.total_positive}, "
                f"Negative: {self.correct_negative}/{self.total_negative}, "
                f"Accuracy: {self.accuracy:.2%}")


def verify(hypothesis: Hypothesis, store: ExampleStore) -> VerificationReport:
    """Classify every known example and count agreements."""
    report = VerificationReport()
    for word in store.positives():
        report.total_positive += 1
        if hypothesis.evaluate(word) == 1:
            report.correct_positive += 1
        else:
            report.misclassified.append(word)
    for word in store.negatives():
        report.total_negative += 1
        if hypothesis.evaluate(word) == 0:
            report.correct_negative += 1
        else:
            report.misclassified.append(word)
    return report


def find_distinguishing_word(first: Hypothesis, second: Hypothesis) -> Optional[Word]:
    """
    Shortest-first search for a word the two hypotheses evaluate differently.

    Explores the reachable space of the direct sum of both automata; the
    difference function vanishes on every word iff it vanishes on a spanning
    set of reachable vectors.

    Raises:
        ValueError: The alphabets differ
    """
    if set(first.alphabet) != set(second.alphabet):
        raise ValueError(f"Alphabets differ: {first.alphabet} vs {second.alphabet}")
    d1, d2 = first.dimension, second.dimension
    final = np.concatenate([first.final_vector, second.final_vector])
    blocks = {}
    for symbol in first.alphabet:
        block = np.zeros((d1 + d2, d1 + d2), dtype=np.uint8)
        block[:d1, :d1] = first.transitions[symbol]
        block[d1:, d1:] = second.transitions[symbol]
        blocks[symbol] = block

    start = np.concatenate([first.initial_vector, second.initial_vector])
    basis = Basis(d1 + d2)
    basis.try_extend(start)
    queue = deque([(start, ())])
    while queue:
        vector, word = queue.popleft()
        if matmul(vector, final):
            return word
        for symbol in first.alphabet:
            successor = matmul(vector, blocks[symbol])
            if basis.try_extend(successor) == ExtendOutcome.ADDED:
                queue.append((successor, word + (symbol,)))
    return None


def equivalent(first: Hypothesis, second: Hypothesis) -> bool:
    """Check whether two hypotheses define the same language."""
    return find_distinguishing_word(first, second) is None

