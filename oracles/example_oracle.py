"""
Equivalence checking against a fixed set of examples.
"""

from typing import Optional

from core.hypothesis import Hypothesis
from core.words import UNKNOWN, ExampleStore, Word

from .base_oracle import EquivalenceOracle


class ExampleSetOracle(EquivalenceOracle):
    """
    Equivalence oracle that checks a hypothesis against every example.

    Returns the smallest misclassified example in canonical order (length
    first, then alphabet order).
    """

    def __init__(self, store: ExampleStore):
        super().__init__(store.alphabet)
        self.store = store

    def find_counterexample(self, hypothesis: Hypothesis, iteration: int,
                            time_limit: Optional[float] = None) -> Optional[Word]:
        def search():
            for word in self.store.known_words():
                label = self.store.lookup(word)
                if label != UNKNOWN and hypothesis.evaluate(word) != label:
                    return word
            return None

        return self._timed(search)
