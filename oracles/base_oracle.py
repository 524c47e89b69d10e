"""
Abstract base classes for the oracles used in active learning.

A membership oracle labels single words; an equivalence oracle looks for a
word on which a hypothesis and the target disagree. Concrete oracles:
- Example sets (passive data behind the active interface)
- DFAs (exact targets)
- PAC (statistical sampling)
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Sequence

from core.hypothesis import Hypothesis
from core.words import ExampleStore, Word


class MembershipOracle(ABC):
    """
    Abstract base class for membership oracles.

    Every answered query is logged, so the oracle doubles as a record of
    the words a learner asked about.
    """

    def __init__(self, alphabet: Sequence[str]):
        """
        Args:
            alphabet: Input alphabet
        """
        self.alphabet = list(alphabet)

        # Statistics tracking
        self.query_count = 0
        self.query_log: Dict[Word, int] = {}

    @abstractmethod
    def classify_word(self, word: Word) -> int:
        """
        Label of word without recording the query.

        Returns:
            1 if the target accepts word, 0 otherwise
        """
        pass

    def membership_query(self, word: Sequence[str]) -> int:
        """Answer and record a membership query."""
        word = tuple(word)
        self.query_count += 1
        label = self.classify_word(word)
        self.query_log[word] = label
        return label

    def membership_queries(self, words: List[Sequence[str]]) -> List[int]:
        """Batch membership queries."""
        return [self.membership_query(word) for word in words]

    def queried_words(self) -> List[Word]:
        """Distinct queried words, in the order they were first asked."""
        return list(self.query_log)

    def to_example_store(self, closed_world: bool = False) -> ExampleStore:
        """Every recorded query and its answer as a set of examples."""
        store = ExampleStore(self.alphabet, closed_world=closed_world)
        for word, label in self.query_log.items():
            store.add_example(word, label)
        return store

    def get_statistics(self) -> Dict[str, Any]:
        return {
            'type': self.__class__.__name__,
            'query_count': self.query_count,
            'distinct_queries': len(self.query_log),
        }

    def reset_statistics(self):
        """Reset counters and the query log."""
        self.query_count = 0
        self.query_log = {}


class FunctionOracle(MembershipOracle):
    """Membership oracle wrapping a predicate on words."""

    def __init__(self, alphabet: Sequence[str], predicate: Callable[[Word], bool]):
        super().__init__(alphabet)
        self.predicate = predicate

    def classify_word(self, word: Word) -> int:
        return 1 if self.predicate(tuple(word)) else 0


class EquivalenceOracle(ABC):
    """
    Abstract base class for equivalence oracles.

    All equivalence oracles must implement the find_counterexample method
    and can optionally provide statistics about their performance.
    """

    def __init__(self, alphabet: Sequence[str],
                 membership_oracle: Optional[MembershipOracle] = None):
        """
        Initialize the equivalence oracle.

        Args:
            alphabet: Input alphabet
            membership_oracle: Oracle labeling the words this oracle tests
        """
        self.alphabet = list(alphabet)
        self.membership_oracle = membership_oracle

        # Statistics tracking
        self.total_queries = 0
        self.counterexamples_found = 0
        self.total_time = 0.0

    @abstractmethod
    def find_counterexample(self,
                            hypothesis: Hypothesis,
                            iteration: int,
                            time_limit: Optional[float] = None) -> Optional[Word]:
        """
        Find a word on which the hypothesis and the target disagree.

        Args:
            hypothesis: Current hypothesis
            iteration: Current learning round
            time_limit: Optional time limit in seconds

        Returns:
            Counterexample word or None if no disagreement was found
        """
        pass

    def _timed(self, search: Callable[[], Optional[Word]]) -> Optional[Word]:
        """Run a search and update the statistics."""
        start_time = time.time()
        self.total_queries += 1
        counterexample = search()
        if counterexample is not None:
            self.counterexamples_found += 1
        self.total_time += time.time() - start_time
        return counterexample

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get performance statistics for the oracle.

        Returns:
            Dictionary of statistics
        """
        return {
            'type': self.__class__.__name__,
            'total_queries': self.total_queries,
            'counterexamples_found': self.counterexamples_found,
            'total_time': self.total_time,
            'avg_time_per_query': self.total_time / max(1, self.total_queries)
        }

    def reset_statistics(self):
        """Reset statistics counters."""
        self.total_queries = 0
        self.counterexamples_found = 0
        self.total_time = 0.0

    def __str__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(alphabet_size={len(self.alphabet)})"
