"""
Oracles for a target language given as a DFA.
"""

from typing import Optional

from core.dfa import DFA
from core.hypothesis import Hypothesis, find_distinguishing_word
from core.words import Word

from .base_oracle import EquivalenceOracle, MembershipOracle


class DFAOracle(MembershipOracle):
    """
    Membership oracle simulating a DFA.

    A missing transition rejects the word.
    """

    def __init__(self, dfa: DFA):
        super().__init__(dfa.alphabet)
        self.dfa = dfa

    def classify_word(self, word: Word) -> int:
        return self.dfa.classify_word(word)

    def get_statistics(self):
        stats = super().get_statistics()
        stats.update({
            'dfa_states': len(self.dfa),
            'positive_queries': sum(self.query_log.values()),
        })
        return stats


class DFAEquivalenceOracle(EquivalenceOracle):
    """
    Exact equivalence against a DFA.

    The DFA is embedded as a GF(2) automaton and the shortest word on which
    the two differ is returned.
    """

    def __init__(self, dfa: DFA, membership_oracle: Optional[DFAOracle] = None):
        super().__init__(dfa.alphabet, membership_oracle)
        self.dfa = dfa
        self.target = dfa.to_hypothesis()

    def find_counterexample(self, hypothesis: Hypothesis, iteration: int,
                            time_limit: Optional[float] = None) -> Optional[Word]:
        return self._timed(lambda: find_distinguishing_word(hypothesis, self.target))
