"""
Deterministic Finite Automaton (DFA) implementation.

A DFA is formally a 5-tuple (Q, Σ, δ, q₀, F) where Q is the state set,
Σ is the alphabet, δ: Q × Σ → Q is the transition function,
q₀ is the initial state, and F is the set of accepting states.

DFAs serve as targets for the oracles and experiments; the transition
function may be partial, in which case a missing transition rejects.
"""

import re
from pathlib import Path
from typing import Set, Dict, List, Optional, Sequence, Union
import numpy as np

from .hypothesis import Hypothesis

# "q0 [shape=doublecircle];" or "q0 [shape=circle];"
STATE_PATTERN = re.compile(r'\s*"?(\w+)"?\s*\[.*shape=(doublecircle|circle).*\];')
# "q0 -> q1 [label="a"];", several symbols may share an edge as "a,b"
TRANSITION_PATTERN = re.compile(r'\s*"?(\w+)"?\s*->\s*"?(\w+)"?\s*\[.*label="([^"]+)".*\];')

# Graph-level statements that look like state declarations
RESERVED_NAMES = {"node", "edge", "graph"}


class DFA:
    """Deterministic Finite Automaton over symbol sequences."""

    def __init__(self,
                 states: Optional[Set[str]] = None,
                 alphabet: Optional[List[str]] = None,
                 transitions: Optional[Dict[str, Dict[str, str]]] = None,
                 initial_state: Optional[str] = None,
                 final_states: Optional[Set[str]] = None):
        """
        Initialize DFA.

        Args:
            states: Set of state identifiers
            alphabet: List of alphabet symbols
            transitions: Nested dict mapping state × symbol → state
            initial_state: Starting state identifier
            final_states: Set of accepting state identifiers
        """
        self.states = set(states or set())
        self.alphabet = list(alphabet or [])
        self.delta = transitions or {}
        self.q0 = initial_state
        self.F = set(final_states or set())
        if self.q0 is not None:
            self.states.add(self.q0)

    @classmethod
    def from_dot(cls, text: str) -> 'DFA':
        """
        Parse a DFA from Graphviz DOT text.

        The first declared state is the start state; doublecircle marks
        accepting states. The alphabet is the sorted set of edge labels.

        Raises:
            ValueError: No state is declared
        """
        states: Set[str] = set()
        final_states: Set[str] = set()
        transitions: Dict[str, Dict[str, str]] = {}
        symbols: Set[str] = set()
        start = None

        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("//"):
                continue

            match = TRANSITION_PATTERN.match(line)
            if match:
                source, target, label = match.groups()
                states.update((source, target))
                for symbol in label.split(","):
                    symbol = symbol.strip()
                    if symbol:
                        symbols.add(symbol)
                        transitions.setdefault(source, {})[symbol] = target
                continue

            match = STATE_PATTERN.match(line)
            if match and match.group(1) not in RESERVED_NAMES:
                state, shape = match.groups()
                states.add(state)
                if shape == "doublecircle":
                    final_states.add(state)
                if start is None:
                    start = state

        if start is None:
            raise ValueError("No start state found in DFA (no states declared)")

        return cls(states=states, alphabet=sorted(symbols), transitions=transitions,
                   initial_state=start, final_states=final_states)

    def missing_transitions(self) -> int:
        """Number of (state, symbol) pairs without a transition."""
        return sum(1 for state in self.states for symbol in self.alphabet
                   if symbol not in self.delta.get(state, {}))

    def accepts(self, word: Sequence[str]) -> bool:
        """
        Determine if DFA accepts given word.

        Args:
            word: Sequence of symbols

        Returns:
            True if word leads to accepting state; False if a transition is missing

        Time Complexity: O(|word|)
        """
        current_state = self.get_state_after(word)
        return current_state is not None and current_state in self.F

    def classify_word(self, word: Sequence[str]) -> int:
        """Label of word: 1 if accepted, 0 otherwise."""
        return 1 if self.accepts(word) else 0

    def get_state_after(self, word: Sequence[str]) -> Optional[str]:
        """
        Get state reached after processing word.

        Args:
            word: Sequence of symbols

        Returns:
            State identifier or None if undefined
        """
        current = self.q0
        for symbol in word:
            if current not in self.delta or symbol not in self.delta[current]:
                return None
            current = self.delta[current][symbol]
        return current

    def minimize(self) -> 'DFA':
        """
        Return minimized equivalent DFA by partition refinement.

        Returns:
            New minimized DFA instance

        Time Complexity: O(|Σ| × n²) worst case
        """
        reachable = self._reachable_states()
        # Initial partition: accepting vs non-accepting
        P = [reachable & self.F, reachable - self.F]
        P = [p for p in P if p]

        # Refine partitions
        while True:
            new_P = []
            for partition in P:
                new_P.extend(self._refine_partition(partition, P))
            if len(new_P) == len(P):
                break
            P = new_P

        return self._build_minimized_dfa(P)

    def _reachable_states(self) -> Set[str]:
        seen = {self.q0}
        stack = [self.q0]
        while stack:
            state = stack.pop()
            for target in self.delta.get(state, {}).values():
                if target not in seen:
                    seen.add(target)
                    stack.append(target)
        return seen

    def _refine_partition(self, partition: Set[str],
                          all_partitions: List[Set[str]]) -> List[Set[str]]:
        """Helper for partition refinement in minimization."""
        if len(partition) <= 1:
            return [partition]

        block_of = {state: i for i, p in enumerate(all_partitions) for state in p}
        groups: Dict[tuple, Set[str]] = {}
        for state in partition:
            signature = tuple(block_of.get(self.delta.get(state, {}).get(symbol), -1)
                              for symbol in self.alphabet)
            groups.setdefault(signature, set()).add(state)

        return [groups[key] for key in sorted(groups, key=lambda g: min(groups[g]))]

    def _build_minimized_dfa(self, partitions: List[Set[str]]) -> 'DFA':
        """Construct minimized DFA from partition refinement result."""
        representative = {}
        for partition in partitions:
            rep = min(partition)  # Canonical choice
            for state in partition:
                representative[state] = rep

        new_transitions = {}
        for partition in partitions:
            rep = representative[next(iter(partition))]
            new_transitions[rep] = {}
            sample_state = min(partition)
            for symbol, target in self.delta.get(sample_state, {}).items():
                if target in representative:
                    new_transitions[rep][symbol] = representative[target]

        return DFA(
            states=set(representative.values()),
            alphabet=self.alphabet,
            transitions=new_transitions,
            initial_state=representative[self.q0],
            final_states={representative[s] for s in self.F if s in representative}
        )

    def ordered_states(self) -> List[str]:
        """States with the start state first, the rest sorted."""
        return [self.q0] + sorted(self.states - {self.q0})

    def to_hypothesis(self) -> Hypothesis:
        """
        The same language as a GF(2) multiplicity automaton.

        Each state becomes a unit vector (the start state is e0); a rejecting
        sink is added when some transition is missing.
        """
        states = self.ordered_states()
        sink = len(states) if self.missing_transitions() else None
        dimension = len(states) + (1 if sink is not None else 0)
        index = {state: i for i, state in enumerate(states)}

        final_vector = np.zeros(dimension, dtype=np.uint8)
        for state in self.F:
            final_vector[index[state]] = 1

        transitions = {}
        for symbol in self.alphabet:
            matrix = np.zeros((dimension, dimension), dtype=np.uint8)
            for state in states:
                target = self.delta.get(state, {}).get(symbol)
                matrix[index[state], index[target] if target is not None else sink] = 1
            if sink is not None:
                matrix[sink, sink] = 1
            transitions[symbol] = matrix
        return Hypothesis(self.alphabet, final_vector, transitions)

    def __len__(self) -> int:
        """Return number of states."""
        return len(self.states)

    def __str__(self) -> str:
        """String representation for debugging."""
        return (f"DFA(|Q|={len(self.states)}, |Σ|={len(self.alphabet)}, "
                f"q0={self.q0}, |F|={len(self.F)})")

    def to_dot(self) -> str:
        """
        Generate Graphviz DOT representation.

        The start state is declared first so that from_dot recovers it.

        Returns:
            DOT format string
        """
        lines = ["digraph DFA {", "    rankdir=LR;"]

        for state in self.ordered_states():
            shape = "doublecircle" if state in self.F else "circle"
            lines.append(f'    {state} [shape={shape}];')

        for state in self.ordered_states():
            for symbol in self.alphabet:
                target = self.delta.get(state, {}).get(symbol)
                if target is not None:
                    lines.append(f'    {state} -> {target} [label="{symbol}"];')

        lines.append("}")
        return "\n".join(lines)


def load_dfa(path: Union[str, Path]) -> DFA:
    """
    Load a DFA from a DOT file.

    Raises:
        ValueError: The file declares no states
    """
    return DFA.from_dot(Path(path).read_text())


def save_dfa(dfa: DFA, path: Union[str, Path]):
    Path(path).write_text(dfa.to_dot() + "\n")
