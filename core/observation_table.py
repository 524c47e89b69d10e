"""
Observation table (finite Hankel matrix) for GF(2) automaton learning.

Rows are prefixes, columns are suffixes, and cell (u, v) holds the label of
u·v, which may be UNKNOWN. A GF(2) basis of fully known rows gives the states
of the hypothesis; the table is closed when every basis row extended by a
symbol is fully known and lies in the span of the basis.
"""

from typing import Dict, List, Optional
import numpy as np

from .config import LearnerConfig
from .gf2 import Basis, ExtendOutcome, NotInSpan, as_gf2, has_unknown
from .hypothesis import Hypothesis
from .results import InconsistentBasis, InsufficientInformation, NotConverged
from .words import (EMPTY, UNKNOWN, ExampleStore, Word, all_words, format_word,
                    prefixes_of, suffixes_of)


class ObservationTable:
    """Prefix x suffix table over an example store, with its GF(2) basis."""

    def __init__(self, store: ExampleStore, config: Optional[LearnerConfig] = None):
        """
        Initialize an empty table.

        Args:
            store: Source of labels (examples or an oracle-backed store)
            config: Learner configuration
        """
        self.store = store
        self.alphabet = list(store.alphabet)
        self.config = config or LearnerConfig()

        self.prefixes: List[Word] = []
        self.suffixes: List[Word] = []
        self.cells: Dict[Word, np.ndarray] = {}  # prefix -> labels over suffixes
        self._suffix_index: Dict[Word, int] = {}

        self.basis: Optional[Basis] = None
        self.coverage_length: Optional[int] = None

        # Statistics for analysis
        self.lookup_count = 0
        self.closure_passes = 0

    def extract(self):
        """
        Seed rows and columns from the examples.

        Columns: the empty word, every symbol, every suffix of length <= L
        of a known word and every word of length <= L, where L is the
        longest length with full coverage. Rows: the empty word, every
        symbol and every prefix of a known word.
        """
        if self.config.coverage_length is not None:
            self.coverage_length = self.config.coverage_length
        else:
            self.coverage_length = self.store.max_full_coverage_length()

        singles = [(symbol,) for symbol in self.alphabet]
        suffixes = {EMPTY, *singles}
        suffixes.update(self.store.suffixes(self.coverage_length))
        suffixes.update(all_words(self.alphabet, self.coverage_length))
        prefixes = {EMPTY, *singles}
        prefixes.update(self.store.prefixes())

        self.suffixes = self.store.sort_words(suffixes)
        self._suffix_index = {s: j for j, s in enumerate(self.suffixes)}
        self.prefixes = self.store.sort_words(prefixes)
        self.cells = {}

    def build(self):
        """Fill every cell from the store."""
        for prefix in self.prefixes:
            self.cells[prefix] = self._compute_row(prefix)

    def _lookup(self, word: Word) -> int:
        self.lookup_count += 1
        return self.store.lookup(word)

    def _compute_row(self, prefix: Word) -> np.ndarray:
        return np.array([self._lookup(prefix + suffix) for suffix in self.suffixes],
                        dtype=np.int64)

    def row(self, prefix: Word) -> np.ndarray:
        return self.cells[prefix]

    def add_prefix(self, prefix: Word) -> bool:
        """Append a row; returns False if it already exists."""
        if prefix in self.cells:
            return False
        self.prefixes.append(prefix)
        self.cells[prefix] = self._compute_row(prefix)
        return True

    def add_suffix(self, suffix: Word) -> bool:
        """Append a column; returns False if it already exists."""
        if suffix in self._suffix_index:
            return False
        self._suffix_index[suffix] = len(self.suffixes)
        self.suffixes.append(suffix)
        for prefix in self.prefixes:
            value = self._lookup(prefix + suffix)
            self.cells[prefix] = np.append(self.cells[prefix], value)
        return True

    def find_basis(self) -> Basis:
        """
        Extract a GF(2) basis from the fully known rows, in table order.

        The empty prefix always roots the basis so that the first unit
        vector is the initial state; when its row is all zero or not fully
        known it enters as a trivial row without pivot. Rows with unknown
        entries are skipped.
        """
        basis = Basis(len(self.suffixes))
        root = self.cells[EMPTY]
        if basis.try_extend(root, EMPTY) != ExtendOutcome.ADDED:
            basis.add_trivial(EMPTY, root)
        for prefix in self.prefixes:
            if prefix != EMPTY:
                basis.try_extend(self.cells[prefix], prefix)
        self.basis = basis
        return basis

    def check_closure(self) -> List[Word]:
        """
        Collect the unlabeled words that keep the table from being closed.

        For every basis prefix u and symbol s the row of u·s must be fully
        known; when u·s is not a row yet, every u·s·v over the columns is
        checked instead. A trivial root must be fully known as well.

        Returns:
            Missing words without duplicates, in discovery order
        """
        missing: Dict[Word, None] = {}
        root = self.basis.rows[0]
        if self.basis.pivots[0] is None and has_unknown(root):
            for j in np.nonzero(root == UNKNOWN)[0]:
                missing[self.suffixes[j]] = None

        for u in self.basis.keys:
            for symbol in self.alphabet:
                extended = u + (symbol,)
                if extended in self.cells:
                    row = self.cells[extended]
                    for j in np.nonzero(row == UNKNOWN)[0]:
                        missing[extended + self.suffixes[j]] = None
                else:
                    for suffix in self.suffixes:
                        word = extended + suffix
                        if self._lookup(word) == UNKNOWN:
                            missing[word] = None
        return list(missing)

    def extend_basis(self) -> bool:
        """
        One closure pass: add every extension row u·s of a basis row, and
        move fully known extension rows outside the span into the basis.

        Returns:
            True if the basis grew
        """
        changed = False
        for u in list(self.basis.keys):
            for symbol in self.alphabet:
                extended = u + (symbol,)
                self.add_prefix(extended)
                row = self.cells[extended]
                if has_unknown(row):
                    continue
                if self.basis.try_extend(row, extended) == ExtendOutcome.ADDED:
                    changed = True
        return changed

    def make_closed(self) -> int:
        """
        Grow the basis until the table is closed.

        Returns:
            Number of closure passes used

        Raises:
            InsufficientInformation: Some required word is unlabeled
            NotConverged: The basis was still growing after max_iterations passes
        """
        for iteration in range(1, self.config.max_iterations + 1):
            self.closure_passes += 1
            missing = self.check_closure()
            if missing:
                raise InsufficientInformation(
                    f"{len(missing)} unlabeled words are needed to close the table", missing)
            if not self.extend_basis():
                return iteration
        raise NotConverged(
            f"Basis still growing after {self.config.max_iterations} closure passes",
            count=self.config.max_iterations)

    def construct_hypothesis(self) -> Hypothesis:
        """
        Build the hypothesis from a closed table.

        The final vector holds each basis row's label at the empty suffix;
        row i of the matrix for symbol s holds the coefficients of row(u_i·s)
        over the basis rows.

        Raises:
            InconsistentBasis: An extension row is not in the span of the basis
        """
        empty_column = self._suffix_index[EMPTY]
        final_vector = as_gf2([row[empty_column] for row in self.basis.rows])

        transitions = {}
        for symbol in self.alphabet:
            matrix = np.zeros((len(self.basis), len(self.basis)), dtype=np.uint8)
            for i, u in enumerate(self.basis.keys):
                extended = u + (symbol,)
                try:
                    matrix[i] = self.basis.express(self.cells[extended])
                except (KeyError, NotInSpan) as e:
                    raise InconsistentBasis(
                        f"Row '{format_word(extended)}' is not a combination of the basis rows ({e})",
                        [extended]) from e
            transitions[symbol] = matrix
        return Hypothesis(self.alphabet, final_vector, transitions)

    def add_counterexample(self, word: Word) -> bool:
        """
        Add every prefix of word as a row and every suffix as a column,
        then re-extract the basis.

        Returns:
            True if the table grew
        """
        grew = False
        for prefix in prefixes_of(word):
            grew = self.add_prefix(prefix) or grew
        for suffix in suffixes_of(word):
            grew = self.add_suffix(suffix) or grew
        if grew:
            self.find_basis()
        return grew

    def unknown_count(self) -> int:
        return int(sum(np.count_nonzero(row == UNKNOWN) for row in self.cells.values()))

    def get_statistics(self) -> Dict[str, int]:
        """Return table statistics."""
        return {
            "prefixes": len(self.prefixes),
            "suffixes": len(self.suffixes),
            "basis_dimension": len(self.basis) if self.basis is not None else 0,
            "coverage_length": self.coverage_length,
            "unknown_cells": self.unknown_count(),
            "lookups": self.lookup_count,
            "closure_passes": self.closure_passes,
        }

    def __str__(self) -> str:
        """String representation for debugging."""
        lines = ["Observation Table:"]
        lines.append(f"  |prefixes| = {len(self.prefixes)}, |suffixes| = {len(self.suffixes)}")
        if self.basis is not None:
            lines.append(f"  Basis dimension: {len(self.basis)}")

        # Table visualization, basis rows marked with *
        if len(self.prefixes) <= 12 and len(self.suffixes) <= 12:
            names = [format_word(s) or "ε" for s in self.suffixes]
            width = max([3] + [len(n) for n in names])
            label_width = max([3] + [len(format_word(p)) for p in self.prefixes]) + 2
            lines.append(" " * label_width + " ".join(f"{n:>{width}}" for n in names))
            basis_keys = set(self.basis.keys) if self.basis is not None else set()
            for prefix in self.prefixes:
                mark = "*" if prefix in basis_keys else " "
                label = (format_word(prefix) or "ε") + mark
                values = ["?" if v == UNKNOWN else str(int(v)) for v in self.cells.get(prefix, [])]
                lines.append(f"{label:>{label_width}} " + " ".join(f"{v:>{width}}" for v in values))
        return "\n".join(lines)
