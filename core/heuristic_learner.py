"""
Heuristic learning from partial examples.

Where the exact learner stops at the first unlabeled word it needs, this
learner picks a well-covered square submatrix of the Hankel table, fills
unknown entries by GF(2) inference or with zeros, and, when the result
misclassifies an example, searches all assignments of the unknown entries
(up to a fixed count) before expanding the table around the counterexample.
"""

import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import numpy as np

from .base_learner import Learner
from .config import LearnerConfig, SolverMethod
from .gf2 import (SingularMatrix, combination_coefficients, is_invertible,
                  solve_left, solve_via_real_embedding)
from .hypothesis import Hypothesis, find_counterexample
from .minimization import minimize
from .results import (IssueKind, LearningError, LearningIssue, LearningResult,
                      SearchSpaceTooLarge, SingularSubmatrix)
from .words import (EMPTY, UNKNOWN, ExampleStore, Word, format_word,
                    prefixes_of, suffixes_of)


def solve_hypothesis(alphabet: Sequence[str], final_vector, base: np.ndarray,
                     blocks: Dict[str, np.ndarray],
                     method: SolverMethod = SolverMethod.GF2) -> Hypothesis:
    """
    Build a hypothesis from a base matrix and per-symbol blocks.

    base[i][j] is the label of u_i·v_j and blocks[s][i][j] the label of
    u_i·s·v_j; row i of the matrix for s is the x with x · base = blocks[s][i].

    Raises:
        SingularSubmatrix: base is not invertible
    """
    transitions = {}
    for symbol in alphabet:
        block = blocks[symbol]
        matrix = np.zeros(block.shape, dtype=np.uint8)
        for i in range(block.shape[0]):
            try:
                if method == SolverMethod.REAL_EMBEDDING:
                    matrix[i] = solve_via_real_embedding(base.T, block[i])
                else:
                    matrix[i] = solve_left(base, block[i])
            except SingularMatrix as e:
                raise SingularSubmatrix(f"Base matrix is singular ({e})") from e
        transitions[symbol] = matrix
    return Hypothesis(alphabet, final_vector, transitions)


def search_unknown_entries(alphabet: Sequence[str], final_vector, base: np.ndarray,
                           blocks: Dict[str, np.ndarray],
                           accept: Callable[[Hypothesis], bool],
                           max_unknowns: int = 20,
                           method: SolverMethod = SolverMethod.GF2
                           ) -> Optional[Tuple[Hypothesis, int]]:
    """
    Try every 0/1 assignment of the UNKNOWN entries of base and blocks.

    Candidate k sets the i-th unknown entry to bit i of k; base entries
    (row-major) take the low bits, then the blocks in alphabet order.
    Candidates with a singular base are skipped before solving.

    Returns:
        (first accepted hypothesis, its candidate number), or None when no
        entry is unknown or no assignment is accepted

    Raises:
        SearchSpaceTooLarge: more than max_unknowns entries are unknown
    """
    base_unknowns = list(zip(*np.nonzero(base == UNKNOWN)))
    block_unknowns = [(symbol, i, j) for symbol in alphabet
                      for i, j in zip(*np.nonzero(blocks[symbol] == UNKNOWN))]
    total = len(base_unknowns) + len(block_unknowns)
    if total == 0:
        return None
    if total > max_unknowns:
        raise SearchSpaceTooLarge(
            f"{total} unknown entries exceed the search limit of {max_unknowns}",
            count=total)

    for candidate in range(2 ** total):
        candidate_base = base.copy()
        for bit, (i, j) in enumerate(base_unknowns):
            candidate_base[i, j] = (candidate >> bit) & 1
        if not is_invertible(candidate_base):
            continue

        candidate_blocks = {s: blocks[s].copy() for s in alphabet}
        for bit, (symbol, i, j) in enumerate(block_unknowns, start=len(base_unknowns)):
            candidate_blocks[symbol][i, j] = (candidate >> bit) & 1
        try:
            hypothesis = solve_hypothesis(alphabet, final_vector, candidate_base,
                                          candidate_blocks, method)
        except SingularSubmatrix:
            continue
        if accept(hypothesis):
            return hypothesis, candidate
    return None


class HeuristicLearner(Learner):
    """Greedy submatrix learner for incomplete example sets."""

    name = "Heuristic M2MA Learner"

    def __init__(self, store: ExampleStore, config: Optional[LearnerConfig] = None,
                 minimizer: Callable[[Hypothesis], Hypothesis] = minimize):
        # derived labels stay with this run
        super().__init__(store.view(), config, minimizer)
        self.alphabet = list(store.alphabet)

        self.rows: List[Word] = []
        self.columns: List[Word] = []
        self.state_rows: List[Word] = []
        self.state_columns: List[Word] = []  # selected columns first, then the rest

        self.base: Optional[np.ndarray] = None
        self.blocks: Dict[str, np.ndarray] = {}
        self.final_vector: Optional[np.ndarray] = None

        self.unknown_entries = 0
        self.inferred_entries = 0
        self.search_candidates = 0

    # Label access

    def _label(self, word: Word) -> int:
        return self.store.lookup(word, use_derived=True)

    def _known(self, word: Word) -> bool:
        return self._label(word) != UNKNOWN

    def _threshold(self, fraction: float, size: int) -> int:
        return int(fraction * size)

    # Table selection

    def _select_table(self):
        """
        Choose candidate rows and columns.

        Columns need enough known entries over the candidate rows; the empty
        suffix and every single symbol are always kept. Rows must be fully
        known over the chosen columns, except the empty prefix, which is
        always a row.
        """
        singles = [(symbol,) for symbol in self.alphabet]
        row_candidates = self.store.sort_words(set(self.store.prefixes()) | {EMPTY})
        column_candidates = self.store.sort_words(
            set(self.store.suffixes()) | {EMPTY, *singles})

        threshold = self._threshold(self.config.min_column_fraction, len(row_candidates))
        columns = []
        for column in column_candidates:
            known = sum(1 for row in row_candidates if self._known(row + column))
            if (column == EMPTY or len(column) == 1 or known >= threshold
                    or known >= self.config.min_column_count):
                columns.append(column)

        self.columns = columns
        self._anchor_empty_row()
        self.rows = [row for row in row_candidates
                     if row == EMPTY or all(self._known(row + column) for column in self.columns)]
        self._log(f"Selected {len(self.rows)} rows x {len(self.columns)} columns "
                  f"from {len(row_candidates)} x {len(column_candidates)} candidates")

    def _anchor_empty_row(self):
        """
        Make sure the empty prefix has a 1 somewhere in its row.

        The empty prefix is state 0 of every hypothesis. When its row is zero
        over the columns, the shortest positive example joins the columns
        (the empty prefix followed by it is that positive word). Without
        positive examples the row stays zero and the all-reject hypothesis
        follows.
        """
        if any(self._label(column) == 1 for column in self.columns):
            return
        positives = self.store.positives()
        if positives:
            self.columns = self.store.sort_words(self.columns + [positives[0]])

    def _coverage_score(self, row: Word, columns: List[Word]) -> int:
        """Number of known transition entries row·s·v over the given columns."""
        return sum(1 for symbol in self.alphabet for column in columns
                   if self._known(row + (symbol,) + column))

    def _select_submatrix(self):
        """
        Greedily grow an invertible square submatrix.

        Seeds with the empty prefix and its first column holding a 1, so the
        empty prefix is always state 0, then repeatedly adds the (row, column)
        pair that keeps the submatrix invertible and has the best coverage
        score; ties go to the first pair found. A zero row for the empty
        prefix seeds at the empty suffix and leaves a singular submatrix.
        """
        hankel = np.array([[max(self._label(r + c), 0) for c in self.columns] for r in self.rows],
                          dtype=np.uint8)
        seed_row = self.rows.index(EMPTY)
        ones = np.flatnonzero(hankel[seed_row] == 1)
        if len(ones):
            seed_column = int(ones[0])
        else:
            seed_column = self.columns.index(EMPTY) if EMPTY in self.columns else 0
        selected_rows, selected_columns = [seed_row], [seed_column]

        for _ in range(min(len(self.rows), len(self.columns))):
            best, best_score = None, -1
            for r in range(len(self.rows)):
                if r in selected_rows:
                    continue
                for c in range(len(self.columns)):
                    if c in selected_columns:
                        continue
                    submatrix = hankel[np.ix_(selected_rows + [r], selected_columns + [c])]
                    if not is_invertible(submatrix):
                        continue
                    score = self._coverage_score(
                        self.rows[r], [self.columns[k] for k in selected_columns + [c]])
                    if score > best_score:
                        best, best_score = (r, c), score
            if best is None:
                break
            selected_rows.append(best[0])
            selected_columns.append(best[1])

        self.state_rows = [self.rows[r] for r in selected_rows]
        self.state_columns = ([self.columns[c] for c in selected_columns]
                              + [c for k, c in enumerate(self.columns) if k not in selected_columns])

    # Entry inference

    def infer_entry(self, prefix: Word, suffix: Word) -> int:
        """
        Best-effort label of prefix·suffix.

        Uses the stored (or previously derived) label when there is one;
        otherwise tries every split of the word, the given split first, and
        infers the prefix part as a GF(2) combination of the state rows.
        Inferred labels are recorded as derived.
        """
        word = prefix + suffix
        value = self._label(word)
        if value != UNKNOWN:
            return value
        splits = [len(prefix)] + [k for k in range(len(word) + 1) if k != len(prefix)]
        for k in splits:
            value = self._infer_from_combination(word[:k], word[k:])
            if value != UNKNOWN:
                self.store.add_derived(word, value)
                self.inferred_entries += 1
                return value
        return UNKNOWN

    def _infer_from_combination(self, prefix: Word, suffix: Word) -> int:
        """
        Express row(prefix) as a combination of the state rows over the
        columns where everything is known, then combine their suffix labels.
        """
        lookup = self.store.lookup
        usable = [c for c in self.columns
                  if lookup(prefix + c) != UNKNOWN
                  and all(lookup(r + c) != UNKNOWN for r in self.state_rows)]
        if len(usable) < len(self.state_rows):
            return UNKNOWN

        matrix = np.array([[lookup(r + c) for c in usable] for r in self.state_rows])
        target = np.array([lookup(prefix + c) for c in usable])
        coefficients = combination_coefficients(matrix, target)
        if coefficients is None:
            return UNKNOWN

        value = 0
        for row, coefficient in zip(self.state_rows, coefficients):
            if coefficient:
                label = lookup(row + suffix)
                if label == UNKNOWN:
                    return UNKNOWN
                value ^= label
        return value

    # Hypothesis construction

    def _fill_matrices(self):
        """Compute the final vector, base matrix and blocks, keeping UNKNOWN entries."""
        n = len(self.state_rows)
        columns = self.state_columns[:n]
        self.final_vector = np.array([1 if self._label(r) == 1 else 0 for r in self.state_rows],
                                     dtype=np.uint8)
        self.base = np.array([[self.infer_entry(r, c) for c in columns] for r in self.state_rows],
                             dtype=np.int64)
        self.blocks = {
            symbol: np.array([[self.infer_entry(r + (symbol,), c) for c in columns]
                              for r in self.state_rows], dtype=np.int64)
            for symbol in self.alphabet
        }
        self.unknown_entries = int(np.count_nonzero(self.base == UNKNOWN)
                                   + sum(np.count_nonzero(b == UNKNOWN) for b in self.blocks.values()))

    def _build_hypothesis(self) -> Hypothesis:
        """Hypothesis with every unknown entry set to 0 (all-zero transitions if singular)."""
        self._select_submatrix()
        self._fill_matrices()
        base = np.where(self.base == UNKNOWN, 0, self.base)
        blocks = {s: np.where(b == UNKNOWN, 0, b) for s, b in self.blocks.items()}
        n = len(self.state_rows)
        self._log(f"  Submatrix of dimension {n}, {self.unknown_entries} unknown entries")
        try:
            return solve_hypothesis(self.alphabet, self.final_vector, base, blocks,
                                    self.config.solver)
        except SingularSubmatrix as e:
            self._report(LearningIssue(
                IssueKind.SINGULAR_SUBMATRIX,
                f"{e}; using all-zero transition matrices"))
            zeros = {s: np.zeros((n, n), dtype=np.uint8) for s in self.alphabet}
            return Hypothesis(self.alphabet, self.final_vector, zeros)

    def _search_unknowns(self) -> Optional[Hypothesis]:
        def accept(hypothesis: Hypothesis) -> bool:
            self.search_candidates += 1
            return find_counterexample(hypothesis, self.store) is None

        found = search_unknown_entries(self.alphabet, self.final_vector, self.base, self.blocks,
                                       accept, self.config.max_search_unknowns, self.config.solver)
        if found is None:
            return None
        hypothesis, candidate = found
        self._record_assignment(candidate)
        self._log(f"  Exhaustive search succeeded with assignment {candidate}")
        return hypothesis

    def _record_assignment(self, candidate: int):
        """Store the accepted values of the unknown entries as derived labels."""
        n = len(self.state_rows)
        columns = self.state_columns[:n]
        bit = 0
        for i, j in zip(*np.nonzero(self.base == UNKNOWN)):
            self.store.add_derived(self.state_rows[i] + columns[j], (candidate >> bit) & 1)
            bit += 1
        for symbol in self.alphabet:
            for i, j in zip(*np.nonzero(self.blocks[symbol] == UNKNOWN)):
                word = self.state_rows[i] + (symbol,) + columns[j]
                self.store.add_derived(word, (candidate >> bit) & 1)
                bit += 1

    # Table refinement

    def _expand_table(self, counterexample: Word) -> bool:
        """
        Add the counterexample's prefixes as rows and suffixes as columns
        when they are known often enough, plus any single-symbol column with
        a known entry.

        Returns:
            True if rows or columns were added
        """
        added = False
        row_threshold = self._threshold(self.config.expansion_fraction, len(self.columns))
        for prefix in prefixes_of(counterexample):
            if prefix in self.rows:
                continue
            known = sum(1 for c in self.columns if self._known(prefix + c))
            if known >= row_threshold or known >= self.config.expansion_count:
                self.rows.append(prefix)
                added = True

        column_threshold = self._threshold(self.config.expansion_fraction, len(self.rows))
        for suffix in suffixes_of(counterexample):
            if suffix in self.columns:
                continue
            known = sum(1 for r in self.rows if self._known(r + suffix))
            if known >= column_threshold or known >= self.config.expansion_count:
                self.columns.append(suffix)
                added = True

        for symbol in self.alphabet:
            single = (symbol,)
            if single not in self.columns and any(self._known(r + single) for r in self.rows):
                self.columns.append(single)
                added = True

        self.rows = self.store.sort_words(self.rows)
        self.columns = self.store.sort_words(self.columns)
        return added

    def _prune_for_coverage(self):
        """
        Keep only columns known on every row and rows known on every column.
        The empty prefix always stays, and its row is anchored again.
        """
        while True:
            columns = [c for c in self.columns if all(self._known(r + c) for r in self.rows)]
            columns = columns or [EMPTY]
            rows = [r for r in self.rows
                    if r == EMPTY or all(self._known(r + c) for c in columns)]
            if rows == self.rows and columns == self.columns:
                break
            self.rows, self.columns = rows, columns
        self._anchor_empty_row()
        self._log(f"  Table after pruning: {len(self.rows)} rows x {len(self.columns)} columns")

    # Main loop

    def run(self) -> LearningResult:
        """
        Execute the heuristic learning loop.

        Returns:
            LearningResult; PARTIAL when no consistent hypothesis was found
        """
        self.start_time = time.time()
        self._select_table()

        hypothesis = None
        try:
            for self.rounds in range(1, self.config.max_rounds + 1):
                hypothesis = self._build_hypothesis()
                self._log(f"Round {self.rounds}: hypothesis of dimension {hypothesis.dimension}")

                counterexample = find_counterexample(hypothesis, self.store)
                if counterexample is None:
                    break
                self.counterexamples.append(counterexample)
                self._log(f"  Counterexample: '{format_word(counterexample)}'")

                try:
                    found = self._search_unknowns()
                except SearchSpaceTooLarge as e:
                    self._report(e.issue)
                    found = None
                if found is not None:
                    hypothesis = found
                    break

                if not self._expand_table(counterexample):
                    self._report(LearningIssue(
                        IssueKind.UNRESOLVED_COUNTEREXAMPLE,
                        "Counterexample cannot extend the table",
                        [counterexample]))
                    return self._result(hypothesis, consistent=False)
                self._prune_for_coverage()
            else:
                self._report(LearningIssue(
                    IssueKind.NOT_CONVERGED,
                    f"No consistent hypothesis after {self.config.max_rounds} rounds",
                    count=self.config.max_rounds))
                return self._result(hypothesis, consistent=False)

        except LearningError as e:
            self._report(e.issue)
            return self._result(hypothesis, consistent=False)

        hypothesis = self._minimize(hypothesis)
        return self._result(hypothesis, consistent=True)

    def get_statistics(self):
        stats = super().get_statistics()
        stats.update({
            "rows": len(self.rows),
            "columns": len(self.columns),
            "unknown_entries": self.unknown_entries,
            "inferred_entries": self.inferred_entries,
            "search_candidates": self.search_candidates,
        })
        return stats
