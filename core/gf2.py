"""
Linear algebra over GF(2).

Vectors and matrices are numpy arrays of 0/1 values. Table rows may carry
UNKNOWN (-1) entries; such rows are rejected by the basis rather than read
as zeros.
"""

from enum import Enum
from typing import Hashable, List, Optional, Tuple
import numpy as np

from .words import UNKNOWN


class NotInSpan(ArithmeticError):
    """Raised when a vector is not a GF(2) combination of the basis."""
    pass


class SingularMatrix(ArithmeticError):
    """Raised when a square system has no unique GF(2) solution."""
    pass


class ExtendOutcome(Enum):
    """Result of offering a row to a basis."""
    ADDED = "added"
    DEPENDENT = "dependent"
    HAS_UNKNOWN = "has_unknown"


def as_gf2(values) -> np.ndarray:
    """Copy values into a uint8 0/1 array."""
    return (np.asarray(values, dtype=np.int64) % 2).astype(np.uint8)


def has_unknown(row) -> bool:
    return bool(np.any(np.asarray(row) == UNKNOWN))


def matmul(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Matrix (or vector-matrix) product reduced mod 2."""
    product = np.asarray(a, dtype=np.int64) @ np.asarray(b, dtype=np.int64)
    return (product % 2).astype(np.uint8)


class Basis:
    """
    Ordered set of GF(2)-independent row vectors with pivot columns.

    Every stored vector is reduced against all earlier ones and has a unique
    pivot (its lowest set column). For each stored vector the basis also
    keeps its combination of the original, unreduced rows, so coefficients
    returned by `express` refer to the rows as they were offered.
    """

    def __init__(self, width: int):
        self.width = width
        self.keys: List[Hashable] = []
        self.rows: List[np.ndarray] = []       # original rows as offered
        self.vectors: List[np.ndarray] = []    # reduced rows
        self.pivots: List[Optional[int]] = []
        self._provenance: List[np.ndarray] = []

    def __len__(self) -> int:
        return len(self.vectors)

    @property
    def dimension(self) -> int:
        return len(self.vectors)

    def reduce(self, row) -> Tuple[np.ndarray, bool, np.ndarray]:
        """
        Reduce a fully known row against the basis.

        XORs the row with every stored vector whose pivot bit is set in the
        running residual, in insertion order.

        Returns:
            (residual, residual is nonzero, coefficients over original rows)
        """
        residual = as_gf2(row)
        coefficients = np.zeros(len(self.vectors), dtype=np.uint8)
        for k, (vector, pivot) in enumerate(zip(self.vectors, self.pivots)):
            if pivot is not None and residual[pivot]:
                residual ^= vector
                provenance = self._provenance[k]
                coefficients[:len(provenance)] ^= provenance
        return residual, bool(residual.any()), coefficients

    def try_extend(self, row, key: Hashable = None) -> ExtendOutcome:
        """
        Offer a row to the basis.

        Rows with unknown entries are rejected outright. Otherwise the
        reduced row is appended when nonzero, with its pivot at the first 1.
        """
        if has_unknown(row):
            return ExtendOutcome.HAS_UNKNOWN
        residual, nonzero, coefficients = self.reduce(row)
        if not nonzero:
            return ExtendOutcome.DEPENDENT
        self._append(key, row, residual, int(np.argmax(residual)), coefficients)
        return ExtendOutcome.ADDED

    def add_trivial(self, key: Hashable = None, row=None):
        """
        Append a root row without a pivot.

        Used when the empty prefix must root the basis but its row is all
        zero or not fully known; it never takes part in reduction.
        """
        original = np.zeros(self.width, dtype=np.int64) if row is None else np.asarray(row)
        coefficients = np.zeros(len(self.vectors), dtype=np.uint8)
        self._append(key, original, np.zeros(self.width, dtype=np.uint8), None, coefficients)

    def _append(self, key, row, residual, pivot, coefficients):
        self.keys.append(key)
        self.rows.append(np.array(row, copy=True))
        self.vectors.append(residual)
        self.pivots.append(pivot)
        self._provenance.append(np.append(coefficients, np.uint8(1)))

    def express(self, target) -> np.ndarray:
        """
        Coefficients c with XOR_i c_i * rows[i] == target.

        Raises:
            NotInSpan: target has unknown entries or lies outside the span
        """
        if has_unknown(target):
            raise NotInSpan("Target row has unknown entries")
        residual, nonzero, coefficients = self.reduce(target)
        if nonzero:
            raise NotInSpan(f"Residual {residual.tolist()} is nonzero")
        return coefficients


def rank(matrix) -> int:
    matrix = np.atleast_2d(as_gf2(matrix))
    basis = Basis(matrix.shape[1])
    for row in matrix:
        basis.try_extend(row)
    return len(basis)


def is_invertible(matrix) -> bool:
    """
    Gaussian elimination with row swaps; fails on the first column that
    has no pivot.
    """
    m = as_gf2(matrix)
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
        return False
    n = m.shape[0]
    for col in range(n):
        pivot_rows = np.nonzero(m[col:, col])[0]
        if len(pivot_rows) == 0:
            return False
        pivot = col + pivot_rows[0]
        if pivot != col:
            m[[col, pivot]] = m[[pivot, col]]
        for r in range(n):
            if r != col and m[r, col]:
                m[r] ^= m[col]
    return True


def solve(matrix, rhs) -> np.ndarray:
    """
    Solve matrix @ x = rhs exactly over GF(2).

    Raises:
        SingularMatrix: matrix is not invertible over GF(2)
    """
    m = as_gf2(matrix)
    b = as_gf2(rhs)
    n = m.shape[0]
    if m.shape != (n, n):
        raise SingularMatrix(f"Matrix of shape {m.shape} is not square")
    augmented = np.concatenate([m, b.reshape(n, 1)], axis=1)
    for col in range(n):
        pivot_rows = np.nonzero(augmented[col:, col])[0]
        if len(pivot_rows) == 0:
            raise SingularMatrix(f"No pivot in column {col}")
        pivot = col + pivot_rows[0]
        if pivot != col:
            augmented[[col, pivot]] = augmented[[pivot, col]]
        for r in range(n):
            if r != col and augmented[r, col]:
                augmented[r] ^= augmented[col]
    return augmented[:, n].copy()


def solve_left(matrix, rhs) -> np.ndarray:
    """Solve x @ matrix = rhs exactly over GF(2)."""
    return solve(np.asarray(matrix).T, rhs)


def solve_via_real_embedding(matrix, rhs) -> np.ndarray:
    """
    Solve matrix @ x = rhs over the reals, then round and reduce mod 2.

    Only exact when the real solution is integral (e.g. |det| == 1); for
    other GF(2)-invertible matrices the rounded bits can be wrong.

    Raises:
        SingularMatrix: matrix is singular over the reals
    """
    a = np.asarray(matrix, dtype=np.float64)
    b = np.asarray(rhs, dtype=np.float64)
    try:
        x = np.linalg.solve(a, b)
    except np.linalg.LinAlgError as e:
        raise SingularMatrix(str(e)) from e
    return (np.rint(x).astype(np.int64) % 2).astype(np.uint8)


def combination_coefficients(rows, target) -> Optional[np.ndarray]:
    """
    Find c with c @ rows = target over GF(2).

    Eliminates on the augmented transpose; free variables are set to 0.

    Returns:
        One particular solution, or None if the system is inconsistent
    """
    a = as_gf2(rows)
    if a.ndim == 1:
        a = a.reshape(1, -1)
    num_rows, num_cols = a.shape
    augmented = np.concatenate([a.T, as_gf2(target).reshape(num_cols, 1)], axis=1)
    pivot_columns = []
    r = 0
    for col in range(num_rows):
        pivot_rows = np.nonzero(augmented[r:, col])[0] if r < num_cols else []
        if len(pivot_rows) == 0:
            continue
        pivot = r + pivot_rows[0]
        if pivot != r:
            augmented[[r, pivot]] = augmented[[pivot, r]]
        for i in range(num_cols):
            if i != r and augmented[i, col]:
                augmented[i] ^= augmented[r]
        pivot_columns.append(col)
        r += 1
    if np.any(augmented[r:, num_rows]):
        return None
    solution = np.zeros(num_rows, dtype=np.uint8)
    for i, col in enumerate(pivot_columns):
        solution[col] = augmented[i, num_rows]
    return solution
