"""
Tests for GF(2) linear algebra
"""

import numpy as np
import pytest

from core.gf2 import (Basis, ExtendOutcome, NotInSpan, SingularMatrix, combination_coefficients,
                      is_invertible, matmul, rank, solve, solve_left, solve_via_real_embedding)
from core.words import UNKNOWN


def random_invertible(rng, n):
    """Product of random elementary row additions, invertible over GF(2)."""
    m = np.eye(n, dtype=np.uint8)
    for _ in range(4 * n):
        i, j = rng.choice(n, size=2, replace=False)
        m[i] ^= m[j]
    return m


class TestBasis:
    def test_extend_outcomes(self):
        basis = Basis(3)
        assert basis.try_extend([1, 1, 0], "u") == ExtendOutcome.ADDED
        assert basis.try_extend([1, 1, 0], "v") == ExtendOutcome.DEPENDENT
        assert basis.try_extend([0, UNKNOWN, 1], "w") == ExtendOutcome.HAS_UNKNOWN
        assert basis.try_extend([0, 0, 0], "z") == ExtendOutcome.DEPENDENT
        assert basis.keys == ["u"]
        assert basis.pivots == [0]

    def test_express_returns_original_row_coefficients(self):
        basis = Basis(3)
        basis.try_extend([1, 1, 0])
        basis.try_extend([1, 0, 1])

        # second stored vector is reduced to [0, 1, 1]
        assert basis.vectors[1].tolist() == [0, 1, 1]
        assert basis.express([1, 0, 1]).tolist() == [0, 1]
        assert basis.express([0, 1, 1]).tolist() == [1, 1]
        assert basis.express([0, 0, 0]).tolist() == [0, 0]

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 6])
    def test_express_recovers_coefficients(self, n):
        rng = np.random.default_rng(n)
        basis = Basis(n)
        for row in random_invertible(rng, n):
            assert basis.try_extend(row) == ExtendOutcome.ADDED
        rows = np.array(basis.rows, dtype=np.uint8)
        for _ in range(10):
            c = rng.integers(0, 2, size=n)
            target = matmul(c, rows)
            coefficients = basis.express(target)
            assert coefficients.tolist() == c.tolist()
            assert matmul(coefficients, rows).tolist() == target.tolist()

    def test_express_outside_span(self):
        basis = Basis(3)
        basis.try_extend([1, 0, 0])
        with pytest.raises(NotInSpan):
            basis.express([0, 1, 0])
        with pytest.raises(NotInSpan):
            basis.express([1, UNKNOWN, 0])

    def test_trivial_root(self):
        basis = Basis(2)
        basis.add_trivial("root", [0, 0])
        assert basis.pivots == [None]
        assert basis.try_extend([1, 0], "a") == ExtendOutcome.ADDED
        assert basis.express([1, 0]).tolist() == [0, 1]
        assert len(basis) == 2


class TestMatrices:
    def test_rank(self):
        assert rank([[1, 0, 1], [0, 1, 1], [1, 1, 0]]) == 2
        assert rank(np.eye(4, dtype=np.uint8)) == 4
        assert rank([[0, 0]]) == 0

    def test_is_invertible(self):
        assert is_invertible([[1, 1], [0, 1]])
        assert not is_invertible([[1, 1], [1, 1]])
        assert not is_invertible([[1, 0, 0], [0, 1, 0]])
        # invertible over the reals but not over GF(2)
        assert not is_invertible([[1, 1], [1, -1]])

    def test_solve_random_invertible(self):
        rng = np.random.default_rng(0)
        for n in range(2, 7):
            m = random_invertible(rng, n)
            assert is_invertible(m)
            b = rng.integers(0, 2, size=n)
            x = solve(m, b)
            assert matmul(m, x).tolist() == (b % 2).tolist()

    def test_solve_left(self):
        rng = np.random.default_rng(1)
        m = random_invertible(rng, 5)
        b = rng.integers(0, 2, size=5)
        x = solve_left(m, b)
        assert matmul(x, m).tolist() == b.tolist()

    def test_solve_singular(self):
        with pytest.raises(SingularMatrix):
            solve([[1, 1], [1, 1]], [1, 0])
        with pytest.raises(SingularMatrix):
            solve_via_real_embedding([[1, 1], [1, 1]], [1, 0])

    def test_real_embedding_agrees_on_unimodular(self):
        rng = np.random.default_rng(3)
        m = np.array([[1, 1, 0], [0, 1, 1], [0, 0, 1]])
        for _ in range(5):
            b = rng.integers(0, 2, size=3)
            assert solve_via_real_embedding(m, b).tolist() == solve(m, b).tolist()

    def test_real_embedding_differs_from_gf2(self):
        # J - I has determinant -3 over the reals
        base = np.ones((4, 4), dtype=np.int64) - np.eye(4, dtype=np.int64)
        target = np.array([1, 0, 0, 0])

        exact = solve_left(base, target)
        rounded = solve_via_real_embedding(base.T, target)

        assert exact.tolist() == [0, 1, 1, 1]
        assert rounded.tolist() == [1, 0, 0, 0]
        assert matmul(exact, base).tolist() == target.tolist()
        assert matmul(rounded, base).tolist() != target.tolist()


class TestCombinationCoefficients:
    def test_consistent_system(self):
        rows = [[1, 0, 1], [0, 1, 1]]
        coefficients = combination_coefficients(rows, [1, 1, 0])
        assert coefficients.tolist() == [1, 1]

    def test_inconsistent_system(self):
        assert combination_coefficients([[1, 0, 1], [0, 1, 1]], [0, 0, 1]) is None

    def test_dependent_rows_use_free_zero(self):
        rows = [[1, 1], [1, 1]]
        coefficients = combination_coefficients(rows, [1, 1])
        assert coefficients.tolist() == [1, 0]

    def test_single_row(self):
        assert combination_coefficients([1, 0], [1, 0]).tolist() == [1]
        assert combination_coefficients([1, 0], [0, 1]) is None
