"""Tests for diagonal weight/scale matrices and axis sums."""
import numpy as np
from scipy import sparse
import pytest

from spindex import (
    DivisionByZeroError, InvalidArgumentError, diag_matrix, row_or_col_sum,
    scale_matrix, weight_matrix,
)


@pytest.fixture
def M():
    return sparse.csr_matrix(np.array([
        [1.0, 2.0, 0.0],
        [0.0, 0.0, 3.0],
    ]))


def test_diag_matrix():
    D = diag_matrix(np.array([1.0, 2.0, 3.0]))
    assert D.shape == (3, 3)
    assert np.array_equal(D.toarray(), np.diag([1.0, 2.0, 3.0]))


def test_diag_matrix_invert():
    D = diag_matrix(np.array([2.0, 4.0]), invert=True)
    assert np.allclose(D.diagonal(), [0.5, 0.25])


def test_diag_matrix_int_vector_becomes_float():
    D = diag_matrix([2, 4], invert=True)
    assert D.dtype == np.float64
    assert np.allclose(D.diagonal(), [0.5, 0.25])


def test_diag_matrix_zero():
    with pytest.raises(DivisionByZeroError):
        diag_matrix(np.array([1.0, 0.0]), invert=True)
    D = diag_matrix(np.array([1.0, 0.0]), invert=True, on_zero='inf')
    assert np.isinf(D.diagonal()[1])


def test_diag_matrix_needs_vector():
    with pytest.raises(InvalidArgumentError):
        diag_matrix(np.ones((2, 2)))


def test_row_or_col_sum(M):
    assert np.array_equal(row_or_col_sum(M, 0), [3.0, 3.0])
    assert np.array_equal(row_or_col_sum(M, 1), [1.0, 2.0, 3.0])
    with pytest.raises(InvalidArgumentError):
        row_or_col_sum(M, 2)


def test_weight_matrix(M):
    W = weight_matrix(M, 0)
    assert W.shape == (2, 2)
    assert np.array_equal(W.diagonal(), [3.0, 3.0])


def test_scale_matrix(M):
    S = scale_matrix(M, 1)
    assert S.shape == (3, 3)
    assert np.allclose(S.diagonal(), [1.0, 0.5, 1.0 / 3.0])


def test_scale_matrix_normalizes_rows(M):
    normalized = scale_matrix(M, 0) @ M
    assert np.allclose(np.asarray(normalized.sum(axis=1)).ravel(), 1.0)


def test_vector_forms():
    w = np.array([1.0, 4.0])
    assert np.array_equal(weight_matrix(w).diagonal(), w)
    assert np.allclose(scale_matrix(w).diagonal(), [1.0, 0.25])


def test_sparse_input_needs_axis(M):
    with pytest.raises(InvalidArgumentError):
        scale_matrix(M)


def test_scale_matrix_empty_column():
    M = sparse.csr_matrix(np.array([[1.0, 0.0], [2.0, 0.0]]))
    with pytest.raises(DivisionByZeroError):
        scale_matrix(M, 1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
