"""
Diagonal matrices: weight and scale matrices from vectors or sparse matrices.

A weight matrix has the weights on its diagonal; a scale matrix has their
reciprocals, so ``scale_matrix(M, 0) @ M`` normalizes every row of M to
sum to one.
"""

import numpy as np
from scipy import sparse

from spindex.errors import InvalidArgumentError
from spindex.sparse.builder import invert_values, _check_format


def diag_matrix(diag, invert=False, on_zero='raise', format='csr'):
    """
    Square sparse matrix with ``diag`` on its diagonal.

    Parameters
    ----------
    diag : array-like, shape (n,)
    invert : bool
        Place 1/diag[i] instead of diag[i].
    on_zero : str
        With invert: 'raise' (default) -> DivisionByZeroError on a zero
        entry, 'inf' -> store inf.
    format : str
        'csr' (default), 'csc' or 'coo'.
    """
    _check_format(format)
    diag = np.asarray(diag)
    if diag.ndim != 1:
        raise InvalidArgumentError(f"Expected a 1-D vector, got shape {diag.shape}")
    if not np.issubdtype(diag.dtype, np.floating):
        diag = diag.astype(np.float64)
    if invert:
        diag = invert_values(diag, on_zero=on_zero)

    n = diag.shape[0]
    ii = np.arange(n, dtype=np.int64)
    M = sparse.csr_matrix((diag, (ii, ii)), shape=(n, n), dtype=diag.dtype)
    return M.asformat(format)


def row_or_col_sum(M, axis):
    """
    Sum the rows or columns of a sparse matrix.

    Parameters
    ----------
    M : scipy.sparse matrix or 2-D array
    axis : int
        The dimension that REMAINS: 0 gives one sum per row,
        1 one sum per column.

    Returns
    -------
    numpy.ndarray of shape (M.shape[axis],)
    """
    if axis not in (0, 1):
        raise InvalidArgumentError(f"axis must be 0 or 1, got {axis}")
    # numpy's axis names the dimension summed away, the opposite convention
    return np.asarray(M.sum(axis=1 - axis)).ravel()


def _weights(x, axis):
    if sparse.issparse(x):
        if axis is None:
            raise InvalidArgumentError("axis is required when x is a sparse matrix")
        return row_or_col_sum(x, axis)
    return x


def weight_matrix(x, axis=None, format='csr'):
    """Diagonal of weights: x itself, or row_or_col_sum(x, axis) for a sparse x."""
    return diag_matrix(_weights(x, axis), invert=False, format=format)


def scale_matrix(x, axis=None, on_zero='raise', format='csr'):
    """Diagonal of inverse weights: like weight_matrix, but 1/w on the diagonal."""
    return diag_matrix(_weights(x, axis), invert=True, on_zero=on_zero,
                       format=format)
