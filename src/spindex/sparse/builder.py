"""
Triplet Builder: accumulator + dimension maps -> scipy sparse matrix.

Every entry of a rank-2 accumulator is resolved to (dense_row, dense_col)
through the two DenseSparseMaps and handed to scipy as a triplet.
Repeated (row, col) pairs are summed by scipy during assembly, the usual
coordinate-format semantics.
"""

import logging

import numpy as np
from scipy import sparse

from spindex.errors import DivisionByZeroError, InvalidArgumentError

logger = logging.getLogger(__name__)

FORMATS = ('csr', 'csc', 'coo')
ZERO_POLICIES = ('raise', 'inf')


def _check_format(format):
    if format not in FORMATS:
        raise InvalidArgumentError(
            f"format must be one of {FORMATS}, got {format!r}")


def invert_values(vals, on_zero='raise'):
    """
    Element-wise reciprocal.

    Parameters
    ----------
    vals : numpy.ndarray
    on_zero : str
        'raise' (default): any exact zero raises DivisionByZeroError.
        'inf': zeros become inf (sign follows the zero's sign).

    Returns
    -------
    numpy.ndarray
        New array, same dtype as vals.
    """
    if on_zero not in ZERO_POLICIES:
        raise InvalidArgumentError(
            f"on_zero must be one of {ZERO_POLICIES}, got {on_zero!r}")
    zeros = vals == 0
    if on_zero == 'raise' and zeros.any():
        raise DivisionByZeroError(
            f"Cannot invert: {int(zeros.sum())} value(s) are zero "
            f"(first at position {int(np.argmax(zeros))})")
    with np.errstate(divide='ignore'):
        return (1.0 / vals).astype(vals.dtype, copy=False)


def _check_rank2(accum, dims):
    if accum.rank != 2:
        raise InvalidArgumentError(
            f"Accumulator must have rank 2, got {accum.rank}")
    if len(dims) != 2:
        raise InvalidArgumentError(
            f"Need one dimension map per axis (2), got {len(dims)}")


def to_matrix(accum, dims, transpose=False, invert=False, format='csr',
              on_zero='raise'):
    """
    Build a sparse matrix in dense index space.

    Parameters
    ----------
    accum : CoordinateAccumulator
        Rank-2 source of (coordinate, value) entries.
    dims : pair of DenseSparseMap
        ``dims[0]`` resolves axis-0 coordinates, ``dims[1]`` axis-1.
    transpose : bool
        Return the transpose: rows come from axis 1 and the shape is
        ``(dims[1].dense_extent(), dims[0].dense_extent())``.
    invert : bool
        Store 1/value for every entry (before duplicates are summed).
    format : str
        'csr' (default), 'csc' or 'coo'.
    on_zero : str
        With invert: 'raise' (default) raises DivisionByZeroError on a
        stored zero, 'inf' stores inf instead.

    Returns
    -------
    scipy.sparse matrix

    Raises
    ------
    MissingKeyError
        A coordinate was never inserted into its dimension map.
    DivisionByZeroError
        invert=True, on_zero='raise' and a stored value is zero.
    """
    _check_rank2(accum, dims)
    _check_format(format)

    ix0, ix1 = (1, 0) if transpose else (0, 1)
    rows = dims[ix0].to_dense_many(accum.index_column(ix0))
    cols = dims[ix1].to_dense_many(accum.index_column(ix1))
    vals = accum.values()
    if invert:
        vals = invert_values(vals, on_zero=on_zero)

    shape = (dims[ix0].dense_extent(), dims[ix1].dense_extent())
    M = sparse.csr_matrix((vals, (rows, cols)), shape=shape, dtype=accum.dtype)

    logger.debug("to_matrix: %d triplets -> %s matrix, nnz=%d "
                 "(transpose=%s, invert=%s)",
                 len(vals), shape, M.nnz, transpose, invert)
    return M.asformat(format)


def scale_matrix(accum, dims, keep_axis, format='csr'):
    """
    Diagonal matrix of per-index sums along one axis.

    ``S[d, d]`` is the sum of every value whose ``keep_axis`` coordinate
    resolves to dense index ``d``; the other axis is summed out. Typical
    use: total overlap weight of each target cell.

    Parameters
    ----------
    accum : CoordinateAccumulator
        Rank-2 source.
    dims : pair of DenseSparseMap
    keep_axis : int
        0 or 1, the axis that REMAINS in the result.
    format : str
        'csr' (default), 'csc' or 'coo'.

    Returns
    -------
    scipy.sparse matrix of shape (n, n), n = dims[keep_axis].dense_extent()
    """
    _check_rank2(accum, dims)
    _check_format(format)
    if keep_axis not in (0, 1):
        raise InvalidArgumentError(f"keep_axis must be 0 or 1, got {keep_axis}")

    dense = dims[keep_axis].to_dense_many(accum.index_column(keep_axis))
    vals = accum.values()
    n = dims[keep_axis].dense_extent()
    S = sparse.csr_matrix((vals, (dense, dense)), shape=(n, n), dtype=accum.dtype)

    logger.debug("scale_matrix: %d entries summed onto %d diagonal slots "
                 "(keep_axis=%d)", len(vals), n, keep_axis)
    return S.asformat(format)
