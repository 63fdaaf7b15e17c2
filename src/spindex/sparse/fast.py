"""
Indexing Fast: Numba JIT-compiled kernels for batch index conversion.

Converting millions of coordinates one tuple at a time through Python is
the slow path. These kernels run the same arithmetic as
Indexing.tuple_to_index / Indexing.index_to_tuple over whole arrays.

All arrays are int64. ``indices`` lists axes from slowest to fastest.
"""

import numpy as np
from numba import njit


# ============================================================
# Core kernels: one tuple <-> one linear index
# ============================================================

@njit(cache=True)
def tuple_to_index_jit(tup, base, extent, indices):
    """Linear index of one tuple.

    Parameters
    ----------
    tup : 1D numpy array of int64
        Coordinate tuple, one entry per axis.
    base, extent : 1D numpy arrays of int64
        Per-axis starting offset and size.
    indices : 1D numpy array of int64
        Axes in traversal order, slowest first.

    Returns
    -------
    int64
        Linear index.
    """
    ix = np.int64(0)
    for k in range(len(indices)):
        a = indices[k]
        ix = ix * extent[a] + (tup[a] - base[a])
    return ix


@njit(cache=True)
def index_to_tuple_jit(ix, base, extent, indices, out):
    """Decode one linear index into ``out`` (fastest axis first)."""
    rem = ix
    for k in range(len(indices) - 1, -1, -1):
        a = indices[k]
        out[a] = rem % extent[a] + base[a]
        rem = rem // extent[a]


# ============================================================
# Batch kernels
# ============================================================

@njit(cache=True)
def batch_tuple_to_index_jit(tuples, base, extent, indices):
    """Convert an (n, R) array of tuples into n linear indices."""
    n = tuples.shape[0]
    result = np.empty(n, dtype=np.int64)
    for i in range(n):
        result[i] = tuple_to_index_jit(tuples[i], base, extent, indices)
    return result


@njit(cache=True)
def batch_index_to_tuple_jit(ixs, base, extent, indices):
    """Convert n linear indices into an (n, R) array of tuples.

    Every extent must be positive; callers check this first.
    """
    n = ixs.shape[0]
    rank = indices.shape[0]
    result = np.empty((n, rank), dtype=np.int64)
    for i in range(n):
        index_to_tuple_jit(ixs[i], base, extent, indices, result[i])
    return result


def pack_indexing(base, extent, indices):
    """Return (base, extent, indices) as int64 arrays for the kernels."""
    return (np.asarray(base, dtype=np.int64),
            np.asarray(extent, dtype=np.int64),
            np.asarray(indices, dtype=np.int64))
