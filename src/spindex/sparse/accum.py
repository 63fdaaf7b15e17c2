"""
Accumulators: append-only (coordinate tuple, value) storage.

Values live in C-native ``array.array`` columns (4 or 8 bytes each) rather
than Python float lists. Coordinates may be any hashable scalar, so they
are kept as one Python list per axis.

Duplicate coordinates are NOT merged here; scipy sums them when the
matrix is assembled (see ``spindex.sparse.builder``).
"""

import array as pyarray
import logging

import numpy as np
from scipy import sparse

from spindex.errors import InvalidArgumentError, StateError
from spindex.sparse import builder as _builder

logger = logging.getLogger(__name__)


def _array_code(dtype):
    """Map a dtype spelling to (array.array typecode, numpy dtype)."""
    if dtype in ('float32', 'f', np.float32):
        return 'f', np.float32
    if dtype in ('float64', 'd', np.float64, float):
        return 'd', np.float64
    raise InvalidArgumentError(
        f"dtype must be 'float32' or 'float64', got {dtype!r}")


class CoordinateAccumulator:
    """
    Ordered list of (coordinate tuple, value) entries with a logical shape.

    Parameters
    ----------
    rank : int
        Number of coordinates per entry.
    shape : sequence of int, optional
        Logical extent of each axis. May be set later with set_shape,
        but only once.
    dtype : str
        'float64' (default) or 'float32' value storage.

    Examples
    --------
    >>> acc = CoordinateAccumulator(2)
    >>> acc.add((10, 3), 2.0)
    >>> acc.add((10, 3), 0.5)
    >>> list(acc)
    [((10, 3), 2.0), ((10, 3), 0.5)]
    """

    def __init__(self, rank, shape=None, dtype='float64'):
        if rank < 0:
            raise InvalidArgumentError(f"rank must be >= 0, got {rank}")
        self.rank = rank
        self._shape = None
        self._array_code, self._np_dtype = _array_code(dtype)

        self._coords = [[] for _ in range(rank)]
        self._vals = pyarray.array(self._array_code)

        if shape is not None:
            self.set_shape(shape)

    @property
    def shape(self):
        if self._shape is None:
            raise StateError("Accumulator shape has not been set")
        return self._shape

    @property
    def has_shape(self):
        return self._shape is not None

    @property
    def dtype(self):
        return self._np_dtype

    def set_shape(self, shape):
        """Declare the logical shape. Allowed exactly once."""
        if self._shape is not None:
            raise StateError(f"Accumulator shape already set to {self._shape}")
        shape = tuple(int(s) for s in shape)
        if len(shape) != self.rank:
            raise InvalidArgumentError(
                f"Shape {shape} has rank {len(shape)}, expected {self.rank}")
        self._shape = shape

    def add(self, index, value):
        """Append one entry. No merging, no index resolution."""
        if len(index) != self.rank:
            raise InvalidArgumentError(
                f"Coordinate {tuple(index)} has rank {len(index)}, "
                f"expected {self.rank}")
        # value first: array.append rejects non-numbers before anything changes
        self._vals.append(value)
        for col, ix in zip(self._coords, index):
            col.append(ix)

    def index_column(self, axis):
        """Coordinates along one axis, in insertion order."""
        if not 0 <= axis < self.rank:
            raise InvalidArgumentError(
                f"axis must be in [0, {self.rank}), got {axis}")
        return self._coords[axis]

    def values(self):
        """Values as a numpy array (copied out of the C-native storage)."""
        if len(self._vals) == 0:
            return np.empty(0, dtype=self._np_dtype)
        return np.frombuffer(self._vals, dtype=self._np_dtype).copy()

    def __len__(self):
        return len(self._vals)

    def __iter__(self):
        for i, val in enumerate(self._vals):
            yield tuple(col[i] for col in self._coords), val

    def __repr__(self):
        shape = self._shape if self._shape is not None else "unset"
        return (f"{type(self).__name__}(rank={self.rank}, shape={shape}, "
                f"dtype={self._np_dtype.__name__}, n={len(self):,})")


class MappedAccumulator(CoordinateAccumulator):
    """
    Rank-2 accumulator that also registers coordinates in dimension maps.

    Each ``add`` inserts the row coordinate into ``dims[0]`` and the
    column coordinate into ``dims[1]``, so a matrix in dense index space
    can be extracted once construction is complete.

    Parameters
    ----------
    dims : pair of DenseSparseMap
        Dimension maps. When matrices are to be multiplied together, one
        map is shared by every accumulator indexed along that dimension.
    shape : sequence of int, optional
        Logical shape of the sparse index space.
    dtype : str
        'float64' (default) or 'float32'.
    """

    def __init__(self, dims, shape=None, dtype='float64'):
        if len(dims) != 2:
            raise InvalidArgumentError(
                f"MappedAccumulator needs 2 dimension maps, got {len(dims)}")
        super().__init__(2, shape=shape, dtype=dtype)
        self.dims = tuple(dims)

    def add(self, index, value):
        if len(index) != 2:
            raise InvalidArgumentError(
                f"Coordinate {tuple(index)} has rank {len(index)}, expected 2")
        # maps are only touched once the entry itself has been accepted
        hash(index[0]), hash(index[1])
        super().add(index, value)
        self.dims[0].insert(index[0])
        self.dims[1].insert(index[1])

    def to_matrix(self, transpose=False, invert=False, format='csr',
                  on_zero='raise'):
        """Sparse matrix in dense index space; see builder.to_matrix."""
        return _builder.to_matrix(self, self.dims, transpose=transpose,
                                  invert=invert, format=format, on_zero=on_zero)

    def scale_matrix(self, keep_axis, format='csr'):
        """Diagonal of per-index sums along keep_axis; see builder.scale_matrix."""
        return _builder.scale_matrix(self, self.dims, keep_axis, format=format)


# ============================================================
# Copy helpers
# ============================================================

def from_matrix(accum, M, set_shape=True):
    """
    Copy every stored entry of a scipy sparse matrix into a rank-2 accumulator.

    Parameters
    ----------
    accum : CoordinateAccumulator
        Destination; must have rank 2.
    M : scipy.sparse matrix
    set_shape : bool
        Also declare ``accum``'s shape as ``M.shape``.
    """
    if accum.rank != 2:
        raise InvalidArgumentError(
            f"Accumulator must have rank 2, got {accum.rank}")
    if set_shape:
        accum.set_shape(M.shape)

    coo = sparse.coo_matrix(M)
    for i, j, v in zip(coo.row.tolist(), coo.col.tolist(), coo.data.tolist()):
        accum.add((i, j), v)
    logger.debug("from_matrix: copied %d entries of %s matrix", coo.nnz, M.shape)
    return accum


def from_vector(accum, v):
    """Copy a dense 1-D vector into a rank-1 accumulator, one entry per element."""
    if accum.rank != 1:
        raise InvalidArgumentError(
            f"Accumulator must have rank 1, got {accum.rank}")
    v = np.asarray(v)
    if v.ndim != 1:
        raise InvalidArgumentError(f"Expected a 1-D vector, got shape {v.shape}")
    for i, x in enumerate(v.tolist()):
        accum.add((i,), x)
    return accum
