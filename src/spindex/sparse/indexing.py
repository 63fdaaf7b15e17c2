"""
Indexing: N-dimensional tuple <-> linear index under any axis order.

One algorithm covers row-major, column-major and every mixed layout: the
traversal order is a permutation listing the axes from slowest-varying to
fastest-varying, and the last axis listed has unit stride.

Batch conversions run through the Numba kernels in ``spindex.sparse.fast``.
"""

import numpy as np

from spindex.errors import InvalidArgumentError, OutOfRangeError
from spindex.sparse import fast as _fast


class Indexing:
    """
    Map between coordinate tuples and linear indices.

    Parameters
    ----------
    base : sequence of int
        Starting coordinate of each axis.
    extent : sequence of int
        Size of each axis (>= 0).
    indices : sequence of int
        Permutation of ``range(rank)``: the axes in traversal order,
        slowest first. ``(0, 1)`` is row-major, ``(1, 0)`` column-major.

    Examples
    --------
    >>> ind = Indexing((0, 0), (5, 4), (1, 0))  # column major
    >>> ind.size()
    20
    >>> ind.tuple_to_index((3, 2))
    13
    >>> ind.index_to_tuple(13)
    (3, 2)
    """

    def __init__(self, base, extent, indices):
        base = tuple(int(b) for b in base)
        extent = tuple(int(e) for e in extent)
        indices = tuple(int(i) for i in indices)

        rank = len(indices)
        if len(base) != rank or len(extent) != rank:
            raise InvalidArgumentError(
                f"base, extent and indices must have equal length, got "
                f"{len(base)}, {len(extent)}, {rank}")
        if sorted(indices) != list(range(rank)):
            raise InvalidArgumentError(
                f"indices {indices} is not a permutation of 0..{rank - 1}")
        for a, e in enumerate(extent):
            if e < 0:
                raise InvalidArgumentError(f"extent[{a}] = {e} is negative")

        self.base = base
        self.extent = extent
        self.indices = indices

        self._size = 1
        for e in extent:
            self._size *= e

        self._packed = _fast.pack_indexing(base, extent, indices)

    @classmethod
    def row_major(cls, extent, base=None):
        """Last axis fastest (C order)."""
        rank = len(extent)
        return cls(base if base is not None else (0,) * rank,
                   extent, range(rank))

    @classmethod
    def column_major(cls, extent, base=None):
        """First axis fastest (Fortran order)."""
        rank = len(extent)
        return cls(base if base is not None else (0,) * rank,
                   extent, range(rank - 1, -1, -1))

    @property
    def rank(self):
        return len(self.indices)

    def size(self):
        """Product of all extents."""
        return self._size

    def strides(self):
        """Per-axis step in the linear index when that coordinate grows by 1."""
        strides = [0] * self.rank
        stride = 1
        for a in reversed(self.indices):
            strides[a] = stride
            stride *= self.extent[a]
        return tuple(strides)

    def in_bounds(self, tup):
        return all(b <= t < b + e
                   for t, b, e in zip(tup, self.base, self.extent))

    def _check_rank(self, tup):
        if len(tup) != self.rank:
            raise InvalidArgumentError(
                f"Tuple {tuple(tup)} has rank {len(tup)}, expected {self.rank}")

    def tuple_to_index(self, tup, check=False):
        """
        Linear index of a coordinate tuple.

        Parameters
        ----------
        tup : sequence of int
            One coordinate per axis.
        check : bool
            Raise OutOfRangeError for coordinates outside
            ``[base, base + extent)``. Off by default: out-of-range
            tuples give a well-defined but out-of-range index.

        Returns
        -------
        int
        """
        self._check_rank(tup)
        if check and not self.in_bounds(tup):
            raise OutOfRangeError(
                f"Tuple {tuple(tup)} outside base={self.base} extent={self.extent}")

        ix = 0
        for a in self.indices:
            ix = ix * self.extent[a] + (tup[a] - self.base[a])
        return ix

    def index_to_tuple(self, ix, check=False):
        """
        Inverse of tuple_to_index.

        Decodes the fastest axis first by divmod with each extent.
        An Indexing of size 0 has no valid index and always raises.
        """
        if check or self._size == 0:
            if not 0 <= ix < self._size:
                raise OutOfRangeError(
                    f"Index {ix} out of range [0, {self._size})")

        tup = [0] * self.rank
        rem = ix
        for a in reversed(self.indices):
            rem, t = divmod(rem, self.extent[a])
            tup[a] = t + self.base[a]
        return tuple(tup)

    def tuples_to_indices(self, tuples, check=False):
        """
        Batch tuple_to_index.

        Parameters
        ----------
        tuples : array-like of int, shape (n, rank)

        Returns
        -------
        numpy.ndarray of int64, shape (n,)
        """
        arr = np.asarray(tuples, dtype=np.int64)
        if arr.ndim != 2 or arr.shape[1] != self.rank:
            raise InvalidArgumentError(
                f"Expected an (n, {self.rank}) array, got shape {arr.shape}")
        if arr.shape[0] == 0:
            return np.empty(0, dtype=np.int64)

        base, extent, indices = self._packed
        if check:
            bad = np.any((arr < base) | (arr >= base + extent), axis=1)
            if bad.any():
                first = int(np.argmax(bad))
                raise OutOfRangeError(
                    f"Tuple {tuple(arr[first])} outside base={self.base} "
                    f"extent={self.extent}")

        return _fast.batch_tuple_to_index_jit(
            np.ascontiguousarray(arr), base, extent, indices)

    def indices_to_tuples(self, ixs, check=False):
        """
        Batch index_to_tuple.

        Returns
        -------
        numpy.ndarray of int64, shape (n, rank)
        """
        arr = np.asarray(ixs, dtype=np.int64).ravel()
        if arr.shape[0] == 0:
            return np.empty((0, self.rank), dtype=np.int64)

        if check or self._size == 0:
            bad = (arr < 0) | (arr >= self._size)
            if bad.any():
                raise OutOfRangeError(
                    f"Index {int(arr[np.argmax(bad)])} out of range "
                    f"[0, {self._size})")

        base, extent, indices = self._packed
        return _fast.batch_index_to_tuple_jit(arr, base, extent, indices)

    def to_dict(self):
        """(base, extent, indices) for an external serializer."""
        return {
            'base': list(self.base),
            'extent': list(self.extent),
            'indices': list(self.indices),
        }

    @classmethod
    def from_dict(cls, d):
        return cls(d['base'], d['extent'], d['indices'])

    def __eq__(self, other):
        if not isinstance(other, Indexing):
            return NotImplemented
        return (self.base == other.base and self.extent == other.extent
                and self.indices == other.indices)

    def __hash__(self):
        return hash((self.base, self.extent, self.indices))

    def __repr__(self):
        return (f"Indexing(base={self.base}, extent={self.extent}, "
                f"indices={self.indices}, size={self._size:,})")
