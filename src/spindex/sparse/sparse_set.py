"""
Sparse Set: bidirectional map between sparse coordinates and dense indices.

Application coordinates (global cell IDs, names, ...) are rarely contiguous
or zero-based. A DenseSparseMap hands out compact matrix indices 0, 1, 2, ...
in order of first appearance, and translates both ways.
"""

import numpy as np

from spindex.errors import MissingKeyError, OutOfRangeError


class DenseSparseMap:
    """
    First-seen-order mapping between sparse values and dense indices.

    Parameters
    ----------
    values : iterable, optional
        Sparse values to insert right away, in order.

    Examples
    --------
    >>> dim = DenseSparseMap()
    >>> dim.insert(1042)
    0
    >>> dim.insert(17)
    1
    >>> dim.insert(1042)
    0
    >>> dim.to_sparse(1)
    17
    >>> dim.dense_extent()
    2
    """

    def __init__(self, values=None):
        self._s2d = {}
        self._d2s = []
        if values is not None:
            for v in values:
                self.insert(v)

    def insert(self, sparse_value):
        """Register sparse_value (if new) and return its dense index."""
        dense = self._s2d.get(sparse_value)
        if dense is None:
            dense = len(self._d2s)
            self._s2d[sparse_value] = dense
            self._d2s.append(sparse_value)
        return dense

    def insert_many(self, values):
        """Insert each value in order; return the dense indices as int64."""
        return np.fromiter((self.insert(v) for v in values), dtype=np.int64)

    def to_dense(self, sparse_value):
        try:
            return self._s2d[sparse_value]
        except KeyError:
            raise MissingKeyError(
                f"Sparse value {sparse_value!r} is not in the map") from None

    def to_dense_many(self, values):
        """Vectorized to_dense over an iterable of sparse values."""
        return np.fromiter((self.to_dense(v) for v in values), dtype=np.int64)

    def to_sparse(self, dense_index):
        n = len(self._d2s)
        if not 0 <= dense_index < n:
            raise OutOfRangeError(
                f"Dense index {dense_index} out of range [0, {n})")
        return self._d2s[dense_index]

    def to_sparse_many(self, dense_indices):
        return [self.to_sparse(int(d)) for d in dense_indices]

    def dense_extent(self):
        """Number of distinct sparse values registered so far."""
        return len(self._d2s)

    def __len__(self):
        return len(self._d2s)

    def __contains__(self, sparse_value):
        return sparse_value in self._s2d

    def __iter__(self):
        """Sparse values in dense-index order."""
        return iter(self._d2s)

    def __repr__(self):
        head = ", ".join(repr(v) for v in self._d2s[:5])
        more = ", ..." if len(self._d2s) > 5 else ""
        return f"DenseSparseMap(n={len(self._d2s):,}, [{head}{more}])"
