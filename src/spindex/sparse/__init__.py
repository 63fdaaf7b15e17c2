"""
spindex.sparse: dense/sparse index maps, accumulators and matrix assembly.

Turns arbitrary, non-contiguous coordinate keys into scipy sparse matrices
in a compact dense index space, and converts N-dimensional tuples to linear
indices under any axis order.

Example:
    from spindex.sparse import DenseSparseMap, MappedAccumulator, scale_matrix

    # One map per matrix dimension; share a map between matrices that
    # will be multiplied along that dimension.
    dims = (DenseSparseMap(), DenseSparseMap())
    acc = MappedAccumulator(dims)
    acc.add((1042, 7), 0.25)   # (grid cell, ice cell) overlap area
    acc.add((1042, 9), 0.75)

    M = acc.to_matrix()              # 1 x 2 csr_matrix
    S = scale_matrix(M, 0)           # 1/row-sums on the diagonal
    normalized = S @ M
"""

from spindex.sparse import fast
from spindex.sparse.sparse_set import DenseSparseMap
from spindex.sparse.indexing import Indexing
from spindex.sparse.builder import to_matrix
from spindex.sparse.builder import scale_matrix as triplet_scale_matrix
from spindex.sparse.accum import (
    CoordinateAccumulator, MappedAccumulator, from_matrix, from_vector,
)
from spindex.sparse.diag import (
    diag_matrix, row_or_col_sum, weight_matrix, scale_matrix,
)

__all__ = [
    "DenseSparseMap", "Indexing", "CoordinateAccumulator", "MappedAccumulator",
    "from_matrix", "from_vector", "to_matrix", "triplet_scale_matrix",
    "diag_matrix", "row_or_col_sum", "weight_matrix", "scale_matrix", "fast",
]
