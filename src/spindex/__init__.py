"""
spindex - Sparse Index Mapping and Triplet Matrix Assembly
==========================================================

Build scipy sparse matrices from arbitrary coordinate-keyed data, and
convert N-dimensional tuples to linear indices under any axis order.

Quick start:
    import spindex
    from spindex.sparse import DenseSparseMap, MappedAccumulator, Indexing

    dims = (DenseSparseMap(), DenseSparseMap())
    acc = MappedAccumulator(dims)
    acc.add((1042, 7), 0.25)
    acc.add((1042, 9), 0.75)
    M = acc.to_matrix()               # csr_matrix in dense index space
    W = spindex.weight_matrix(M, 0)   # row sums on the diagonal

    ind = Indexing((0, 0), (5, 4), (1, 0))   # column major
    ind.tuple_to_index((3, 2))               # -> 13

License: MIT
"""

__version__ = "0.1.0"

from spindex.errors import (
    SpIndexError, InvalidArgumentError, StateError, MissingKeyError,
    OutOfRangeError, DivisionByZeroError, UnitsError,
)
from spindex.sparse import (
    DenseSparseMap, Indexing, CoordinateAccumulator, MappedAccumulator,
    to_matrix, diag_matrix, row_or_col_sum, weight_matrix, scale_matrix,
)
from spindex import sparse

__all__ = [
    "SpIndexError", "InvalidArgumentError", "StateError", "MissingKeyError",
    "OutOfRangeError", "DivisionByZeroError", "UnitsError",
    "DenseSparseMap", "Indexing", "CoordinateAccumulator", "MappedAccumulator",
    "to_matrix", "diag_matrix", "row_or_col_sum", "weight_matrix",
    "scale_matrix", "sparse",
]
