"""Tests for DenseSparseMap."""
import numpy as np
import pytest

from spindex import DenseSparseMap, MissingKeyError, OutOfRangeError


def test_insert_assigns_in_first_seen_order():
    dim = DenseSparseMap()
    assert dim.insert(1042) == 0
    assert dim.insert(17) == 1
    assert dim.insert(99) == 2
    assert list(dim) == [1042, 17, 99]


def test_insert_is_idempotent():
    dim = DenseSparseMap()
    first = dim.insert(17)
    extent = dim.dense_extent()
    assert dim.insert(17) == first
    assert dim.dense_extent() == extent


def test_extent_counts_distinct_values():
    dim = DenseSparseMap()
    for v in [5, 3, 5, 5, 8, 3, 1]:
        dim.insert(v)
    assert dim.dense_extent() == 4
    assert len(dim) == 4


def test_round_trip():
    dim = DenseSparseMap(['b', 'a', 'c'])
    for s in ['a', 'b', 'c']:
        assert dim.to_sparse(dim.to_dense(s)) == s
    for d in range(3):
        assert dim.to_dense(dim.to_sparse(d)) == d


def test_to_dense_missing():
    dim = DenseSparseMap([1, 2])
    with pytest.raises(MissingKeyError):
        dim.to_dense(3)
    with pytest.raises(LookupError):
        dim.to_dense('1')


def test_to_sparse_out_of_range():
    dim = DenseSparseMap([1, 2])
    with pytest.raises(OutOfRangeError):
        dim.to_sparse(2)
    with pytest.raises(LookupError):
        dim.to_sparse(-1)


def test_vectorized_forms():
    dim = DenseSparseMap()
    dense = dim.insert_many([30, 10, 30, 20])
    assert dense.dtype == np.int64
    assert dense.tolist() == [0, 1, 0, 2]
    assert dim.to_dense_many([20, 30]).tolist() == [2, 0]
    assert dim.to_sparse_many(np.array([1, 2])) == [10, 20]
    assert 10 in dim
    assert 40 not in dim


def test_numpy_integer_keys_match_python_ints():
    dim = DenseSparseMap()
    dim.insert(7)
    assert dim.to_dense(np.int64(7)) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
