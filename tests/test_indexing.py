"""Tests for Indexing and the Numba index kernels."""
import numpy as np
from itertools import permutations, product
import pytest

from spindex import Indexing, InvalidArgumentError, OutOfRangeError
from spindex.sparse import fast


# ============================================================
# Concrete layouts
# ============================================================

def test_indexing_column_major():
    ind = Indexing((0, 0), (5, 4), (1, 0))
    ix = ind.tuple_to_index((3, 2))
    assert ind.size() == 20
    assert ix == 13
    assert ind.index_to_tuple(ix) == (3, 2)


def test_indexing_row_major():
    ind = Indexing((0, 0), (4, 5), (0, 1))
    ix = ind.tuple_to_index((3, 2))
    assert ind.size() == 20
    assert ix == 17
    assert ind.index_to_tuple(ix) == (3, 2)


def test_indexing_rank3_mixed_order():
    """Axis 2 slowest, then axis 0, axis 1 fastest."""
    ind = Indexing((0, 0, 0), (2, 3, 4), (2, 0, 1))
    assert ind.size() == 24
    assert ind.tuple_to_index((1, 2, 3)) == (3 * 2 + 1) * 3 + 2
    assert ind.index_to_tuple(23) == (1, 2, 3)


def test_indexing_with_base():
    ind = Indexing((10, -2), (5, 4), (0, 1))
    assert ind.tuple_to_index((10, -2)) == 0
    assert ind.tuple_to_index((14, 1)) == 19
    assert ind.index_to_tuple(19) == (14, 1)


def test_factories_match_numpy():
    shape = (3, 4, 5)
    c = Indexing.row_major(shape)
    f = Indexing.column_major(shape)
    assert c == Indexing((0, 0, 0), shape, (0, 1, 2))
    assert f == Indexing((0, 0, 0), shape, (2, 1, 0))
    for t in product(*(range(e) for e in shape)):
        assert c.tuple_to_index(t) == np.ravel_multi_index(t, shape, order='C')
        assert f.tuple_to_index(t) == np.ravel_multi_index(t, shape, order='F')


def test_strides():
    assert Indexing((0, 0), (5, 4), (1, 0)).strides() == (1, 5)
    assert Indexing((0, 0), (4, 5), (0, 1)).strides() == (5, 1)
    assert Indexing((0, 0, 0), (2, 3, 4), (2, 0, 1)).strides() == (3, 1, 6)


# ============================================================
# Laws
# ============================================================

class TestRoundTrip:
    """index_to_tuple(tuple_to_index(t)) == t for every in-bounds t."""

    EXTENTS = (3, 2, 4, 2)
    BASES = (0, 5, -3, 1)

    @pytest.mark.parametrize("rank", [1, 2, 3, 4])
    def test_round_trip_all_permutations(self, rank):
        extent = self.EXTENTS[:rank]
        base = self.BASES[:rank]
        for perm in permutations(range(rank)):
            ind = Indexing(base, extent, perm)
            seen = set()
            for t in product(*(range(b, b + e) for b, e in zip(base, extent))):
                ix = ind.tuple_to_index(t)
                assert 0 <= ix < ind.size()
                assert ind.index_to_tuple(ix) == t
                seen.add(ix)
            assert seen == set(range(ind.size()))


def test_size_law():
    assert Indexing((0, 0, 0), (2, 3, 4), (0, 1, 2)).size() == 24
    assert Indexing((0, 0, 0), (3, 0, 2), (0, 1, 2)).size() == 0
    assert Indexing((), (), ()).size() == 1


def test_out_of_range_without_check_is_well_defined():
    ind = Indexing((0, 0), (5, 4), (1, 0))
    # one past the end of axis 0 wraps into the next column
    assert ind.tuple_to_index((5, 0)) == 5
    assert ind.tuple_to_index((0, 1)) == 5


def test_bounds_check():
    ind = Indexing((0, 0), (5, 4), (1, 0))
    with pytest.raises(OutOfRangeError):
        ind.tuple_to_index((5, 0), check=True)
    with pytest.raises(OutOfRangeError):
        ind.index_to_tuple(20, check=True)
    with pytest.raises(IndexError):
        ind.index_to_tuple(-1, check=True)
    assert ind.in_bounds((4, 3))
    assert not ind.in_bounds((4, 4))


def test_zero_size_has_no_index():
    ind = Indexing((0, 0), (3, 0), (0, 1))
    with pytest.raises(OutOfRangeError):
        ind.index_to_tuple(0)


# ============================================================
# Validation
# ============================================================

@pytest.mark.parametrize("indices", [(0, 0), (0, 2), (1,), (1, 2)])
def test_bad_permutation(indices):
    extent = (2,) * len(indices)
    with pytest.raises(InvalidArgumentError):
        Indexing((0,) * len(indices), extent, indices)


def test_negative_extent():
    with pytest.raises(InvalidArgumentError):
        Indexing((0, 0), (3, -1), (0, 1))


def test_length_mismatch():
    with pytest.raises(ValueError):
        Indexing((0, 0), (3, 4, 5), (0, 1))


def test_wrong_tuple_rank():
    ind = Indexing((0, 0), (3, 4), (0, 1))
    with pytest.raises(InvalidArgumentError):
        ind.tuple_to_index((1, 2, 3))


def test_dict_round_trip():
    ind = Indexing((1, 2), (3, 4), (1, 0))
    d = ind.to_dict()
    assert d == {'base': [1, 2], 'extent': [3, 4], 'indices': [1, 0]}
    assert Indexing.from_dict(d) == ind


# ============================================================
# Batch kernels
# ============================================================

def test_kernel_scalar():
    base, extent, indices = fast.pack_indexing((0, 0), (5, 4), (1, 0))
    tup = np.array([3, 2], dtype=np.int64)
    assert fast.tuple_to_index_jit(tup, base, extent, indices) == 13


def test_batch_matches_scalar():
    ind = Indexing((1, 0, -2), (3, 4, 2), (1, 2, 0))
    tuples = list(product(range(1, 4), range(0, 4), range(-2, 0)))
    batch = ind.tuples_to_indices(tuples)
    individual = [ind.tuple_to_index(t) for t in tuples]
    assert batch.dtype == np.int64
    assert np.array_equal(batch, individual)

    back = ind.indices_to_tuples(batch)
    assert back.shape == (len(tuples), 3)
    assert [tuple(row) for row in back.tolist()] == tuples


def test_batch_empty():
    ind = Indexing((0, 0), (3, 4), (0, 1))
    assert ind.tuples_to_indices(np.empty((0, 2))).shape == (0,)
    assert ind.indices_to_tuples([]).shape == (0, 2)


def test_batch_checks():
    ind = Indexing((0, 0), (3, 4), (0, 1))
    with pytest.raises(InvalidArgumentError):
        ind.tuples_to_indices([[1, 2, 3]])
    with pytest.raises(OutOfRangeError):
        ind.tuples_to_indices([[0, 0], [3, 0]], check=True)
    with pytest.raises(OutOfRangeError):
        ind.indices_to_tuples([0, 12], check=True)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
