"""
Array Bundle: a set of named, same-dtype arrays with dimension names and attributes.

Variables are declared first (name, optional shape, dimension names,
string attributes such as ``units``), then shaped and allocated either
all together or by name. The bundle reads and writes ``.npz`` files;
dimension names and attributes travel as JSON text next to each array.
"""

import json
import logging

import numpy as np

from spindex.errors import InvalidArgumentError, StateError
from spindex.sparse.indexing import Indexing
from spindex.sparse.sparse_set import DenseSparseMap
from spindex.units import UnitSystem

logger = logging.getLogger(__name__)

_META_SUFFIX = '__meta'
_VARS_KEY = '__vars__'


class ArrayMeta:
    """One bundle variable: its array plus shape, dimension names and attributes."""

    def __init__(self, name, dtype, shape=None, sdims=None, attrs=None):
        self.name = name
        self.dtype = dtype
        self.arr = None
        self.shape = None
        self.sdims = tuple(sdims) if sdims is not None else None
        self.attrs = list(attrs or [])
        if shape is not None:
            self.set_shape(shape, sdims)

    def set_shape(self, shape, sdims=None, check=True):
        if check and self.shape is not None:
            raise StateError(f"ArrayBundle variable {self.name} shape already set")
        shape = tuple(int(s) for s in shape)
        if sdims is None:
            # names may be declared ahead of the shape
            sdims = self.sdims
        if sdims is None:
            sdims = tuple(f"{self.name}.dim{i}" for i in range(len(shape)))
        sdims = tuple(sdims)
        if len(sdims) != len(shape):
            raise InvalidArgumentError(
                f"{len(sdims)} dimension names for a rank-{len(shape)} shape")
        self.shape = shape
        self.sdims = sdims

    def allocate(self, check=True, order='C'):
        if check and self.arr is not None:
            raise StateError(f"ArrayBundle variable {self.name} already allocated")
        if self.shape is None:
            raise StateError(f"ArrayBundle variable {self.name} has no shape")
        if order not in ('C', 'F'):
            raise InvalidArgumentError(f"order must be 'C' or 'F', got {order!r}")
        self.arr = np.zeros(self.shape, dtype=self.dtype, order=order)

    def get_attr(self, key, default=None):
        for k, v in self.attrs:
            if k == key:
                return v
        return default

    def set_attr(self, key, value):
        for i, (k, _) in enumerate(self.attrs):
            if k == key:
                self.attrs[i] = (key, value)
                return
        self.attrs.append((key, value))

    def __repr__(self):
        state = "allocated" if self.arr is not None else "unallocated"
        return f"ArrayMeta({self.name!r}, shape={self.shape}, {state})"


class ArrayBundle:
    """
    Named arrays of one dtype, kept in declaration order.

    Parameters
    ----------
    dtype : str or numpy dtype
        Element type of every array in the bundle (default float64).

    Examples
    --------
    >>> b = ArrayBundle()
    >>> elev = b.add('elevation', units='m', description='surface elevation')
    >>> mask = b.add('mask', shape=(4, 5), sdims=('y', 'x'))
    >>> b.set_shape((4, 5), ('y', 'x'))   # only variables without a shape
    >>> b.allocate()
    >>> b.array('elevation').shape
    (4, 5)
    """

    def __init__(self, dtype='float64'):
        self.dtype = np.dtype(dtype)
        self.index = DenseSparseMap()
        self.data = []

    def add(self, name, shape=None, sdims=None, **attrs):
        """Declare a new variable. Attributes are stored as strings."""
        if name in self.index:
            raise InvalidArgumentError(f"ArrayBundle already has a variable {name!r}")
        meta = ArrayMeta(name, self.dtype, shape, sdims,
                         [(k, str(v)) for k, v in attrs.items()])
        self.index.insert(name)
        self.data.append(meta)
        return meta

    def at(self, name):
        return self.data[self.index.to_dense(name)]

    def array(self, name):
        return self.at(name).arr

    @property
    def names(self):
        return list(self.index)

    def __contains__(self, name):
        return name in self.index

    def __len__(self):
        return len(self.data)

    def _select(self, vnames):
        if vnames is None:
            return None
        return [self.at(n) for n in vnames]

    def set_shape(self, shape, sdims=None, check=True, vnames=None):
        """
        Set the shape of variables.

        With vnames=None, only variables that have no shape yet are set.
        With explicit vnames, each named variable is set (and, with
        check=True, must not have a shape already).
        """
        selected = self._select(vnames)
        if selected is None:
            for meta in self.data:
                if meta.shape is None:
                    meta.set_shape(shape, sdims, check=check)
        else:
            for meta in selected:
                meta.set_shape(shape, sdims, check=check)

    def allocate(self, vnames=None, shape=None, sdims=None, check=True, order='C'):
        """
        Allocate zero-filled arrays.

        Parameters
        ----------
        vnames : list of str, optional
            Variables to allocate; default is every unallocated variable.
        shape, sdims : optional
            Shape to set first (for vnames=None: only on variables that
            have none).
        check : bool
            Refuse to re-shape or re-allocate a named variable.
        order : str
            'C' (row-major) or 'F' (column-major) memory layout.
        """
        selected = self._select(vnames)
        if selected is None:
            for meta in self.data:
                if meta.arr is not None:
                    continue
                if shape is not None and meta.shape is None:
                    meta.set_shape(shape, sdims)
                meta.allocate(check=check, order=order)
        else:
            for meta in selected:
                if shape is not None:
                    meta.set_shape(shape, sdims, check=check)
                meta.allocate(check=check, order=order)

    def indexing(self, name):
        """Indexing that matches the memory layout of an allocated variable."""
        meta = self.at(name)
        if meta.arr is None:
            raise StateError(f"ArrayBundle variable {name} is not allocated")
        arr = meta.arr
        if arr.flags.c_contiguous:
            return Indexing.row_major(arr.shape)
        if arr.flags.f_contiguous:
            return Indexing.column_major(arr.shape)
        raise InvalidArgumentError(f"ArrayBundle variable {name} is not contiguous")

    def convert_units(self, name, to_units, system=None):
        """Convert a variable in place and update its ``units`` attribute."""
        meta = self.at(name)
        from_units = meta.get_attr('units')
        if from_units is None:
            raise StateError(f"ArrayBundle variable {name} has no units attribute")
        if meta.arr is None:
            raise StateError(f"ArrayBundle variable {name} is not allocated")
        system = system if system is not None else UnitSystem()
        meta.arr[...] = system.convert(meta.arr, from_units, to_units)
        meta.set_attr('units', to_units)

    # ------------------------------------------------------------------
    # .npz persistence

    def save(self, path, vnames=None, prefix=''):
        """Write variables (default: all) to an ``.npz`` file."""
        metas = self.data if vnames is None else self._select(vnames)
        payload = {_VARS_KEY: np.array(json.dumps([m.name for m in metas]))}
        for meta in metas:
            if meta.arr is None:
                raise StateError(f"ArrayBundle variable {meta.name} is not allocated")
            payload[prefix + meta.name] = meta.arr
            payload[prefix + meta.name + _META_SUFFIX] = np.array(json.dumps({
                'sdims': list(meta.sdims),
                'attrs': [list(kv) for kv in meta.attrs],
            }))
        np.savez(path, **payload)
        logger.debug("Saved %d bundle variables to %s", len(metas), path)

    @classmethod
    def load(cls, path, prefix='', dtype=None):
        """Read a bundle written by save()."""
        with np.load(path) as npz:
            names = json.loads(npz[_VARS_KEY].item())
            bundle = None
            for name in names:
                arr = npz[prefix + name]
                meta_json = json.loads(npz[prefix + name + _META_SUFFIX].item())
                if bundle is None:
                    bundle = cls(dtype if dtype is not None else arr.dtype)
                meta = bundle.add(name, shape=arr.shape, sdims=meta_json['sdims'])
                meta.attrs = [tuple(kv) for kv in meta_json['attrs']]
                meta.arr = arr.astype(bundle.dtype, copy=False)
        if bundle is None:
            bundle = cls(dtype if dtype is not None else 'float64')
        logger.debug("Loaded %d bundle variables from %s", len(bundle), path)
        return bundle

    def __repr__(self):
        return f"ArrayBundle(dtype={self.dtype}, vars={self.names})"
