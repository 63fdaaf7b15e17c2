#!/usr/bin/env python3
"""
Regridding with spindex: area-weighted transfer from ice cells to grid cells.

Builds the overlap matrix between a coarse atmosphere grid and a fine ice
grid from (grid_cell, ice_cell, overlap_area) triplets with global,
non-contiguous cell IDs, then normalizes it into a regridding matrix.

Usage:
    python examples/regrid_weights.py
    python examples/regrid_weights.py --debug
"""

import argparse
import logging

import numpy as np

from spindex import DenseSparseMap, Indexing, MappedAccumulator, scale_matrix
from spindex.logging_config import get_logger, setup_logging


def overlaps(nx_grid=4, ny_grid=3, refine=3):
    """Yield (grid_id, ice_id, area) for a regular grid refined refine x refine."""
    grid = Indexing((0, 0), (ny_grid, nx_grid), (0, 1))
    ice = Indexing((0, 0), (ny_grid * refine, nx_grid * refine), (0, 1))
    # global IDs start at 1000 / 50000 to show they need not be dense
    for j in range(ny_grid * refine):
        for i in range(nx_grid * refine):
            if (i + j) % 5 == 0:
                continue  # ice-free
            g = 1000 + grid.tuple_to_index((j // refine, i // refine))
            c = 50000 + ice.tuple_to_index((j, i))
            yield g, c, 1.0 / refine ** 2


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.debug else logging.INFO)
    log = get_logger("regrid_weights")

    dims = (DenseSparseMap(), DenseSparseMap())
    acc = MappedAccumulator(dims)
    for g, c, area in overlaps():
        acc.add((g, c), area)

    overlap = acc.to_matrix()               # grid x ice
    grid_from_ice = scale_matrix(overlap, 0) @ overlap

    ice_values = np.linspace(250.0, 270.0, dims[1].dense_extent())
    grid_values = grid_from_ice @ ice_values

    log.info("%d triplets -> overlap %s, nnz=%d",
             len(acc), overlap.shape, overlap.nnz)
    for d, value in enumerate(grid_values):
        log.info("grid cell %d: %.2f", dims[0].to_sparse(d), value)


if __name__ == "__main__":
    main()
