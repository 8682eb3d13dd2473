"""Defines the backend compiling the update rules with :mod:`numba`.

The rows of a grid are distributed over the iterations of a parallel loop, which
update all cells of their row. The iterations only read from the input array and
only write to the output array, so they are independent of each other. The parallel
loop returns after all iterations have finished, which separates the writes of one
substep from the reads of the next.

.. autosummary::
   :nosignatures:

   NumbaBackend
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numba as nb
import numpy as np
from numba.extending import register_jitable

from ... import config
from ...grids.buffer import EAST, NORTH, SOUTH, WEST, neighbor_index
from ..base import BackendBase
from .utils import jit

if TYPE_CHECKING:
    from ...grids.buffer import ConstantSourceMask, GridBuffer
    from ...tools.typing import DiffusionStepType, FloatingArray, SourceClampType

# allow calling the index mapping from compiled code
register_jitable(neighbor_index)


class NumbaBackend(BackendBase):
    """Backend compiling parallel loops over all grid cells."""

    def _use_parallel(self, size: int) -> bool:
        """Determine whether a loop over `size` cells should run in parallel."""
        return size >= config["numba.multithreading_threshold"]

    def make_diffusion_step(self, grid: GridBuffer, speed: float) -> DiffusionStepType:
        """Return a compiled function applying the diffusion stencil.

        Args:
            grid (:class:`~heatgrid.grids.buffer.GridBuffer`):
                An example grid defining the dimension and the data type
            speed (float):
                The diffusion coefficient

        Returns:
            callable: Function with signature `(arr_in, arr_out)`
        """
        dim = grid.dim
        size = grid.size
        speed = self._check_speed(speed)
        (nx, ny), (sx, sy), (wx, wy), (ex, ey) = NORTH, SOUTH, WEST, EAST

        @jit(parallel=self._use_parallel(size))
        def diffusion_step(arr_in: FloatingArray, arr_out: FloatingArray) -> None:
            """Apply the stencil to `arr_in` and write the result to `arr_out`"""
            for y in nb.prange(dim):
                # the parallel loop variable is unsigned, but the offsets are not
                row = np.int64(y) * dim
                for x in range(dim):
                    i = row + x
                    top = neighbor_index(i, nx, ny, dim)
                    bottom = neighbor_index(i, sx, sy, dim)
                    left = neighbor_index(i, wx, wy, dim)
                    right = neighbor_index(i, ex, ey, dim)
                    arr_out[i] = arr_in[i] + speed * (
                        arr_in[top] + arr_in[bottom] + arr_in[left] + arr_in[right]
                        - arr_in[i] * 4
                    )

        self._logger.info("Create diffusion step for %dx%d grid", dim, dim)
        return diffusion_step  # type: ignore

    def make_source_clamp(self, mask: ConstantSourceMask) -> SourceClampType:
        """Return a compiled function that pins the constant sources of a grid.

        Args:
            mask (:class:`~heatgrid.grids.buffer.ConstantSourceMask`):
                The constant sources

        Returns:
            callable: Function with signature `(arr)` modifying `arr` in place
        """
        values = np.array(mask.data, copy=True)
        size = mask.size

        @jit(parallel=self._use_parallel(size))
        def clamp_impl(arr: FloatingArray, values: FloatingArray) -> None:
            """Copy all nonzero entries of `values` to `arr`"""
            for i in nb.prange(size):
                if values[i] != 0:
                    arr[i] = values[i]

        def source_clamp(arr: FloatingArray) -> None:
            """Overwrite the pinned cells of `arr`"""
            clamp_impl(arr, values)

        self._logger.info("Create source clamp for %d pinned cells", mask.num_sources)
        return source_clamp  # type: ignore
