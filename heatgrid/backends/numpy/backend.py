"""Defines the backend using vectorized :mod:`numpy` operations.

.. autosummary::
   :nosignatures:

   NumpyBackend
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ..base import BackendBase

if TYPE_CHECKING:
    from ...grids.buffer import ConstantSourceMask, GridBuffer
    from ...tools.typing import DiffusionStepType, FloatingArray, SourceClampType


class NumpyBackend(BackendBase):
    """Backend evaluating the update rules with whole-array operations."""

    def make_diffusion_step(self, grid: GridBuffer, speed: float) -> DiffusionStepType:
        """Return a function applying the diffusion stencil.

        The function copies the input into a padded work array whose ghost cells
        repeat the adjacent edge cell. For a stencil reaching one cell, this is the
        same as using the cell itself in place of a missing neighbor. The work arrays
        are allocated once, so calling the function does not allocate memory.

        Args:
            grid (:class:`~heatgrid.grids.buffer.GridBuffer`):
                An example grid defining the dimension and the data type
            speed (float):
                The diffusion coefficient

        Returns:
            callable: Function with signature `(arr_in, arr_out)`
        """
        dim = grid.dim
        speed = self._check_speed(speed)
        padded = np.empty((dim + 2, dim + 2), dtype=grid.dtype)
        center = np.empty((dim, dim), dtype=grid.dtype)

        # views of the neighbors in the padded array
        valid = padded[1:-1, 1:-1]
        north = padded[:-2, 1:-1]
        south = padded[2:, 1:-1]
        west = padded[1:-1, :-2]
        east = padded[1:-1, 2:]

        def diffusion_step(arr_in: FloatingArray, arr_out: FloatingArray) -> None:
            """Apply the stencil to `arr_in` and write the result to `arr_out`"""
            arr = arr_in.reshape(dim, dim)
            out = arr_out.reshape(dim, dim)

            # set ghost cells from the adjacent edge cells
            valid[...] = arr
            padded[0, 1:-1] = arr[0, :]
            padded[-1, 1:-1] = arr[-1, :]
            padded[1:-1, 0] = arr[:, 0]
            padded[1:-1, -1] = arr[:, -1]

            # out = arr + speed * (north + south + west + east - arr * 4)
            np.add(north, south, out=out)
            out += west
            out += east
            np.multiply(arr, 4, out=center)
            out -= center
            out *= speed
            out += arr

        self._logger.info("Create diffusion step for %dx%d grid", dim, dim)
        return diffusion_step  # type: ignore

    def make_source_clamp(self, mask: ConstantSourceMask) -> SourceClampType:
        """Return a function that pins the constant sources of a grid.

        Args:
            mask (:class:`~heatgrid.grids.buffer.ConstantSourceMask`):
                The constant sources

        Returns:
            callable: Function with signature `(arr)` modifying `arr` in place
        """
        indices = np.flatnonzero(mask.data)
        values = mask.data[indices].copy()

        def source_clamp(arr: FloatingArray) -> None:
            """Overwrite the pinned cells of `arr`"""
            arr[indices] = values

        self._logger.info("Create source clamp for %d pinned cells", len(indices))
        return source_clamp  # type: ignore
