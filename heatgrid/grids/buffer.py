"""Flat storage of a square grid of scalar temperatures.

A grid of dimension :math:`D` stores :math:`D^2` values in row-major order, so the
cell at column `x` and row `y` lives at the flat index :math:`x + y D`. The helper
functions defined here encode this mapping together with the neighbor lookup used by
the diffusion stencil. They only use integer arithmetic, so the numba backend can
compile them directly.

.. autosummary::
   :nosignatures:

   flat_index
   cell_position
   neighbor_index
   AllocationError
   GridBuffer
   ConstantSourceMask
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import numpy as np

from ..tools.typing import ArrayLike, FloatingArray

_logger = logging.getLogger(__name__)

# axis-aligned offsets (dx, dy) of the four neighbors used by the stencil
NORTH = (0, -1)
SOUTH = (0, 1)
WEST = (-1, 0)
EAST = (1, 0)
NEIGHBORS = (NORTH, SOUTH, WEST, EAST)


def flat_index(x: int, y: int, dim: int) -> int:
    """Return the flat index of the cell at column `x` and row `y`"""
    return x + y * dim


def cell_position(index: int, dim: int) -> tuple[int, int]:
    """Return the column and row `(x, y)` of the cell at the flat `index`"""
    return index % dim, index // dim


def neighbor_index(index: int, dx: int, dy: int, dim: int) -> int:
    """Return the flat index of the neighbor displaced by `(dx, dy)`

    A neighbor that would lie outside the grid is replaced by the cell itself. The
    grid is neither wrapped around nor reflected at its edges.

    Args:
        index (int): Flat index of the cell
        dx (int): Displacement along the columns
        dy (int): Displacement along the rows
        dim (int): Dimension of the square grid

    Returns:
        int: The flat index of the neighbor
    """
    x = index % dim + dx
    y = index // dim + dy
    if x < 0 or x >= dim or y < 0 or y >= dim:
        return index
    return x + y * dim


class AllocationError(MemoryError):
    """Indicates that the memory of a grid could not be allocated."""


class GridBuffer:
    """A square grid of scalar values stored in a flat array.

    The dimension and the data type are fixed when the buffer is created. All
    operations modify the data in place, so the underlying array is never replaced.
    """

    def __init__(self, dim: int, dtype="float64", *, fill: float = 0):
        """
        Args:
            dim (int):
                Number of cells along each side of the square grid
            dtype:
                Floating point type of the stored values
            fill (float):
                Value that all cells are initialized with
        """
        dim = int(dim)
        if dim < 1:
            raise ValueError(f"Grid dimension must be positive, not {dim}")
        dtype = np.dtype(dtype)
        if not np.issubdtype(dtype, np.floating):
            raise ValueError(f"Grids need a floating point type, not {dtype}")

        self._dim = dim
        try:
            self._data: FloatingArray = np.full(dim * dim, fill, dtype=dtype)
        except MemoryError as err:
            raise AllocationError(
                f"Could not allocate {dim}x{dim} grid of type {dtype}"
            ) from err

    @classmethod
    def from_array(cls, values: ArrayLike, dtype="float64") -> GridBuffer:
        """Create a grid from a two-dimensional array indexed as `values[y, x]`

        Args:
            values (:class:`~numpy.ndarray`):
                Square array with the values of all cells
            dtype:
                Floating point type of the stored values
        """
        values = np.asarray(values)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise ValueError(f"Need a square 2d array, not shape {values.shape}")
        obj = cls(values.shape[0], dtype=dtype)
        obj.data2d[...] = values
        return obj

    def __repr__(self):
        return f"{self.__class__.__name__}(dim={self.dim}, dtype={self.dtype})"

    @property
    def dim(self) -> int:
        """int: number of cells along each side"""
        return self._dim

    @property
    def size(self) -> int:
        """int: total number of cells"""
        return self._dim * self._dim

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def data(self) -> FloatingArray:
        """:class:`~numpy.ndarray`: flat array of all values in row-major order"""
        return self._data

    @property
    def data2d(self) -> FloatingArray:
        """:class:`~numpy.ndarray`: view of the values indexed as `[y, x]`"""
        return self._data.reshape(self._dim, self._dim)

    @property
    def writeable(self) -> bool:
        return bool(self._data.flags.writeable)

    def index(self, x: int, y: int) -> int:
        """Return the flat index of the cell `(x, y)`"""
        if not (0 <= x < self._dim and 0 <= y < self._dim):
            raise IndexError(
                f"Cell ({x}, {y}) lies outside the {self._dim}x{self._dim} grid"
            )
        return flat_index(x, y, self._dim)

    def position(self, index: int) -> tuple[int, int]:
        """Return the cell `(x, y)` of a flat index"""
        if not 0 <= index < self.size:
            raise IndexError(f"Index {index} lies outside the grid")
        return cell_position(index, self._dim)

    def neighbors(self, x: int, y: int) -> Iterator[int]:
        """Iterate over the flat indices of the four neighbors of cell `(x, y)`"""
        index = self.index(x, y)
        for dx, dy in NEIGHBORS:
            yield neighbor_index(index, dx, dy, self._dim)

    def __getitem__(self, cell: tuple[int, int]) -> float:
        """Return the value of the cell `(x, y)`"""
        return self._data[self.index(*cell)]  # type: ignore

    def __setitem__(self, cell: tuple[int, int], value: float) -> None:
        """Set the value of the cell `(x, y)`"""
        self._data[self.index(*cell)] = value

    def fill(self, value: float) -> None:
        """Set all cells to `value`"""
        self._data.fill(value)

    def check_compatible(self, other: GridBuffer) -> None:
        """Raise :class:`ValueError` if `other` has a different dimension or type"""
        if other.dim != self.dim:
            raise ValueError(f"Grid dimensions differ: {self.dim} != {other.dim}")
        if other.dtype != self.dtype:
            raise ValueError(f"Grid types differ: {self.dtype} != {other.dtype}")

    def release(self) -> None:
        """Drop the reference to the data so the memory can be reclaimed."""
        _logger.debug("Release %s", self)
        self._data = np.empty(0, dtype=self._data.dtype)
        self._dim = 0


class ConstantSourceMask(GridBuffer):
    """Grid marking cells whose temperature is pinned to a constant value.

    A cell value of exactly zero means that the cell is not pinned, while any other
    value is the temperature the cell is reset to before every diffusion step. The
    mask can be edited while it is being set up and is read-only after
    :meth:`freeze` has been called.
    """

    @property
    def pinned(self) -> np.ndarray:
        """:class:`~numpy.ndarray`: flat boolean array marking pinned cells"""
        return self._data != 0

    @property
    def num_sources(self) -> int:
        """int: number of pinned cells"""
        return int(np.count_nonzero(self._data))

    @property
    def frozen(self) -> bool:
        return not self.writeable

    def freeze(self) -> None:
        """Make the mask immutable."""
        self._data.flags.writeable = False
