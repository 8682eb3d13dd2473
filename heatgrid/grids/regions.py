"""Axis-aligned rectangular blocks of grid cells.

Rectangles describe where sources and initial temperatures are placed on a grid. They
are given in cell units and are half-open, i.e., a rectangle with `x_min=2` and
`x_max=4` covers the columns 2 and 3.

.. autosummary::
   :nosignatures:

   Rectangle
   paint_regions
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .buffer import GridBuffer


class Rectangle:
    """Class that represents a block of cells on a square grid."""

    def __init__(self, x_min: int, x_max: int, y_min: int, y_max: int):
        """
        Args:
            x_min (int): First column covered by the rectangle
            x_max (int): Column after the last covered column
            y_min (int): First row covered by the rectangle
            y_max (int): Row after the last covered row
        """
        self.x_min, self.x_max = int(x_min), int(x_max)
        self.y_min, self.y_max = int(y_min), int(y_max)
        if self.x_max < self.x_min or self.y_max < self.y_min:
            raise ValueError(f"Rectangle has negative extent: {self}")

    @classmethod
    def from_cell(cls, x: int, y: int) -> Rectangle:
        """Create a rectangle covering the single cell `(x, y)`"""
        return cls(x, x + 1, y, y + 1)

    @classmethod
    def from_bounds(cls, bounds: Sequence[Sequence[int]]) -> Rectangle:
        """Create a rectangle from bounds `((x_min, x_max), (y_min, y_max))`"""
        (x_min, x_max), (y_min, y_max) = bounds
        return cls(x_min, x_max, y_min, y_max)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(x_min={self.x_min}, x_max={self.x_max}, "
            f"y_min={self.y_min}, y_max={self.y_max})"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.bounds == other.bounds

    @property
    def bounds(self) -> tuple[tuple[int, int], tuple[int, int]]:
        return (self.x_min, self.x_max), (self.y_min, self.y_max)

    @property
    def shape(self) -> tuple[int, int]:
        """tuple: number of covered columns and rows"""
        return self.x_max - self.x_min, self.y_max - self.y_min

    @property
    def num_cells(self) -> int:
        width, height = self.shape
        return width * height

    def contains(self, x: int, y: int) -> bool:
        """Check whether the cell `(x, y)` is covered by the rectangle"""
        return self.x_min <= x < self.x_max and self.y_min <= y < self.y_max

    def scaled(self, factor: float) -> Rectangle:
        """Return a rectangle with all bounds multiplied by `factor` and truncated

        A rectangle covering cells keeps covering at least one cell along each axis.
        """
        x_min, y_min = int(self.x_min * factor), int(self.y_min * factor)
        x_max, y_max = int(self.x_max * factor), int(self.y_max * factor)
        if self.num_cells > 0:
            x_max = max(x_max, x_min + 1)
            y_max = max(y_max, y_min + 1)
        return self.__class__(x_min, x_max, y_min, y_max)

    def check_inside(self, dim: int) -> None:
        """Raise :class:`ValueError` if the rectangle extends beyond a grid"""
        if self.x_min < 0 or self.y_min < 0 or self.x_max > dim or self.y_max > dim:
            raise ValueError(f"{self} does not fit into a {dim}x{dim} grid")

    def paint(self, grid: GridBuffer, value: float) -> None:
        """Set all covered cells of `grid` to `value`"""
        self.check_inside(grid.dim)
        grid.data2d[self.y_min : self.y_max, self.x_min : self.x_max] = value


def paint_regions(
    grid: GridBuffer, regions: Iterable[tuple[Rectangle, float]]
) -> None:
    """Paint several rectangles onto a grid.

    Later entries overwrite earlier ones where rectangles overlap.

    Args:
        grid (:class:`~heatgrid.grids.buffer.GridBuffer`):
            The grid that is modified in place
        regions:
            Pairs of a :class:`Rectangle` and the value assigned to its cells
    """
    for region, value in regions:
        region.paint(grid, value)
