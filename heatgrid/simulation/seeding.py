"""Initial conditions of a simulation.

A layout is a sequence of pairs of a :class:`~heatgrid.grids.regions.Rectangle` and
the temperature assigned to the covered cells. The reference layouts place their
regions on a grid with 1024 cells per side. Other grid dimensions scale the
coordinates proportionally.

.. autosummary::
   :nosignatures:

   reference_source_layout
   reference_initial_layout
   seed_source_mask
   seed_initial_grid
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..grids.buffer import ConstantSourceMask, GridBuffer
from ..grids.regions import Rectangle, paint_regions
from .parameters import SimulationParameters

_logger = logging.getLogger(__name__)

Layout = Sequence[tuple[Rectangle, float]]

REFERENCE_DIM = 1024
"""int: grid dimension for which the reference coordinates are given"""


def _scale_layout(layout: Layout, dim: int) -> list[tuple[Rectangle, float]]:
    """Scale regions given for the reference grid to a grid of dimension `dim`"""
    if dim == REFERENCE_DIM:
        return list(layout)
    factor = dim / REFERENCE_DIM
    return [(region.scaled(factor), value) for region, value in layout]


def reference_source_layout(
    parameters: SimulationParameters,
) -> list[tuple[Rectangle, float]]:
    """Return the constant sources of the reference simulation.

    The layout consists of a large hot block, a source at medium temperature, three
    cold point sources, and a cold block.

    Args:
        parameters (:class:`~heatgrid.simulation.parameters.SimulationParameters`):
            Parameters defining the grid dimension and the temperatures
    """
    t_max, t_min = parameters.max_temp, parameters.min_temp
    layout = [
        (Rectangle(301, 600, 311, 601), t_max),
        (Rectangle.from_cell(100, 100), parameters.mean_temp),
        (Rectangle.from_cell(100, 700), t_min),
        (Rectangle.from_cell(300, 300), t_min),
        (Rectangle.from_cell(700, 200), t_min),
        (Rectangle(400, 500, 800, 900), t_min),
    ]
    return _scale_layout(layout, parameters.dim)


def reference_initial_layout(
    parameters: SimulationParameters,
) -> list[tuple[Rectangle, float]]:
    """Return the initial hot region of the reference simulation.

    Args:
        parameters (:class:`~heatgrid.simulation.parameters.SimulationParameters`):
            Parameters defining the grid dimension and the temperatures
    """
    layout = [(Rectangle(0, 200, 800, REFERENCE_DIM), parameters.max_temp)]
    return _scale_layout(layout, parameters.dim)


def seed_source_mask(mask: ConstantSourceMask, layout: Layout) -> None:
    """Paint the constant sources onto a mask and freeze it.

    Args:
        mask (:class:`~heatgrid.grids.buffer.ConstantSourceMask`):
            The mask, which must still be writeable
        layout:
            Pairs of rectangles and their pinned temperatures
    """
    if mask.frozen:
        raise RuntimeError("Source mask has already been seeded")
    mask.fill(0)
    paint_regions(mask, layout)
    mask.freeze()
    _logger.info("Seeded %d constant source cells", mask.num_sources)


def seed_initial_grid(grid: GridBuffer, layout: Layout) -> None:
    """Set a grid to zero everywhere except in the regions of `layout`

    Args:
        grid (:class:`~heatgrid.grids.buffer.GridBuffer`):
            The grid holding the initial state
        layout:
            Pairs of rectangles and their initial temperatures
    """
    grid.fill(0)
    paint_regions(grid, layout)
