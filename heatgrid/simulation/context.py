"""The state of a simulation, which is owned by the caller.

.. autosummary::
   :nosignatures:

   TransferError
   SimulationContext
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

import numpy as np

from ..grids.buffer import AllocationError, ConstantSourceMask, GridBuffer
from ..grids.double_buffer import DoubleBuffer
from .parameters import SimulationParameters
from .seeding import (
    Layout,
    reference_initial_layout,
    reference_source_layout,
    seed_initial_grid,
    seed_source_mask,
)

if TYPE_CHECKING:
    from ..tools.typing import FloatingArray, ImageArray

_logger = logging.getLogger(__name__)

StatusType = Literal["idle", "stepping", "released"]


class TransferError(RuntimeError):
    """Indicates that the final grid of a frame could not be delivered."""


class SimulationContext:
    """Collects the grids, the sources, and the output image of a simulation.

    The context is created once, passed explicitly to every operation of
    :class:`~heatgrid.simulation.driver.SimulationDriver`, and released at the end.
    It is the only owner of the two grids holding the temperature field and of the
    mask defining the constant sources.

    Attributes:
        status (str):
            `idle` before the first frame, `stepping` once frames are advanced, and
            `released` after :meth:`release` was called
        frame_index (int):
            Index of the last frame that was advanced, or `None` before the first
        substeps_done (int):
            Total number of substeps applied to the grids
    """

    def __init__(
        self,
        parameters: SimulationParameters,
        buffers: DoubleBuffer,
        mask: ConstantSourceMask,
    ):
        """
        Args:
            parameters (:class:`~heatgrid.simulation.parameters.SimulationParameters`):
                The parameters of the simulation
            buffers (:class:`~heatgrid.grids.double_buffer.DoubleBuffer`):
                The grids holding the current and the next state
            mask (:class:`~heatgrid.grids.buffer.ConstantSourceMask`):
                The constant sources, which must have the dimension of the grids
        """
        buffers.current.check_compatible(mask)
        if buffers.current.dim != parameters.dim:
            raise ValueError(
                f"Grid dimension {buffers.current.dim} differs from parameter "
                f"dim={parameters.dim}"
            )
        if not mask.frozen:
            mask.freeze()

        self.parameters = parameters
        self.buffers = buffers
        self.mask = mask
        dim = parameters.dim
        try:
            self.image: ImageArray = np.zeros((dim, dim, 4), dtype=np.uint8)
        except MemoryError as err:
            raise AllocationError(f"Could not allocate {dim}x{dim} image") from err

        self.status: StatusType = "idle"
        self.frame_index: int | None = None
        self.substeps_done = 0

    @classmethod
    def from_parameters(
        cls,
        parameters: SimulationParameters | None = None,
        *,
        sources: Layout | None = None,
        initial: Layout | None = None,
    ) -> SimulationContext:
        """Allocate and seed all grids of a simulation.

        Args:
            parameters (:class:`~heatgrid.simulation.parameters.SimulationParameters`):
                The parameters of the simulation. Default parameters are used if
                omitted.
            sources:
                Rectangles and temperatures of the constant sources. Uses
                :func:`~heatgrid.simulation.seeding.reference_source_layout` if
                omitted.
            initial:
                Rectangles and temperatures of the initial state, which is zero
                elsewhere. Uses
                :func:`~heatgrid.simulation.seeding.reference_initial_layout` if
                omitted.

        Returns:
            :class:`SimulationContext`: the seeded context
        """
        if parameters is None:
            parameters = SimulationParameters()
        if sources is None:
            sources = reference_source_layout(parameters)
        if initial is None:
            initial = reference_initial_layout(parameters)

        dim, dtype = parameters.dim, parameters.numpy_dtype
        mask = ConstantSourceMask(dim, dtype)
        buffers = DoubleBuffer.allocate(dim, dtype)
        _logger.info("Allocated two %dx%d grids of type %s", dim, dim, dtype)

        seed_source_mask(mask, sources)
        seed_initial_grid(buffers.current, initial)
        return cls(parameters, buffers, mask)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(dim={self.parameters.dim}, "
            f"status={self.status!r}, frame_index={self.frame_index})"
        )

    @property
    def current(self) -> GridBuffer:
        """:class:`~heatgrid.grids.buffer.GridBuffer`: grid with the current state"""
        return self.buffers.current

    @property
    def released(self) -> bool:
        return self.status == "released"

    def check_active(self) -> None:
        """Raise :class:`RuntimeError` if the grids have been released."""
        if self.released:
            raise RuntimeError("Simulation context has already been released")

    def get_state(self) -> FloatingArray:
        """Return a copy of the current temperatures indexed as `[y, x]`"""
        self.check_active()
        return self.current.data2d.copy()

    def release(self) -> None:
        """Release the grids and the mask."""
        if self.released:
            return
        self.buffers.release()
        self.mask.release()
        self.image = np.zeros((0, 0, 4), dtype=np.uint8)
        self.status = "released"
        _logger.info(
            "Released simulation context after %d substeps", self.substeps_done
        )
