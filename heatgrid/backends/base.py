"""Defines base class of backends that implement the stepping functions.

.. autosummary::
   :nosignatures:

   BackendBase
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..grids.buffer import ConstantSourceMask, GridBuffer
    from ..tools.typing import DiffusionStepType, SourceClampType

_base_logger = logging.getLogger(__name__.rsplit(".", 1)[0])
""":class:`logging.Logger`: Base logger for backends."""

_RESERVED_BACKEND_NAMES = {"auto", "default", "config"}
"""set: names that cannot be used by actual backends"""


class BackendBase:
    """Basic backend from which all other backends inherit.

    A backend turns the two update rules of a substep into functions operating on
    flat arrays: the diffusion stencil, which reads one grid and writes another, and
    the clamping of constant sources, which modifies a grid in place.
    """

    _logger: logging.Logger  # logger instance to output information

    def __init__(self, name: str = ""):
        self.name = name

    def __init_subclass__(cls, **kwargs) -> None:
        """Initialize class-level attributes of subclasses."""
        super().__init_subclass__(**kwargs)
        # create logger for this specific backend class
        cls._logger = _base_logger.getChild(cls.__qualname__)

    def __repr__(self):
        return f"{self.__class__.__name__}(name={self.name!r})"

    @staticmethod
    def _check_speed(speed: float) -> float:
        """Convert the diffusion coefficient and reject non-finite values."""
        speed = float(speed)
        if not math.isfinite(speed):
            raise ValueError(f"Diffusion coefficient must be finite, not {speed}")
        return speed

    def make_diffusion_step(self, grid: GridBuffer, speed: float) -> DiffusionStepType:
        """Return a function applying the diffusion stencil.

        The returned function has the signature `(arr_in, arr_out)` and writes

        .. code-block:: text

            out = c + speed * (north + south + west + east - 4 * c)

        for every cell, where `c` is the value of the cell in `arr_in` and neighbors
        outside the grid are replaced by `c`. The input array is not modified.

        Args:
            grid (:class:`~heatgrid.grids.buffer.GridBuffer`):
                An example grid defining the dimension and the data type
            speed (float):
                The diffusion coefficient

        Returns:
            callable: The stencil update operating on flat arrays
        """
        msg = f"Diffusion is not supported by backend `{self.name}`"
        raise NotImplementedError(msg)

    def make_source_clamp(self, mask: ConstantSourceMask) -> SourceClampType:
        """Return a function that pins the constant sources of a grid.

        The returned function takes a flat array and sets every cell for which the
        mask is nonzero to the value of the mask. All other cells are left untouched.

        Args:
            mask (:class:`~heatgrid.grids.buffer.ConstantSourceMask`):
                The constant sources. The mask is read when the function is created
                and should not be modified afterwards.

        Returns:
            callable: The in-place clamping operating on flat arrays
        """
        msg = f"Source clamping is not supported by backend `{self.name}`"
        raise NotImplementedError(msg)
