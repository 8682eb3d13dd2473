"""Grids store the temperature field and the constant sources of a simulation.

.. autosummary::
   :nosignatures:

   ~buffer.GridBuffer
   ~buffer.ConstantSourceMask
   ~double_buffer.DoubleBuffer
   ~regions.Rectangle
"""

from .buffer import AllocationError, ConstantSourceMask, GridBuffer  # noqa: F401
from .double_buffer import DoubleBuffer  # noqa: F401
from .regions import Rectangle, paint_regions  # noqa: F401
