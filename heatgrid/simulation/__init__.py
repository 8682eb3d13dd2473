"""Parameters, state, and stepping of heat diffusion simulations.

.. autosummary::
   :nosignatures:

   ~parameters.SimulationParameters
   ~context.SimulationContext
   ~driver.SimulationDriver
   ~timer.FrameTimer
   ~seeding.reference_source_layout
   ~seeding.reference_initial_layout
"""

from .context import SimulationContext, TransferError  # noqa: F401
from .driver import SimulationDriver  # noqa: F401
from .parameters import SimulationParameters  # noqa: F401
from .seeding import (  # noqa: F401
    reference_initial_layout,
    reference_source_layout,
    seed_initial_grid,
    seed_source_mask,
)
from .timer import FrameTimer  # noqa: F401
