"""
Animate the reference simulation
================================

This example shows the reference configuration in a window. Every frame advances
the grids by 90 substeps. Closing the window releases the grids and reports the
average time per frame.
"""

import logging

from heatgrid import SimulationContext, SimulationDriver, SimulationParameters, animate

logging.basicConfig(level=logging.INFO)

context = SimulationContext.from_parameters(SimulationParameters())
animate(SimulationDriver(render_bridge="hue"), context, frames=100)
