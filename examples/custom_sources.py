"""
Custom heat sources
===================

This example places its own constant sources on the grid and renders the result
using a matplotlib colormap.
"""

import matplotlib.pyplot as plt

from heatgrid import (
    Rectangle,
    SimulationContext,
    SimulationDriver,
    SimulationParameters,
)

parameters = SimulationParameters(dim=96, substeps=20, speed=0.2)
sources = [
    (Rectangle(10, 20, 10, 86), 1.0),  # hot wall on the left
    (Rectangle(76, 86, 10, 86), 0.1),  # cold wall on the right
    (Rectangle.from_cell(48, 48), 0.8),  # single hot spot in the center
]
initial = [(Rectangle(0, 96, 0, 96), 0.5)]  # uniform initial temperature

context = SimulationContext.from_parameters(
    parameters, sources=sources, initial=initial
)
driver = SimulationDriver(backend="numpy", render_bridge="colormap")
driver.run(context, frames=25)

plt.imshow(context.image)
plt.axis("off")
plt.show()
driver.teardown(context)
