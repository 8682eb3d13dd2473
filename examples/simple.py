"""
Simple heat diffusion
=====================

This example advances the reference configuration on a smaller grid and shows the
final temperature field.
"""

import matplotlib.pyplot as plt

from heatgrid import SimulationContext, SimulationDriver, SimulationParameters

parameters = SimulationParameters(dim=128, substeps=30)  # define the simulation
context = SimulationContext.from_parameters(parameters)  # allocate and seed grids

driver = SimulationDriver(render_bridge=None)  # advance grids without rendering
state = driver.run(context, frames=20)
driver.teardown(context)

plt.imshow(state, cmap="inferno", vmin=parameters.min_temp, vmax=parameters.max_temp)
plt.colorbar(label="Temperature")
plt.show()
