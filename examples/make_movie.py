"""
Create a movie
==============

This example shows how to create a movie, which is only possible if `ffmpeg` is
installed in a standard location.
"""

from heatgrid import SimulationContext, SimulationDriver, SimulationParameters, movie

parameters = SimulationParameters(dim=64, substeps=10)
context = SimulationContext.from_parameters(parameters)

driver = SimulationDriver(render_bridge="hue")
movie(driver, context, "/tmp/heat_diffusion.mov", frames=30)
driver.teardown(context)
