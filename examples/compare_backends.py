"""
Compare backends
================

This example advances the same simulation with both backends, checks that they
agree, and reports the average time per frame.
"""

import logging

import numpy as np

from heatgrid import (
    FrameTimer,
    SimulationContext,
    SimulationDriver,
    SimulationParameters,
)

logging.basicConfig(level=logging.WARNING)

parameters = SimulationParameters(dim=256, substeps=90)

results = {}
for backend in ["numpy", "numba"]:
    context = SimulationContext.from_parameters(parameters)
    timer = FrameTimer()
    driver = SimulationDriver(backend=backend, render_bridge=None, timer=timer)
    driver.advance_frame(context)  # compile the stepping functions
    results[backend] = driver.run(context, frames=5, progress=False)
    print(f"{backend}: {timer.average:.1f} ms per frame")
    driver.teardown(context)

print("Identical results:", np.array_equal(results["numpy"], results["numba"]))
