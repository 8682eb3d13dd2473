import logging

import numpy as np
import pytest

from heatgrid import config
from heatgrid.backends import backends
from heatgrid.grids import Rectangle
from heatgrid.simulation import (
    FrameTimer,
    SimulationContext,
    SimulationDriver,
    SimulationParameters,
    TransferError,
)
from heatgrid.visualization import HueRenderBridge, RenderBridgeBase


def manual_substeps(context: SimulationContext, backend: str, substeps: int):
    """Advance a context without the driver."""
    b = backends[backend]
    clamp = b.make_source_clamp(context.mask)
    step = b.make_diffusion_step(context.current, context.parameters.speed)
    current, following = context.current.data.copy(), context.current.data.copy()
    for _ in range(substeps):
        clamp(current)
        step(current, following)
        current, following = following, current
    return current.reshape(context.current.dim, -1)


@pytest.mark.parametrize("backend", ["numpy", "numba"])
def test_advance_frame(backend, small_context):
    """test advancing frames and the state of the context"""
    expected = manual_substeps(small_context, backend, 6)

    driver = SimulationDriver(backend=backend)
    assert driver.backend.name == backend
    assert isinstance(driver.render_bridge, HueRenderBridge)
    assert isinstance(repr(driver), str)
    assert small_context.status == "idle"

    driver.advance_frame(small_context)
    assert small_context.status == "stepping"
    assert small_context.frame_index == 0
    assert small_context.substeps_done == 3
    driver.advance_frame(small_context, 7)
    assert small_context.status == "stepping"
    assert small_context.frame_index == 7
    assert small_context.substeps_done == 6

    np.testing.assert_array_equal(small_context.get_state(), expected)
    assert driver.timer is not None
    assert driver.timer.frames == 2
    assert driver.info["substeps"] == 3

    # the image reflects the final grid
    np.testing.assert_array_equal(
        small_context.image, HueRenderBridge()(small_context.current.data)
    )


def test_substep_swaps_buffers(small_context):
    """test that every substep exchanges the roles of the grids"""
    driver = SimulationDriver(backend="numpy", render_bridge=None, timer=False)
    first, second = small_context.buffers.slots
    assert small_context.current is first
    driver.substep(small_context)
    assert small_context.current is second
    assert small_context.buffers.next is first
    driver.advance(small_context, 3)
    assert small_context.current is first
    assert small_context.substeps_done == 4


def test_pinned_sources_after_frame():
    """test that sources are pinned at the start of each substep"""
    p = SimulationParameters(dim=8, substeps=5)
    context = SimulationContext.from_parameters(
        p, sources=[(Rectangle.from_cell(3, 3), 1.0)], initial=[]
    )
    driver = SimulationDriver(backend="numpy", render_bridge=None)
    driver.advance_frame(context)
    state = context.get_state()
    # the source cell loses heat during the last diffusion step
    assert 0 < state[3, 3] < 1
    assert state[3, 4] > 0
    assert state.min() >= 0

    driver.substep(context)  # clamping restores the source before diffusion
    assert context.buffers.next[3, 3] == 1


def test_zero_state_at_rest():
    """test that a simulation without heat stays at zero"""
    p = SimulationParameters(dim=16, substeps=10)
    context = SimulationContext.from_parameters(p, sources=[], initial=[])
    state = SimulationDriver(render_bridge=None).run(context, 5, progress=False)
    np.testing.assert_array_equal(state, 0)


def test_backends_agree_on_frames():
    """test that both backends produce identical frames"""
    p = SimulationParameters(dim=48, substeps=10)
    states = []
    for backend in ["numpy", "numba"]:
        context = SimulationContext.from_parameters(p)
        driver = SimulationDriver(backend=backend, render_bridge=None)
        states.append(driver.run(context, 3, progress=False))
        driver.teardown(context)
    np.testing.assert_array_equal(states[0], states[1])


def test_parallel_frame():
    """test advancing a frame with multithreaded stepping functions"""
    p = SimulationParameters(dim=40, substeps=7)
    context = SimulationContext.from_parameters(p)
    expected = manual_substeps(context, "numpy", 7)
    driver = SimulationDriver(backend="numba")
    parallel = {"numba.multithreading": "always", "numba.multithreading_threshold": 1}
    with config(parallel):
        driver.advance_frame(context)
    assert context.status == "stepping"
    assert driver._diffusion_step.targetoptions["parallel"]  # type: ignore
    np.testing.assert_array_equal(context.get_state(), expected)
    driver.teardown(context)


def test_run_and_teardown(small_context, caplog):
    """test running several frames and releasing the context"""
    timer = FrameTimer()
    driver = SimulationDriver(backend="numpy", timer=timer)
    state = driver.run(small_context, 4, progress=False)
    assert state.shape == (32, 32)
    assert small_context.frame_index == 3
    assert small_context.substeps_done == 12
    driver.run(small_context, 2, progress=False)
    assert small_context.frame_index == 5
    assert timer.frames == 6

    with caplog.at_level(logging.INFO):
        driver.teardown(small_context)
    assert "Average time per frame" in caplog.text
    assert driver.info["time_per_frame"] == timer.average
    assert small_context.released

    with pytest.raises(RuntimeError):
        driver.advance_frame(small_context)
    with pytest.raises(RuntimeError):
        driver.substep(small_context)


def test_driver_with_several_contexts():
    """test that a driver can alternate between contexts"""
    driver = SimulationDriver(backend="numpy", render_bridge=None)
    c1 = SimulationContext.from_parameters(SimulationParameters(dim=8, substeps=2))
    c2 = SimulationContext.from_parameters(SimulationParameters(dim=16, substeps=2))
    driver.advance_frame(c1)
    driver.advance_frame(c2)
    driver.advance_frame(c1)
    assert c1.substeps_done == 4
    assert c2.substeps_done == 2
    assert driver.info["dim"] == 8


def test_transfer_errors(small_context):
    """test failures to deliver the final grid"""

    class FailingBridge(RenderBridgeBase):
        def render(self, data, out):
            raise OSError("display disconnected")

    driver = SimulationDriver(backend="numpy", render_bridge=FailingBridge())
    with pytest.raises(TransferError) as excinfo:
        driver.advance_frame(small_context)
    assert isinstance(excinfo.value.__cause__, OSError)
    assert driver.timer is not None
    assert driver.timer.frames == 0
    assert not driver.timer.running

    driver = SimulationDriver(backend="numpy")
    small_context.image = np.zeros((4, 4, 4), dtype=np.uint8)
    with pytest.raises(TransferError):
        driver.advance_frame(small_context)


def test_driver_arguments():
    """test invalid arguments of the driver"""
    with pytest.raises(KeyError):
        SimulationDriver(backend="undefined")
    with pytest.raises(ValueError):
        SimulationDriver(render_bridge="undefined")
    assert SimulationDriver(timer=False).timer is None
