import pytest

from heatgrid.simulation import (
    SimulationContext,
    SimulationDriver,
    SimulationParameters,
)
from heatgrid.visualization import animate


def test_animation(small_context):
    """test creating an animation of a simulation"""
    driver = SimulationDriver(backend="numpy")
    anim = animate(driver, small_context, frames=3, show=False)
    anim._func(0)  # advance a single frame
    assert small_context.frame_index == 0
    assert small_context.substeps_done == 3
    assert small_context.image[..., 3].min() == 255


def test_animation_errors():
    """test invalid arguments of the animation"""
    context = SimulationContext.from_parameters(SimulationParameters(dim=4))
    with pytest.raises(ValueError):
        animate(SimulationDriver(render_bridge=None), context, show=False)
    context.release()
    with pytest.raises(RuntimeError):
        animate(SimulationDriver(), context, show=False)


@pytest.mark.interactive
def test_animation_interactive():
    """test showing an animation in a window"""
    context = SimulationContext.from_parameters(SimulationParameters(dim=256))
    animate(SimulationDriver(), context, frames=20)
