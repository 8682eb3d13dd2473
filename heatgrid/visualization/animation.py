"""Interactive display of a running simulation using :mod:`matplotlib`.

.. autosummary::
   :nosignatures:

   animate
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from matplotlib.animation import FuncAnimation

    from ..simulation.context import SimulationContext
    from ..simulation.driver import SimulationDriver

_logger = logging.getLogger(__name__)


def animate(
    driver: SimulationDriver,
    context: SimulationContext,
    frames: int | None = None,
    *,
    interval: float = 1,
    title: str | None = "Heat diffusion",
    show: bool = True,
    teardown: bool = True,
) -> FuncAnimation:
    """Show the image of a simulation while it is advanced frame by frame.

    The animation calls
    :meth:`~heatgrid.simulation.driver.SimulationDriver.advance_frame` once for
    every displayed frame and shows the image the render bridge of the driver wrote
    into the context.

    Args:
        driver (:class:`~heatgrid.simulation.driver.SimulationDriver`):
            The driver advancing the simulation, which needs a render bridge
        context (:class:`~heatgrid.simulation.context.SimulationContext`):
            The simulation that is shown
        frames (int, optional):
            The number of frames. The animation runs until the window is closed if
            omitted.
        interval (float):
            Delay between frames in milliseconds
        title (str):
            Title of the window
        show (bool):
            Whether to show the animation. If `False`, the animation object is
            returned without starting the event loop.
        teardown (bool):
            Whether to release the context when the window is closed

    Returns:
        :class:`matplotlib.animation.FuncAnimation`: the animation
    """
    import matplotlib.pyplot as plt
    from matplotlib.animation import FuncAnimation

    if driver.render_bridge is None:
        raise ValueError("Animations require a driver with a render bridge")
    context.check_active()

    fig, ax = plt.subplots()
    if title is not None:
        fig.canvas.manager.set_window_title(title)  # type: ignore
    ax.set_axis_off()
    img = ax.imshow(context.image, interpolation="nearest")

    def update(frame_index: int):
        """Advance the simulation and update the image."""
        driver.advance_frame(context, frame_index)
        img.set_data(context.image)
        return (img,)

    if teardown:

        def on_close(event) -> None:
            if not context.released:
                driver.teardown(context)

        fig.canvas.mpl_connect("close_event", on_close)

    anim = FuncAnimation(
        fig,
        update,
        frames=frames,
        interval=interval,
        blit=False,
        cache_frame_data=False,
        repeat=False,
    )
    _logger.info("Start animation of %r", context)

    if show:
        plt.show()
    return anim
