"""Advances a simulation frame by frame.

.. autosummary::
   :nosignatures:

   SimulationDriver
"""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING, Any, Literal

import numpy as np

from ..backends import backends
from ..tools.output import display_progress
from ..visualization.render import RenderBridgeBase
from .context import SimulationContext, TransferError
from .timer import FrameTimer

if TYPE_CHECKING:
    from ..backends.base import BackendBase
    from ..tools.typing import (
        BackendType,
        DiffusionStepType,
        FloatingArray,
        SourceClampType,
    )


class SimulationDriver:
    """Applies the substeps of the simulation to a :class:`SimulationContext`

    One substep pins the constant sources of the current grid, writes the diffused
    values into the next grid, and exchanges the roles of the two grids. The driver
    keeps no state of the simulation itself. All grids are owned by the context
    that is passed to every method, so a single driver can advance several contexts.

    Example:
        A headless simulation of a small grid::

            context = SimulationContext.from_parameters(SimulationParameters(dim=64))
            driver = SimulationDriver(render_bridge=None)
            driver.run(context, frames=10)
            driver.teardown(context)
    """

    _logger = logging.getLogger(__name__)

    def __init__(
        self,
        *,
        backend: BackendBase | BackendType | Literal["default", "auto"] = "default",
        render_bridge: str | RenderBridgeBase | None = "hue",
        timer: FrameTimer | bool = True,
    ):
        """
        Args:
            backend (str or :class:`~heatgrid.backends.base.BackendBase`):
                The backend implementing the substeps. `default` uses the backend
                set in the package configuration and `auto` prefers `numba`.
            render_bridge (str or :class:`~heatgrid.visualization.RenderBridgeBase`):
                Converts the grid into the image of the context after every frame.
                No image is created if `None`.
            timer (:class:`~heatgrid.simulation.timer.FrameTimer` or bool):
                Measures the duration of frames. `True` creates a new timer and
                `False` disables timing.
        """
        self.backend = backends[backend]
        if render_bridge is None:
            self.render_bridge: RenderBridgeBase | None = None
        else:
            self.render_bridge = RenderBridgeBase.from_data(render_bridge)
        if timer is True:
            self.timer: FrameTimer | None = FrameTimer()
        elif timer is False:
            self.timer = None
        else:
            self.timer = timer

        self.info: dict[str, Any] = {
            "backend": self.backend.name,
            "render_bridge": getattr(self.render_bridge, "name", None),
        }
        self._prepared_context: SimulationContext | None = None
        self._diffusion_step: DiffusionStepType | None = None
        self._source_clamp: SourceClampType | None = None

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(backend={self.backend.name!r}, "
            f"render_bridge={self.info['render_bridge']!r})"
        )

    def _prepare(self, context: SimulationContext) -> None:
        """Create the stepping functions for the grids of `context`"""
        if self._prepared_context is context:
            return
        context.check_active()
        params = context.parameters
        self._diffusion_step = self.backend.make_diffusion_step(
            context.current, params.speed
        )
        self._source_clamp = self.backend.make_source_clamp(context.mask)
        if self.render_bridge is not None:
            self.render_bridge.initialize(params)
        self._prepared_context = context
        self.info["dim"] = params.dim
        self.info["substeps"] = params.substeps

    def substep(self, context: SimulationContext) -> None:
        """Apply a single substep to the grids of `context`"""
        self.advance(context, 1)

    def advance(self, context: SimulationContext, substeps: int) -> None:
        """Apply a number of substeps without rendering.

        Args:
            context (:class:`~heatgrid.simulation.context.SimulationContext`):
                The simulation whose grids are advanced
            substeps (int):
                The number of substeps
        """
        context.check_active()
        self._prepare(context)
        source_clamp = self._source_clamp
        diffusion_step = self._diffusion_step
        assert source_clamp is not None and diffusion_step is not None
        buffers = context.buffers

        for _ in range(substeps):
            source_clamp(buffers.current.data)
            diffusion_step(buffers.current.data, buffers.next.data)
            buffers.swap()
        context.substeps_done += substeps

    def advance_frame(
        self, context: SimulationContext, frame_index: int | None = None
    ) -> None:
        """Advance the simulation by one displayed frame.

        The grids are advanced by the number of substeps given by the parameters of
        the context. Afterwards, the current grid is converted into the image of the
        context. The method returns after the image has been written.

        Args:
            context (:class:`~heatgrid.simulation.context.SimulationContext`):
                The simulation that is advanced
            frame_index (int, optional):
                Index of the frame, which is counted up from the last frame if omitted
        """
        context.check_active()
        if frame_index is None:
            frame_index = 0 if context.frame_index is None else context.frame_index + 1
        if context.status == "idle":
            self._logger.info("Start stepping with backend `%s`", self.backend.name)
            context.status = "stepping"

        timing = self.timer if self.timer is not None else contextlib.nullcontext()
        with timing:
            self.advance(context, context.parameters.substeps)
            if self.render_bridge is not None:
                self._transfer(context)

        context.frame_index = frame_index
        self._logger.debug(
            "Advanced frame %d (%d substeps in total)",
            frame_index,
            context.substeps_done,
        )

    def _transfer(self, context: SimulationContext) -> None:
        """Write the image of the current grid into the context."""
        assert self.render_bridge is not None
        dim = context.parameters.dim
        image = context.image
        if image.shape != (dim, dim, 4) or image.dtype != np.uint8:
            raise TransferError(
                f"Image of shape {image.shape} and type {image.dtype} cannot hold "
                f"the pixels of a {dim}x{dim} grid"
            )
        try:
            self.render_bridge.render(context.current.data, image)
        except Exception as err:
            raise TransferError(
                f"Render bridge `{self.info['render_bridge']}` failed"
            ) from err

    def run(
        self, context: SimulationContext, frames: int, *, progress: bool = True
    ) -> FloatingArray:
        """Advance the simulation by a number of frames.

        Args:
            context (:class:`~heatgrid.simulation.context.SimulationContext`):
                The simulation that is advanced
            frames (int):
                The number of frames
            progress (bool):
                Whether to display a progress bar

        Returns:
            :class:`~numpy.ndarray`: a copy of the final grid indexed as `[y, x]`
        """
        start = 0 if context.frame_index is None else context.frame_index + 1
        indices = range(start, start + frames)
        for frame_index in display_progress(indices, total=frames, enabled=progress):
            self.advance_frame(context, frame_index)
        return context.get_state()

    def teardown(self, context: SimulationContext) -> None:
        """Release the grids of `context` and report the frame timing."""
        context.release()
        if self._prepared_context is context:
            self._prepared_context = None
            self._diffusion_step = self._source_clamp = None
        if self.timer is not None and self.timer.frames > 0:
            self.info["time_per_frame"] = self.timer.report()
