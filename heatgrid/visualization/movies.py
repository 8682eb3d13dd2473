"""Functions for creating movies of simulations.

.. autosummary::
   :nosignatures:

   Movie
   movie
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..tools.output import display_progress

if TYPE_CHECKING:
    from ..simulation.context import SimulationContext
    from ..simulation.driver import SimulationDriver


class Movie:
    """Class for creating movies from matplotlib figures using ffmpeg.

    Note:
        Internally, this class uses :class:`matplotlib.animation.FFMpegWriter`.
        Note that the `ffmpeg` program needs to be installed in a system path,
        so that `matplotlib` can find it.
    """

    def __init__(
        self,
        filename: str | Path,
        framerate: float = 30,
        dpi: float | None = None,
        **kwargs,
    ):
        r"""
        Args:
            filename (str):
                The filename where the movie is stored. The suffix of this path
                also determines the default movie codec.
            framerate (float):
                The number of frames per second, which determines how fast the
                movie will appear to run.
            dpi (float):
                The resolution of the resulting movie
            \**kwargs:
                Additional parameters are used to initialize
                :class:`matplotlib.animation.FFMpegWriter`, e.g., the `bitrate`.
        """
        self.filename = str(filename)
        self.framerate = framerate
        self.dpi = dpi
        self.kwargs = kwargs

        if not self.is_available():
            raise RuntimeError(
                "FFMpegWriter is not available. This is most likely because a suitable "
                "installation of FFMpeg was not found. See ffmpeg.org for how to "
                "install it properly on your system."
            )

        self._writer = None

    @classmethod
    def is_available(cls) -> bool:
        """Check whether the movie infrastructure is available.

        Returns:
            bool: True if movies can be created
        """
        from matplotlib.animation import FFMpegWriter

        return FFMpegWriter.isAvailable()  # type: ignore

    def __enter__(self) -> Movie:
        return self

    def __exit__(self, exc_type, exc_value, exc_tb):
        self._end()
        return False

    def _end(self) -> None:
        """Clear up temporary things if necessary."""
        if self._writer is not None:
            self._writer.finish()
        self._writer = None

    def add_figure(self, fig=None) -> None:
        """Adds the figure `fig` as a frame to the current movie.

        Args:
            fig (:class:`~matplotlib.figures.Figure`):
                The plot figure that is added to the movie
        """
        if fig is None:
            import matplotlib.pyplot as plt

            fig = plt.gcf()

        if self._writer is None:
            # initialize a new writer
            from matplotlib.animation import FFMpegWriter

            self._writer = FFMpegWriter(self.framerate, **self.kwargs)
            self._writer.setup(fig, self.filename, dpi=self.dpi)
        else:
            # the figure might have changed since the last call
            self._writer.fig = fig

        self._writer.grab_frame()


def movie(
    driver: SimulationDriver,
    context: SimulationContext,
    filename: str | Path,
    frames: int,
    *,
    progress: bool = True,
    **kwargs,
) -> None:
    """Advance a simulation and write every frame to a movie.

    Args:
        driver (:class:`~heatgrid.simulation.driver.SimulationDriver`):
            The driver advancing the simulation, which needs a render bridge
        context (:class:`~heatgrid.simulation.context.SimulationContext`):
            The simulation that is recorded
        filename (str):
            The filename to which the movie is written. The extension determines
            the format used.
        frames (int):
            The number of frames in the movie
        progress (bool):
            Flag determining whether the progress of making the movie is shown.
        **kwargs:
            Additional arguments for :class:`Movie`
    """
    import matplotlib.pyplot as plt

    if driver.render_bridge is None:
        raise ValueError("Movies require a driver with a render bridge")
    context.check_active()

    fig, ax = plt.subplots()
    ax.set_axis_off()
    img = ax.imshow(context.image, interpolation="nearest")

    start = 0 if context.frame_index is None else context.frame_index + 1
    indices = display_progress(
        range(start, start + frames), total=frames, enabled=progress
    )
    try:
        with Movie(filename, **kwargs) as mov:
            for frame_index in indices:
                driver.advance_frame(context, frame_index)
                img.set_data(context.image)
                mov.add_figure(fig)
    finally:
        plt.close(fig)
