"""Render bridges converting temperature grids into RGBA images.

Every bridge writes four bytes per cell (red, green, blue, alpha) into an image
array of shape `(dim, dim, 4)`, which is indexed as `[y, x, channel]`.

.. autosummary::
   :nosignatures:

   RenderBridgeBase
   HueRenderBridge
   ColormapRenderBridge
   get_named_render_bridges
"""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from typing import TYPE_CHECKING

import numba as nb
import numpy as np

from ..backends.numba.utils import jit

if TYPE_CHECKING:
    from ..simulation.parameters import SimulationParameters
    from ..tools.typing import FloatingArray, ImageArray

_base_logger = logging.getLogger(__name__.rsplit(".", 1)[0])
""":class:`logging.Logger`: Base logger for visualization."""


class RenderBridgeBase(metaclass=ABCMeta):
    """Base class for converting the values of a grid into pixels."""

    name: str
    _logger: logging.Logger
    _subclasses: dict[str, type[RenderBridgeBase]] = {}  # all inheriting classes

    def __init_subclass__(cls, **kwargs):
        """Initialize class-level attributes of subclasses."""
        super().__init_subclass__(**kwargs)

        # create logger for this specific bridge class
        cls._logger = _base_logger.getChild(cls.__qualname__)

        # register all subclasses to reconstruct them later
        if hasattr(cls, "name"):
            cls._subclasses[cls.name] = cls

    @classmethod
    def from_data(cls, data: str | RenderBridgeBase, **kwargs) -> RenderBridgeBase:
        """Create render bridge from given data.

        Args:
            data (str or RenderBridgeBase): Data describing the render bridge

        Returns:
            :class:`RenderBridgeBase`: An instance representing the bridge
        """
        if isinstance(data, RenderBridgeBase):
            return data
        elif isinstance(data, str):
            try:
                bridge_cls = cls._subclasses[data]
            except KeyError as err:
                bridges = sorted(cls._subclasses.keys())
                raise ValueError(f"Render bridge `{data}` is not in {bridges}") from err
            return bridge_cls(**kwargs)
        else:
            raise ValueError(f"Unsupported render bridge format: `{data}`.")

    def initialize(self, parameters: SimulationParameters) -> None:
        """Adjust the bridge to the parameters of a simulation.

        Args:
            parameters (:class:`~heatgrid.simulation.parameters.SimulationParameters`):
                The parameters of the simulation
        """

    @abstractmethod
    def render(self, data: FloatingArray, out: ImageArray) -> None:
        """Convert the values of a grid into pixels.

        Args:
            data (:class:`~numpy.ndarray`):
                Flat array with the values of all cells in row-major order
            out (:class:`~numpy.ndarray`):
                Array of shape `(dim, dim, 4)` and type `uint8` receiving the pixels
        """

    def __call__(self, data: FloatingArray) -> ImageArray:
        """Return a newly allocated image of the grid values in `data`"""
        dim = int(round(np.sqrt(data.size)))
        out = np.empty((dim, dim, 4), dtype=np.uint8)
        self.render(data, out)
        return out


@jit
def _hue_channel(n1: float, n2: float, hue: float) -> int:
    """Return one color channel of an HSL color."""
    if hue > 360:
        hue -= 360
    elif hue < 0:
        hue += 360

    if hue < 60:
        value = 255 * (n1 + (n2 - n1) * hue / 60)
    elif hue < 180:
        value = 255 * n2
    elif hue < 240:
        value = 255 * (n1 + (n2 - n1) * (240 - hue) / 60)
    else:
        value = 255 * n1
    return int(min(max(value, 0), 255))


@jit
def _render_hue(data: FloatingArray, out: ImageArray) -> None:
    """Map each value to a fully saturated HSL color."""
    pixels = out.reshape(-1, 4)
    for i in nb.prange(data.size):
        lightness = data[i]
        # the remainder keeps the sign of the dividend
        hue = np.fmod(180.0 + int(360 * lightness), 360.0)
        if lightness <= 0.5:
            m2 = lightness * 2
        else:
            m2 = 1.0
        m1 = 2 * lightness - m2
        pixels[i, 0] = _hue_channel(m1, m2, hue + 120)
        pixels[i, 1] = _hue_channel(m1, m2, hue)
        pixels[i, 2] = _hue_channel(m1, m2, hue - 120)
        pixels[i, 3] = 255


class HueRenderBridge(RenderBridgeBase):
    """Shows temperatures as lightness and hue of a fully saturated color.

    A value `l` is mapped to the HSL color with lightness `l`, saturation one, and
    hue `(180 + 360 l) mod 360` degrees. Cold cells thus appear black and hot cells
    white, with colors cycling in between. Channel values are clipped to the range
    of a byte.
    """

    name = "hue"

    def render(self, data: FloatingArray, out: ImageArray) -> None:
        _render_hue(data, out)


class ColormapRenderBridge(RenderBridgeBase):
    """Shows temperatures using a :mod:`matplotlib` colormap."""

    name = "colormap"

    def __init__(
        self,
        cmap: str = "inferno",
        vmin: float | None = None,
        vmax: float | None = None,
    ):
        """
        Args:
            cmap (str):
                Name of the matplotlib colormap
            vmin (float, optional):
                Temperature mapped to the lower end of the colormap. The minimal seed
                temperature of the simulation is used if omitted.
            vmax (float, optional):
                Temperature mapped to the upper end of the colormap. The maximal seed
                temperature of the simulation is used if omitted.
        """
        import matplotlib as mpl

        self.cmap = mpl.colormaps[cmap]
        self.vmin = vmin
        self.vmax = vmax

    def initialize(self, parameters: SimulationParameters) -> None:
        if self.vmin is None:
            self.vmin = parameters.min_temp
        if self.vmax is None:
            self.vmax = parameters.max_temp

    def render(self, data: FloatingArray, out: ImageArray) -> None:
        from matplotlib.colors import Normalize

        dim = out.shape[0]
        norm = Normalize(vmin=self.vmin, vmax=self.vmax)
        out[...] = self.cmap(norm(data.reshape(dim, dim)), bytes=True)


def get_named_render_bridges() -> dict[str, type[RenderBridgeBase]]:
    """Returns all named render bridges.

    Returns:
        dict: a mapping of names to the actual render bridge classes.
    """
    return RenderBridgeBase._subclasses.copy()
