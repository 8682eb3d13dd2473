"""Functions and classes for visualizing simulations.

.. autosummary::
   :nosignatures:

   render
   animation
   movies
"""

from .animation import animate  # noqa: F401
from .movies import Movie, movie  # noqa: F401
from .render import (  # noqa: F401
    ColormapRenderBridge,
    HueRenderBridge,
    RenderBridgeBase,
    get_named_render_bridges,
)
