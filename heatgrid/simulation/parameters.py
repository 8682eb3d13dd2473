"""Named and validated parameters of a heat diffusion simulation.

.. autosummary::
   :nosignatures:

   SimulationParameters
"""

from __future__ import annotations

import logging
import math
from typing import Any

import numpy as np

from ..tools.config import Parameter
from ..tools.parameters import Parameterized

STABILITY_LIMIT = 0.25
"""float: largest diffusion coefficient for which the explicit scheme is stable"""


class SimulationParameters(Parameterized):
    """Parameters that stay fixed for the life time of a simulation.

    Parameters can be supplied as a dictionary or as keyword arguments and are
    accessible as attributes::

        parameters = SimulationParameters(dim=256, substeps=10)
        parameters.speed  # 0.25

    The values are checked when the object is created and cannot be changed
    afterwards. The diffusion coefficient is deliberately not restricted to the
    stable range of the explicit scheme; values beyond it only emit a warning.
    """

    parameters_default = [
        Parameter("dim", 1024, int, "Number of cells along each side of the grid"),
        Parameter(
            "speed",
            0.25,
            float,
            "Diffusion coefficient scaling the difference between the neighbors and "
            "the cell itself in every substep",
        ),
        Parameter(
            "max_temp", 1.0, float, "Temperature of the hot regions of the seed"
        ),
        Parameter(
            "min_temp", 0.0001, float, "Temperature of the cold regions of the seed"
        ),
        Parameter(
            "substeps", 90, int, "Number of substeps advanced for each displayed frame"
        ),
        Parameter(
            "dtype", "float64", str, "Floating point type of the stored temperatures"
        ),
    ]

    _logger = logging.getLogger(__name__)

    def __init__(self, parameters: dict[str, Any] | None = None, **kwargs):
        """
        Args:
            parameters (dict):
                Values overwriting the defaults
            **kwargs:
                Additional values overwriting the defaults
        """
        values = {} if parameters is None else dict(parameters)
        values.update(kwargs)
        super().__init__(values)
        self._check()
        self._frozen = True

    def _check(self) -> None:
        """Raise :class:`ValueError` for inconsistent parameter values."""
        p = self.parameters
        if p["dim"] < 1:
            raise ValueError(f"Grid dimension must be positive, not {p['dim']}")
        if p["substeps"] < 1:
            raise ValueError(
                f"Need at least one substep per frame, not {p['substeps']}"
            )
        for name in ["speed", "max_temp", "min_temp"]:
            if not math.isfinite(p[name]):
                raise ValueError(f"Parameter `{name}` must be finite, not {p[name]}")
        if p["speed"] < 0:
            raise ValueError(
                f"Diffusion coefficient must not be negative, not {p['speed']}"
            )
        if p["min_temp"] > p["max_temp"]:
            raise ValueError(
                f"Minimal temperature {p['min_temp']} exceeds maximal temperature "
                f"{p['max_temp']}"
            )
        if p["dtype"] not in {"float32", "float64"}:
            raise ValueError(f"Unsupported data type `{p['dtype']}`")

        if p["speed"] > STABILITY_LIMIT:
            self._logger.warning(
                "Diffusion coefficient %g exceeds %g, so the explicit scheme might be "
                "unstable",
                p["speed"],
                STABILITY_LIMIT,
            )

    def __getattr__(self, name: str):
        # only called when regular attribute lookup fails
        parameters = self.__dict__.get("parameters", {})
        try:
            return parameters[name]
        except KeyError:
            raise AttributeError(
                f"`{self.__class__.__name__}` has no attribute `{name}`"
            ) from None

    def __setattr__(self, name: str, value) -> None:
        if self.__dict__.get("_frozen", False):
            raise AttributeError("Simulation parameters cannot be changed")
        super().__setattr__(name, value)

    def __repr__(self):
        args = ", ".join(f"{k}={v!r}" for k, v in self.parameters.items())
        return f"{self.__class__.__name__}({args})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.parameters == other.parameters

    @property
    def numpy_dtype(self) -> np.dtype:
        """:class:`numpy.dtype`: the floating point type of the grids"""
        return np.dtype(self.parameters["dtype"])

    @property
    def mean_temp(self) -> float:
        """float: average of the minimal and maximal temperature"""
        return (self.parameters["max_temp"] + self.parameters["min_temp"]) / 2

    def replace(self, **kwargs) -> SimulationParameters:
        """Return a copy with some values replaced."""
        values = dict(self.parameters)
        values.update(kwargs)
        return self.__class__(values)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.parameters)
