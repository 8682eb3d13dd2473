"""Provides support for mypy type checking of the package."""

from __future__ import annotations

from typing import Any, Literal, Protocol

import numpy as np
from numpy.typing import ArrayLike  # noqa: F401

# array types:
FloatingArray = np.ndarray[Any, np.dtype[np.floating]]
ImageArray = np.ndarray[Any, np.dtype[np.uint8]]  # RGBA pixels, 4 bytes per cell

# miscellaneous types:
BackendType = Literal["numpy", "numba"]


class DiffusionStepType(Protocol):
    """A stencil update reading from one flat grid and writing into another."""

    def __call__(self, arr_in: FloatingArray, arr_out: FloatingArray) -> None:
        """Write the diffused values of `arr_in` into `arr_out`"""


class SourceClampType(Protocol):
    """An in-place update pinning the constant sources of a grid."""

    def __call__(self, arr: FloatingArray) -> None:
        """Overwrite the pinned cells of `arr`"""

