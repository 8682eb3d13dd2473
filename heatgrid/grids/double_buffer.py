"""Two grids that alternate between the roles of the current and the next state.

.. autosummary::
   :nosignatures:

   DoubleBuffer
"""

from __future__ import annotations

from .buffer import GridBuffer


class DoubleBuffer:
    """Owns two grids of identical shape and tracks which one is current.

    Swapping the roles only flips an index into the pair of grids. The data of the
    grids is never copied or reallocated, so references obtained from
    :attr:`current` before a swap refer to :attr:`next` afterwards.
    """

    def __init__(self, first: GridBuffer, second: GridBuffer):
        """
        Args:
            first (:class:`~heatgrid.grids.buffer.GridBuffer`):
                The grid that initially plays the role of the current state
            second (:class:`~heatgrid.grids.buffer.GridBuffer`):
                The grid that initially receives the next state
        """
        if first is second:
            raise ValueError("Double buffer needs two distinct grids")
        first.check_compatible(second)
        self._slots = (first, second)
        self._current = 0

    @classmethod
    def allocate(cls, dim: int, dtype="float64") -> DoubleBuffer:
        """Allocate two zero-initialized grids."""
        return cls(GridBuffer(dim, dtype), GridBuffer(dim, dtype))

    def __repr__(self):
        return f"{self.__class__.__name__}({self.current!r}, current={self._current})"

    @property
    def slots(self) -> tuple[GridBuffer, GridBuffer]:
        """tuple: both grids in the order they were supplied"""
        return self._slots

    @property
    def current(self) -> GridBuffer:
        """:class:`~heatgrid.grids.buffer.GridBuffer`: grid holding the current state"""
        return self._slots[self._current]

    @property
    def next(self) -> GridBuffer:
        """:class:`~heatgrid.grids.buffer.GridBuffer`: grid receiving the next state"""
        return self._slots[1 - self._current]

    def swap(self) -> None:
        """Exchange the roles of the two grids."""
        self._current = 1 - self._current

    def release(self) -> None:
        for grid in self._slots:
            grid.release()
