"""Defines the :mod:`numba` backend.

.. autosummary::
   :nosignatures:

   ~backend.NumbaBackend
"""

from .. import backends
from .backend import NumbaBackend

# add the loaded numba backend to the registry
numba_backend = NumbaBackend("numba")
backends.add(numba_backend)
