"""Defines backends, which implement the numerical update of the grids.

.. autosummary::
   :nosignatures:

   ~registry.BackendRegistry
   ~numba.backend.NumbaBackend
   ~numpy.backend.NumpyBackend

.. inheritance-diagram::
         numba.backend.NumbaBackend
         numpy.backend.NumpyBackend
   :parts: 1
"""

# load and register the numpy backend, which is always available
from .numpy import numpy_backend

# load the registry, which manages all backends
from .registry import backends, registered_backends  # noqa: F401

backends.add(numpy_backend)

# register additional backends without loading them
backends.register_package("numba", "heatgrid.backends.numba")
