"""Defines the :mod:`numpy` backend.

.. autosummary::
   :nosignatures:

   ~backend.NumpyBackend
"""

from .backend import NumpyBackend

numpy_backend = NumpyBackend("numpy")
