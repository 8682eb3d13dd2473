"""Package containing several tools required in heatgrid.

.. autosummary::
   :nosignatures:

   config
   math
   misc
   output
   typing
"""
