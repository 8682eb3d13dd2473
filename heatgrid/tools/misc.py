"""Miscellaneous python functions.

.. autosummary::
   :nosignatures:

   module_available
   decorator_arguments
"""

from __future__ import annotations

import functools
import importlib
from collections.abc import Callable


def module_available(module_name: str) -> bool:
    """Check whether a python module is available.

    Args:
        module_name (str): The name of the module

    Returns:
        `True` if the module can be imported and `False` otherwise
    """
    try:
        importlib.import_module(module_name)
    except ImportError:
        return False
    else:
        return True


def decorator_arguments(decorator: Callable) -> Callable:
    r"""Make a decorator usable with and without arguments.

    The resulting decorator can be used like `@decorator`
    or `@decorator(\*args, \**kwargs)`

    Inspired by https://stackoverflow.com/a/14412901/932593

    Args:
        decorator: the decorator that needs to be modified

    Returns:
        the decorated function
    """

    @functools.wraps(decorator)
    def new_decorator(*args, **kwargs):
        if len(args) == 1 and len(kwargs) == 0 and callable(args[0]):
            # actual decorated function
            return decorator(args[0])
        else:
            # decorator arguments
            return lambda realf: decorator(realf, *args, **kwargs)

    return new_decorator

