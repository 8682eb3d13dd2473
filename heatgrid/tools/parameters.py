"""Infrastructure for managing classes with parameters.

.. autosummary::
   :nosignatures:

   Parameterized
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from . import output
from .config import Parameter


class Parameterized:
    """A mixin that manages the parameters of a class."""

    parameters_default: Sequence[Parameter] = []
    _logger: logging.Logger

    def __init__(self, parameters: dict[str, Any] | None = None):
        """Initialize the parameters of the object.

        Args:
            parameters (dict):
                A dictionary of parameters to change the defaults. The allowed
                parameters can be obtained from
                :meth:`~Parameterized.get_parameters` or displayed by calling
                :meth:`~Parameterized.show_parameters`.
        """
        # set logger if this has not happened, yet
        if not hasattr(self, "_logger"):
            self._logger = logging.getLogger(self.__class__.__name__)

        # set parameters if they have not been initialized, yet
        if not hasattr(self, "parameters"):
            self.parameters = self._parse_parameters(parameters)

    @classmethod
    def get_parameters(cls, sort: bool = True) -> dict[str, Parameter]:
        """Return a dictionary of parameters that the class supports.

        Args:
            sort (bool): Return dictionary with sorted keys

        Returns:
            dict: a dictionary of instance of :class:`Parameter` with their
            names as keys.
        """
        # collect the parameters from the class hierarchy
        parameters: dict[str, Parameter] = {}
        for base in reversed(cls.__mro__):
            for p in getattr(base, "parameters_default", []):
                parameters[p.name] = p

        if sort:
            parameters = dict(sorted(parameters.items()))
        return parameters

    @classmethod
    def _parse_parameters(
        cls, parameters: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Parse parameters.

        Args:
            parameters (dict):
                A dictionary of parameters that will be parsed. A `ValueError` is
                raised if it contains keys that are not in the defaults.
        """
        if parameters is None:
            parameters = {}
        else:
            parameters = dict(parameters)  # do not modify the original

        # initialize parameters with default ones from all parent classes
        result: dict[str, Any] = {}
        for name, param_obj in cls.get_parameters(sort=False).items():
            # take value from parameters or set default value
            result[name] = param_obj.convert(parameters.pop(name, None))

        if parameters:
            raise ValueError(
                f"Parameters `{sorted(parameters.keys())}` were provided for an "
                f"instance but are not defined for the class `{cls.__name__}`"
            )

        return result

    def show_parameters(self, description: bool = False, sort: bool = False) -> None:
        """Show all parameters in human readable format.

        Args:
            description (bool):
                Flag determining whether the parameter description is shown.
            sort (bool):
                Flag determining whether the parameters are sorted
        """
        writer = output.BasicOutput()
        template = "{name}: {type} = {value!r}"
        if description:
            template += " ({description})"

        for param in self.get_parameters(sort=sort).values():
            writer(
                template.format(
                    name=param.name,
                    type=param.cls.__name__,
                    value=self.parameters[param.name],
                    description=param.description,
                )
            )
        writer.show()
