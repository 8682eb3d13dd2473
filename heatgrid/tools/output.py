"""Python functions for handling output.

.. autosummary::
   :nosignatures:

   get_progress_bar_class
   display_progress
   BasicOutput
"""

from __future__ import annotations

import sys

import tqdm


def get_progress_bar_class(fancy: bool = True):
    """Returns a class that behaves as progress bar.

    Args:
        fancy (bool):
            Flag determining whether a fancy progress bar should be used in jupyter
            notebooks (if :mod:`ipywidgets` is installed)
    """
    if fancy:
        # try using notebook progress bar
        try:
            # check whether progress bar can use a widget
            import ipywidgets  # noqa: F401
        except ImportError:
            # widgets are not available => use standard tqdm
            progress_bar_class = tqdm.tqdm
        else:
            # use the fancier version of the progress bar in jupyter
            from tqdm.auto import tqdm as progress_bar_class
    else:
        # only import text progress bar
        progress_bar_class = tqdm.tqdm

    return progress_bar_class


def display_progress(iterator, total=None, enabled=True, **kwargs):
    r"""Displays a progress bar when iterating.

    Args:
        iterator (iter): The iterator
        total (int): Total number of steps
        enabled (bool): Flag determining whether the progress is display
        **kwargs: All extra arguments are forwarded to the progress bar class

    Returns:
        A class that behaves as the original iterator, but shows the progress
        alongside iteration.
    """
    if not enabled:
        return iterator

    return get_progress_bar_class()(iterator, total=total, **kwargs)


class BasicOutput:
    """Class that writes text line to stdout."""

    def __init__(self, stream=None):
        """
        Args:
            stream: The stream where the lines are written, which defaults to stdout
        """
        self.stream = sys.stdout if stream is None else stream

    def __call__(self, line: str):
        self.stream.write(line + "\n")

    def show(self):
        self.stream.flush()
