# cclabel/core/errors.py
# Error taxonomy shared by the labelers, the area filter and the collaborators

from __future__ import annotations


class LabelingError(Exception):
    """Base class for every error raised by cclabel."""


class InvalidArgument(LabelingError, ValueError):
    """A parameter or input grid is outside what an operation accepts."""


class DimensionMismatch(LabelingError, ValueError):
    """A label grid does not have the shape the caller expected."""

    def __init__(self, expected, actual):
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(f"expected grid of shape {self.expected}, got {self.actual}")

    def __reduce__(self):
        # Rebuilt from the shapes when sent back from a worker process
        return (self.__class__, (self.expected, self.actual))
