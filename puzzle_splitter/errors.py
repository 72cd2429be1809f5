"""Exceptions raised when an image or a grid is rejected.

All of them are recoverable: callers report the message and keep their
previous state.
"""

from __future__ import annotations


class SplitterError(ValueError):
    """Base class for every rejected load or split."""


class InvalidFileTypeError(SplitterError):
    """The declared MIME type is not an ``image/*`` type."""


class DecodeFailureError(SplitterError):
    """The bytes could not be decoded into an image."""


class InvalidGridSpecError(SplitterError):
    """Rows or columns fall outside the accepted range."""
