"""
Error kinds.

Two things can go wrong when loading a replacement table:

- the page could not be downloaded (TransportError)
- the page did not look the way the extractor expects (ParseError)

Both carry an optional ``context`` dict (line number, URL, ...) for logging.
"""

from __future__ import annotations

from typing import Any


class VertretungsplanError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ParseError(VertretungsplanError):
    """Raised when a line does not match the expected marker/shape."""


class TransportError(VertretungsplanError):
    """Raised when the HTML page could not be retrieved."""
