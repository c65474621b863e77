"""Domain-specific errors for goexports."""

from __future__ import annotations


class GoExportsError(Exception):
    """Base error for goexports."""


class MalformedReceiverError(GoExportsError):
    """Raised when a method declaration's receiver list is not a single field."""


class UnsupportedTypeError(GoExportsError):
    """Raised when a type expression has a shape the renderer does not support."""


class LoadError(GoExportsError):
    """Raised when Go packages cannot be located, listed or parsed."""


class CacheError(GoExportsError):
    """Raised when the scan cache root cannot be used."""
