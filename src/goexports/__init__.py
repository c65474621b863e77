"""goexports: list the exported functions and methods of Go packages."""

from __future__ import annotations

from . import errors
from .listing import list_exported_names, list_exported_signatures, list_package_funcs
from .render import format_decl, format_type
from .visibility import is_exported

__all__ = [
    "errors",
    "format_decl",
    "format_type",
    "is_exported",
    "list_exported_names",
    "list_exported_signatures",
    "list_package_funcs",
]
