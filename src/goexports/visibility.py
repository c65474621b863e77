"""Exported-surface classification for Go function and method declarations."""

from __future__ import annotations

from .errors import UnsupportedTypeError
from .render import format_type, receiver_field
from .syntax import FuncDecl


def is_upper0(s: str) -> bool:
    """Report whether `s` starts with an uppercase letter, ignoring one leading `*`."""
    if s.startswith("*"):
        s = s[1:]
    return bool(s) and s[0].isupper()


def is_exported(decl: FuncDecl) -> bool:
    if decl.recv is None:
        return is_upper0(decl.name)
    field = receiver_field(decl)
    try:
        recv_type = format_type(field.type)
    except UnsupportedTypeError as e:
        raise UnsupportedTypeError(f"{decl.name}: {e}") from e
    return is_upper0(recv_type) and is_upper0(decl.name)
