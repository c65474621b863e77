"""Line-oriented listings of exported functions and methods."""

from __future__ import annotations

from collections.abc import Iterable

from .render import format_decl
from .syntax import GoFile, GoPackage
from .visibility import is_exported


def list_exported_names(file: GoFile) -> list[str]:
    """Return the bare name of every exported declaration, in source order."""
    return [decl.name for decl in file.decls if is_exported(decl)]


def list_exported_signatures(file: GoFile) -> list[str]:
    out: list[str] = []
    for decl in file.decls:
        if not is_exported(decl):
            continue
        s = format_decl(decl)
        if s:
            out.append(s)
    return out


def list_package_funcs(packages: Iterable[GoPackage], *, verbose: bool = False) -> list[str]:
    """List exported declarations across every file of every package.

    The whole listing is built before returning, so a malformed declaration
    anywhere aborts without partial output.
    """
    lines: list[str] = []
    for pkg in packages:
        for file in pkg.files:
            if verbose:
                lines.extend(list_exported_signatures(file))
            else:
                lines.extend(list_exported_names(file))
    return lines
