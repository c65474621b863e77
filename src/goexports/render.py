"""Render Go declarations and type expressions back to source-like text."""

from __future__ import annotations

from .errors import MalformedReceiverError, UnsupportedTypeError
from .syntax import (
    ArrayType,
    BasicLit,
    ChanType,
    Field,
    FieldList,
    FuncDecl,
    FuncType,
    Ident,
    MapType,
    Selector,
    Star,
    TypeExpr,
    Unsupported,
    Variadic,
)


def format_type(expr: TypeExpr | None) -> str:
    if expr is None:
        return ""
    if isinstance(expr, Ident):
        return expr.name
    if isinstance(expr, Selector):
        return f"{format_type(expr.x)}.{expr.sel}"
    if isinstance(expr, Star):
        return f"*{format_type(expr.x)}"
    if isinstance(expr, ArrayType):
        # Array length is a literal (or constant identifier) rendered as-is.
        return f"[{format_type(expr.len)}]{format_type(expr.elt)}"
    if isinstance(expr, Variadic):
        return f"...{format_type(expr.elt)}"
    if isinstance(expr, FuncType):
        return f"func({format_params(expr.params)}){format_results(expr.results)}"
    if isinstance(expr, MapType):
        return f"map[{format_type(expr.key)}]{format_type(expr.value)}"
    if isinstance(expr, BasicLit):
        return expr.value
    if isinstance(expr, ChanType):
        raise UnsupportedTypeError(f"unsupported chan type {expr!r}")
    if isinstance(expr, Unsupported):
        raise UnsupportedTypeError(f"unsupported type {expr.node}")
    raise UnsupportedTypeError(f"unsupported type {expr!r}")


def format_fields(fields: FieldList) -> str:
    """Render a field list the way it was grouped in source: `a, b string, c int`."""
    parts: list[str] = []
    for field in fields:
        t = format_type(field.type)
        if field.names:
            parts.append(f"{', '.join(field.names)} {t}")
        else:
            parts.append(t)
    return ", ".join(parts)


def format_params(fields: FieldList) -> str:
    return format_fields(fields)


def format_results(fields: FieldList | None) -> str:
    if fields is None or len(fields) == 0:
        return ""
    if len(fields) > 1:
        return f" ({format_fields(fields)})"
    return f" {format_fields(fields)}"


def receiver_field(decl: FuncDecl) -> Field:
    """Return the single receiver field of a method declaration."""
    recv = decl.recv or FieldList()
    if len(recv) != 1:
        raise MalformedReceiverError(
            f"strange receiver for {decl.name}: {len(recv)} fields {recv!r}"
        )
    return recv.fields[0]


def format_decl(decl: FuncDecl) -> str:
    """Render a full `func` signature.

    Returns an empty string for receivers without a name, which only occur for
    interface method specs; callers skip those entries.
    """
    try:
        s = "func "
        if decl.recv is not None:
            field = receiver_field(decl)
            if not field.names:
                return ""
            if len(field.names) != 1:
                raise MalformedReceiverError(
                    f"strange receiver field for {decl.name}: {field!r}"
                )
            s += f"({field.names[0]} {format_type(field.type)}) "
        s += f"{decl.name}({format_params(decl.params)})"
        s += format_results(decl.results)
        return s
    except UnsupportedTypeError as e:
        raise UnsupportedTypeError(f"{decl.name}: {e}") from e
