"""Read-only view of parsed Go declarations.

Type expressions form a closed set of shapes. `ChanType` is recognised but not
renderable, and `Unsupported` stands in for any other AST node the scanner met
(interface and struct literals, generic instantiations, parenthesised types).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Ident:
    name: str


@dataclass(frozen=True)
class Selector:
    # `x.sel`, e.g. `unicode.SpecialCase`
    x: "TypeExpr"
    sel: str


@dataclass(frozen=True)
class Star:
    x: "TypeExpr"


@dataclass(frozen=True)
class ArrayType:
    elt: "TypeExpr"
    len: "TypeExpr | None" = None  # None for slices


@dataclass(frozen=True)
class Variadic:
    elt: "TypeExpr"


@dataclass(frozen=True)
class FuncType:
    params: "FieldList"
    results: "FieldList | None" = None


@dataclass(frozen=True)
class MapType:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(frozen=True)
class ChanType:
    value: "TypeExpr"
    dir: str = "both"  # "both" | "send" | "recv"


@dataclass(frozen=True)
class BasicLit:
    value: str


@dataclass(frozen=True)
class Unsupported:
    node: str  # Go AST node type, e.g. "*ast.InterfaceType"


TypeExpr = Union[
    Ident,
    Selector,
    Star,
    ArrayType,
    Variadic,
    FuncType,
    MapType,
    ChanType,
    BasicLit,
    Unsupported,
]


@dataclass(frozen=True)
class Field:
    names: tuple[str, ...]
    type: TypeExpr


@dataclass(frozen=True)
class FieldList:
    fields: tuple[Field, ...] = ()

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self):
        return iter(self.fields)


@dataclass(frozen=True)
class FuncDecl:
    name: str
    params: FieldList
    results: FieldList | None = None
    recv: FieldList | None = None


@dataclass(frozen=True)
class GoFile:
    name: str
    decls: tuple[FuncDecl, ...]


@dataclass(frozen=True)
class GoPackage:
    import_path: str
    files: tuple[GoFile, ...]
