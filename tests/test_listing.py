from __future__ import annotations

import pytest

from goexports.syntax import (
    ArrayType,
    ChanType,
    Field,
    FieldList,
    FuncDecl,
    GoFile,
    GoPackage,
    Ident,
    Star,
)


def _f(*items) -> FieldList:
    return FieldList(fields=tuple(Field(names=n, type=t) for n, t in items))


JOIN = FuncDecl(
    name="Join",
    params=_f((("a",), ArrayType(elt=Ident("string"))), (("sep",), Ident("string"))),
    results=_f(((), Ident("string"))),
)
SPLIT = FuncDecl(
    name="split",
    params=_f((("s",), Ident("string"))),
    results=_f(((), ArrayType(elt=Ident("string")))),
)
READ = FuncDecl(
    name="Read",
    recv=_f((("r",), Star(Ident("Reader")))),
    params=_f((("p",), ArrayType(elt=Ident("byte")))),
    results=_f((("n",), Ident("int")), (("err",), Ident("error"))),
)
FILL = FuncDecl(
    name="fill",
    recv=_f((("r",), Star(Ident("Reader")))),
    params=FieldList(),
)
CLOSE_SPEC = FuncDecl(
    name="Close",
    recv=_f(((), Ident("Closer"))),
    params=FieldList(),
    results=_f(((), Ident("error"))),
)


def test_list_exported_names():
    from goexports.listing import list_exported_names

    f = GoFile(name="strings.go", decls=(JOIN, SPLIT, READ, FILL))
    assert list_exported_names(f) == ["Join", "Read"]


def test_list_exported_signatures():
    from goexports.listing import list_exported_signatures

    f = GoFile(name="strings.go", decls=(JOIN, SPLIT))
    assert list_exported_signatures(f) == ["func Join(a []string, sep string) string"]

    f = GoFile(name="reader.go", decls=(READ, FILL))
    assert list_exported_signatures(f) == ["func (r *Reader) Read(p []byte) (n int, err error)"]


def test_signatures_skip_unnamed_receivers():
    from goexports.listing import list_exported_names, list_exported_signatures

    f = GoFile(name="closer.go", decls=(CLOSE_SPEC, JOIN))
    assert list_exported_signatures(f) == ["func Join(a []string, sep string) string"]
    # Name listing does not render, so the entry is still reported there.
    assert list_exported_names(f) == ["Close", "Join"]


def test_list_package_funcs_keeps_source_order():
    from goexports.listing import list_package_funcs

    pkgs = [
        GoPackage(
            import_path="example.com/a",
            files=(
                GoFile(name="b.go", decls=(READ,)),
                GoFile(name="a.go", decls=(SPLIT, JOIN)),
            ),
        ),
        GoPackage(import_path="example.com/b", files=(GoFile(name="x.go", decls=(JOIN,)),)),
    ]
    assert list_package_funcs(pkgs) == ["Read", "Join", "Join"]
    assert list_package_funcs(pkgs, verbose=True) == [
        "func (r *Reader) Read(p []byte) (n int, err error)",
        "func Join(a []string, sep string) string",
        "func Join(a []string, sep string) string",
    ]


def test_unsupported_type_aborts_whole_listing():
    from goexports.errors import UnsupportedTypeError
    from goexports.listing import list_package_funcs

    drain = FuncDecl(name="Drain", params=_f((("c",), ChanType(value=Ident("int")))))
    pkgs = [GoPackage(import_path="p", files=(GoFile(name="p.go", decls=(JOIN, drain)),))]
    with pytest.raises(UnsupportedTypeError, match=r"Drain"):
        list_package_funcs(pkgs, verbose=True)

    # Non-verbose listing never renders parameters.
    assert list_package_funcs(pkgs) == ["Join", "Drain"]


def test_unexported_chan_function_is_never_rendered():
    from goexports.listing import list_exported_signatures

    drain = FuncDecl(name="drain", params=_f((("c",), ChanType(value=Ident("int")))))
    assert list_exported_signatures(GoFile(name="p.go", decls=(drain, JOIN))) == [
        "func Join(a []string, sep string) string"
    ]
