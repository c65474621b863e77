from __future__ import annotations

import json
import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Any

from ..errors import LoadError
from ..syntax import (
    ArrayType,
    BasicLit,
    ChanType,
    Field,
    FieldList,
    FuncDecl,
    FuncType,
    GoFile,
    GoPackage,
    Ident,
    MapType,
    Selector,
    Star,
    TypeExpr,
    Unsupported,
    Variadic,
)
from .config import LoadConfig

log = logging.getLogger(__name__)

# Bump when the scanner output format changes; part of every cache key.
SCANNER_VERSION = 1


def scan_packages(patterns: list[str], *, config: LoadConfig) -> dict[str, Any]:
    """Run the Go scanner over `patterns` and return its raw JSON document.

    The scanner resolves patterns with `go list` (honouring build tags and test
    inclusion) and parses every selected file with `go/parser`.
    """
    if not patterns:
        raise LoadError("no packages to scan")

    work_dir = Path(config.work_dir).resolve() if config.work_dir is not None else Path.cwd()

    with tempfile.TemporaryDirectory(prefix="goexports-goscan-") as td:
        scan_dir = Path(td)
        (scan_dir / "go.mod").write_text(
            "\n".join(
                [
                    "module goexports.goscan",
                    "",
                    "go 1.22",
                    "",
                ]
            ),
            encoding="utf-8",
        )
        (scan_dir / "main.go").write_text(_scanner_go_source(), encoding="utf-8")

        cmd = ["go", "run", ".", "--dir", str(work_dir), "--tags", ",".join(config.tags)]
        if config.include_tests:
            cmd.append("--include-tests")
        cmd.append("--")
        cmd.extend(patterns)
        log.debug("running go scanner: %s", " ".join(cmd))

        try:
            proc = subprocess.run(
                cmd,
                cwd=str(scan_dir),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise LoadError(
                "Go toolchain not found (`go` is missing from PATH). "
                "Install Go and ensure `go` is available on PATH."
            ) from e

        if proc.returncode != 0:
            raise LoadError(f"go scan failed\n{proc.stderr}{proc.stdout}")

        try:
            obj = json.loads(proc.stdout)
        except Exception as e:  # noqa: BLE001 - boundary parse
            raise LoadError(f"failed to parse go scan output: {e}\n{proc.stdout}") from e

    if not isinstance(obj, dict):
        raise LoadError("invalid go scan output: expected an object")
    return obj


def decode_packages(obj: dict[str, Any]) -> list[GoPackage]:
    """Decode the scanner document into the syntax model, preserving order."""
    raw_pkgs = obj.get("packages")
    if not isinstance(raw_pkgs, list):
        raise LoadError("invalid go scan output: missing packages")

    pkgs: list[GoPackage] = []
    for p in raw_pkgs:
        if not isinstance(p, dict):
            raise LoadError(f"invalid package entry: {p!r}")
        files: list[GoFile] = []
        for f in _list(p, "files"):
            if not isinstance(f, dict):
                raise LoadError(f"invalid file entry: {f!r}")
            decls = tuple(_decode_decl(d) for d in _list(f, "decls"))
            files.append(GoFile(name=_str(f, "name"), decls=decls))
        pkgs.append(GoPackage(import_path=_str(p, "path"), files=tuple(files)))
    return pkgs


def _decode_decl(obj: Any) -> FuncDecl:
    if not isinstance(obj, dict):
        raise LoadError(f"invalid declaration entry: {obj!r}")
    params = _decode_field_list(obj.get("params"))
    return FuncDecl(
        name=_str(obj, "name"),
        params=params if params is not None else FieldList(),
        results=_decode_field_list(obj.get("results")),
        recv=_decode_field_list(obj.get("recv")),
    )


def _decode_field_list(obj: Any) -> FieldList | None:
    if obj is None:
        return None
    if not isinstance(obj, list):
        raise LoadError(f"invalid field list: {obj!r}")
    fields: list[Field] = []
    for f in obj:
        if not isinstance(f, dict):
            raise LoadError(f"invalid field: {f!r}")
        names = f.get("names") or []
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise LoadError(f"invalid field names: {names!r}")
        fields.append(Field(names=tuple(names), type=_decode_required(f.get("type"))))
    return FieldList(fields=tuple(fields))


def _decode_required(obj: Any) -> TypeExpr:
    expr = _decode_expr(obj)
    if expr is None:
        raise LoadError("missing type expression")
    return expr


def _decode_expr(obj: Any) -> TypeExpr | None:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise LoadError(f"invalid type expression: {obj!r}")

    kind = obj.get("kind")
    if kind == "ident":
        return Ident(name=_str(obj, "name"))
    if kind == "selector":
        return Selector(x=_decode_required(obj.get("x")), sel=_str(obj, "sel"))
    if kind == "star":
        return Star(x=_decode_required(obj.get("x")))
    if kind == "array":
        return ArrayType(elt=_decode_required(obj.get("elt")), len=_decode_expr(obj.get("len")))
    if kind == "ellipsis":
        return Variadic(elt=_decode_required(obj.get("elt")))
    if kind == "func":
        params = _decode_field_list(obj.get("params"))
        return FuncType(
            params=params if params is not None else FieldList(),
            results=_decode_field_list(obj.get("results")),
        )
    if kind == "map":
        return MapType(key=_decode_required(obj.get("key")), value=_decode_required(obj.get("value")))
    if kind == "chan":
        return ChanType(value=_decode_required(obj.get("value")), dir=str(obj.get("dir") or "both"))
    if kind == "lit":
        return BasicLit(value=_str(obj, "value"))
    if kind == "unsupported":
        return Unsupported(node=str(obj.get("node") or "<unknown>"))
    # Newer scanner shapes stay fatal at render time rather than at load time.
    return Unsupported(node=str(kind))


def _str(obj: dict[str, Any], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise LoadError(f"invalid go scan output: {key!r} must be a string, got {v!r}")
    return v


def _list(obj: dict[str, Any], key: str) -> list[Any]:
    v = obj.get(key)
    if v is None:
        return []
    if not isinstance(v, list):
        raise LoadError(f"invalid go scan output: {key!r} must be a list, got {v!r}")
    return v


def _scanner_go_source() -> str:
    # Keep this file stdlib-only so `go run` doesn't need network access.
    return r'''
package main

import (
	"bytes"
	"encoding/json"
	"errors"
	"flag"
	"fmt"
	"go/ast"
	"go/parser"
	"go/token"
	"io"
	"os"
	"os/exec"
	"path/filepath"
)

type goListPkg struct {
	ImportPath   string
	Dir          string
	GoFiles      []string
	CgoFiles     []string
	TestGoFiles  []string
	XTestGoFiles []string
	Error        *struct{ Err string }
}

type outField struct {
	Names []string `json:"names"`
	Type  any      `json:"type"`
}

type outDecl struct {
	Name    string      `json:"name"`
	Recv    []outField  `json:"recv"`
	Params  []outField  `json:"params"`
	Results []outField  `json:"results"`
}

type outFile struct {
	Name  string    `json:"name"`
	Decls []outDecl `json:"decls"`
}

type outPkg struct {
	Path  string    `json:"path"`
	Files []outFile `json:"files"`
}

type outObj struct {
	Packages []outPkg `json:"packages"`
}

func main() {
	var dir string
	var tags string
	var includeTests bool
	flag.StringVar(&dir, "dir", "", "directory to resolve package patterns in")
	flag.StringVar(&tags, "tags", "", "comma-separated build tags")
	flag.BoolVar(&includeTests, "include-tests", false, "include _test.go files")
	flag.Parse()

	if dir != "" {
		if err := os.Chdir(dir); err != nil {
			fmt.Fprintf(os.Stderr, "chdir: %v\n", err)
			os.Exit(2)
		}
	}

	pkgs, err := listPkgs(tags, flag.Args())
	if err != nil {
		fmt.Fprintln(os.Stderr, err.Error())
		os.Exit(1)
	}

	out := outObj{Packages: make([]outPkg, 0, len(pkgs))}
	for _, p := range pkgs {
		if p.Error != nil {
			fmt.Fprintf(os.Stderr, "%s: %s\n", p.ImportPath, p.Error.Err)
			os.Exit(1)
		}
		names := append([]string{}, p.GoFiles...)
		names = append(names, p.CgoFiles...)
		if includeTests {
			names = append(names, p.TestGoFiles...)
		}
		pkg, err := parsePkg(p.ImportPath, p.Dir, names)
		if err != nil {
			fmt.Fprintln(os.Stderr, err.Error())
			os.Exit(1)
		}
		out.Packages = append(out.Packages, pkg)

		if includeTests && len(p.XTestGoFiles) > 0 {
			xpkg, err := parsePkg(p.ImportPath+"_test", p.Dir, p.XTestGoFiles)
			if err != nil {
				fmt.Fprintln(os.Stderr, err.Error())
				os.Exit(1)
			}
			out.Packages = append(out.Packages, xpkg)
		}
	}

	enc := json.NewEncoder(os.Stdout)
	enc.SetEscapeHTML(false)
	if err := enc.Encode(out); err != nil {
		fmt.Fprintln(os.Stderr, err.Error())
		os.Exit(1)
	}
}

func listPkgs(tags string, patterns []string) ([]goListPkg, error) {
	args := []string{"list", "-e", "-json"}
	if tags != "" {
		args = append(args, "-tags", tags)
	}
	args = append(args, patterns...)
	cmd := exec.Command("go", args...)
	var stdout, stderr bytes.Buffer
	cmd.Stdout = &stdout
	cmd.Stderr = &stderr
	if err := cmd.Run(); err != nil {
		return nil, fmt.Errorf("go list failed: %v\n%s", err, stderr.String())
	}

	dec := json.NewDecoder(&stdout)
	pkgs := []goListPkg{}
	for {
		var p goListPkg
		if err := dec.Decode(&p); err != nil {
			if errors.Is(err, io.EOF) {
				break
			}
			return nil, fmt.Errorf("failed to decode go list json: %v", err)
		}
		pkgs = append(pkgs, p)
	}
	return pkgs, nil
}

func parsePkg(path, dir string, names []string) (outPkg, error) {
	pkg := outPkg{Path: path, Files: make([]outFile, 0, len(names))}
	fs := token.NewFileSet()
	for _, name := range names {
		af, err := parser.ParseFile(fs, filepath.Join(dir, name), nil, 0)
		if err != nil {
			return pkg, err
		}
		f := outFile{Name: name, Decls: []outDecl{}}
		for _, decl := range af.Decls {
			fd, ok := decl.(*ast.FuncDecl)
			if !ok {
				continue
			}
			f.Decls = append(f.Decls, outDecl{
				Name:    fd.Name.Name,
				Recv:    fieldList(fd.Recv),
				Params:  fieldList(fd.Type.Params),
				Results: fieldList(fd.Type.Results),
			})
		}
		pkg.Files = append(pkg.Files, f)
	}
	return pkg, nil
}

func fieldList(fl *ast.FieldList) []outField {
	if fl == nil {
		return nil
	}
	out := []outField{}
	for _, f := range fl.List {
		names := []string{}
		for _, n := range f.Names {
			names = append(names, n.Name)
		}
		out = append(out, outField{Names: names, Type: expr(f.Type)})
	}
	return out
}

func expr(e ast.Expr) any {
	switch t := e.(type) {
	case nil:
		return nil
	case *ast.Ident:
		return map[string]any{"kind": "ident", "name": t.Name}
	case *ast.SelectorExpr:
		return map[string]any{"kind": "selector", "x": expr(t.X), "sel": t.Sel.Name}
	case *ast.StarExpr:
		return map[string]any{"kind": "star", "x": expr(t.X)}
	case *ast.ArrayType:
		return map[string]any{"kind": "array", "len": expr(t.Len), "elt": expr(t.Elt)}
	case *ast.Ellipsis:
		return map[string]any{"kind": "ellipsis", "elt": expr(t.Elt)}
	case *ast.FuncType:
		return map[string]any{"kind": "func", "params": fieldList(t.Params), "results": fieldList(t.Results)}
	case *ast.MapType:
		return map[string]any{"kind": "map", "key": expr(t.Key), "value": expr(t.Value)}
	case *ast.ChanType:
		dir := "both"
		switch t.Dir {
		case ast.SEND:
			dir = "send"
		case ast.RECV:
			dir = "recv"
		}
		return map[string]any{"kind": "chan", "dir": dir, "value": expr(t.Value)}
	case *ast.BasicLit:
		return map[string]any{"kind": "lit", "value": t.Value}
	default:
		return map[string]any{"kind": "unsupported", "node": fmt.Sprintf("%T", e)}
	}
}
'''
