from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from pathlib import Path

from .errors import GoExportsError


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="goexports")
    parser.add_argument("--debug", action="store_true", help="Log loader activity to stderr.")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Print goexports version.")

    p_list = sub.add_parser(
        "list",
        help="List exported functions and methods of Go packages.",
        description=(
            "List exported functions and methods of Go packages. Channel, interface, struct "
            "and generic types are not supported: a signature using one fails the run, and "
            "a method on a generic type (func (s *Stack[T]) Push()) fails even without --verbose."
        ),
    )
    p_list.add_argument("patterns", nargs="+", help="Go package patterns (import paths, ./dir, ./..., file.go).")
    p_list.add_argument("--tags", default="", help="Comma-separated build tags.")
    p_list.add_argument("--include-tests", action="store_true", help="Include _test.go files.")
    p_list.add_argument("--verbose", action="store_true", help="Print full signatures instead of names.")
    p_list.add_argument("--dir", default=None, help="Directory to resolve patterns in (default: cwd).")
    p_list.add_argument("--no-cache", action="store_true", help="Always run the Go scanner.")
    p_list.add_argument(
        "--cache-dir",
        default=None,
        help="Scan cache directory (default: GOEXPORTS_CACHE_DIR or OS cache).",
    )

    p_cache = sub.add_parser("cache", help="Manage the local scan cache.")
    cache = p_cache.add_subparsers(dest="cache_cmd", required=True)
    p_cache_rm = cache.add_parser("rm", help="Delete cached scans.")
    p_cache_rm.add_argument(
        "--cache-dir",
        default=None,
        help="Scan cache directory (default: GOEXPORTS_CACHE_DIR or OS cache).",
    )
    p_cache_rm.add_argument(
        "--yes",
        action="store_true",
        help="Actually perform deletion. Without --yes, prints the matched entries.",
    )

    args = parser.parse_args(argv)
    if args.debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(name)s: %(message)s")

    try:
        _run(args)
    except GoExportsError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(1) from e


def _run(args: argparse.Namespace) -> None:
    if args.cmd == "version":
        try:
            print(importlib.metadata.version("goexports"))
        except Exception:
            # Best-effort fallback for editable/local-only contexts.
            print("0.0.0")
        return

    if args.cmd == "list":
        from .listing import list_package_funcs
        from .loader.config import LoadConfig, parse_build_tags
        from .loader.load import load_packages

        config = LoadConfig(
            tags=parse_build_tags(args.tags),
            include_tests=bool(args.include_tests),
            work_dir=Path(args.dir) if args.dir else None,
            use_cache=not args.no_cache,
            cache_dir=Path(args.cache_dir) if args.cache_dir else None,
        )
        pkgs = load_packages(list(args.patterns), config=config)
        for line in list_package_funcs(pkgs, verbose=bool(args.verbose)):
            print(line)
        return

    if args.cmd == "cache":
        from .loader.cache import clear_cache, default_cache_root, find_cache_entries

        cache_root = Path(args.cache_dir) if args.cache_dir else default_cache_root()
        if args.cache_cmd == "rm":
            entries = find_cache_entries(cache_root)
            if not entries:
                print("no cached scans found")
                return
            if not args.yes:
                print("matched cache entries (use --yes to delete):")
                for p in entries:
                    print(str(p))
                raise SystemExit(2)
            for p in clear_cache(cache_root):
                print(f"deleted: {p}")
            return
