from __future__ import annotations

import hashlib
import json
import logging
import os
import subprocess
from pathlib import Path

from .config import LoadConfig

log = logging.getLogger(__name__)

# Go settings that change which files `go list` selects. Read through
# `go env` so values stored in the GOENV file count as well as os.environ.
_GO_ENV_KEYS = ("GOOS", "GOARCH", "GOFLAGS", "CGO_ENABLED", "GOVERSION", "GOEXPERIMENT")


def fingerprint_local_patterns(patterns: list[str], *, config: LoadConfig, salt: str = "") -> str | None:
    """Compute a content fingerprint for scans of local package patterns.

    Only patterns that name local paths (`./pkg`, `../x/...`, `/abs/dir`,
    `file.go`) can be fingerprinted; any import path returns None, and so
    does a failing `go env`.

    Includes:
    - the scan options (tags, include_tests)
    - the effective Go environment (`go env -json`)
    - go.mod and go.sum of the enclosing module (if present)
    - all *.go files each pattern selects (excluding vendor/ and testdata/)
    """
    work_dir = Path(config.work_dir).resolve() if config.work_dir is not None else Path.cwd()

    selected: list[tuple[str, list[Path]]] = []
    for pattern in patterns:
        files = _local_go_files(pattern, work_dir=work_dir)
        if files is None:
            return None
        selected.append((pattern, files))

    go_env = _go_env(work_dir)
    if go_env is None:
        return None

    h = hashlib.sha256()
    h.update(salt.encode("utf-8"))
    h.update(b"\x00")
    h.update(",".join(config.tags).encode("utf-8"))
    h.update(b"\x00")
    h.update(b"1" if config.include_tests else b"0")
    h.update(b"\x00")
    for k in _GO_ENV_KEYS:
        h.update(f"{k}={go_env.get(k, '')}".encode("utf-8"))
        h.update(b"\x00")

    def add_file(p: Path) -> None:
        h.update(p.as_posix().encode("utf-8"))
        h.update(b"\x00")
        with p.open("rb") as f:
            for chunk in iter(lambda: f.read(1024 * 1024), b""):
                h.update(chunk)
        h.update(b"\x00")

    for pattern, files in selected:
        h.update(pattern.encode("utf-8"))
        h.update(b"\x00")
        for p in files:
            add_file(p)

    module_root = _find_module_root(work_dir)
    if module_root is not None:
        for name in ("go.mod", "go.sum"):
            p = module_root / name
            if p.exists():
                add_file(p)

    return h.hexdigest()


def _go_env(work_dir: Path) -> dict[str, str] | None:
    try:
        proc = subprocess.run(
            ["go", "env", "-json", *_GO_ENV_KEYS],
            cwd=str(work_dir),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        log.debug("go not found; scan is not cacheable")
        return None
    if proc.returncode != 0:
        log.debug("go env failed; scan is not cacheable: %s", proc.stderr.strip())
        return None
    try:
        obj = json.loads(proc.stdout)
    except Exception as e:  # noqa: BLE001 - boundary parse
        log.debug("unreadable go env output: %s", e)
        return None
    if not isinstance(obj, dict):
        return None
    return {k: str(obj.get(k) or "") for k in _GO_ENV_KEYS}


def _local_go_files(pattern: str, *, work_dir: Path) -> list[Path] | None:
    if pattern.endswith(".go"):
        p = (work_dir / pattern).resolve()
        return [p] if p.is_file() else None

    if not (pattern.startswith(".") or os.path.isabs(pattern)):
        return None

    recursive = False
    if pattern == "..." or pattern.endswith("/..."):
        recursive = True
        pattern = pattern[: -len("...")].rstrip("/") or "."

    root = (work_dir / pattern).resolve()
    if not root.is_dir():
        return None

    if recursive:
        files = [
            p
            for p in root.rglob("*.go")
            if not {"vendor", "testdata", ".git"} & set(p.relative_to(root).parts)
        ]
    else:
        files = [p for p in root.glob("*.go") if p.is_file()]
    return sorted(files, key=lambda p: p.as_posix())


def _find_module_root(start: Path) -> Path | None:
    p = start
    while True:
        if (p / "go.mod").exists():
            return p
        if p.parent == p:
            return None
        p = p.parent
