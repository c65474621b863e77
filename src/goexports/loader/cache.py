"""On-disk cache of scanner output, stored as MessagePack."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import msgpack

from ..errors import CacheError

log = logging.getLogger(__name__)

CACHE_VERSION = 1
_SUFFIX = ".msgpack"


def default_cache_root() -> Path:
    """Return the scan cache directory, `GOEXPORTS_CACHE_DIR` if set.

    Defaults to `scans/` under the platform user cache directory
    (`%LOCALAPPDATA%\\goexports` on Windows, `$XDG_CACHE_HOME/goexports`
    or `~/.cache/goexports` elsewhere).
    """
    override = os.environ.get("GOEXPORTS_CACHE_DIR")
    if override:
        return Path(override)

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.path.expanduser("~")
    else:
        base = os.environ.get("XDG_CACHE_HOME") or os.path.expanduser("~/.cache")
    return Path(base) / "goexports" / "scans"


def _entry_path(root: Path, key: str) -> Path:
    return Path(root) / f"{key}{_SUFFIX}"


def _check_root(root: Path) -> Path:
    root = Path(root)
    if root.exists() and not root.is_dir():
        raise CacheError(f"cache root is not a directory: {root}")
    return root


def read_cached_scan(root: Path, key: str) -> dict[str, Any] | None:
    """Return the cached scan for `key`, or None when missing or unreadable."""
    path = _entry_path(_check_root(root), key)
    if not path.exists():
        return None
    try:
        obj = msgpack.unpackb(path.read_bytes(), raw=False)
    except Exception as e:  # noqa: BLE001 - a bad entry is rebuilt
        log.debug("ignoring unreadable cache entry %s: %s", path, e)
        return None

    if not isinstance(obj, dict) or obj.get("cache_version") != CACHE_VERSION:
        return None
    if obj.get("key") != key:
        return None
    scan = obj.get("scan")
    if not isinstance(scan, dict):
        return None
    return scan


def write_cached_scan(root: Path, key: str, scan: dict[str, Any]) -> Path:
    root = _check_root(root)
    root.mkdir(parents=True, exist_ok=True)
    path = _entry_path(root, key)
    payload = msgpack.packb(
        {"cache_version": CACHE_VERSION, "key": key, "scan": scan},
        use_bin_type=True,
    )

    # Atomic replace to be safe under concurrent writers.
    fd, tmp = tempfile.mkstemp(prefix=path.name + ".", dir=str(root))
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        os.replace(tmp, path)
    finally:
        try:
            if os.path.exists(tmp):
                os.unlink(tmp)
        except OSError:
            pass
    return path


def find_cache_entries(root: Path) -> list[Path]:
    root = _check_root(root)
    if not root.exists():
        return []
    return sorted(p for p in root.glob(f"*{_SUFFIX}") if p.is_file())


def clear_cache(root: Path) -> list[Path]:
    """Delete every cache entry under `root` and return the deleted paths."""
    deleted: list[Path] = []
    for p in find_cache_entries(root):
        p.unlink()
        deleted.append(p)
    return deleted
