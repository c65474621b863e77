from __future__ import annotations

import logging

from ..syntax import GoPackage
from .cache import default_cache_root, read_cached_scan, write_cached_scan
from .config import LoadConfig
from .fingerprint import fingerprint_local_patterns
from .scan import SCANNER_VERSION, decode_packages, scan_packages

log = logging.getLogger(__name__)


def load_packages(patterns: list[str], *, config: LoadConfig | None = None) -> list[GoPackage]:
    """Locate, parse and decode the Go packages named by `patterns`.

    Scans of local packages are cached by content fingerprint; import paths
    are always scanned.
    """
    config = config or LoadConfig()

    key = None
    cache_root = None
    if config.use_cache:
        key = fingerprint_local_patterns(patterns, config=config, salt=f"scanner-v{SCANNER_VERSION}")
        cache_root = config.cache_dir if config.cache_dir is not None else default_cache_root()

    if key is not None and cache_root is not None:
        cached = read_cached_scan(cache_root, key)
        if cached is not None:
            log.debug("scan cache hit: %s", key)
            return decode_packages(cached)
        log.debug("scan cache miss: %s", key)

    obj = scan_packages(patterns, config=config)
    pkgs = decode_packages(obj)
    if key is not None and cache_root is not None:
        write_cached_scan(cache_root, key, obj)
    return pkgs
