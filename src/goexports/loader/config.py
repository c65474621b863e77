from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class LoadConfig:
    """Options for locating and parsing Go packages.

    Only the loader sees this; listing and rendering are pure functions of the
    parsed declarations.
    """

    tags: list[str] = field(default_factory=list)
    include_tests: bool = False
    # Directory `go list` runs in (patterns such as `./...` resolve against it).
    work_dir: Path | None = None
    use_cache: bool = True
    cache_dir: Path | None = None


def parse_build_tags(tags: str) -> list[str]:
    """Split a comma-separated `-tags` value, trimming whitespace and empties."""
    out: list[str] = []
    for s in tags.split(","):
        s = s.strip()
        if s:
            out.append(s)
    return out
