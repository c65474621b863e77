from __future__ import annotations

from pathlib import Path

import pytest

SCAN = {
    "packages": [
        {
            "path": "example.com/s",
            "files": [
                {
                    "name": "s.go",
                    "decls": [
                        {
                            "name": "Join",
                            "recv": None,
                            "params": [
                                {"names": ["a"], "type": {"kind": "array", "len": None, "elt": {"kind": "ident", "name": "string"}}},
                                {"names": ["sep"], "type": {"kind": "ident", "name": "string"}},
                            ],
                            "results": [{"names": [], "type": {"kind": "ident", "name": "string"}}],
                        },
                        {
                            "name": "split",
                            "recv": None,
                            "params": [{"names": ["s"], "type": {"kind": "ident", "name": "string"}}],
                            "results": [{"names": [], "type": {"kind": "array", "len": None, "elt": {"kind": "ident", "name": "string"}}}],
                        },
                    ],
                }
            ],
        }
    ]
}

CHAN_SCAN = {
    "packages": [
        {
            "path": "example.com/c",
            "files": [
                {
                    "name": "c.go",
                    "decls": [
                        {
                            "name": "Watch",
                            "recv": None,
                            "params": [],
                            "results": [{"names": [], "type": {"kind": "chan", "dir": "recv", "value": {"kind": "ident", "name": "int"}}}],
                        }
                    ],
                }
            ],
        }
    ]
}


def _fake_scan(doc: dict, seen: list | None = None):
    def fake(patterns, *, config):  # noqa: ANN001
        if seen is not None:
            seen.append(config)
        return doc

    return fake


def test_cli_list_names(monkeypatch, capsys):
    from goexports.cli import main
    from goexports.loader import load as lmod

    monkeypatch.setattr(lmod, "scan_packages", _fake_scan(SCAN))
    main(["list", "example.com/s"])
    assert capsys.readouterr().out == "Join\n"


def test_cli_list_verbose(monkeypatch, capsys):
    from goexports.cli import main
    from goexports.loader import load as lmod

    monkeypatch.setattr(lmod, "scan_packages", _fake_scan(SCAN))
    main(["list", "--verbose", "example.com/s"])
    assert capsys.readouterr().out == "func Join(a []string, sep string) string\n"


def test_cli_list_builds_load_config(monkeypatch, tmp_path: Path):
    from goexports.cli import main
    from goexports.loader import load as lmod

    seen: list = []
    monkeypatch.setattr(lmod, "scan_packages", _fake_scan(SCAN, seen))
    main(
        [
            "list",
            "--tags",
            "a, b",
            "--include-tests",
            "--no-cache",
            "--dir",
            str(tmp_path),
            "./...",
        ]
    )
    config = seen[0]
    assert config.tags == ["a", "b"]
    assert config.include_tests is True
    assert config.use_cache is False
    assert config.work_dir == tmp_path


def test_cli_unsupported_type_exits_nonzero_without_output(monkeypatch, capsys):
    from goexports.cli import main
    from goexports.loader import load as lmod

    monkeypatch.setattr(lmod, "scan_packages", _fake_scan(CHAN_SCAN))
    with pytest.raises(SystemExit) as exc:
        main(["list", "--verbose", "example.com/c"])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Watch: unsupported chan type" in captured.err


def test_cli_cache_rm(tmp_path: Path, capsys):
    from goexports.cli import main
    from goexports.loader.cache import write_cached_scan

    root = tmp_path / "cache"
    entry = write_cached_scan(root, "k", SCAN)

    with pytest.raises(SystemExit) as exc:
        main(["cache", "rm", "--cache-dir", str(root)])
    assert exc.value.code == 2
    assert str(entry) in capsys.readouterr().out
    assert entry.exists()

    main(["cache", "rm", "--cache-dir", str(root), "--yes"])
    assert f"deleted: {entry}" in capsys.readouterr().out
    assert not entry.exists()

    main(["cache", "rm", "--cache-dir", str(root)])
    assert capsys.readouterr().out == "no cached scans found\n"


def test_cli_version(capsys):
    from goexports.cli import main

    main(["version"])
    assert capsys.readouterr().out.strip()


def test_cli_list_help_mentions_unsupported_generic_receivers(capsys):
    from goexports.cli import main

    with pytest.raises(SystemExit) as exc:
        main(["list", "--help"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "Stack[T]" in out
    assert "generic" in out
