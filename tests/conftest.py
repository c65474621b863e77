import pytest


@pytest.fixture(autouse=True)
def _isolated_cache_dir(tmp_path, monkeypatch):
    # Keep scan cache writes out of the user's real cache directory.
    monkeypatch.setenv("GOEXPORTS_CACHE_DIR", str(tmp_path / "goexports-cache"))
    yield
