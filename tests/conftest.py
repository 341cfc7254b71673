"""Shared test fixtures."""

from pathlib import Path

import pytest
from handit_docs.config import Config, DocsConfig, LiveReloadConfig


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Empty documentation source directory."""
    source_dir = tmp_path / "docs"
    source_dir.mkdir(exist_ok=True)
    return source_dir


@pytest.fixture
def test_config(tmp_path: Path, docs_dir: Path) -> Config:
    """Create a test configuration with tmp_path directories.

    Live reload is disabled so no file watcher is started.
    """
    return Config(
        docs=DocsConfig(source_dir=docs_dir, cache_dir=tmp_path / ".cache"),
        live_reload=LiveReloadConfig(enabled=False),
    )


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    """Stand-in for the bundled frontend."""
    static = tmp_path / "static"
    (static / "assets").mkdir(parents=True)
    (static / "index.html").write_text("<!DOCTYPE html><div id='root'></div>")
    (static / "assets" / "app.js").write_text("console.log('app');")
    return static
