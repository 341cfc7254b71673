"""Tests for live reload."""

import asyncio
from pathlib import Path

from aiohttp import web
from handit_docs.core.loader import SiteLoader
from handit_docs.live import LiveReloadManager, create_live_reload_routes


class TestDocPaths:
    """Tests for mapping changed files to documentation paths."""

    def test__page__maps_to_route(self, docs_dir: Path) -> None:
        manager = LiveReloadManager(docs_dir)

        assert manager._to_doc_path(docs_dir / "tracing" / "sdk.md") == "/tracing/sdk"

    def test__index__maps_to_directory(self, docs_dir: Path) -> None:
        manager = LiveReloadManager(docs_dir)

        assert manager._to_doc_path(docs_dir / "evaluation" / "index.md") == "/evaluation"
        assert manager._to_doc_path(docs_dir / "index.md") == "/"

    def test__meta_file__maps_to_directory(self, docs_dir: Path) -> None:
        manager = LiveReloadManager(docs_dir)

        assert manager._to_doc_path(docs_dir / "tracing" / "_meta.toml") == "/tracing"
        assert manager._to_doc_path(docs_dir / "_meta.toml") == "/"


class TestPatternMatching:
    def test__default_patterns__pages_and_meta(self, docs_dir: Path) -> None:
        manager = LiveReloadManager(docs_dir)

        assert manager._matches_patterns(docs_dir / "overview.md")
        assert manager._matches_patterns(docs_dir / "tracing" / "guide" / "node_wrapper.md")
        assert manager._matches_patterns(docs_dir / "_meta.toml")
        assert manager._matches_patterns(docs_dir / "tracing" / "_meta.json")
        assert not manager._matches_patterns(docs_dir / "image.png")

    def test__outside_source_dir__ignored(self, tmp_path: Path, docs_dir: Path) -> None:
        manager = LiveReloadManager(docs_dir)

        assert not manager._matches_patterns(tmp_path / "other.md")

    def test__custom_patterns__respected(self, docs_dir: Path) -> None:
        manager = LiveReloadManager(docs_dir, watch_patterns=["guides/*.md"])

        assert manager._matches_patterns(docs_dir / "guides" / "a.md")
        assert not manager._matches_patterns(docs_dir / "overview.md")


class TestHandleChanges:
    """Tests for LiveReloadManager.handle_changes()."""

    async def test__meta_change__invalidates_site(self, docs_dir: Path) -> None:
        (docs_dir / "overview.md").write_text("# Overview\n")
        loader = SiteLoader(docs_dir)
        site = loader.load()
        manager = LiveReloadManager(docs_dir, site_loader=loader)

        await manager.handle_changes([docs_dir / "_meta.toml"])

        assert loader.load() is not site

    async def test__unwatched_change__keeps_site(self, docs_dir: Path) -> None:
        (docs_dir / "overview.md").write_text("# Overview\n")
        loader = SiteLoader(docs_dir)
        site = loader.load()
        manager = LiveReloadManager(docs_dir, site_loader=loader)

        await manager.handle_changes([docs_dir / "logo.png"])

        assert loader.load() is site


class TestWebSocket:
    async def test__reload__broadcast_to_clients(self, docs_dir: Path, aiohttp_client) -> None:
        manager = LiveReloadManager(docs_dir)
        app = web.Application()
        app.router.add_routes(create_live_reload_routes(manager))
        client = await aiohttp_client(app)

        ws = await client.ws_connect("/ws/live-reload")
        while manager.connection_count == 0:
            await asyncio.sleep(0.01)
        await manager.handle_changes([docs_dir / "tracing" / "sdk.md"])
        message = await ws.receive_json(timeout=2)

        assert message == {"type": "reload", "path": "/tracing/sdk"}
        await ws.close()
