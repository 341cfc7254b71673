"""Tests for server module."""

from dataclasses import replace
from pathlib import Path

import pytest
from handit_docs.app_keys import cache_key, config_key, renderer_key, site_loader_key
from handit_docs.config import Config, RedirectConfig
from handit_docs.server import create_app, static_dir_key


class TestCreateApp:
    """Tests for create_app()."""

    def test__valid_config__returns_configured_app(
        self,
        test_config: Config,
        static_dir: Path,
    ) -> None:
        app = create_app(test_config, static_dir=static_dir)

        assert app[config_key] is test_config
        assert app[site_loader_key].source_dir == test_config.docs.source_dir
        assert app[cache_key].cache_dir == test_config.docs.cache_dir
        assert app[renderer_key].cache is app[cache_key]
        assert app[static_dir_key] == static_dir

    def test__no_bundle__app_still_created(
        self,
        test_config: Config,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def _missing() -> Path:
            raise FileNotFoundError("Bundled static assets not found.")

        monkeypatch.setattr("handit_docs.server.get_static_dir", _missing)

        app = create_app(test_config)

        assert static_dir_key not in app


class TestLandingRedirect:
    """Tests for GET /."""

    async def test__root__redirects_to_overview(self, test_config: Config, aiohttp_client) -> None:
        client = await aiohttp_client(create_app(test_config))

        response = await client.get("/", allow_redirects=False)

        assert response.status == 302
        assert response.headers["Location"] == "/overview"
        assert response.headers["Cache-Control"] == "no-store"
        body = await response.text()
        assert "window.location.replace(target)" in body

    async def test__followed__lands_on_overview_without_root_entry(
        self,
        test_config: Config,
        static_dir: Path,
        aiohttp_client,
    ) -> None:
        """Loading / ends at /overview after a single redirect hop."""
        client = await aiohttp_client(create_app(test_config, static_dir=static_dir))

        response = await client.get("/")

        assert response.status == 200
        assert response.url.path == "/overview"
        assert [r.status for r in response.history] == [302]

    async def test__configured_target__used(self, test_config: Config, aiohttp_client) -> None:
        config = replace(test_config, redirect=RedirectConfig(target="/tracing/overview"))
        client = await aiohttp_client(create_app(config))

        response = await client.get("/", allow_redirects=False)

        assert response.headers["Location"] == "/tracing/overview"


class TestSpaFallback:
    """Tests for SPA fallback route."""

    async def test__spa_route__serves_index_html(
        self,
        test_config: Config,
        static_dir: Path,
        aiohttp_client,
    ) -> None:
        client = await aiohttp_client(create_app(test_config, static_dir=static_dir))

        response = await client.get("/tracing/guide/node_wrapper")

        assert response.status == 200
        assert "text/html" in response.headers["Content-Type"]

    async def test__assets__served_from_bundle(
        self,
        test_config: Config,
        static_dir: Path,
        aiohttp_client,
    ) -> None:
        client = await aiohttp_client(create_app(test_config, static_dir=static_dir))

        response = await client.get("/assets/app.js")

        assert response.status == 200
        assert "console.log" in await response.text()

    async def test__api_routes__take_precedence(
        self,
        test_config: Config,
        static_dir: Path,
        aiohttp_client,
    ) -> None:
        client = await aiohttp_client(create_app(test_config, static_dir=static_dir))

        response = await client.get("/api/navigation")

        assert response.status == 200
        assert "items" in await response.json()

    async def test__no_bundle__returns_404(
        self,
        test_config: Config,
        monkeypatch: pytest.MonkeyPatch,
        aiohttp_client,
    ) -> None:
        def _missing() -> Path:
            raise FileNotFoundError("Bundled static assets not found.")

        monkeypatch.setattr("handit_docs.server.get_static_dir", _missing)
        client = await aiohttp_client(create_app(test_config))

        response = await client.get("/overview")

        assert response.status == 404
