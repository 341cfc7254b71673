"""Tests for config API endpoint."""

from dataclasses import replace

from handit_docs.config import Config, LiveReloadConfig
from handit_docs.server import create_app


class TestGetConfig:
    """Tests for GET /api/config."""

    async def test__defaults__expose_theme_and_layout(
        self,
        test_config: Config,
        aiohttp_client,
    ) -> None:
        client = await aiohttp_client(create_app(test_config))

        response = await client.get("/api/config")

        assert response.status == 200
        data = await response.json()
        assert data["liveReloadEnabled"] is False
        assert data["landingPath"] == "/overview"
        assert data["site"]["title"] == "Handit.ai"
        assert data["theme"]["banner"] == {
            "key": "handit-ai-docs",
            "text": "🎉 Welcome to handit.ai Documentation!",
        }
        assert data["theme"]["sidebar"] == {
            "defaultMenuCollapseLevel": 1,
            "toggleButton": True,
        }
        assert [link["label"] for link in data["theme"]["footer"]["links"]] == [
            "Privacy",
            "Terms",
            "Contact",
        ]
        assert data["pages"]["tracing"] == {
            "title": "Training",
            "description": "Train your AI to be more accurate",
        }

    async def test__live_reload_enabled__reflected(
        self,
        test_config: Config,
        aiohttp_client,
    ) -> None:
        config = replace(test_config, live_reload=LiveReloadConfig(enabled=True))
        client = await aiohttp_client(create_app(config))

        response = await client.get("/api/config")

        data = await response.json()
        assert data["liveReloadEnabled"] is True
