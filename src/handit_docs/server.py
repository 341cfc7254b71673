"""aiohttp server for Handit Docs.

Application factory and route registration.
"""

import logging
from pathlib import Path

from aiohttp import web

from handit_docs.api.config import create_config_routes
from handit_docs.api.navigation import create_navigation_routes
from handit_docs.api.pages import create_pages_routes
from handit_docs.app_keys import cache_key, config_key, renderer_key, site_loader_key
from handit_docs.assets import get_static_dir
from handit_docs.config import Config
from handit_docs.core.cache import FileCache
from handit_docs.core.loader import SiteLoader
from handit_docs.core.renderer import PageRenderer
from handit_docs.live import LiveReloadManager, create_live_reload_routes
from handit_docs.redirect import create_redirect_routes

logger = logging.getLogger(__name__)

static_dir_key = web.AppKey("static_dir", Path)
live_reload_key = web.AppKey("live_reload_manager", LiveReloadManager)


async def spa_fallback(request: web.Request) -> web.StreamResponse:
    """Serve index.html for client-side routing.

    All non-API routes fall back to index.html. Without a bundled frontend
    there is nothing to fall back to.
    """
    static_dir = request.app.get(static_dir_key)
    if static_dir is None:
        raise web.HTTPNotFound(text="Frontend bundle not installed")
    return web.FileResponse(static_dir / "index.html")


def create_app(
    config: Config,
    *,
    static_dir: Path | None = None,
) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        static_dir: Frontend bundle directory, defaults to the bundled assets

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    cache = FileCache(config.docs.cache_dir)
    renderer = PageRenderer(cache, copy_code=config.theme.copy_code)
    site_loader = SiteLoader(config.docs.source_dir)

    app[config_key] = config
    app[renderer_key] = renderer
    app[site_loader_key] = site_loader
    app[cache_key] = cache

    # Landing redirect and API routes take precedence over the SPA fallback
    app.router.add_routes(create_redirect_routes())
    app.router.add_routes(create_pages_routes())
    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_config_routes())

    if config.live_reload.enabled:
        manager = LiveReloadManager(
            config.docs.source_dir,
            watch_patterns=(
                list(config.live_reload.watch_patterns)
                if config.live_reload.watch_patterns is not None
                else None
            ),
            site_loader=site_loader,
        )
        app[live_reload_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    if static_dir is None:
        try:
            static_dir = get_static_dir()
        except FileNotFoundError as e:
            logger.warning(str(e))

    if static_dir is not None:
        app[static_dir_key] = static_dir
        assets_dir = static_dir / "assets"
        if assets_dir.exists():
            app.router.add_static("/assets", assets_dir)
        app.router.add_get("/favicon.ico", _serve_favicon)

    # SPA fallback - must be last to catch all non-API routes
    app.router.add_get("/{path:.*}", spa_fallback)

    return app


async def _start_live_reload(app: web.Application) -> None:
    await app[live_reload_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    await app[live_reload_key].stop()


async def _serve_favicon(request: web.Request) -> web.FileResponse:
    favicon_path = request.app[static_dir_key] / "favicon.ico"
    if not favicon_path.exists():
        raise web.HTTPNotFound()
    return web.FileResponse(favicon_path)


def run_server(config: Config) -> None:
    """Run the server until interrupted."""
    app = create_app(config)
    web.run_app(
        app,
        host=config.server.host,
        port=config.server.port,
        print=None,
        access_log=logging.getLogger("aiohttp.access"),
    )
