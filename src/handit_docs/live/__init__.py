"""Live reload for development mode."""

from handit_docs.live.reload import LiveReloadManager, create_live_reload_routes

__all__ = ["LiveReloadManager", "create_live_reload_routes"]
