"""WebSocket-based live reload for development mode.

Monitors source pages and navigation metadata for changes and notifies
connected clients via WebSocket to trigger page reloads.
"""

import asyncio
import json
import logging
import weakref
from collections.abc import Iterable
from fnmatch import fnmatch
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import awatch

from handit_docs.core.loader import SiteLoader

logger = logging.getLogger(__name__)

DEFAULT_WATCH_PATTERNS = ["**/*.md", "**/_meta.toml", "**/_meta.json"]


class LiveReloadManager:
    """Manages WebSocket connections and file watching for live reload."""

    def __init__(
        self,
        source_dir: Path,
        watch_patterns: list[str] | None = None,
        *,
        site_loader: SiteLoader | None = None,
    ) -> None:
        """Initialize the live reload manager.

        Args:
            source_dir: Directory to watch for changes
            watch_patterns: Glob patterns to watch (default: pages and _meta files)
            site_loader: Loader whose cached site is dropped on every change
        """
        self._source_dir = source_dir
        self._watch_patterns = watch_patterns or DEFAULT_WATCH_PATTERNS
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None
        self._site_loader = site_loader

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        if not self._source_dir.is_dir():
            logger.warning(f"Live reload disabled, {self._source_dir} is not a directory")
            return
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop the file watcher and close all connections."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)
        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    async def _watch_files(self) -> None:
        async for changes in awatch(self._source_dir):
            await self.handle_changes(Path(path_str) for _, path_str in changes)

    async def handle_changes(self, paths: Iterable[Path]) -> None:
        """Invalidate caches and broadcast one reload per changed document."""
        changed: list[str] = []
        for path in paths:
            if not self._matches_patterns(path):
                continue
            doc_path = self._to_doc_path(path)
            if doc_path not in changed:
                changed.append(doc_path)

        if not changed:
            return

        if self._site_loader is not None:
            self._site_loader.invalidate()
        for doc_path in changed:
            logger.info(f"Reloading {doc_path}")
            await self._broadcast_reload(doc_path)

    def _matches_patterns(self, path: Path) -> bool:
        try:
            relative = path.relative_to(self._source_dir).as_posix()
        except ValueError:
            return False

        for pattern in self._watch_patterns:
            if fnmatch(relative, pattern):
                return True
            # "**/" also matches files directly in the source directory
            if pattern.startswith("**/") and fnmatch(relative, pattern[3:]):
                return True
        return False

    def _to_doc_path(self, file_path: Path) -> str:
        """Convert a file system path to a documentation path.

        ``_meta`` files map to the directory they describe.
        """
        relative = file_path.relative_to(self._source_dir)
        if relative.stem == "_meta":
            relative = relative.parent / "index"
        doc_path = relative.with_suffix("").as_posix()

        if doc_path == "index" or doc_path.endswith("/index"):
            doc_path = doc_path.removesuffix("index").rstrip("/")

        return f"/{doc_path}"

    async def _broadcast_reload(self, path: str) -> None:
        if not self._connections:
            return

        message = json.dumps({"type": "reload", "path": path})

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client went away mid-send; the WeakSet drops it
                pass


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    return [web.get("/ws/live-reload", manager.handle_websocket)]
