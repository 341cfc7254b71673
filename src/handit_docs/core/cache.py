"""File-based page cache with mtime invalidation.

Cache structure:
    .cache/
    ├── .gitignore
    └── pages/
        └── tracing/
            └── guide/
                └── node_wrapper.json   # HTML, title, ToC, source mtime
"""

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TypedDict

logger = logging.getLogger(__name__)

CACHE_FORMAT = 1


class TocEntryDict(TypedDict):
    level: int
    title: str
    id: str


class CachedPage(TypedDict):
    """On-disk page cache record."""

    format: int
    source_mtime: float
    title: str | None
    toc: list[TocEntryDict]
    html: str


@dataclass
class CacheEntry:
    """Result of cache lookup."""

    html: str
    title: str | None
    toc: list[TocEntryDict]


class FileCache:
    """File-based cache for rendered pages.

    An entry is valid while its recorded mtime equals the current mtime of
    the source file. A disabled cache never stores nor returns anything.
    """

    _GITIGNORE_CONTENT = "# Ignore everything in this directory\n*\n"

    def __init__(self, cache_dir: Path, *, enabled: bool = True) -> None:
        self._cache_dir = cache_dir
        self._pages_dir = cache_dir / "pages"
        self._enabled = enabled

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def enabled(self) -> bool:
        return self._enabled

    def get(self, path: str, source_mtime: float) -> CacheEntry | None:
        """Retrieve cached entry if valid.

        Args:
            path: Document path (e.g., "tracing/guide/node_wrapper")
            source_mtime: Current mtime of source file

        Returns:
            CacheEntry on a valid hit, None otherwise
        """
        if not self._enabled:
            return None

        record = self._read(self._entry_path(path))
        if record is None or record["source_mtime"] != source_mtime:
            return None
        return CacheEntry(html=record["html"], title=record["title"], toc=record["toc"])

    def set(
        self,
        path: str,
        html: str,
        title: str | None,
        source_mtime: float,
        toc: list[TocEntryDict],
    ) -> None:
        if not self._enabled:
            return

        self._ensure_cache_dir()
        entry_path = self._entry_path(path)
        entry_path.parent.mkdir(parents=True, exist_ok=True)

        record: CachedPage = {
            "format": CACHE_FORMAT,
            "source_mtime": source_mtime,
            "title": title,
            "toc": toc,
            "html": html,
        }
        entry_path.write_text(json.dumps(record), encoding="utf-8")

    def invalidate(self, path: str) -> None:
        self._entry_path(path).unlink(missing_ok=True)

    def clear(self) -> None:
        """Remove all cached pages."""
        if self._pages_dir.exists():
            shutil.rmtree(self._pages_dir)

    def _entry_path(self, path: str) -> Path:
        return self._pages_dir / f"{path.strip('/') or 'index'}.json"

    def _ensure_cache_dir(self) -> None:
        """Create cache directory with .gitignore if it doesn't exist."""
        if not self._cache_dir.exists():
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            gitignore_path = self._cache_dir / ".gitignore"
            gitignore_path.write_text(self._GITIGNORE_CONTENT, encoding="utf-8")

    def _read(self, entry_path: Path) -> CachedPage | None:
        """Read a cache record, None if missing, corrupt or stale format."""
        if not entry_path.exists():
            return None
        try:
            data = json.loads(entry_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.debug(f"Ignoring unreadable cache entry {entry_path}: {e}")
            return None

        if not isinstance(data, dict) or data.get("format") != CACHE_FORMAT:
            return None
        if not all(k in data for k in ("source_mtime", "title", "toc", "html")):
            return None
        return CachedPage(
            format=CACHE_FORMAT,
            source_mtime=data["source_mtime"],
            title=data["title"],
            toc=data["toc"],
            html=data["html"],
        )
