"""Markdown rendering with caching.

Wraps the ``markdown`` converter with file-based caching and mtime tracking.
"""

import html as html_lib
import logging
import re
from dataclasses import dataclass
from pathlib import Path

import markdown

from handit_docs.core.cache import FileCache, TocEntryDict

logger = logging.getLogger(__name__)

_H1_HTML_RE = re.compile(r"<h1[^>]*>.*?</h1>\s*", re.DOTALL)

MARKDOWN_EXTENSIONS = [
    "tables",
    "fenced_code",
    "toc",
    "attr_list",
    "admonition",
    "codehilite",
]


@dataclass(frozen=True)
class TocEntry:
    """Table of contents entry."""

    level: int
    title: str
    id: str

    def to_dict(self) -> TocEntryDict:
        return {"level": self.level, "title": self.title, "id": self.id}


@dataclass
class RenderResult:
    """Result of rendering a markdown document."""

    html: str
    title: str | None
    toc: list[TocEntry]
    source_path: Path
    from_cache: bool


class PageRenderer:
    """Renders markdown documents with caching.

    With ``extract_title`` the first H1 heading is removed from the HTML and
    returned as the page title; the frontend renders it itself.
    """

    def __init__(
        self,
        cache: FileCache,
        *,
        extract_title: bool = True,
        copy_code: bool = True,
    ) -> None:
        self._cache = cache
        self._extract_title = extract_title
        self._copy_code = copy_code
        self._md = markdown.Markdown(
            extensions=MARKDOWN_EXTENSIONS,
            extension_configs={
                "codehilite": {
                    "css_class": "highlight",
                    "guess_lang": False,
                },
                "toc": {
                    "toc_depth": "1-4",
                },
            },
        )

    @property
    def cache(self) -> FileCache:
        return self._cache

    def render(self, source_path: Path, path: str) -> RenderResult:
        """Render a markdown document.

        Args:
            source_path: Markdown file to render
            path: Document path used as cache key (e.g., "tracing/guide")

        Returns:
            RenderResult with HTML, title, and ToC

        Raises:
            FileNotFoundError: If source markdown file doesn't exist
        """
        if not source_path.is_file():
            raise FileNotFoundError(f"Source file not found: {source_path}")

        source_mtime = source_path.stat().st_mtime

        cached = self._cache.get(path, source_mtime)
        if cached is not None:
            return RenderResult(
                html=cached.html,
                title=cached.title,
                toc=[TocEntry(**entry) for entry in cached.toc],
                source_path=source_path,
                from_cache=True,
            )

        html, title, toc = self._render_fresh(source_path)
        self._cache.set(path, html, title, source_mtime, [e.to_dict() for e in toc])

        return RenderResult(
            html=html,
            title=title,
            toc=toc,
            source_path=source_path,
            from_cache=False,
        )

    def invalidate(self, path: str) -> None:
        self._cache.invalidate(path)

    def _render_fresh(self, source_path: Path) -> tuple[str, str | None, list[TocEntry]]:
        logger.debug(f"Rendering {source_path}")
        text = source_path.read_text(encoding="utf-8")

        self._md.reset()
        html = self._md.convert(text)
        tokens = _flatten_toc(getattr(self._md, "toc_tokens", []))

        title: str | None = None
        if self._extract_title and tokens and tokens[0].level == 1:
            title = tokens.pop(0).title
            html = _H1_HTML_RE.sub("", html, count=1)

        if self._copy_code:
            html = html.replace('<div class="highlight">', '<div class="highlight" data-copy>')

        return html, title, tokens


def _flatten_toc(tokens: list[dict]) -> list[TocEntry]:
    """Flatten the nested toc tokens of the toc extension."""
    flat: list[TocEntry] = []
    for token in tokens:
        flat.append(
            TocEntry(
                level=int(token["level"]),
                title=html_lib.unescape(str(token["name"])),
                id=str(token["id"]),
            ),
        )
        flat.extend(_flatten_toc(token.get("children", [])))
    return flat
