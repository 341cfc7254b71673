"""Site loader.

Scans the content directory, applies the navigation metadata of every
directory and builds an ordered Site. The built site is cached until
``invalidate()`` is called (live reload does this on every change).
"""

import logging
import re
import threading
from dataclasses import dataclass
from pathlib import Path

from handit_docs.core.meta import META_FILENAMES, NavigationMeta
from handit_docs.core.site import Site, SiteBuilder

logger = logging.getLogger(__name__)

INDEX_KEY = "index"
_H1_RE = re.compile(r"^#[ \t]+(.+?)[ \t]*#*[ \t]*$", re.MULTILINE)
_FENCE_RE = re.compile(r"^[ \t]*(`{3,}|~{3,}).*?^[ \t]*\1[ \t]*$", re.MULTILINE | re.DOTALL)


@dataclass(frozen=True)
class MetaProblem:
    """Navigation key that names no page or directory."""

    meta_file: Path
    key: str

    def __str__(self) -> str:
        return f"{self.meta_file}: '{self.key}' does not match any page or directory"


@dataclass
class _Entry:
    key: str
    file: Path | None = None
    directory: Path | None = None


class SiteLoader:
    """Loads and caches the site structure for a content directory."""

    def __init__(self, source_dir: Path) -> None:
        self._source_dir = source_dir
        self._lock = threading.Lock()
        self._site: Site | None = None
        self._problems: list[MetaProblem] = []

    @property
    def source_dir(self) -> Path:
        return self._source_dir

    def load(self) -> Site:
        """Return the cached site, building it on first use.

        Raises:
            MetaError: If any navigation metadata file is malformed
        """
        with self._lock:
            if self._site is None:
                self._site, self._problems = self._build()
            return self._site

    def problems(self) -> list[MetaProblem]:
        """Metadata keys that matched no content in the last build."""
        self.load()
        return list(self._problems)

    def invalidate(self) -> None:
        with self._lock:
            self._site = None
            self._problems = []

    def _build(self) -> tuple[Site, list[MetaProblem]]:
        builder = SiteBuilder()
        problems: list[MetaProblem] = []
        if self._source_dir.is_dir():
            self._scan(self._source_dir, "", None, builder, problems, root=True)
        site = builder.build()
        logger.debug(f"Loaded {len(site)} pages from {self._source_dir}")
        return site, problems

    def _scan(
        self,
        directory: Path,
        url_prefix: str,
        parent_idx: int | None,
        builder: SiteBuilder,
        problems: list[MetaProblem],
        *,
        root: bool = False,
    ) -> None:
        meta = NavigationMeta.find(directory)
        entries = _collect_entries(directory, include_index=root)

        for key in meta.keys():
            if key in entries:
                continue
            # Below the root, "index" labels the section itself
            if key == INDEX_KEY and (not root or (directory / "index.md").is_file()):
                continue
            problem = MetaProblem(meta_file=meta.source or directory, key=key)
            logger.warning(str(problem))
            problems.append(problem)

        for entry in _ordered(entries, meta):
            path = f"{url_prefix}/{entry.key}" if entry.key != INDEX_KEY else url_prefix or "/"
            label = meta.label_for(entry.key)

            if entry.directory is None:
                assert entry.file is not None
                title = label or _title_from_file(entry.file, entry.key)
                builder.add_page(entry.key, title, path, entry.file, parent_idx)
                continue

            child_meta = NavigationMeta.find(entry.directory)
            index_file = entry.directory / "index.md"
            source = index_file if index_file.is_file() else entry.file
            title = label or child_meta.label_for(INDEX_KEY)
            if title is None:
                title = _title_from_file(source, entry.key) if source else _humanize(entry.key)

            idx = builder.add_page(entry.key, title, path, source, parent_idx)
            self._scan(entry.directory, path, idx, builder, problems)


def _collect_entries(directory: Path, *, include_index: bool) -> dict[str, _Entry]:
    """Visible pages and sections of a directory, keyed by content-area key.

    A ``name.md`` file next to a ``name/`` directory becomes that
    directory's page.
    """
    entries: dict[str, _Entry] = {}
    for child in directory.iterdir():
        if child.name.startswith((".", "_")) or child.name in META_FILENAMES:
            continue
        if child.is_dir():
            if not _has_pages(child):
                continue
            entries.setdefault(child.name, _Entry(key=child.name)).directory = child
        elif child.suffix == ".md":
            key = child.stem
            if key == INDEX_KEY and not include_index:
                continue
            entries.setdefault(key, _Entry(key=key)).file = child
    return entries


def _has_pages(directory: Path) -> bool:
    for child in directory.rglob("*.md"):
        relative = child.relative_to(directory)
        if not any(part.startswith((".", "_")) for part in relative.parts):
            return True
    return False


def _ordered(entries: dict[str, _Entry], meta: NavigationMeta) -> list[_Entry]:
    """Declared keys in declaration order, then the rest sorted by key."""
    declared = [entries[key] for key in meta.keys() if key in entries]
    rest = sorted((e for key, e in entries.items() if key not in meta), key=lambda e: e.key)
    return declared + rest


def _title_from_file(path: Path, key: str) -> str:
    """Title from the first H1 heading, falling back to the humanized key."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Cannot read {path}: {e}")
        return _humanize(key)
    match = _H1_RE.search(_FENCE_RE.sub("", text))
    if match:
        return match.group(1)
    return _humanize(key)


def _humanize(key: str) -> str:
    if key == INDEX_KEY:
        return "Home"
    return " ".join(word.capitalize() for word in re.split(r"[-_]+", key) if word)
