"""Site structure for the documentation hierarchy.

Pages are stored in a flat list with parent/children relationships tracked
by indices. Sibling order is the display order resolved from navigation
metadata, so every traversal here is order-preserving.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import NewType

# URL path for routing (e.g., "/tracing", "/tracing/guide/node_wrapper").
# Distinct from filesystem Path to catch type mismatches.
URLPath = NewType("URLPath", str)


@dataclass(frozen=True)
class Page:
    """Document page or section.

    ``source`` is None for a directory that has children but no index page.
    """

    key: str
    title: str
    path: URLPath
    source: Path | None = None

    @property
    def has_content(self) -> bool:
        return self.source is not None


@dataclass(frozen=True)
class BreadcrumbItem:
    """Breadcrumb navigation item."""

    title: str
    path: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "path": self.path}


class Site:
    """Document site with O(1) path lookups."""

    __slots__ = ("_children", "_pages", "_parents", "_path_index", "_roots")

    def __init__(
        self,
        pages: list[Page],
        children: list[list[int]],
        parents: list[int | None],
        roots: list[int],
    ) -> None:
        self._pages = pages
        self._children = children
        self._parents = parents
        self._roots = roots
        self._path_index = {page.path: i for i, page in enumerate(pages)}

    def __len__(self) -> int:
        return len(self._pages)

    def get_page(self, path: str) -> Page | None:
        idx = self._path_index.get(normalize_path(path))
        if idx is None:
            return None
        return self._pages[idx]

    def get_children(self, path: str) -> list[Page]:
        """Children of a page in display order, empty if unknown."""
        idx = self._path_index.get(normalize_path(path))
        if idx is None:
            return []
        return [self._pages[i] for i in self._children[idx]]

    def get_root_pages(self) -> list[Page]:
        return [self._pages[i] for i in self._roots]

    def get_breadcrumbs(self, path: str) -> list[BreadcrumbItem]:
        """Build breadcrumbs for a given path.

        Starts with "Home" followed by ancestor pages; the current page is
        not included. Unknown paths get just [Home].
        """
        if not path or path == "/":
            return []

        home = BreadcrumbItem(title="Home", path="/")
        idx = self._path_index.get(normalize_path(path))
        if idx is None:
            return [home]

        ancestors: list[Page] = []
        current = self._parents[idx]
        while current is not None:
            ancestors.append(self._pages[current])
            current = self._parents[current]
        ancestors.reverse()

        return [home, *(BreadcrumbItem(title=p.title, path=p.path) for p in ancestors)]

    def reading_order(self) -> list[Page]:
        """Pages with content in depth-first display order."""
        ordered: list[Page] = []
        stack = list(reversed(self._roots))
        while stack:
            idx = stack.pop()
            page = self._pages[idx]
            if page.has_content:
                ordered.append(page)
            stack.extend(reversed(self._children[idx]))
        return ordered

    def get_neighbours(self, path: str) -> tuple[Page | None, Page | None]:
        """Previous and next pages in reading order."""
        ordered = self.reading_order()
        normalized = normalize_path(path)
        for i, page in enumerate(ordered):
            if page.path == normalized:
                prev_page = ordered[i - 1] if i > 0 else None
                next_page = ordered[i + 1] if i + 1 < len(ordered) else None
                return prev_page, next_page
        return None, None


class SiteBuilder:
    """Builder for constructing Site instances."""

    def __init__(self) -> None:
        self._pages: list[Page] = []
        self._children: list[list[int]] = []
        self._parents: list[int | None] = []
        self._roots: list[int] = []

    def add_page(
        self,
        key: str,
        title: str,
        path: str,
        source: Path | None = None,
        parent_idx: int | None = None,
    ) -> int:
        """Add a page and return its index."""
        idx = len(self._pages)
        self._pages.append(
            Page(key=key, title=title, path=URLPath(normalize_path(path)), source=source),
        )
        self._children.append([])
        self._parents.append(parent_idx)

        if parent_idx is None:
            self._roots.append(idx)
        else:
            self._children[parent_idx].append(idx)

        return idx

    def build(self) -> Site:
        return Site(
            pages=self._pages,
            children=self._children,
            parents=self._parents,
            roots=self._roots,
        )


def normalize_path(path: str) -> str:
    """Normalize path to have a leading slash and no trailing slash."""
    stripped = path.strip("/")
    return f"/{stripped}"
