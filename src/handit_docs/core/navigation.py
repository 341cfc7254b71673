"""Navigation tree builder.

Builds sidebar trees from Site structures for UI presentation.
Navigation is a view layer over the site document hierarchy.
"""

from dataclasses import dataclass, field
from typing import NotRequired, TypedDict

from handit_docs.core.site import Page, Site


class NavItemDict(TypedDict):
    """Dictionary representation of a navigation item."""

    key: str
    title: str
    path: str
    hasContent: bool
    children: NotRequired[list["NavItemDict"]]


class NavLinkDict(TypedDict):
    title: str
    path: str


@dataclass
class NavItem:
    """Navigation item with children for UI tree."""

    key: str
    title: str
    path: str
    has_content: bool = True
    children: list["NavItem"] = field(default_factory=list)

    def to_dict(self) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        result: NavItemDict = {
            "key": self.key,
            "title": self.title,
            "path": self.path,
            "hasContent": self.has_content,
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


def build_navigation(site: Site, root: str | None = None) -> list[NavItem]:
    """Build navigation tree from site structure.

    Args:
        site: Site structure to build navigation from
        root: Optional section path; only its children are returned

    Returns:
        List of NavItem trees in display order
    """
    pages = site.get_root_pages() if root is None else site.get_children(root)
    return [_build_nav_item(site, page) for page in pages]


def build_page_links(site: Site, path: str) -> dict[str, NavLinkDict]:
    """Previous/next links for a page, keys omitted at either end."""
    prev_page, next_page = site.get_neighbours(path)
    links: dict[str, NavLinkDict] = {}
    if prev_page is not None:
        links["prev"] = {"title": prev_page.title, "path": prev_page.path}
    if next_page is not None:
        links["next"] = {"title": next_page.title, "path": next_page.path}
    return links


def _build_nav_item(site: Site, page: Page) -> NavItem:
    children = site.get_children(page.path)
    return NavItem(
        key=page.key,
        title=page.title,
        path=page.path,
        has_content=page.has_content,
        children=[_build_nav_item(site, child) for child in children],
    )
