"""Tests for navigation tree builder."""

from pathlib import Path

from handit_docs.core.loader import SiteLoader
from handit_docs.core.navigation import NavItem, build_navigation, build_page_links


def _make_docs(docs_dir: Path) -> None:
    (docs_dir / "_meta.toml").write_text('overview = "Overview"\nquickstart = "Quickstart"\ntracing = "Tracing"\n')
    (docs_dir / "overview.md").write_text("# Handit.ai\n")
    (docs_dir / "quickstart.md").write_text("# Quickstart\n")
    tracing = docs_dir / "tracing"
    tracing.mkdir()
    (tracing / "_meta.toml").write_text('overview = "Introduction"\nsdk = "SDKs"\n')
    (tracing / "overview.md").write_text("# Tracing\n")
    (tracing / "sdk.md").write_text("# SDK\n")


class TestBuildNavigation:
    """Tests for build_navigation()."""

    def test__two_entry_meta__sidebar_matches_exactly(self, docs_dir: Path) -> None:
        """A two-key mapping yields exactly two items in order with those labels."""
        (docs_dir / "_meta.toml").write_text('overview = "Overview"\nquickstart = "Quickstart"\n')
        (docs_dir / "quickstart.md").write_text("# Start here\n")
        (docs_dir / "overview.md").write_text("# Welcome\n")

        items = build_navigation(SiteLoader(docs_dir).load())

        assert [(i.key, i.title) for i in items] == [
            ("overview", "Overview"),
            ("quickstart", "Quickstart"),
        ]

    def test__nested__children_follow_section_meta(self, docs_dir: Path) -> None:
        _make_docs(docs_dir)

        items = build_navigation(SiteLoader(docs_dir).load())

        tracing = items[2]
        assert tracing.path == "/tracing"
        assert not tracing.has_content
        assert [c.title for c in tracing.children] == ["Introduction", "SDKs"]

    def test__subtree__returns_section_children(self, docs_dir: Path) -> None:
        _make_docs(docs_dir)

        items = build_navigation(SiteLoader(docs_dir).load(), "/tracing")

        assert [i.path for i in items] == ["/tracing/overview", "/tracing/sdk"]

    def test__empty_site__returns_empty_list(self, docs_dir: Path) -> None:
        assert build_navigation(SiteLoader(docs_dir).load()) == []


class TestNavItemToDict:
    def test__leaf__omits_children(self) -> None:
        item = NavItem(key="sdk", title="SDKs", path="/tracing/sdk")

        assert item.to_dict() == {
            "key": "sdk",
            "title": "SDKs",
            "path": "/tracing/sdk",
            "hasContent": True,
        }

    def test__section__includes_children(self) -> None:
        item = NavItem(
            key="tracing",
            title="Tracing",
            path="/tracing",
            has_content=False,
            children=[NavItem(key="sdk", title="SDKs", path="/tracing/sdk")],
        )

        result = item.to_dict()

        assert result["hasContent"] is False
        assert result["children"][0]["path"] == "/tracing/sdk"


class TestBuildPageLinks:
    def test__middle_page__prev_and_next(self, docs_dir: Path) -> None:
        _make_docs(docs_dir)
        site = SiteLoader(docs_dir).load()

        links = build_page_links(site, "/quickstart")

        assert links == {
            "prev": {"title": "Overview", "path": "/overview"},
            "next": {"title": "Introduction", "path": "/tracing/overview"},
        }

    def test__last_page__no_next(self, docs_dir: Path) -> None:
        _make_docs(docs_dir)
        site = SiteLoader(docs_dir).load()

        links = build_page_links(site, "/tracing/sdk")

        assert "next" not in links
        assert links["prev"]["path"] == "/tracing/overview"
