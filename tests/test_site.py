"""Tests for site structure."""

from pathlib import Path

from handit_docs.core.site import BreadcrumbItem, Site, SiteBuilder, normalize_path


def _build_sample_site() -> Site:
    builder = SiteBuilder()
    builder.add_page("overview", "Overview", "/overview", Path("overview.md"))
    tracing = builder.add_page("tracing", "Tracing", "/tracing")
    builder.add_page("overview", "Introduction", "/tracing/overview", Path("t/overview.md"), tracing)
    guide = builder.add_page("guide", "Tracing Guide", "/tracing/guide", None, tracing)
    builder.add_page("agent_wrapper", "Agent Wrapper", "/tracing/guide/agent_wrapper", Path("a.md"), guide)
    builder.add_page("node_wrapper", "Node Wrapper", "/tracing/guide/node_wrapper", Path("n.md"), guide)
    builder.add_page("quickstart", "Quickstart", "/quickstart", Path("quickstart.md"))
    return builder.build()


class TestSiteLookup:
    """Tests for page lookups."""

    def test__get_page__accepts_paths_with_or_without_slashes(self) -> None:
        site = _build_sample_site()

        assert site.get_page("/tracing/guide") is not None
        assert site.get_page("tracing/guide") == site.get_page("/tracing/guide/")

    def test__get_page__unknown_returns_none(self) -> None:
        assert _build_sample_site().get_page("/nonexistent") is None

    def test__get_children__in_insertion_order(self) -> None:
        site = _build_sample_site()

        children = site.get_children("/tracing/guide")

        assert [c.key for c in children] == ["agent_wrapper", "node_wrapper"]

    def test__section_without_source__has_no_content(self) -> None:
        site = _build_sample_site()

        tracing = site.get_page("/tracing")

        assert tracing is not None
        assert not tracing.has_content


class TestSiteBreadcrumbs:
    """Tests for Site.get_breadcrumbs()."""

    def test__nested_page__home_then_ancestors(self) -> None:
        site = _build_sample_site()

        crumbs = site.get_breadcrumbs("/tracing/guide/node_wrapper")

        assert crumbs == [
            BreadcrumbItem("Home", "/"),
            BreadcrumbItem("Tracing", "/tracing"),
            BreadcrumbItem("Tracing Guide", "/tracing/guide"),
        ]

    def test__root_page__home_only(self) -> None:
        assert _build_sample_site().get_breadcrumbs("overview") == [BreadcrumbItem("Home", "/")]

    def test__unknown_page__home_only(self) -> None:
        assert _build_sample_site().get_breadcrumbs("/missing") == [BreadcrumbItem("Home", "/")]

    def test__empty_path__no_breadcrumbs(self) -> None:
        assert _build_sample_site().get_breadcrumbs("") == []


class TestSiteReadingOrder:
    """Tests for reading order and neighbours."""

    def test__reading_order__depth_first_pages_with_content(self) -> None:
        site = _build_sample_site()

        paths = [p.path for p in site.reading_order()]

        assert paths == [
            "/overview",
            "/tracing/overview",
            "/tracing/guide/agent_wrapper",
            "/tracing/guide/node_wrapper",
            "/quickstart",
        ]

    def test__neighbours__skip_sections_without_content(self) -> None:
        site = _build_sample_site()

        prev_page, next_page = site.get_neighbours("/tracing/overview")

        assert prev_page is not None and prev_page.path == "/overview"
        assert next_page is not None and next_page.path == "/tracing/guide/agent_wrapper"

    def test__neighbours__none_at_the_ends(self) -> None:
        site = _build_sample_site()

        assert site.get_neighbours("/overview")[0] is None
        assert site.get_neighbours("/quickstart")[1] is None


class TestNormalizePath:
    def test__variants__normalized(self) -> None:
        assert normalize_path("") == "/"
        assert normalize_path("/") == "/"
        assert normalize_path("a/b/") == "/a/b"
