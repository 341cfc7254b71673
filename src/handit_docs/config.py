"""Configuration management for Handit Docs.

Supports TOML configuration format with auto-discovery. All configuration
objects are frozen: they are built once by ``Config.load()`` and passed
explicitly to the application factory.
"""

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType

CONFIG_FILENAME = "handit-docs.toml"


@dataclass(frozen=True)
class Link:
    """External or internal link shown by the theme."""

    label: str
    url: str


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass(frozen=True)
class DocsConfig:
    """Documentation configuration."""

    source_dir: Path = field(default_factory=lambda: Path("docs"))
    cache_dir: Path = field(default_factory=lambda: Path(".cache"))


@dataclass(frozen=True)
class RedirectConfig:
    """Landing redirect configuration."""

    target: str = "/overview"
    fallback_delay: float = 0.1


@dataclass(frozen=True)
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    watch_patterns: tuple[str, ...] | None = None


@dataclass(frozen=True)
class SiteConfig:
    """Site-wide metadata used for the document head."""

    title: str = "Handit.ai"
    description: str = "Documentation for Handit.ai - Build and deploy AI models at scale"
    title_template: str = "%s – Handit.ai"
    lang: str = "en"
    dir: str = "ltr"
    og_image: str | None = "https://handit.ai/og.png"


@dataclass(frozen=True)
class BannerConfig:
    """Dismissible banner above the navbar."""

    key: str = "handit-ai-docs"
    text: str = "🎉 Welcome to handit.ai Documentation!"


@dataclass(frozen=True)
class FooterConfig:
    """Footer copyright holder and links."""

    text: str = "Handit.ai"
    url: str = "https://handit.ai"
    links: tuple[Link, ...] = (
        Link("Privacy", "/privacy"),
        Link("Terms", "/terms"),
        Link("Contact", "/contact"),
    )


@dataclass(frozen=True)
class SidebarConfig:
    """Sidebar behavior flags."""

    default_menu_collapse_level: int = 1
    toggle_button: bool = True


@dataclass(frozen=True)
class TocConfig:
    """Table of contents behavior."""

    floating: bool = True
    title: str = "On This Page"
    back_to_top: bool = True


@dataclass(frozen=True)
class FeedbackConfig:
    """Feedback link shown below the table of contents."""

    content: str = "Questions? Give us feedback →"
    labels: str = "feedback"


@dataclass(frozen=True)
class ThemeConfig:
    """Theme configuration consumed by the frontend renderer."""

    logo: str = "Handit.ai"
    project_link: str = "https://github.com/Handit-AI/handit.ai"
    docs_repository_base: str = "https://github.com/Handit-AI/handit.ai-docs/tree/main"
    edit_link_text: str = "Edit this page on GitHub"
    banner: BannerConfig = field(default_factory=BannerConfig)
    navbar_links: tuple[Link, ...] = (
        Link("Discord", "https://discord.gg/M6su47HZ"),
        Link("Sign Up", "https://dashboard.handit.ai/auth/custom/sign-up"),
    )
    footer: FooterConfig = field(default_factory=FooterConfig)
    sidebar: SidebarConfig = field(default_factory=SidebarConfig)
    toc: TocConfig = field(default_factory=TocConfig)
    prev_next: bool = True
    feedback: FeedbackConfig = field(default_factory=FeedbackConfig)
    search_placeholder: str = "Search documentation..."
    search_codeblocks: bool = True
    copy_code: bool = True
    primary_hue: int = 210
    primary_saturation: int = 100

    def edit_url(self, relative_source: str) -> str:
        """Build the "edit this page" URL for a source file."""
        return f"{self.docs_repository_base.rstrip('/')}/{relative_source}"


@dataclass(frozen=True)
class PageMetadata:
    """Per-page head metadata declared by the layout."""

    title: str
    description: str | None = None


def _default_pages() -> Mapping[str, PageMetadata]:
    return MappingProxyType(
        {
            "overview": PageMetadata("Handit.ai", "Overview of Handit.ai"),
            "quickstart": PageMetadata("Quickstart", "Get started with Handit.ai in minutes"),
            "tracing": PageMetadata("Training", "Train your AI to be more accurate"),
        },
    )


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    docs: DocsConfig = field(default_factory=DocsConfig)
    redirect: RedirectConfig = field(default_factory=RedirectConfig)
    live_reload: LiveReloadConfig = field(default_factory=LiveReloadConfig)
    site: SiteConfig = field(default_factory=SiteConfig)
    theme: ThemeConfig = field(default_factory=ThemeConfig)
    # Read-only view, excluded from the hash
    pages: Mapping[str, PageMetadata] = field(default_factory=_default_pages, hash=False)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for handit-docs.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            docs=cls._parse_docs(data.get("docs"), config_dir),
            redirect=cls._parse_redirect(data.get("redirect")),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            site=cls._parse_site(data.get("site")),
            theme=cls._parse_theme(data.get("theme")),
            pages=cls._parse_pages(data.get("pages")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        section = _section(data, "server")
        if section is None:
            return ServerConfig()

        defaults = ServerConfig()
        return ServerConfig(
            host=_get_str(section, "server.host", defaults.host),
            port=_get_int(section, "server.port", defaults.port),
        )

    @classmethod
    def _parse_docs(cls, data: object, config_dir: Path) -> DocsConfig:
        """Parse docs configuration section.

        Relative directories resolve against the directory holding the
        config file.
        """
        section = _section(data, "docs") or {}

        source_dir = _get_str(section, "docs.source_dir", "docs")
        cache_dir = _get_str(section, "docs.cache_dir", ".cache")

        return DocsConfig(
            source_dir=config_dir / source_dir,
            cache_dir=config_dir / cache_dir,
        )

    @classmethod
    def _parse_redirect(cls, data: object) -> RedirectConfig:
        section = _section(data, "redirect")
        if section is None:
            return RedirectConfig()

        defaults = RedirectConfig()
        target = _get_str(section, "redirect.target", defaults.target)
        if not target.startswith("/"):
            raise ValueError("redirect.target must be an absolute path starting with '/'")

        delay = section.get("fallback_delay", defaults.fallback_delay)
        if isinstance(delay, bool) or not isinstance(delay, int | float):
            raise ValueError("redirect.fallback_delay must be a number")
        if delay < 0:
            raise ValueError("redirect.fallback_delay must not be negative")

        return RedirectConfig(target=target, fallback_delay=float(delay))

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        section = _section(data, "live_reload")
        if section is None:
            return LiveReloadConfig()

        enabled = _get_bool(section, "live_reload.enabled", True)

        watch_patterns: tuple[str, ...] | None = None
        if "watch_patterns" in section:
            watch_patterns = _get_str_list(section, "live_reload.watch_patterns")

        return LiveReloadConfig(enabled=enabled, watch_patterns=watch_patterns)

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        section = _section(data, "site")
        if section is None:
            return SiteConfig()

        defaults = SiteConfig()
        og_image = section.get("og_image", defaults.og_image)
        if og_image is not None and not isinstance(og_image, str):
            raise ValueError("site.og_image must be a string")

        return SiteConfig(
            title=_get_str(section, "site.title", defaults.title),
            description=_get_str(section, "site.description", defaults.description),
            title_template=_get_str(section, "site.title_template", defaults.title_template),
            lang=_get_str(section, "site.lang", defaults.lang),
            dir=_get_str(section, "site.dir", defaults.dir),
            og_image=og_image,
        )

    @classmethod
    def _parse_theme(cls, data: object) -> ThemeConfig:
        """Parse theme configuration section and its sub-tables."""
        section = _section(data, "theme")
        if section is None:
            return ThemeConfig()

        defaults = ThemeConfig()

        navbar_links = defaults.navbar_links
        if "navbar_links" in section:
            navbar_links = _get_links(section["navbar_links"], "theme.navbar_links")

        return ThemeConfig(
            logo=_get_str(section, "theme.logo", defaults.logo),
            project_link=_get_str(section, "theme.project_link", defaults.project_link),
            docs_repository_base=_get_str(
                section,
                "theme.docs_repository_base",
                defaults.docs_repository_base,
            ),
            edit_link_text=_get_str(section, "theme.edit_link_text", defaults.edit_link_text),
            banner=cls._parse_banner(section.get("banner")),
            navbar_links=navbar_links,
            footer=cls._parse_footer(section.get("footer")),
            sidebar=cls._parse_sidebar(section.get("sidebar")),
            toc=cls._parse_toc(section.get("toc")),
            prev_next=_get_bool(section, "theme.prev_next", defaults.prev_next),
            feedback=cls._parse_feedback(section.get("feedback")),
            search_placeholder=_get_str(
                section,
                "theme.search_placeholder",
                defaults.search_placeholder,
            ),
            search_codeblocks=_get_bool(
                section,
                "theme.search_codeblocks",
                defaults.search_codeblocks,
            ),
            copy_code=_get_bool(section, "theme.copy_code", defaults.copy_code),
            primary_hue=_get_int(section, "theme.primary_hue", defaults.primary_hue),
            primary_saturation=_get_int(
                section,
                "theme.primary_saturation",
                defaults.primary_saturation,
            ),
        )

    @classmethod
    def _parse_banner(cls, data: object) -> BannerConfig:
        section = _section(data, "theme.banner")
        if section is None:
            return BannerConfig()
        defaults = BannerConfig()
        return BannerConfig(
            key=_get_str(section, "theme.banner.key", defaults.key),
            text=_get_str(section, "theme.banner.text", defaults.text),
        )

    @classmethod
    def _parse_footer(cls, data: object) -> FooterConfig:
        section = _section(data, "theme.footer")
        if section is None:
            return FooterConfig()
        defaults = FooterConfig()
        links = defaults.links
        if "links" in section:
            links = _get_links(section["links"], "theme.footer.links")
        return FooterConfig(
            text=_get_str(section, "theme.footer.text", defaults.text),
            url=_get_str(section, "theme.footer.url", defaults.url),
            links=links,
        )

    @classmethod
    def _parse_sidebar(cls, data: object) -> SidebarConfig:
        section = _section(data, "theme.sidebar")
        if section is None:
            return SidebarConfig()
        defaults = SidebarConfig()
        level = _get_int(
            section,
            "theme.sidebar.default_menu_collapse_level",
            defaults.default_menu_collapse_level,
        )
        if level < 1:
            raise ValueError("theme.sidebar.default_menu_collapse_level must be at least 1")
        return SidebarConfig(
            default_menu_collapse_level=level,
            toggle_button=_get_bool(
                section,
                "theme.sidebar.toggle_button",
                defaults.toggle_button,
            ),
        )

    @classmethod
    def _parse_toc(cls, data: object) -> TocConfig:
        section = _section(data, "theme.toc")
        if section is None:
            return TocConfig()
        defaults = TocConfig()
        return TocConfig(
            floating=_get_bool(section, "theme.toc.floating", defaults.floating),
            title=_get_str(section, "theme.toc.title", defaults.title),
            back_to_top=_get_bool(section, "theme.toc.back_to_top", defaults.back_to_top),
        )

    @classmethod
    def _parse_feedback(cls, data: object) -> FeedbackConfig:
        section = _section(data, "theme.feedback")
        if section is None:
            return FeedbackConfig()
        defaults = FeedbackConfig()
        return FeedbackConfig(
            content=_get_str(section, "theme.feedback.content", defaults.content),
            labels=_get_str(section, "theme.feedback.labels", defaults.labels),
        )

    @classmethod
    def _parse_pages(cls, data: object) -> Mapping[str, PageMetadata]:
        """Parse per-page layout metadata.

        A ``[pages]`` section replaces the built-in page metadata entirely.
        """
        section = _section(data, "pages")
        if section is None:
            return _default_pages()

        pages: dict[str, PageMetadata] = {}
        for key, value in section.items():
            entry = _section(value, f"pages.{key}")
            if entry is None:
                raise ValueError(f"pages.{key} must be a table")
            title = entry.get("title")
            if not isinstance(title, str):
                raise ValueError(f"pages.{key}.title must be a string")
            description = entry.get("description")
            if description is not None and not isinstance(description, str):
                raise ValueError(f"pages.{key}.description must be a string")
            pages[key] = PageMetadata(title=title, description=description)
        return MappingProxyType(pages)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        cache_dir: Path | None = None,
        live_reload_enabled: bool | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.
        """
        server = replace(
            self.server,
            host=host if host is not None else self.server.host,
            port=port if port is not None else self.server.port,
        )
        docs = replace(
            self.docs,
            source_dir=source_dir if source_dir is not None else self.docs.source_dir,
            cache_dir=cache_dir if cache_dir is not None else self.docs.cache_dir,
        )
        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(self, server=server, docs=docs, live_reload=live_reload)


def _section(data: object, name: str) -> dict[str, object] | None:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"{name} section must be a dictionary")
    return data


def _get_str(section: dict[str, object], name: str, default: str) -> str:
    value = section.get(name.rsplit(".", 1)[-1], default)
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    return value


def _get_int(section: dict[str, object], name: str, default: int) -> int:
    value = section.get(name.rsplit(".", 1)[-1], default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    return value


def _get_bool(section: dict[str, object], name: str, default: bool) -> bool:
    value = section.get(name.rsplit(".", 1)[-1], default)
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean")
    return value


def _get_str_list(section: dict[str, object], name: str) -> tuple[str, ...]:
    value = section.get(name.rsplit(".", 1)[-1])
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list")
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{name} items must be strings")
    return tuple(value)


def _get_links(value: object, name: str) -> tuple[Link, ...]:
    """Parse an array of ``{label, url}`` tables."""
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list")
    links: list[Link] = []
    for item in value:
        if not isinstance(item, dict):
            raise ValueError(f"{name} items must be tables")
        label = item.get("label")
        url = item.get("url")
        if not isinstance(label, str) or not isinstance(url, str):
            raise ValueError(f"{name} items need string 'label' and 'url'")
        links.append(Link(label=label, url=url))
    return tuple(links)
