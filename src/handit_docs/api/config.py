"""Config API endpoint.

Exposes the site, theme and layout settings the frontend needs to wire the
navbar, banner, sidebar, table of contents and footer.
"""

from typing import Any

from aiohttp import web

from handit_docs.app_keys import config_key
from handit_docs.config import Config, Link


def create_config_routes() -> list[web.RouteDef]:
    return [web.get("/api/config", get_config)]


async def get_config(request: web.Request) -> web.Response:
    return web.json_response(serialize_config(request.app[config_key]))


def serialize_config(config: Config) -> dict[str, Any]:
    site = config.site
    theme = config.theme
    return {
        "liveReloadEnabled": config.live_reload.enabled,
        "landingPath": config.redirect.target,
        "site": {
            "title": site.title,
            "description": site.description,
            "titleTemplate": site.title_template,
            "lang": site.lang,
            "dir": site.dir,
            "ogImage": site.og_image,
        },
        "theme": {
            "logo": theme.logo,
            "projectLink": theme.project_link,
            "docsRepositoryBase": theme.docs_repository_base,
            "editLink": theme.edit_link_text,
            "banner": {"key": theme.banner.key, "text": theme.banner.text},
            "navbarLinks": _links(theme.navbar_links),
            "footer": {
                "text": theme.footer.text,
                "url": theme.footer.url,
                "links": _links(theme.footer.links),
            },
            "sidebar": {
                "defaultMenuCollapseLevel": theme.sidebar.default_menu_collapse_level,
                "toggleButton": theme.sidebar.toggle_button,
            },
            "toc": {
                "float": theme.toc.floating,
                "title": theme.toc.title,
                "backToTop": theme.toc.back_to_top,
            },
            "navigation": {"prev": theme.prev_next, "next": theme.prev_next},
            "feedback": {
                "content": theme.feedback.content,
                "labels": theme.feedback.labels,
            },
            "search": {
                "placeholder": theme.search_placeholder,
                "codeblocks": theme.search_codeblocks,
            },
            "copyCode": theme.copy_code,
            "color": {
                "hue": theme.primary_hue,
                "saturation": theme.primary_saturation,
            },
        },
        "pages": {
            key: {"title": meta.title, "description": meta.description}
            for key, meta in config.pages.items()
        },
    }


def _links(links: tuple[Link, ...]) -> list[dict[str, str]]:
    return [{"label": link.label, "url": link.url} for link in links]
