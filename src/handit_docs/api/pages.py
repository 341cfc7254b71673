"""Pages API endpoint.

Handles page rendering and returns JSON responses with metadata, ToC,
previous/next links and HTML content.
"""

from datetime import UTC, datetime
from email.utils import format_datetime
from hashlib import md5

from aiohttp import web

from handit_docs.app_keys import config_key, renderer_key, site_loader_key
from handit_docs.core.navigation import build_page_links
from handit_docs.core.site import normalize_path


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/pages/{path:.*}", get_page),
    ]


async def get_page(request: web.Request) -> web.Response:
    path = request.match_info["path"]
    config = request.app[config_key]
    renderer = request.app[renderer_key]
    site_loader = request.app[site_loader_key]

    site = site_loader.load()
    normalized = normalize_path(path)
    page = site.get_page(normalized)
    if page is None or page.source is None:
        return web.json_response(
            {"error": "Page not found", "path": path},
            status=404,
        )

    try:
        result = renderer.render(page.source, normalized.strip("/"))
    except FileNotFoundError:
        site_loader.invalidate()
        return web.json_response(
            {"error": "Page not found", "path": path},
            status=404,
        )

    etag = _compute_etag(result.html)
    if request.headers.get("If-None-Match") == etag:
        return web.Response(status=304, headers={"ETag": etag})

    last_modified = datetime.fromtimestamp(result.source_path.stat().st_mtime, tz=UTC)
    layout_meta = config.pages.get(normalized.strip("/"))
    title = result.title or page.title
    head_title = layout_meta.title if layout_meta is not None else title
    relative_source = result.source_path.relative_to(site_loader.source_dir).as_posix()

    response_data = {
        "meta": {
            "title": title,
            "navTitle": page.title,
            "headTitle": config.site.title_template.replace("%s", head_title),
            "description": (
                layout_meta.description
                if layout_meta is not None and layout_meta.description
                else config.site.description
            ),
            "path": normalized,
            "source_file": relative_source,
            "last_modified": last_modified.isoformat(),
            "edit_url": config.theme.edit_url(relative_source),
        },
        "breadcrumbs": [b.to_dict() for b in site.get_breadcrumbs(normalized)],
        "toc": [entry.to_dict() for entry in result.toc],
        "navigation": build_page_links(site, normalized) if config.theme.prev_next else {},
        "content": result.html,
    }

    return web.json_response(
        response_data,
        headers={
            "ETag": etag,
            "Last-Modified": format_datetime(last_modified, usegmt=True),
            "Cache-Control": "private, max-age=60",
        },
    )


def _compute_etag(content: str) -> str:
    # First 16 hex chars (64 bits) are enough for cache validation
    content_hash = md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
