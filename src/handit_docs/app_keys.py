"""Application keys for type-safe app configuration access."""

from aiohttp import web

from handit_docs.config import Config
from handit_docs.core.cache import FileCache
from handit_docs.core.loader import SiteLoader
from handit_docs.core.renderer import PageRenderer

config_key = web.AppKey("config", Config)
renderer_key = web.AppKey("renderer", PageRenderer)
site_loader_key = web.AppKey("site_loader", SiteLoader)
cache_key = web.AppKey("cache", FileCache)
