"""Landing redirect.

Anyone landing on ``/`` is sent to the canonical overview page. The
redirect issues a replace-navigation on mount and arms a one-shot fallback
that performs a hard navigation if the replace did not take effect. The
fallback is cancelled on unmount, so nothing fires against a torn-down
navigator.
"""

import asyncio
import html
import json
import logging
from collections.abc import Callable
from types import TracebackType
from typing import Protocol

from aiohttp import web

from handit_docs.app_keys import config_key

logger = logging.getLogger(__name__)

DEFAULT_TARGET = "/overview"
DEFAULT_DELAY = 0.1


class Navigator(Protocol):
    """Navigation surface the redirect drives."""

    @property
    def location(self) -> str | None: ...

    def replace(self, path: str) -> None:
        """Change location without adding a history entry."""
        ...

    def assign(self, path: str) -> None:
        """Hard navigation to a new document."""
        ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with ``call_later``, e.g. an asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class LandingRedirect:
    """Redirect side effect bound to a mount/unmount lifecycle.

    Usable as a (sync or async) context manager, which pairs mount and
    unmount on every exit path::

        async with LandingRedirect(navigator):
            ...
    """

    def __init__(
        self,
        navigator: Navigator,
        target: str = DEFAULT_TARGET,
        delay: float = DEFAULT_DELAY,
        *,
        scheduler: Scheduler | None = None,
    ) -> None:
        if not target.startswith("/"):
            raise ValueError(f"Redirect target must be an absolute path: {target!r}")
        if delay < 0:
            raise ValueError("Fallback delay must not be negative")
        self._navigator = navigator
        self._target = target
        self._delay = delay
        self._scheduler = scheduler
        self._timer: TimerHandle | None = None
        self._mounted = False
        self._fallback_fired = False

    @property
    def target(self) -> str:
        return self._target

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def fallback_pending(self) -> bool:
        return self._timer is not None

    @property
    def fallback_fired(self) -> bool:
        return self._fallback_fired

    def mount(self) -> None:
        """Arm the fallback and issue the primary navigation.

        Raises:
            RuntimeError: If already mounted, or no scheduler was given and
                there is no running event loop
        """
        if self._mounted:
            raise RuntimeError("LandingRedirect is already mounted")

        scheduler = self._scheduler or asyncio.get_running_loop()
        self._timer = scheduler.call_later(self._delay, self._fire_fallback)
        self._mounted = True

        try:
            self._navigator.replace(self._target)
        except Exception:
            logger.warning(
                f"Primary navigation to {self._target} failed, waiting for fallback",
                exc_info=True,
            )

    def unmount(self) -> None:
        """Cancel the pending fallback. Safe to call more than once."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._mounted = False

    def _fire_fallback(self) -> None:
        self._timer = None
        if not self._mounted:
            return
        if self._navigator.location == self._target:
            logger.debug(f"Already at {self._target}, fallback not needed")
            return
        self._fallback_fired = True
        logger.info(f"Fallback hard navigation to {self._target}")
        self._navigator.assign(self._target)

    def __enter__(self) -> "LandingRedirect":
        self.mount()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unmount()

    async def __aenter__(self) -> "LandingRedirect":
        self.mount()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unmount()


class ResponseNavigator:
    """Navigator that turns navigation calls into an HTTP redirect.

    ``replace`` answers ``302 Found``: the browser never records the
    redirecting URL as a history entry. ``assign`` answers ``303 See Other``.
    """

    def __init__(self, body: str | None = None) -> None:
        self._location: str | None = None
        self._status: int | None = None
        self._body = body

    @property
    def location(self) -> str | None:
        return self._location

    def replace(self, path: str) -> None:
        self._location = path
        self._status = web.HTTPFound.status_code

    def assign(self, path: str) -> None:
        self._location = path
        self._status = web.HTTPSeeOther.status_code

    def response(self) -> web.Response:
        """Build the response for the recorded navigation.

        Raises:
            RuntimeError: If no navigation happened
        """
        if self._location is None or self._status is None:
            raise RuntimeError("No navigation was recorded")
        return web.Response(
            status=self._status,
            headers={"Location": self._location, "Cache-Control": "no-store"},
            text=self._body,
            content_type="text/html" if self._body is not None else None,
        )


def render_landing_page(target: str = DEFAULT_TARGET, delay: float = DEFAULT_DELAY) -> str:
    """Empty placeholder document performing the same redirect in a browser.

    ``location.replace`` is the primary navigation; a ``setTimeout`` hard
    navigation is the fallback, and ``<noscript>`` clients get a meta refresh.
    """
    url_attr = html.escape(target, quote=True)
    url_js = json.dumps(target).replace("</", "<\\/")
    delay_ms = round(delay * 1000)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '<meta charset="utf-8">\n'
        f'<link rel="canonical" href="{url_attr}">\n'
        f'<noscript><meta http-equiv="refresh" content="0; url={url_attr}"></noscript>\n'
        "<script>\n"
        f"var target = {url_js};\n"
        "var timer = setTimeout(function () { window.location.href = target; }, "
        f"{delay_ms});\n"
        "window.addEventListener('pagehide', function () { clearTimeout(timer); });\n"
        "window.location.replace(target);\n"
        "</script>\n"
        "</head>\n"
        "<body><div></div></body>\n"
        "</html>\n"
    )


async def landing_redirect(request: web.Request) -> web.Response:
    """Handle ``GET /`` by mounting the landing redirect for this request."""
    redirect_config = request.app[config_key].redirect
    navigator = ResponseNavigator(
        body=render_landing_page(redirect_config.target, redirect_config.fallback_delay),
    )
    async with LandingRedirect(
        navigator,
        redirect_config.target,
        redirect_config.fallback_delay,
    ):
        pass
    return navigator.response()


def create_redirect_routes() -> list[web.RouteDef]:
    return [web.get("/", landing_redirect)]
