"""Asset discovery for bundled frontend assets.

Locates the theme frontend bundled into the handit_docs package at build time.
"""

from importlib.resources import files
from pathlib import Path


def get_static_dir() -> Path:
    """Return path to bundled static assets.

    Raises:
        FileNotFoundError: If static assets are not bundled.
    """
    static = files("handit_docs").joinpath("static")
    if not static.is_dir():
        msg = (
            "Bundled static assets not found. "
            "Build the frontend into src/handit_docs/static and reinstall the package."
        )
        raise FileNotFoundError(msg)
    return Path(str(static))
