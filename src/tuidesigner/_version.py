"""Installed tuidesigner version."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version


def get_version() -> str:
    """Version recorded in the installed distribution's metadata."""
    try:
        return _metadata_version("tuidesigner")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = get_version()
