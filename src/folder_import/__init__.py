"""Top-level package for the brand / model line folder importer."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("folder-import")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.1.0"

from .config.settings import Settings, get_settings
from .entities import FolderNode, ImportRecord, ImportReport, ImportStats, PathCache
from .utils.slug import slugify

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "FolderNode",
    "ImportRecord",
    "ImportReport",
    "ImportStats",
    "PathCache",
    "slugify",
]
