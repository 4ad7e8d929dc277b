"""Resolves where the cache root lives on this machine."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from diskstash.domain.errors import DirectoryUnavailable
from diskstash.infrastructure.config.settings import get_cache_base_dir, get_cache_directory_name

logger = logging.getLogger(__name__)


def platform_cache_dir() -> Path:
    """Returns the per-user caches directory for the current platform.

    Raises:
        DirectoryUnavailable: If no home directory can be determined.
    """
    if sys.platform.startswith("win"):
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data)
        return _home() / "AppData" / "Local"
    if sys.platform == "darwin":
        return _home() / "Library" / "Caches"
    xdg = os.environ.get("XDG_CACHE_HOME")
    # XDG requires the path to be absolute; relative values are ignored
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    return _home() / ".cache"


def _home() -> Path:
    try:
        return Path.home()
    except (KeyError, RuntimeError) as e:
        raise DirectoryUnavailable(f"Cannot resolve the caches directory: {e}") from e


def resolve_cache_root(directory_name: Optional[str] = None, base_dir: Optional[Path] = None) -> Path:
    """Builds the cache root from a base directory and a fixed subdirectory name.

    Explicit arguments win over configuration ('cache.base_dir',
    'cache.directory_name'), which wins over the platform default.
    """
    base = base_dir
    if base is None:
        try:
            base = get_cache_base_dir()
        except RuntimeError as e:  # "~" in cache.base_dir without a home directory
            raise DirectoryUnavailable(f"Cannot resolve the configured cache.base_dir: {e}") from e
    if base is None:
        base = platform_cache_dir()
    name = directory_name or get_cache_directory_name()
    if not name or os.sep in name or (os.altsep and os.altsep in name) or name in (".", ".."):
        raise DirectoryUnavailable(f"Invalid cache directory name: {name!r}")
    root = Path(base) / name
    logger.debug(f"Resolved cache root: {root}")
    return root
