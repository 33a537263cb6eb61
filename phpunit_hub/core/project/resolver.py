"""Locate the PHP project root and the binaries Composer installed into it."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ...constants import (
    COMPOSER_FILE,
    DEFAULT_BIN_DIR,
    INSTALL_MARKER,
    INSTALLED_PACKAGES_FILE,
    RUNNER_BINARY,
)

logger = logging.getLogger(__name__)


class ProjectRootResolver:
    """Walk upward from a start path until the dependency marker is found."""

    def __init__(self, marker: str = INSTALL_MARKER):
        self._marker = marker

    def resolve(self, start_path: str | Path | None = None) -> Path:
        """
        Return the closest ancestor (or start_path itself) holding the marker.

        Falls back to the current working directory when no ancestor has it.
        """
        current = Path(start_path).resolve() if start_path else Path.cwd()

        for candidate in (current, *current.parents):
            if (candidate / self._marker).exists():
                return candidate

        return Path.cwd()


def get_bin_dir(project_root: str | Path) -> Path:
    """
    Read Composer's bin-dir for the project.

    Uses composer.json's config.bin-dir (relative values are resolved against
    the project root). Missing, unreadable or malformed metadata falls back
    to vendor/bin.
    """
    root = Path(project_root)
    fallback = root / DEFAULT_BIN_DIR
    composer_file = root / COMPOSER_FILE

    try:
        data = json.loads(composer_file.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return fallback

    if not isinstance(data, dict):
        return fallback

    config = data.get("config")
    bin_dir = config.get("bin-dir") if isinstance(config, dict) else None
    if not isinstance(bin_dir, str) or not bin_dir.strip():
        return fallback

    path = Path(bin_dir.rstrip("/\\") or bin_dir)
    return path if path.is_absolute() else root / path


def runner_executable(project_root: str | Path) -> Path:
    """Path of the phpunit binary for the project."""
    return get_bin_dir(project_root) / RUNNER_BINARY


def get_package_version(package_name: str, project_root: str | Path) -> str | None:
    """Return the normalized installed version of a Composer package, if known."""
    installed_file = Path(project_root) / INSTALLED_PACKAGES_FILE

    try:
        installed = json.loads(installed_file.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None

    # Composer 2 wraps the list in {"packages": [...]}, Composer 1 writes the list itself
    packages = installed.get("packages") if isinstance(installed, dict) else installed
    if not isinstance(packages, list):
        return None

    for package in packages:
        if isinstance(package, dict) and package.get("name") == package_name:
            version = package.get("version_normalized")
            return version if isinstance(version, str) else None

    logger.debug(f"Package {package_name} not listed in {installed_file}")
    return None
