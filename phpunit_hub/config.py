"""
Runtime configuration read from the environment.

All settings have defaults so the hub starts with no environment at all:
- PHPUNIT_HUB_PROJECT_ROOT: PHP project root (resolved from cwd otherwise)
- PHPUNIT_HUB_HOST / PHPUNIT_HUB_PORT: WebSocket status server bind address
- PHPUNIT_HUB_LOG_LEVEL: logging level name
- PHPUNIT_HUB_RUN_TIMEOUT: seconds before an active run is terminated
- PHPUNIT_HUB_TEMP_DIR: where JUnit and Clover logs are written
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from .constants import DEFAULT_HOST, DEFAULT_PORT
from .core.project import ProjectRootResolver

ENV_PREFIX = "PHPUNIT_HUB_"


@dataclass(frozen=True)
class HubConfig:
    """
    Immutable hub settings.

    Attributes:
        project_root: Root of the PHP project under test
        host: Bind host for the WebSocket status server
        port: Bind port for the WebSocket status server
        log_level: Logging level name (e.g. "INFO")
        run_timeout: Seconds before a run is terminated (None = never)
        temp_dir: Directory for per-run report files
    """
    project_root: Path
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    run_timeout: float | None = None
    temp_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> HubConfig:
        """Build a config from environment variables (os.environ by default)."""
        env = os.environ if environ is None else environ

        root = env.get(f"{ENV_PREFIX}PROJECT_ROOT")
        project_root = Path(root).resolve() if root else ProjectRootResolver().resolve()

        temp_dir = env.get(f"{ENV_PREFIX}TEMP_DIR")

        return cls(
            project_root=project_root,
            host=env.get(f"{ENV_PREFIX}HOST", DEFAULT_HOST),
            port=_read_int(env, "PORT", DEFAULT_PORT),
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper(),
            run_timeout=_read_float(env, "RUN_TIMEOUT"),
            temp_dir=Path(temp_dir) if temp_dir else Path(tempfile.gettempdir()),
        )


def _read_int(env, name: str, default: int) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer (got {raw!r})") from None


def _read_float(env, name: str) -> float | None:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number (got {raw!r})") from None
    return value if value > 0 else None
