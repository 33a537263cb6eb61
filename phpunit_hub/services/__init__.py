"""Services package.

Exposes the service classes and shared result types used by the MCP handlers.
"""

from __future__ import annotations

from pathlib import Path

from ..core.runner import TestRunner
from ..hub import BroadcastHub
from .base import (
    ErrorCode,
    ServiceError,
    ServiceResult,
)
from .coverage import CoverageService
from .discovery import DiscoveryService, ProjectInfo
from .execution import RunService, RunTicket

__all__ = [
    # Base
    "ServiceResult",
    "ServiceError",
    "ErrorCode",
    # Services
    "DiscoveryService",
    "ProjectInfo",
    "RunService",
    "RunTicket",
    "CoverageService",
]


# =============================================================================
# Convenience factory functions
# =============================================================================

def create_discovery_service(project_root: str | Path) -> DiscoveryService:
    """Factory for DiscoveryService."""

    return DiscoveryService(project_root)


def create_run_service(
    runner: TestRunner,
    hub: BroadcastHub,
    temp_dir: str | Path,
    run_timeout: float | None = None
) -> RunService:
    """Factory for RunService (runner and hub are injected)."""

    return RunService(runner, hub, temp_dir, run_timeout=run_timeout)


def create_coverage_service(project_root: str | Path) -> CoverageService:
    """Factory for CoverageService."""

    return CoverageService(project_root)
