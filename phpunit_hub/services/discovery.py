"""Discovery service - test catalog and project information for handlers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..constants import RUNNER_PACKAGE
from ..core.discovery import TestCatalog, TestDiscoverer
from ..core.project import get_package_version, runner_executable
from .base import ServiceResult


@dataclass(frozen=True)
class ProjectInfo:
    """Where the hub is pointed and what it found there."""
    project_root: Path
    config_file: Path | None
    runner: Path
    runner_version: str | None

    def to_dict(self) -> dict:
        return {
            "projectRoot": str(self.project_root),
            "configFile": str(self.config_file) if self.config_file else None,
            "runner": str(self.runner),
            "phpunitVersion": self.runner_version,
        }


class DiscoveryService:
    """Discover tests for the configured project root."""

    def __init__(self, project_root: str | Path):
        self._project_root = Path(project_root)

    def discover(self) -> ServiceResult[TestCatalog]:
        """
        Scan the project and return its catalog.

        Discovery degrades instead of failing, so the result is always ok;
        a project without configuration simply has no suites.
        """
        return ServiceResult.ok(TestDiscoverer(self._project_root).discover())

    def project_info(self) -> ServiceResult[ProjectInfo]:
        return ServiceResult.ok(ProjectInfo(
            project_root=self._project_root,
            config_file=TestDiscoverer(self._project_root).config_file,
            runner=runner_executable(self._project_root),
            runner_version=get_package_version(RUNNER_PACKAGE, self._project_root),
        ))
