"""Coverage service - read a run's Clover report for the included source dirs."""

from __future__ import annotations

import logging
from pathlib import Path

from ..constants import DEFAULT_SOURCE_DIRS
from ..core.discovery import ConfigError, find_config_file, load_config
from ..core.parsers import (
    CoverageReport,
    FileLineCoverage,
    ParseError,
    parse_coverage,
    parse_file_coverage,
)
from .base import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)


class CoverageService:
    """Turn Clover reports into per-file coverage for the project's sources."""

    def __init__(self, project_root: str | Path):
        self._project_root = Path(project_root)

    def included_dirs(self) -> list[str]:
        """Source directories declared in the configuration (default: src)."""
        config_file = find_config_file(self._project_root)
        if config_file is None:
            return list(DEFAULT_SOURCE_DIRS)
        try:
            return load_config(config_file).source_dirs
        except ConfigError as e:
            logger.warning(f"{e}; using default source directories")
            return list(DEFAULT_SOURCE_DIRS)

    def report(self, coverage_file: str | Path | None) -> ServiceResult[CoverageReport]:
        """Parse the Clover report written by a run."""
        loaded = self._read_report(coverage_file)
        if not loaded.success:
            return loaded

        try:
            report = parse_coverage(loaded.data, self.included_dirs(), self._project_root)
        except ParseError as e:
            return _parse_failure(e)

        return ServiceResult.ok(report)

    def file_report(self, coverage_file: str | Path | None, path: str) -> ServiceResult[FileLineCoverage]:
        """
        Line-by-line coverage of one source file.

        Args:
            coverage_file: Clover report written by a run
            path: Source file relative to the project root

        Returns:
            ServiceResult with every line of the file marked covered,
            uncovered or neutral
        """
        if not path:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "'path' is required")

        root = self._project_root.resolve()
        source_file = (root / path).resolve()
        if root not in source_file.parents:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                f"Path is outside the project: {path}",
                details={"path": path}
            )
        if not source_file.is_file():
            return ServiceResult.fail(
                ErrorCode.FILE_NOT_FOUND,
                f"Source file not found: {path}",
                details={"path": path}
            )

        loaded = self._read_report(coverage_file)
        if not loaded.success:
            return loaded

        try:
            # PHP sources are not always UTF-8
            source = source_file.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            return ServiceResult.fail(ErrorCode.FILE_NOT_FOUND, f"Could not read source file: {e}")

        relative = source_file.relative_to(root).as_posix()
        try:
            lines = parse_file_coverage(loaded.data, root, relative, source=source)
        except ParseError as e:
            return _parse_failure(e)

        return ServiceResult.ok(lines)

    def _read_report(self, coverage_file: str | Path | None) -> ServiceResult[bytes]:
        if coverage_file is None:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "Run was started without coverage")

        path = Path(coverage_file)
        if not path.is_file():
            return ServiceResult.fail(
                ErrorCode.FILE_NOT_FOUND,
                f"Coverage report not found: {path}",
                details={"path": str(path)}
            )

        try:
            return ServiceResult.ok(path.read_bytes())
        except OSError as e:
            return ServiceResult.fail(ErrorCode.FILE_NOT_FOUND, f"Could not read coverage report: {e}")


def _parse_failure(error: ParseError) -> ServiceResult:
    return ServiceResult.fail(
        ErrorCode.PARSE_ERROR,
        str(error),
        details={"diagnostics": error.diagnostics}
    )
