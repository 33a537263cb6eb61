"""Clover XML coverage parser."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterable
from pathlib import Path

from .errors import ParseError
from .junit import to_int
from .models import CoverageReport, FileCoverage, FileLineCoverage, LineCoverage, LineStatus


def parse_coverage(
    report_text: str | bytes,
    included_dirs: Iterable[str],
    project_root: str | Path,
) -> CoverageReport:
    """
    Parse a Clover report and keep the files under the included source dirs.

    Args:
        report_text: Clover XML (coverage/project/package/file/metrics)
        included_dirs: Source directories relative to the project root
        project_root: Root the reported absolute paths are relative to

    Returns:
        CoverageReport with per-file and total statement coverage

    Raises:
        ParseError: If the input is blank, malformed, or not a Clover report
    """
    project = _load_project(report_text)

    base = Path(project_root)
    source_dirs = [base / d.strip("/\\") for d in included_dirs if d and d.strip("/\\")]

    files = []
    for file_node in project.iter("file"):
        relative = _relative_path(file_node.get("name", ""), base, source_dirs)
        if relative is None:
            continue
        files.append(FileCoverage(path=relative, coverage_percent=_file_percent(file_node)))

    return CoverageReport(files=files, total_coverage_percent=_total_percent(project))


def parse_file_coverage(
    report_text: str | bytes,
    project_root: str | Path,
    path: str,
    source: str | None = None,
) -> FileLineCoverage:
    """
    Line-by-line coverage of one file from its Clover <line num count> entries.

    With source, every line of it is listed and lines the report does not
    mention are neutral; without it only the reported lines are listed.
    A file absent from the report is entirely neutral.

    Raises:
        ParseError: If the input is blank, malformed, or not a Clover report
    """
    project = _load_project(report_text)

    base = Path(project_root)
    target = base / path
    statuses: dict[int, LineStatus] = {}

    for file_node in project.iter("file"):
        name = file_node.get("name", "")
        if not name or _absolute(name, base) != target:
            continue
        for line in file_node.iter("line"):
            number = to_int(line.get("num"))
            if number <= 0:
                continue
            if to_int(line.get("count")) > 0:
                statuses[number] = "covered"
            else:
                statuses.setdefault(number, "uncovered")
        break

    if source is None:
        lines = [LineCoverage(number=n, coverage=statuses[n]) for n in sorted(statuses)]
    else:
        lines = [
            LineCoverage(number=n, coverage=statuses.get(n, "neutral"), text=text)
            for n, text in enumerate(source.splitlines(), start=1)
        ]

    return FileLineCoverage(path=Path(path).as_posix(), lines=lines)


def _load_project(report_text: str | bytes) -> ET.Element:
    if report_text is None or not report_text.strip():
        raise ParseError("Cannot parse empty coverage report")

    try:
        root = ET.fromstring(report_text)
    except (ET.ParseError, ValueError, LookupError) as e:
        raise ParseError("Failed to parse coverage XML", [str(e)]) from e

    project = root.find("project")
    if root.tag != "coverage" or project is None:
        raise ParseError("Not a Clover report", [f"unexpected root element <{root.tag}>"])

    return project


def _absolute(name: str, base: Path) -> Path:
    path = Path(name)
    return path if path.is_absolute() else base / path


def _relative_path(name: str, base: Path, source_dirs: list[Path]) -> str | None:
    if not name:
        return None

    path = _absolute(name, base)
    for source_dir in source_dirs:
        if path == source_dir or source_dir in path.parents:
            return path.relative_to(base).as_posix()

    return None


def _file_percent(file_node: ET.Element) -> float:
    metrics = file_node.find("metrics")
    if metrics is None:
        return 0.0

    statements = to_int(metrics.get("statements"))
    covered = to_int(metrics.get("coveredstatements"))
    # A file without statements has nothing left uncovered
    return covered / statements * 100 if statements > 0 else 100.0


def _total_percent(project: ET.Element) -> float:
    metrics = project.find("metrics")
    if metrics is None:
        return 0.0

    statements = to_int(metrics.get("statements"))
    covered = to_int(metrics.get("coveredstatements"))
    return covered / statements * 100 if statements > 0 else 0.0
