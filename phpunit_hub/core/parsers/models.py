"""Data models for parsed runner reports."""

from dataclasses import dataclass, field
from typing import Literal

TestStatus = Literal["passed", "failed", "error"]


@dataclass
class Problem:
    """A failure or error attached to a test case."""
    type: str
    message: str

    def to_dict(self) -> dict:
        return {"type": self.type, "message": self.message}


@dataclass
class TestCaseResult:
    """Result of a single test case."""
    __test__ = False

    name: str
    class_name: str = ""
    file: str = ""
    line: int = 0
    assertions: int = 0
    time: float = 0.0
    status: TestStatus = "passed"
    failure: Problem | None = None
    error: Problem | None = None

    @property
    def test_id(self) -> str:
        """Identifier understood by the runner's --filter (Class::method)."""
        return f"{self.class_name}::{self.name}"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "class": self.class_name,
            "file": self.file,
            "line": self.line,
            "assertions": self.assertions,
            "time": self.time,
            "status": self.status,
            "failure": self.failure.to_dict() if self.failure else None,
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass
class SuiteResult:
    """A leaf suite with its declared counters."""
    name: str
    tests: int = 0
    assertions: int = 0
    failures: int = 0
    errors: int = 0
    time: float = 0.0
    testcases: list[TestCaseResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "tests": self.tests,
            "assertions": self.assertions,
            "failures": self.failures,
            "errors": self.errors,
            "time": self.time,
            "testcases": [case.to_dict() for case in self.testcases],
        }


@dataclass
class Summary:
    """Totals over the leaf suites of a run."""
    tests: int = 0
    assertions: int = 0
    failures: int = 0
    errors: int = 0
    time: float = 0.0

    def to_dict(self) -> dict:
        return {
            "tests": self.tests,
            "assertions": self.assertions,
            "failures": self.failures,
            "errors": self.errors,
            "time": self.time,
        }


@dataclass
class RunResult:
    """Complete parsed JUnit log."""
    suites: list[SuiteResult] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)

    @property
    def success(self) -> bool:
        return self.summary.failures == 0 and self.summary.errors == 0

    def failed_test_ids(self) -> list[str]:
        """Class::method for every test case that failed or errored."""
        return [
            case.test_id
            for suite in self.suites
            for case in suite.testcases
            if case.status in ("failed", "error")
        ]

    def to_dict(self) -> dict:
        return {
            "suites": [suite.to_dict() for suite in self.suites],
            "summary": self.summary.to_dict(),
        }


@dataclass
class FileCoverage:
    """Statement coverage of one source file."""
    path: str
    coverage_percent: float

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "coverage_percent": round(self.coverage_percent, 2),
        }


@dataclass
class CoverageReport:
    """Coverage of the included source directories."""
    files: list[FileCoverage] = field(default_factory=list)
    total_coverage_percent: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_coverage_percent": round(self.total_coverage_percent, 2),
            "files": [f.to_dict() for f in self.files],
        }


@dataclass(frozen=True)
class ProgressEvent:
    """One realtime event written by the runner extension on stderr."""
    event: str
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"event": self.event, "data": self.data}


LineStatus = Literal["covered", "uncovered", "neutral"]


@dataclass
class LineCoverage:
    """One source line; neutral lines hold no executable statement."""
    number: int
    coverage: LineStatus = "neutral"
    text: str = ""

    def to_dict(self) -> dict:
        return {"number": self.number, "coverage": self.coverage, "text": self.text}


@dataclass
class FileLineCoverage:
    """Line-by-line coverage of a single source file."""
    path: str
    lines: list[LineCoverage] = field(default_factory=list)

    @property
    def covered_lines(self) -> int:
        return sum(1 for line in self.lines if line.coverage == "covered")

    @property
    def uncovered_lines(self) -> int:
        return sum(1 for line in self.lines if line.coverage == "uncovered")

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "covered_lines": self.covered_lines,
            "uncovered_lines": self.uncovered_lines,
            "lines": [line.to_dict() for line in self.lines],
        }
