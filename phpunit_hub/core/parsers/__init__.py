"""Report parsers - JUnit results, Clover coverage and realtime progress lines."""

from .coverage import parse_coverage, parse_file_coverage
from .errors import ParseError
from .events import ProgressDecoder, parse_progress_line
from .junit import parse_junit
from .models import (
    CoverageReport,
    FileCoverage,
    FileLineCoverage,
    LineCoverage,
    Problem,
    ProgressEvent,
    RunResult,
    SuiteResult,
    Summary,
    TestCaseResult,
)

__all__ = [
    "parse_junit",
    "parse_coverage",
    "parse_file_coverage",
    "parse_progress_line",
    "ProgressDecoder",
    "ParseError",
    "RunResult",
    "SuiteResult",
    "TestCaseResult",
    "Summary",
    "Problem",
    "CoverageReport",
    "FileCoverage",
    "FileLineCoverage",
    "LineCoverage",
    "ProgressEvent",
]
