"""Core domain logic for the test hub."""

from .discovery import Suite, TestCatalog, TestDiscoverer, TestMethod, discover
from .parsers import CoverageReport, ParseError, RunResult, parse_coverage, parse_junit
from .project import ProjectRootResolver, runner_executable
from .runner import ProcessHandle, RunnerError, RunRequest, SpawnError, TestRunner, build_command

__all__ = [
    # Discovery
    "discover",
    "TestDiscoverer",
    "TestCatalog",
    "Suite",
    "TestMethod",
    # Parsers
    "parse_junit",
    "parse_coverage",
    "ParseError",
    "RunResult",
    "CoverageReport",
    # Project
    "ProjectRootResolver",
    "runner_executable",
    # Runner
    "TestRunner",
    "ProcessHandle",
    "RunRequest",
    "RunnerError",
    "SpawnError",
    "build_command",
]
