"""Test runner module - builds the command line and drives the runner process."""

from .command import build_command, filter_pattern, to_kebab_case
from .executor import ProcessHandle, RunnerError, SpawnError, TestRunner
from .models import RunRequest

__all__ = [
    "TestRunner",
    "ProcessHandle",
    "RunnerError",
    "SpawnError",
    "RunRequest",
    "build_command",
    "filter_pattern",
    "to_kebab_case",
]
