"""Build the runner's argument vector.

Every caller-supplied value is placed in its own ``--flag=value`` argv item
and handed to the spawn primitive as a list, so no shell ever parses it.
Filter values are additionally regex-escaped because the runner treats
--filter as a pattern.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from pathlib import Path

_OPTION_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_FORBIDDEN = ("\0", "\n", "\r")


def build_command(
    executable: str | Path,
    log_file: str | Path,
    filters: Iterable[str] = (),
    group: str = "",
    suites: Iterable[str] = (),
    options: Mapping[str, bool] | None = None,
    coverage_file: str | Path | None = None,
) -> list[str]:
    """
    Return the argv for one run.

    Raises:
        ValueError: If a value contains NUL or a line break, or an option
            name is not a plain identifier
    """
    argv = [str(executable), _flag("log-junit", str(log_file))]

    for suite in suites:
        argv.append(_flag("testsuite", suite))

    pattern = filter_pattern(filters)
    if pattern:
        argv.append(_flag("filter", pattern))

    if group:
        argv.append(_flag("group", group))

    for name, enabled in (options or {}).items():
        if not _OPTION_NAME.match(name):
            raise ValueError(f"Invalid option name: {name!r}")
        # Disabled options are dropped, never negated
        if enabled is True:
            argv.append(f"--{to_kebab_case(name)}")

    if coverage_file:
        argv.append(_flag("coverage-clover", str(coverage_file)))

    return argv


def filter_pattern(filters: Iterable[str]) -> str:
    """Escape each filter and join them into one alternation (a|b|c)."""
    escaped = [re.escape(_checked(f)) for f in filters if f]
    return "|".join(escaped)


def to_kebab_case(name: str) -> str:
    """stopOnFailure -> stop-on-failure"""
    return _CAMEL_BOUNDARY.sub("-", name).lower()


def _flag(name: str, value: str) -> str:
    return f"--{name}={_checked(value)}"


def _checked(value: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Expected a string argument, got {type(value).__name__}")
    if any(char in value for char in _FORBIDDEN):
        raise ValueError(f"Argument contains a forbidden control character: {value!r}")
    return value
