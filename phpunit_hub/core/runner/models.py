"""Data models for test runs."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RunRequest:
    """
    What to run.

    Attributes:
        filters: Test names or Class::method ids, OR'd together
        group: Group to restrict the run to ("" = all)
        suites: Configured suite names to run
        options: Boolean runner flags in camelCase (only True ones are passed)
        coverage: Whether to write a Clover coverage report
    """
    filters: list[str] = field(default_factory=list)
    group: str = ""
    suites: list[str] = field(default_factory=list)
    options: dict[str, bool] = field(default_factory=dict)
    coverage: bool = False

    def __post_init__(self):
        self.filters = _unique(self.filters)
        self.suites = _unique(self.suites)
        self.group = (self.group or "").strip()

    @classmethod
    def from_dict(cls, payload: dict) -> RunRequest:
        """Build a request from a JSON-like payload, validating shapes."""
        filters = payload.get("filters") or []
        suites = payload.get("suites") or []
        options = payload.get("options") or {}
        group = payload.get("group") or ""

        if not isinstance(filters, list) or not all(isinstance(f, str) for f in filters):
            raise ValueError("'filters' must be a list of strings")
        if not isinstance(suites, list) or not all(isinstance(s, str) for s in suites):
            raise ValueError("'suites' must be a list of strings")
        if not isinstance(options, dict) or not all(isinstance(v, bool) for v in options.values()):
            raise ValueError("'options' must map option names to true/false")
        if not isinstance(group, str):
            raise ValueError("'group' must be a string")

        return cls(
            filters=filters,
            group=group,
            suites=suites,
            options=options,
            coverage=bool(payload.get("coverage", False)),
        )

    def to_dict(self) -> dict:
        return {
            "filters": list(self.filters),
            "group": self.group,
            "suites": list(self.suites),
            "options": dict(self.options),
            "coverage": self.coverage,
        }


def _unique(values) -> list[str]:
    result = []
    for value in values or []:
        if value and value not in result:
            result.append(value)
    return result
