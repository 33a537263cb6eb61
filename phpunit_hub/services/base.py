"""
Result types shared by every service.

Services report expected failures (a run already in progress, nothing to
rerun, an unreadable report) as a failed ServiceResult carrying an
ErrorCode, and leave exceptions for programming errors. Handlers turn a
failed result into an "Error: ..." text block.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Why a service call failed; the value is what gets serialized."""

    # Tool arguments
    VALIDATION_ERROR = "validation_error"
    MISSING_INPUT = "missing_input"

    # Reports on disk
    FILE_NOT_FOUND = "file_not_found"
    PARSE_ERROR = "parse_error"

    # Run lifecycle
    SPAWN_ERROR = "spawn_error"
    RUN_IN_PROGRESS = "run_in_progress"
    NO_ACTIVE_RUN = "no_active_run"
    NO_FAILED_TESTS = "no_failed_tests"
    UNKNOWN_RUN = "unknown_run"


@dataclass(frozen=True)
class ServiceError:
    """
    A failed call: machine-readable code plus a message for the caller.

    Attributes:
        code: What went wrong
        message: Shown to the MCP client as "Error: <message>"
        details: Extra context, e.g. the id of the run that blocked a new one
    """
    code: ErrorCode
    message: str
    details: dict | None = None

    def to_dict(self) -> dict:
        data = {"code": self.code.value, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Either data or an error, never both.

        result = runs.start(request)
        if not result.success:
            return error_response(result)
        ticket = result.data
    """
    success: bool
    data: T | None = None
    error: ServiceError | None = None

    @classmethod
    def ok(cls, data: T) -> ServiceResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, code: ErrorCode, message: str, details: dict | None = None) -> ServiceResult[T]:
        return cls(success=False, error=ServiceError(code, message, details))

    def map(self, func) -> ServiceResult:
        """Transform the data of a success; a failure is returned unchanged."""
        if not self.success:
            return self
        return ServiceResult.ok(func(self.data))
