"""Test execution service.

Starts runner processes, forwards their output to the broadcast hub, parses
the JUnit log once the process exits and remembers which tests failed so
they can be rerun. One run at a time.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from ..constants import LOG_FILE_PREFIX
from ..core.parsers import ParseError, ProgressDecoder, RunResult, parse_junit
from ..core.runner import ProcessHandle, RunnerError, RunRequest, SpawnError, TestRunner
from ..hub import BroadcastHub
from .base import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunTicket:
    """Identifies a started run and where its reports go."""
    run_id: str
    log_file: Path
    request: RunRequest
    coverage_file: Path | None = None
    is_rerun: bool = False

    def to_dict(self) -> dict:
        return {
            "runId": self.run_id,
            "status": "started",
            "rerun": self.is_rerun,
            "request": self.request.to_dict(),
        }


@dataclass
class _ActiveRun:
    ticket: RunTicket
    handle: ProcessHandle
    decoder: ProgressDecoder = field(default_factory=ProgressDecoder)
    task: asyncio.Task | None = None
    timer: asyncio.TimerHandle | None = None


class RunService:
    """Run tests through the runner and broadcast their progress."""

    def __init__(
        self,
        runner: TestRunner,
        hub: BroadcastHub,
        temp_dir: str | Path,
        run_timeout: float | None = None,
    ):
        self._runner = runner
        self._hub = hub
        self._temp_dir = Path(temp_dir)
        self._run_timeout = run_timeout
        self._active: _ActiveRun | None = None
        self._coverage_files: dict[str, Path] = {}
        self.failed_tests: list[str] = []
        self.last_filters: list[str] = []
        self.last_result: RunResult | None = None

    @property
    def is_running(self) -> bool:
        return self._active is not None

    @property
    def active_run_id(self) -> str | None:
        return self._active.ticket.run_id if self._active else None

    # =========================================================================
    # Starting and stopping
    # =========================================================================

    def start(self, request: RunRequest) -> ServiceResult[RunTicket]:
        """Start a run for the given request."""
        return self._launch(request, is_rerun=False)

    def start_failed(self, options: dict[str, bool] | None = None) -> ServiceResult[RunTicket]:
        """Rerun the tests that failed in the last (non-rerun) run."""
        if not self.failed_tests:
            return ServiceResult.fail(ErrorCode.NO_FAILED_TESTS, "No failed tests to run.")

        request = RunRequest(filters=list(self.failed_tests), options=dict(options or {}))
        return self._launch(request, is_rerun=True)

    def stop(self) -> ServiceResult[str]:
        """Terminate the active run; returns its id."""
        if self._active is None:
            return ServiceResult.fail(ErrorCode.NO_ACTIVE_RUN, "No test run is in progress.")

        run_id = self._active.ticket.run_id
        self._active.handle.terminate()
        logger.info(f"Stop requested for test run #{run_id}")
        return ServiceResult.ok(run_id)

    async def wait(self) -> RunResult | None:
        """Wait for the active run (if any) to finish and return its results."""
        if self._active is None or self._active.task is None:
            return self.last_result
        return await asyncio.shield(self._active.task)

    def coverage_file(self, run_id: str) -> Path | None:
        return self._coverage_files.get(run_id)

    def cleanup(self) -> None:
        """Delete every Clover report this service still tracks."""
        for run_id in list(self._coverage_files):
            self._discard_coverage(run_id)

    def _discard_coverage(self, run_id: str) -> None:
        path = self._coverage_files.pop(run_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not delete coverage report {path}: {e}")

    def _launch(self, request: RunRequest, is_rerun: bool) -> ServiceResult[RunTicket]:
        if self._active is not None:
            logger.info("Skipping test run: another is already in progress.")
            return ServiceResult.fail(
                ErrorCode.RUN_IN_PROGRESS,
                "A test run is already in progress.",
                details={"runId": self._active.ticket.run_id},
            )

        run_id = uuid.uuid4().hex
        ticket = RunTicket(
            run_id=run_id,
            log_file=self._temp_dir / f"{LOG_FILE_PREFIX}{run_id}.xml",
            request=request,
            coverage_file=self._temp_dir / f"{LOG_FILE_PREFIX}{run_id}-clover.xml" if request.coverage else None,
            is_rerun=is_rerun,
        )

        try:
            handle = self._runner.run(
                ticket.log_file,
                filters=request.filters,
                group=request.group,
                suites=request.suites,
                options=request.options,
                coverage_file=ticket.coverage_file,
                run_id=run_id,
            )
        except SpawnError as e:
            return ServiceResult.fail(ErrorCode.SPAWN_ERROR, str(e))
        except ValueError as e:
            return ServiceResult.fail(ErrorCode.VALIDATION_ERROR, str(e))

        logger.info(f"Starting test run #{run_id} with filters: {', '.join(request.filters)}")
        if not is_rerun:
            self.last_filters = list(request.filters)
        if ticket.coverage_file is not None:
            # Only the latest coverage run keeps its report
            for previous in list(self._coverage_files):
                self._discard_coverage(previous)
            self._coverage_files[run_id] = ticket.coverage_file

        active = _ActiveRun(ticket=ticket, handle=handle)
        self._active = active
        self._hub.broadcast_json({"type": "start", "runId": run_id, "filters": request.filters})

        handle.on_stdout(lambda chunk: self._hub.broadcast_json({"type": "stdout", "runId": run_id, "data": chunk}))
        handle.on_stderr(lambda chunk: self._forward_progress(active, chunk))

        loop = self._runner.loop
        if self._run_timeout:
            active.timer = loop.call_later(self._run_timeout, self._timeout, active)
        active.task = loop.create_task(self._watch(active))

        return ServiceResult.ok(ticket)

    # =========================================================================
    # Run lifecycle
    # =========================================================================

    def _forward_progress(self, active: _ActiveRun, chunk: str | None = None) -> None:
        # None flushes the trailing partial line once the process has exited
        decoded = active.decoder.feed(chunk) if chunk is not None else active.decoder.flush()
        for line, _event in decoded:
            self._hub.broadcast_json({"type": "realtime", "runId": active.ticket.run_id, "data": line})

    def _timeout(self, active: _ActiveRun) -> None:
        logger.warning(f"Test run #{active.ticket.run_id} exceeded {self._run_timeout}s, terminating")
        active.handle.terminate()

    async def _watch(self, active: _ActiveRun) -> RunResult | None:
        try:
            return await self._finish(active)
        finally:
            self._end(active)

    async def _finish(self, active: _ActiveRun) -> RunResult | None:
        ticket = active.ticket
        try:
            exit_code = await active.handle.wait()
        except RunnerError as e:
            ticket.log_file.unlink(missing_ok=True)
            self._hub.broadcast_json({
                "type": "exit",
                "runId": ticket.run_id,
                "exitCode": None,
                "results": None,
                "error": str(e),
            })
            return None

        self._forward_progress(active)
        logger.info(f"Test run #{ticket.run_id} finished with code {exit_code}.")

        results, error = self._read_results(ticket.log_file)
        if results is not None:
            self.last_result = results
            if not ticket.is_rerun:
                self.failed_tests = results.failed_test_ids()

        if active.handle.stopped:
            self._hub.broadcast_json({"type": "stopped", "runId": ticket.run_id, "exitCode": exit_code})
        else:
            self._hub.broadcast_json({
                "type": "exit",
                "runId": ticket.run_id,
                "exitCode": exit_code,
                "results": results.to_dict() if results else None,
                "error": error,
            })
        return results

    def _end(self, active: _ActiveRun) -> None:
        if active.timer is not None:
            active.timer.cancel()
        if self._active is active:
            self._active = None

    def _read_results(self, log_file: Path) -> tuple[RunResult | None, str | None]:
        if not log_file.exists():
            logger.warning(f"No JUnit log was written to {log_file}")
            return None, None

        try:
            # Bytes, so the XML declaration decides the encoding
            return parse_junit(log_file.read_bytes()), None
        except ParseError as e:
            logger.error(f"Error parsing JUnit XML: {e}")
            return None, str(e)
        except OSError as e:
            logger.error(f"Could not read JUnit log {log_file}: {e}")
            return None, str(e)
        finally:
            log_file.unlink(missing_ok=True)
