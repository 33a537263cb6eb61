"""Spawn the external runner asynchronously and expose a handle on the process."""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import uuid
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

from ...constants import READ_CHUNK_SIZE
from ..project import runner_executable
from .command import build_command

logger = logging.getLogger(__name__)

OutputCallback = Callable[[str], None]
ExitCallback = Callable[[int | None], None]


class RunnerError(RuntimeError):
    """The runner process could not be driven to completion."""


class SpawnError(RunnerError):
    """The runner executable could not be started."""


class ProcessHandle:
    """
    A running (or about to run) runner process.

    Callbacks registered with on_stdout/on_stderr receive decoded output
    chunks as they arrive; on_exit callbacks receive the exit code once,
    after all output was dispatched (never, if the run failed; wait() raises
    SpawnError or RunnerError then). Callbacks run on the loop and must not
    block. A callback registered after exit is scheduled right away.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, argv: list[str], cwd: Path, run_id: str):
        self.run_id = run_id
        self.argv = list(argv)
        self.cwd = cwd
        self.stopped = False
        self._loop = loop
        self._process: asyncio.subprocess.Process | None = None
        self._stdout_callbacks: list[OutputCallback] = []
        self._stderr_callbacks: list[OutputCallback] = []
        self._exit_callbacks: list[ExitCallback] = []
        self._done: asyncio.Future = loop.create_future()
        self._task: asyncio.Task | None = None

    # =========================================================================
    # Public API
    # =========================================================================

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process else None

    @property
    def returncode(self) -> int | None:
        return self._process.returncode if self._process else None

    @property
    def running(self) -> bool:
        return not self._done.done()

    def on_stdout(self, callback: OutputCallback) -> ProcessHandle:
        self._stdout_callbacks.append(callback)
        return self

    def on_stderr(self, callback: OutputCallback) -> ProcessHandle:
        self._stderr_callbacks.append(callback)
        return self

    def on_exit(self, callback: ExitCallback) -> ProcessHandle:
        if self._done.done() and self._done.exception() is None:
            self._loop.call_soon(callback, self._done.result())
        else:
            self._exit_callbacks.append(callback)
        return self

    async def wait(self) -> int | None:
        """
        Wait for the process to finish and return its exit code.

        Raises:
            SpawnError: If the process could not be started
            RunnerError: If reading its output failed or the run was cancelled
        """
        return await asyncio.shield(self._done)

    def terminate(self) -> bool:
        """
        Stop the process (or prevent it from starting).

        Returns:
            True if a stop was requested, False if the run had already ended
        """
        if self._done.done():
            return False

        self.stopped = True
        if self._process is not None and self._process.returncode is None:
            try:
                self._process.terminate()
            except ProcessLookupError:
                pass
        return True

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        self._task = self._loop.create_task(self._run())

    async def _run(self) -> None:
        try:
            await self._execute()
        except Exception as e:
            logger.exception(f"Run {self.run_id}: runner failed")
            self._kill()
            self._fail(RunnerError(f"Run {self.run_id} failed: {e}"))
        finally:
            # Only cancellation gets here with the future unsettled
            if not self._done.done():
                self._kill()
                self._fail(RunnerError(f"Run {self.run_id} was cancelled"))

    async def _execute(self) -> None:
        try:
            self._process = await asyncio.create_subprocess_exec(
                *self.argv,
                cwd=str(self.cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                stdin=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.error(f"Run {self.run_id}: could not start {self.argv[0]}: {e}")
            self._fail(SpawnError(f"Could not start {self.argv[0]}: {e}"))
            return

        logger.debug(f"Run {self.run_id}: started pid {self._process.pid}")

        # A stop requested before the process existed is honoured now
        if self.stopped:
            try:
                self._process.terminate()
            except ProcessLookupError:
                pass

        await asyncio.gather(
            self._pump(self._process.stdout, self._stdout_callbacks),
            self._pump(self._process.stderr, self._stderr_callbacks),
        )
        exit_code = await self._process.wait()

        self._done.set_result(exit_code)
        for callback in self._exit_callbacks:
            self._dispatch(callback, exit_code)

    def _fail(self, error: RunnerError) -> None:
        if self._done.done():
            return
        self._done.set_exception(error)
        # Mark retrieved so an unawaited handle does not log a warning
        self._done.exception()

    def _kill(self) -> None:
        if self._process is not None and self._process.returncode is None:
            try:
                self._process.kill()
            except ProcessLookupError:
                pass

    async def _pump(self, stream: asyncio.StreamReader | None, callbacks: list[OutputCallback]) -> None:
        if stream is None:
            return

        # Multi-byte characters may straddle chunk boundaries
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            chunk = await stream.read(READ_CHUNK_SIZE)
            text = decoder.decode(chunk, final=not chunk)
            if text:
                for callback in callbacks:
                    self._dispatch(callback, text)
            if not chunk:
                break

    def _dispatch(self, callback: Callable, value) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception(f"Run {self.run_id}: callback {callback!r} failed")


class TestRunner:
    """
    Orchestrate runner processes on an explicit event loop.

    run() returns immediately; completion is observed through the handle.
    No timeout is enforced here - callers schedule handle.terminate()
    themselves when they need one.
    """

    __test__ = False

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        project_root: str | Path,
        executable: str | Path | None = None,
    ):
        self.loop = loop
        self.project_root = Path(project_root)
        self._executable = Path(executable) if executable else None

    @property
    def executable(self) -> Path:
        return self._executable or runner_executable(self.project_root)

    def run(
        self,
        log_file_path: str | Path,
        filters: Iterable[str] = (),
        group: str = "",
        suites: Iterable[str] = (),
        options: Mapping[str, bool] | None = None,
        coverage_file: str | Path | None = None,
        run_id: str | None = None,
    ) -> ProcessHandle:
        """
        Start the runner writing its JUnit log to log_file_path.

        Raises:
            SpawnError: If the executable is missing or not executable
            ValueError: If a filter, group, suite or option is unsafe
        """
        executable = self.executable
        argv = build_command(
            executable,
            log_file_path,
            filters=filters,
            group=group,
            suites=suites,
            options=options,
            coverage_file=coverage_file,
        )
        self._check_executable(executable)

        handle = ProcessHandle(self.loop, argv, cwd=self.project_root, run_id=run_id or uuid.uuid4().hex)
        logger.info(f"Run {handle.run_id}: {' '.join(argv)}")
        handle.start()
        return handle

    @staticmethod
    def _check_executable(executable: Path) -> None:
        if not executable.is_file():
            raise SpawnError(f"Test runner not found: {executable}") from FileNotFoundError(str(executable))
        if not os.access(executable, os.X_OK):
            raise SpawnError(f"Test runner is not executable: {executable}") from PermissionError(str(executable))
