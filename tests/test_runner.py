"""Tests for the asynchronous runner process orchestration."""

import asyncio

import pytest

from phpunit_hub.core.parsers import parse_junit
from phpunit_hub.core.runner import ProcessHandle, RunnerError, SpawnError, TestRunner


class TestTestRunner:
    """Tests for TestRunner.run and ProcessHandle."""

    @pytest.mark.asyncio
    async def test_run_streams_output_and_exit_code(self, php_project, temp_dir):
        runner = TestRunner(asyncio.get_running_loop(), php_project)
        log_file = temp_dir / "log.xml"
        stdout, stderr, exits = [], [], []

        handle = runner.run(log_file)
        handle.on_stdout(stdout.append).on_stderr(stderr.append).on_exit(exits.append)
        exit_code = await handle.wait()

        assert exit_code == 1
        assert exits == [1]
        assert "PHPUnit 10.5.0" in "".join(stdout)
        assert '"event":"test.started"' in "".join(stderr)
        assert handle.running is False
        assert handle.returncode == 1
        assert parse_junit(log_file.read_text()).summary.tests == 2

    @pytest.mark.asyncio
    async def test_filters_reach_the_process(self, php_project, temp_dir):
        runner = TestRunner(asyncio.get_running_loop(), php_project)
        log_file = temp_dir / "log.xml"

        handle = runner.run(log_file, filters=["CalcTest::testSub"], run_id="abc")
        exit_code = await handle.wait()

        assert exit_code == 0
        assert handle.run_id == "abc"
        assert "--filter=CalcTest::testSub" in handle.argv
        assert parse_junit(log_file.read_text()).summary.tests == 1

    @pytest.mark.asyncio
    async def test_on_exit_after_completion(self, php_project, temp_dir):
        runner = TestRunner(asyncio.get_running_loop(), php_project)
        handle = runner.run(temp_dir / "log.xml")
        await handle.wait()
        exits = []

        handle.on_exit(exits.append)
        await asyncio.sleep(0)

        assert exits == [1]

    @pytest.mark.asyncio
    async def test_terminate(self, slow_project, temp_dir):
        runner = TestRunner(asyncio.get_running_loop(), slow_project)

        handle = runner.run(temp_dir / "log.xml")
        assert handle.terminate() is True
        exit_code = await asyncio.wait_for(handle.wait(), timeout=10)

        assert handle.stopped is True
        assert exit_code != 0
        assert handle.terminate() is False

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_break_the_run(self, php_project, temp_dir):
        runner = TestRunner(asyncio.get_running_loop(), php_project)

        def explode(chunk):
            raise RuntimeError("boom")

        handle = runner.run(temp_dir / "log.xml").on_stdout(explode)

        assert await handle.wait() == 1

    @pytest.mark.asyncio
    async def test_missing_executable(self, tmp_path, temp_dir):
        runner = TestRunner(asyncio.get_running_loop(), tmp_path)

        with pytest.raises(SpawnError, match="not found"):
            runner.run(temp_dir / "log.xml")

    @pytest.mark.asyncio
    async def test_not_executable(self, php_project, temp_dir):
        (php_project / "vendor" / "bin" / "phpunit").chmod(0o644)
        runner = TestRunner(asyncio.get_running_loop(), php_project)

        with pytest.raises(SpawnError, match="not executable"):
            runner.run(temp_dir / "log.xml")

    @pytest.mark.asyncio
    async def test_unsafe_arguments_rejected_before_spawn(self, php_project, temp_dir):
        runner = TestRunner(asyncio.get_running_loop(), php_project)

        with pytest.raises(ValueError):
            runner.run(temp_dir / "log.xml", group="a\nb")

    @pytest.mark.asyncio
    async def test_explicit_executable(self, php_project, temp_dir):
        executable = php_project / "vendor" / "bin" / "phpunit"
        runner = TestRunner(asyncio.get_running_loop(), temp_dir, executable=executable)

        assert runner.executable == executable
        assert await runner.run(temp_dir / "log.xml").wait() == 1

    @pytest.mark.asyncio
    async def test_output_read_failure_settles_wait(self, php_project, temp_dir, monkeypatch):
        async def broken_pump(self, stream, callbacks):
            raise OSError("read failed")

        monkeypatch.setattr(ProcessHandle, "_pump", broken_pump)
        runner = TestRunner(asyncio.get_running_loop(), php_project)
        exits = []

        handle = runner.run(temp_dir / "log.xml").on_exit(exits.append)
        with pytest.raises(RunnerError, match="read failed"):
            await asyncio.wait_for(handle.wait(), timeout=10)

        assert handle.running is False
        assert exits == []

    @pytest.mark.asyncio
    async def test_cancelled_run_settles_wait_and_kills_process(self, slow_project, temp_dir):
        runner = TestRunner(asyncio.get_running_loop(), slow_project)

        handle = runner.run(temp_dir / "log.xml")
        await asyncio.sleep(0.2)
        handle._task.cancel()

        with pytest.raises(RunnerError, match="cancelled"):
            await asyncio.wait_for(handle.wait(), timeout=10)
        assert handle.running is False
        if handle._process is not None:
            assert await asyncio.wait_for(handle._process.wait(), timeout=10) != 0

    @pytest.mark.asyncio
    async def test_spawn_error_is_a_runner_error(self, tmp_path, temp_dir):
        runner = TestRunner(asyncio.get_running_loop(), tmp_path)

        with pytest.raises(RunnerError):
            runner.run(temp_dir / "log.xml")
