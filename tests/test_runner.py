import asyncio
import os
import time

import pytest

from wsl_exec.errors import CommandTimeoutError, ProcessSpawnError
from wsl_exec.runtime.runner import ProcessRunner


def test_command_line_gets_cd_prefix():
    assert ProcessRunner.build_command_line("ls -la", "/home/user") == 'cd "/home/user" && ls -la'
    assert ProcessRunner.build_command_line("ls -la") == "ls -la"


def test_argv_goes_through_wsl():
    runner = ProcessRunner(executable="wsl.exe", shell="bash")
    assert runner.argv("ls") == ["wsl.exe", "--exec", "bash", "-c", "ls"]


def test_argv_without_wsl_runs_shell_directly():
    runner = ProcessRunner(executable="", shell="bash")
    assert runner.argv("ls") == ["bash", "-c", "ls"]


def test_run_captures_stdout_and_exit_code(bash_runner):
    result = asyncio.run(bash_runner.run("echo hello"))
    assert result.stdout == "hello\n"
    assert result.stderr == ""
    assert result.exit_code == 0
    assert result.command == "echo hello"
    assert result.working_dir is None


def test_run_captures_stderr_and_nonzero_exit(bash_runner):
    result = asyncio.run(bash_runner.run("echo oops 1>&2; exit 3"))
    assert result.stdout == ""
    assert result.stderr == "oops\n"
    assert result.exit_code == 3


def test_run_in_working_dir(bash_runner, tmp_path):
    result = asyncio.run(bash_runner.run("pwd", str(tmp_path)))
    assert result.stdout.strip() == str(tmp_path)
    assert result.working_dir == str(tmp_path)


def test_large_output_is_fully_collected(bash_runner):
    result = asyncio.run(bash_runner.run("head -c 200000 /dev/zero | tr '\\0' 'a'"))
    assert len(result.stdout) == 200000


def test_signal_termination_has_no_exit_code(bash_runner):
    result = asyncio.run(bash_runner.run("kill -9 $$"))
    assert result.exit_code is None


def test_timeout_kills_and_raises(bash_runner):
    start = time.monotonic()
    with pytest.raises(CommandTimeoutError) as exc:
        asyncio.run(bash_runner.run("sleep 5", timeout_ms=50))
    assert time.monotonic() - start < 4
    assert exc.value.timeout == 50
    assert exc.value.details == {"timeout": 50}
    assert str(exc.value) == "Command timed out after 50ms"


def test_timeout_kills_forked_children(bash_runner):
    # bash forks here instead of exec-ing the sleep, so killing bash alone is not enough.
    for command in ("sleep 30\necho done", "(sleep 30)"):
        start = time.monotonic()
        with pytest.raises(CommandTimeoutError):
            asyncio.run(bash_runner.run(command, timeout_ms=50))
        assert time.monotonic() - start < 5


def test_timeout_kills_background_grandchild(bash_runner, tmp_path):
    pidfile = tmp_path / "child.pid"
    command = f"sleep 30 &\necho $! > {pidfile}\nwait"
    with pytest.raises(CommandTimeoutError):
        asyncio.run(bash_runner.run(command, timeout_ms=200))
    pid = int(pidfile.read_text().strip())
    deadline = time.monotonic() + 3
    while time.monotonic() < deadline:
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return
        if _is_zombie(pid):
            return
        time.sleep(0.05)
    pytest.fail(f"background sleep {pid} survived the timeout")


def _is_zombie(pid):
    try:
        with open(f"/proc/{pid}/stat", encoding="utf-8") as f:
            return f.read().rsplit(")", 1)[1].split()[0] == "Z"
    except OSError:
        return False


def test_fast_command_beats_timeout(bash_runner):
    result = asyncio.run(bash_runner.run("echo quick", timeout_ms=5000))
    assert result.stdout == "quick\n"


def test_missing_executable_raises_spawn_error():
    runner = ProcessRunner(executable="/nonexistent/wsl-exec-test-binary", shell="bash")
    with pytest.raises(ProcessSpawnError) as exc:
        asyncio.run(runner.run("ls"))
    assert isinstance(exc.value.__cause__, OSError)
    assert isinstance(exc.value.os_error, FileNotFoundError)
