from __future__ import annotations

import asyncio
import logging
import os
import signal
from typing import List, Optional

from wsl_exec.errors import CommandTimeoutError, ProcessSpawnError
from wsl_exec.runtime.models import ExecutionResult

logger = logging.getLogger("wsl_exec.runner")

_CHUNK = 4096
# How long to wait for the process group to go away after SIGKILL.
_KILL_GRACE_S = 2.0


async def _drain(stream: Optional[asyncio.StreamReader], chunks: List[bytes]) -> None:
    if stream is None:
        return
    while True:
        data = await stream.read(_CHUNK)
        if not data:
            return
        chunks.append(data)


def _decode(chunks: List[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


class ProcessRunner:
    """
    Runs one already-sanitized command in the WSL shell.

    No validation happens here; callers hand in commands that went through
    wsl_exec.policy.sanitizer (or fixed templates built from quoted args).
    """

    def __init__(self, *, executable: str = "wsl.exe", shell: str = "bash"):
        self.executable = executable
        self.shell = shell

    @staticmethod
    def build_command_line(command: str, working_dir: Optional[str] = None) -> str:
        cd = f'cd "{working_dir}" && ' if working_dir else ""
        return f"{cd}{command}"

    def argv(self, command_line: str) -> List[str]:
        if not self.executable:
            return [self.shell, "-c", command_line]
        return [self.executable, "--exec", self.shell, "-c", command_line]

    async def _kill(self, proc: asyncio.subprocess.Process) -> None:
        """Kill the whole process group, not just the shell, so forked children die too."""
        try:
            if hasattr(os, "killpg"):
                os.killpg(proc.pid, signal.SIGKILL)
            else:
                proc.kill()
        except (ProcessLookupError, PermissionError):
            pass
        try:
            await asyncio.wait_for(proc.wait(), timeout=_KILL_GRACE_S)
        except asyncio.TimeoutError:
            logger.warning("pid=%s still running %.1fs after kill", proc.pid, _KILL_GRACE_S)

    async def run(
        self,
        command: str,
        working_dir: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ) -> ExecutionResult:
        command_line = self.build_command_line(command, working_dir)
        argv = self.argv(command_line)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            logger.error("spawn failed for %s: %s", argv[0], e)
            raise ProcessSpawnError(e) from e

        logger.debug("spawned pid=%s: %s", proc.pid, command_line)
        out: List[bytes] = []
        err: List[bytes] = []
        completion = asyncio.gather(_drain(proc.stdout, out), _drain(proc.stderr, err), proc.wait())
        try:
            if timeout_ms:
                await asyncio.wait_for(completion, timeout=timeout_ms / 1000)
            else:
                await completion
        except asyncio.TimeoutError:
            await self._kill(proc)
            logger.warning("killed pid=%s after %sms", proc.pid, timeout_ms)
            raise CommandTimeoutError(timeout_ms) from None
        except asyncio.CancelledError:
            await self._kill(proc)
            raise

        code = proc.returncode
        if code is not None and code < 0:
            # Terminated by a signal: there is no exit status to report.
            logger.info("pid=%s terminated by signal %s", proc.pid, -code)
            code = None

        return ExecutionResult(
            stdout=_decode(out),
            stderr=_decode(err),
            exit_code=code,
            command=command,
            working_dir=working_dir,
        )
