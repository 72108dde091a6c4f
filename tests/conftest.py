from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from wsl_exec import config
from wsl_exec.gateway import Gateway
from wsl_exec.runtime.confirmations import InMemoryConfirmationStore
from wsl_exec.runtime.models import ExecutionResult
from wsl_exec.runtime.runner import ProcessRunner
from wsl_exec.server.mcp import MCPServer


class RecordingRunner(ProcessRunner):
    """Records what would have been spawned instead of spawning it."""

    def __init__(self, stdout: str = "ok\n", exit_code: Optional[int] = 0):
        super().__init__(executable="wsl.exe", shell="bash")
        self.stdout = stdout
        self.exit_code = exit_code
        self.calls: List[Tuple[str, Optional[str], Optional[int]]] = []
        self.command_lines: List[str] = []

    async def run(self, command, working_dir=None, timeout_ms=None):
        self.calls.append((command, working_dir, timeout_ms))
        self.command_lines.append(self.build_command_line(command, working_dir))
        return ExecutionResult(
            stdout=self.stdout,
            stderr="",
            exit_code=self.exit_code,
            command=command,
            working_dir=working_dir,
        )


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def gateway(runner) -> Gateway:
    return Gateway(runner=runner, confirmations=InMemoryConfirmationStore())


@pytest.fixture
def server(gateway) -> MCPServer:
    return MCPServer(gateway, version="test")


@pytest.fixture
def bash_runner() -> ProcessRunner:
    # No WSL hop: runs the local bash.
    return ProcessRunner(executable="", shell="bash")


@pytest.fixture(autouse=True)
def _fresh_config():
    config.load_config.cache_clear()
    yield
    config.load_config.cache_clear()
