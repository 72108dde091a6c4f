"""
Gateway: validate, classify, then either run or park for confirmation.

Per request the states are:

    received -> validated -> running -> completed | failed
                          -> suspended  (dangerous; caller gets a token)

and for a later confirmation call:

    suspended -> rejected              (confirm=False, nothing spawned)
              -> confirmed -> running -> completed | failed

Suspension is not a wait. The execute call returns immediately and the
pending command lives in the ConfirmationStore until a separate confirm
call consumes it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from wsl_exec.errors import WslExecutionError
from wsl_exec.policy.classifier import match_dangerous
from wsl_exec.policy.sanitizer import sanitize_command, validate_timeout, validate_working_dir
from wsl_exec.runtime.confirmations import ConfirmationStore
from wsl_exec.runtime.models import CommandRequest, ExecutionResult, PreparedCommand
from wsl_exec.runtime.runner import ProcessRunner

logger = logging.getLogger("wsl_exec.gateway")

CANCELLED_TEXT = "Command execution cancelled."


@dataclass(frozen=True)
class ToolResponse:
    text: str
    is_error: bool = False


def format_output(result: ExecutionResult) -> str:
    stdout = (result.stdout or "").strip()
    stderr = (result.stderr or "").strip()
    lines = [
        f"Command: {result.command}",
        f"Working Directory: {result.working_dir}" if result.working_dir else None,
        f"Exit Code: {'null' if result.exit_code is None else result.exit_code}",
        f"Output:\n{stdout}" if stdout else "No output",
        f"Errors:\n{stderr}" if stderr else "No errors",
        f"Error: {result.error}" if result.error else None,
    ]
    return "\n".join(line for line in lines if line)


def confirmation_prompt(command: str, confirmation_id: str) -> str:
    return f'Command "{command}" requires confirmation. Use confirm_command with ID: {confirmation_id}'


def _error_message(e: BaseException) -> str:
    if isinstance(e, WslExecutionError):
        return e.message
    return str(e) or e.__class__.__name__


class Gateway:
    def __init__(
        self,
        *,
        runner: ProcessRunner,
        confirmations: ConfirmationStore,
        default_timeout_ms: Optional[int] = None,
        classify: Callable[[str], Optional[str]] = match_dangerous,
    ):
        self.runner = runner
        self.confirmations = confirmations
        self.default_timeout_ms = default_timeout_ms
        self._classify = classify

    def prepare(self, request: CommandRequest) -> PreparedCommand:
        """Received -> validated. Raises CommandValidationError."""
        command = sanitize_command(request.raw_command)
        working_dir = validate_working_dir(request.working_dir)
        timeout_ms = validate_timeout(request.timeout_ms)
        if timeout_ms is None:
            timeout_ms = self.default_timeout_ms
        return PreparedCommand(command=command, working_dir=working_dir, timeout_ms=timeout_ms)

    async def submit(self, request: CommandRequest) -> ExecutionResult:
        prepared = self.prepare(request)
        matched = self._classify(prepared.command)
        if matched is not None:
            token = self.confirmations.register(prepared.command, prepared.working_dir, prepared.timeout_ms)
            logger.info("suspended %s (matched %r) pending=%s", token, matched, self.confirmations.pending_count())
            return ExecutionResult(
                stdout="",
                stderr=confirmation_prompt(prepared.command, token),
                exit_code=None,
                command=prepared.command,
                working_dir=prepared.working_dir,
                requires_confirmation=True,
                confirmation_id=token,
            )
        logger.info("running: %s", prepared.command)
        return await self.runner.run(prepared.command, prepared.working_dir, prepared.timeout_ms)

    async def resolve(self, confirmation_id: str, confirm: bool) -> Optional[ExecutionResult]:
        """
        Consume a token. Returns None when the command was rejected.
        Raises InvalidConfirmationError for unknown or reused tokens.
        """
        pending = self.confirmations.consume(confirmation_id)
        if not confirm:
            logger.info("rejected %s", pending.token)
            return None
        logger.info("confirmed %s: %s", pending.token, pending.command)
        return await self.runner.run(pending.command, pending.working_dir, pending.timeout_ms)

    async def execute(
        self,
        command: str,
        working_dir: Optional[str] = None,
        timeout_ms: Any = None,
    ) -> ToolResponse:
        try:
            result = await self.submit(CommandRequest(command, working_dir, timeout_ms))
        except Exception as e:
            logger.warning("execute failed: %s", _error_message(e))
            return ToolResponse(f"Error executing command: {_error_message(e)}", is_error=True)
        if result.requires_confirmation:
            return ToolResponse(result.stderr)
        return ToolResponse(format_output(result))

    async def confirm(self, confirmation_id: str, confirm: bool) -> ToolResponse:
        try:
            result = await self.resolve(confirmation_id, confirm)
        except Exception as e:
            logger.warning("confirm failed: %s", _error_message(e))
            return ToolResponse(f"Error confirming command: {_error_message(e)}", is_error=True)
        if result is None:
            return ToolResponse(CANCELLED_TEXT)
        return ToolResponse(format_output(result))

    async def run_readonly(self, command: str) -> ToolResponse:
        """Run a fixed, non-dangerous template. Skips sanitization and confirmation."""
        try:
            result = await self.runner.run(command, None, self.default_timeout_ms)
        except Exception as e:
            logger.warning("read-only command failed: %s", _error_message(e))
            return ToolResponse(f"Error: {_error_message(e)}", is_error=True)
        return ToolResponse(format_output(result))
