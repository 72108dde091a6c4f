from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from wsl_exec.gateway import Gateway, ToolResponse
from wsl_exec.runtime.tools.registry import ToolDefinition


class ExecuteCommandArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    command: str = Field(description="Command to execute")
    working_dir: Optional[str] = Field(default=None, description="Working directory")
    # Range checks happen in the sanitizer so they surface as tool errors.
    timeout: Optional[float] = Field(default=None, description="Timeout (ms)")


class ConfirmCommandArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    confirmation_id: str = Field(description="Confirmation ID")
    confirm: bool = Field(description="Proceed with execution")


def build_command_tools(gateway: Gateway) -> List[ToolDefinition]:
    async def _execute(args: ExecuteCommandArgs) -> ToolResponse:
        return await gateway.execute(args.command, args.working_dir, args.timeout)

    async def _confirm(args: ConfirmCommandArgs) -> ToolResponse:
        return await gateway.confirm(args.confirmation_id, args.confirm)

    return [
        ToolDefinition(
            name="execute_command",
            description="Execute a command in WSL (use read-only tools when possible)",
            arguments=ExecuteCommandArgs,
            executor=_execute,
            read_only=False,
            destructive=True,
        ),
        ToolDefinition(
            name="confirm_command",
            description="Confirm dangerous command execution",
            arguments=ConfirmCommandArgs,
            executor=_confirm,
            read_only=False,
            destructive=True,
        ),
    ]
