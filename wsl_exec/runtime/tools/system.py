"""Read-only WSL inspection tools. Each one is a fixed command template."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from wsl_exec.gateway import Gateway, ToolResponse
from wsl_exec.policy.sanitizer import quote_argument
from wsl_exec.runtime.tools.registry import ToolDefinition


class _Args(BaseModel):
    model_config = ConfigDict(extra="ignore")


class NoArgs(_Args):
    pass


class FilterArgs(_Args):
    filter: Optional[str] = Field(default=None, description="Filter pattern (grep)")


class PathArgs(_Args):
    path: Optional[str] = Field(default=None, description="Path to check")


class DirectoryArgs(_Args):
    path: Optional[str] = Field(default=None, description="Directory path")
    details: Optional[bool] = Field(default=None, description="Show detailed info")


def system_info_command() -> str:
    return "uname -a && (lsb_release -a 2>/dev/null || cat /etc/os-release)"


def environment_command(filter: Optional[str] = None) -> str:
    if filter:
        return f"env | grep -i -- {quote_argument(filter)}"
    return "env"


def processes_command(filter: Optional[str] = None) -> str:
    if filter:
        return f"ps aux | grep -i -- {quote_argument(filter)} | grep -v grep"
    return "ps aux"


def disk_usage_command(path: Optional[str] = None) -> str:
    return f"df -h -- {quote_argument(path)}" if path else "df -h"


def directory_command(path: Optional[str] = None, details: Optional[bool] = None) -> str:
    target = quote_argument(path) if path else "."
    return f"ls -lah -- {target}" if details else f"ls -A -- {target}"


def build_system_tools(gateway: Gateway) -> List[ToolDefinition]:
    async def _system_info(args: NoArgs) -> ToolResponse:
        return await gateway.run_readonly(system_info_command())

    async def _environment(args: FilterArgs) -> ToolResponse:
        return await gateway.run_readonly(environment_command(args.filter))

    async def _processes(args: FilterArgs) -> ToolResponse:
        return await gateway.run_readonly(processes_command(args.filter))

    async def _disk_usage(args: PathArgs) -> ToolResponse:
        return await gateway.run_readonly(disk_usage_command(args.path))

    async def _directory(args: DirectoryArgs) -> ToolResponse:
        return await gateway.run_readonly(directory_command(args.path, args.details))

    return [
        ToolDefinition(
            name="get_system_info",
            description="Get WSL system information",
            arguments=NoArgs,
            executor=_system_info,
        ),
        ToolDefinition(
            name="get_environment",
            description="Get WSL environment variables",
            arguments=FilterArgs,
            executor=_environment,
        ),
        ToolDefinition(
            name="list_processes",
            description="List running processes in WSL",
            arguments=FilterArgs,
            executor=_processes,
        ),
        ToolDefinition(
            name="get_disk_usage",
            description="Get disk space information",
            arguments=PathArgs,
            executor=_disk_usage,
        ),
        ToolDefinition(
            name="get_directory_info",
            description="Get directory contents and info",
            arguments=DirectoryArgs,
            executor=_directory,
        ),
    ]
