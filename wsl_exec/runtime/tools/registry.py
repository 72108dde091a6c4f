from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Type

from pydantic import BaseModel

from wsl_exec.gateway import ToolResponse

ToolExecutor = Callable[[Any], Awaitable[ToolResponse]]


@dataclass(frozen=True)
class ToolDefinition:
    """
    name: MCP tool name
    arguments: pydantic model used both for the input schema and for validation
    """

    name: str
    description: str
    arguments: Type[BaseModel]
    executor: ToolExecutor
    read_only: bool = True
    destructive: bool = False

    def to_mcp_tool(self) -> Dict[str, Any]:
        schema = self.arguments.model_json_schema()
        schema.pop("title", None)
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": schema,
            "annotations": {
                "readOnlyHint": self.read_only,
                "destructiveHint": self.destructive,
            },
        }

    async def call(self, arguments: Dict[str, Any]) -> ToolResponse:
        """Raises pydantic.ValidationError on bad arguments."""
        args = self.arguments.model_validate(arguments or {})
        return await self.executor(args)


class ToolRegistry:
    def __init__(self, tools: List[ToolDefinition]):
        self._tools = {t.name: t for t in tools}

    def to_mcp_tools(self) -> List[Dict[str, Any]]:
        return [t.to_mcp_tool() for t in self._tools.values()]

    def get(self, name: str) -> ToolDefinition:
        if name not in self._tools:
            raise KeyError(f"Tool not found: {name}")
        return self._tools[name]
