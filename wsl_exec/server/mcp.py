"""
JSON-RPC dispatcher for the MCP methods this server supports:
- initialize
- notifications/initialized
- ping
- tools/list
- tools/call

Transports (stdio, HTTP) only move frames; everything protocol-level is here.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from wsl_exec import __version__, config
from wsl_exec.gateway import Gateway
from wsl_exec.protocol import PROTOCOL_VERSION, ErrorCode, rpc_error, rpc_result, text_content
from wsl_exec.runtime.confirmations import InMemoryConfirmationStore
from wsl_exec.runtime.runner import ProcessRunner
from wsl_exec.runtime.tools.commands import build_command_tools
from wsl_exec.runtime.tools.registry import ToolRegistry
from wsl_exec.runtime.tools.system import build_system_tools

logger = logging.getLogger("wsl_exec.server")

SERVER_NAME = "mcp-wsl-exec"
SERVER_DESCRIPTION = "A secure MCP server for executing commands in WSL with built-in safety features"


class MCPServer:
    def __init__(self, gateway: Gateway, *, name: str = SERVER_NAME, version: str = __version__):
        self.gateway = gateway
        self.name = name
        self.version = version
        self.tools = ToolRegistry(build_system_tools(gateway) + build_command_tools(gateway))

    def server_info(self) -> Dict[str, Any]:
        return {"name": self.name, "version": self.version, "description": SERVER_DESCRIPTION}

    async def handle(self, payload: Any) -> Optional[Dict[str, Any]]:
        """
        Handle one JSON-RPC message. Returns None for notifications.
        """
        if not isinstance(payload, dict) or payload.get("jsonrpc") != "2.0" or not isinstance(payload.get("method"), str):
            req_id = payload.get("id") if isinstance(payload, dict) else None
            return rpc_error(req_id, ErrorCode.INVALID_REQUEST, "Invalid Request")

        method = payload["method"]
        req_id = payload.get("id")
        is_notification = "id" not in payload
        params = payload.get("params") or {}
        if not isinstance(params, dict):
            return rpc_error(req_id, ErrorCode.INVALID_PARAMS, "Invalid params")

        if is_notification:
            logger.debug("notification: %s", method)
            return None

        if method == "initialize":
            return rpc_result(
                req_id,
                {
                    "protocolVersion": PROTOCOL_VERSION,
                    "serverInfo": self.server_info(),
                    "capabilities": {"tools": {"listChanged": True}},
                },
            )
        if method == "ping":
            return rpc_result(req_id, {})
        if method == "tools/list":
            return rpc_result(req_id, {"tools": self.tools.to_mcp_tools()})
        if method == "tools/call":
            return await self._tools_call(req_id, params)

        return rpc_error(req_id, ErrorCode.METHOD_NOT_FOUND, f"Unknown method: {method}")

    async def _tools_call(self, req_id: Any, params: Dict[str, Any]) -> Dict[str, Any]:
        name = str(params.get("name") or "")
        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            return rpc_error(req_id, ErrorCode.INVALID_PARAMS, "Invalid params: arguments must be an object")
        try:
            tool = self.tools.get(name)
        except KeyError:
            return rpc_error(req_id, ErrorCode.INVALID_PARAMS, f"Unknown tool: {name}")

        try:
            response = await tool.call(arguments)
        except ValidationError as e:
            return rpc_error(
                req_id,
                ErrorCode.INVALID_PARAMS,
                f"Invalid arguments for {name}",
                {"errors": [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]},
            )
        except Exception as e:
            logger.exception("tool %s crashed", name)
            return rpc_error(req_id, ErrorCode.INTERNAL_ERROR, str(e) or e.__class__.__name__)
        return rpc_result(req_id, text_content(response.text, is_error=response.is_error))


def create_server() -> MCPServer:
    """Wire a server from wsl_exec.json / environment settings."""
    runner = ProcessRunner(executable=config.wsl_executable(), shell=config.wsl_shell())
    confirmations = InMemoryConfirmationStore(ttl_s=config.confirmation_ttl_s())
    gateway = Gateway(
        runner=runner,
        confirmations=confirmations,
        default_timeout_ms=config.default_timeout_ms(),
    )
    return MCPServer(gateway)
