from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from wsl_exec.protocol import ErrorCode, rpc_error
from wsl_exec.server.mcp import MCPServer

logger = logging.getLogger("wsl_exec.stdio")


async def _stdin_lines(queue: "asyncio.Queue[Optional[str]]", stream: TextIO) -> None:
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, stream.readline)
        if not line:
            await queue.put(None)
            return
        await queue.put(line)


def _write(out: TextIO, message: Dict[str, Any]) -> None:
    out.write(json.dumps(message, ensure_ascii=False) + "\n")
    out.flush()


async def _handle_line(server: MCPServer, line: str, out: TextIO) -> None:
    try:
        payload = json.loads(line)
    except json.JSONDecodeError:
        _write(out, rpc_error(None, ErrorCode.PARSE_ERROR, "Parse error"))
        return
    response = await server.handle(payload)
    if response is not None:
        _write(out, response)


async def serve_stdio(server: MCPServer, *, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> None:
    """
    Newline-delimited JSON-RPC over stdio.

    Each request is handled in its own task, so a long-running command does
    not block a confirm call arriving behind it.
    """
    queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
    reader = asyncio.create_task(_stdin_lines(queue, stdin))
    inflight: set[asyncio.Task] = set()
    logger.info("WSL MCP server running on stdio")
    try:
        while True:
            line = await queue.get()
            if line is None:
                break
            if not line.strip():
                continue
            task = asyncio.create_task(_handle_line(server, line, stdout))
            inflight.add(task)
            task.add_done_callback(inflight.discard)
        if inflight:
            await asyncio.gather(*inflight)
    finally:
        reader.cancel()
