#!/usr/bin/env python3
"""
Start the WSL exec MCP server.

  python -m wsl_exec                      # stdio (default, for MCP clients)
  python -m wsl_exec --transport http     # FastAPI on /mcp
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from wsl_exec import __version__, config


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="mcp-wsl-exec")
    parser.add_argument("--transport", choices=["stdio", "http"], default="stdio")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    # stdout carries protocol frames in stdio mode; logs always go to stderr.
    logging.basicConfig(
        level=(args.log_level or config.log_level()).upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.transport == "http":
        import uvicorn

        from wsl_exec.server.http import create_app

        host = args.host if args.host is not None else config.server_host()
        port = args.port if args.port is not None else config.server_port()
        uvicorn.run(create_app(), host=host, port=port)
        return 0

    from wsl_exec.server.mcp import create_server
    from wsl_exec.server.stdio import serve_stdio

    try:
        asyncio.run(serve_stdio(create_server()))
    except KeyboardInterrupt:
        pass
    return 0


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
