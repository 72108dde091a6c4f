from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from wsl_exec.protocol import ErrorCode, rpc_error
from wsl_exec.server.mcp import MCPServer, create_server


def create_app(server: Optional[MCPServer] = None) -> FastAPI:
    mcp = server or create_server()
    app = FastAPI(title="WSL Exec MCP Server", version=mcp.version)

    @app.get("/health")
    async def health():
        return {"ok": True, "version": mcp.version, "pendingConfirmations": mcp.gateway.confirmations.pending_count()}

    @app.post("/mcp")
    async def rpc(request: Request):
        try:
            payload = await request.json()
        except Exception:
            return JSONResponse(rpc_error(None, ErrorCode.PARSE_ERROR, "Parse error"), status_code=200)
        response = await mcp.handle(payload)
        if response is None:
            return Response(status_code=202)
        return JSONResponse(response)

    return app
