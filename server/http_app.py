# server/http_app.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from notevault.config import DEFAULT_BEARER_TOKEN, Settings
from notevault.di import Container, build_container
from notevault.errors import ConfigurationError
from server.registry import build_tool_registry, call_tool, list_tools_payload
from server.tools.notes import NoteToolHandlers

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2025-03-26"  # aligns with current spec draft dates


# ---------- Security: Origin validation & Bearer token ----------

def _origin_allowed(req: Request, settings: Settings) -> bool:
    origin = req.headers.get("origin")
    if not origin:
        return settings.MCP_HTTP_ALLOW_NO_ORIGIN
    allowed = {o.strip().lower() for o in settings.MCP_HTTP_ALLOWED_ORIGINS.split(",") if o.strip()}
    return origin.lower() in allowed


def _require_auth(req: Request, settings: Settings):
    auth = req.headers.get("authorization", "")
    if not auth.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing Bearer token")
    token = auth.split(" ", 1)[1]
    if token != settings.MCP_HTTP_BEARER_TOKEN:
        raise HTTPException(status_code=401, detail="Invalid Bearer token")


def _jsonrpc_error(id_: Any, code: int, message: str, data: Any | None = None) -> JSONResponse:
    body: Dict[str, Any] = {"jsonrpc": "2.0", "id": id_, "error": {"code": code, "message": message}}
    if data is not None:
        body["error"]["data"] = data
    return JSONResponse(body)


def _jsonrpc_result(id_: Any, result: Any) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": id_, "result": result})


def create_http_app(container: Optional[Container] = None) -> FastAPI:
    container = container or build_container()
    settings = container.settings
    if not settings.MCP_HTTP_BEARER_TOKEN or settings.MCP_HTTP_BEARER_TOKEN == DEFAULT_BEARER_TOKEN:
        raise ConfigurationError("MCP_HTTP_BEARER_TOKEN must be set to a non-default value")
    registry = build_tool_registry(NoteToolHandlers(container.note_service))

    app = FastAPI(title="MCP Obsidian HTTP Server", version="1.0.0")

    @app.middleware("http")
    async def origin_validation_mw(request: Request, call_next):
        # MCP spec requires Origin validation to prevent DNS rebinding
        # If provided and not allowed → 403
        if not _origin_allowed(request, settings):
            return JSONResponse({"error": {"code": 403, "message": "Forbidden origin"}}, status_code=403)
        return await call_next(request)

    # ---------- MCP JSON-RPC endpoint (Streamable HTTP) ----------

    @app.post(settings.MCP_HTTP_PATH)
    async def mcp_endpoint(request: Request):
        _require_auth(request, settings)

        try:
            payload = await request.json()
        except ValueError:
            return _jsonrpc_error(None, -32700, "Parse error")
        if not isinstance(payload, dict):
            return _jsonrpc_error(None, -32600, "Invalid Request")

        id_ = payload.get("id")
        method = payload.get("method")
        params = payload.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return _jsonrpc_error(id_, -32602, "Invalid params: expected an object")

        if method == "initialize":
            return _jsonrpc_result(id_, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": "mcp-obsidian", "version": "1.0.0"},
            })

        if method == "tools/list":
            return _jsonrpc_result(id_, list_tools_payload(registry))

        if method == "tools/call":
            name = params.get("name")
            args = params.get("arguments")
            if not isinstance(name, str):
                return _jsonrpc_error(id_, -32602, "Invalid params: tool name must be a string")
            if name not in registry:
                return _jsonrpc_error(id_, -32601, f"Unknown tool: {name}")
            result = call_tool(registry, name, args)
            return _jsonrpc_result(id_, {
                "content": [{"type": "text", "text": result.text}],
                "isError": result.is_error,
            })

        return _jsonrpc_error(id_, -32601, f"Method not found: {method}")

    logger.info("HTTP MCP endpoint at %s, allowed directories: %s",
                settings.MCP_HTTP_PATH, container.roots.describe())
    return app


if __name__ == "__main__":
    import uvicorn
    from notevault.logging import configure_logging

    s = Settings()
    configure_logging(s.LOG_LEVEL)
    uvicorn.run(
        "server.http_app:create_http_app",
        factory=True,
        host=s.MCP_HTTP_HOST,
        port=s.MCP_HTTP_PORT,
        reload=False,
    )
