"""
Socket.IO server — live code generation and compilation for the editor.

Uses python-socketio in ASGI mode so it can wrap FastAPI.
``create_socket_server(relay, temp_dir)`` builds the server and registers the
handlers; ``create_socket_app(sio, fastapi_app)`` returns the composite ASGI
application to pass to uvicorn.

Events
------
    generate-code  {nodes, connections, settings}  →  code-generated      {success, code | error}
    compile-code   {code, componentName}           →  compilation-result  CompilationResult

Anything published on the Relay is re-emitted to every connected client.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

import socketio

from diagramforge.compiler import ConfigurationError, SchemaError, generate_from_dict
from diagramforge.server.realtime.relay import Relay
from diagramforge.server.services.code_compiler import compile_code

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Event handlers (plain functions so they can be tested without a socket)
# ---------------------------------------------------------------------------

def handle_generate(data: Any) -> Dict[str, Any]:
    try:
        if not isinstance(data, dict):
            raise SchemaError("generate-code payload must be an object")
        return {"success": True, "code": generate_from_dict(data)}
    except (ConfigurationError, SchemaError) as exc:
        logger.warning("code generation failed: %s", exc)
        return {"success": False, "error": f"Code generation failed: {exc}"}
    except Exception as exc:
        logger.exception("unexpected error during code generation")
        return {"success": False, "error": f"Code generation failed: {exc}"}


def handle_compile(data: Any, temp_dir: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        data = {}
    code = data.get("code") or ""
    component_name = data.get("componentName") or "Component"
    return compile_code(code, component_name, temp_dir).to_dict()


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def create_socket_server(
    relay: Relay,
    temp_dir: str = "temp",
    cors_allowed_origins: Any = "*",
) -> socketio.AsyncServer:
    sio = socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=cors_allowed_origins,
        logger=False,
        engineio_logger=False,
    )

    @sio.event
    async def connect(sid: str, environ: dict) -> None:
        logger.info("client connected: %s", sid)

    @sio.event
    async def disconnect(sid: str) -> None:
        logger.info("client disconnected: %s", sid)

    @sio.on("generate-code")
    async def generate_code(sid: str, data: Any) -> None:
        await sio.emit("code-generated", handle_generate(data), to=sid)

    @sio.on("compile-code")
    async def compile_code_event(sid: str, data: Any) -> None:
        result = await asyncio.to_thread(handle_compile, data, temp_dir)
        await sio.emit("compilation-result", result, to=sid)

    # Relay → Socket.IO fan-out.  Relay.publish() is synchronous, so the emit
    # is scheduled on the running loop.
    def _on_publish(event: str, payload: Dict[str, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("no running loop; dropping %s broadcast", event)
            return
        loop.create_task(sio.emit(event, payload))

    relay.subscribe(_on_publish)
    return sio


def create_socket_app(sio: socketio.AsyncServer, fastapi_app: Any) -> socketio.ASGIApp:
    """Wrap *fastapi_app* inside a Socket.IO ASGI application."""
    return socketio.ASGIApp(sio, other_asgi_app=fastapi_app)
