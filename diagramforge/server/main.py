"""
diagramforge server — FastAPI + Socket.IO.

Start with:
    python -m diagramforge.server.main

Or via uvicorn directly:
    uvicorn diagramforge.server.main:socket_app --port 3001 --reload
"""
from __future__ import annotations

import logging
from typing import Optional

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from diagramforge import __version__
from diagramforge.config import ServerConfig, load_config
from diagramforge.server.realtime.relay import Relay
from diagramforge.server.realtime.socket_server import create_socket_app, create_socket_server
from diagramforge.server.routes.diagram_routes import create_router
from diagramforge.server.state import DiagramStore


# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

def create_app(
    config: Optional[ServerConfig] = None,
    store: Optional[DiagramStore] = None,
    relay: Optional[Relay] = None,
) -> FastAPI:
    config = config or load_config()
    store = store or DiagramStore()
    relay = relay or Relay()

    app = FastAPI(title="diagramforge API", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(create_router(store, relay, config.temp_dir), prefix="/api")

    app.state.config = config
    app.state.store = store
    app.state.relay = relay

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app


def create_asgi_app(config: Optional[ServerConfig] = None) -> socketio.ASGIApp:
    """Build the FastAPI app and wrap it with the Socket.IO layer."""
    config = config or load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    relay = Relay()
    app = create_app(config, relay=relay)
    origins = "*" if "*" in config.cors_origins else config.cors_origins
    sio = create_socket_server(relay, config.temp_dir, origins)
    return create_socket_app(sio, app)


# socket_app is the top-level ASGI app passed to uvicorn.
# Socket.IO connections are handled at the root; all other requests are
# forwarded to the inner FastAPI app.
socket_app = create_asgi_app()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    cfg = load_config()
    uvicorn.run(
        "diagramforge.server.main:socket_app",
        host=cfg.host,
        port=cfg.port,
        reload=True,
    )
