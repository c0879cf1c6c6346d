"""
Server configuration.

Values come from the environment; a ``.env`` file in the working directory
is loaded first so local secrets and ports do not need a manual ``export``.

    DIAGRAMFORGE_HOST           bind address            (0.0.0.0)
    DIAGRAMFORGE_PORT           HTTP / Socket.IO port   (3001)
    DIAGRAMFORGE_CORS_ORIGINS   comma-separated origins (*)
    DIAGRAMFORGE_TEMP_DIR       compiler scratch dir    (./temp)
    DIAGRAMFORGE_LOG_LEVEL      logging level name      (INFO)
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv


def _origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    temp_dir: str = "temp"
    log_level: str = "INFO"


def load_config(env: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """Build a ServerConfig from *env* (defaults to os.environ after .env)."""
    if env is None:
        load_dotenv()
        env = os.environ
    return ServerConfig(
        host=env.get("DIAGRAMFORGE_HOST", "0.0.0.0"),
        port=int(env.get("DIAGRAMFORGE_PORT", "3001")),
        cors_origins=_origins(env.get("DIAGRAMFORGE_CORS_ORIGINS", "*")),
        temp_dir=env.get("DIAGRAMFORGE_TEMP_DIR", "temp"),
        log_level=env.get("DIAGRAMFORGE_LOG_LEVEL", "INFO").upper(),
    )
