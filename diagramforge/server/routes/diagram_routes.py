"""
Diagram REST routes.

``create_router(store, relay, temp_dir)`` returns an APIRouter bound to the
given store and relay; main.py mounts it under /api.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from diagramforge.compiler import ConfigurationError, SchemaError, generate_from_dict
from diagramforge.server.realtime.relay import Relay
from diagramforge.server.serializers.diagram_serializer import (
    diagram_payload,
    serialize_diagram,
    serialize_generated_code,
)
from diagramforge.server.services.code_compiler import compile_code
from diagramforge.server.services.image_analyzer import analyze_mockup
from diagramforge.server.state import DiagramStore

logger = logging.getLogger(__name__)


# ── Request bodies ────────────────────────────────────────────────────────────

class CreateDiagramBody(BaseModel):
    name: str
    nodes: List[Dict[str, Any]] = Field(default_factory=list)
    connections: List[Dict[str, Any]] = Field(default_factory=list)
    settings: Dict[str, Any] = Field(default_factory=dict)


class UpdateDiagramBody(BaseModel):
    name: Optional[str] = None
    nodes: Optional[List[Dict[str, Any]]] = None
    connections: Optional[List[Dict[str, Any]]] = None
    settings: Optional[Dict[str, Any]] = None


class GenerateBody(BaseModel):
    nodes: List[Dict[str, Any]] = Field(default_factory=list)
    connections: Optional[List[Dict[str, Any]]] = None
    edges: Optional[List[Dict[str, Any]]] = None
    settings: Dict[str, Any] = Field(default_factory=dict)

    def payload(self) -> Dict[str, Any]:
        connections = self.connections if self.connections is not None else self.edges
        return {
            "nodes": self.nodes,
            "connections": connections or [],
            "settings": self.settings,
        }


class SaveCodeBody(BaseModel):
    code: str
    componentName: str
    diagramId: Optional[int] = None
    language: str = "typescript"
    sourceType: str = "diagram"


class CompileBody(BaseModel):
    code: str
    componentName: str


class MockupBody(BaseModel):
    image: str
    componentName: Optional[str] = None


def _generation_failed(exc: Exception) -> JSONResponse:
    if isinstance(exc, (ConfigurationError, SchemaError)):
        logger.warning("code generation failed: %s", exc)
    else:
        logger.exception("unexpected error during code generation")
    return JSONResponse(
        status_code=400,
        content={"message": "Code generation failed", "error": str(exc)},
    )


# ── Router factory ────────────────────────────────────────────────────────────

def create_router(store: DiagramStore, relay: Relay, temp_dir: str = "temp") -> APIRouter:
    router = APIRouter()

    def _get_or_404(diagram_id: int):
        record = store.get_diagram(diagram_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Diagram not found")
        return record

    # ── Diagram CRUD ──────────────────────────────────────────────────────────

    @router.get("/diagrams")
    async def list_diagrams() -> List[Dict[str, Any]]:
        return [serialize_diagram(d) for d in store.list_diagrams()]

    @router.get("/diagrams/{diagram_id}")
    async def get_diagram(diagram_id: int) -> Dict[str, Any]:
        return serialize_diagram(_get_or_404(diagram_id))

    @router.post("/diagrams", status_code=201)
    async def create_diagram(body: CreateDiagramBody) -> Dict[str, Any]:
        record = store.create_diagram(body.name, body.nodes, body.connections, body.settings)
        return serialize_diagram(record)

    @router.put("/diagrams/{diagram_id}")
    async def update_diagram(diagram_id: int, body: UpdateDiagramBody) -> Dict[str, Any]:
        record = store.update_diagram(
            diagram_id,
            name=body.name,
            nodes=body.nodes,
            connections=body.connections,
            settings=body.settings,
        )
        if record is None:
            raise HTTPException(status_code=404, detail="Diagram not found")
        return serialize_diagram(record)

    @router.delete("/diagrams/{diagram_id}", status_code=204)
    async def delete_diagram(diagram_id: int) -> Response:
        if not store.delete_diagram(diagram_id):
            raise HTTPException(status_code=404, detail="Diagram not found")
        return Response(status_code=204)

    # ── Generation ────────────────────────────────────────────────────────────

    @router.post("/generate")
    async def generate(body: GenerateBody) -> Any:
        try:
            code = generate_from_dict(body.payload())
        except Exception as exc:
            return _generation_failed(exc)
        return {"success": True, "code": code}

    @router.post("/diagrams/{diagram_id}/generate")
    async def generate_for_diagram(diagram_id: int) -> Any:
        record = _get_or_404(diagram_id)
        try:
            code = generate_from_dict(diagram_payload(record))
        except Exception as exc:
            return _generation_failed(exc)
        saved = store.create_generated_code(
            code=code,
            component_name=record.settings.get("componentName", ""),
            diagram_id=diagram_id,
        )
        result = serialize_generated_code(saved)
        relay.publish("code-generated", {"success": True, "diagramId": diagram_id, "code": code})
        return result

    @router.get("/diagrams/{diagram_id}/code")
    async def get_generated_code(diagram_id: int) -> Dict[str, Any]:
        _get_or_404(diagram_id)
        saved = store.get_generated_code_by_diagram(diagram_id)
        if saved is None:
            raise HTTPException(status_code=404, detail="No code generated for this diagram")
        return serialize_generated_code(saved)

    @router.post("/generate-code")
    async def save_generated_code(body: SaveCodeBody) -> Dict[str, Any]:
        saved = store.create_generated_code(
            code=body.code,
            component_name=body.componentName,
            diagram_id=body.diagramId,
            language=body.language,
            source_type=body.sourceType,
        )
        return serialize_generated_code(saved)

    # ── Compilation + mockups ─────────────────────────────────────────────────

    @router.post("/compile-code")
    def compile_generated_code(body: CompileBody) -> Dict[str, Any]:
        # Sync def: FastAPI runs it in the threadpool since it touches disk.
        return compile_code(body.code, body.componentName, temp_dir).to_dict()

    @router.post("/analyze-mockup")
    def analyze_uploaded_mockup(body: MockupBody) -> Any:
        result = analyze_mockup(body.image, body.componentName or "GeneratedComponent")
        if not result.success:
            return JSONResponse(status_code=400, content=result.to_dict())
        store.create_generated_code(
            code=result.code,
            component_name=result.componentName,
            source_type="mockup",
        )
        return result.to_dict()

    return router
