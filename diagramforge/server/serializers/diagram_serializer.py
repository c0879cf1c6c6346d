"""
Diagram serializer — converts store records into the JSON wire shape the
editor expects (camelCase keys, ISO timestamps).
"""
from __future__ import annotations

from typing import Any, Dict

from diagramforge.server.state import DiagramRecord, GeneratedCodeRecord


def serialize_diagram(record: DiagramRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "nodes": record.nodes,
        "connections": record.connections,
        "settings": record.settings,
        "createdAt": record.created_at.isoformat(),
    }


def serialize_generated_code(record: GeneratedCodeRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "diagramId": record.diagram_id,
        "code": record.code,
        "language": record.language,
        "componentName": record.component_name,
        "sourceType": record.source_type,
        "createdAt": record.created_at.isoformat(),
    }


def diagram_payload(record: DiagramRecord) -> Dict[str, Any]:
    """The generator payload (nodes / connections / settings) for a stored diagram."""
    return {
        "nodes": record.nodes,
        "connections": record.connections,
        "settings": record.settings,
    }
