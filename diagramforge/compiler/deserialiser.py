"""
diagramforge compiler — JSON Deserialiser
=========================================
Converts the editor's diagram payload (see schema.py) into the immutable
core dataclasses consumed by generate().

    payload dict  →  [validate_diagram]  →  [diagram_from_dict]  →  (nodes, edges, settings)
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from diagramforge.core.Diagram import (
    Edge,
    GenerationSettings,
    Node,
    NodeAttributes,
    Position,
)
from diagramforge.core.Types import GenerationMode, NodeKind

from .schema import edge_list, validate_diagram


def _coordinate(value: Any) -> float:
    # Position is editor layout only; anything unreadable lands at the origin.
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0


def _position(raw: Any) -> Position:
    if not isinstance(raw, dict):
        return Position()
    return Position(x=_coordinate(raw.get("x", 0)), y=_coordinate(raw.get("y", 0)))


def node_from_dict(raw: Dict[str, Any]) -> Node:
    data = raw.get("data") or {}
    # Older diagrams keep the label on the node itself rather than in data.
    label = data.get("label") or raw.get("label")
    attributes = NodeAttributes(
        label=label,
        data_type=data.get("dataType") or "string",
        function_name=data.get("functionName"),
        description=data.get("description"),
        component_name=data.get("componentName"),
    )
    return Node(
        id=raw["id"],
        kind=NodeKind.parse(raw["type"]),
        position=_position(raw.get("position")),
        attributes=attributes,
    )


def edge_from_dict(raw: Dict[str, Any], index: int = 0) -> Edge:
    source = raw.get("source", raw.get("sourceNodeId"))
    target = raw.get("target", raw.get("targetNodeId"))
    return Edge(
        id=raw.get("id") or f"e{index}-{source}-{target}",
        source_node_id=source,
        target_node_id=target,
        source_handle=raw.get("sourceHandle"),
        target_handle=raw.get("targetHandle"),
    )


def settings_from_dict(raw: Dict[str, Any]) -> GenerationSettings:
    return GenerationSettings(
        component_name=raw.get("componentName") or "",
        use_typescript=raw.get("useTypeScript", True),
        use_hooks=raw.get("useHooks", True),
        mode=GenerationMode(raw.get("mode", GenerationMode.FLAT.value)),
    )


def diagram_from_dict(
    data: Dict[str, Any],
) -> Tuple[List[Node], List[Edge], GenerationSettings]:
    """
    Validate and convert a diagram payload.

    Raises:
        SchemaError: If the payload is structurally invalid.
    """
    validate_diagram(data)
    nodes = [node_from_dict(n) for n in data["nodes"]]
    edges = [edge_from_dict(e, i) for i, e in enumerate(edge_list(data))]
    return nodes, edges, settings_from_dict(data["settings"])


__all__ = ["diagram_from_dict", "edge_from_dict", "node_from_dict", "settings_from_dict"]
