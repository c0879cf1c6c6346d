"""
diagramforge compiler — Diagram JSON Schema + Validator
========================================================
Structural checks for the diagram payload the editor sends, and the
configuration check that guards every generate() call.

Wire format (React Flow shape)
------------------------------

    {
      "nodes": [
        {
          "id":       "node-1",                  // unique (str, required)
          "type":     "input",                   // input|process|output|datastore
          "position": {"x": 120, "y": 80},       // UI only (optional)
          "data": {                              // all fields optional
            "label":         "Email",
            "dataType":      "email",
            "functionName":  "validate",
            "description":   "Normalise the address",
            "componentName": "ResultCard"
          }
        }
      ],
      "connections": [                           // "edges" is accepted too
        {"id": "e1", "source": "node-1", "target": "node-2",
         "sourceHandle": null, "targetHandle": null}
      ],
      "settings": {"componentName": "SignupForm",
                   "useTypeScript": true, "useHooks": true, "mode": "flat"}
    }

Edges whose endpoints are missing are NOT rejected here; the generator
ignores them.
"""

from __future__ import annotations

import warnings
from typing import Any, Dict, List, Optional

from diagramforge.core.Types import DataType, GenerationMode, NodeKind


KNOWN_NODE_KINDS: frozenset[str] = frozenset(k.value for k in NodeKind)
KNOWN_MODES: frozenset[str] = frozenset(m.value for m in GenerationMode)

# Node data fields that end up in identifiers, comments or JSX text.
TEXT_ATTRIBUTES = ("label", "dataType", "functionName", "description", "componentName")


class SchemaError(ValueError):
    """Raised when a diagram payload fails structural validation."""


class ConfigurationError(ValueError):
    """Raised when generation settings cannot produce a component."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise SchemaError(message)


def _require_keys(obj: Dict, keys: List[str], context: str) -> None:
    for key in keys:
        _require(key in obj, f"{context}: missing required field '{key}'")


def _require_optional_str(value: Any, context: str) -> None:
    _require(value is None or isinstance(value, str), f"{context} must be a string")


def require_component_name(component_name: Optional[str]) -> str:
    """Return the component name, or raise ConfigurationError if it is unusable."""
    if not isinstance(component_name, str) or not component_name.strip():
        raise ConfigurationError("componentName is required to generate a component")
    return component_name


def edge_list(data: Dict[str, Any]) -> List[Any]:
    """The editor stores edges as "connections"; older clients send "edges"."""
    if "connections" in data:
        return data["connections"]
    return data.get("edges", [])


# ── Public validators ─────────────────────────────────────────────────────────

def validate_settings(settings: Any) -> None:
    _require(isinstance(settings, dict), "settings must be an object")
    for flag in ("useTypeScript", "useHooks"):
        if flag in settings:
            _require(isinstance(settings[flag], bool), f"settings.{flag} must be a boolean")
    if "componentName" in settings and settings["componentName"] is not None:
        _require(isinstance(settings["componentName"], str),
                 "settings.componentName must be a string")
    if "mode" in settings:
        _require(settings["mode"] in KNOWN_MODES,
                 f"settings.mode must be one of {sorted(KNOWN_MODES)}")


def validate_diagram(data: Dict[str, Any]) -> None:
    """
    Validate a parsed diagram payload.

    Raises:
        SchemaError: On any structural violation.
    """
    _require(isinstance(data, dict), "diagram must be a JSON object at the top level")
    _require_keys(data, ["nodes", "settings"], "diagram root")
    _require(isinstance(data["nodes"], list), "nodes must be a list")

    edges = edge_list(data)
    _require(isinstance(edges, list), "connections must be a list")

    node_ids: set[str] = set()

    for i, node in enumerate(data["nodes"]):
        ctx = f"nodes[{i}]"
        _require(isinstance(node, dict), f"{ctx}: each node must be a JSON object")
        _require_keys(node, ["id", "type"], ctx)
        _require(isinstance(node["id"], str), f"{ctx}.id must be a string")
        _require(
            node["id"] not in node_ids,
            f"{ctx}: duplicate node id '{node['id']}'",
        )
        node_ids.add(node["id"])
        _require(
            isinstance(node["type"], str) and node["type"] in KNOWN_NODE_KINDS,
            f"{ctx}: unknown node type '{node['type']}'",
        )

        _require_optional_str(node.get("label"), f"{ctx}.label")

        data_attrs = node.get("data", {})
        if data_attrs is None:
            data_attrs = {}
        _require(isinstance(data_attrs, dict), f"{ctx}.data must be an object")
        for key in TEXT_ATTRIBUTES:
            _require_optional_str(data_attrs.get(key), f"{ctx}.data.{key}")
        data_type = data_attrs.get("dataType")
        if data_type is not None and DataType.lookup(data_type) is None:
            warnings.warn(
                f"{ctx}: unknown dataType '{data_type}' (rendered as a text field)",
                stacklevel=2,
            )

    for i, edge in enumerate(edges):
        ctx = f"connections[{i}]"
        _require(isinstance(edge, dict), f"{ctx}: each connection must be a JSON object")
        source = edge.get("source", edge.get("sourceNodeId"))
        target = edge.get("target", edge.get("targetNodeId"))
        _require(isinstance(source, str), f"{ctx}: source must be a string")
        _require(isinstance(target, str), f"{ctx}: target must be a string")

    validate_settings(data["settings"])


__all__ = [
    "ConfigurationError",
    "KNOWN_NODE_KINDS",
    "SchemaError",
    "edge_list",
    "require_component_name",
    "validate_diagram",
    "validate_settings",
]
