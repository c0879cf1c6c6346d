"""
Diagram model
=============
Immutable snapshot of one editor diagram, as handed to the compiler.

    Node              one vertex (input / process / output / datastore)
    Edge              one directed connection between two node ports
    GenerationSettings   options for a single generate() call

Nothing here holds live UI state; the compiler only ever reads these objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .Types import GenerationMode, NodeKind


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class NodeAttributes:
    label: Optional[str] = None
    data_type: str = "string"
    function_name: Optional[str] = None
    description: Optional[str] = None
    component_name: Optional[str] = None


@dataclass(frozen=True)
class Node:
    id: str
    kind: NodeKind
    position: Position = field(default_factory=Position)
    attributes: NodeAttributes = field(default_factory=NodeAttributes)


@dataclass(frozen=True)
class Edge:
    id: str
    source_node_id: str
    target_node_id: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None


@dataclass(frozen=True)
class GenerationSettings:
    component_name: str
    use_typescript: bool = True
    use_hooks: bool = True
    mode: GenerationMode = GenerationMode.FLAT
