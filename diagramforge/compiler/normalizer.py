"""
diagramforge compiler — Graph Normalizer
========================================
Partitions a node list by kind and derives the symbolic names the emitter
uses for state variables, setters and handlers.

Naming
------
    name_of(node)          functionName  →  label, lowercased, whitespace removed
                           →  "input" (input nodes) / "processData" (process nodes)
    setter_of(node)        "set" + name_of(node) with its first letter capitalised
    display_name_of(node)  componentName  →  "ResultComponent"   (output nodes)

Names are never de-duplicated: two nodes labelled "Email" both become
``email``.  The emitted source then declares the same identifier twice.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from diagramforge.core.Diagram import Node
from diagramforge.core.Types import NodeKind


_WHITESPACE = re.compile(r"\s+")

_NAME_FALLBACKS: Dict[NodeKind, str] = {
    NodeKind.INPUT: "input",
    NodeKind.PROCESS: "processData",
    NodeKind.OUTPUT: "output",
    NodeKind.DATASTORE: "datastore",
}

DISPLAY_NAME_FALLBACK = "ResultComponent"


def capitalize_first(name: str) -> str:
    """Upper-case only the first character; ``userName`` → ``UserName``."""
    return name[:1].upper() + name[1:]


def symbolic_name(node: Node) -> str:
    attrs = node.attributes
    if attrs.function_name:
        return attrs.function_name
    if attrs.label:
        squashed = _WHITESPACE.sub("", attrs.label.lower())
        if squashed:
            return squashed
    return _NAME_FALLBACKS[node.kind]


@dataclass(frozen=True)
class NormalizedGraph:
    input_nodes: Tuple[Node, ...] = ()
    process_nodes: Tuple[Node, ...] = ()
    output_nodes: Tuple[Node, ...] = ()
    datastore_nodes: Tuple[Node, ...] = ()

    _names: Dict[str, str] = field(default_factory=dict, compare=False, repr=False)

    # ── Name tables ───────────────────────────────────────────────────────

    def name_of(self, node: Node) -> str:
        name = self._names.get(node.id)
        return name if name is not None else symbolic_name(node)

    def setter_of(self, node: Node) -> str:
        return f"set{capitalize_first(self.name_of(node))}"

    def display_name_of(self, node: Node) -> str:
        return node.attributes.component_name or DISPLAY_NAME_FALLBACK

    def symbols(self) -> FrozenSet[str]:
        """Identifiers the component declares: state, setters and handlers."""
        inputs = frozenset(self.name_of(n) for n in self.input_nodes)
        handlers = frozenset(self.name_of(n) for n in self.process_nodes)
        setters = frozenset(f"set{capitalize_first(n)}" for n in inputs)
        return inputs | setters | handlers

    # ── Convenience queries ───────────────────────────────────────────────

    @property
    def first_input(self) -> Optional[Node]:
        return self.input_nodes[0] if self.input_nodes else None

    def get_node(self, node_id: str) -> Optional[Node]:
        for group in (self.input_nodes, self.process_nodes,
                      self.output_nodes, self.datastore_nodes):
            for node in group:
                if node.id == node_id:
                    return node
        return None

    def counts(self) -> Dict[str, int]:
        return {
            "input": len(self.input_nodes),
            "process": len(self.process_nodes),
            "output": len(self.output_nodes),
            "datastore": len(self.datastore_nodes),
        }


def normalize(nodes: Iterable[Node]) -> NormalizedGraph:
    """Stable partition of *nodes* by kind, plus a per-node name table."""
    groups: Dict[NodeKind, list] = {kind: [] for kind in NodeKind}
    names: Dict[str, str] = {}
    for node in nodes:
        groups[node.kind].append(node)
        names[node.id] = symbolic_name(node)

    return NormalizedGraph(
        input_nodes=tuple(groups[NodeKind.INPUT]),
        process_nodes=tuple(groups[NodeKind.PROCESS]),
        output_nodes=tuple(groups[NodeKind.OUTPUT]),
        datastore_nodes=tuple(groups[NodeKind.DATASTORE]),
        _names=names,
    )


__all__ = ["NormalizedGraph", "capitalize_first", "normalize", "symbolic_name"]
