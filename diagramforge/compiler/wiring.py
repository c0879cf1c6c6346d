"""
diagramforge compiler — Trigger Call Planner
============================================
Decides which handler calls the "Process Data" button makes, in what order,
and with which argument.  Two separate algorithms, selected by
GenerationSettings.mode:

  FLAT   — kind-only grouping.  Every process handler is called in diagram
           order with the first input's state variable.  Edges are ignored.

  WIRED  — follows edges.  Process handlers are ordered so that a handler
           fed by another handler runs after it (Kahn's algorithm, ties broken
           by diagram order, anything left on a cycle appended in diagram
           order).  Each call's argument comes from the first incoming edge
           whose source is an input node (its state variable) or a process
           node that has already been called (that call's result variable).
           Without such an edge the FLAT argument is used.

Result variables ("result" in FLAT, "<handler>Result" in WIRED) take a numeric
suffix when the component already declares that identifier.

Edges whose endpoints are not in the graph are skipped silently.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Sequence, Set

from diagramforge.core.Diagram import Edge, Node
from diagramforge.core.Types import GenerationMode, NodeKind

from .normalizer import NormalizedGraph

# Argument used when the diagram has no input node at all.
EMPTY_ARGUMENT = '""'

FLAT_RESULT_VAR = "result"


@dataclass(frozen=True)
class HandlerCall:
    node: Node
    handler: str
    argument: str
    result_var: str


def default_argument(graph: NormalizedGraph) -> str:
    first = graph.first_input
    return graph.name_of(first) if first is not None else EMPTY_ARGUMENT


def unused_name(base: str, taken: Set[str]) -> str:
    """*base*, or *base* with the smallest numeric suffix not in *taken*."""
    name, suffix = base, 1
    while name in taken:
        suffix += 1
        name = f"{base}{suffix}"
    return name


# ── FLAT ─────────────────────────────────────────────────────────────────────

def plan_flat(graph: NormalizedGraph) -> List[HandlerCall]:
    argument = default_argument(graph)
    result_var = unused_name(FLAT_RESULT_VAR, set(graph.symbols()))
    return [
        HandlerCall(node=node, handler=graph.name_of(node),
                    argument=argument, result_var=result_var)
        for node in graph.process_nodes
    ]


# ── WIRED ────────────────────────────────────────────────────────────────────

def _process_order(graph: NormalizedGraph, edges: Sequence[Edge]) -> List[Node]:
    process_ids = [n.id for n in graph.process_nodes]
    position = {node_id: i for i, node_id in enumerate(process_ids)}

    indegree: Dict[str, int] = {node_id: 0 for node_id in process_ids}
    successors: Dict[str, List[str]] = {node_id: [] for node_id in process_ids}
    for edge in edges:
        src, dst = edge.source_node_id, edge.target_node_id
        if src in position and dst in position and src != dst:
            successors[src].append(dst)
            indegree[dst] += 1

    ready = deque(sorted((i for i in process_ids if indegree[i] == 0), key=position.get))
    ordered: List[str] = []
    while ready:
        current = ready.popleft()
        ordered.append(current)
        released = []
        for nxt in successors[current]:
            indegree[nxt] -= 1
            if indegree[nxt] == 0:
                released.append(nxt)
        # Keep the queue in diagram order so the plan is deterministic.
        ready = deque(sorted(list(ready) + released, key=position.get))

    seen = set(ordered)
    ordered.extend(i for i in process_ids if i not in seen)
    return [graph.get_node(i) for i in ordered]


def plan_wired(graph: NormalizedGraph, edges: Sequence[Edge]) -> List[HandlerCall]:
    fallback = default_argument(graph)
    taken = set(graph.symbols())
    results: Dict[str, str] = {}
    calls: List[HandlerCall] = []

    for node in _process_order(graph, edges):
        argument = fallback
        for edge in edges:
            if edge.target_node_id != node.id:
                continue
            source = graph.get_node(edge.source_node_id)
            if source is None:
                continue
            if source.kind is NodeKind.INPUT:
                argument = graph.name_of(source)
                break
            if source.kind is NodeKind.PROCESS and source.id in results:
                argument = results[source.id]
                break

        handler = graph.name_of(node)
        result_var = unused_name(f"{handler}Result", taken)
        taken.add(result_var)
        results[node.id] = result_var
        calls.append(HandlerCall(node=node, handler=handler,
                                 argument=argument, result_var=result_var))
    return calls


def plan_calls(
    graph: NormalizedGraph, edges: Sequence[Edge], mode: GenerationMode
) -> List[HandlerCall]:
    if mode is GenerationMode.WIRED:
        return plan_wired(graph, edges)
    return plan_flat(graph)


__all__ = [
    "EMPTY_ARGUMENT",
    "FLAT_RESULT_VAR",
    "HandlerCall",
    "plan_calls",
    "plan_flat",
    "plan_wired",
    "unused_name",
]
