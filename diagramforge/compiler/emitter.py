"""
diagramforge compiler — React Source Emitter
============================================
Turns a NormalizedGraph + GenerationSettings into one component source file.

The file is an ordered list of named fragments.  Inclusion rules live in
``plan_fragments`` and nowhere else:

    ┌──────────────┬──────────────────────────────────────────────┐
    │ fragment     │ included when                                │
    ├──────────────┼──────────────────────────────────────────────┤
    │ imports      │ always                                       │
    │ props_type   │ settings.use_typescript                      │
    │ header       │ always                                       │
    │ state        │ settings.use_hooks  (one line per input)     │
    │ handlers     │ settings.use_hooks  (one block per process)  │
    │ markup       │ always  (see markup.py)                      │
    │ footer       │ always  (closing brace + default export)     │
    └──────────────┴──────────────────────────────────────────────┘

A fragment with no lines (e.g. state with zero input nodes) still keeps its
slot in the plan; it simply contributes nothing to the output.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from diagramforge.core.Diagram import Edge, GenerationSettings

from .markup import assemble_markup
from .normalizer import NormalizedGraph
from .templates import (
    CodeWriter,
    footer_fragment,
    get_template,
    header_fragment,
    import_fragment,
    props_type_fragment,
)
from .wiring import plan_calls

Fragment = Tuple[str, List[str]]


# ── Body fragments ────────────────────────────────────────────────────────────

def _state_fragment(graph: NormalizedGraph, settings: GenerationSettings) -> List[str]:
    w = CodeWriter(indent=1)
    for node in graph.input_nodes:
        w.extend(get_template(node.kind).state_declaration(node, graph, settings))
    return w.lines()


def _handler_fragment(graph: NormalizedGraph, settings: GenerationSettings) -> List[str]:
    w = CodeWriter(indent=1)
    for node in graph.process_nodes:
        w.extend(get_template(node.kind).handler_declaration(node, graph, settings))
    return w.lines()


def _markup_fragment(
    graph: NormalizedGraph, settings: GenerationSettings, edges: Sequence[Edge]
) -> List[str]:
    calls = plan_calls(graph, edges, settings.mode)
    w = CodeWriter(indent=1)
    w.blank()
    w.writeln("return (")
    w.extend(assemble_markup(graph, settings, calls, indent=1))
    w.writeln(");")
    return w.lines()


# ── Public API ────────────────────────────────────────────────────────────────

def plan_fragments(
    graph: NormalizedGraph,
    settings: GenerationSettings,
    edges: Sequence[Edge] = (),
) -> List[Fragment]:
    """Ordered (name, lines) pairs that make up the component file."""
    fragments: List[Fragment] = [("imports", import_fragment(settings))]
    if settings.use_typescript:
        fragments.append(("props_type", props_type_fragment(settings)))
    fragments.append(("header", header_fragment(settings)))
    if settings.use_hooks:
        fragments.append(("state", _state_fragment(graph, settings)))
        fragments.append(("handlers", _handler_fragment(graph, settings)))
    fragments.append(("markup", _markup_fragment(graph, settings, edges)))
    fragments.append(("footer", footer_fragment(settings)))
    return fragments


def emit(
    graph: NormalizedGraph,
    settings: GenerationSettings,
    edges: Sequence[Edge] = (),
) -> str:
    lines: List[str] = []
    for _name, fragment in plan_fragments(graph, settings, edges):
        lines.extend(fragment)
    return "\n".join(lines)


__all__ = ["Fragment", "emit", "plan_fragments"]
