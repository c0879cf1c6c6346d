"""
diagramforge compiler — Markup Assembler
========================================
Builds the JSX returned by the generated component:

    <div container>
      one field block per input node          (diagram order)
      one "Process Data" button               (only if process nodes exist)
      one static result panel per output node (diagram order)
    </div>

The button's onClick runs the HandlerCall plan from wiring.py inside a single
try/catch, logging each result.  Only the TypeScript variant forwards the last
result to ``onSubmit``; errors are logged, never rethrown.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from diagramforge.core.Diagram import GenerationSettings

from .normalizer import NormalizedGraph
from .templates import BUTTON_CLASS, CONTAINER_CLASS, CodeWriter, get_template
from .wiring import HandlerCall, plan_flat

BUTTON_TEXT = "Process Data"


def _emit_trigger(
    calls: Sequence[HandlerCall], settings: GenerationSettings, writer: CodeWriter
) -> None:
    result_vars = list(dict.fromkeys(call.result_var for call in calls))

    writer.writeln("<button").push()
    writer.writeln("onClick={() => {").push()
    writer.writeln("try {").push()
    writer.writeln(f"let {', '.join(result_vars)};")
    for call in calls:
        writer.writeln(f"{call.result_var} = {call.handler}({call.argument});")
        writer.writeln(f"console.log('Processed result:', {call.result_var});")
    if settings.use_typescript:
        writer.writeln(f"onSubmit?.({calls[-1].result_var});")
    writer.pop().writeln("} catch (error) {").push()
    writer.writeln("console.error('Processing failed:', error);")
    writer.pop().writeln("}")
    writer.pop().writeln("}}")
    writer.writeln(f'className="{BUTTON_CLASS}"')
    writer.pop().writeln(">")
    writer.push().writeln(BUTTON_TEXT).pop()
    writer.writeln("</button>")


def assemble_markup(
    graph: NormalizedGraph,
    settings: GenerationSettings,
    calls: Optional[Sequence[HandlerCall]] = None,
    indent: int = 0,
) -> List[str]:
    """Return the container block as source lines at *indent* levels."""
    if calls is None:
        calls = plan_flat(graph)
    w = CodeWriter(indent=indent)
    w.writeln(f'<div className="{CONTAINER_CLASS}">').push()

    for node in graph.input_nodes:
        get_template(node.kind).emit_markup(node, graph, settings, w)

    if calls:
        _emit_trigger(calls, settings, w)

    for node in graph.output_nodes:
        get_template(node.kind).emit_markup(node, graph, settings, w)

    w.pop().writeln("</div>")
    return w.lines()


__all__ = ["BUTTON_TEXT", "assemble_markup"]
