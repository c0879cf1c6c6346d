"""
diagramforge compiler — Fragment Builders
=========================================
Every piece of the generated component comes from one small builder that
returns a list of source lines.  The emitter only decides *which* fragments
appear and in what order; the text of each fragment lives here.

Component-level fragments (settings only):

    import_fragment(settings)        import React[, { useState, useCallback }] ...
    props_type_fragment(settings)    interface {Name}Props { onSubmit?: ... }
    header_fragment(settings)        const {Name}[: React.FC<{Name}Props>] = (...) => {
    footer_fragment(settings)        };  +  export default {Name};

Per-node fragments come from a NodeTemplate registered for the node kind:

    state_declaration(node, graph, settings)    hooks state pair       (input)
    handler_declaration(node, graph, settings)  memoised handler       (process)
    emit_markup(node, graph, settings, writer)  JSX block              (input, output)

Adding a new node kind
----------------------
1. Subclass NodeTemplate and override the hooks you need.
2. Register: TEMPLATE_REGISTRY[NodeKind.MY_KIND] = MyKindTemplate()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from diagramforge.core.Diagram import GenerationSettings, Node
from diagramforge.core.Types import DataType, NodeKind

if TYPE_CHECKING:
    from .normalizer import NormalizedGraph


# ── Code writer ───────────────────────────────────────────────────────────────

class CodeWriter:
    """Simple indented string accumulator."""

    def __init__(self, indent: int = 0, unit: str = "  "):
        self._lines: List[str] = []
        self._indent = indent
        self._unit = unit

    def writeln(self, line: str = "") -> "CodeWriter":
        if line:
            self._lines.append(self._unit * self._indent + line)
        else:
            self._lines.append("")
        return self

    def blank(self) -> "CodeWriter":
        return self.writeln()

    def comment(self, text: str) -> "CodeWriter":
        return self.writeln(f"// {one_line(text)}")

    def push(self) -> "CodeWriter":
        self._indent += 1
        return self

    def pop(self) -> "CodeWriter":
        self._indent = max(0, self._indent - 1)
        return self

    def extend(self, lines: List[str]) -> "CodeWriter":
        for line in lines:
            self.writeln(line)
        return self

    def lines(self) -> List[str]:
        return self._lines

    def result(self) -> str:
        return "\n".join(self._lines)


# ── Text helpers ──────────────────────────────────────────────────────────────

_JSX_TEXT_ESCAPES = {"<": "&lt;", ">": "&gt;", "{": "&#123;", "}": "&#125;"}


def one_line(text: str) -> str:
    """Collapse newlines so free text can sit inside a // comment."""
    return " ".join(text.split())


def jsx_text(text: str) -> str:
    return "".join(_JSX_TEXT_ESCAPES.get(ch, ch) for ch in one_line(text))


def jsx_attr(text: str) -> str:
    return one_line(text).replace("&", "&amp;").replace('"', "&quot;")


# ── Shared class names ────────────────────────────────────────────────────────

CONTAINER_CLASS = "p-6 max-w-md mx-auto bg-white rounded-lg shadow-lg"
FIELD_CLASS = "mb-4"
LABEL_CLASS = "block text-sm font-medium text-gray-700 mb-2"
INPUT_CLASS = (
    "w-full px-3 py-2 border border-gray-300 rounded-md "
    "focus:ring-2 focus:ring-blue-500 focus:border-blue-500"
)
BUTTON_CLASS = (
    "w-full bg-blue-500 text-white py-2 px-4 rounded-md "
    "hover:bg-blue-600 transition-colors"
)
OUTPUT_CLASS = "mt-4 p-3 bg-gray-50 border border-gray-200 rounded-md"
OUTPUT_HEADING_CLASS = "text-sm font-medium text-gray-800"
OUTPUT_TEXT_CLASS = "text-sm text-gray-600"

EMAIL_PATTERN = r"/^[^\s@]+@[^\s@]+\.[^\s@]+$/"
DEFAULT_DESCRIPTION = "Process the input data"
OUTPUT_PLACEHOLDER = "Results will be displayed here"


def input_control_type(data_type: str) -> str:
    if data_type == DataType.EMAIL.value:
        return "email"
    if data_type == DataType.NUMBER.value:
        return "number"
    return "text"


# ── Component-level fragments ─────────────────────────────────────────────────

def import_fragment(settings: GenerationSettings) -> List[str]:
    hooks = ", { useState, useCallback }" if settings.use_hooks else ""
    return [f"import React{hooks} from 'react';", ""]


def props_type_name(settings: GenerationSettings) -> str:
    return f"{settings.component_name}Props"


def props_type_fragment(settings: GenerationSettings) -> List[str]:
    return [
        f"interface {props_type_name(settings)} {{",
        "  onSubmit?: (data: any) => void;",
        "}",
        "",
    ]


def header_fragment(settings: GenerationSettings) -> List[str]:
    name = settings.component_name
    if settings.use_typescript:
        return [f"const {name}: React.FC<{props_type_name(settings)}> = ({{ onSubmit }}) => {{"]
    return [f"const {name} = (props) => {{"]


def footer_fragment(settings: GenerationSettings) -> List[str]:
    return ["};", "", f"export default {settings.component_name};"]


# ── Base template ─────────────────────────────────────────────────────────────

class NodeTemplate:
    """
    Base class — subclass and override the hooks you need.
    All hooks default to emitting nothing.
    """

    def state_declaration(
        self, node: Node, graph: "NormalizedGraph", settings: GenerationSettings
    ) -> List[str]:
        return []

    def handler_declaration(
        self, node: Node, graph: "NormalizedGraph", settings: GenerationSettings
    ) -> List[str]:
        return []

    def emit_markup(
        self,
        node: Node,
        graph: "NormalizedGraph",
        settings: GenerationSettings,
        writer: CodeWriter,
    ) -> None:
        pass


# ── Input ─────────────────────────────────────────────────────────────────────

class InputNodeTemplate(NodeTemplate):
    """A labelled form field, bound to a useState pair when hooks are on."""

    def state_declaration(self, node, graph, settings):
        type_arg = "<string>" if settings.use_typescript else ""
        return [
            f"const [{graph.name_of(node)}, {graph.setter_of(node)}] = "
            f'useState{type_arg}("");'
        ]

    def emit_markup(self, node, graph, settings, writer):
        label = node.attributes.label
        placeholder = label.lower() if label else "input"

        writer.writeln(f'<div className="{FIELD_CLASS}">').push()
        writer.writeln(f'<label className="{LABEL_CLASS}">').push()
        writer.writeln(jsx_text(label or "Input"))
        writer.pop().writeln("</label>")
        writer.writeln("<input").push()
        writer.writeln(f'type="{input_control_type(node.attributes.data_type)}"')
        if settings.use_hooks:
            writer.writeln(f"value={{{graph.name_of(node)}}}")
            writer.writeln(f"onChange={{(e) => {graph.setter_of(node)}(e.target.value)}}")
        writer.writeln(f'className="{INPUT_CLASS}"')
        writer.writeln(f'placeholder="Enter {jsx_attr(placeholder)}"')
        writer.pop().writeln("/>")
        writer.pop().writeln("</div>")


# ── Process ───────────────────────────────────────────────────────────────────

class ProcessNodeTemplate(NodeTemplate):
    """A memoised single-argument handler; email nodes get a format guard."""

    def handler_declaration(self, node, graph, settings):
        param = "input: string" if settings.use_typescript else "input"
        w = CodeWriter()
        w.blank()
        w.writeln(f"const {graph.name_of(node)} = useCallback(({param}) => {{").push()
        w.comment(node.attributes.description or DEFAULT_DESCRIPTION)
        if node.attributes.data_type == DataType.EMAIL.value:
            w.writeln(f"const emailRegex = {EMAIL_PATTERN};")
            w.writeln("if (!emailRegex.test(input)) {").push()
            w.writeln("throw new Error('Invalid email format');")
            w.pop().writeln("}")
            w.writeln("return input.toLowerCase().trim();")
        else:
            w.writeln("return input.trim();")
        w.pop().writeln("}, []);")
        return w.lines()


# ── Output ────────────────────────────────────────────────────────────────────

class OutputNodeTemplate(NodeTemplate):
    """A static result panel; no value is bound to it."""

    def emit_markup(self, node, graph, settings, writer):
        heading = jsx_text(node.attributes.label or "Output")
        writer.writeln(f'<div className="{OUTPUT_CLASS}">').push()
        name = one_line(graph.display_name_of(node)).replace("*/", "* /")
        writer.writeln(f"{{/* {name} */}}")
        writer.writeln(f'<h3 className="{OUTPUT_HEADING_CLASS}">{heading}:</h3>')
        writer.writeln(f'<p className="{OUTPUT_TEXT_CLASS}">{OUTPUT_PLACEHOLDER}</p>')
        writer.pop().writeln("</div>")


# ── Datastore ─────────────────────────────────────────────────────────────────

class DatastoreNodeTemplate(NodeTemplate):
    """Datastores are design-time annotations; they emit no code."""


TEMPLATE_REGISTRY: Dict[NodeKind, NodeTemplate] = {
    NodeKind.INPUT: InputNodeTemplate(),
    NodeKind.PROCESS: ProcessNodeTemplate(),
    NodeKind.OUTPUT: OutputNodeTemplate(),
    NodeKind.DATASTORE: DatastoreNodeTemplate(),
}


def get_template(kind: NodeKind) -> NodeTemplate:
    return TEMPLATE_REGISTRY.get(kind, NodeTemplate())
