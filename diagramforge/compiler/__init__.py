"""
diagramforge Compiler
=====================
Converts an editor diagram into a React function-component source file.

Pipeline:
    nodes  →  [normalizer]  →  NormalizedGraph
    NormalizedGraph + settings (+ edges in "wired" mode)
           →  [emitter / markup / wiring]  →  source str

Public API
----------
    from diagramforge.compiler import generate

    source = generate(nodes, edges, settings)

generate() is pure: it never mutates its inputs, performs no I/O and returns
byte-identical output for identical inputs.  It raises ConfigurationError when
settings.component_name is empty; every other malformed input degrades into a
smaller (or, for bad identifiers, syntactically invalid) component.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

from diagramforge.core.Diagram import Edge, GenerationSettings, Node

from .deserialiser import diagram_from_dict
from .emitter import emit
from .normalizer import normalize
from .schema import ConfigurationError, SchemaError, require_component_name

logger = logging.getLogger(__name__)


def generate(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    settings: GenerationSettings,
) -> str:
    """
    Generate React component source for a diagram.

    Args:
        nodes:     Diagram nodes in editor order.
        edges:     Diagram connections.  Only read when settings.mode is WIRED.
        settings:  Component name and feature flags for this call.

    Returns:
        The complete file contents, ending with ``export default <Name>;``.

    Raises:
        ConfigurationError: If settings.component_name is missing or blank.
    """
    require_component_name(settings.component_name)
    graph = normalize(nodes)
    logger.debug(
        "generating %s (%s mode) from %s",
        settings.component_name,
        settings.mode.value,
        graph.counts(),
    )
    return emit(graph, settings, edges)


def generate_from_dict(payload: Dict[str, Any]) -> str:
    """Validate an editor payload and generate its component source."""
    nodes, edges, settings = diagram_from_dict(payload)
    return generate(nodes, edges, settings)


__all__ = ["ConfigurationError", "SchemaError", "generate", "generate_from_dict"]
