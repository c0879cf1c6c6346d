from .Diagram import Edge, GenerationSettings, Node, NodeAttributes, Position
from .Types import DataType, GenerationMode, NodeKind

__all__ = [
    "DataType",
    "Edge",
    "GenerationMode",
    "GenerationSettings",
    "Node",
    "NodeAttributes",
    "NodeKind",
    "Position",
]
