from enum import Enum
from typing import Optional


class NodeKind(Enum):
    INPUT = "input"
    PROCESS = "process"
    OUTPUT = "output"
    DATASTORE = "datastore"

    @staticmethod
    def parse(value: str) -> "NodeKind":
        try:
            return NodeKind(value)
        except ValueError:
            raise ValueError(f"unknown node kind '{value}'") from None


class DataType(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    EMAIL = "email"

    @staticmethod
    def lookup(value: Optional[str]) -> Optional["DataType"]:
        """Return the matching DataType, or None for unrecognised strings."""
        if value is None:
            return DataType.STRING
        try:
            return DataType(value)
        except ValueError:
            return None


class GenerationMode(Enum):
    FLAT = "flat"    # group by kind only, edges ignored
    WIRED = "wired"  # trigger calls follow edges
