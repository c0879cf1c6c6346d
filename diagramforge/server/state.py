"""
DiagramStore — in-memory graph store behind the REST and socket layers.

Keeps saved diagrams and the code generated from them, keyed by integer ids
that start at 1.  Nothing is persisted across restarts.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DiagramRecord:
    id: int
    name: str
    nodes: List[Dict[str, Any]]
    connections: List[Dict[str, Any]]
    settings: Dict[str, Any]
    created_at: datetime = field(default_factory=_now)


@dataclass
class GeneratedCodeRecord:
    id: int
    diagram_id: Optional[int]
    code: str
    component_name: str
    language: str = "typescript"
    source_type: str = "diagram"
    created_at: datetime = field(default_factory=_now)


_UPDATABLE = ("name", "nodes", "connections", "settings")


class DiagramStore:
    """Holds every diagram and generated-code record for this process."""

    def __init__(self) -> None:
        self._diagrams: Dict[int, DiagramRecord] = {}
        self._generated: Dict[int, GeneratedCodeRecord] = {}
        self._next_diagram_id = 1
        self._next_code_id = 1

    # ── Diagrams ────────────────────────────────────────────────────────────

    def create_diagram(
        self,
        name: str,
        nodes: List[Dict[str, Any]],
        connections: List[Dict[str, Any]],
        settings: Dict[str, Any],
    ) -> DiagramRecord:
        record = DiagramRecord(
            id=self._next_diagram_id,
            name=name,
            nodes=nodes,
            connections=connections,
            settings=settings,
        )
        self._diagrams[record.id] = record
        self._next_diagram_id += 1
        return record

    def get_diagram(self, diagram_id: int) -> Optional[DiagramRecord]:
        return self._diagrams.get(diagram_id)

    def list_diagrams(self) -> List[DiagramRecord]:
        return list(self._diagrams.values())

    def update_diagram(self, diagram_id: int, **changes: Any) -> Optional[DiagramRecord]:
        """Apply a partial update; unknown or None-valued fields are ignored."""
        existing = self._diagrams.get(diagram_id)
        if existing is None:
            return None
        updates = {k: v for k, v in changes.items() if k in _UPDATABLE and v is not None}
        updated = replace(existing, **updates)
        self._diagrams[diagram_id] = updated
        return updated

    def delete_diagram(self, diagram_id: int) -> bool:
        return self._diagrams.pop(diagram_id, None) is not None

    # ── Generated code ──────────────────────────────────────────────────────

    def create_generated_code(
        self,
        code: str,
        component_name: str,
        diagram_id: Optional[int] = None,
        language: str = "typescript",
        source_type: str = "diagram",
    ) -> GeneratedCodeRecord:
        record = GeneratedCodeRecord(
            id=self._next_code_id,
            diagram_id=diagram_id,
            code=code,
            component_name=component_name,
            language=language or "typescript",
            source_type=source_type or "diagram",
        )
        self._generated[record.id] = record
        self._next_code_id += 1
        return record

    def get_generated_code_by_diagram(self, diagram_id: int) -> Optional[GeneratedCodeRecord]:
        """Most recent code generated for *diagram_id*, if any."""
        matches = [c for c in self._generated.values() if c.diagram_id == diagram_id]
        return matches[-1] if matches else None
