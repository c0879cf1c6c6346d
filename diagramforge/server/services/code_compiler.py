"""
Code compiler — validates generated component source.

The source is parsed with the tree-sitter TSX grammar through ast-grep-py.
Any ERROR node in the tree fails the compile and is reported with its line
and column.  A clean parse is written to ``<temp_dir>/<Name>.tsx`` and echoed
back as ``output``.

compile_code() never raises: every failure becomes ``success=False`` with the
message in ``error`` and a timestamped line in ``logs``.
"""
from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ast_grep_py import SgNode, SgRoot

logger = logging.getLogger(__name__)

GRAMMAR = "tsx"
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


@dataclass
class CompilationResult:
    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    logs: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


class CompilationError(Exception):
    """Raised internally when the source does not parse."""


def _stamp(message: str) -> str:
    return f"[{datetime.now().strftime('%H:%M:%S')}] {message}"


def _first_error(node: SgNode) -> Optional[SgNode]:
    """Depth-first search for the first ERROR node, in source order."""
    if node.kind() == "ERROR":
        return node
    for child in node.children():
        found = _first_error(child)
        if found is not None:
            return found
    return None


def check_syntax(code: str) -> None:
    """
    Parse *code* as TSX.

    Raises:
        CompilationError: On empty input or the first syntax error found.
    """
    if not code.strip():
        raise CompilationError("No source code to compile")
    root = SgRoot(code, GRAMMAR).root()
    error = _first_error(root)
    if error is not None:
        start = error.range().start
        snippet = " ".join(error.text().split())[:40]
        raise CompilationError(
            f"Syntax error at line {start.line + 1}, column {start.column + 1}: "
            f"unexpected '{snippet}'"
        )


def safe_filename(component_name: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("", component_name) or "Component"


def compile_code(
    code: str,
    component_name: str,
    temp_dir: Union[str, Path] = "temp",
) -> CompilationResult:
    logs: List[str] = [_stamp(f"Starting compilation for {component_name}...")]
    try:
        check_syntax(code)
        logs.append(_stamp("TypeScript syntax check successful"))
        logs.append(_stamp(f"Component {component_name} generated successfully"))

        out_dir = Path(temp_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / f"{safe_filename(component_name)}.tsx"
        out_path.write_text(code, encoding="utf-8")
        logs.append(_stamp(f"Code written to temporary file: {out_path}"))
        logs.append(_stamp("✓ Component ready for testing"))

        return CompilationResult(success=True, output=code, logs=logs)
    except (CompilationError, OSError) as exc:
        logger.warning("compilation of %s failed: %s", component_name, exc)
        logs.append(_stamp(f"❌ Compilation failed: {exc}"))
        return CompilationResult(success=False, error=str(exc), logs=logs)
