"""Serialize a build graph to ninja syntax."""

from __future__ import annotations

import logging
from pathlib import Path

from eos_build.errors import EmitError
from eos_build.models import BuildStatement, Graph, RuleDefinition, Variable

logger = logging.getLogger(__name__)


def _variable(v: Variable) -> str:
    return f"{v.name} = {v.value}\n"


def _rule(r: RuleDefinition) -> str:
    return f"rule {r.name}\n  command = {r.command}\n"


def _escape(path: str) -> str:
    """Escape a path for a ninja build line."""
    return path.replace("$", "$$").replace(" ", "$ ").replace(":", "$:")


def _paths(paths: list[str]) -> str:
    return " ".join(_escape(p) for p in paths)


def _statement(s: BuildStatement) -> str:
    line = f"build {_escape(s.output)}: {s.rule} {_paths(s.inputs)}"
    if s.implicit_deps:
        line += f" | {_paths(s.implicit_deps)}"
    parts = [line + "\n"]
    for v in s.variables:
        parts.append("  " + _variable(v))
    return "".join(parts)


def render(graph: Graph) -> str:
    """Render variables, then rules, then build statements."""
    parts: list[str] = []
    parts.extend(_variable(v) for v in graph.variables)
    parts.extend(_rule(r) for r in graph.rules)
    parts.extend(_statement(s) for s in graph.statements)
    return "".join(parts)


def write_build_file(graph: Graph, path: Path = Path("build.ninja")) -> Path:
    """Write the rendered graph to ``path``, replacing whatever is there."""
    content = render(graph)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise EmitError(f"{path}: {e.strerror or e}") from e
    logger.info("wrote %s (%d statements)", path, len(graph.statements))
    return path
