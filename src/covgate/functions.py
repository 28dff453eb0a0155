"""Function records extracted from a parsed Go source file."""

from __future__ import annotations

from dataclasses import dataclass

from .logging_config import get_logger
from .statements import collect_statements
from .syntax import FuncDecl, Range, SourceFile

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class Function:
    """A function declaration and its coverable statements.

    ``body_range`` spans the whole declaration, from the ``func`` keyword to
    the closing brace; it is the range matched against profile blocks.
    """

    name: str
    source_path: str
    body_range: Range
    statements: tuple[Range, ...] = ()
    start_offset: int = 0
    end_offset: int = 0


def function_from_decl(decl: FuncDecl, source_path: str) -> Function:
    statements = collect_statements(decl.body)
    LOGGER.debug(
        "statements for function",
        extra={"function": decl.name, "statement_count": len(statements)},
    )
    return Function(
        name=decl.name,
        source_path=source_path,
        body_range=decl.range,
        statements=tuple(statements),
        start_offset=decl.start_offset,
        end_offset=decl.end_offset,
    )


def collect_functions(source: SourceFile) -> list[Function]:
    """Return a :class:`Function` for every declaration in ``source``."""

    functions = [function_from_decl(decl, source.path) for decl in source.functions]
    LOGGER.debug("found functions", extra={"path": source.path, "count": len(functions)})
    return functions


__all__ = ["Function", "collect_functions", "function_from_decl"]
