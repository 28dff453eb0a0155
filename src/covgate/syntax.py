"""Positions and the Go statement tree consumed by the statement extractor.

The tree is a closed union of frozen dataclasses. Only the statement kinds
whose coverable parts need structural descent get their own node type; every
other statement is a :class:`SimpleStmt` tagged with its grammar kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, order=True)
class Position:
    """A 1-based ``(line, column)`` source position with byte columns."""

    line: int
    column: int

    def shifted(self, columns: int) -> "Position":
        return Position(self.line, max(1, self.column + columns))

    def __str__(self) -> str:
        return f"{self.line}.{self.column}"


@dataclass(frozen=True)
class Range:
    """Half-open source range, ``end`` points just past the last byte."""

    start: Position
    end: Position

    def contains(self, other: "Range") -> bool:
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{self.start},{self.end}"


@dataclass(frozen=True)
class BlockStmt:
    range: Range
    body: tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class CaseClause:
    range: Range
    body: tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class CommClause:
    range: Range
    body: tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class IfStmt:
    range: Range
    body: BlockStmt | None
    init: Stmt | None = None
    else_: Stmt | None = None


@dataclass(frozen=True)
class ForStmt:
    range: Range
    body: BlockStmt | None
    init: Stmt | None = None
    post: Stmt | None = None


@dataclass(frozen=True)
class RangeStmt:
    range: Range
    body: BlockStmt | None


@dataclass(frozen=True)
class SwitchStmt:
    range: Range
    body: BlockStmt | None
    init: Stmt | None = None


@dataclass(frozen=True)
class TypeSwitchStmt:
    range: Range
    body: BlockStmt | None
    init: Stmt | None = None
    assign: Stmt | None = None


@dataclass(frozen=True)
class SelectStmt:
    range: Range
    body: BlockStmt | None


@dataclass(frozen=True)
class LabeledStmt:
    range: Range
    stmt: Stmt | None = None


@dataclass(frozen=True)
class SimpleStmt:
    """Any statement without coverable sub-statements (assignments, calls, ...)."""

    range: Range
    kind: str = "expression_statement"


Stmt = Union[
    BlockStmt,
    CaseClause,
    CommClause,
    IfStmt,
    ForStmt,
    RangeStmt,
    SwitchStmt,
    TypeSwitchStmt,
    SelectStmt,
    LabeledStmt,
    SimpleStmt,
]

CONTAINER_TYPES = (BlockStmt, CaseClause, CommClause)


@dataclass(frozen=True)
class FuncDecl:
    """A function or method declaration; ``body`` is ``None`` for external functions."""

    name: str
    range: Range
    body: BlockStmt | None
    start_offset: int = 0
    end_offset: int = 0


@dataclass(frozen=True)
class SourceFile:
    path: str
    functions: tuple[FuncDecl, ...] = ()


__all__ = [
    "BlockStmt",
    "CONTAINER_TYPES",
    "CaseClause",
    "CommClause",
    "ForStmt",
    "FuncDecl",
    "IfStmt",
    "LabeledStmt",
    "Position",
    "Range",
    "RangeStmt",
    "SelectStmt",
    "SimpleStmt",
    "SourceFile",
    "Stmt",
    "SwitchStmt",
    "TypeSwitchStmt",
]
