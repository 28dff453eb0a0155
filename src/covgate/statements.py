"""Collect the coverable statements of a Go function body."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from .errors import ElseBranchError, SyntaxTreeError
from .syntax import (
    CONTAINER_TYPES,
    BlockStmt,
    CaseClause,
    CommClause,
    ForStmt,
    IfStmt,
    LabeledStmt,
    Range,
    RangeStmt,
    SelectStmt,
    SimpleStmt,
    Stmt,
    SwitchStmt,
    TypeSwitchStmt,
)

ELSE_KEYWORD = "else "
BACKUP_TO_ELSE = len(ELSE_KEYWORD)


def repair_else(alternative: Stmt) -> BlockStmt:
    """Return the container covering an ``else`` branch, starting at the keyword.

    The syntax tree does not record where ``else`` sits, so the branch start
    is moved back by the width of ``"else "``. An ``else if`` is wrapped in a
    synthetic block holding only the nested ``if``.
    """

    if isinstance(alternative, IfStmt):
        start = alternative.range.start.shifted(-BACKUP_TO_ELSE)
        return BlockStmt(range=Range(start, alternative.range.end), body=(alternative,))
    if isinstance(alternative, BlockStmt):
        start = alternative.range.start.shifted(-BACKUP_TO_ELSE)
        return replace(alternative, range=Range(start, alternative.range.end))
    raise ElseBranchError(
        "unexpected node type for if statement alternative",
        context={"node": type(alternative).__name__, "range": str(alternative.range)},
    )


def _require_block(block: BlockStmt | None, owner: Stmt) -> BlockStmt:
    if block is None:
        raise SyntaxTreeError(
            f"{type(owner).__name__} is missing its body block",
            context={"range": str(owner.range)},
        )
    return block


class StatementCollector:
    """Walks a statement tree and records coverable statements in source order."""

    def __init__(self) -> None:
        self.statements: list[Stmt] = []

    def collect(self, stmt: Stmt | None) -> None:
        if stmt is None:
            return
        if isinstance(stmt, CONTAINER_TYPES):
            self._collect_children(stmt.body)
        else:
            self._descend(stmt)

    def _collect_children(self, children: Sequence[Stmt]) -> None:
        for child in children:
            # containers are transparent, only their children count
            if not isinstance(child, CONTAINER_TYPES):
                self.statements.append(child)
            self.collect(child)

    def _descend(self, stmt: Stmt) -> None:
        if isinstance(stmt, IfStmt):
            self.collect(stmt.init)
            self.collect(_require_block(stmt.body, stmt))
            if stmt.else_ is not None:
                self.collect(repair_else(stmt.else_))
        elif isinstance(stmt, ForStmt):
            self.collect(stmt.init)
            self.collect(stmt.post)
            self.collect(_require_block(stmt.body, stmt))
        elif isinstance(stmt, (RangeStmt, SelectStmt)):
            self.collect(_require_block(stmt.body, stmt))
        elif isinstance(stmt, SwitchStmt):
            self.collect(stmt.init)
            self.collect(_require_block(stmt.body, stmt))
        elif isinstance(stmt, TypeSwitchStmt):
            self.collect(stmt.init)
            self.collect(stmt.assign)
            self.collect(_require_block(stmt.body, stmt))
        elif isinstance(stmt, LabeledStmt):
            self.collect(stmt.stmt)
        elif not isinstance(stmt, SimpleStmt):
            raise SyntaxTreeError(
                "unknown statement node", context={"node": type(stmt).__name__}
            )


def collect_statements(body: BlockStmt | CaseClause | CommClause | None) -> list[Range]:
    """Return the ranges of the coverable statements inside ``body``.

    ``body`` is required: a function without a body block is malformed input
    rather than a function with no statements.
    """

    if body is None:
        raise SyntaxTreeError("block statement was nil")
    collector = StatementCollector()
    collector.collect(body)
    return [stmt.range for stmt in collector.statements]


__all__ = [
    "BACKUP_TO_ELSE",
    "ELSE_KEYWORD",
    "StatementCollector",
    "collect_statements",
    "repair_else",
]
