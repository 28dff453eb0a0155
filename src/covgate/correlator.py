"""Match profile blocks to functions and count executed statements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .functions import Function
from .logging_config import get_logger
from .profile import Profile, ProfileBlock
from .syntax import Range

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class FunctionCoverage:
    """Statement and executed counts for one function."""

    function: Function
    statement_count: int = 0
    executed_count: int = 0
    profile: Profile | None = None

    @property
    def name(self) -> str:
        return self.function.name


def is_disjoint(block: Range, function: Range) -> bool:
    """Return ``True`` when ``block`` lies entirely before or after ``function``."""

    starts_after = block.start.line > function.end.line or (
        block.start.line == function.end.line and block.start.column >= function.end.column
    )
    if starts_after:
        return True
    return block.end.line < function.start.line or (
        block.end.line == function.start.line and block.end.column <= function.start.column
    )


def correlate(
    function: Function,
    blocks: Iterable[ProfileBlock],
    *,
    profile: Profile | None = None,
) -> FunctionCoverage:
    """Count the statements of every block overlapping ``function``.

    Overlap is enough: a block that crosses the function boundary contributes
    its whole statement count. When no block overlaps but the function has
    statements, the extracted statement count is used with nothing executed.
    """

    statement_count = 0
    executed_count = 0
    for block in blocks:
        if is_disjoint(block.range, function.body_range):
            continue
        statement_count += block.statement_count
        if block.hit_count > 0:
            executed_count += block.statement_count

    extracted = len(function.statements)
    if statement_count != extracted:
        LOGGER.debug(
            "function statement counts don't match",
            extra={"function": function.name, "profile_count": statement_count, "ast_count": extracted},
        )
        if statement_count == 0 and extracted > 0:
            statement_count = extracted

    return FunctionCoverage(
        function=function,
        statement_count=statement_count,
        executed_count=executed_count,
        profile=profile,
    )


def record_function_coverage(
    functions: Sequence[Function], profile: Profile | None
) -> list[FunctionCoverage]:
    """Correlate every function of one file against that file's profile."""

    blocks: Sequence[ProfileBlock] = profile.blocks if profile is not None else ()
    return [correlate(function, blocks, profile=profile) for function in functions]


__all__ = ["FunctionCoverage", "correlate", "is_disjoint", "record_function_coverage"]
