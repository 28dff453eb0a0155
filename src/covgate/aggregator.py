"""Roll function coverage up to package coverage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping, Sequence

from .correlator import FunctionCoverage
from .errors import CoverageLookupError


def truncate_percent(executed: int, total: int) -> float:
    """Return ``executed / total`` as a percentage truncated to two decimals.

    Zero of zero is 100%: code with nothing to cover is trivially covered.
    """

    if executed == 0 and total == 0:
        return 100.0
    if total <= 0:
        raise ValueError(f"cannot compute coverage of {executed} executed over {total} statements")
    return (executed * 10000 // total) / 100


@dataclass(frozen=True)
class PackageCoverage:
    statement_count: int
    executed_count: int
    percent: float
    functions: tuple[FunctionCoverage, ...] = ()


class PackageCoverages(Mapping[str, PackageCoverage]):
    """Read-only mapping of package import path to :class:`PackageCoverage`."""

    def __init__(self, coverages: Mapping[str, PackageCoverage] | None = None) -> None:
        self._coverages = dict(coverages or {})

    def __getitem__(self, key: str) -> PackageCoverage:
        return self._coverages[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._coverages)

    def __len__(self) -> int:
        return len(self._coverages)

    def coverage(self, package: str) -> PackageCoverage:
        try:
            return self._coverages[package]
        except KeyError as exc:
            raise CoverageLookupError(
                f"could not get coverage for package {package}", context={"package": package}
            ) from exc


def aggregate_package(functions: Sequence[FunctionCoverage]) -> PackageCoverage:
    statement_count = sum(function.statement_count for function in functions)
    executed_count = sum(function.executed_count for function in functions)
    return PackageCoverage(
        statement_count=statement_count,
        executed_count=executed_count,
        percent=truncate_percent(executed_count, statement_count),
        functions=tuple(functions),
    )


def aggregate(package_functions: Mapping[str, Sequence[FunctionCoverage]]) -> PackageCoverages:
    """Sum function counts per package and compute each package's percentage."""

    return PackageCoverages(
        {package: aggregate_package(functions) for package, functions in package_functions.items()}
    )


__all__ = [
    "PackageCoverage",
    "PackageCoverages",
    "aggregate",
    "aggregate_package",
    "truncate_percent",
]
