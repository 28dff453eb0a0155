"""Verify package coverage against configured minimums."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping

from .aggregator import PackageCoverage, truncate_percent
from .annotate import render_source
from .config import ConfigFile, ConfigPackage
from .correlator import FunctionCoverage
from .errors import CoverageLookupError
from .logging_config import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class FunctionReport:
    name: str
    percent: float
    executed_count: int
    statement_count: int
    source: str | None = None


@dataclass(frozen=True)
class PackageReport:
    """Outcome for one package, in the order it was evaluated."""

    name: str
    percent: float
    minimum: float
    executed_count: int
    statement_count: int
    passed: bool
    functions: tuple[FunctionReport, ...] = ()


@dataclass(frozen=True)
class VerificationResult:
    packages: tuple[PackageReport, ...] = field(default_factory=tuple)

    @property
    def passed(self) -> bool:
        return all(report.passed for report in self.packages)

    @property
    def failed(self) -> tuple[PackageReport, ...]:
        return tuple(report for report in self.packages if not report.passed)


def _read_source(path: str) -> bytes:
    return Path(path).read_bytes()


class ThresholdVerifier:
    """Evaluates every package and reports each one before deciding the outcome.

    ``out`` receives each :class:`PackageReport` as soon as it is complete, so
    a caller printing reports sees every package even when some fail.
    """

    def __init__(
        self,
        *,
        default_minimum: float = 0.0,
        print_functions: bool = False,
        print_source: bool = False,
        out: Callable[[PackageReport], None] | None = None,
        source_reader: Callable[[str], bytes] = _read_source,
        color: bool = True,
    ) -> None:
        self.default_minimum = default_minimum
        self.print_source = print_source
        self.print_functions = print_functions or print_source
        self.out = out
        self.source_reader = source_reader
        self.color = color

    def resolve_minimum(self, package: str, config: ConfigFile | None) -> ConfigPackage:
        if config is None:
            return ConfigPackage(name=package, min_coverage_percentage=self.default_minimum)
        configured = config.get_package(package)
        if configured is None:
            LOGGER.debug("could not find package in config", extra={"package": package})
            return ConfigPackage(name=package, min_coverage_percentage=config.min_coverage_percentage)
        return configured

    def verify_package(
        self, package: ConfigPackage, coverages: Mapping[str, PackageCoverage] | None
    ) -> PackageReport:
        if coverages is None:
            raise CoverageLookupError("can't report coverages because coverage data is nil")
        try:
            coverage = coverages[package.name]
        except KeyError as exc:
            raise CoverageLookupError(
                f"could not get coverage for package {package.name}",
                context={"package": package.name},
            ) from exc

        functions: tuple[FunctionReport, ...] = ()
        if self.print_functions:
            functions = tuple(self._function_reports(coverage.functions))

        report = PackageReport(
            name=package.name,
            percent=coverage.percent,
            minimum=package.min_coverage_percentage,
            executed_count=coverage.executed_count,
            statement_count=coverage.statement_count,
            passed=coverage.percent >= package.min_coverage_percentage,
            functions=functions,
        )
        if self.out is not None:
            self.out(report)
        return report

    def _function_reports(self, functions: tuple[FunctionCoverage, ...]):
        for function in functions:
            if function.statement_count == 0:
                continue
            source = None
            if self.print_source:
                src = self.source_reader(function.function.source_path)
                source = render_source(function, src, color=self.color)
            yield FunctionReport(
                name=function.name,
                percent=truncate_percent(function.executed_count, function.statement_count),
                executed_count=function.executed_count,
                statement_count=function.statement_count,
                source=source,
            )

    def verify(
        self, coverages: Mapping[str, PackageCoverage], config: ConfigFile | None = None
    ) -> VerificationResult:
        """Check every package, sorted by name, and collect the reports.

        Threshold failures never stop the loop; lookup failures do.
        """

        reports = []
        for name in sorted(coverages):
            report = self.verify_package(self.resolve_minimum(name, config), coverages)
            if not report.passed:
                LOGGER.info(
                    "package below minimum coverage",
                    extra={"package": name, "percent": report.percent, "minimum": report.minimum},
                )
            reports.append(report)
        return VerificationResult(packages=tuple(reports))


__all__ = [
    "FunctionReport",
    "PackageReport",
    "ThresholdVerifier",
    "VerificationResult",
]
