"""Tab-aligned terminal output for verification reports."""

from __future__ import annotations

from typing import Callable

import click

from .verifier import FunctionReport, PackageReport

FAILURE_MESSAGE = "packages failed to meet minimum coverage"


def _percent(value: float) -> str:
    return f"{value:.2f}"


def package_row(report: PackageReport) -> list[str]:
    return [
        f"pkg  {report.name}",
        f"coverage {_percent(report.percent)}% ",
        f"minimum {_percent(report.minimum)}% ",
        "statements",
        f"{report.executed_count}/{report.statement_count}",
    ]


def function_row(report: FunctionReport) -> list[str]:
    return [
        f"func {report.name}",
        f"coverage {_percent(report.percent)}% ",
        "",
        "statements",
        f"{report.executed_count}/{report.statement_count}",
    ]


def align_rows(rows: list[list[str]], *, padding: int = 1) -> list[str]:
    """Pad every cell to the widest cell of its column, like a tab writer."""

    widths: list[int] = []
    for row in rows:
        for index, cell in enumerate(row[:-1]):
            if index == len(widths):
                widths.append(0)
            widths[index] = max(widths[index], len(cell))
    lines = []
    for row in rows:
        cells = [cell.ljust(widths[index] + padding) for index, cell in enumerate(row[:-1])]
        lines.append("".join(cells) + (row[-1] if row else ""))
    return lines


class TabReporter:
    """Buffers report rows and writes them aligned when flushed.

    Source listings break the alignment run: pending rows are flushed before
    the listing is written untouched.
    """

    def __init__(self, echo: Callable[[str], None] = click.echo) -> None:
        self._echo = echo
        self._rows: list[list[str]] = []

    def __call__(self, report: PackageReport) -> None:
        self._rows.append(package_row(report))
        for function in report.functions:
            self._rows.append(function_row(function))
            if function.source is not None:
                self.flush()
                self._echo(function.source)
        if report.functions:
            self._rows.append([""])

    def write(self, text: str) -> None:
        self.flush()
        self._echo(text)

    def flush(self) -> None:
        for line in align_rows(self._rows):
            self._echo(line.rstrip())
        self._rows = []

    def __enter__(self) -> "TabReporter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.flush()


__all__ = ["FAILURE_MESSAGE", "TabReporter", "align_rows", "function_row", "package_row"]
