"""Application specific exception hierarchy."""

from __future__ import annotations

from typing import Any


class CovgateError(RuntimeError):
    """Base exception that carries structured context."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class SyntaxTreeError(CovgateError):
    """Raised when a syntax tree is missing a node its grammar requires."""


class ElseBranchError(SyntaxTreeError):
    """Raised when an ``if`` alternative is neither a block nor another ``if``."""


class SourceParseError(CovgateError):
    """Raised when a Go source file cannot be parsed."""


class ProfileFormatError(CovgateError):
    """Raised when a coverage profile does not match the expected format."""


class ConfigError(CovgateError):
    """Raised when the configuration file is missing or malformed."""


class PackageResolutionError(CovgateError):
    """Raised when a source directory cannot be mapped to an import path."""


class CoverageLookupError(CovgateError):
    """Raised when coverage data is requested for an unknown package."""


class GoTestError(CovgateError):
    """Raised when ``go test`` fails to produce a coverage profile."""


__all__ = [
    "CovgateError",
    "SyntaxTreeError",
    "ElseBranchError",
    "SourceParseError",
    "ProfileFormatError",
    "ConfigError",
    "PackageResolutionError",
    "CoverageLookupError",
    "GoTestError",
]
