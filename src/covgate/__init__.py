"""Go statement coverage auditing."""

from __future__ import annotations

from .aggregator import PackageCoverage, PackageCoverages, aggregate, truncate_percent
from .config import ConfigFile, ConfigPackage
from .correlator import FunctionCoverage, correlate, record_function_coverage
from .functions import Function, collect_functions
from .profile import Profile, ProfileBlock, parse_profiles
from .statements import collect_statements
from .verifier import ThresholdVerifier, VerificationResult

__version__ = "0.1.0"

__all__ = [
    "ConfigFile",
    "ConfigPackage",
    "Function",
    "FunctionCoverage",
    "PackageCoverage",
    "PackageCoverages",
    "Profile",
    "ProfileBlock",
    "ThresholdVerifier",
    "VerificationResult",
    "aggregate",
    "collect_functions",
    "collect_statements",
    "correlate",
    "parse_profiles",
    "record_function_coverage",
    "truncate_percent",
]
