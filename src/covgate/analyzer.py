"""Build per-package function coverage from a profile and project sources."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

from .correlator import FunctionCoverage, record_function_coverage
from .functions import collect_functions
from .logging_config import get_logger
from .packages import PackageResolver
from .profile import Profile, load_profiles
from .syntax import SourceFile

LOGGER = get_logger(__name__)


def _default_parse_source(path: Path | str) -> SourceFile:
    from .goparser import parse_file

    return parse_file(path)


def map_packages_to_functions(
    profiles: Iterable[Profile],
    project_files: Iterable[Path | str],
    resolver: PackageResolver,
    *,
    parse_source: Callable[[Path | str], SourceFile] = _default_parse_source,
) -> dict[str, list[FunctionCoverage]]:
    """Correlate every function of ``project_files`` with its profile.

    Profiles are keyed by ``<import path>/<file name>``, the form ``go test``
    writes. Files without a profile still produce function records. Any error
    aborts the whole mapping.
    """

    by_file_name = {profile.file_name: profile for profile in profiles}
    package_to_functions: dict[str, list[FunctionCoverage]] = {}

    for file_path in project_files:
        source = parse_source(file_path)
        functions = collect_functions(source)
        package = resolver.package_for_file(file_path)

        profile_key = f"{package}/{Path(file_path).name}"
        profile = by_file_name.get(profile_key)
        if profile is None:
            LOGGER.debug("no profile found for path", extra={"profile_key": profile_key})

        coverages = record_function_coverage(functions, profile)
        package_to_functions.setdefault(package, []).extend(coverages)

    LOGGER.debug("mapped packages to functions", extra={"packages": sorted(package_to_functions)})
    return package_to_functions


def analyze_profile(
    profile_path: Path | str,
    project_files: Iterable[Path | str],
    resolver: PackageResolver | None = None,
    *,
    parse_source: Callable[[Path | str], SourceFile] = _default_parse_source,
) -> dict[str, list[FunctionCoverage]]:
    """Load the profile at ``profile_path`` and map it onto ``project_files``."""

    return map_packages_to_functions(
        load_profiles(profile_path),
        project_files,
        resolver or PackageResolver(),
        parse_source=parse_source,
    )


__all__ = ["analyze_profile", "map_packages_to_functions"]
