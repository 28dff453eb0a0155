"""Tests for the profile to package pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from covgate.aggregator import aggregate
from covgate.analyzer import analyze_profile, map_packages_to_functions
from covgate.errors import PackageResolutionError, ProfileFormatError
from covgate.files import files_for_path
from covgate.packages import PackageResolver
from covgate.profile import parse_profiles
from tests.helpers.go_project import MODULE, PROFILE, fake_parse_source


def test_analyze_profile_maps_functions_to_packages(go_project: Path) -> None:
    files = files_for_path(str(go_project / "..."))

    package_functions = analyze_profile(
        go_project / "cover.out",
        files,
        PackageResolver(gopath=go_project / "gopath"),
        parse_source=fake_parse_source,
    )

    assert sorted(package_functions) == [f"{MODULE}/other", f"{MODULE}/pkg"]
    pkg = {item.name: item for item in package_functions[f"{MODULE}/pkg"]}
    assert (pkg["Covered"].statement_count, pkg["Covered"].executed_count) == (1, 1)
    assert (pkg["Missed"].statement_count, pkg["Missed"].executed_count) == (3, 0)
    assert pkg["Covered"].profile is not None
    assert pkg["Covered"].profile.file_name == f"{MODULE}/pkg/covered.go"

    # no profile for the file: the extracted statements count as unexecuted
    (other,) = package_functions[f"{MODULE}/other"]
    assert (other.statement_count, other.executed_count, other.profile) == (1, 0, None)

    coverages = aggregate(package_functions)
    assert coverages[f"{MODULE}/pkg"].percent == 25.0
    assert coverages[f"{MODULE}/other"].percent == 0.0


def test_map_packages_to_functions_without_files() -> None:
    assert map_packages_to_functions(parse_profiles(PROFILE), [], PackageResolver()) == {}


def test_unresolvable_package_aborts_the_run(tmp_path: Path) -> None:
    stray = tmp_path / "stray" / "pkg" / "covered.go"
    stray.parent.mkdir(parents=True)
    stray.write_text("package pkg\n", encoding="utf-8")

    with pytest.raises(PackageResolutionError):
        map_packages_to_functions(
            parse_profiles(PROFILE),
            [stray],
            PackageResolver(gopath=tmp_path / "gopath"),
            parse_source=fake_parse_source,
        )


def test_malformed_profile_aborts_before_parsing_sources(go_project: Path) -> None:
    (go_project / "cover.out").write_text("mode: set\nnot a block\n", encoding="utf-8")
    parsed: list[Path] = []

    def _parse(path):
        parsed.append(path)
        return fake_parse_source(path)

    with pytest.raises(ProfileFormatError):
        analyze_profile(go_project / "cover.out", files_for_path(str(go_project / "...")), parse_source=_parse)
    assert parsed == []
