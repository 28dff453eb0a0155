"""Tests for Go source discovery."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from covgate.files import files_for_path, resolve_source_path, split_skip_dirs


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("package p\n", encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    for name in (
        "main.go",
        "main_test.go",
        "README.md",
        "pkg/util.go",
        "pkg/util_test.go",
        "pkg/inner/deep.go",
        "vendor/dep/dep.go",
        "testdata/fixture.go",
    ):
        _touch(tmp_path / name)
    return tmp_path


def test_resolve_source_path_defaults_to_recursive_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert resolve_source_path(None) == os.path.join(os.getcwd(), "...")
    assert resolve_source_path("pkg") == os.path.join(os.getcwd(), "pkg")


def test_split_skip_dirs() -> None:
    assert split_skip_dirs("vendor, testdata,,") == ("vendor", "testdata")
    assert split_skip_dirs("") == ()


def test_recursive_walk_skips_tests_and_skip_dirs(project: Path) -> None:
    files = files_for_path(str(project / "..."), ("vendor", "testdata"))

    assert [path.relative_to(project).as_posix() for path in files] == [
        "main.go",
        "pkg/inner/deep.go",
        "pkg/util.go",
    ]


def test_single_directory_is_not_walked(project: Path) -> None:
    files = files_for_path(str(project / "pkg"))

    assert [path.name for path in files] == ["util.go"]


def test_missing_directory_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        files_for_path(str(tmp_path / "nope" / "..."))


def test_file_is_not_a_directory(project: Path) -> None:
    with pytest.raises(NotADirectoryError):
        files_for_path(str(project / "main.go"))
