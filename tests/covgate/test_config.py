"""Tests for the YAML threshold configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from covgate import config as config_module
from covgate.config import (
    ConfigFile,
    ConfigPackage,
    dump_config,
    load_config,
    parse_config,
    read_config_file,
    write_config,
)
from covgate.errors import ConfigError


def test_parse_config_reads_global_and_package_minimums() -> None:
    config = parse_config(
        "min_coverage_percentage: 50\n"
        "packages:\n"
        "  - name: example.com/mod/pkg\n"
        "    min_coverage_percentage: 80\n"
        "  - name: example.com/mod/other\n"
    )

    assert config == ConfigFile(
        min_coverage_percentage=50,
        packages=(ConfigPackage("example.com/mod/pkg", 80), ConfigPackage("example.com/mod/other", 0)),
    )
    assert config.get_package("example.com/mod/pkg").min_coverage_percentage == 80
    assert config.get_package("missing") is None


@pytest.mark.parametrize("text", [None, "", "   \n", "# only a comment\n"])
def test_parse_config_without_content_is_no_config(text) -> None:
    assert parse_config(text) is None


@pytest.mark.parametrize(
    "text",
    [
        "meow",
        "- a\n- b\n",
        "packages: foo\n",
        "packages:\n  - min_coverage_percentage: 10\n",
        "packages:\n  - name: foo\n    min_coverage_percentage: lots\n",
        "packages:\n  - name: foo\n    min_coverage_percentage: 101\n",
        "min_coverage_percentage: true\n",
        "packages: [\n",
    ],
)
def test_parse_config_rejects_malformed_documents(text: str) -> None:
    with pytest.raises(ConfigError):
        parse_config(text)


def test_read_config_file_defaults_to_dot_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert read_config_file() is None

    (tmp_path / ".covgate.yml").write_text("min_coverage_percentage: 5\n", encoding="utf-8")
    assert load_config() == ConfigFile(min_coverage_percentage=5)


def test_read_config_file_requires_explicit_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        read_config_file(tmp_path / "missing.yml")


def test_dump_and_write_config(tmp_path: Path) -> None:
    config = ConfigFile.pinned({"b/pkg": 12.5, "a/pkg": 100.0})

    payload = yaml.safe_load(dump_config(config))
    assert payload == {
        "min_coverage_percentage": 0.0,
        "packages": [
            {"name": "a/pkg", "min_coverage_percentage": 100.0},
            {"name": "b/pkg", "min_coverage_percentage": 12.5},
        ],
    }

    target = write_config(config, tmp_path / "out.yml")
    assert load_config(target) == config


def test_default_config_path_is_relative() -> None:
    assert config_module.DEFAULT_CONFIG_PATH == Path(".covgate.yml")
