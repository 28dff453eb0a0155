"""Shared pytest fixtures for the covgate tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests.helpers.go_project import write_project


@pytest.fixture
def go_project(tmp_path: Path) -> Path:
    """A Go module on disk with sources and a ``cover.out`` profile."""

    return write_project(tmp_path / "mod")


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
