"""Locate the Go source files whose coverage is reported."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from .logging_config import get_logger

LOGGER = get_logger(__name__)

RECURSIVE_MARKER = "..."
DEFAULT_SKIP_DIRS = ("vendor",)


def resolve_source_path(arg: str | None = None) -> str:
    """Return the absolute source path, defaulting to ``<cwd>/...``."""

    if arg:
        return os.path.abspath(arg)
    return os.path.join(os.getcwd(), RECURSIVE_MARKER)


def split_skip_dirs(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _is_source_file(path: Path) -> bool:
    return path.suffix == ".go" and not path.name.endswith("_test.go")


def files_for_path(path: str, skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS) -> list[Path]:
    """List non-test ``.go`` files under ``path``.

    A trailing ``...`` walks the tree recursively, skipping directories whose
    name is listed in ``skip_dirs``; otherwise only ``path`` itself is read.
    """

    recursive = os.path.basename(path) == RECURSIVE_MARKER
    directory = Path(os.path.dirname(path) if recursive else path)
    if not directory.exists():
        raise FileNotFoundError(f"source path {directory} does not exist")
    if not directory.is_dir():
        raise NotADirectoryError(f"path must be a directory: {directory}")

    files: list[Path] = []
    if recursive:
        ignored = set(skip_dirs)
        for root, dirnames, filenames in os.walk(directory):
            dirnames[:] = sorted(name for name in dirnames if name not in ignored)
            files.extend(Path(root) / name for name in filenames if _is_source_file(Path(name)))
    else:
        files.extend(
            entry for entry in directory.iterdir() if entry.is_file() and _is_source_file(entry)
        )

    files.sort()
    LOGGER.debug("files for path", extra={"source_path": str(directory), "count": len(files)})
    return files


__all__ = ["DEFAULT_SKIP_DIRS", "files_for_path", "resolve_source_path", "split_skip_dirs"]
