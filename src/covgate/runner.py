"""Run ``go test`` to produce a coverage profile."""

from __future__ import annotations

import os
from pathlib import Path
import subprocess
import tempfile
import threading
from typing import IO, Callable, Sequence

import click

from .errors import GoTestError
from .files import RECURSIVE_MARKER
from .logging_config import get_logger

LOGGER = get_logger(__name__)


def _drain(stream: IO[str], echo: Callable[[str], None]) -> None:
    with stream:
        for line in stream:
            echo(line.rstrip("\n"))


def go_test_command(
    profile_path: Path, package_pattern: str, go_binary: str = "go", extra_args: Sequence[str] = ()
) -> list[str]:
    return [go_binary, "test", f"-coverprofile={profile_path}", *extra_args, package_pattern]


def _package_pattern(src_path: str) -> tuple[Path, str]:
    if os.path.basename(src_path) == RECURSIVE_MARKER:
        return Path(os.path.dirname(src_path)), f".{os.sep}{RECURSIVE_MARKER}"
    return Path(src_path), "."


def run_tests(
    src_path: str,
    *,
    echo: Callable[[str], None] = click.echo,
    go_binary: str = "go",
    extra_args: Sequence[str] = (),
) -> Path:
    """Run the package tests under ``src_path`` and return the profile path.

    Test output is echoed line by line while the process runs; stdout and
    stderr are drained on separate threads so neither pipe can fill up. The
    caller owns the returned file and must delete it.
    """

    workdir, pattern = _package_pattern(src_path)
    handle, name = tempfile.mkstemp(prefix="covgate-", suffix=".out")
    os.close(handle)
    profile_path = Path(name)
    command = go_test_command(profile_path, pattern, go_binary, extra_args)
    LOGGER.debug("running tests", extra={"command": command, "cwd": str(workdir)})

    try:
        process = subprocess.Popen(
            command,
            cwd=workdir,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as exc:
        profile_path.unlink(missing_ok=True)
        raise GoTestError(f"could not start {go_binary}", context={"command": command}) from exc

    readers = [
        threading.Thread(target=_drain, args=(process.stdout, echo), daemon=True),
        threading.Thread(target=_drain, args=(process.stderr, echo), daemon=True),
    ]
    for reader in readers:
        reader.start()
    try:
        returncode = process.wait()
    except BaseException:
        process.kill()
        process.wait()
        profile_path.unlink(missing_ok=True)
        raise
    finally:
        for reader in readers:
            reader.join()

    if returncode != 0:
        profile_path.unlink(missing_ok=True)
        raise GoTestError(
            f"go test exited with status {returncode}",
            context={"command": command, "returncode": returncode},
        )
    return profile_path


__all__ = ["run_tests", "go_test_command"]
