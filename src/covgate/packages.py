"""Map source directories to Go import paths."""

from __future__ import annotations

import os
from pathlib import Path
import re

from .errors import PackageResolutionError
from .logging_config import get_logger

LOGGER = get_logger(__name__)

_MODULE_RE = re.compile(r"^\s*module\s+\"?([^\s\"]+)\"?\s*$", re.MULTILINE)


def module_path(go_mod: Path) -> str:
    """Return the ``module`` directive of a ``go.mod`` file."""

    match = _MODULE_RE.search(go_mod.read_text(encoding="utf-8"))
    if match is None:
        raise PackageResolutionError(f"no module directive in {go_mod}", context={"path": str(go_mod)})
    return match.group(1)


def _default_gopath() -> Path:
    gopath = os.environ.get("GOPATH")
    if gopath:
        return Path(gopath.split(os.pathsep)[0])
    return Path.home() / "go"


class PackageResolver:
    """Resolves and caches directory to import path lookups for one run."""

    def __init__(self, *, gopath: Path | str | None = None, cache: dict[Path, str] | None = None) -> None:
        self.gopath = Path(gopath) if gopath is not None else _default_gopath()
        self.cache: dict[Path, str] = cache if cache is not None else {}

    def resolve(self, directory: Path | str) -> str:
        directory = Path(directory).resolve()
        cached = self.cache.get(directory)
        if cached is not None:
            return cached
        import_path = self._lookup(directory)
        LOGGER.debug("resolved package", extra={"directory": str(directory), "package": import_path})
        self.cache[directory] = import_path
        return import_path

    def package_for_file(self, path: Path | str) -> str:
        return self.resolve(Path(path).parent)

    def _lookup(self, directory: Path) -> str:
        for candidate in (directory, *directory.parents):
            go_mod = candidate / "go.mod"
            if go_mod.is_file():
                relative = directory.relative_to(candidate).as_posix()
                module = module_path(go_mod)
                return module if relative == "." else f"{module}/{relative}"

        gopath_src = self.gopath.resolve() / "src"
        try:
            return directory.relative_to(gopath_src).as_posix()
        except ValueError as exc:
            raise PackageResolutionError(
                f"could not determine the import path for {directory}",
                context={"directory": str(directory)},
            ) from exc


__all__ = ["PackageResolver", "module_path"]
