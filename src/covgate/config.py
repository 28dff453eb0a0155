"""Loading and writing the coverage threshold configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigError
from .logging_config import get_logger

DEFAULT_CONFIG_PATH = Path(".covgate.yml")

LOGGER = get_logger(__name__)


def _coerce_percentage(value: Any, *, where: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ConfigError(f"{where} must be a number", context={"value": value})
    try:
        percentage = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{where} must be a number", context={"value": value}) from exc
    if not 0.0 <= percentage <= 100.0:
        raise ConfigError(f"{where} must be between 0 and 100", context={"value": percentage})
    return percentage


@dataclass(frozen=True)
class ConfigPackage:
    name: str
    min_coverage_percentage: float = 0.0

    @classmethod
    def from_mapping(cls, payload: Any) -> "ConfigPackage":
        if not isinstance(payload, Mapping):
            raise ConfigError("package entries must be mappings", context={"entry": payload})
        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ConfigError("package entries require a name", context={"entry": dict(payload)})
        minimum = _coerce_percentage(
            payload.get("min_coverage_percentage"), where=f"min_coverage_percentage for {name}"
        )
        return cls(name=name.strip(), min_coverage_percentage=minimum)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "min_coverage_percentage": self.min_coverage_percentage}


@dataclass(frozen=True)
class ConfigFile:
    """Global minimum plus per-package overrides."""

    min_coverage_percentage: float = 0.0
    packages: tuple[ConfigPackage, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, payload: Any) -> "ConfigFile":
        if not isinstance(payload, Mapping):
            raise ConfigError("configuration must be a mapping")
        raw_packages = payload.get("packages") or []
        if not isinstance(raw_packages, list):
            raise ConfigError("'packages' must be a list")
        return cls(
            min_coverage_percentage=_coerce_percentage(
                payload.get("min_coverage_percentage"), where="min_coverage_percentage"
            ),
            packages=tuple(ConfigPackage.from_mapping(entry) for entry in raw_packages),
        )

    @classmethod
    def pinned(cls, percentages: Mapping[str, float]) -> "ConfigFile":
        """Build a config pinning every package to the given percentage."""

        return cls(
            packages=tuple(
                ConfigPackage(name=name, min_coverage_percentage=percent)
                for name, percent in sorted(percentages.items())
            )
        )

    def get_package(self, name: str) -> ConfigPackage | None:
        for package in self.packages:
            if package.name == name:
                return package
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "min_coverage_percentage": self.min_coverage_percentage,
            "packages": [package.to_dict() for package in self.packages],
        }


def read_config_file(path: Path | str | None = None) -> str | None:
    """Return the raw configuration text.

    ``None`` selects :data:`DEFAULT_CONFIG_PATH`, which may be absent. An
    explicitly requested file must exist.
    """

    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        if path is None:
            LOGGER.debug("no default config file found", extra={"config_path": str(config_path)})
            return None
        raise ConfigError(f"config file {config_path} does not exist", context={"path": str(config_path)})
    try:
        return config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"could not read config file {config_path}") from exc


def parse_config(text: str | None) -> ConfigFile | None:
    """Parse YAML ``text``; empty content means no configuration was supplied."""

    if text is None or not text.strip():
        return None
    try:
        payload = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError("could not parse yaml config file") from exc
    if payload is None:
        return None
    return ConfigFile.from_mapping(payload)


def load_config(path: Path | str | None = None) -> ConfigFile | None:
    return parse_config(read_config_file(path))


def dump_config(config: ConfigFile) -> str:
    return yaml.safe_dump(config.to_dict(), sort_keys=False)


def write_config(config: ConfigFile, path: Path | str) -> Path:
    target = Path(path)
    target.write_text(dump_config(config), encoding="utf-8")
    return target


__all__ = [
    "ConfigFile",
    "ConfigPackage",
    "DEFAULT_CONFIG_PATH",
    "dump_config",
    "load_config",
    "parse_config",
    "read_config_file",
    "write_config",
]
