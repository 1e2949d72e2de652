"""Configuration loading for hygiene (.hygiene.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import HygieneError

CONFIG_FILENAME = ".hygiene.yml"

# Regex for allowed characters in paths. The regex must carry ^ and $ anchors.
DEFAULT_ALLOWED_PATHS_REGEX = r"^([a-zA-Z0-9._\-/@:]|-)+$"


class ConfigError(HygieneError):
    """Raised when the configuration file or a configured pattern is invalid."""


class BannedDepType(str, Enum):
    """Whether a banned package is forbidden anywhere or only as a direct dependency."""

    ALWAYS = "always"
    DIRECT = "direct"


@dataclass(frozen=True)
class BannedDepConfig:
    """Message and policy for one banned package."""

    message: str
    type: BannedDepType


@dataclass
class BannedDepsConfig:
    banned: Dict[str, BannedDepConfig] = field(default_factory=dict)


@dataclass
class EnforcedAttributesConfig:
    """Attributes every workspace package must declare."""

    authors: Optional[List[str]] = None
    license: Optional[str] = None


@dataclass
class DirectDepDupsConfig:
    allow: List[str] = field(default_factory=list)


@dataclass
class CratesDirectoryConfig:
    """Directory layout convention for workspace packages."""

    name: str = "crates"
    enforce: bool = False


@dataclass
class HygieneConfig:
    """Represents the settings defined in .hygiene.yml."""

    root: Path
    workspace_hack: Optional[str] = None
    banned_deps: BannedDepsConfig = field(default_factory=BannedDepsConfig)
    enforced_attributes: Optional[EnforcedAttributesConfig] = None
    direct_dep_dups: DirectDepDupsConfig = field(default_factory=DirectDepDupsConfig)
    allowed_paths: str = DEFAULT_ALLOWED_PATHS_REGEX
    whitespace_exceptions: List[str] = field(default_factory=list)
    license_header: Optional[str] = None
    crates_directory: CratesDirectoryConfig = field(default_factory=CratesDirectoryConfig)


def load_config(config_path: Path, *, required: bool = False) -> HygieneConfig:
    """Load configuration from disk.

    A missing file yields defaults unless ``required`` is set, in which case
    it raises ConfigError. Keys holding a value of the wrong shape also raise.
    """
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        if required:
            raise ConfigError(f"config file not found: {config_file}")
        return HygieneConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    banned = BannedDepsConfig()
    for name, entry in _as_dict(data.get("banned-deps"), "banned-deps").items():
        banned.banned[str(name)] = _parse_banned_dep(str(name), entry)

    enforced = None
    enforced_data = _as_dict(data.get("enforced-attributes"), "enforced-attributes")
    if enforced_data:
        authors = enforced_data.get("authors")
        enforced = EnforcedAttributesConfig(
            authors=(
                _as_str_list(authors, "enforced-attributes.authors")
                if authors is not None
                else None
            ),
            license=_as_str(enforced_data.get("license"), "enforced-attributes.license"),
        )
        if enforced.authors is None and enforced.license is None:
            enforced = None

    dups_data = _as_dict(data.get("direct-dep-dups"), "direct-dep-dups")
    dups = DirectDepDupsConfig(allow=_as_str_list(dups_data.get("allow"), "direct-dep-dups.allow"))

    crates_data = _as_dict(data.get("crates-directory"), "crates-directory")
    crates_directory = CratesDirectoryConfig()
    if crates_data:
        crates_directory.name = (
            _as_str(crates_data.get("name"), "crates-directory.name") or crates_directory.name
        )
        crates_directory.enforce = bool(
            _as_bool(crates_data.get("enforce"), "crates-directory.enforce")
        )

    return HygieneConfig(
        root=root,
        workspace_hack=_as_str(data.get("workspace-hack"), "workspace-hack"),
        banned_deps=banned,
        enforced_attributes=enforced,
        direct_dep_dups=dups,
        allowed_paths=(
            _as_str(data.get("allowed-paths"), "allowed-paths") or DEFAULT_ALLOWED_PATHS_REGEX
        ),
        whitespace_exceptions=_as_str_list(
            data.get("whitespace-exceptions"), "whitespace-exceptions"
        ),
        license_header=_as_str(data.get("license-header"), "license-header"),
        crates_directory=crates_directory,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_banned_dep(name: str, entry: Any) -> BannedDepConfig:
    if not isinstance(entry, dict):
        raise ConfigError(f"banned-deps entry '{name}' must be a mapping")
    message = _as_str(entry.get("message"), f"banned-deps.{name}.message")
    if message is None:
        raise ConfigError(f"banned-deps entry '{name}' is missing 'message'")
    raw_type = _as_str(entry.get("type"), f"banned-deps.{name}.type") or BannedDepType.ALWAYS.value
    try:
        dep_type = BannedDepType(raw_type.strip().lower())
    except ValueError as exc:
        raise ConfigError(
            f"banned-deps entry '{name}' has unknown type '{raw_type}' (expected 'always' or 'direct')"
        ) from exc
    return BannedDepConfig(message=message, type=dep_type)


def _invalid(key: str, expected: str, value: Any) -> ConfigError:
    return ConfigError(f"'{key}' must be {expected}, got {value!r}")


def _as_dict(value: Any, key: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _invalid(key, "a mapping", value)
    return value


def _as_str(value: Any, key: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise _invalid(key, "a string", value)
    return value


def _as_bool(value: Any, key: str) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    raise _invalid(key, "a boolean", value)


def _as_str_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise _invalid(key, "a list of strings", value)
    return list(value)


__all__ = [
    "BannedDepConfig",
    "BannedDepType",
    "BannedDepsConfig",
    "ConfigError",
    "CratesDirectoryConfig",
    "DEFAULT_ALLOWED_PATHS_REGEX",
    "DirectDepDupsConfig",
    "EnforcedAttributesConfig",
    "HygieneConfig",
    "load_config",
]
