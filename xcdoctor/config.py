"""Configuration loading for xcdoctor (.xcdoctor.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".xcdoctor.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DefectConfig:
    """Which defects to examine for; empty means all of them."""

    enabled: List[str] = field(default_factory=list)


@dataclass
class UnusedResourcesConfig:
    """Settings for the unused resource search."""

    keep_comments: bool = False
    ignored_names: List[str] = field(default_factory=list)


@dataclass
class XcDoctorConfig:
    """Represents the settings defined in .xcdoctor.yml."""

    root: Path
    defects: DefectConfig = field(default_factory=DefectConfig)
    unused_resources: UnusedResourcesConfig = field(default_factory=UnusedResourcesConfig)


def load_config(config_path: Path) -> XcDoctorConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return XcDoctorConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defects = DefectConfig()
    defect_data = _as_dict(data.get("defects"))
    if defect_data:
        defects.enabled = [name.lower() for name in _as_str_list(defect_data.get("enabled"))]

    unused = UnusedResourcesConfig()
    unused_data = _as_dict(data.get("unused_resources"))
    if unused_data:
        unused.keep_comments = _as_bool(unused_data.get("keep_comments")) or False
        unused.ignored_names = _as_str_list(unused_data.get("ignored_names"))

    return XcDoctorConfig(
        root=root,
        defects=defects,
        unused_resources=unused,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DefectConfig",
    "UnusedResourcesConfig",
    "XcDoctorConfig",
    "load_config",
]
