"""Configuration loading for cemview (.cemview.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".cemview.yml"
LIST_FORMATS = ("table", "tree")
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ListConfig:
    """Defaults for the ``list`` command."""

    format: str = "table"
    columns: List[str] = field(default_factory=list)
    deprecated: bool = False


@dataclass
class ServiceConfig:
    """Bind address for ``cemview serve``."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass
class CemViewConfig:
    """Represents the settings defined in .cemview.yml."""

    root: Path
    manifest: Optional[Path] = None
    list: ListConfig = field(default_factory=ListConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)


def load_config(config_path: Path) -> CemViewConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CemViewConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    manifest_str = _as_str(data.get("manifest"))
    manifest = root / manifest_str if manifest_str else None

    list_data = _as_dict(data.get("list"))
    list_config = ListConfig()
    if list_data:
        fmt = _as_str(list_data.get("format"))
        if fmt is not None:
            fmt = fmt.lower()
            if fmt not in LIST_FORMATS:
                raise ConfigError(
                    f"list.format must be one of {', '.join(LIST_FORMATS)}, got '{fmt}'"
                )
            list_config.format = fmt
        list_config.columns = _as_str_list(list_data.get("columns"))
        list_config.deprecated = _as_bool(list_data.get("deprecated")) or False

    service_data = _as_dict(data.get("service"))
    service = ServiceConfig()
    if service_data:
        service.host = _as_str(service_data.get("host")) or DEFAULT_HOST
        port = _as_int(service_data.get("port"))
        if port is not None:
            if not 0 < port < 65536:
                raise ConfigError(f"service.port must be between 1 and 65535, got {port}")
            service.port = port

    return CemViewConfig(root=root, manifest=manifest, list=list_config, service=service)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
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


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


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
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CemViewConfig",
    "ConfigError",
    "ListConfig",
    "ServiceConfig",
    "load_config",
]
