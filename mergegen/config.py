"""Configuration loading for mergegen (.mergegen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .sections.markers import DEFAULT_STYLE, STYLES, MarkerStyle

CONFIG_FILENAME = ".mergegen.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class MarkerConfig:
    """Marker comment style from .mergegen.yml."""

    style: Optional[str] = None
    prefix: Optional[str] = None
    suffix: Optional[str] = None


@dataclass
class LoggingConfig:
    """Log sink settings."""

    file: Optional[Path] = None
    verbose: bool = False


@dataclass
class MergeGenConfig:
    """Represents the settings defined in .mergegen.yml."""

    root: Path
    markers: MarkerConfig = field(default_factory=MarkerConfig)
    rekeys: Dict[str, List[str]] = field(default_factory=dict)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def marker_style(self) -> MarkerStyle:
        """Resolve the configured marker style.

        Explicit ``prefix``/``suffix`` values override the named style.
        """
        base = DEFAULT_STYLE
        if self.markers.style is not None:
            try:
                base = STYLES[self.markers.style]
            except KeyError:
                known = ", ".join(sorted(STYLES))
                raise ConfigError(
                    f"Unknown marker style {self.markers.style!r} (expected one of: {known})"
                ) from None
        return MarkerStyle(
            prefix=self.markers.prefix if self.markers.prefix is not None else base.prefix,
            suffix=self.markers.suffix if self.markers.suffix is not None else base.suffix,
        )


def load_config(config_path: Path) -> MergeGenConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return MergeGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    marker_data = _as_dict(data.get("markers"))
    markers = MarkerConfig(
        style=_as_str(marker_data.get("style")),
        prefix=_as_str(marker_data.get("prefix")),
        suffix=_as_str(marker_data.get("suffix")),
    )

    rekeys: Dict[str, List[str]] = {}
    for new_id, legacy in _as_dict(data.get("rekeys")).items():
        legacy_ids = _as_str_list(legacy)
        if legacy_ids:
            rekeys[str(new_id)] = legacy_ids

    logging_data = _as_dict(data.get("logging"))
    log_file_str = _as_str(logging_data.get("file"))
    logging_config = LoggingConfig(
        file=root / log_file_str if log_file_str else None,
        verbose=_as_bool(logging_data.get("verbose")) or False,
    )

    return MergeGenConfig(
        root=root,
        markers=markers,
        rekeys=rekeys,
        logging=logging_config,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME and config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


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
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
