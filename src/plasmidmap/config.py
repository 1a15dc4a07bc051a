"""
Viewer configuration (environment + YAML) and logging setup.
"""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

import yaml

from .geometry import CircularFrame

CONFIG_KIND = "plasmidmap.viewer.v1"

_CONFIG_ENV = "PLASMIDMAP_CONFIG"
_LOG_LEVEL_ENV = "PLASMIDMAP_LOG_LEVEL"
_LOG_FILE_ENV = "PLASMIDMAP_LOG_FILE"
_SHOW_SOURCE_ENV = "PLASMIDMAP_SHOW_SOURCE"

LOGGER = logging.getLogger(__name__)

VIEWER_CONFIG_TEMPLATE = """\
kind: plasmidmap.viewer.v1

frame:
  center: 300
  backbone_radius: 200
  path_width: 6
  marker_count: 12
  track_spacing: 15

tracks:
  circular_max: 8
  linear_max: 3

linear:
  bases_per_line: 100

filters:
  hidden_types: [source]
"""


class ViewerConfigError(ValueError):
    """Raised when a viewer config is invalid."""


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip().lower()
    if raw in {"", "0", "false", "no"}:
        return False
    if raw in {"1", "true", "yes"}:
        return True
    return default


@dataclass(frozen=True)
class ViewerConfig:
    frame: CircularFrame = field(default_factory=CircularFrame)
    circular_max_tracks: int = 8
    linear_max_tracks: int = 3
    bases_per_line: int = 100
    hidden_types: FrozenSet[str] = frozenset({"source"})

    def initial_visible_types(self, feature_types) -> set[str]:
        hidden = {kind.lower() for kind in self.hidden_types}
        return {kind for kind in feature_types if kind.lower() not in hidden}


def _positive_int(section: Dict[str, Any], key: str, default: int) -> int:
    try:
        value = int(section.get(key, default))
    except (TypeError, ValueError) as exc:
        raise ViewerConfigError(f"'{key}' must be an integer.") from exc
    if value <= 0:
        raise ViewerConfigError(f"'{key}' must be positive, got {value}.")
    return value


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ViewerConfigError(f"'{name}' must be a mapping.")
    return section


def _parse_frame(section: Dict[str, Any]) -> CircularFrame:
    known = {item.name for item in fields(CircularFrame)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ViewerConfigError(f"Unknown frame keys: {', '.join(unknown)}.")
    values: Dict[str, Any] = {}
    for key, value in section.items():
        try:
            values[key] = int(value) if key == "marker_count" else float(value)
        except (TypeError, ValueError) as exc:
            raise ViewerConfigError(f"frame.{key} must be numeric.") from exc
    return CircularFrame(**values)


def parse_viewer_config(data: Any) -> ViewerConfig:
    if data is None:
        return ViewerConfig()
    if not isinstance(data, dict):
        raise ViewerConfigError("Viewer config must be a YAML mapping.")
    kind = str(data.get("kind", CONFIG_KIND)).strip()
    if kind != CONFIG_KIND:
        raise ViewerConfigError(f"Unknown config kind '{kind}'. Supported kinds: '{CONFIG_KIND}'.")

    tracks = _section(data, "tracks")
    linear = _section(data, "linear")
    filters = _section(data, "filters")
    hidden = filters.get("hidden_types", ["source"])
    if isinstance(hidden, str):
        hidden = [hidden]
    if not isinstance(hidden, (list, tuple)):
        raise ViewerConfigError("filters.hidden_types must be a list of feature types.")
    hidden_types = frozenset(str(kind).strip() for kind in hidden if str(kind).strip())
    if _env_bool(_SHOW_SOURCE_ENV):
        hidden_types = frozenset(kind for kind in hidden_types if kind.lower() != "source")

    return ViewerConfig(
        frame=_parse_frame(_section(data, "frame")),
        circular_max_tracks=_positive_int(tracks, "circular_max", 8),
        linear_max_tracks=_positive_int(tracks, "linear_max", 3),
        bases_per_line=_positive_int(linear, "bases_per_line", 100),
        hidden_types=hidden_types,
    )


def load_viewer_config(path: Optional[str | Path] = None) -> ViewerConfig:
    """Load a viewer config from ``path``, ``$PLASMIDMAP_CONFIG`` or defaults."""

    if path is None:
        env_path = os.getenv(_CONFIG_ENV)
        if not env_path:
            return parse_viewer_config({})
        path = env_path
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise ViewerConfigError(f"Viewer config '{cfg_path}' not found.")
    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ViewerConfigError(f"Viewer config '{cfg_path}' is not valid YAML: {exc}") from exc
    config = parse_viewer_config(data)
    LOGGER.debug("load_viewer_config path=%s config=%s", cfg_path, config)
    return config


def configure_logging(level: Optional[str | int] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``plasmidmap`` logger namespace.

    Args:
        level: Level name or number; falls back to ``$PLASMIDMAP_LOG_LEVEL``, then WARNING.
        log_file: Optional path that receives the same records.
    """

    if level is None:
        level = os.getenv(_LOG_LEVEL_ENV, "WARNING")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ViewerConfigError(f"Unknown log level '{level}'.")
        level = resolved
    log_file = log_file or os.getenv(_LOG_FILE_ENV) or None

    logger = logging.getLogger("plasmidmap")
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    return logger


__all__ = [
    "CONFIG_KIND",
    "VIEWER_CONFIG_TEMPLATE",
    "ViewerConfig",
    "ViewerConfigError",
    "configure_logging",
    "load_viewer_config",
    "parse_viewer_config",
]
