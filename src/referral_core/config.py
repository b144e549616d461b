"""
Engine configuration.

EngineSettings holds the user-facing options of the network view. A JSON
file of overrides can be loaded with load_settings().
"""

import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .domain.enums import AnalyticsMode, LayoutMode
from .services.layout import CircularParams, HierarchicalParams

logger = logging.getLogger(__name__)

MAX_ANIMATION_MS = 5000


@dataclass
class EngineSettings:
    """Options for building, laying out and viewing the network."""
    layout_mode: LayoutMode = LayoutMode.HIERARCHICAL
    show_labels: bool = True
    animation_duration_ms: int = 300
    analytics_mode: AnalyticsMode = AnalyticsMode.METRICS

    # Used when the host has not sized the canvas yet
    canvas_width: float = 800.0
    canvas_height: float = 600.0

    min_zoom: float = 0.3
    max_zoom: float = 3.0
    zoom_step: float = 1.2
    growth_window_days: int = 30

    hierarchical: HierarchicalParams = field(default_factory=HierarchicalParams)
    circular: CircularParams = field(default_factory=CircularParams)

    def __post_init__(self):
        self.layout_mode = LayoutMode(self.layout_mode)
        self.analytics_mode = AnalyticsMode(self.analytics_mode)
        self.animation_duration_ms = clamp_duration(self.animation_duration_ms)

    def with_changes(self, **changes) -> "EngineSettings":
        """Copy with some fields replaced (validated again)."""
        return replace(self, **changes)


def clamp_duration(value: Any) -> int:
    return int(min(max(int(value), 0), MAX_ANIMATION_MS))


def settings_from_dict(data: Dict[str, Any]) -> EngineSettings:
    """
    Build settings from a dict of overrides.

    Unknown keys are logged and ignored. Invalid enum values raise ValueError.
    """
    known = {f.name for f in fields(EngineSettings)}
    overrides: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown setting {key!r}")
            continue
        if key == "hierarchical" and isinstance(value, dict):
            value = _params_from_dict(HierarchicalParams, value, key)
        elif key == "circular" and isinstance(value, dict):
            value = _params_from_dict(CircularParams, value, key)
        overrides[key] = value
    return EngineSettings(**overrides)


def _params_from_dict(cls, data: Dict[str, Any], section: str):
    known = {f.name for f in fields(cls)}
    kept = {}
    for key, value in data.items():
        if key in known:
            kept[key] = value
        else:
            logger.warning(f"Ignoring unknown setting {section}.{key!r}")
    return cls(**kept)


def load_settings(path: Optional[Union[str, Path]] = None) -> EngineSettings:
    """
    Load settings from a JSON file; defaults when path is None.

    Raises:
        FileNotFoundError: path does not exist
        ValueError: the file is not a JSON object or holds an invalid value
    """
    if path is None:
        return EngineSettings()

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: settings must be a JSON object")

    settings = settings_from_dict(data)
    logger.info(f"Loaded settings from {path}")
    return settings
