"""Layout configuration and JSON-based settings loading."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Mapping

from calendar_logic import SUNDAY, MarkingType
from events import PALETTE
from text_fit import TextWidthFn, estimate_text_width

logger = logging.getLogger(__name__)

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".mini-calendar-layout.json")


@dataclass(frozen=True)
class LayoutConfig:
    """Everything a layout pass depends on besides the month and events."""

    first_day_of_week: int = SUNDAY
    viewport_width_px: float = 360.0
    font_size_px: float = 14.0
    palette: tuple[str, ...] = PALETTE
    label_padding_px: float = 0.0
    ellipsis_chars: int = 10
    ellipsis_marker: str = "..."
    label_min_weight: float = 1.5
    short_event_days: int = 2
    boundary_bias: float = 0.5
    marking_type: MarkingType = MarkingType.SIMPLE
    show_week_numbers: bool = False
    hide_extra_days: bool = False
    text_width: TextWidthFn = estimate_text_width

    def __post_init__(self) -> None:
        if self.first_day_of_week not in (0, 1):
            raise ValueError(f"first_day_of_week must be 0 or 1, got {self.first_day_of_week!r}")
        if not self.palette:
            raise ValueError("palette must contain at least one colour")
        object.__setattr__(self, "palette", tuple(self.palette))

    @property
    def day_width_px(self) -> float:
        return max(0.0, self.viewport_width_px) / 7


# key -> accepted types
_NUMBER_KEYS = {
    "viewport_width_px": (int, float),
    "font_size_px": (int, float),
    "label_padding_px": (int, float),
    "label_min_weight": (int, float),
    "boundary_bias": (int, float),
}
_INT_KEYS = ("first_day_of_week", "ellipsis_chars", "short_event_days")
_BOOL_KEYS = ("show_week_numbers", "hide_extra_days")


def config_from_dict(stored: Mapping[str, Any], base: LayoutConfig | None = None) -> LayoutConfig:
    """Return ``base`` (or defaults) overridden by the valid keys of ``stored``.

    Invalid values are logged and ignored rather than raised.
    """
    base = base or LayoutConfig()
    values = {f.name: getattr(base, f.name) for f in fields(base)}

    for key, types in _NUMBER_KEYS.items():
        if key not in stored:
            continue
        value = stored[key]
        if isinstance(value, types) and not isinstance(value, bool):
            values[key] = float(value)
        else:
            logger.warning("settings: ignoring %s=%r", key, value)
    for key in _INT_KEYS:
        if key not in stored:
            continue
        value = stored[key]
        if isinstance(value, int) and not isinstance(value, bool):
            values[key] = value
        else:
            logger.warning("settings: ignoring %s=%r", key, value)
    for key in _BOOL_KEYS:
        if key in stored:
            if isinstance(stored[key], bool):
                values[key] = stored[key]
            else:
                logger.warning("settings: ignoring %s=%r", key, stored[key])
    if "ellipsis_marker" in stored:
        if isinstance(stored["ellipsis_marker"], str):
            values["ellipsis_marker"] = stored["ellipsis_marker"]
        else:
            logger.warning("settings: ignoring ellipsis_marker=%r", stored["ellipsis_marker"])
    if "palette" in stored:
        palette = stored["palette"]
        if isinstance(palette, list) and palette and all(isinstance(c, str) for c in palette):
            values["palette"] = tuple(palette)
        else:
            logger.warning("settings: ignoring palette=%r", palette)
    if "marking_type" in stored:
        try:
            values["marking_type"] = MarkingType(stored["marking_type"])
        except ValueError:
            logger.warning("settings: ignoring marking_type=%r", stored["marking_type"])

    if values["first_day_of_week"] not in (0, 1):
        logger.warning("settings: ignoring first_day_of_week=%r", values["first_day_of_week"])
        values["first_day_of_week"] = base.first_day_of_week
    return LayoutConfig(**values)


def load_config(path: str | None = None) -> LayoutConfig:
    """Load settings from disk, returning defaults for missing keys."""
    path = path or _SETTINGS_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return LayoutConfig()
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("settings: cannot read %s (%s), using defaults", path, exc)
        return LayoutConfig()
    if not isinstance(stored, dict):
        logger.warning("settings: %s does not hold an object, using defaults", path)
        return LayoutConfig()
    return config_from_dict(stored)
