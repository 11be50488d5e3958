"""
Load thresholds (presentation settings).

Thresholds only drive colouring in the report. The aggregator's own weekly
overload check (metrics.WEEKLY_OVERLOAD_PERIODS) does not read them.

File format (any part may be omitted, missing values keep their defaults):

    {"daily": {"warning": 8, "danger": 10}, "weekly": {"warning": 25, "danger": 35}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from teachload.model import LoadLevel, Thresholds

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLDS = Thresholds()

NORMAL = "normal"
WARNING = "warning"
DANGER = "danger"


def _level(raw: Any, default: LoadLevel) -> LoadLevel:
    if not isinstance(raw, dict):
        return default
    warning = raw.get("warning", default.warning)
    danger = raw.get("danger", default.danger)
    if not all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in (warning, danger)):
        raise ValueError(f"threshold values must be numbers: {raw!r}")
    return LoadLevel(warning=int(warning), danger=int(danger))


def thresholds_from_dict(data: Any) -> Thresholds:
    if not isinstance(data, dict):
        raise ValueError("thresholds must be an object")
    return Thresholds(
        daily=_level(data.get("daily"), DEFAULT_THRESHOLDS.daily),
        weekly=_level(data.get("weekly"), DEFAULT_THRESHOLDS.weekly),
    )


def load_thresholds(path: str | Path | None = None) -> Thresholds:
    """
    Load thresholds from a JSON file.

    Returns the defaults if no path is given, the file does not exist or is
    invalid (a warning is logged in the last case).
    """
    if path is None:
        return DEFAULT_THRESHOLDS

    thresholds_path = Path(path)
    if not thresholds_path.exists():
        return DEFAULT_THRESHOLDS

    try:
        return thresholds_from_dict(json.loads(thresholds_path.read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError, ValueError) as exc:
        logger.warning("Ignoring thresholds file %s: %s", thresholds_path, exc)
        return DEFAULT_THRESHOLDS


def classify_load(value: int, level: LoadLevel) -> str:
    if value >= level.danger:
        return DANGER
    if value >= level.warning:
        return WARNING
    return NORMAL
