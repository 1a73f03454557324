"""Map times and durations onto a 24-hour horizontal axis.

Positions and widths are percentages of the full day, so a renderer only
needs to multiply by its own strip width.
"""

from __future__ import annotations

import logging
from datetime import datetime

from .models import Activity, parse_timestamp

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


def position_fraction(timestamp: str | datetime) -> float:
    """Left offset of ``timestamp`` in percent of the day, in ``[0, 100)``."""
    local = parse_timestamp(timestamp)
    hours = local.hour + local.minute / 60
    return hours / 24 * 100


def width_fraction(activity: Activity) -> float:
    """Width of ``activity`` in percent of the day."""
    if not isinstance(activity, Activity):
        raise TypeError(
            f"width_fraction expects an Activity, got {type(activity).__name__}"
        )
    if activity.duration is not None:
        minutes = float(activity.duration)
    elif activity.start_time is not None and activity.end_time is not None:
        minutes = activity.duration_seconds / 60
    else:
        logger.warning(
            "Insufficient parameters to compute width for activity %s", activity.id
        )
        return 0.0
    return max(minutes, 0.0) / MINUTES_PER_DAY * 100


def hour_marks(step: int = 3) -> list[tuple[int, float, str]]:
    """Gridline marks as ``(hour, position, label)`` tuples."""
    return [(hour, hour / 24 * 100, f"{hour:02d}:00") for hour in range(0, 24, step)]
