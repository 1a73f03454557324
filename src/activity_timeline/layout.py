"""Lay out a day's activities as blocks on the 24-hour strip."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable

from .geometry import hour_marks, position_fraction, width_fraction
from .models import Activity

# Blocks narrower than this (percent of the day) show only their icon.
COMMENT_MIN_WIDTH = 5.0


@dataclass(frozen=True, slots=True)
class ActivityBlock:
    activity: Activity
    left: float
    width: float

    @property
    def shows_comment(self) -> bool:
        return self.width > COMMENT_MIN_WIDTH

    @property
    def tooltip(self) -> str:
        activity = self.activity
        lines = [
            activity.start_time.strftime("%H:%M:%S"),
            f"End Time: {activity.end_time.strftime('%H:%M:%S')}",
            f"Duration: {activity.duration}min",
        ]
        if activity.comment:
            lines.append(activity.comment)
        if activity.launch_point:
            lines.append(activity.launch_point.label)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.activity.to_dict(),
            "left": self.left,
            "width": self.width,
            "showsComment": self.shows_comment,
            "tooltip": self.tooltip,
        }


@dataclass(frozen=True, slots=True)
class DayLayout:
    day: date
    blocks: tuple[ActivityBlock, ...]

    @property
    def title(self) -> str:
        return self.day.strftime("%A, %B %d, %Y")

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "title": self.title,
            "blocks": [block.to_dict() for block in self.blocks],
            "marks": [
                {"hour": hour, "left": left, "label": label}
                for hour, left, label in hour_marks()
            ],
        }


def layout_day(day: date, activities: Iterable[Activity]) -> DayLayout:
    blocks = tuple(
        ActivityBlock(
            activity=activity,
            left=position_fraction(activity.start_time),
            width=width_fraction(activity),
        )
        for activity in activities
    )
    return DayLayout(day=day, blocks=blocks)
