"""Domain models for logged activities and launch points."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Optional


DEFAULT_COLOR = "#4A90E2"


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp into a timezone-aware local datetime.

    Naive values are taken to be local time. A trailing ``Z`` is accepted.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    return parsed.astimezone()


@dataclass(frozen=True, slots=True)
class LaunchPoint:
    """A tag describing how an activity got started."""

    id: int
    icon: str
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "icon": self.icon, "label": self.label}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LaunchPoint":
        point_id = data["id"]
        if isinstance(point_id, bool) or not isinstance(point_id, int):
            raise ValueError(f"launch point id must be an integer, got {point_id!r}")
        return cls(id=point_id, icon=str(data["icon"]), label=str(data["label"]))


@dataclass(slots=True)
class ActivityDraft:
    """An activity being entered; at most one of the time fields may be missing."""

    date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    duration: Optional[int] = None
    color: str = DEFAULT_COLOR
    comment: str = ""
    launch_point: Optional[LaunchPoint] = None

    def known_time_fields(self) -> int:
        return sum(
            value is not None
            for value in (self.start_time, self.end_time, self.duration)
        )


@dataclass(frozen=True, slots=True)
class Activity:
    """A resolved activity with consistent start, end and duration."""

    id: int
    start_time: datetime
    end_time: datetime
    duration: int
    color: str
    comment: str
    launch_point: Optional[LaunchPoint]
    date: date

    @property
    def duration_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat(),
            "duration": self.duration,
            "color": self.color,
            "comment": self.comment,
            "launchPoint": self.launch_point.to_dict() if self.launch_point else None,
            "date": self.date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Activity":
        """Rebuild an activity from its stored JSON shape.

        Records without ``date`` are anchored to the start time's calendar day.
        A missing duration is derived from the two timestamps.
        """
        activity_id = data["id"]
        if isinstance(activity_id, bool) or not isinstance(activity_id, (int, float)):
            raise ValueError(f"activity id must be a number, got {activity_id!r}")
        if not float(activity_id).is_integer():
            raise ValueError(f"activity id must be a whole number, got {activity_id!r}")
        start = parse_timestamp(data["startTime"])
        end = parse_timestamp(data["endTime"])
        duration = data.get("duration")
        if duration is None:
            duration = (end - start).total_seconds() / 60
        if isinstance(duration, bool) or not float(duration).is_integer():
            raise ValueError(f"duration must be whole minutes, got {duration!r}")
        if (end - start).total_seconds() != float(duration) * 60:
            raise ValueError(
                f"duration {duration!r} does not match {start.isoformat()} to {end.isoformat()}"
            )
        raw_point = data.get("launchPoint")
        raw_date = data.get("date")
        return cls(
            id=int(activity_id),
            start_time=start,
            end_time=end,
            duration=int(duration),
            color=str(data.get("color") or DEFAULT_COLOR),
            comment=str(data.get("comment") or ""),
            launch_point=LaunchPoint.from_dict(raw_point) if raw_point else None,
            date=date.fromisoformat(raw_date) if raw_date else start.date(),
        )
