"""In-memory stores for activities and launch points."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, Optional

from .errors import (
    DuplicateIdError,
    InsufficientFieldsError,
    InvalidInputError,
    MissingFieldError,
)
from .models import Activity, ActivityDraft, LaunchPoint

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Listener = Callable[[], None]

DEFAULT_LAUNCH_POINTS: tuple[LaunchPoint, ...] = (
    LaunchPoint(id=1, icon="⚡", label="Spontaneous"),
    LaunchPoint(id=2, icon="🌊", label="Flow"),
    LaunchPoint(id=3, icon="🏋️", label="Pushed through"),
    LaunchPoint(id=4, icon="🎯", label="Scheduled"),
)


def _next_id(taken: set[int], clock: Clock) -> int:
    candidate = int(clock().timestamp() * 1000)
    while candidate in taken:
        candidate += 1
    return candidate


class _ObservableStore:
    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or datetime.now
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` to run after every mutation; returns an unsubscribe."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


class ActivityStore(_ObservableStore):
    """Insertion-ordered collection of resolved activities."""

    def __init__(
        self,
        activities: Iterable[Activity] = (),
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(clock)
        self._activities: list[Activity] = list(activities)

    def __len__(self) -> int:
        return len(self._activities)

    def all(self) -> list[Activity]:
        return list(self._activities)

    def filter_by_date(self, day: date) -> list[Activity]:
        """Activities starting on ``day`` in local time, in chronological order."""
        day_start = datetime.combine(day, time.min).astimezone()
        day_end = datetime.combine(day, time(23, 59, 59, 999000)).astimezone()
        matches = [
            activity
            for activity in self._activities
            if day_start <= activity.start_time <= day_end
        ]
        return sorted(matches, key=lambda activity: activity.start_time)

    def resolve_and_create(self, draft: ActivityDraft) -> Activity:
        activity = resolve_activity(
            draft, _next_id({a.id for a in self._activities}, self._clock)
        )
        self._activities.append(activity)
        logger.debug("Created activity %s (%d min)", activity.id, activity.duration)
        self._notify()
        return activity

    def replace_all(self, activities: Iterable[Activity]) -> None:
        self._activities = list(activities)
        self._notify()

    def delete_all(self) -> None:
        self.replace_all(())


def resolve_activity(draft: ActivityDraft, activity_id: int) -> Activity:
    """Derive the missing one of start, end and duration from the other two."""
    if draft.known_time_fields() < 2:
        raise InsufficientFieldsError(
            "Please fill at least two of the three fields: "
            "Start Time, End Time, Duration"
        )
    if draft.duration is not None and draft.duration < 0:
        raise InvalidInputError("Duration cannot be negative")

    start = _anchor(draft.date, draft.start_time)
    end = _anchor(draft.date, draft.end_time)

    if start is not None and end is not None:
        if end < start:
            raise InvalidInputError("End time is before start time")
        duration = int((end - start).total_seconds() // 60)
    elif start is not None and draft.duration:
        duration = draft.duration
        end = _shift(start, duration)
    elif end is not None and draft.duration:
        duration = draft.duration
        start = _shift(end, -duration)
    else:
        raise InvalidInputError("Invalid input")

    return Activity(
        id=activity_id,
        start_time=start,
        end_time=end,
        duration=duration,
        color=draft.color,
        comment=draft.comment,
        launch_point=draft.launch_point,
        date=draft.date,
    )


def _shift(moment: datetime, minutes: int) -> datetime:
    try:
        return moment + timedelta(minutes=minutes)
    except OverflowError as exc:
        raise InvalidInputError(f"Duration of {abs(minutes)} minutes is out of range") from exc


def _anchor(day: date, moment: Optional[time]) -> Optional[datetime]:
    if moment is None:
        return None
    return datetime.combine(day, moment).astimezone()


class LaunchPointStore(_ObservableStore):
    """Launch point definitions, seeded with the defaults on first run."""

    def __init__(
        self,
        points: Optional[Iterable[LaunchPoint]] = None,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(clock)
        self._points: list[LaunchPoint] = list(
            DEFAULT_LAUNCH_POINTS if points is None else points
        )

    def __len__(self) -> int:
        return len(self._points)

    def all(self) -> list[LaunchPoint]:
        return list(self._points)

    def get(self, point_id: int) -> Optional[LaunchPoint]:
        for point in self._points:
            if point.id == point_id:
                return point
        return None

    def create(self, icon: str, label: str, point_id: Optional[int] = None) -> LaunchPoint:
        icon = (icon or "").strip()
        label = (label or "").strip()
        if not icon or not label:
            raise MissingFieldError("Both icon and label are required")
        taken = {point.id for point in self._points}
        if point_id is None:
            point_id = _next_id(taken, self._clock)
        elif point_id in taken:
            raise DuplicateIdError(f"Launch point id {point_id} already exists")
        point = LaunchPoint(id=point_id, icon=icon, label=label)
        self._points.append(point)
        self._notify()
        return point

    def delete_by_id(self, point_id: int) -> None:
        remaining = [point for point in self._points if point.id != point_id]
        if len(remaining) == len(self._points):
            return
        self._points = remaining
        self._notify()

    def replace_all(self, points: Iterable[LaunchPoint]) -> None:
        self._points = list(points)
        self._notify()
