"""Application state: both stores wired to persistence."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from .config import DisplaySettings
from .errors import InvalidInputError
from .models import Activity, ActivityDraft, LaunchPoint
from .normalization import (
    normalize_color,
    normalize_date,
    normalize_duration,
    normalize_time_of_day,
)
from .persistence import PersistenceGateway
from .storage import KeyValueStorage
from .stores import ActivityStore, Clock, LaunchPointStore
from .transfer import export_filename, export_snapshot, import_snapshot

logger = logging.getLogger(__name__)


class TimelineTracker:
    """Owns the activity and launch point stores for one process.

    Every store mutation is written back to storage, but only once
    :meth:`load` has completed so startup never clobbers saved data.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        settings: Optional[DisplaySettings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.settings = settings or DisplaySettings()
        self._clock: Clock = clock or datetime.now
        self.gateway = PersistenceGateway(storage)
        self.activities = ActivityStore(clock=self._clock)
        self.launch_points = LaunchPointStore(clock=self._clock)
        self._batching = False
        self.activities.subscribe(self._sync)
        self.launch_points.subscribe(self._sync)

    @property
    def initialized(self) -> bool:
        return self.gateway.loaded

    def load(self) -> None:
        state = self.gateway.load()
        with self._batched():
            if state.activities is not None:
                self.activities.replace_all(state.activities)
            if state.launch_points is not None:
                self.launch_points.replace_all(state.launch_points)
        logger.info(
            "Timeline ready with %d activities and %d launch points.",
            len(self.activities),
            len(self.launch_points),
        )

    def build_draft(
        self,
        *,
        date: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        duration: Optional[str | int] = None,
        color: Optional[str] = None,
        comment: Optional[str] = None,
        launch_point_id: Optional[int] = None,
    ) -> ActivityDraft:
        """Turn raw form values into a draft, resolving the launch point by id."""
        launch_point: Optional[LaunchPoint] = None
        if launch_point_id is not None:
            launch_point = self.launch_points.get(launch_point_id)
            if launch_point is None:
                raise InvalidInputError(f"Unknown launch point id {launch_point_id}")
        return ActivityDraft(
            date=normalize_date(date, self._clock().date()),
            start_time=normalize_time_of_day(start_time),
            end_time=normalize_time_of_day(end_time),
            duration=normalize_duration(duration),
            color=normalize_color(color, self.settings.default_color),
            comment=(comment or "").strip(),
            launch_point=launch_point,
        )

    def add_activity(self, draft: ActivityDraft) -> Activity:
        return self.activities.resolve_and_create(draft)

    def add_launch_point(
        self, icon: str, label: str, point_id: Optional[int] = None
    ) -> LaunchPoint:
        return self.launch_points.create(icon, label, point_id)

    def delete_launch_point(self, point_id: int) -> None:
        self.launch_points.delete_by_id(point_id)

    def export(self) -> tuple[str, str]:
        """Return ``(filename, document)`` for the current state."""
        now = self._clock()
        document = export_snapshot(
            self.activities.all(), self.launch_points.all(), now=now
        )
        return export_filename(now), document

    def import_document(self, document: str | bytes) -> None:
        """Replace both stores with the document's contents, or change nothing."""
        snapshot = import_snapshot(document)
        with self._batched():
            self.activities.replace_all(snapshot.activities)
            self.launch_points.replace_all(snapshot.launch_points)
        logger.info(
            "Imported %d activities and %d launch points.",
            len(snapshot.activities),
            len(snapshot.launch_points),
        )

    @contextmanager
    def _batched(self) -> Iterator[None]:
        self._batching = True
        try:
            yield
        finally:
            self._batching = False
        self._sync()

    def _sync(self) -> None:
        if self._batching:
            return
        self.gateway.save(self.activities.all(), self.launch_points.all())
