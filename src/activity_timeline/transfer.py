"""Export and import of full timeline snapshots."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from .errors import SnapshotImportError
from .models import Activity, LaunchPoint


@dataclass(frozen=True, slots=True)
class Snapshot:
    activities: tuple[Activity, ...]
    launch_points: tuple[LaunchPoint, ...]


def export_snapshot(
    activities: Sequence[Activity],
    launch_points: Sequence[LaunchPoint],
    now: Optional[datetime] = None,
) -> str:
    """Serialize the full state as the downloadable JSON document."""
    exported_at = (now or datetime.now()).astimezone()
    document = {
        "activities": [activity.to_dict() for activity in activities],
        "launchPoints": [point.to_dict() for point in launch_points],
        "exportDate": exported_at.isoformat(),
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def export_filename(now: Optional[datetime] = None) -> str:
    return f"timeline-data-{(now or datetime.now()).strftime('%Y-%m-%d')}.json"


def import_snapshot(document: str | bytes) -> Snapshot:
    """Parse and validate a snapshot document without touching any store."""
    try:
        data = json.loads(document)
    except (ValueError, TypeError, RecursionError) as exc:
        raise SnapshotImportError(f"Import file is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SnapshotImportError("Import file must contain a JSON object")

    missing = [key for key in ("activities", "launchPoints") if key not in data]
    if missing:
        raise SnapshotImportError(f"Import file is missing: {', '.join(missing)}")
    raw_activities, raw_points = data["activities"], data["launchPoints"]
    if not isinstance(raw_activities, list) or not isinstance(raw_points, list):
        raise SnapshotImportError("activities and launchPoints must be arrays")

    try:
        activities = tuple(Activity.from_dict(item) for item in raw_activities)
        launch_points = tuple(LaunchPoint.from_dict(item) for item in raw_points)
    except (ValueError, KeyError, TypeError, AttributeError, OverflowError) as exc:
        raise SnapshotImportError(f"Import file has an invalid record: {exc}") from exc

    point_ids = [point.id for point in launch_points]
    if len(set(point_ids)) != len(point_ids):
        raise SnapshotImportError("Import file has duplicate launch point ids")

    return Snapshot(activities=activities, launch_points=launch_points)
