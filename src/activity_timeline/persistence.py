"""Load and save the timeline stores through a key-value storage backend."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, TypeVar

from .models import Activity, LaunchPoint
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

ACTIVITIES_KEY = "timelineActivities"
LAUNCH_POINTS_KEY = "timelineLaunchPoints"

T = TypeVar("T")


@dataclass(slots=True)
class LoadedState:
    """Collections found in storage; ``None`` where the entry was absent."""

    activities: Optional[list[Activity]] = None
    launch_points: Optional[list[LaunchPoint]] = None


class PersistenceGateway:
    """Sole bridge between the in-memory stores and durable storage."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> LoadedState:
        state = LoadedState(
            activities=self._read(ACTIVITIES_KEY, Activity.from_dict),
            launch_points=self._read(LAUNCH_POINTS_KEY, LaunchPoint.from_dict),
        )
        self._loaded = True
        logger.debug(
            "Loaded state: activities=%s launch_points=%s",
            "absent" if state.activities is None else len(state.activities),
            "absent" if state.launch_points is None else len(state.launch_points),
        )
        return state

    def save(
        self,
        activities: Sequence[Activity],
        launch_points: Sequence[LaunchPoint],
    ) -> bool:
        """Write both collections; skipped until :meth:`load` has run."""
        if not self._loaded:
            logger.debug("Skipping save before initial load.")
            return False
        self.storage.set(
            ACTIVITIES_KEY, json.dumps([activity.to_dict() for activity in activities])
        )
        self.storage.set(
            LAUNCH_POINTS_KEY, json.dumps([point.to_dict() for point in launch_points])
        )
        logger.debug(
            "Saved %d activities and %d launch points.",
            len(activities),
            len(launch_points),
        )
        return True

    def _read(self, key: str, decode: Callable[[dict[str, Any]], T]) -> Optional[list[T]]:
        raw = self.storage.get(key)
        if not raw:
            return None
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
            return [decode(item) for item in payload]
        except (
            ValueError,
            KeyError,
            TypeError,
            AttributeError,
            OverflowError,
            RecursionError,
        ) as exc:
            logger.warning("Ignoring malformed %s entry in storage: %s", key, exc)
            return None
