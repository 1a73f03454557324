"""FastAPI application that exposes a local web UI and API for the timeline."""

from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict

from .config import DisplaySettings
from .errors import TimelineError
from .layout import layout_day
from .normalization import normalize_date
from .paths import get_db_path
from .storage import KeyValueStorage, SqliteStorage
from .tracker import TimelineTracker

logger = logging.getLogger(__name__)


class ActivityPayload(BaseModel):
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[int] = None
    color: Optional[str] = None
    comment: str = ""
    launch_point_id: Optional[int] = None

    model_config = ConfigDict(extra="forbid")


class LaunchPointPayload(BaseModel):
    icon: str
    label: str
    id: Optional[int] = None

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    db_path: Optional[Path] = None,
    storage: Optional[KeyValueStorage] = None,
    settings: Optional[DisplaySettings] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    """Instantiate the FastAPI application.

    ``storage`` takes precedence over ``db_path``; tests pass a memory store.
    """
    resolved_storage = storage or SqliteStorage(Path(db_path or get_db_path()))
    tracker = TimelineTracker(resolved_storage, settings=settings, clock=clock)
    now = clock or datetime.now
    lock = threading.Lock()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        with lock:
            tracker.load()
        logger.info("Timeline dashboard started.")
        yield

    app = FastAPI(title="Activity Timeline", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.tracker = tracker

    static_dir = Path(__file__).parent / "static"
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/api/status")
    def status() -> Dict[str, Any]:
        with lock:
            return {
                "initialized": tracker.initialized,
                "activities": len(tracker.activities),
                "launch_points": len(tracker.launch_points),
            }

    @app.get("/api/days")
    def days(
        previous: bool = Query(
            default=False, description="Include the two previous days."
        ),
    ) -> Dict[str, Any]:
        day_settings = DisplaySettings.from_flags(
            compact=tracker.settings.compact,
            show_previous=previous,
            default_color=tracker.settings.default_color,
        )
        with lock:
            layouts = [
                layout_day(day, tracker.activities.filter_by_date(day))
                for day in day_settings.visible_days(now().date())
            ]
        return {"days": [layout.to_dict() for layout in layouts]}

    @app.get("/api/activities")
    def activities(
        date: Optional[str] = Query(
            default=None,
            description="Target date in YYYY-MM-DD format. Omit for all activities.",
        ),
    ) -> Dict[str, Any]:
        with lock:
            if date is None:
                selected = tracker.activities.all()
            else:
                selected = tracker.activities.filter_by_date(_parse_date(date))
        return {"activities": [activity.to_dict() for activity in selected]}

    @app.post("/api/activities", status_code=201)
    def create_activity(payload: ActivityPayload) -> Dict[str, Any]:
        with lock:
            try:
                draft = tracker.build_draft(**payload.model_dump())
                activity = tracker.add_activity(draft)
            except TimelineError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
        return activity.to_dict()

    @app.get("/api/launch-points")
    def list_launch_points() -> Dict[str, Any]:
        with lock:
            points = tracker.launch_points.all()
        return {"launch_points": [point.to_dict() for point in points]}

    @app.post("/api/launch-points", status_code=201)
    def create_launch_point(payload: LaunchPointPayload) -> Dict[str, Any]:
        with lock:
            try:
                point = tracker.add_launch_point(payload.icon, payload.label, payload.id)
            except TimelineError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
        return point.to_dict()

    @app.delete("/api/launch-points/{point_id}", status_code=204)
    def delete_launch_point(point_id: int) -> Response:
        with lock:
            tracker.delete_launch_point(point_id)
        return Response(status_code=204)

    @app.get("/api/export")
    def export() -> Response:
        with lock:
            filename, document = tracker.export()
        return Response(
            content=document,
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    def replace_from_document(document: bytes) -> Dict[str, Any]:
        with lock:
            try:
                tracker.import_document(document)
            except TimelineError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
            return {
                "activities": len(tracker.activities),
                "launch_points": len(tracker.launch_points),
            }

    @app.post("/api/import")
    async def import_snapshot(request: Request) -> Dict[str, Any]:
        body = await request.body()
        return await run_in_threadpool(replace_from_document, body)

    @app.get("/")
    def index():
        index_path = (Path(__file__).parent / "static" / "index.html").resolve()
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="UI not found")
        return FileResponse(index_path)

    return app


def _parse_date(value: str) -> date:
    if not value.strip():
        raise HTTPException(status_code=400, detail="Date must not be empty")
    try:
        return normalize_date(value, datetime.now().date())
    except TimelineError as exc:
        raise HTTPException(status_code=400, detail="Invalid date format") from exc
