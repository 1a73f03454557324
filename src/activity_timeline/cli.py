"""Command-line interface for the activity timeline."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import NoReturn, Optional

import typer

from .config import DisplaySettings
from .errors import TimelineError
from .layout import layout_day
from .paths import get_db_path, get_log_path
from .reporting import TimelinePrinter, format_duration
from .server_runner import run_dashboard
from .storage import SqliteStorage
from .tracker import TimelineTracker

app = typer.Typer(help="Log activities and view them on a 24-hour timeline.")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

DB_OPTION = typer.Option(
    None,
    "--db",
    path_type=Path,
    help="Location of the timeline SQLite database.",
)


@app.callback(no_args_is_help=True)
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
    log_file: bool = typer.Option(
        False, "--log-file", help="Also append logs to timeline.log in the data directory."
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )
    if log_file:
        attach_log_file(get_log_path())


def attach_log_file(path: Path) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)
    return handler


def _open_tracker(
    db_path: Optional[Path], settings: Optional[DisplaySettings] = None
) -> TimelineTracker:
    tracker = TimelineTracker(SqliteStorage(db_path or get_db_path()), settings=settings)
    tracker.load()
    return tracker


def _fail(exc: TimelineError) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def show(
    previous: bool = typer.Option(
        False, "--previous", "-p", help="Also show the two previous days."
    ),
    compact: bool = typer.Option(False, "--compact", help="Use the narrow layout."),
    db_path: Optional[Path] = DB_OPTION,
) -> None:
    """Print today's timeline."""
    settings = DisplaySettings.from_flags(compact=compact, show_previous=previous)
    tracker = _open_tracker(db_path, settings)
    days = settings.visible_days(datetime.now().date())
    layouts = [layout_day(day, tracker.activities.filter_by_date(day)) for day in days]
    TimelinePrinter(settings).print_days(layouts)


@app.command()
def add(
    date: Optional[str] = typer.Option(
        None, "--date", help="Date (YYYY-MM-DD) of the activity. Defaults to today."
    ),
    start: Optional[str] = typer.Option(None, "--start", help="Start time (HH:MM)."),
    end: Optional[str] = typer.Option(None, "--end", help="End time (HH:MM)."),
    duration: Optional[int] = typer.Option(
        None, "--duration", min=0, help="Duration in minutes."
    ),
    color: Optional[str] = typer.Option(None, "--color", help="Block color, e.g. #4A90E2."),
    comment: str = typer.Option("", "--comment", help="Free-text comment."),
    launch_point: Optional[int] = typer.Option(
        None, "--launch-point", "-l", help="Id of the launch point to tag."
    ),
    db_path: Optional[Path] = DB_OPTION,
) -> None:
    """Log an activity from any two of start, end and duration."""
    tracker = _open_tracker(db_path)
    try:
        draft = tracker.build_draft(
            date=date,
            start_time=start,
            end_time=end,
            duration=duration,
            color=color,
            comment=comment,
            launch_point_id=launch_point,
        )
        activity = tracker.add_activity(draft)
    except TimelineError as exc:
        _fail(exc)
    typer.echo(
        f"Added {activity.start_time.strftime('%Y-%m-%d %H:%M')}-"
        f"{activity.end_time.strftime('%H:%M')} "
        f"({format_duration(activity.duration)})"
    )


@app.command("launch-points")
def launch_points(db_path: Optional[Path] = DB_OPTION) -> None:
    """List the launch points."""
    tracker = _open_tracker(db_path)
    TimelinePrinter(tracker.settings).print_launch_points(tracker.launch_points.all())


@app.command("add-launch-point")
def add_launch_point(
    icon: str = typer.Argument(..., help="Icon or emoji."),
    label: str = typer.Argument(..., help="Display label."),
    point_id: Optional[int] = typer.Option(None, "--id", help="Explicit id to assign."),
    db_path: Optional[Path] = DB_OPTION,
) -> None:
    """Define a new launch point."""
    tracker = _open_tracker(db_path)
    try:
        point = tracker.add_launch_point(icon, label, point_id)
    except TimelineError as exc:
        _fail(exc)
    typer.echo(f"Added launch point {point.id}: {point.icon} {point.label}")


@app.command("remove-launch-point")
def remove_launch_point(
    point_id: int = typer.Argument(..., help="Id of the launch point to delete."),
    db_path: Optional[Path] = DB_OPTION,
) -> None:
    """Delete a launch point; past activities keep their copy."""
    tracker = _open_tracker(db_path)
    tracker.delete_launch_point(point_id)
    typer.echo(f"Removed launch point {point_id}")


@app.command()
def export(
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        path_type=Path,
        help="Output file or directory. Defaults to timeline-data-<date>.json here.",
    ),
    db_path: Optional[Path] = DB_OPTION,
) -> None:
    """Write all activities and launch points to a JSON file."""
    tracker = _open_tracker(db_path)
    filename, document = tracker.export()
    target = out or Path(filename)
    if target.is_dir():
        target = target / filename
    target.write_text(document, encoding="utf-8")
    typer.echo(f"Exported to {target}")


@app.command("import")
def import_(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Exported JSON file."),
    db_path: Optional[Path] = DB_OPTION,
) -> None:
    """Replace all activities and launch points with an exported file."""
    tracker = _open_tracker(db_path)
    try:
        tracker.import_document(path.read_bytes())
    except TimelineError as exc:
        _fail(exc)
    typer.echo(
        f"Imported {len(tracker.activities)} activities and "
        f"{len(tracker.launch_points)} launch points."
    )


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the dashboard."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the dashboard."
    ),
    db_path: Optional[Path] = DB_OPTION,
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Automatically launch the dashboard in your default browser.",
    ),
) -> None:
    """Start the local timeline dashboard."""
    run_dashboard(
        host=host,
        port=port,
        db_path=db_path or get_db_path(),
        open_browser=open_browser,
    )
