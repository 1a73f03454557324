"""Console rendering of the timeline for CLI output."""

from __future__ import annotations

import sys
from typing import Iterable, TextIO

from .config import DisplaySettings
from .geometry import hour_marks
from .layout import DayLayout
from .models import LaunchPoint


class TimelinePrinter:
    """Render day strips and activity lists in the console."""

    def __init__(self, settings: DisplaySettings, out: TextIO | None = None) -> None:
        self.settings = settings
        self.out = out or sys.stdout

    def print_days(self, layouts: Iterable[DayLayout]) -> None:
        for layout in layouts:
            self.print_day(layout)
            self._write("")

    def print_day(self, layout: DayLayout) -> None:
        self._write(layout.title)
        self._write(render_strip(layout, self.settings.strip_width))
        self._write(render_scale(self.settings.strip_width))
        if not layout.blocks:
            self._write("  No activities logged.")
            return
        for block in layout.blocks:
            activity = block.activity
            icon = activity.launch_point.icon if activity.launch_point else " "
            line = (
                f"  {icon} {activity.start_time.strftime('%H:%M')}-"
                f"{activity.end_time.strftime('%H:%M')} "
                f"{format_duration(activity.duration):>6}"
            )
            if not self.settings.compact and activity.comment:
                line += f"  {activity.comment}"
            self._write(line)

    def print_launch_points(self, points: Iterable[LaunchPoint]) -> None:
        points = list(points)
        if not points:
            self._write("No launch points defined.")
            return
        for point in points:
            self._write(f"{point.id:>14}  {point.icon}  {point.label}")

    def _write(self, text: str) -> None:
        print(text, file=self.out)


def render_strip(layout: DayLayout, width: int) -> str:
    """Draw the day as ``width`` cells; ``|`` marks gridlines, ``#`` activity."""
    cells = ["."] * width
    for _, left, _ in hour_marks():
        cells[_cell(left, width)] = "|"
    for block in layout.blocks:
        start = _cell(block.left, width)
        span = max(1, round(block.width / 100 * width))
        for index in range(start, min(start + span, width)):
            cells[index] = "#"
    return "".join(cells)


def render_scale(width: int) -> str:
    scale = [" "] * width
    for _, left, label in hour_marks():
        start = _cell(left, width)
        for offset, char in enumerate(label[:2]):
            if start + offset < width:
                scale[start + offset] = char
    return "".join(scale)


def _cell(percent: float, width: int) -> int:
    return min(width - 1, int(percent / 100 * width))


def format_duration(minutes: float) -> str:
    total_minutes = int(round(minutes))
    hours, mins = divmod(total_minutes, 60)
    return f"{hours:d}:{mins:02d}"
