"""Display configuration for the timeline views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from .models import DEFAULT_COLOR


@dataclass(slots=True)
class DisplaySettings:
    """Presentation toggles; never stored alongside activities."""

    compact: bool = False
    show_previous_days: bool = False
    default_color: str = DEFAULT_COLOR
    previous_day_count: int = 2

    @classmethod
    def from_flags(
        cls,
        compact: bool = False,
        show_previous: bool = False,
        default_color: str | None = None,
    ) -> "DisplaySettings":
        return cls(
            compact=compact,
            show_previous_days=show_previous,
            default_color=default_color or DEFAULT_COLOR,
        )

    @property
    def strip_width(self) -> int:
        """Number of characters used for a day strip in the console."""
        return 48 if self.compact else 96

    def visible_days(self, today: date) -> list[date]:
        """Today first, then the previous days when enabled."""
        offsets = [0]
        if self.show_previous_days:
            offsets.extend(range(1, self.previous_day_count + 1))
        return [today - timedelta(days=offset) for offset in offsets]
