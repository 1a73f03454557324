"""
Tests for mapping times and activities onto the 24-hour axis.
"""

import logging
from datetime import date, datetime, timedelta

import pytest

from activity_timeline.geometry import hour_marks, position_fraction, width_fraction
from activity_timeline.models import Activity


def _activity(start, end, duration):
    return Activity(
        id=1,
        start_time=start,
        end_time=end,
        duration=duration,
        color="#4A90E2",
        comment="",
        launch_point=None,
        date=date(2024, 1, 15),
    )


def test_position_of_nine_am():
    assert position_fraction(datetime(2024, 1, 15, 9, 0)) == pytest.approx(37.5)


def test_position_accepts_iso_strings():
    assert position_fraction("2024-01-15T18:00:00") == pytest.approx(75.0)


def test_position_stays_in_range_and_is_monotonic_within_a_day():
    midnight = datetime(2024, 1, 15)
    positions = [
        position_fraction(midnight + timedelta(minutes=minute))
        for minute in range(24 * 60)
    ]
    assert positions[0] == 0.0
    assert all(0 <= value < 100 for value in positions)
    assert positions == sorted(positions)


def test_width_uses_duration_first():
    start = datetime(2024, 1, 15, 9, 0).astimezone()
    activity = _activity(start, start + timedelta(minutes=30), 30)
    assert width_fraction(activity) == pytest.approx(2.0833333)


def test_width_falls_back_to_start_and_end():
    start = datetime(2024, 1, 15, 9, 0).astimezone()
    activity = _activity(start, start + timedelta(hours=6), None)
    assert width_fraction(activity) == pytest.approx(25.0)


def test_width_without_enough_data_is_zero_and_logged(caplog):
    activity = _activity(None, None, None)
    with caplog.at_level(logging.WARNING, logger="activity_timeline.geometry"):
        assert width_fraction(activity) == 0.0
    assert "Insufficient parameters" in caplog.text


def test_width_rejects_a_bare_duration():
    with pytest.raises(TypeError):
        width_fraction(30)


def test_hour_marks_every_three_hours():
    marks = hour_marks()
    assert len(marks) == 8
    assert marks[0] == (0, 0.0, "00:00")
    assert marks[1] == (3, 12.5, "03:00")
    assert marks[-1][2] == "21:00"
