"""
Tests for activity resolution and the launch point store.
"""

from datetime import date, datetime, time

import pytest

from activity_timeline.errors import (
    DuplicateIdError,
    InsufficientFieldsError,
    InvalidInputError,
    MissingFieldError,
)
from activity_timeline.geometry import position_fraction, width_fraction
from activity_timeline.stores import ActivityStore, LaunchPointStore


@pytest.fixture
def store(clock):
    return ActivityStore(clock=clock)


def test_start_and_duration_resolve_end(store, make_draft):
    activity = store.resolve_and_create(
        make_draft(start_time=time(9, 0), duration=30)
    )

    assert activity.end_time == datetime(2024, 1, 1, 9, 30).astimezone()
    assert activity.duration == 30
    assert position_fraction(activity.start_time) == pytest.approx(37.5)
    assert width_fraction(activity) == pytest.approx(2.0833333)
    assert store.all() == [activity]


def test_start_and_end_resolve_duration(store, make_draft):
    activity = store.resolve_and_create(
        make_draft(start_time=time(8, 15), end_time=time(9, 45))
    )
    assert activity.duration == 90
    assert (activity.end_time - activity.start_time).total_seconds() == 90 * 60


def test_end_and_duration_resolve_start(store, make_draft):
    activity = store.resolve_and_create(make_draft(end_time=time(17, 0), duration=45))
    assert activity.start_time == datetime(2024, 1, 1, 16, 15).astimezone()
    assert activity.date == date(2024, 1, 1)


@pytest.mark.parametrize(
    "fields",
    [{}, {"duration": 30}, {"start_time": time(9, 0)}, {"end_time": time(9, 0)}],
)
def test_fewer_than_two_fields_fail_without_mutation(store, make_draft, fields):
    with pytest.raises(InsufficientFieldsError):
        store.resolve_and_create(make_draft(**fields))
    assert len(store) == 0


def test_end_before_start_is_invalid(store, make_draft):
    with pytest.raises(InvalidInputError):
        store.resolve_and_create(make_draft(start_time=time(10, 0), end_time=time(9, 0)))
    assert len(store) == 0


def test_zero_duration_with_one_endpoint_is_invalid(store, make_draft):
    with pytest.raises(InvalidInputError):
        store.resolve_and_create(make_draft(start_time=time(10, 0), duration=0))


def test_ids_stay_unique_with_a_frozen_clock(store, make_draft):
    first = store.resolve_and_create(make_draft(start_time=time(9, 0), duration=5))
    second = store.resolve_and_create(make_draft(start_time=time(9, 0), duration=5))
    assert first.id != second.id


def test_mutations_notify_listeners(store, make_draft):
    calls = []
    unsubscribe = store.subscribe(lambda: calls.append("changed"))
    store.resolve_and_create(make_draft(start_time=time(9, 0), duration=5))
    store.delete_all()
    unsubscribe()
    store.delete_all()
    assert calls == ["changed", "changed"]


def test_filter_by_date_respects_day_bounds(store, make_draft):
    late = store.resolve_and_create(
        make_draft("2023-12-31", start_time=time(23, 58), duration=5)
    )
    first = store.resolve_and_create(make_draft(start_time=time(0, 0), duration=5))
    last = store.resolve_and_create(make_draft(start_time=time(23, 59), duration=5))
    next_day = store.resolve_and_create(
        make_draft("2024-01-02", start_time=time(0, 0), duration=5)
    )

    selected = store.filter_by_date(date(2024, 1, 1))

    assert selected == [first, last]
    assert late not in selected
    assert next_day not in selected


def test_filter_by_date_is_chronological(store, make_draft):
    later = store.resolve_and_create(make_draft(start_time=time(14, 0), duration=30))
    earlier = store.resolve_and_create(make_draft(start_time=time(8, 0), duration=30))
    assert store.filter_by_date(date(2024, 1, 1)) == [earlier, later]
    assert store.all() == [later, earlier]


def test_launch_points_are_seeded():
    points = LaunchPointStore()
    assert [point.label for point in points.all()] == [
        "Spontaneous",
        "Flow",
        "Pushed through",
        "Scheduled",
    ]
    assert [point.id for point in points.all()] == [1, 2, 3, 4]


def test_launch_point_requires_icon_and_label():
    points = LaunchPointStore()
    with pytest.raises(MissingFieldError):
        points.create("", "Label")
    with pytest.raises(MissingFieldError):
        points.create("*", "   ")
    assert len(points) == 4


def test_launch_point_ids(clock):
    points = LaunchPointStore(clock=clock)
    generated = points.create("*", "Errand")
    manual = points.create("!", "Deadline", point_id=10)

    assert generated.id == int(clock().timestamp() * 1000)
    assert manual.id == 10
    with pytest.raises(DuplicateIdError):
        points.create("?", "Other", point_id=10)


def test_delete_launch_point_by_id():
    points = LaunchPointStore()
    calls = []
    points.subscribe(lambda: calls.append(True))

    points.delete_by_id(999)
    assert len(points) == 4
    assert calls == []

    points.delete_by_id(2)
    assert points.get(2) is None
    assert len(points) == 3
    assert calls == [True]


def test_activity_keeps_its_launch_point_copy(store, make_draft):
    points = LaunchPointStore()
    flow = points.get(2)
    activity = store.resolve_and_create(
        make_draft(start_time=time(9, 0), duration=30, launch_point=flow)
    )
    points.delete_by_id(2)
    assert activity.launch_point.label == "Flow"


def test_out_of_range_duration_is_invalid(store, make_draft):
    with pytest.raises(InvalidInputError):
        store.resolve_and_create(make_draft(start_time=time(9, 0), duration=10**12))
    with pytest.raises(InvalidInputError):
        store.resolve_and_create(make_draft(end_time=time(9, 0), duration=10**12))
    assert len(store) == 0
