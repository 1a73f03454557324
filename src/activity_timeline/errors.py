"""Exceptions raised by the timeline core."""

from __future__ import annotations


class TimelineError(Exception):
    """Base class for all timeline failures surfaced to the user."""


class InsufficientFieldsError(TimelineError, ValueError):
    """Fewer than two of start time, end time and duration were supplied."""


class InvalidInputError(TimelineError, ValueError):
    """The supplied time fields cannot be resolved into an activity."""


class MissingFieldError(TimelineError, ValueError):
    """A required launch point field was left empty."""


class DuplicateIdError(TimelineError, ValueError):
    """A manually assigned id is already taken."""


class SnapshotImportError(TimelineError):
    """An import document could not be parsed or is missing fields."""
