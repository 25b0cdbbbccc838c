"""Shared fixtures for the sprintflow test suite."""
import os

# Keep test runs from writing log files into the package directory
os.environ.setdefault("SPRINTFLOW_LOG_TO_FILE", "0")

import pytest

from sprintflow.core.schedule import EventLabel, ScheduleItem, SessionDurations


@pytest.fixture
def default_durations():
    """The form defaults: one hour session, 5/20/5 cycle, 5 and 20 minute breaks."""
    return SessionDurations(
        session=3600,
        intention_setting=300,
        sprint=1200,
        reflection=300,
        regular_break=300,
        longer_break=1200,
    )


@pytest.fixture
def short_schedule():
    """A schedule with 2, 3 and 1 second phases before the End marker."""
    return [
        ScheduleItem("00:00:00", EventLabel.INTENTION_SETTING),
        ScheduleItem("00:00:02", EventLabel.SPRINT),
        ScheduleItem("00:00:05", EventLabel.REFLECTION),
        ScheduleItem("00:00:06", EventLabel.END),
    ]
