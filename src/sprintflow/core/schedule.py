"""Session schedule generation.

A schedule is an ordered list of :class:`ScheduleItem`, each stamped with the
time of day (relative to a midnight epoch) at which its phase begins. The
duration of an item is the gap to the next item's timestamp; the final item
is always a zero-length marker.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from sprintflow.utils.logging_handler import setup_logger
from sprintflow.utils.time_conversions import format_time_of_day, parse_hms

logger = setup_logger(__name__)

ONE_HOUR = 3600


class EventLabel(str, Enum):
    INTENTION_SETTING = "Intention Setting"
    SPRINT = "Sprint"
    REFLECTION = "Reflection"
    REGULAR_BREAK = "Regular Break"
    LONGER_BREAK = "Longer Break"
    END = "End"

    @property
    def is_break(self) -> bool:
        return "Break" in self.value


@dataclass(frozen=True)
class SessionDurations:
    """Durations in whole seconds, already validated by the settings layer."""
    session: int
    intention_setting: int
    sprint: int
    reflection: int
    regular_break: int
    longer_break: int

    @property
    def sprint_cycle(self) -> int:
        return self.intention_setting + self.sprint + self.reflection


@dataclass(frozen=True)
class ScheduleItem:
    time: str
    event: EventLabel

    @property
    def offset_seconds(self) -> int:
        return parse_hms(self.time)

    def to_dict(self) -> dict:
        return {"time": self.time, "event": self.event.value}


def generate_schedule(durations: SessionDurations) -> List[ScheduleItem]:
    """
    Lays out sprint cycles (intention, sprint, reflection) separated by breaks
    until the next cycle or break no longer fits in the session, then closes
    with an End marker.

    A Longer Break replaces the Regular Break once an hour of the session has
    been consumed, but only for sessions longer than an hour.

    The phase durations must not all be zero: a zero-length cycle never
    consumes session time and the loop would not terminate.
    """
    cycle_duration = durations.sprint_cycle
    phases = (
        (EventLabel.INTENTION_SETTING, durations.intention_setting),
        (EventLabel.SPRINT, durations.sprint),
        (EventLabel.REFLECTION, durations.reflection),
    )

    schedule: List[ScheduleItem] = []
    current_time = 0
    elapsed = 0
    next_longer_break = ONE_HOUR

    while elapsed < durations.session:
        if elapsed + cycle_duration > durations.session:
            schedule.append(ScheduleItem(format_time_of_day(current_time), EventLabel.END))
            break

        for label, duration in phases:
            schedule.append(ScheduleItem(format_time_of_day(current_time), label))
            current_time += duration
        elapsed += cycle_duration

        longer = elapsed >= next_longer_break and durations.session > ONE_HOUR
        if longer:
            label, break_duration = EventLabel.LONGER_BREAK, durations.longer_break
        else:
            label, break_duration = EventLabel.REGULAR_BREAK, durations.regular_break

        if elapsed + break_duration >= durations.session:
            schedule.append(ScheduleItem(format_time_of_day(current_time), EventLabel.END))
            break

        schedule.append(ScheduleItem(format_time_of_day(current_time), label))
        current_time += break_duration
        elapsed += break_duration
        if longer:
            next_longer_break += ONE_HOUR

    logger.debug(f"Generated schedule with {len(schedule)} items for a {durations.session}s session.")
    return schedule


def duration_of(schedule: Sequence[ScheduleItem], index: int) -> int:
    """Seconds between an item and the next one; 0 for the last item."""
    if index < 0 or index >= len(schedule) - 1:
        return 0
    return schedule[index + 1].offset_seconds - schedule[index].offset_seconds


def schedule_to_dicts(schedule: Sequence[ScheduleItem]) -> List[dict]:
    return [item.to_dict() for item in schedule]
