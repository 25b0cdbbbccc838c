"""Playback state and its transitions.

The transitions are pure: each takes the current :class:`SessionState` and the
schedule and returns the next state. The player wires them to a ticker; tests
and other schedulers can call them directly.
"""
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from sprintflow.core.schedule import ScheduleItem, duration_of
from sprintflow.utils.time_conversions import format_seconds_to_ms


@dataclass(frozen=True)
class SessionState:
    current_index: int = 0
    time_remaining: int = 0
    is_running: bool = False


IDLE_STATE = SessionState()


def start_state(schedule: Sequence[ScheduleItem]) -> SessionState:
    return SessionState(current_index=0, time_remaining=duration_of(schedule, 0), is_running=True)


def tick_state(state: SessionState, schedule: Sequence[ScheduleItem]) -> SessionState:
    """One second of playback."""
    if not state.is_running:
        return state
    if state.time_remaining > 0:
        return replace(state, time_remaining=state.time_remaining - 1)

    next_index = state.current_index + 1
    if next_index >= len(schedule):
        # Completed; the index stays on the final item
        return replace(state, is_running=False)
    return SessionState(
        current_index=next_index,
        time_remaining=duration_of(schedule, next_index),
        is_running=True,
    )


def cancel_state(state: SessionState) -> SessionState:
    return replace(state, is_running=False)


def current_event(state: SessionState, schedule: Sequence[ScheduleItem]) -> Optional[ScheduleItem]:
    if 0 <= state.current_index < len(schedule):
        return schedule[state.current_index]
    return None


def progress_percent(state: SessionState, schedule: Sequence[ScheduleItem]) -> float:
    if not schedule:
        return 0.0
    return min(100.0, (state.current_index + 1) / len(schedule) * 100)


def formatted_time(state: SessionState) -> str:
    return format_seconds_to_ms(state.time_remaining)
