from sprintflow.core.schedule import (
    EventLabel,
    ScheduleItem,
    SessionDurations,
    duration_of,
    generate_schedule,
    schedule_to_dicts,
)
from sprintflow.core.session_state import SessionState, start_state, tick_state, cancel_state
from sprintflow.core.settings import SessionSettings
from sprintflow.core.guidance import Guidance, guidance_for
