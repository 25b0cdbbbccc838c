from typing import Callable, Optional, Sequence

from sprintflow.core.guidance import guidance_for
from sprintflow.core.ports.notification_port import NotificationPort
from sprintflow.core.schedule import ScheduleItem
from sprintflow.core.session_state import (
    IDLE_STATE,
    SessionState,
    cancel_state,
    current_event,
    formatted_time,
    progress_percent,
    start_state,
    tick_state,
)
from sprintflow.core.status import PlayerStatus
from sprintflow.tools.time_tools.base_tool import TimeTool
from sprintflow.utils import Event
from sprintflow.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


class SessionPlayer(TimeTool):
    """
    Plays a generated schedule back one second at a time.

    The player is either idle or running; there is no pause. Starting always
    rewinds to the first item. The session ends when the ticks run past the
    last item (complete) or when :meth:`cancel` is called (cancelled).
    """
    def __init__(
        self,
        schedule: Sequence[ScheduleItem] = (),
        on_cancel: Optional[Callable[[], None]] = None,
        notifier: Optional[NotificationPort] = None,
        loop=None,
        tick_interval: float = 1.0,
        autostart_timer: bool = True,
    ):
        """
        Args:
            schedule: Items produced by ``generate_schedule``.
            on_cancel: Called once, with no arguments, when a running session is cancelled.
            notifier: Told about completion and cancellation.
            loop: Event loop for async listeners.
            tick_interval: Seconds between ticks.
            autostart_timer: When False no ticker thread is started and the
                caller drives playback through :meth:`tick`.
        """
        super().__init__(loop=loop, tick_interval=tick_interval)
        self._schedule = list(schedule)
        self._state = IDLE_STATE
        self._on_cancel = on_cancel
        self._notifier = notifier
        self._autostart_timer = autostart_timer
        # Counts starts so a completion from an earlier session is not reported
        self._session = 0

        self.on_event_change = Event(loop)
        self.on_complete = Event(loop)
        self.on_cancelled = Event(loop)

    @property
    def schedule(self):
        return list(self._schedule)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def current_event(self) -> Optional[ScheduleItem]:
        return current_event(self._state, self._schedule)

    @property
    def progress_percent(self) -> float:
        return progress_percent(self._state, self._schedule)

    @property
    def formatted_time(self) -> str:
        return formatted_time(self._state)

    @property
    def guidance(self):
        item = self.current_event
        return guidance_for(item.event) if item else None

    def load_schedule(self, schedule: Sequence[ScheduleItem]):
        """Replaces the schedule of an idle player and rewinds it."""
        with self._lock:
            if self._state.is_running:
                logger.warning("Cannot load a new schedule while a session is running.")
                return False
            self._schedule = list(schedule)
            self._state = IDLE_STATE
        return True

    def start(self):
        """
        Starts the session from the first item.
        Has no effect while a session is already running.
        """
        previous = None
        with self._lock:
            if self._state.is_running:
                logger.warning("Session is already running.")
                return False
            if not self._schedule:
                logger.warning("Cannot start a session with an empty schedule.")
                return False
            self._session += 1
            self._state = start_state(self._schedule)
            if self._autostart_timer:
                previous = self._detach_timer_locked()
                self._acquire_timer_locked()
            status = self._status()

        self._join_timer(previous)
        self.on_start.emit(status=status)
        self.on_event_change.emit(status=status)
        logger.info(f"Session started: {status['current_event']} for {status['time_remaining_formatted']}.")
        return True

    def tick(self):
        """Advances playback by one second. Ignored while idle."""
        return self._advance(generation=None)

    def cancel(self):
        """Ends a running session early and hands control back via ``on_cancel``."""
        with self._lock:
            if not self._state.is_running:
                logger.warning("No running session to cancel.")
                return False
            self._state = cancel_state(self._state)
            # Also invalidates any tick that is already waiting on the lock
            thread = self._detach_timer_locked()
            status = self._status()

        self._join_timer(thread)
        logger.info(f"Session cancelled at {status['current_event']} ({status['time_remaining_formatted']} left).")
        self.on_cancelled.emit(status=status)
        if self._notifier is not None:
            self._notifier.notify_session_cancelled(status)
        if self._on_cancel is not None:
            self._on_cancel()
        return True

    def close(self):
        """Stops playback without notifying anyone; used on teardown."""
        with self._lock:
            self._state = cancel_state(self._state)
            thread = self._detach_timer_locked()
        self._join_timer(thread)

    def get_status(self) -> dict:
        with self._lock:
            return self._status()

    def _timer_tick(self, generation: int):
        self._advance(generation=generation)

    def _advance(self, generation: Optional[int]):
        thread = None
        with self._lock:
            if generation is not None and generation != self._generation:
                logger.debug("Dropping tick from a released ticker.")
                return self._state
            previous = self._state
            if not previous.is_running:
                return previous
            self._state = tick_state(previous, self._schedule)
            state = self._state
            session = self._session
            if not state.is_running:
                thread = self._detach_timer_locked(generation)
            status = self._status()

        self.on_tick.emit(status=status)

        if not state.is_running:
            self._join_timer(thread)
            with self._lock:
                if self._session != session:
                    logger.info("Session complete, but a newer session has already started; not reporting it.")
                    return state
                logger.info("Session complete.")
                self.on_complete.emit(status=status)
                if self._notifier is not None:
                    self._notifier.notify_session_complete(status)
        elif state.current_index != previous.current_index:
            logger.info(f"Now in {status['current_event']} for {status['time_remaining_formatted']}.")
            self.on_event_change.emit(status=status)
        return state

    def _status(self) -> dict:
        item = current_event(self._state, self._schedule)
        guidance = guidance_for(item.event) if item else None
        return {
            "is_running": self._state.is_running,
            "state": (PlayerStatus.RUNNING if self._state.is_running else PlayerStatus.IDLE).value,
            "current_index": self._state.current_index,
            "current_event": item.event.value if item else None,
            "event_time": item.time if item else None,
            "time_remaining": self._state.time_remaining,
            "time_remaining_formatted": formatted_time(self._state),
            "progress_percent": progress_percent(self._state, self._schedule),
            "total_events": len(self._schedule),
            "guidance": guidance.to_dict() if guidance else None,
        }
