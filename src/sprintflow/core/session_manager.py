# core/session_manager.py
import threading
from typing import List, Optional

from sprintflow.core.ports.notification_port import NotificationPort
from sprintflow.core.schedule import ScheduleItem, generate_schedule
from sprintflow.core.settings import SessionSettings
from sprintflow.custom_exceptions import EmptyScheduleError, SessionConflictError, SessionNotRunningError
from sprintflow.tools.time_tools.session_player import SessionPlayer
from sprintflow.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


class SessionManager():
    """Owns the single session player and turns settings into running sessions."""

    def __init__(self, notifier: Optional[NotificationPort] = None, loop=None, tick_interval: float = 1.0):
        self.player = SessionPlayer(notifier=notifier, loop=loop, tick_interval=tick_interval)
        self.settings: Optional[SessionSettings] = None
        # Serializes start/cancel so one request's cancel-load-start is never interleaved with another's
        self._lock = threading.Lock()

    def preview(self, settings: SessionSettings) -> List[ScheduleItem]:
        return generate_schedule(settings.to_durations())

    def start(self, settings: SessionSettings) -> dict:
        """
        Generates a schedule and starts playing it.
        A session that is still running is cancelled first.

        Raises:
            EmptyScheduleError: The settings produce no items.
            SessionConflictError: The player refused the new schedule or the start.
        """
        schedule = self.preview(settings)
        if not schedule:
            raise EmptyScheduleError("Session length is zero, nothing to play.")

        with self._lock:
            if self.player.is_running:
                logger.info("Replacing the running session.")
                self.player.cancel()

            if not self.player.load_schedule(schedule):
                raise SessionConflictError("Another session is still running.")
            if not self.player.start():
                raise SessionConflictError("The session could not be started.")
            self.settings = settings
            return self.player.get_status()

    def cancel(self) -> dict:
        with self._lock:
            if not self.player.cancel():
                raise SessionNotRunningError("No session is running.")
            return self.player.get_status()

    def status(self) -> dict:
        return self.player.get_status()

    def schedule(self) -> List[ScheduleItem]:
        return self.player.schedule

    def shutdown(self):
        self.player.close()
