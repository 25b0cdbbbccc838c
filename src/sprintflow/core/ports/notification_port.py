from abc import ABC, abstractmethod

class NotificationPort(ABC):
    """Port for telling the surrounding application that a session has ended."""

    @abstractmethod
    def notify_session_complete(self, status: dict) -> None:
        """The schedule played through to its last item."""
        pass

    @abstractmethod
    def notify_session_cancelled(self, status: dict) -> None:
        """The session was cancelled before the schedule finished."""
        pass
