class SessionNotRunningError(Exception):
    """Exception raised when cancelling while no session is running."""
    pass


class EmptyScheduleError(Exception):
    """Exception raised when a session is requested for a schedule with no items."""
    pass


class SessionConflictError(Exception):
    """Exception raised when the player refuses a new session because another one holds it."""
    pass
