# core/status.py
from enum import Enum

class PlayerStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"


class SessionEndReason(Enum):
    COMPLETE = "complete"
    CANCELLED = "cancelled"
