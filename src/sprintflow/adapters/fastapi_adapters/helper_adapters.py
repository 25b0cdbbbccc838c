import json
import asyncio
import threading
from fastapi import WebSocket
from sprintflow.core.ports.notification_port import NotificationPort
from sprintflow.core.status import SessionEndReason
from sprintflow.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


# --- CONNECTION MANAGER ---
class ConnectionManager:
    # The player ticks on its own thread, so sends are scheduled onto the server loop
    def __init__(self, loop: asyncio.AbstractEventLoop):
        self.active_connections: set[WebSocket] = set()
        self._lock = threading.Lock()
        self.loop = loop

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        with self._lock:
            self.active_connections.add(websocket)

    def disconnect(self, websocket: WebSocket):
        with self._lock:
            self.active_connections.discard(websocket)

    def broadcast(self, msg_type: str, data):
        msg = json.dumps({"type": msg_type, "data": data})
        if self.loop.is_closed():
            logger.warning(f"Dropping '{msg_type}' broadcast, event loop is closed.")
            return None
        return asyncio.run_coroutine_threadsafe(self._send_to_all(msg), self.loop)

    def broadcast_tick(self, status: dict):
        return self.broadcast("tick", status)

    def broadcast_session_end(self, reason: SessionEndReason, status: dict):
        return self.broadcast("session_end", {"reason": reason.value, "status": status})

    async def _send_to_all(self, message: str):
        with self._lock:
            current_sockets = list(self.active_connections)
        for ws in current_sockets:
            try:
                await ws.send_text(message)
            except Exception as e:
                logger.debug(f"Dropping websocket after failed send: {e}")
                self.disconnect(ws)


class TickBroadcaster:
    """Listener for the player's tick event that forwards each snapshot to websocket clients."""
    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    def __call__(self, status: dict):
        self.manager.broadcast_tick(status)


class Notifier(NotificationPort):
    """Adapter implementing NotificationPort: tells websocket clients the session is over."""
    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    def notify_session_complete(self, status: dict):
        logger.info("Broadcasting session completion.")
        self.manager.broadcast_session_end(SessionEndReason.COMPLETE, status)

    def notify_session_cancelled(self, status: dict):
        logger.info("Broadcasting session cancellation.")
        self.manager.broadcast_session_end(SessionEndReason.CANCELLED, status)
