import threading
from abc import ABC, abstractmethod
from sprintflow.utils.logging_handler import setup_logger
from sprintflow.utils import Event

logger = setup_logger(__name__)


class TimeTool(ABC):
    """
    An abstract base class for tick-driven time tools.
    It owns at most one background ticker thread at a time and guarantees that
    the ticker is stopped on every path out of the running state.
    """
    def __init__(self, loop=None, tick_interval: float = 1.0):
        """Initializes the TimeTool with default states and event hooks."""
        self.tick_interval = tick_interval
        self._lock = threading.RLock()
        self._thread = None
        self._stop_flag = None
        # Bumped whenever a ticker is acquired or released; ticks carrying an
        # older generation were in flight during a release and are dropped.
        self._generation = 0

        self.on_tick = Event(loop)
        self.on_start = Event(loop)
        self.on_stop = Event(loop)

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """True while the tool is in its running state."""

    @property
    def timer_active(self) -> bool:
        """True while a ticker thread is alive."""
        thread = self._thread
        return thread is not None and thread.is_alive()

    @abstractmethod
    def start(self, *args, **kwargs):
        """
        Abstract method to start the tool.
        Must be implemented by subclasses to define specific start behavior.
        """
        pass

    @abstractmethod
    def tick(self):
        """Advance the tool by one tick. Called by the ticker or directly by a driver."""
        pass

    @abstractmethod
    def get_status(self) -> dict:
        """
        Abstract method to retrieve the current status of the tool.
        Should return a dictionary containing relevant state data (e.g., remaining time).
        """
        pass

    def close(self):
        """Tears the tool down. Stops the ticker without emitting any events."""
        self._release_timer()

    def _acquire_timer_locked(self):
        """
        Starts a fresh ticker. The caller holds ``_lock`` and has already
        detached any previous ticker, so the state change that needs a ticker
        and the ticker itself appear together.
        """
        self._generation += 1
        stop_flag = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(self._generation, stop_flag),
            name=f"{self.__class__.__name__.lower()}_ticker",
        )
        thread.daemon = True
        self._stop_flag = stop_flag
        self._thread = thread
        thread.start()
        logger.debug(f"{self.__class__.__name__} ticker started (generation {self._generation}).")

    def _detach_timer_locked(self, generation=None):
        """
        Signals the current ticker to stop and forgets it. The caller holds
        ``_lock`` and joins the returned thread after letting go of the lock.

        With ``generation`` set, only the ticker of that generation is detached;
        a newer ticker is left alone and None is returned.
        """
        if generation is not None and generation != self._generation:
            return None
        thread, stop_flag = self._thread, self._stop_flag
        self._thread = None
        self._stop_flag = None
        self._generation += 1
        if stop_flag is not None:
            stop_flag.set()
        return thread

    def _join_timer(self, thread):
        """Waits for a detached ticker to exit. Must not be called while holding ``_lock``."""
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout=max(1.0, self.tick_interval))
            if thread.is_alive():
                logger.warning(f"{self.__class__.__name__} ticker did not stop within the join timeout.")
        self.on_stop.emit()
        logger.debug(f"{self.__class__.__name__} ticker released.")

    def _release_timer(self, generation=None):
        """Stops the ticker if one is alive. Safe to call from the ticker thread itself."""
        with self._lock:
            thread = self._detach_timer_locked(generation)
        self._join_timer(thread)

    def _run(self, generation: int, stop_flag: threading.Event):
        """
        The ticker loop, run in a separate thread.
        Waiting on the stop flag means a release wakes the loop immediately
        instead of letting one more tick through.
        """
        while not stop_flag.wait(self.tick_interval):
            self._timer_tick(generation)

    @abstractmethod
    def _timer_tick(self, generation: int):
        """Handle one tick from the ticker thread identified by ``generation``."""
        pass
