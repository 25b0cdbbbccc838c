"""Unit tests for SessionPlayer."""

import threading
from unittest.mock import MagicMock

import pytest

from sprintflow.core.ports.notification_port import NotificationPort
from sprintflow.core.schedule import EventLabel, ScheduleItem, generate_schedule
from sprintflow.core.session_state import SessionState
from sprintflow.tools.time_tools.session_player import SessionPlayer


@pytest.fixture
def notifier():
    return MagicMock(spec=NotificationPort)


@pytest.fixture
def player(short_schedule, notifier):
    """A player driven by hand, with no ticker thread."""
    on_cancel = MagicMock()
    player = SessionPlayer(short_schedule, on_cancel=on_cancel, notifier=notifier, autostart_timer=False)
    yield player
    player.close()


class TestSessionPlayerLifecycle:
    """Tests for start, tick and completion."""

    def test_created_idle(self, player):
        """Test that a new player is idle at the first item."""
        assert player.state == SessionState(0, 0, False)
        assert player.is_running is False
        assert player.timer_active is False

    def test_start_loads_first_item(self, player):
        """Test that start rewinds and begins counting the first item."""
        started = MagicMock()
        player.on_start.add_listener(started)

        assert player.start() is True

        assert player.state == SessionState(0, 2, True)
        assert player.current_event.event == EventLabel.INTENTION_SETTING
        assert player.formatted_time == "00:02"
        started.assert_called_once()

    def test_start_while_running_is_ignored(self, player):
        """Test that a second start does not rewind a running session."""
        player.start()
        player.tick()

        assert player.start() is False
        assert player.state == SessionState(0, 1, True)

    def test_start_with_empty_schedule_stays_idle(self):
        """Test that there is nothing to play for an empty schedule."""
        player = SessionPlayer([], autostart_timer=False)

        assert player.start() is False
        assert player.is_running is False

    def test_ticks_advance_to_next_item(self, player):
        """Test that counting down the first item then ticking once moves on."""
        changes = []
        player.on_event_change.add_listener(lambda status: changes.append(status["current_event"]))
        player.start()

        for _ in range(2):
            player.tick()
        assert player.state.current_index == 0

        player.tick()

        assert player.state == SessionState(1, 3, True)
        assert changes == ["Intention Setting", "Sprint"]

    def test_tick_while_idle_does_nothing(self, player):
        """Test that ticks are ignored before start."""
        ticks = MagicMock()
        player.on_tick.add_listener(ticks)

        player.tick()

        assert player.state == SessionState(0, 0, False)
        ticks.assert_not_called()

    def test_completion(self, player, notifier):
        """Test that playing through the schedule ends idle on the End item."""
        completed = MagicMock()
        player.on_complete.add_listener(completed)
        player.start()

        while player.is_running:
            player.tick()

        assert player.state == SessionState(3, 0, False)
        assert player.current_event.event == EventLabel.END
        assert player.progress_percent == 100.0
        completed.assert_called_once()
        notifier.notify_session_complete.assert_called_once()
        notifier.notify_session_cancelled.assert_not_called()
        player._on_cancel.assert_not_called()

    def test_single_end_schedule_completes_on_first_tick(self, notifier):
        """Test that an End-only schedule is done after one tick."""
        player = SessionPlayer([ScheduleItem("00:00:00", EventLabel.END)], notifier=notifier, autostart_timer=False)
        player.start()

        player.tick()

        assert player.is_running is False
        notifier.notify_session_complete.assert_called_once()

    def test_restart_after_completion(self, player):
        """Test that a finished session can be started again from the top."""
        player.start()
        while player.is_running:
            player.tick()

        assert player.start() is True
        assert player.state == SessionState(0, 2, True)

    def test_status_snapshot(self, player):
        """Test the status dictionary handed to the display."""
        player.start()

        status = player.get_status()

        assert status == {
            "is_running": True,
            "state": "running",
            "current_index": 0,
            "current_event": "Intention Setting",
            "event_time": "00:00:00",
            "time_remaining": 2,
            "time_remaining_formatted": "00:02",
            "progress_percent": 25.0,
            "total_events": 4,
            "guidance": player.guidance.to_dict(),
        }

    def test_load_schedule_only_while_idle(self, player, short_schedule):
        """Test that the schedule cannot be swapped mid-session."""
        player.start()
        assert player.load_schedule(short_schedule[:1]) is False

        player.cancel()
        assert player.load_schedule(short_schedule[:1]) is True
        assert player.schedule == short_schedule[:1]
        assert player.state == SessionState(0, 0, False)


class TestSessionPlayerCancel:
    """Tests for cancel."""

    def test_cancel_goes_idle_and_notifies_once(self, player, notifier):
        """Test that cancel freezes state and calls the cancel hook exactly once."""
        cancelled = MagicMock()
        player.on_cancelled.add_listener(cancelled)
        player.start()
        player.tick()

        assert player.cancel() is True

        assert player.state == SessionState(0, 1, False)
        player._on_cancel.assert_called_once_with()
        notifier.notify_session_cancelled.assert_called_once()
        cancelled.assert_called_once()

    def test_no_ticks_after_cancel(self, player):
        """Test that ticks after cancel, including ones already in flight, are dropped."""
        player.start()
        stale_generation = player._generation

        player.cancel()
        player.tick()
        player._timer_tick(stale_generation)

        assert player.state == SessionState(0, 2, False)

    def test_cancel_while_idle_is_ignored(self, player, notifier):
        """Test that there is nothing to cancel before start."""
        assert player.cancel() is False

        player._on_cancel.assert_not_called()
        notifier.notify_session_cancelled.assert_not_called()

    def test_second_cancel_does_not_notify_again(self, player):
        """Test that the cancel hook fires once per session."""
        player.start()
        player.cancel()
        player.cancel()

        player._on_cancel.assert_called_once_with()


class TestSessionPlayerTicker:
    """Tests that run the real ticker thread."""

    def test_ticker_plays_schedule_to_completion(self, short_schedule):
        """Test that the ticker drives the session to completion and then stops."""
        done = threading.Event()
        player = SessionPlayer(short_schedule, tick_interval=0.01)
        player.on_complete.add_listener(lambda status: done.set())

        player.start()
        assert player.timer_active is True

        assert done.wait(timeout=5)
        assert player.is_running is False
        assert player.state.current_index == len(short_schedule) - 1
        player.close()
        assert player.timer_active is False

    def test_cancel_releases_ticker(self, default_durations):
        """Test that cancel stops the ticker thread synchronously."""
        schedule = generate_schedule(default_durations)
        ticked = threading.Event()
        player = SessionPlayer(schedule, tick_interval=0.01)
        player.on_tick.add_listener(lambda status: ticked.set())

        player.start()
        assert ticked.wait(timeout=5)
        player.cancel()

        assert player.timer_active is False
        frozen = player.state
        assert frozen.is_running is False
        ticked.clear()
        assert not ticked.wait(timeout=0.1)
        assert player.state == frozen

    def test_close_stops_ticker_without_notifying(self, short_schedule, notifier):
        """Test that teardown releases the ticker silently."""
        player = SessionPlayer(short_schedule, notifier=notifier, tick_interval=60)
        player.start()

        player.close()

        assert player.timer_active is False
        assert player.is_running is False
        notifier.notify_session_cancelled.assert_not_called()
        notifier.notify_session_complete.assert_not_called()

    def test_cancel_during_start_leaves_no_ticker(self, short_schedule):
        """Test that a cancel racing a start never leaves a ticker behind an idle player."""
        player = SessionPlayer(short_schedule, tick_interval=60)
        acquire = player._acquire_timer_locked
        canceller = threading.Thread(target=player.cancel)

        def acquire_then_race_cancel():
            acquire()
            # start() still holds the state lock, so the cancel has to wait for it
            canceller.start()
            canceller.join(timeout=0.2)

        player._acquire_timer_locked = acquire_then_race_cancel

        assert player.start() is True
        canceller.join(timeout=5)

        assert player.is_running is False
        assert player.timer_active is False

    def test_restart_while_completion_in_flight_keeps_new_ticker(self, default_durations):
        """Test that a finishing session cannot stop or report over a session started right after it."""
        end_only = [ScheduleItem("00:00:00", EventLabel.END)]
        player = SessionPlayer(end_only, tick_interval=0.01)
        completed = MagicMock()
        player.on_complete.add_listener(completed)

        in_tick = threading.Event()
        release = threading.Event()
        blocked = []

        def hold_first_tick(status):
            if blocked:
                return
            blocked.append(threading.current_thread())
            in_tick.set()
            release.wait(timeout=5)

        player.on_tick.add_listener(hold_first_tick)

        player.start()
        # The completing tick has set the player idle and is now parked in on_tick
        assert in_tick.wait(timeout=5)
        assert player.is_running is False

        assert player.load_schedule(generate_schedule(default_durations)) is True
        assert player.start() is True
        release.set()
        blocked[0].join(timeout=5)

        assert player.is_running is True
        assert player.timer_active is True
        completed.assert_not_called()
        player.close()
        assert player.timer_active is False
