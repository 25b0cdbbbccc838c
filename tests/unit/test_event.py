"""Unit tests for the Event listener list."""

from unittest.mock import MagicMock

import pytest

from sprintflow.utils import Event


class TestEvent:
    """Tests for Event."""

    def test_emit_calls_listeners_in_order(self):
        """Test that listeners receive emitted arguments in registration order."""
        calls = []
        event = Event()
        event.add_listener(lambda **kw: calls.append(("first", kw)))
        event.add_listener(lambda **kw: calls.append(("second", kw)))

        event.emit(status={"current_index": 0})

        assert calls == [
            ("first", {"status": {"current_index": 0}}),
            ("second", {"status": {"current_index": 0}}),
        ]

    def test_rejects_non_callable(self):
        """Test that only callables can be registered."""
        with pytest.raises(ValueError):
            Event().add_listener("not callable")

    def test_remove_listener(self):
        """Test that a removed listener is no longer called."""
        listener = MagicMock()
        event = Event()
        event.add_listener(listener)
        event.remove_listener(listener)

        event.emit()

        listener.assert_not_called()
        assert len(event) == 0

    def test_failing_listener_does_not_stop_others(self):
        """Test that one listener raising is logged and the rest still run."""
        after = MagicMock()
        event = Event()
        event.add_listener(MagicMock(side_effect=RuntimeError("boom")))
        event.add_listener(after)

        event.emit(1)

        after.assert_called_once_with(1)

    def test_async_listener_without_loop_is_not_awaited(self):
        """Test that a coroutine listener with no loop is closed rather than left pending."""
        ran = []

        async def listener():
            ran.append(True)

        event = Event()
        event.add_listener(listener)

        event.emit()

        assert ran == []
