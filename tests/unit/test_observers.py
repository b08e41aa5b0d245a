"""Tests for the synchronous observer list."""

from unittest.mock import MagicMock

from rcon_monitor.observers import ObserverList


class TestObserverList:
    def test_notifies_in_registration_order(self) -> None:
        observers = ObserverList("test")
        calls = []
        observers.subscribe(lambda value: calls.append(("first", value)))
        observers.subscribe(lambda value: calls.append(("second", value)))

        observers.notify(7)

        assert calls == [("first", 7), ("second", 7)]

    def test_failing_callback_does_not_block_later_ones(self) -> None:
        observers = ObserverList("test")
        failing = MagicMock(side_effect=RuntimeError("boom"))
        later = MagicMock()
        observers.subscribe(failing)
        observers.subscribe(later)

        observers.notify("a", "b")

        failing.assert_called_once_with("a", "b")
        later.assert_called_once_with("a", "b")

    def test_unsubscribe_handle_removes_callback(self) -> None:
        observers = ObserverList("test")
        callback = MagicMock()
        unsubscribe = observers.subscribe(callback)

        unsubscribe()
        unsubscribe()
        observers.notify()

        callback.assert_not_called()
        assert len(observers) == 0

    def test_callback_may_unsubscribe_itself_during_notify(self) -> None:
        observers = ObserverList("test")
        later = MagicMock()
        handles = {}

        def once() -> None:
            handles["once"]()

        handles["once"] = observers.subscribe(once)
        observers.subscribe(later)

        observers.notify()
        observers.notify()

        assert later.call_count == 2
        assert len(observers) == 1

    def test_clear(self) -> None:
        observers = ObserverList("test")
        observers.subscribe(MagicMock())
        observers.clear()
        assert len(observers) == 0
