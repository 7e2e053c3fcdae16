from __future__ import annotations

import pytest

from stepnest import events
from stepnest.events import EventDispatcher


def test_handlers_run_in_subscription_order() -> None:
    dispatcher = EventDispatcher()
    seen = []
    dispatcher.on(events.STEP_STARTED, lambda step: seen.append(("first", step)))
    dispatcher.on(events.STEP_STARTED, lambda step: seen.append(("second", step)))
    dispatcher.emit(events.STEP_STARTED, "s")
    assert seen == [("first", "s"), ("second", "s")]


def test_off_removes_handler() -> None:
    dispatcher = EventDispatcher()
    seen = []
    handler = seen.append
    dispatcher.on(events.TEST_PASSED, handler)
    dispatcher.off(events.TEST_PASSED, handler)
    dispatcher.off(events.TEST_PASSED, handler)
    dispatcher.emit(events.TEST_PASSED, "t")
    assert seen == []
    assert dispatcher.handlers(events.TEST_PASSED) == []


def test_unknown_event_rejected() -> None:
    dispatcher = EventDispatcher()
    with pytest.raises(ValueError, match="Unknown event"):
        dispatcher.on("step.skipped", print)
    with pytest.raises(ValueError):
        dispatcher.emit("suite.during")


def test_handler_errors_propagate() -> None:
    dispatcher = EventDispatcher()

    def explode(*_):
        raise RuntimeError("writer failed")

    dispatcher.on(events.SUITE_AFTER, explode)
    with pytest.raises(RuntimeError, match="writer failed"):
        dispatcher.emit(events.SUITE_AFTER)
