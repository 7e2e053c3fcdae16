"""Lifecycle event names and the synchronous dispatcher."""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

SUITE_BEFORE = "suite.before"
SUITE_AFTER = "suite.after"
HOOK_STARTED = "hook.started"
HOOK_PASSED = "hook.passed"
HOOK_FAILED = "hook.failed"
TEST_BEFORE = "test.before"
TEST_STARTED = "test.started"
TEST_PASSED = "test.passed"
TEST_FAILED = "test.failed"
STEP_STARTED = "step.started"
STEP_PASSED = "step.passed"
STEP_FAILED = "step.failed"

EVENT_NAMES = (
    SUITE_BEFORE,
    SUITE_AFTER,
    HOOK_STARTED,
    HOOK_PASSED,
    HOOK_FAILED,
    TEST_BEFORE,
    TEST_STARTED,
    TEST_PASSED,
    TEST_FAILED,
    STEP_STARTED,
    STEP_PASSED,
    STEP_FAILED,
)

Handler = Callable[..., Any]


class EventDispatcher:
    """Delivers each event to its handlers synchronously, in subscription order."""

    def __init__(self) -> None:
        self._handlers: DefaultDict[str, List[Handler]] = defaultdict(list)

    def on(self, event: str, handler: Handler) -> None:
        self._check(event)
        self._handlers[event].append(handler)

    def off(self, event: str, handler: Handler) -> None:
        self._check(event)
        try:
            self._handlers[event].remove(handler)
        except ValueError:
            pass

    def emit(self, event: str, *payload: Any) -> None:
        self._check(event)
        for handler in list(self._handlers[event]):
            handler(*payload)

    def handlers(self, event: str) -> List[Handler]:
        self._check(event)
        return list(self._handlers[event])

    def _check(self, event: str) -> None:
        if event not in EVENT_NAMES:
            raise ValueError(f"Unknown event {event!r}")
