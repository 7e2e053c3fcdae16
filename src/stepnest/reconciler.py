"""Meta-step stack reconciliation.

The event source announces steps but never announces the end of a meta-step.
Each step notification carries the chain of meta-steps it runs under; the
reconciler compares that chain with the meta-steps it currently has open and
emits the closes and opens needed to make the two agree before the step
itself is opened.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from colorama import Fore

from stepnest.core.models import PASSED, CaseInfo, Step
from stepnest.sink import ReportSink

log = logging.getLogger(__name__)

# Markers the runner wraps around the actor name in rendered step text.
ACTOR_HIGHLIGHT_START = Fore.CYAN
ACTOR_HIGHLIGHT_END = Fore.RESET


def strip_actor_highlight(text: str) -> str:
    """Remove the cyan actor highlight and its reset; everything else is kept verbatim."""

    if ACTOR_HIGHLIGHT_START not in text:
        return text
    return text.replace(ACTOR_HIGHLIGHT_START, "", 1).replace(ACTOR_HIGHLIGHT_END, "", 1)


def common_prefix_length(left: Sequence[str], right: Sequence[str]) -> int:
    length = 0
    for a, b in zip(left, right):
        if a != b:
            break
        length += 1
    return length


class MetaStepReconciler:
    """Keeps the report's open meta-steps in line with each step's ancestor chain."""

    def __init__(self, sink: ReportSink) -> None:
        self._sink = sink
        self._open_stack: List[str] = []
        self._current_step: Optional[Step] = None
        self._current_text: Optional[str] = None
        self._hook_active = False

    @property
    def open_stack(self) -> Tuple[str, ...]:
        return tuple(self._open_stack)

    @property
    def current_step(self) -> Optional[Step]:
        return self._current_step

    @property
    def hook_active(self) -> bool:
        return self._hook_active

    def hook_started(self) -> None:
        self._hook_active = True

    def hook_finished(self) -> None:
        self._hook_active = False

    def case_started(self, test: CaseInfo) -> None:
        self._sink.start_case(test.title)
        self._open_stack = []
        self._current_step = None
        self._current_text = None

    def step_started(self, step: Step) -> None:
        if self._hook_active:
            log.debug("hook step %r not reported", step.text)
            return
        chain = step.ancestors()
        self._reconcile(chain)
        text = strip_actor_highlight(step.text)
        if self._current_step is not None:
            if self._current_text == text:
                return
            # only one leaf is tracked at a time
            self._close_current_step(PASSED)
        self._sink.start_step(text)
        self._current_step = step
        self._current_text = text

    def step_finished(self, step: Step, outcome: str) -> None:
        if step is not self._current_step:
            log.debug("ignoring %s for untracked step %r", outcome, step.text)
            return
        self._close_current_step(outcome)

    def case_finished(self, outcome: str, error: Any = None) -> None:
        if self._current_step is not None:
            self._close_current_step(outcome)
        self._close_meta_steps(0, outcome)
        self._sink.end_case(outcome, error)

    def _reconcile(self, chain: Tuple[str, ...]) -> None:
        shared = common_prefix_length(self._open_stack, chain)
        if shared == len(self._open_stack) == len(chain):
            return
        # a leaf left open would otherwise end up below the meta-steps being changed
        if self._current_step is not None:
            self._close_current_step(PASSED)
        self._close_meta_steps(shared, PASSED)
        for text in chain[shared:]:
            self._sink.start_step(text)
            self._open_stack.append(text)
        log.debug("open meta-steps: %s", self._open_stack)

    def _close_meta_steps(self, keep: int, outcome: str) -> None:
        while len(self._open_stack) > keep:
            self._open_stack.pop()
            self._sink.end_step(outcome)

    def _close_current_step(self, outcome: str) -> None:
        self._sink.end_step(outcome)
        self._current_step = None
        self._current_text = None
