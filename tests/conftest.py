from __future__ import annotations

from typing import Any, List, Tuple

import pytest

from stepnest import bootstrap
from stepnest.core import MetaStep, Step
from stepnest.reconciler import MetaStepReconciler
from stepnest.sink import ReportSink
from stepnest.writers import ReportWriter


@pytest.fixture(scope="session", autouse=True)
def setup_stepnest() -> None:
    """Bootstrap plugin formats once for the entire test session."""

    bootstrap()


class RecordingWriter(ReportWriter):
    """Writer that records every call as a tuple."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []

    def start_suite(self, title: str) -> None:
        self.calls.append(("start_suite", title))

    def end_suite(self) -> None:
        self.calls.append(("end_suite",))

    def start_case(self, title: str) -> None:
        self.calls.append(("start_case", title))

    def pending_case(self, title: str) -> None:
        self.calls.append(("pending_case", title))

    def end_case(self, outcome: str, error: Any = None) -> None:
        self.calls.append(("end_case", outcome, error))

    def start_step(self, text: str) -> None:
        self.calls.append(("start_step", text))

    def end_step(self, outcome: str) -> None:
        self.calls.append(("end_step", outcome))

    def add_label(self, case_title: str, name: str, value: str) -> None:
        self.calls.append(("add_label", case_title, name, value))

    def add_attachment(self, name: str, content: Any, mime_type: str) -> None:
        self.calls.append(("add_attachment", name, content, mime_type))

    def clear(self) -> None:
        self.calls.clear()


def make_step(text: str, *chain: str) -> Step:
    """Step under meta-steps listed outermost first."""

    return Step(text=text, meta_step=MetaStep.from_texts(chain))


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def reconciler(writer: RecordingWriter) -> MetaStepReconciler:
    return MetaStepReconciler(ReportSink(writer))
