"""Pass-through adapter between the reconciler and a report writer."""
from __future__ import annotations

import logging
from typing import Any

from stepnest.core.models import CaseInfo
from stepnest.writers.base import Content, ReportWriter

log = logging.getLogger(__name__)


class ReportSink:
    """Exposes bracket operations over a writer; holds no hierarchy state.

    Writer exceptions propagate unchanged.
    """

    def __init__(self, writer: ReportWriter) -> None:
        self._writer = writer

    @property
    def writer(self) -> ReportWriter:
        return self._writer

    def start_suite(self, title: str) -> None:
        self._writer.start_suite(title)

    def end_suite(self) -> None:
        self._writer.end_suite()

    def start_case(self, title: str) -> None:
        log.debug("start case %r", title)
        self._writer.start_case(title)

    def mark_pending(self, title: str) -> None:
        self._writer.pending_case(title)

    def end_case(self, outcome: str, error: Any = None) -> None:
        log.debug("end case -> %s", outcome)
        self._writer.end_case(outcome, error)

    def start_step(self, text: str) -> None:
        self._writer.start_step(text)

    def end_step(self, outcome: str) -> None:
        self._writer.end_step(outcome)

    def add_label(self, case: CaseInfo, key: str, value: str) -> None:
        self._writer.add_label(case.title, key, value)

    def add_attachment(self, name: str, content: Content, mime_type: str) -> None:
        self._writer.add_attachment(name, content, mime_type)
