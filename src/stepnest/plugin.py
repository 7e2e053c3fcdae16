"""Report plugin wiring dispatcher events to the sink and reconciler.

Usage::

    dispatcher = EventDispatcher()
    plugin = ReportPlugin(ReporterConfig(output_dir=Path("output")))
    plugin.register(dispatcher)

Suite reports are written to ``output_dir`` as ``<uuid>-suite.json`` when the
suite ends. Evidence captured while a test runs can be attached to the
currently open step (or the case, outside any step) with ``add_attachment``.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from stepnest import events
from stepnest.config import ReporterConfig
from stepnest.core.models import FAILED, PASSED, CaseInfo, Step, SuiteInfo
from stepnest.reconciler import MetaStepReconciler
from stepnest.sink import ReportSink
from stepnest.writers import JsonReportWriter, ReportWriter
from stepnest.writers.base import Content

log = logging.getLogger(__name__)


class ReportPlugin:
    def __init__(
        self,
        config: Optional[ReporterConfig] = None,
        *,
        writer: Optional[ReportWriter] = None,
    ) -> None:
        self.config = config or ReporterConfig()
        self.writer = writer or JsonReportWriter(self.config.output_dir)
        self.sink = ReportSink(self.writer)
        self.reconciler = MetaStepReconciler(self.sink)

    def register(self, dispatcher: events.EventDispatcher) -> "ReportPlugin":
        dispatcher.on(events.SUITE_BEFORE, self._on_suite_before)
        dispatcher.on(events.SUITE_AFTER, self._on_suite_after)
        dispatcher.on(events.HOOK_STARTED, self._on_hook_started)
        dispatcher.on(events.HOOK_PASSED, self._on_hook_finished)
        dispatcher.on(events.HOOK_FAILED, self._on_hook_finished)
        dispatcher.on(events.TEST_BEFORE, self._on_test_before)
        dispatcher.on(events.TEST_STARTED, self._on_test_started)
        dispatcher.on(events.TEST_PASSED, self._on_test_passed)
        dispatcher.on(events.TEST_FAILED, self._on_test_failed)
        dispatcher.on(events.STEP_STARTED, self._on_step_started)
        dispatcher.on(events.STEP_PASSED, self._on_step_passed)
        dispatcher.on(events.STEP_FAILED, self._on_step_failed)
        log.debug("report plugin registered, output_dir=%s", self.config.output_dir)
        return self

    def add_attachment(self, name: str, content: Content, mime_type: str) -> None:
        self.sink.add_attachment(name, content, mime_type)

    def _on_suite_before(self, suite: SuiteInfo) -> None:
        self.sink.start_suite(suite.full_title())
        for test in suite.tests:
            if test.pending:
                self.sink.mark_pending(test.title)

    def _on_suite_after(self, suite: Optional[SuiteInfo] = None) -> None:
        self.sink.end_suite()

    def _on_hook_started(self, *_: Any) -> None:
        self.reconciler.hook_started()

    def _on_hook_finished(self, *_: Any) -> None:
        self.reconciler.hook_finished()

    def _on_test_before(self, test: CaseInfo) -> None:
        self.reconciler.case_started(test)

    def _on_test_started(self, test: CaseInfo) -> None:
        for tag in test.tags:
            self.sink.add_label(test, "tag", tag)

    def _on_test_passed(self, test: CaseInfo) -> None:
        self.reconciler.case_finished(PASSED)

    def _on_test_failed(self, test: CaseInfo, error: Any = None) -> None:
        self.reconciler.case_finished(FAILED, error)

    def _on_step_started(self, step: Step) -> None:
        self.reconciler.step_started(step)

    def _on_step_passed(self, step: Step) -> None:
        self.reconciler.step_finished(step, PASSED)

    def _on_step_failed(self, step: Step, *_: Any) -> None:
        self.reconciler.step_finished(step, FAILED)
