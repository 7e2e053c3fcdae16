"""Recorded event logs: YAML loader and replay driver."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import yaml
from jsonschema import Draft7Validator

from stepnest import events
from stepnest.core.models import CaseInfo, MetaStep, Step, SuiteInfo
from stepnest.plugin import ReportPlugin

log = logging.getLogger(__name__)

ATTACHMENT_EVENT = "attachment"

_TEST_REF = {
    "oneOf": [
        {"type": "string"},
        {
            "type": "object",
            "required": ["title"],
            "properties": {
                "title": {"type": "string"},
                "tags": {"type": "array", "items": {"type": "string"}},
                "pending": {"type": "boolean"},
            },
        },
    ]
}

_STEP_REF = {
    "oneOf": [
        {"type": "string"},
        {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "text": {"type": "string"},
                "meta": {"type": "array", "items": {"type": "string"}},
            },
        },
    ]
}

EVENT_LOG_SCHEMA = {
    "type": "object",
    "required": ["events"],
    "properties": {
        "events": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["event"],
                "properties": {
                    "event": {"type": "string", "enum": list(events.EVENT_NAMES) + [ATTACHMENT_EVENT]},
                    "suite": {
                        "type": "object",
                        "required": ["title"],
                        "properties": {
                            "title": {"type": "string"},
                            "tests": {"type": "array", "items": _TEST_REF},
                        },
                    },
                    "test": _TEST_REF,
                    "step": _STEP_REF,
                    "hook": {"type": "string"},
                    "error": {"type": ["string", "null"]},
                    "attachment": {
                        "type": "object",
                        "required": ["name", "content"],
                        "properties": {
                            "name": {"type": "string"},
                            "content": {"type": "string"},
                            "type": {"type": "string"},
                        },
                    },
                },
            },
        },
    },
}

_validator = Draft7Validator(EVENT_LOG_SCHEMA)


@dataclass(frozen=True)
class EventRecord:
    event: str
    data: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class ReplaySummary:
    passed: int = 0
    failed: int = 0
    pending: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.pending


def load_event_log(path: Union[str, Path]) -> List[EventRecord]:
    """Load and validate a recorded event log."""

    log_path = Path(path).expanduser().resolve()
    raw = yaml.safe_load(log_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise ValueError("Event log must contain a mapping at the top level")
    return parse_event_log(raw)


def parse_event_log(raw: Mapping[str, Any]) -> List[EventRecord]:
    errors = sorted(_validator.iter_errors(dict(raw)), key=lambda e: [str(part) for part in e.path])
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ValueError(f"Event log schema validation failed: {messages}")
    records: List[EventRecord] = []
    for item in raw["events"]:
        name = item["event"]
        data = {key: value for key, value in item.items() if key != "event"}
        records.append(EventRecord(event=name, data=data))
    return records


def replay(
    records: Sequence[EventRecord],
    dispatcher: events.EventDispatcher,
    plugin: Optional[ReportPlugin] = None,
) -> ReplaySummary:
    """Emit every record through ``dispatcher`` in order."""

    state = _ReplayState()
    for index, record in enumerate(records):
        log.debug("replaying #%d %s", index, record.event)
        if record.event == ATTACHMENT_EVENT:
            if plugin is None:
                raise ValueError(f"events/{index}: attachment records need a report plugin")
            attachment = record.data["attachment"]
            plugin.add_attachment(
                attachment["name"],
                attachment["content"],
                attachment.get("type", "text/plain"),
            )
            continue
        try:
            payload = state.payload_for(record)
        except ValueError as exc:
            raise ValueError(f"events/{index}: {exc}") from exc
        dispatcher.emit(record.event, *payload)
        state.count(record)
    return state.summary


class _ReplayState:
    def __init__(self) -> None:
        self.summary = ReplaySummary()
        self._suites: List[SuiteInfo] = []
        self._test: Optional[CaseInfo] = None
        self._steps: Dict[str, Step] = {}
        self._last_step: Optional[Step] = None

    def payload_for(self, record: EventRecord) -> tuple:
        name = record.event
        data = record.data
        if name == events.SUITE_BEFORE:
            parent = self._suites[-1] if self._suites else None
            suite = _suite_from(data.get("suite"), parent)
            self._suites.append(suite)
            return (suite,)
        if name == events.SUITE_AFTER:
            if not self._suites:
                raise ValueError("suite.after without an open suite")
            return (self._suites.pop(),)
        if name in (events.HOOK_STARTED, events.HOOK_PASSED):
            return (data.get("hook"),)
        if name == events.HOOK_FAILED:
            return (data.get("hook"), data.get("error"))
        if name == events.TEST_BEFORE:
            self._test = self._test_from(data.get("test"))
            return (self._test,)
        if name == events.TEST_STARTED:
            test = self._test_from(data.get("test"))
            if self._test is not None and test.title == self._test.title:
                self._test.tags = tuple(test.tags)
                test = self._test
            return (test,)
        if name == events.TEST_PASSED:
            return (self._test_from(data.get("test")),)
        if name == events.TEST_FAILED:
            return (self._test_from(data.get("test")), data.get("error"))
        if name == events.STEP_STARTED:
            step = self._start_step(data.get("step"))
            return (step,)
        return (self._find_step(data.get("step")),)

    def count(self, record: EventRecord) -> None:
        summary = self.summary
        if record.event == events.TEST_PASSED:
            summary.passed += 1
        elif record.event == events.TEST_FAILED:
            summary.failed += 1
        elif record.event == events.SUITE_BEFORE:
            summary.pending += sum(1 for test in self._suites[-1].tests if test.pending)

    def _test_from(self, raw: Any) -> CaseInfo:
        if raw is None:
            if self._test is None:
                raise ValueError("test reference with no test started")
            return self._test
        return _case_from(raw)

    def _start_step(self, raw: Any) -> Step:
        if not isinstance(raw, Mapping) or "text" not in raw:
            raise ValueError("step.started needs a step mapping with 'text'")
        step = Step(text=str(raw["text"]), meta_step=MetaStep.from_texts(raw.get("meta") or ()))
        step_id = raw.get("id")
        if step_id:
            self._steps[str(step_id)] = step
        self._last_step = step
        return step

    def _find_step(self, raw: Any) -> Step:
        step_id = raw.get("id") if isinstance(raw, Mapping) else raw
        if step_id is None:
            if self._last_step is None:
                raise ValueError("step reference with no step started")
            return self._last_step
        try:
            return self._steps[str(step_id)]
        except KeyError as exc:
            raise ValueError(f"unknown step id {step_id!r}") from exc


def _case_from(raw: Any) -> CaseInfo:
    if isinstance(raw, str):
        return CaseInfo(title=raw)
    return CaseInfo(
        title=str(raw["title"]),
        tags=tuple(str(tag) for tag in raw.get("tags") or ()),
        pending=bool(raw.get("pending", False)),
    )


def _suite_from(raw: Any, parent: Optional[SuiteInfo] = None) -> SuiteInfo:
    if not isinstance(raw, Mapping):
        raise ValueError("suite.before needs a suite mapping")
    tests = tuple(_case_from(item) for item in raw.get("tests") or ())
    return SuiteInfo(title=str(raw["title"]), tests=tests, parent=parent)
