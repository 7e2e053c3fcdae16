"""JSON writer persisting one validated report file per suite."""
from __future__ import annotations

import json
import logging
import mimetypes
import pathlib
import traceback
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from jsonschema import validate

from stepnest.core.models import FAILED, PENDING, Attachment, Case, StepNode, now_ms

from .base import Content, ReportStateError, ReportWriter
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION

log = logging.getLogger(__name__)


@dataclass
class _Suite:
    title: str
    uuid: str = field(default_factory=lambda: str(uuid.uuid4()))
    start: int = field(default_factory=now_ms)
    cases: List[Case] = field(default_factory=list)


class JsonReportWriter(ReportWriter):
    """Builds suite/case/step trees and writes them to ``output_dir`` as JSON."""

    def __init__(self, output_dir: Union[str, pathlib.Path]) -> None:
        self._output_dir = pathlib.Path(output_dir)
        self._suites: List[_Suite] = []
        self._case: Optional[Case] = None
        self._steps: List[StepNode] = []
        self._written: List[pathlib.Path] = []

    @property
    def output_dir(self) -> pathlib.Path:
        return self._output_dir

    def written_files(self) -> List[pathlib.Path]:
        return list(self._written)

    def current_case(self) -> Optional[Case]:
        return self._case

    def start_suite(self, title: str) -> None:
        self._suites.append(_Suite(title=title))

    def end_suite(self) -> None:
        if not self._suites:
            raise ReportStateError("end_suite called with no open suite")
        if self._case is not None:
            raise ReportStateError(f"Suite ended while case {self._case.title!r} is still open")
        suite = self._suites.pop()
        payload = _suite_to_dict(suite, now_ms())
        validate(instance=payload, schema=JSON_SCHEMA_V1)
        path = self._output_dir / f"{suite.uuid}-suite.json"
        self._write(path, json.dumps(payload, indent=2))
        self._written.append(path)
        log.info("Suite report written to %s", path)

    def start_case(self, title: str) -> None:
        suite = self._require_suite()
        if self._case is not None:
            raise ReportStateError(f"Case {title!r} started while {self._case.title!r} is still open")
        self._case = Case(title=title)
        self._steps = []
        suite.cases.append(self._case)

    def pending_case(self, title: str) -> None:
        suite = self._require_suite()
        case = Case(title=title, status=PENDING)
        case.stop = case.start
        suite.cases.append(case)

    def end_case(self, outcome: str, error: Any = None) -> None:
        case = self._require_case()
        if self._steps:
            raise ReportStateError(
                f"Case {case.title!r} ended with {len(self._steps)} step(s) still open"
            )
        case.status = outcome
        case.error = error
        case.stop = now_ms()
        self._case = None

    def start_step(self, text: str) -> None:
        case = self._require_case()
        node = StepNode(name=text)
        if self._steps:
            self._steps[-1].steps.append(node)
        else:
            case.steps.append(node)
        self._steps.append(node)

    def end_step(self, outcome: str) -> None:
        if not self._steps:
            raise ReportStateError("end_step called with no open step")
        node = self._steps.pop()
        node.status = outcome
        node.stop = now_ms()

    def add_label(self, case_title: str, name: str, value: str) -> None:
        case = self._require_case()
        if case.title != case_title:
            raise ReportStateError(
                f"Label for case {case_title!r} but the open case is {case.title!r}"
            )
        case.add_label(name, value)

    def add_attachment(self, name: str, content: Content, mime_type: str) -> None:
        case = self._require_case()
        extension = mimetypes.guess_extension(mime_type) or ""
        source = f"{uuid.uuid4()}-attachment{extension}"
        data = content.encode("utf-8") if isinstance(content, str) else content
        self._write(self._output_dir / source, data)
        attachment = Attachment(title=name, source=source, type=mime_type)
        if self._steps:
            self._steps[-1].attachments.append(attachment)
        else:
            case.attachments.append(attachment)

    def _require_suite(self) -> _Suite:
        if not self._suites:
            raise ReportStateError("No suite is open")
        return self._suites[-1]

    def _require_case(self) -> Case:
        if self._case is None:
            raise ReportStateError("No case is open")
        return self._case

    def _write(self, path: pathlib.Path, data: Union[str, bytes]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(data, bytes):
                path.write_bytes(data)
            else:
                path.write_text(data, encoding="utf-8")
        except OSError as exc:
            raise RuntimeError(f"Failed to write report file {path}: {exc}") from exc


def _suite_to_dict(suite: _Suite, stop: int) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "uuid": suite.uuid,
        "name": suite.title,
        "start": suite.start,
        "stop": stop,
        "cases": [_case_to_dict(case) for case in suite.cases],
    }


def _case_to_dict(case: Case) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "name": case.title,
        "status": case.status,
        "start": case.start,
        "stop": case.stop if case.stop is not None else case.start,
        "labels": [{"name": label.name, "value": label.value} for label in case.labels],
        "steps": [_step_to_dict(step) for step in case.steps],
    }
    if case.attachments:
        record["attachments"] = [_attachment_to_dict(item) for item in case.attachments]
    if case.status == FAILED and case.error is not None:
        record["failure"] = _failure_to_dict(case.error)
    return record


def _step_to_dict(step: StepNode) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "name": step.name,
        "status": step.status,
        "start": step.start,
        "stop": step.stop if step.stop is not None else step.start,
        "steps": [_step_to_dict(child) for child in step.steps],
    }
    if step.attachments:
        record["attachments"] = [_attachment_to_dict(item) for item in step.attachments]
    return record


def _attachment_to_dict(attachment: Attachment) -> Dict[str, str]:
    return {"title": attachment.title, "source": attachment.source, "type": attachment.type}


def _failure_to_dict(error: Any) -> Dict[str, str]:
    if isinstance(error, BaseException):
        trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        return {"message": str(error) or type(error).__name__, "trace": trace}
    return {"message": str(error)}
