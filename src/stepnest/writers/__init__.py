"""Report writers and the format registry."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from .base import CompositeWriter, ReportStateError, ReportWriter, WriterRegistry, writer_registry
from .json_writer import JsonReportWriter
from .terminal import TerminalTreeWriter

__all__ = [
    "CompositeWriter",
    "JsonReportWriter",
    "ReportStateError",
    "ReportWriter",
    "TerminalTreeWriter",
    "WriterRegistry",
    "writer_registry",
]


def _json_factory(*, output_dir: Union[str, Path], **_: Any) -> ReportWriter:
    return JsonReportWriter(output_dir)


def _terminal_factory(*, use_color: bool = True, **_: Any) -> ReportWriter:
    return TerminalTreeWriter(use_color=use_color)


writer_registry.register("json", _json_factory)
writer_registry.register("terminal", _terminal_factory)
