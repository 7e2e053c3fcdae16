"""Terminal writer rendering the report tree as it is built."""
from __future__ import annotations

from typing import Any, List, Optional

import click

from stepnest.core.models import PENDING

from .base import Content, ReportStateError, ReportWriter


STATUS_COLORS = {
    "passed": "green",
    "failed": "red",
    "pending": "yellow",
}

INDENT = "  "


class TerminalTreeWriter(ReportWriter):
    """Human-readable writer that streams an indented tree to stdout."""

    def __init__(self, *, use_color: bool = True) -> None:
        self._use_color = use_color
        self._suite_depth = 0
        self._step_depth = 0
        self._case: Optional[str] = None
        self._counts = {"passed": 0, "failed": 0, "pending": 0}
        self._failures: List[str] = []

    def start_suite(self, title: str) -> None:
        click.echo(self._indent(self._suite_depth) + self._styled(title, force_color="cyan"))
        self._suite_depth += 1

    def end_suite(self) -> None:
        if self._suite_depth == 0:
            raise ReportStateError("end_suite called with no open suite")
        self._suite_depth -= 1
        if self._suite_depth == 0:
            self._print_summary()

    def start_case(self, title: str) -> None:
        self._case = title
        self._step_depth = 0
        click.echo(self._indent(self._suite_depth) + title)

    def pending_case(self, title: str) -> None:
        self._counts[PENDING] += 1
        click.echo(f"{self._indent(self._suite_depth)}{title} {self._styled(PENDING.upper())}")

    def end_case(self, outcome: str, error: Any = None) -> None:
        if self._case is None:
            raise ReportStateError("No case is open")
        self._counts[outcome] = self._counts.get(outcome, 0) + 1
        prefix = self._indent(self._suite_depth + 1)
        click.echo(f"{prefix}-> {self._styled(outcome.upper())}")
        if error is not None:
            click.echo(f"{prefix}error: {error}")
            self._failures.append(f"{self._case}: {error}")
        self._case = None

    def start_step(self, text: str) -> None:
        if self._case is None:
            raise ReportStateError("No case is open")
        self._step_depth += 1
        click.echo(self._indent(self._suite_depth + self._step_depth) + text)

    def end_step(self, outcome: str) -> None:
        if self._step_depth == 0:
            raise ReportStateError("end_step called with no open step")
        self._step_depth -= 1

    def add_label(self, case_title: str, name: str, value: str) -> None:
        click.echo(f"{self._indent(self._suite_depth + 1)}{name}: {value}")

    def add_attachment(self, name: str, content: Content, mime_type: str) -> None:
        size = len(content.encode("utf-8")) if isinstance(content, str) else len(content)
        depth = self._suite_depth + self._step_depth + 1
        click.echo(f"{self._indent(depth)}[attachment] {name} ({mime_type}, {size} bytes)")

    def _print_summary(self) -> None:
        counts = self._counts
        click.echo(
            self._styled(
                f"Summary: passed={counts['passed']} failed={counts['failed']} "
                f"pending={counts['pending']}",
                force_color="cyan",
            )
        )
        if self._failures:
            click.echo(self._styled("Failures:", force_color="red"))
            for line in self._failures:
                click.echo(f"{INDENT}{line}")

    def _indent(self, depth: int) -> str:
        return INDENT * depth

    def _styled(self, text: str, *, force_color: str | None = None) -> str:
        if not self._use_color:
            return text
        color = force_color or STATUS_COLORS.get(text.lower(), None)
        if color:
            return click.style(text, fg=color)
        return text
