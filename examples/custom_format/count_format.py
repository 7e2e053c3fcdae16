"""Registers a ``count`` report format; load with STEPNEST_PLUGINS=count_format."""
from typing import Any

import click

from stepnest.writers import ReportWriter, writer_registry


class StepCountWriter(ReportWriter):
    """Prints how many steps each case reported."""

    def __init__(self) -> None:
        self._steps = 0
        self._title = ""

    def start_suite(self, title: str) -> None:
        pass

    def end_suite(self) -> None:
        pass

    def start_case(self, title: str) -> None:
        self._title = title
        self._steps = 0

    def pending_case(self, title: str) -> None:
        click.echo(f"{title}: pending")

    def end_case(self, outcome: str, error: Any = None) -> None:
        click.echo(f"{self._title}: {outcome}, {self._steps} step(s)")

    def start_step(self, text: str) -> None:
        self._steps += 1

    def end_step(self, outcome: str) -> None:
        pass

    def add_label(self, case_title: str, name: str, value: str) -> None:
        pass

    def add_attachment(self, name: str, content: Any, mime_type: str) -> None:
        pass


def register() -> None:
    writer_registry.register("count", lambda **_: StepCountWriter())
