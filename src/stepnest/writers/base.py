"""Report writer interface definitions."""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union


Content = Union[bytes, str]


class ReportStateError(RuntimeError):
    """Raised when a writer receives a call its open hierarchy cannot accept."""


class ReportWriter:
    """Interface for report-writing collaborators.

    Calls arrive in bracket order: suites contain cases, cases contain steps,
    steps nest. A writer owns its own open-node stack; callers never pass
    handles back except the case title on ``add_label``.
    """

    def start_suite(self, title: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def end_suite(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def start_case(self, title: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def pending_case(self, title: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def end_case(self, outcome: str, error: Any = None) -> None:  # pragma: no cover
        raise NotImplementedError

    def start_step(self, text: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def end_step(self, outcome: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def add_label(self, case_title: str, name: str, value: str) -> None:  # pragma: no cover
        raise NotImplementedError

    def add_attachment(self, name: str, content: Content, mime_type: str) -> None:  # pragma: no cover
        raise NotImplementedError


class CompositeWriter(ReportWriter):
    """Dispatches every call to multiple writers, in order."""

    def __init__(self, writers: Sequence[ReportWriter]) -> None:
        self._writers = list(writers)

    def start_suite(self, title: str) -> None:
        for writer in self._writers:
            writer.start_suite(title)

    def end_suite(self) -> None:
        for writer in self._writers:
            writer.end_suite()

    def start_case(self, title: str) -> None:
        for writer in self._writers:
            writer.start_case(title)

    def pending_case(self, title: str) -> None:
        for writer in self._writers:
            writer.pending_case(title)

    def end_case(self, outcome: str, error: Any = None) -> None:
        for writer in self._writers:
            writer.end_case(outcome, error)

    def start_step(self, text: str) -> None:
        for writer in self._writers:
            writer.start_step(text)

    def end_step(self, outcome: str) -> None:
        for writer in self._writers:
            writer.end_step(outcome)

    def add_label(self, case_title: str, name: str, value: str) -> None:
        for writer in self._writers:
            writer.add_label(case_title, name, value)

    def add_attachment(self, name: str, content: Content, mime_type: str) -> None:
        for writer in self._writers:
            writer.add_attachment(name, content, mime_type)

    def writers(self) -> List[ReportWriter]:
        return list(self._writers)


# factory(output_dir, use_color) -> writer
WriterFactory = Callable[..., ReportWriter]


class WriterRegistry:
    """Registry for writer factories keyed by format name."""

    def __init__(self) -> None:
        self._factories: Dict[str, WriterFactory] = {}

    def register(self, name: str, factory: WriterFactory) -> None:
        key = name.strip().lower()
        if key in self._factories:
            raise ValueError(f"Report format '{key}' already registered")
        self._factories[key] = factory

    def create(self, name: str, **options: Any) -> ReportWriter:
        key = name.strip().lower()
        factory = self._factories.get(key)
        if factory is None:
            known = ", ".join(sorted(self._factories)) or "none"
            raise KeyError(f"No report format registered for {name!r} (known: {known})")
        return factory(**options)

    def get(self, name: str) -> Optional[WriterFactory]:
        return self._factories.get(name.strip().lower())

    def names(self) -> Iterable[str]:
        return tuple(sorted(self._factories))


writer_registry = WriterRegistry()
