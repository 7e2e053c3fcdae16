"""Core dataclasses shared across stepnest subsystems."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple


PASSED = "passed"
FAILED = "failed"
PENDING = "pending"
OUTCOMES = frozenset({PASSED, FAILED, PENDING})


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class MetaStep:
    """Grouping node; links to the meta-step that encloses it."""

    text: str
    parent: Optional["MetaStep"] = None

    def chain(self) -> Tuple[str, ...]:
        """Display texts from the outermost ancestor down to this meta-step."""

        texts: List[str] = []
        seen: set[int] = set()
        node: Optional[MetaStep] = self
        while node is not None:
            if id(node) in seen:
                raise ValueError(f"Meta-step chain of {self.text!r} contains a cycle")
            seen.add(id(node))
            texts.append(node.text)
            node = node.parent
        texts.reverse()
        return tuple(texts)

    @classmethod
    def from_texts(cls, texts: Sequence[str]) -> Optional["MetaStep"]:
        """Build a chain from texts listed outermost first; returns the deepest node."""

        node: Optional[MetaStep] = None
        for text in texts:
            node = cls(text=text, parent=node)
        return node

    def __str__(self) -> str:
        return self.text


@dataclass(eq=False)
class Step:
    """One executed action. Compared by identity."""

    text: str
    meta_step: Optional[MetaStep] = None

    def ancestors(self) -> Tuple[str, ...]:
        if self.meta_step is None:
            return tuple()
        return self.meta_step.chain()

    def __str__(self) -> str:
        return self.text


@dataclass
class CaseInfo:
    """Test payload carried by test.* events."""

    title: str
    tags: Sequence[str] = field(default_factory=tuple)
    pending: bool = False


@dataclass
class SuiteInfo:
    """Suite payload carried by suite.* events."""

    title: str
    tests: Sequence[CaseInfo] = field(default_factory=tuple)
    parent: Optional["SuiteInfo"] = None

    def full_title(self) -> str:
        """Titles of enclosing suites and this one, outermost first, space separated."""

        titles: List[str] = []
        node: Optional[SuiteInfo] = self
        while node is not None:
            if node.title:
                titles.append(node.title)
            node = node.parent
        return " ".join(reversed(titles))


@dataclass(frozen=True)
class Label:
    name: str
    value: str


@dataclass(frozen=True)
class Attachment:
    title: str
    source: str
    type: str


@dataclass
class StepNode:
    """A step as recorded in a report tree."""

    name: str
    start: int = field(default_factory=now_ms)
    stop: Optional[int] = None
    status: Optional[str] = None
    steps: List["StepNode"] = field(default_factory=list)
    attachments: List[Attachment] = field(default_factory=list)


@dataclass
class Case:
    """One test execution as recorded in a report."""

    title: str
    start: int = field(default_factory=now_ms)
    stop: Optional[int] = None
    status: Optional[str] = None
    error: Any = None
    labels: List[Label] = field(default_factory=list)
    steps: List[StepNode] = field(default_factory=list)
    attachments: List[Attachment] = field(default_factory=list)

    def add_label(self, name: str, value: str) -> None:
        self.labels.append(Label(name=name, value=value))

    @property
    def passed(self) -> bool:
        return self.status == PASSED
