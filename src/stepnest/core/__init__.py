"""Core models exposed at the package level."""
from .models import (
    FAILED,
    OUTCOMES,
    PASSED,
    PENDING,
    Attachment,
    Case,
    CaseInfo,
    Label,
    MetaStep,
    Step,
    StepNode,
    SuiteInfo,
)

__all__ = [
    "FAILED",
    "OUTCOMES",
    "PASSED",
    "PENDING",
    "Attachment",
    "Case",
    "CaseInfo",
    "Label",
    "MetaStep",
    "Step",
    "StepNode",
    "SuiteInfo",
]
