"""gencheck.domain

Canonical data contracts shared by the harness and the tool adapters.
"""

from __future__ import annotations

from .deadline import Deadline, current_deadline
from .diagnostics import Diagnostic, DiagnosticLocation, Severity
from .errors import (
    BuildFailure,
    DiagnosticSetMismatch,
    DocumentFetchError,
    HarnessError,
    OracleMismatch,
    PipelineError,
    ReferenceMismatch,
    ScenarioTimeout,
    UnexpectedDiagnosticError,
    WorkspaceError,
)
from .models import (
    ACCESS_MODIFIERS,
    NAMING_STRATEGIES,
    Document,
    GeneratorConfig,
    GeneratorMode,
    RenderedOutput,
)

__all__ = [
    "ACCESS_MODIFIERS",
    "NAMING_STRATEGIES",
    "BuildFailure",
    "Deadline",
    "Diagnostic",
    "DiagnosticLocation",
    "DiagnosticSetMismatch",
    "Document",
    "DocumentFetchError",
    "GeneratorConfig",
    "GeneratorMode",
    "HarnessError",
    "OracleMismatch",
    "PipelineError",
    "ReferenceMismatch",
    "RenderedOutput",
    "ScenarioTimeout",
    "Severity",
    "UnexpectedDiagnosticError",
    "WorkspaceError",
    "current_deadline",
]
