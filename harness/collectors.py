"""harness.collectors

Diagnostic sinks handed to the generator for the duration of a scenario.

Two policies:

* :class:`StrictDiagnosticCollector` (reference comparison) fails the scenario
  the moment a warning or error arrives, unless its message is ignored. Notes
  are logged and never fail.
* :class:`RecordingDiagnosticCollector` (compatibility verification) only
  accumulates; the verdict comes later from :func:`assert_diagnostic_set`.

Mode runs may execute in parallel threads against the same collector, so
appends are serialized by one lock. Arrival order across threads is not
meaningful; :meth:`DiagnosticCollector.snapshot` (a set of messages) is.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import AbstractSet, Iterable, List, Optional, Set

from gencheck.domain.diagnostics import Diagnostic
from gencheck.domain.errors import DiagnosticSetMismatch, UnexpectedDiagnosticError
from gencheck.io.fs import write_yaml_atomic

logger = logging.getLogger(__name__)


class DiagnosticCollector:
    """Thread-safe, ordered store of emitted diagnostics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._diagnostics: List[Diagnostic] = []

    def emit(self, diagnostic: Diagnostic) -> None:
        self._append(diagnostic)

    def _append(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._diagnostics.append(diagnostic)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        with self._lock:
            return list(self._diagnostics)

    def snapshot(self) -> Set[str]:
        """De-duplicated messages seen so far."""
        with self._lock:
            return {d.message for d in self._diagnostics}

    def __len__(self) -> int:
        with self._lock:
            return len(self._diagnostics)


class RecordingDiagnosticCollector(DiagnosticCollector):
    def __init__(self, *, verbose: bool = False, scenario: Optional[str] = None) -> None:
        super().__init__()
        self.verbose = verbose
        self.scenario = scenario

    def emit(self, diagnostic: Diagnostic) -> None:
        self._append(diagnostic)
        if self.verbose:
            logger.info("%sCollected diagnostic: %s", _prefix(self.scenario), diagnostic.description)

    def write_yaml(self, path: Path) -> Path:
        """Persist the collected diagnostics in the generator's file layout."""
        ordered = sorted(self.diagnostics, key=lambda d: d.description)
        return write_yaml_atomic(
            Path(path),
            {
                "uniqueMessages": sorted({d.message for d in ordered}),
                "diagnostics": [d.to_dict() for d in ordered],
            },
        )


class StrictDiagnosticCollector(DiagnosticCollector):
    def __init__(self, *, ignored_messages: Iterable[str] = (), scenario: Optional[str] = None) -> None:
        super().__init__()
        self.ignored_messages = frozenset(ignored_messages)
        self.scenario = scenario

    def emit(self, diagnostic: Diagnostic) -> None:
        if diagnostic.message in self.ignored_messages:
            return
        self._append(diagnostic)
        logger.info("%sTest emitted diagnostic: %s", _prefix(self.scenario), diagnostic.description)
        if diagnostic.severity.is_failure:
            raise UnexpectedDiagnosticError(diagnostic, scenario=self.scenario)


def assert_diagnostic_set(
    expected: AbstractSet[str],
    actual: AbstractSet[str],
    *,
    scenario: Optional[str] = None,
) -> None:
    """Exact set equality; extra and missing messages both fail."""
    if set(expected) != set(actual):
        raise DiagnosticSetMismatch(expected=expected, actual=actual, scenario=scenario)


def _prefix(scenario: Optional[str]) -> str:
    return f"{scenario} " if scenario else ""
