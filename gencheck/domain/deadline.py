"""gencheck.domain.deadline

Wall-clock bound for one scenario.

Why this exists
---------------
A scenario timeout covers every step of the scenario: fetch, code generation
in every mode, and the package build. Each step asks the deadline for the time
that is left, so a subprocess started late in the scenario is killed when the
scenario deadline passes, not after a fresh full timeout.

The generator capability is ``pipeline(document)`` with no room for a timeout
argument. The invoker therefore makes the deadline *current* while a pipeline
runs (:meth:`Deadline.applied`), and adapters that start subprocesses read it
with :func:`current_deadline`. The current deadline lives in a
:class:`contextvars.ContextVar`, so concurrent mode runs on worker threads each
see their own.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from .errors import ScenarioTimeout

_current_deadline: ContextVar[Optional["Deadline"]] = ContextVar("gencheck_deadline", default=None)


class Deadline:
    """``timeout_seconds`` of ``0`` (or ``None``) means unbounded."""

    def __init__(self, timeout_seconds: Optional[float] = 0) -> None:
        self.timeout_seconds = float(timeout_seconds or 0)
        self._start = time.monotonic()

    @property
    def bounded(self) -> bool:
        return self.timeout_seconds > 0

    def elapsed(self) -> float:
        return time.monotonic() - self._start

    def time_left(self) -> Optional[float]:
        """Seconds left (never negative), or ``None`` when unbounded."""
        if not self.bounded:
            return None
        return max(0.0, self.timeout_seconds - self.elapsed())

    def remaining(self, what: str) -> float:
        """Seconds left, or ``0.0`` when unbounded.

        Raises :class:`ScenarioTimeout` naming *what* once the deadline passed.
        """
        if not self.bounded:
            return 0.0
        left = self.timeout_seconds - self.elapsed()
        if left <= 0:
            raise ScenarioTimeout(what, self.timeout_seconds)
        return left

    @contextmanager
    def applied(self) -> Iterator["Deadline"]:
        token = _current_deadline.set(self)
        try:
            yield self
        finally:
            _current_deadline.reset(token)


def current_deadline() -> Optional[Deadline]:
    """The deadline of the pipeline run in progress on this thread, if any."""
    return _current_deadline.get()
