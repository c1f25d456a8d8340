"""gencheck.domain.errors

Failure taxonomy for verification scenarios.

Two roots:

* :class:`HarnessError` - something prevented the scenario from producing a
  verdict (input, pipeline, build, infrastructure, timeout).
* :class:`OracleMismatch` - the scenario ran, and an oracle rejected the
  result. These subclass ``AssertionError`` so test runners report them as
  failures, not errors.

Every message names the document/mode/artifact involved and embeds the
captured output needed to diagnose without re-running.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .diagnostics import Diagnostic
    from .models import GeneratorMode


class HarnessError(Exception):
    """Base class for non-oracle scenario failures."""


class DocumentFetchError(HarnessError):
    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch document {url}: {reason}")


class PipelineError(HarnessError):
    """The generator failed for one (document, mode) pair."""

    def __init__(self, document: str, mode: "GeneratorMode", cause: BaseException) -> None:
        self.document = document
        self.mode = mode
        self.cause = cause
        super().__init__(
            f"Generator pipeline failed for document {document!r} in mode {mode.value!r}: "
            f"{type(cause).__name__}: {cause}"
        )


class BuildFailure(HarnessError):
    def __init__(
        self,
        *,
        package_dir: Path,
        command: Sequence[str],
        exit_code: int,
        stdout: str,
        stderr: str,
    ) -> None:
        self.package_dir = Path(package_dir)
        self.command = list(command)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            "Command failed\n"
            "-- command line --\n"
            f"{' '.join(self.command)}\n"
            f"-- exit status --\n{exit_code}\n"
            f"-- stdout --\n{stdout}\n"
            f"-- stderr --\n{stderr}\n"
            "--"
        )


class WorkspaceError(HarnessError):
    def __init__(self, path: Path, action: str, cause: BaseException) -> None:
        self.path = Path(path)
        self.action = action
        self.cause = cause
        super().__init__(f"Error while trying to {action} scratch workspace {self.path}: {cause}")


class ScenarioTimeout(HarnessError):
    def __init__(self, what: str, timeout_seconds: float) -> None:
        self.what = what
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Timed out after {timeout_seconds:.1f}s while {what}")


class OracleMismatch(AssertionError):
    """Base class for verdicts rejected by an oracle."""


class UnexpectedDiagnosticError(OracleMismatch):
    """A strict collector received a warning or error it was not told to ignore."""

    def __init__(self, diagnostic: "Diagnostic", scenario: Optional[str] = None) -> None:
        self.diagnostic = diagnostic
        self.scenario = scenario
        where = f"[{scenario}] " if scenario else ""
        super().__init__(f"{where}Failing with a diagnostic: {diagnostic.description}")


class DiagnosticSetMismatch(OracleMismatch):
    def __init__(
        self,
        *,
        expected: Iterable[str],
        actual: Iterable[str],
        scenario: Optional[str] = None,
    ) -> None:
        self.expected = frozenset(expected)
        self.actual = frozenset(actual)
        self.scenario = scenario
        self.missing: List[str] = sorted(self.expected - self.actual)
        self.unexpected: List[str] = sorted(self.actual - self.expected)

        head = f"[{scenario}] Diagnostic set mismatch" if scenario else "Diagnostic set mismatch"
        body: List[str] = []
        if self.missing:
            body.append("  Expected but not emitted:")
            body.extend(f"    - {m}" for m in self.missing)
        if self.unexpected:
            body.append("  Emitted but not expected:")
            body.extend(f"    - {m}" for m in self.unexpected)
        super().__init__("\n".join([head, *body]))


class ReferenceMismatch(OracleMismatch):
    def __init__(
        self,
        *,
        generated_file: Path,
        reference_file: Path,
        diff_output: Optional[str],
        message: str,
    ) -> None:
        self.generated_file = Path(generated_file)
        self.reference_file = Path(reference_file)
        self.diff_output = diff_output
        super().__init__(message)
