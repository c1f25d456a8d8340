"""harness.compatibility

Compatibility verification against real-world description documents.

One scenario:

  fetch (HTTPS) -> generate in every mode (shared recording collector)
    -> exact diagnostic-set check -> [materialize package -> build]

The expected diagnostics are an exact set: a document that starts producing a
new warning fails just like one that stops producing an expected warning.

A scenario deadline, when configured, bounds the whole scenario. Each step gets
the remaining time, and the process runner kills any in-flight subprocess
that outlives it.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from gencheck.domain.deadline import Deadline
from gencheck.domain.errors import OracleMismatch
from gencheck.domain.models import Document, GeneratorConfig, GeneratorMode, RenderedOutput
from gencheck.io.workspace import WorkspaceManager

from tools.core_cmd import ProcessRunner, run_cmd
from tools.http_fetch import DEFAULT_TIMEOUT_SECONDS, fetch_document

from harness.collectors import RecordingDiagnosticCollector, assert_diagnostic_set
from harness.invoker import PipelineInvoker
from harness.packaging import SWIFT_PACKAGE, PackageTemplate, build_package, materialize_package, package_name_for
from harness.reporting import format_byte_count
from harness.settings import HarnessSettings

logger = logging.getLogger(__name__)

LICENSES: Tuple[str, ...] = ("apache", "mit", "bsd")

# fetcher(url, *, timeout_seconds, retries) -> Document
DocumentFetcher = Callable[..., Document]


@dataclass(frozen=True)
class CompatibilityCase:
    """One real-world document and what generating code for it should produce.

    ``license`` is the license of the document itself. ``skip_build=None``
    defers to the run's settings.
    """

    name: str
    url: str
    license: str
    expected_diagnostics: FrozenSet[str] = frozenset()
    skip_build: Optional[bool] = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Compatibility case name must not be empty")
        if self.license not in LICENSES:
            raise ValueError(f"Unknown license {self.license!r} for case {self.name!r}. Valid: {', '.join(LICENSES)}")
        object.__setattr__(self, "expected_diagnostics", frozenset(self.expected_diagnostics))


@dataclass(frozen=True)
class CompatibilityResult:
    case_name: str
    document_size: int
    outputs: Dict[GeneratorMode, RenderedOutput]
    diagnostics: FrozenSet[str]
    built: bool
    elapsed_seconds: float


@dataclass
class CompatibilitySummary:
    passed: List[CompatibilityResult] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def total(self) -> int:
        return len(self.passed) + len(self.failed)


class CompatibilityRunner:
    def __init__(
        self,
        invoker: PipelineInvoker,
        settings: HarnessSettings,
        workspaces: WorkspaceManager,
        *,
        fetcher: DocumentFetcher = fetch_document,
        process_runner: ProcessRunner = run_cmd,
        template: PackageTemplate = SWIFT_PACKAGE,
        diagnostics_dir: Optional[Path] = None,
    ) -> None:
        self.invoker = invoker
        self.settings = settings
        self.workspaces = workspaces
        self.fetcher = fetcher
        self.process_runner = process_runner
        self.template = template
        self.diagnostics_dir = Path(diagnostics_dir) if diagnostics_dir else None

    def _log(self, case: CompatibilityCase, message: str, *args: object) -> None:
        logger.info("%s " + message, case.name, *args)

    def run(self, case: CompatibilityCase) -> CompatibilityResult:
        """Run one scenario; raise on the first failure."""
        t0 = time.monotonic()
        deadline = Deadline(self.settings.scenario_timeout_seconds)

        self._log(case, "Downloading description document: %s", case.url)
        document = self.fetcher(
            case.url,
            timeout_seconds=deadline.remaining(f"fetching {case.url}") or DEFAULT_TIMEOUT_SECONDS,
            retries=self.settings.fetch_retries,
        )

        self._log(case, "Generating code (document size: %s)", format_byte_count(document.size))
        collector = RecordingDiagnosticCollector(verbose=self.settings.verbose_diagnostics, scenario=case.name)
        modes = GeneratorMode.ordered()
        outputs = self.invoker.run_modes(
            document,
            modes,
            GeneratorConfig(mode=modes[0]),
            collector,
            parallel=self.settings.parallel_codegen,
            deadline=deadline,
        )

        if self.diagnostics_dir is not None:
            path = collector.write_yaml(self.diagnostics_dir / f"{case.name}.yaml")
            self._log(case, "Wrote diagnostics to %s", path)

        actual = frozenset(collector.snapshot())
        assert_diagnostic_set(case.expected_diagnostics, actual, scenario=case.name)
        if len(outputs) != len(modes):
            raise OracleMismatch(f"[{case.name}] Expected {len(modes)} generated files, got {len(outputs)}")

        skip_build = case.skip_build if case.skip_build is not None else self.settings.skip_build
        if skip_build:
            self._log(case, "Skipping package build")
        else:
            self._build(case, list(outputs.values()), deadline)

        elapsed = time.monotonic() - t0
        self._log(case, "Finished compatibility test in %.1fs", elapsed)
        return CompatibilityResult(
            case_name=case.name,
            document_size=document.size,
            outputs=outputs,
            diagnostics=actual,
            built=not skip_build,
            elapsed_seconds=elapsed,
        )

    def _build(self, case: CompatibilityCase, outputs: List[RenderedOutput], deadline: Deadline) -> None:
        package_name = package_name_for(case.name)
        with self.workspaces.scoped(label=case.name) as ws:
            package_dir = ws.join(f"{package_name}-{ws.token[:8]}")
            self._log(case, "Creating package: %s", package_dir)
            materialize_package(package_dir, package_name, outputs, self.template)

            cmd = self.template.build_command(package_dir, self.settings.num_build_jobs)
            self._log(case, "Building package: %s", " ".join(cmd))
            build_package(
                package_dir,
                template=self.template,
                num_jobs=self.settings.num_build_jobs,
                runner=self.process_runner,
                timeout_seconds=deadline.remaining(f"building {package_name}"),
            )

    def run_all(self, cases: Iterable[CompatibilityCase]) -> CompatibilitySummary:
        """Run every scenario, one after another, and report all outcomes."""
        summary = CompatibilitySummary()
        for case in cases:
            try:
                summary.passed.append(self.run(case))
            except Exception as e:
                logger.error("%s FAILED: %s", case.name, e)
                summary.failed[case.name] = f"{type(e).__name__}: {e}"
        return summary
