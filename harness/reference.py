"""harness.reference

Reference comparison: generated output must be byte-identical to a checked-in
golden corpus.

Layout under the resources directory::

    Docs/<project>.yaml                      description document
    ReferenceSources/<Project>/<base name>   golden output, one file per mode

Why this exists
---------------
Formatting drift, reordered declarations and whitespace changes are all
regressions for a code generator. The comparison is therefore exact (no
newline or whitespace normalization). When files differ, a unified diff is
attached to the failure so the golden file can be reviewed or updated without
re-running anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from gencheck.domain.errors import ReferenceMismatch
from gencheck.domain.models import Document, GeneratorConfig, GeneratorMode
from gencheck.io.fs import files_equal, write_bytes_atomic
from gencheck.io.workspace import WorkspaceManager

from tools.diff import run_git_diff

from harness.collectors import StrictDiagnosticCollector
from harness.invoker import PipelineInvoker
from harness.reporting import HEADING_WIDTH, format_reference_mismatch, h2

logger = logging.getLogger(__name__)

DOCS_DIRNAME = "Docs"
REFERENCE_SOURCES_DIRNAME = "ReferenceSources"

# differ(reference, actual, *, cwd) -> diff text
Differ = Callable[..., str]


@dataclass(frozen=True)
class ReferenceProject:
    name: str
    custom_directory_name: Optional[str] = None

    @property
    def doc_file_name(self) -> str:
        return f"{self.name}.yaml"

    @property
    def fixture_directory_name(self) -> str:
        return self.custom_directory_name or self.name.capitalize()


REFERENCE_PROJECTS: Tuple[ReferenceProject, ...] = (ReferenceProject("petstore"),)


def find_project(name: str) -> ReferenceProject:
    for project in REFERENCE_PROJECTS:
        if project.name == name:
            return project
    known = ", ".join(p.name for p in REFERENCE_PROJECTS)
    raise ValueError(f"Unknown reference project {name!r}. Known: {known}")


@dataclass(frozen=True)
class ReferenceCase:
    """One (document, mode) comparison. Paths are relative to the resources dir."""

    doc_file_path: str
    mode: GeneratorMode
    reference_output_directory: str
    access_modifier: str = "public"
    additional_imports: Tuple[str, ...] = ()
    feature_flags: Tuple[str, ...] = ()
    naming_strategy: str = "idiomatic"
    name_overrides: dict = field(default_factory=dict)

    def as_config(self) -> GeneratorConfig:
        return GeneratorConfig(
            mode=self.mode,
            access_modifier=self.access_modifier,
            additional_imports=self.additional_imports,
            naming_strategy=self.naming_strategy,
            name_overrides=self.name_overrides,
            feature_flags=self.feature_flags,
        )

    def to_dict(self) -> dict:
        return {
            "doc_file_path": self.doc_file_path,
            "mode": GeneratorMode.parse(self.mode).value,
            "additional_imports": list(self.additional_imports),
            "feature_flags": list(self.feature_flags),
            "naming_strategy": self.naming_strategy,
            "name_overrides": dict(sorted(self.name_overrides.items())),
            "reference_output_directory": self.reference_output_directory,
        }


@dataclass(frozen=True)
class ReferenceResult:
    case: ReferenceCase
    base_name: str
    reference_file: Path
    diagnostics: Tuple[str, ...] = ()


class ReferenceComparator:
    def __init__(
        self,
        invoker: PipelineInvoker,
        resources_dir: Path,
        workspaces: WorkspaceManager,
        *,
        differ: Differ = run_git_diff,
        run_diff: bool = True,
    ) -> None:
        self.invoker = invoker
        self.resources_dir = Path(resources_dir)
        self.workspaces = workspaces
        self.differ = differ
        self.run_diff = run_diff

    def perform(self, case: ReferenceCase, ignored_messages: Iterable[str] = ()) -> ReferenceResult:
        """Generate one file and compare it against its golden counterpart.

        Raises :class:`ReferenceMismatch` (with the diff attached) when the
        bytes differ or the golden file is missing.
        """
        import yaml

        logger.info(
            "%s\nPerforming reference test\n%s\n%s%s",
            "=" * HEADING_WIDTH,
            h2("begin test config"),
            yaml.safe_dump(case.to_dict(), sort_keys=False, default_flow_style=False),
            h2("end test config"),
        )

        document = Document.from_file(case.doc_file_path, relative_to=self.resources_dir)
        collector = StrictDiagnosticCollector(
            ignored_messages=ignored_messages,
            scenario=f"{case.doc_file_path}:{GeneratorMode.parse(case.mode).value}",
        )
        output = self.invoker.run(document, case.mode, case.as_config(), collector)

        reference_file = self.resources_dir / case.reference_output_directory / output.base_name
        with self.workspaces.scoped(label="reference") as ws:
            generated_file = write_bytes_atomic(ws.join(output.base_name), output.contents)
            if not files_equal(generated_file, reference_file):
                diff_output = self._diff(reference_file, generated_file) if self.run_diff else None
                raise ReferenceMismatch(
                    generated_file=generated_file,
                    reference_file=reference_file,
                    diff_output=diff_output,
                    message=format_reference_mismatch(generated_file, reference_file, diff_output),
                )

        return ReferenceResult(
            case=case,
            base_name=output.base_name,
            reference_file=reference_file,
            diagnostics=tuple(d.description for d in collector.diagnostics),
        )

    def _diff(self, reference_file: Path, generated_file: Path) -> str:
        # Best effort: the mismatch is reported either way.
        try:
            return self.differ(reference_file, generated_file, cwd=self.resources_dir)
        except Exception as e:
            logger.warning("Diff tool failed for %s: %s", reference_file, e)
            return f"failed: {e}"

    def run_project(
        self,
        project: ReferenceProject,
        modes: Sequence[GeneratorMode] = (GeneratorMode.TYPES, GeneratorMode.CLIENT, GeneratorMode.SERVER),
        feature_flags: Sequence[str] = (),
        ignored_messages: Iterable[str] = (),
        naming_strategy: str = "idiomatic",
        access_modifier: str = "public",
    ) -> List[ReferenceResult]:
        """Compare every mode of one project, sequentially, stopping at the first failure."""
        ignored = tuple(ignored_messages)
        results: List[ReferenceResult] = []
        for mode in modes:
            case = ReferenceCase(
                doc_file_path=f"{DOCS_DIRNAME}/{project.doc_file_name}",
                mode=GeneratorMode.parse(mode),
                reference_output_directory=f"{REFERENCE_SOURCES_DIRNAME}/{project.fixture_directory_name}",
                access_modifier=access_modifier,
                feature_flags=tuple(feature_flags),
                naming_strategy=naming_strategy,
            )
            results.append(self.perform(case, ignored_messages=ignored))
        return results
