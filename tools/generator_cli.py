"""tools/generator_cli.py

Run the real generator through its command-line interface.

The harness treats the generator as an opaque callable
(``factory(config, diagnostics) -> pipeline`` and ``pipeline(document) ->
RenderedOutput``). This module provides that callable on top of the
generator executable:

  document -> staged file + config YAML -> `<bin> generate ...` -> diagnostics YAML -> output file

Diagnostics are forwarded to the collector in the order the generator
recorded them. Staging happens in a scratch workspace that is removed after
each run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from gencheck.domain.deadline import current_deadline
from gencheck.domain.diagnostics import Diagnostic
from gencheck.domain.models import Document, GeneratorConfig, RenderedOutput
from gencheck.io.fs import write_bytes_atomic, write_yaml_atomic
from gencheck.io.workspace import WorkspaceManager

from tools.core_cmd import ProcessRunner, run_cmd, which_or_raise

logger = logging.getLogger(__name__)

DEFAULT_GENERATOR_BIN = "swift-openapi-generator"

CONFIG_FILENAME = "openapi-generator-config.yaml"
DIAGNOSTICS_FILENAME = "diagnostics.yaml"
OUTPUT_DIRNAME = "out"


def build_user_config(config: GeneratorConfig) -> Dict[str, Any]:
    """Translate a :class:`GeneratorConfig` into the generator's config file."""
    data: Dict[str, Any] = {
        "generate": [config.mode.value],
        "accessModifier": config.access_modifier,
        "namingStrategy": config.naming_strategy,
    }
    if config.additional_imports:
        data["additionalImports"] = list(config.additional_imports)
    if config.feature_flags:
        data["featureFlags"] = list(config.feature_flags)
    if config.name_overrides:
        data["nameOverrides"] = dict(sorted(config.name_overrides.items()))
    return data


def build_generate_command(
    executable: str,
    *,
    doc_path: Path,
    config_path: Path,
    output_dir: Path,
    diagnostics_path: Path,
) -> List[str]:
    return [
        executable,
        "generate",
        str(doc_path),
        "--config",
        str(config_path),
        "--output-directory",
        str(output_dir),
        "--diagnostics-output-path",
        str(diagnostics_path),
    ]


def read_diagnostics_file(path: Path) -> List[Diagnostic]:
    """Parse the YAML diagnostics file the generator writes.

    A missing file means the generator emitted nothing.
    """
    if not path.exists():
        return []
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Diagnostics file must be a mapping at top level: {path}")
    entries = raw.get("diagnostics") or []
    if not isinstance(entries, list):
        raise ValueError(f"'diagnostics' must be a list in {path}")
    return [Diagnostic.from_dict(e) for e in entries]


def command_timeout(cap_seconds: float, what: str) -> float:
    """Time left for one generator command; ``0`` means unbounded.

    The current scenario deadline wins when it is tighter than *cap_seconds*.
    """
    deadline = current_deadline()
    left = deadline.remaining(what) if deadline is not None else 0.0
    if left and cap_seconds:
        return min(left, cap_seconds)
    return left or cap_seconds


def make_command_pipeline_factory(
    executable: str = DEFAULT_GENERATOR_BIN,
    *,
    runner: ProcessRunner = run_cmd,
    workspaces: Optional[WorkspaceManager] = None,
    timeout_seconds: float = 0,
) -> Callable[[GeneratorConfig, Any], Callable[[Document], RenderedOutput]]:
    """Return a pipeline factory backed by the generator executable.

    ``diagnostics`` is anything with an ``emit(Diagnostic)`` method.
    *timeout_seconds* caps every command; the scenario deadline current
    while the pipeline runs bounds it further.
    """
    ws_manager = workspaces or WorkspaceManager()

    def factory(config: GeneratorConfig, diagnostics: Any) -> Callable[[Document], RenderedOutput]:
        def run(document: Document) -> RenderedOutput:
            with ws_manager.scoped(label=f"generate-{config.mode.value}") as ws:
                doc_path = write_bytes_atomic(ws.join(document.name or "openapi.yaml"), document.contents)
                config_path = write_yaml_atomic(ws.join(CONFIG_FILENAME), build_user_config(config))
                output_dir = ws.join(OUTPUT_DIRNAME)
                output_dir.mkdir(parents=True, exist_ok=True)
                diagnostics_path = ws.join(DIAGNOSTICS_FILENAME)

                cmd = build_generate_command(
                    which_or_raise(executable),
                    doc_path=doc_path,
                    config_path=config_path,
                    output_dir=output_dir,
                    diagnostics_path=diagnostics_path,
                )
                timeout = command_timeout(timeout_seconds, f"generating {config.mode.value} code for {document.path}")
                res = runner(cmd, cwd=ws.path, timeout_seconds=timeout)

                # Forward whatever was recorded, even on failure: the error
                # diagnostic usually explains the exit status.
                for diagnostic in read_diagnostics_file(diagnostics_path):
                    diagnostics.emit(diagnostic)

                if res.exit_code != 0:
                    raise RuntimeError(
                        f"{executable} exited with {res.exit_code}\n-- stderr --\n{res.stderr.strip()}"
                    )

                output_path = output_dir / config.mode.output_file_name
                if not output_path.is_file():
                    raise RuntimeError(f"Generator did not write {config.mode.output_file_name} to {output_dir}")
                return RenderedOutput(base_name=output_path.name, contents=output_path.read_bytes())

        return run

    return factory
