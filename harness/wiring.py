"""harness.wiring

This module is the **composition root** for verification runs.

It is the single place where the harness is assembled from its parts:

- load ``.env`` and environment settings (once, at startup)
- choose the generator capability (the real command-line generator, or an
  injected in-process factory in tests)
- build the reference comparator and compatibility runner

Entrypoints (the CLI, tests, CI scripts) call these builders instead of
constructing collaborators themselves.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from gencheck.io.workspace import WorkspaceManager

from tools.generator_cli import make_command_pipeline_factory

from harness.compatibility import CompatibilityRunner
from harness.invoker import PipelineFactory, PipelineInvoker
from harness.reference import ReferenceComparator
from harness.settings import HarnessSettings

ROOT_DIR = Path(__file__).resolve().parents[1]
ENV_PATH = ROOT_DIR / ".env"
DEFAULT_RESOURCES_DIR = ROOT_DIR / "tests" / "resources"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def load_settings(
    *,
    load_env_file: bool = True,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> HarnessSettings:
    """Read settings from the environment, then apply non-None overrides.

    Values already present in the process environment win over ``.env``.
    """
    if load_env_file:
        load_dotenv(ENV_PATH, override=False)
    settings = HarnessSettings.from_env(environ)
    changes = {k: v for k, v in overrides.items() if v is not None}
    return dataclasses.replace(settings, **changes) if changes else settings


def build_invoker(
    settings: HarnessSettings,
    *,
    factory: Optional[PipelineFactory] = None,
    workspaces: Optional[WorkspaceManager] = None,
) -> PipelineInvoker:
    if factory is None:
        factory = make_command_pipeline_factory(
            settings.generator_bin,
            workspaces=workspaces,
            timeout_seconds=settings.scenario_timeout_seconds,
        )
    return PipelineInvoker(factory)


def build_reference_comparator(
    settings: HarnessSettings,
    *,
    resources_dir: Optional[Path] = None,
    run_diff: bool = True,
    factory: Optional[PipelineFactory] = None,
    workspaces: Optional[WorkspaceManager] = None,
) -> ReferenceComparator:
    ws = workspaces or WorkspaceManager()
    return ReferenceComparator(
        build_invoker(settings, factory=factory, workspaces=ws),
        Path(resources_dir) if resources_dir else DEFAULT_RESOURCES_DIR,
        ws,
        run_diff=run_diff,
    )


def build_compatibility_runner(
    settings: HarnessSettings,
    *,
    factory: Optional[PipelineFactory] = None,
    workspaces: Optional[WorkspaceManager] = None,
    diagnostics_dir: Optional[Path] = None,
) -> CompatibilityRunner:
    ws = workspaces or WorkspaceManager()
    return CompatibilityRunner(
        build_invoker(settings, factory=factory, workspaces=ws),
        settings,
        ws,
        diagnostics_dir=diagnostics_dir,
    )
