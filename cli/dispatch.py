from __future__ import annotations

import argparse
from pathlib import Path

from cli.commands.compat import run_compat
from cli.commands.reference import run_reference
from harness.wiring import build_compatibility_runner, build_reference_comparator, load_settings


def dispatch(args: argparse.Namespace) -> int:
    """Build the harness for the selected mode and run it. Returns the exit code."""

    settings = load_settings(
        generator_bin=args.generator_bin,
        skip_build=getattr(args, "skip_build", None),
        parallel_codegen=getattr(args, "parallel_codegen", None),
        verbose_diagnostics=True if args.verbose else None,
    )

    if args.mode == "reference":
        comparator = build_reference_comparator(
            settings,
            resources_dir=Path(args.resources_dir),
            run_diff=not args.no_diff,
        )
        return run_reference(args, comparator)

    if args.mode == "compat":
        runner = build_compatibility_runner(
            settings,
            diagnostics_dir=Path(args.diagnostics_dir) if args.diagnostics_dir else None,
        )
        return run_compat(args, runner)

    raise SystemExit(f"Unknown mode: {args.mode}")
