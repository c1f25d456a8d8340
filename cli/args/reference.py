from __future__ import annotations

import argparse
from pathlib import Path


def add_reference_args(parser: argparse.ArgumentParser, *, default_resources_dir: Path) -> None:
    """Register flags used by reference mode."""

    parser.add_argument(
        "--project",
        action="append",
        default=None,
        help="(reference mode) Reference project to compare. Repeatable; default: all known projects.",
    )
    parser.add_argument(
        "--resources-dir",
        dest="resources_dir",
        default=str(default_resources_dir),
        help="(reference mode) Directory holding Docs/ and ReferenceSources/ (default: tests/resources).",
    )
    parser.add_argument(
        "--no-diff",
        dest="no_diff",
        action="store_true",
        help="(reference mode) Do not run git diff when a file differs from its reference.",
    )
    parser.add_argument(
        "--ignore-diagnostic",
        dest="ignore_diagnostics",
        action="append",
        default=[],
        metavar="MESSAGE",
        help="(reference mode) Diagnostic message that must not fail the comparison. Repeatable.",
    )
