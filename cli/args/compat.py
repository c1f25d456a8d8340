from __future__ import annotations

import argparse


def add_compat_args(parser: argparse.ArgumentParser) -> None:
    """Register flags used by compat mode.

    Flags left unset fall back to the GENCHECK_COMPATIBILITY_TEST_* environment
    variables.
    """

    parser.add_argument(
        "--case",
        dest="cases",
        action="append",
        default=None,
        help="(compat mode) Case name(s) from the corpus, repeatable or comma-separated. Default: all cases.",
    )
    parser.add_argument(
        "--corpus",
        default=None,
        help="(compat mode) Corpus YAML to load instead of the bundled one.",
    )
    parser.add_argument(
        "--skip-build",
        dest="skip_build",
        action="store_true",
        default=None,
        help="(compat mode) Generate code but do not build the package.",
    )
    parser.add_argument(
        "--parallel-codegen",
        dest="parallel_codegen",
        action="store_true",
        default=None,
        help="(compat mode) Run the generator modes concurrently.",
    )
    parser.add_argument(
        "--diagnostics-dir",
        dest="diagnostics_dir",
        default=None,
        help="(compat mode) Write each case's collected diagnostics to <dir>/<case>.yaml.",
    )
