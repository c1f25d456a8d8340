from __future__ import annotations

import argparse


def add_base_args(parser: argparse.ArgumentParser) -> None:
    """Register flags shared by every mode (mode selection, generator, logging)."""

    parser.add_argument(
        "--mode",
        choices=["reference", "compat"],
        required=True,
        help=(
            "reference = compare generated output with the golden corpus, "
            "compat = generate (and optionally build) code for real-world documents"
        ),
    )
    parser.add_argument(
        "--generator-bin",
        dest="generator_bin",
        default=None,
        help="Generator executable (default: $GENCHECK_GENERATOR_BIN or swift-openapi-generator).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging, and log every collected diagnostic in compat mode.",
    )
