#!/usr/bin/env python3
"""
Command-line entrypoint for the code-generator verification harness.

Modes:
  1) reference - generate code for the reference documents and compare it
                 byte-for-byte with the golden corpus
  2) compat    - fetch real-world documents, check the emitted diagnostics and
                 (optionally) build the generated code

Usage:
  python gencheck_cli.py --mode reference
  python gencheck_cli.py --mode reference --project petstore --no-diff
  python gencheck_cli.py --mode compat --case discourse --skip-build
  GENCHECK_COMPATIBILITY_TEST_ENABLE=true python gencheck_cli.py --mode compat --parallel-codegen
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from cli.args.base import add_base_args
from cli.args.compat import add_compat_args
from cli.args.reference import add_reference_args
from cli.dispatch import dispatch
from harness.wiring import DEFAULT_RESOURCES_DIR, configure_logging


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Verify a code generator against golden files and real-world documents.")
    add_base_args(parser)
    add_reference_args(parser, default_resources_dir=DEFAULT_RESOURCES_DIR)
    add_compat_args(parser)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.verbose)
    raise SystemExit(dispatch(args))


if __name__ == "__main__":
    main()
