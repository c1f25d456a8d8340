from __future__ import annotations

import argparse

from cli.common import flatten_csv_args
from harness.compatibility import CompatibilityRunner
from harness.corpus import load_corpus, select_cases
from harness.reporting import format_byte_count, format_diagnostic_list
from harness.settings import ENV_ENABLE


def run_compat(args: argparse.Namespace, runner: CompatibilityRunner) -> int:
    if not runner.settings.compatibility_enabled:
        print(f"⏭️  Compatibility tests are disabled; set {ENV_ENABLE}=true to run them.")
        return 0

    try:
        cases = select_cases(load_corpus(args.corpus), flatten_csv_args(args.cases))
    except (OSError, ValueError) as e:
        raise SystemExit(str(e))

    settings = runner.settings
    print("\n🚀 Running compatibility tests")
    print(f"  Cases      : {len(cases)}")
    print(f"  Generator  : {settings.generator_bin}")
    print(f"  Build      : {'skipped' if settings.skip_build else 'enabled'} by default (cases may skip it)")
    print(f"  Codegen    : {'parallel' if settings.parallel_codegen else 'sequential'}")

    summary = runner.run_all(cases)

    for result in summary.passed:
        print(
            f"  ✅ {result.case_name} ({format_byte_count(result.document_size)}, "
            f"{'built' if result.built else 'build skipped'}, {result.elapsed_seconds:.1f}s)"
        )
        if args.verbose:
            print("     " + format_diagnostic_list("diagnostics", result.diagnostics).replace("\n", "\n     "))
    for name, error in summary.failed.items():
        print(f"  ❌ {name}\n{error}")

    if not summary.ok:
        print(f"\n⚠️ {len(summary.failed)} of {summary.total} case(s) failed.")
        return 1
    print(f"\n✅ All {summary.total} compatibility case(s) passed.")
    return 0
