from __future__ import annotations

import argparse

from gencheck.domain.errors import HarnessError

from cli.common import flatten_csv_args
from harness.reference import REFERENCE_PROJECTS, ReferenceComparator, find_project
from harness.reporting import h1


def run_reference(args: argparse.Namespace, comparator: ReferenceComparator) -> int:
    names = flatten_csv_args(args.project) or [p.name for p in REFERENCE_PROJECTS]
    try:
        projects = [find_project(n) for n in names]
    except ValueError as e:
        raise SystemExit(str(e))

    ignored = tuple(args.ignore_diagnostics or ())

    print("\n🚀 Running reference comparison")
    print(f"  Resources : {comparator.resources_dir}")
    print(f"  Projects  : {', '.join(p.name for p in projects)}")

    failures = 0
    for project in projects:
        print("\n" + h1(project.name))
        try:
            results = comparator.run_project(project, ignored_messages=ignored)
        except (AssertionError, HarnessError) as e:
            failures += 1
            print(f"\n❌ {project.name} failed:\n{e}")
            continue
        for r in results:
            print(f"  ✅ {r.case.mode.value:<7} {r.base_name} matches {r.reference_file}")

    if failures:
        print(f"\n⚠️ {failures} of {len(projects)} project(s) failed.")
        return 1
    print("\n✅ All reference comparisons passed.")
    return 0
