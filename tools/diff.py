"""tools/diff.py

Human-readable diffs between a golden reference file and a generated file.

Uses ``git diff --no-index`` so the output looks exactly like what a developer
would see when updating the golden corpus by hand.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from tools.core_cmd import ProcessRunner, run_cmd

DIFF_CONTEXT_LINES = 5


def build_diff_command(reference: Path, actual: Path, *, context_lines: int = DIFF_CONTEXT_LINES) -> list[str]:
    return [
        "git",
        "diff",
        "--no-index",
        f"-U{context_lines}",
        # Whitespace-insensitive flags (--ignore-space-change etc.) must never
        # be added here; the comparison is exact.
        str(reference),
        str(actual),
    ]


def run_git_diff(
    reference: Path,
    actual: Path,
    *,
    cwd: Optional[Path] = None,
    runner: ProcessRunner = run_cmd,
    context_lines: int = DIFF_CONTEXT_LINES,
) -> str:
    """Return the unified diff from *reference* to *actual*.

    ``git diff --no-index`` exits 1 when the files differ; only exit codes
    above 1 are failures of the tool itself.
    """
    cmd = build_diff_command(reference, actual, context_lines=context_lines)
    res = runner(cmd, cwd=cwd)
    if res.exit_code > 1:
        raise RuntimeError(f"{res.command_str} exited with {res.exit_code}: {res.stderr.strip()}")
    if not res.stdout:
        raise RuntimeError(f"No output from command: {res.command_str}")
    return res.stdout
