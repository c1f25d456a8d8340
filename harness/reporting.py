"""harness.reporting

Text helpers for log output and failure messages.

Kept in one place so the reference and compatibility scenarios and the CLI
render the same headings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

HEADING_WIDTH = 60

_BYTE_UNITS = ("bytes", "KB", "MB", "GB", "TB")


def heading(message: str, pad: str, width: int = HEADING_WIDTH) -> str:
    """``'=== message ======...'`` padded (or cut) to exactly *width* columns."""
    text = pad * 3 + f" {message.strip()} "
    return text[:width].ljust(width, pad)


def h1(message: str) -> str:
    return heading(message, "=")


def h2(message: str) -> str:
    return heading(message, "-")


def format_byte_count(num_bytes: int) -> str:
    """File-style size, e.g. ``'512 bytes'``, ``'12.3 KB'``."""
    if num_bytes < 1000:
        return "1 byte" if num_bytes == 1 else f"{num_bytes} bytes"
    value = float(num_bytes)
    unit = _BYTE_UNITS[0]
    for unit in _BYTE_UNITS[1:]:
        value /= 1000.0
        if value < 1000.0:
            break
    return f"{value:.1f} {unit}"


def format_reference_mismatch(generated_file: Path, reference_file: Path, diff_output: Optional[str]) -> str:
    """``diff_output=None`` means diffing was disabled for the run."""
    return "\n".join(
        [
            "Directory contents not equal:",
            f"  File under test: {generated_file} (scratch copy, removed after the run)",
            f"  Reference file: {reference_file}",
            f"  Diff output: {'[disabled]' if diff_output is None else '(see below)'}",
            h2("begin diff output"),
            "[diff disabled]" if diff_output is None else diff_output.rstrip("\n"),
            h2("end diff output"),
        ]
    )


def format_diagnostic_list(title: str, messages: Iterable[str]) -> str:
    items = sorted(set(messages))
    if not items:
        return f"{title}: (none)"
    return "\n".join([f"{title}:", *(f"  - {m}" for m in items)])
