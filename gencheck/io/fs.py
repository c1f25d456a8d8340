"""gencheck.io.fs

Atomic writers and exact file comparison.

Why this module exists
----------------------
Generated artifacts, package manifests and diagnostics reports are all written
to disk before something else (a comparison, a build, an operator) reads them.
A half-written file would turn an interrupted run into a confusing oracle
failure, so every writer here goes through a temp file and ``os.replace()``.

Comparison is deliberately byte-exact: no newline, whitespace or ordering
normalization. Formatting drift is one of the regressions the harness exists
to catch.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Callable, IO

_CHUNK_SIZE = 64 * 1024


def _atomic_write(path: Path, write_fn: Callable[[IO[bytes]], None]) -> None:
    """Write a file atomically by writing to a temp file and os.replace()."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f"{p.name}.", suffix=".tmp", dir=str(p.parent))
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "wb") as f:
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_path, p)
    finally:
        # If os.replace fails, best-effort cleanup of the temp file.
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass


def write_bytes_atomic(path: Path, data: bytes) -> Path:
    """Write raw bytes atomically; returns the path written."""

    _atomic_write(Path(path), lambda f: f.write(data))
    return Path(path)


def write_text_atomic(path: Path, text: str, *, encoding: str = "utf-8") -> Path:
    """Write text atomically (no newline translation)."""

    return write_bytes_atomic(path, text.encode(encoding))


def write_yaml_atomic(path: Path, data: Any) -> Path:
    """Write YAML atomically with stable, human-readable formatting."""
    import yaml

    text = yaml.safe_dump(
        data,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=120,
    )
    return write_text_atomic(path, text)


def files_equal(a: Path, b: Path) -> bool:
    """Byte-for-byte comparison. A missing file is never equal to anything."""

    pa, pb = Path(a), Path(b)
    if not pa.is_file() or not pb.is_file():
        return False
    if pa.stat().st_size != pb.stat().st_size:
        return False

    # filecmp.cmp caches on (size, mtime), which misses same-size edits made
    # within one mtime tick; always read the bytes.
    with pa.open("rb") as fa, pb.open("rb") as fb:
        while True:
            ca = fa.read(_CHUNK_SIZE)
            cb = fb.read(_CHUNK_SIZE)
            if ca != cb:
                return False
            if not ca:
                return True
