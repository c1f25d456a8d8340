"""tools/core_cmd.py

Command-execution helpers shared by the diff tool, the build toolchain and the
command-line generator adapter.

This module deliberately avoids tool-specific knowledge. It provides:

* :func:`which_or_raise` - resolve executables reliably across environments.
* :func:`run_cmd` - run subprocesses (no shell=True) and capture output.

The caller owns the interpretation of the exit status; keeping one runner
means every non-zero exit can be reported with the same stdout/stderr block.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from gencheck.domain.errors import ScenarioTimeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    exit_code: int
    elapsed_seconds: float
    command_str: str
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


# Signature of run_cmd; lets the harness take a fake runner in tests.
ProcessRunner = Callable[..., CmdResult]


def which_or_raise(bin_name: str, fallbacks: Optional[List[str]] = None) -> str:
    """Locate an executable and return its absolute path.

    Why this exists:
    - prevents an opaque "FileNotFoundError: [Errno 2]" from subprocess
    - avoids PATH surprises across toolchain managers and CI images
    """
    found = shutil.which(bin_name)
    if found:
        return found

    for candidate in fallbacks or []:
        p = Path(candidate)
        if p.exists() and os.access(str(p), os.X_OK):
            return str(p)

    raise FileNotFoundError(
        f"Executable '{bin_name}' not found on PATH.\n"
        f"Install it and ensure it's available to this Python process.\n"
        f"Tried fallbacks: {fallbacks or []}"
    )


def run_cmd(
    cmd: List[str],
    *,
    cwd: Optional[Path] = None,
    timeout_seconds: float = 0,
    env: Optional[Dict[str, str]] = None,
) -> CmdResult:
    """Run a subprocess and capture stdout/stderr (no ``shell=True``).

    Never raises on non-zero exit codes. Raises ``FileNotFoundError`` when the
    executable is missing and :class:`ScenarioTimeout` when *timeout_seconds*
    elapses (the child is killed first).
    """
    t0 = time.time()

    # If env is provided, merge it onto the current process environment.
    env2 = None
    if env is not None:
        env2 = os.environ.copy()
        env2.update(env)

    command_str = " ".join(str(c) for c in cmd)
    logger.debug("Running: %s", command_str)
    try:
        proc = subprocess.run(
            [str(c) for c in cmd],
            cwd=str(cwd) if cwd else None,
            text=True,
            errors="replace",
            capture_output=True,
            timeout=timeout_seconds if timeout_seconds and timeout_seconds > 0 else None,
            env=env2,
        )
    except subprocess.TimeoutExpired as e:
        raise ScenarioTimeout(f"running {command_str}", float(timeout_seconds)) from e
    elapsed = time.time() - t0

    # Many tools write progress to stderr even on success.
    if proc.stderr:
        logger.debug("stderr from %s:\n%s", command_str, proc.stderr)

    return CmdResult(
        exit_code=proc.returncode,
        elapsed_seconds=elapsed,
        command_str=command_str,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )
