"""gencheck.io

Filesystem contracts and IO helpers.

Design principle
----------------
Every file the harness writes lives in a scratch workspace that one scenario
owns and that is removed when the scenario ends, whatever its verdict. Writers
are atomic and comparisons are exact.
"""

from __future__ import annotations

from .fs import files_equal, write_bytes_atomic, write_text_atomic, write_yaml_atomic
from .workspace import WorkspaceHandle, WorkspaceManager

__all__ = [
    "WorkspaceHandle",
    "WorkspaceManager",
    "files_equal",
    "write_bytes_atomic",
    "write_text_atomic",
    "write_yaml_atomic",
]
