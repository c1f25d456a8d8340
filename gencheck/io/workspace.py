"""gencheck.io.workspace

Scoped scratch directories.

Each scenario stages generated files in a workspace it owns exclusively. The
contract:

* :meth:`WorkspaceManager.acquire` creates a uniquely named directory
  (``<root>/<prefix>[<label>-]<uuid4 hex>``). Failure to create it is fatal.
* :meth:`WorkspaceManager.release` removes it recursively. It is idempotent
  and verifies the directory is really gone.
* :meth:`WorkspaceManager.scoped` guarantees release on every exit path. A
  teardown failure is reported, but never replaces the scenario's own failure.
"""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from gencheck.domain.errors import WorkspaceError

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "gencheck-"

_LABEL_RE = re.compile(r"[^A-Za-z0-9_.-]+")


@dataclass(frozen=True)
class WorkspaceHandle:
    path: Path
    token: str

    def join(self, *parts: Union[str, Path]) -> Path:
        return self.path.joinpath(*parts)


def _sanitize_label(label: str) -> str:
    return _LABEL_RE.sub("_", label).strip("_")


class WorkspaceManager:
    def __init__(self, root: Optional[Union[str, Path]] = None, *, prefix: str = DEFAULT_PREFIX) -> None:
        self.root = Path(root) if root is not None else Path(tempfile.gettempdir())
        self.prefix = prefix
        self._lock = threading.Lock()
        self._active: Dict[str, WorkspaceHandle] = {}

    def acquire(self, label: Optional[str] = None) -> WorkspaceHandle:
        token = uuid.uuid4().hex
        name = self.prefix
        if label:
            clean = _sanitize_label(label)
            if clean:
                name += f"{clean}-"
        path = self.root / f"{name}{token}"

        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.mkdir(exist_ok=False)
        except OSError as e:
            raise WorkspaceError(path, "create", e) from e

        handle = WorkspaceHandle(path=path, token=token)
        with self._lock:
            self._active[token] = handle
        logger.debug("Acquired workspace %s", path)
        return handle

    def release(self, handle: WorkspaceHandle) -> None:
        with self._lock:
            self._active.pop(handle.token, None)

        path = handle.path
        try:
            if path.exists():
                shutil.rmtree(path)
        except OSError as e:
            raise WorkspaceError(path, "delete", e) from e

        if path.exists():
            raise WorkspaceError(path, "delete", RuntimeError("directory still exists after removal"))
        logger.debug("Released workspace %s", path)

    def active(self) -> List[WorkspaceHandle]:
        with self._lock:
            return list(self._active.values())

    @contextmanager
    def scoped(self, label: Optional[str] = None) -> Iterator[WorkspaceHandle]:
        handle = self.acquire(label)
        try:
            yield handle
        except BaseException:
            try:
                self.release(handle)
            except WorkspaceError as teardown_error:
                # Keep the scenario's own failure as the primary verdict.
                logger.error("%s (while handling an earlier failure)", teardown_error)
            raise
        else:
            self.release(handle)
