"""In-process stand-ins for the generator, the network and the process runner.

The fake generator renders a deterministic text summary of the document so the
golden files under ``tests/resources/ReferenceSources`` can be written by hand:

* types  - one ``<access> struct <Name> {}`` line per component schema, sorted
* client - one ``<access> func <operationId>()`` line per operation
* server - one ``route <METHOD> <path> -> <operationId>`` line per operation

Operations are listed by sorted path, then in HTTP method order.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import yaml

from gencheck.domain.deadline import current_deadline
from gencheck.domain.diagnostics import Diagnostic, DiagnosticLocation
from gencheck.domain.models import Document, GeneratorConfig, GeneratorMode, RenderedOutput
from tools.core_cmd import CmdResult

REQUIRED_ONLY_WARNING = (
    "A property name only appears in the required list, but not in the properties map - "
    "this is likely a typo; skipping this property."
)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


def _operations(doc: Dict[str, Any]) -> List[tuple]:
    ops = []
    paths = doc.get("paths") or {}
    for path in sorted(paths):
        item = paths[path] or {}
        for method in HTTP_METHODS:
            if method in item:
                ops.append((method, path, (item[method] or {}).get("operationId", "")))
    return ops


def render(doc: Dict[str, Any], config: GeneratorConfig) -> str:
    access = config.access_modifier
    lines = [f"// {config.mode.value} ({access}, {config.naming_strategy})"]
    if config.mode is GeneratorMode.TYPES:
        schemas = (doc.get("components") or {}).get("schemas") or {}
        lines += [f"{access} struct {name} {{}}" for name in sorted(schemas)]
    elif config.mode is GeneratorMode.CLIENT:
        lines += [f"{access} func {op_id}()" for _, _, op_id in _operations(doc)]
    else:
        lines += [f"route {method.upper()} {path} -> {op_id}" for method, path, op_id in _operations(doc)]
    return "\n".join(lines) + "\n"


def sleep_within_deadline(seconds: float, what: str) -> None:
    """Sleep like slow in-process work that stops when the current deadline passes."""
    end = time.monotonic() + seconds
    deadline = current_deadline()
    while time.monotonic() < end:
        if deadline is not None:
            deadline.remaining(what)
        time.sleep(min(0.01, max(0.0, end - time.monotonic())))


def required_only_diagnostics(document: Document, doc: Dict[str, Any]) -> List[Diagnostic]:
    out = []
    schemas = (doc.get("components") or {}).get("schemas") or {}
    for name in sorted(schemas):
        schema = schemas[name] or {}
        props = schema.get("properties") or {}
        for prop in schema.get("required") or []:
            if prop not in props:
                out.append(
                    Diagnostic.warning(
                        REQUIRED_ONLY_WARNING,
                        location=DiagnosticLocation(file_path=document.path),
                        context={"schema": name, "property": prop},
                    )
                )
    return out


class FakeGenerator:
    """A ``PipelineFactory`` with knobs for failure, latency and call tracking."""

    def __init__(
        self,
        *,
        fail_in_modes: Iterable[GeneratorMode] = (),
        delay_seconds: float = 0.0,
        extra_diagnostics: Sequence[Diagnostic] = (),
        return_value: Any = None,
    ) -> None:
        self.fail_in_modes = frozenset(fail_in_modes)
        self.delay_seconds = delay_seconds
        self.extra_diagnostics = tuple(extra_diagnostics)
        self.return_value = return_value
        self.calls: List[GeneratorMode] = []
        self.threads: List[str] = []
        self._lock = threading.Lock()

    def __call__(self, config: GeneratorConfig, diagnostics: Any) -> Callable[[Document], RenderedOutput]:
        def run(document: Document) -> RenderedOutput:
            with self._lock:
                self.calls.append(config.mode)
                self.threads.append(threading.current_thread().name)
            if self.delay_seconds:
                sleep_within_deadline(self.delay_seconds, f"rendering {config.mode.value}")

            doc = yaml.safe_load(document.contents.decode("utf-8")) or {}
            for diagnostic in required_only_diagnostics(document, doc):
                diagnostics.emit(diagnostic)
            for diagnostic in self.extra_diagnostics:
                diagnostics.emit(diagnostic)

            if config.mode in self.fail_in_modes:
                raise RuntimeError(f"renderer exploded in {config.mode.value}")
            if self.return_value is not None:
                return self.return_value
            return RenderedOutput(
                base_name=config.mode.output_file_name,
                contents=render(doc, config).encode("utf-8"),
            )

        return run


class FakeFetcher:
    def __init__(self, contents: bytes, *, name: str = "openapi.yaml", error: Optional[Exception] = None) -> None:
        self.contents = contents
        self.name = name
        self.error = error
        self.requests: List[Dict[str, Any]] = []

    def __call__(self, url: str, **kwargs: Any) -> Document:
        self.requests.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return Document(path=self.name, contents=self.contents)


class FakeRunner:
    """Records commands and answers with a canned :class:`CmdResult`."""

    def __init__(self, *, exit_code: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        self.commands: List[List[str]] = []
        self.kwargs: List[Dict[str, Any]] = []

    def __call__(self, cmd: Sequence[str], **kwargs: Any) -> CmdResult:
        self.commands.append(list(cmd))
        self.kwargs.append(kwargs)
        return CmdResult(
            exit_code=self.exit_code,
            elapsed_seconds=0.0,
            command_str=" ".join(cmd),
            stdout=self.stdout,
            stderr=self.stderr,
        )


WARNING_DOCUMENT = b"""\
openapi: "3.0.3"
info:
  title: Typo
  version: 1.0.0
paths: {}
components:
  schemas:
    Pet:
      type: object
      required:
        - name
        - nmae
      properties:
        name:
          type: string
"""

CLEAN_DOCUMENT = b"""\
openapi: "3.0.3"
info:
  title: Clean
  version: 1.0.0
paths:
  /health:
    get:
      operationId: getHealth
      responses:
        "200":
          description: ok
components:
  schemas:
    Status:
      type: object
      properties:
        ok:
          type: boolean
"""
