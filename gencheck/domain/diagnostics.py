"""gencheck.domain.diagnostics

Structured messages emitted by the generator during a run.

The textual form (:attr:`Diagnostic.description`) and the dict form
(:meth:`Diagnostic.to_dict`) follow the generator's own conventions so that a
diagnostics file written by the generator CLI can be read back losslessly:

    <file>:<line>: <severity>: <message> [context: k1=v1, k2=v2]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class Severity(str, Enum):
    NOTE = "note"
    WARNING = "warning"
    ERROR = "error"

    @property
    def is_failure(self) -> bool:
        """Warnings and errors fail a strict run; notes never do."""
        return self is not Severity.NOTE


@dataclass(frozen=True)
class DiagnosticLocation:
    file_path: str
    line_number: Optional[int] = None


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    message: str
    location: Optional[DiagnosticLocation] = None
    context: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def note(cls, message: str, **kwargs: Any) -> "Diagnostic":
        return cls(Severity.NOTE, message, **kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: Any) -> "Diagnostic":
        return cls(Severity.WARNING, message, **kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: Any) -> "Diagnostic":
        return cls(Severity.ERROR, message, **kwargs)

    @classmethod
    def unsupported(
        cls,
        feature: str,
        *,
        found_in: str,
        location: Optional[DiagnosticLocation] = None,
        context: Optional[Mapping[str, str]] = None,
    ) -> "Diagnostic":
        """Recoverable: the generator skips a feature it does not support."""
        ctx = dict(context or {})
        ctx["foundIn"] = found_in
        return cls.warning(f'Feature "{feature}" is not supported, skipping', location=location, context=ctx)

    @property
    def description(self) -> str:
        prefix = ""
        if self.location is not None:
            prefix = f"{self.location.file_path}:"
            if self.location.line_number is not None:
                prefix += f"{self.location.line_number}:"
            prefix += " "
        context_str = ", ".join(sorted(f"{k}={v}" for k, v in self.context.items()))
        suffix = f" [context: {context_str}]" if context_str else ""
        return f"{prefix}{self.severity.value}: {self.message}{suffix}"

    def __str__(self) -> str:
        return self.description

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"severity": self.severity.value, "message": self.message}
        if self.location is not None:
            loc: Dict[str, Any] = {"filePath": self.location.file_path}
            if self.location.line_number is not None:
                loc["lineNumber"] = self.location.line_number
            out["location"] = loc
        if self.context:
            out["context"] = dict(sorted(self.context.items()))
        return out

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Diagnostic":
        if not isinstance(d, Mapping):
            raise ValueError(f"Diagnostic entry must be a mapping, got {type(d).__name__}")
        try:
            severity = Severity(str(d["severity"]).lower())
        except (KeyError, ValueError) as e:
            raise ValueError(f"Diagnostic entry has no valid severity: {dict(d)!r}") from e
        message = d.get("message")
        if not isinstance(message, str):
            raise ValueError(f"Diagnostic entry has no message: {dict(d)!r}")

        location = None
        raw_loc = d.get("location")
        if isinstance(raw_loc, Mapping) and raw_loc.get("filePath"):
            line = raw_loc.get("lineNumber")
            location = DiagnosticLocation(
                file_path=str(raw_loc["filePath"]),
                line_number=int(line) if line is not None else None,
            )

        raw_ctx = d.get("context") or {}
        context = {str(k): str(v) for k, v in raw_ctx.items()} if isinstance(raw_ctx, Mapping) else {}
        return cls(severity=severity, message=message, location=location, context=context)
