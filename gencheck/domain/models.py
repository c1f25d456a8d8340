"""gencheck.domain.models

Value objects passed between the harness and the generator under test.

These dataclasses are frozen: a configuration is built once per scenario and a
document is immutable once loaded. Anything that needs a variant (e.g. the same
configuration for another mode) builds a copy.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

ACCESS_MODIFIERS: Tuple[str, ...] = ("public", "package", "internal", "fileprivate", "private")
NAMING_STRATEGIES: Tuple[str, ...] = ("defensive", "idiomatic")

DEFAULT_ACCESS_MODIFIER = "internal"
DEFAULT_NAMING_STRATEGY = "defensive"


class GeneratorMode(str, Enum):
    """One generation target; each run in a mode renders exactly one file."""

    TYPES = "types"
    CLIENT = "client"
    SERVER = "server"

    @property
    def output_file_name(self) -> str:
        return _OUTPUT_FILE_NAMES[self]

    @property
    def order(self) -> int:
        return _MODE_ORDER[self]

    @classmethod
    def ordered(cls) -> List["GeneratorMode"]:
        """All modes in the order the generator expects to run them."""
        return sorted(cls, key=lambda m: m.order)

    @classmethod
    def parse(cls, raw: Union[str, "GeneratorMode"]) -> "GeneratorMode":
        if isinstance(raw, GeneratorMode):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls.ordered())
            raise ValueError(f"Unknown generator mode {raw!r}. Valid: {valid}") from None


_OUTPUT_FILE_NAMES: Dict[GeneratorMode, str] = {
    GeneratorMode.TYPES: "Types.swift",
    GeneratorMode.CLIENT: "Client.swift",
    GeneratorMode.SERVER: "Server.swift",
}

_MODE_ORDER: Dict[GeneratorMode, int] = {
    GeneratorMode.TYPES: 1,
    GeneratorMode.CLIENT: 2,
    GeneratorMode.SERVER: 3,
}


@dataclass(frozen=True)
class GeneratorConfig:
    """Options for one generator run.

    ``mode`` is part of the configuration because the generator is invoked once
    per mode; use :meth:`with_mode` to derive the sibling configurations.
    """

    mode: GeneratorMode
    access_modifier: str = DEFAULT_ACCESS_MODIFIER
    additional_imports: Tuple[str, ...] = ()
    naming_strategy: str = DEFAULT_NAMING_STRATEGY
    name_overrides: Mapping[str, str] = field(default_factory=dict)
    feature_flags: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", GeneratorMode.parse(self.mode))
        if self.access_modifier not in ACCESS_MODIFIERS:
            raise ValueError(
                f"Unknown access modifier {self.access_modifier!r}. Valid: {', '.join(ACCESS_MODIFIERS)}"
            )
        if self.naming_strategy not in NAMING_STRATEGIES:
            raise ValueError(
                f"Unknown naming strategy {self.naming_strategy!r}. Valid: {', '.join(NAMING_STRATEGIES)}"
            )
        # Normalize sequences so callers can pass lists without breaking immutability.
        object.__setattr__(self, "additional_imports", tuple(self.additional_imports))
        object.__setattr__(self, "feature_flags", tuple(self.feature_flags))
        object.__setattr__(self, "name_overrides", dict(self.name_overrides))

    def with_mode(self, mode: Union[str, GeneratorMode]) -> "GeneratorConfig":
        return replace(self, mode=GeneratorMode.parse(mode))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "access_modifier": self.access_modifier,
            "additional_imports": list(self.additional_imports),
            "naming_strategy": self.naming_strategy,
            "name_overrides": dict(sorted(self.name_overrides.items())),
            "feature_flags": list(self.feature_flags),
        }


@dataclass(frozen=True)
class Document:
    """An API description document: raw bytes plus a logical path.

    The path is an identity used to name derived artifacts and to attribute
    failures; it does not have to exist on disk.
    """

    path: str
    contents: bytes

    @property
    def size(self) -> int:
        return len(self.contents)

    @property
    def name(self) -> str:
        return Path(self.path).name

    @classmethod
    def from_file(cls, path: Union[str, Path], *, relative_to: Optional[Path] = None) -> "Document":
        p = Path(path)
        full = (Path(relative_to) / p) if relative_to is not None and not p.is_absolute() else p
        return cls(path=str(p), contents=full.read_bytes())


@dataclass(frozen=True)
class RenderedOutput:
    """One generated artifact: file base name and raw contents."""

    base_name: str
    contents: bytes

    @property
    def text(self) -> str:
        return self.contents.decode("utf-8")
