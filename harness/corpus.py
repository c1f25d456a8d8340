"""harness.corpus

Load the pinned compatibility corpus (``harness/data/compatibility_corpus.yaml``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from harness.compatibility import CompatibilityCase

DEFAULT_CORPUS_PATH = Path(__file__).resolve().parent / "data" / "compatibility_corpus.yaml"

_REQUIRED_KEYS = ("name", "url", "license")


def case_from_dict(raw: Dict[str, Any]) -> CompatibilityCase:
    if not isinstance(raw, dict):
        raise ValueError(f"Corpus entry must be a mapping, got {type(raw).__name__}")
    missing = [k for k in _REQUIRED_KEYS if not raw.get(k)]
    if missing:
        raise ValueError(f"Corpus entry {raw.get('name', '<unnamed>')!r} is missing keys: {', '.join(missing)}")

    expected = raw.get("expected_diagnostics") or []
    if not isinstance(expected, list) or not all(isinstance(m, str) for m in expected):
        raise ValueError(f"'expected_diagnostics' must be a list of strings for case {raw['name']!r}")

    skip_build = raw.get("skip_build")
    if skip_build is not None and not isinstance(skip_build, bool):
        raise ValueError(f"'skip_build' must be a boolean for case {raw['name']!r}")

    return CompatibilityCase(
        name=str(raw["name"]),
        url=str(raw["url"]),
        license=str(raw["license"]).strip().lower(),
        expected_diagnostics=frozenset(expected),
        skip_build=skip_build,
    )


def load_corpus(path: Union[str, Path, None] = None) -> List[CompatibilityCase]:
    """Load compatibility cases from YAML, in file order."""
    import yaml

    p = Path(path).expanduser().resolve() if path else DEFAULT_CORPUS_PATH
    if not p.exists():
        raise FileNotFoundError(f"Compatibility corpus not found: {p}")
    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Corpus YAML must be a mapping at top level: {p}")
    entries = raw.get("cases") or []
    if not isinstance(entries, list):
        raise ValueError(f"'cases' must be a list in {p}")

    cases = [case_from_dict(e) for e in entries]
    names = [c.name for c in cases]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        raise ValueError(f"Duplicate case names in {p}: {', '.join(dupes)}")
    return cases


def select_cases(cases: Iterable[CompatibilityCase], names: Optional[Iterable[str]] = None) -> List[CompatibilityCase]:
    """Filter by name, keeping corpus order. Unknown names are an error."""
    all_cases = list(cases)
    if not names:
        return all_cases
    wanted = list(dict.fromkeys(names))
    known = {c.name for c in all_cases}
    unknown = [n for n in wanted if n not in known]
    if unknown:
        raise ValueError(f"Unknown compatibility case(s): {', '.join(unknown)}. Known: {', '.join(sorted(known))}")
    return [c for c in all_cases if c.name in wanted]
