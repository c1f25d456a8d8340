from __future__ import annotations

from pathlib import Path

import pytest

from harness.corpus import load_corpus, select_cases

DISCOURSE_WARNING = (
    "Validation warning: Inconsistency encountered when parsing `OpenAPI Schema`: "
    "Found nothing but unsupported attributes.."
)


def test_bundled_corpus_loads() -> None:
    cases = load_corpus()
    by_name = {c.name: c for c in cases}

    assert len(cases) == 17
    assert all(c.url.startswith("https://raw.githubusercontent.com/") for c in cases)
    assert by_name["discourse"].expected_diagnostics == frozenset({DISCOURSE_WARNING})
    assert by_name["github"].skip_build is True
    assert by_name["github-enterprise"].skip_build is True
    assert by_name["kubernetes"].skip_build is None
    assert by_name["openai"].license == "mit"


def test_unknown_license_is_rejected(tmp_path: Path) -> None:
    p = tmp_path / "corpus.yaml"
    p.write_text("cases:\n  - {name: a, url: 'https://x/y.yaml', license: gpl}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="license"):
        load_corpus(p)


def test_missing_keys_are_rejected(tmp_path: Path) -> None:
    p = tmp_path / "corpus.yaml"
    p.write_text("cases:\n  - {name: a, license: mit}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="url"):
        load_corpus(p)


def test_duplicate_names_are_rejected(tmp_path: Path) -> None:
    p = tmp_path / "corpus.yaml"
    p.write_text(
        "cases:\n"
        "  - {name: a, url: 'https://x/1.yaml', license: mit}\n"
        "  - {name: a, url: 'https://x/2.yaml', license: mit}\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="Duplicate"):
        load_corpus(p)


def test_select_cases_keeps_corpus_order() -> None:
    cases = load_corpus()
    picked = select_cases(cases, ["openai", "box"])
    assert [c.name for c in picked] == ["box", "openai"]
    assert select_cases(cases, None) == cases
    with pytest.raises(ValueError, match="Unknown"):
        select_cases(cases, ["nope"])
