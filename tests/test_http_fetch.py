from __future__ import annotations

from typing import Any, List
from unittest import mock

import pytest
import requests

from gencheck.domain.errors import DocumentFetchError
from tools.http_fetch import document_name_from_url, fetch_document


class FakeResponse:
    def __init__(self, content: bytes, status: int = 200) -> None:
        self.content = content
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


class FakeSession:
    def __init__(self, responses: List[Any]) -> None:
        self.responses = list(responses)
        self.calls: List[dict] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def test_document_name_from_url() -> None:
    assert document_name_from_url("https://x.org/a/b/openapi.json") == "openapi.json"
    assert document_name_from_url("https://x.org/") == "openapi.yaml"


def test_fetch_returns_body_as_document() -> None:
    session = FakeSession([FakeResponse(b"openapi: 3.1.0\n")])
    doc = fetch_document("https://x.org/specs/api.yaml", session=session, timeout_seconds=5)

    assert doc.path == "api.yaml"
    assert doc.contents == b"openapi: 3.1.0\n"
    assert session.calls == [{"url": "https://x.org/specs/api.yaml", "timeout": 5}]


def test_http_error_is_fatal_without_retries() -> None:
    session = FakeSession([FakeResponse(b"", status=404)])
    with pytest.raises(DocumentFetchError) as excinfo:
        fetch_document("https://x.org/gone.yaml", session=session)
    assert "404" in str(excinfo.value)
    assert len(session.calls) == 1


def test_retries_recover_from_transient_errors() -> None:
    session = FakeSession([requests.ConnectionError("reset"), FakeResponse(b"ok")])
    with mock.patch("tools.http_fetch.time.sleep") as sleep:
        doc = fetch_document("https://x.org/a.yaml", session=session, retries=1)
    assert doc.contents == b"ok"
    assert sleep.call_count == 1


def test_non_http_urls_are_rejected() -> None:
    with pytest.raises(DocumentFetchError):
        fetch_document("file:///etc/passwd")
