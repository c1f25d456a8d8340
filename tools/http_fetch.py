"""tools/http_fetch.py

All network I/O for compatibility scenarios lives here.

Design goals:
  - Keep network I/O separated from orchestration.
  - Plain HTTPS GET, no authentication; the response body is the document.
  - Fail fast: a fetch error is fatal to the scenario. ``retries`` exists for
    flaky CI networks and defaults to no retry.
"""

from __future__ import annotations

import logging
import time
from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import urlparse

import requests

from gencheck.domain.errors import DocumentFetchError
from gencheck.domain.models import Document

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_DOCUMENT_NAME = "openapi.yaml"
RETRY_DELAY_SECONDS = 2.0


def document_name_from_url(url: str) -> str:
    """Logical document name derived from the last URL path segment."""
    name = PurePosixPath(urlparse(url).path).name
    return name or DEFAULT_DOCUMENT_NAME


def fetch_document(
    url: str,
    *,
    timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
    retries: int = 0,
    session: Optional[requests.Session] = None,
) -> Document:
    """Download a description document and return it as a :class:`Document`.

    Raises :class:`gencheck.domain.errors.DocumentFetchError` once all attempts
    are exhausted.
    """

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise DocumentFetchError(url, "not an http(s) URL")

    getter = session.get if session is not None else requests.get
    attempts = max(0, int(retries)) + 1
    last_error = "no attempt made"

    for attempt in range(1, attempts + 1):
        try:
            resp = getter(url, timeout=timeout_seconds)
            resp.raise_for_status()
            return Document(path=document_name_from_url(url), contents=resp.content)
        except requests.RequestException as e:
            last_error = f"{type(e).__name__}: {e}"
            if attempt < attempts:
                logger.warning("Fetch attempt %d/%d for %s failed: %s", attempt, attempts, url, last_error)
                time.sleep(RETRY_DELAY_SECONDS)

    raise DocumentFetchError(url, last_error)
