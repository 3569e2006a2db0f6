"""Tests for the source image fetcher."""

import io

import pytest

requests = pytest.importorskip("requests")

from PIL import Image

from surface_filters.config import SETTINGS
from surface_filters.infrastructure.network import SourceFetcher


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (2, 1), (10, 20, 30)).save(buffer, "PNG")
    return buffer.getvalue()


class FakeResponse:
    def __init__(self, content: bytes, status: int = 200) -> None:
        self.content = content
        self.status = status

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")


class FakeSession:
    def __init__(self, responses) -> None:
        self.headers = {}
        self.calls = []
        self._responses = list(responses)

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        outcome = self._responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_fetch_source_returns_rgba_image():
    session = FakeSession([FakeResponse(_png_bytes())])
    fetcher = SourceFetcher(session_factory=lambda: session, backoff=0)

    image = fetcher.fetch_source("http://example.com/a.png")

    assert image.mode == "RGBA"
    assert image.getpixel((1, 0)) == (10, 20, 30, 255)
    assert session.calls == [("http://example.com/a.png", SETTINGS.timeout)]
    assert session.headers["User-Agent"].startswith("surface-filters")


def test_fetch_source_retries_before_succeeding(monkeypatch):
    monkeypatch.setattr(SETTINGS, "retries", 2)
    session = FakeSession([requests.ConnectionError("down"), FakeResponse(b"", 503), FakeResponse(_png_bytes())])
    fetcher = SourceFetcher(session_factory=lambda: session, backoff=0)

    image = fetcher.fetch_source("http://example.com/a.png")

    assert image.size == (2, 1)
    assert len(session.calls) == 3


def test_fetch_source_raises_after_exhausting_retries(monkeypatch):
    monkeypatch.setattr(SETTINGS, "retries", 1)
    session = FakeSession([requests.ConnectionError("down"), requests.Timeout("slow")])
    fetcher = SourceFetcher(session_factory=lambda: session, backoff=0)

    with pytest.raises(RuntimeError, match="slow"):
        fetcher.fetch_source("http://example.com/a.png")
    assert len(session.calls) == 2
