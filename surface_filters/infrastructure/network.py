from __future__ import annotations

import io
import logging
import time
from typing import Callable

import requests
from PIL import Image

from ..config import SETTINGS


SessionFactory = Callable[[], requests.Session]

log = logging.getLogger(__name__)


class SourceFetcher:
    """Downloads source images for the HTTP adapter, retrying on failure."""

    def __init__(self, session_factory: SessionFactory | None = None, backoff: float = 0.4) -> None:
        self._session_factory = session_factory or requests.Session
        self._session = self._create_session()
        self._backoff = backoff

    def _create_session(self) -> requests.Session:
        session = self._session_factory()
        session.headers.update({"User-Agent": "surface-filters/1.0"})
        return session

    def fetch_source(self, source_url: str) -> Image.Image:
        last_exception: Exception | None = None
        for attempt in range(1, SETTINGS.retries + 2):
            try:
                response = self._session.get(source_url, timeout=SETTINGS.timeout)
                response.raise_for_status()
                return Image.open(io.BytesIO(response.content)).convert("RGBA")
            except Exception as exc:
                log.warning("Fetching %s failed (attempt %d): %s", source_url, attempt, exc)
                last_exception = exc
                time.sleep(self._backoff * attempt)
        raise RuntimeError(last_exception)


FETCHER = SourceFetcher()
