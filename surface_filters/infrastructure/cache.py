from __future__ import annotations

import hashlib
import json
import time
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..config import SETTINGS


Messages = List[Dict[str, Any]]
CacheEntry = Tuple[float, Messages]


def request_key(data: Mapping[str, Any], settings: Optional[Mapping[str, Any]] = None) -> str:
    """Fingerprint a task request plus the settings it ran under, ignoring the caller's ``tag``."""

    payload = {key: value for key, value in data.items() if key != "tag"}
    encoded = json.dumps([payload, dict(settings or {})], sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha1(encoded).hexdigest()


class ResponseCache:
    def __init__(self, limit: int = 16) -> None:
        self._entries: Dict[str, CacheEntry] = {}
        self._limit = limit

    def get(self, key: str) -> Optional[Messages]:
        entry = self._entries.get(key)
        if not entry:
            return None
        timestamp, messages = entry
        if time.time() - timestamp > SETTINGS.cache_ttl:
            self._entries.pop(key, None)
            return None
        return messages

    def put(self, key: str, messages: Messages) -> None:
        if len(self._entries) >= self._limit and key not in self._entries:
            oldest = min(self._entries.items(), key=lambda item: item[1][0])[0]
            self._entries.pop(oldest, None)
        self._entries[key] = (time.time(), messages)

    def clear(self) -> None:
        self._entries.clear()


CACHE = ResponseCache()
