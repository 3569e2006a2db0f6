"""Adapters around the engine: serialization, task dispatch, caching and networking."""

from .cache import CACHE, ResponseCache, request_key
from .network import FETCHER, SourceFetcher
from .responses import send_png, send_result
from .serialization import (
    histogram_from_string,
    histogram_to_string,
    image_from_string,
    image_to_string,
    surface_from_string,
)
from .tasks import COMMANDS, collect_messages, handle_request, run_task

__all__ = [
    "CACHE",
    "ResponseCache",
    "request_key",
    "FETCHER",
    "SourceFetcher",
    "send_png",
    "send_result",
    "histogram_from_string",
    "histogram_to_string",
    "image_from_string",
    "image_to_string",
    "surface_from_string",
    "COMMANDS",
    "collect_messages",
    "handle_request",
    "run_task",
]
