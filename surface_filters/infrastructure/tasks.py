"""Routing between the task protocol and the filter engine.

A request is a mapping with ``type`` (only ``"Filter"``), ``cmd`` (an engine
operation), the serialized source image and operation parameters. Every
response echoes the request's ``tag``. Results are posted as
``Result<cmd>Filter``; progress and log hooks are posted as ``Progress`` and
``Log`` while the filter runs.
"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..config import SETTINGS
from ..engine import (
    WHITE,
    BlendMode,
    Diagnostics,
    MemorySurface,
    assign_channel_value,
    bilinear_interpolate,
    blend,
    copy,
    detect_edges,
    equalize,
    erosion,
    get_mask,
    grayscale,
    histogram,
    invert,
    mask_filter,
    parse_color,
    rotate,
    scale,
    sum_histogram,
    threshold,
    translate,
)
from ..engine.color import BLACK, Color
from .cache import CACHE, request_key
from .serialization import (
    histogram_from_string,
    histogram_to_string,
    image_from_string,
    image_to_string,
)

log = logging.getLogger(__name__)

Message = Dict[str, Any]
Post = Callable[[Message], None]
Handler = Callable[[Mapping[str, Any], Diagnostics], str]


class TaskError(ValueError):
    """Raised for requests the adapter cannot turn into an engine call."""


def _surface(data: Mapping[str, Any]) -> MemorySurface:
    width, height = int(data["width"]), int(data["height"])
    if width <= 0 or height <= 0:
        raise TaskError(f"Invalid image size {width}x{height}")
    if width * height > SETTINGS.max_pixels:
        raise TaskError(f"Image of {width * height} pixels exceeds the {SETTINGS.max_pixels} pixel limit")
    return MemorySurface(width, height)


def _load(data: Mapping[str, Any], key: str = "imageString") -> MemorySurface:
    surface = _surface(data)
    if not image_from_string(surface, data.get(key) or ""):
        raise TaskError(f"{key} does not describe a {surface.width}x{surface.height} image")
    return surface


def _color(data: Mapping[str, Any], key: str, default: Optional[Color] = None) -> Color:
    value = data.get(key)
    if not value and default is None:
        raise TaskError(f"Missing {key}")
    return parse_color(value, default)


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _optional_float(data: Mapping[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value in (None, ""):
        return None
    return float(value)


def _fill_color(data: Mapping[str, Any]) -> Color:
    return _color(data, "fillColor", parse_color(SETTINGS.fill_color, WHITE))


# -- command handlers ---------------------------------------------------


def _copy(data, diagnostics):
    src, dst = _load(data), _surface(data)
    copy(src, dst, diagnostics)
    return image_to_string(dst)


def _histogram(data, diagnostics):
    return histogram_to_string(histogram(_load(data), diagnostics))


def _sum_histogram(data, diagnostics):
    return histogram_to_string(sum_histogram(histogram_from_string(data["histogram"]), diagnostics))


def _equalize(data, diagnostics):
    src, dst = _load(data), _surface(data)
    equalize(src, dst, diagnostics)
    return image_to_string(dst)


def _grayscale(data, diagnostics):
    src, dst = _load(data), _surface(data)
    grayscale(src, dst, diagnostics)
    return image_to_string(dst)


def _invert(data, diagnostics):
    src, dst = _load(data), _surface(data)
    invert(src, dst, diagnostics)
    return image_to_string(dst)


def _threshold(data, diagnostics):
    src, dst = _load(data), _surface(data)
    threshold(
        src,
        dst,
        _color(data, "thresholdColor"),
        _color(data, "newHighColor"),
        _color(data, "newLowColor"),
        _flag(data.get("thresholdAlpha", False)),
        diagnostics,
    )
    return image_to_string(dst)


def _assign_channel_value(data, diagnostics):
    src, dst = _load(data), _surface(data)
    assign_channel_value(src, dst, str(data["channels"]), int(data["value"]), diagnostics)
    return image_to_string(dst)


def _detect_edges(data, diagnostics):
    src, dst = _load(data), _surface(data)
    detect_edges(src, dst, diagnostics)
    return image_to_string(dst)


def _translate(data, diagnostics):
    src, dst = _load(data), _surface(data)
    translate(src, dst, int(data["xOffset"]), int(data["yOffset"]), _fill_color(data), diagnostics)
    return image_to_string(dst)


def _rotate(data, diagnostics):
    src, dst = _load(data), _surface(data)
    rotate(
        src,
        dst,
        float(data["rotationPointX"]),
        float(data["rotationPointY"]),
        float(data["angle"]),
        _fill_color(data),
        diagnostics,
    )
    return image_to_string(dst)


def _scale(data, diagnostics):
    src, dst = _load(data), _surface(data)
    scale(src, dst, float(data["scaleX"]), float(data["scaleY"]), _fill_color(data), diagnostics)
    return image_to_string(dst)


def _erosion(data, diagnostics):
    src, dst = _load(data), _surface(data)
    tolerance = _optional_float(data, "tolerance")
    erosion(
        src,
        dst,
        _color(data, "erosionColor"),
        int(data["threshold"]),
        SETTINGS.erosion_tolerance if tolerance is None else tolerance,
        _color(data, "neighborColor", BLACK),
        _color(data, "replacementColor", BLACK),
        diagnostics,
    )
    return image_to_string(dst)


def _bilinear_interpolate(data, diagnostics):
    src, dst = _load(data), _surface(data)
    bilinear_interpolate(src, dst, diagnostics)
    return image_to_string(dst)


def _blend(data, diagnostics):
    src, dst = _load(data), _surface(data)
    overlay = _load(data, "imageBlendString")
    try:
        mode = BlendMode[str(data["blendMode"]).upper()]
    except KeyError:
        raise TaskError(f"Unknown blend mode: {data.get('blendMode')!r}") from None
    blend(src, overlay, dst, mode, diagnostics)
    return image_to_string(dst)


def _mask_filter(data, diagnostics):
    src, dst = _load(data), _surface(data)
    mask_filter(
        src,
        dst,
        get_mask(str(data["mask"])),
        _optional_float(data, "factor"),
        _optional_float(data, "bias"),
        diagnostics,
    )
    return image_to_string(dst)


COMMANDS: Dict[str, Handler] = {
    "AssignChannelValue": _assign_channel_value,
    "BilinearInterpolate": _bilinear_interpolate,
    "Blend": _blend,
    "Copy": _copy,
    "DetectEdges": _detect_edges,
    "Equalize": _equalize,
    "Erosion": _erosion,
    "Grayscale": _grayscale,
    "Histogram": _histogram,
    "Invert": _invert,
    "MaskFilter": _mask_filter,
    "Rotate": _rotate,
    "Scale": _scale,
    "SumHistogram": _sum_histogram,
    "Threshold": _threshold,
    "Translate": _translate,
}

HISTOGRAM_COMMANDS = frozenset({"Histogram", "SumHistogram"})


def task_diagnostics(tag: Any, post: Post) -> Diagnostics:
    return Diagnostics(
        progress=lambda name, pct: post({"cmd": "Progress", "msg": pct, "filterName": name, "tag": tag}),
        log=lambda name, msg: post({"cmd": "Log", "msg": msg, "filterName": name, "tag": tag}),
        warn=lambda name, msg: log.warning("%s: %s", name, msg),
        error=lambda name, msg: log.error("%s: %s", name, msg),
    )


def handle_request(data: Mapping[str, Any], post: Post) -> None:
    """Run one task request, posting progress, log and result messages."""

    tag = data.get("tag")
    cmd = data.get("cmd")

    if data.get("type") != "Filter":
        post({"cmd": "Error", "msg": f"Unknown type: {data.get('type')!r}", "tag": tag})
        return

    handler = COMMANDS.get(cmd)
    if handler is None:
        post({"cmd": "Error", "msg": f"Unknown command: {cmd!r}", "tag": tag})
        return

    try:
        result = handler(data, task_diagnostics(tag, post))
    except (KeyError, TypeError, ValueError) as exc:
        log.warning("Rejected %s request: %s", cmd, exc)
        message = f"Missing parameter {exc}" if isinstance(exc, KeyError) else str(exc)
        post({"cmd": "Error", "msg": message, "tag": tag})
        return

    post({"cmd": f"Result{cmd}Filter", "msg": result, "tag": tag})


def collect_messages(data: Mapping[str, Any]) -> List[Message]:
    messages: List[Message] = []
    handle_request(data, messages.append)
    return messages


# Settings read by the command handlers.
RESULT_SETTINGS = ("fill_color", "erosion_tolerance", "max_pixels")


def result_settings() -> Dict[str, Any]:
    return {name: getattr(SETTINGS, name) for name in RESULT_SETTINGS}


def collect_with_settings(data: Mapping[str, Any], settings: Mapping[str, Any]) -> List[Message]:
    """Worker entry point: apply the parent's current settings, then run ``data``.

    Worker processes keep the settings they were started with, so every
    submission carries a fresh snapshot.
    """

    for name, value in settings.items():
        setattr(SETTINGS, name, value)
    return collect_messages(data)


_EXECUTOR: Optional[ProcessPoolExecutor] = None
_EXECUTOR_WORKERS = 0


def _executor() -> ProcessPoolExecutor:
    global _EXECUTOR, _EXECUTOR_WORKERS
    if _EXECUTOR is not None and _EXECUTOR_WORKERS != SETTINGS.task_workers:
        log.info("Resizing worker pool from %d to %d", _EXECUTOR_WORKERS, SETTINGS.task_workers)
        shutdown()
    if _EXECUTOR is None:
        _EXECUTOR = ProcessPoolExecutor(max_workers=SETTINGS.task_workers)
        _EXECUTOR_WORKERS = SETTINGS.task_workers
    return _EXECUTOR


def run_task(data: Mapping[str, Any]) -> List[Message]:
    """Run a request in a worker process, bounded by ``SETTINGS.task_timeout``.

    Raises :class:`concurrent.futures.TimeoutError` when the worker does not
    answer in time. The worker itself is not interrupted. With
    ``SETTINGS.task_workers`` at zero the request runs inline. Cached results
    are keyed on the request and on :data:`RESULT_SETTINGS`.
    """

    settings = result_settings()
    key = request_key(data, settings)
    cached = CACHE.get(key)
    if cached is not None:
        tag = data.get("tag")
        return [dict(message, tag=tag) for message in cached]

    if SETTINGS.task_workers <= 0:
        messages = collect_messages(data)
    else:
        future = _executor().submit(collect_with_settings, dict(data), settings)
        messages = future.result(timeout=SETTINGS.task_timeout)

    if messages and messages[-1]["cmd"] != "Error":
        CACHE.put(key, messages)
    return messages


def shutdown() -> None:
    global _EXECUTOR
    if _EXECUTOR is not None:
        _EXECUTOR.shutdown(wait=False)
        _EXECUTOR = None
