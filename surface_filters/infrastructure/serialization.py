"""Text codecs used to move images and histograms across process boundaries.

Image format: ``"<width>;<height>;r,g,b,a;r,g,b,a;...;"`` in row-major order.
Histogram format: four comma-separated lists (red, green, blue, alpha)
joined by ``;``.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..engine.color import Color, format_number
from ..engine.histogram import BUCKETS, HistogramResult
from ..engine.surface import MemorySurface, Surface

NULL_GROUP = "null,null,null,null"


def image_to_string(surface: Surface) -> str:
    parts = [str(surface.width), str(surface.height)]
    for y in range(surface.height):
        for x in range(surface.width):
            color = surface.get_color(x, y)
            if color is None:
                parts.append(NULL_GROUP)
                continue
            parts.append(",".join(format_number(value) for value in (color.r, color.g, color.b, color.a)))
    return ";".join(parts) + ";"


def _parse_header(text: str) -> Optional[Tuple[int, int, List[str]]]:
    if not text:
        return None
    fields = text.split(";")
    if len(fields) < 3:
        return None
    try:
        width = int(fields[0])
        height = int(fields[1])
    except ValueError:
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height, fields


def _parse_groups(width: int, height: int, fields: List[str]) -> Optional[List[Optional[Color]]]:
    if len(fields) != width * height + 3:
        return None

    colors: List[Optional[Color]] = []
    for group in fields[2 : 2 + width * height]:
        values = group.split(",")
        if values[0].strip() == "null":
            colors.append(None)
            continue
        if len(values) != 4:
            return None
        try:
            r, g, b = (int(float(value)) for value in values[:3])
            a = float(values[3])
        except ValueError:
            return None
        colors.append(Color(r, g, b, a))
    return colors


def image_from_string(surface: Surface, text: str) -> bool:
    """Load ``text`` into ``surface``; returns ``False`` when the payload is rejected.

    The payload is rejected as a whole, leaving ``surface`` untouched, when
    its dimensions differ from the surface's, when it holds the wrong number
    of pixel groups, or when any group is malformed.
    """

    header = _parse_header(text)
    if header is None:
        return False
    width, height, fields = header
    if width != surface.width or height != surface.height:
        return False

    colors = _parse_groups(width, height, fields)
    if colors is None:
        return False

    for index, color in enumerate(colors):
        surface.set_color(index % width, index // width, color)
    return True


def surface_from_string(text: str) -> Optional[MemorySurface]:
    """Build a new surface sized by the payload's own header."""

    header = _parse_header(text)
    if header is None:
        return None
    surface = MemorySurface(header[0], header[1])
    if not image_from_string(surface, text):
        return None
    return surface


def histogram_to_string(result: HistogramResult) -> str:
    return ";".join(",".join(str(count) for count in channel) for channel in result.channels())


def histogram_from_string(text: str) -> HistogramResult:
    fields = (text or "").split(";")
    if len(fields) != 4:
        raise ValueError("Histogram payload must contain four channels")

    result = HistogramResult()
    for target, field in zip(result.channels(), fields):
        counts = [int(value) for value in field.split(",")]
        if len(counts) > BUCKETS:
            raise ValueError(f"Histogram channel holds {len(counts)} buckets, expected {BUCKETS}")
        target[: len(counts)] = counts
    return result
