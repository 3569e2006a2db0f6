from __future__ import annotations

import math
from typing import Optional

from .color import WHITE, Color, round_half_up
from .diagnostics import SILENT, Diagnostics
from .point import copy
from .surface import Surface

# 180 degrees divided by pi.
DEGREES_PER_RADIAN = 57.29577951


def bilinear_interpolate_pixel(surface: Surface, x: float, y: float) -> Optional[Color]:
    """Sample ``surface`` at a fractional coordinate.

    Returns ``None`` when the rounded coordinate lies outside the surface.
    When any of the four surrounding pixels is missing, the nearest pixel is
    returned unblended.
    """

    x_rounded = round_half_up(x)
    y_rounded = round_half_up(y)
    if x_rounded < 0 or y_rounded < 0:
        return None
    if x_rounded > surface.width or y_rounded > surface.height:
        return None

    floor_x, floor_y = math.floor(x), math.floor(y)
    ceil_x, ceil_y = math.ceil(x), math.ceil(y)
    fraction_x = x - floor_x
    fraction_y = y - floor_y

    top_left = surface.get_color(floor_x, floor_y)
    bottom_left = surface.get_color(floor_x, ceil_y)
    top_right = surface.get_color(ceil_x, floor_y)
    bottom_right = surface.get_color(ceil_x, ceil_y)

    if top_left is None or bottom_left is None or top_right is None or bottom_right is None:
        return surface.get_color(x_rounded, y_rounded)

    top = (
        top_left.to_normalized()
        .multiply_number(1.0 - fraction_x)
        .add_color(top_right.to_normalized().multiply_number(fraction_x))
    )
    bottom = (
        bottom_left.to_normalized()
        .multiply_number(1.0 - fraction_x)
        .add_color(bottom_right.to_normalized().multiply_number(fraction_x))
    )
    blended = top.multiply_number(1.0 - fraction_y).add_color(bottom.multiply_number(fraction_y))
    return blended.clamp().to_255()


def bilinear_interpolate(src: Surface, dst: Surface, diagnostics: Diagnostics = SILENT) -> None:
    copy(src, dst, diagnostics)
    width, height = src.width, src.height
    for x in range(width):
        diagnostics.report_progress("BilinearInterpolate", x, width)
        for y in range(height):
            dst.set_color(x, y, bilinear_interpolate_pixel(dst, x, y))


def translate(
    src: Surface,
    dst: Surface,
    offset_x: int,
    offset_y: int,
    fill_color: Color = WHITE,
    diagnostics: Diagnostics = SILENT,
) -> None:
    dst.fill(fill_color)
    width, height = src.width, src.height
    for y in range(height):
        diagnostics.report_progress("Translate", y, height)
        for x in range(width):
            dst.set_color(x + offset_x, y + offset_y, src.get_color(x, y))


def rotate(
    src: Surface,
    dst: Surface,
    pivot_x: float,
    pivot_y: float,
    angle: float,
    fill_color: Color = WHITE,
    diagnostics: Diagnostics = SILENT,
) -> None:
    """Rotate ``src`` by ``angle`` degrees around ``(pivot_x, pivot_y)``.

    Every destination pixel is mapped back into the source with the inverse
    rotation and sampled with :func:`bilinear_interpolate_pixel`.
    """

    radians = float(angle) / DEGREES_PER_RADIAN
    cos_a = math.cos(radians)
    sin_a = math.sin(radians)

    dst.fill(fill_color)
    width, height = dst.width, dst.height
    for y in range(height):
        diagnostics.report_progress("Rotate", y, height)
        for x in range(width):
            source_x = x * cos_a - y * sin_a - pivot_x * cos_a + pivot_x + pivot_y * sin_a
            source_y = y * cos_a + x * sin_a - pivot_x * sin_a - pivot_y * cos_a + pivot_y
            color = bilinear_interpolate_pixel(src, source_x, source_y)
            if color is None:
                diagnostics.report_missing("Rotate", source_x, source_y)
                continue
            dst.set_color(x, y, color)


def scale(
    src: Surface,
    dst: Surface,
    scale_x: float,
    scale_y: float,
    fill_color: Color = WHITE,
    diagnostics: Diagnostics = SILENT,
) -> None:
    """Resample ``src`` by ``scale_x``/``scale_y`` into ``dst``.

    Unlike :func:`translate` and :func:`rotate`, ``dst`` is not pre-filled;
    ``fill_color`` is accepted so all three share a call shape. Pixels of
    ``dst`` outside the scaled area keep their current value. Only the part
    of the scaled area lying inside ``dst`` is sampled.

    Raises ``ValueError`` for infinite or NaN scale factors.
    """

    scale_x, scale_y = float(scale_x), float(scale_y)
    if not (math.isfinite(scale_x) and math.isfinite(scale_y)):
        raise ValueError(f"Scale factors must be finite, got {scale_x} x {scale_y}")

    columns = math.ceil(min(src.width * scale_x, dst.width))
    rows = math.ceil(min(src.height * scale_y, dst.height))

    for y in range(rows):
        diagnostics.report_progress("Scale", y, rows)
        source_y = y / scale_y
        for x in range(columns):
            source_x = x / scale_x
            color = bilinear_interpolate_pixel(src, source_x, source_y)
            if color is None:
                diagnostics.report_missing("Scale", source_x, source_y)
                continue
            dst.set_color(x, y, color)
