from __future__ import annotations

from dataclasses import replace

from .color import BLACK, BlendMode, Color, is_kinda_equal
from .diagnostics import SILENT, Diagnostics
from .surface import Surface


def copy(src: Surface, dst: Surface, diagnostics: Diagnostics = SILENT) -> None:
    width, height = src.width, src.height
    for x in range(width):
        diagnostics.report_progress("Copy", x, width)
        for y in range(height):
            dst.set_color(x, y, src.get_color(x, y))


def blend(
    src: Surface,
    blend_surface: Surface,
    dst: Surface,
    mode: BlendMode,
    diagnostics: Diagnostics = SILENT,
) -> None:
    width, height = src.width, src.height
    for x in range(width):
        diagnostics.report_progress("Blend", x, width)
        for y in range(height):
            color = src.get_color(x, y)
            blend_color = blend_surface.get_color(x, y)
            if color is None or blend_color is None:
                diagnostics.report_missing("Blend", x, y)
                continue
            dst.set_color(x, y, color.blend(blend_color, mode))


def threshold(
    src: Surface,
    dst: Surface,
    threshold_color: Color,
    high_color: Color,
    low_color: Color,
    threshold_alpha: bool = False,
    diagnostics: Diagnostics = SILENT,
) -> None:
    """Map each channel to ``high_color`` above the threshold, ``low_color`` otherwise.

    Alpha is left opaque unless ``threshold_alpha`` is set.
    """

    width, height = src.width, src.height
    for x in range(width):
        diagnostics.report_progress("Threshold", x, width)
        for y in range(height):
            color = src.get_color(x, y)
            if color is None:
                diagnostics.report_missing("Threshold", x, y)
                continue
            out = Color(
                high_color.r if color.r > threshold_color.r else low_color.r,
                high_color.g if color.g > threshold_color.g else low_color.g,
                high_color.b if color.b > threshold_color.b else low_color.b,
            )
            if threshold_alpha:
                out = replace(out, a=high_color.a if color.a > threshold_color.a else low_color.a)
            dst.set_color(x, y, out)


def grayscale(src: Surface, dst: Surface, diagnostics: Diagnostics = SILENT) -> None:
    width, height = src.width, src.height
    for x in range(width):
        diagnostics.report_progress("Grayscale", x, width)
        for y in range(height):
            color = src.get_color(x, y)
            if color is None:
                diagnostics.report_missing("Grayscale", x, y)
                continue
            dst.set_color(x, y, color.grayscale())


def invert(src: Surface, dst: Surface, diagnostics: Diagnostics = SILENT) -> None:
    width, height = src.width, src.height
    for x in range(width):
        diagnostics.report_progress("Invert", x, width)
        for y in range(height):
            color = src.get_color(x, y)
            if color is None:
                diagnostics.report_missing("Invert", x, y)
                continue
            dst.set_color(x, y, color.invert())


def assign_channel_value(
    src: Surface,
    dst: Surface,
    channels: str,
    value: int,
    diagnostics: Diagnostics = SILENT,
) -> None:
    """Overwrite the channels named in ``channels`` (any of ``rgba``) with ``value``.

    ``value`` is on the 0..255 scale; it is divided by 255 for alpha.
    """

    value = int(value)
    updates = {channel: value for channel in "rgb" if channel in channels}
    if "a" in channels:
        updates["a"] = value / 255.0

    width, height = src.width, src.height
    for x in range(width):
        diagnostics.report_progress("AssignChannelValue", x, width)
        for y in range(height):
            color = src.get_color(x, y)
            if color is None:
                diagnostics.report_missing("AssignChannelValue", x, y)
                continue
            dst.set_color(x, y, replace(color, **updates))


def erosion(
    src: Surface,
    dst: Surface,
    erosion_color: Color,
    threshold: int,
    tolerance: float = 0.01,
    neighbor_color: Color = BLACK,
    replacement_color: Color = BLACK,
    diagnostics: Diagnostics = SILENT,
) -> None:
    """Erode pixels of ``erosion_color`` that are crowded by ``neighbor_color``.

    ``src`` is copied to ``dst`` first. For each interior pixel matching
    ``erosion_color`` within ``tolerance``, the eight surrounding pixels whose
    RGB match ``neighbor_color`` are counted; more than ``threshold`` of them
    replaces the pixel with ``replacement_color``. The outermost row and
    column are never eroded.
    """

    copy(src, dst)

    width, height = src.width, src.height
    for y in range(1, height - 1):
        diagnostics.report_progress("Erosion", y, height)
        for x in range(1, width - 1):
            color = src.get_color(x, y)
            if color is None:
                diagnostics.report_missing("Erosion", x, y)
                continue
            if not color.is_equal(erosion_color, tolerance):
                continue

            count = 0
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    if dx == 0 and dy == 0:
                        continue
                    neighbor = src.get_color(x + dx, y + dy)
                    if neighbor is None:
                        continue
                    if (
                        is_kinda_equal(neighbor_color.r, neighbor.r, tolerance)
                        and is_kinda_equal(neighbor_color.g, neighbor.g, tolerance)
                        and is_kinda_equal(neighbor_color.b, neighbor.b, tolerance)
                    ):
                        count += 1

            if count > threshold:
                dst.set_color(x, y, replacement_color)
