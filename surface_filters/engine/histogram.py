from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .color import Color, round_half_up
from .diagnostics import SILENT, Diagnostics
from .surface import Surface

BUCKETS = 257


def _empty() -> List[int]:
    return [0] * BUCKETS


@dataclass
class HistogramResult:
    red: List[int] = field(default_factory=_empty)
    green: List[int] = field(default_factory=_empty)
    blue: List[int] = field(default_factory=_empty)
    alpha: List[int] = field(default_factory=_empty)

    def channels(self):
        return (self.red, self.green, self.blue, self.alpha)


def _bucket(value: float) -> Optional[int]:
    index = round_half_up(value)
    if 0 <= index < BUCKETS:
        return index
    return None


def histogram(surface: Surface, diagnostics: Diagnostics = SILENT) -> HistogramResult:
    result = HistogramResult()
    width, height = surface.width, surface.height

    for x in range(width):
        diagnostics.report_progress("Histogram", x, width)
        for y in range(height):
            color = surface.get_color(x, y)
            if color is None:
                continue
            buckets = (
                _bucket(color.r),
                _bucket(color.g),
                _bucket(color.b),
                _bucket(color.a * 255),
            )
            if None in buckets:
                diagnostics.report_warning("Histogram", f"Out of range color {color} at row {y} column {x}.")
                continue
            for channel, index in zip(result.channels(), buckets):
                channel[index] += 1

    return result


def sum_histogram(hist: HistogramResult, diagnostics: Diagnostics = SILENT) -> HistogramResult:
    """Return the cumulative histogram, summed independently per channel."""

    summed = HistogramResult()
    running = [0, 0, 0, 0]
    total = len(hist.red)

    for index in range(total):
        diagnostics.report_progress("SumHistogram", index, total)
        for channel, (source, target) in enumerate(zip(hist.channels(), summed.channels())):
            running[channel] += source[index]
            target[index] = running[channel]

    return summed


def equalize(src: Surface, dst: Surface, diagnostics: Diagnostics = SILENT) -> None:
    width, height = src.width, src.height
    area = float(width * height)
    if not area:
        return

    summed = sum_histogram(histogram(src, diagnostics), diagnostics)
    coefficient = 255.0 / area

    for x in range(width):
        diagnostics.report_progress("Equalize", x, width)
        for y in range(height):
            color = src.get_color(x, y)
            if color is None:
                diagnostics.report_missing("Equalize", x, y)
                continue
            buckets = (_bucket(color.r), _bucket(color.g), _bucket(color.b))
            if None in buckets:
                diagnostics.report_missing("Equalize", x, y)
                continue
            red, green, blue = buckets
            dst.set_color(
                x,
                y,
                Color(
                    round_half_up(coefficient * summed.red[red]),
                    round_half_up(coefficient * summed.green[green]),
                    round_half_up(coefficient * summed.blue[blue]),
                    color.a,
                ),
            )
