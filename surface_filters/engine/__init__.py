"""Pixel filter engine operating on any object that satisfies :class:`Surface`."""

from .color import BLACK, CLEAR, WHITE, BlendMode, Color, parse_color, round_half_up
from .convolution import detect_edges, mask_filter
from .diagnostics import SILENT, Diagnostics, logging_diagnostics
from .geometry import bilinear_interpolate, bilinear_interpolate_pixel, rotate, scale, translate
from .histogram import HistogramResult, equalize, histogram, sum_histogram
from .masks import MASKS, Mask, get_mask
from .point import assign_channel_value, blend, copy, erosion, grayscale, invert, threshold
from .surface import MemorySurface, PillowSurface, Surface

__all__ = [
    "BLACK",
    "CLEAR",
    "WHITE",
    "BlendMode",
    "Color",
    "parse_color",
    "round_half_up",
    "detect_edges",
    "mask_filter",
    "SILENT",
    "Diagnostics",
    "logging_diagnostics",
    "bilinear_interpolate",
    "bilinear_interpolate_pixel",
    "rotate",
    "scale",
    "translate",
    "HistogramResult",
    "equalize",
    "histogram",
    "sum_histogram",
    "MASKS",
    "Mask",
    "get_mask",
    "assign_channel_value",
    "blend",
    "copy",
    "erosion",
    "grayscale",
    "invert",
    "threshold",
    "MemorySurface",
    "PillowSurface",
    "Surface",
]
