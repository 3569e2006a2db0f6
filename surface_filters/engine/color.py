from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


def round_half_up(value: float) -> int:
    """Round ``value`` to the nearest integer, with .5 going up.

    Python's built-in ``round`` uses banker's rounding, which would shift
    half-way channel values and histogram buckets downwards.
    """

    return int(math.floor(value + 0.5))


def is_kinda_equal(value1: float, value2: float, tolerance: float) -> bool:
    return value2 - tolerance <= value1 <= value2 + tolerance


def _to_normalized_channel(value: float) -> float:
    if value > 255:
        value = 255
    return value / 255.0


def _to_255_channel(value: float) -> int:
    value = max(0.0, min(1.0, value))
    return round_half_up(value * 255)


class BlendMode(Enum):
    CROSS = 1
    ADDITIVE = 2
    ADDITIVE_ALPHA = 3
    MULTIPLIED = 4


_RGB_PATTERN = re.compile(r"^rgba?\((?P<body>[^)]*)\)$")


def format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Color:
    """An RGBA value in either 255 mode or normalized mode.

    ``r``, ``g`` and ``b`` range over 0..255 unless ``normalized`` is set, in
    which case they range over 0.0..1.0. ``a`` is always in 0.0..1.0. Colors
    are immutable; every operation returns a new instance.
    """

    r: float = 0
    g: float = 0
    b: float = 0
    a: float = 1.0
    transparent: bool = False
    normalized: bool = False

    # -- conversions -------------------------------------------------------

    def to_normalized(self) -> "Color":
        if self.normalized:
            return replace(self)
        return replace(
            self,
            r=_to_normalized_channel(self.r),
            g=_to_normalized_channel(self.g),
            b=_to_normalized_channel(self.b),
            normalized=True,
        )

    def to_255(self) -> "Color":
        if not self.normalized:
            return replace(self)
        return replace(
            self,
            r=_to_255_channel(self.r),
            g=_to_255_channel(self.g),
            b=_to_255_channel(self.b),
            normalized=False,
        )

    def clamp(self) -> "Color":
        top = 1.0 if self.normalized else 255
        return replace(
            self,
            r=min(max(self.r, 0), top),
            g=min(max(self.g, 0), top),
            b=min(max(self.b, 0), top),
            a=min(max(self.a, 0.0), 1.0),
        )

    # -- per-pixel operations ---------------------------------------------

    def blend(self, source: "Color", mode: BlendMode) -> "Color":
        """Combine ``source`` over this color, treating ``self`` as destination."""

        src = source.to_normalized()
        dst = self.to_normalized()
        src_a = src.a

        if mode is BlendMode.CROSS:
            channels = (
                dst.r * (1.0 - src_a) + src.r * src_a,
                dst.g * (1.0 - src_a) + src.g * src_a,
                dst.b * (1.0 - src_a) + src.b * src_a,
                dst.a * (1.0 - src_a) + src.a * src_a,
            )
        elif mode is BlendMode.ADDITIVE:
            channels = (dst.r + src.r, dst.g + src.g, dst.b + src.b, dst.a + src.a)
        elif mode is BlendMode.ADDITIVE_ALPHA:
            channels = (
                dst.r + src.r * src_a,
                dst.g + src.g * src_a,
                dst.b + src.b * src_a,
                dst.a + src.a * src_a,
            )
        elif mode is BlendMode.MULTIPLIED:
            channels = (dst.r * src.r, dst.g * src.g, dst.b * src.b, dst.a * src.a)
        else:
            raise ValueError(f"Unknown blend mode: {mode!r}")

        r, g, b, a = (min(channel, 1.0) for channel in channels)
        return replace(
            self,
            r=_to_255_channel(r),
            g=_to_255_channel(g),
            b=_to_255_channel(b),
            a=a,
            normalized=False,
        )

    def grayscale(self) -> "Color":
        luminance = self.r * 0.299 + self.g * 0.587 + self.b * 0.114
        if not self.normalized:
            luminance = round_half_up(luminance)
        return replace(self, r=luminance, g=luminance, b=luminance)

    def invert(self) -> "Color":
        # Only meaningful in 255 mode.
        return replace(self, r=255 - self.r, g=255 - self.g, b=255 - self.b)

    def is_equal(self, other: "Color", tolerance: float = 0) -> bool:
        return (
            is_kinda_equal(self.r, other.r, tolerance)
            and is_kinda_equal(self.g, other.g, tolerance)
            and is_kinda_equal(self.b, other.b, tolerance)
            and is_kinda_equal(self.a, other.a, tolerance)
            and self.transparent == other.transparent
        )

    # -- unclamped arithmetic ---------------------------------------------

    def assign_number(self, number: float) -> "Color":
        return replace(self, r=number, g=number, b=number, a=number)

    def add_number(self, number: float) -> "Color":
        return replace(self, r=self.r + number, g=self.g + number, b=self.b + number, a=self.a + number)

    def subtract_number(self, number: float) -> "Color":
        return replace(self, r=self.r - number, g=self.g - number, b=self.b - number, a=self.a - number)

    def multiply_number(self, number: float) -> "Color":
        return replace(self, r=self.r * number, g=self.g * number, b=self.b * number, a=self.a * number)

    def divide_number(self, number: float) -> "Color":
        return replace(self, r=self.r / number, g=self.g / number, b=self.b / number, a=self.a / number)

    def add_color(self, other: "Color") -> "Color":
        return replace(self, r=self.r + other.r, g=self.g + other.g, b=self.b + other.b, a=self.a + other.a)

    def subtract_color(self, other: "Color") -> "Color":
        return replace(self, r=self.r - other.r, g=self.g - other.g, b=self.b - other.b, a=self.a - other.a)

    # -- strings ----------------------------------------------------------

    def __str__(self) -> str:
        if self.transparent:
            return "transparent"
        return f"rgb({format_number(self.r)}, {format_number(self.g)}, {format_number(self.b)})"

    def to_string_with_alpha(self) -> str:
        return (
            f"rgba({format_number(self.r)}, {format_number(self.g)}, "
            f"{format_number(self.b)}, {format_number(self.a)})"
        )

    @classmethod
    def from_string(cls, text: str) -> "Color":
        """Parse ``rgb(r, g, b)``, ``rgba(r, g, b, a)`` or ``transparent``."""

        value = (text or "").strip().lower()
        if value == "transparent":
            return cls(0, 0, 0, 0.0, transparent=True)

        match = _RGB_PATTERN.match(value.replace(" ", ""))
        if not match:
            raise ValueError(f"Invalid color string: {text!r}")

        parts = match.group("body").split(",")
        if len(parts) not in (3, 4):
            raise ValueError(f"Invalid color string: {text!r}")

        r, g, b = (int(float(part)) for part in parts[:3])
        a = float(parts[3]) if len(parts) == 4 else 1.0
        return cls(r, g, b, a)


WHITE = Color(255, 255, 255, 1.0)
BLACK = Color(0, 0, 0, 1.0)
CLEAR = Color(0, 0, 0, 0.0)


def parse_color(text: Optional[str], default: Color) -> Color:
    """Parse an optional color string, falling back to ``default`` when empty."""

    if not text:
        return default
    return Color.from_string(text)
