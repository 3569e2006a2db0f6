from __future__ import annotations

from typing import List, Optional, Protocol

from PIL import Image

from .color import CLEAR, Color, round_half_up


class Surface(Protocol):
    """The read/write pixel grid every filter operates on.

    Reads outside the grid return ``None`` and writes outside the grid, or
    writes of ``None``, are silently ignored. Several filters rely on this as
    their boundary guard.
    """

    width: int
    height: int

    def get_color(self, x: int, y: int) -> Optional[Color]:
        ...

    def set_color(self, x: int, y: int, color: Optional[Color]) -> None:
        ...

    def fill(self, color: Color) -> None:
        ...


class MemorySurface:
    """Reference in-memory surface, rows of :class:`Color` values."""

    def __init__(self, width: int, height: int, color: Color = CLEAR) -> None:
        self.width = width
        self.height = height
        self._rows: List[List[Optional[Color]]] = [[color] * width for _ in range(height)]

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_color(self, x: int, y: int) -> Optional[Color]:
        if not self._in_bounds(x, y):
            return None
        return self._rows[y][x]

    def set_color(self, x: int, y: int, color: Optional[Color]) -> None:
        if color is None or not self._in_bounds(x, y):
            return
        self._rows[y][x] = color

    def fill(self, color: Color) -> None:
        for y in range(self.height):
            for x in range(self.width):
                self.set_color(x, y, color)

    @classmethod
    def from_image(cls, img: Image.Image) -> "MemorySurface":
        src = img.convert("RGBA")
        width, height = src.size
        surface = cls(width, height)
        pixels = src.load()
        for y in range(height):
            for x in range(width):
                r, g, b, a = pixels[x, y]
                surface.set_color(x, y, Color(r, g, b, a / 255.0))
        return surface

    def to_image(self) -> Image.Image:
        out = Image.new("RGBA", (self.width, self.height))
        dst = out.load()
        for y in range(self.height):
            for x in range(self.width):
                color = self.get_color(x, y)
                if color is not None:
                    dst[x, y] = _rgba_tuple(color)
        return out


class PillowSurface:
    """Surface backed directly by a Pillow ``RGBA`` image.

    Writes go straight into the image's pixel access object, so channel
    values are clamped and rounded to bytes on the way in.
    """

    def __init__(self, image: Image.Image) -> None:
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        self.image = image
        self._pixels = image.load()

    @property
    def width(self) -> int:
        return self.image.size[0]

    @property
    def height(self) -> int:
        return self.image.size[1]

    def get_color(self, x: int, y: int) -> Optional[Color]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return None
        r, g, b, a = self._pixels[x, y]
        return Color(r, g, b, a / 255.0)

    def set_color(self, x: int, y: int, color: Optional[Color]) -> None:
        if color is None or not (0 <= x < self.width and 0 <= y < self.height):
            return
        self._pixels[x, y] = _rgba_tuple(color)

    def fill(self, color: Color) -> None:
        self.image.paste(_rgba_tuple(color), (0, 0, self.width, self.height))
        self._pixels = self.image.load()


def _rgba_tuple(color: Color) -> tuple:
    rgb = color.to_255().clamp()
    alpha = 0 if color.transparent else round_half_up(min(max(color.a, 0.0), 1.0) * 255)
    return (round_half_up(rgb.r), round_half_up(rgb.g), round_half_up(rgb.b), alpha)
