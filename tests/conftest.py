from typing import Iterable, Optional, Sequence, Set, Tuple

import pytest

from surface_filters.config import SETTINGS
from surface_filters.engine import Color, MemorySurface
from surface_filters.infrastructure.cache import CACHE


class HoleySurface(MemorySurface):
    """Memory surface that reports some in-bounds pixels as missing."""

    def __init__(self, width: int, height: int, holes: Iterable[Tuple[int, int]]) -> None:
        super().__init__(width, height)
        self.holes: Set[Tuple[int, int]] = set(holes)

    def get_color(self, x: int, y: int) -> Optional[Color]:
        if (x, y) in self.holes:
            return None
        return super().get_color(x, y)


def build_surface(rows: Sequence[Sequence[Color]]) -> MemorySurface:
    surface = MemorySurface(len(rows[0]), len(rows))
    for y, row in enumerate(rows):
        for x, color in enumerate(row):
            surface.set_color(x, y, color)
    return surface


@pytest.fixture
def make_surface():
    return build_surface


@pytest.fixture
def make_holey_surface():
    def factory(rows, holes):
        surface = HoleySurface(len(rows[0]), len(rows), holes)
        for y, row in enumerate(rows):
            for x, color in enumerate(row):
                surface.set_color(x, y, color)
        return surface

    return factory


@pytest.fixture(autouse=True)
def inline_tasks(monkeypatch):
    monkeypatch.setattr(SETTINGS, "task_workers", 0)
    CACHE.clear()
    yield
    CACHE.clear()
