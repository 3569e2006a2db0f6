"""Named convolution masks used by :func:`~surface_filters.engine.convolution.mask_filter`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

Weights = Tuple[Tuple[float, ...], ...]


@dataclass(frozen=True)
class Mask:
    weights: Weights
    factor: float = 1.0
    bias: float = 0.0

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]], factor: float = 1.0, bias: float = 0.0) -> "Mask":
        weights = tuple(tuple(row) for row in rows)
        if not weights or not weights[0] or any(len(row) != len(weights[0]) for row in weights):
            raise ValueError("Mask rows must be non-empty and of equal length")
        return cls(weights, factor, bias)

    @property
    def size(self) -> Tuple[int, int]:
        return len(self.weights), len(self.weights[0])


MASKS: Dict[str, Mask] = {
    "blur1": Mask.from_rows(
        [
            [0.0, 0.2, 0.0],
            [0.2, 0.2, 0.2],
            [0.0, 0.2, 0.0],
        ],
    ),
    "blur2": Mask.from_rows(
        [
            [0, 0, 1, 0, 0],
            [0, 1, 1, 1, 0],
            [1, 1, 1, 1, 1],
            [0, 1, 1, 1, 0],
            [0, 0, 1, 0, 0],
        ],
        factor=1.0 / 13.0,
    ),
    "motionBlur": Mask.from_rows(
        [
            [1, 0, 0, 0, 0],
            [0, 1, 0, 0, 0],
            [0, 0, 1, 0, 0],
            [0, 0, 0, 1, 0],
            [0, 0, 0, 0, 1],
        ],
        factor=1.0 / 7.0,
    ),
    "findHorizontalEdges": Mask.from_rows(
        [
            [0, 0, 0, 0, 0],
            [0, 0, 0, 0, 0],
            [-1, -1, 2, 0, 0],
            [0, 0, 0, 0, 0],
            [0, 0, 0, 0, 0],
        ],
    ),
    "findVerticalEdges": Mask.from_rows(
        [
            [0, 0, -1, 0, 0],
            [0, 0, -1, 0, 0],
            [0, 0, 4, 0, 0],
            [0, 0, -1, 0, 0],
            [0, 0, -1, 0, 0],
        ],
    ),
    "find45DegreeEdges": Mask.from_rows(
        [
            [-1, 0, 0, 0, 0],
            [0, -2, 0, 0, 0],
            [0, 0, 6, 0, 0],
            [0, 0, 0, -2, 0],
            [0, 0, 0, 0, -1],
        ],
    ),
    "findAllEdges": Mask.from_rows(
        [
            [-1, -1, -1],
            [-1, 8, -1],
            [-1, -1, -1],
        ],
    ),
    "sharpen1": Mask.from_rows(
        [
            [-1, -1, -1],
            [-1, 9, -1],
            [-1, -1, -1],
        ],
    ),
    "sharpen2": Mask.from_rows(
        [
            [-1, -1, -1, -1, -1],
            [-1, 2, 2, 2, -1],
            [-1, 2, 8, 2, -1],
            [-1, 2, 2, 2, -1],
            [-1, -1, -1, -1, -1],
        ],
        factor=1.0 / 8.0,
    ),
    "edges": Mask.from_rows(
        [
            [1, 1, 1],
            [1, -7, 1],
            [1, 1, 1],
        ],
    ),
    "emboss1": Mask.from_rows(
        [
            [-1, -1, 0],
            [-1, 0, 1],
            [0, 1, 1],
        ],
        bias=128.0,
    ),
    "emboss2": Mask.from_rows(
        [
            [-1, -1, -1, -1, 0],
            [-1, -1, -1, 0, 1],
            [-1, -1, 0, 1, 1],
            [-1, 0, 1, 1, 1],
            [0, 1, 1, 1, 1],
        ],
        bias=128.0,
    ),
    "mean": Mask.from_rows(
        [
            [1, 1, 1],
            [1, 1, 1],
            [1, 1, 1],
        ],
        factor=1.0 / 9.0,
    ),
}


def get_mask(name: str) -> Mask:
    try:
        return MASKS[name]
    except KeyError:
        raise ValueError(f"Unknown mask: {name!r}") from None
