from __future__ import annotations

from typing import Optional, Sequence, Union

from .color import Color, round_half_up
from .diagnostics import SILENT, Diagnostics
from .masks import Mask
from .surface import Surface

_QUICK_EDGE_MASK = (
    (-1, 0, -1),
    (0, 4, 0),
    (-1, 0, -1),
)


def mask_filter(
    src: Surface,
    dst: Surface,
    mask: Union[Mask, Sequence[Sequence[float]]],
    factor: Optional[float] = None,
    bias: Optional[float] = None,
    diagnostics: Diagnostics = SILENT,
) -> None:
    """Convolve ``src`` with ``mask`` into ``dst``.

    Neighbor coordinates wrap around the opposite edge, so every output pixel
    sees a full kernel. ``mask.weights[i][j]`` weighs the neighbor at x offset
    ``i - rows // 2`` and y offset ``j - columns // 2``. The output alpha is
    that of the last neighbor sampled. ``factor`` and ``bias`` default to the
    mask's own values.
    """

    if not isinstance(mask, Mask):
        mask = Mask.from_rows(mask)
    factor = mask.factor if factor is None else factor
    bias = mask.bias if bias is None else bias

    width, height = src.width, src.height
    extent_x, extent_y = mask.size
    half_x, half_y = extent_x // 2, extent_y // 2

    for x in range(width):
        diagnostics.report_progress("MaskFilter", x, width)
        for y in range(height):
            red = green = blue = 0.0
            alpha = 0.0

            for i in range(extent_x):
                sample_x = (x - half_x + i + width) % width
                for j in range(extent_y):
                    sample_y = (y - half_y + j + height) % height
                    color = src.get_color(sample_x, sample_y)
                    if color is None:
                        diagnostics.report_missing("MaskFilter", x, y)
                        continue
                    weight = mask.weights[i][j]
                    red += color.r * weight
                    green += color.g * weight
                    blue += color.b * weight
                    alpha = color.a

            out = Color(
                round_half_up(factor * red + bias),
                round_half_up(factor * green + bias),
                round_half_up(factor * blue + bias),
                alpha,
            )
            dst.set_color(x, y, out.clamp())


def detect_edges(src: Surface, dst: Surface, diagnostics: Diagnostics = SILENT) -> None:
    """Write edge pixels of ``src`` into ``dst``.

    Only interior pixels are visited, and a destination pixel is written only
    when the filtered luminance is brighter than the original; everything else
    in ``dst`` keeps its current value.
    """

    width, height = src.width, src.height

    for x in range(1, width - 1):
        diagnostics.report_progress("DetectEdges", x, width)
        for y in range(1, height - 1):
            center = src.get_color(x, y)
            if center is None:
                diagnostics.report_missing("DetectEdges", x, y)
                continue

            original = center.to_normalized().grayscale()
            total = Color(normalized=True).assign_number(0)
            alpha = 1.0

            for dx in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    color = src.get_color(x + dx, y + dy)
                    if color is None:
                        diagnostics.report_missing("DetectEdges", x, y)
                        continue
                    color = color.to_normalized()
                    alpha = color.a
                    total = total.add_color(color.multiply_number(_QUICK_EDGE_MASK[dx + 1][dy + 1]))

            total = total.clamp()
            if total.grayscale().r > original.r:
                edge = total.grayscale().to_255()
                dst.set_color(x, y, Color(edge.r, edge.g, edge.b, alpha))
