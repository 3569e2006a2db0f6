import pytest

from surface_filters.engine import (
    CLEAR,
    Color,
    Diagnostics,
    MemorySurface,
    bilinear_interpolate,
    bilinear_interpolate_pixel,
    rotate,
    scale,
    translate,
)

BLACK = Color(0, 0, 0, 1.0)
WHITE = Color(255, 255, 255, 1.0)


def _grid(make_surface, width, height):
    return make_surface([[Color(x * 10, y * 10, 50, 1.0) for x in range(width)] for y in range(height)])


def _rgb(color):
    return (color.r, color.g, color.b)


def test_integer_coordinates_return_the_exact_pixel(make_surface):
    surface = make_surface([[Color(10, 20, 30, 0.5), Color(40, 50, 60, 1.0)]])

    assert bilinear_interpolate_pixel(surface, 1, 0) == Color(40, 50, 60, 1.0)
    assert bilinear_interpolate_pixel(surface, 0, 0) == Color(10, 20, 30, 0.5)


def test_half_way_between_black_and_white_is_mid_grey(make_surface):
    surface = make_surface([[BLACK, WHITE]])

    assert bilinear_interpolate_pixel(surface, 0.5, 0) == Color(128, 128, 128, 1.0)


@pytest.mark.parametrize("x, y", [(-0.6, 0), (0, -0.6), (2.6, 0), (0, 1.6)])
def test_coordinates_outside_the_surface_are_absent(make_surface, x, y):
    surface = make_surface([[BLACK, WHITE]])

    assert bilinear_interpolate_pixel(surface, x, y) is None


def test_missing_neighbor_falls_back_to_nearest_pixel(make_holey_surface):
    near = Color(12, 34, 56, 1.0)
    surface = make_holey_surface([[near, WHITE, WHITE]], holes=[(1, 0)])

    assert bilinear_interpolate_pixel(surface, 0.4, 0) == near


def test_bilinear_interpolate_keeps_integer_grid(make_surface):
    src = _grid(make_surface, 3, 2)
    dst = MemorySurface(3, 2)

    bilinear_interpolate(src, dst)

    for x in range(3):
        for y in range(2):
            assert dst.get_color(x, y) == src.get_color(x, y)


def test_rotate_by_zero_is_identity(make_surface):
    src = _grid(make_surface, 3, 3)
    dst = MemorySurface(3, 3)

    rotate(src, dst, 1, 1, 0)

    for x in range(3):
        for y in range(3):
            assert dst.get_color(x, y) == src.get_color(x, y)


def test_rotate_quarter_turn_about_center(make_surface):
    src = _grid(make_surface, 3, 3)
    dst = MemorySurface(3, 3)

    rotate(src, dst, 1, 1, 90)

    assert _rgb(dst.get_color(0, 0)) == _rgb(src.get_color(2, 0))
    assert _rgb(dst.get_color(2, 2)) == _rgb(src.get_color(0, 2))
    assert _rgb(dst.get_color(1, 1)) == _rgb(src.get_color(1, 1))
    assert dst.get_color(0, 0).a == pytest.approx(1.0)


def test_rotate_fills_unmapped_pixels(make_surface):
    warnings = []
    src = _grid(make_surface, 3, 3)
    dst = MemorySurface(3, 3)
    fill = Color(1, 2, 3, 1.0)

    rotate(src, dst, 0, 0, 180, fill, Diagnostics(warn=lambda name, msg: warnings.append(name)))

    assert _rgb(dst.get_color(0, 0)) == _rgb(src.get_color(0, 0))
    assert dst.get_color(2, 2) == fill
    assert warnings and set(warnings) == {"Rotate"}


def test_translate_shifts_and_fills(make_surface):
    src = make_surface([[BLACK, Color(5, 5, 5, 1.0)], [Color(9, 9, 9, 1.0), BLACK]])
    dst = MemorySurface(2, 2)

    translate(src, dst, 1, 0, WHITE)

    assert dst.get_color(0, 0) == WHITE
    assert dst.get_color(0, 1) == WHITE
    assert dst.get_color(1, 0) == BLACK
    assert dst.get_color(1, 1) == Color(9, 9, 9, 1.0)


def test_scale_by_one_is_identity(make_surface):
    src = _grid(make_surface, 3, 2)
    dst = MemorySurface(3, 2)

    scale(src, dst, 1, 1)

    for x in range(3):
        for y in range(2):
            assert dst.get_color(x, y) == src.get_color(x, y)


def test_scale_up_interpolates_and_leaves_uncovered_pixels(make_surface):
    src = make_surface([[BLACK, WHITE], [BLACK, WHITE]])
    dst = MemorySurface(4, 4)

    scale(src, dst, 2, 2, WHITE)

    assert dst.get_color(0, 0) == BLACK
    assert dst.get_color(1, 0) == Color(128, 128, 128, 1.0)
    assert dst.get_color(2, 0) == WHITE
    assert dst.get_color(3, 0) == CLEAR


def test_scale_samples_only_inside_destination(make_surface):
    warnings, progress = [], []
    src = make_surface([[Color(7, 7, 7, 1.0)]])
    dst = MemorySurface(1, 1)
    diagnostics = Diagnostics(
        progress=lambda name, pct: progress.append(pct),
        warn=lambda name, msg: warnings.append(msg),
    )

    scale(src, dst, 400, 400, WHITE, diagnostics)

    assert dst.get_color(0, 0) == Color(7, 7, 7, 1.0)
    assert warnings == []
    assert progress == [0]


def test_scale_handles_huge_and_rejects_non_finite_factors(make_surface):
    src = make_surface([[BLACK, WHITE]])
    dst = MemorySurface(2, 1)

    scale(src, dst, 1e308, 1e308)
    assert dst.get_color(1, 0) == BLACK

    for factors in [(float("inf"), 1), (1, float("nan"))]:
        with pytest.raises(ValueError):
            scale(src, dst, *factors)
