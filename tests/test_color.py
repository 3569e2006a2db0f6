import pytest

from surface_filters.engine.color import BlendMode, Color, parse_color, round_half_up


@pytest.mark.parametrize(
    "color",
    [
        Color(0, 0, 0, 1.0),
        Color(255, 255, 255, 0.0),
        Color(17, 128, 254, 0.5),
        Color(1, 2, 3, 0.25),
    ],
)
def test_normalized_round_trip_preserves_255_channels(color):
    restored = color.to_normalized().to_255()

    assert restored.normalized is False
    assert abs(restored.r - color.r) <= 1
    assert abs(restored.g - color.g) <= 1
    assert abs(restored.b - color.b) <= 1
    assert restored.a == color.a


def test_conversions_return_new_colors_and_leave_alpha_alone():
    color = Color(51, 102, 204, 0.4)

    normalized = color.to_normalized()

    assert color.normalized is False
    assert normalized.normalized is True
    assert normalized.r == pytest.approx(0.2)
    assert normalized.a == 0.4
    assert normalized.to_normalized() == normalized
    assert color.to_255() == color


def test_clamp_is_idempotent_and_within_range():
    wild = Color(-20, 300, 128, 1.7)
    wild_normalized = Color(-0.5, 1.5, 0.5, -0.1, normalized=True)

    clamped = wild.clamp()
    clamped_normalized = wild_normalized.clamp()

    assert (clamped.r, clamped.g, clamped.b, clamped.a) == (0, 255, 128, 1.0)
    assert (clamped_normalized.r, clamped_normalized.g, clamped_normalized.b, clamped_normalized.a) == (
        0,
        1.0,
        0.5,
        0.0,
    )
    assert clamped.clamp() == clamped
    assert clamped_normalized.clamp() == clamped_normalized


def test_cross_blend_with_transparent_source_keeps_destination():
    destination = Color(10, 20, 30, 1.0)

    result = destination.blend(Color(200, 100, 50, 0.0), BlendMode.CROSS)

    assert (result.r, result.g, result.b, result.a) == (10, 20, 30, 1.0)
    assert result.normalized is False


def test_cross_blend_with_opaque_source_yields_source():
    result = Color(10, 20, 30, 0.5).blend(Color(200, 100, 50, 1.0), BlendMode.CROSS)

    assert (result.r, result.g, result.b, result.a) == (200, 100, 50, 1.0)


def test_additive_blend_saturates_every_channel():
    result = Color(200, 100, 0, 0.5).blend(Color(100, 100, 100, 0.75), BlendMode.ADDITIVE)

    assert (result.r, result.g, result.b, result.a) == (255, 200, 100, 1.0)


def test_additive_alpha_blend_weights_source_by_its_alpha():
    result = Color(0, 0, 0, 0.25).blend(Color(255, 0, 0, 0.5), BlendMode.ADDITIVE_ALPHA)

    assert (result.r, result.g, result.b) == (128, 0, 0)
    assert result.a == pytest.approx(0.5)


def test_multiplied_blend_multiplies_channels():
    result = Color(255, 128, 0, 1.0).blend(Color(128, 255, 255, 0.5), BlendMode.MULTIPLIED)

    assert (result.r, result.g, result.b, result.a) == (128, 128, 0, 0.5)


def test_grayscale_rounds_only_in_255_mode():
    gray = Color(255, 0, 0).grayscale()
    gray_normalized = Color(1.0, 0.0, 0.0, normalized=True).grayscale()

    assert (gray.r, gray.g, gray.b) == (76, 76, 76)
    assert gray_normalized.r == pytest.approx(0.299)


def test_invert_flips_rgb_and_keeps_alpha():
    inverted = Color(0, 100, 255, 0.3).invert()

    assert (inverted.r, inverted.g, inverted.b, inverted.a) == (255, 155, 0, 0.3)


def test_is_equal_respects_tolerance_and_transparency():
    base = Color(100, 100, 100, 1.0)

    assert base.is_equal(Color(102, 99, 100, 1.0), tolerance=2)
    assert not base.is_equal(Color(103, 100, 100, 1.0), tolerance=2)
    assert not base.is_equal(Color(100, 100, 100, 1.0, transparent=True), tolerance=5)


def test_arithmetic_is_elementwise_and_unclamped():
    color = Color(250, 20, 30, 0.5)

    assert color.add_number(10) == Color(260, 30, 40, 10.5)
    assert color.subtract_number(40) == Color(210, -20, -10, -39.5)
    assert color.multiply_number(2) == Color(500, 40, 60, 1.0)
    assert color.divide_number(2) == Color(125, 10, 15, 0.25)
    assert color.add_color(Color(10, 10, 10, 1.0)) == Color(260, 30, 40, 1.5)
    assert color.subtract_color(Color(10, 10, 10, 1.0)) == Color(240, 10, 20, -0.5)
    assert color.assign_number(0) == Color(0, 0, 0, 0)


def test_color_strings_round_trip():
    color = Color(1, 2, 3, 0.5)

    assert str(color) == "rgb(1, 2, 3)"
    assert color.to_string_with_alpha() == "rgba(1, 2, 3, 0.5)"
    assert Color.from_string(color.to_string_with_alpha()) == color
    assert Color.from_string("rgb(4,5,6)") == Color(4, 5, 6, 1.0)
    assert str(Color.from_string("transparent")) == "transparent"


@pytest.mark.parametrize("text", ["", "blue", "rgb(1,2)", "rgba(a,b,c,d)"])
def test_from_string_rejects_malformed_colors(text):
    with pytest.raises(ValueError):
        Color.from_string(text)


def test_parse_color_falls_back_to_default():
    default = Color(9, 9, 9)

    assert parse_color(None, default) is default
    assert parse_color("", default) is default
    assert parse_color("rgba(1, 1, 1, 1)", default) == Color(1, 1, 1, 1.0)


@pytest.mark.parametrize("value, expected", [(2.5, 3), (3.5, 4), (-0.5, 0), (127.49, 127)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
