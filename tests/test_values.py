"""Tests for computed-value parsing."""

import pytest

from page_theme.values import (
    color_to_hex,
    contrast_ratio,
    is_transparent,
    is_zero_length,
    join_font_stack,
    mix_colors,
    normalize_color,
    parse_color,
    parse_length,
    perceived_luminance,
    split_font_stack,
)


class TestParseColor:
    def test_comma_rgb(self):
        assert parse_color("rgb(102, 126, 234)") == (102, 126, 234, 1.0)

    def test_rgba_with_alpha(self):
        assert parse_color("rgba(0, 0, 0, 0.5)") == (0, 0, 0, 0.5)

    def test_space_syntax_with_slash_alpha(self):
        assert parse_color("rgb(17 24 39 / 50%)") == (17, 24, 39, 0.5)

    def test_hex_forms(self):
        assert parse_color("#fff") == (255, 255, 255, 1.0)
        assert parse_color("#667EEA") == (102, 126, 234, 1.0)
        assert parse_color("#00000000") == (0, 0, 0, 0.0)

    @pytest.mark.parametrize("value", ["", None, "transparent", "currentcolor", "oklch(0.6 0.1 250)", "linear-gradient(red, blue)"])
    def test_unparseable(self, value):
        assert parse_color(value) is None


class TestTransparency:
    def test_zero_alpha_is_transparent(self):
        assert is_transparent("rgba(0, 0, 0, 0)")
        assert is_transparent("transparent")
        assert is_transparent("")

    def test_opaque_and_unknown_are_not(self):
        assert not is_transparent("rgb(0, 0, 0)")
        assert not is_transparent("oklch(0.6 0.1 250)")


def test_hex_normalization():
    assert normalize_color("rgb(51, 51, 51)") == "#333333"
    assert normalize_color("rgba(255, 0, 0, 0.5)") == "#ff000080"
    assert normalize_color("oklch(0.6 0.1 250)") is None
    assert color_to_hex((1, 2, 3, 1.0)) == "#010203"


def test_perceived_luminance_extremes():
    assert perceived_luminance((255, 255, 255)) == pytest.approx(1.0)
    assert perceived_luminance((0, 0, 0)) == 0.0
    assert perceived_luminance((17, 24, 39)) == pytest.approx(0.0926, abs=1e-3)


def test_contrast_ratio_black_on_white():
    assert contrast_ratio((0, 0, 0), (255, 255, 255)) == pytest.approx(21.0)


def test_mix_colors():
    assert mix_colors((255, 255, 255), (51, 51, 51), 0.15) == (224, 224, 224)
    assert mix_colors((10, 20, 30), (200, 200, 200), 0.0) == (10, 20, 30)


class TestLengths:
    def test_parse_length_units(self):
        assert parse_length("8px") == 8.0
        assert parse_length("0.5rem") == 8.0
        assert parse_length("50%") is None
        assert parse_length("auto") is None

    def test_zero_shorthand(self):
        assert is_zero_length("0px")
        assert is_zero_length("0px 0px 0px 0px")
        assert not is_zero_length("0px 0px 8px 8px")
        assert not is_zero_length("50%")
        assert is_zero_length("0%")
        assert is_zero_length("0% 0px")
        assert not is_zero_length("0% 10%")


class TestFontStack:
    def test_split_honors_quotes(self):
        assert split_font_stack('"Inter", "Segoe UI", sans-serif') == ["Inter", "Segoe UI", "sans-serif"]
        assert split_font_stack("'Foo, Bar', serif") == ["Foo, Bar", "serif"]
        assert split_font_stack("") == []

    def test_join_quotes_names_with_spaces(self):
        assert join_font_stack(["Inter", "Segoe UI", "sans-serif"]) == 'Inter, "Segoe UI", sans-serif'
