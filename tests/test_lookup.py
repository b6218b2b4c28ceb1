"""Tests for bryt.lookup — the runtime query API over the packaged table."""

import numpy as np
import pytest

from bryt.candidates import brightness_levels
from bryt.core_types import pack_rgb
from bryt.lookup import (
    BrightnessInfo,
    get_brightness_info,
    get_color,
    get_colors,
    load_default_table,
    to_rgb,
)


class TestGetBrightnessInfo:
    @pytest.mark.parametrize("value", ["foo", 123.45, True, None, [1]])
    def test_non_integer(self, value):
        with pytest.raises(TypeError, match="Expected brightness to be an integer"):
            get_brightness_info(value)

    @pytest.mark.parametrize("value", [-10, 256, 1000])
    def test_out_of_range(self, value):
        with pytest.raises(ValueError, match="Expected brightness to be between 0 and 255"):
            get_brightness_info(value)

    def test_mid_level(self):
        info = get_brightness_info(128)
        assert isinstance(info, BrightnessInfo)
        assert info.brightness == 128
        assert info.count == 51
        assert info.get_color(10) == 16728193
        assert len(info.get_colors()) == 51

    def test_info_validates_index(self):
        info = get_brightness_info(128)
        with pytest.raises(TypeError, match="Expected index to be an integer"):
            info.get_color("foo")
        with pytest.raises(ValueError, match="Expected index to be a positive integer"):
            info.get_color(-123)
        with pytest.raises(IndexError, match="less than 51"):
            info.get_color(51)


class TestGetColor:
    def test_known_values(self):
        assert get_color(0, 0) == 0
        assert get_color(128, 10) == 16728193
        assert get_color(255, 0) == 16777215

    def test_numpy_integers(self):
        assert get_color(np.uint8(128), np.int64(10)) == 16728193

    def test_brightness_checked_first(self):
        with pytest.raises(TypeError, match="brightness"):
            get_color("foo", "bar")

    def test_past_end(self):
        with pytest.raises(IndexError, match="Expected index to be less than 51"):
            get_color(128, 51)


class TestGetColors:
    def test_counts(self):
        assert len(get_colors(200)) == 40
        assert get_colors(0) == (0,)
        assert get_colors(255) == (16777215,)

    def test_every_level_non_empty(self):
        assert all(len(get_colors(b)) > 0 for b in range(256))

    def test_errors(self):
        with pytest.raises(TypeError):
            get_colors(1.0)
        with pytest.raises(ValueError):
            get_colors(-1)


class TestToRgb:
    @pytest.mark.parametrize("value", ["foo", 12.5, False])
    def test_non_integer(self, value):
        with pytest.raises(TypeError, match="Expected color to be an integer"):
            to_rgb(value)

    def test_negative(self):
        with pytest.raises(ValueError, match="Expected color to be a positive integer"):
            to_rgb(-1)

    def test_known_values(self):
        assert to_rgb(123) == [0, 0, 123]
        assert to_rgb(64326) == [0, 251, 70]
        assert to_rgb(1468399) == [22, 103, 239]

    def test_high_bits_ignored(self):
        assert to_rgb((1 << 24) + 5) == [0, 0, 5]

    def test_inverse_of_packing(self):
        for packed in list(range(0, 1 << 24, 9973)) + [0xFFFFFF]:
            assert pack_rgb(*to_rgb(packed)) == packed


class TestPackagedTable:
    def test_colours_sit_at_their_own_level(self):
        table = load_default_table()
        for b in range(256):
            levels = brightness_levels(np.array(table[b], dtype=np.uint32))
            assert np.all(levels == b)

    def test_no_colour_repeats(self):
        table = load_default_table()
        flat = [c for entry in table.entries for c in entry]
        assert len(flat) == len(set(flat))

    def test_loaded_once(self):
        assert load_default_table() is load_default_table()


class TestCustomTable:
    def test_table_argument(self, tiny_table):
        assert get_colors(9, table=tiny_table) == (pack_rgb(9, 9, 9), pack_rgb(0, 0, 255))
        assert get_color(10, 0, table=tiny_table) == pack_rgb(10, 10, 10)
        info = get_brightness_info(10, table=tiny_table)
        assert info.count == 1
        with pytest.raises(IndexError, match="less than 1"):
            info.get_color(1)
