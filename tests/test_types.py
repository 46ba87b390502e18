"""Tests for atom value types."""

import pytest

from eda_sexp.exceptions import FormatError
from eda_sexp.sexp import deserialize
from eda_sexp.types import Color, UInt


class TestUInt:
    """Tests for the unsigned integer type."""

    def test_behaves_like_int(self):
        """UInt is an int."""
        value = UInt(5)
        assert isinstance(value, int)
        assert value + 1 == 6

    def test_zero_default(self):
        """UInt() is zero."""
        assert UInt() == 0

    def test_negative_rejected(self):
        """Negative values cannot be constructed."""
        with pytest.raises(ValueError, match="negative"):
            UInt(-1)

    def test_repr(self):
        """repr names the type."""
        assert repr(UInt(3)) == "UInt(3)"


class TestColor:
    """Tests for the RGBA color type."""

    def test_name(self):
        """Colors are named #aarrggbb."""
        assert Color(255, 128, 0).name() == "#ffff8000"
        assert Color(0, 0, 0, 0).name() == "#00000000"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("#f80", Color(255, 136, 0)),
            ("#FF8000", Color(255, 128, 0)),
            ("#80ff8000", Color(255, 128, 0, 128)),
            ("red", Color(255, 0, 0)),
            ("Green", Color(0, 128, 0)),
            ("transparent", Color(0, 0, 0, 0)),
        ],
    )
    def test_from_string(self, text, expected):
        """Hex notations and color names are parsed."""
        assert Color.from_string(text) == expected

    @pytest.mark.parametrize(
        "text", ["", "#", "#12", "#12345", "ff0000", "#gggggg", "chartreuse", "#fff\n", "#ff0000\n"]
    )
    def test_from_string_invalid(self, text):
        """Unknown notations are rejected."""
        with pytest.raises(ValueError):
            Color.from_string(text)

    def test_invalid(self):
        """The "no color" value is not valid."""
        assert not Color.invalid().is_valid
        assert Color(1, 2, 3).is_valid

    def test_out_of_range_channel_is_invalid(self):
        """Channels outside 0..255 make a color invalid."""
        assert not Color(256, 0, 0).is_valid

    def test_round_trip_name(self):
        """from_string(name()) returns the same color."""
        color = Color(18, 52, 86, 120)
        assert Color.from_string(color.name()) == color

    def test_trailing_newline_rejected_by_codec(self):
        """A quoted color with a trailing newline is not a color."""
        with pytest.raises(FormatError, match="Not a valid color"):
            deserialize("#fff\n", Color)
