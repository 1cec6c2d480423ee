import pytest

from badgemagic.font import FIRST_CHAR, GLYPH_WIDTH, LAST_CHAR, glyph


def test_space_is_blank():
    assert glyph(" ") == (0, 0, 0, 0, 0, 0)


def test_capital_a_columns():
    assert glyph("A") == (0x00, 0x7E, 0x11, 0x11, 0x11, 0x7E)


def test_digit_zero_columns():
    assert glyph("0") == (0x00, 0x3E, 0x51, 0x49, 0x45, 0x3E)


def test_int_and_str_agree():
    assert glyph(ord("z")) == glyph("z")


def test_every_glyph_fits_seven_rows():
    for code in range(FIRST_CHAR, LAST_CHAR + 1):
        cols = glyph(code)
        assert len(cols) == GLYPH_WIDTH
        assert cols[0] == 0
        assert all(0 <= c < 0x80 for c in cols)


def test_range_covers_printable_ascii():
    assert glyph(FIRST_CHAR) == glyph(" ")
    assert glyph(LAST_CHAR) == (0x00, 0x78, 0x46, 0x41, 0x46, 0x78)
    with pytest.raises(ValueError):
        glyph(LAST_CHAR + 1)
    with pytest.raises(ValueError):
        glyph(FIRST_CHAR - 1)


@pytest.mark.parametrize("bad", ["\n", "\x1f", 0x80, "é"])
def test_out_of_range_raises(bad):
    with pytest.raises(ValueError):
        glyph(bad)