import struct

import pytest

from badgemagic.data import (
    BITMAP_SLOTS,
    LEGACY_HEADER_SIZE,
    LegacyHeader,
    animation_of,
    chunk_to_bitmap,
    chunk_to_columns,
    load_bitmap,
    load_bitmaps,
    save_image,
    speed_of,
)
from badgemagic.eeprom import Eeprom
from badgemagic.leddrv import LED_ROWS


def _header(sizes, flash=0, marquee=0, modes=None):
    modes = modes or [0] * BITMAP_SLOTS
    return (b"wang\x00\x00" + bytes([flash, marquee]) + bytes(modes)
            + struct.pack(">8H", *sizes) + bytes(32))


def test_header_layout_size():
    raw = _header([0] * 8)
    h = LegacyHeader.parse(raw)
    assert h.is_valid
    assert h.bitmap_offset(0) == len(raw)


def test_parse_header_fields():
    modes = [0x12, 0x34, 0, 0, 0, 0, 0, 0x56]
    h = LegacyHeader.parse(_header([1, 2, 0, 0, 0, 0, 0, 3], 0x05, 0x80, modes))
    assert h.is_valid
    assert h.flash == 0x05
    assert h.marquee == 0x80
    assert h.modes == tuple(modes)
    assert h.sizes == (1, 2, 0, 0, 0, 0, 0, 3)


def test_bitmap_offset_skips_preceding_bitmaps():
    h = LegacyHeader.parse(_header([1, 2, 0, 0, 0, 0, 0, 0]))
    assert h.bitmap_offset(0) == LEGACY_HEADER_SIZE
    assert h.bitmap_offset(2) == LEGACY_HEADER_SIZE + 3 * LED_ROWS


def test_parse_rejects_short_header():
    with pytest.raises(ValueError):
        LegacyHeader.parse(bytes(10))


def test_mode_nibbles():
    assert speed_of(0x37) == 3
    assert animation_of(0x37) == 7


def test_chunk_to_columns_bit_placement():
    chunk = bytearray(LED_ROWS)
    chunk[0] = 0x80
    chunk[LED_ROWS - 1] = 0x01
    cols = chunk_to_columns(bytes(chunk))
    assert len(cols) == 8
    assert cols[0] == 1
    assert cols[7] == 1 << (LED_ROWS - 1)
    assert cols[1:7] == [0] * 6


def test_chunk_to_bitmap_width_matches_columns():
    chunk = bytes(range(2 * LED_ROWS))
    bm = chunk_to_bitmap(chunk)
    assert bm.buf == chunk_to_columns(chunk)


def test_save_and_load_round_trip():
    eeprom = Eeprom()
    body0 = bytes([0xFF] * LED_ROWS)
    body1 = bytes([0x80] * LED_ROWS)
    modes = [0x21, 0x04, 0, 0, 0, 0, 0, 0]
    image = _header([1, 1, 0, 0, 0, 0, 0, 0], flash=0b10, marquee=0b01, modes=modes) + body0 + body1
    save_image(eeprom, image)
    bm0 = load_bitmap(eeprom, 0)
    bm1 = load_bitmap(eeprom, 1)
    assert bm0.buf == chunk_to_columns(body0)
    assert bm1.buf == chunk_to_columns(body1)
    assert (bm0.is_flash, bm0.is_marquee, bm0.modes) == (False, True, 0x21)
    assert (bm1.is_flash, bm1.is_marquee, bm1.modes) == (True, False, 0x04)
    assert load_bitmap(eeprom, 2) is None
    assert [b.buf for b in load_bitmaps(eeprom)] == [bm0.buf, bm1.buf]


def test_blank_flash_has_no_bitmaps():
    eeprom = Eeprom()
    assert load_bitmaps(eeprom) == []
    assert load_bitmap(eeprom, 0) is None


def test_slot_out_of_range():
    with pytest.raises(ValueError):
        load_bitmap(Eeprom(), BITMAP_SLOTS)