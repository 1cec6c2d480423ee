"""The legacy bitmap image stored at the start of data flash."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .bitmap import Bitmap
from .eeprom import Eeprom
from .leddrv import LED_ROWS

MAGIC = b"wang\x00"
BITMAP_SLOTS = 8
LEGACY_TRANSFER_WIDTH = 16
LEGACY_HEADER_SIZE = 64
SIZES_OFFSET = 16
CHUNK_BYTES = LED_ROWS
COLUMNS_PER_CHUNK = 8

_HEADER = struct.Struct(">6sBB8s8H6s6s4s16s")


def speed_of(mode: int) -> int:
    """Speed level held in the high nibble of a mode byte."""
    return mode >> 4


def animation_of(mode: int) -> int:
    """Animation number held in the low nibble of a mode byte."""
    return mode & 0x0F


@dataclass(frozen=True)
class LegacyHeader:
    magic: bytes
    flash: int
    marquee: int
    modes: tuple[int, ...]
    sizes: tuple[int, ...]  # in 8-column chunks
    timestamp: bytes

    @classmethod
    def parse(cls, raw: bytes) -> LegacyHeader:
        if len(raw) < LEGACY_HEADER_SIZE:
            raise ValueError(f"legacy header needs {LEGACY_HEADER_SIZE} bytes, got {len(raw)}")
        fields = _HEADER.unpack_from(bytes(raw))
        magic, flash, marquee, modes = fields[:4]
        sizes = fields[4:4 + BITMAP_SLOTS]
        timestamp = fields[5 + BITMAP_SLOTS]
        return cls(magic, flash, marquee, tuple(modes), tuple(sizes), timestamp)

    @property
    def is_valid(self) -> bool:
        return self.magic[:len(MAGIC)] == MAGIC

    def bitmap_offset(self, n: int) -> int:
        """Byte offset of bitmap ``n`` within the image."""
        _check_slot(n)
        return LEGACY_HEADER_SIZE + sum(self.sizes[:n]) * LED_ROWS


def _check_slot(n: int) -> None:
    if not 0 <= n < BITMAP_SLOTS:
        raise ValueError(f"bitmap slot out of range: {n}")


def chunk_to_columns(chunk: bytes) -> list[int]:
    """Turn 11-byte row-major chunks into column words, 8 columns per chunk."""
    columns = []
    for start in range(0, len(chunk) - CHUNK_BYTES + 1, CHUNK_BYTES):
        rows = chunk[start:start + CHUNK_BYTES]
        for i in range(COLUMNS_PER_CHUNK):
            col = 0
            for j, row in enumerate(rows):
                col |= ((row >> (7 - i)) & 1) << j
            columns.append(col)
    return columns


def chunk_to_bitmap(chunk: bytes) -> Bitmap:
    bm = Bitmap.blank(len(chunk) * COLUMNS_PER_CHUNK // CHUNK_BYTES)
    columns = chunk_to_columns(chunk)
    bm.buf[:len(columns)] = columns
    return bm


def save_image(eeprom: Eeprom, data: bytes) -> None:
    """Erase the start of data flash and store a whole image there."""
    eeprom.erase(0, len(data))
    eeprom.write(0, data)


def _read_header(eeprom: Eeprom) -> LegacyHeader:
    return LegacyHeader.parse(eeprom.read(0, LEGACY_HEADER_SIZE))


def load_bitmap(eeprom: Eeprom, n: int) -> Bitmap | None:
    """Read bitmap ``n`` from flash; None if there is no image or it is empty."""
    _check_slot(n)
    header = _read_header(eeprom)
    if not header.is_valid:
        return None
    size = header.sizes[n] * LED_ROWS
    if size == 0:
        return None
    bm = chunk_to_bitmap(eeprom.read(header.bitmap_offset(n), size))
    bm.is_flash = bool(header.flash & (1 << n))
    bm.is_marquee = bool(header.marquee & (1 << n))
    bm.modes = header.modes[n]
    return bm


def load_bitmaps(eeprom: Eeprom) -> list[Bitmap]:
    """Read every non-empty bitmap of the stored image, in slot order."""
    if not _read_header(eeprom).is_valid:
        return []
    loaded = (load_bitmap(eeprom, n) for n in range(BITMAP_SLOTS))
    return [bm for bm in loaded if bm is not None]