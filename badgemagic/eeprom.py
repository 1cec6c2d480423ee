"""In-memory model of the chip's data flash (EEPROM)."""

from __future__ import annotations

EEPROM_PAGE_SIZE = 256
EEPROM_BLOCK_SIZE = 4096
EEPROM_MIN_ER_SIZE = EEPROM_PAGE_SIZE
EEPROM_MIN_WR_SIZE = 1
EEPROM_MAX_SIZE = 0x8000
ERASED_BYTE = 0xFF


class EepromError(Exception):
    """A data-flash operation touched memory outside the device."""


class Eeprom:
    """Byte-addressed data flash; erasing works in whole pages."""

    def __init__(self, size: int = EEPROM_MAX_SIZE) -> None:
        if size <= 0:
            raise ValueError(f"invalid data flash size: {size}")
        self._mem = bytearray([ERASED_BYTE]) * size

    @property
    def size(self) -> int:
        return len(self._mem)

    def __len__(self) -> int:
        return len(self._mem)

    def _check(self, offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > len(self._mem):
            raise EepromError(
                f"range {offset}+{length} outside data flash of {len(self._mem)} bytes"
            )

    def read(self, offset: int, length: int) -> bytes:
        self._check(offset, length)
        return bytes(self._mem[offset:offset + length])

    def write(self, offset: int, data: bytes) -> None:
        data = bytes(data)
        self._check(offset, len(data))
        self._mem[offset:offset + len(data)] = data

    def erase(self, offset: int, length: int) -> None:
        """Erase every page that the range touches."""
        self._check(offset, length)
        if length == 0:
            return
        start = offset - offset % EEPROM_MIN_ER_SIZE
        end = -(-(offset + length) // EEPROM_MIN_ER_SIZE) * EEPROM_MIN_ER_SIZE
        end = min(end, len(self._mem))
        self._mem[start:end] = bytes([ERASED_BYTE]) * (end - start)