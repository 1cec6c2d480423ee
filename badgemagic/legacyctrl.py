"""Receiver for bitmap images sent in 16-byte packets by the legacy app."""

from __future__ import annotations

import struct
from collections.abc import Callable
from enum import IntEnum

from .data import BITMAP_SLOTS, LEGACY_HEADER_SIZE, LEGACY_TRANSFER_WIDTH, MAGIC, SIZES_OFFSET
from .debug import get_logger, hexdump
from .leddrv import LED_ROWS

_log = get_logger("legacyctrl")
_SIZES = struct.Struct(f">{BITMAP_SLOTS}H")


class RxErrorCode(IntEnum):
    OK = 0
    WIDTH = 1
    HEADER = 2
    MEM = 3
    COPY = 4
    UNKNOWN = 5


class LegacyRxError(Exception):
    """A packet was refused; ``code`` tells why."""

    def __init__(self, code: RxErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code


class LegacyReceiver:
    """Collects packets into a whole image and hands it to ``on_complete``.

    A packet starting with the image magic always begins a new image.
    """

    def __init__(self, on_complete: Callable[[bytes], None]) -> None:
        self._on_complete = on_complete
        self.reset()

    def reset(self) -> None:
        self._data = bytearray()
        self._count = 0
        self._data_len = 0

    @property
    def packets_received(self) -> int:
        return self._count

    def feed(self, packet: bytes) -> bool:
        """Take one packet; return True when it completed an image."""
        _log.debug("> %s: feed()", __name__)
        packet = bytes(packet)
        if len(packet) != LEGACY_TRANSFER_WIDTH:
            raise LegacyRxError(RxErrorCode.WIDTH, "transfer width is not matched")
        _log.debug("val[%d]: %s", len(packet), hexdump(packet))

        is_header = packet[:len(MAGIC)] == MAGIC
        if self._count == 0 and not is_header:
            raise LegacyRxError(RxErrorCode.HEADER, "not a header")
        if is_header:
            self.reset()

        self._data += packet

        if self._count == 1:
            total = sum(_SIZES.unpack_from(self._data, SIZES_OFFSET))
            self._data_len = LEGACY_HEADER_SIZE + LED_ROWS * total

        if self._count > 2 and (self._count + 1) * LEGACY_TRANSFER_WIDTH >= self._data_len:
            image = bytes(self._data[:self._data_len])
            self.reset()
            _log.debug("all bitmaps received")
            self._on_complete(image)
            return True

        self._count += 1
        return False