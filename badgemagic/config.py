"""The badge configuration record kept near the end of data flash."""

from __future__ import annotations

import struct
from collections.abc import Callable
from dataclasses import dataclass

from .eeprom import EEPROM_MAX_SIZE, Eeprom

SPLASH_MIN_SPEED_T = 10  # ms
SPLASH_MAX_WIDTH = 48  # pixels
SPLASH_MAX_HEIGHT = 44  # pixels
DEVNAME_SIZE = 20


def row_bytes(width: int) -> int:
    """Bytes needed for one row of a 1-bit image ``width`` pixels wide."""
    return (width + 7) // 8


SPLASH_MAX_SIZE = row_bytes(SPLASH_MAX_WIDTH) * SPLASH_MAX_HEIGHT

_BODY = struct.Struct(f"<B{DEVNAME_SIZE}sBH{SPLASH_MAX_SIZE}sBBBHB")
CONFIG_SIZE = _BODY.size + 1  # trailing checksum byte
DEFAULT_OFFSET = EEPROM_MAX_SIZE - CONFIG_SIZE - 1

Checksum = Callable[[bytes], int]


class ConfigError(Exception):
    """A configuration record could not be stored or is corrupt."""


@dataclass
class BadgeConfig:
    ble_always_on: bool = False
    ble_devname: bytes = b""
    led_brightness: int = 0
    led_scan_freq: int = 2000
    splash_bm_bits: bytes = b""
    splash_bm_w: int = 0
    splash_bm_h: int = 0
    splash_bm_fh: int = 0
    splash_speed_t: int = 30  # ms; lower is faster
    reset_rx: bool = False  # reset after a bitmap is received

    @property
    def devname(self) -> str:
        return self.ble_devname.split(b"\x00", 1)[0].decode("latin-1")

    def pack(self, checksum: Checksum) -> bytes:
        """Serialise the record and append ``checksum`` of its body."""
        if len(self.ble_devname) > DEVNAME_SIZE:
            raise ConfigError(f"device name longer than {DEVNAME_SIZE} bytes")
        if len(self.splash_bm_bits) > SPLASH_MAX_SIZE:
            raise ConfigError(f"splash bitmap longer than {SPLASH_MAX_SIZE} bytes")
        try:
            body = _BODY.pack(
                int(self.ble_always_on), self.ble_devname, self.led_brightness,
                self.led_scan_freq, self.splash_bm_bits, self.splash_bm_w,
                self.splash_bm_h, self.splash_bm_fh, self.splash_speed_t,
                int(self.reset_rx),
            )
        except struct.error as exc:
            raise ConfigError(f"configuration field out of range: {exc}") from None
        return body + bytes([checksum(body) & 0xFF])

    @classmethod
    def unpack(cls, raw: bytes, checksum: Checksum) -> BadgeConfig:
        """Parse a record; its checksum over all bytes must come to zero."""
        raw = bytes(raw)
        if len(raw) != CONFIG_SIZE:
            raise ConfigError(f"configuration needs {CONFIG_SIZE} bytes, got {len(raw)}")
        result = checksum(raw)
        if result:
            raise ConfigError(f"configuration checksum mismatch: {result:02X}")
        (always_on, devname, brightness, scan_freq, bits, w, h, fh,
         speed_t, reset_rx) = _BODY.unpack_from(raw)
        return cls(bool(always_on), devname, brightness, scan_freq, bits,
                   w, h, fh, speed_t, bool(reset_rx))

    @classmethod
    def fallback(cls, splash_bits: bytes, splash_w: int, splash_h: int,
                 splash_fh: int) -> BadgeConfig:
        """The configuration used when none is stored in flash."""
        return cls(
            ble_always_on=False,
            ble_devname=b"LED Badge Magic".ljust(DEVNAME_SIZE, b"\x00"),
            led_brightness=0,
            led_scan_freq=2000,
            splash_bm_bits=bytes(splash_bits[:row_bytes(splash_w) * splash_h]),
            splash_bm_w=splash_w,
            splash_bm_h=splash_h,
            splash_bm_fh=splash_fh,
            splash_speed_t=30,
            reset_rx=False,
        )


def write_config(eeprom: Eeprom, config: BadgeConfig, checksum: Checksum,
                 offset: int = DEFAULT_OFFSET) -> None:
    if offset < 0 or offset + CONFIG_SIZE > eeprom.size:
        raise ConfigError(f"configuration does not fit at offset {offset}")
    eeprom.write(offset, config.pack(checksum))


def read_config(eeprom: Eeprom, checksum: Checksum,
                offset: int = DEFAULT_OFFSET) -> BadgeConfig:
    return BadgeConfig.unpack(eeprom.read(offset, CONFIG_SIZE), checksum)