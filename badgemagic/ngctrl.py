"""Commands of the newer control protocol, one command byte per packet."""

from __future__ import annotations

from collections.abc import Callable

from .config import (
    DEVNAME_SIZE,
    SPLASH_MAX_HEIGHT,
    SPLASH_MAX_SIZE,
    SPLASH_MAX_WIDTH,
    SPLASH_MIN_SPEED_T,
    BadgeConfig,
    ConfigError,
)
from .debug import get_logger
from .eeprom import EepromError
from .leddrv import BRIGHTNESS_LEVELS
from .player import Badge

STATUS_OK = 0x00
ERR_OUT_OF_RANGE = 0xFF
ERR_INVALID_VALUE = 0xFE
ERR_TOO_LARGE = 0xFD
ERR_TOO_SHORT = 0xFC

ALWAYS_ON_SAVE_FAILED = 0
ALWAYS_ON_SAVED = 1
ALWAYS_ON_UNCHANGED = 2
CMD_ALWAYS_ON_MODE = 0x09

_log = get_logger("ngctrl")


class InvalidCommand(Exception):
    """The packet names no known command."""


class NgController:
    """Runs commands against a badge and reports a status byte to the client."""

    def __init__(self, badge: Badge, notify: Callable[[bytes], None],
                 save_config: Callable[[BadgeConfig], None],
                 power_off: Callable[[], None], reset: Callable[[], None],
                 advertise: Callable[[bool], None]) -> None:
        self.badge = badge
        self._notify = notify
        self._save = save_config
        self._power_off = power_off
        self._reset = reset
        self._advertise = advertise
        cfg = badge.config
        self.default_splash = (cfg.splash_bm_bits, cfg.splash_bm_w,
                               cfg.splash_bm_h, cfg.splash_bm_fh)
        self._commands: tuple[Callable[[bytes], int], ...] = (
            self.next_packet,
            self.power_setting,
            self.streaming_setting,
            self.stream_bitmap,
            self.ble_setting,
            self.flash_splash_screen,
            self.save_config,
            self.load_fallback_config,
            self.misc,
            self.enable_always_on,
            self.disable_always_on,
        )

    @property
    def config(self) -> BadgeConfig:
        return self.badge.config

    def parse(self, packet: bytes) -> int:
        """Run the command in ``packet``, notify its status and return it."""
        packet = bytes(packet)
        if not packet or packet[0] >= len(self._commands):
            raise InvalidCommand(f"invalid command: {packet[:1].hex() or 'empty'}")
        _log.debug("executing [cmd %02x]", packet[0])
        status = self._commands[packet[0]](packet[1:]) & 0xFF
        self._notify(bytes([status]))
        return status

    def _store(self) -> bool:
        try:
            self._save(self.config)
        except (ConfigError, EepromError) as exc:
            _log.debug("saving configuration failed: %s", exc)
            return False
        return True

    def next_packet(self, params: bytes) -> int:
        return STATUS_OK

    def power_setting(self, params: bytes) -> int:
        """0 powers off, 1 sets reset-after-receive, 2 resets."""
        if not params:
            return ERR_OUT_OF_RANGE
        fn, args = params[0], params[1:]
        if fn == 0:
            self._power_off()
        elif fn == 1:
            if not args:
                return ERR_OUT_OF_RANGE
            self.config.reset_rx = bool(args[0])
        elif fn == 2:
            self._reset()
        else:
            return ERR_OUT_OF_RANGE
        return STATUS_OK

    def streaming_setting(self, params: bytes) -> int:
        if not params:
            return ERR_OUT_OF_RANGE
        self.badge.set_streaming(params)
        return STATUS_OK

    def stream_bitmap(self, params: bytes) -> int:
        try:
            self.badge.stream_bitmap(params)
        except RuntimeError:
            return ERR_OUT_OF_RANGE
        return STATUS_OK

    def ble_setting(self, params: bytes) -> int:
        """0 sets always-on advertising, 1 overwrites the device name."""
        if not params:
            return ERR_OUT_OF_RANGE
        fn, args = params[0], params[1:]
        if fn == 0:
            if not args:
                return ERR_OUT_OF_RANGE
            enabled = args[0] != 0
            self.config.ble_always_on = enabled
            self._advertise(enabled)
        elif fn == 1:
            if len(args) > DEVNAME_SIZE:
                return ERR_OUT_OF_RANGE
            current = self.config.ble_devname.ljust(DEVNAME_SIZE, b"\x00")
            self.config.ble_devname = bytes(args) + current[len(args):]
        else:
            return ERR_OUT_OF_RANGE
        return STATUS_OK

    def flash_splash_screen(self, params: bytes) -> int:
        """Set the splash bitmap: width, height, frame height, then bits."""
        if len(params) < 3:
            return ERR_TOO_SHORT
        w, h, fh = params[0], params[1], params[2]
        size = (len(params) - 3) & 0xFF
        if w > SPLASH_MAX_WIDTH:
            return ERR_OUT_OF_RANGE
        if h > SPLASH_MAX_HEIGHT:
            return ERR_INVALID_VALUE
        if size > SPLASH_MAX_SIZE:
            return ERR_TOO_LARGE
        bits = bytes(params[3:3 + size])
        self.config.splash_bm_bits = bits + self.config.splash_bm_bits[size:]
        self.config.splash_bm_w = w
        self.config.splash_bm_h = h
        self.config.splash_bm_fh = fh
        return STATUS_OK

    def save_config(self, params: bytes) -> int:
        return STATUS_OK if self._store() else ERR_OUT_OF_RANGE

    def load_fallback_config(self, params: bytes) -> int:
        self.badge.config = BadgeConfig.fallback(*self.default_splash)
        return STATUS_OK

    def misc(self, params: bytes) -> int:
        """0 sets the splash speed (16-bit LE ms), 1 sets LED brightness."""
        if not params:
            return ERR_OUT_OF_RANGE
        fn, args = params[0], params[1:]
        if fn == 0:
            if len(args) < 2:
                return ERR_TOO_SHORT
            ms = int.from_bytes(args[:2], "little")
            if ms < SPLASH_MIN_SPEED_T:
                return ERR_INVALID_VALUE
            self.config.splash_speed_t = ms
        elif fn == 1:
            if not args:
                return ERR_TOO_SHORT
            if args[0] >= BRIGHTNESS_LEVELS:
                return ERR_INVALID_VALUE
            self.config.led_brightness = args[0]
        else:
            return ERR_OUT_OF_RANGE
        return STATUS_OK

    def _set_always_on(self, enabled: bool) -> int:
        if self.config.ble_always_on == enabled:
            status = ALWAYS_ON_UNCHANGED
        else:
            self.config.ble_always_on = enabled
            status = ALWAYS_ON_SAVED if self._store() else ALWAYS_ON_SAVE_FAILED
            self._advertise(enabled)
        self._notify(bytes([status]))
        return status

    def enable_always_on(self, params: bytes) -> int:
        return self._set_always_on(True)

    def disable_always_on(self, params: bytes) -> int:
        return self._set_always_on(False)