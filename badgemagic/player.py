"""The badge's run-time state: what it plays, its modes and its tasks."""

from __future__ import annotations

import struct
from collections.abc import Callable
from enum import IntEnum

from . import data
from .animation import animate, flash, marquee
from .bitmap import BitmapList
from .button import ButtonScanner, Key
from .config import BadgeConfig
from .debug import get_logger
from .eeprom import Eeprom
from .font import GLYPH_WIDTH, glyph
from .leddrv import BRIGHTNESS_LEVELS, LED_COLS, LED_ROWS

ANI_BASE_SPEED_T = 200_000  # us
ANI_MARQUE_SPEED_T = 100_000  # us
ANI_FLASH_SPEED_T = 500_000  # us
SCAN_BOOTLD_BTN_SPEED_T = 200_000  # us
BLE_ANIMATION_SPEED_T = 500_000  # us
MAX_SPEED_LEVEL = 15
FIRST_BITMAP_WIDTH = LED_COLS * 4

TASK_NEXT_STEP = "next_step"
TASK_MARQUEE = "marquee"
TASK_FLASH = "flash"
TASK_SCAN_BOOTLOADER_BUTTON = "scan_bootloader_button"
TASK_BLE_ANIMATION = "ble_animation"

_NORMAL_TASKS = (TASK_MARQUEE, TASK_FLASH, TASK_NEXT_STEP)
_MASK16 = 0xFFFF
_FB_LAYOUT = struct.Struct(f"<{LED_COLS}H")

_log = get_logger("player")


class Mode(IntEnum):
    BOOT = 0
    NORMAL = 1
    DOWNLOAD = 2
    POWER_OFF = 3


def speed_period_us(speed_level: int) -> int:
    """Period between animation steps, in microseconds, for a speed level."""
    if not 0 <= speed_level <= MAX_SPEED_LEVEL:
        raise ValueError(f"speed level out of range: {speed_level}")
    return ANI_BASE_SPEED_T - speed_level * ANI_BASE_SPEED_T // 8


class Badge:
    """Frame buffer, bitmap ring, mode and periodic tasks of a running badge.

    Hardware actions are reported through the optional callables
    ``on_power_off``, ``on_reset`` and ``on_advertise`` (given True or False).
    """

    def __init__(self, config: BadgeConfig) -> None:
        self.config = config
        self.fb: list[int] = [0] * LED_COLS
        self.bitmaps = BitmapList(FIRST_BITMAP_WIDTH)
        self.mode = Mode.NORMAL
        self.play_sequentially = True
        self.streaming = False
        self.marquee_step = 0
        self.flash_step = 0
        self.eeprom: Eeprom | None = None
        self.on_power_off: Callable[[], None] | None = None
        self.on_reset: Callable[[], None] | None = None
        self.on_advertise: Callable[[bool], None] | None = None
        self.tasks: set[str] = {*_NORMAL_TASKS, TASK_SCAN_BOOTLOADER_BUTTON}

        self.buttons = ButtonScanner()
        self.buttons.on_press(Key.KEY1, self.change_mode)
        self.buttons.on_press(Key.KEY2, self.transition)
        self.buttons.on_long_press(Key.KEY1, self.change_brightness)

    # Bitmaps

    def load_bitmaps(self, eeprom: Eeprom) -> int:
        """Replace the current bitmap with those stored in flash; return how many."""
        self.eeprom = eeprom
        loaded = data.load_bitmaps(eeprom)
        if not loaded:
            return 0
        previous = self.bitmaps.current
        for bm in loaded:
            self.bitmaps.append(bm)
        self.bitmaps.go_next()
        self.bitmaps.drop(previous)
        return len(loaded)

    def reload(self, eeprom: Eeprom) -> int:
        """Forget every bitmap but the current one, then load from flash."""
        self.bitmaps.clear_others()
        return self.load_bitmaps(eeprom)

    def transition(self) -> None:
        """Step to the next bitmap, toggling sequential play at the head."""
        if self.play_sequentially:
            self.play_sequentially = False
            self.bitmaps.go_head()
            return
        self.bitmaps.go_next()
        if self.bitmaps.current is self.bitmaps.head:
            self.play_sequentially = True

    # Periodic tasks

    def next_step(self) -> int:
        """Draw one animation step; return the delay to the next, in us."""
        bm = self.bitmaps.current
        if animate(bm, self.fb) == 0 and self.play_sequentially:
            self.bitmaps.go_next()
        if bm.is_flash:
            flash(self.fb, self.flash_step)
        if bm.is_marquee:
            marquee(self.fb, self.marquee_step)
        return speed_period_us(data.speed_of(bm.modes))

    def marquee_tick(self) -> None:
        self.marquee_step += 1
        if self.bitmaps.current.is_marquee:
            marquee(self.fb, self.marquee_step)

    def flash_tick(self) -> None:
        bm = self.bitmaps.current
        self.flash_step += 1
        if bm.is_flash:
            flash(self.fb, self.flash_step)
        # Flashing may have wiped the border just drawn; draw it again.
        if bm.is_marquee:
            marquee(self.fb, self.marquee_step)

    # Buttons and modes

    def change_brightness(self) -> None:
        level = self.config.led_brightness + 1
        self.config.led_brightness = level if level < BRIGHTNESS_LEVELS else 0

    def change_mode(self) -> None:
        self.mode = Mode((self.mode + 1) % len(Mode))
        if self.mode is Mode.NORMAL:
            self._setup_normal()
        elif self.mode is Mode.DOWNLOAD:
            self._setup_download()
        elif self.mode is Mode.POWER_OFF and self.on_power_off:
            self.on_power_off()

    def _advertise(self, enable: bool) -> None:
        if self.on_advertise:
            self.on_advertise(enable)

    def _setup_download(self) -> None:
        if self.config.ble_always_on:
            # Downloads happen over the always-on link; skip this mode.
            self.change_mode()
            return
        self.buttons.on_press(Key.KEY2, None)
        self._advertise(True)
        self._start_ble_animation()

    def _setup_normal(self) -> None:
        self.buttons.on_press(Key.KEY2, self.transition)
        if self.eeprom is not None:
            self.reload(self.eeprom)
        else:
            self.bitmaps.clear_others()
        self._start_normal_animation()

    def _start_ble_animation(self) -> None:
        self.tasks -= set(_NORMAL_TASKS)
        self.fb[:] = [0] * LED_COLS
        self.tasks.add(TASK_BLE_ANIMATION)

    def _start_normal_animation(self) -> None:
        self.tasks |= set(_NORMAL_TASKS)
        self.tasks.discard(TASK_BLE_ANIMATION)

    def _stop_all_animation(self) -> None:
        self.tasks -= {*_NORMAL_TASKS, TASK_BLE_ANIMATION}
        self.fb[:] = [0] * LED_COLS

    def handle_after_rx(self, eeprom: Eeprom) -> None:
        """React to a newly stored image: reset, or go back to normal play."""
        if self.config.reset_rx:
            if self.on_reset:
                self.on_reset()
            return
        self.eeprom = eeprom
        self._setup_normal()

    # Streaming

    def set_streaming(self, params: bytes) -> None:
        """0 enters streaming mode, 1 leaves it; other values do nothing."""
        if not params:
            raise ValueError("streaming setting needs one byte")
        if params[0] == 0x00:
            self._stop_all_animation()
            self.streaming = True
        elif params[0] == 0x01:
            if self.config.ble_always_on:
                self._start_normal_animation()
            else:
                self._start_ble_animation()
            self.streaming = False

    def stream_bitmap(self, params: bytes) -> None:
        """Copy raw bytes over the start of the frame buffer (16-bit LE words)."""
        if not self.streaming:
            raise RuntimeError("streaming is not enabled")
        n = min(LED_COLS, len(params))
        raw = bytearray(_FB_LAYOUT.pack(*(c & _MASK16 for c in self.fb)))
        raw[:n] = bytes(params[:n])
        self.fb[:] = _FB_LAYOUT.unpack(raw)

    # Text and status drawing

    def putchar(self, char: str | int, col: int, row: int) -> None:
        """Draw one 5x7 character with its left edge at ``col``, top at ``row``."""
        if col < 0 or not 0 <= row < 16:
            raise ValueError(f"position out of range: ({col}, {row})")
        mask = 0x7F << row
        for offset, bits in enumerate(glyph(char)):
            x = col + offset
            if x >= LED_COLS:
                break
            self.fb[x] = ((self.fb[x] & ~mask) | (bits << row)) & _MASK16

    def puts(self, text: str, col: int, row: int) -> None:
        """Draw ``text`` left to right, stopping at a NUL character."""
        for char in text:
            if char == "\0":
                break
            self.putchar(char, col, row)
            col += GLYPH_WIDTH

    def battery_status(self, percent: int, col: int, row: int) -> None:
        """Stretch the battery icon at ``col`` by one column per 10 percent."""
        if percent < 0:
            raise ValueError("battery level unavailable")
        if not 0 <= col < LED_COLS or not 0 <= row < LED_ROWS:
            raise ValueError(f"position out of range: ({col}, {row})")
        for x in range(col + 1, min(col + percent // 10 + 1, LED_COLS)):
            self.fb[x] = self.fb[col]