"""Charlieplexed LED matrix wiring: which pins drive which LEDs."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

LED_COLS = 44
LED_ROWS = 11
BRIGHTNESS_LEVELS = 4
LED_PINCOUNT = 23
STRONG_DRIVE_THRESHOLD = 5


class PinState(Enum):
    FLOATING = 0
    LOW = 1
    HIGH = 2


def gpio_pin(n: int) -> int:
    """Return the port bit mask of pin ``n`` (0-23)."""
    if not 0 <= n <= 23:
        raise ValueError(f"no GPIO pin {n}")
    return 1 << n


@dataclass(frozen=True)
class Pin:
    bank: str
    number: int

    @property
    def mask(self) -> int:
        return gpio_pin(self.number)


_PINS = (
    ("A", 15), ("B", 18), ("B", 0), ("B", 7), ("A", 12), ("A", 10),
    ("A", 11), ("B", 9), ("B", 8), ("B", 15), ("B", 14), ("B", 13),
    ("B", 12), ("B", 5), ("A", 4), ("B", 3), ("B", 4), ("B", 2),
    ("B", 1), ("B", 23), ("B", 21), ("B", 20), ("B", 19),
)
_T_INDEX = 19


def led_pins(usbc: bool = False) -> tuple[Pin, ...]:
    """Return the 23 matrix pins A..W in order; the USB-C board moves pin T."""
    pins = [Pin(bank, number) for bank, number in _PINS]
    if usbc:
        pins[_T_INDEX] = Pin("B", 6)
    return tuple(pins)


def combine_cols(col1: int, col2: int) -> int:
    """Interleave two column words: bit k of col1 goes to 2k, of col2 to 2k+1."""
    dval = 0
    for k in range(LED_ROWS + 1):
        dval |= ((col1 >> k) & 1) << (2 * k)
        dval |= ((col2 >> k) & 1) << (2 * k + 1)
    return dval


def _spread(selected: int, selected_state: PinState, on_state: PinState,
            val: int) -> tuple[PinState, ...]:
    states = []
    for i in range(LED_PINCOUNT):
        if i == selected:
            states.append(selected_state)
            continue
        states.append(on_state if val & 1 else PinState.FLOATING)
        val >>= 1
    return tuple(states)


def column_pin_states(dcol: int, col1: int, col2: int) -> tuple[PinState, ...]:
    """Pin states lighting two adjacent columns through double-column ``dcol``."""
    if not 0 <= dcol < LED_PINCOUNT:
        raise ValueError(f"double column out of range: {dcol}")
    if dcol == 0:
        # The first LEDs of the first two columns are wired swapped.
        b1, b2 = col1 & 1, col2 & 1
        col1 = (col1 & 0xFFFE) | b2
        col2 = (col2 & 0xFFFE) | b1
    return _spread(dcol, PinState.HIGH, PinState.LOW, combine_cols(col1, col2))


def row_pin_states(row: int, which_half: int, val: int) -> tuple[PinState, ...]:
    """Pin states lighting one half-row: its pin sinks, set bits source."""
    selected = row * 2 + (which_half != 0)
    if not 0 <= selected < LED_PINCOUNT:
        raise ValueError(f"row out of range: {row}")
    return _spread(selected, PinState.LOW, PinState.HIGH, val)


def strong_drive(states: Sequence[PinState]) -> bool:
    """True when more than five LEDs are lit, needing strong pin drive."""
    driven = sum(1 for s in states if s is not PinState.FLOATING)
    return driven - 1 > STRONG_DRIVE_THRESHOLD