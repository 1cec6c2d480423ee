"""Debounced scanning of the badge's two push buttons."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import IntEnum

DEBOUNCE_HIGH_THRES = 200  # 0-255
DEBOUNCE_LOW_THRES = 55  # 0-255
LONGPRESS_THRES = 25  # scans
BUTTON_SCAN_FREQ = 50  # Hz
_FILTER_STEP = 0x3F

Handler = Callable[[], None]


class Key(IntEnum):
    KEY1 = 0
    KEY2 = 1


@dataclass
class _KeyState:
    level: int = 0
    pressed: bool = False
    hold: int = 0
    long_fired: bool = False
    on_press: Handler | None = None
    on_long_press: Handler | None = None


class ButtonScanner:
    """Filters raw button samples and fires press and long-press handlers.

    ``scan`` is meant to be called ``BUTTON_SCAN_FREQ`` times a second.
    A press shorter than ``LONGPRESS_THRES`` scans fires the press handler on
    release; holding longer fires the long-press handler once.
    """

    def __init__(self) -> None:
        self._keys = {key: _KeyState() for key in Key}

    def on_press(self, key: Key | int, handler: Handler | None) -> None:
        self._keys[Key(key)].on_press = handler

    def on_long_press(self, key: Key | int, handler: Handler | None) -> None:
        self._keys[Key(key)].on_long_press = handler

    @staticmethod
    def _debounce(state: _KeyState, pressed: bool) -> bool:
        # RC filter
        state.level -= state.level >> 2
        if pressed:
            state.level += _FILTER_STEP
        # Schmitt trigger
        if state.level > DEBOUNCE_HIGH_THRES and not state.pressed:
            state.pressed = True
        if state.level < DEBOUNCE_LOW_THRES and state.pressed:
            state.pressed = False
        return state.pressed

    def scan(self, key: Key | int, pressed: bool) -> bool:
        """Feed one raw sample of ``key``; return its debounced state."""
        state = self._keys[Key(key)]
        if self._debounce(state, pressed):
            state.hold += 1
            if state.hold >= LONGPRESS_THRES and not state.long_fired:
                state.long_fired = True
                if state.on_long_press:
                    state.on_long_press()
            return True

        if 0 < state.hold < LONGPRESS_THRES and state.on_press:
            state.on_press()
        state.long_fired = False
        state.hold = 0
        return False

    def scan_all(self, states: Iterable[bool]) -> tuple[bool, ...]:
        """Feed one raw sample per key, in key order."""
        return tuple(
            self.scan(key, pressed) for key, pressed in zip(Key, states, strict=True)
        )