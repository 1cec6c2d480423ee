"""Bitmaps shown on the badge and the ring of bitmaps being played."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

MAX_WIDTH = 0xFFFF


@dataclass(eq=False)
class Bitmap:
    """One column-major bitmap; each column is a 16-bit word, bit 0 at the top."""

    buf: list[int] = field(default_factory=list)
    modes: int = 0
    is_flash: bool = False
    is_marquee: bool = False
    brightness: int = 0
    timeout: int = 0  # zero means no timeout
    anim_step: int = 0  # zero restarts the animation

    @property
    def width(self) -> int:
        return len(self.buf)

    @classmethod
    def blank(cls, width: int) -> Bitmap:
        """Return an all-dark bitmap ``width`` columns wide."""
        if not 0 <= width <= MAX_WIDTH:
            raise ValueError(f"bitmap width out of range: {width}")
        return cls(buf=[0] * width)


class BitmapList:
    """A circular list of bitmaps with a head, a tail and a current entry."""

    def __init__(self, first_width: int) -> None:
        first = Bitmap.blank(first_width)
        self._items: list[Bitmap] = [first]  # index 0 is always the head
        self._tail = first
        self._current = first

    @property
    def head(self) -> Bitmap:
        return self._items[0]

    @property
    def tail(self) -> Bitmap:
        return self._tail

    @property
    def current(self) -> Bitmap:
        return self._current

    def __iter__(self) -> Iterator[Bitmap]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def _index(self, bm: Bitmap) -> int:
        for i, item in enumerate(self._items):
            if item is bm:
                return i
        raise ValueError("bitmap is not in the list")

    def next_of(self, bm: Bitmap) -> Bitmap:
        return self._items[(self._index(bm) + 1) % len(self._items)]

    def prev_of(self, bm: Bitmap) -> Bitmap:
        return self._items[self._index(bm) - 1]

    def insert(self, at: Bitmap, bm: Bitmap) -> Bitmap:
        """Insert ``bm`` right after ``at`` and return it."""
        self._items.insert(self._index(at) + 1, bm)
        return bm

    def append(self, bm: Bitmap) -> Bitmap:
        """Insert ``bm`` after the tail and make it the new tail."""
        self.insert(self._tail, bm)
        self._tail = bm
        return bm

    def drop(self, bm: Bitmap) -> Bitmap:
        """Remove ``bm`` and return the entry that followed it."""
        if len(self._items) == 1:
            raise ValueError("cannot drop the only bitmap")
        nxt = self.next_of(bm)
        prev = self.prev_of(bm)
        del self._items[self._index(bm)]
        if bm is self._tail:
            self._tail = prev
        if bm is self._current:
            self._current = nxt
        return nxt

    def _go(self, bm: Bitmap) -> Bitmap:
        self._current = bm
        bm.anim_step = 0
        return bm

    def go_next(self) -> Bitmap:
        return self._go(self.next_of(self._current))

    def go_prev(self) -> Bitmap:
        return self._go(self.prev_of(self._current))

    def go_head(self) -> Bitmap:
        return self._go(self.head)

    def clear_others(self) -> None:
        """Drop every bitmap but the current one."""
        keep = self._current
        self._items = [keep]
        self._tail = keep