"""Frame-buffer animations that play a bitmap on the LED matrix.

Each animation draws one step of a bitmap into a frame buffer of
``LED_COLS`` column words, advances the bitmap's ``anim_step`` and returns
the position within the animation cycle; zero means the cycle is complete.
"""

from __future__ import annotations

from collections.abc import Callable, MutableSequence
from enum import IntEnum

from .bitmap import Bitmap
from .leddrv import LED_COLS, LED_ROWS

ANIMATION_STEPS = 5
FIXED_STEPS = LED_COLS
MARQUEE_TEMPLATE = 0b000100010001

_MASK16 = 0xFFFF


class AnimationMode(IntEnum):
    LEFT = 0
    RIGHT = 1
    UP = 2
    DOWN = 3
    FIXED = 4
    ANIMATION = 5
    SNOWFLAKE = 6
    PICTURE = 7
    LASER = 8


FrameBuffer = MutableSequence[int]


def mod(a: int, b: int) -> int:
    """Remainder of ``a / b`` taken towards zero, then made non-negative."""
    if b == 0:
        raise ZeroDivisionError("modulo by zero")
    r = abs(a) % abs(b)
    if a < 0:
        r = -r
    return r + b if r < 0 else r


def fb_fill(fb: FrameBuffer, value: int) -> None:
    """Set every column of the frame buffer to ``value``."""
    fb[:] = [value & _MASK16] * LED_COLS


def _frames(bm: Bitmap) -> int:
    """Number of screen-wide frames the bitmap spans, rounded up."""
    return -(-bm.width // LED_COLS)


def _signed_shift(reg: int, n: int) -> int:
    """Shift right for non-negative ``n``, left for negative ``n``."""
    return reg >> n if n >= 0 else reg << -n


def _column(bm: Bitmap, index: int) -> int:
    return bm.buf[index] if 0 <= index < bm.width else 0


def _padded(cols: list[int]) -> list[int]:
    return [c & _MASK16 for c in cols] + [0] * (LED_COLS - len(cols))


def scroll_x(bm: Bitmap, fb: FrameBuffer, direction: int) -> int:
    """Scroll horizontally: leftwards when ``direction`` is false, else rightwards."""
    total_steps = bm.width + LED_COLS
    x = mod(bm.anim_step, total_steps) - LED_COLS
    bm.anim_step += -1 if direction else 1
    fb[:] = [_column(bm, i + x) for i in range(LED_COLS)]
    return mod(bm.anim_step, total_steps)


def scroll_left(bm: Bitmap, fb: FrameBuffer) -> int:
    return scroll_x(bm, fb, 0)


def scroll_right(bm: Bitmap, fb: FrameBuffer) -> int:
    return scroll_x(bm, fb, 1)


def shift_y(bm: Bitmap, fb: FrameBuffer, y: int, frame: int) -> None:
    """Draw ``frame`` shifted up by ``y`` rows (down when ``y`` is negative)."""
    start = frame * LED_COLS
    cols = bm.buf[start:start + min(LED_COLS, bm.width)]
    fb[:] = _padded([_signed_shift(c, y) for c in cols])


def _vertical_total(bm: Bitmap) -> int:
    return LED_ROWS * 3 * _frames(bm)


def scroll_y(bm: Bitmap, fb: FrameBuffer) -> None:
    """Draw the current step of the in-still-out vertical scroll."""
    frame_steps = LED_ROWS * 3
    total_steps = _vertical_total(bm)
    frame = mod(bm.anim_step, total_steps) // frame_steps
    y = mod(bm.anim_step, frame_steps)

    if y < LED_ROWS:
        shift_y(bm, fb, y - LED_ROWS, frame)
    elif y < LED_ROWS * 2:
        shift_y(bm, fb, 0, frame)
    else:
        shift_y(bm, fb, y - LED_ROWS * 2, frame)


def scroll_up(bm: Bitmap, fb: FrameBuffer) -> int:
    scroll_y(bm, fb)
    bm.anim_step += 1
    return mod(bm.anim_step, _vertical_total(bm))


def scroll_down(bm: Bitmap, fb: FrameBuffer) -> int:
    scroll_y(bm, fb)
    bm.anim_step -= 1
    return mod(bm.anim_step, _vertical_total(bm))


def _still(bm: Bitmap, fb: FrameBuffer, frame: int) -> None:
    start = frame * LED_COLS
    fb[:] = _padded(bm.buf[start:start + LED_COLS])


def _laser_in(bm: Bitmap, fb: FrameBuffer, step: int, frame: int) -> None:
    c = mod(step, LED_COLS)
    base = frame * LED_COLS
    beam = _column(bm, base + c)
    fb[:] = _padded([_column(bm, base + i) for i in range(c)] + [beam] * (LED_COLS - c))


def _laser_out(bm: Bitmap, fb: FrameBuffer, step: int, frame: int) -> None:
    c = mod(step, LED_COLS)
    base = frame * LED_COLS
    beam = _column(bm, base + c)
    fb[:] = _padded([beam] * c + [_column(bm, base + i) for i in range(c, LED_COLS)])


def laser(bm: Bitmap, fb: FrameBuffer) -> int:
    frame_steps = LED_COLS * 3
    total_steps = frame_steps * _frames(bm)
    frame = mod(bm.anim_step, total_steps) // frame_steps
    c = mod(bm.anim_step, frame_steps)
    bm.anim_step += 1

    if c < LED_COLS:
        _laser_in(bm, fb, c - LED_COLS, frame)
    elif c < LED_COLS * 2:
        _still(bm, fb, frame)
    else:
        _laser_out(bm, fb, c - LED_COLS * 2, frame)

    return mod(bm.anim_step, total_steps)


def _dilate(word: int, lo: int, hi: int) -> int:
    """Spread bits ``lo``..``hi`` of a 16-bit word one row apart."""
    ret = word & ((1 << lo) - 1)
    j = lo
    for i in range(lo, hi):
        ret |= ((word >> i) & 1) << j
        j += 2
    for i in range(max(lo, hi), 16):
        ret |= ((word >> i) & 1) << j
        j += 1
    return ret


def _snowflake_in(bm: Bitmap, fb: FrameBuffer, step: int, frame: int) -> None:
    y = mod(step, LED_ROWS * 2) - LED_ROWS
    start = frame * LED_COLS
    cols = bm.buf[start:start + LED_COLS]
    if y < 0:
        drawn = [_signed_shift(_dilate(w, 0, LED_ROWS), LED_ROWS - y) for w in cols]
    else:
        drawn = [_signed_shift(_dilate(w, 0, LED_ROWS - y), LED_ROWS - y) for w in cols]
    fb[:] = _padded(drawn)


def _snowflake_out(bm: Bitmap, fb: FrameBuffer, step: int, frame: int) -> None:
    y = mod(step, LED_ROWS * 2) - LED_ROWS
    start = frame * LED_COLS
    cols = bm.buf[start:start + LED_COLS]
    if y <= 0:
        drawn = [_signed_shift(_dilate(w, 0, LED_ROWS), y) for w in cols]
    else:
        drawn = [_dilate(w, y, LED_ROWS) for w in cols]
    fb[:] = _padded(drawn)


def snowflake(bm: Bitmap, fb: FrameBuffer) -> int:
    frame_steps = LED_ROWS * 6
    total_steps = frame_steps * _frames(bm)
    frame = mod(bm.anim_step, total_steps) // frame_steps
    c = mod(bm.anim_step, frame_steps)
    bm.anim_step += 1

    if c < LED_ROWS * 2:
        _snowflake_in(bm, fb, c - LED_ROWS * 2, frame)
    elif c <= LED_ROWS * 4:
        _still(bm, fb, frame)
    else:
        _snowflake_out(bm, fb, -(c - LED_ROWS * 4), frame)

    return mod(bm.anim_step, total_steps)


def _paged(bm: Bitmap, fb: FrameBuffer, frame_steps: int) -> int:
    total_steps = frame_steps * _frames(bm)
    frame = mod(bm.anim_step, total_steps) // frame_steps
    bm.anim_step += 1
    _still(bm, fb, frame)
    return mod(bm.anim_step, total_steps)


def animation(bm: Bitmap, fb: FrameBuffer) -> int:
    """Flip through the bitmap's frames quickly."""
    return _paged(bm, fb, ANIMATION_STEPS)


def fixed(bm: Bitmap, fb: FrameBuffer) -> int:
    """Show each frame still for a while."""
    return _paged(bm, fb, FIXED_STEPS)


def _picture_in(bm: Bitmap, fb: FrameBuffer, step: int, frame: int) -> None:
    hc = LED_COLS // 2
    span = mod(step - 1, LED_COLS)
    if span > hc:
        _still(bm, fb, frame)
        return

    base = frame * LED_COLS
    for i in range(span + 1):
        fb[hc + i - 1] = _column(bm, hc + i - 1 + base) & _MASK16
        fb[hc - i] = _column(bm, hc - i + base) & _MASK16

    i = span + 1
    if i >= hc:
        return
    fb[hc + i - 1] = _MASK16
    fb[hc - i] = _MASK16


def _picture_out(fb: FrameBuffer, step: int) -> None:
    hc = LED_COLS // 2
    if step > hc:
        return
    for i in range(step + 1):
        fb[hc + i - 1] = 0
        fb[hc - i] = 0
    i = step + 1
    if i >= hc:
        return
    fb[hc + i - 1] = _MASK16
    fb[hc - i] = _MASK16


def picture(bm: Bitmap, fb: FrameBuffer) -> int:
    """Open each frame from the centre outwards, then close to black."""
    last_steps = LED_COLS // 2
    frame_steps = LED_COLS
    frames = _frames(bm) + 1
    total_steps = frame_steps * frames - last_steps
    frame = mod(bm.anim_step, frame_steps * frames) // frame_steps
    bm.anim_step += 1

    if frame == frames - 1:
        _picture_out(fb, mod(bm.anim_step, LED_COLS))
        # Closing takes only half a screen width of steps.
        if mod(bm.anim_step, LED_COLS) >= last_steps:
            bm.anim_step = 0
            return 0
        return mod(bm.anim_step, total_steps)

    _picture_in(bm, fb, bm.anim_step, frame)
    return mod(bm.anim_step, total_steps)


def marquee(fb: FrameBuffer, step: int) -> None:
    """Draw a running dotted border over the frame buffer."""
    tpl = MARQUEE_TEMPLATE
    bottom = LED_ROWS - 1
    edges = (1 << bottom) | 1
    for i in range(LED_COLS - 1):
        value = fb[i] & ~edges
        value |= 1 if tpl & (1 << mod(step + i, 4)) else 0
        value |= (1 if tpl & (1 << mod(-step + i - 2, 4)) else 0) << bottom
        fb[i] = value & _MASK16

    fb[0] = (tpl << mod(step, 4)) & _MASK16
    fb[LED_COLS - 1] = tpl >> mod(step + 3, 4)


def flash(fb: FrameBuffer, step: int) -> None:
    """Blank the frame buffer on every even step."""
    if step % 2 == 0:
        fb_fill(fb, 0)


_ANIMATIONS: dict[AnimationMode, Callable[[Bitmap, FrameBuffer], int]] = {
    AnimationMode.LEFT: scroll_left,
    AnimationMode.RIGHT: scroll_right,
    AnimationMode.UP: scroll_up,
    AnimationMode.DOWN: scroll_down,
    AnimationMode.FIXED: fixed,
    AnimationMode.ANIMATION: animation,
    AnimationMode.SNOWFLAKE: snowflake,
    AnimationMode.PICTURE: picture,
    AnimationMode.LASER: laser,
}


def animate(bm: Bitmap, fb: FrameBuffer) -> int:
    """Run one step of the animation selected by the low nibble of ``bm.modes``."""
    code = bm.modes & 0x0F
    try:
        mode = AnimationMode(code)
    except ValueError:
        raise ValueError(f"unknown animation mode {code}") from None
    return _ANIMATIONS[mode](bm, fb)