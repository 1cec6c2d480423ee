import struct

import pytest

from badgemagic.data import LEGACY_HEADER_SIZE, LEGACY_TRANSFER_WIDTH
from badgemagic.leddrv import LED_ROWS
from badgemagic.legacyctrl import LegacyReceiver, LegacyRxError, RxErrorCode


def _image(sizes, fill=0xAB):
    header = (b"wang\x00\x00" + bytes(10) + struct.pack(">8H", *sizes) + bytes(32))
    return header + bytes([fill]) * (LED_ROWS * sum(sizes))


def _packets(image):
    w = LEGACY_TRANSFER_WIDTH
    padded = image + bytes(-len(image) % w)
    return [padded[i:i + w] for i in range(0, len(padded), w)]


def _receiver():
    done = []
    return done, LegacyReceiver(done.append)


def test_full_transfer_delivers_image():
    done, rx = _receiver()
    image = _image([1, 0, 0, 0, 0, 0, 0, 0])
    results = [rx.feed(p) for p in _packets(image)]
    assert results[-1] is True
    assert not any(results[:-1])
    assert done == [image]
    assert len(done[0]) == LEGACY_HEADER_SIZE + LED_ROWS
    assert rx.packets_received == 0


def test_wrong_width_rejected():
    _, rx = _receiver()
    with pytest.raises(LegacyRxError) as err:
        rx.feed(b"wang\x00")
    assert err.value.code is RxErrorCode.WIDTH


def test_first_packet_must_be_header():
    _, rx = _receiver()
    with pytest.raises(LegacyRxError) as err:
        rx.feed(bytes(LEGACY_TRANSFER_WIDTH))
    assert err.value.code is RxErrorCode.HEADER
    assert rx.packets_received == 0


def test_header_restarts_transfer():
    done, rx = _receiver()
    stale = _packets(_image([3, 0, 0, 0, 0, 0, 0, 0], fill=0x11))
    for p in stale[:3]:
        rx.feed(p)
    image = _image([2, 0, 0, 0, 0, 0, 0, 0], fill=0x22)
    for p in _packets(image):
        rx.feed(p)
    assert done == [image]


def test_two_images_in_a_row():
    done, rx = _receiver()
    first = _image([1, 0, 0, 0, 0, 0, 0, 0], fill=0x01)
    second = _image([0, 2, 0, 0, 0, 0, 0, 0], fill=0x02)
    for p in _packets(first) + _packets(second):
        rx.feed(p)
    assert done == [first, second]